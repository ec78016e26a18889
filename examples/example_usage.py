"""Example: drive the policy engine without any HTTP layer.

Uses the testing settings (in-memory store), so no database is needed.
"""

import importlib
from datetime import datetime

from src.gym_membership.gym_membership.common.clock import FixedClock
from src.gym_membership.gym_membership.container import build_container
from src.gym_membership.gym_membership.core.exceptions import DomainError


def main():
    settings = importlib.import_module("config.testing")
    container = build_container(settings, clock=FixedClock(datetime(2024, 1, 10, 9, 0)))
    store = container.uow.store

    student = store.add_student(name="Ana Souza", email="ana@example.com")
    plan = container.plan_service.create(title="Gold", duration=3, price="100")

    membership = container.engine.enroll(student.student_id, plan.plan_id, "2024-01-31")
    print("enrolled:", membership.start_date, "->", membership.end_date, "price", membership.price)

    try:
        container.engine.record_checkin(student.student_id)
    except DomainError as exc:
        print("rejected:", exc.kind.value, exc.code, exc.reason)

    container.engine.activate(membership.membership_id)
    checkin = container.engine.record_checkin(student.student_id)
    print("checked in at", checkin.created_at.isoformat())


if __name__ == "__main__":
    main()
