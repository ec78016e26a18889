from __future__ import annotations

import threading
from datetime import date
from decimal import Decimal

from loguru import logger

from src.gym_membership.gym_membership.memberships.model import Membership
from src.gym_membership.gym_membership.notifications.port import (
    BackgroundNotifier,
    LoggingNotifier,
    MembershipConfirmed,
)
from src.gym_membership.gym_membership.plans.model import Plan
from src.gym_membership.gym_membership.students.model import Student

EVENT = MembershipConfirmed(
    membership=Membership(
        membership_id=5,
        student_id=1,
        plan_id=2,
        start_date=date(2024, 1, 31),
        end_date=date(2024, 4, 30),
        price=Decimal("300"),
        active=False,
    ),
    student=Student(student_id=1, name="Ana", email="ana@example.com"),
    plan=Plan(plan_id=2, title="Gold", duration=3, price=Decimal("100")),
)


def test_logging_notifier_records_handoff():
    messages = []
    sink = logger.add(messages.append, format="{message}")
    try:
        LoggingNotifier().notify(EVENT)
    finally:
        logger.remove(sink)

    assert len(messages) == 1
    assert "membership=5" in messages[0]
    assert "ana@example.com" in messages[0]


def test_background_notifier_runs_delegate_off_thread():
    seen = []

    class Delegate:
        def notify(self, event):
            seen.append((event, threading.current_thread().name))

    notifier = BackgroundNotifier(Delegate())
    notifier.notify(EVENT)
    notifier.shutdown(wait=True)

    assert seen[0][0] is EVENT
    assert seen[0][1].startswith("notify")


def test_background_notifier_logs_failures():
    messages = []
    sink = logger.add(messages.append, format="{message}", level="ERROR")

    class Broken:
        def notify(self, event):
            raise ConnectionError("queue down")

    notifier = BackgroundNotifier(Broken())
    try:
        notifier.notify(EVENT)
        notifier.shutdown(wait=True)
    finally:
        logger.remove(sink)

    assert any("dispatch failed (membership=5)" in m for m in messages)
