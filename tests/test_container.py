import importlib
from datetime import datetime

from src.gym_membership.gym_membership.common.clock import FixedClock
from src.gym_membership.gym_membership.container import build_container
from src.gym_membership.gym_membership.database.memory_store import InMemoryUnitOfWork
from src.gym_membership.gym_membership.notifications.port import LoggingNotifier


def test_testing_settings_wire_memory_store():
    settings = importlib.import_module("config.testing")
    container = build_container(settings, clock=FixedClock(datetime(2024, 1, 10, 9, 0)))

    assert isinstance(container.uow, InMemoryUnitOfWork)
    assert isinstance(container.notifier, LoggingNotifier)


def test_end_to_end_with_container():
    settings = importlib.import_module("config.testing")
    container = build_container(settings, clock=FixedClock(datetime(2024, 1, 10, 9, 0)))
    store = container.uow.store

    student = store.add_student(name="Ana", email="ana@example.com")
    plan = container.plan_service.create(title="Gold", duration=3, price=100)

    membership = container.engine.enroll(student.student_id, plan.plan_id, "2024-01-10")
    container.engine.activate(membership.membership_id)
    checkin = container.engine.record_checkin(student.student_id)

    page = container.engine.list_checkins(student.student_id)
    assert page.items == [checkin]
    assert page.total_count == 1


def test_create_engine_reads_app_env(monkeypatch):
    from src.gym_membership.gym_membership.main import create_engine

    monkeypatch.setenv("APP_ENV", "testing")
    container = create_engine()

    assert isinstance(container.uow, InMemoryUnitOfWork)
    assert container.clock.tz is not None
