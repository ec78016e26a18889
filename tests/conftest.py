from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.gym_membership.gym_membership.common.clock import FixedClock
from src.gym_membership.gym_membership.database.memory_store import InMemoryStore, InMemoryUnitOfWork
from src.gym_membership.gym_membership.engine.facade import PolicyEngine


class RecordingNotifier:
    def __init__(self, *, fail: bool = False):
        self.events = []
        self.fail = fail

    def notify(self, event) -> None:
        self.events.append(event)
        if self.fail:
            raise ConnectionError("mail queue unavailable")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow(store) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(store)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def engine(uow, clock, notifier) -> PolicyEngine:
    return PolicyEngine(uow, clock=clock, notifier=notifier)


@pytest.fixture
def student(store):
    return store.add_student(name="Ana Souza", email="ana@example.com")


@pytest.fixture
def plan(store):
    return store.add_plan(title="Gold", duration=3, price="100")
