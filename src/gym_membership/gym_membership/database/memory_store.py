from __future__ import annotations

import itertools
import threading
from contextlib import ExitStack, contextmanager
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from ..checkins.model import Checkin
from ..checkins.repository import CheckinRepository
from ..core.exceptions import MembershipNotFound, StoreConflictError
from ..memberships.model import Membership, MembershipTerms
from ..memberships.repository import MembershipRepository
from ..plans.model import Plan
from ..plans.repository import PlanRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from .unit_of_work import TransactionScope, UnitOfWork


class _Journal:
    """Undo log for one transaction."""

    def __init__(self):
        self._undo: List[Callable[[], None]] = []

    def record(self, undo: Callable[[], None]) -> None:
        self._undo.append(undo)

    def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()


class InMemoryStore:
    """Process-local store with the same guarantees as the MySQL schema.

    * one ``threading.Lock`` per student, created on first use, held by every
      student-scoped transaction, reads included;
    * plan catalog writes serialize on ``catalog_lock``, taken by the first
      write of a transaction and held until it ends;
    * unique membership per student and unique check-in per (student, day);
    * writes made inside a failed transaction are undone.
    """

    def __init__(self):
        self._guard = threading.RLock()
        self._locks_guard = threading.Lock()
        self._student_locks: Dict[int, threading.Lock] = {}
        self.catalog_lock = threading.RLock()

        self.students: Dict[int, Student] = {}
        self.plans: Dict[int, Plan] = {}
        self.memberships: Dict[int, Membership] = {}
        self.checkins: Dict[int, Checkin] = {}
        self.checkin_days: Dict[Tuple[int, date], int] = {}

        self._ids = {name: itertools.count(1) for name in ("students", "plans", "memberships", "checkins")}

    def next_id(self, table: str) -> int:
        with self._guard:
            return next(self._ids[table])

    def lock_for(self, student_id: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._student_locks.get(int(student_id))
            if lock is None:
                lock = threading.Lock()
                self._student_locks[int(student_id)] = lock
            return lock

    # Seeding helpers: students are owned by the registration side.

    def add_student(self, *, name: str, email: str) -> Student:
        student = Student(student_id=self.next_id("students"), name=name, email=email)
        with self._guard:
            self.students[student.student_id] = student
        return student

    def add_plan(self, *, title: str, duration: int, price: Decimal | int | str) -> Plan:
        plan = Plan(plan_id=self.next_id("plans"), title=title, duration=int(duration), price=Decimal(str(price)))
        with self._guard:
            self.plans[plan.plan_id] = plan
        return plan


class MemoryStudentRepository(StudentRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._store.students.get(int(student_id))


class MemoryPlanRepository(PlanRepository):
    def __init__(self, store: InMemoryStore, journal: _Journal, claim_catalog: Callable[[], None]):
        self._store = store
        self._journal = journal
        self._claim_catalog = claim_catalog

    def get_by_id(self, plan_id: int) -> Optional[Plan]:
        return self._store.plans.get(int(plan_id))

    def get_by_title(self, title: str) -> Optional[Plan]:
        return next((p for p in list(self._store.plans.values()) if p.title == title), None)

    def list_all(self) -> Sequence[Plan]:
        return sorted(self._store.plans.values(), key=lambda p: p.plan_id)

    def create(self, *, title: str, duration: int, price: Decimal) -> int:
        store = self._store
        self._claim_catalog()
        with store._guard:
            if self.get_by_title(title):
                raise StoreConflictError(f"Duplicate plan title: {title!r}")
            plan = Plan(plan_id=store.next_id("plans"), title=title, duration=int(duration), price=price)
            store.plans[plan.plan_id] = plan
        self._journal.record(lambda: store.plans.pop(plan.plan_id, None))
        return plan.plan_id

    def update(self, *, plan_id: int, title: str, duration: int, price: Decimal) -> bool:
        store = self._store
        self._claim_catalog()
        with store._guard:
            old = store.plans.get(int(plan_id))
            if not old:
                return False
            clash = self.get_by_title(title)
            if clash and clash.plan_id != old.plan_id:
                raise StoreConflictError(f"Duplicate plan title: {title!r}")
            store.plans[old.plan_id] = replace(old, title=title, duration=int(duration), price=price)
        self._journal.record(lambda: store.plans.__setitem__(old.plan_id, old))
        return True

    def delete(self, plan_id: int) -> bool:
        store = self._store
        self._claim_catalog()
        with store._guard:
            old = store.plans.pop(int(plan_id), None)
        if not old:
            return False
        self._journal.record(lambda: store.plans.__setitem__(old.plan_id, old))
        return True


class MemoryMembershipRepository(MembershipRepository):
    def __init__(self, store: InMemoryStore, journal: _Journal):
        self._store = store
        self._journal = journal

    def get_by_id(self, membership_id: int) -> Optional[Membership]:
        return self._store.memberships.get(int(membership_id))

    def get_for_student(self, student_id: int) -> Optional[Membership]:
        return next(
            (m for m in list(self._store.memberships.values()) if m.student_id == int(student_id)),
            None,
        )

    def create(self, *, student_id: int, terms: MembershipTerms, created_at: datetime) -> Membership:
        store = self._store
        with store._guard:
            if self.get_for_student(student_id):
                raise StoreConflictError(f"Duplicate membership for student {student_id}")
            membership = Membership(
                membership_id=store.next_id("memberships"),
                student_id=int(student_id),
                plan_id=terms.plan_id,
                start_date=terms.start_date,
                end_date=terms.end_date,
                price=terms.price,
                active=False,
                created_at=created_at,
            )
            store.memberships[membership.membership_id] = membership
        self._journal.record(lambda: store.memberships.pop(membership.membership_id, None))
        return membership

    def update_terms(self, *, membership_id: int, terms: MembershipTerms) -> Membership:
        return self._replace(
            membership_id,
            plan_id=terms.plan_id,
            start_date=terms.start_date,
            end_date=terms.end_date,
            price=terms.price,
        )

    def set_active(self, membership_id: int, *, active: bool) -> Membership:
        return self._replace(membership_id, active=bool(active))

    def delete(self, membership_id: int) -> bool:
        store = self._store
        with store._guard:
            old = store.memberships.pop(int(membership_id), None)
        if not old:
            return False
        self._journal.record(lambda: store.memberships.__setitem__(old.membership_id, old))
        return True

    def _replace(self, membership_id: int, **changes) -> Membership:
        store = self._store
        with store._guard:
            old = store.memberships.get(int(membership_id))
            if not old:
                raise MembershipNotFound()
            new = replace(old, **changes)
            store.memberships[old.membership_id] = new
        self._journal.record(lambda: store.memberships.__setitem__(old.membership_id, old))
        return new


class MemoryCheckinRepository(CheckinRepository):
    def __init__(self, store: InMemoryStore, journal: _Journal):
        self._store = store
        self._journal = journal

    def _for_student(self, student_id: int) -> List[Checkin]:
        return [c for c in list(self._store.checkins.values()) if c.student_id == int(student_id)]

    def exists_between(self, student_id: int, start: datetime, end: datetime) -> bool:
        return any(start <= c.created_at <= end for c in self._for_student(student_id))

    def count_between(self, student_id: int, start: datetime, end: datetime) -> int:
        return sum(1 for c in self._for_student(student_id) if start <= c.created_at <= end)

    def create(self, *, student_id: int, created_at: datetime, checkin_day: date) -> Checkin:
        store = self._store
        key = (int(student_id), checkin_day)
        with store._guard:
            if key in store.checkin_days:
                raise StoreConflictError(f"Duplicate check-in for student {student_id} on {checkin_day}")
            checkin = Checkin(checkin_id=store.next_id("checkins"), student_id=int(student_id), created_at=created_at)
            store.checkins[checkin.checkin_id] = checkin
            store.checkin_days[key] = checkin.checkin_id

        def undo() -> None:
            store.checkins.pop(checkin.checkin_id, None)
            store.checkin_days.pop(key, None)

        self._journal.record(undo)
        return checkin

    def count_for_student(self, student_id: int) -> int:
        return len(self._for_student(student_id))

    def list_for_student(self, student_id: int, *, limit: int, offset: int) -> Sequence[Checkin]:
        items = self._for_student(student_id)
        items.sort(key=lambda c: (c.created_at, c.checkin_id), reverse=True)
        return items[int(offset) : int(offset) + int(limit)]


class InMemoryUnitOfWork(UnitOfWork):
    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()

    @contextmanager
    def transaction(self, student_id: Optional[int] = None) -> Iterator[TransactionScope]:
        with ExitStack() as locks:
            if student_id is not None:
                locks.enter_context(self.store.lock_for(student_id))

            claimed = []

            def claim_catalog() -> None:
                if not claimed:
                    locks.enter_context(self.store.catalog_lock)
                    claimed.append(True)

            journal = _Journal()
            scope = TransactionScope(
                students=MemoryStudentRepository(self.store),
                plans=MemoryPlanRepository(self.store, journal, claim_catalog),
                memberships=MemoryMembershipRepository(self.store, journal),
                checkins=MemoryCheckinRepository(self.store, journal),
            )
            try:
                yield scope
            except BaseException:
                with self.store._guard:
                    journal.rollback()
                raise
