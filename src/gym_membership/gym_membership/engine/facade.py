from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, TypeVar

from loguru import logger

from ..checkins.model import Checkin, CheckinPage
from ..checkins.policy import AttendancePolicy
from ..common.clock import Clock
from ..common.datetime_utils import localize
from ..common.validators import require_positive_int
from ..core.constants import CHECKINS_PAGE_SIZE, STORE_CONFLICT_RETRIES
from ..core.exceptions import (
    ConcurrentUpdateConflict,
    InvalidPage,
    MembershipNotFound,
    NotEnrolled,
    StoreConflictError,
    UnknownStudent,
    ValidationError,
)
from ..database.unit_of_work import TransactionScope, UnitOfWork
from ..memberships.lifecycle import MembershipLifecycle
from ..memberships.model import Membership
from ..notifications.port import LoggingNotifier, MembershipConfirmed, NotificationPort

T = TypeVar("T")


class PolicyEngine:
    """Entry point for every membership and attendance operation.

    Each policy operation reads, decides and writes inside one transaction
    holding the student's lock. This is the only class that opens
    transactions; ``MembershipLifecycle`` and ``AttendancePolicy`` only decide.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        *,
        clock: Clock,
        notifier: Optional[NotificationPort] = None,
        lifecycle: Optional[MembershipLifecycle] = None,
        attendance: Optional[AttendancePolicy] = None,
        store_conflict_retries: int = STORE_CONFLICT_RETRIES,
    ):
        self._uow = uow
        self._clock = clock
        self._notifier = notifier or LoggingNotifier()
        self._lifecycle = lifecycle or MembershipLifecycle()
        self._attendance = attendance or AttendancePolicy(clock.tz)
        self._retries = max(0, int(store_conflict_retries))

    def _now(self, now: Optional[datetime]) -> datetime:
        return localize(now, self._clock.tz) if now is not None else self._clock.now()

    def _run(self, operation: str, student_id: Optional[int], work: Callable[[TransactionScope], T]) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                with self._uow.transaction(student_id) as tx:
                    return work(tx)
            except StoreConflictError as exc:
                if attempt <= self._retries:
                    logger.warning("{} for student {} hit a store conflict, retrying: {}", operation, student_id, exc)
                    continue
                logger.error("{} for student {} failed after {} attempts: {}", operation, student_id, attempt, exc)
                raise ConcurrentUpdateConflict() from exc

    def _emit(self, event: MembershipConfirmed) -> None:
        # Runs after commit; the membership stays written whatever happens here.
        try:
            self._notifier.notify(event)
        except Exception:
            logger.exception("membership notification failed (membership={})", event.membership.membership_id)

    # Membership lifecycle

    def enroll(self, student_id: int, plan_id: int, start_date: date | str, *, now: Optional[datetime] = None) -> Membership:
        now = self._now(now)
        today = now.date()

        def work(tx: TransactionScope):
            student = tx.students.get_by_id(student_id)
            plan = tx.plans.get_by_id(plan_id)
            current = tx.memberships.get_for_student(student_id)

            terms = self._lifecycle.enroll(student=student, plan=plan, start_date=start_date, current=current, today=today)

            if current:
                # Lapsed membership: the new one takes its place.
                logger.debug("replacing lapsed membership {} of student {}", current.membership_id, student_id)
                tx.memberships.delete(current.membership_id)
            membership = tx.memberships.create(student_id=student_id, terms=terms, created_at=now)
            return membership, student, plan

        membership, student, plan = self._run("enroll", student_id, work)
        logger.info(
            "student {} enrolled in plan {} ({} -> {}, price={})",
            student_id,
            plan_id,
            membership.start_date,
            membership.end_date,
            membership.price,
        )
        self._emit(MembershipConfirmed(membership=membership, student=student, plan=plan))
        return membership

    def renew(self, student_id: int, plan_id: int, start_date: date | str, *, now: Optional[datetime] = None) -> Membership:
        now = self._now(now)
        today = now.date()

        def work(tx: TransactionScope) -> Membership:
            current = tx.memberships.get_for_student(student_id)
            plan = tx.plans.get_by_id(plan_id)

            terms = self._lifecycle.renew(plan=plan, start_date=start_date, current=current, today=today)
            return tx.memberships.update_terms(membership_id=current.membership_id, terms=terms)

        membership = self._run("renew", student_id, work)
        logger.info("student {} membership {} renewed until {}", student_id, membership.membership_id, membership.end_date)
        return membership

    def cancel(self, student_id: int) -> None:
        def work(tx: TransactionScope) -> Membership:
            current = self._lifecycle.cancel(current=tx.memberships.get_for_student(student_id))
            tx.memberships.delete(current.membership_id)
            return current

        removed = self._run("cancel", student_id, work)
        logger.info("student {} membership {} cancelled", student_id, removed.membership_id)

    def activate(self, membership_id: int) -> Membership:
        """Mark a membership active (payment/confirmation collaborator)."""

        with self._uow.transaction() as tx:
            found = tx.memberships.get_by_id(membership_id)
        if not found:
            raise MembershipNotFound()
        owner_id = found.student_id

        def work(tx: TransactionScope) -> Membership:
            current = tx.memberships.get_by_id(membership_id)
            if current and current.student_id != owner_id:
                current = None
            current = self._lifecycle.activate(current=current)
            return tx.memberships.set_active(current.membership_id, active=True)

        membership = self._run("activate", owner_id, work)
        logger.info("membership {} of student {} activated", membership_id, owner_id)
        return membership

    def get_membership(self, student_id: int) -> Optional[Membership]:
        with self._uow.transaction(student_id) as tx:
            if not tx.students.get_by_id(student_id):
                raise UnknownStudent()
            return tx.memberships.get_for_student(student_id)

    # Attendance

    def record_checkin(self, student_id: int, *, now: Optional[datetime] = None) -> Checkin:
        now = self._now(now)

        def work(tx: TransactionScope) -> Checkin:
            student = tx.students.get_by_id(student_id)
            membership = tx.memberships.get_for_student(student_id)

            self._attendance.authorize(student=student, membership=membership, now=now, history=tx.checkins)
            return tx.checkins.create(
                student_id=student_id,
                created_at=now,
                checkin_day=self._attendance.checkin_day(now),
            )

        checkin = self._run("record_checkin", student_id, work)
        logger.debug("student {} checked in at {}", student_id, checkin.created_at.isoformat())
        return checkin

    def list_checkins(self, student_id: int, page: int = 1) -> CheckinPage:
        try:
            page = require_positive_int(page, "page")
        except ValidationError:
            raise InvalidPage() from None

        with self._uow.transaction(student_id) as tx:
            student = tx.students.get_by_id(student_id)
            if not student:
                raise UnknownStudent()
            membership = tx.memberships.get_for_student(student_id)
            if not membership:
                raise NotEnrolled("Students must be enrolled to see their check-ins")

            total = tx.checkins.count_for_student(student_id)
            items = tx.checkins.list_for_student(
                student_id,
                limit=CHECKINS_PAGE_SIZE,
                offset=(page - 1) * CHECKINS_PAGE_SIZE,
            )

        return CheckinPage(
            items=list(items),
            total_count=total,
            page=page,
            page_size=CHECKINS_PAGE_SIZE,
            student=student,
            membership=membership,
        )
