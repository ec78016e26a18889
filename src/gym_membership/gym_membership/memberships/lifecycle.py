from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.datetime_utils import add_months, coerce_date
from ..core.exceptions import (
    CannotModifyActiveMembership,
    ConflictActiveMembership,
    InvalidStartDate,
    MembershipAlreadyActive,
    MembershipNotFound,
    NotEnrolled,
    PlanNotFound,
    UnknownStudent,
)
from ..plans.model import Plan
from ..students.model import Student
from .model import Membership, MembershipTerms


class MembershipLifecycle:
    """Decides enrollment, renewal, cancellation and activation.

    Pure decision logic: every method works on values handed to it and either
    returns what should be written or raises a ``DomainError``. Reading and
    writing the store is the facade's job.
    """

    def terms_for(self, plan: Plan, start_date: date | str, *, today: date) -> MembershipTerms:
        start = coerce_date(start_date)
        if start < today:
            raise InvalidStartDate()

        return MembershipTerms(
            plan_id=plan.plan_id,
            start_date=start,
            end_date=add_months(start, plan.duration),
            price=plan.total_price,
        )

    def enroll(
        self,
        *,
        student: Optional[Student],
        plan: Optional[Plan],
        start_date: date | str,
        current: Optional[Membership],
        today: date,
    ) -> MembershipTerms:
        if not plan:
            raise PlanNotFound()
        if not student:
            raise UnknownStudent()

        if current and current.is_effectively_active(today):
            raise ConflictActiveMembership()

        return self.terms_for(plan, start_date, today=today)

    def renew(
        self,
        *,
        plan: Optional[Plan],
        start_date: date | str,
        current: Optional[Membership],
        today: date,
    ) -> MembershipTerms:
        if not current:
            raise NotEnrolled()
        if current.active:
            raise CannotModifyActiveMembership()

        # Date before plan: same order as the enrollment form validates.
        start = coerce_date(start_date)
        if start < today:
            raise InvalidStartDate()
        if not plan:
            raise PlanNotFound()

        return self.terms_for(plan, start, today=today)

    def cancel(self, *, current: Optional[Membership]) -> Membership:
        if not current:
            raise NotEnrolled()
        return current

    def activate(self, *, current: Optional[Membership]) -> Membership:
        if not current:
            raise MembershipNotFound()
        if current.active:
            raise MembershipAlreadyActive()
        return current
