from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.gym_membership.gym_membership.core.enums import ErrorKind
from src.gym_membership.gym_membership.core.exceptions import (
    CannotModifyActiveMembership,
    ConflictActiveMembership,
    InvalidStartDate,
    MembershipAlreadyActive,
    MembershipNotFound,
    NotEnrolled,
    PlanNotFound,
    UnknownStudent,
)
from src.gym_membership.gym_membership.memberships.lifecycle import MembershipLifecycle
from src.gym_membership.gym_membership.memberships.model import Membership
from src.gym_membership.gym_membership.plans.model import Plan
from src.gym_membership.gym_membership.students.model import Student

TODAY = date(2024, 1, 10)
STUDENT = Student(student_id=1, name="A", email="a@example.com")
PLAN = Plan(plan_id=7, title="Gold", duration=3, price=Decimal("100"))


def _membership(*, active: bool, start: date) -> Membership:
    return Membership(
        membership_id=11,
        student_id=1,
        plan_id=7,
        start_date=start,
        end_date=date(2099, 1, 1),
        price=Decimal("300"),
        active=active,
    )


def test_enroll_computes_frozen_terms():
    terms = MembershipLifecycle().enroll(student=STUDENT, plan=PLAN, start_date="2024-01-31", current=None, today=TODAY)

    assert terms.plan_id == 7
    assert terms.start_date == date(2024, 1, 31)
    assert terms.end_date == date(2024, 4, 30)
    assert terms.price == Decimal("300")


def test_enroll_allows_starting_today():
    terms = MembershipLifecycle().enroll(student=STUDENT, plan=PLAN, start_date=TODAY, current=None, today=TODAY)
    assert terms.start_date == TODAY


def test_enroll_rejects_past_start_date():
    with pytest.raises(InvalidStartDate) as exc:
        MembershipLifecycle().enroll(student=STUDENT, plan=PLAN, start_date="2024-01-09", current=None, today=TODAY)
    assert exc.value.kind == ErrorKind.INVALID_INPUT


def test_enroll_checks_plan_then_student():
    lifecycle = MembershipLifecycle()
    with pytest.raises(PlanNotFound):
        lifecycle.enroll(student=None, plan=None, start_date=TODAY, current=None, today=TODAY)
    with pytest.raises(UnknownStudent):
        lifecycle.enroll(student=None, plan=PLAN, start_date=TODAY, current=None, today=TODAY)


@pytest.mark.parametrize(
    "current",
    [
        _membership(active=True, start=date(2023, 12, 1)),
        _membership(active=False, start=date(2024, 2, 1)),
        _membership(active=False, start=TODAY),
    ],
    ids=["active", "future-dated", "starts-today"],
)
def test_enroll_blocked_by_effectively_active_membership(current):
    with pytest.raises(ConflictActiveMembership) as exc:
        MembershipLifecycle().enroll(student=STUDENT, plan=PLAN, start_date="2024-03-01", current=current, today=TODAY)
    assert exc.value.kind == ErrorKind.CONFLICT


def test_enroll_over_lapsed_membership_is_allowed():
    lapsed = _membership(active=False, start=date(2023, 6, 1))
    terms = MembershipLifecycle().enroll(student=STUDENT, plan=PLAN, start_date=TODAY, current=lapsed, today=TODAY)
    assert terms.start_date == TODAY


def test_renew_requires_membership():
    with pytest.raises(NotEnrolled):
        MembershipLifecycle().renew(plan=PLAN, start_date=TODAY, current=None, today=TODAY)


def test_renew_refuses_active_membership():
    with pytest.raises(CannotModifyActiveMembership):
        MembershipLifecycle().renew(
            plan=PLAN,
            start_date=TODAY,
            current=_membership(active=True, start=date(2023, 12, 1)),
            today=TODAY,
        )


def test_renew_inactive_membership_recomputes_terms():
    current = _membership(active=False, start=date(2024, 2, 1))
    plan = Plan(plan_id=8, title="Diamond", duration=6, price=Decimal("89.50"))

    terms = MembershipLifecycle().renew(plan=plan, start_date="2024-08-31", current=current, today=TODAY)

    assert terms.plan_id == 8
    assert terms.end_date == date(2025, 2, 28)
    assert terms.price == Decimal("537.00")


def test_renew_checks_date_before_plan():
    current = _membership(active=False, start=date(2024, 2, 1))
    with pytest.raises(InvalidStartDate):
        MembershipLifecycle().renew(plan=None, start_date="2020-01-01", current=current, today=TODAY)
    with pytest.raises(PlanNotFound):
        MembershipLifecycle().renew(plan=None, start_date=TODAY, current=current, today=TODAY)


def test_cancel_and_activate_guards():
    lifecycle = MembershipLifecycle()
    with pytest.raises(NotEnrolled):
        lifecycle.cancel(current=None)

    active = _membership(active=True, start=date(2023, 12, 1))
    assert lifecycle.cancel(current=active) is active

    with pytest.raises(MembershipNotFound):
        lifecycle.activate(current=None)
    with pytest.raises(MembershipAlreadyActive):
        lifecycle.activate(current=active)


def test_effectively_active_is_evaluated_against_today():
    future = _membership(active=False, start=date(2024, 1, 20))
    assert future.is_effectively_active(TODAY)
    assert not future.is_effectively_active(date(2024, 1, 21))
