from __future__ import annotations

from decimal import Decimal

import pytest

from src.gym_membership.gym_membership.core.enums import ErrorKind
from src.gym_membership.gym_membership.core.exceptions import PlanNotFound, PlanTitleTaken, ValidationError
from src.gym_membership.gym_membership.plans.service import PlanService


@pytest.fixture
def plans(uow) -> PlanService:
    return PlanService(uow)


def test_create_and_get(plans):
    created = plans.create(title="  Start  ", duration=1, price="129.90")

    assert created.title == "Start"
    assert created.price == Decimal("129.90")
    assert plans.get(created.plan_id) == created
    assert plans.list_all() == [created]


def test_title_must_be_unique(plans):
    plans.create(title="Gold", duration=3, price=109)

    with pytest.raises(PlanTitleTaken) as exc:
        plans.create(title="Gold", duration=6, price=99)
    assert exc.value.kind == ErrorKind.CONFLICT


@pytest.mark.parametrize(
    "title, duration, price",
    [
        ("", 1, 10),
        ("X", 0, 10),
        ("X", -3, 10),
        ("X", 1.5, 10),
        ("X", "abc", 10),
        ("X", True, 10),
        ("X", 1, 0),
        ("X", 1, "-5"),
        ("X", 1, "free"),
        ("X", 1, "99.999"),
    ],
)
def test_invalid_fields_are_rejected(plans, title, duration, price):
    with pytest.raises(ValidationError) as exc:
        plans.create(title=title, duration=duration, price=price)
    assert exc.value.kind == ErrorKind.INVALID_INPUT


def test_update_keeps_title_unique(plans):
    gold = plans.create(title="Gold", duration=3, price=109)
    plans.create(title="Diamond", duration=6, price=89)

    with pytest.raises(PlanTitleTaken):
        plans.update(gold.plan_id, title="Diamond", duration=3, price=109)

    updated = plans.update(gold.plan_id, title="Gold", duration=4, price="99.5")
    assert plans.get(gold.plan_id) == updated
    assert updated.duration == 4


def test_missing_plan(plans):
    with pytest.raises(PlanNotFound):
        plans.get(99)
    with pytest.raises(PlanNotFound):
        plans.update(99, title="X", duration=1, price=1)
    with pytest.raises(PlanNotFound):
        plans.delete(99)


def test_delete(plans):
    plan = plans.create(title="Temp", duration=1, price=1)
    plans.delete(plan.plan_id)
    assert plans.list_all() == []


def test_price_keeps_two_decimal_places(plans):
    plan = plans.create(title="Cents", duration=2, price="49.95")
    assert plan.price == Decimal("49.95")
    assert plan.total_price == Decimal("99.90")
