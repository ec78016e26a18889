from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from loguru import logger

from ..common.validators import require_non_empty, require_positive_decimal, require_positive_int
from ..core.exceptions import PlanNotFound, PlanTitleTaken, StoreConflictError
from ..database.unit_of_work import UnitOfWork
from .model import Plan


class PlanService:
    """Use case: maintain the plan catalog.

    Memberships copy price and end date when they are written, so editing or
    deleting a plan never touches existing memberships.
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    @staticmethod
    def _validate(title: str, duration, price) -> tuple[str, int, Decimal]:
        return (
            require_non_empty(title, "title"),
            require_positive_int(duration, "duration"),
            require_positive_decimal(price, "price"),
        )

    def create(self, *, title: str, duration: int, price: Decimal | int | str) -> Plan:
        title, duration, price = self._validate(title, duration, price)

        try:
            with self._uow.transaction() as tx:
                if tx.plans.get_by_title(title):
                    raise PlanTitleTaken()
                plan_id = tx.plans.create(title=title, duration=duration, price=price)
        except StoreConflictError:
            raise PlanTitleTaken()

        logger.info("plan {} '{}' created ({} months at {})", plan_id, title, duration, price)
        return Plan(plan_id=plan_id, title=title, duration=duration, price=price)

    def update(self, plan_id: int, *, title: str, duration: int, price: Decimal | int | str) -> Plan:
        title, duration, price = self._validate(title, duration, price)

        try:
            with self._uow.transaction() as tx:
                plan = tx.plans.get_by_id(plan_id)
                if not plan:
                    raise PlanNotFound()

                if title != plan.title and tx.plans.get_by_title(title):
                    raise PlanTitleTaken("Plan title must be unique")

                tx.plans.update(plan_id=plan.plan_id, title=title, duration=duration, price=price)
        except StoreConflictError:
            raise PlanTitleTaken("Plan title must be unique")

        logger.info("plan {} updated", plan_id)
        return Plan(plan_id=int(plan_id), title=title, duration=duration, price=price)

    def delete(self, plan_id: int) -> None:
        with self._uow.transaction() as tx:
            if not tx.plans.delete(plan_id):
                raise PlanNotFound()
        logger.info("plan {} deleted", plan_id)

    def get(self, plan_id: int) -> Plan:
        with self._uow.transaction() as tx:
            plan = tx.plans.get_by_id(plan_id)
        if not plan:
            raise PlanNotFound()
        return plan

    def list_all(self) -> Sequence[Plan]:
        with self._uow.transaction() as tx:
            return list(tx.plans.list_all())
