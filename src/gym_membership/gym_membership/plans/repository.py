from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Plan


class PlanRepository(Protocol):
    def get_by_id(self, plan_id: int) -> Optional[Plan]:
        raise NotImplementedError

    def get_by_title(self, title: str) -> Optional[Plan]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Plan]:
        raise NotImplementedError

    def create(self, *, title: str, duration: int, price: Decimal) -> int:
        raise NotImplementedError

    def update(self, *, plan_id: int, title: str, duration: int, price: Decimal) -> bool:
        raise NotImplementedError

    def delete(self, plan_id: int) -> bool:
        raise NotImplementedError
