from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Plan:
    """Domain entity: a purchasable duration/price template."""

    plan_id: int
    title: str
    duration: int  # months
    price: Decimal  # per month

    @property
    def total_price(self) -> Decimal:
        return self.price * self.duration
