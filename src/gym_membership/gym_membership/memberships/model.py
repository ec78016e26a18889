from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class MembershipTerms:
    """Values computed when a plan is sold: frozen at write time."""

    plan_id: int
    start_date: date
    end_date: date
    price: Decimal


@dataclass(frozen=True)
class Membership:
    """Domain entity: a time-bounded enrollment of one student in one plan."""

    membership_id: int
    student_id: int
    plan_id: int
    start_date: date
    end_date: date
    price: Decimal
    active: bool
    created_at: Optional[datetime] = None

    def is_effectively_active(self, today: date) -> bool:
        """Active flag set, or not started yet (a future start still holds the slot).

        Evaluated on every read, never stored.
        """
        return self.active or self.start_date >= today
