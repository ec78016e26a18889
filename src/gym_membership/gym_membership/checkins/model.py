from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..memberships.model import Membership
from ..students.model import Student


@dataclass(frozen=True)
class Checkin:
    """Domain entity: an attendance event. Never mutated once written."""

    checkin_id: int
    student_id: int
    created_at: datetime


@dataclass(frozen=True)
class CheckinPage:
    """Read-model for the check-in history screen."""

    items: Sequence[Checkin]
    total_count: int
    page: int
    page_size: int
    student: Student
    membership: Optional[Membership]

    @property
    def page_count(self) -> int:
        if self.total_count == 0:
            return 0
        return (self.total_count + self.page_size - 1) // self.page_size
