from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from .model import Checkin


class CheckinReader(Protocol):
    """History queries the attendance policy needs."""

    def exists_between(self, student_id: int, start: datetime, end: datetime) -> bool:
        raise NotImplementedError

    def count_between(self, student_id: int, start: datetime, end: datetime) -> int:
        raise NotImplementedError


class CheckinRepository(CheckinReader, Protocol):
    def create(self, *, student_id: int, created_at: datetime, checkin_day: date) -> Checkin:
        """Persist a check-in.

        ``checkin_day`` is ``created_at``'s calendar day in the configured time
        zone; the store keeps it unique per student.
        """

        raise NotImplementedError

    def count_for_student(self, student_id: int) -> int:
        raise NotImplementedError

    def list_for_student(self, student_id: int, *, limit: int, offset: int) -> Sequence[Checkin]:
        """Most recent first."""

        raise NotImplementedError
