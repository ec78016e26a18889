from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from ..common.datetime_utils import end_of_day, localize, start_of_day
from ..core.constants import DEFAULT_CHECKIN_WINDOW_DAYS, DEFAULT_WEEKLY_CHECKIN_LIMIT
from ..core.exceptions import (
    AlreadyCheckedInToday,
    MembershipInactive,
    NotEnrolled,
    UnknownStudent,
    WeeklyLimitExceeded,
)
from ..memberships.model import Membership
from ..students.model import Student
from .repository import CheckinReader


class AttendancePolicy:
    """Decides whether a check-in may be recorded.

    Rejections run cheapest first: existence, enrollment and the active flag
    are checked before either history query touches the check-in store.
    """

    def __init__(
        self,
        tz: tzinfo,
        *,
        weekly_limit: int = DEFAULT_WEEKLY_CHECKIN_LIMIT,
        window_days: int = DEFAULT_CHECKIN_WINDOW_DAYS,
    ):
        self._tz = tz
        self._weekly_limit = int(weekly_limit)
        self._window = timedelta(days=int(window_days))

    def local_now(self, now: datetime) -> datetime:
        return localize(now, self._tz)

    def checkin_day(self, now: datetime) -> date:
        return self.local_now(now).date()

    def day_bounds(self, now: datetime) -> tuple[datetime, datetime]:
        local = self.local_now(now)
        return start_of_day(local), end_of_day(local)

    def window_bounds(self, now: datetime) -> tuple[datetime, datetime]:
        local = self.local_now(now)
        return local - self._window, local

    def ensure_eligible(self, *, student: Optional[Student], membership: Optional[Membership]) -> None:
        if not student:
            raise UnknownStudent()
        if not membership:
            raise NotEnrolled("Students must be enrolled to check in")
        if not membership.active:
            raise MembershipInactive()

    def ensure_within_limits(self, *, student_id: int, now: datetime, history: CheckinReader) -> None:
        day_start, day_end = self.day_bounds(now)
        if history.exists_between(student_id, day_start, day_end):
            raise AlreadyCheckedInToday()

        window_start, window_end = self.window_bounds(now)
        if history.count_between(student_id, window_start, window_end) >= self._weekly_limit:
            raise WeeklyLimitExceeded(
                f"Access denied, you already checked in {self._weekly_limit} times in the last "
                f"{self._window.days} days"
            )

    def authorize(
        self,
        *,
        student: Optional[Student],
        membership: Optional[Membership],
        now: datetime,
        history: CheckinReader,
    ) -> None:
        self.ensure_eligible(student=student, membership=membership)
        self.ensure_within_limits(student_id=student.student_id, now=now, history=history)
