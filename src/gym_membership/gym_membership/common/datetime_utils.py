from __future__ import annotations

import calendar
from datetime import date, datetime, time, tzinfo

from ..core.exceptions import InvalidStartDate


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: date | str) -> date:
    """Accept a date, a datetime (its calendar day) or an ISO string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        day = parse_iso_date(text[:10])
        if len(text) > 10:
            # Full timestamps only: "YYYY-MM-DDTHH:MM[:SS]" or with a space.
            if text[10] not in "T " or datetime.fromisoformat(text).date() != day:
                raise ValueError(text)
        return day
    except ValueError:
        raise InvalidStartDate(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None


def add_months(value: date, months: int) -> date:
    """Calendar-month arithmetic, clamping to the last day of the target month.

    >>> add_months(date(2024, 1, 31), 1)
    datetime.date(2024, 2, 29)
    """
    month_index = value.month - 1 + int(months)
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def localize(value: datetime, tz: tzinfo) -> datetime:
    """Naive datetimes are read as wall time in ``tz``; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min, tzinfo=value.tzinfo)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)
