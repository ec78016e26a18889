from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo

from .datetime_utils import localize


def get_zone(name: str) -> tzinfo:
    """Resolve a configured zone name; UTC needs no tz database."""
    if name.strip().upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name.strip())


class Clock(Protocol):
    @property
    def tz(self) -> tzinfo: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in the deployment's configured time zone."""

    def __init__(self, tz_name: str = "UTC"):
        self._tz = get_zone(tz_name)

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


@dataclass
class FixedClock:
    """Deterministic clock for tests and replays."""

    current: datetime
    tz_name: str = "UTC"
    _tz: tzinfo = field(init=False, repr=False)

    def __post_init__(self):
        self._tz = get_zone(self.tz_name)
        self.current = localize(self.current, self._tz)

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current
