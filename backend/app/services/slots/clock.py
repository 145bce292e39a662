# backend/app/services/slots/clock.py
"""
Clock providers.

The engine never reads the wall clock; callers pass `now` obtained
from one of these, so tests can fix time.
"""

from datetime import datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidScheduleConfig


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Current UTC time (aware)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Always returns the same instant."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


def get_zone(tz_name: str) -> ZoneInfo:
    """ZoneInfo for a field zone name; InvalidScheduleConfig if unknown."""
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise InvalidScheduleConfig(f"Unknown timezone {tz_name!r}") from e


def to_local_wall_time(moment: datetime, tz_name: str) -> datetime:
    """
    Convert an instant to naive wall-clock time in the field's zone.

    Naive values are taken as already local.

    Raises:
        InvalidScheduleConfig: tz_name is not a known zone
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(get_zone(tz_name)).replace(tzinfo=None)


# Dependency for FastAPI
def get_clock() -> Clock:
    return SystemClock()
