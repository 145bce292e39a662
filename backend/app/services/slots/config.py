# backend/app/services/slots/config.py
"""
Scheduling configuration and time helpers for slots calculation.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from .errors import AmbiguousTimeFormat


MINUTES_PER_DAY = 24 * 60

_TIME_24H_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")


class UnconfiguredDays(str, Enum):
    """What to do with a field whose operating days were never configured."""
    REJECT = "reject"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class SchedulingConfig:
    """
    Configuration for the scheduling engine.

    Attributes:
        horizon_days: How far ahead to look for the next operating date
        cancellation_threshold_hours: Minimum lead time for cancel/reschedule
        refund_threshold_hours: Minimum advance booking for a full refund
        cache_ttl_seconds: Redis cache TTL for base grid
        default_timezone: Zone used when a field has none configured
        unconfigured_days: Policy for fields without operating days
    """
    horizon_days: int = 90
    cancellation_threshold_hours: int = 24
    refund_threshold_hours: int = 24
    cache_ttl_seconds: int = 86400  # 24 hours
    default_timezone: str = "Europe/London"
    unconfigured_days: UnconfiguredDays = UnconfiguredDays.REJECT

    def __post_init__(self):
        """Validate configuration."""
        if self.horizon_days < 1:
            raise ValueError(f"horizon_days must be positive, got {self.horizon_days}")
        if self.cancellation_threshold_hours < 0:
            raise ValueError(
                f"cancellation_threshold_hours must be >= 0, got {self.cancellation_threshold_hours}"
            )


@lru_cache
def get_scheduling_config() -> SchedulingConfig:
    """Get scheduling configuration (singleton), read from settings."""
    from ...config import settings

    return SchedulingConfig(
        horizon_days=settings.horizon_days,
        cancellation_threshold_hours=settings.cancellation_threshold_hours,
        refund_threshold_hours=settings.refund_threshold_hours,
        cache_ttl_seconds=settings.slots_cache_ttl_seconds,
        default_timezone=settings.default_timezone,
        unconfigured_days=UnconfiguredDays(settings.unconfigured_days_policy),
    )


# ── Time helpers ─────────────────────────────────────────────────────────


def time_str_to_minutes(value: str) -> int:
    """
    Convert a clock string to minutes since midnight.

    Accepts "HH:MM" (24-hour, "24:00" allowed) and "h:mm AM/PM".
    """
    text = value.strip() if isinstance(value, str) else ""

    match = _TIME_24H_RE.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if minute > 59 or hour > 24 or (hour == 24 and minute != 0):
            raise AmbiguousTimeFormat(value)
        return hour * 60 + minute

    if _TIME_12H_RE.match(text):
        return parse_12_hour_minutes(text)

    raise AmbiguousTimeFormat(value)


def parse_12_hour_minutes(value: str) -> int:
    """
    Parse a strict 12-hour clock string ("8:00AM", "12:30 pm").

    12 AM is hour 0, 12 PM stays hour 12.
    """
    match = _TIME_12H_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise AmbiguousTimeFormat(value)

    hour, minute = int(match.group(1)), int(match.group(2))
    period = match.group(3).upper()
    if not 1 <= hour <= 12 or minute > 59:
        raise AmbiguousTimeFormat(value)

    if period == "PM" and hour != 12:
        hour += 12
    elif period == "AM" and hour == 12:
        hour = 0
    return hour * 60 + minute


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
