# backend/app/services/slots/calendar.py
"""
Operating calendar of a field.

Normalizes raw operating-day configuration into a canonical weekday set
and answers date questions against it:

  "everyday"              → all seven days
  "weekend" / "weekends"  → Saturday, Sunday
  "weekday" / "weekdays"  → Monday..Friday
  "Monday" / "mon"        → that single day
  ["weekdays", "Sunday"]  → union of the elements

No timezone conversion happens here: dates are the field's local
calendar dates as supplied by the caller.
"""

from datetime import date, timedelta
from typing import Iterable

from .config import UnconfiguredDays
from .domain import ALL_DAYS, WEEKDAYS, WEEKEND, Weekday
from .errors import InvalidScheduleConfig


KEYWORDS: dict[str, frozenset[Weekday]] = {
    "everyday": ALL_DAYS,
    "weekend": WEEKEND,
    "weekends": WEEKEND,
    "weekday": WEEKDAYS,
    "weekdays": WEEKDAYS,
}

DAY_NAMES: dict[str, Weekday] = {}
for _day in Weekday:
    DAY_NAMES[_day.label.lower()] = _day
    DAY_NAMES[_day.label[:3].lower()] = _day


def resolve_operating_days(
    raw,
    unconfigured: UnconfiguredDays = UnconfiguredDays.REJECT,
) -> frozenset[Weekday]:
    """
    Resolve raw operating-day configuration into a weekday set.

    Args:
        raw: Keyword, day name, or a list of those (or Weekday members)
        unconfigured: Policy for empty/absent configuration

    Raises:
        InvalidScheduleConfig: unknown names, wrong types, or empty
            configuration under the REJECT policy.
    """
    if _is_empty(raw):
        return _resolve_unconfigured(unconfigured)

    if isinstance(raw, (str, Weekday)):
        return _resolve_single(raw)

    if isinstance(raw, (list, tuple, set, frozenset)):
        items = list(raw)
        if len(items) == 1:
            return _resolve_single(items[0])
        return _resolve_many(items)

    raise InvalidScheduleConfig(f"Unsupported operating days value: {raw!r}")


def is_operating_day(target_date: date, days: Iterable[Weekday]) -> bool:
    """Check whether target_date falls on one of the operating weekdays."""
    return Weekday.of(target_date) in days


def find_next_operating_date(
    start_date: date,
    days: frozenset[Weekday],
    horizon_days: int = 90,
) -> date | None:
    """
    Find the first operating date on or after start_date.

    Scans start_date .. start_date + horizon_days - 1.

    Returns:
        The date, or None when the field has no operating date within
        the horizon (callers must surface this, not book a closed day).
    """
    if not days:
        return None
    if ALL_DAYS <= days:
        return start_date

    for offset in range(horizon_days):
        candidate = start_date + timedelta(days=offset)
        if Weekday.of(candidate) in days:
            return candidate
    return None


def operating_dates(
    start_date: date,
    end_date: date,
    days: frozenset[Weekday],
) -> list[date]:
    """List operating dates in range [start_date, end_date]."""
    dates = []
    current = start_date
    while current <= end_date:
        if Weekday.of(current) in days:
            dates.append(current)
        current += timedelta(days=1)
    return dates


def describe_operating_days(days: frozenset[Weekday]) -> str:
    """Human label for a day set ("Every day", "Weekdays only", ...)."""
    if days == ALL_DAYS:
        return "Every day"
    if days == WEEKDAYS:
        return "Weekdays only"
    if days == WEEKEND:
        return "Weekends only"
    if not days:
        return "Closed"
    return ", ".join(d.label for d in sorted(days))


# ── Helpers ──────────────────────────────────────────────────────────────


def _is_empty(raw) -> bool:
    if raw is None:
        return True
    if isinstance(raw, str):
        return not raw.strip()
    if isinstance(raw, (list, tuple, set, frozenset)):
        return len(raw) == 0
    return False


def _resolve_unconfigured(policy: UnconfiguredDays) -> frozenset[Weekday]:
    if policy == UnconfiguredDays.OPEN:
        return ALL_DAYS
    if policy == UnconfiguredDays.CLOSED:
        return frozenset()
    raise InvalidScheduleConfig("Operating days are not configured")


def _resolve_single(value) -> frozenset[Weekday]:
    """Rules 1-4: keyword or single day name."""
    if isinstance(value, Weekday):
        return frozenset({value})
    if not isinstance(value, str):
        raise InvalidScheduleConfig(f"Unsupported operating day: {value!r}")

    key = value.strip().lower()
    if key in KEYWORDS:
        return KEYWORDS[key]
    if key in DAY_NAMES:
        return frozenset({DAY_NAMES[key]})
    raise InvalidScheduleConfig(f"Unknown operating day: {value!r}")


def _resolve_many(items: list) -> frozenset[Weekday]:
    """Rule 5: union of expanded keywords and explicit day names."""
    result: set[Weekday] = set()
    for item in items:
        if _is_empty(item):
            raise InvalidScheduleConfig("Empty entry in operating days list")
        result |= _resolve_single(item)
    return frozenset(result)
