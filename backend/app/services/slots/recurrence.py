# backend/app/services/slots/recurrence.py
"""
Recurring booking patterns a field can actually satisfy.
"""

import calendar as _calendar
from datetime import date, timedelta

from .domain import ALL_DAYS, RecurrenceOption, Weekday
from .errors import RecurrenceNotAllowed


def recurrence_options(days: frozenset[Weekday]) -> list[RecurrenceOption]:
    """
    Recurrence choices to offer, in fixed order.

    None and Monthly always; Daily only for fields open all seven days;
    Weekly when at least one day operates.
    """
    options = [RecurrenceOption.NONE]
    if ALL_DAYS <= days:
        options.append(RecurrenceOption.DAILY)
    if len(days) >= 1:
        options.append(RecurrenceOption.WEEKLY)
    options.append(RecurrenceOption.MONTHLY)
    return options


def ensure_recurrence_allowed(option: RecurrenceOption, days: frozenset[Weekday]) -> None:
    """Raise RecurrenceNotAllowed for a pattern the field does not offer."""
    if option not in recurrence_options(days):
        raise RecurrenceNotAllowed(
            f"Recurrence '{option.value}' is not available for this field"
        )


def expand_recurrence(
    start_date: date,
    option: RecurrenceOption,
    days: frozenset[Weekday],
    occurrences: int,
) -> list[date]:
    """
    Expand a recurring booking into concrete dates.

    Monthly keeps the day of month (clamped to the month end) and skips
    months where that date is a closed day. Never returns a closed day.

    Args:
        start_date: First occurrence; must be an operating day
        option: Recurrence pattern
        days: Resolved operating days of the field
        occurrences: Number of cycles to expand (>= 1)
    """
    ensure_recurrence_allowed(option, days)
    if occurrences < 1:
        raise ValueError(f"occurrences must be >= 1, got {occurrences}")
    if Weekday.of(start_date) not in days:
        raise RecurrenceNotAllowed(
            f"{start_date.isoformat()} is not an operating day for this field"
        )

    if option == RecurrenceOption.NONE:
        return [start_date]

    if option in (RecurrenceOption.DAILY, RecurrenceOption.WEEKLY):
        step = 1 if option == RecurrenceOption.DAILY else 7
        return [start_date + timedelta(days=i * step) for i in range(occurrences)]

    dates = []
    for i in range(occurrences):
        candidate = _add_months(start_date, i)
        if Weekday.of(candidate) in days:
            dates.append(candidate)
    return dates


def _add_months(dt: date, months: int) -> date:
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    last_day = _calendar.monthrange(year, month)[1]
    return date(year, month, min(dt.day, last_day))
