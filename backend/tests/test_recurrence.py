from datetime import date

import pytest

from backend.app.services.slots import (
    RecurrenceNotAllowed,
    RecurrenceOption,
    expand_recurrence,
    recurrence_options,
    resolve_operating_days,
)
from backend.app.services.slots.recurrence import ensure_recurrence_allowed

from helpers import MONDAY, SATURDAY, SUNDAY


def test_weekend_field_has_no_daily_option():
    days = resolve_operating_days(["Saturday", "Sunday"])
    assert recurrence_options(days) == [
        RecurrenceOption.NONE,
        RecurrenceOption.WEEKLY,
        RecurrenceOption.MONTHLY,
    ]


def test_everyday_field_offers_all_options_in_order():
    assert recurrence_options(resolve_operating_days("everyday")) == [
        RecurrenceOption.NONE,
        RecurrenceOption.DAILY,
        RecurrenceOption.WEEKLY,
        RecurrenceOption.MONTHLY,
    ]


def test_closed_field_offers_none_and_monthly_only():
    assert recurrence_options(frozenset()) == [RecurrenceOption.NONE, RecurrenceOption.MONTHLY]


def test_daily_rejected_for_partial_week():
    with pytest.raises(RecurrenceNotAllowed):
        ensure_recurrence_allowed(RecurrenceOption.DAILY, resolve_operating_days("weekdays"))


def test_expand_weekly():
    days = resolve_operating_days("weekends")
    assert expand_recurrence(SATURDAY, RecurrenceOption.WEEKLY, days, 3) == [
        date(2026, 10, 24), date(2026, 10, 31), date(2026, 11, 7),
    ]


def test_expand_daily():
    dates = expand_recurrence(MONDAY, RecurrenceOption.DAILY, resolve_operating_days("everyday"), 3)
    assert dates == [date(2026, 10, 19), date(2026, 10, 20), date(2026, 10, 21)]


def test_expand_none_is_single_date():
    assert expand_recurrence(SUNDAY, RecurrenceOption.NONE, resolve_operating_days("Sunday"), 5) == [SUNDAY]


def test_expand_monthly_clamps_to_month_end():
    dates = expand_recurrence(date(2027, 1, 31), RecurrenceOption.MONTHLY, resolve_operating_days("everyday"), 3)
    assert dates == [date(2027, 1, 31), date(2027, 2, 28), date(2027, 3, 31)]


def test_expand_monthly_skips_closed_days():
    # Sundays only: 2026-10-25 is a Sunday, 2026-11-25 a Wednesday
    dates = expand_recurrence(SUNDAY, RecurrenceOption.MONTHLY, resolve_operating_days("Sunday"), 3)
    assert dates[0] == SUNDAY
    assert all(d.weekday() == 6 for d in dates)
    assert date(2026, 11, 25) not in dates


def test_expand_rejects_closed_start_date():
    with pytest.raises(RecurrenceNotAllowed):
        expand_recurrence(MONDAY, RecurrenceOption.WEEKLY, resolve_operating_days("weekends"), 2)
