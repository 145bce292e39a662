from datetime import datetime, timezone

import pytest

from backend.app.services.slots import (
    AmbiguousTimeFormat,
    FieldSchedule,
    InvalidScheduleConfig,
    SlotDuration,
    UnconfiguredDays,
    Weekday,
)
from backend.app.services.slots.clock import to_local_wall_time
from backend.app.services.slots.config import minutes_to_time_str, time_str_to_minutes


def test_from_raw_parses_once_into_canonical_form():
    schedule = FieldSchedule.from_raw(
        "weekends", "6:00AM", "9:00PM", 30, buffer_minutes=15, max_dogs_per_slot=3,
    )
    assert schedule.operating_days == frozenset({Weekday.SATURDAY, Weekday.SUNDAY})
    assert (schedule.opening_time, schedule.closing_time) == ("06:00", "21:00")
    assert schedule.slot_duration is SlotDuration.THIRTY_MINUTES
    assert schedule.buffer_minutes == 15


@pytest.mark.parametrize("kwargs", [
    {"opening_time": "18:00", "closing_time": "08:00"},
    {"opening_time": "09:00", "closing_time": "09:00"},
    {"opening_time": "nine", "closing_time": "17:00"},
    {"slot_duration": 45},
    {"slot_duration": "hourly"},
    {"buffer_minutes": -5},
    {"max_dogs_per_slot": 0},
    {"operating_days": "someday"},
    {"operating_days": None},
    {"timezone": "Mars/Olympus"},
])
def test_from_raw_rejects_invalid_config(kwargs):
    values = {
        "operating_days": "everyday",
        "opening_time": "08:00",
        "closing_time": "18:00",
        "slot_duration": 60,
    }
    values.update(kwargs)
    with pytest.raises(InvalidScheduleConfig):
        FieldSchedule.from_raw(**values)


def test_from_raw_open_policy_for_unconfigured_days():
    schedule = FieldSchedule.from_raw(None, "08:00", "18:00", 60, unconfigured=UnconfiguredDays.OPEN)
    assert len(schedule.operating_days) == 7


@pytest.mark.parametrize("value, minutes", [
    ("00:00", 0),
    ("9:05", 9 * 60 + 5),
    ("24:00", 24 * 60),
    ("7:30PM", 19 * 60 + 30),
])
def test_time_str_to_minutes(value, minutes):
    assert time_str_to_minutes(value) == minutes


@pytest.mark.parametrize("value", ["24:30", "12:75", "noon", None])
def test_time_str_to_minutes_rejects(value):
    with pytest.raises(AmbiguousTimeFormat):
        time_str_to_minutes(value)


def test_minutes_to_time_str():
    assert minutes_to_time_str(6 * 60 + 5) == "06:05"


def test_to_local_wall_time_converts_aware_instants():
    moment = datetime(2026, 10, 19, 13, 0, tzinfo=timezone.utc)

    assert to_local_wall_time(moment, "Pacific/Auckland") == datetime(2026, 10, 20, 2, 0)
    assert to_local_wall_time(moment, "Europe/London") == datetime(2026, 10, 19, 14, 0)
    assert to_local_wall_time(datetime(2026, 10, 19, 9, 0), "Pacific/Auckland") == datetime(2026, 10, 19, 9, 0)


def test_to_local_wall_time_rejects_unknown_zone():
    with pytest.raises(InvalidScheduleConfig):
        to_local_wall_time(datetime(2026, 10, 19, 13, 0, tzinfo=timezone.utc), "Mars/Olympus")
