"""Builders for engine snapshots used across tests."""
from datetime import date

from backend.app.services.slots import Booking, BookingStatus, FieldSchedule

# 2026-10-19 is a Monday
MONDAY = date(2026, 10, 19)
SATURDAY = date(2026, 10, 24)
SUNDAY = date(2026, 10, 25)


def make_schedule(days="everyday", opening="08:00", closing="18:00", duration=60, **kwargs) -> FieldSchedule:
    return FieldSchedule.from_raw(days, opening, closing, duration, **kwargs)


def make_booking(start="10:00AM", end="11:00AM", booking_date=MONDAY, **kwargs) -> Booking:
    values = {
        "field_id": 1,
        "date": booking_date,
        "start_time": start,
        "end_time": end,
        "status": BookingStatus.CONFIRMED,
    }
    values.update(kwargs)
    return Booking(**values)
