# backend/app/services/slots/availability.py
"""
Level 2: Slot availability for a date.

Annotates base slots (Level 1) with:
- Past: the slot already started relative to `now`
- Booked: overlaps an active booking widened by the buffer
- Capacity: dogs already booked against max_dogs_per_slot

Pure: `now` is always passed in, never read from a clock here.
"""

from datetime import date, datetime
from typing import Iterable

from .domain import Booking, CandidateSlot, Slot, SlotStatus
from .errors import AmbiguousTimeFormat


def resolve_availability(
    target_date: date,
    candidates: list[CandidateSlot],
    bookings: Iterable[Booking],
    buffer_minutes: int,
    now: datetime,
    max_dogs_per_slot: int | None = None,
    field_id: int | None = None,
) -> list[Slot]:
    """
    Mark each candidate slot as available, booked or past.

    Args:
        target_date: Field-local date of the slots
        candidates: Output of generate_slots / generate_day_slots
        bookings: Existing bookings; cancelled/completed ones are ignored
        buffer_minutes: Gap enforced around every booking
        now: Field-local wall-clock time (naive)
        max_dogs_per_slot: Capacity, or None to skip capacity counts
        field_id: Restrict bookings to this field when given

    Returns:
        Slots in candidate order. Past wins over Booked in `status`;
        both flags are kept.
    """
    intervals = _occupied_intervals(target_date, bookings, field_id)
    cutoff = _past_cutoff(target_date, now)

    result: list[Slot] = []
    for slot in candidates:
        is_past = cutoff is not None and slot.start_minute <= cutoff
        is_booked = any(
            _overlaps(slot.start_minute, slot.end_minute, start - buffer_minutes, end + buffer_minutes)
            for start, end, _ in intervals
        )
        booked_dogs = sum(
            dogs
            for start, end, dogs in intervals
            if _overlaps(slot.start_minute, slot.end_minute, start, end)
        )

        if is_past:
            status = SlotStatus.PAST
        elif is_booked:
            status = SlotStatus.BOOKED
        else:
            status = SlotStatus.AVAILABLE

        result.append(Slot(
            start_minute=slot.start_minute,
            end_minute=slot.end_minute,
            status=status,
            is_past=is_past,
            is_booked=is_booked,
            booked_dogs=booked_dogs,
            max_spots=max_dogs_per_slot,
        ))

    return result


def bookable_slots(slots: list[Slot], number_of_dogs: int = 1) -> list[Slot]:
    """Slots a new booking for `number_of_dogs` can take."""
    return [
        s for s in slots
        if s.status == SlotStatus.AVAILABLE
        and (s.available_spots is None or s.available_spots >= number_of_dogs)
    ]


# ── Helpers ──────────────────────────────────────────────────────────────


def _occupied_intervals(
    target_date: date,
    bookings: Iterable[Booking],
    field_id: int | None,
) -> list[tuple[int, int, int]]:
    """
    (start_min, end_min, dogs) for active bookings on target_date.

    Raises:
        AmbiguousTimeFormat: unparseable times or an end not after the start
    """
    intervals = []
    for booking in bookings:
        if not booking.is_active or booking.date != target_date:
            continue
        if field_id is not None and booking.field_id != field_id:
            continue
        start, end = booking.start_minute, booking.end_minute
        if end <= start:
            raise AmbiguousTimeFormat(f"{booking.start_time}-{booking.end_time}")
        intervals.append((start, end, booking.number_of_dogs))
    return intervals


def _past_cutoff(target_date: date, now: datetime) -> int | None:
    """
    Latest start minute that counts as past on target_date.

    Today: slots starting at or before the current hour boundary.
    Earlier dates: every slot. Later dates: none.
    """
    today = now.date()
    if target_date < today:
        return 24 * 60
    if target_date > today:
        return None
    return now.hour * 60


def _overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open interval intersection."""
    return start_a < end_b and end_a > start_b
