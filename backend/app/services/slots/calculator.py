# backend/app/services/slots/calculator.py
"""
Level 1: Base slot grid of a field.

Produces the ordered candidate slots for one date from opening hours
and slot duration only.

Contains:
✓ operating days of the field
✓ opening/closing time
✓ slot duration

Does NOT contain:
✗ Bookings (checked at Level 2)
✗ Current time (checked at Level 2)
"""

from datetime import date

from .calendar import is_operating_day
from .domain import CandidateSlot, FieldSchedule, SlotDuration, slot_label
from .errors import InvalidScheduleConfig


def generate_slots(
    opening_minute: int,
    closing_minute: int,
    duration: SlotDuration | int,
) -> list[CandidateSlot]:
    """
    Generate contiguous slots between opening and closing.

    A slot ending exactly at closing is kept; one that would overshoot
    is dropped, never truncated.
    """
    if opening_minute >= closing_minute:
        raise InvalidScheduleConfig(
            f"Opening ({opening_minute}) must be before closing ({closing_minute})"
        )
    step = int(duration)
    if step <= 0:
        raise InvalidScheduleConfig(f"Slot duration must be positive, got {duration}")

    slots: list[CandidateSlot] = []
    t = opening_minute
    while t + step <= closing_minute:
        slots.append(CandidateSlot(start_minute=t, end_minute=t + step))
        t += step

    return slots


def generate_day_slots(schedule: FieldSchedule, target_date: date) -> list[CandidateSlot]:
    """
    Calculate candidate slots for a field on a specific date.

    Returns:
        Ordered slots. Empty list = field closed that day.
    """
    if not is_operating_day(target_date, schedule.operating_days):
        return []
    return generate_slots(
        schedule.opening_minute,
        schedule.closing_minute,
        schedule.slot_duration,
    )


def group_by_label(slots: list) -> dict[str, list]:
    """Split slots into morning / afternoon / evening, keeping order."""
    groups: dict[str, list] = {"morning": [], "afternoon": [], "evening": []}
    for slot in slots:
        groups[slot_label(slot.start_minute)].append(slot)
    return groups
