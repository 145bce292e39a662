# backend/app/services/slots/__init__.py
"""
Slots scheduling module.

Level 1: Base slot grid of a field (cached in Redis Sorted Sets)
Level 2: Availability for a date (calculated on-the-fly)
Policy:  Recurrence options and cancellation window
"""

from .config import SchedulingConfig, UnconfiguredDays, get_scheduling_config
from .domain import (
    Booking,
    BookingStatus,
    CancellationDecision,
    CandidateSlot,
    FieldSchedule,
    RecurrenceOption,
    RefundDecision,
    Slot,
    SlotDuration,
    SlotStatus,
    Weekday,
)
from .errors import (
    AmbiguousTimeFormat,
    InvalidScheduleConfig,
    RecurrenceNotAllowed,
    SchedulingError,
)
from .calendar import find_next_operating_date, is_operating_day, resolve_operating_days
from .calculator import generate_day_slots, generate_slots
from .availability import resolve_availability
from .recurrence import expand_recurrence, recurrence_options
from .policy import evaluate_cancellation, evaluate_refund
from .redis_store import SlotsRedisStore, grid_fingerprint
from .invalidator import invalidate_field_cache

__all__ = [
    "SchedulingConfig",
    "UnconfiguredDays",
    "get_scheduling_config",
    "Booking",
    "BookingStatus",
    "CancellationDecision",
    "CandidateSlot",
    "FieldSchedule",
    "RecurrenceOption",
    "RefundDecision",
    "Slot",
    "SlotDuration",
    "SlotStatus",
    "Weekday",
    "AmbiguousTimeFormat",
    "InvalidScheduleConfig",
    "RecurrenceNotAllowed",
    "SchedulingError",
    "find_next_operating_date",
    "is_operating_day",
    "resolve_operating_days",
    "generate_day_slots",
    "generate_slots",
    "resolve_availability",
    "expand_recurrence",
    "recurrence_options",
    "evaluate_cancellation",
    "evaluate_refund",
    "SlotsRedisStore",
    "grid_fingerprint",
    "invalidate_field_cache",
]
