# backend/app/services/slots/domain.py
"""
Value types consumed and produced by the scheduling engine.

FieldSchedule and Booking are immutable snapshots handed in per call.
Slot, CancellationDecision and RefundDecision are ephemeral outputs.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum, IntEnum

from .clock import get_zone
from .config import MINUTES_PER_DAY, minutes_to_time_str, time_str_to_minutes
from .errors import AmbiguousTimeFormat, InvalidScheduleConfig


class Weekday(IntEnum):
    """Weekday aligned with date.weekday() (Monday = 0)."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def of(cls, dt: date) -> "Weekday":
        return cls(dt.weekday())


ALL_DAYS = frozenset(Weekday)
WEEKDAYS = frozenset(d for d in Weekday if d <= Weekday.FRIDAY)
WEEKEND = frozenset({Weekday.SATURDAY, Weekday.SUNDAY})


class SlotDuration(IntEnum):
    """Granularity of bookable windows, in minutes."""
    THIRTY_MINUTES = 30
    ONE_HOUR = 60


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    PAST = "past"


class RecurrenceOption(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class FieldSchedule:
    """
    Parsed operating configuration of a field.

    Times are minutes since midnight. operating_days is already canonical;
    use from_raw() to build one from stored field data.
    """
    operating_days: frozenset[Weekday]
    opening_minute: int
    closing_minute: int
    slot_duration: SlotDuration
    buffer_minutes: int = 0
    max_dogs_per_slot: int = 1
    timezone: str = "Europe/London"

    def __post_init__(self):
        if not 0 <= self.opening_minute < self.closing_minute <= MINUTES_PER_DAY:
            raise InvalidScheduleConfig(
                f"Opening time {minutes_to_time_str(self.opening_minute)} must be "
                f"before closing time {minutes_to_time_str(self.closing_minute)}"
            )
        if self.buffer_minutes < 0:
            raise InvalidScheduleConfig(f"buffer_minutes must be >= 0, got {self.buffer_minutes}")
        if self.max_dogs_per_slot < 1:
            raise InvalidScheduleConfig(
                f"max_dogs_per_slot must be positive, got {self.max_dogs_per_slot}"
            )
        get_zone(self.timezone)

    @property
    def opening_time(self) -> str:
        return minutes_to_time_str(self.opening_minute)

    @property
    def closing_time(self) -> str:
        return minutes_to_time_str(self.closing_minute)

    @classmethod
    def from_raw(
        cls,
        operating_days,
        opening_time: str,
        closing_time: str,
        slot_duration: int,
        buffer_minutes: int = 0,
        max_dogs_per_slot: int = 1,
        timezone: str = "Europe/London",
        unconfigured=None,
    ) -> "FieldSchedule":
        """
        Parse stored field configuration once, at the boundary.

        Raises InvalidScheduleConfig for anything malformed.
        """
        from .calendar import resolve_operating_days
        from .config import UnconfiguredDays

        days = resolve_operating_days(
            operating_days,
            unconfigured=unconfigured or UnconfiguredDays.REJECT,
        )

        try:
            opening = time_str_to_minutes(opening_time)
            closing = time_str_to_minutes(closing_time)
        except AmbiguousTimeFormat as e:
            raise InvalidScheduleConfig(f"Malformed operating hours: {e}") from e

        try:
            duration = SlotDuration(int(slot_duration))
        except (TypeError, ValueError) as e:
            raise InvalidScheduleConfig(
                f"slot_duration must be 30 or 60 minutes, got {slot_duration!r}"
            ) from e

        return cls(
            operating_days=days,
            opening_minute=opening,
            closing_minute=closing,
            slot_duration=duration,
            buffer_minutes=buffer_minutes,
            max_dogs_per_slot=max_dogs_per_slot,
            timezone=timezone,
        )


@dataclass(frozen=True)
class Booking:
    """
    Existing booking as stored upstream.

    start_time/end_time keep the stored clock strings ("8:00AM").
    """
    field_id: int
    date: date
    start_time: str
    end_time: str
    status: BookingStatus
    number_of_dogs: int = 1
    recurrence: RecurrenceOption | None = None
    created_at: datetime | None = None
    id: int | None = None

    @property
    def is_active(self) -> bool:
        """Pending and confirmed bookings occupy time and capacity."""
        return self.status in (BookingStatus.PENDING, BookingStatus.CONFIRMED)

    @property
    def start_minute(self) -> int:
        return time_str_to_minutes(self.start_time)

    @property
    def end_minute(self) -> int:
        """Midnight ("12:00AM", "00:00") after a later start ends the day."""
        end = time_str_to_minutes(self.end_time)
        if end == 0 and self.start_minute > 0:
            return MINUTES_PER_DAY
        return end


def slot_label(start_minute: int) -> str:
    """Part of day by start time: morning < 12:00, afternoon < 18:00, evening after."""
    if start_minute < 12 * 60:
        return "morning"
    if start_minute < 18 * 60:
        return "afternoon"
    return "evening"


@dataclass(frozen=True)
class CandidateSlot:
    """Slot produced from opening hours only, without booking awareness."""
    start_minute: int
    end_minute: int

    @property
    def start_time(self) -> str:
        return minutes_to_time_str(self.start_minute)

    @property
    def end_time(self) -> str:
        return minutes_to_time_str(self.end_minute)

    @property
    def label(self) -> str:
        return slot_label(self.start_minute)


@dataclass(frozen=True)
class Slot:
    """Candidate slot annotated with its availability for a date."""
    start_minute: int
    end_minute: int
    status: SlotStatus
    is_past: bool
    is_booked: bool
    booked_dogs: int = 0
    max_spots: int | None = None

    @property
    def start_time(self) -> str:
        return minutes_to_time_str(self.start_minute)

    @property
    def end_time(self) -> str:
        return minutes_to_time_str(self.end_minute)

    @property
    def label(self) -> str:
        return slot_label(self.start_minute)

    @property
    def available_spots(self) -> int | None:
        if self.max_spots is None:
            return None
        return max(0, self.max_spots - self.booked_dogs)

    @property
    def is_fully_booked(self) -> bool:
        return self.available_spots == 0


@dataclass(frozen=True)
class CancellationDecision:
    hours_remaining: int | None
    eligible: bool


@dataclass(frozen=True)
class RefundDecision:
    hours_in_advance: int | None
    eligible: bool
