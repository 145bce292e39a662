# backend/app/services/field_availability.py
"""
Field availability for API callers.

Reads field configuration and bookings from the database, converts
them into engine snapshots once, and composes the slots engine:

- day slots with status (calendar + generator + resolver)
- next operating date
- recurrence options and recurring series dates
- per-day calendar of open slots
- cancellation / refund eligibility of a booking

`now` is always passed in by the caller (injected clock).
"""

import json
import logging
from datetime import date, datetime, timedelta, timezone
from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from .slots import (
    Booking,
    BookingStatus,
    FieldSchedule,
    RecurrenceOption,
    SchedulingConfig,
    SlotsRedisStore,
    SlotStatus,
    expand_recurrence,
    find_next_operating_date,
    generate_day_slots,
    get_scheduling_config,
    grid_fingerprint,
    is_operating_day,
    recurrence_options,
    resolve_availability,
)
from .slots.calendar import describe_operating_days
from .slots.clock import to_local_wall_time
from .slots.domain import CandidateSlot, Slot
from .slots.policy import evaluate_cancellation, evaluate_refund

logger = logging.getLogger(__name__)

NOT_OPERATING_DAY = "not_operating_day"
NONE_WITHIN_HORIZON = "none_within_horizon"


def calculate_field_availability(
    db: Session,
    field_id: int,
    target_date: date,
    now: datetime,
    config: SchedulingConfig | None = None,
    redis: Redis | None = None,
) -> dict | None:
    """
    Calculate slots with status for a field on a date.

    Returns:
        Dict for FieldAvailabilityResponse, or None if field not found.
    """
    config = config or get_scheduling_config()

    field = _get_field(db, field_id)
    if not field:
        return None
    schedule = load_field_schedule(field, config)
    local_now = to_local_wall_time(now, schedule.timezone)

    result = {
        "field_id": field_id,
        "date": target_date.isoformat(),
        "operating_days": [d.label for d in sorted(schedule.operating_days)],
        "operating_days_label": describe_operating_days(schedule.operating_days),
        "opening_time": schedule.opening_time,
        "closing_time": schedule.closing_time,
        "slot_duration_minutes": int(schedule.slot_duration),
        "buffer_minutes": schedule.buffer_minutes,
        "max_dogs_per_slot": schedule.max_dogs_per_slot,
        "reason": None,
        "slots": [],
    }

    if not is_operating_day(target_date, schedule.operating_days):
        result["reason"] = NOT_OPERATING_DAY
        return result

    candidates = _get_base_slots(field_id, schedule, target_date, config, redis)
    bookings = get_active_bookings(db, field_id, target_date, schedule.timezone)

    slots = resolve_availability(
        target_date,
        candidates,
        bookings,
        schedule.buffer_minutes,
        local_now,
        max_dogs_per_slot=schedule.max_dogs_per_slot,
        field_id=field_id,
    )
    result["slots"] = [slot_to_dict(s) for s in slots]
    return result


def calculate_next_available_date(
    db: Session,
    field_id: int,
    now: datetime,
    start_date: date | None = None,
    config: SchedulingConfig | None = None,
) -> dict | None:
    """
    Find the default booking date for a field.

    start_date defaults to today in the field's timezone.

    Returns:
        Dict with `next_date` (None + reason when nothing within horizon),
        or None if field not found.
    """
    config = config or get_scheduling_config()

    field = _get_field(db, field_id)
    if not field:
        return None
    schedule = load_field_schedule(field, config)

    if start_date is None:
        start_date = to_local_wall_time(now, schedule.timezone).date()

    found = find_next_operating_date(start_date, schedule.operating_days, config.horizon_days)
    if found is None:
        logger.warning(
            f"Field {field_id} has no operating date within "
            f"{config.horizon_days} days of {start_date.isoformat()}"
        )

    return {
        "field_id": field_id,
        "from_date": start_date.isoformat(),
        "next_date": found.isoformat() if found else None,
        "horizon_days": config.horizon_days,
        "reason": None if found else NONE_WITHIN_HORIZON,
    }


def calculate_recurrence_options(
    db: Session,
    field_id: int,
    config: SchedulingConfig | None = None,
) -> dict | None:
    """Recurrence options the field can satisfy. None if field not found."""
    config = config or get_scheduling_config()

    field = _get_field(db, field_id)
    if not field:
        return None
    schedule = load_field_schedule(field, config)

    return {
        "field_id": field_id,
        "options": [o.value for o in recurrence_options(schedule.operating_days)],
    }


def calculate_recurrence_dates(
    db: Session,
    field_id: int,
    start_date: date,
    option: RecurrenceOption,
    occurrences: int,
    config: SchedulingConfig | None = None,
) -> dict | None:
    """
    Concrete dates of a recurring booking series.

    Raises:
        RecurrenceNotAllowed: pattern not offered or closed start date
    """
    config = config or get_scheduling_config()

    field = _get_field(db, field_id)
    if not field:
        return None
    schedule = load_field_schedule(field, config)

    dates = expand_recurrence(start_date, option, schedule.operating_days, occurrences)
    return {
        "field_id": field_id,
        "recurrence": option.value,
        "dates": [d.isoformat() for d in dates],
    }


def calculate_availability_calendar(
    db: Session,
    field_id: int,
    now: datetime,
    start_date: date | None = None,
    end_date: date | None = None,
    config: SchedulingConfig | None = None,
    redis: Redis | None = None,
) -> dict | None:
    """
    Per-day open slot counts for a date range.

    The range is clamped to [today, today + horizon_days - 1], today
    being the field-local date. Missing bounds default to that window.

    Returns:
        Dict for SlotsCalendarResponse, or None if field not found.
    """
    config = config or get_scheduling_config()

    field = _get_field(db, field_id)
    if not field:
        return None
    schedule = load_field_schedule(field, config)
    local_now = to_local_wall_time(now, schedule.timezone)

    today = local_now.date()
    last_day = today + timedelta(days=config.horizon_days - 1)
    start_date = min(max(start_date or today, today), last_day)
    end_date = max(min(end_date or last_day, last_day), start_date)

    bookings = _get_bookings_in_range(db, field_id, start_date, end_date, schedule.timezone)

    days = []
    current = start_date
    while current <= end_date:
        operating = is_operating_day(current, schedule.operating_days)
        open_count = 0
        if operating:
            candidates = _get_base_slots(field_id, schedule, current, config, redis)
            slots = resolve_availability(
                current,
                candidates,
                bookings.get(current, []),
                schedule.buffer_minutes,
                local_now,
                field_id=field_id,
            )
            open_count = sum(1 for s in slots if s.status == SlotStatus.AVAILABLE)

        days.append({
            "date": current.isoformat(),
            "is_operating_day": operating,
            "has_slots": open_count > 0,
            "open_slots_count": open_count,
        })
        current += timedelta(days=1)

    return {
        "field_id": field_id,
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        "days": days,
        "horizon_days": config.horizon_days,
        "slot_duration_minutes": int(schedule.slot_duration),
    }


def calculate_cancellation_eligibility(
    db: Session,
    booking_id: int,
    now: datetime,
    config: SchedulingConfig | None = None,
) -> dict | None:
    """Cancel/reschedule eligibility of a booking. None if not found."""
    config = config or get_scheduling_config()

    loaded = _load_booking_with_zone(db, booking_id, config)
    if loaded is None:
        return None
    booking, tz_name = loaded

    decision = evaluate_cancellation(
        booking,
        to_local_wall_time(now, tz_name),
        config.cancellation_threshold_hours,
    )
    return {
        "booking_id": booking_id,
        "status": booking.status.value,
        "hours_remaining": decision.hours_remaining,
        "eligible": decision.eligible,
        "can_cancel": decision.eligible,
        "can_reschedule": decision.eligible,
        "threshold_hours": config.cancellation_threshold_hours,
    }


def calculate_refund_eligibility(
    db: Session,
    booking_id: int,
    config: SchedulingConfig | None = None,
) -> dict | None:
    """Full-refund eligibility of a booking. None if not found."""
    config = config or get_scheduling_config()

    loaded = _load_booking_with_zone(db, booking_id, config)
    if loaded is None:
        return None
    booking, _ = loaded

    decision = evaluate_refund(booking, config.refund_threshold_hours)
    return {
        "booking_id": booking_id,
        "hours_in_advance": decision.hours_in_advance,
        "eligible": decision.eligible,
        "threshold_hours": config.refund_threshold_hours,
    }


# ── Conversion ───────────────────────────────────────────────────────────


def load_field_schedule(field, config: SchedulingConfig) -> FieldSchedule:
    """
    Parse a field row into FieldSchedule.

    operating_days is stored as JSON; a bare keyword ("everyday")
    is accepted as well.

    Raises:
        InvalidScheduleConfig
    """
    raw_days = field.operating_days
    if isinstance(raw_days, str):
        try:
            raw_days = json.loads(raw_days)
        except json.JSONDecodeError:
            pass

    return FieldSchedule.from_raw(
        raw_days,
        opening_time=field.opening_time,
        closing_time=field.closing_time,
        slot_duration=field.slot_duration_minutes,
        buffer_minutes=field.buffer_minutes or 0,
        max_dogs_per_slot=field.max_dogs_per_slot or 1,
        timezone=field.timezone or config.default_timezone,
        unconfigured=config.unconfigured_days,
    )


def booking_from_row(row, tz_name: str) -> Booking:
    """Build engine Booking; created_at (UTC in DB) becomes field-local."""
    created_at = None
    if row.created_at:
        created_at = datetime.fromisoformat(row.created_at)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        created_at = to_local_wall_time(created_at, tz_name)

    return Booking(
        id=row.id,
        field_id=row.field_id,
        date=date.fromisoformat(row.date),
        start_time=row.start_time,
        end_time=row.end_time,
        status=BookingStatus(row.status),
        number_of_dogs=row.number_of_dogs or 1,
        recurrence=RecurrenceOption(row.recurrence) if row.recurrence else None,
        created_at=created_at,
    )


def slot_to_dict(slot: Slot) -> dict:
    return {
        "start_time": slot.start_time,
        "end_time": slot.end_time,
        "label": slot.label,
        "status": slot.status.value,
        "is_past": slot.is_past,
        "is_booked": slot.is_booked,
        "booked_dogs": slot.booked_dogs,
        "available_spots": slot.available_spots,
        "max_spots": slot.max_spots,
    }


# ── Base slots (Level 1 with cache) ─────────────────────────────────────


def _get_base_slots(
    field_id: int,
    schedule: FieldSchedule,
    target_date: date,
    config: SchedulingConfig,
    redis: Redis | None,
) -> list[CandidateSlot]:
    """Get base slot grid, using Redis cache when available."""
    if redis is None:
        return generate_day_slots(schedule, target_date)

    store = SlotsRedisStore(redis, config)
    fingerprint = grid_fingerprint(schedule)
    try:
        cached = store.get_day_slots(field_id, target_date, fingerprint)
        if cached is not None:
            return cached

        # Cache miss: calculate and store
        slots = generate_day_slots(schedule, target_date)
        store.store_day_slots(field_id, target_date, slots, fingerprint)
        logger.info(f"Cached slot grid for field {field_id} on {target_date.isoformat()}")
        return slots
    except RedisError:
        logger.exception(f"Slot cache unavailable for field {field_id}, calculating on the fly")
        return generate_day_slots(schedule, target_date)


# ── Database helpers ─────────────────────────────────────────────────────


def _get_field(db: Session, field_id: int):
    """Get active field by ID."""
    from ..models.generated import Fields
    return db.query(Fields).filter(
        Fields.id == field_id,
        Fields.is_active == 1,
    ).first()


def get_active_bookings(
    db: Session,
    field_id: int,
    target_date: date,
    tz_name: str,
) -> list[Booking]:
    """Get pending/confirmed bookings for field on date."""
    from ..models.generated import Bookings

    rows = (
        db.query(Bookings)
        .filter(
            Bookings.field_id == field_id,
            Bookings.date == target_date.isoformat(),
            Bookings.status.in_([BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value]),
        )
        .all()
    )
    return [booking_from_row(r, tz_name) for r in rows]


def _get_bookings_in_range(
    db: Session,
    field_id: int,
    start_date: date,
    end_date: date,
    tz_name: str,
) -> dict[date, list[Booking]]:
    """Active bookings for field in [start_date, end_date], grouped by date."""
    from ..models.generated import Bookings

    rows = (
        db.query(Bookings)
        .filter(
            Bookings.field_id == field_id,
            Bookings.date >= start_date.isoformat(),
            Bookings.date <= end_date.isoformat(),
            Bookings.status.in_([BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value]),
        )
        .all()
    )

    grouped: dict[date, list[Booking]] = {}
    for row in rows:
        booking = booking_from_row(row, tz_name)
        grouped.setdefault(booking.date, []).append(booking)
    return grouped


def _load_booking_with_zone(
    db: Session,
    booking_id: int,
    config: SchedulingConfig,
) -> tuple[Booking, str] | None:
    """Get booking by ID together with its field's timezone."""
    from ..models.generated import Bookings

    row = db.get(Bookings, booking_id)
    if not row:
        return None

    tz_name = (row.field.timezone if row.field else None) or config.default_timezone
    return booking_from_row(row, tz_name), tz_name
