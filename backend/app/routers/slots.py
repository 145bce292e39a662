# backend/app/routers/slots.py
"""
Slots API endpoints.

GET  /fields/{id}/availability         - Slots with status for a date
GET  /fields/{id}/next-available-date  - Default booking date
GET  /fields/{id}/recurrence-options   - Recurrence choices
GET  /fields/{id}/recurrence-dates     - Dates of a recurring series
GET  /fields/{id}/calendar             - Open slot counts per day
POST /fields/{id}/slots/invalidate     - Drop cached grids (admin)
"""

import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..schemas.slots import (
    FieldAvailabilityResponse,
    NextAvailableDateResponse,
    RecurrenceDatesResponse,
    RecurrenceOptionsResponse,
    SlotsCalendarResponse,
    SlotsInvalidateResponse,
)
from ..services.field_availability import (
    calculate_availability_calendar,
    calculate_field_availability,
    calculate_next_available_date,
    calculate_recurrence_dates,
    calculate_recurrence_options,
)
from ..services.slots import RecurrenceOption, invalidate_field_cache
from ..services.slots.clock import Clock, get_clock
from ..services.slots.invalidator import get_affected_dates
from .errors import scheduling_errors

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/fields", tags=["slots"])


@router.get("/{field_id}/availability", response_model=FieldAvailabilityResponse)
def get_field_availability(
    field_id: int,
    target_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    clock: Clock = Depends(get_clock),
):
    """Get slots with status for a field on a date."""
    with scheduling_errors():
        result = calculate_field_availability(
            db=db,
            field_id=field_id,
            target_date=target_date,
            now=clock.now(),
            redis=redis,
        )

    if result is None:
        raise HTTPException(status_code=404, detail="Field not found")
    return FieldAvailabilityResponse(**result)


@router.get("/{field_id}/next-available-date", response_model=NextAvailableDateResponse)
def get_next_available_date(
    field_id: int,
    from_date: date | None = Query(None, alias="from"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Get first operating date on or after `from` (defaults to the field's today)."""
    with scheduling_errors():
        result = calculate_next_available_date(db, field_id, clock.now(), from_date)

    if result is None:
        raise HTTPException(status_code=404, detail="Field not found")
    return NextAvailableDateResponse(**result)


@router.get("/{field_id}/recurrence-options", response_model=RecurrenceOptionsResponse)
def get_recurrence_options(
    field_id: int,
    db: Session = Depends(get_db),
):
    """Get recurrence options the field can satisfy."""
    with scheduling_errors():
        result = calculate_recurrence_options(db, field_id)

    if result is None:
        raise HTTPException(status_code=404, detail="Field not found")
    return RecurrenceOptionsResponse(**result)


@router.get("/{field_id}/recurrence-dates", response_model=RecurrenceDatesResponse)
def get_recurrence_dates(
    field_id: int,
    start_date: date,
    recurrence: RecurrenceOption,
    occurrences: int = Query(4, ge=1, le=52),
    db: Session = Depends(get_db),
):
    """Expand a recurring booking into the dates it would occupy."""
    with scheduling_errors():
        result = calculate_recurrence_dates(db, field_id, start_date, recurrence, occurrences)

    if result is None:
        raise HTTPException(status_code=404, detail="Field not found")
    return RecurrenceDatesResponse(**result)


@router.get("/{field_id}/calendar", response_model=SlotsCalendarResponse)
def get_slots_calendar(
    field_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    clock: Clock = Depends(get_clock),
):
    """Get calendar of open slot counts for a field (clamped to the horizon)."""
    with scheduling_errors():
        result = calculate_availability_calendar(
            db, field_id, clock.now(), start_date, end_date, redis=redis
        )

    if result is None:
        raise HTTPException(status_code=404, detail="Field not found")
    return SlotsCalendarResponse(**result)


@router.post("/{field_id}/slots/invalidate", response_model=SlotsInvalidateResponse)
def invalidate_slots_cache(
    field_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    redis: Redis | None = Depends(get_redis),
):
    """Manually invalidate slots cache for field (admin endpoint)."""
    dates = None
    if start_date is not None:
        dates = get_affected_dates(start_date, end_date or start_date)

    deleted = 0
    if redis is not None:
        try:
            deleted = invalidate_field_cache(redis, field_id, dates)
        except RedisError:
            logger.exception(f"Slot cache invalidation failed for field {field_id}")
            raise HTTPException(status_code=503, detail="Slot cache unavailable")

    return SlotsInvalidateResponse(
        field_id=field_id,
        deleted_keys=deleted,
        dates=dates if dates else "all",
    )
