# backend/app/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from datetime import date
from typing import Literal
from pydantic import BaseModel, Field


class SlotInfo(BaseModel):
    """Information about a single slot."""
    start_time: str  # "HH:MM"
    end_time: str
    label: Literal["morning", "afternoon", "evening"]
    status: Literal["available", "booked", "past"]
    is_past: bool
    is_booked: bool

    # Capacity
    booked_dogs: int = 0
    available_spots: int | None = None
    max_spots: int | None = None

    model_config = {"from_attributes": True}


class FieldAvailabilityResponse(BaseModel):
    """Slots with status for a field on a date."""
    field_id: int
    date: date
    operating_days: list[str]
    operating_days_label: str
    opening_time: str
    closing_time: str
    slot_duration_minutes: int = Field(description="Slot length in minutes (30/60)")
    buffer_minutes: int
    max_dogs_per_slot: int
    reason: str | None = Field(None, description="'not_operating_day' when slots is empty because the field is closed")
    slots: list[SlotInfo]

    model_config = {"from_attributes": True}


class NextAvailableDateResponse(BaseModel):
    """First operating date on or after from_date."""
    field_id: int
    from_date: date
    next_date: date | None = None
    horizon_days: int
    reason: str | None = Field(None, description="'none_within_horizon' when next_date is null")

    model_config = {"from_attributes": True}


class RecurrenceOptionsResponse(BaseModel):
    """Recurrence choices in fixed order."""
    field_id: int
    options: list[Literal["none", "daily", "weekly", "monthly"]]

    model_config = {"from_attributes": True}


class SlotsDayStatus(BaseModel):
    """Status of a single day in calendar."""
    date: date
    is_operating_day: bool
    has_slots: bool
    open_slots_count: int = 0

    model_config = {"from_attributes": True}


class SlotsCalendarResponse(BaseModel):
    """Response with calendar of available days."""
    field_id: int
    start_date: date
    end_date: date
    days: list[SlotsDayStatus]

    # Metadata
    horizon_days: int
    slot_duration_minutes: int

    model_config = {"from_attributes": True}


class SlotsInvalidateResponse(BaseModel):
    field_id: int
    deleted_keys: int
    dates: list[date] | Literal["all"]


class RecurrenceDatesResponse(BaseModel):
    """Dates a recurring booking expands into."""
    field_id: int
    recurrence: Literal["none", "daily", "weekly", "monthly"]
    dates: list[date]

    model_config = {"from_attributes": True}
