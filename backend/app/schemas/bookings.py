# backend/app/schemas/bookings.py

from pydantic import BaseModel


class CancellationEligibilityRead(BaseModel):
    booking_id: int
    status: str

    hours_remaining: int | None = None
    eligible: bool
    can_cancel: bool
    can_reschedule: bool

    threshold_hours: int

    model_config = {"from_attributes": True}


class RefundEligibilityRead(BaseModel):
    booking_id: int

    hours_in_advance: int | None = None
    eligible: bool

    threshold_hours: int

    model_config = {"from_attributes": True}
