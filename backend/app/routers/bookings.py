# backend/app/routers/bookings.py
# Read-only: booking creation and cancellation live in the booking service

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.bookings import (
    CancellationEligibilityRead,
    RefundEligibilityRead,
)
from ..services.field_availability import (
    calculate_cancellation_eligibility,
    calculate_refund_eligibility,
)
from ..services.slots.clock import Clock, get_clock
from .errors import scheduling_errors

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/{id}/cancellation-eligibility", response_model=CancellationEligibilityRead)
def get_cancellation_eligibility(
    id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    with scheduling_errors():
        result = calculate_cancellation_eligibility(db, id, clock.now())
    if result is None:
        raise HTTPException(status_code=404, detail="Not found")
    return result


@router.get("/{id}/refund-eligibility", response_model=RefundEligibilityRead)
def get_refund_eligibility(id: int, db: Session = Depends(get_db)):
    with scheduling_errors():
        result = calculate_refund_eligibility(db, id)
    if result is None:
        raise HTTPException(status_code=404, detail="Not found")
    return result
