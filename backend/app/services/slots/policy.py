# backend/app/services/slots/policy.py
"""
Cancellation window policy.

A confirmed booking can be cancelled or rescheduled only while at least
`threshold_hours` remain before it starts. The same decision gates both
actions. Decisions depend on `now` and are never cached.
"""

import math
from datetime import datetime, timedelta

from .config import parse_12_hour_minutes
from .domain import Booking, BookingStatus, CancellationDecision, RefundDecision


def booking_start_instant(booking: Booking) -> datetime:
    """
    Combine booking date with its 12-hour start time ("8:00AM").

    Raises:
        AmbiguousTimeFormat: start time is not a valid 12-hour clock string
    """
    minutes = parse_12_hour_minutes(booking.start_time)
    return datetime.combine(booking.date, datetime.min.time()) + timedelta(minutes=minutes)


def evaluate_cancellation(
    booking: Booking,
    now: datetime,
    threshold_hours: int = 24,
) -> CancellationDecision:
    """
    Compute hours remaining and cancel/reschedule eligibility.

    Only confirmed bookings are evaluated; any other status is never
    eligible and carries no hours_remaining.
    """
    if booking.status != BookingStatus.CONFIRMED:
        return CancellationDecision(hours_remaining=None, eligible=False)

    hours_remaining = _floor_hours(booking_start_instant(booking) - now)
    return CancellationDecision(
        hours_remaining=hours_remaining,
        eligible=hours_remaining >= threshold_hours,
    )


def can_cancel(booking: Booking, now: datetime, threshold_hours: int = 24) -> bool:
    return evaluate_cancellation(booking, now, threshold_hours).eligible


def can_reschedule(booking: Booking, now: datetime, threshold_hours: int = 24) -> bool:
    return evaluate_cancellation(booking, now, threshold_hours).eligible


def evaluate_refund(booking: Booking, threshold_hours: int = 24) -> RefundDecision:
    """
    Full refund is due when the booking was made at least
    `threshold_hours` before its start. created_at is field-local wall time.
    """
    if booking.created_at is None:
        return RefundDecision(hours_in_advance=None, eligible=False)

    hours = _floor_hours(booking_start_instant(booking) - booking.created_at)
    return RefundDecision(hours_in_advance=hours, eligible=hours >= threshold_hours)


def _floor_hours(delta: timedelta) -> int:
    return math.floor(delta.total_seconds() / 3600)
