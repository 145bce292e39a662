# backend/app/services/slots/invalidator.py
"""
Cache invalidation for field slot grids.

Triggers:
✓ Field operating days / hours / slot duration changed → invalidate all dates

Does NOT trigger:
✗ Booking created/cancelled (Level 2 calculates on-the-fly)
"""

import logging
from datetime import date, timedelta
from redis import Redis

from .redis_store import SlotsRedisStore

logger = logging.getLogger(__name__)


def invalidate_field_cache(
    redis: Redis,
    field_id: int,
    dates: list[date] | None = None,
) -> int:
    """
    Invalidate cached grids for field.

    Args:
        redis: Redis client
        field_id: Field ID
        dates: List of specific dates to invalidate,
               or None to invalidate all cached dates

    Returns:
        Number of deleted cache keys
    """
    store = SlotsRedisStore(redis)
    deleted = store.delete_day_slots(field_id, dates)
    logger.info(f"Invalidated {deleted} cached slot grids for field {field_id}")
    return deleted


def get_affected_dates(
    date_start: date,
    date_end: date,
) -> list[date]:
    """
    Get list of dates in range [date_start, date_end].

    Args:
        date_start: Start date (inclusive)
        date_end: End date (inclusive)
    """
    if date_start > date_end:
        date_start, date_end = date_end, date_start

    dates = []
    current = date_start
    while current <= date_end:
        dates.append(current)
        current += timedelta(days=1)

    return dates
