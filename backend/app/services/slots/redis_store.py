# backend/app/services/slots/redis_store.py
"""
Redis storage for base slot grids using Sorted Sets.

Key format: slots:day:{field_id}:{date}:{fingerprint}
Value: Sorted Set where member = "HH:MM-HH:MM", score = start minute.

Only the booking-independent grid (Level 1) is cached. Bookings are
always read fresh.
Sentinel: "__empty__" with score=-1 marks "calculated, field closed".
The fingerprint encodes hours, duration and days, so a changed schedule
never reads a grid built from the old one.
"""

from datetime import date
from redis import Redis

from .config import SchedulingConfig, get_scheduling_config, time_str_to_minutes
from .domain import CandidateSlot, FieldSchedule


EMPTY_SENTINEL = "__empty__"


def grid_fingerprint(schedule: FieldSchedule) -> str:
    """Tag of the schedule parts that shape the base grid."""
    days_mask = sum(1 << int(d) for d in schedule.operating_days)
    return (
        f"{schedule.opening_minute}-{schedule.closing_minute}"
        f"-{int(schedule.slot_duration)}-{days_mask}"
    )


class SlotsRedisStore:
    """Redis storage wrapper using Sorted Sets for slot grids."""

    KEY_PREFIX = "slots:day"

    def __init__(self, redis: Redis, config: SchedulingConfig | None = None):
        self.redis = redis
        self.config = config or get_scheduling_config()

    def _key(self, field_id: int, dt: date, fingerprint: str) -> str:
        return f"{self.KEY_PREFIX}:{field_id}:{dt.isoformat()}:{fingerprint}"

    # ── Write ────────────────────────────────────────────────────────────

    def store_day_slots(
        self,
        field_id: int,
        dt: date,
        slots: list[CandidateSlot],
        fingerprint: str,
    ) -> None:
        """
        Store calculated grid for a day.

        Args:
            field_id: Field ID
            dt: Target date
            slots: Candidate slots. Empty list → sentinel is stored.
            fingerprint: grid_fingerprint() of the schedule
        """
        self.store_multiple_days(field_id, {dt: slots}, fingerprint)

    def store_multiple_days(
        self,
        field_id: int,
        days_slots: dict[date, list[CandidateSlot]],
        fingerprint: str,
    ) -> None:
        """Batch store grids for multiple days via pipeline."""
        if not days_slots:
            return

        pipe = self.redis.pipeline()
        for dt, slots in days_slots.items():
            key = self._key(field_id, dt, fingerprint)
            pipe.delete(key)

            if slots:
                mapping = {
                    f"{s.start_time}-{s.end_time}": s.start_minute
                    for s in slots
                }
                pipe.zadd(key, mapping)
            else:
                pipe.zadd(key, {EMPTY_SENTINEL: -1})
            pipe.expire(key, self.config.cache_ttl_seconds)

        pipe.execute()

    # ── Read ─────────────────────────────────────────────────────────────

    def get_day_slots(
        self,
        field_id: int,
        dt: date,
        fingerprint: str,
    ) -> list[CandidateSlot] | None:
        """
        Get cached grid for a day.

        Returns:
            Ordered slots (possibly empty), or None on cache miss.
        """
        key = self._key(field_id, dt, fingerprint)
        if not self.redis.exists(key):
            return None

        members = self.redis.zrangebyscore(key, 0, "+inf")
        slots = []
        for m in members:
            value = m.decode() if isinstance(m, bytes) else m
            if value == EMPTY_SENTINEL:
                continue
            start, end = value.split("-")
            slots.append(CandidateSlot(
                start_minute=time_str_to_minutes(start),
                end_minute=time_str_to_minutes(end),
            ))
        return slots

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_day_slots(
        self,
        field_id: int,
        dates: list[date] | None = None,
    ) -> int:
        """
        Delete cached grids.

        Args:
            field_id: Field ID
            dates: Specific dates, or None to delete all for field.

        Returns:
            Number of deleted keys.
        """
        if dates:
            keys = []
            for dt in dates:
                keys.extend(self.redis.keys(f"{self.KEY_PREFIX}:{field_id}:{dt.isoformat()}:*"))
        else:
            pattern = f"{self.KEY_PREFIX}:{field_id}:*"
            keys = self.redis.keys(pattern)

        if not keys:
            return 0

        return self.redis.delete(*keys)
