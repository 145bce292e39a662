import logging

from fastapi import Depends, FastAPI
from redis import Redis
from redis.exceptions import RedisError

from .config import settings
from .redis_client import get_redis
from .routers import bookings, slots

logging.basicConfig(level=settings.log_level)

app = FastAPI(title="Field Booking Scheduling API")

app.include_router(slots.router)
app.include_router(bookings.router)


@app.get("/health")
def health(redis: Redis | None = Depends(get_redis)):
    if redis is None:
        return {"redis": None}
    try:
        return {"redis": redis.ping()}
    except RedisError:
        return {"redis": False}
