"""Shared test fixtures."""
import json
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.database import get_db
from backend.app.main import app
from backend.app.models.generated import Base, Bookings, Fields
from backend.app.redis_client import get_redis
from backend.app.services.slots.clock import FixedClock, get_clock


@pytest.fixture
def db():
    """In-memory SQLite session with the schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 10, 19, 7, 0))


@pytest.fixture
def client(db, clock):
    """API client on the in-memory database, fixed clock, no Redis."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_redis] = lambda: None
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def add_field(db):
    """Insert a field row; returns its id."""
    def _create(days="everyday", **kwargs) -> int:
        values = {
            "name": "Meadow Paddock",
            "operating_days": json.dumps(days),
            "opening_time": "08:00",
            "closing_time": "18:00",
            "slot_duration_minutes": 60,
            "buffer_minutes": 0,
            "max_dogs_per_slot": 4,
        }
        values.update(kwargs)
        field = Fields(**values)
        db.add(field)
        db.commit()
        return field.id
    return _create


@pytest.fixture
def add_booking(db):
    """Insert a booking row; returns its id."""
    def _create(field_id: int, booking_date: date, start_time: str, end_time: str, **kwargs) -> int:
        values = {
            "field_id": field_id,
            "user_id": 1,
            "date": booking_date.isoformat(),
            "start_time": start_time,
            "end_time": end_time,
            "status": "confirmed",
            "number_of_dogs": 1,
        }
        values.update(kwargs)
        booking = Bookings(**values)
        db.add(booking)
        db.commit()
        return booking.id
    return _create

