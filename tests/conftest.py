"""Shared test fixtures and helpers."""

from typing import Optional

import pytest

from studiobook.engine.draft import BookingDraft
from studiobook.schemas.booking_schema import Booking, BookingStatus
from studiobook.store.booking_store import BookingStore
from studiobook.store.persistence import BookingRepository, InMemoryKeyValueStore

TEST_KEY = "test_bookings"


def make_booking(
    booking_id: str = "b-001",
    client_name: str = "Arun Kumar",
    date: str = "2024-06-01",
    start_time: str = "10:00",
    duration_hours: float = 2,
    type: str = "Vocal Recording",
    status: BookingStatus = BookingStatus.CONFIRMED,
    phone_number: Optional[str] = "9840123456",
    created_at: int = 1717200000000,
    **kwargs,
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    return Booking(
        id=booking_id,
        client_name=client_name,
        date=date,
        start_time=start_time,
        duration_hours=duration_hours,
        type=type,
        status=status,
        phone_number=phone_number,
        created_at=created_at,
        **kwargs,
    )


def make_draft(**overrides) -> BookingDraft:
    """A fully filled draft that can be created as-is."""
    values = {
        "client_name": "Arun Kumar",
        "phone_number": "9840123456",
        "date": "2024-06-01",
        "start_time": "10:00",
        "duration_hours": 2.0,
        "type": "Vocal Recording",
    }
    values.update(overrides)
    return BookingDraft(**values)


class SequentialIds:
    """Deterministic id factory: b-001, b-002, ..."""

    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"b-{self.count:03d}"


class FixedClock:
    def __init__(self, now: int = 1717200000000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(kv):
    return BookingRepository(kv, TEST_KEY)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store(repository, clock):
    return BookingStore(repository, id_factory=SequentialIds(), clock=clock)
