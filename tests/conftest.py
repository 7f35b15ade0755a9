"""Shared test fixtures and helpers."""

from datetime import datetime
from typing import Optional

import pytest

from tartrack_schedule.calendar.clock import FixedClock
from tartrack_schedule.calendar.session import ScheduleSession
from tartrack_schedule.calendar.time_slots import COMPACT_SLOTS, STANDARD_SLOTS
from tartrack_schedule.schemas.availability_schema import AvailabilityRecord
from tartrack_schedule.schemas.booking_schema import BookingRecord, BookingStatus
from tartrack_schedule.store.memory import InMemoryScheduleStore

# Wednesday 5 March 2025, mid-afternoon
NOW = datetime(2025, 3, 5, 15, 30)
DRIVER_ID = 42


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def catalog():
    return STANDARD_SLOTS


@pytest.fixture
def compact_catalog():
    return COMPACT_SLOTS


@pytest.fixture
def memory_store():
    store = InMemoryScheduleStore()
    yield store
    store.reset()


@pytest.fixture
def session(memory_store, clock, catalog):
    return ScheduleSession(memory_store, DRIVER_ID, clock=clock, catalog=catalog)


def make_booking(
    date: str,
    time: Optional[str] = "09:00",
    booking_id: str = "BK-1",
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> BookingRecord:
    """Helper to create a BookingRecord."""
    return BookingRecord(booking_id=booking_id, date=date, time=time, status=status)


def make_availability(
    date: str,
    is_available: bool = True,
    unavailable_times: Optional[list[str]] = None,
    notes: str = "",
) -> AvailabilityRecord:
    """Helper to create an AvailabilityRecord for the test driver."""
    return AvailabilityRecord(
        owner_id=str(DRIVER_ID),
        date=date,
        is_available=is_available,
        unavailable_times=unavailable_times or [],
        notes=notes,
    )


def seed(
    store: InMemoryScheduleStore,
    bookings: Optional[list[BookingRecord]] = None,
    availability: Optional[list[AvailabilityRecord]] = None,
) -> None:
    """Put records straight into an in-memory store for the test driver."""
    key = str(DRIVER_ID)
    for booking in bookings or []:
        store._bookings.setdefault(key, []).append(booking)
    for record in availability or []:
        store._availability.setdefault(key, {})[record.date] = record
