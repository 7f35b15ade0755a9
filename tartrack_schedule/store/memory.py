"""
In-memory schedule store.

Implements the same async interface as ScheduleStore without a backend,
for the console demo and for tests. Failures can be switched on per
operation to exercise degraded loads and failed saves.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Optional, Union

from tartrack_schedule.schemas.availability_schema import AvailabilityRecord, AvailabilityUpdate
from tartrack_schedule.schemas.booking_schema import AvailabilityCheck, BookingRecord, BookingStatus
from tartrack_schedule.store.client import NetworkError
from tartrack_schedule.utils import to_date_key

logger = logging.getLogger(__name__)


class InMemoryScheduleStore:
    """Dict-backed stand-in for the schedule backend."""

    def __init__(self) -> None:
        self._bookings: dict[str, list[BookingRecord]] = {}
        self._availability: dict[str, dict[str, AvailabilityRecord]] = {}
        self.fail_calendar = False
        self.fail_schedule = False
        self.fail_writes = False
        self.writes: list[AvailabilityUpdate] = []

    @staticmethod
    def _in_window(key: str, date_from, date_to) -> bool:
        if date_from and key < to_date_key(date_from):
            return False
        if date_to and key > to_date_key(date_to):
            return False
        return True

    async def get_calendar(
        self, driver_id: Union[int, str], date_from=None, date_to=None
    ) -> list[BookingRecord]:
        if self.fail_calendar:
            raise NetworkError("calendar unavailable")
        bookings = self._bookings.get(str(driver_id), [])
        return [b for b in bookings if self._in_window(b.date, date_from, date_to)]

    async def get_schedule(
        self, driver_id: Union[int, str], date_from=None, date_to=None
    ) -> list[AvailabilityRecord]:
        if self.fail_schedule:
            raise NetworkError("schedule unavailable")
        records = self._availability.get(str(driver_id), {})
        return [
            r for key, r in sorted(records.items()) if self._in_window(key, date_from, date_to)
        ]

    async def set_availability(self, update: AvailabilityUpdate) -> dict[str, Any]:
        if self.fail_writes:
            raise NetworkError("set-availability unavailable")
        record = AvailabilityRecord(
            owner_id=str(update.driver_id),
            date=update.date,
            is_available=update.is_available,
            unavailable_times=update.unavailable_times,
            notes=update.notes,
            updated_at=datetime.now(),
        )
        self._availability.setdefault(str(update.driver_id), {})[update.date] = record
        self.writes.append(update)
        logger.info("Availability stored for driver %s on %s", update.driver_id, update.date)
        return {"date": update.date, "is_available": update.is_available}

    async def check_availability(
        self, driver_id: Union[int, str], booking_date, booking_time: str
    ) -> AvailabilityCheck:
        key = to_date_key(booking_date)
        record = self._availability.get(str(driver_id), {}).get(key)
        if record is not None and not record.is_available:
            return AvailabilityCheck(available=False, conflict_reason="Driver unavailable on this date")
        if record is not None and booking_time in record.unavailable_times:
            return AvailabilityCheck(available=False, conflict_reason="Driver unavailable at this time")
        for booking in self._bookings.get(str(driver_id), []):
            if booking.date == key and booking.time == booking_time:
                return AvailabilityCheck(available=False, conflict_reason="Driver already booked")
        return AvailabilityCheck(available=True)

    async def accept_booking(
        self,
        driver_id: Union[int, str],
        booking_id: Optional[Union[int, str]],
        booking_date,
        booking_time: str,
        package_name: str = "",
        customer_name: str = "",
    ) -> dict[str, Any]:
        booking = BookingRecord(
            booking_id=str(booking_id or f"BK-{uuid.uuid4().hex[:6].upper()}"),
            date=to_date_key(booking_date),
            time=booking_time,
            status=BookingStatus.CONFIRMED,
            customer_ref=customer_name or None,
            package_ref=package_name or None,
        )
        self._bookings.setdefault(str(driver_id), []).append(booking)
        logger.info(
            "Booking %s accepted for driver %s on %s at %s",
            booking.booking_id, driver_id, booking.date, booking_time,
        )
        return {"booking_id": booking.booking_id}

    async def aclose(self) -> None:
        """Nothing to release."""

    def reset(self) -> None:
        """Clear all records. Used by test fixtures for isolation."""
        self._bookings.clear()
        self._availability.clear()
        self.writes.clear()
        self.fail_calendar = self.fail_schedule = self.fail_writes = False
