"""
Day status resolution over one fetched month of bookings and availability.

Every calendar cell shows exactly one status, decided in this order:

1. Past dates:  PAST_WITH_BOOKING if anything was booked, else PAST
2. Bookings:    BOOKED, whatever the driver declared for the day
3. Declared:    UNAVAILABLE / PARTIAL / AVAILABLE from the availability record
4. Nothing:     UNSET

A booking comes from a confirmed transaction and always wins over the
driver's own availability, even if the day was marked unavailable later.
Statuses are recomputed on every call and never cached.

Usage:
    resolver = AvailabilityResolver(bookings, records, clock)
    resolver.status("2025-03-10")  # DayStatus.BOOKED
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from tartrack_schedule.calendar.editor import available_window
from tartrack_schedule.calendar.grid import month_bounds
from tartrack_schedule.calendar.temporal_guard import DayLike, is_date_in_past
from tartrack_schedule.calendar.time_slots import TimeSlotCatalog, default_catalog
from tartrack_schedule.schemas.availability_schema import AvailabilityRecord
from tartrack_schedule.schemas.booking_schema import BookingRecord
from tartrack_schedule.utils import parse_date_key, to_date_key

logger = logging.getLogger(__name__)


class DayStatus(str, Enum):
    """Display status of one calendar cell."""
    PAST = "past"
    PAST_WITH_BOOKING = "past_with_booking"
    BOOKED = "booked"
    UNAVAILABLE = "unavailable"
    PARTIAL = "partial"
    AVAILABLE = "available"
    UNSET = "unset"


@dataclass(frozen=True)
class CalendarDate:
    """One derived calendar cell; built per render, never persisted."""
    date: date
    status: DayStatus

    @property
    def key(self) -> str:
        return to_date_key(self.date)


@dataclass
class DayDetail:
    """Everything the day sheet shows after a cell is tapped."""
    date: str
    status: DayStatus
    bookings: list[BookingRecord] = field(default_factory=list)
    availability: Optional[AvailabilityRecord] = None
    is_past: bool = False
    available_window: Optional[str] = None

    @property
    def can_edit(self) -> bool:
        return not self.is_past

    @property
    def can_mark_unavailable(self) -> bool:
        """The quick "unavailable" action is only offered on days with no record."""
        return not self.is_past and self.availability is None


@dataclass(frozen=True)
class MonthSummary:
    booking_count: int
    scheduled_days: int

    def describe(self) -> str:
        bookings = f"{self.booking_count} booking{'s' if self.booking_count != 1 else ''}"
        days = f"{self.scheduled_days} day{'s' if self.scheduled_days != 1 else ''} scheduled"
        return f"{bookings} • {days}"


class AvailabilityResolver:
    """Read-only projection of a fetched month window into day statuses."""

    def __init__(
        self,
        bookings: Iterable[BookingRecord],
        availability: Iterable[AvailabilityRecord],
        clock,
        catalog: Optional[TimeSlotCatalog] = None,
    ) -> None:
        self.clock = clock
        self.catalog = catalog or default_catalog()
        self._bookings: dict[str, list[BookingRecord]] = defaultdict(list)
        self._availability: dict[str, AvailabilityRecord] = {}

        for booking in bookings:
            self._bookings[booking.date].append(booking)
        for record in availability:
            if record.date in self._availability:
                logger.warning("Duplicate availability record for %s; keeping the last", record.date)
            self._availability[record.date] = record

    def bookings_for(self, day: DayLike) -> list[BookingRecord]:
        return list(self._bookings.get(to_date_key(day), []))

    def availability_for(self, day: DayLike) -> Optional[AvailabilityRecord]:
        return self._availability.get(to_date_key(day))

    def status(self, day: DayLike) -> DayStatus:
        has_booking = bool(self._bookings.get(to_date_key(day)))

        if is_date_in_past(day, self.clock.now()):
            return DayStatus.PAST_WITH_BOOKING if has_booking else DayStatus.PAST

        if has_booking:
            return DayStatus.BOOKED

        record = self.availability_for(day)
        if record is not None:
            if not record.is_available:
                return DayStatus.UNAVAILABLE
            if record.unavailable_times:
                return DayStatus.PARTIAL
            return DayStatus.AVAILABLE

        return DayStatus.UNSET

    def is_interactive(self, day: DayLike) -> bool:
        """Empty past days cannot be opened."""
        return self.status(day) != DayStatus.PAST

    def calendar_dates(self, year: int, month: int) -> list[CalendarDate]:
        """A status for every day of a 0-based month."""
        first, last = month_bounds(year, month)
        return [
            CalendarDate(date.fromordinal(ordinal), self.status(date.fromordinal(ordinal)))
            for ordinal in range(first.toordinal(), last.toordinal() + 1)
        ]

    def day_detail(self, day: DayLike) -> DayDetail:
        key = to_date_key(day)
        record = self.availability_for(key)
        window = None
        if record is not None and record.is_partial:
            window = available_window(record, self.catalog)
        return DayDetail(
            date=key,
            status=self.status(key),
            bookings=self.bookings_for(key),
            availability=record,
            is_past=is_date_in_past(parse_date_key(key), self.clock.now()),
            available_window=window,
        )

    def summary(self) -> MonthSummary:
        return MonthSummary(
            booking_count=sum(len(items) for items in self._bookings.values()),
            scheduled_days=len(self._availability),
        )
