"""
Fixed catalog of hourly time slots and the helpers every picker uses.

Slots are ``"HH:00"`` strings. Comparison is always by hour, never by
string order.
"""

from datetime import date, datetime
from typing import Iterable, Optional

from tartrack_schedule.config import CATALOG_HOURS, settings


def hour_of(slot: str) -> int:
    """Return the hour of a ``"HH:MM"`` slot."""
    hours, _, _ = slot.partition(":")
    try:
        return int(hours)
    except ValueError:
        raise ValueError(f"Invalid time slot: {slot!r}") from None


def slot_for_hour(hour: int) -> str:
    return f"{hour:02d}:00"


def format_slot(slot: str) -> str:
    """Format a slot for display.

    Examples:
        >>> format_slot("08:00")
        '8:00 AM'
        >>> format_slot("13:00")
        '1:00 PM'
        >>> format_slot("00:00")
        '12:00 AM'
    """
    hours, _, minutes = slot.partition(":")
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minutes or '00'} {suffix}"


def compare_by_hour(a: str, b: str) -> int:
    """Three-way comparison of two slots by hour."""
    ha, hb = hour_of(a), hour_of(b)
    return (ha > hb) - (ha < hb)


def sort_slots(slots: Iterable[str]) -> list[str]:
    return sorted(slots, key=hour_of)


class TimeSlotCatalog:
    """An ordered, immutable set of bookable hourly slots."""

    def __init__(self, name: str, first_hour: int, last_hour: int) -> None:
        if not 0 <= first_hour <= last_hour <= 23:
            raise ValueError(f"Invalid catalog hours: {first_hour}-{last_hour}")
        self.name = name
        self.all: tuple[str, ...] = tuple(
            slot_for_hour(h) for h in range(first_hour, last_hour + 1)
        )

    def __repr__(self) -> str:
        return f"TimeSlotCatalog({self.name!r}, {self.first} - {self.last})"

    def __iter__(self):
        return iter(self.all)

    def __len__(self) -> int:
        return len(self.all)

    @property
    def first(self) -> str:
        return self.all[0]

    @property
    def last(self) -> str:
        return self.all[-1]

    @property
    def closing_bound(self) -> str:
        """The hour after the last slot, the latest possible range end."""
        return slot_for_hour(hour_of(self.last) + 1)

    def contains(self, slot: str) -> bool:
        return slot in self.all

    def after(self, slot: str) -> list[str]:
        """Slots at or after ``slot``."""
        hour = hour_of(slot)
        return [s for s in self.all if hour_of(s) >= hour]

    def strictly_after(self, min_slot: str) -> list[str]:
        """Slots whose hour is greater than ``min_slot``; feeds the "to" picker."""
        hour = hour_of(min_slot)
        return [s for s in self.all if hour_of(s) > hour]

    def next_after(self, slot: str) -> Optional[str]:
        later = self.strictly_after(slot)
        return later[0] if later else None

    def valid_slots_for_date(self, day: date, now: datetime) -> list[str]:
        """Slots still selectable on ``day``: all of them ahead of today,
        only those after the current hour today, none for a past date."""
        today = now.date()
        if day > today:
            return list(self.all)
        if day < today:
            return []
        return [s for s in self.all if hour_of(s) > now.hour]


STANDARD_SLOTS = TimeSlotCatalog("standard", *CATALOG_HOURS["standard"])
COMPACT_SLOTS = TimeSlotCatalog("compact", *CATALOG_HOURS["compact"])

_CATALOGS = {c.name: c for c in (STANDARD_SLOTS, COMPACT_SLOTS)}


def get_catalog(name: str) -> TimeSlotCatalog:
    try:
        return _CATALOGS[name]
    except KeyError:
        raise ValueError(f"Unknown slot catalog: {name}") from None


def default_catalog() -> TimeSlotCatalog:
    """The catalog selected by ``SLOT_CATALOG``."""
    return get_catalog(settings.calendar.slot_catalog)
