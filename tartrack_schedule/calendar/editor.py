"""
Availability editor: Range and Custom input modes and their canonical form.

Both modes reduce to the same persisted shape, a list of unavailable
slots plus a human-readable note. Re-opening a saved day reverses that
reduction: a contiguous run of available hours comes back as a Range,
anything else as a Custom selection. A Custom selection that happens to
be contiguous therefore reloads as a Range.

Usage:
    editor = AvailabilityEditor("2025-03-10")
    editor.set_from("09:00")
    editor.set_to("17:00")
    draft = editor.canonicalize()
    # draft.unavailable_times == ["06:00", "07:00", "08:00", "17:00", ...]
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from tartrack_schedule.calendar.time_slots import (
    TimeSlotCatalog,
    default_catalog,
    format_slot,
    hour_of,
    slot_for_hour,
    sort_slots,
)
from tartrack_schedule.config import settings
from tartrack_schedule.schemas.availability_schema import AvailabilityRecord
from tartrack_schedule.utils import to_date_key

logger = logging.getLogger(__name__)

MARKED_UNAVAILABLE_NOTE = "Marked unavailable from calendar"

# (label, from, to) quick picks offered under the range pickers
RANGE_PRESETS: list[tuple[str, str, str]] = [
    ("8AM - 5PM", "08:00", "17:00"),
    ("9AM - 6PM", "09:00", "18:00"),
    ("6AM - 8PM", "06:00", "20:00"),
]


@dataclass(frozen=True)
class RangeMode:
    """One contiguous window; ``to_slot`` is exclusive."""

    from_slot: str
    to_slot: str


@dataclass(frozen=True)
class CustomMode:
    """An arbitrary set of available slots, sorted by hour."""

    selected: tuple[str, ...] = ()


EditorMode = Union[RangeMode, CustomMode]


@dataclass(frozen=True)
class AvailabilityDraft:
    """Canonical editor output, ready to be addressed to a driver and date."""

    is_available: bool
    unavailable_times: list[str] = field(default_factory=list)
    notes: str = ""


def _check_range(mode: RangeMode, catalog: TimeSlotCatalog) -> None:
    if not catalog.contains(mode.from_slot):
        raise ValueError(f"{mode.from_slot} is not in the {catalog.name} catalog")
    if not (catalog.contains(mode.to_slot) or mode.to_slot == catalog.closing_bound):
        raise ValueError(f"{mode.to_slot} is not in the {catalog.name} catalog")
    if hour_of(mode.to_slot) <= hour_of(mode.from_slot):
        raise ValueError(
            f"End time {mode.to_slot} must be later than start time {mode.from_slot}"
        )


def encode_mode(mode: EditorMode, catalog: TimeSlotCatalog) -> AvailabilityDraft:
    """Reduce either mode to ``unavailable_times`` and ``notes``."""
    if isinstance(mode, RangeMode):
        _check_range(mode, catalog)
        from_hour, to_hour = hour_of(mode.from_slot), hour_of(mode.to_slot)
        unavailable = [
            s for s in catalog.all if hour_of(s) < from_hour or hour_of(s) >= to_hour
        ]
        notes = f"Available {format_slot(mode.from_slot)} - {format_slot(mode.to_slot)}"
        return AvailabilityDraft(True, unavailable, notes)

    if isinstance(mode, CustomMode):
        selected = sort_slots(set(mode.selected))
        unknown = [s for s in selected if not catalog.contains(s)]
        if unknown:
            raise ValueError(f"{unknown} not in the {catalog.name} catalog")
        unavailable = [s for s in catalog.all if s not in selected]
        if len(selected) == 1:
            notes = f"Available at {format_slot(selected[0])}"
        else:
            notes = "Available: " + ", ".join(format_slot(s) for s in selected)
        return AvailabilityDraft(True, unavailable, notes)

    raise TypeError(f"Unsupported editor mode: {type(mode).__name__}")


def available_slots(record: AvailabilityRecord, catalog: TimeSlotCatalog) -> list[str]:
    """Catalog slots not listed as unavailable; none when the day is off."""
    if not record.is_available:
        return []
    blocked = set(record.unavailable_times)
    return [s for s in catalog.all if s not in blocked]


def is_contiguous(slots: list[str]) -> bool:
    """True for a non-empty run of consecutive hours."""
    if not slots:
        return False
    hours = sorted(hour_of(s) for s in slots)
    return all(b - a == 1 for a, b in zip(hours, hours[1:]))


def decode_mode(record: AvailabilityRecord, catalog: TimeSlotCatalog) -> EditorMode:
    """Rebuild an editor mode from a persisted record."""
    available = available_slots(record, catalog)
    if is_contiguous(available):
        return RangeMode(available[0], slot_for_hour(hour_of(available[-1]) + 1))
    return CustomMode(tuple(available))


def available_window(record: AvailabilityRecord, catalog: TimeSlotCatalog) -> Optional[str]:
    """Display label from the first available hour to the end of the last one."""
    available = available_slots(record, catalog)
    if not available:
        return None
    end = slot_for_hour(hour_of(available[-1]) + 1)
    return f"{format_slot(available[0])} - {format_slot(end)}"


def mark_unavailable_draft() -> AvailabilityDraft:
    """The calendar's one-tap "unavailable all day" action."""
    return AvailabilityDraft(False, [], MARKED_UNAVAILABLE_NOTE)


class AvailabilityEditor:
    """
    Input model behind the time selection sheet.

    Range and Custom input are kept side by side so switching tabs does
    not lose what was entered in the other one; ``mode`` always reflects
    the active tab.
    """

    def __init__(
        self,
        day,
        catalog: Optional[TimeSlotCatalog] = None,
        initial: Optional[EditorMode] = None,
    ) -> None:
        self.date = to_date_key(day)
        self.catalog = catalog or default_catalog()
        self.reset()

        if isinstance(initial, RangeMode):
            _check_range(initial, self.catalog)
            self._from_slot, self._to_slot = initial.from_slot, initial.to_slot
        elif isinstance(initial, CustomMode):
            self._selected = sort_slots(s for s in initial.selected if self.catalog.contains(s))
            self._custom = True

    @classmethod
    def for_record(
        cls,
        day,
        record: Optional[AvailabilityRecord],
        catalog: Optional[TimeSlotCatalog] = None,
    ) -> "AvailabilityEditor":
        """Open the editor on a day, rehydrated from its saved record if any."""
        catalog = catalog or default_catalog()
        initial = decode_mode(record, catalog) if record is not None else None
        logger.debug("Editor for %s opened as %s", to_date_key(day), initial)
        return cls(day, catalog, initial)

    @property
    def mode(self) -> EditorMode:
        if self._custom:
            return CustomMode(tuple(self._selected))
        return RangeMode(self._from_slot, self._to_slot)

    @property
    def is_custom(self) -> bool:
        return self._custom

    def use_range(self) -> None:
        self._custom = False

    def use_custom(self) -> None:
        self._custom = True

    def switch_mode(self) -> EditorMode:
        self._custom = not self._custom
        return self.mode

    # --- Range ---

    @property
    def from_slot(self) -> str:
        return self._from_slot

    @property
    def to_slot(self) -> str:
        return self._to_slot

    def from_options(self) -> list[str]:
        return list(self.catalog.all)

    def to_options(self) -> list[str]:
        """End times later than the start, up to the closing bound."""
        return [*self.catalog.strictly_after(self._from_slot), self.catalog.closing_bound]

    def set_from(self, slot: str) -> None:
        """Pick a start time, pushing the end forward if it would no longer be later."""
        if not self.catalog.contains(slot):
            raise ValueError(f"{slot} is not in the {self.catalog.name} catalog")
        self._from_slot = slot
        if hour_of(self._to_slot) <= hour_of(slot):
            self._to_slot = self.catalog.next_after(slot) or self.catalog.closing_bound
            logger.debug("End time advanced to %s", self._to_slot)

    def set_to(self, slot: str) -> None:
        if slot not in self.to_options():
            raise ValueError(
                f"End time {slot} must be a slot later than {self._from_slot}"
            )
        self._to_slot = slot

    def available_presets(self) -> list[tuple[str, str, str]]:
        return [
            preset for preset in RANGE_PRESETS
            if self.catalog.contains(preset[1]) and self.catalog.contains(preset[2])
        ]

    def apply_preset(self, label: str) -> RangeMode:
        for name, start, end in self.available_presets():
            if name == label:
                self._from_slot, self._to_slot = start, end
                self._custom = False
                return RangeMode(start, end)
        raise ValueError(f"Preset {label!r} is not available for the {self.catalog.name} catalog")

    # --- Custom ---

    @property
    def selected(self) -> list[str]:
        return list(self._selected)

    def toggle_slot(self, slot: str) -> list[str]:
        if not self.catalog.contains(slot):
            raise ValueError(f"{slot} is not in the {self.catalog.name} catalog")
        if slot in self._selected:
            self._selected.remove(slot)
        else:
            self._selected = sort_slots([*self._selected, slot])
        return self.selected

    def replace_selection(self, slots: list[str]) -> None:
        self._selected = sort_slots(s for s in slots if self.catalog.contains(s))

    def clear_selection(self) -> None:
        self._selected = []

    def can_save(self) -> bool:
        return not self._custom or bool(self._selected)

    def canonicalize(self) -> AvailabilityDraft:
        draft = encode_mode(self.mode, self.catalog)
        logger.debug(
            "Canonicalized %s for %s: %d unavailable", self.mode, self.date,
            len(draft.unavailable_times),
        )
        return draft

    def reset(self) -> None:
        """Return to the sheet's initial state: default range, nothing selected."""
        self._from_slot = settings.calendar.default_range_from
        self._to_slot = settings.calendar.default_range_to
        self._selected: list[str] = []
        self._custom = False

        if not self.catalog.contains(self._from_slot):
            self._from_slot = self.catalog.first
        if hour_of(self._to_slot) <= hour_of(self._from_slot) or not (
            self.catalog.contains(self._to_slot) or self._to_slot == self.catalog.closing_bound
        ):
            self._to_slot = self.catalog.next_after(self._from_slot) or self.catalog.closing_bound
