"""
Past/future checks for every time-based availability change.

Range mode checks only its start time; Custom mode checks every selected
hour, drops the ones already gone and sends the rest back to the driver
for confirmation. Nothing that fails here is ever sent to the store.

Usage:
    guard = TemporalGuard(clock, catalog)
    result = guard.validate(editor.mode, "2025-03-10")
    if result.verdict == GuardVerdict.TRIMMED:
        editor.replace_selection(result.kept_slots)
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, Union

from tartrack_schedule.calendar.editor import CustomMode, EditorMode, RangeMode
from tartrack_schedule.calendar.time_slots import format_slot, hour_of
from tartrack_schedule.utils import parse_date_key, to_date_key

logger = logging.getLogger(__name__)

DayLike = Union[date, str]


class TemporalError(Exception):
    """Raised when a change refers to a date or hour that has already passed."""


def _as_date(day: DayLike) -> date:
    if isinstance(day, datetime):
        return day.date()
    if isinstance(day, date):
        return day
    return parse_date_key(day)


def is_date_in_past(day: DayLike, now: datetime) -> bool:
    """Compare calendar dates only; today is not in the past."""
    return _as_date(day) < now.date()


def is_time_in_past(day: DayLike, slot: str, now: datetime) -> bool:
    """True when the local instant ``day@slot`` is not strictly after ``now``."""
    instant = datetime.combine(_as_date(day), time(hour=hour_of(slot)))
    return instant <= now


class GuardVerdict(str, Enum):
    ACCEPTED = "accepted"
    TRIMMED = "trimmed"
    REJECTED = "rejected"


@dataclass
class GuardResult:
    """Outcome of validating an editor mode against the clock."""

    verdict: GuardVerdict
    message: Optional[str] = None
    kept_slots: list[str] = field(default_factory=list)
    removed_count: int = 0
    error: Optional[TemporalError] = None


class TemporalGuard:
    """Validates availability edits against the injected clock."""

    def __init__(self, clock) -> None:
        self.clock = clock

    def now(self) -> datetime:
        return self.clock.now()

    def is_date_in_past(self, day: DayLike) -> bool:
        return is_date_in_past(day, self.now())

    def is_time_in_past(self, day: DayLike, slot: str) -> bool:
        return is_time_in_past(day, slot, self.now())

    def ensure_date_editable(self, day: DayLike) -> None:
        if self.is_date_in_past(day):
            raise TemporalError(
                f"{to_date_key(day)} is in the past; availability can no longer be changed."
            )

    def validate(self, mode: EditorMode, day: DayLike) -> GuardResult:
        """Check a mode against the clock as it reads right now."""
        try:
            self.ensure_date_editable(day)
        except TemporalError as exc:
            return GuardResult(GuardVerdict.REJECTED, message=str(exc), error=exc)

        if isinstance(mode, RangeMode):
            return self._validate_range(mode, day)
        if isinstance(mode, CustomMode):
            return self._validate_custom(mode, day)
        raise TypeError(f"Unsupported editor mode: {type(mode).__name__}")

    def _validate_range(self, mode: RangeMode, day: DayLike) -> GuardResult:
        # Only the start is checked against the clock.
        if self.is_time_in_past(day, mode.from_slot):
            error = TemporalError(
                f"Start time {format_slot(mode.from_slot)} is in the past."
            )
            logger.debug("Range rejected for %s: %s", to_date_key(day), error)
            return GuardResult(GuardVerdict.REJECTED, message=str(error), error=error)
        return GuardResult(GuardVerdict.ACCEPTED)

    def _validate_custom(self, mode: CustomMode, day: DayLike) -> GuardResult:
        selected = list(mode.selected)
        if not selected:
            return GuardResult(
                GuardVerdict.REJECTED, message="Select at least one hour before saving."
            )

        kept = [slot for slot in selected if not self.is_time_in_past(day, slot)]
        removed = len(selected) - len(kept)

        if not kept:
            error = TemporalError("All selected hours are in the past.")
            logger.debug("Custom selection rejected for %s: all %d past", to_date_key(day), removed)
            return GuardResult(
                GuardVerdict.REJECTED, message=str(error), removed_count=removed, error=error
            )
        if removed:
            logger.debug("Custom selection trimmed for %s: %d past", to_date_key(day), removed)
            return GuardResult(
                GuardVerdict.TRIMMED,
                message=f"{removed} past hour(s) removed.",
                kept_slots=kept,
                removed_count=removed,
            )
        return GuardResult(GuardVerdict.ACCEPTED, kept_slots=kept)
