"""
Schedule session: the single caller every calendar screen goes through.

A session owns one driver's visible month. It fetches bookings and
availability in parallel, builds the resolver over that window, opens
editors for tapped days, and runs saves through the temporal guard
before anything reaches the store. Displayed state is never patched
locally; a successful save re-fetches the month.

Usage:
    session = ScheduleSession(store, driver_id=42)
    view = await session.load_month()
    editor = session.open_editor("2025-03-10")
    outcome = await session.save(editor)
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from tartrack_schedule.calendar.clock import SystemClock
from tartrack_schedule.calendar.editor import (
    AvailabilityDraft,
    AvailabilityEditor,
    mark_unavailable_draft,
)
from tartrack_schedule.calendar.grid import build_month_grid, month_bounds, month_title, shift_month
from tartrack_schedule.calendar.resolver import AvailabilityResolver, CalendarDate, DayDetail
from tartrack_schedule.calendar.save_flow import SaveFlow, SaveState, SaveTrigger
from tartrack_schedule.calendar.temporal_guard import (
    DayLike,
    GuardVerdict,
    TemporalError,
    TemporalGuard,
)
from tartrack_schedule.calendar.time_slots import TimeSlotCatalog, default_catalog
from tartrack_schedule.logging_context import get_driver_logger, set_driver_id
from tartrack_schedule.schemas.availability_schema import AvailabilityUpdate
from tartrack_schedule.store.client import NetworkError, RequestTimeoutError
from tartrack_schedule.utils import to_date_key

logger = get_driver_logger(__name__)

TIMEOUT_MESSAGE = "The request timed out. Please try again."
NETWORK_MESSAGE = "Network error. Please check your connection and try again."


class PartialDataError(Exception):
    """One of the two month fetches failed; the other one was rendered."""

    def __init__(self, source: str, cause: Exception) -> None:
        super().__init__(f"Could not load {source}: {cause}")
        self.source = source
        self.cause = cause


class SaveInProgressError(Exception):
    """Raised when a second save for the same date starts before the first ends."""


@dataclass
class MonthView:
    """One loaded month, ready to render."""

    year: int
    month: int
    resolver: AvailabilityResolver
    error: Optional[Exception] = None

    @property
    def title(self) -> str:
        return month_title(self.year, self.month)

    @property
    def grid(self) -> list[Optional[int]]:
        return build_month_grid(self.year, self.month)

    def cells(self) -> list[Optional[CalendarDate]]:
        """The grid with a resolved status in place of each day number."""
        cells: list[Optional[CalendarDate]] = []
        for day in self.grid:
            if day is None:
                cells.append(None)
                continue
            current = date(self.year, self.month + 1, day)
            cells.append(CalendarDate(current, self.resolver.status(current)))
        return cells

    @property
    def alert(self) -> Optional[str]:
        """Non-blocking message to show when the month loaded degraded."""
        if self.error is None:
            return None
        if isinstance(self.error, PartialDataError):
            return f"Some schedule data could not be loaded ({self.error.source})."
        if isinstance(self.error, RequestTimeoutError):
            return TIMEOUT_MESSAGE
        return "Failed to load schedule data. " + NETWORK_MESSAGE


@dataclass
class SaveOutcome:
    """What the time sheet should do after the driver pressed save."""

    state: SaveState
    message: Optional[str] = None
    removed_count: int = 0
    retryable: bool = False
    draft: Optional[AvailabilityDraft] = None
    trace: list[str] = field(default_factory=list)

    @property
    def saved(self) -> bool:
        return self.state == SaveState.SAVED


class ScheduleSession:
    """A driver's calendar screen, minus the rendering."""

    def __init__(
        self,
        store,
        driver_id: Union[int, str],
        clock=None,
        catalog: Optional[TimeSlotCatalog] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> None:
        self.store = store
        self.driver_id = driver_id
        self.clock = clock or SystemClock()
        self.catalog = catalog or default_catalog()
        self.guard = TemporalGuard(self.clock)

        today = self.clock.now().date()
        self.year = today.year if year is None else year
        self.month = today.month - 1 if month is None else month

        self._view: Optional[MonthView] = None
        self._active = True
        self._saving: set[str] = set()

    @property
    def view(self) -> Optional[MonthView]:
        return self._view

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        """The screen went away; responses arriving later are dropped."""
        self._active = False

    # --- Loading ---

    async def load_month(self) -> Optional[MonthView]:
        set_driver_id(str(self.driver_id))
        year, month = self.year, self.month
        first, last = month_bounds(year, month)

        bookings_result, schedule_result = await asyncio.gather(
            self.store.get_calendar(self.driver_id, first, last),
            self.store.get_schedule(self.driver_id, first, last),
            return_exceptions=True,
        )

        for result in (bookings_result, schedule_result):
            if isinstance(result, Exception) and not isinstance(result, NetworkError):
                raise result

        if not self._active or (year, month) != (self.year, self.month):
            logger.debug("Discarding stale load for %s", month_title(year, month))
            return self._view

        error: Optional[Exception] = None
        bookings_failed = isinstance(bookings_result, NetworkError)
        schedule_failed = isinstance(schedule_result, NetworkError)

        if bookings_failed and schedule_failed:
            both_timed_out = isinstance(bookings_result, RequestTimeoutError) and isinstance(
                schedule_result, RequestTimeoutError
            )
            error_cls = RequestTimeoutError if both_timed_out else NetworkError
            error = error_cls(
                f"Failed to load schedule data: bookings ({bookings_result}); "
                f"availability ({schedule_result})"
            )
            logger.warning("Month %s loaded with no data: %s", month_title(year, month), error)
        elif bookings_failed:
            error = PartialDataError("bookings", bookings_result)
            logger.warning("Month %s loaded without bookings: %s", month_title(year, month), error)
        elif schedule_failed:
            error = PartialDataError("availability", schedule_result)
            logger.warning("Month %s loaded without availability: %s", month_title(year, month), error)

        resolver = AvailabilityResolver(
            [] if bookings_failed else bookings_result,
            [] if schedule_failed else schedule_result,
            self.clock,
            self.catalog,
        )
        self._view = MonthView(year, month, resolver, error)
        logger.info("Loaded %s: %s", self._view.title, resolver.summary().describe())
        return self._view

    async def change_month(self, delta: int) -> Optional[MonthView]:
        self.year, self.month = shift_month(self.year, self.month, delta)
        return await self.load_month()

    async def refresh(self) -> Optional[MonthView]:
        return await self.load_month()

    def _require_view(self) -> MonthView:
        if self._view is None:
            raise RuntimeError("load_month() must complete before days can be opened")
        return self._view

    # --- Day interaction ---

    def open_day(self, day: DayLike) -> Optional[DayDetail]:
        """Day sheet for a tapped cell; ``None`` for an empty past day."""
        resolver = self._require_view().resolver
        if not resolver.is_interactive(day):
            return None
        return resolver.day_detail(day)

    def open_editor(self, day: DayLike) -> AvailabilityEditor:
        """Open the time sheet for a day, prefilled from its saved record."""
        self.guard.ensure_date_editable(day)
        record = self._require_view().resolver.availability_for(day)
        return AvailabilityEditor.for_record(day, record, self.catalog)

    # --- Saving ---

    async def save(self, editor: AvailabilityEditor) -> SaveOutcome:
        """Validate the editor against the clock now, then persist if accepted."""
        set_driver_id(str(self.driver_id))
        key = editor.date
        if key in self._saving:
            raise SaveInProgressError(f"A save for {key} is already in progress")

        flow = SaveFlow()
        flow.transition(SaveTrigger.SUBMIT)
        result = self.guard.validate(editor.mode, key)

        if result.verdict == GuardVerdict.REJECTED:
            state = flow.transition(SaveTrigger.ALL_PAST)
            flow.transition(SaveTrigger.RESUME_EDITING)
            return SaveOutcome(
                state, result.message, result.removed_count, trace=flow.get_state_trace()
            )

        if result.verdict == GuardVerdict.TRIMMED:
            editor.replace_selection(result.kept_slots)
            state = flow.transition(SaveTrigger.SOME_PAST)
            flow.transition(SaveTrigger.RESUME_EDITING)
            return SaveOutcome(
                state, result.message, result.removed_count, trace=flow.get_state_trace()
            )

        flow.transition(SaveTrigger.VALID)
        outcome = await self._persist(key, editor.canonicalize(), flow)
        if outcome.saved and self._active:
            editor.reset()
        return outcome

    async def mark_unavailable(self, day: DayLike) -> SaveOutcome:
        """Quick action: the whole day off, no time sheet."""
        set_driver_id(str(self.driver_id))
        key = to_date_key(day)
        if key in self._saving:
            raise SaveInProgressError(f"A save for {key} is already in progress")

        flow = SaveFlow()
        flow.transition(SaveTrigger.SUBMIT)
        try:
            self.guard.ensure_date_editable(key)
        except TemporalError as exc:
            state = flow.transition(SaveTrigger.ALL_PAST)
            flow.transition(SaveTrigger.RESUME_EDITING)
            return SaveOutcome(state, str(exc), trace=flow.get_state_trace())

        flow.transition(SaveTrigger.VALID)
        return await self._persist(key, mark_unavailable_draft(), flow)

    async def _persist(self, key: str, draft: AvailabilityDraft, flow: SaveFlow) -> SaveOutcome:
        update = AvailabilityUpdate(
            driver_id=self.driver_id,
            date=key,
            is_available=draft.is_available,
            unavailable_times=draft.unavailable_times,
            notes=draft.notes,
        )
        flow.transition(SaveTrigger.PERSIST)
        self._saving.add(key)
        try:
            await self.store.set_availability(update)
        except NetworkError as exc:
            state = flow.transition(SaveTrigger.STORE_ERROR)
            flow.transition(SaveTrigger.RESUME_EDITING)
            logger.warning("Saving availability for %s failed: %s", key, exc)
            message = TIMEOUT_MESSAGE if isinstance(exc, RequestTimeoutError) else (
                str(exc) or NETWORK_MESSAGE
            )
            return SaveOutcome(
                state, message, retryable=True, draft=draft, trace=flow.get_state_trace()
            )
        finally:
            self._saving.discard(key)

        state = flow.transition(SaveTrigger.STORE_OK)
        logger.info("Availability for %s saved: %s", key, draft.notes)
        if self._active:
            await self.load_month()
        else:
            logger.debug("Session closed during save of %s; skipping refresh", key)
        return SaveOutcome(state, "Availability updated.", draft=draft, trace=flow.get_state_trace())
