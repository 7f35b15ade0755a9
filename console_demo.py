"""
Offline console demo: a driver's availability calendar without a backend.

This drives the real session, resolver, editor and temporal guard over an
in-memory store seeded with sample bookings. No network calls. The clock
is frozen at 15:00 today so the past-hour behavior is repeatable.

Usage:
    python console_demo.py
    python console_demo.py --scenario range
    python console_demo.py --scenario custom
    python console_demo.py --scenario offline
"""

import argparse
import asyncio
from datetime import date, datetime, timedelta
from typing import Optional

from tartrack_schedule.calendar.clock import FixedClock
from tartrack_schedule.calendar.editor import AvailabilityEditor
from tartrack_schedule.calendar.grid import WEEKDAY_HEADERS, date_for_cell, grid_rows
from tartrack_schedule.calendar.resolver import DayStatus
from tartrack_schedule.calendar.save_flow import SaveState
from tartrack_schedule.calendar.session import MonthView, SaveOutcome, ScheduleSession
from tartrack_schedule.calendar.temporal_guard import TemporalError
from tartrack_schedule.calendar.time_slots import format_slot
from tartrack_schedule.config import settings
from tartrack_schedule.schemas.availability_schema import AvailabilityUpdate
from tartrack_schedule.store.memory import InMemoryScheduleStore
from tartrack_schedule.utils import to_date_key

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
MAROON = "\033[35m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_DRIVER_ID = "demo-driver"

STATUS_STYLE: dict[DayStatus, tuple[str, str]] = {
    DayStatus.BOOKED: (MAROON, "Booked"),
    DayStatus.AVAILABLE: (GREEN, "Available"),
    DayStatus.UNAVAILABLE: (RED, "Unavailable"),
    DayStatus.PARTIAL: (YELLOW, "Partial"),
    DayStatus.UNSET: (RESET, "Not Set"),
    DayStatus.PAST_WITH_BOOKING: (BLUE, "Past Bookings"),
    DayStatus.PAST: (DIM, "Past (Empty)"),
}


async def seed_store(store: InMemoryScheduleStore, now: datetime) -> None:
    """Bookings and availability around today so every status shows up."""
    today = now.date()
    await store.accept_booking(
        DEMO_DRIVER_ID, "BK-1001", today - timedelta(days=2), "09:00",
        "Heritage Loop", "Ana Cruz",
    )
    await store.accept_booking(
        DEMO_DRIVER_ID, "BK-1002", today + timedelta(days=3), "10:00",
        "Old Town Tour", "Ben Reyes",
    )
    await store.accept_booking(
        DEMO_DRIVER_ID, "BK-1003", today + timedelta(days=3), "14:00",
        "Sunset Ride", "Carla Lim",
    )
    seeded = AvailabilityEditor(today + timedelta(days=1))
    seeded.set_from("09:00")
    seeded.set_to("17:00")
    draft = seeded.canonicalize()
    await store.set_availability(AvailabilityUpdate(
        driver_id=DEMO_DRIVER_ID,
        date=seeded.date,
        is_available=True,
        unavailable_times=draft.unavailable_times,
        notes=draft.notes,
    ))
    store.writes.clear()


def render_month(view: MonthView, today: date) -> None:
    """Print a month as a colored grid with its summary line and alert."""
    summary = view.resolver.summary()
    print()
    print(f"{BOLD}  {view.title}{RESET}  {DIM}{summary.describe()}{RESET}")
    print("  " + " ".join(f"{h:>3}" for h in WEEKDAY_HEADERS))
    for row in grid_rows(view.grid):
        cells = []
        for day in row:
            if day is None:
                cells.append("   ")
                continue
            current = date_for_cell(view.year, view.month, day)
            color, _ = STATUS_STYLE[view.resolver.status(current)]
            marker = "*" if current == today else " "
            cells.append(f"{color}{day:>2}{marker}{RESET}")
        print("  " + " ".join(cells))
    legend = "  ".join(f"{color}{label}{RESET}" for color, label in STATUS_STYLE.values())
    print(f"  {legend}")
    if view.alert:
        print(f"{RED}  ! {view.alert}{RESET}")


class ConsoleCalendar:
    """Renders a month and plays availability edits in the terminal."""

    def __init__(self, store: Optional[InMemoryScheduleStore] = None) -> None:
        now = datetime.now().replace(hour=15, minute=0, second=0, microsecond=0)
        self.clock = FixedClock(now)
        self.store = store or InMemoryScheduleStore()
        self.session = ScheduleSession(self.store, DEMO_DRIVER_ID, clock=self.clock)

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def render(self, view: Optional[MonthView]) -> None:
        if view is not None:
            render_month(view, self.clock.now().date())

    def report(self, outcome: SaveOutcome) -> None:
        color = GREEN if outcome.state == SaveState.SAVED else YELLOW
        if outcome.state in (SaveState.REJECTED, SaveState.FAILED):
            color = RED
        print(f"{color}{BOLD}[{outcome.state.value}]{RESET} {color}{outcome.message or ''}{RESET}")
        self.system_log(f"State trace: {' -> '.join(outcome.trace)}")
        if outcome.draft is not None:
            self.system_log(f"Unavailable: {outcome.draft.unavailable_times}")

    async def start(self) -> None:
        await seed_store(self.store, self.clock.now())
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  TARTRACK SCHEDULE - Console Demo{RESET}")
        print(f"{BOLD}  Slot catalog: {settings.calendar.slot_catalog}{RESET}")
        print(f"{BOLD}  Clock frozen at {self.clock.now():%Y-%m-%d %H:%M}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        self.render(await self.session.load_month())

    # ------------------------------------------------------------------ #
    # Scenarios
    # ------------------------------------------------------------------ #

    async def scenario_range(self) -> None:
        day = self.clock.now().date() + timedelta(days=5)
        editor = self.session.open_editor(day)
        editor.set_from("08:00")
        editor.set_to("18:00")
        print(f"\n{BLUE}[Driver]{RESET} Available {day} from 8:00 AM to 6:00 PM")
        self.report(await self.session.save(editor))
        self.render(self.session.view)

        reopened = self.session.open_editor(day)
        self.system_log(f"Reopened as {reopened.mode}")

    async def scenario_custom(self) -> None:
        today = self.clock.now().date()
        editor = self.session.open_editor(today)
        editor.use_custom()
        for slot in ("14:00", "16:00", "18:00"):
            editor.toggle_slot(slot)
        print(f"\n{BLUE}[Driver]{RESET} Available today at 2 PM, 4 PM and 6 PM")
        self.report(await self.session.save(editor))
        self.system_log(f"Selection now: {[format_slot(s) for s in editor.selected]}")

        print(f"\n{BLUE}[Driver]{RESET} Confirms the trimmed hours")
        self.report(await self.session.save(editor))
        self.render(self.session.view)

    async def scenario_rejected(self) -> None:
        today = self.clock.now().date()
        editor = self.session.open_editor(today)
        editor.use_custom()
        editor.toggle_slot("14:00")
        editor.toggle_slot("15:00")
        print(f"\n{BLUE}[Driver]{RESET} Available today at 2 PM and 3 PM")
        self.report(await self.session.save(editor))

        yesterday = today - timedelta(days=1)
        print(f"\n{BLUE}[Driver]{RESET} Marks {yesterday} unavailable")
        self.report(await self.session.mark_unavailable(yesterday))

    async def scenario_offline(self) -> None:
        self.store.fail_calendar = True
        print(f"\n{BLUE}[Driver]{RESET} Pulls to refresh with the bookings service down")
        self.render(await self.session.refresh())
        self.store.fail_writes = True
        editor = self.session.open_editor(self.clock.now().date() + timedelta(days=6))
        self.report(await self.session.save(editor))
        self.store.fail_calendar = self.store.fail_writes = False

    SCENARIOS = ("range", "custom", "rejected", "offline")

    async def run_scenario(self, scenario: str) -> None:
        await self.start()
        handler = getattr(self, f"scenario_{scenario}", None)
        if handler is None:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return
        await handler()
        print(f"\n{BOLD}  Scenario '{scenario}' complete.{RESET}")

    async def run(self) -> None:
        await self.start()
        print(f"{DIM}  Commands: range DATE FROM TO | slots DATE HH:00 ... | off DATE |"
              f" next | prev | quit{RESET}")
        while self.session.active:
            command = input(f"\n{BLUE}[Driver] {RESET}").strip()
            if not command:
                continue
            if command.lower() in ("quit", "exit", "q"):
                self.session.close()
                print(f"\n{DIM}Session ended.{RESET}")
                return
            try:
                await self._dispatch(command.split())
            except TemporalError as exc:
                print(f"{RED}{exc}{RESET}")
            except ValueError as exc:
                print(f"{YELLOW}{exc}{RESET}")

    async def _dispatch(self, parts: list[str]) -> None:
        name, args = parts[0].lower(), parts[1:]
        if name in ("next", "prev"):
            self.render(await self.session.change_month(1 if name == "next" else -1))
        elif name == "off" and len(args) == 1:
            self.report(await self.session.mark_unavailable(to_date_key(args[0])))
        elif name == "range" and len(args) == 3:
            editor = self.session.open_editor(args[0])
            editor.set_from(args[1])
            editor.set_to(args[2])
            self.report(await self.session.save(editor))
        elif name == "slots" and len(args) >= 2:
            editor = self.session.open_editor(args[0])
            editor.use_custom()
            editor.clear_selection()
            for slot in args[1:]:
                editor.toggle_slot(slot)
            self.report(await self.session.save(editor))
        else:
            print(f"{YELLOW}Unrecognized command.{RESET}")
            return
        if name not in ("next", "prev"):
            self.render(self.session.view)


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline availability calendar demo")
    parser.add_argument(
        "--scenario",
        choices=ConsoleCalendar.SCENARIOS,
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    demo = ConsoleCalendar()
    if args.scenario:
        asyncio.run(demo.run_scenario(args.scenario))
    else:
        asyncio.run(demo.run())


if __name__ == "__main__":
    main()
