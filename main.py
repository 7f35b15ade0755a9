"""
Driver schedule entry point.

Fetches a driver's month from the schedule backend and prints the
availability calendar, or runs the offline console demo.

Usage:
    Live calendar: python main.py calendar --driver-id 42 [--month 2025-03]
    Console mode:  python main.py console
"""

import argparse
import asyncio
import logging
import re
import sys
from typing import Optional

from tartrack_schedule.config import settings

logger = logging.getLogger(__name__)

MONTH_ARG_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def _parse_month(value: str) -> tuple[int, int]:
    """``YYYY-MM`` to a (year, 0-based month) pair."""
    match = MONTH_ARG_PATTERN.match(value)
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM, got {value!r}")
    return int(match.group(1)), int(match.group(2)) - 1


async def _show_calendar(driver_id: str, month: Optional[tuple[int, int]]) -> int:
    from console_demo import render_month
    from tartrack_schedule.calendar.session import ScheduleSession
    from tartrack_schedule.store.client import ScheduleStore

    async with ScheduleStore() as store:
        year, month0 = month if month else (None, None)
        session = ScheduleSession(store, driver_id, year=year, month=month0)
        view = await session.load_month()

        if view is not None:
            render_month(view, session.clock.now().date())
        return 1 if view is not None and view.error is not None else 0


def _run_live_mode(argv: list[str]) -> None:
    """Show one month of a driver's calendar from the schedule backend."""
    parser = argparse.ArgumentParser(prog="main.py calendar", description=__doc__)
    parser.add_argument("--driver-id", required=True, help="Driver whose calendar to show")
    parser.add_argument("--month", type=_parse_month, default=None, help="Month as YYYY-MM")
    args = parser.parse_args(argv)

    logger.info("Loading calendar for driver %s from %s", args.driver_id, settings.api.base_url)
    sys.exit(asyncio.run(_show_calendar(args.driver_id, args.month)))


def _run_console_mode() -> None:
    """Start the offline console demo (no backend required)."""
    from console_demo import ConsoleCalendar

    asyncio.run(ConsoleCalendar().run())


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode()
    elif len(sys.argv) > 1 and sys.argv[1] == "calendar":
        _run_live_mode(sys.argv[2:])
    else:
        print(__doc__)
        sys.exit(2)
