"""Month grid construction for a 7-column, Sunday-first calendar.

Months are 0-based throughout (January == 0) to match the screens that
call in here.
"""

from datetime import date, timedelta
from typing import Optional

DAYS_PER_WEEK = 7
WEEKDAY_HEADERS = ["S", "M", "T", "W", "T", "F", "S"]


def _check_month(month: int) -> None:
    if not 0 <= month <= 11:
        raise ValueError(f"Month must be 0-11, got {month}")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last date of a month; the window fetched from the store."""
    _check_month(month)
    first = date(year, month + 1, 1)
    next_year, next_month = shift_month(year, month, 1)
    last = date(next_year, next_month + 1, 1) - timedelta(days=1)
    return first, last


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` months forward or back, rolling the year over."""
    _check_month(month)
    index = year * 12 + month + delta
    return index // 12, index % 12


def leading_blanks(year: int, month: int) -> int:
    """Weekday index of the 1st, with Sunday as 0."""
    first, _ = month_bounds(year, month)
    # date.weekday() is Monday == 0
    return (first.weekday() + 1) % DAYS_PER_WEEK


def build_month_grid(year: int, month: int) -> list[Optional[int]]:
    """Day numbers of a month preceded by ``None`` for each leading blank."""
    first, last = month_bounds(year, month)
    grid: list[Optional[int]] = [None] * leading_blanks(year, month)
    grid.extend(range(first.day, last.day + 1))
    return grid


def grid_rows(grid: list[Optional[int]]) -> list[list[Optional[int]]]:
    """Split a grid into week rows, padding the last row with ``None``."""
    rows = [list(grid[i:i + DAYS_PER_WEEK]) for i in range(0, len(grid), DAYS_PER_WEEK)]
    if rows and len(rows[-1]) < DAYS_PER_WEEK:
        rows[-1].extend([None] * (DAYS_PER_WEEK - len(rows[-1])))
    return rows


def date_for_cell(year: int, month: int, day: int) -> date:
    _check_month(month)
    return date(year, month + 1, day)


def month_title(year: int, month: int) -> str:
    """Header text, e.g. ``"March 2025"``."""
    first, _ = month_bounds(year, month)
    return first.strftime("%B %Y")
