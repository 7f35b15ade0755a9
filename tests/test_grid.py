"""Tests for month grid construction and month navigation."""

from datetime import date

import pytest

from tartrack_schedule.calendar.grid import (
    build_month_grid,
    date_for_cell,
    grid_rows,
    leading_blanks,
    month_bounds,
    month_title,
    shift_month,
)


class TestBuildMonthGrid:
    def test_february_2024_leap_year(self):
        grid = build_month_grid(2024, 1)
        # 1 Feb 2024 is a Thursday
        assert grid[:4] == [None, None, None, None]
        assert grid[4] == 1
        assert grid[-1] == 29
        assert len(grid) == 33

    def test_month_starting_on_sunday_has_no_blanks(self):
        # 1 June 2025 is a Sunday
        grid = build_month_grid(2025, 5)
        assert grid[0] == 1
        assert len(grid) == 30

    def test_month_starting_on_saturday(self):
        # 1 March 2025 is a Saturday
        assert leading_blanks(2025, 2) == 6

    def test_days_are_consecutive(self):
        days = [d for d in build_month_grid(2025, 0) if d is not None]
        assert days == list(range(1, 32))

    def test_invalid_month_raises(self):
        with pytest.raises(ValueError, match="0-11"):
            build_month_grid(2025, 12)


class TestMonthNavigation:
    def test_forward_within_year(self):
        assert shift_month(2025, 2, 1) == (2025, 3)

    def test_forward_across_year(self):
        assert shift_month(2024, 11, 1) == (2025, 0)

    def test_back_across_year(self):
        assert shift_month(2025, 0, -1) == (2024, 11)

    def test_multi_month_jump(self):
        assert shift_month(2025, 10, 14) == (2027, 0)


class TestHelpers:
    def test_month_bounds(self):
        assert month_bounds(2025, 1) == (date(2025, 2, 1), date(2025, 2, 28))

    def test_december_bounds(self):
        assert month_bounds(2025, 11) == (date(2025, 12, 1), date(2025, 12, 31))

    def test_rows_are_padded_to_full_weeks(self):
        rows = grid_rows(build_month_grid(2024, 1))
        assert len(rows) == 5
        assert all(len(row) == 7 for row in rows)
        assert rows[-1][-1] is None

    def test_date_for_cell(self):
        assert date_for_cell(2025, 2, 10) == date(2025, 3, 10)

    def test_month_title(self):
        assert month_title(2025, 2) == "March 2025"
