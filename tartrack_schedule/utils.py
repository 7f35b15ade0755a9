"""Shared utilities used across the schedule core."""

import re
from datetime import date, datetime
from typing import Union

DATE_KEY_FORMAT = "%Y-%m-%d"
_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def to_date_key(value: Union[date, str]) -> str:
    """Format a date as the zero-padded ``YYYY-MM-DD`` join key.

    Bookings and availability records are matched on this literal string,
    so every producer must go through here.

    Examples:
        >>> to_date_key(date(2025, 3, 9))
        '2025-03-09'
        >>> to_date_key("2025-03-09")
        '2025-03-09'
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime(DATE_KEY_FORMAT)
    return parse_date_key(value).strftime(DATE_KEY_FORMAT)


def parse_date_key(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` key, rejecting anything not zero-padded."""
    value = value.strip()
    if not _DATE_KEY_RE.match(value):
        raise ValueError(f"Date must be formatted YYYY-MM-DD, got {value!r}")
    return datetime.strptime(value, DATE_KEY_FORMAT).date()


def is_date_key(value: str) -> bool:
    """Check whether a string is a valid zero-padded date key."""
    try:
        parse_date_key(value)
        return True
    except ValueError:
        return False
