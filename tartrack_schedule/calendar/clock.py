"""Injectable "now" for calendar decisions.

Every past/future decision reads the clock at the moment it is made,
never a value captured when a form was opened.
"""

from datetime import datetime, timedelta


class SystemClock:
    """Device-local wall clock."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """A clock frozen at a given local instant, advanced explicitly."""

    def __init__(self, current: datetime) -> None:
        self._current = current

    def now(self) -> datetime:
        return self._current

    def set(self, current: datetime) -> None:
        self._current = current

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward, e.g. ``advance(hours=1)``."""
        self._current = self._current + timedelta(**kwargs)
        return self._current
