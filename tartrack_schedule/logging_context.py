"""Driver correlation logging context for tracing calendar activity.

Provides a driver_id-aware logger that attaches the driver whose calendar
is being loaded or edited to every log message, so one driver's month
loads, saves and store calls can be followed across modules.

Usage:
    from tartrack_schedule.logging_context import get_driver_logger, set_driver_id

    set_driver_id("42")
    logger = get_driver_logger(__name__)
    logger.info("Loading month")  # record.driver_id == "42"
"""

import logging
from contextvars import ContextVar

_driver_id: ContextVar[str] = ContextVar("driver_id", default="NO_DRIVER")


def set_driver_id(driver_id: str) -> None:
    """Set the correlation driver ID for the current async context."""
    _driver_id.set(str(driver_id))


def get_driver_id() -> str:
    """Retrieve the current correlation driver ID."""
    return _driver_id.get()


class DriverIdFilter(logging.Filter):
    """Injects driver_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.driver_id = _driver_id.get()  # type: ignore[attr-defined]
        return True


def get_driver_logger(name: str) -> logging.Logger:
    """Return a logger with the DriverIdFilter attached.

    The filter adds ``driver_id`` to each record so formatters can
    include ``%(driver_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, DriverIdFilter) for f in logger.filters):
        logger.addFilter(DriverIdFilter())
    return logger
