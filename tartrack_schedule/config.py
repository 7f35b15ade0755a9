"""
Centralized configuration with environment variable overrides.

API endpoints, timeouts, and the slot catalog used by the calendar
screens are configurable here. Nothing is hardcoded in calendar or
store logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# First and last bookable hour of each named slot catalog. The driver
# schedule modal uses "standard"; the set-availability screen was built
# against "compact". Which one a deployment uses is a product decision.
CATALOG_HOURS: dict[str, tuple[int, int]] = {
    "standard": (6, 20),
    "compact": (8, 18),
}


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _parse_hour(env_var: str, value: str) -> int:
    """Parse the hour of an ``HH:00`` slot string from configuration."""
    hours, _, minutes = value.partition(":")
    if not hours.isdigit() or minutes != "00":
        raise ValueError(f"{env_var} must be an hourly slot like '08:00', got {value!r}")
    return int(hours)


@dataclass(frozen=True)
class ApiConfig:
    """Schedule REST API settings."""

    base_url: str = os.getenv("SCHEDULE_API_BASE_URL", "http://localhost:8000/api")
    api_token: str = os.getenv("SCHEDULE_API_TOKEN", "")
    request_timeout_sec: float = _safe_float("REQUEST_TIMEOUT", "15.0")
    retry_timeout_sec: float = _safe_float("RETRY_TIMEOUT", "30.0")


@dataclass(frozen=True)
class CalendarConfig:
    """Slot catalog and editor defaults for the availability calendar."""

    slot_catalog: str = os.getenv("SLOT_CATALOG", "standard")
    default_range_from: str = os.getenv("DEFAULT_RANGE_FROM", "08:00")
    default_range_to: str = os.getenv("DEFAULT_RANGE_TO", "18:00")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    api: ApiConfig = field(default_factory=ApiConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "tartrack-schedule")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.api.request_timeout_sec <= 0:
        raise ValueError(
            f"REQUEST_TIMEOUT must be > 0, got {config.api.request_timeout_sec}"
        )
    if config.api.retry_timeout_sec < config.api.request_timeout_sec:
        raise ValueError(
            "RETRY_TIMEOUT must be >= REQUEST_TIMEOUT, "
            f"got {config.api.retry_timeout_sec} < {config.api.request_timeout_sec}"
        )
    if not config.api.base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"SCHEDULE_API_BASE_URL must be an http(s) URL, got {config.api.base_url!r}"
        )

    catalog = config.calendar.slot_catalog
    if catalog not in CATALOG_HOURS:
        raise ValueError(
            f"SLOT_CATALOG must be one of {sorted(CATALOG_HOURS)}, got {catalog!r}"
        )

    first_hour, last_hour = CATALOG_HOURS[catalog]
    from_hour = _parse_hour("DEFAULT_RANGE_FROM", config.calendar.default_range_from)
    to_hour = _parse_hour("DEFAULT_RANGE_TO", config.calendar.default_range_to)
    if not first_hour <= from_hour <= last_hour:
        raise ValueError(
            f"DEFAULT_RANGE_FROM must be within the '{catalog}' catalog, "
            f"got {config.calendar.default_range_from}"
        )
    if not first_hour <= to_hour <= last_hour + 1:
        raise ValueError(
            f"DEFAULT_RANGE_TO must be within the '{catalog}' catalog, "
            f"got {config.calendar.default_range_to}"
        )
    if to_hour <= from_hour:
        raise ValueError(
            "DEFAULT_RANGE_TO must be later than DEFAULT_RANGE_FROM, "
            f"got {config.calendar.default_range_from} - {config.calendar.default_range_to}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info(
        "Configuration loaded for '%s' (slot catalog: %s)",
        config.app_name, config.calendar.slot_catalog,
    )
    return config


# Singleton instance
settings = load_config()
