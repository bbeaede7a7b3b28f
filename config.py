"""Application configuration module.

Reads settings from environment variables with sane defaults. The draw
calendar (holidays, early-cutoff dates, cutoff times) lives here rather than
in code so it can change from year to year without a release.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import time
from typing import Optional

from dotenv import load_dotenv

from core.constants import CalendarDefaults, ValidationDefaults
from core.exceptions import ConfigurationError

# Load environment variables from .env file when present
load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    """Get integer from environment variable with fallback."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_str(name: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.getenv(name, default)


def parse_month_days(value: str, setting: str = "month-day list") -> frozenset[tuple[int, int]]:
    """Parse comma-separated ``MM-DD`` pairs (``"12-25,01-01"``)."""
    pairs = set()
    for chunk in value.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            month_str, day_str = chunk.split("-")
            month, day = int(month_str), int(day_str)
        except ValueError:
            raise ConfigurationError(f"Invalid {setting} entry: {chunk!r}") from None
        if not (1 <= month <= 12 and 1 <= day <= 31):
            raise ConfigurationError(f"Invalid {setting} entry: {chunk!r}")
        pairs.add((month, day))
    return frozenset(pairs)


def parse_time_of_day(value: str, setting: str = "time of day") -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS``."""
    try:
        parts = [int(p) for p in value.strip().split(":")]
        if not 2 <= len(parts) <= 3:
            raise ValueError(value)
        return time(*parts)
    except ValueError:
        raise ConfigurationError(f"Invalid {setting}: {value!r}") from None


def parse_weekdays(value: str) -> frozenset[int]:
    """Parse comma-separated ``date.weekday()`` numbers (Monday=0, Sunday=6)."""
    days = set()
    for chunk in value.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            day = int(chunk)
        except ValueError:
            raise ConfigurationError(f"Invalid weekday: {chunk!r}") from None
        if not 0 <= day <= 6:
            raise ConfigurationError(f"Invalid weekday: {chunk!r}")
        days.add(day)
    if len(days) == 7:
        raise ConfigurationError("NO_DRAW_WEEKDAYS excludes every day of the week")
    return frozenset(days)


@dataclass(frozen=True)
class Config:
    environment: str
    debug: bool
    web_host: str
    web_port: int
    log_level: str
    log_file: Optional[str]

    # Draw calendar
    holidays: frozenset[tuple[int, int]]
    early_cutoff_dates: frozenset[tuple[int, int]]
    default_cutoff: time
    early_cutoff: time
    no_draw_weekdays: frozenset[int]
    calendar_probe_limit: int

    # Validation runs
    validation_batch_size: int
    window_cache_size: int


def load_config() -> Config:
    """Load application configuration from environment variables.

    Returns:
        Config: Application configuration with validated values

    Raises:
        ConfigurationError: If a calendar setting is malformed
    """
    probe_limit = _get_int("CALENDAR_PROBE_LIMIT", CalendarDefaults.PROBE_LIMIT)
    if probe_limit < 1:
        raise ConfigurationError("CALENDAR_PROBE_LIMIT must be positive")

    config = Config(
        environment=_get_str("ENVIRONMENT", "development"),
        debug=_get_bool("DEBUG", False),
        web_host=_get_str("WEB_HOST", "0.0.0.0"),
        web_port=_get_int("WEB_PORT", 5000),
        log_level=_get_str("LOG_LEVEL", "INFO"),
        log_file=_get_str("LOG_FILE", "") or None,
        holidays=parse_month_days(
            _get_str("DRAW_HOLIDAYS", CalendarDefaults.HOLIDAYS), "DRAW_HOLIDAYS"
        ),
        early_cutoff_dates=parse_month_days(
            _get_str("EARLY_CUTOFF_DATES", CalendarDefaults.EARLY_CUTOFF_DATES),
            "EARLY_CUTOFF_DATES",
        ),
        default_cutoff=parse_time_of_day(
            _get_str("DEFAULT_CUTOFF", CalendarDefaults.DEFAULT_CUTOFF), "DEFAULT_CUTOFF"
        ),
        early_cutoff=parse_time_of_day(
            _get_str("EARLY_CUTOFF", CalendarDefaults.EARLY_CUTOFF), "EARLY_CUTOFF"
        ),
        no_draw_weekdays=parse_weekdays(
            _get_str("NO_DRAW_WEEKDAYS", CalendarDefaults.NO_DRAW_WEEKDAYS)
        ),
        calendar_probe_limit=probe_limit,
        validation_batch_size=max(1, _get_int("VALIDATION_BATCH_SIZE", ValidationDefaults.BATCH_SIZE)),
        window_cache_size=max(1, _get_int("WINDOW_CACHE_SIZE", ValidationDefaults.WINDOW_CACHE_SIZE)),
    )

    return config
