"""Application-wide exception classes."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base exception for all application errors."""
    pass


class ConfigurationError(ApplicationError):
    """Raised when configuration is invalid."""
    pass


class CalendarConfigurationError(ConfigurationError):
    """Raised when the draw calendar yields no draw day within the probe bound.

    This means the holiday / no-draw-day tables are wrong for the dates in
    play, so the whole validation run is aborted.
    """

    def __init__(self, message: str, start_day=None, probe_limit: int | None = None):
        super().__init__(message)
        self.start_day = start_day
        self.probe_limit = probe_limit


class ValidationError(ApplicationError):
    """Raised when data validation fails."""
    pass


class InvalidInstantError(ValidationError, ValueError):
    """Raised when a calendar function receives a naive or non-datetime value."""
    pass


class RecordParseError(ValidationError):
    """Raised when an input record cannot be built from its source payload."""
    pass
