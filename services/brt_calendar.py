"""Brazil-local (BRT, fixed UTC-3) calendar helpers.

All functions are pure. Instants are timezone-aware ``datetime`` objects in any
zone; calendar fields are always read in BRT. Brazil abolished daylight saving
in 2019, so the offset is constant.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import NamedTuple

from core.constants import CalendarDefaults
from core.exceptions import InvalidInstantError

BRT = timezone(timedelta(hours=CalendarDefaults.BRT_OFFSET_HOURS), "BRT")


class LocalFields(NamedTuple):
    year: int
    month: int
    day: int
    weekday: int  # Monday=0 ... Sunday=6


def _require_instant(instant: datetime) -> datetime:
    if not isinstance(instant, datetime):
        raise InvalidInstantError(f"Expected datetime, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InvalidInstantError(f"Naive datetime has no absolute meaning: {instant!r}")
    return instant


def to_brt(instant: datetime) -> datetime:
    """Return the same instant expressed in BRT."""
    return _require_instant(instant).astimezone(BRT)


def to_local_fields(instant: datetime) -> LocalFields:
    local = to_brt(instant)
    return LocalFields(local.year, local.month, local.day, local.weekday())


def local_date(instant: datetime) -> date:
    """BRT calendar day of an instant."""
    return to_brt(instant).date()


def from_local_fields(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Build the instant for a BRT wall-clock reading.

    Raises:
        InvalidInstantError: If the fields do not form a valid date/time
    """
    try:
        return datetime(year, month, day, hour, minute, second, tzinfo=BRT)
    except (TypeError, ValueError) as exc:
        raise InvalidInstantError(
            f"Invalid BRT fields {year}-{month}-{day} {hour}:{minute}:{second}: {exc}"
        ) from exc


def start_of_local_day(instant: datetime) -> datetime:
    fields = to_local_fields(instant)
    return from_local_fields(fields.year, fields.month, fields.day)


def add_local_days(instant: datetime, n: int) -> datetime:
    """Start of the BRT day ``n`` whole days after the instant's BRT day."""
    target = local_date(instant) + timedelta(days=n)
    return from_local_fields(target.year, target.month, target.day)
