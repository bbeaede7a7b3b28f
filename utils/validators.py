"""Input parsing helpers for ticket and recharge fields."""

import re
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Union

from core.constants import ValidationDefaults
from core.exceptions import InvalidInstantError
from services.brt_calendar import from_local_fields


_TIME_PART = (
    r"(?:[ T]+(?P<H>\d{1,2}):(?P<M>\d{2})"
    r"(?::(?P<S>\d{2})(?:\.(?P<F>\d{1,6})\d*)?)?"
    r"\s*(?P<tz>[zZ]|[+-]\d{2}:?\d{2})?)?"
)
# dd/mm/yyyy as written in the spreadsheets
BR_DATETIME_RE = re.compile(r"^(?P<d>\d{1,2})[/-](?P<m>\d{1,2})[/-](?P<y>\d{4})" + _TIME_PART + r"$")
ISO_DATETIME_RE = re.compile(r"^(?P<y>\d{4})[/-](?P<m>\d{1,2})[/-](?P<d>\d{1,2})" + _TIME_PART + r"$")
NUMBER_SPLIT_RE = re.compile(r"[,;|\t\s]+")


def _parse_offset(value: str) -> timezone:
    if value in {"z", "Z"}:
        return timezone.utc
    sign = -1 if value[0] == "-" else 1
    digits = value[1:].replace(":", "")
    offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
    return timezone(sign * offset)


def parse_brazil_time(value: Optional[str]) -> Optional[datetime]:
    """Parse a ticket or recharge timestamp into an aware instant.

    Strings with an explicit zone (``Z`` or ``±HH:MM``) are taken as given.
    Anything else (``dd/mm/yyyy HH:MM[:SS]``, or ISO ``yyyy-mm-dd HH:MM:SS``)
    is Brazil wall-clock time. A missing time part means midnight.

    Returns None when the value cannot be parsed.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    match = ISO_DATETIME_RE.match(text) or BR_DATETIME_RE.match(text)
    if match is None:
        return None

    parts = match.groupdict()
    try:
        year, month, day = int(parts["y"]), int(parts["m"]), int(parts["d"])
        hour = int(parts["H"] or 0)
        minute = int(parts["M"] or 0)
        second = int(parts["S"] or 0)
        micro = int((parts["F"] or "0").ljust(6, "0"))

        if parts["tz"]:
            return datetime(
                year, month, day, hour, minute, second, micro,
                tzinfo=_parse_offset(parts["tz"]),
            )
        return from_local_fields(year, month, day, hour, minute, second).replace(microsecond=micro)
    except (ValueError, InvalidInstantError):
        return None


def parse_chosen_numbers(raw: Union[str, Iterable[int], None]) -> tuple[int, ...]:
    """Parse the player's picks, keeping integers within the game range."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        tokens = [t for t in NUMBER_SPLIT_RE.split(raw) if t]
    else:
        tokens = list(raw)

    numbers = []
    for token in tokens:
        try:
            number = int(token)
        except (TypeError, ValueError):
            continue
        if ValidationDefaults.MIN_NUMBER <= number <= ValidationDefaults.MAX_NUMBER:
            numbers.append(number)
    return tuple(numbers)


def parse_amount(raw: Union[str, int, float, None]) -> float:
    """Parse a recharge amount such as ``"50"``, ``"R$ 1.234,50"`` or ``"1,234.50"``."""
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)

    cleaned = re.sub(r"[^\d,.\-]", "", raw)
    if not cleaned:
        return 0.0

    if "," in cleaned and "." in cleaned:
        # The right-most separator is the decimal one
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        head, _, tail = cleaned.rpartition(",")
        if len(tail) != 3 and "," not in head:
            cleaned = f"{head}.{tail}"
        else:
            cleaned = cleaned.replace(",", "")

    try:
        return float(cleaned)
    except ValueError:
        return 0.0
