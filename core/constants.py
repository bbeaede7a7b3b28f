"""Application-wide constants and configuration values."""

from __future__ import annotations

from enum import Enum


# Calendar constants
class CalendarDefaults:
    """Default draw calendar configuration."""
    BRT_OFFSET_HOURS = -3  # Brazil has no DST since 2019
    DEFAULT_CUTOFF = "20:00"
    EARLY_CUTOFF = "16:00"
    HOLIDAYS = "12-25,01-01"  # month-day
    EARLY_CUTOFF_DATES = "12-24,12-31"
    NO_DRAW_WEEKDAYS = "6"  # date.weekday(), Sunday
    PROBE_LIMIT = 60  # days


# Validation constants
class ValidationDefaults:
    """Validation run defaults."""
    BATCH_SIZE = 100  # verdicts between cooperative yields
    WINDOW_CACHE_SIZE = 4096
    MIN_NUMBER = 1
    MAX_NUMBER = 80
    RECHARGE_ROW_TYPE = "充值"
    RECHARGE_DEFAULT_SOURCE = "三方"


# Status enums
class Verdict(str, Enum):
    """Ticket validation outcome."""
    VALID = "VALID"
    INVALID = "INVALID"
    UNKNOWN = "UNKNOWN"


class RechargeStatus(str, Enum):
    """Recharge status as carried by the source data."""
    VALID = "VALID"
    INVALIDATED = "INVALIDATED"


class ReasonCode(str, Enum):
    """Stable reason codes attached to verdicts."""
    NO_RECHARGE_DATA = "NO_RECHARGE_DATA"
    NO_ELIGIBLE_RECHARGE = "NO_ELIGIBLE_RECHARGE"
    INVALID_TICKET_BEFORE_RECHARGE = "INVALID_TICKET_BEFORE_RECHARGE"
    INVALID_NOT_FIRST_TICKET_AFTER_RECHARGE = "INVALID_NOT_FIRST_TICKET_AFTER_RECHARGE"
    INVALID_RECHARGE_WINDOW_EXPIRED = "INVALID_RECHARGE_WINDOW_EXPIRED"
    INVALID_TICKET_TIME = "INVALID_TICKET_TIME"
    RECHARGE_INVALIDATED = "RECHARGE_INVALIDATED"
    MISSING_GAME_ID = "MISSING_GAME_ID"


REASON_DESCRIPTIONS = {
    ReasonCode.NO_RECHARGE_DATA: "No recharge data uploaded",
    ReasonCode.NO_ELIGIBLE_RECHARGE: "No recharge window covers this ticket",
    ReasonCode.INVALID_TICKET_BEFORE_RECHARGE: "Ticket created before any recharge",
    ReasonCode.INVALID_NOT_FIRST_TICKET_AFTER_RECHARGE: "Recharge already consumed by previous ticket",
    ReasonCode.INVALID_RECHARGE_WINDOW_EXPIRED: "Recharge expired after 2nd eligible day",
    ReasonCode.INVALID_TICKET_TIME: "Ticket registration time could not be parsed",
    ReasonCode.RECHARGE_INVALIDATED: "Bound recharge was invalidated",
    ReasonCode.MISSING_GAME_ID: "Ticket has no Game ID",
}
