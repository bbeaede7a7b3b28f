"""Core application components."""

from core.logger import setup_logger, get_logger
from core.constants import (
    CalendarDefaults,
    ValidationDefaults,
    Verdict,
    RechargeStatus,
    ReasonCode,
    REASON_DESCRIPTIONS,
)
from core.exceptions import (
    ApplicationError,
    ConfigurationError,
    CalendarConfigurationError,
    ValidationError,
    InvalidInstantError,
    RecordParseError,
)
from core.models import Entry, Recharge, EligibilityWindow, TicketVerdict

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    # Constants
    'CalendarDefaults',
    'ValidationDefaults',
    'Verdict',
    'RechargeStatus',
    'ReasonCode',
    'REASON_DESCRIPTIONS',
    # Exceptions
    'ApplicationError',
    'ConfigurationError',
    'CalendarConfigurationError',
    'ValidationError',
    'InvalidInstantError',
    'RecordParseError',
    # Records
    'Entry',
    'Recharge',
    'EligibilityWindow',
    'TicketVerdict',
]
