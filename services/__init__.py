"""Services package."""

from .brt_calendar import (
    BRT,
    LocalFields,
    to_local_fields,
    from_local_fields,
    start_of_local_day,
    add_local_days,
    local_date,
)
from .draw_calendar import DrawCalendar
from .cache import WindowCache
from .eligibility import EligibilityWindowCalculator, DrawDayResolver
from .matching_engine import MatchingEngine, PlayerMatcher
from .validation_report import ValidationReport, build_report, describe_reason
from .validation_runner import ValidationResult, run_validation, run_validation_async, build_engine
from .engagement_service import EngagementStats, DailyEngagement, analyze_engagement, analyze_engagement_by_date

__all__ = [
    # Calendar
    "BRT",
    "LocalFields",
    "to_local_fields",
    "from_local_fields",
    "start_of_local_day",
    "add_local_days",
    "local_date",
    "DrawCalendar",
    # Engine
    "WindowCache",
    "EligibilityWindowCalculator",
    "DrawDayResolver",
    "MatchingEngine",
    "PlayerMatcher",
    # Reporting
    "ValidationReport",
    "build_report",
    "describe_reason",
    "ValidationResult",
    "run_validation",
    "run_validation_async",
    "build_engine",
    "EngagementStats",
    "DailyEngagement",
    "analyze_engagement",
    "analyze_engagement_by_date",
]
