"""Draw calendar: which BRT days host a draw and when each day's orders close."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Iterable, Optional, Union

from core.constants import CalendarDefaults
from core.exceptions import CalendarConfigurationError
from services.brt_calendar import from_local_fields, local_date

if TYPE_CHECKING:
    from config import Config

LocalDay = Union[date, datetime]

DEFAULT_HOLIDAYS = frozenset({(12, 25), (1, 1)})
DEFAULT_EARLY_CUTOFF_DATES = frozenset({(12, 24), (12, 31)})
SUNDAY = 6


class DrawCalendar:
    """Draw-day and cutoff rules.

    Holidays and early-cutoff dates are ``(month, day)`` pairs that repeat
    every year. Weekdays follow ``date.weekday()`` (Monday=0, Sunday=6).
    """

    def __init__(
        self,
        holidays: Optional[Iterable[tuple[int, int]]] = None,
        early_cutoff_dates: Optional[Iterable[tuple[int, int]]] = None,
        default_cutoff: time = time(20, 0),
        early_cutoff: time = time(16, 0),
        no_draw_weekdays: Optional[Iterable[int]] = None,
        probe_limit: int = CalendarDefaults.PROBE_LIMIT,
    ) -> None:
        """Initialize draw calendar.

        Args:
            holidays: Month-day pairs without a draw (default Dec 25, Jan 1)
            early_cutoff_dates: Month-day pairs using ``early_cutoff`` (default Dec 24, Dec 31)
            default_cutoff: Cutoff time of day on ordinary draw days
            early_cutoff: Cutoff time of day on early-cutoff dates
            no_draw_weekdays: Weekdays without a draw (default Sunday)
            probe_limit: Maximum days searched for the next draw day
        """
        self.holidays = frozenset(DEFAULT_HOLIDAYS if holidays is None else holidays)
        self.early_cutoff_dates = frozenset(
            DEFAULT_EARLY_CUTOFF_DATES if early_cutoff_dates is None else early_cutoff_dates
        )
        self.default_cutoff = default_cutoff
        self.early_cutoff = early_cutoff
        self.no_draw_weekdays = frozenset({SUNDAY} if no_draw_weekdays is None else no_draw_weekdays)
        self.probe_limit = probe_limit

    @classmethod
    def from_config(cls, config: Config) -> DrawCalendar:
        return cls(
            holidays=config.holidays,
            early_cutoff_dates=config.early_cutoff_dates,
            default_cutoff=config.default_cutoff,
            early_cutoff=config.early_cutoff,
            no_draw_weekdays=config.no_draw_weekdays,
            probe_limit=config.calendar_probe_limit,
        )

    @staticmethod
    def _as_day(local_day: LocalDay) -> date:
        # datetime is a date subclass, so check it first
        if isinstance(local_day, datetime):
            return local_date(local_day)
        return local_day

    def is_no_draw_day(self, local_day: LocalDay) -> bool:
        day = self._as_day(local_day)
        if day.weekday() in self.no_draw_weekdays:
            return True
        return (day.month, day.day) in self.holidays

    def is_early_cutoff_day(self, local_day: LocalDay) -> bool:
        day = self._as_day(local_day)
        return (day.month, day.day) in self.early_cutoff_dates

    def cutoff_time_of_day(self, local_day: LocalDay) -> time:
        return self.early_cutoff if self.is_early_cutoff_day(local_day) else self.default_cutoff

    def cutoff_instant(self, local_day: LocalDay) -> datetime:
        day = self._as_day(local_day)
        cutoff = self.cutoff_time_of_day(day)
        return from_local_fields(day.year, day.month, day.day, cutoff.hour, cutoff.minute, cutoff.second)

    def next_draw_day(self, local_day: LocalDay) -> date:
        """First draw day on or after ``local_day``.

        Raises:
            CalendarConfigurationError: If no draw day exists within ``probe_limit`` days
        """
        start = self._as_day(local_day)
        probe = start
        for _ in range(self.probe_limit):
            if not self.is_no_draw_day(probe):
                return probe
            probe += timedelta(days=1)
        raise CalendarConfigurationError(
            f"No draw day within {self.probe_limit} days of {start.isoformat()}; "
            "check the holiday and no-draw weekday configuration",
            start_day=start,
            probe_limit=self.probe_limit,
        )

    def __repr__(self) -> str:
        return (
            f"DrawCalendar(holidays={sorted(self.holidays)}, "
            f"early_cutoff_dates={sorted(self.early_cutoff_dates)}, "
            f"default_cutoff={self.default_cutoff}, early_cutoff={self.early_cutoff}, "
            f"no_draw_weekdays={sorted(self.no_draw_weekdays)}, probe_limit={self.probe_limit})"
        )
