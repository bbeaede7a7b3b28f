"""Eligibility windows for recharges and draw-day resolution for tickets."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from core.exceptions import CalendarConfigurationError
from core.models import EligibilityWindow
from services.brt_calendar import local_date, to_brt
from services.cache import WindowCache
from services.draw_calendar import DrawCalendar


def _first_draw_day_with_cutoff(calendar: DrawCalendar, instant: datetime, strict: bool) -> date:
    """First draw day whose cutoff is at (or, if ``strict``, after) ``instant``.

    Raises:
        CalendarConfigurationError: If no such day exists within the probe bound
    """
    start = local_date(instant)
    probe = start
    for _ in range(calendar.probe_limit):
        if not calendar.is_no_draw_day(probe):
            cutoff = calendar.cutoff_instant(probe)
            if cutoff > instant or (not strict and cutoff == instant):
                return probe
        probe += timedelta(days=1)
    raise CalendarConfigurationError(
        f"No draw day found within {calendar.probe_limit} days of {to_brt(instant).isoformat()}",
        start_day=start,
        probe_limit=calendar.probe_limit,
    )


class EligibilityWindowCalculator:
    """Computes the two draw days a recharge makes its player eligible for.

    ``day1`` is the first draw day whose cutoff is still ahead of the recharge:
    a recharge made on a no-draw day, or after that day's cutoff, rolls forward.
    ``day2`` is the next draw day after ``day1``.
    """

    def __init__(self, calendar: DrawCalendar, cache: Optional[WindowCache] = None) -> None:
        self.calendar = calendar
        self.cache = cache

    def compute(self, recharge_time: datetime) -> EligibilityWindow:
        """Get the eligibility window of a recharge instant.

        Args:
            recharge_time: Aware recharge instant

        Returns:
            EligibilityWindow for the recharge

        Raises:
            CalendarConfigurationError: If the calendar has no draw day in range
        """
        if self.cache is not None:
            return self.cache.get_or_compute(recharge_time, self._compute)
        return self._compute(recharge_time)

    def _compute(self, recharge_time: datetime) -> EligibilityWindow:
        day1 = _first_draw_day_with_cutoff(self.calendar, recharge_time, strict=True)
        day2 = self.calendar.next_draw_day(day1 + timedelta(days=1))
        return EligibilityWindow(
            day1=day1,
            day1_cutoff=self.calendar.cutoff_instant(day1),
            day2=day2,
            day2_cutoff=self.calendar.cutoff_instant(day2),
        )


class DrawDayResolver:
    """Resolves the draw day a ticket counts toward.

    A ticket belongs to the first draw day whose cutoff is at or after the
    ticket instant, so late-night and no-draw-day submissions roll forward.
    """

    def __init__(self, calendar: DrawCalendar) -> None:
        self.calendar = calendar

    def resolve(self, ticket_time: datetime) -> date:
        """Get the draw day for a ticket instant.

        Raises:
            CalendarConfigurationError: If no draw day exists within the probe bound
        """
        return _first_draw_day_with_cutoff(self.calendar, ticket_time, strict=False)
