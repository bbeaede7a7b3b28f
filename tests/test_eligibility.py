"""Unit tests for eligibility windows and ticket draw-day resolution."""

from datetime import date, datetime, timedelta, timezone

import pytest

from core.exceptions import CalendarConfigurationError
from services.brt_calendar import from_local_fields as brt
from services.cache import WindowCache
from services.draw_calendar import DrawCalendar
from services.eligibility import DrawDayResolver, EligibilityWindowCalculator


@pytest.fixture
def calculator(calendar):
    return EligibilityWindowCalculator(calendar)


@pytest.fixture
def resolver(calendar):
    return DrawDayResolver(calendar)


def test_recharge_before_cutoff_on_draw_day(calculator):
    window = calculator.compute(datetime.fromisoformat("2025-06-02T19:30:00-03:00"))
    assert window.day1 == date(2025, 6, 2)
    assert window.day2 == date(2025, 6, 3)
    assert window.day1_cutoff == brt(2025, 6, 2, 20)
    assert window.day2_cutoff == brt(2025, 6, 3, 20)


def test_saturday_recharge_after_cutoff_rolls_past_sunday(calculator):
    window = calculator.compute(datetime.fromisoformat("2025-06-07T21:00:00-03:00"))
    assert window.day1 == date(2025, 6, 9)
    assert window.day2 == date(2025, 6, 10)


def test_sunday_recharge_rolls_to_monday(calculator):
    window = calculator.compute(brt(2025, 6, 8, 9, 0))
    assert window.day1 == date(2025, 6, 9)
    assert window.day2 == date(2025, 6, 10)


def test_saturday_window_skips_sunday_for_day2(calculator):
    window = calculator.compute(brt(2025, 6, 7, 10, 0))
    assert window.day1 == date(2025, 6, 7)
    assert window.day2 == date(2025, 6, 9)


def test_recharge_exactly_at_cutoff_rolls_forward(calculator):
    window = calculator.compute(brt(2025, 6, 2, 20, 0, 0))
    assert window.day1 == date(2025, 6, 3)


def test_christmas_eve_window(calculator):
    window = calculator.compute(brt(2025, 12, 24, 15, 0))
    assert window.day1 == date(2025, 12, 24)
    assert window.day1_cutoff == brt(2025, 12, 24, 16)
    assert window.day2 == date(2025, 12, 26)


def test_christmas_eve_after_early_cutoff_on_friday(calculator):
    # 2027: Dec 24 Friday, Dec 25 Saturday (holiday), Dec 26 Sunday
    window = calculator.compute(brt(2027, 12, 24, 17, 0))
    assert window.day1 == date(2027, 12, 27)
    assert window.day2 == date(2027, 12, 28)


def test_new_year_window(calculator):
    window = calculator.compute(brt(2025, 12, 31, 10, 0))
    assert window.day1 == date(2025, 12, 31)
    assert window.day1_cutoff == brt(2025, 12, 31, 16)
    assert window.day2 == date(2026, 1, 2)


def test_window_properties_over_a_year(calendar, calculator):
    start = brt(2025, 1, 1, 0, 0)
    for hours in range(0, 366 * 24, 7):
        instant = start + timedelta(hours=hours)
        window = calculator.compute(instant)

        assert window.day2 > window.day1
        assert not calendar.is_no_draw_day(window.day1)
        assert not calendar.is_no_draw_day(window.day2)
        assert window.day1_cutoff > instant

        between = window.day1 + timedelta(days=1)
        while between < window.day2:
            assert calendar.is_no_draw_day(between)
            between += timedelta(days=1)


def test_window_cache_is_used(calendar):
    cache = WindowCache(maxsize=8)
    calculator = EligibilityWindowCalculator(calendar, cache)
    first = calculator.compute(brt(2025, 6, 2, 10))
    # Same instant in another zone
    second = calculator.compute(datetime(2025, 6, 2, 13, tzinfo=timezone.utc))
    assert first is second
    assert cache.stats() == {"size": 1, "maxsize": 8, "hits": 1, "misses": 1}


def test_window_probe_bound_is_fatal():
    calculator = EligibilityWindowCalculator(DrawCalendar(no_draw_weekdays=range(7)))
    with pytest.raises(CalendarConfigurationError):
        calculator.compute(brt(2025, 6, 2, 10))


def test_ticket_before_cutoff_same_day(resolver):
    assert resolver.resolve(datetime.fromisoformat("2025-06-02T19:45:00-03:00")) == date(2025, 6, 2)


def test_ticket_exactly_at_cutoff_counts_for_same_day(resolver):
    assert resolver.resolve(brt(2025, 6, 2, 20, 0, 0)) == date(2025, 6, 2)


def test_ticket_after_cutoff_rolls_to_next_day(resolver):
    assert resolver.resolve(brt(2025, 6, 2, 20, 0, 1)) == date(2025, 6, 3)


def test_late_saturday_ticket_rolls_to_monday(resolver):
    assert resolver.resolve(brt(2025, 6, 7, 22, 0)) == date(2025, 6, 9)


def test_sunday_ticket_rolls_to_monday(resolver):
    assert resolver.resolve(brt(2025, 6, 8, 11, 0)) == date(2025, 6, 9)


def test_early_cutoff_ticket_skips_christmas(resolver):
    assert resolver.resolve(brt(2025, 12, 24, 15, 59)) == date(2025, 12, 24)
    assert resolver.resolve(brt(2025, 12, 24, 17, 0)) == date(2025, 12, 26)


def test_resolved_day_is_never_a_no_draw_day(calendar, resolver):
    start = brt(2025, 11, 1, 0, 0)
    for hours in range(0, 120 * 24, 5):
        instant = start + timedelta(hours=hours)
        day = resolver.resolve(instant)
        assert not calendar.is_no_draw_day(day)
        assert calendar.cutoff_instant(day) >= instant


def test_resolver_probe_bound_is_fatal():
    resolver = DrawDayResolver(DrawCalendar(probe_limit=1))
    with pytest.raises(CalendarConfigurationError):
        resolver.resolve(brt(2025, 6, 8, 11, 0))
