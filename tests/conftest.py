"""Pytest configuration and fixtures."""

import itertools

import pytest

from core.models import Entry, Recharge
from services.draw_calendar import DrawCalendar
from services.matching_engine import MatchingEngine


@pytest.fixture
def calendar():
    """Default draw calendar: no draws on Sundays, Dec 25 and Jan 1."""
    return DrawCalendar()


@pytest.fixture
def engine(calendar):
    return MatchingEngine(calendar)


@pytest.fixture
def make_entry():
    """Factory for tickets with unique ticket numbers."""
    counter = itertools.count(1)

    def factory(game_id, ticket_time, **kwargs):
        kwargs.setdefault("ticket_number", f"T{next(counter):04d}")
        kwargs.setdefault("chosen_numbers", (1, 2, 3, 4, 5))
        kwargs.setdefault("contest", "1001")
        return Entry(game_id=game_id, ticket_time=ticket_time, **kwargs)

    return factory


@pytest.fixture
def make_recharge():
    """Factory for recharges with unique recharge ids."""
    counter = itertools.count(1)

    def factory(game_id, recharge_time, **kwargs):
        kwargs.setdefault("recharge_id", f"R{next(counter):04d}")
        kwargs.setdefault("amount", 20.0)
        return Recharge(game_id=game_id, recharge_time=recharge_time, **kwargs)

    return factory


@pytest.fixture
def env_config(monkeypatch):
    """Load configuration from a clean calendar environment."""
    for name in (
        "DRAW_HOLIDAYS", "EARLY_CUTOFF_DATES", "DEFAULT_CUTOFF", "EARLY_CUTOFF",
        "NO_DRAW_WEEKDAYS", "CALENDAR_PROBE_LIMIT", "VALIDATION_BATCH_SIZE",
        "WINDOW_CACHE_SIZE", "LOG_FILE", "ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)

    from config import load_config
    return load_config()
