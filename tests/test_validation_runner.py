"""Tests for the sync and async validation runners."""

import logging
import random
from datetime import timedelta

import pytest

from core.exceptions import CalendarConfigurationError
from services.brt_calendar import from_local_fields as brt
from services.draw_calendar import DrawCalendar
from services.validation_runner import build_engine, run_validation, run_validation_async


@pytest.fixture
def snapshot(make_entry, make_recharge):
    rng = random.Random(42)
    start = brt(2025, 6, 1)
    players = [str(3000000000 + i) for i in range(5)]
    recharges = [
        make_recharge(rng.choice(players), start + timedelta(minutes=rng.randrange(0, 10 * 24 * 60)))
        for _ in range(15)
    ]
    entries = [
        make_entry(rng.choice(players), start + timedelta(minutes=rng.randrange(0, 10 * 24 * 60)))
        for _ in range(40)
    ]
    return entries, recharges


def test_run_validation_returns_report(snapshot):
    entries, recharges = snapshot
    result = run_validation(entries, recharges)

    assert len(result.verdicts) == len(entries)
    assert result.report.total == len(entries)
    assert result.report.recharge_count == len(recharges)
    assert result.report.valid + result.report.invalid == len(entries)

    data = result.to_dict()
    assert set(data) == {"results", "stats"}
    assert len(data["results"]) == len(entries)


@pytest.mark.asyncio
@pytest.mark.parametrize("batch_size", [1, 3, 1000])
async def test_async_matches_sync(snapshot, batch_size):
    entries, recharges = snapshot
    expected = run_validation(entries, recharges)

    result = await run_validation_async(entries, recharges, batch_size=batch_size)

    assert result.verdicts == expected.verdicts
    assert result.report == expected.report


@pytest.mark.asyncio
@pytest.mark.parametrize("batch_size, batches", [(8, 5), (3, 14), (40, 1), (100, 1)])
async def test_async_logs_batch_count(snapshot, caplog, batch_size, batches):
    entries, recharges = snapshot
    caplog.set_level(logging.DEBUG, logger="services.validation_runner")

    await run_validation_async(entries, recharges, batch_size=batch_size)

    assert f"Validated in {batches} batches of up to {batch_size}" in caplog.text


@pytest.mark.asyncio
async def test_async_rejects_non_positive_batch(snapshot):
    entries, recharges = snapshot
    with pytest.raises(ValueError):
        await run_validation_async(entries, recharges, batch_size=0)


@pytest.mark.asyncio
async def test_async_uses_configured_batch_size(snapshot, env_config):
    entries, recharges = snapshot
    result = await run_validation_async(entries, recharges, config=env_config)
    assert result.report.total == len(entries)


def test_build_engine_from_config(env_config):
    engine = build_engine(config=env_config)
    assert engine.calendar.no_draw_weekdays == {6}
    assert engine.window_cache_size == env_config.window_cache_size


def test_calendar_error_propagates(make_entry, make_recharge):
    broken = DrawCalendar(no_draw_weekdays=range(7))
    with pytest.raises(CalendarConfigurationError):
        run_validation(
            [make_entry("1000000001", brt(2025, 6, 2, 11))],
            [make_recharge("1000000001", brt(2025, 6, 2, 10))],
            calendar=broken,
        )


def test_unknown_when_no_recharges(make_entry):
    result = run_validation([make_entry("1000000001", brt(2025, 6, 2, 11))], None)
    assert result.report.unknown == 1
    assert result.report.recharge_count == 0
