"""Orchestration around the matching engine.

The engine is a pure function of the two snapshots. This module adds what a
caller needs around it: configuration, metrics, logging, and an async variant
that yields to the event loop between fixed-size batches so a large snapshot
does not block other work. Batching only paces consumption of the engine's
iterator; it never changes ordering or results.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from core import get_logger
from core.constants import ValidationDefaults
from core.models import Entry, Recharge, TicketVerdict
from services.draw_calendar import DrawCalendar
from services.matching_engine import MatchingEngine
from services.validation_report import ValidationReport, build_report
from utils.performance import ValidationMonitor

if TYPE_CHECKING:
    from config import Config

logger = get_logger(__name__)
monitor = ValidationMonitor()


@dataclass
class ValidationResult:
    verdicts: List[TicketVerdict]
    report: ValidationReport

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [item.to_dict() for item in self.verdicts],
            "stats": self.report.to_dict(),
        }


def build_engine(
    calendar: Optional[DrawCalendar] = None,
    config: Optional[Config] = None,
) -> MatchingEngine:
    """Create an engine from an explicit calendar or from configuration."""
    if calendar is None and config is not None:
        calendar = DrawCalendar.from_config(config)
    cache_size = config.window_cache_size if config is not None else ValidationDefaults.WINDOW_CACHE_SIZE
    return MatchingEngine(calendar, window_cache_size=cache_size)


def _finish(
    verdicts: List[TicketVerdict],
    recharges: Optional[List[Recharge]],
) -> ValidationResult:
    report = build_report(verdicts, recharge_count=len(recharges or []))
    monitor.record_verdicts(verdicts)
    logger.info(
        f"Validation finished: {report.valid} valid, {report.invalid} invalid, "
        f"{report.unknown} unknown, {report.cutoff} via second draw day"
    )
    return ValidationResult(verdicts=verdicts, report=report)


def run_validation(
    entries: Iterable[Entry],
    recharges: Optional[Iterable[Recharge]],
    calendar: Optional[DrawCalendar] = None,
    config: Optional[Config] = None,
) -> ValidationResult:
    """Validate a snapshot synchronously.

    Args:
        entries: Ticket snapshot
        recharges: Recharge snapshot, None when no recharge data was loaded
        calendar: Draw calendar (built from ``config`` or defaults when omitted)
        config: Application configuration

    Returns:
        ValidationResult with verdicts and report

    Raises:
        CalendarConfigurationError: If the draw calendar is broken for the dates in play
    """
    recharge_list = list(recharges) if recharges is not None else None
    engine = build_engine(calendar, config)
    with monitor.track_run():
        verdicts = engine.run(entries, recharge_list)
    return _finish(verdicts, recharge_list)


async def run_validation_async(
    entries: Iterable[Entry],
    recharges: Optional[Iterable[Recharge]],
    calendar: Optional[DrawCalendar] = None,
    config: Optional[Config] = None,
    batch_size: Optional[int] = None,
) -> ValidationResult:
    """Validate a snapshot, yielding to the event loop every ``batch_size`` verdicts.

    Produces exactly the same result as ``run_validation``.
    """
    if batch_size is None:
        batch_size = config.validation_batch_size if config is not None else ValidationDefaults.BATCH_SIZE
    if batch_size < 1:
        raise ValueError("batch_size must be positive")

    recharge_list = list(recharges) if recharges is not None else None
    engine = build_engine(calendar, config)
    verdicts: List[TicketVerdict] = []

    with monitor.track_run():
        for item in engine.iter_verdicts(entries, recharge_list):
            verdicts.append(item)
            if len(verdicts) % batch_size == 0:
                await asyncio.sleep(0)

    batches = math.ceil(len(verdicts) / batch_size)
    logger.debug(f"Validated in {batches} batches of up to {batch_size}")
    return _finish(verdicts, recharge_list)
