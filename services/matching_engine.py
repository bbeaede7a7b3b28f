"""Recharge-to-ticket matching engine.

For one snapshot of entries and recharges, every entry receives exactly one
verdict. Per player, tickets are taken in chronological order and each one
irrevocably consumes the earliest unconsumed recharge whose eligibility window
covers the ticket's draw day. Recharges are a scarce resource: processing in
any other order would let a later ticket take a recharge an earlier ticket
already earned.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, TypeVar

from core import get_logger
from core.constants import ReasonCode, ValidationDefaults, Verdict
from core.models import EligibilityWindow, Entry, Recharge, TicketVerdict
from services.cache import WindowCache
from services.draw_calendar import DrawCalendar
from services.eligibility import DrawDayResolver, EligibilityWindowCalculator

logger = get_logger(__name__)

T = TypeVar("T")

_NO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def _entry_sort_key(entry: Entry) -> tuple:
    # Unparseable times last; the remaining fields only break ties so the
    # order never depends on the input array
    return (
        entry.ticket_time is None,
        entry.ticket_time or _NO_TIME,
        entry.ticket_number,
        entry.contest,
        entry.draw_date_label,
        entry.chosen_numbers,
        entry.raw_timestamp,
        entry.platform,
        entry.whatsapp,
        entry.source_status,
    )


def _recharge_sort_key(recharge: Recharge) -> tuple:
    return (
        recharge.recharge_time or _NO_TIME,
        recharge.recharge_id,
        recharge.amount,
        recharge.raw_time,
        recharge.source,
        recharge.status,
    )


def _partition(items: Iterable[T], key: Callable[[T], str]) -> Dict[str, List[T]]:
    groups: Dict[str, List[T]] = defaultdict(list)
    for item in items:
        groups[key(item)].append(item)
    return groups


def ordered_entries(entries: Iterable[Entry]) -> List[Entry]:
    """Entries in the canonical output order: by player, then chronologically."""
    return sorted(entries, key=lambda e: (e.game_id, _entry_sort_key(e)))


class PlayerMatcher:
    """Matching state for one player within one run."""

    def __init__(
        self,
        candidates: List[tuple[Recharge, EligibilityWindow]],
        resolver: DrawDayResolver,
    ) -> None:
        """Initialize player matcher.

        Args:
            candidates: Player's recharges with their windows, chronological
            resolver: Ticket draw-day resolver
        """
        self.candidates = candidates
        self.resolver = resolver
        self.consumed: set[str] = set()

    def match(self, entry: Entry) -> TicketVerdict:
        if entry.ticket_time is None:
            return TicketVerdict(entry, Verdict.INVALID, ReasonCode.INVALID_TICKET_TIME)

        ticket_time = entry.ticket_time
        draw_day = self.resolver.resolve(ticket_time)

        if not self.candidates:
            return TicketVerdict(
                entry, Verdict.INVALID, ReasonCode.NO_ELIGIBLE_RECHARGE, draw_day=draw_day
            )

        has_recharge_before = False
        expired_candidate = False
        consumed_candidate = False

        for recharge, window in self.candidates:
            # Candidates are chronological: nothing later can precede the ticket
            if ticket_time <= recharge.recharge_time:
                break
            has_recharge_before = True

            if not window.covers(draw_day):
                if draw_day > window.day2:
                    expired_candidate = True
                continue

            if recharge.recharge_id in self.consumed:
                consumed_candidate = True
                continue

            self.consumed.add(recharge.recharge_id)
            return self._bind(entry, recharge, window, draw_day)

        if not has_recharge_before:
            reason = ReasonCode.INVALID_TICKET_BEFORE_RECHARGE
        elif expired_candidate:
            reason = ReasonCode.INVALID_RECHARGE_WINDOW_EXPIRED
        elif consumed_candidate:
            reason = ReasonCode.INVALID_NOT_FIRST_TICKET_AFTER_RECHARGE
        else:
            reason = ReasonCode.NO_ELIGIBLE_RECHARGE
        return TicketVerdict(entry, Verdict.INVALID, reason, draw_day=draw_day)

    @staticmethod
    def _bind(
        entry: Entry,
        recharge: Recharge,
        window: EligibilityWindow,
        draw_day: date,
    ) -> TicketVerdict:
        if recharge.is_valid:
            verdict, reason = Verdict.VALID, None
        else:
            verdict, reason = Verdict.INVALID, ReasonCode.RECHARGE_INVALIDATED
        return TicketVerdict(
            entry=entry,
            verdict=verdict,
            reason_code=reason,
            bound_recharge=recharge,
            draw_day=draw_day,
            eligibility_window=window,
            cutoff_flag=draw_day == window.day2,
        )


class MatchingEngine:
    """Produces one verdict per entry for a snapshot of entries and recharges."""

    def __init__(
        self,
        calendar: Optional[DrawCalendar] = None,
        window_cache_size: int = ValidationDefaults.WINDOW_CACHE_SIZE,
    ) -> None:
        self.calendar = calendar or DrawCalendar()
        self.resolver = DrawDayResolver(self.calendar)
        self.window_cache_size = window_cache_size
        self.last_run_stats: Dict[str, Any] = {}

    def run(
        self,
        entries: Iterable[Entry],
        recharges: Optional[Iterable[Recharge]],
    ) -> List[TicketVerdict]:
        """Validate all entries.

        Args:
            entries: Ticket snapshot
            recharges: Recharge snapshot, ``None`` or empty when no recharge data was loaded

        Returns:
            Verdicts in canonical order (player id, then ticket time)

        Raises:
            CalendarConfigurationError: If the draw calendar is broken for the dates in play
        """
        return list(self.iter_verdicts(entries, recharges))

    def iter_verdicts(
        self,
        entries: Iterable[Entry],
        recharges: Optional[Iterable[Recharge]],
    ) -> Iterator[TicketVerdict]:
        """Yield verdicts one at a time, in canonical order.

        The full per-player lists are sorted up front, so how the caller
        consumes this iterator cannot affect the results.
        """
        entries = list(entries)
        recharges = list(recharges) if recharges is not None else []

        if not recharges:
            logger.warning(
                f"No recharge data loaded; marking {len(entries)} tickets as UNKNOWN"
            )
            self.last_run_stats = {"players": 0, "ignored_recharges": 0, "window_cache": {}}
            for entry in ordered_entries(entries):
                yield TicketVerdict(entry, Verdict.UNKNOWN, ReasonCode.NO_RECHARGE_DATA)
            return

        usable = [r for r in recharges if r.recharge_time is not None]
        ignored = len(recharges) - len(usable)
        if ignored:
            logger.warning(f"Ignoring {ignored} recharges without a parseable time")

        recharge_ids = [r.recharge_id for r in usable]
        if len(set(recharge_ids)) != len(recharge_ids):
            logger.warning("Duplicate recharge ids found; a player's duplicates share one consumption")

        cache = WindowCache(self.window_cache_size)
        calculator = EligibilityWindowCalculator(self.calendar, cache)
        consumed = 0

        entries_by_player = _partition(entries, lambda e: e.game_id)
        recharges_by_player = _partition(usable, lambda r: r.game_id)

        for game_id in sorted(entries_by_player):
            tickets = sorted(entries_by_player[game_id], key=_entry_sort_key)

            if not game_id.strip():
                for entry in tickets:
                    yield TicketVerdict(entry, Verdict.INVALID, ReasonCode.MISSING_GAME_ID)
                continue

            player_recharges = sorted(recharges_by_player.get(game_id, []), key=_recharge_sort_key)
            candidates = [(r, calculator.compute(r.recharge_time)) for r in player_recharges]
            matcher = PlayerMatcher(candidates, self.resolver)

            for entry in tickets:
                yield matcher.match(entry)
            consumed += len(matcher.consumed)

        self.last_run_stats = {
            "players": len(entries_by_player),
            "ignored_recharges": ignored,
            "consumed_recharges": consumed,
            "window_cache": cache.stats(),
        }
        logger.info(
            f"Matched {len(entries)} tickets for {len(entries_by_player)} players, "
            f"{consumed} recharges consumed"
        )
