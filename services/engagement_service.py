"""Engagement between players who recharge and players who file tickets."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from core.models import Entry, Recharge
from services.brt_calendar import local_date


@dataclass
class EngagementStats:
    """Overlap between rechargers and ticket creators."""
    total_rechargers: int
    total_participants: int
    recharged_no_ticket: int
    participation_rate: float  # percent, one decimal
    multi_recharge_no_ticket: int
    recharger_ids: List[str] = field(default_factory=list)
    participant_ids: List[str] = field(default_factory=list)
    recharged_no_ticket_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRechargers": self.total_rechargers,
            "totalParticipants": self.total_participants,
            "rechargedNoTicket": self.recharged_no_ticket,
            "participationRate": self.participation_rate,
            "multiRechargeNoTicket": self.multi_recharge_no_ticket,
            "rechargerIds": list(self.recharger_ids),
            "participantIds": list(self.participant_ids),
            "rechargedNoTicketIds": list(self.recharged_no_ticket_ids),
        }


@dataclass
class DailyEngagement:
    date: date
    display_date: str
    total_entries: int
    total_recharges: int
    engagement: EngagementStats

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "date": self.date.isoformat(),
            "displayDate": self.display_date,
            "totalEntries": self.total_entries,
            "totalRecharges": self.total_recharges,
        }
        data.update(self.engagement.to_dict())
        return data


def analyze_engagement(entries: Iterable[Entry], recharges: Iterable[Recharge]) -> EngagementStats:
    """Compare the set of players who recharged with the set who filed tickets."""
    recharges = list(recharges)
    recharger_ids = {r.game_id for r in recharges if r.game_id}
    ticket_creator_ids = {e.game_id for e in entries if e.game_id}

    participant_ids = recharger_ids & ticket_creator_ids
    recharged_no_ticket = recharger_ids - ticket_creator_ids

    recharge_counts = Counter(r.game_id for r in recharges if r.game_id)
    multi_recharge_no_ticket = [
        game_id for game_id, count in recharge_counts.items()
        if count > 1 and game_id not in ticket_creator_ids
    ]

    rate = round(len(participant_ids) / len(recharger_ids) * 100, 1) if recharger_ids else 0.0

    return EngagementStats(
        total_rechargers=len(recharger_ids),
        total_participants=len(participant_ids),
        recharged_no_ticket=len(recharged_no_ticket),
        participation_rate=rate,
        multi_recharge_no_ticket=len(multi_recharge_no_ticket),
        recharger_ids=sorted(recharger_ids),
        participant_ids=sorted(participant_ids),
        recharged_no_ticket_ids=sorted(recharged_no_ticket),
    )


def analyze_engagement_by_date(
    entries: Iterable[Entry],
    recharges: Iterable[Recharge],
    days: int = 7,
    today: Optional[date] = None,
) -> List[DailyEngagement]:
    """Engagement per BRT day for the last ``days`` days, newest first.

    Records without a parseable time are left out.
    """
    if today is None:
        today = local_date(datetime.now(timezone.utc))

    entries_by_day: Dict[date, List[Entry]] = defaultdict(list)
    for entry in entries:
        if entry.ticket_time is not None:
            entries_by_day[local_date(entry.ticket_time)].append(entry)

    recharges_by_day: Dict[date, List[Recharge]] = defaultdict(list)
    for recharge in recharges:
        if recharge.recharge_time is not None:
            recharges_by_day[local_date(recharge.recharge_time)].append(recharge)

    daily = []
    for offset in range(days):
        day = today - timedelta(days=offset)
        day_entries = entries_by_day.get(day, [])
        day_recharges = recharges_by_day.get(day, [])
        daily.append(DailyEngagement(
            date=day,
            display_date=day.strftime("%d/%m"),
            total_entries=len(day_entries),
            total_recharges=len(day_recharges),
            engagement=analyze_engagement(day_entries, day_recharges),
        ))
    return daily
