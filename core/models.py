"""Record types shared by the parser, the matching engine and its consumers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional

from core.constants import ReasonCode, RechargeStatus, Verdict


@dataclass(frozen=True, slots=True)
class Entry:
    """One lottery ticket submission, as parsed from the source."""
    game_id: str
    ticket_time: Optional[datetime]
    chosen_numbers: tuple[int, ...] = ()
    contest: str = ""
    draw_date_label: str = ""
    ticket_number: str = ""
    raw_timestamp: str = ""
    platform: str = ""
    whatsapp: str = ""
    source_status: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gameId": self.game_id,
            "ticketTime": self.ticket_time.isoformat() if self.ticket_time else None,
            "rawTimestamp": self.raw_timestamp,
            "chosenNumbers": list(self.chosen_numbers),
            "contest": self.contest,
            "drawDateLabel": self.draw_date_label,
            "ticketNumber": self.ticket_number,
            "platform": self.platform,
            "whatsapp": self.whatsapp,
            "sourceStatus": self.source_status,
        }


@dataclass(frozen=True, slots=True)
class Recharge:
    """One payment / top-up event. Consumption is never stored here."""
    game_id: str
    recharge_id: str
    recharge_time: Optional[datetime]
    amount: float = 0.0
    raw_time: str = ""
    source: str = ""
    status: str = RechargeStatus.VALID.value

    @property
    def is_valid(self) -> bool:
        return self.status == RechargeStatus.VALID.value


@dataclass(frozen=True, slots=True)
class EligibilityWindow:
    """The two draw days a recharge can back a ticket for."""
    day1: date
    day1_cutoff: datetime
    day2: date
    day2_cutoff: datetime

    def covers(self, draw_day: date) -> bool:
        return draw_day == self.day1 or draw_day == self.day2

    def to_dict(self) -> Dict[str, str]:
        return {
            "day1": self.day1.isoformat(),
            "day1Cutoff": self.day1_cutoff.isoformat(),
            "day2": self.day2.isoformat(),
            "day2Cutoff": self.day2_cutoff.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class TicketVerdict:
    """Validation outcome for one entry.

    Produced only by the matching engine. Downstream consumers (prize
    calculation, exports, tables) read this and never re-derive it.
    """
    entry: Entry
    verdict: Verdict
    reason_code: Optional[ReasonCode] = None
    bound_recharge: Optional[Recharge] = None
    draw_day: Optional[date] = None
    eligibility_window: Optional[EligibilityWindow] = field(default=None)
    cutoff_flag: bool = False

    @property
    def bound_recharge_id(self) -> Optional[str]:
        return self.bound_recharge.recharge_id if self.bound_recharge else None

    @property
    def bound_recharge_time(self) -> Optional[datetime]:
        return self.bound_recharge.recharge_time if self.bound_recharge else None

    @property
    def bound_recharge_amount(self) -> Optional[float]:
        return self.bound_recharge.amount if self.bound_recharge else None

    @property
    def is_valid(self) -> bool:
        return self.verdict is Verdict.VALID

    def to_dict(self) -> Dict[str, Any]:
        data = self.entry.to_dict()
        bound_time = self.bound_recharge_time
        data.update({
            "verdict": self.verdict.value,
            "reasonCode": self.reason_code.value if self.reason_code else None,
            "boundRechargeId": self.bound_recharge_id,
            "boundRechargeTime": bound_time.isoformat() if bound_time else None,
            "boundRechargeAmount": self.bound_recharge_amount,
            "cutoffFlag": self.cutoff_flag,
            "drawDay": self.draw_day.isoformat() if self.draw_day else None,
            "eligibleWindow": self.eligibility_window.to_dict() if self.eligibility_window else None,
        })
        return data
