"""Batch statistics over ticket verdicts."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Union

from core.constants import REASON_DESCRIPTIONS, ReasonCode, Verdict
from core.models import TicketVerdict


@dataclass
class ValidationReport:
    """Counts by verdict, cutoff flag and reason code."""
    total: int = 0
    valid: int = 0
    invalid: int = 0
    unknown: int = 0
    cutoff: int = 0
    reasons: Dict[str, int] = field(default_factory=dict)
    recharge_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "valid": self.valid,
            "invalid": self.invalid,
            "unknown": self.unknown,
            "cutoff": self.cutoff,
            "reasons": dict(self.reasons),
            "rechargeCount": self.recharge_count,
        }


def build_report(verdicts: Iterable[TicketVerdict], recharge_count: int = 0) -> ValidationReport:
    """Fold verdicts into a report."""
    verdict_counts: Counter = Counter()
    reason_counts: Counter = Counter()
    cutoff = 0
    total = 0

    for item in verdicts:
        total += 1
        verdict_counts[item.verdict] += 1
        if item.reason_code is not None:
            reason_counts[item.reason_code.value] += 1
        if item.cutoff_flag:
            cutoff += 1

    return ValidationReport(
        total=total,
        valid=verdict_counts[Verdict.VALID],
        invalid=verdict_counts[Verdict.INVALID],
        unknown=verdict_counts[Verdict.UNKNOWN],
        cutoff=cutoff,
        reasons=dict(sorted(reason_counts.items())),
        recharge_count=recharge_count,
    )


def describe_reason(code: Optional[Union[ReasonCode, str]]) -> str:
    """Human-readable text for a reason code."""
    if code is None:
        return ""
    try:
        return REASON_DESCRIPTIONS[ReasonCode(code)]
    except ValueError:
        return "Unknown reason"
