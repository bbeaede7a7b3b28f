"""Validation run monitoring using Prometheus metrics."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterable

from prometheus_client import Counter, Histogram

from core.models import TicketVerdict


validation_runs = Counter(
    "validation_runs_total",
    "Total validation runs",
    labelnames=("outcome",),  # completed, failed
)
run_duration = Histogram(
    "validation_run_duration_seconds",
    "Validation run duration",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
tickets_validated = Counter(
    "validation_tickets_total",
    "Tickets validated",
    labelnames=("verdict",),  # VALID, INVALID, UNKNOWN
)
ticket_reasons = Counter(
    "validation_ticket_reasons_total",
    "Reason codes attached to verdicts",
    labelnames=("reason",),
)
cutoff_matches = Counter(
    "validation_cutoff_matches_total",
    "Tickets matched through the second eligible draw day",
)


class ValidationMonitor:
    """Records validation runs and their verdicts."""

    @contextmanager
    def track_run(self):
        start = time.perf_counter()
        try:
            yield
        except Exception:
            validation_runs.labels(outcome="failed").inc()
            raise
        else:
            validation_runs.labels(outcome="completed").inc()
        finally:
            run_duration.observe(time.perf_counter() - start)

    def record_verdicts(self, verdicts: Iterable[TicketVerdict]) -> None:
        for item in verdicts:
            tickets_validated.labels(verdict=item.verdict.value).inc()
            if item.reason_code is not None:
                ticket_reasons.labels(reason=item.reason_code.value).inc()
            if item.cutoff_flag:
                cutoff_matches.inc()
