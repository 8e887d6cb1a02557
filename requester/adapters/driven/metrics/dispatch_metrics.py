"""Dispatch outcome statistics: latency window plus failure breakdown by error class."""

from __future__ import annotations

import statistics
from collections import Counter, deque

from requester.ports.metrics import DispatchAttemptDto, MetricsPort

__all__ = ["Metrics"]


class Metrics(MetricsPort):
    """Aggregates dispatch outcomes for the end-of-run summary.

    Latency is averaged over a sliding window of recent successes and
    failures alike; outcome counts (per status and per error class) cover
    the whole run. Not thread-safe; one instance per event loop.
    """

    def __init__(self, *, window_size: int = 100) -> None:
        self._latencies_ms: deque[float] = deque(maxlen=window_size)
        self._succeeded = 0
        self._errors: Counter[str] = Counter()
        self._statuses: Counter[int] = Counter()

    @property
    def total_seen(self) -> int:
        return self._succeeded + self.total_failed

    @property
    def total_failed(self) -> int:
        return sum(self._errors.values())

    @property
    def errors_by_kind(self) -> dict[str, int]:
        """Failure counts keyed by error class name."""
        return dict(self._errors)

    @property
    def statuses(self) -> dict[int, int]:
        """Response counts keyed by HTTP status (only attempts that got a response)."""
        return dict(self._statuses)

    def update(self, attempt: DispatchAttemptDto) -> None:
        self._latencies_ms.append(attempt.elapsed_sec * 1_000.0)
        if attempt.status_code is not None:
            self._statuses[attempt.status_code] += 1
        if attempt.error_kind is None:
            self._succeeded += 1
        else:
            self._errors[attempt.error_kind] += 1

    def __str__(self) -> str:
        if not self._latencies_ms:
            return "Metrics: waiting for data …"

        total = self.total_seen
        avg_latency = statistics.fmean(self._latencies_ms)
        max_latency = max(self._latencies_ms)
        fail_pct = (self.total_failed / total) * 100
        # Most frequent first, name as tie-breaker for a stable line
        errors = ",".join(
            f"{kind}:{count}"
            for kind, count in sorted(self._errors.items(), key=lambda kv: (-kv[1], kv[0]))
        )

        return (
            f"latency={avg_latency:7.1f} ms (max {max_latency:.1f}) | "
            f"ok={self._succeeded} | "
            f"fail={fail_pct:5.1f}% | "
            f"errors={errors or '-'} | "
            f"win={len(self._latencies_ms)}/{self._latencies_ms.maxlen} | "
            f"total={total}"
        )
