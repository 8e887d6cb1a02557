"""Metrics port definition (interface and DTO)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

__all__ = ["DispatchAttemptDto", "MetricsPort"]


@dataclass(slots=True, frozen=True)
class DispatchAttemptDto:
    """Terminal outcome of one dispatched request.

    Attributes:
        elapsed_sec: Time from sending the request to its terminal outcome.
        status_code: HTTP status when a response arrived; None for build or
            transport failures.
        error_kind: Class name of the failure (e.g. "TransportError"); None on success.
    """

    elapsed_sec: float
    status_code: int | None = None
    error_kind: str | None = None

    @property
    def is_failed(self) -> bool:
        return self.error_kind is not None


class MetricsPort(Protocol):
    """Sink for per-request dispatch outcomes.

    Called from worker tasks on the event loop; must not block.
    """

    def update(self, attempt: DispatchAttemptDto, /) -> None: ...

    def __str__(self) -> str: ...
