"""Dispatcher settings port definition (DTO)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from requester.ports.errors import DispatchError
from requester.ports.request import Request

__all__ = [
    "DispatcherSettings",
    "SuccessCallback",
    "FailureCallback",
    "DEFAULT_WORKER_COUNT",
    "DEFAULT_QUEUE_CAPACITY",
]

DEFAULT_WORKER_COUNT = 10
DEFAULT_QUEUE_CAPACITY = 100

SuccessCallback = Callable[[Request, bytes], object]
FailureCallback = Callable[[DispatchError], object]


@dataclass(slots=True, frozen=True)
class DispatcherSettings:
    """Immutable configuration for the dispatcher.

    Decouples the core from CLI/env configuration sources.

    Attributes:
        worker_count: Number of workers; values <= 0 mean DEFAULT_WORKER_COUNT.
        queue_capacity: Bounded queue size; values <= 0 mean DEFAULT_QUEUE_CAPACITY.
        on_success: Called once with the Request and the full body on HTTP 200.
        on_failure: Called once with the DispatchError on any other outcome.

    Callbacks may be plain functions or coroutine functions.
    """

    worker_count: int = 0
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY
    on_success: SuccessCallback | None = None
    on_failure: FailureCallback | None = None

    @property
    def resolved_worker_count(self) -> int:
        return self.worker_count if self.worker_count > 0 else DEFAULT_WORKER_COUNT

    @property
    def resolved_queue_capacity(self) -> int:
        return self.queue_capacity if self.queue_capacity > 0 else DEFAULT_QUEUE_CAPACITY
