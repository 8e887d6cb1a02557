"""Completion barrier counting outstanding requests."""

import asyncio

__all__ = ["CompletionBarrier"]


class CompletionBarrier:
    """Counter of queued/in-flight work that callers can await down to zero.

    Every add() must be matched by exactly one done(). Not thread-safe;
    use from a single event loop.
    """

    def __init__(self) -> None:
        self._outstanding = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def outstanding(self) -> int:
        """Number of items added but not yet done."""
        return self._outstanding

    def add(self, count: int = 1) -> None:
        """Register count new outstanding items.

        Raises:
            ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError(f"count must be non-negative (got: {count})")
        if count == 0:
            return
        self._outstanding += count
        self._idle.clear()

    def done(self) -> None:
        """Mark one outstanding item as finished.

        Raises:
            RuntimeError: If called more times than add().
        """
        if self._outstanding <= 0:
            raise RuntimeError("CompletionBarrier.done() called more times than add()")
        self._outstanding -= 1
        if self._outstanding == 0:
            self._idle.set()

    async def wait(self) -> None:
        """Suspend until the outstanding counter is zero."""
        await self._idle.wait()
