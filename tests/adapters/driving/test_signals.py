"""Tests for SIGTERM signal handling."""

import asyncio
import os
import signal

import pytest

from requester.adapters.driving.signals import make_stop_on_sigterm

__all__ = []


@pytest.mark.asyncio
async def test_stop_event_is_set_after_sigterm() -> None:
    """Stop event should be set after SIGTERM is sent."""
    stop = make_stop_on_sigterm()

    # Initial state
    assert stop.is_set() is False

    # Send SIGTERM to current process
    os.kill(os.getpid(), signal.SIGTERM)

    await asyncio.wait_for(stop.wait(), timeout=1)
    assert stop.is_set() is True
