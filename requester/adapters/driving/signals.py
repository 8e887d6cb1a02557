"""Signal handling for graceful drain."""

import asyncio
import logging
import signal

__all__ = ["make_stop_on_sigterm"]

logger = logging.getLogger(__name__)


def make_stop_on_sigterm() -> asyncio.Event:
    """Create a SIGTERM/SIGINT-triggered stop event.

    The caller awaits (or polls) the event and, once it is set, stops
    submitting and drains the dispatcher before exiting.

    Returns:
        Event that is set when SIGTERM or SIGINT has been received.
    """
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()

    def handle_signal() -> None:
        """Signal handler that sets the stop event on SIGTERM/SIGINT."""
        logger.info("Termination signal received, draining in-flight requests...")
        stop.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal)

    return stop
