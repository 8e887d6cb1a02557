"""Tests for logging setup."""

import logging

from requester.adapters.driven.logging.logging_config import configure_logs

__all__ = []


def _console_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if h.get_name() == "requester-console"]


def test_configure_logs_is_idempotent() -> None:
    """Repeated calls should not stack handlers."""
    configure_logs()
    configure_logs()

    assert len(_console_handlers()) == 1


def test_configure_logs_levels(monkeypatch) -> None:
    """Framework loggers are quieted and the app level follows REQUESTER_LOG_LEVEL."""
    monkeypatch.setenv("REQUESTER_LOG_LEVEL", "warning")
    configure_logs()

    assert logging.getLogger("aiohttp").level == logging.WARNING
    assert logging.getLogger("requester").level == logging.WARNING

    monkeypatch.setenv("REQUESTER_LOG_LEVEL", "nonsense")
    configure_logs()

    assert logging.getLogger("requester").level == logging.DEBUG
