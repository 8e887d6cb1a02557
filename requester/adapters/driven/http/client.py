"""HTTP client adapter that executes and classifies dispatched requests."""

import asyncio
import logging
import re
from http import HTTPStatus
from types import TracebackType

import aiohttp
from aiohttp import ClientResponse, ClientTimeout
from yarl import URL

from requester.ports.errors import (
    BodyReadError,
    NonSuccessStatusError,
    RequestBuildError,
    TransportError,
)
from requester.ports.metrics import DispatchAttemptDto, MetricsPort
from requester.ports.request import Request

__all__ = ["HttpClient", "TRANSPORT_ERRORS"]

logger = logging.getLogger(__name__)

# Exceptions raised by aiohttp while sending or receiving
TRANSPORT_ERRORS = (
    aiohttp.ClientError,  # Connection refused, DNS failed, payload errors
    asyncio.TimeoutError,
)

# RFC 9110 token characters
_METHOD_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


class HttpClient:
    """HTTP client shared by all dispatcher workers.

    Features:
    - One aiohttp session reused for every request.
    - Strict classification: only HTTP 200 with a fully read body succeeds.
    - Optional metrics collection.
    - Context manager for proper resource cleanup.
    """

    def __init__(self, metrics: MetricsPort | None = None) -> None:
        """Initialize HTTP client.

        Args:
            metrics: Optional metrics collector to track attempts.
        """
        self.metrics = metrics
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        # No per-request deadline; worker_count is the only concurrency bound
        self.session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=0),
            timeout=ClientTimeout(total=None),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session).

        Args:
            exc_type: Exception type if raised in context.
            exc: Exception instance if raised in context.
            tb: Traceback if raised in context.
        """
        if self.session:
            await self.session.close()

    @staticmethod
    def _build(req: Request) -> tuple[str, URL, bytes | None]:
        """Turn a Request into aiohttp call arguments.

        Raises:
            RequestBuildError: If the method or URL cannot be used on the wire.
        """
        try:
            if not _METHOD_RE.fullmatch(req.method):
                raise ValueError(f"invalid method {req.method!r}")
            url = URL(req.target)
            if not url.is_absolute():
                raise ValueError("URL is not absolute")
            data = req.body.encode() if req.body else None
        except (ValueError, TypeError) as e:
            raise RequestBuildError(req.target, e) from e
        return req.method, url, data

    async def _send(self, req: Request) -> ClientResponse:
        """Send one request; the caller must release the response.

        Raises:
            RuntimeError: If session not initialized.
            RequestBuildError: If the call cannot be built.
            TransportError: On network failure.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        method, url, data = self._build(req)
        try:
            return await self.session.request(method, url, data=data)
        except TRANSPORT_ERRORS as e:
            raise TransportError(req.target, e) from e

    async def fetch(self, req: Request) -> bytes:
        """Execute a request and return its body.

        Records one metrics sample per call, whatever the outcome.

        Args:
            req: Request to execute.

        Returns:
            The full response body of an HTTP 200 response.

        Raises:
            RequestBuildError: If the call cannot be built.
            TransportError: On network failure.
            NonSuccessStatusError: If the status is not 200 (body left unread).
            BodyReadError: If reading the body fails.
        """
        loop = asyncio.get_running_loop()
        started = loop.time()
        status: int | None = None
        error_kind: str | None = None

        try:
            resp = await self._send(req)
            async with resp:
                status = resp.status
                if status != HTTPStatus.OK:
                    raise NonSuccessStatusError(req.target, status)
                try:
                    return await resp.read()
                except TRANSPORT_ERRORS as e:
                    raise BodyReadError(req.target, e) from e
        except Exception as e:
            error_kind = type(e).__name__
            raise
        finally:
            self._record(loop.time() - started, status, error_kind)

    def _record(self, elapsed_sec: float, status: int | None, error_kind: str | None) -> None:
        if self.metrics is None:
            return
        self.metrics.update(
            DispatchAttemptDto(elapsed_sec=elapsed_sec, status_code=status, error_kind=error_kind)
        )
        logger.debug(f"HTTP metrics: {self.metrics}")
