"""Error types crossing the dispatcher boundary."""

from __future__ import annotations

__all__ = [
    "RequestValidationError",
    "EmptyAddressError",
    "EmptyMethodError",
    "MalformedURLError",
    "DispatchError",
    "RequestBuildError",
    "TransportError",
    "NonSuccessStatusError",
    "BodyReadError",
    "DispatcherClosedError",
]


class RequestValidationError(ValueError):
    """Raised synchronously when a Request cannot be constructed."""


class EmptyAddressError(RequestValidationError):
    """Address is empty or whitespace only."""


class EmptyMethodError(RequestValidationError):
    """Method is empty or whitespace only."""


class MalformedURLError(RequestValidationError):
    """Address does not parse as an absolute http(s) URL."""


class DispatchError(Exception):
    """Terminal failure of one dispatched request.

    Delivered through the failure callback, never raised past the dispatcher.

    Attributes:
        target: URL of the failed request.
        cause: Underlying exception, if any.
    """

    reason = "dispatch failed"

    def __init__(self, target: str, cause: BaseException | None = None) -> None:
        self.target = target
        self.cause = cause
        super().__init__(self._describe())

    def _describe(self) -> str:
        message = f"requester {self.reason} for request: {self.target}"
        if self.cause is not None:
            message += f", error: {self.cause}"
        return message


class RequestBuildError(DispatchError):
    """The outbound call could not be built from the Request."""

    reason = "error during building request"


class TransportError(DispatchError):
    """Connection, DNS or other transport-level failure."""

    reason = "transport error"


class NonSuccessStatusError(DispatchError):
    """The server answered with a status other than 200.

    Attributes:
        status: Observed HTTP status code.
    """

    reason = "received non-OK HTTP status"

    def __init__(self, target: str, status: int) -> None:
        self.status = status
        super().__init__(target)

    def _describe(self) -> str:
        return f"requester {self.reason} for request: {self.target}, status: {self.status}"


class BodyReadError(DispatchError):
    """The response body could not be read in full."""

    reason = "error reading body"


class DispatcherClosedError(RuntimeError):
    """Raised by submit() once the dispatcher has been closed."""
