"""Configuration loading from command-line values and environment variables."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from requester.ports.request import is_blank

__all__ = ["Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "GET"


class Settings(BaseModel):
    """Runtime configuration for one requester run.

    Attributes:
        addresses: Addresses to request; blank entries are dropped.
        worker_count: Parallel workers (0 means the dispatcher default).
        method: HTTP verb used for every request.
        body: Text body sent with every request.
    """

    addresses: list[str] = Field(..., description="Addresses to request.")
    worker_count: int = Field(
        default=0,
        description="Parallel worker count; values <= 0 use the dispatcher default.",
    )
    method: str = Field(default=DEFAULT_METHOD, description="HTTP method for every request.")
    body: str = Field(default="", description="Request body for every request.")

    @field_validator("addresses")
    @classmethod
    def validate_addresses(cls, v: list[str]) -> list[str]:
        """Drop blank addresses and require at least one.

        Args:
            v: Raw addresses.

        Returns:
            Non-blank addresses, in order.

        Raises:
            ValueError: If no address is left.
        """
        addresses = [a for a in v if not is_blank(a)]
        if not addresses:
            raise ValueError("at least one url is required")
        return addresses

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        """Normalize the method to upper case.

        Raises:
            ValueError: If method is blank.
        """
        if is_blank(v):
            raise ValueError("method cannot be empty")
        return v.strip().upper()


def _env_worker_count() -> int:
    raw = os.getenv("REQUESTER_PARALLEL")
    if raw is None or is_blank(raw):
        return 0
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"REQUESTER_PARALLEL must be an integer (got: {raw})") from e


def load_settings(
    addresses: list[str],
    worker_count: int | None = None,
    method: str | None = None,
    body: str | None = None,
) -> Settings:
    """Build settings from command-line values, falling back to the environment.

    Optional environment variables:
    - REQUESTER_PARALLEL: Integer worker count (<= 0 means default).
    - REQUESTER_METHOD: HTTP method (default GET).
    - REQUESTER_BODY: Request body (default empty).

    Args:
        addresses: Addresses given on the command line.
        worker_count: Worker count from the command line, if given.
        method: Method from the command line, if given.
        body: Body from the command line, if given.

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If REQUESTER_PARALLEL is invalid.
        ValueError: If configuration is invalid.
    """
    settings = Settings(
        addresses=addresses,
        worker_count=_env_worker_count() if worker_count is None else worker_count,
        method=method if method is not None else os.getenv("REQUESTER_METHOD", DEFAULT_METHOD),
        body=body if body is not None else os.getenv("REQUESTER_BODY", ""),
    )

    logger.info(
        f"Requester configured: addresses={len(settings.addresses)}, "
        f"workers={settings.worker_count or '<default>'}, "
        f"method={settings.method}"
    )

    return settings
