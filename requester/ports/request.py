"""Request port definition (DTO) and its validating constructor."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from requester.ports.errors import EmptyAddressError, EmptyMethodError, MalformedURLError

__all__ = ["Request", "make_request", "is_blank", "has_http_scheme"]

DEFAULT_SCHEME = "http://"
_SCHEMES = ("http://", "https://")

# Like HttpUrl, without its 2083-character cap
AbsoluteHttpUrl = Annotated[
    AnyUrl, UrlConstraints(allowed_schemes=["http", "https"], host_required=True)
]

_http_url_adapter = TypeAdapter(AbsoluteHttpUrl)


@dataclass(slots=True, frozen=True)
class Request:
    """One HTTP call to be executed by the dispatcher.

    Build instances with make_request() so that they are valid before
    they are ever enqueued.

    Attributes:
        target: Absolute http(s) URL.
        method: HTTP verb, e.g. GET or POST.
        body: Text payload; an empty string means no body.
    """

    target: str
    method: str
    body: str = ""


def is_blank(value: str) -> bool:
    """Return True when value is empty or whitespace only."""
    return not value.strip()


def has_http_scheme(address: str) -> bool:
    """Return True when address already starts with http:// or https://."""
    return address.startswith(_SCHEMES)


def make_request(address: str, method: str, body: str = "") -> Request:
    """Validate inputs and build a Request.

    Args:
        address: Target address; ``http://`` is prepended when no scheme is given.
        method: HTTP verb.
        body: Optional text payload.

    Returns:
        The validated Request. No network activity happens here.

    Raises:
        EmptyAddressError: If address is blank.
        EmptyMethodError: If method is blank.
        MalformedURLError: If the normalized address is not an absolute http(s) URL.
    """
    address = address.strip()
    if not address:
        raise EmptyAddressError("requester address cannot be empty")
    if is_blank(method):
        raise EmptyMethodError("requester method cannot be empty")

    if not has_http_scheme(address):
        address = f"{DEFAULT_SCHEME}{address}"

    try:
        _http_url_adapter.validate_python(address)
    except ValidationError as e:
        raise MalformedURLError(f"requester address is not a valid URL: {address}") from e

    return Request(target=address, method=method.strip(), body=body)
