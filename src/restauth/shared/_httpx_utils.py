"""Utilities for creating standardized httpx AsyncClient instances."""

from typing import Any, Protocol

import httpx

__all__ = [
    "HTTP_BAD_REQUEST",
    "HTTP_FORBIDDEN",
    "HTTP_NOT_FOUND",
    "HTTP_OK",
    "HTTP_UNAUTHORIZED",
    "HTTP_UNPROCESSABLE_ENTITY",
    "NETWORK_ERRORS",
    "HttpClientFactory",
    "create_http_client",
    "parse_response_body",
]

DEFAULT_TIMEOUT = 30.0

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_UNPROCESSABLE_ENTITY = 422

# Failures where no response reached us because the server could not be talked to.
# Read/write timeouts and protocol errors are not included.
NETWORK_ERRORS = (httpx.NetworkError, httpx.ConnectTimeout)


class HttpClientFactory(Protocol):
    def __call__(
        self,
        base_url: str = "",
        headers: dict[str, str] | None = None,
        timeout: httpx.Timeout | float | None = None,
    ) -> httpx.AsyncClient: ...


def create_http_client(
    base_url: str = "",
    headers: dict[str, str] | None = None,
    timeout: httpx.Timeout | float | None = None,
) -> httpx.AsyncClient:
    """Create a standardized httpx AsyncClient.

    Redirects are followed and a 30 second timeout applies unless another one is given.
    Per-request timeouts passed to `request()` override the client default.

    Args:
        base_url: URL that relative request paths are resolved against.
        headers: Headers sent with every request.
        timeout: Client-wide timeout.

    Returns:
        Configured httpx.AsyncClient instance.
    """
    kwargs: dict[str, Any] = {
        "base_url": base_url,
        "follow_redirects": True,
        "timeout": httpx.Timeout(DEFAULT_TIMEOUT) if timeout is None else timeout,
    }

    if headers is not None:
        kwargs["headers"] = headers

    return httpx.AsyncClient(**kwargs)


def parse_response_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to text. Empty bodies give None."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
