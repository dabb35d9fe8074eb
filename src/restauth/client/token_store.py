"""
Caller-owned token state.

Gateways never keep the access token themselves. They read it through a getter on
every request and report changes through an update callback, so a single store can
back several gateways.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from restauth.shared.auth import AccessToken

logger = logging.getLogger(__name__)

AccessTokenGetter = Callable[[], AccessToken | None]
AccessTokenUpdateCallback = Callable[[AccessToken | None], Awaitable[None] | None]


class TokenStore(Protocol):
    """Protocol for token stores whose bound methods serve as getter and update callback."""

    def get(self) -> AccessToken | None:
        """Get the current token."""
        ...

    def set(self, token: AccessToken | None) -> None:
        """Replace the current token, or clear it with None."""
        ...


class InMemoryTokenStore:
    def __init__(self, token: AccessToken | None = None):
        self._token = token

    def get(self) -> AccessToken | None:
        return self._token

    def set(self, token: AccessToken | None) -> None:
        if token is None:
            logger.debug("Clearing stored access token")
        self._token = token


def no_token() -> AccessToken | None:
    return None


def ignore_token_update(token: AccessToken | None) -> None:
    pass
