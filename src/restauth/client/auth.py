"""
Access token lifecycle against an OAuth 2.0 authorization server.

Issues, refreshes and revokes access tokens, and maps failed authorization server
responses onto restauth exceptions.
"""

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from restauth.settings import ClientSettings
from restauth.shared._httpx_utils import (
    HTTP_BAD_REQUEST,
    HTTP_UNAUTHORIZED,
    NETWORK_ERRORS,
    HttpClientFactory,
    create_http_client,
    parse_response_body,
)
from restauth.shared.auth import AccessToken, TokenErrorResponse, TokenResponse
from restauth.shared.exceptions import (
    InvalidCredentialsError,
    InvalidTokenRequestError,
    NetworkError,
    NoRefreshTokenError,
    UnexpectedFailedResponseError,
    UnexpectedTokenResponseError,
    stringify_pydantic_error,
)

logger = logging.getLogger(__name__)

Credentials = Mapping[str, str]

PASSWORD_GRANT = "password"
REFRESH_TOKEN_GRANT = "refresh_token"

INVALID_GRANT = "invalid_grant"


class AuthAuthority(Protocol):
    """Protocol for whatever issues tokens on behalf of a RequestGateway."""

    async def request_token(self, grant_type: str, credentials: Credentials) -> AccessToken:
        """Request a new access token."""
        ...

    async def refresh_token(self, access_token: AccessToken) -> AccessToken:
        """Exchange the refresh token of `access_token` for a new access token."""
        ...

    async def revoke_token(self, access_token: AccessToken) -> None:
        """Revoke `access_token`."""
        ...


class TokenAuthority:
    """
    Talks to the token and revocation endpoints of an authorization server.

    Every request authenticates the client with HTTP Basic auth using the client id and
    secret, also on an injected `http_client`. An injected client keeps its own base URL
    and timeout, and is left open by `aclose()`. Tokens are returned to the caller and
    never kept here.
    """

    def __init__(
        self,
        base_url: str,
        client_id: str,
        client_secret: str,
        token_endpoint: str = "/oauth/token",
        revoke_endpoint: str = "/oauth/revoke",
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        httpx_client_factory: HttpClientFactory = create_http_client,
    ):
        self.token_endpoint = token_endpoint
        self.revoke_endpoint = revoke_endpoint
        self.client_auth = httpx.BasicAuth(client_id, client_secret)
        self.http_client = http_client or httpx_client_factory(base_url=base_url, timeout=timeout)
        self._owns_client = http_client is None

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs: Any) -> "TokenAuthority":
        if settings.client_id is None or settings.client_secret is None:
            raise ValueError("client_id and client_secret are required to create a TokenAuthority")

        return cls(
            base_url=settings.auth_base_url or settings.api_base_url,
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            token_endpoint=settings.token_endpoint,
            revoke_endpoint=settings.revoke_endpoint,
            timeout=settings.timeout,
            **kwargs,
        )

    async def request_access_token(self, credentials: Credentials) -> AccessToken:
        """Request an access token with the resource owner password grant."""
        return await self.request_token(PASSWORD_GRANT, credentials)

    async def request_token(self, grant_type: str, credentials: Credentials) -> AccessToken:
        """
        Request an access token from the token endpoint.

        Args:
            grant_type: OAuth 2.0 grant type, e.g. "password" or "refresh_token".
            credentials: Grant specific fields, sent verbatim next to `grant_type`.

        Returns:
            AccessToken: The issued token.

        Raises:
            InvalidCredentialsError: The credentials were rejected with `invalid_grant`.
            InvalidTokenRequestError: Any other 400/401 answer, including a rejected refresh token.
            UnexpectedFailedResponseError: The server failed with another status.
            UnexpectedTokenResponseError: The success body is not a token response.
            NetworkError: The server could not be reached.
        """
        body = {"grant_type": grant_type, **credentials}

        logger.debug(f"Requesting access token with grant type {grant_type}")
        response = await self._post(
            self.token_endpoint,
            requested_with_refresh_token=grant_type == REFRESH_TOKEN_GRANT,
            json=body,
        )
        return self._token_from_response(response)

    async def refresh_token(self, access_token: AccessToken) -> AccessToken:
        if not access_token.refresh_token:
            raise NoRefreshTokenError()

        return await self.request_token(REFRESH_TOKEN_GRANT, {"refresh_token": access_token.refresh_token})

    async def revoke_token(self, access_token: AccessToken) -> None:
        await self._post(
            self.revoke_endpoint,
            requested_with_refresh_token=False,
            params={"token": access_token.token},
        )
        logger.debug("Access token revoked")

    async def _post(self, endpoint: str, requested_with_refresh_token: bool, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.http_client.post(endpoint, auth=self.client_auth, **kwargs)
        except NETWORK_ERRORS as e:
            logger.warning(f"Could not reach authorization server: {e!r}")
            raise NetworkError() from e

        if not response.is_success:
            raise self._error_for_response(response, requested_with_refresh_token)

        return response

    def _token_from_response(self, response: httpx.Response) -> AccessToken:
        try:
            token_response = TokenResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise UnexpectedTokenResponseError(stringify_pydantic_error(e)) from e

        return AccessToken.from_response(token_response)

    def _error_for_response(self, response: httpx.Response, requested_with_refresh_token: bool) -> Exception:
        status = response.status_code
        data = parse_response_body(response)

        if status in (HTTP_BAD_REQUEST, HTTP_UNAUTHORIZED):
            error = TokenErrorResponse.model_validate(data) if isinstance(data, dict) else TokenErrorResponse()

            # invalid_grant on a refresh grant means the refresh token was rejected, not the user's credentials
            if error.error == INVALID_GRANT and not requested_with_refresh_token:
                error_class = InvalidCredentialsError
            else:
                error_class = InvalidTokenRequestError

            logger.debug(f"Token request rejected: {error.error} (HTTP {status})")
            return error_class(error.error, status, error.error_description)

        logger.warning(f"Unexpected token endpoint failure: HTTP {status}")
        return UnexpectedFailedResponseError(status, data)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "TokenAuthority":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
