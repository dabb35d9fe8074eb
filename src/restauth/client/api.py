"""
Application requests with bearer authorization and a one-shot token refresh.

A request that fails with 401 while the current token carries a refresh token is
retried once, after the token authority has issued a new token:

    Sending -> Done
    Sending -> (401, refreshable) Refreshing -> Sending' -> Done | Failed
    Sending -> Failed

The retry is marked with `no_refresh_token`, so Sending' never goes back to Refreshing.
"""

import inspect
import logging
from dataclasses import dataclass, replace
from types import TracebackType
from typing import Any

import httpx

from restauth.client.auth import PASSWORD_GRANT, AuthAuthority, Credentials, TokenAuthority
from restauth.client.token_store import AccessTokenGetter, AccessTokenUpdateCallback, ignore_token_update, no_token
from restauth.settings import ClientSettings
from restauth.shared._httpx_utils import (
    HTTP_UNAUTHORIZED,
    NETWORK_ERRORS,
    HttpClientFactory,
    create_http_client,
    parse_response_body,
)
from restauth.shared.auth import AccessToken
from restauth.shared.encoding import QueryParams, RequestData, encode_form_data, encode_query_params
from restauth.shared.exceptions import FailedResponseError, MissingAuthAuthorityError, NetworkError, RestAuthError

logger = logging.getLogger(__name__)

ApiResponse = Any

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

JSON_CONTENT_TYPE = "application/json"
MULTIPART_CONTENT_TYPE = "multipart/form-data"


@dataclass(frozen=True)
class RequestConfig:
    """A single application request."""

    method: str
    path: str
    params: QueryParams | None = None
    data: RequestData | None = None
    send_as_form_data: bool = False
    # Set on the retry that follows a refresh. Never refresh twice for one request.
    no_refresh_token: bool = False
    timeout: float | None = None

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        object.__setattr__(self, "method", method)


class RequestGateway:
    """
    Performs application requests against an API.

    The current access token is read through `access_token_getter` on every request and
    token changes are reported through `on_access_token_updated`; the gateway itself
    holds no token state.
    """

    def __init__(
        self,
        base_url: str,
        authority: AuthAuthority | None = None,
        access_token_getter: AccessTokenGetter | None = None,
        on_access_token_updated: AccessTokenUpdateCallback | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        httpx_client_factory: HttpClientFactory = create_http_client,
    ):
        self.authority = authority
        self.access_token_getter = access_token_getter or no_token
        self.on_access_token_updated = on_access_token_updated or ignore_token_update
        self.http_client = http_client or httpx_client_factory(base_url=base_url, headers=headers, timeout=timeout)
        self._owns_client = http_client is None
        self._owns_authority = False

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        authority: AuthAuthority | None = None,
        access_token_getter: AccessTokenGetter | None = None,
        on_access_token_updated: AccessTokenUpdateCallback | None = None,
        **kwargs: Any,
    ) -> "RequestGateway":
        """Create a gateway, and a TokenAuthority when the settings carry client credentials."""
        owns_authority = authority is None and settings.has_authority
        if owns_authority:
            authority = TokenAuthority.from_settings(settings)

        gateway = cls(
            base_url=settings.api_base_url,
            authority=authority,
            access_token_getter=access_token_getter,
            on_access_token_updated=on_access_token_updated,
            timeout=settings.timeout,
            **kwargs,
        )
        gateway._owns_authority = owns_authority
        return gateway

    @property
    def access_token(self) -> AccessToken | None:
        return self.access_token_getter()

    async def get(self, path: str, **config: Any) -> ApiResponse:
        return await self.request(RequestConfig("GET", path, **config))

    async def post(self, path: str, data: RequestData | None = None, **config: Any) -> ApiResponse:
        return await self.request(RequestConfig("POST", path, data=data, **config))

    async def put(self, path: str, data: RequestData | None = None, **config: Any) -> ApiResponse:
        return await self.request(RequestConfig("PUT", path, data=data, **config))

    async def patch(self, path: str, data: RequestData | None = None, **config: Any) -> ApiResponse:
        return await self.request(RequestConfig("PATCH", path, data=data, **config))

    async def delete(self, path: str, **config: Any) -> ApiResponse:
        return await self.request(RequestConfig("DELETE", path, **config))

    async def authenticate(self, credentials: Credentials, grant_type: str = PASSWORD_GRANT) -> None:
        """Request a new access token and report it through the update callback."""
        if self.authority is None:
            raise MissingAuthAuthorityError()

        access_token = await self.authority.request_token(grant_type, credentials)
        await self._access_token_updated(access_token)

    async def revoke_access(self) -> None:
        """Revoke the current access token, if any, and report that it is gone."""
        if self.authority is None:
            raise MissingAuthAuthorityError()

        access_token = self.access_token
        if access_token is None:
            return

        await self.authority.revoke_token(access_token)
        await self._access_token_updated(None)

    async def request(self, config: RequestConfig) -> ApiResponse:
        """
        Perform `config` and return the decoded response body.

        Raises:
            FailedResponseError: The API answered with a non-2xx status that a refresh did not fix.
            NetworkError: The API could not be reached.
            RestAuthError: Any failure of the token authority while refreshing, unchanged.
        """
        try:
            response = await self.http_client.request(config.method, config.path, **self._request_kwargs(config))
        except NETWORK_ERRORS as e:
            logger.warning(f"Could not reach API for {config.method} {config.path}: {e!r}")
            raise NetworkError() from e

        logger.debug(f"{response.status_code} {config.method} {config.path}")

        if response.is_success:
            return parse_response_body(response)

        return await self._handle_failed_response(response, config)

    def _request_kwargs(self, config: RequestConfig) -> dict[str, Any]:
        headers = self._request_headers(config)
        kwargs: dict[str, Any] = {"headers": headers}

        if params := encode_query_params(config.params):
            kwargs["params"] = params

        if config.send_as_form_data:
            if parts := encode_form_data(config.data):
                # httpx sets the multipart Content-Type, boundary included
                kwargs["files"] = parts
            else:
                # httpx sends neither a body nor a Content-Type for empty `files`
                headers["Content-Type"] = MULTIPART_CONTENT_TYPE
        elif config.data is not None:
            kwargs["json"] = config.data

        if config.timeout is not None:
            kwargs["timeout"] = config.timeout

        return kwargs

    def _request_headers(self, config: RequestConfig) -> dict[str, str]:
        headers = {} if config.send_as_form_data else {"Content-Type": JSON_CONTENT_TYPE}

        if access_token := self.access_token:
            headers["Authorization"] = f"Bearer {access_token.token}"

        return headers

    async def _handle_failed_response(self, response: httpx.Response, config: RequestConfig) -> ApiResponse:
        access_token = self.access_token

        if (
            response.status_code == HTTP_UNAUTHORIZED
            and not config.no_refresh_token
            and self.authority is not None
            and access_token is not None
            and access_token.can_refresh
        ):
            return await self._refresh_token_and_retry(self.authority, access_token, config)

        raise FailedResponseError(response.status_code, parse_response_body(response))

    async def _refresh_token_and_retry(
        self, authority: AuthAuthority, access_token: AccessToken, config: RequestConfig
    ) -> ApiResponse:
        logger.debug(f"Refreshing access token after 401 on {config.method} {config.path}")

        try:
            refreshed = await authority.refresh_token(access_token)
        except RestAuthError as e:
            logger.warning(f"Access token refresh failed: {e}")
            raise
        await self._access_token_updated(refreshed)

        return await self.request(replace(config, no_refresh_token=True))

    async def _access_token_updated(self, access_token: AccessToken | None) -> None:
        result = self.on_access_token_updated(access_token)
        if inspect.isawaitable(result):
            await result

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
        if self._owns_authority and isinstance(self.authority, TokenAuthority):
            await self.authority.aclose()

    async def __aenter__(self) -> "RequestGateway":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
