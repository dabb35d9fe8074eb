import httpx
import pytest

from restauth.shared._httpx_utils import HttpClientFactory
from restauth.shared.auth import AccessToken


@pytest.fixture
def anyio_backend():
    return "asyncio"


class RecordingHandler:
    """Transport handler that replies with queued responses and records every request.

    The last queued response is reused once the queue runs down to it.
    """

    def __init__(self):
        self.responses: list[httpx.Response | Exception] = []
        self.requests: list[httpx.Request] = []

    def queue(self, *responses: httpx.Response | Exception) -> None:
        self.responses.extend(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")

        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        # a fresh copy, so the same queued response can be served more than once
        return httpx.Response(response.status_code, headers=response.headers, content=response.content)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def client_factory(handler: RecordingHandler) -> HttpClientFactory:
    """Client factory that keeps the caller's settings but routes requests to `handler`."""

    def factory(
        base_url: str = "",
        headers: dict[str, str] | None = None,
        timeout: httpx.Timeout | float | None = None,
    ) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url=base_url,
            headers=headers,
            timeout=timeout,
        )

    return factory


@pytest.fixture
def access_token():
    return AccessToken(token="test_token", type="bearer", expires_in=200, refresh_token="test_refresh_token")


@pytest.fixture
def refreshed_access_token():
    return AccessToken(
        token="test_refreshed_token",
        type="bearer",
        expires_in=200,
        refresh_token="another_test_refresh_token",
    )
