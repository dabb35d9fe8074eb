from .client.api import RequestConfig, RequestGateway
from .client.auth import AuthAuthority, Credentials, TokenAuthority
from .client.token_store import InMemoryTokenStore, TokenStore
from .settings import ClientSettings
from .shared._httpx_utils import (
    HTTP_BAD_REQUEST,
    HTTP_FORBIDDEN,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_UNAUTHORIZED,
    HTTP_UNPROCESSABLE_ENTITY,
)
from .shared.auth import AccessToken
from .shared.exceptions import (
    FailedResponseError,
    InvalidCredentialsError,
    InvalidTokenRequestError,
    MissingAuthAuthorityError,
    NetworkError,
    NoRefreshTokenError,
    RestAuthError,
    UnexpectedFailedResponseError,
    UnexpectedTokenResponseError,
)

__all__ = [
    "HTTP_BAD_REQUEST",
    "HTTP_FORBIDDEN",
    "HTTP_NOT_FOUND",
    "HTTP_OK",
    "HTTP_UNAUTHORIZED",
    "HTTP_UNPROCESSABLE_ENTITY",
    "AccessToken",
    "AuthAuthority",
    "ClientSettings",
    "Credentials",
    "FailedResponseError",
    "InMemoryTokenStore",
    "InvalidCredentialsError",
    "InvalidTokenRequestError",
    "MissingAuthAuthorityError",
    "NetworkError",
    "NoRefreshTokenError",
    "RequestConfig",
    "RequestGateway",
    "RestAuthError",
    "TokenAuthority",
    "TokenStore",
    "UnexpectedFailedResponseError",
    "UnexpectedTokenResponseError",
]
