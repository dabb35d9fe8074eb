import json
from typing import Any

from pydantic import ValidationError


class RestAuthError(Exception):
    """Base exception for all restauth errors."""

    pass


class NetworkError(RestAuthError):
    """Raised when a request never reached the remote server."""

    def __init__(self) -> None:
        super().__init__("Could not connect to remote server")


class FailedResponseError(RestAuthError):
    """Raised when the API answers with a non-2xx status that is not recovered by a refresh."""

    def __init__(self, status: int, data: Any):
        super().__init__(f"Received {status} response from API. Response data: {_dump(data)}")
        self.status = status
        self.data = data


class InvalidTokenRequestError(RestAuthError):
    """
    Raised when the authorization server rejects a token request with 400 or 401.

    See https://datatracker.ietf.org/doc/html/rfc6749#section-5.2 for the error codes.
    """

    def __init__(self, code: str | None, http_status: int, description: str | None = None):
        super().__init__(
            "Invalid token request. "
            f"Error code: {code or 'none'}, HTTP status code: {http_status}, "
            f"description: {description or 'none'}."
        )
        self.code = code
        self.http_status = http_status
        self.description = description


class InvalidCredentialsError(InvalidTokenRequestError):
    """
    Raised when the end-user credentials were rejected (`invalid_grant` outside a refresh).

    Kept apart from its parent so that apps can send the user back to a login screen.
    """

    pass


class UnexpectedFailedResponseError(RestAuthError):
    """Raised when the authorization server fails with a status other than 400 or 401."""

    def __init__(self, status: int, data: Any):
        super().__init__(
            f"Received unexpected failed response for access token request. Status: {status}, data: {_dump(data)}"
        )
        self.status = status
        self.data = data


class UnexpectedTokenResponseError(RestAuthError):
    def __init__(self, detail: str | None = None):
        message = "Received unexpected access token response from authorization server"
        super().__init__(f"{message}: {detail}" if detail else message)


class NoRefreshTokenError(RestAuthError):
    def __init__(self) -> None:
        super().__init__("Cannot refresh an access token that has no associated refresh token")


class MissingAuthAuthorityError(RestAuthError):
    def __init__(self) -> None:
        super().__init__(
            "A token authority must be supplied through the 'authority' parameter of the gateway "
            "in order for the 'authenticate' and 'revoke_access' methods to work."
        )


def _dump(data: Any) -> str:
    if data is None:
        return "none"
    try:
        return json.dumps(data)
    except (TypeError, ValueError):
        return repr(data)


def stringify_pydantic_error(validation_error: ValidationError) -> str:
    return "\n".join(f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in validation_error.errors())
