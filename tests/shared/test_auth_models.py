import pydantic
import pytest

from restauth.shared.auth import AccessToken, TokenErrorResponse, TokenResponse
from restauth.shared.exceptions import (
    FailedResponseError,
    InvalidCredentialsError,
    InvalidTokenRequestError,
    RestAuthError,
    UnexpectedFailedResponseError,
)


def test_access_token_is_immutable():
    token = AccessToken(token="a", type="bearer")

    with pytest.raises(pydantic.ValidationError):
        token.token = "b"  # pyright: ignore[reportAttributeAccessIssue]


@pytest.mark.parametrize(
    "payload,expires_in,refresh_token",
    [
        ({"access_token": "a", "token_type": "bearer", "expires_in": 60, "refresh_token": "r"}, 60, "r"),
        ({"access_token": "a", "token_type": "bearer"}, None, None),
        ({"access_token": "a", "token_type": "bearer", "expires_in": None, "refresh_token": None}, None, None),
        ({"access_token": "a", "token_type": "bearer", "refresh_token": ""}, None, None),
    ],
)
def test_access_token_from_response(payload, expires_in, refresh_token):
    token = AccessToken.from_response(TokenResponse.model_validate(payload))

    assert token.token == "a"
    assert token.type == "bearer"
    assert token.expires_in == expires_in
    assert token.refresh_token == refresh_token


def test_token_error_response_tolerates_odd_payloads():
    error = TokenErrorResponse.model_validate({"error": 42, "detail": "extra"})

    assert error.error == "42"
    assert error.error_description is None


def test_exception_hierarchy():
    assert issubclass(InvalidCredentialsError, InvalidTokenRequestError)
    assert issubclass(InvalidTokenRequestError, RestAuthError)
    assert issubclass(FailedResponseError, RestAuthError)


def test_exception_messages():
    assert str(InvalidTokenRequestError("invalid_client", 401)) == (
        "Invalid token request. Error code: invalid_client, HTTP status code: 401, description: none."
    )
    assert str(FailedResponseError(404, {"message": "nope"})) == (
        'Received 404 response from API. Response data: {"message": "nope"}'
    )
    assert "Status: 503" in str(UnexpectedFailedResponseError(503, None))
