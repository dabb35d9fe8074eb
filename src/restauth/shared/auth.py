from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class TokenResponse(BaseModel):
    """
    See https://datatracker.ietf.org/doc/html/rfc6749#section-5.1
    """

    access_token: str
    token_type: str
    expires_in: int | None = None
    refresh_token: str | None = None

    # servers commonly add scope, created_at, id_token etc.
    model_config = ConfigDict(extra="allow")


class TokenErrorResponse(BaseModel):
    """
    See https://datatracker.ietf.org/doc/html/rfc6749#section-5.2
    """

    error: str | None = None
    error_description: str | None = None
    error_uri: str | None = None

    model_config = ConfigDict(extra="allow")

    @field_validator("error", "error_description", "error_uri", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str | None:
        return None if value is None else str(value)


class AccessToken(BaseModel):
    """
    An issued access token, as handed to callers.

    Instances are never mutated: a refresh produces a new AccessToken that supersedes
    the previous one.
    """

    token: str
    type: str
    expires_in: int | None = None
    refresh_token: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_response(cls, response: TokenResponse) -> "AccessToken":
        # empty values are treated the same as missing ones
        return cls(
            token=response.access_token,
            type=response.token_type,
            expires_in=response.expires_in or None,
            refresh_token=response.refresh_token or None,
        )

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token)
