from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for an API gateway and its token authority.

    Every field can be provided through a `RESTAUTH_` prefixed environment variable,
    e.g. `RESTAUTH_API_BASE_URL` or `RESTAUTH_CLIENT_SECRET`.
    """

    model_config = SettingsConfigDict(env_prefix="RESTAUTH_")

    # API settings
    api_base_url: str = Field(..., description="Base URL that request paths are resolved against.")
    timeout: float | None = Field(None, description="Default timeout, in seconds, for every request.")

    # Authorization server settings
    auth_base_url: str | None = Field(None, description="Authorization server URL. Defaults to api_base_url.")
    token_endpoint: str = "/oauth/token"
    revoke_endpoint: str = "/oauth/revoke"
    client_id: str | None = None
    client_secret: str | None = None

    @model_validator(mode="after")
    def _default_auth_base_url(self) -> "ClientSettings":
        if self.auth_base_url is None:
            self.auth_base_url = self.api_base_url
        return self

    @property
    def has_authority(self) -> bool:
        return self.client_id is not None and self.client_secret is not None
