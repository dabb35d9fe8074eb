import pytest

from restauth.settings import ClientSettings


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("RESTAUTH_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("RESTAUTH_CLIENT_ID", "id")
    monkeypatch.setenv("RESTAUTH_CLIENT_SECRET", "secret")
    monkeypatch.setenv("RESTAUTH_TIMEOUT", "12.5")

    settings = ClientSettings()  # pyright: ignore[reportCallIssue]

    assert settings.api_base_url == "https://api.example.com"
    assert settings.auth_base_url == "https://api.example.com"
    assert settings.token_endpoint == "/oauth/token"
    assert settings.revoke_endpoint == "/oauth/revoke"
    assert settings.timeout == 12.5
    assert settings.has_authority


def test_settings_without_client_credentials():
    settings = ClientSettings(api_base_url="https://api.example.com", auth_base_url="https://auth.example.com")

    assert settings.auth_base_url == "https://auth.example.com"
    assert not settings.has_authority
