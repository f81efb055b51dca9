"""Configuration 테스트"""

import pytest

from google_signin.config import (
    DEFAULT_HTTP_TIMEOUT,
    GOOGLE_AUTH_URL,
    GOOGLE_REVOCATION_URL,
    GOOGLE_TOKEN_URL,
    GoogleAuthSettings,
    GoogleEndpoints,
)
from google_signin.exceptions import ConfigurationError


class TestGoogleEndpoints:
    def test_defaults(self):
        """기본값은 Google 엔드포인트."""
        endpoints = GoogleEndpoints()
        assert endpoints.authorization_endpoint == GOOGLE_AUTH_URL
        assert endpoints.token_endpoint == GOOGLE_TOKEN_URL
        assert endpoints.revocation_endpoint == GOOGLE_REVOCATION_URL

    def test_frozen(self):
        endpoints = GoogleEndpoints()
        with pytest.raises(AttributeError):
            endpoints.token_endpoint = "https://evil.example.com"


class TestSettingsFromEnv:
    """환경변수 설정 테스트."""

    def test_empty_env(self):
        settings = GoogleAuthSettings.from_env()
        assert settings.endpoints == GoogleEndpoints()
        assert settings.client_id is None
        assert settings.client_secret is None
        assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT
        assert settings.redirect_timeout is None
        assert settings.open_browser is True

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_CLIENT_ID", "cid.apps.googleusercontent.com")
        monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "GOCSPX-secret")
        monkeypatch.setenv("GOOGLE_TOKEN_URL", "http://127.0.0.1:9000/token")
        monkeypatch.setenv("GOOGLE_AUTH_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("GOOGLE_AUTH_REDIRECT_TIMEOUT", "120")

        settings = GoogleAuthSettings.from_env()

        assert settings.client_id == "cid.apps.googleusercontent.com"
        assert settings.client_secret == "GOCSPX-secret"
        assert settings.endpoints.token_endpoint == "http://127.0.0.1:9000/token"
        assert settings.endpoints.authorization_endpoint == GOOGLE_AUTH_URL
        assert settings.endpoints.revocation_endpoint == GOOGLE_REVOCATION_URL
        assert settings.http_timeout == 2.5
        assert settings.redirect_timeout == 120.0

    @pytest.mark.parametrize("value", ["soon", "-1", "0"])
    def test_invalid_timeout(self, monkeypatch, value):
        """숫자가 아니거나 양수가 아니면 ConfigurationError."""
        monkeypatch.setenv("GOOGLE_AUTH_REDIRECT_TIMEOUT", value)
        with pytest.raises(ConfigurationError) as exc_info:
            GoogleAuthSettings.from_env()
        assert "GOOGLE_AUTH_REDIRECT_TIMEOUT" in str(exc_info.value)
