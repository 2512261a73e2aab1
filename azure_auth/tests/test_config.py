"""
Unit tests for verifier settings.
"""

from azure_auth.app.validation import VerifyOptions
from shared.config import HALF_A_DAY_MS, VerifierSettings, get_settings


class TestVerifierSettings:
    """Test cases for VerifierSettings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("AZURE_AUTH_AUDIENCE", raising=False)

        settings = VerifierSettings(_env_file=None)

        assert settings.audience is None
        assert settings.authority_url == "https://login.windows.net"
        assert settings.cache_duration_ms == HALF_A_DAY_MS
        assert settings.algorithms == ["RS256"]

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("AZURE_AUTH_AUDIENCE", "api://from-env")
        monkeypatch.setenv("AZURE_AUTH_IGNORE_NONCE", "true")
        monkeypatch.setenv("AZURE_AUTH_CACHE_DURATION_MS", "60000")

        settings = get_settings()

        assert settings.audience == "api://from-env"
        assert settings.ignore_nonce is True
        assert settings.cache_duration_ms == 60000

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("AZURE_AUTH_AUDIENCE", "api://from-env")

        assert get_settings(audience="api://explicit").audience == "api://explicit"

    def test_to_verify_options(self):
        settings = VerifierSettings(
            audience="api://app",
            nonce="n-1",
            issuer="https://sts/",
            cache_duration_ms=1000,
            algorithms=["RS256", "RS384"],
        )

        options = VerifyOptions.from_settings(settings, lambda claims: True)

        assert options.audience == "api://app"
        assert options.nonce == "n-1"
        assert options.issuer == "https://sts/"
        assert options.cache_duration == 1000
        assert options.algorithms == ["RS256", "RS384"]
        assert options.check_nonce is True
