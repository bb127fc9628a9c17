"""
Unit tests for application settings.
"""
import pytest
from pydantic import ValidationError

from config import Settings


class TestSettings:
    """Test suite for Settings."""

    @pytest.mark.unit
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("PORT", "API_PORT", "PAWAPAY_BASE_URL", "DATABASE_URL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(pawapay_api_token="token", _env_file=None)

        assert settings.pawapay_base_url == "https://api.sandbox.pawapay.io"
        assert settings.is_sandbox is True
        assert settings.api_port == 3000

    @pytest.mark.unit
    def test_base_url_trailing_slash_stripped(self) -> None:
        settings = Settings(pawapay_api_token="token", pawapay_base_url="https://api.pawapay.io/")

        assert settings.pawapay_base_url == "https://api.pawapay.io"
        assert settings.is_sandbox is False

    @pytest.mark.unit
    @pytest.mark.parametrize("base_url", ["api.sandbox.pawapay.io", "ftp://api.pawapay.io"])
    def test_invalid_base_url(self, base_url: str) -> None:
        with pytest.raises(ValidationError):
            Settings(pawapay_api_token="token", pawapay_base_url=base_url)

    @pytest.mark.unit
    def test_blank_token_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(pawapay_api_token="   ")

    @pytest.mark.unit
    def test_log_level_normalised(self) -> None:
        assert Settings(pawapay_api_token="token", log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            Settings(pawapay_api_token="token", log_level="verbose")

    @pytest.mark.unit
    def test_port_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("API_PORT", raising=False)
        monkeypatch.setenv("PORT", "8080")

        assert Settings(pawapay_api_token="token", _env_file=None).api_port == 8080

    @pytest.mark.unit
    def test_allowed_origins_list(self) -> None:
        settings = Settings(
            pawapay_api_token="token",
            allowed_origins="http://localhost:3000, http://127.0.0.1:3000,",
        )

        assert settings.get_allowed_origins_list() == [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
