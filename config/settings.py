"""Application settings using Pydantic for environment-based configuration."""
from functools import lru_cache
from typing import List
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # pawaPay Configuration
    pawapay_api_token: str = Field(..., description="pawaPay API bearer token")
    pawapay_base_url: str = Field(
        default="https://api.sandbox.pawapay.io", description="pawaPay API base URL"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/transactions.db",
        description="Transaction log database URL",
    )
    database_echo: bool = Field(default=False, description="Echo SQL queries (debug)")

    # Application Configuration
    app_name: str = Field(default="pawapay-sandbox-tester", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Debug mode")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("api_port", "port"),
        description="API port",
    )
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="CORS allowed origins (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("pawapay_api_token")
    @classmethod
    def validate_api_token(cls, v: str) -> str:
        """Reject a blank token; every upstream call needs it."""
        if not v.strip():
            raise ValueError("pawaPay API token must not be empty")
        return v.strip()

    @field_validator("pawapay_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop the trailing slash."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("pawaPay base URL must be an absolute http(s) URL")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    def get_allowed_origins_list(self) -> List[str]:
        """Parse allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_sandbox(self) -> bool:
        """Check if the upstream base URL points at the pawaPay sandbox."""
        return "sandbox" in urlparse(self.pawapay_base_url).netloc


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
