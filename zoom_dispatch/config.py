"""
Configuration for the Zoom client, loaded from environment variables.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional

from zoom_dispatch.exceptions import ConfigurationError

ONE_DAY_MS = 24 * 60 * 60 * 1000


class Settings(BaseSettings):
    """Zoom client settings. Every field can be set with a ZOOM_ prefixed variable."""

    model_config = SettingsConfigDict(
        env_prefix="ZOOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Zoom API
    api_base_url: str = Field(default="https://api.zoom.us/v2", description="Zoom REST API base URL")
    access_token: Optional[str] = Field(None, description="OAuth bearer token used by the HTTP transport")
    request_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")

    # Rate limiting
    account_rate_limit: Optional[int] = Field(
        default=60,
        description="Account-wide requests per second paced inside the HTTP transport (None disables)"
    )
    enable_default_rules: bool = Field(default=True, description="Register the built-in Zoom throttle rules")
    # Zoom allows 100 meeting create/update requests per user per day
    daily_meeting_write_limit: int = Field(default=100, description="Meeting create/update requests per day")

    # Debug
    debug: bool = Field(default=False, description="Enable debug logging")
    configure_logging: bool = Field(
        default=False,
        description="Let ZoomAPI install the JSON log handler on the zoom_dispatch logger"
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Base URL must be http(s) and is stored without a trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v

    @field_validator("account_rate_limit", "daily_meeting_write_limit")
    @classmethod
    def validate_limits(cls, v: Optional[int]) -> Optional[int]:
        """Rate limits must be positive integers."""
        if v is not None and v <= 0:
            raise ValueError("Rate limits must be positive")
        return v

    @property
    def is_authenticated(self) -> bool:
        """Check if a bearer token is configured."""
        return bool(self.access_token)

    def require_access_token(self) -> str:
        """Return the access token or fail with a ConfigurationError."""
        if not self.access_token:
            raise ConfigurationError("ZOOM_ACCESS_TOKEN is not set")
        return self.access_token


def load_settings(**overrides) -> Settings:
    """
    Load settings from the environment.
    Priority: keyword overrides > environment variables > .env file
    """
    return Settings(**overrides)
