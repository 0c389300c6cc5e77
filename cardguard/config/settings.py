"""
Pydantic-based configuration settings for CardGuard.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-pro"


class CardGuardSettings(BaseSettings):
    """
    Main configuration settings for CardGuard.

    Configuration can be provided via:
    - Environment variables with CARDGUARD_ prefix
    - .env and .env.local files in the current directory (.env.local wins)
    - Direct instantiation with kwargs

    The Gemini credential is also read from the bare ``GEMINI_API_KEY``
    variable so an existing key does not have to be renamed.

    Example:
        ```python
        # From environment
        settings = CardGuardSettings()

        # From .env file
        settings = CardGuardSettings(_env_file=".env.production")

        # Direct configuration
        settings = CardGuardSettings(
            gemini_api_key="AIza...",
            log_level="DEBUG",
        )
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="CARDGUARD_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Core settings
    environment: Literal["dev", "staging", "prod"] = "dev"

    # Remote model
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("cardguard_gemini_api_key", "gemini_api_key"),
    )
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    request_timeout_seconds: float | None = Field(default=None, gt=0)

    # Observability
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_logs: bool = False

    # Web UI
    server_host: str = "0.0.0.0"
    server_port: int = Field(default=7860, ge=1024, le=65535)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @field_validator("gemini_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def has_api_key(self) -> bool:
        """Check whether a usable Gemini credential is configured."""
        return bool(self.gemini_api_key and self.gemini_api_key.strip())

    def model_display_name(self) -> str:
        """Human readable model name, e.g. ``gemini-pro`` -> ``Gemini Pro``."""
        return " ".join(part.capitalize() for part in self.gemini_model.split("-"))

    def to_dict(self) -> dict:
        """Convert settings to dictionary with the credential masked."""
        data = self.model_dump()
        if data.get("gemini_api_key"):
            data["gemini_api_key"] = "***"
        return data


@lru_cache
def get_settings(env_file: str | None = None) -> CardGuardSettings:
    """
    Get cached settings instance.

    This function is cached to ensure single instance across the application.
    To reload settings, clear the cache with `get_settings.cache_clear()`.

    Without an explicit file, ``.env`` and then ``.env.local`` are read from
    the working directory, with values in ``.env.local`` taking precedence.

    Args:
        env_file: Optional path to .env file

    Returns:
        Settings instance
    """
    if env_file:
        return CardGuardSettings(_env_file=env_file)

    return CardGuardSettings()
