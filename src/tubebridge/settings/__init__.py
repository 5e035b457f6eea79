"""Centralized configuration for tubebridge.

All configuration values are sourced from environment variables
(.env file) and have safe defaults.

Usage:
    from tubebridge.settings import settings

    settings.transport.read_timeout
    settings.extraction.search_limit
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tubebridge.settings.base import LoggingSettings
from tubebridge.settings.extraction import ExtractionSettings
from tubebridge.settings.transport import TransportSettings

__all__ = [
    "Settings",
    "settings",
    "LoggingSettings",
    "TransportSettings",
    "ExtractionSettings",
]


# =============================================================================
# GLOBAL SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Global application settings.

    Aggregates all configuration sections into a single object.
    Access via the singleton: `from tubebridge.settings import settings`
    """

    environment: str = Field(default="development", alias="ENVIRONMENT")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    transport: TransportSettings = Field(default_factory=TransportSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"development", "production", "test"}
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid ENVIRONMENT. Valid: {valid_envs}")
        return v_lower


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

settings = Settings()
