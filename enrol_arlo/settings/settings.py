"""
Pydantic settings for the Arlo enrolment plugin.

This module provides centralized runtime configuration with:
- Type-safe access to database and privacy options
- Sensible defaults for local development
- Singleton pattern for consistent access

Plugin properties (API credentials, enrolment behaviour) are not settings:
they live in the database and are managed by ``enrol_arlo.config``.
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from enrol_arlo import COMPONENT, ENROL_NAME


class Settings(BaseSettings):
    """
    Process settings loaded from ``ARLO_*`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARLO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================
    # Database Configuration
    # ==========================================
    database_url: str = "sqlite:///./enrol_arlo.db"
    auto_migrate: bool = False

    # ==========================================
    # Plugin Identity
    # ==========================================
    component: str = COMPONENT
    enrol_name: str = ENROL_NAME

    # ==========================================
    # Privacy Configuration
    # ==========================================
    # One transaction per erasure call; False commits statement by statement.
    erase_atomically: bool = True

    # ==========================================
    # Logging
    # ==========================================
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Log level must be one of the standard logging level names."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


# ==========================================
# Singleton Access
# ==========================================
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the singleton Settings instance.

    Returns:
        Settings: The plugin settings

    Raises:
        ValidationError: If settings are invalid
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """
    Reset the settings singleton (for testing purposes).
    """
    global _settings
    _settings = None
