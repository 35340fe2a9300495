# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import get_settings
#   print(get_settings().ENVIRONMENT)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The listen address is not a setting: the host always binds http://+:8080
# (see app/main.py).
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    Settings are read through `get_settings()`, or via `app.state.settings`
    for an app built with explicit settings. Nothing is loaded on import, so
    `main()` can report a bad configuration instead of crashing.
    """

    # -------------------------------------------------------------------------
    # Runtime Mode
    # -------------------------------------------------------------------------
    # Hosts deployed from the .NET container images set ASPNETCORE_ENVIRONMENT,
    # so both names are accepted. Unset means production, like the framework.

    ENVIRONMENT: str = Field(
        default="production",
        validation_alias=AliasChoices("ENVIRONMENT", "ASPNETCORE_ENVIRONMENT"),
        description="Runtime mode name, any value (API docs are served only in development)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level when DEBUG is off"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing and verifying bearer tokens"
    )

    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = Field(
        default="HS256",
        description="HMAC algorithm used for bearer tokens"
    )

    JWT_AUDIENCE: str = Field(
        default="authenticated",
        description="Required 'aud' claim of bearer tokens"
    )

    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60,
        ge=1,
        le=60 * 24 * 30,
        description="Lifetime of tokens issued by create_access_token"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Empty variables fall back to defaults
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
        # Unrelated keys in .env are not an error
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("ENVIRONMENT", mode="before")
    @classmethod
    def normalize_environment(cls, value: object) -> object:
        """
        Compare environment names case-insensitively.

        Example: "Development" -> "development", "" -> "production"
        """
        if isinstance(value, str):
            return value.strip().lower() or "production"
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def log_level(self) -> str:
        """Effective log level name (DEBUG wins over LOG_LEVEL)."""
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()

