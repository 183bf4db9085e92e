"""Library configuration management using Pydantic Settings.

This module loads and validates environment variables using Pydantic Settings.
All configuration is loaded from environment variables (prefixed with
``QUESTIONNAIRE_``) or a .env file. Every setting has a default so the
engines can be used without any environment at all.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    Attributes:
        environment: Runtime environment (development, staging, production)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        strict_option_reorder: Raise instead of warn when an option reorder
            would drop options
    """

    environment: str = Field(
        default="development",
        description="Runtime environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    strict_option_reorder: bool = Field(
        default=False,
        description="Raise IncompleteOrderError when a reorder drops options"
    )

    model_config = SettingsConfigDict(
        env_prefix="QUESTIONNAIRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Library settings singleton

    Note:
        Uses lru_cache so settings are only loaded once. Tests that change
        the environment should call get_settings.cache_clear().
    """
    return Settings()
