"""Configuration system for ThaiSave.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the savings engine and its
command-line entry point.

Usage:
    from thaisave_core.config import ThaiSaveConfig

    # Load from environment variables and .env file
    config = ThaiSaveConfig()

    # Access engine settings
    print(config.engine.max_range_days)

    if config.is_debug:
        print("Debug logging enabled")
"""

from typing import Any

from pydantic import Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class EngineConfig(BaseSettings):
    """Savings engine settings.

    Environment Variables:
        THAISAVE_ENGINE_MAX_RANGE_DAYS: Longest accepted calculation range in days
        THAISAVE_ENGINE_RATE_LOOKBACK_DAYS: Business days searched for a rate table
    """

    model_config = SettingsConfigDict(
        env_prefix="THAISAVE_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_range_days: int = Field(
        default=36_600,
        gt=0,
        description="Maximum number of days a single calculation may walk",
    )
    rate_lookback_days: int = Field(
        default=10,
        ge=0,
        le=60,
        description="Previous business days to try when the latest rate table is empty",
    )


class ThaiSaveConfig(BaseSettings):
    """Root configuration for ThaiSave.

    Environment Variables:
        THAISAVE_ENV: Environment name (development, staging, production, test)
        THAISAVE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        THAISAVE_JSON_LOGS: Render log lines as JSON instead of console output

    Example:
        config = ThaiSaveConfig(
            log_level="DEBUG",
            engine=EngineConfig(max_range_days=3650),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="THAISAVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit structured JSON log lines",
    )

    engine: EngineConfig = Field(default_factory=EngineConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"


def load_config(**overrides: Any) -> ThaiSaveConfig:
    """Load configuration from the environment.

    Args:
        **overrides: Field values that take precedence over the environment
            (e.g. command-line flags); validated like any other source

    Raises:
        ConfigurationError: If an environment variable or override holds an
            invalid value.
    """
    try:
        return ThaiSaveConfig(**overrides)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid configuration: {first.get('msg')}",
            config_key=key or None,
            actual=first.get("input"),
        ) from exc
