"""
Configuration management for the vendor status system.

This module provides environment-based configuration management with
validation using Pydantic Settings. Per-source extraction rules are not
settings; they live in :mod:`vendor_status.models.source_config`.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vendor_status.core.exceptions import ConfigurationError


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default="WARNING", description="Logging level")

    structured: bool = Field(
        default=False, description="Whether to use structured JSON logging"
    )

    log_file: Optional[Path] = Field(default=None, description="Optional log file path")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class EngineSettings(BaseModel):
    """Limits applied by the extraction engine."""

    fallback_limit: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Maximum nodes processed from a fallback selector match",
    )

    heuristic_candidate_limit: int = Field(
        default=15,
        ge=1,
        le=500,
        description="Maximum announcement candidates mined per document",
    )

    status_text_limit: int = Field(
        default=100,
        ge=10,
        le=2000,
        description="Characters of element text kept as status detail",
    )


class FetchSettings(BaseModel):
    """HTTP settings for the source checker."""

    timeout: float = Field(
        default=10.0, ge=0.5, le=300.0, description="Request timeout in seconds"
    )

    user_agent: str = Field(
        default="System-Health-Monitor/1.0", description="User agent for requests"
    )

    max_retries: int = Field(
        default=3, ge=1, le=10, description="Maximum attempts per request"
    )

    backoff_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Base delay for exponential backoff between attempts",
    )


class Settings(BaseSettings):
    """Main application settings."""

    sources_file: Optional[Path] = Field(
        default=None,
        description="JSON file with source definitions; built-in sources when unset",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)

    model_config = SettingsConfigDict(
        env_prefix="VENDOR_STATUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Singleton Settings instance

    Raises:
        ConfigurationError: If settings validation fails
    """
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            "Failed to load application settings",
            details={"error": str(e)},
            cause=e,
        ) from e
