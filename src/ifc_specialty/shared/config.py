"""Application configuration.

Uses pydantic-settings for environment variable support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Example: LOG_LEVEL, BATCH_MAX_FILES, REQUIRE_STEP_HEADER
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = Field(default="ifc_specialty", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment name",
    )

    # =========================================================================
    # Batch analysis
    # =========================================================================
    batch_max_files: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum number of IFC files per analysis request",
    )
    batch_max_total_mb: int = Field(
        default=50,
        ge=1,
        le=2000,
        description="Maximum combined size of one analysis request in MB",
    )
    require_step_header: bool = Field(
        default=True,
        description="Reject uploads without an ISO-10303-21 header",
    )

    # =========================================================================
    # HTTP API
    # =========================================================================
    api_cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Origins allowed to call the HTTP API",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def batch_max_total_bytes(self) -> int:
        """Get the combined request size limit in bytes."""
        return self.batch_max_total_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Call ``get_settings.cache_clear()`` to re-read the environment.
    """
    return Settings()


# Global settings instance
settings = get_settings()
