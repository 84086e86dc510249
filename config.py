"""
Configuration settings for the quiz grading engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Scoring
    # ========================================
    score_decimal_places: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places kept on pointsEarned and scorePercentage",
    )

    # ========================================
    # Code execution sandbox
    # ========================================
    sandbox_url: str = Field(
        default="http://localhost:8090",
        description="Base URL of the code execution sandbox",
    )
    sandbox_timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="Upper bound for a single test case round trip (ms)",
    )
    sandbox_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per test case on transport failure",
    )
    sandbox_backoff_base_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base of the exponential backoff between retries",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
