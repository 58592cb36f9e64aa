"""
Configuration settings for the rote CLI.

Uses Pydantic Settings for environment variable management with .env file support.
Only the delivery layer reads these; rote.core takes everything as arguments.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from ROTE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ROTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Drill
    # ========================================
    save_after_each_grade: bool = Field(
        default=True,
        description="Persist the card's deck file after every grading step",
    )
    shuffle_seed: int | None = Field(
        default=None,
        description="Fixed seed for session order (None = seeded from entropy)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
