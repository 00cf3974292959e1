"""
Configuration settings for the study planner.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    planner_data_dir: Path = Field(
        default=Path.home() / ".study_planner",
        description="Directory holding plans, routine and planning documents",
    )

    # ========================================
    # Scheduling Engine
    # ========================================
    max_generated_entries: int = Field(
        default=10_000,
        ge=1,
        description="Hard cap on entries produced by a single schedule generation",
    )
    max_horizon_days: int | None = Field(
        default=None,
        ge=1,
        description="Optional limit on the calendar days the allocator walks forward (unbounded when unset)",
    )
    default_profile: Literal["BEGINNER", "INTERMEDIATE", "ADVANCED"] = Field(
        default="BEGINNER",
        description="Proficiency profile used when no routine has been saved yet",
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


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
