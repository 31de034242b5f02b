"""
Configuration settings for Minimal Pairs.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are prefixed with MINIMAL_PAIRS_ (e.g. MINIMAL_PAIRS_DATA_DIR).
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
        env_prefix="MINIMAL_PAIRS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Content
    # ========================================
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one <category>.json file per grammar topic",
    )

    # ========================================
    # Progress
    # ========================================
    state_path: Path = Field(
        default=Path.home() / ".minimal_pairs" / "state.json",
        description="JSON file holding stats, Leitner boxes and session number",
    )
    persist: bool = Field(
        default=True,
        description="Write progress to state_path (False keeps it in memory only)",
    )

    # ========================================
    # Randomness
    # ========================================
    random_seed: int | None = Field(
        default=None,
        description="Seed for queue shuffling and A/B slot assignment (reproducible runs)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum level written to stderr",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
