"""
Configuration settings for the ascent adaptive quiz.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).parent / "src" / "content" / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ASCENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Content Sources
    # ========================================
    question_bank_path: Path = Field(
        default=DATA_DIR / "question_bank.json",
        description="JSON file holding the leveled question bank",
    )
    diagnostic_path: Path = Field(
        default=DATA_DIR / "diagnostic.json",
        description="JSON file holding the self-assessment questionnaire",
    )

    # ========================================
    # Placement & Scoring
    # ========================================
    gate_pass_ratio: float = Field(
        default=0.66,
        ge=0.0,
        le=1.0,
        description="Share of 'yes' answers (ceiling) needed to pass levels 2 and 3",
    )
    points_per_level: int = Field(
        default=10,
        ge=1,
        description="Points for a correct answer, multiplied by the level",
    )
    shuffle_seed: int | None = Field(
        default=None,
        description="Seed for question ordering (None = unseeded)",
    )

    # ========================================
    # Mistake Book
    # ========================================
    mistake_book_path: Path = Field(
        default=Path.home() / ".ascent" / "mistakes.json",
        description="Where the CLI keeps the mistake book between runs",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="loguru level for the CLI stderr sink",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
