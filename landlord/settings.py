"""
Runtime configuration using pydantic-settings.

Environment variables (prefix: LANDLORD_):
    LANDLORD_BOARD_CSV           - Board definition CSV (default: packaged board.csv)
    LANDLORD_DECK_CSV            - Deck definition CSV (default: packaged deck.csv)
    LANDLORD_INITIAL_PLAYER_CASH - Cash each player starts with (default: 4000)
    LANDLORD_INITIAL_BANK_CASH   - Cash the bank starts with (default: 200000)
    LANDLORD_SEED                - Optional RNG seed for dice and deck shuffling
    LANDLORD_LOG_LEVEL           - Logging level name (default: INFO)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).resolve().parent / "data"


class LandlordSettings(BaseSettings):
    """Defaults for starting, loading and driving a game."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="LANDLORD_",
    )

    board_csv: Path = Field(
        default=DATA_DIR / "board.csv",
        description="Board definition CSV (index,type,name,price,multiplier,value).",
    )
    deck_csv: Path = Field(
        default=DATA_DIR / "deck.csv",
        description="Deck definition CSV (index,type,value).",
    )
    initial_player_cash: int = Field(default=4000, ge=0)
    initial_bank_cash: int = Field(default=200000, ge=0)
    seed: Optional[int] = Field(default=None, description="RNG seed for reproducible games.")
    log_level: str = Field(default="INFO")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Optional[str]) -> str:
        """Upper-case the level name and reject names logging does not know."""
        if not value:
            return "INFO"
        level = str(value).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_settings() -> LandlordSettings:
    """Return cached settings instance."""
    return LandlordSettings()
