"""
Engine configuration.
Values load from LIFTSTATS_* environment variables (or a .env file).
"""
from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """liftstats settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="LIFTSTATS_", env_file=".env", extra="ignore")

    # Personal record store
    DB_PATH: str = "liftstats.db"

    # Trend classification
    # half_split: first floor(n/2) samples vs the rest
    # recent_window: last 3 samples vs the 3 before them
    TREND_POLICY: Literal["half_split", "recent_window"] = "half_split"
    TREND_THRESHOLD_PERCENT: float = 5.0
    TREND_MIN_SAMPLES: int = 2
    RECENT_WINDOW_MIN_SAMPLES: int = 6

    # Guardrail for compute_stats payloads
    MAX_ROWS: int = 20_000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"


settings = Settings()


def get_settings() -> Settings:
    """Return the module settings; tests monkeypatch this to inject overrides."""
    return settings
