"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    mock_mode: bool = True  # When True, grids and rules are held in memory

    # ── MongoDB ──────────────────────────────────────────
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "interio_pricing"
    grids_collection: str = "pricing_grids"
    rules_collection: str = "pricing_grid_rules"
    treatment_mappings_collection: str = "treatment_grid_mappings"

    # ── Pricing ──────────────────────────────────────────
    currency_code: str = "GBP"
    auto_match_priority: int = 100  # synthetic rule priority for auto-matches

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_prefix": "INTERIO_",
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
