"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (in-memory store when unset)
    database_url: str | None = None

    # UI
    ui_origin: str = "http://localhost:8501"

    # Simulated answering
    answer_delay_ms: int = 1500
    answer_rng_seed: int | None = None

    # History
    history_limit: int = 100

    # Uploads
    max_upload_mb: int = 50

    # Diagnostics
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
