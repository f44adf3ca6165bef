"""Client settings for the Streamlit UI."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """UI settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Local simulation endpoints (login, register, ...)
    api_url: str = "http://localhost:8000"

    # Answering backend (upload, delete, list, history, ask)
    backend_url: str = "http://localhost:8000"

    # Per-request timeout (seconds)
    request_timeout_s: float = 60.0


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get cached client settings instance."""
    return ClientSettings()
