"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="EAC_", extra="ignore"
    )

    # Relational store
    database_url: str | None = None

    # Object store
    storage_url: str = "http://localhost:54321/storage/v1"
    storage_bucket: str = "documents"
    storage_api_key: str = ""
    storage_timeout_s: float = 30.0

    # Upload naming
    upload_max_base_length: int = 200
    upload_max_ext_length: int = 16

    # Summaries
    summary_top_n: int = 3
    recent_events_limit: int = 5


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
