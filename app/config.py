"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=('settings_',),
    )

    # Application
    app_name: str = "Driver Qualification History Analysis"
    app_version: str = "1.0.0"
    debug: bool = False
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: List[str] = ["*"]

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Form progress
    form_progress_ttl_seconds: int = 7 * 24 * 3600  # Abandoned drafts expire after a week

    # Clock
    timezone: str = "UTC"  # IANA zone used to read "today"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
