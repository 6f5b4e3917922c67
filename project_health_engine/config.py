"""Engine settings loaded from the environment."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Runtime settings, overridable through ``PROJECT_HEALTH_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="PROJECT_HEALTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_currency: str = "USD"
    dashboard_cache_ttl_seconds: int = 300
    upcoming_window_days: int = 7
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> EngineSettings:
    """Return the cached settings instance."""

    return EngineSettings()
