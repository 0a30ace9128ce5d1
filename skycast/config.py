"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    # Providers
    open_meteo_url: str = "https://api.open-meteo.com/v1/forecast"
    wthrcdn_url: str = "http://wthrcdn.etouch.cn/weather_mini"
    visual_crossing_url: str = (
        "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
    )
    visual_crossing_api_key: str = "DEMO_KEY"

    # HTTP
    http_timeout_seconds: float = 15.0

    # Cache and failure cooldown
    cache_ttl_seconds: float = Field(default=600, gt=0)
    cache_max_entries: int = Field(default=256, ge=1)
    provider_cooldown_seconds: float = Field(default=300, ge=0)

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Inter-service auth; empty disables the check (dev mode)
    service_auth_token: str = ""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
