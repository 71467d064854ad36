"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from fitlog.domain.energy import ACTIVITY_MULTIPLIERS, DEFAULT_ACTIVITY_MULTIPLIER

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    fdc_api_key: str = "DEMO_KEY"
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    off_base_url: str = "https://world.openfoodfacts.org"
    search_debounce_ms: int = 300
    search_min_chars: int = 2
    search_cache_capacity: int = 50
    search_result_limit: int = 8
    http_timeout_seconds: float = 15
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_activity_multiplier(raw: str | None) -> float:
    """Parse an activity multiplier such as "1.55"; blank means the default."""
    if raw is None:
        return DEFAULT_ACTIVITY_MULTIPLIER
    cleaned = raw.strip()
    if not cleaned:
        return DEFAULT_ACTIVITY_MULTIPLIER
    try:
        value = float(cleaned)
    except ValueError as exc:
        raise ValueError(f"Invalid activity multiplier: {raw!r}") from exc
    if value not in ACTIVITY_MULTIPLIERS:
        raise ValueError(f"Unknown activity multiplier: {raw!r}")
    return value
