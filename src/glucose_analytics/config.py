"""Application configuration."""

import os
from datetime import tzinfo
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_WINDOW_OPTIONS = (7, 14, 30, 90)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    analytics_api_url: str = "http://localhost:8080"
    analytics_api_token: str
    timezone: str | None = None
    request_timeout_seconds: float = 15
    window_options: str = "7,14,30,90"
    default_window_days: int = 7
    post_meal_min_hours: float = 1.0
    post_meal_max_hours: float = 3.0
    fetch_retry_attempts: int = 1
    fetch_retry_delay_seconds: float = 0.3
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_window_options(raw: str | None) -> tuple[int, ...]:
    """Parse the selectable trailing windows (in days) from env."""
    if raw is None:
        return DEFAULT_WINDOW_OPTIONS
    days: set[int] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if value.isdigit() and int(value) > 0:
            days.add(int(value))
    return tuple(sorted(days)) or DEFAULT_WINDOW_OPTIONS


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Return the configured zone, or None for the system local zone."""
    if name is None or not name.strip():
        return None
    return ZoneInfo(name.strip())
