"""Application configuration."""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    telegram_bot_token: str
    default_timezone: str = "UTC"
    alert_flag_ttl_seconds: int = 3 * 24 * 60 * 60
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timezone(raw: str | None, fallback: str = "UTC") -> str:
    """Return a valid IANA timezone name, falling back when unknown."""
    if raw is None:
        return fallback
    cleaned = raw.strip()
    if not cleaned:
        return fallback
    try:
        ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError):
        return fallback
    return cleaned
