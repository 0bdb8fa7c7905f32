"""Application configuration."""

import os
from enum import StrEnum

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class DuplicateCheckInPolicy(StrEnum):
    """What to do when a check-in already exists for the requested date."""

    IGNORE = "ignore"
    REJECT = "reject"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_key: str
    admin_token: str
    openai_api_key: str
    openai_model: str = "gpt-4o"
    openai_max_tokens: int = 500
    openai_temperature: float = 0.3
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org"
    openfoodfacts_user_agent: str = "NinjaTraining/0.1"
    food_jutsu_password: str | None = None
    default_experience_award: int = 50
    duplicate_check_in_policy: DuplicateCheckInPolicy = DuplicateCheckInPolicy.IGNORE
    timezone: str = "UTC"
    password_reset_redirect_url: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def normalize_password(raw: str | None) -> str | None:
    """Return the configured gate password, or None when the gate is disabled."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return None
    return cleaned
