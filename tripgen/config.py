"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str | None = None

    # Generative provider
    generation_provider: Literal["gemini", "openai"] = "gemini"
    gemini_api_key: SecretStr | None = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"

    # Retry budget
    generation_max_attempts: int = 3
    generation_backoff_base_seconds: float = 1.0
    generation_timeout_seconds: float = 30.0

    # Default counts when the caller passes none (or a non-positive one)
    default_itinerary_days: int = 3
    default_destination_count: int = 6
    default_restaurant_count: int = 12

    # Currency convention requested from the model
    currency_symbol: str = "₹"
    currency_name: str = "Indian Rupees"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
