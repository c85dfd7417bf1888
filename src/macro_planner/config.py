"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    environment: str = _ENVIRONMENT
    default_weight_kg: float = 70.0
    default_goal_calories: float = 2700.0
    default_meal_interval_hours: float = 3.0
    rebase_on_amount_change: bool = True
    cascade_retry_attempts: int = 1
    cascade_retry_delay_seconds: float = 0.3
    cascade_timeout_seconds: float | None = 10.0

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
