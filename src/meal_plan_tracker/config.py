"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    catalog_path: str | None = None
    default_calorie_goal: float = 2000.0
    default_protein_goal: float = 150.0
    default_water_goal: int = 8
    meal_tolerance: float = 100.0
    snack_tolerance: float = 75.0
    regeneration_tolerance: float = 150.0
    hydration_days: int = 60
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
