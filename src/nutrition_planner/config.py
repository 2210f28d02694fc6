"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_planner.domain.recipes import BREAKFAST, DINNER, LUNCH, SNACK

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    breakfast_table: str = "breakfast_list_full_may2025"
    lunch_table: str = "lunch_list_full_may2025"
    dinner_table: str = "dinner_list_full_may2025"
    snack_table: str = "snack_list_full_may2025"
    users_table: str = "users"
    plans_table: str = "nutrition_plans"
    strict_tolerance: float = 50
    relaxed_tolerance: float = 100
    max_prep_minutes: int = 30
    max_cook_minutes: int = 60
    allow_empty_slots: bool = True
    enforce_macro_sum: bool = False
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def recipe_tables(self) -> dict[str, str]:
        """Return the recipe table name for each meal type."""
        return {
            BREAKFAST: self.breakfast_table,
            LUNCH: self.lunch_table,
            DINNER: self.dinner_table,
            SNACK: self.snack_table,
        }
