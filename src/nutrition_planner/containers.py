"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from nutrition_planner.adapters.supabase_plan_repository import SupabasePlanRepository
from nutrition_planner.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from nutrition_planner.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from nutrition_planner.app_logging import configure_logging
from nutrition_planner.config import Settings
from nutrition_planner.services.planner import PlanAssembler
from nutrition_planner.services.plans import MealPlanService
from nutrition_planner.services.selection import MealSelector


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    selector: MealSelector
    assembler: PlanAssembler
    meal_plan_service: MealPlanService


def build_assembler(settings: Settings) -> PlanAssembler:
    """Create a plan assembler tuned by settings."""
    selector = MealSelector(
        strict_tolerance=settings.strict_tolerance,
        relaxed_tolerance=settings.relaxed_tolerance,
        max_prep_minutes=settings.max_prep_minutes,
        max_cook_minutes=settings.max_cook_minutes,
    )
    return PlanAssembler(
        selector=selector,
        allow_empty_slots=settings.allow_empty_slots,
        enforce_macro_sum=settings.enforce_macro_sum,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    assembler = build_assembler(resolved_settings)
    meal_plan_service = MealPlanService(
        profiles=SupabaseProfileRepository(
            supabase_client, table=resolved_settings.users_table
        ),
        recipes=SupabaseRecipeRepository(
            supabase_client, tables=resolved_settings.recipe_tables()
        ),
        plans=SupabasePlanRepository(
            supabase_client, table=resolved_settings.plans_table
        ),
        assembler=assembler,
    )
    return AppContainer(
        settings=resolved_settings,
        selector=assembler.selector,
        assembler=assembler,
        meal_plan_service=meal_plan_service,
    )
