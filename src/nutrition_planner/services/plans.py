"""Meal plan application service."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from nutrition_planner.domain.plans import WeeklyPlan
from nutrition_planner.domain.recipes import MEAL_TYPES, Recipe
from nutrition_planner.services.filtering import (
    DEFAULT_SEARCH_LIMIT,
    search_recipes,
)
from nutrition_planner.services.planner import PlanAssembler
from nutrition_planner.services.profiles import profile_from_record
from nutrition_planner.services.recipes import normalize_recipes

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Read access to the recipe collections."""

    def list_recipes(self, meal_type: str) -> list[dict[str, object]]:
        """Return raw recipe records for a meal type."""


class ProfileRepository(Protocol):
    """Read access to stored user records."""

    def get_user_record(self, user_id: str) -> dict[str, object] | None:
        """Return the stored user record, if present."""


class PlanRepository(Protocol):
    """Persistence interface for generated plans."""

    def deactivate_active_plans(self, user_id: str) -> int:
        """Mark all active plans for the user inactive and return how many."""

    def save_plan(self, user_id: str, plan: WeeklyPlan) -> str:
        """Store the plan and return its id."""

    def get_active_plan(self, user_id: str) -> dict[str, object] | None:
        """Return the stored active plan record, if any."""


@dataclass(frozen=True)
class GeneratedPlan:
    """A stored plan and its id."""

    plan_id: str
    plan: WeeklyPlan


@dataclass
class MealPlanService:
    """Loads inputs, generates a weekly plan and stores it."""

    profiles: ProfileRepository
    recipes: RecipeRepository
    plans: PlanRepository
    assembler: PlanAssembler

    def load_pools(self) -> dict[str, list[dict[str, object]]]:
        return {meal_type: self.recipes.list_recipes(meal_type) for meal_type in MEAL_TYPES}

    def generate_for_user(self, user_id: str) -> GeneratedPlan:
        """Generate, activate and store a new plan for a user."""
        record = self.profiles.get_user_record(user_id)
        if record is None:
            raise LookupError(f"User {user_id} not found")
        profile = profile_from_record(record)

        plan = self.assembler.generate_weekly_plan(profile, self.load_pools())

        deactivated = self.plans.deactivate_active_plans(user_id)
        plan_id = self.plans.save_plan(user_id, plan)
        _logger.info(
            "Stored plan %s for user %s (deactivated %s previous)",
            plan_id,
            user_id,
            deactivated,
        )
        return GeneratedPlan(plan_id=plan_id, plan=plan)

    def get_active_plan(self, user_id: str) -> dict[str, object] | None:
        return self.plans.get_active_plan(user_id)

    def search_recipes(  # noqa: PLR0913
        self,
        meal_types: Iterable[str] = MEAL_TYPES,
        min_calories: float | None = None,
        max_calories: float | None = None,
        allergies: Iterable[str] = (),
        limit: int | None = DEFAULT_SEARCH_LIMIT,
    ) -> list[tuple[str, Recipe]]:
        """Search the stored recipe collections."""
        requested = [meal_type.lower() for meal_type in meal_types]
        pools = {
            meal_type: normalize_recipes(
                self.recipes.list_recipes(meal_type), source=meal_type
            )
            for meal_type in requested
            if meal_type in MEAL_TYPES
        }
        return search_recipes(
            pools,
            meal_types=requested,
            min_calories=min_calories,
            max_calories=max_calories,
            allergies=allergies,
            limit=limit,
        )
