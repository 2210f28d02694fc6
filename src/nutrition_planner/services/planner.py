"""Weekly plan assembly across days and meal slots."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from nutrition_planner.domain.plans import (
    DailyTotals,
    DayMeals,
    SlotSelection,
    WeeklyPlan,
)
from nutrition_planner.domain.profiles import DAYS_OF_WEEK, UserProfile
from nutrition_planner.domain.recipes import (
    BREAKFAST,
    DINNER,
    LUNCH,
    MEAL_TYPES,
    SNACK,
    Recipe,
)
from nutrition_planner.services.filtering import filter_recipes, summarize_pool
from nutrition_planner.services.recipes import normalize_recipes
from nutrition_planner.services.selection import MealSelector
from nutrition_planner.services.targets import compute_daily_targets

_logger = logging.getLogger(__name__)

SLOT_FRACTIONS: dict[str, float] = {
    BREAKFAST: 0.25,
    LUNCH: 0.30,
    DINNER: 0.30,
    SNACK: 0.15,
}
PLAN_LENGTH = timedelta(days=7)
MAX_UNIQUE_SLOTS = len(DAYS_OF_WEEK) * len(MEAL_TYPES)

RawPools = Mapping[str, Sequence[Mapping[str, object] | Recipe]]


class IncompletePlanError(RuntimeError):
    """Raised when empty slots are not allowed and some slot stayed empty."""

    def __init__(self, empty_slots: list[tuple[str, str]]) -> None:
        self.empty_slots = empty_slots
        described = ", ".join(f"{day} {slot}" for day, slot in empty_slots)
        super().__init__(f"No usable recipe for: {described}")


@dataclass
class PlanAssembler:
    """Builds a `WeeklyPlan` from a profile and per-meal-type recipe pools."""

    selector: MealSelector = field(default_factory=MealSelector)
    allow_empty_slots: bool = True
    enforce_macro_sum: bool = False

    def prepare_pools(
        self, profile: UserProfile, pools: RawPools
    ) -> dict[str, list[Recipe]]:
        """Normalize each pool and drop recipes excluded by the profile."""
        prepared: dict[str, list[Recipe]] = {}
        for meal_type in MEAL_TYPES:
            recipes = normalize_recipes(pools.get(meal_type, ()), source=meal_type)
            prepared[meal_type] = filter_recipes(
                recipes, profile.food_allergies, profile.food_dislikes
            )
            summarize_pool(
                meal_type,
                prepared[meal_type],
                self.selector.max_prep_minutes,
                self.selector.max_cook_minutes,
            )
        _logger.info(
            "Filtered recipe counts: %s",
            ", ".join(f"{name}={len(recipes)}" for name, recipes in prepared.items()),
        )
        return prepared

    def generate_weekly_plan(
        self,
        profile: UserProfile,
        pools: RawPools,
        now: datetime | None = None,
    ) -> WeeklyPlan:
        """Select one recipe per slot for each day of the week."""
        daily_targets = compute_daily_targets(
            profile, enforce_macro_sum=self.enforce_macro_sum
        )
        prepared = self.prepare_pools(profile, pools)

        used_ids: set[str] = set()
        days: dict[str, DayMeals] = {}
        totals: dict[str, DailyTotals] = {}
        for day in DAYS_OF_WEEK:
            target = daily_targets[day]
            day_targets = target.as_macro_targets()
            selections: dict[str, SlotSelection] = {}
            for slot in MEAL_TYPES:
                selections[slot] = self.selector.select_with_fallback(
                    prepared[slot],
                    day_targets.scaled(SLOT_FRACTIONS[slot]),
                    used_ids,
                    slot,
                    activity_calories=target.activity_calories,
                    label=day,
                )
            meals = DayMeals(**selections)
            days[day] = meals
            totals[day] = _day_totals(day, meals)
            _logger.info(
                "%s totals: %.0f/%s kcal, P %.0f/%sg, C %.0f/%sg, F %.0f/%sg",
                day,
                totals[day].calories,
                target.calories,
                totals[day].protein,
                target.protein_grams,
                totals[day].carbs,
                target.carbs_grams,
                totals[day].fat,
                target.fat_grams,
            )

        _logger.info(
            "Week plan complete: %s unique recipes out of %s meals",
            len(used_ids),
            MAX_UNIQUE_SLOTS,
        )
        start = now or datetime.now(tz=UTC)
        plan = WeeklyPlan(
            daily_targets=daily_targets,
            days=days,
            daily_totals=totals,
            used_recipe_ids=used_ids,
            start=start,
            end=start + PLAN_LENGTH,
            active=True,
            notes=f'Plan based on goal "{profile.goal}"',
            total_weekly_activity_calories=sum(
                target.activity_calories for target in daily_targets.values()
            ),
            input_details=_input_details(profile),
        )

        empty = plan.empty_slots()
        if empty:
            _logger.warning("Plan has %s empty slots", len(empty))
            if not self.allow_empty_slots:
                raise IncompletePlanError(empty)
        return plan


def generate_weekly_plan(
    profile: UserProfile, pools: RawPools, now: datetime | None = None
) -> WeeklyPlan:
    """Generate a plan with the default selector settings."""
    return PlanAssembler().generate_weekly_plan(profile, pools, now=now)


def _day_totals(day: str, meals: DayMeals) -> DailyTotals:
    recipes = [selection.recipe for selection in meals.slots() if selection.recipe]
    return DailyTotals(
        day=day,
        calories=sum(recipe.calories for recipe in recipes),
        protein=sum(recipe.protein for recipe in recipes),
        carbs=sum(recipe.carbs for recipe in recipes),
        fat=sum(recipe.fat for recipe in recipes),
    )


def _input_details(profile: UserProfile) -> dict[str, object]:
    return {
        "name": profile.name,
        "email": profile.email,
        "age": profile.age,
        "gender": profile.gender,
        "height": profile.height_cm,
        "weight": profile.weight_kg,
        "goal": profile.goal,
        "fitnessLevel": profile.fitness_level,
        "foodAllergies": list(profile.food_allergies),
        "foodLikes": list(profile.food_likes),
        "foodDislikes": list(profile.food_dislikes),
        "weeklyActivity": {
            day: {
                "activity": activity.activity_name,
                "duration": activity.duration_minutes,
                "calories": activity.calories_burned,
            }
            for day, activity in profile.weekly_activity.items()
        },
    }
