"""Daily calorie and macro target calculation."""

import logging
import math

from nutrition_planner.domain.plans import DailyTarget
from nutrition_planner.domain.profiles import (
    DAYS_OF_WEEK,
    GAIN_MUSCLE,
    GENDERS,
    LOSE_WEIGHT,
    MALE,
    MacroSplit,
    ProfileValidationError,
    UserProfile,
)

_logger = logging.getLogger(__name__)

_GOAL_ADJUSTMENTS = {
    LOSE_WEIGHT: -550,
    GAIN_MUSCLE: 250,
}

_DEFAULT_SPLITS = {
    LOSE_WEIGHT: MacroSplit(protein_pct=0.40, carbs_pct=0.35, fat_pct=0.25),
    GAIN_MUSCLE: MacroSplit(protein_pct=0.30, carbs_pct=0.45, fat_pct=0.25),
}
_MAINTAIN_SPLIT = MacroSplit(protein_pct=0.40, carbs_pct=0.30, fat_pct=0.30)

MIN_CALORIES_MALE = 1500
MIN_CALORIES_FEMALE = 1200
MAX_TDEE_MULTIPLIER = 2.5

HIGH_DEMAND_CALORIES = 800
MEDIUM_DEMAND_CALORIES = 400

CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
CALORIES_PER_GRAM_FAT = 9

MACRO_SUM_TOLERANCE = 0.01


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def validate_profile(profile: UserProfile, enforce_macro_sum: bool = False) -> None:
    """Reject profiles that cannot produce targets."""
    if str(profile.gender or "").lower() not in GENDERS:
        raise ProfileValidationError("Invalid gender.")
    for label, value in (
        ("age", profile.age),
        ("height", profile.height_cm),
        ("weight", profile.weight_kg),
    ):
        if not _is_positive_number(value):
            raise ProfileValidationError(f"Invalid {label}.")

    split = profile.macro_split
    if split is None:
        return
    if abs(split.total - 1) > MACRO_SUM_TOLERANCE:
        if enforce_macro_sum:
            raise ProfileValidationError(
                f"Macro percentages must sum to 1, got {split.total:.2f}."
            )
        _logger.warning(
            "Macro percentages sum to %.2f instead of 1; using them as given",
            split.total,
        )


def compute_bmr(profile: UserProfile) -> float:
    """Mifflin-St Jeor basal metabolic rate."""
    offset = 5 if profile.gender.lower() == MALE else -161
    return (
        10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age + offset
    )


def goal_adjustment(goal: str) -> int:
    return _GOAL_ADJUSTMENTS.get(goal.lower(), 0)


def resolve_macro_split(profile: UserProfile) -> MacroSplit:
    """Return the explicit macro split, or the goal default."""
    if profile.macro_split is not None:
        return profile.macro_split
    return _DEFAULT_SPLITS.get(profile.goal.lower(), _MAINTAIN_SPLIT)


def fueling_demand_category(activity_calories: float) -> str:
    if activity_calories >= HIGH_DEMAND_CALORIES:
        return "high"
    if activity_calories >= MEDIUM_DEMAND_CALORIES:
        return "medium"
    return "low"


def compute_daily_targets(
    profile: UserProfile, enforce_macro_sum: bool = False
) -> dict[str, DailyTarget]:
    """Compute the calorie and macro targets for each day of the week."""
    validate_profile(profile, enforce_macro_sum=enforce_macro_sum)

    bmr = compute_bmr(profile)
    adjustment = goal_adjustment(profile.goal)
    split = resolve_macro_split(profile)
    min_calories = (
        MIN_CALORIES_MALE if profile.gender.lower() == MALE else MIN_CALORIES_FEMALE
    )
    _logger.info("BMR %.2f, goal %r, adjustment %s", bmr, profile.goal, adjustment)

    targets: dict[str, DailyTarget] = {}
    for day in DAYS_OF_WEEK:
        activity_calories = profile.activity_calories(day)
        tdee = bmr + activity_calories
        calories = round_half_up(
            min(tdee * MAX_TDEE_MULTIPLIER, max(min_calories, tdee + adjustment))
        )
        targets[day] = DailyTarget(
            day=day,
            calories=calories,
            protein_grams=round_half_up(
                calories * split.protein_pct / CALORIES_PER_GRAM_PROTEIN
            ),
            carbs_grams=round_half_up(
                calories * split.carbs_pct / CALORIES_PER_GRAM_CARBS
            ),
            fat_grams=round_half_up(calories * split.fat_pct / CALORIES_PER_GRAM_FAT),
            fueling_demand_category=fueling_demand_category(activity_calories),
            activity_calories=activity_calories,
        )
        _logger.debug(
            "%s: activity %s kcal, target %s kcal", day, activity_calories, calories
        )
    return targets


def _is_positive_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value) and value > 0
