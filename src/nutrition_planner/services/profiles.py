"""Parsing of stored user records into profiles."""

from collections.abc import Mapping

from nutrition_planner.domain.profiles import (
    MAINTAIN,
    DayActivity,
    MacroSplit,
    ProfileValidationError,
    UserProfile,
)
from nutrition_planner.services.filtering import parse_term_list
from nutrition_planner.services.recipes import coerce_number

AGE_RANGE = (18, 120)
HEIGHT_RANGE_CM = (100, 250)
WEIGHT_RANGE_KG = (30, 300)

_MACRO_KEYS = ("proteinPercentage", "carbsPercentage", "fatPercentage")


def profile_from_record(record: Mapping[str, object]) -> UserProfile:
    """Build a `UserProfile` from a stored user record."""
    missing = [key for key in ("age", "gender", "height", "weight") if not record.get(key)]
    if missing:
        raise ProfileValidationError(
            "Incomplete health information: " + ", ".join(missing)
        )

    age = int(coerce_number(record.get("age")))
    height = coerce_number(record.get("height"))
    weight = coerce_number(record.get("weight"))
    _check_range("age", age, AGE_RANGE)
    _check_range("height", height, HEIGHT_RANGE_CM)
    _check_range("weight", weight, WEIGHT_RANGE_KG)

    return UserProfile(
        age=age,
        gender=str(record.get("gender", "")).strip().lower(),
        height_cm=height,
        weight_kg=weight,
        goal=str(record.get("goal") or MAINTAIN).strip().lower(),
        weekly_activity=_parse_weekly_activity(record.get("weeklyActivity")),
        food_allergies=parse_term_list(record.get("foodAllergies")),
        food_dislikes=parse_term_list(record.get("foodDislikes")),
        food_likes=parse_term_list(record.get("foodLikes")),
        macro_split=_parse_macro_split(record),
        name=str(record.get("name") or ""),
        email=str(record.get("email") or ""),
        fitness_level=str(record.get("fitnessLevel") or ""),
    )


def _check_range(label: str, value: float, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise ProfileValidationError(
            f"Invalid {label}: {value} is outside {low}-{high}."
        )


def _parse_weekly_activity(raw: object) -> dict[str, DayActivity]:
    if not isinstance(raw, Mapping):
        return {}
    activities: dict[str, DayActivity] = {}
    for day, entry in raw.items():
        if not isinstance(entry, Mapping):
            continue
        activities[str(day)] = DayActivity(
            activity_name=str(entry.get("activity") or entry.get("activityName") or ""),
            duration_minutes=coerce_number(
                entry.get("duration", entry.get("durationMinutes"))
            ),
            calories_burned=coerce_number(
                entry.get("calories", entry.get("caloriesBurned"))
            ),
        )
    return activities


def _parse_macro_split(record: Mapping[str, object]) -> MacroSplit | None:
    supplied = [record.get(key) is not None for key in _MACRO_KEYS]
    if not any(supplied):
        return None
    if not all(supplied):
        raise ProfileValidationError(
            "Macro percentages must be supplied together: " + ", ".join(_MACRO_KEYS)
        )
    protein, carbs, fat = (coerce_number(record.get(key)) for key in _MACRO_KEYS)
    return MacroSplit(protein_pct=protein, carbs_pct=carbs, fat_pct=fat)
