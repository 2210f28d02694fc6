"""Tests for parsing stored user records into profiles."""

import pytest

from nutrition_planner.domain.profiles import ProfileValidationError
from nutrition_planner.services.profiles import profile_from_record


def _record(**overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "name": "Sam",
        "email": "sam@example.com",
        "age": "34",
        "gender": "Male",
        "height": "178.5",
        "weight": 82,
        "goal": "Gain Muscle",
        "fitnessLevel": "intermediate",
        "foodAllergies": "peanuts, shellfish",
        "foodDislikes": ["olives", " "],
        "foodLikes": "pasta",
        "weeklyActivity": {
            "Monday": {"activity": "Running", "duration": "45", "calories": "520"},
            "Tuesday": {"activity": "Rest", "duration": 0, "calories": 0},
            "Wednesday": "not a mapping",
        },
    }
    record.update(overrides)
    return record


def test_profile_from_record_parses_and_normalizes() -> None:
    profile = profile_from_record(_record())

    assert profile.age == 34
    assert profile.gender == "male"
    assert profile.height_cm == 178.5
    assert profile.goal == "gain muscle"
    assert profile.food_allergies == ("peanuts", "shellfish")
    assert profile.food_dislikes == ("olives",)
    assert profile.food_likes == ("pasta",)
    assert profile.macro_split is None
    assert profile.activity_calories("Monday") == 520
    assert profile.weekly_activity["Monday"].duration_minutes == 45
    assert "Wednesday" not in profile.weekly_activity
    assert profile.activity_calories("Sunday") == 0


def test_missing_health_fields_are_reported() -> None:
    with pytest.raises(ProfileValidationError, match="age, weight"):
        profile_from_record(_record(age=None, weight=""))


@pytest.mark.parametrize(
    ("field", "value"),
    [("age", 17), ("age", 121), ("height", 99), ("height", 251), ("weight", 301)],
)
def test_out_of_range_values_are_rejected(field: str, value: object) -> None:
    with pytest.raises(ProfileValidationError):
        profile_from_record(_record(**{field: value}))


def test_macro_percentages_must_be_supplied_together() -> None:
    with pytest.raises(ProfileValidationError, match="together"):
        profile_from_record(_record(proteinPercentage=0.3))


def test_macro_percentages_are_parsed() -> None:
    profile = profile_from_record(
        _record(proteinPercentage="0.3", carbsPercentage=0.4, fatPercentage=0.3)
    )

    assert profile.macro_split is not None
    assert profile.macro_split.carbs_pct == 0.4
    assert profile.macro_split.total == pytest.approx(1.0)


def test_missing_goal_defaults_to_maintain() -> None:
    assert profile_from_record(_record(goal=None)).goal == "maintain"
