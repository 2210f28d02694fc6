"""Tests for the meal plan application service."""

import pytest

from nutrition_planner.domain.recipes import MEAL_TYPES
from nutrition_planner.services.planner import PlanAssembler
from nutrition_planner.services.plans import MealPlanService
from tests.conftest import (
    MAINTAIN_SLOT_CALORIES,
    InMemoryPlanRepository,
    InMemoryProfileRepository,
    InMemoryRecipeRepository,
    raw_recipe,
)

USER_ID = "user-1"


def _service(plans: InMemoryPlanRepository | None = None) -> MealPlanService:
    recipes = InMemoryRecipeRepository(
        pools={
            meal_type: [
                raw_recipe(f"{meal_type}-{index}", MAINTAIN_SLOT_CALORIES[meal_type])
                for index in range(7)
            ]
            for meal_type in MEAL_TYPES
        }
    )
    profiles = InMemoryProfileRepository(
        records={
            USER_ID: {
                "age": 30,
                "gender": "female",
                "height": 165,
                "weight": 60,
                "goal": "maintain",
                "foodAllergies": "",
            }
        }
    )
    return MealPlanService(
        profiles=profiles,
        recipes=recipes,
        plans=plans or InMemoryPlanRepository(),
        assembler=PlanAssembler(),
    )


def test_generate_for_user_stores_active_plan() -> None:
    plans = InMemoryPlanRepository()
    service = _service(plans)

    generated = service.generate_for_user(USER_ID)

    assert generated.plan_id == "plan-1"
    assert generated.plan.empty_slots() == []
    assert plans.calls == ["deactivate", "save"]
    assert service.get_active_plan(USER_ID)["id"] == "plan-1"


def test_new_plan_supersedes_previous_one() -> None:
    plans = InMemoryPlanRepository()
    service = _service(plans)

    service.generate_for_user(USER_ID)
    second = service.generate_for_user(USER_ID)

    assert plans.plans["plan-1"]["active"] is False
    assert service.get_active_plan(USER_ID)["id"] == second.plan_id
    assert plans.calls == ["deactivate", "save", "deactivate", "save"]


def test_unknown_user_raises() -> None:
    plans = InMemoryPlanRepository()
    with pytest.raises(LookupError):
        _service(plans).generate_for_user("missing")
    assert plans.calls == []


def test_search_recipes_reads_repository() -> None:
    results = _service().search_recipes(meal_types=["snack"], max_calories=250, limit=3)

    assert len(results) == 3
    assert {meal_type for meal_type, _ in results} == {"snack"}
