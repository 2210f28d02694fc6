"""Tests for recipe normalization."""

import math

from nutrition_planner.domain.recipes import Recipe
from nutrition_planner.services.recipes import (
    clean_keys,
    coerce_number,
    normalize_recipe,
    normalize_recipes,
    parse_ingredients,
    parse_method,
    parse_times,
)
from tests.conftest import make_recipe, raw_recipe


def test_clean_keys_strips_index_suffix_and_whitespace() -> None:
    cleaned = clean_keys({"Calories[1:nrow(breakfast_list_done)]": 1, " Fat ": 2})
    assert cleaned == {"Calories": 1, "Fat": 2}


def test_coerce_number_handles_messy_values() -> None:
    assert coerce_number(" 12.5 ") == 12.5
    assert coerce_number("12.5g") == 12.5
    assert coerce_number(7) == 7.0
    assert coerce_number("abc") == 0.0
    assert coerce_number("") == 0.0
    assert coerce_number(None) == 0.0
    assert coerce_number(float("nan")) == 0.0
    assert coerce_number("1e400") == 0.0
    assert coerce_number(True) == 0.0


def test_parse_times_reads_preparation_and_cooking() -> None:
    times = parse_times("Preparation: 15 mins ; Cooking: 40 mins")
    assert (times.prep_minutes, times.cook_minutes) == (15, 40)


def test_parse_times_total_time_fills_cooking() -> None:
    times = parse_times("TOTAL TIME: 25 MINS")
    assert (times.prep_minutes, times.cook_minutes) == (0, 25)


def test_parse_times_missing_patterns_are_zero() -> None:
    assert parse_times("Preparation: 5 mins").cook_minutes == 0
    assert parse_times("about an hour") == parse_times(None)
    assert parse_times(None).prep_minutes == 0


def test_parse_method_splits_on_step_markers() -> None:
    steps = parse_method("Step 1 Heat the oil. STEP 2 Add the onions. step3 Serve.")
    assert steps == ("Heat the oil.", "Add the onions.", "Serve.")


def test_parse_method_keeps_text_without_markers() -> None:
    assert parse_method("Mix everything together.") == ("Mix everything together.",)
    assert parse_method("") == ()


def test_normalize_recipe_coerces_and_trims() -> None:
    recipe = normalize_recipe(raw_recipe("abc", 350))

    assert recipe.id == "abc"
    assert recipe.title == "Recipe abc"
    assert recipe.calories == 350
    assert recipe.protein == 25
    assert recipe.fiber == 3
    assert recipe.prep_minutes == 10
    assert recipe.cook_minutes == 20
    assert recipe.servings == "Serves 2"
    assert recipe.method_steps == ("Cook the rice.", "Serve.")


def test_normalize_recipe_never_fails_on_bad_data() -> None:
    broken = normalize_recipe(
        {
            "id": "broken",
            "Calories": "n/a",
            "Protein": None,
            "Times": 42,
            "Ingredients": ["not", "a", "string"],
        }
    )

    assert broken.calories == 0
    assert broken.protein == 0
    assert broken.prep_minutes == 0
    assert broken.cook_minutes == 0
    assert broken.ingredients_text == "not a string"


def test_normalized_calories_are_finite_and_non_negative() -> None:
    values = ["-120", "NaN", "inf", None, "", "  ", "300kcal", 250, -3.5]
    for value in values:
        recipe = normalize_recipe({"id": "x", "Calories": value})
        assert math.isfinite(recipe.calories)
        assert recipe.calories >= 0


def test_normalize_recipes_passes_recipes_through() -> None:
    existing = make_recipe(id="kept")
    recipes = normalize_recipes([existing, raw_recipe("raw", 200)])

    assert recipes[0] is existing
    assert isinstance(recipes[1], Recipe)
    assert recipes[1].calories == 200


def test_parse_ingredients_from_list_strips_quantities() -> None:
    names = parse_ingredients(["200g peanut butter", " 2 slices bread ", "", "1/2 tsp salt"])
    assert names == ("peanut butter", "bread", "salt")


def test_parse_ingredients_from_text() -> None:
    names = parse_ingredients("2 cloves garlic 400ml coconut milk\n1 lime; coriander")
    assert names == ("garlic", "coconut milk", "lime", "coriander")
    assert parse_ingredients(None) == ()


def test_list_ingredients_are_flattened_to_text() -> None:
    recipe = normalize_recipe(
        {"id": "r1", "Calories": "400", "Ingredients": ["200g peanut butter", "bread"]}
    )

    assert recipe.ingredients_text == "200g peanut butter bread"
    assert recipe.ingredients == ("peanut butter", "bread")
    assert recipe.to_record()["IngredientList"] == ["peanut butter", "bread"]


def test_records_without_id_get_distinct_positional_ids() -> None:
    first = raw_recipe("", 400)
    second = raw_recipe("", 410)
    del second["id"]

    recipes = normalize_recipes([first, second], source="lunch")

    assert [recipe.id for recipe in recipes] == ["lunch-0", "lunch-1"]


def test_normalize_recipes_tolerates_non_mapping_records() -> None:
    recipes = normalize_recipes([None, "oops", raw_recipe("ok", 300)])

    assert len(recipes) == 3
    assert recipes[0].id == "recipes-0"
    assert recipes[0].calories == 0
    assert recipes[1].title == ""
    assert recipes[2].id == "ok"
    assert normalize_recipe(42, fallback_id="x").id == "x"
