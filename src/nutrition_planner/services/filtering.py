"""Recipe exclusion, validity checks and search over recipe pools."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from nutrition_planner.domain.recipes import MEAL_TYPES, Recipe

_logger = logging.getLogger(__name__)

MAX_PREP_MINUTES = 30
MAX_COOK_MINUTES = 60

DEFAULT_SEARCH_LIMIT = 20
MAX_SEARCH_LIMIT = 50


@dataclass(frozen=True)
class PoolSummary:
    """Calorie range and skip counts for a recipe pool."""

    name: str
    total: int
    selectable: int
    skipped_calories: int
    skipped_times: int
    min_calories: float | None
    max_calories: float | None
    avg_calories: float | None


def parse_term_list(value: object) -> tuple[str, ...]:
    """Parse a list or comma-separated string of terms."""
    if value is None:
        return ()
    if isinstance(value, str):
        chunks: Iterable[object] = value.split(",")
    elif isinstance(value, Iterable):
        chunks = value
    else:
        chunks = [value]
    terms = (str(chunk).strip() for chunk in chunks)
    return tuple(term for term in terms if term)


def filter_recipes(
    recipes: Sequence[Recipe],
    allergies: Iterable[str] = (),
    dislikes: Iterable[str] = (),
) -> list[Recipe]:
    """Drop recipes whose ingredients mention an allergy or dislike term."""
    terms = [term.strip().lower() for term in [*allergies, *dislikes]]
    terms = [term for term in terms if term]
    if not terms:
        return list(recipes)
    return [
        recipe
        for recipe in recipes
        if not any(term in recipe.ingredients_text.lower() for term in terms)
    ]


def is_valid_recipe(
    recipe: Recipe,
    max_prep_minutes: int = MAX_PREP_MINUTES,
    max_cook_minutes: int = MAX_COOK_MINUTES,
) -> bool:
    """Return True when prep and cook times are within limits."""
    return (
        recipe.prep_minutes <= max_prep_minutes
        and recipe.cook_minutes <= max_cook_minutes
    )


def is_selectable(
    recipe: Recipe,
    max_prep_minutes: int = MAX_PREP_MINUTES,
    max_cook_minutes: int = MAX_COOK_MINUTES,
) -> bool:
    return recipe.calories > 0 and is_valid_recipe(
        recipe, max_prep_minutes, max_cook_minutes
    )


def summarize_pool(
    name: str,
    recipes: Sequence[Recipe],
    max_prep_minutes: int = MAX_PREP_MINUTES,
    max_cook_minutes: int = MAX_COOK_MINUTES,
) -> PoolSummary:
    """Summarize how much of a pool can enter selection."""
    with_calories = [recipe for recipe in recipes if recipe.calories > 0]
    selectable = [
        recipe
        for recipe in with_calories
        if is_valid_recipe(recipe, max_prep_minutes, max_cook_minutes)
    ]
    calories = [recipe.calories for recipe in selectable]
    summary = PoolSummary(
        name=name,
        total=len(recipes),
        selectable=len(selectable),
        skipped_calories=len(recipes) - len(with_calories),
        skipped_times=len(with_calories) - len(selectable),
        min_calories=min(calories) if calories else None,
        max_calories=max(calories) if calories else None,
        avg_calories=sum(calories) / len(calories) if calories else None,
    )
    if not selectable:
        _logger.warning(
            "No selectable %s recipes: %s total, %s without calories, %s too slow",
            name,
            summary.total,
            summary.skipped_calories,
            summary.skipped_times,
        )
    else:
        _logger.debug(
            "%s pool: min %s, max %s, avg %.1f kcal over %s selectable recipes",
            name,
            summary.min_calories,
            summary.max_calories,
            summary.avg_calories,
            summary.selectable,
        )
    return summary


def search_recipes(  # noqa: PLR0913
    pools: Mapping[str, Sequence[Recipe]],
    meal_types: Iterable[str] = MEAL_TYPES,
    min_calories: float | None = None,
    max_calories: float | None = None,
    allergies: Iterable[str] = (),
    limit: int | None = DEFAULT_SEARCH_LIMIT,
) -> list[tuple[str, Recipe]]:
    """Search pools by meal type, calorie bounds and allergy exclusions."""
    requested = [
        meal_type.lower() for meal_type in meal_types if meal_type.lower() in MEAL_TYPES
    ]
    if not requested:
        raise ValueError("Invalid meal types provided")

    search_limit = min(limit or DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT)
    allergy_terms = list(allergies)
    results: list[tuple[str, Recipe]] = []
    for meal_type in requested:
        candidates = filter_recipes(pools.get(meal_type, ()), allergy_terms)
        for recipe in candidates:
            if max_calories and recipe.calories > max_calories:
                continue
            if min_calories and recipe.calories < min_calories:
                continue
            results.append((meal_type, recipe))
    return results[:search_limit]
