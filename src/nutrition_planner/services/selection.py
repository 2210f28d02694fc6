"""Macro-balanced recipe selection with a deterministic fallback ladder.

Selection for one slot runs through four tiers until one yields a recipe:

1. ``STRICT``: calories within the strict tolerance, weekly uniqueness kept.
2. ``RELAXED``: calories within the relaxed tolerance, uniqueness kept.
3. ``REPEAT``: relaxed tolerance, recipes already used this week allowed.
4. ``CLOSEST_CALORIES``: macro scoring ignored, closest calories wins.

Only the first two tiers record the chosen id as used. Ties between equally
scored candidates are broken by recipe id ascending, so the same inputs
always produce the same plan.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from nutrition_planner.domain.plans import MacroTargets, SelectionTier, SlotSelection
from nutrition_planner.domain.recipes import BREAKFAST, DINNER, SNACK, Recipe
from nutrition_planner.services.filtering import (
    MAX_COOK_MINUTES,
    MAX_PREP_MINUTES,
    is_valid_recipe,
)

_logger = logging.getLogger(__name__)

STRICT_TOLERANCE = 50
RELAXED_TOLERANCE = 100
HIGH_ACTIVITY_CALORIES = 500

_SLOT_MULTIPLIERS: dict[str, tuple[float, float]] = {
    # slot: (protein, carbs)
    BREAKFAST: (0.9, 1.1),
    DINNER: (1.15, 0.9),
    SNACK: (1.2, 1.0),
}
_HIGH_ACTIVITY_CARBS = 1.15

_SUGAR_LIMIT = 15
_SATURATES_LIMIT = 10
_FIBER_BONUS_THRESHOLD = 5
_SALT_LIMIT = 800


def adjust_targets_for_slot(
    targets: MacroTargets, slot: str, activity_calories: float
) -> MacroTargets:
    """Shift macro emphasis for the meal slot and high-activity days."""
    protein_factor, carbs_factor = _SLOT_MULTIPLIERS.get(slot, (1.0, 1.0))
    if activity_calories > HIGH_ACTIVITY_CALORIES:
        carbs_factor *= _HIGH_ACTIVITY_CARBS
    return MacroTargets(
        calories=targets.calories,
        protein=targets.protein * protein_factor,
        carbs=targets.carbs * carbs_factor,
        fat=targets.fat,
    )


def macro_deviation(recipe: Recipe, targets: MacroTargets) -> float:
    """Mean relative deviation of protein, carbs and fat from the targets."""
    deviations = [
        abs(recipe.protein - targets.protein) / (targets.protein or 1),
        abs(recipe.carbs - targets.carbs) / (targets.carbs or 1),
        abs(recipe.fat - targets.fat) / (targets.fat or 1),
    ]
    return sum(deviations) / len(deviations)


def health_penalty(recipe: Recipe) -> float:
    """Additive penalty for sugar, saturates and salt; fiber reduces it."""
    penalty = 0.0
    if recipe.sugar > _SUGAR_LIMIT:
        penalty += (recipe.sugar - _SUGAR_LIMIT) * 0.1
    if recipe.saturates > _SATURATES_LIMIT:
        penalty += (recipe.saturates - _SATURATES_LIMIT) * 0.1
    if recipe.fiber >= _FIBER_BONUS_THRESHOLD:
        penalty -= recipe.fiber * 0.05
    if recipe.salt > _SALT_LIMIT:
        penalty += (recipe.salt - _SALT_LIMIT) * 0.0001
    return penalty


def score_from_parts(avg_deviation: float, penalty: float) -> float:
    base = 100 * (1 - min(avg_deviation, 1))
    return max(0.0, base - penalty * 10)


def score_recipe(recipe: Recipe, targets: MacroTargets) -> float:
    """Score a recipe against already-adjusted targets; higher is better."""
    return score_from_parts(macro_deviation(recipe, targets), health_penalty(recipe))


@dataclass(frozen=True)
class MealSelector:
    """Selects one recipe per slot from a filtered pool."""

    strict_tolerance: float = STRICT_TOLERANCE
    relaxed_tolerance: float = RELAXED_TOLERANCE
    max_prep_minutes: int = MAX_PREP_MINUTES
    max_cook_minutes: int = MAX_COOK_MINUTES

    def candidates(
        self,
        pool: Sequence[Recipe],
        target_calories: float,
        used_ids: set[str],
        relax: bool = False,
    ) -> list[Recipe]:
        """Return recipes inside the calorie band that may still be used."""
        tolerance = self.relaxed_tolerance if relax else self.strict_tolerance
        low = target_calories - tolerance
        high = target_calories + tolerance
        return [
            recipe
            for recipe in pool
            if recipe.calories > 0
            and low <= recipe.calories <= high
            and self._is_valid(recipe)
            and recipe.id not in used_ids
        ]

    def select_meal(  # noqa: PLR0913
        self,
        pool: Sequence[Recipe],
        target_calories: float,
        macro_targets: MacroTargets,
        used_ids: set[str],
        slot: str,
        activity_calories: float = 0.0,
        relax: bool = False,
    ) -> Recipe | None:
        """Return the best-scoring candidate, or None if the band is empty.

        `used_ids` is read, never modified.
        """
        candidates = self.candidates(pool, target_calories, used_ids, relax=relax)
        if not candidates:
            _logger.debug(
                "No %s candidates near %.0f kcal (relax=%s, pool=%s)",
                slot,
                target_calories,
                relax,
                len(pool),
            )
            return None

        adjusted = adjust_targets_for_slot(macro_targets, slot, activity_calories)
        scored = [(score_recipe(recipe, adjusted), recipe) for recipe in candidates]
        # Stable sort: score desc, then id asc, then pool order.
        scored.sort(key=lambda item: item[1].id)
        scored.sort(key=lambda item: item[0], reverse=True)
        best_score, best = scored[0]
        _logger.debug(
            "%s: picked %r (score %.1f, %s kcal, P %s/%.0f, C %s/%.0f, F %s/%.0f)",
            slot,
            best.title,
            best_score,
            best.calories,
            best.protein,
            adjusted.protein,
            best.carbs,
            adjusted.carbs,
            best.fat,
            adjusted.fat,
        )
        return best

    def select_closest_calories(
        self, pool: Sequence[Recipe], target_calories: float
    ) -> Recipe | None:
        """Return the usable recipe whose calories are nearest the target."""
        usable = [
            recipe for recipe in pool if recipe.calories > 0 and self._is_valid(recipe)
        ]
        if not usable:
            return None
        return min(
            usable,
            key=lambda recipe: (abs(recipe.calories - target_calories), recipe.id),
        )

    def select_with_fallback(  # noqa: PLR0913
        self,
        pool: Sequence[Recipe],
        macro_targets: MacroTargets,
        used_ids: set[str],
        slot: str,
        activity_calories: float = 0.0,
        label: str = "",
    ) -> SlotSelection:
        """Run the fallback ladder for one slot.

        Adds the chosen id to `used_ids` only for the strict and relaxed
        tiers.
        """
        target_calories = macro_targets.calories
        prefix = f"{label} {slot}".strip()

        for tier, relax in ((SelectionTier.STRICT, False), (SelectionTier.RELAXED, True)):
            recipe = self.select_meal(
                pool,
                target_calories,
                macro_targets,
                used_ids,
                slot,
                activity_calories,
                relax=relax,
            )
            if recipe is not None:
                used_ids.add(recipe.id)
                return SlotSelection(
                    slot=slot, target=macro_targets, recipe=recipe, tier=tier
                )
            if tier is SelectionTier.STRICT:
                _logger.info("%s: no strict match, relaxing tolerance", prefix)

        _logger.warning("%s: unique recipes exhausted, allowing repeats", prefix)
        recipe = self.select_meal(
            pool,
            target_calories,
            macro_targets,
            set(),
            slot,
            activity_calories,
            relax=True,
        )
        if recipe is not None:
            return SlotSelection(
                slot=slot, target=macro_targets, recipe=recipe, tier=SelectionTier.REPEAT
            )

        _logger.warning("%s: falling back to closest calories", prefix)
        recipe = self.select_closest_calories(pool, target_calories)
        if recipe is not None:
            return SlotSelection(
                slot=slot,
                target=macro_targets,
                recipe=recipe,
                tier=SelectionTier.CLOSEST_CALORIES,
            )

        _logger.error("%s: no usable recipe, leaving slot empty", prefix)
        return SlotSelection(slot=slot, target=macro_targets)

    def _is_valid(self, recipe: Recipe) -> bool:
        return is_valid_recipe(recipe, self.max_prep_minutes, self.max_cook_minutes)
