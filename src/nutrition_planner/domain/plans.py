"""Weekly plan domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from nutrition_planner.domain.recipes import MEAL_TYPES, Recipe


class SelectionTier(Enum):
    """Fallback ladder step that produced a slot's recipe."""

    STRICT = "strict"
    RELAXED = "relaxed"
    REPEAT = "repeat"
    CLOSEST_CALORIES = "closest_calories"

    @property
    def is_fallback(self) -> bool:
        return self in {SelectionTier.REPEAT, SelectionTier.CLOSEST_CALORIES}


@dataclass(frozen=True)
class MacroTargets:
    """Calorie and macro gram targets for a day or a single slot."""

    calories: float
    protein: float
    carbs: float
    fat: float

    def scaled(self, fraction: float) -> "MacroTargets":
        """Return the targets multiplied by a slot fraction."""
        return MacroTargets(
            calories=self.calories * fraction,
            protein=self.protein * fraction,
            carbs=self.carbs * fraction,
            fat=self.fat * fraction,
        )


@dataclass(frozen=True)
class DailyTarget:
    """Computed calorie and macro targets for one day."""

    day: str
    calories: int
    protein_grams: int
    carbs_grams: int
    fat_grams: int
    fueling_demand_category: str
    activity_calories: float = 0.0

    def as_macro_targets(self) -> MacroTargets:
        return MacroTargets(
            calories=self.calories,
            protein=self.protein_grams,
            carbs=self.carbs_grams,
            fat=self.fat_grams,
        )


@dataclass(frozen=True)
class SlotSelection:
    """Outcome of selecting a recipe for one meal slot."""

    slot: str
    target: MacroTargets
    recipe: Recipe | None = None
    tier: SelectionTier | None = None

    @property
    def is_empty(self) -> bool:
        return self.recipe is None


@dataclass(frozen=True)
class DayMeals:
    """The four meal slots of one day."""

    breakfast: SlotSelection
    lunch: SlotSelection
    dinner: SlotSelection
    snack: SlotSelection

    def slots(self) -> list[SlotSelection]:
        return [getattr(self, meal_type) for meal_type in MEAL_TYPES]

    def recipes(self) -> dict[str, Recipe | None]:
        return {selection.slot: selection.recipe for selection in self.slots()}


@dataclass(frozen=True)
class DailyTotals:
    """Achieved nutrition for a day's selected recipes."""

    day: str
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass
class WeeklyPlan:
    """Seven days of targets and selected recipes."""

    daily_targets: dict[str, DailyTarget]
    days: dict[str, DayMeals]
    daily_totals: dict[str, DailyTotals]
    used_recipe_ids: set[str]
    start: datetime
    end: datetime
    active: bool = True
    notes: str = ""
    total_weekly_activity_calories: float = 0.0
    input_details: dict[str, object] = field(default_factory=dict)

    def meals_for(self, day: str) -> DayMeals:
        return self.days[day]

    def recipe_ids(self) -> list[str]:
        """Return ids of every filled slot in day and slot order."""
        return [
            selection.recipe.id
            for meals in self.days.values()
            for selection in meals.slots()
            if selection.recipe is not None
        ]

    def empty_slots(self) -> list[tuple[str, str]]:
        return [
            (day, selection.slot)
            for day, meals in self.days.items()
            for selection in meals.slots()
            if selection.is_empty
        ]

    def fallback_slots(self) -> list[tuple[str, str]]:
        """Return slots that needed the repeat or closest-calories tiers."""
        return [
            (day, selection.slot)
            for day, meals in self.days.items()
            for selection in meals.slots()
            if selection.tier is not None and selection.tier.is_fallback
        ]

    def to_record(self) -> dict[str, object]:
        """Return a JSON-ready representation for persistence."""
        return {
            "active": self.active,
            "planStartDate": self.start.isoformat(),
            "planEndDate": self.end.isoformat(),
            "notes": self.notes,
            "dailyTargetDetails": {
                day: {
                    "calories": target.calories,
                    "proteinGrams": target.protein_grams,
                    "carbsGrams": target.carbs_grams,
                    "fatGrams": target.fat_grams,
                    "fuelingDemandCategory": target.fueling_demand_category,
                }
                for day, target in self.daily_targets.items()
            },
            "days": {
                day: {
                    selection.slot: (
                        selection.recipe.to_record()
                        if selection.recipe is not None
                        else None
                    )
                    for selection in meals.slots()
                }
                for day, meals in self.days.items()
            },
            "inputDetails": {
                **self.input_details,
                "totalWeeklyActivityCalories": self.total_weekly_activity_calories,
            },
        }
