"""User profile domain models."""

import math
from dataclasses import dataclass, field

MALE = "male"
FEMALE = "female"
GENDERS: frozenset[str] = frozenset({MALE, FEMALE})

LOSE_WEIGHT = "lose weight"
GAIN_MUSCLE = "gain muscle"
MAINTAIN = "maintain"
GOALS: tuple[str, ...] = (LOSE_WEIGHT, GAIN_MUSCLE, MAINTAIN)

DAYS_OF_WEEK: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


class ProfileValidationError(ValueError):
    """Raised when a user profile cannot be used to compute targets."""


@dataclass(frozen=True)
class DayActivity:
    """Planned activity for a single day of the week."""

    activity_name: str = ""
    duration_minutes: float = 0.0
    calories_burned: float | None = 0.0


@dataclass(frozen=True)
class MacroSplit:
    """Fractions of daily calories assigned to each macronutrient."""

    protein_pct: float
    carbs_pct: float
    fat_pct: float

    @property
    def total(self) -> float:
        return self.protein_pct + self.carbs_pct + self.fat_pct


@dataclass(frozen=True)
class UserProfile:
    """Biometrics and preferences used to build a weekly plan."""

    age: int
    gender: str
    height_cm: float
    weight_kg: float
    goal: str = MAINTAIN
    weekly_activity: dict[str, DayActivity] = field(default_factory=dict)
    food_allergies: tuple[str, ...] = ()
    food_dislikes: tuple[str, ...] = ()
    macro_split: MacroSplit | None = None
    name: str = ""
    email: str = ""
    fitness_level: str = ""
    food_likes: tuple[str, ...] = ()

    def activity_calories(self, day: str) -> float:
        """Return calories burned on a day, or 0 when unknown."""
        activity = self.weekly_activity.get(day)
        if activity is None:
            return 0.0
        value = activity.calories_burned
        if isinstance(value, bool) or not isinstance(value, int | float):
            return 0.0
        if not math.isfinite(value):
            return 0.0
        return float(value)
