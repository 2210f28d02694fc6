"""Recipe domain models."""

from dataclasses import dataclass

BREAKFAST = "breakfast"
LUNCH = "lunch"
DINNER = "dinner"
SNACK = "snack"

MEAL_TYPES: tuple[str, ...] = (BREAKFAST, LUNCH, DINNER, SNACK)


@dataclass(frozen=True)
class RecipeTimes:
    """Preparation and cooking minutes parsed from a times description."""

    prep_minutes: int
    cook_minutes: int


@dataclass(frozen=True)
class Recipe:
    """Normalized recipe with guaranteed numeric nutrition fields."""

    id: str
    title: str
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float = 0.0
    sugar: float = 0.0
    saturates: float = 0.0
    salt: float = 0.0
    prep_minutes: int = 0
    cook_minutes: int = 0
    ingredients_text: str = ""
    servings: str = ""
    blurb: str = ""
    image_url: str = ""
    method: str = ""
    method_steps: tuple[str, ...] = ()
    ingredients: tuple[str, ...] = ()
    webpage: str = ""
    times_text: str = ""
    perc_carbs: float = 0.0
    perc_fat: float = 0.0
    perc_fibre: float = 0.0
    total_g: float = 0.0

    def to_record(self) -> dict[str, object]:
        """Return a JSON-ready representation using the stored field names."""
        return {
            "id": self.id,
            "Title": self.title,
            "Calories": self.calories,
            "Protein": self.protein,
            "Carbs": self.carbs,
            "Fat": self.fat,
            "Fibre": self.fiber,
            "Sugars": self.sugar,
            "Saturates": self.saturates,
            "Salt": self.salt,
            "preparation": self.prep_minutes,
            "cooking": self.cook_minutes,
            "Ingredients": self.ingredients_text,
            "servings": self.servings,
            "Blurb": self.blurb,
            "ImageUrl": self.image_url,
            "Method": self.method,
            "MethodSteps": list(self.method_steps),
            "IngredientList": list(self.ingredients),
            "Webpage": self.webpage,
            "Times": self.times_text,
            "perc_carbs": self.perc_carbs,
            "perc_fat": self.perc_fat,
            "perc_fibre": self.perc_fibre,
            "total_g": self.total_g,
        }
