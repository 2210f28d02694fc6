"""Recipe normalization for raw recipe records."""

import logging
import math
import re
from collections.abc import Iterable, Mapping

from nutrition_planner.domain.recipes import Recipe, RecipeTimes

_logger = logging.getLogger(__name__)

_KEY_DECORATION = re.compile(r"\[.*?\]")
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_PREPARATION = re.compile(r"preparation:\s*(\d+)\s*mins?", re.IGNORECASE)
_COOKING = re.compile(r"cooking:\s*(\d+)\s*mins?", re.IGNORECASE)
_TOTAL_TIME = re.compile(r"total time:\s*(\d+)\s*mins?", re.IGNORECASE)
_STEP_MARKER = re.compile(r"(step\s*\d+\s*)", re.IGNORECASE)
_STEP_LABEL = re.compile(r"step\s*\d+", re.IGNORECASE)
_UNITS = (
    r"g|kg|ml|l|tbsp|tsp|oz|cups?|cloves?|heads?|slices?|strips?|handfuls?"
    r"|cans?|pieces?|bags?"
)
# New ingredient at a line break, a semicolon or a quantity after other text.
_INGREDIENT_BREAK = re.compile(r"\n+|;|(?<=\S)\s+(?=\d)")
_QUANTITY_PREFIX = re.compile(
    rf"^\d+(?:[./]\d+)?\s*(?:(?:{_UNITS})\b)?\s*(?:x\b\s*)?", re.IGNORECASE
)

_DEBUG_SAMPLE_EVERY = 100

# Stored field name -> accepted aliases, checked in order.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("Title", "title"),
    "calories": ("Calories", "calories"),
    "protein": ("Protein", "protein"),
    "carbs": ("Carbs", "carbs"),
    "fat": ("Fat", "fat"),
    "fiber": ("Fibre", "Fiber", "fibre", "fiber"),
    "sugar": ("Sugars", "Sugar", "sugars", "sugar"),
    "saturates": ("Saturates", "saturates"),
    "salt": ("Salt", "salt"),
    "times": ("Times", "times"),
    "ingredients": ("Ingredients", "ingredients"),
    "servings": ("servings", "Servings"),
    "blurb": ("Blurb", "blurb"),
    "image_url": ("ImageURL", "ImageUrl", "image_url"),
    "method": ("Method", "method"),
    "webpage": ("Webpage", "webpage"),
    "perc_carbs": ("perc_carbs",),
    "perc_fat": ("perc_fat",),
    "perc_fibre": ("perc_fibre",),
    "total_g": ("total_g",),
}


def clean_keys(raw: Mapping[str, object]) -> dict[str, object]:
    """Strip bracketed index suffixes and whitespace from record keys."""
    return {_KEY_DECORATION.sub("", str(key)).strip(): value for key, value in raw.items()}


def coerce_number(value: object) -> float:
    """Parse a loosely typed numeric value, falling back to 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value).strip())
        if match is None:
            return 0.0
        number = float(match.group(0))
    if not math.isfinite(number):
        return 0.0
    return number


def coerce_text(value: object) -> str:
    """Return a trimmed string, or an empty string for non-string values."""
    if isinstance(value, str):
        return value.strip()
    return ""


def ingredients_as_text(value: object) -> str:
    """Flatten an ingredients field, text or a list of lines, into one string."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list | tuple):
        return " ".join(str(item).strip() for item in value if str(item).strip())
    return ""


def parse_ingredients(value: object) -> tuple[str, ...]:
    """Split an ingredients field into ingredient names without quantities."""
    if isinstance(value, list | tuple):
        lines = [str(item) for item in value]
    elif isinstance(value, str):
        lines = _INGREDIENT_BREAK.split(value)
    else:
        return ()
    names = (_QUANTITY_PREFIX.sub("", line.strip()).strip(" ,;") for line in lines)
    return tuple(name for name in names if name)


def parse_times(times_text: object) -> RecipeTimes:
    """Extract preparation and cooking minutes from a times description.

    "Total time: N mins" fills the cooking minutes unless an explicit
    "Cooking: N mins" is also present.
    """
    if not isinstance(times_text, str) or not times_text.strip():
        return RecipeTimes(prep_minutes=0, cook_minutes=0)

    prep = 0
    cook = 0
    total_match = _TOTAL_TIME.search(times_text)
    if total_match:
        cook = int(total_match.group(1))
    prep_match = _PREPARATION.search(times_text)
    if prep_match:
        prep = int(prep_match.group(1))
    cook_match = _COOKING.search(times_text)
    if cook_match:
        cook = int(cook_match.group(1))
    return RecipeTimes(prep_minutes=prep, cook_minutes=cook)


def parse_method(method_text: object) -> tuple[str, ...]:
    """Split a method description into steps on "Step N" markers."""
    if not isinstance(method_text, str) or not method_text.strip():
        return ()

    steps: list[str] = []
    current = ""
    seen_marker = False
    for part in _STEP_MARKER.split(method_text):
        chunk = part.strip()
        if not chunk:
            continue
        if _STEP_LABEL.fullmatch(chunk):
            if current:
                steps.append(current)
            current = ""
            seen_marker = True
        elif not seen_marker and not steps:
            steps.append(chunk)
        else:
            current = f"{current} {chunk}" if current else chunk
    if current:
        steps.append(current)
    return tuple(steps)


def normalize_recipe(raw: object, fallback_id: str = "") -> Recipe:
    """Convert a raw recipe record into a `Recipe`. Never raises.

    A record that is not a mapping becomes an all-zero recipe. Records
    without an id take `fallback_id`.
    """
    if not isinstance(raw, Mapping):
        _logger.warning("Recipe record is %s, not a mapping", type(raw).__name__)
        raw = {}
    record = clean_keys(raw)
    recipe_id = str(record.get("id") or "").strip()
    if not recipe_id:
        _logger.warning("Recipe record without id, using %r", fallback_id)
        recipe_id = fallback_id
    fields = {name: _lookup(record, aliases) for name, aliases in _FIELD_ALIASES.items()}

    raw_calories = fields["calories"]
    calories = coerce_number(raw_calories)
    if raw_calories is None or (isinstance(raw_calories, str) and not raw_calories.strip()):
        _logger.warning(
            "Recipe %s: calories missing or empty, setting to 0", recipe_id or "N/A"
        )
    elif calories <= 0:
        _logger.warning(
            "Recipe %s: calories not positive (%r), unusable for selection",
            recipe_id or "N/A",
            raw_calories,
        )
    calories = max(calories, 0.0)

    times_text = coerce_text(fields["times"])
    times = parse_times(times_text)
    method = coerce_text(fields["method"])

    return Recipe(
        id=recipe_id,
        title=coerce_text(fields["title"]),
        calories=calories,
        protein=coerce_number(fields["protein"]),
        carbs=coerce_number(fields["carbs"]),
        fat=coerce_number(fields["fat"]),
        fiber=coerce_number(fields["fiber"]),
        sugar=coerce_number(fields["sugar"]),
        saturates=coerce_number(fields["saturates"]),
        salt=coerce_number(fields["salt"]),
        prep_minutes=times.prep_minutes,
        cook_minutes=times.cook_minutes,
        ingredients_text=ingredients_as_text(fields["ingredients"]),
        ingredients=parse_ingredients(fields["ingredients"]),
        servings=coerce_text(fields["servings"]),
        blurb=coerce_text(fields["blurb"]),
        image_url=coerce_text(fields["image_url"]),
        method=method,
        method_steps=parse_method(method),
        webpage=coerce_text(fields["webpage"]),
        times_text=times_text,
        perc_carbs=coerce_number(fields["perc_carbs"]),
        perc_fat=coerce_number(fields["perc_fat"]),
        perc_fibre=coerce_number(fields["perc_fibre"]),
        total_g=coerce_number(fields["total_g"]),
    )


def normalize_recipes(
    raws: Iterable[Mapping[str, object] | Recipe], source: str = "recipes"
) -> list[Recipe]:
    """Normalize a collection, passing already-normalized recipes through.

    Records without an id are named after the source and their position.
    """
    recipes: list[Recipe] = []
    for index, raw in enumerate(raws):
        if isinstance(raw, Recipe):
            recipe = raw
        else:
            recipe = normalize_recipe(raw, fallback_id=f"{source}-{index}")
        if index % _DEBUG_SAMPLE_EVERY == 0:
            _logger.debug(
                "Normalized %s #%s: id=%s calories=%s prep=%s cook=%s",
                source,
                index,
                recipe.id,
                recipe.calories,
                recipe.prep_minutes,
                recipe.cook_minutes,
            )
        recipes.append(recipe)
    return recipes


def _lookup(record: Mapping[str, object], aliases: tuple[str, ...]) -> object | None:
    for alias in aliases:
        if alias in record:
            return record[alias]
    return None
