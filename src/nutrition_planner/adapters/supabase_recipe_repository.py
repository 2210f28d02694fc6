"""Supabase-backed recipe repository."""

from dataclasses import dataclass, field

from supabase import Client

from nutrition_planner.domain.recipes import BREAKFAST, DINNER, LUNCH, SNACK
from nutrition_planner.services.plans import RecipeRepository

DEFAULT_RECIPE_TABLES = {
    BREAKFAST: "breakfast_list_full_may2025",
    LUNCH: "lunch_list_full_may2025",
    DINNER: "dinner_list_full_may2025",
    SNACK: "snack_list_full_may2025",
}


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for reading recipe collections."""

    client: Client
    tables: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_RECIPE_TABLES))
    page_size: int = 1000

    def list_recipes(self, meal_type: str) -> list[dict[str, object]]:
        """Return every raw recipe row for a meal type, paging through the table."""
        table = self.tables.get(meal_type)
        if table is None:
            raise ValueError(f"Unknown meal type: {meal_type}")

        rows: list[dict[str, object]] = []
        offset = 0
        while True:
            response = (
                self.client.table(table)
                .select("*")
                .range(offset, offset + self.page_size - 1)
                .execute()
            )
            page = response.data or []
            rows.extend(page)
            if len(page) < self.page_size:
                return rows
            offset += self.page_size
