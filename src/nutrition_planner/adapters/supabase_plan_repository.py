"""Supabase-backed nutrition plan repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrition_planner.domain.plans import WeeklyPlan
from nutrition_planner.services.plans import PlanRepository


@dataclass
class SupabasePlanRepository(PlanRepository):
    """Supabase implementation for plan persistence."""

    client: Client
    table: str = "nutrition_plans"

    def deactivate_active_plans(self, user_id: str) -> int:
        """Mark every active plan for the user inactive."""
        response = (
            self.client.table(self.table)
            .update(
                {
                    "active": False,
                    "deactivated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("user_id", user_id)
            .eq("active", True)
            .execute()
        )
        return len(response.data or [])

    def save_plan(self, user_id: str, plan: WeeklyPlan) -> str:
        """Insert the plan row and return its id."""
        response = (
            self.client.table(self.table)
            .insert(
                {
                    "user_id": user_id,
                    "active": plan.active,
                    "plan_start_date": plan.start.isoformat(),
                    "plan_end_date": plan.end.isoformat(),
                    "generated_at": datetime.now(tz=UTC).isoformat(),
                    "plan": plan.to_record(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store nutrition plan")
        return str(response.data[0]["id"])

    def get_active_plan(self, user_id: str) -> dict[str, object] | None:
        """Return the newest active plan row for the user."""
        response = (
            self.client.table(self.table)
            .select("id, plan, plan_start_date, plan_end_date, generated_at")
            .eq("user_id", user_id)
            .eq("active", True)
            .order("generated_at", desc=True)
            .limit(1)
            .execute()
        )
        if response.data:
            return response.data[0]
        return None
