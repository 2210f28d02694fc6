"""Supabase-backed user profile repository."""

from dataclasses import dataclass

from supabase import Client

from nutrition_planner.services.plans import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for reading user records."""

    client: Client
    table: str = "users"

    def get_user_record(self, user_id: str) -> dict[str, object] | None:
        """Return the stored user record, if present."""
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return response.data[0]
        return None
