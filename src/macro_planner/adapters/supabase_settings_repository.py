"""Supabase repository for user settings."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from macro_planner.domain.errors import PersistenceError
from macro_planner.domain.settings import UnitSystem, UserSettings
from macro_planner.services.user_settings import SettingsRepository


@dataclass
class SupabaseSettingsRepository(SettingsRepository):
    """Supabase implementation for user settings."""

    client: Client

    def get_settings(self, user_id: UUID) -> UserSettings | None:
        """Return the stored settings for a user."""
        response = (
            self.client.table("user_settings")
            .select("weight_kg, goal_calories, meal_interval, unit_system")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserSettings(
            weight_kg=float(row.get("weight_kg") or 0.0),
            base_goal_calories=float(row.get("goal_calories") or 0.0),
            meal_interval_hours=float(row.get("meal_interval") or 3.0),
            unit_system=UnitSystem(row.get("unit_system") or UnitSystem.METRIC),
        )

    def save_settings(self, user_id: UUID, settings: UserSettings) -> None:
        """Insert or update the user's settings."""
        response = (
            self.client.table("user_settings")
            .upsert(
                {
                    "user_id": str(user_id),
                    "weight_kg": settings.weight_kg,
                    "goal_calories": settings.base_goal_calories,
                    "meal_interval": settings.meal_interval_hours,
                    "unit_system": settings.unit_system.value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise PersistenceError("Failed to save user settings")
