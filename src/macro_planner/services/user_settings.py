"""User settings service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from macro_planner.domain.settings import (
    KG_PER_LB,
    LB_PER_KG,
    PlanningContext,
    UnitSystem,
    UserSettings,
)

DEFAULT_WEIGHT_KG = 70.0
DEFAULT_GOAL_CALORIES = 2700.0
DEFAULT_MEAL_INTERVAL_HOURS = 3.0


class SettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def get_settings(self, user_id: UUID) -> UserSettings | None:
        """Return the user's settings if stored."""

    def save_settings(self, user_id: UUID, settings: UserSettings) -> None:
        """Insert or update the user's settings."""


@dataclass
class UserSettingsService:
    """Service for user settings and the per-request planning context."""

    repository: SettingsRepository
    default_weight_kg: float = DEFAULT_WEIGHT_KG
    default_goal_calories: float = DEFAULT_GOAL_CALORIES
    default_meal_interval_hours: float = DEFAULT_MEAL_INTERVAL_HOURS

    def get_settings(self, user_id: UUID) -> UserSettings:
        """Return stored settings, or defaults for a new user."""
        stored = self.repository.get_settings(user_id)
        if stored is None:
            return UserSettings(
                weight_kg=self.default_weight_kg,
                base_goal_calories=self.default_goal_calories,
                meal_interval_hours=self.default_meal_interval_hours,
            )
        return stored

    def load_context(self, user_id: UUID) -> PlanningContext:
        """Read settings fresh and wrap them in a planning context."""
        return PlanningContext(user_id=user_id, settings=self.get_settings(user_id))

    def save_settings(
        self,
        user_id: UUID,
        weight: float,
        base_goal_calories: float,
        meal_interval_hours: float | None = None,
        unit_system: UnitSystem = UnitSystem.METRIC,
    ) -> UserSettings:
        """Persist settings; ``weight`` is in the unit system's weight unit."""
        settings = UserSettings(
            weight_kg=weight_to_kg(weight, unit_system),
            base_goal_calories=base_goal_calories,
            meal_interval_hours=meal_interval_hours or self.default_meal_interval_hours,
            unit_system=unit_system,
        )
        self.repository.save_settings(user_id, settings)
        return settings


def weight_to_kg(weight: float, unit_system: UnitSystem) -> float:
    """Convert a body weight entered in the user's units to kilograms."""
    if unit_system is UnitSystem.IMPERIAL:
        return weight * KG_PER_LB
    return weight


def weight_for_display(weight_kg: float, unit_system: UnitSystem) -> float:
    """Convert a stored body weight to the user's units."""
    if unit_system is UnitSystem.IMPERIAL:
        return weight_kg * LB_PER_KG
    return weight_kg
