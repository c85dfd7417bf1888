"""Domain models for user settings."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

KG_PER_LB = 0.453592
LB_PER_KG = 2.20462


class UnitSystem(StrEnum):
    """Measurement system chosen by the user."""

    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def weight_unit(self) -> str:
        return "kg" if self is UnitSystem.METRIC else "lb"

    @property
    def amount_unit(self) -> str:
        return "g" if self is UnitSystem.METRIC else "lb"


@dataclass(frozen=True)
class UserSettings:
    """Per-user settings that drive target computation."""

    weight_kg: float
    base_goal_calories: float
    meal_interval_hours: float = 3.0
    unit_system: UnitSystem = UnitSystem.METRIC

    @property
    def weekly_goal_calories(self) -> float:
        return self.base_goal_calories * 7


@dataclass(frozen=True)
class PlanningContext:
    """Immutable request context passed into each planning operation."""

    user_id: UUID
    settings: UserSettings
