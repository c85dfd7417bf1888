"""Pydantic request models for the HTTP API."""

from pydantic import BaseModel, Field

from macro_planner.domain.meals import DayKey
from macro_planner.domain.settings import UnitSystem


class SettingsUpdate(BaseModel):
    """User settings as entered, with weight in the chosen unit system."""

    weight: float = Field(gt=0)
    goal_calories: float = Field(ge=0)
    meal_interval_hours: float | None = Field(default=None, gt=0, le=24)
    unit_system: UnitSystem = UnitSystem.METRIC


class MacroConfigUpdate(BaseModel):
    """Per-day macro levels in g/kg and calorie adjustment."""

    protein_level: float | None = Field(default=None, ge=0)
    fat_level: float | None = Field(default=None, ge=0)
    calorie_adjustment: int = 0


class MealTimeUpdate(BaseModel):
    """New time for a meal."""

    time: str


class FoodItemCreate(BaseModel):
    """Food attached to a meal; nutrients correspond to ``amount``."""

    name: str = Field(min_length=1)
    amount: float | str
    calories: float | None = None
    carbs: float | None = None
    protein: float | None = None
    fat: float | None = None
    protein_g: float | None = None


class FoodItemUpdate(BaseModel):
    """Edit of a food item; an empty name deletes the item."""

    name: str | None = None
    amount: float | str | None = None


class MealCopyRequest(BaseModel):
    """Destination of a meal copy."""

    target_meal_id: int = Field(ge=1, le=6)
    target_day: DayKey | None = None
