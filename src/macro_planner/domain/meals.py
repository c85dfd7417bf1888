"""Domain models for the daily meal plan."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID


class DayKey(StrEnum):
    """Fixed weekday keys, in report order."""

    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


DAY_KEYS: tuple[DayKey, ...] = tuple(DayKey)
MEAL_IDS: tuple[int, ...] = (1, 2, 3, 4, 5, 6)
DEFAULT_MEAL_TIMES: dict[int, str] = {
    1: "08:00",
    2: "11:00",
    3: "14:00",
    4: "17:00",
    5: "20:00",
    6: "23:00",
}
NUTRIENT_FIELDS: tuple[str, ...] = ("calories", "carbs", "protein", "fat", "protein_g")


@dataclass(frozen=True)
class NutrientValues:
    """Nutrient fields of a food item; None means the value is absent."""

    calories: float | None = None
    carbs: float | None = None
    protein: float | None = None
    fat: float | None = None
    protein_g: float | None = None


@dataclass(frozen=True)
class FoodItem:
    """A food attached to a meal row."""

    name: str
    amount: float
    base_amount: float
    nutrients: NutrientValues
    base_nutrients: NutrientValues
    id: UUID | None = None


@dataclass(frozen=True)
class Meal:
    """One of the six meals of a day."""

    id: int
    time: str
    items: list[FoodItem] = field(default_factory=list)


@dataclass(frozen=True)
class DailyMacroConfig:
    """Per-day macro levels (g/kg) and calorie adjustment."""

    protein_level: float | None = None
    fat_level: float | None = None
    calorie_adjustment: int = 0


@dataclass(frozen=True)
class DayMealPlan:
    """Macro config and meals for one weekday."""

    day: DayKey
    macro_config: DailyMacroConfig
    meals: list[Meal]
