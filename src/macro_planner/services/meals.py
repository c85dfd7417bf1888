"""Meal plan service for daily diaries."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from macro_planner.domain.errors import InvalidNameError, MalformedDayError
from macro_planner.domain.meals import (
    DEFAULT_MEAL_TIMES,
    MEAL_IDS,
    DailyMacroConfig,
    DayKey,
    DayMealPlan,
    FoodItem,
    Meal,
    NutrientValues,
)
from macro_planner.services.rescaling import parse_amount, rescale_item

_logger = logging.getLogger(__name__)


class MealPlanRepository(Protocol):
    """Persistence interface for daily meal plans."""

    def get_macro_config(self, user_id: UUID, day: DayKey) -> DailyMacroConfig | None:
        """Return the stored macro config for a day, if any."""

    def save_macro_config(
        self, user_id: UUID, day: DayKey, config: DailyMacroConfig
    ) -> None:
        """Insert or update the macro config for a day."""

    def list_meals(self, user_id: UUID, day: DayKey) -> list[Meal]:
        """Return the stored meals of a day; missing meals are omitted."""

    def save_meal_time(self, user_id: UUID, day: DayKey, meal_id: int, time: str) -> None:
        """Persist a meal's time."""

    def get_food_item(
        self, user_id: UUID, day: DayKey, meal_id: int, item_id: UUID
    ) -> FoodItem | None:
        """Return a food item by id."""

    def upsert_food_item(
        self, user_id: UUID, day: DayKey, meal_id: int, item: FoodItem
    ) -> FoodItem:
        """Create or update a food item and return the stored row."""

    def delete_food_item(
        self, user_id: UUID, day: DayKey, meal_id: int, item_id: UUID
    ) -> bool:
        """Delete a food item; return False when it did not exist."""

    def delete_meal_items(self, user_id: UUID, day: DayKey, meal_id: int) -> int:
        """Delete every item of a meal and return how many were removed."""


def parse_day(raw: str) -> DayKey:
    """Return the day key for a weekday name."""
    try:
        return DayKey(raw.strip().lower())
    except ValueError as exc:
        raise MalformedDayError(f"Unknown day: {raw!r}") from exc


def validate_meal_id(meal_id: int) -> int:
    """Ensure a meal id is one of the six fixed meals."""
    if meal_id not in MEAL_IDS:
        raise MalformedDayError(f"Invalid meal id: {meal_id}")
    return meal_id


def synthesize_meals(meals: list[Meal]) -> list[Meal]:
    """Return exactly six meals, filling missing ids with default times."""
    by_id: dict[int, Meal] = {}
    for meal in meals:
        validate_meal_id(meal.id)
        if meal.id in by_id:
            raise MalformedDayError(f"Duplicate meal id: {meal.id}")
        by_id[meal.id] = meal
    return [
        by_id.get(meal_id) or Meal(id=meal_id, time=DEFAULT_MEAL_TIMES[meal_id])
        for meal_id in MEAL_IDS
    ]


@dataclass
class MealPlanService:
    """Service for reading and editing a day's meals and macro config."""

    repository: MealPlanRepository
    rebase_on_amount_change: bool = True

    def get_day_plan(self, user_id: UUID, day: DayKey) -> DayMealPlan:
        """Load a day's macro config and its six meals."""
        config = self.repository.get_macro_config(user_id, day) or DailyMacroConfig()
        meals = synthesize_meals(self.repository.list_meals(user_id, day))
        return DayMealPlan(day=day, macro_config=config, meals=meals)

    def save_macro_config(
        self,
        user_id: UUID,
        day: DayKey,
        protein_level: float | None,
        fat_level: float | None,
        calorie_adjustment: int = 0,
    ) -> DailyMacroConfig:
        """Persist the macro levels and calorie adjustment of a day."""
        config = DailyMacroConfig(
            protein_level=protein_level,
            fat_level=fat_level,
            calorie_adjustment=calorie_adjustment,
        )
        self.repository.save_macro_config(user_id, day, config)
        _logger.info(
            "Saved macro config: day=%s protein=%s fat=%s adjustment=%s",
            day,
            protein_level,
            fat_level,
            calorie_adjustment,
        )
        return config

    def add_food_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: DayKey,
        meal_id: int,
        name: str,
        amount: object,
        nutrients: NutrientValues,
    ) -> FoodItem:
        """Attach a food to a meal; its nutrients are the base at ``amount``."""
        validate_meal_id(meal_id)
        label = name.strip()
        if not label:
            raise InvalidNameError("Food item name is required")
        serving = parse_amount(amount)
        item = FoodItem(
            name=label,
            amount=serving,
            base_amount=serving,
            nutrients=nutrients if serving > 0 else NutrientValues(),
            base_nutrients=nutrients,
        )
        return self.repository.upsert_food_item(user_id, day, meal_id, item)

    def change_item_amount(
        self, user_id: UUID, day: DayKey, meal_id: int, item_id: UUID, amount: object
    ) -> FoodItem | None:
        """Rescale an item to a new serving amount and persist it."""
        validate_meal_id(meal_id)
        item = self.repository.get_food_item(user_id, day, meal_id, item_id)
        if item is None:
            return None
        updated = rescale_item(item, amount, rebase=self.rebase_on_amount_change)
        return self.repository.upsert_food_item(user_id, day, meal_id, updated)

    def rename_food_item(
        self, user_id: UUID, day: DayKey, meal_id: int, item_id: UUID, name: str
    ) -> FoodItem | None:
        """Rename an item; clearing the name deletes it."""
        validate_meal_id(meal_id)
        item = self.repository.get_food_item(user_id, day, meal_id, item_id)
        if item is None:
            return None
        label = name.strip()
        if not label:
            self.repository.delete_food_item(user_id, day, meal_id, item_id)
            return None
        return self.repository.upsert_food_item(
            user_id, day, meal_id, replace(item, name=label)
        )

    def delete_food_item(
        self, user_id: UUID, day: DayKey, meal_id: int, item_id: UUID
    ) -> bool:
        """Remove a food item from a meal."""
        validate_meal_id(meal_id)
        return self.repository.delete_food_item(user_id, day, meal_id, item_id)

    def clear_meal(self, user_id: UUID, day: DayKey, meal_id: int) -> int:
        """Remove every item from a meal, keeping its time."""
        validate_meal_id(meal_id)
        removed = self.repository.delete_meal_items(user_id, day, meal_id)
        _logger.info("Cleared meal: day=%s meal=%s removed=%s", day, meal_id, removed)
        return removed

    def copy_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: DayKey,
        source_meal_id: int,
        target_meal_id: int,
        target_day: DayKey | None = None,
    ) -> list[FoodItem]:
        """Replace a meal's items with copies of another meal's items."""
        validate_meal_id(source_meal_id)
        validate_meal_id(target_meal_id)
        destination = target_day or day
        plan = self.get_day_plan(user_id, day)
        source = plan.meals[source_meal_id - 1]
        removed = self.repository.delete_meal_items(user_id, destination, target_meal_id)
        copied: list[FoodItem] = []
        try:
            for item in source.items:
                copied.append(
                    self.repository.upsert_food_item(
                        user_id, destination, target_meal_id, replace(item, id=None)
                    )
                )
        except Exception:
            _logger.exception(
                "Meal copy interrupted: day=%s meal=%s -> day=%s meal=%s removed=%s "
                "copied=%s of %s",
                day,
                source_meal_id,
                destination,
                target_meal_id,
                removed,
                len(copied),
                len(source.items),
            )
            raise
        _logger.info(
            "Copied meal: day=%s meal=%s -> day=%s meal=%s items=%s",
            day,
            source_meal_id,
            destination,
            target_meal_id,
            len(copied),
        )
        return copied
