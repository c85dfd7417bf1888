"""Supabase repository for daily meal plans."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from macro_planner.domain.errors import PersistenceError
from macro_planner.domain.meals import (
    DEFAULT_MEAL_TIMES,
    NUTRIENT_FIELDS,
    DailyMacroConfig,
    DayKey,
    FoodItem,
    Meal,
    NutrientValues,
)
from macro_planner.services.meals import MealPlanRepository

_ITEM_COLUMNS = (
    "id, meal_id, name, amount, base_amount, calories, carbs, protein, fat, "
    "protein_g, base_calories, base_carbs, base_protein, base_fat, base_protein_g"
)


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for meal plans and daily macro configs."""

    client: Client

    def get_macro_config(self, user_id: UUID, day: DayKey) -> DailyMacroConfig | None:
        """Return the macro config stored for a day."""
        response = (
            self.client.table("user_daily_macros")
            .select("protein_level, fat_level, calorie_adjustment")
            .eq("user_id", str(user_id))
            .eq("day", day.value)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return DailyMacroConfig(
            protein_level=_optional_float(row.get("protein_level")),
            fat_level=_optional_float(row.get("fat_level")),
            calorie_adjustment=int(row.get("calorie_adjustment") or 0),
        )

    def save_macro_config(
        self, user_id: UUID, day: DayKey, config: DailyMacroConfig
    ) -> None:
        """Insert or update the macro config for a day."""
        response = (
            self.client.table("user_daily_macros")
            .upsert(
                {
                    "user_id": str(user_id),
                    "day": day.value,
                    "protein_level": config.protein_level,
                    "fat_level": config.fat_level,
                    "calorie_adjustment": config.calorie_adjustment,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id,day",
            )
            .execute()
        )
        if not response.data:
            raise PersistenceError(f"Failed to save macro config for {day}")

    def list_meals(self, user_id: UUID, day: DayKey) -> list[Meal]:
        """Return stored meal times and items grouped by meal id."""
        times_response = (
            self.client.table("meal_times")
            .select("meal_id, meal_time")
            .eq("user_id", str(user_id))
            .eq("day", day.value)
            .execute()
        )
        items_response = (
            self.client.table("meal_items")
            .select(_ITEM_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("day", day.value)
            .order("created_at", desc=False)
            .execute()
        )
        times: dict[int, str] = {
            int(row["meal_id"]): str(row["meal_time"])
            for row in times_response.data or []
        }
        items: dict[int, list[FoodItem]] = {}
        for row in items_response.data or []:
            items.setdefault(int(row["meal_id"]), []).append(_parse_item(row))

        meals = []
        for meal_id in sorted(set(times) | set(items)):
            time = times.get(meal_id) or DEFAULT_MEAL_TIMES.get(meal_id, "00:00")
            meals.append(Meal(id=meal_id, time=time, items=items.get(meal_id, [])))
        return meals

    def save_meal_time(self, user_id: UUID, day: DayKey, meal_id: int, time: str) -> None:
        """Insert or update a meal's time."""
        response = (
            self.client.table("meal_times")
            .upsert(
                {
                    "user_id": str(user_id),
                    "day": day.value,
                    "meal_id": meal_id,
                    "meal_time": time,
                },
                on_conflict="user_id,day,meal_id",
            )
            .execute()
        )
        if not response.data:
            raise PersistenceError(f"Failed to save time for meal {meal_id}")

    def get_food_item(
        self, user_id: UUID, day: DayKey, meal_id: int, item_id: UUID
    ) -> FoodItem | None:
        """Return a food item by id."""
        response = (
            self.client.table("meal_items")
            .select(_ITEM_COLUMNS)
            .eq("id", str(item_id))
            .eq("user_id", str(user_id))
            .eq("day", day.value)
            .eq("meal_id", meal_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def upsert_food_item(
        self, user_id: UUID, day: DayKey, meal_id: int, item: FoodItem
    ) -> FoodItem:
        """Create or update a food item row."""
        payload: dict[str, object] = {
            "user_id": str(user_id),
            "day": day.value,
            "meal_id": meal_id,
            "name": item.name,
            "amount": item.amount,
            "base_amount": item.base_amount,
        }
        for name in NUTRIENT_FIELDS:
            payload[name] = getattr(item.nutrients, name)
            payload[f"base_{name}"] = getattr(item.base_nutrients, name)
        table = self.client.table("meal_items")
        if item.id is None:
            response = table.insert(payload).execute()
        else:
            response = table.update(payload).eq("id", str(item.id)).execute()
        if not response.data:
            raise PersistenceError(f"Failed to save food item {item.name!r}")
        return _parse_item(response.data[0])

    def delete_food_item(
        self, user_id: UUID, day: DayKey, meal_id: int, item_id: UUID
    ) -> bool:
        """Delete a food item row."""
        response = (
            self.client.table("meal_items")
            .delete()
            .eq("id", str(item_id))
            .eq("user_id", str(user_id))
            .eq("day", day.value)
            .eq("meal_id", meal_id)
            .execute()
        )
        return bool(response.data)

    def delete_meal_items(self, user_id: UUID, day: DayKey, meal_id: int) -> int:
        """Delete every item of a meal."""
        response = (
            self.client.table("meal_items")
            .delete()
            .eq("user_id", str(user_id))
            .eq("day", day.value)
            .eq("meal_id", meal_id)
            .execute()
        )
        return len(response.data or [])


def _optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _parse_item(row: dict[str, object]) -> FoodItem:
    return FoodItem(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        amount=_optional_float(row.get("amount")) or 0.0,
        base_amount=_optional_float(row.get("base_amount")) or 0.0,
        nutrients=NutrientValues(
            **{name: _optional_float(row.get(name)) for name in NUTRIENT_FIELDS}
        ),
        base_nutrients=NutrientValues(
            **{
                name: _optional_float(row.get(f"base_{name}"))
                for name in NUTRIENT_FIELDS
            }
        ),
    )
