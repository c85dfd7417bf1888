"""Tests for the meal plan service."""

from unittest.mock import Mock
from uuid import UUID, uuid4

import pytest

from macro_planner.domain.errors import (
    InvalidAmountError,
    InvalidNameError,
    MalformedDayError,
    PersistenceError,
)
from macro_planner.domain.meals import (
    DEFAULT_MEAL_TIMES,
    DailyMacroConfig,
    DayKey,
    Meal,
    NutrientValues,
)
from macro_planner.services import meals as meals_module
from macro_planner.services.meals import (
    MealPlanService,
    parse_day,
    synthesize_meals,
    validate_meal_id,
)
from tests.conftest import InMemoryMealPlanRepository, make_item

OATS = NutrientValues(calories=380, carbs=60, protein=13, fat=7, protein_g=0)


@pytest.fixture
def service(meal_plan_repository: InMemoryMealPlanRepository) -> MealPlanService:
    return MealPlanService(repository=meal_plan_repository)


def test_parse_day() -> None:
    assert parse_day("Monday") is DayKey.MONDAY
    with pytest.raises(MalformedDayError):
        parse_day("someday")


def test_validate_meal_id() -> None:
    assert validate_meal_id(6) == 6
    for meal_id in (0, 7):
        with pytest.raises(MalformedDayError):
            validate_meal_id(meal_id)


def test_synthesize_fills_missing_meals_with_defaults() -> None:
    stored = [
        Meal(id=5, time="21:00", items=[make_item()]),
        Meal(id=1, time="07:30"),
        Meal(id=3, time="13:15"),
    ]

    meals = synthesize_meals(stored)

    assert [meal.id for meal in meals] == [1, 2, 3, 4, 5, 6]
    assert [meal.time for meal in meals] == [
        "07:30",
        DEFAULT_MEAL_TIMES[2],
        "13:15",
        DEFAULT_MEAL_TIMES[4],
        "21:00",
        DEFAULT_MEAL_TIMES[6],
    ]
    assert len(meals[4].items) == 1
    assert meals[1].items == []


def test_synthesize_rejects_duplicate_meal_ids() -> None:
    with pytest.raises(MalformedDayError):
        synthesize_meals([Meal(id=2, time="10:00"), Meal(id=2, time="11:00")])


def test_synthesize_rejects_out_of_range_meal_ids() -> None:
    with pytest.raises(MalformedDayError):
        synthesize_meals([Meal(id=9, time="10:00")])


def test_new_day_has_default_plan(service: MealPlanService, user_id: UUID) -> None:
    plan = service.get_day_plan(user_id, DayKey.WEDNESDAY)

    assert plan.day is DayKey.WEDNESDAY
    assert plan.macro_config == DailyMacroConfig()
    assert [meal.time for meal in plan.meals] == list(DEFAULT_MEAL_TIMES.values())


def test_save_macro_config(service: MealPlanService, user_id: UUID) -> None:
    service.save_macro_config(
        user_id, DayKey.MONDAY, protein_level=2.2, fat_level=0.9, calorie_adjustment=150
    )

    plan = service.get_day_plan(user_id, DayKey.MONDAY)

    assert plan.macro_config == DailyMacroConfig(
        protein_level=2.2, fat_level=0.9, calorie_adjustment=150
    )
    assert service.get_day_plan(user_id, DayKey.TUESDAY).macro_config == DailyMacroConfig()


def test_add_food_item_sets_base_values(service: MealPlanService, user_id: UUID) -> None:
    item = service.add_food_item(user_id, DayKey.MONDAY, 2, " Oats ", "80", OATS)

    assert item.id is not None
    assert item.name == "Oats"
    assert item.amount == 80
    assert item.base_amount == 80
    assert item.nutrients == OATS
    assert item.base_nutrients == OATS
    plan = service.get_day_plan(user_id, DayKey.MONDAY)
    assert plan.meals[1].items == [item]


def test_add_food_item_validates_input(service: MealPlanService, user_id: UUID) -> None:
    with pytest.raises(InvalidNameError):
        service.add_food_item(user_id, DayKey.MONDAY, 1, "  ", 100, OATS)
    with pytest.raises(InvalidAmountError):
        service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", -3, OATS)
    with pytest.raises(MalformedDayError):
        service.add_food_item(user_id, DayKey.MONDAY, 7, "Oats", 100, OATS)


def test_change_item_amount_rescales(service: MealPlanService, user_id: UUID) -> None:
    item = service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)

    updated = service.change_item_amount(user_id, DayKey.MONDAY, 1, item.id, 50)

    assert updated is not None
    assert updated.id == item.id
    assert updated.nutrients.calories == pytest.approx(190)
    assert updated.base_amount == 50


def test_change_item_amount_without_rebase(
    meal_plan_repository: InMemoryMealPlanRepository, user_id: UUID
) -> None:
    service = MealPlanService(repository=meal_plan_repository, rebase_on_amount_change=False)
    item = service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)

    updated = service.change_item_amount(user_id, DayKey.MONDAY, 1, item.id, 50)

    assert updated.base_amount == 100
    assert updated.base_nutrients == OATS


def test_change_amount_of_missing_item(service: MealPlanService, user_id: UUID) -> None:
    assert service.change_item_amount(user_id, DayKey.MONDAY, 1, uuid4(), 50) is None


def test_rename_food_item(service: MealPlanService, user_id: UUID) -> None:
    item = service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)

    renamed = service.rename_food_item(user_id, DayKey.MONDAY, 1, item.id, "Rolled oats")

    assert renamed.name == "Rolled oats"
    assert renamed.nutrients == OATS


def test_clearing_name_deletes_item(service: MealPlanService, user_id: UUID) -> None:
    item = service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)

    assert service.rename_food_item(user_id, DayKey.MONDAY, 1, item.id, " ") is None
    assert service.get_day_plan(user_id, DayKey.MONDAY).meals[0].items == []


def test_delete_food_item(service: MealPlanService, user_id: UUID) -> None:
    item = service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)

    assert service.delete_food_item(user_id, DayKey.MONDAY, 1, item.id)
    assert not service.delete_food_item(user_id, DayKey.MONDAY, 1, item.id)


def test_clear_meal_keeps_other_meals(service: MealPlanService, user_id: UUID) -> None:
    service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)
    service.add_food_item(user_id, DayKey.MONDAY, 1, "Milk", 200, OATS)
    service.add_food_item(user_id, DayKey.MONDAY, 2, "Apple", 150, OATS)

    removed = service.clear_meal(user_id, DayKey.MONDAY, 1)

    plan = service.get_day_plan(user_id, DayKey.MONDAY)
    assert removed == 2
    assert plan.meals[0].items == []
    assert [item.name for item in plan.meals[1].items] == ["Apple"]


def test_copy_meal_replaces_target_items(service: MealPlanService, user_id: UUID) -> None:
    source = service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)
    service.add_food_item(user_id, DayKey.MONDAY, 3, "Pizza", 300, OATS)

    copies = service.copy_meal(user_id, DayKey.MONDAY, 1, 3)

    plan = service.get_day_plan(user_id, DayKey.MONDAY)
    assert [item.name for item in plan.meals[2].items] == ["Oats"]
    assert copies[0].id != source.id
    assert plan.meals[0].items == [source]


def test_copy_meal_to_another_day(service: MealPlanService, user_id: UUID) -> None:
    service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)

    service.copy_meal(user_id, DayKey.MONDAY, 1, 1, target_day=DayKey.FRIDAY)

    plan = service.get_day_plan(user_id, DayKey.FRIDAY)
    assert [item.name for item in plan.meals[0].items] == ["Oats"]


def test_days_are_isolated_per_user(service: MealPlanService, user_id: UUID) -> None:
    service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)

    other = service.get_day_plan(uuid4(), DayKey.MONDAY)

    assert all(meal.items == [] for meal in other.meals)


def test_interrupted_copy_is_logged_and_raised(
    meal_plan_repository: InMemoryMealPlanRepository,
    user_id: UUID,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    service = MealPlanService(repository=meal_plan_repository)
    service.add_food_item(user_id, DayKey.MONDAY, 1, "Oats", 100, OATS)
    service.add_food_item(user_id, DayKey.MONDAY, 1, "Milk", 200, OATS)
    service.add_food_item(user_id, DayKey.MONDAY, 2, "Apple", 150, OATS)
    logger = Mock()
    monkeypatch.setattr(meals_module, "_logger", logger)
    original_upsert = meal_plan_repository.upsert_food_item

    def failing_upsert(user_id, day, meal_id, item):  # type: ignore[no-untyped-def]
        if item.name == "Milk":
            raise PersistenceError("Failed to save food item 'Milk'")
        return original_upsert(user_id, day, meal_id, item)

    monkeypatch.setattr(meal_plan_repository, "upsert_food_item", failing_upsert)

    with pytest.raises(PersistenceError):
        service.copy_meal(user_id, DayKey.MONDAY, 1, 2)

    plan = service.get_day_plan(user_id, DayKey.MONDAY)
    assert [item.name for item in plan.meals[1].items] == ["Oats"]
    logger.exception.assert_called_once()
    args = logger.exception.call_args.args
    assert args[-3:] == (1, 1, 2)
