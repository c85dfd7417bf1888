"""JSON serialization of domain objects with display rounding."""

from macro_planner.domain.meals import NUTRIENT_FIELDS, DayMealPlan, FoodItem
from macro_planner.domain.reports import Achievement, DayReport, DayTargets, WeekReport
from macro_planner.domain.settings import UserSettings
from macro_planner.services.rescaling import round_calories, round_display
from macro_planner.services.user_settings import weight_for_display


def serialize_settings(settings: UserSettings) -> dict[str, object]:
    """Return settings with the weight in the user's own unit."""
    return {
        "weight": round_display(
            weight_for_display(settings.weight_kg, settings.unit_system)
        ),
        "weight_unit": settings.unit_system.weight_unit,
        "weight_kg": settings.weight_kg,
        "goal_calories": round_calories(settings.base_goal_calories),
        "weekly_goal_calories": round_calories(settings.weekly_goal_calories),
        "meal_interval_hours": settings.meal_interval_hours,
        "unit_system": settings.unit_system.value,
        "amount_unit": settings.unit_system.amount_unit,
    }


def serialize_item(item: FoodItem) -> dict[str, object]:
    """Current nutrients are rounded; base values stay exact for later edits."""
    return {
        "id": str(item.id) if item.id else None,
        "name": item.name,
        "amount": item.amount,
        "base_amount": item.base_amount,
        "nutrients": {
            name: round_display(getattr(item.nutrients, name))
            for name in NUTRIENT_FIELDS
        },
        "base_nutrients": {
            name: getattr(item.base_nutrients, name) for name in NUTRIENT_FIELDS
        },
    }


def serialize_plan(plan: DayMealPlan, settings: UserSettings) -> dict[str, object]:
    """Return a day's macro config and its six meals in meal order."""
    config = plan.macro_config
    return {
        "day": plan.day.value,
        "amount_unit": settings.unit_system.amount_unit,
        "macro_config": {
            "protein_level": config.protein_level,
            "fat_level": config.fat_level,
            "calorie_adjustment": config.calorie_adjustment,
        },
        "meals": [
            {
                "id": meal.id,
                "time": meal.time,
                "items": [serialize_item(item) for item in meal.items],
            }
            for meal in plan.meals
        ],
    }


def serialize_targets(targets: DayTargets) -> dict[str, object]:
    """Return gram targets, their calories and their share of the goal."""
    return {
        "goal_calories": round_calories(targets.goal_calories),
        "protein_target": round_display(targets.protein_target),
        "fat_target": round_display(targets.fat_target),
        "carb_target": round_display(targets.carb_target),
        "protein_calories": round_calories(targets.protein_calories),
        "fat_calories": round_calories(targets.fat_calories),
        "carb_calories": round_calories(targets.carb_calories),
        "protein_percentage": round_display(targets.protein_percentage),
        "fat_percentage": round_display(targets.fat_percentage),
        "carb_percentage": round_display(targets.carb_percentage),
    }


def serialize_achievement(achievement: Achievement) -> dict[str, object]:
    """Metrics without a target carry no percentage or tier."""
    return {
        "actual": round_display(achievement.actual),
        "target": round_display(achievement.target),
        "percentage": (
            round_display(achievement.percentage) if achievement.has_target else None
        ),
        "tier": achievement.tier.value if achievement.tier else None,
    }


def serialize_day_report(report: DayReport) -> dict[str, object]:
    """Return totals, targets, per-metric achievements and the day status."""
    totals = report.totals
    return {
        "day": report.day.value,
        "totals": {
            "calories": round_calories(totals.calories),
            "carbs": round_display(totals.carbs),
            "protein": round_display(totals.protein),
            "fat": round_display(totals.fat),
            "protein_g": round_display(totals.protein_g),
        },
        "targets": serialize_targets(report.targets),
        "calorie_adjustment": report.calorie_adjustment,
        "achievements": {
            "calories": serialize_achievement(report.calories),
            "protein": serialize_achievement(report.protein),
            "fat": serialize_achievement(report.fat),
            "carbs": serialize_achievement(report.carbs),
        },
        "status": report.status.value,
    }


def serialize_week_report(report: WeekReport) -> dict[str, object]:
    """Return the seven day reports followed by the weekly averages."""
    return {
        "days": [serialize_day_report(day) for day in report.days],
        "avg_daily_calories": round_calories(report.avg_daily_calories),
        "avg_goal_calories": round_calories(report.avg_goal_calories),
        "goal_achievement": round_display(report.goal_achievement),
        "avg_protein_target": round_display(report.avg_protein_target),
        "avg_protein_actual": round_display(report.avg_protein_actual),
        "protein_achievement": round_display(report.protein_achievement),
        "avg_fat_target": round_display(report.avg_fat_target),
        "avg_fat_actual": round_display(report.avg_fat_actual),
        "fat_achievement": round_display(report.fat_achievement),
        "avg_carb_target": round_display(report.avg_carb_target),
        "avg_carb_actual": round_display(report.avg_carb_actual),
        "carbs_achievement": round_display(report.carbs_achievement),
        "days_on_track": report.days_on_track,
    }
