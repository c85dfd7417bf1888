"""Daily and weekly achievement reports."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from uuid import UUID

from macro_planner.domain.errors import MalformedDayError
from macro_planner.domain.meals import (
    DAY_KEYS,
    MEAL_IDS,
    NUTRIENT_FIELDS,
    DayKey,
    DayMealPlan,
    Meal,
)
from macro_planner.domain.reports import (
    Achievement,
    DayReport,
    DayTotals,
    Tier,
    WeekReport,
)
from macro_planner.domain.settings import UserSettings
from macro_planner.services.meals import MealPlanService
from macro_planner.services.targets import compute_targets
from macro_planner.services.user_settings import UserSettingsService

EXCELLENT_LOW = 95.0
EXCELLENT_HIGH = 105.0
GOOD_LOW = 90.0
GOOD_HIGH = 110.0
GOOD_DAY_SHARE = 0.7

_logger = logging.getLogger(__name__)


@dataclass
class ReportService:
    """Service that builds reports from the last known-good read."""

    settings_service: UserSettingsService
    meal_plan_service: MealPlanService

    def get_day_report(self, user_id: UUID, day: DayKey) -> DayReport:
        """Build the report for a single day."""
        context = self.settings_service.load_context(user_id)
        plan = self.meal_plan_service.get_day_plan(user_id, day)
        return build_day_report(context.settings, plan)

    def get_week_report(self, user_id: UUID) -> WeekReport:
        """Build the report for the seven fixed weekdays."""
        context = self.settings_service.load_context(user_id)
        plans = [self.meal_plan_service.get_day_plan(user_id, day) for day in DAY_KEYS]
        report = build_week_report(context.settings, plans)
        _logger.info(
            "Week report built: user=%s on_track=%s avg_calories=%.1f",
            user_id,
            report.days_on_track,
            report.avg_daily_calories,
        )
        return report


def aggregate_day(meals: Iterable[Meal]) -> DayTotals:
    """Sum every nutrient field over all items of all meals."""
    sums = dict.fromkeys(NUTRIENT_FIELDS, 0.0)
    for meal in meals:
        for item in meal.items:
            for name in NUTRIENT_FIELDS:
                value = getattr(item.nutrients, name)
                if isinstance(value, int | float):
                    sums[name] += value
    return DayTotals(**sums)


def tier_for(percentage: float) -> Tier:
    """Map an achievement percentage to a tier, checking excellent first."""
    if EXCELLENT_LOW <= percentage <= EXCELLENT_HIGH:
        return Tier.EXCELLENT
    if GOOD_LOW <= percentage <= GOOD_HIGH:
        return Tier.GOOD
    return Tier.NEEDS_IMPROVEMENT


def classify(actual: float, target: float | None) -> Achievement:
    """Compare an actual value with its target.

    A missing or zero target means "no target set": the percentage is 0 and
    the tier is None so the metric stays out of the day's overall vote.
    """
    if target is None or target <= 0:
        return Achievement(actual=actual, target=target or 0.0, percentage=0.0, tier=None)
    percentage = actual / target * 100
    return Achievement(
        actual=actual, target=target, percentage=percentage, tier=tier_for(percentage)
    )


def overall_status(achievements: Iterable[Achievement]) -> Tier:
    """Combine the tiers of the metrics that have a target."""
    tiers = [item.tier for item in achievements if item.tier is not None]
    if not tiers:
        return Tier.NEEDS_IMPROVEMENT
    excellent = sum(1 for tier in tiers if tier is Tier.EXCELLENT)
    poor = sum(1 for tier in tiers if tier is Tier.NEEDS_IMPROVEMENT)
    good_or_better = len(tiers) - poor
    if excellent == len(tiers):
        return Tier.EXCELLENT
    if poor == 0 and good_or_better >= GOOD_DAY_SHARE * len(tiers):
        return Tier.GOOD
    return Tier.NEEDS_IMPROVEMENT


def build_day_report(settings: UserSettings, plan: DayMealPlan) -> DayReport:
    """Aggregate, target and classify one day."""
    _validate_plan(plan)
    totals = aggregate_day(plan.meals)
    targets = compute_targets(settings, plan.macro_config)
    calories = classify(totals.calories, targets.goal_calories)
    protein = classify(totals.protein_total, targets.protein_target)
    fat = classify(totals.fat, targets.fat_target)
    carbs = classify(totals.carbs, targets.carb_target)
    return DayReport(
        day=plan.day,
        totals=totals,
        targets=targets,
        calorie_adjustment=plan.macro_config.calorie_adjustment,
        calories=calories,
        protein=protein,
        fat=fat,
        carbs=carbs,
        status=overall_status((calories, protein, fat, carbs)),
    )


def build_week_report(settings: UserSettings, plans: Sequence[DayMealPlan]) -> WeekReport:
    """Build seven day reports and the weekly averages over them."""
    by_day = {plan.day: plan for plan in plans}
    if len(plans) != len(DAY_KEYS) or set(by_day) != set(DAY_KEYS):
        raise MalformedDayError(
            f"Week report needs exactly one plan per weekday, got {len(plans)}"
        )
    days = [build_day_report(settings, by_day[day]) for day in DAY_KEYS]

    avg_daily_calories = _mean(day.totals.calories for day in days)
    avg_goal_calories = _mean(day.targets.goal_calories for day in days)
    avg_protein_target = _mean(day.targets.protein_target for day in days)
    avg_protein_actual = _mean(day.totals.protein_total for day in days)
    avg_fat_target = _mean(day.targets.fat_target for day in days)
    avg_fat_actual = _mean(day.totals.fat for day in days)
    avg_carb_target = _mean(day.targets.carb_target for day in days)
    avg_carb_actual = _mean(day.totals.carbs for day in days)

    return WeekReport(
        days=days,
        avg_daily_calories=avg_daily_calories,
        avg_goal_calories=avg_goal_calories,
        goal_achievement=_percent(avg_daily_calories, avg_goal_calories),
        avg_protein_target=avg_protein_target,
        avg_protein_actual=avg_protein_actual,
        protein_achievement=_percent(avg_protein_actual, avg_protein_target),
        avg_fat_target=avg_fat_target,
        avg_fat_actual=avg_fat_actual,
        fat_achievement=_percent(avg_fat_actual, avg_fat_target),
        avg_carb_target=avg_carb_target,
        avg_carb_actual=avg_carb_actual,
        carbs_achievement=_percent(avg_carb_actual, avg_carb_target),
        days_on_track=sum(
            1
            for day in days
            if EXCELLENT_LOW <= day.calorie_achievement <= EXCELLENT_HIGH
        ),
    )


def _validate_plan(plan: DayMealPlan) -> None:
    if plan.day not in DAY_KEYS:
        raise MalformedDayError(f"Unknown day: {plan.day!r}")
    meal_ids = tuple(sorted(meal.id for meal in plan.meals))
    if meal_ids != MEAL_IDS:
        raise MalformedDayError(
            f"Day {plan.day} must have meals {MEAL_IDS}, got {meal_ids}"
        )


def _mean(values: Iterable[float]) -> float:
    items = list(values)
    return sum(items) / len(items) if items else 0.0


def _percent(actual: float, target: float) -> float:
    return actual / target * 100 if target > 0 else 0.0
