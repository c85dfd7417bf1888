"""Calorie and macro target calculation."""

from macro_planner.domain.meals import DailyMacroConfig
from macro_planner.domain.reports import (
    CARB_KCAL_PER_G,
    FAT_KCAL_PER_G,
    PROTEIN_KCAL_PER_G,
    DayTargets,
)
from macro_planner.domain.settings import UserSettings


def compute_targets(settings: UserSettings, config: DailyMacroConfig) -> DayTargets:
    """Compute a day's calorie goal and protein/fat/carb gram targets.

    Protein and fat come from body weight times the day's g/kg levels; carbs
    take whatever calories remain, never less than zero.
    """
    goal_calories = settings.base_goal_calories + config.calorie_adjustment
    protein_target = settings.weight_kg * (config.protein_level or 0)
    fat_target = settings.weight_kg * (config.fat_level or 0)
    remaining = max(
        0.0,
        goal_calories
        - protein_target * PROTEIN_KCAL_PER_G
        - fat_target * FAT_KCAL_PER_G,
    )
    return DayTargets(
        goal_calories=goal_calories,
        protein_target=protein_target,
        fat_target=fat_target,
        carb_target=remaining / CARB_KCAL_PER_G,
    )
