"""Tests for macro target calculation."""

import pytest

from macro_planner.domain.meals import DailyMacroConfig
from macro_planner.domain.settings import UserSettings
from macro_planner.services.targets import compute_targets


def test_compute_targets_splits_remaining_calories_to_carbs() -> None:
    settings = UserSettings(weight_kg=80, base_goal_calories=2500)
    config = DailyMacroConfig(protein_level=2.0, fat_level=1.0, calorie_adjustment=-200)

    targets = compute_targets(settings, config)

    assert targets.goal_calories == 2300
    assert targets.protein_target == 160
    assert targets.fat_target == 80
    assert targets.protein_calories == 640
    assert targets.fat_calories == 720
    assert targets.carb_target == pytest.approx((2300 - 640 - 720) / 4)
    assert targets.protein_percentage == pytest.approx(640 / 2300 * 100)


def test_compute_targets_without_levels() -> None:
    settings = UserSettings(weight_kg=70, base_goal_calories=2000)

    targets = compute_targets(settings, DailyMacroConfig())

    assert targets.goal_calories == 2000
    assert targets.protein_target == 0
    assert targets.fat_target == 0
    assert targets.carb_target == 500


def test_carb_target_never_negative() -> None:
    settings = UserSettings(weight_kg=120, base_goal_calories=1500)
    config = DailyMacroConfig(protein_level=3.0, fat_level=2.0)

    targets = compute_targets(settings, config)

    assert targets.carb_target == 0


@pytest.mark.parametrize("weights", [(60, 61), (70, 95.5)])
def test_targets_increase_with_weight(weights) -> None:
    config = DailyMacroConfig(protein_level=1.8, fat_level=0.8)
    lighter = compute_targets(UserSettings(weight_kg=weights[0], base_goal_calories=2500), config)
    heavier = compute_targets(UserSettings(weight_kg=weights[1], base_goal_calories=2500), config)
    assert heavier.protein_target > lighter.protein_target
    assert heavier.fat_target > lighter.fat_target


def test_zero_goal_has_zero_macro_shares() -> None:
    settings = UserSettings(weight_kg=70, base_goal_calories=0)
    targets = compute_targets(settings, DailyMacroConfig(protein_level=2.0))
    assert targets.protein_percentage == 0
    assert targets.carb_target == 0
