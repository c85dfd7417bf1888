"""Domain models for derived daily and weekly reports."""

from dataclasses import dataclass
from enum import StrEnum

from macro_planner.domain.meals import DayKey

PROTEIN_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9
CARB_KCAL_PER_G = 4


class Tier(StrEnum):
    """Achievement tier for a metric or a whole day."""

    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs-improvement"


@dataclass(frozen=True)
class DayTotals:
    """Summed nutrient fields of every item in a day."""

    calories: float = 0.0
    carbs: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    protein_g: float = 0.0

    @property
    def protein_total(self) -> float:
        """Protein from both protein-bearing fields."""
        return self.protein + self.protein_g


@dataclass(frozen=True)
class DayTargets:
    """Calorie and macro targets for a day."""

    goal_calories: float
    protein_target: float
    fat_target: float
    carb_target: float

    @property
    def protein_calories(self) -> float:
        """Calories supplied by the protein target."""
        return self.protein_target * PROTEIN_KCAL_PER_G

    @property
    def fat_calories(self) -> float:
        """Calories supplied by the fat target."""
        return self.fat_target * FAT_KCAL_PER_G

    @property
    def carb_calories(self) -> float:
        """Calories supplied by the carb target."""
        return self.carb_target * CARB_KCAL_PER_G

    @property
    def protein_percentage(self) -> float:
        """Share of the calorie goal from protein, in percent."""
        return _share(self.protein_calories, self.goal_calories)

    @property
    def fat_percentage(self) -> float:
        return _share(self.fat_calories, self.goal_calories)

    @property
    def carb_percentage(self) -> float:
        return _share(self.carb_calories, self.goal_calories)


@dataclass(frozen=True)
class Achievement:
    """Actual value of a metric measured against its target."""

    actual: float
    target: float
    percentage: float
    tier: Tier | None

    @property
    def has_target(self) -> bool:
        """Whether the metric takes part in the day's status vote."""
        return self.tier is not None


@dataclass(frozen=True)
class DayReport:
    """Totals, targets and achievements for one day."""

    day: DayKey
    totals: DayTotals
    targets: DayTargets
    calorie_adjustment: int
    calories: Achievement
    protein: Achievement
    fat: Achievement
    carbs: Achievement
    status: Tier

    @property
    def calorie_achievement(self) -> float:
        """Calories eaten as a percentage of the goal."""
        return self.calories.percentage


@dataclass(frozen=True)
class WeekReport:
    """Seven day reports plus weekly aggregate statistics."""

    days: list[DayReport]
    avg_daily_calories: float
    avg_goal_calories: float
    goal_achievement: float
    avg_protein_target: float
    avg_protein_actual: float
    protein_achievement: float
    avg_fat_target: float
    avg_fat_actual: float
    fat_achievement: float
    avg_carb_target: float
    avg_carb_actual: float
    carbs_achievement: float
    days_on_track: int


def _share(part: float, whole: float) -> float:
    """Return ``part`` as a percentage of ``whole``, 0 when ``whole`` is 0."""
    return part / whole * 100 if whole > 0 else 0.0
