"""Proportional nutrient rescaling for serving size changes."""

import math
from dataclasses import replace

from macro_planner.domain.errors import InvalidAmountError
from macro_planner.domain.meals import NUTRIENT_FIELDS, FoodItem, NutrientValues

REBASE_EPSILON = 0.1


def rescale(base_value: float | None, base_amount: float, new_amount: float) -> float | None:
    """Return the nutrient value at ``new_amount``, or None when undefined.

    The result is unrounded; use ``round_display`` for presentation only so
    repeated aggregation does not compound rounding error.
    """
    if base_value is None or base_amount <= 0:
        return None
    return base_value * (new_amount / base_amount)


def round_display(value: float | None) -> float | None:
    """Round a nutrient or percentage value to one decimal place, halves up."""
    if value is None:
        return None
    return math.floor(value * 10 + 0.5) / 10


def round_calories(value: float) -> int:
    """Round a calorie value to a whole number, halves up."""
    return math.floor(value + 0.5)


def rescale_nutrients(
    base: NutrientValues, base_amount: float, new_amount: float
) -> NutrientValues:
    """Rescale every nutrient field independently."""
    values = {
        name: rescale(getattr(base, name), base_amount, new_amount)
        for name in NUTRIENT_FIELDS
    }
    return NutrientValues(**values)


def parse_amount(raw: object) -> float:
    """Validate a user-entered serving amount."""
    if isinstance(raw, bool):
        raise InvalidAmountError(f"Invalid amount: {raw!r}")
    if isinstance(raw, int | float):
        amount = float(raw)
    elif isinstance(raw, str):
        try:
            amount = float(raw.strip())
        except ValueError as exc:
            raise InvalidAmountError(f"Invalid amount: {raw!r}") from exc
    else:
        raise InvalidAmountError(f"Invalid amount: {raw!r}")
    if not math.isfinite(amount) or amount < 0:
        raise InvalidAmountError(f"Invalid amount: {raw!r}")
    return amount


def rescale_item(item: FoodItem, new_amount: object, *, rebase: bool = True) -> FoodItem:
    """Apply a serving amount edit to a food item.

    With ``rebase`` enabled, a deliberate edit (more than 0.1 away from the
    stored base amount) becomes the new reference point: the new amount and
    the unrounded rescaled values replace the base fields. A zero amount
    never becomes the base, since it would leave no ratio for later edits.
    """
    amount = parse_amount(new_amount)
    if item.base_amount <= 0:
        return replace(item, amount=amount, nutrients=NutrientValues())

    nutrients = rescale_nutrients(item.base_nutrients, item.base_amount, amount)
    if (
        rebase
        and amount > 0
        and abs(amount - item.base_amount) > REBASE_EPSILON
    ):
        return replace(
            item,
            amount=amount,
            nutrients=nutrients,
            base_amount=amount,
            base_nutrients=nutrients,
        )
    return replace(item, amount=amount, nutrients=nutrients)
