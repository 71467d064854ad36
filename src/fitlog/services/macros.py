"""Portion scaling, rounding and macro aggregation."""

import math
from collections.abc import Iterable, Mapping

from fitlog.domain.meals import MEAL_KEYS, FoodItem, Meal
from fitlog.domain.nutrition import MacroQuantity


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return math.floor(value + 0.5)


def round1(value: float | None) -> float:
    """Round to one decimal place; None and NaN count as 0."""
    if value is None:
        return 0.0
    number = float(value)
    if math.isnan(number):
        return 0.0
    return round_half_up(number * 10) / 10


def scale_to_grams(per100g: MacroQuantity, grams: float) -> MacroQuantity:
    """Resolve per-100g macros for a portion of `grams`."""
    if grams <= 0:
        raise ValueError(f"grams must be positive, got {grams}")
    factor = grams / 100
    return MacroQuantity(
        calories=round1(per100g.calories * factor),
        protein_g=round1(per100g.protein_g * factor),
        carbs_g=round1(per100g.carbs_g * factor),
        fat_g=round1(per100g.fat_g * factor),
        fiber_g=round1(per100g.fiber_g * factor),
    )


def absolute_macros(values: MacroQuantity) -> MacroQuantity:
    """Resolve macros entered for the whole portion."""
    return MacroQuantity(
        calories=round1(values.calories),
        protein_g=round1(values.protein_g),
        carbs_g=round1(values.carbs_g),
        fat_g=round1(values.fat_g),
        fiber_g=round1(values.fiber_g),
    )


def sum_items(items: Iterable[FoodItem]) -> MacroQuantity:
    """Sum computed macros across items, rounding once at the end."""
    calories = protein = carbs = fat = fiber = 0.0
    for item in items:
        computed = item.computed
        calories += computed.calories
        protein += computed.protein_g
        carbs += computed.carbs_g
        fat += computed.fat_g
        fiber += computed.fiber_g
    return MacroQuantity(
        calories=round1(calories),
        protein_g=round1(protein),
        carbs_g=round1(carbs),
        fat_g=round1(fat),
        fiber_g=round1(fiber),
    )


def sum_meal(meal: Meal) -> MacroQuantity:
    """Return the totals for one meal slot."""
    return sum_items(meal.items)


def sum_day(meals: Mapping[str, Meal]) -> MacroQuantity:
    """Return day totals from the raw item values of all four slots."""
    return sum_items(
        item for key in MEAL_KEYS if key in meals for item in meals[key].items
    )
