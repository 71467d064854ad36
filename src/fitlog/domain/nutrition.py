"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MacroQuantity:
    """Calories and macronutrients for a portion, a meal or a day."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float


ZERO_MACROS = MacroQuantity(
    calories=0.0, protein_g=0.0, carbs_g=0.0, fat_g=0.0, fiber_g=0.0
)

MACRO_FIELDS = ("calories", "protein_g", "carbs_g", "fat_g", "fiber_g")


@dataclass(frozen=True)
class SearchCandidate:
    """A food returned by one of the external search providers."""

    external_id: str | None
    name: str
    brand: str | None
    per100g: MacroQuantity
