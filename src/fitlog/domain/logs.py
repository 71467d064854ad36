"""Domain models for daily logs."""

from dataclasses import dataclass, field

from fitlog.domain.meals import MEAL_KEYS, Meal


def empty_meals() -> dict[str, Meal]:
    """Return the four meal slots with no items."""
    return {key: Meal() for key in MEAL_KEYS}


@dataclass(frozen=True)
class DailyLog:
    """One day of tracking data. Macro fields are None when not tracked."""

    date: str
    morning_weight_kg: float | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    fiber_g: float | None = None
    steps: int | None = None
    meals: dict[str, Meal] = field(default_factory=empty_meals)
    notes: str = ""
