"""Domain models for user profiles."""

from dataclasses import dataclass

GENDERS = ("female", "male", "other", "prefer-not-to-say")

DIET_VEGAN = "Vegan"
DIET_VEGETARIAN = "Vegetarian"
DIET_EGGETARIAN = "Eggetarian"
DIET_NON_VEGETARIAN = "Non-vegetarian"
DIET_UNSPECIFIED = "Prefer not to say"
DIET_CATEGORIES = (
    DIET_VEGAN,
    DIET_VEGETARIAN,
    DIET_EGGETARIAN,
    DIET_NON_VEGETARIAN,
    DIET_UNSPECIFIED,
    "",
)

DEFAULT_WEEKLY_ACTIVE_MINUTES = 150
DEFAULT_PREFERRED_DEFICIT = 500


@dataclass(frozen=True)
class Profile:
    """Biometric and preference record for a single user."""

    username: str
    name: str = ""
    age: int | None = None
    gender: str = ""
    height_cm: float | None = None
    weight_kg: float | None = None
    diet_category: str = ""
    goal_weight_kg: float | None = None
    weekly_active_minutes_goal: int = DEFAULT_WEEKLY_ACTIVE_MINUTES
    preferred_deficit: int = DEFAULT_PREFERRED_DEFICIT
