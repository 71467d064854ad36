"""Conversion between domain records and their stored JSON shapes.

Stored and exported records use camelCase keys so existing exports stay
importable.
"""

from fitlog.domain.meals import FoodItem, ManualEntry, Meal, SelectedFood
from fitlog.domain.nutrition import ZERO_MACROS, MacroQuantity
from fitlog.domain.profiles import (
    DEFAULT_PREFERRED_DEFICIT,
    DEFAULT_WEEKLY_ACTIVE_MINUTES,
    Profile,
)
from fitlog.domain.workouts import WorkoutEntry

_MACRO_KEYS = {
    "calories": "calories",
    "protein_g": "proteinG",
    "carbs_g": "carbsG",
    "fat_g": "fatG",
    "fiber_g": "fiberG",
}


def to_float(value: object) -> float:
    """Coerce a stored number (or numeric string) to float, defaulting to 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def to_optional_float(value: object) -> float | None:
    """Coerce a stored number, keeping None and blanks as None."""
    if value is None or value == "":
        return None
    return to_float(value)


def to_optional_int(value: object) -> int | None:
    number = to_optional_float(value)
    return None if number is None else int(number)


def macro_from_dict(raw: object) -> MacroQuantity:
    """Parse a stored macro block; missing fields become 0."""
    if not isinstance(raw, dict):
        return ZERO_MACROS
    return MacroQuantity(
        **{attr: to_float(raw.get(key)) for attr, key in _MACRO_KEYS.items()}
    )


def macro_to_dict(macros: MacroQuantity) -> dict[str, float]:
    return {key: getattr(macros, attr) for attr, key in _MACRO_KEYS.items()}


def selected_from_dict(raw: object, source: str) -> SelectedFood | None:
    """Parse a stored search selection, accepting legacy id keys."""
    if not isinstance(raw, dict):
        return None
    external_id = raw.get("externalId") or raw.get("productId") or raw.get("foodId")
    brand = raw.get("brand")
    return SelectedFood(
        source=str(raw.get("source") or source),
        external_id=str(external_id) if external_id is not None else None,
        brand=str(brand) if brand is not None else None,
        per100g=macro_from_dict(raw.get("per100g")),
    )


def manual_from_dict(raw: object) -> ManualEntry | None:
    """Parse a manual block in the current or the legacy per-basis layout."""
    if not isinstance(raw, dict):
        return None
    basis = str(raw.get("basis") or "per100g")
    values = raw.get("values")
    if values is None:
        values = raw.get(basis)
    return ManualEntry(basis=basis, values=macro_from_dict(values))


def food_item_to_dict(item: FoodItem) -> dict[str, object]:
    selected = None
    if item.selected is not None:
        selected = {
            "source": item.selected.source,
            "externalId": item.selected.external_id,
            "brand": item.selected.brand,
            "per100g": macro_to_dict(item.selected.per100g),
        }
    manual = None
    if item.manual is not None:
        manual = {
            "basis": item.manual.basis,
            "values": macro_to_dict(item.manual.values),
        }
    return {
        "id": item.id,
        "mode": item.mode,
        "name": item.name,
        "grams": item.grams,
        "selected": selected,
        "manual": manual,
        "computed": macro_to_dict(item.computed),
    }


def meal_to_dict(meal: Meal) -> dict[str, object]:
    return {"time": meal.time, "items": [food_item_to_dict(i) for i in meal.items]}


def workout_to_dict(entry: WorkoutEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "date": entry.date,
        "workoutName": entry.workout_name,
        "category": entry.category,
        "durationMin": entry.duration_min,
        "met": entry.met,
        "caloriesBurned": entry.calories_burned,
    }


def workout_from_dict(raw: object, date: str | None = None) -> WorkoutEntry:
    """Parse a stored workout entry; the bucket date wins when given."""
    if not isinstance(raw, dict):
        raise ValueError(f"Unrecognized workout entry: {raw!r}")
    entry_date = date or raw.get("date")
    if not entry_date:
        raise ValueError("Workout entry has no date")
    return WorkoutEntry(
        id=str(raw.get("id") or ""),
        date=str(entry_date),
        workout_name=str(raw.get("workoutName") or ""),
        category=str(raw.get("category") or "Other"),
        duration_min=to_float(raw.get("durationMin")),
        met=to_float(raw.get("met")),
        calories_burned=int(to_float(raw.get("caloriesBurned"))),
    )


def profile_to_dict(profile: Profile) -> dict[str, object]:
    return {
        "name": profile.name,
        "age": profile.age,
        "gender": profile.gender,
        "heightCm": profile.height_cm,
        "weightKg": profile.weight_kg,
        "dietCategory": profile.diet_category,
        "goalWeightKg": profile.goal_weight_kg,
        "weeklyActiveMinutesGoal": profile.weekly_active_minutes_goal,
        "preferredDeficit": profile.preferred_deficit,
    }


def profile_from_dict(username: str, raw: object) -> Profile:
    data = raw if isinstance(raw, dict) else {}
    return Profile(
        username=username,
        name=str(data.get("name") or ""),
        age=to_optional_int(data.get("age")),
        gender=str(data.get("gender") or ""),
        height_cm=to_optional_float(data.get("heightCm")),
        weight_kg=to_optional_float(data.get("weightKg")),
        diet_category=str(data.get("dietCategory") or ""),
        goal_weight_kg=to_optional_float(data.get("goalWeightKg")),
        weekly_active_minutes_goal=int(
            to_float(data.get("weeklyActiveMinutesGoal"))
            or DEFAULT_WEEKLY_ACTIVE_MINUTES
        ),
        preferred_deficit=int(
            to_float(data.get("preferredDeficit")) or DEFAULT_PREFERRED_DEFICIT
        ),
    )
