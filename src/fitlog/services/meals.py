"""Food item normalization, item building and daily log persistence."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol
from uuid import NAMESPACE_URL, uuid4, uuid5

from fitlog.domain.logs import DailyLog
from fitlog.domain.meals import (
    BASIS_ABSOLUTE,
    BASIS_PER_100G,
    ITEM_MODES,
    MEAL_KEYS,
    MODE_MANUAL,
    MODE_OFF,
    SOURCE_FOR_MODE,
    CurrentItem,
    FoodItem,
    LegacyQueryItem,
    LegacyStringItem,
    ManualEntry,
    Meal,
    SelectedFood,
    StoredItem,
)
from fitlog.domain.nutrition import ZERO_MACROS, MacroQuantity, SearchCandidate
from fitlog.services.codec import (
    macro_from_dict,
    manual_from_dict,
    meal_to_dict,
    selected_from_dict,
    to_float,
    to_optional_float,
    to_optional_int,
)
from fitlog.services.macros import absolute_macros, scale_to_grams, sum_day

_logger = logging.getLogger(__name__)


class LogRepository(Protocol):
    """Persistence interface for daily logs, keyed by date per user."""

    def list_logs(self, username: str) -> list[DailyLog]:
        """Return all logs for a user ordered by date."""

    def get_log(self, username: str, date: str) -> DailyLog | None:
        """Return the log for a date, if present."""

    def save_log(self, username: str, log: DailyLog) -> None:
        """Create or overwrite the log for `log.date`."""

    def delete_log(self, username: str, date: str) -> None:
        """Remove the log for a date."""

    def replace_logs(self, username: str, logs: list[DailyLog]) -> None:
        """Replace every log of a user."""


def classify_stored_item(raw: object) -> StoredItem:
    """Map a raw stored item onto one of the known item shapes."""
    if isinstance(raw, str):
        return LegacyStringItem(text=raw)
    if isinstance(raw, dict):
        mode = raw.get("mode")
        if mode in ITEM_MODES:
            return CurrentItem(payload=dict(raw))
        if mode is None and ("query" in raw or "selected" in raw):
            return LegacyQueryItem(payload=dict(raw))
    raise ValueError(f"Unrecognized food item shape: {raw!r}")


def normalize_item(value: object, position: str = "") -> FoodItem:
    """Return the canonical FoodItem for any stored item shape.

    Items stored without an id get one derived from `position` and the raw
    payload, so normalizing the same record twice yields equal items.
    """
    if isinstance(value, FoodItem):
        return value
    if not isinstance(value, LegacyStringItem | LegacyQueryItem | CurrentItem):
        value = classify_stored_item(value)

    if isinstance(value, LegacyStringItem):
        return FoodItem(
            id=_derived_id(position, value.text),
            mode=MODE_MANUAL,
            name=value.text,
            grams=0.0,
            selected=None,
            manual=ManualEntry(basis=BASIS_ABSOLUTE, values=ZERO_MACROS),
            computed=ZERO_MACROS,
        )

    payload = value.payload
    computed = (
        macro_from_dict(payload["computed"])
        if payload.get("computed")
        else ZERO_MACROS
    )
    item_id = str(payload.get("id") or _derived_id(position, payload))
    grams = to_float(payload.get("grams"))

    if isinstance(value, LegacyQueryItem):
        raw_selected = payload.get("selected")
        if isinstance(raw_selected, dict):
            name = raw_selected.get("name") or payload.get("query") or ""
            return FoodItem(
                id=item_id,
                mode=MODE_OFF,
                name=str(name),
                grams=grams,
                selected=selected_from_dict(raw_selected, SOURCE_FOR_MODE[MODE_OFF]),
                manual=None,
                computed=computed,
            )
        return FoodItem(
            id=item_id,
            mode=MODE_MANUAL,
            name=str(payload.get("query") or ""),
            grams=grams,
            selected=None,
            manual=ManualEntry(basis=BASIS_ABSOLUTE, values=computed),
            computed=computed,
        )

    mode = str(payload["mode"])
    if mode == MODE_MANUAL:
        selected = None
        manual = manual_from_dict(payload.get("manual"))
    else:
        selected = selected_from_dict(payload.get("selected"), SOURCE_FOR_MODE[mode])
        manual = None
    return FoodItem(
        id=item_id,
        mode=mode,
        name=str(payload.get("name") or ""),
        grams=grams,
        selected=selected,
        manual=manual,
        computed=computed,
    )


def normalize_meals(raw: object, scope: str = "") -> dict[str, Meal]:
    """Normalize all four meal slots; missing slots come back empty."""
    meals: dict[str, Meal] = {}
    source = raw if isinstance(raw, Mapping) else {}
    for key in MEAL_KEYS:
        slot = source.get(key)
        if isinstance(slot, Meal):
            meals[key] = Meal(
                time=slot.time,
                items=[
                    normalize_item(item, f"{scope}/{key}/{index}")
                    for index, item in enumerate(slot.items)
                ],
            )
            continue
        slot_data = slot if isinstance(slot, Mapping) else {}
        meals[key] = Meal(
            time=str(slot_data.get("time") or ""),
            items=[
                normalize_item(item, f"{scope}/{key}/{index}")
                for index, item in enumerate(slot_data.get("items") or [])
            ],
        )
    return meals


def build_selected_item(
    mode: str, candidate: SearchCandidate, grams: float, item_id: str | None = None
) -> FoodItem:
    """Create a FoodItem from a search selection."""
    if mode not in SOURCE_FOR_MODE:
        raise ValueError(f"Mode {mode!r} has no search provider")
    return FoodItem(
        id=item_id or _new_id(),
        mode=mode,
        name=candidate.name,
        grams=grams,
        selected=_selection(mode, candidate),
        manual=None,
        computed=scale_to_grams(candidate.per100g, grams),
    )


def build_manual_item(
    name: str,
    grams: float,
    basis: str,
    values: MacroQuantity,
    item_id: str | None = None,
) -> FoodItem:
    """Create a FoodItem from manually entered macros."""
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Manual items need a name")
    if grams <= 0:
        raise ValueError(f"grams must be positive, got {grams}")
    if basis == BASIS_PER_100G:
        computed = scale_to_grams(values, grams)
    elif basis == BASIS_ABSOLUTE:
        computed = absolute_macros(values)
    else:
        raise ValueError(f"Unknown manual basis: {basis!r}")
    return FoodItem(
        id=item_id or _new_id(),
        mode=MODE_MANUAL,
        name=cleaned,
        grams=grams,
        selected=None,
        manual=ManualEntry(basis=basis, values=values),
        computed=computed,
    )


def upsert_item(meal: Meal, item: FoodItem) -> Meal:
    """Add an item, or replace the item with the same id wholesale."""
    items = list(meal.items)
    for index, existing in enumerate(items):
        if existing.id == item.id:
            items[index] = item
            return replace(meal, items=items)
    items.append(item)
    return replace(meal, items=items)


def remove_item(meal: Meal, item_id: str) -> Meal:
    return replace(meal, items=[item for item in meal.items if item.id != item_id])


def assemble_log(  # noqa: PLR0913
    date: str,
    meals: Mapping[str, Meal],
    *,
    auto_fill: bool,
    macros: Mapping[str, float | None] | None = None,
    morning_weight_kg: float | None = None,
    steps: int | None = None,
    notes: str = "",
) -> DailyLog:
    """Build a log whose macros come from the meals or from typed values.

    The choice is made per save and is not recorded on the log.
    """
    normalized = normalize_meals(meals, parse_log_date(date))
    if auto_fill:
        totals = sum_day(normalized)
        values: dict[str, float | None] = {
            "calories": totals.calories,
            "protein_g": totals.protein_g,
            "carbs_g": totals.carbs_g,
            "fat_g": totals.fat_g,
            "fiber_g": totals.fiber_g,
        }
    else:
        typed = macros or {}
        values = {
            key: typed.get(key)
            for key in ("calories", "protein_g", "carbs_g", "fat_g", "fiber_g")
        }
    return DailyLog(
        date=parse_log_date(date),
        morning_weight_kg=morning_weight_kg,
        steps=steps,
        meals=normalized,
        notes=notes.strip(),
        **values,
    )


def parse_log_date(value: str) -> str:
    """Validate a YYYY-MM-DD log key and return it in canonical form."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date().isoformat()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid log date: {value!r}") from exc


def daily_log_to_dict(log: DailyLog) -> dict[str, object]:
    return {
        "date": log.date,
        "morningWeightKg": log.morning_weight_kg,
        "calories": log.calories,
        "proteinG": log.protein_g,
        "carbsG": log.carbs_g,
        "fatG": log.fat_g,
        "fiberG": log.fiber_g,
        "steps": log.steps,
        "meals": {key: meal_to_dict(meal) for key, meal in log.meals.items()},
        "notes": log.notes,
    }


def daily_log_from_dict(raw: object) -> DailyLog:
    """Parse a stored log, normalizing every meal item."""
    if not isinstance(raw, dict):
        raise ValueError(f"Unrecognized log record: {raw!r}")
    log_date = parse_log_date(raw.get("date"))
    return DailyLog(
        date=log_date,
        morning_weight_kg=to_optional_float(raw.get("morningWeightKg")),
        calories=to_optional_float(raw.get("calories")),
        protein_g=to_optional_float(raw.get("proteinG")),
        carbs_g=to_optional_float(raw.get("carbsG")),
        fat_g=to_optional_float(raw.get("fatG")),
        fiber_g=to_optional_float(raw.get("fiberG")),
        steps=to_optional_int(raw.get("steps")),
        meals=normalize_meals(raw.get("meals"), log_date),
        notes=str(raw.get("notes") or ""),
    )


@dataclass
class DailyLogService:
    """Application service for daily log lifecycle actions."""

    repository: LogRepository

    def list_logs(self, username: str) -> list[DailyLog]:
        """Return a user's logs ordered by date."""
        return sorted(self.repository.list_logs(username), key=lambda log: log.date)

    def get_log(self, username: str, date: str) -> DailyLog | None:
        return self.repository.get_log(username, parse_log_date(date))

    def save_log(self, username: str, log: DailyLog) -> DailyLog:
        """Persist a log, overwriting any existing log for the same date."""
        if self.repository.get_log(username, log.date) is not None:
            _logger.info("Overwriting daily log: user=%s date=%s", username, log.date)
        self.repository.save_log(username, log)
        return log

    def delete_log(self, username: str, date: str) -> bool:
        """Delete a log; returns False when there was nothing to delete."""
        key = parse_log_date(date)
        if self.repository.get_log(username, key) is None:
            return False
        self.repository.delete_log(username, key)
        return True


def _selection(mode: str, candidate: SearchCandidate) -> SelectedFood:
    return SelectedFood(
        source=SOURCE_FOR_MODE[mode],
        external_id=candidate.external_id,
        brand=candidate.brand,
        per100g=candidate.per100g,
    )


def _new_id() -> str:
    return uuid4().hex



def _derived_id(position: str, raw: object) -> str:
    encoded = json.dumps(raw, sort_keys=True, default=str)
    return uuid5(NAMESPACE_URL, f"fitlog:item:{position}:{encoded}").hex
