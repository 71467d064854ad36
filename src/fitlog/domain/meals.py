"""Domain models for meals and food items."""

from dataclasses import dataclass, field

from fitlog.domain.nutrition import MacroQuantity

MEAL_KEYS = ("breakfast", "lunch", "dinner", "snacks")

MODE_GENERIC = "generic"
MODE_OFF = "off"
MODE_MANUAL = "manual"
ITEM_MODES = (MODE_GENERIC, MODE_OFF, MODE_MANUAL)

SOURCE_FOR_MODE = {MODE_GENERIC: "generic", MODE_OFF: "openfoodfacts"}

BASIS_PER_100G = "per100g"
BASIS_ABSOLUTE = "absolute"


@dataclass(frozen=True)
class SelectedFood:
    """Food chosen from a search provider, with per-100g macros."""

    source: str
    external_id: str | None
    brand: str | None
    per100g: MacroQuantity


@dataclass(frozen=True)
class ManualEntry:
    """Macros typed in by the user, either per 100 g or for the whole portion."""

    basis: str
    values: MacroQuantity


@dataclass(frozen=True)
class FoodItem:
    """Canonical meal item; `computed` is a snapshot taken at save time."""

    id: str
    mode: str
    name: str
    grams: float
    selected: SelectedFood | None
    manual: ManualEntry | None
    computed: MacroQuantity


@dataclass(frozen=True)
class Meal:
    """One meal slot of a day."""

    time: str = ""
    items: list[FoodItem] = field(default_factory=list)


# Stored item shapes. Every stored item is one of these three variants and is
# turned into a FoodItem by `fitlog.services.meals.normalize_item`.


@dataclass(frozen=True)
class LegacyStringItem:
    """Oldest shape: a bare food description."""

    text: str


@dataclass(frozen=True)
class LegacyQueryItem:
    """Pre-tier shape: free-text query plus an optional product selection."""

    payload: dict[str, object]


@dataclass(frozen=True)
class CurrentItem:
    """Current shape, tagged with a `mode`."""

    payload: dict[str, object]


StoredItem = LegacyStringItem | LegacyQueryItem | CurrentItem
