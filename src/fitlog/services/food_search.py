"""Food search providers and the cached lookup shared by autocomplete."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from fitlog.adapters.fdc_client import FdcClient
from fitlog.adapters.off_client import OffClient
from fitlog.domain.meals import MODE_GENERIC, MODE_OFF
from fitlog.domain.nutrition import MacroQuantity, SearchCandidate
from fitlog.services.cache import Cache
from fitlog.services.macros import round1

RESULT_LIMIT = 8
SEARCH_MODES = (MODE_GENERIC, MODE_OFF)

_NUTRIENT_IDS = {
    "calories": 1008,
    "protein_g": 1003,
    "carbs_g": 1005,
    "fat_g": 1004,
    "fiber_g": 1079,
}

_OFF_FIELDS = {
    "protein_g": "proteins_100g",
    "carbs_g": "carbohydrates_100g",
    "fat_g": "fat_100g",
    "fiber_g": "fiber_100g",
}

_logger = logging.getLogger(__name__)


class FoodSearchProvider(Protocol):
    """A food database searchable by free text."""

    async def search(self, query: str) -> list[SearchCandidate]:
        """Return candidates with per-100g macros."""


@dataclass
class FdcFoodProvider(FoodSearchProvider):
    """Whole foods from USDA FoodData Central."""

    client: FdcClient
    page_size: int = RESULT_LIMIT

    async def search(self, query: str) -> list[SearchCandidate]:
        payload = await self.client.search_foods(
            query.strip(), page_size=self.page_size
        )
        return [_fdc_candidate(food) for food in payload.get("foods") or []]


@dataclass
class OpenFoodFactsProvider(FoodSearchProvider):
    """Packaged products from Open Food Facts."""

    client: OffClient
    page_size: int = RESULT_LIMIT

    async def search(self, query: str) -> list[SearchCandidate]:
        payload = await self.client.search_products(
            query.strip(), page_size=self.page_size
        )
        return [
            _off_candidate(product)
            for product in payload.get("products") or []
            if str(product.get("product_name") or "").strip()
        ]


@dataclass(frozen=True)
class SearchOutcome:
    """Result of one lookup; a failed lookup has `error` set and no results."""

    results: list[SearchCandidate]
    error: str | None = None
    from_cache: bool = False


@dataclass
class FoodSearchService:
    """Cached search across the generic and packaged-product providers."""

    providers: dict[str, FoodSearchProvider]
    cache: Cache
    result_limit: int = RESULT_LIMIT

    def provider_for(self, mode: str) -> FoodSearchProvider:
        provider = self.providers.get(mode)
        if provider is None:
            raise ValueError(f"Mode {mode!r} has no search provider")
        return provider

    @staticmethod
    def cache_key(mode: str, query: str) -> str:
        return f"{mode}:{query.strip().lower()}"

    def cached(self, mode: str, query: str) -> list[SearchCandidate] | None:
        """Return cached results without touching the network."""
        value = self.cache.get(self.cache_key(mode, query))
        return value if isinstance(value, list) else None

    async def fetch(self, mode: str, query: str) -> SearchOutcome:
        """Query the provider; failures become an error outcome, never cached."""
        provider = self.provider_for(mode)
        try:
            candidates = await provider.search(query)
        except Exception as exc:  # noqa: BLE001
            _logger.warning(
                "Food search failed: mode=%s query=%s error=%s", mode, query, exc
            )
            return SearchOutcome(results=[], error=str(exc) or type(exc).__name__)
        return SearchOutcome(results=candidates[: self.result_limit])

    def remember(self, mode: str, query: str, results: list[SearchCandidate]) -> None:
        self.cache.set(self.cache_key(mode, query), results)

    async def search(self, mode: str, query: str) -> SearchOutcome:
        """One-shot lookup: cache first, then the provider."""
        self.provider_for(mode)
        cached = self.cached(mode, query)
        if cached is not None:
            return SearchOutcome(results=cached, from_cache=True)
        outcome = await self.fetch(mode, query)
        if outcome.error is None:
            self.remember(mode, query, outcome.results)
        return outcome


def _fdc_candidate(food: dict[str, object]) -> SearchCandidate:
    nutrients = food.get("foodNutrients") or []
    return SearchCandidate(
        external_id=str(food.get("fdcId")),
        name=str(food.get("description") or "Unknown food"),
        brand=None,
        per100g=MacroQuantity(
            **{
                attr: _fdc_nutrient(nutrients, nutrient_id)
                for attr, nutrient_id in _NUTRIENT_IDS.items()
            }
        ),
    )


def _fdc_nutrient(nutrients: list[dict[str, object]], nutrient_id: int) -> float:
    for nutrient in nutrients:
        if nutrient.get("nutrientId") == nutrient_id:
            return round1(_number(nutrient.get("value")))
    return 0.0


def _off_candidate(product: dict[str, object]) -> SearchCandidate:
    nutriments = product.get("nutriments") or {}
    brands = str(product.get("brands") or "")
    return SearchCandidate(
        external_id=str(product.get("code") or f"off-{uuid4().hex[:10]}"),
        name=str(product["product_name"]).strip(),
        brand=brands.split(",")[0].strip() if brands else "",
        per100g=MacroQuantity(
            calories=_off_kcal(nutriments),
            **{
                attr: round1(_number(nutriments.get(key)))
                for attr, key in _OFF_FIELDS.items()
            },
        ),
    )


def _off_kcal(nutriments: dict[str, object]) -> float:
    """Energy in kcal; kJ values are converted."""
    if nutriments.get("energy-kcal_100g") is not None:
        return round1(_number(nutriments["energy-kcal_100g"]))
    if nutriments.get("energy_100g") is not None:
        return round1(_number(nutriments["energy_100g"]) / 4.184)
    return 0.0


def _number(value: object) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
