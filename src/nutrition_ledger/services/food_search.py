"""Food search across nutrition providers with fallback and caching."""

import asyncio
import logging
from dataclasses import dataclass

from nutrition_ledger.adapters.openfoodfacts_client import OpenFoodFactsClient
from nutrition_ledger.adapters.spoonacular_client import SpoonacularClient
from nutrition_ledger.domain.errors import RemoteServiceError, ValidationError
from nutrition_ledger.domain.nutrition import FoodSearchResult
from nutrition_ledger.services.cache import Cache

_KJ_PER_KCAL = 4.184

_logger = logging.getLogger(__name__)


@dataclass
class FoodSearchService:
    """Search Spoonacular first, then Open Food Facts."""

    open_food_facts: OpenFoodFactsClient
    cache: Cache
    spoonacular: SpoonacularClient | None = None
    search_ttl_seconds: int = 3600
    spoonacular_candidates: int = 10

    async def search(self, query: str) -> list[FoodSearchResult]:
        """Return foods matching the query, per 100 g."""
        cleaned = query.strip()
        if not cleaned:
            raise ValidationError("query", "enter a food name")
        cache_key = f"food:search:{cleaned.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        results = await self._search_providers(cleaned)
        self.cache.set(cache_key, results, ttl_seconds=self.search_ttl_seconds)
        return results

    async def _search_providers(self, query: str) -> list[FoodSearchResult]:
        if self.spoonacular is not None:
            try:
                results = await self._search_spoonacular(self.spoonacular, query)
            except RemoteServiceError as exc:
                _logger.warning(
                    "Spoonacular search failed, falling back to Open Food Facts: %s",
                    exc,
                )
            else:
                if results:
                    return results

        payload = await self.open_food_facts.search_products(query)
        return _parse_open_food_facts(payload)

    async def _search_spoonacular(
        self, client: SpoonacularClient, query: str
    ) -> list[FoodSearchResult]:
        payload = await client.search_ingredients(query)
        ingredients = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(ingredients, list):
            return []
        candidates = [
            item
            for item in ingredients[: self.spoonacular_candidates]
            if isinstance(item, dict)
        ]
        details = await asyncio.gather(
            *(self._spoonacular_details(client, item) for item in candidates)
        )
        return [result for result in details if result and result.calories_per_100g > 0]

    async def _spoonacular_details(
        self, client: SpoonacularClient, ingredient: dict[str, object]
    ) -> FoodSearchResult | None:
        ingredient_id = _ingredient_id(ingredient)
        if ingredient_id is None:
            _logger.warning("Skipping ingredient without an id: %s", ingredient)
            return None
        try:
            info = await client.get_ingredient_information(ingredient_id)
        except RemoteServiceError as exc:
            _logger.warning(
                "Skipping ingredient %s: %s", ingredient.get("name"), exc
            )
            return None
        nutrition = info.get("nutrition") or {}
        nutrients = {
            str(nutrient.get("name")): nutrient.get("amount")
            for nutrient in nutrition.get("nutrients") or []
        }
        return FoodSearchResult(
            name=str(ingredient.get("name") or info.get("name") or "food"),
            brand="Generic",
            calories_per_100g=round(_to_float(nutrients.get("Calories"))),
            protein_per_100g=round(_to_float(nutrients.get("Protein"))),
            carbs_per_100g=round(_to_float(nutrients.get("Carbohydrates"))),
            fat_per_100g=round(_to_float(nutrients.get("Fat"))),
            serving="100g",
            source="spoonacular",
        )


def _parse_open_food_facts(payload: dict[str, object]) -> list[FoodSearchResult]:
    results: list[FoodSearchResult] = []
    if not isinstance(payload, dict):
        return results
    for product in payload.get("products") or []:
        name = product.get("product_name")
        nutriments = product.get("nutriments")
        if not name or not nutriments:
            continue
        results.append(
            FoodSearchResult(
                name=str(name),
                brand=product.get("brands") or "Generic",
                calories_per_100g=round(_kcal_per_100g(nutriments)),
                protein_per_100g=round(_to_float(nutriments.get("proteins_100g"))),
                carbs_per_100g=round(_to_float(nutriments.get("carbohydrates_100g"))),
                fat_per_100g=round(_to_float(nutriments.get("fat_100g"))),
                serving=product.get("serving_size") or "100g",
                source="openfoodfacts",
            )
        )
    return results


def _ingredient_id(ingredient: dict[str, object]) -> int | None:
    value = ingredient.get("id")
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _kcal_per_100g(nutriments: dict[str, object]) -> float:
    kcal = _to_float(nutriments.get("energy-kcal_100g"))
    if kcal:
        return kcal
    energy_kj = _to_float(nutriments.get("energy_100g"))
    if energy_kj:
        return energy_kj / _KJ_PER_KCAL
    return 0.0


def _to_float(value: object) -> float:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0
