"""Tests for food search with provider fallback."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from nutrition_ledger.domain.errors import RemoteServiceError, ValidationError
from nutrition_ledger.services.cache import InMemoryCache
from nutrition_ledger.services.food_search import FoodSearchService
from tests.conftest import FakeOpenFoodFactsClient, FakeSpoonacularClient


def test_search_uses_open_food_facts_without_spoonacular() -> None:
    service = FoodSearchService(
        open_food_facts=FakeOpenFoodFactsClient(), cache=InMemoryCache()
    )

    results = asyncio.run(service.search("yogurt"))

    assert len(results) == 1
    result = results[0]
    assert result.name == "Greek Yogurt"
    assert result.brand == "Fage"
    assert result.calories_per_100g == 97
    assert result.carbs_per_100g == 4
    assert result.serving == "170g"
    assert result.source == "openfoodfacts"


def test_search_prefers_spoonacular_and_drops_zero_calorie_items() -> None:
    open_food_facts = FakeOpenFoodFactsClient()
    service = FoodSearchService(
        open_food_facts=open_food_facts,
        cache=InMemoryCache(),
        spoonacular=FakeSpoonacularClient(),
    )

    results = asyncio.run(service.search("apple"))

    assert [result.name for result in results] == ["apple"]
    assert results[0].calories_per_100g == 52
    assert results[0].carbs_per_100g == 14
    assert results[0].brand == "Generic"
    assert results[0].source == "spoonacular"
    assert open_food_facts.queries == []


def test_search_falls_back_when_spoonacular_fails() -> None:
    open_food_facts = FakeOpenFoodFactsClient()
    service = FoodSearchService(
        open_food_facts=open_food_facts,
        cache=InMemoryCache(),
        spoonacular=FakeSpoonacularClient(error=True),
    )

    results = asyncio.run(service.search("yogurt"))

    assert results[0].source == "openfoodfacts"
    assert open_food_facts.queries == ["yogurt"]


def test_search_falls_back_when_spoonacular_has_no_results() -> None:
    service = FoodSearchService(
        open_food_facts=FakeOpenFoodFactsClient(),
        cache=InMemoryCache(),
        spoonacular=FakeSpoonacularClient(search_payload={"results": []}),
    )

    results = asyncio.run(service.search("yogurt"))

    assert results[0].name == "Greek Yogurt"


def test_search_skips_ingredients_without_usable_ids() -> None:
    open_food_facts = FakeOpenFoodFactsClient()
    spoonacular = FakeSpoonacularClient(
        search_payload={
            "results": [{"name": "apple"}, {"id": "abc", "name": "pear"}, "kiwi"]
        }
    )
    service = FoodSearchService(
        open_food_facts=open_food_facts, cache=InMemoryCache(), spoonacular=spoonacular
    )

    results = asyncio.run(service.search("apple"))

    assert results[0].source == "openfoodfacts"
    assert open_food_facts.queries == ["apple"]


def test_search_keeps_good_ingredients_next_to_bad_ones() -> None:
    spoonacular = FakeSpoonacularClient(
        search_payload={"results": [{"name": "mystery"}, {"id": "9003"}]}
    )
    service = FoodSearchService(
        open_food_facts=FakeOpenFoodFactsClient(),
        cache=InMemoryCache(),
        spoonacular=spoonacular,
    )

    results = asyncio.run(service.search("apple"))

    assert [(result.name, result.source) for result in results] == [
        ("apple", "spoonacular")
    ]


def test_search_ignores_malformed_spoonacular_payload() -> None:
    service = FoodSearchService(
        open_food_facts=FakeOpenFoodFactsClient(),
        cache=InMemoryCache(),
        spoonacular=FakeSpoonacularClient(search_payload={"results": "none"}),
    )

    results = asyncio.run(service.search("yogurt"))

    assert results[0].name == "Greek Yogurt"


def test_search_converts_kilojoules() -> None:
    client = FakeOpenFoodFactsClient(
        payload={
            "products": [
                {
                    "product_name": "Crispbread",
                    "nutriments": {"energy_100g": "1569", "fat_100g": "n/a"},
                }
            ]
        }
    )
    service = FoodSearchService(open_food_facts=client, cache=InMemoryCache())

    result = asyncio.run(service.search("crispbread"))[0]

    assert result.calories_per_100g == 375
    assert result.fat_per_100g == 0
    assert result.brand == "Generic"
    assert result.serving == "100g"


def test_search_results_are_cached() -> None:
    client = FakeOpenFoodFactsClient()
    service = FoodSearchService(open_food_facts=client, cache=InMemoryCache())

    asyncio.run(service.search("Yogurt"))
    asyncio.run(service.search("  yogurt "))

    assert client.queries == ["Yogurt"]


def test_search_rejects_empty_query() -> None:
    service = FoodSearchService(
        open_food_facts=FakeOpenFoodFactsClient(), cache=InMemoryCache()
    )

    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(service.search("   "))

    assert excinfo.value.field == "query"


def test_search_raises_when_every_provider_fails() -> None:
    service = FoodSearchService(
        open_food_facts=FakeOpenFoodFactsClient(error=True),
        cache=InMemoryCache(),
        spoonacular=FakeSpoonacularClient(error=True),
    )

    with pytest.raises(RemoteServiceError):
        asyncio.run(service.search("yogurt"))


def test_cache_entries_expire() -> None:
    now = [datetime(2026, 3, 10, 12, 0, tzinfo=UTC)]
    cache = InMemoryCache(now=lambda: now[0])
    cache.set("food:search:oats", ["oats"], ttl_seconds=60)

    assert cache.get("food:search:oats") == ["oats"]
    now[0] += timedelta(seconds=61)
    assert cache.get("food:search:oats") is None
