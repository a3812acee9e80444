"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from nutrition_ledger.adapters.json_file_store import JsonFileKeyValueBackend
from nutrition_ledger.adapters.openai_meal_client import OpenAIMealClient
from nutrition_ledger.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from nutrition_ledger.adapters.spoonacular_client import HttpxSpoonacularClient
from nutrition_ledger.adapters.supabase_auth_provider import SupabaseAuthProvider
from nutrition_ledger.adapters.supabase_kv_store import SupabaseKeyValueBackend
from nutrition_ledger.config import Settings, parse_timezone
from nutrition_ledger.services.auth import SessionManager
from nutrition_ledger.services.cache import InMemoryCache
from nutrition_ledger.services.clock import SystemClock
from nutrition_ledger.services.food_search import FoodSearchService
from nutrition_ledger.services.storage import KeyValueBackend, StorageService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    storage: StorageService
    food_search_service: FoodSearchService
    session_manager: SessionManager
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    backend: KeyValueBackend
    if resolved_settings.storage_backend == "supabase":
        backend = SupabaseKeyValueBackend(supabase_client)
    else:
        backend = JsonFileKeyValueBackend(
            Path(resolved_settings.data_dir) / "storage.json"
        )
    storage = StorageService(backend)
    clock = SystemClock(parse_timezone(resolved_settings.timezone))

    open_food_facts_client = HttpxOpenFoodFactsClient.create(
        resolved_settings.openfoodfacts_base_url
    )
    spoonacular_client = (
        HttpxSpoonacularClient.create(
            api_key=resolved_settings.spoonacular_api_key,
            base_url=resolved_settings.spoonacular_base_url,
        )
        if resolved_settings.spoonacular_api_key
        else None
    )
    food_search_service = FoodSearchService(
        open_food_facts=open_food_facts_client,
        cache=InMemoryCache(),
        spoonacular=spoonacular_client,
    )
    meal_client = OpenAIMealClient.create(
        resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
    )
    session_manager = SessionManager(
        auth_provider=SupabaseAuthProvider(supabase_client),
        storage=storage,
        clock=clock,
        meal_generator=meal_client,
    )

    async def close_resources() -> None:
        await open_food_facts_client.close()
        if spoonacular_client is not None:
            await spoonacular_client.close()
        await meal_client.close()

    return AppContainer(
        settings=resolved_settings,
        storage=storage,
        food_search_service=food_search_service,
        session_manager=session_manager,
        close_resources=close_resources,
    )
