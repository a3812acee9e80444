"""Spoonacular ingredient API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrition_ledger.domain.errors import RemoteServiceError


class SpoonacularClient(Protocol):
    """Interface for Spoonacular ingredient lookups."""

    async def search_ingredients(
        self, query: str, number: int = 20
    ) -> dict[str, object]:
        """Search ingredients and return raw API data."""

    async def get_ingredient_information(
        self, ingredient_id: int, amount: int = 100, unit: str = "grams"
    ) -> dict[str, object]:
        """Return raw nutrition data for an ingredient amount."""


@dataclass
class HttpxSpoonacularClient(SpoonacularClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxSpoonacularClient":
        """Create a client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_ingredients(
        self, query: str, number: int = 20
    ) -> dict[str, object]:
        """Search ingredients by name."""
        return await self._get(
            "/food/ingredients/search",
            {"query": query, "number": number, "metaInformation": True},
        )

    async def get_ingredient_information(
        self, ingredient_id: int, amount: int = 100, unit: str = "grams"
    ) -> dict[str, object]:
        """Fetch nutrition for an ingredient amount."""
        return await self._get(
            f"/food/ingredients/{ingredient_id}/information",
            {"amount": amount, "unit": unit},
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(self, path: str, params: dict[str, object]) -> dict[str, object]:
        try:
            response = await self.http_client.get(
                f"{self.base_url}{path}",
                params={**params, "apiKey": self.api_key},
                timeout=15,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"Spoonacular request failed: {path}") from exc
        except ValueError as exc:
            raise RemoteServiceError(f"Spoonacular sent invalid JSON: {path}") from exc
