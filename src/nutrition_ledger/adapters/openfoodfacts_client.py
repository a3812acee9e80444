"""Open Food Facts search client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrition_ledger.domain.errors import RemoteServiceError

_FIELDS = "product_name,brands,image_url,nutriments,serving_size,quantity"


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts product search."""

    async def search_products(
        self, query: str, page_size: int = 20
    ) -> dict[str, object]:
        """Search products and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client. No API key is needed."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient())

    async def search_products(
        self, query: str, page_size: int = 20
    ) -> dict[str, object]:
        """Search products by free text."""
        try:
            response = await self.http_client.get(
                f"{self.base_url}/cgi/search.pl",
                params={
                    "search_terms": query,
                    "search_simple": 1,
                    "action": "process",
                    "json": 1,
                    "page_size": page_size,
                    "fields": _FIELDS,
                },
                timeout=15,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise RemoteServiceError("Open Food Facts search failed") from exc
        except ValueError as exc:
            raise RemoteServiceError("Open Food Facts sent invalid JSON") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
