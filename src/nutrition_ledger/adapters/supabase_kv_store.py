"""Supabase-backed key-value store."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from supabase import Client

from nutrition_ledger.domain.errors import PersistenceError
from nutrition_ledger.services.storage import KeyValueBackend


@dataclass
class SupabaseKeyValueBackend(KeyValueBackend):
    """Stores JSON text in a `kv_store(key text primary key, value text)` table."""

    client: Client
    table: str = "kv_store"

    async def read(self, key: str) -> str | None:
        """Return the stored text for a key."""
        response = await self._run(
            lambda: self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    async def write_many(self, values: dict[str, str]) -> None:
        """Upsert all values in one request."""
        if not values:
            return
        updated_at = datetime.now(tz=UTC).isoformat()
        rows = [
            {"key": key, "value": value, "updated_at": updated_at}
            for key, value in values.items()
        ]
        await self._run(lambda: self.client.table(self.table).upsert(rows).execute())

    async def delete(self, key: str) -> None:
        """Delete a key."""
        await self._run(
            lambda: self.client.table(self.table).delete().eq("key", key).execute()
        )

    async def clear(self, prefix: str) -> None:
        """Delete every key with the prefix."""
        await self._run(
            lambda: self.client.table(self.table)
            .delete()
            .like("key", f"{prefix}%")
            .execute()
        )

    async def _run(self, query: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(query)
        except Exception as exc:
            raise PersistenceError(f"Supabase {self.table} request failed") from exc
