"""Best-effort key-value storage for ledger state."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from nutrition_ledger.domain.errors import PersistenceError

MEALS_KEY = "meals"
DAILY_GOAL_KEY = "dailyGoal"
MACRO_GOALS_KEY = "macroGoals"
STREAK_KEY = "streak"
LAST_ACTIVE_KEY = "lastActive"
PREFERENCES_KEY = "mealPreferences"
MEAL_PLAN_KEY = "weeklyMealPlan"
USER_DATA_KEY = "userData"

_logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    """Raw string store. Implementations raise PersistenceError on failure."""

    async def read(self, key: str) -> str | None:
        """Return the stored text for a key, or None when absent."""

    async def write_many(self, values: dict[str, str]) -> None:
        """Store all values in a single atomic write."""

    async def delete(self, key: str) -> None:
        """Delete a key if present."""

    async def clear(self, prefix: str) -> None:
        """Delete every key starting with the prefix."""


@dataclass
class StorageService:
    """JSON codec over a backend that degrades to defaults on failure."""

    backend: KeyValueBackend
    namespace: str | None = None

    def for_user(self, user_id: str) -> "StorageService":
        """Return a storage view whose keys are scoped to a user."""
        return StorageService(backend=self.backend, namespace=user_id)

    async def get(self, key: str, default: object = None) -> object:
        """Return the decoded value for a key, or the default."""
        scoped = self._scoped(key)
        try:
            raw = await self.backend.read(scoped)
        except PersistenceError as exc:
            _logger.warning("Storage read failed for %s: %s", scoped, exc)
            return default
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Discarding undecodable value for %s", scoped)
            return default

    async def set(self, key: str, value: object) -> bool:
        """Store a value; return False when the write failed."""
        return await self.set_many({key: value})

    async def set_many(self, values: Mapping[str, object]) -> bool:
        """Store several values atomically; return False when the write failed."""
        try:
            payload = {
                self._scoped(key): json.dumps(value) for key, value in values.items()
            }
        except (TypeError, ValueError) as exc:
            _logger.warning("Refusing to store non-JSON value: %s", exc)
            return False
        try:
            await self.backend.write_many(payload)
        except PersistenceError as exc:
            _logger.warning("Storage write failed for %s: %s", sorted(payload), exc)
            return False
        return True

    async def remove(self, key: str) -> bool:
        """Delete a key; return False when the delete failed."""
        scoped = self._scoped(key)
        try:
            await self.backend.delete(scoped)
        except PersistenceError as exc:
            _logger.warning("Storage delete failed for %s: %s", scoped, exc)
            return False
        return True

    async def clear(self) -> bool:
        """Delete every key in this namespace."""
        prefix = self._scoped("")
        try:
            await self.backend.clear(prefix)
        except PersistenceError as exc:
            _logger.warning("Storage clear failed for %r: %s", prefix, exc)
            return False
        return True

    def _scoped(self, key: str) -> str:
        if self.namespace:
            return f"{self.namespace}:{key}"
        return key
