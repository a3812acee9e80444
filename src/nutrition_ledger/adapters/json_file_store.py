"""Key-value backend persisted as a single JSON document on disk."""

import asyncio
import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from nutrition_ledger.domain.errors import PersistenceError
from nutrition_ledger.services.storage import KeyValueBackend

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueBackend(KeyValueBackend):
    """Stores every key in one file, replaced atomically on each write."""

    path: Path

    async def read(self, key: str) -> str | None:
        """Return the stored text for a key."""
        document = await asyncio.to_thread(self._load)
        return document.get(key)

    async def write_many(self, values: dict[str, str]) -> None:
        """Merge values into the document in one replace."""
        await asyncio.to_thread(self._update, values, None)

    async def delete(self, key: str) -> None:
        """Remove a key."""
        await asyncio.to_thread(self._update, {}, lambda name: name == key)

    async def clear(self, prefix: str) -> None:
        """Remove every key starting with the prefix."""
        await asyncio.to_thread(
            self._update, {}, lambda name: name.startswith(prefix)
        )

    def _load(self) -> dict[str, str]:
        text = self._read_text()
        return {} if text is None else self._parse(text)

    def _read_text(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(f"Cannot read {self.path}") from exc

    def _parse(self, text: str) -> dict[str, str]:
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupt store file {self.path}") from exc
        if not isinstance(document, dict):
            raise PersistenceError(f"Unexpected store layout in {self.path}")
        return document

    def _load_for_update(self) -> dict[str, str]:
        text = self._read_text()
        if text is None:
            return {}
        try:
            return self._parse(text)
        except PersistenceError as exc:
            # Writes start a fresh document; the unreadable one is kept aside.
            corrupt_path = self.path.with_suffix(self.path.suffix + ".corrupt")
            _logger.warning("%s, moving it to %s", exc, corrupt_path)
            try:
                os.replace(self.path, corrupt_path)
            except OSError as move_exc:
                raise PersistenceError(f"Cannot move {self.path}") from move_exc
            return {}

    def _update(
        self, values: dict[str, str], drop: Callable[[str], bool] | None
    ) -> None:
        document = self._load_for_update()
        if drop is not None:
            document = {
                name: value for name, value in document.items() if not drop(name)
            }
        document.update(values)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self.path}") from exc
