"""In-memory session store for tests."""

import copy
from typing import Any

from aidesigner.catalog import SavedComponents, StoredCatalog

from .protocol import API_KEY_KEY, COMPONENTS_KEY, SCAN_KEY, StorageError


class InMemorySessionStore:
    """SessionStore backed by a dict.

    Args:
        failing_keys: Keys whose writes raise StorageError, to exercise
            fallback paths.
    """

    def __init__(self, failing_keys: set[str] | None = None):
        self.values: dict[str, Any] = {}
        self.failing_keys = set(failing_keys or ())

    def _set(self, key: str, value: Any) -> None:
        if key in self.failing_keys:
            raise StorageError(f"Could not write '{key}'")
        self.values[key] = copy.deepcopy(value)

    async def read_catalog(self) -> StoredCatalog | None:
        data = self.values.get(SCAN_KEY)
        return StoredCatalog.model_validate(data) if data is not None else None

    async def write_catalog(self, stored: StoredCatalog) -> None:
        self._set(SCAN_KEY, stored.model_dump(by_alias=True, mode="json"))

    async def read_components(self) -> SavedComponents | None:
        data = self.values.get(COMPONENTS_KEY)
        return SavedComponents.model_validate(data) if data is not None else None

    async def write_components(self, saved: SavedComponents) -> None:
        self._set(COMPONENTS_KEY, saved.model_dump(by_alias=True, exclude_none=True, mode="json"))

    async def clear_catalog(self) -> None:
        self.values.pop(SCAN_KEY, None)
        self.values.pop(COMPONENTS_KEY, None)

    async def read_api_key(self) -> str | None:
        return self.values.get(API_KEY_KEY) or None

    async def write_api_key(self, api_key: str) -> None:
        self._set(API_KEY_KEY, api_key)

    async def clear_api_key(self) -> None:
        self.values.pop(API_KEY_KEY, None)

    async def clear_all(self) -> None:
        self.values.clear()


__all__ = ["InMemorySessionStore"]
