"""SQLite session store.

Persists session values as JSON documents in a single key-value table. The
sqlite3 calls are blocking, so each store method runs them in a worker thread.
"""

import asyncio
import json
import logging
import sqlite3
import threading
from datetime import UTC, datetime
from pathlib import Path
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from aidesigner.catalog import SavedComponents, StoredCatalog
from aidesigner.config import get_session_db_path

from .protocol import API_KEY_KEY, COMPONENTS_KEY, SCAN_KEY, StorageError

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
-- Session values, one JSON document per key
CREATE TABLE IF NOT EXISTS session_values (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,  -- JSON
    updated_at TEXT NOT NULL
);
"""


class SQLiteSessionStore:
    """SQLite-backed SessionStore.

    Args:
        db_path: Path to the SQLite database file. Defaults to SESSION_DB_PATH,
            then ~/.aidesigner/session.db.

    Example:
        >>> store = SQLiteSessionStore("~/.aidesigner/session.db")
        >>> store.initialize()
        >>> await store.write_api_key("secret")
    """

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = get_session_db_path(db_path).expanduser()
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection, creating if needed."""
        if self._conn is None:
            raise RuntimeError("Storage not initialized. Call initialize() first.")
        return self._conn

    def initialize(self) -> None:
        """Create the database file and table."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(SCHEMA_SQL)
        self._conn.commit()
        logger.info(f"Initialized session store at {self.db_path}")

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    # =========================================================================
    # Key-value primitives
    # =========================================================================

    def _get(self, key: str) -> Any:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT value FROM session_values WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Could not read '{key}': {e}") from e
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            raise StorageError(f"Stored value for '{key}' is corrupt: {e}") from e

    def _set(self, key: str, value: Any) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO session_values (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, json.dumps(value), datetime.now(UTC).isoformat()),
            )
            conn.commit()
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise StorageError(f"Could not write '{key}': {e}") from e

    def _delete(self, *keys: str) -> None:
        conn = self._get_conn()
        try:
            conn.executemany(
                "DELETE FROM session_values WHERE key = ?", [(key,) for key in keys]
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not delete {', '.join(keys)}: {e}") from e

    def _clear(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM session_values")
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not clear session store: {e}") from e

    async def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Run a primitive in a worker thread, one at a time per connection."""

        def call() -> Any:
            with self._lock:
                return fn(*args)

        return await asyncio.to_thread(call)

    # =========================================================================
    # Catalog
    # =========================================================================

    async def read_catalog(self) -> StoredCatalog | None:
        data = await self._run(self._get, SCAN_KEY)
        if data is None:
            return None
        try:
            return StoredCatalog.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Saved scan is not readable: {e.error_count()} error(s)") from e

    async def write_catalog(self, stored: StoredCatalog) -> None:
        await self._run(
            self._set, SCAN_KEY, stored.model_dump(by_alias=True, mode="json")
        )

    async def read_components(self) -> SavedComponents | None:
        data = await self._run(self._get, COMPONENTS_KEY)
        if data is None:
            return None
        try:
            return SavedComponents.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Saved components are not readable: {e}") from e

    async def write_components(self, saved: SavedComponents) -> None:
        await self._run(
            self._set,
            COMPONENTS_KEY,
            saved.model_dump(by_alias=True, exclude_none=True, mode="json"),
        )

    async def clear_catalog(self) -> None:
        await self._run(self._delete, SCAN_KEY, COMPONENTS_KEY)

    # =========================================================================
    # API key
    # =========================================================================

    async def read_api_key(self) -> str | None:
        value = await self._run(self._get, API_KEY_KEY)
        return value if isinstance(value, str) and value else None

    async def write_api_key(self, api_key: str) -> None:
        await self._run(self._set, API_KEY_KEY, api_key)

    async def clear_api_key(self) -> None:
        await self._run(self._delete, API_KEY_KEY)

    async def clear_all(self) -> None:
        await self._run(self._clear)
        logger.info("Cleared session store")


__all__ = ["SCHEMA_SQL", "SQLiteSessionStore"]
