"""Session storage backends."""

from .memory import InMemorySessionStore
from .protocol import API_KEY_KEY, COMPONENTS_KEY, SCAN_KEY, SessionStore, StorageError
from .sqlite import SQLiteSessionStore

__all__ = [
    "API_KEY_KEY",
    "COMPONENTS_KEY",
    "SCAN_KEY",
    "InMemorySessionStore",
    "SQLiteSessionStore",
    "SessionStore",
    "StorageError",
]
