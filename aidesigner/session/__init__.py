"""Session persistence: saved scans and the API key."""

from .lib import SessionManager
from .storage import (
    API_KEY_KEY,
    COMPONENTS_KEY,
    SCAN_KEY,
    InMemorySessionStore,
    SessionStore,
    SQLiteSessionStore,
    StorageError,
)

__all__ = [
    "SessionManager",
    # Storage
    "SessionStore",
    "StorageError",
    "InMemorySessionStore",
    "SQLiteSessionStore",
    "API_KEY_KEY",
    "COMPONENTS_KEY",
    "SCAN_KEY",
]
