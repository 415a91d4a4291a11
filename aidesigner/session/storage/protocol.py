"""Session storage protocol.

Defines the interface the session layer uses to persist scan results and the
completion provider's API key between plugin runs. Every method is a
suspension point.
"""

from typing import Protocol

from aidesigner.catalog import SavedComponents, StoredCatalog

SCAN_KEY = "design-system-scan"
COMPONENTS_KEY = "last-scan-results"
API_KEY_KEY = "api-key"


class StorageError(Exception):
    """Raised when the store cannot read or write a value."""


class SessionStore(Protocol):
    """Protocol for session key-value storage.

    Implementations: SQLiteSessionStore (CLI, persistent), InMemorySessionStore
    (tests).
    """

    # =========================================================================
    # Catalog
    # =========================================================================

    async def read_catalog(self) -> StoredCatalog | None:
        """Read the last saved scan, tagged with its document fingerprint."""
        ...

    async def write_catalog(self, stored: StoredCatalog) -> None:
        """Replace the saved scan.

        Raises:
            StorageError: If the value cannot be written.
        """
        ...

    async def read_components(self) -> SavedComponents | None:
        """Read the simplified component list saved alongside the scan."""
        ...

    async def write_components(self, saved: SavedComponents) -> None:
        """Replace the simplified component list (single key, fingerprint only).

        Raises:
            StorageError: If the value cannot be written.
        """
        ...

    async def clear_catalog(self) -> None:
        """Remove the saved scan and component list."""
        ...

    # =========================================================================
    # API key
    # =========================================================================

    async def read_api_key(self) -> str | None:
        ...

    async def write_api_key(self, api_key: str) -> None:
        ...

    async def clear_api_key(self) -> None:
        ...

    # =========================================================================
    # Everything
    # =========================================================================

    async def clear_all(self) -> None:
        """Remove every stored value."""
        ...


__all__ = [
    "API_KEY_KEY",
    "COMPONENTS_KEY",
    "SCAN_KEY",
    "SessionStore",
    "StorageError",
]
