"""Session manager.

Owns the catalog lifecycle across plugin runs: save after a scan, restore at
start-up, patch on manual type correction. A saved scan is tied to the
document it came from; a scan from another document is discarded instead of
being served.
"""

import logging

from aidesigner.catalog import Catalog, ComponentRecord, SavedComponents, StoredCatalog

from .storage import SessionStore, StorageError

logger = logging.getLogger(__name__)


class SessionManager:
    """Catalog persistence for one open document.

    Args:
        store: Session storage backend.
        document_fingerprint: Identifier of the open document.

    Example:
        >>> session = SessionManager(store, host.document_fingerprint)
        >>> await session.save_catalog(catalog)
        True
        >>> (await session.load_catalog()).document_fingerprint
        'file-1'
    """

    def __init__(self, store: SessionStore, document_fingerprint: str | None):
        self.store = store
        self.document_fingerprint = document_fingerprint

    # =========================================================================
    # Catalog
    # =========================================================================

    async def save_catalog(self, catalog: Catalog) -> bool:
        """Persist a catalog with the current document's fingerprint.

        When the full save fails, the component list and fingerprint alone are
        saved under the simplified key.

        Returns:
            True if either save succeeded.
        """
        stored = StoredCatalog.from_catalog(catalog, self.document_fingerprint)
        components = list(catalog)
        saved = SavedComponents(
            components=components, document_fingerprint=self.document_fingerprint
        )
        try:
            await self.store.write_catalog(stored)
            await self.store.write_components(saved)
            logger.info(f"Saved {len(components)} components with session data")
            return True
        except StorageError as e:
            logger.error(f"Error saving scan results: {e}")

        try:
            await self.store.write_components(saved)
            logger.info("Fallback save successful")
            return True
        except StorageError as e:
            logger.warning(f"Could not save scan results: {e}")
            return False

    async def load_catalog(self) -> StoredCatalog | None:
        """Restore the saved scan for the open document.

        Returns:
            The stored catalog, or None when nothing usable is saved. A scan
            from a different document is cleared and reported as absent.
        """
        try:
            stored = await self.store.read_catalog()
        except StorageError as e:
            logger.error(f"Could not restore saved scan: {e}")
            return None

        if stored is None or not stored.components:
            logger.info("No saved design system found")
            return None

        if stored.document_fingerprint != self.document_fingerprint:
            logger.info("Scan from different file, clearing cache")
            await self.clear_scan_data()
            return None

        logger.info(f"Design system loaded: {len(stored.components)} components")
        return stored

    async def current_catalog(self) -> Catalog:
        """Catalog to resolve and render against; empty when none is saved."""
        stored = await self.load_catalog()
        if stored is not None:
            return stored.to_catalog()
        try:
            saved = await self.store.read_components()
        except StorageError as e:
            logger.error(f"Could not read saved components: {e}")
            return Catalog()
        if saved is None:
            return Catalog()

        if saved.document_fingerprint != self.document_fingerprint:
            logger.info("Saved components from different file, clearing cache")
            await self.clear_scan_data()
            return Catalog()
        return saved.to_catalog()

    async def update_component_type(
        self, component_id: str, new_type: str
    ) -> ComponentRecord:
        """Apply a manual type correction and persist it.

        Raises:
            KeyError: If the component is not in the saved catalog.
        """
        catalog = await self.current_catalog()
        record = catalog.update_type(component_id, new_type)
        await self.save_catalog(catalog)
        logger.info(f"Updated {record.name} ({component_id}) to type '{record.suggested_type}'")
        return record

    async def clear_scan_data(self) -> None:
        try:
            await self.store.clear_catalog()
        except StorageError as e:
            logger.error(f"Error clearing scan data: {e}")

    # =========================================================================
    # API key
    # =========================================================================

    async def get_api_key(self) -> str | None:
        return await self.store.read_api_key()

    async def save_api_key(self, api_key: str) -> None:
        await self.store.write_api_key(api_key.strip())

    async def clear_api_key(self) -> None:
        await self.store.clear_api_key()

    async def clear_all(self) -> None:
        await self.store.clear_all()


__all__ = ["SessionManager"]
