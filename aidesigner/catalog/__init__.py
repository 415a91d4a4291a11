"""Design-system catalog records and the catalog collection."""

from .lib import (
    CATALOG_VERSION,
    UNKNOWN_TYPE,
    VERIFIED_CONFIDENCE,
    Catalog,
    ComponentRecord,
    PageContext,
    SavedComponents,
    StoredCatalog,
    TextClassification,
    TextSlot,
)

__all__ = [
    "CATALOG_VERSION",
    "UNKNOWN_TYPE",
    "VERIFIED_CONFIDENCE",
    "Catalog",
    "ComponentRecord",
    "PageContext",
    "SavedComponents",
    "StoredCatalog",
    "TextClassification",
    "TextSlot",
]
