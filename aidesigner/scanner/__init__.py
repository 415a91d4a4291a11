"""Design-system scanning: classification, variant schemas and text slots."""

from .lib import DesignSystemScanner, ProgressCallback, ScanProgress, is_catalog_root
from .text_slots import classify_by_size, find_text_slots, slot_source
from .variants import extract_variant_schema

__all__ = [
    "DesignSystemScanner",
    "ProgressCallback",
    "ScanProgress",
    "classify_by_size",
    "extract_variant_schema",
    "find_text_slots",
    "is_catalog_root",
    "slot_source",
]
