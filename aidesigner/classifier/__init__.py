"""Component type classification from author-given names."""

from .lib import (
    PRIORITY_TYPES,
    TYPE_PATTERNS,
    Classification,
    calculate_confidence,
    classify,
    guess_component_type,
    known_types,
)

__all__ = [
    "PRIORITY_TYPES",
    "TYPE_PATTERNS",
    "Classification",
    "calculate_confidence",
    "classify",
    "guess_component_type",
    "known_types",
]
