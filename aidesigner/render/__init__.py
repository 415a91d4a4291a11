"""Layout rendering: properties, variants, text binding and the tree renderer."""

from .lib import (
    DEFAULT_FONT_FAMILY,
    LayoutTreeRenderer,
    RenderReport,
    RenderWarning,
    RenderWarningKind,
)
from .media import MEDIA_PROPERTY_PATTERNS, MediaCheck, check_media_properties
from .properties import (
    LAYOUT_PROPERTY_KEYS,
    TEXT_PROPERTY_KEYS,
    VARIANT_AXIS_NAMES,
    SeparatedProperties,
    sanitize_properties,
    separate_properties,
)
from .text import (
    DEFAULT_TEXT_STRATEGIES,
    TextBinding,
    TextBindingEngine,
    TextBindingResult,
    TextContext,
)
from .variants import VariantIssue, VariantValidation, VariantWarning, validate_variants

__all__ = [
    # Renderer
    "LayoutTreeRenderer",
    "RenderReport",
    "RenderWarning",
    "RenderWarningKind",
    "DEFAULT_FONT_FAMILY",
    # Property separation
    "SeparatedProperties",
    "separate_properties",
    "sanitize_properties",
    "TEXT_PROPERTY_KEYS",
    "LAYOUT_PROPERTY_KEYS",
    "VARIANT_AXIS_NAMES",
    # Variants
    "VariantIssue",
    "VariantValidation",
    "VariantWarning",
    "validate_variants",
    # Text binding
    "TextBindingEngine",
    "TextBindingResult",
    "TextBinding",
    "TextContext",
    "DEFAULT_TEXT_STRATEGIES",
    # Media
    "MEDIA_PROPERTY_PATTERNS",
    "MediaCheck",
    "check_media_properties",
]
