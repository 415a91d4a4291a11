"""Property separation for component references.

A layout item carries one flat property bag. Part of it is content for the
instance (text, sizing hints); part selects a variant. Separation is by
naming convention only, since the live schema is checked later.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

VARIANTS_KEY = "variants"

TEXT_PROPERTY_KEYS = (
    "text",
    "supporting-text",
    "trailing-text",
    "headline",
    "subtitle",
    "value",
)
LAYOUT_PROPERTY_KEYS = (
    "horizontalSizing",
    "verticalSizing",
    "layoutAlign",
    "layoutGrow",
)
VARIANT_AXIS_NAMES = (
    "condition",
    "leading",
    "trailing",
    "state",
    "style",
    "size",
    "type",
    "emphasis",
    "variant",
)

_WHITESPACE = re.compile(r"\s+")


@dataclass
class SeparatedProperties:
    """Result of splitting a property bag.

    Attributes:
        display: Content and layout properties for the instance.
        variants: Variant selectors, axis name to requested value.
    """

    display: dict[str, Any] = field(default_factory=dict)
    variants: dict[str, Any] = field(default_factory=dict)


def _contains_any(key: str, candidates: tuple[str, ...]) -> bool:
    lowered = key.lower()
    return any(candidate.lower() in lowered for candidate in candidates)


def separate_properties(
    properties: dict[str, Any] | None, component_id: str | None = None
) -> SeparatedProperties:
    """Split a flat property bag into display properties and variant selectors.

    Rules, first match wins:

    1. a nested ``variants`` object is merged verbatim into the selectors;
    2. keys containing a known text or layout property name stay display;
    3. known variant axis names (any case) become selectors, re-cased with a
       leading capital;
    4. everything else stays display.

    Args:
        properties: Raw ``properties`` of a component item.
        component_id: Target component, used for logging only.

    Returns:
        SeparatedProperties.

    Example:
        >>> result = separate_properties({"text": "Hi", "leading": "Icon"})
        >>> result.display, result.variants
        ({'text': 'Hi'}, {'Leading': 'Icon'})
    """
    result = SeparatedProperties()
    if not properties:
        return result

    for key, value in properties.items():
        if key == VARIANTS_KEY:
            if isinstance(value, dict):
                result.variants.update(value)
            else:
                logger.warning(
                    f"Ignoring non-object 'variants' on component {component_id}: {value!r}"
                )
            continue

        if _contains_any(key, TEXT_PROPERTY_KEYS) or _contains_any(
            key, LAYOUT_PROPERTY_KEYS
        ):
            result.display[key] = value
            continue

        if key.lower() in VARIANT_AXIS_NAMES:
            result.variants[key[:1].upper() + key[1:]] = value
            continue

        result.display[key] = value

    logger.debug(
        f"Separated properties for {component_id}: "
        f"display={list(result.display)} variants={result.variants}"
    )
    return result


def sanitize_properties(properties: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize display keys and text values.

    Whitespace runs in keys become "-"; values of keys mentioning "text" are
    stringified (None is kept).
    """
    if not properties:
        return {}
    cleaned: dict[str, Any] = {}
    for key, value in properties.items():
        clean_key = _WHITESPACE.sub("-", key)
        if "text" in key.lower() and value is not None:
            value = str(value)
        cleaned[clean_key] = value
    return cleaned


__all__ = [
    "LAYOUT_PROPERTY_KEYS",
    "TEXT_PROPERTY_KEYS",
    "VARIANTS_KEY",
    "VARIANT_AXIS_NAMES",
    "SeparatedProperties",
    "sanitize_properties",
    "separate_properties",
]
