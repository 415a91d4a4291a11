"""Name-based component type classification.

Maps an author-given component name to a semantic tag ("button", "list-item",
...) and a confidence score. Classification is a first-match scan over an
ordered pattern table: a curated priority subset is tried first, then the
remaining patterns in declaration order.
"""

import logging
import re
from dataclasses import dataclass

from aidesigner.catalog import UNKNOWN_TYPE

logger = logging.getLogger(__name__)

# Declaration order matters for the non-priority pass.
TYPE_PATTERNS: tuple[tuple[str, str], ...] = (
    ("icon-button", r"icon.*button|button.*icon"),
    ("upload", r"upload|file.*drop|drop.*zone|attach"),
    ("form", r"form|captcha|verification"),
    ("context-menu", r"context-menu|context menu|contextual menu|options menu"),
    ("modal-header", r"modal-header|modal header|modalstack|modal_stack"),
    ("list-item", r"list-item|list item|list_item|list[\s\-_]*row|list[\s\-_]*cell"),
    ("appbar", r"appbar|app-bar|navbar|nav-bar|header|top bar|page header"),
    ("dialog", r"dialog|dialogue|popup|modal(?!-header)"),
    ("list", r"list(?!-item)"),
    ("navigation", r"nav|navigation(?!-bar)"),
    ("header", r"h[1-6]|title|heading(?! bar)"),
    ("button", r"button|btn|cta|action"),
    ("input", r"input|field|textfield|text-field|entry"),
    ("textarea", r"textarea|text-area|multiline"),
    ("select", r"select|dropdown|drop-down|picker"),
    ("checkbox", r"checkbox|check-box"),
    ("radio", r"radio|radiobutton|radio-button"),
    ("switch", r"switch|toggle"),
    ("slider", r"slider|range"),
    ("searchbar", r"search|searchbar|search-bar"),
    ("tab", r"tab|tabs|tabbar|tab-bar"),
    ("breadcrumb", r"breadcrumb|bread-crumb"),
    ("pagination", r"pagination|pager"),
    ("bottomsheet", r"bottomsheet|bottom-sheet|drawer"),
    ("sidebar", r"sidebar|side-bar"),
    ("snackbar", r"snack|snackbar|toast|notification"),
    ("alert", r"alert"),
    ("tooltip", r"tooltip|tip|hint"),
    ("badge", r"badge|indicator|count"),
    ("progress", r"progress|loader|loading|spinner"),
    ("skeleton", r"skeleton|placeholder"),
    ("card", r"card|tile|block|panel"),
    ("avatar", r"avatar|profile|user|photo"),
    ("image", r"image|img|picture"),
    ("video", r"video|player"),
    ("icon", r"icon|pictogram|symbol"),
    ("text", r"text|label|paragraph|caption|copy"),
    ("link", r"link|anchor"),
    ("container", r"container|wrapper|box|frame"),
    ("grid", r"grid"),
    ("divider", r"divider|separator|delimiter"),
    ("spacer", r"spacer|space|gap"),
    ("fab", r"fab|floating|float"),
    ("chip", r"chip|tag"),
    ("actionsheet", r"actionsheet|action-sheet"),
    ("chart", r"chart|graph"),
    ("table", r"table"),
    ("calendar", r"calendar|date"),
    ("timeline", r"timeline"),
    ("gallery", r"gallery|carousel"),
    ("price", r"price|cost"),
    ("rating", r"rating|star"),
    ("cart", r"cart|basket"),
    ("map", r"map|location"),
    ("code", r"code|syntax"),
    ("terminal", r"terminal|console"),
)

# Compound and specific types that would otherwise lose to a generic pattern.
# "stepper" has no pattern yet and is skipped.
PRIORITY_TYPES: tuple[str, ...] = (
    "icon-button",
    "upload",
    "form",
    "context-menu",
    "modal-header",
    "list-item",
    "appbar",
    "dialog",
    "snackbar",
    "bottomsheet",
    "actionsheet",
    "searchbar",
    "fab",
    "breadcrumb",
    "pagination",
    "skeleton",
    "textarea",
    "checkbox",
    "radio",
    "switch",
    "slider",
    "tab",
    "navigation",
    "tooltip",
    "badge",
    "progress",
    "avatar",
    "chip",
    "stepper",
    "chart",
    "table",
    "calendar",
    "timeline",
    "gallery",
    "rating",
)

_COMPILED: dict[str, re.Pattern[str]] = {
    type_name: re.compile(pattern, re.IGNORECASE) for type_name, pattern in TYPE_PATTERNS
}

_SCAN_ORDER: tuple[str, ...] = tuple(
    t for t in PRIORITY_TYPES if t in _COMPILED
) + tuple(t for t, _ in TYPE_PATTERNS if t not in PRIORITY_TYPES)


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one component name.

    Attributes:
        suggested_type: Semantic tag, or "unknown".
        confidence: Score in [0.1, 0.95].
    """

    suggested_type: str
    confidence: float


def guess_component_type(name: str) -> str:
    """Return the first matching semantic tag for a component name.

    Args:
        name: Component name (matching is case-insensitive).

    Returns:
        Semantic tag, or "unknown" when no pattern matches.
    """
    lowered = name.lower()
    for type_name in _SCAN_ORDER:
        if _COMPILED[type_name].search(lowered):
            return type_name
    return UNKNOWN_TYPE


def calculate_confidence(name: str, suggested_type: str) -> float:
    """Score how directly the name states its type.

    Returns:
        0.1 for unknown, 0.95 for an exact name, 0.9 when the type is a
        substring, else 0.7. Delimited names such as "card-large" contain the
        type, so they score 0.9.
    """
    if suggested_type == UNKNOWN_TYPE:
        return 0.1
    lowered = name.lower()
    if lowered == suggested_type.lower():
        return 0.95
    if suggested_type in lowered:
        return 0.9
    # Never reached: any delimited match is also a substring match above.
    if f"{suggested_type}-" in lowered or f"{suggested_type}_" in lowered:
        return 0.85
    return 0.7


def classify(name: str) -> Classification:
    """Classify a component name into (suggested_type, confidence)."""
    suggested_type = guess_component_type(name)
    confidence = calculate_confidence(name, suggested_type)
    logger.debug(f"Classified '{name}' as {suggested_type} ({confidence})")
    return Classification(suggested_type=suggested_type, confidence=confidence)


def known_types() -> list[str]:
    """All semantic tags the classifier can produce, in declaration order."""
    return [type_name for type_name, _ in TYPE_PATTERNS]


__all__ = [
    "PRIORITY_TYPES",
    "TYPE_PATTERNS",
    "Classification",
    "calculate_confidence",
    "classify",
    "guess_component_type",
    "known_types",
]
