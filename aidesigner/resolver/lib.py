"""Semantic component resolution.

Maps an abstract component type requested by a layout ("textfield",
"primary-button") to a concrete catalog record. Design systems name things
differently, so matching runs through ordered strategies; the first strategy
that yields a candidate wins:

1. exact: the request equals a record's suggested type or name;
2. semantic: the request belongs to a synonym bucket, and records are scored
   against that bucket's synonyms;
3. fuzzy: normalized edit-distance similarity.
"""

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from aidesigner.catalog import Catalog, ComponentRecord

logger = logging.getLogger(__name__)

SEMANTIC_FLOOR = 0.3
FUZZY_FLOOR = 0.4
SUGGESTION_FLOOR = 0.3
MAX_SUGGESTIONS = 3

# Bucket name -> synonyms, ordered; iteration order is part of the contract.
SEMANTIC_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "text-input",
        (
            "input", "textfield", "text-field", "textbox", "text-box",
            "field", "form-field", "input-field", "text-input",
            "email-input", "password-input", "search-input",
        ),
    ),
    (
        "button",
        (
            "button", "btn", "cta", "call-to-action", "action-button",
            "primary-button", "secondary-button", "submit", "submit-button",
            "form-button", "action", "click-button",
        ),
    ),
    (
        "text",
        (
            "text", "label", "title", "heading", "paragraph", "copy",
            "typography", "h1", "h2", "h3", "h4", "h5", "h6",
            "body-text", "caption", "subtitle",
        ),
    ),
    (
        "container",
        (
            "container", "wrapper", "box", "panel", "section",
            "frame", "group", "layout", "card", "card-container",
        ),
    ),
    (
        "card",
        (
            "card", "tile", "panel", "item", "component-card",
            "content-card", "info-card", "product-card",
        ),
    ),
    (
        "list",
        (
            "list", "list-item", "item", "row", "entry",
            "list-row", "table-row", "data-row",
        ),
    ),
    (
        "icon",
        (
            "icon", "symbol", "glyph", "pictogram", "emoji",
            "icon-button", "icon-component",
        ),
    ),
    (
        "navigation",
        (
            "nav", "navigation", "navbar", "nav-bar", "menu",
            "tab", "tabs", "tab-bar", "breadcrumb", "sidebar",
        ),
    ),
)

_TOKEN_SPLIT = re.compile(r"[-_\s]")


# =============================================================================
# Errors
# =============================================================================


class ResolutionError(Exception):
    """Raised when an abstract component type has no catalog match.

    Attributes:
        component_type: The requested abstract type.
        suggestions: "Did you mean" hints, never applied automatically.
    """

    def __init__(self, component_type: str, suggestions: Sequence[str] = ()):
        super().__init__(
            f'Component for type "{component_type}" not found in design system. '
            "Please scan your design system first."
        )
        self.component_type = component_type
        self.suggestions = list(suggestions)


# =============================================================================
# Scoring helpers
# =============================================================================


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit insertion, deletion and substitution costs."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    current[j - 1] + 1,
                    previous[j] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def name_similarity(a: str, b: str) -> float:
    """Similarity in [0, 1]: (longest - distance) / longest."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(a, b)) / longest


def semantic_score(record: ComponentRecord, synonyms: Sequence[str]) -> float:
    """Score a record against one bucket's synonyms.

    Each synonym that matches contributes 1.0 (equal to the type or name),
    0.7 (substring) or 0.5 (delimited token). The mean over matching
    synonyms is weighted by the record's confidence.
    """
    name = record.name.lower()
    suggested = record.suggested_type.lower()
    name_tokens = _TOKEN_SPLIT.split(name)
    type_tokens = _TOKEN_SPLIT.split(suggested)

    total = 0.0
    matches = 0
    for synonym in synonyms:
        if synonym in (suggested, name):
            total += 1.0
        elif synonym in suggested or synonym in name:
            total += 0.7
        elif synonym in type_tokens or synonym in name_tokens:
            total += 0.5
        else:
            continue
        matches += 1

    if not matches:
        return 0.0
    return (total / matches) * (record.confidence or 1.0)


def request_buckets(request: str) -> list[tuple[str, tuple[str, ...]]]:
    """Buckets whose synonyms contain, or are contained in, the request."""
    return [
        (bucket, synonyms)
        for bucket, synonyms in SEMANTIC_PATTERNS
        if any(s in request or request in s for s in synonyms)
    ]


# =============================================================================
# Strategies
# =============================================================================

Strategy = Callable[[str, Sequence[ComponentRecord]], ComponentRecord | None]


def match_exact(request: str, records: Sequence[ComponentRecord]) -> ComponentRecord | None:
    for record in records:
        if record.suggested_type.lower() == request or record.name.lower() == request:
            return record
    return None


def match_semantic(
    request: str, records: Sequence[ComponentRecord]
) -> ComponentRecord | None:
    best: ComponentRecord | None = None
    best_score = 0.0
    for bucket, synonyms in request_buckets(request):
        for record in records:
            score = semantic_score(record, synonyms)
            if score > best_score and score > SEMANTIC_FLOOR:
                best, best_score = record, score
                logger.debug(
                    f"Semantic candidate for '{request}' in '{bucket}': "
                    f"{record.name} ({score:.2f})"
                )
    return best


def match_fuzzy(request: str, records: Sequence[ComponentRecord]) -> ComponentRecord | None:
    best: ComponentRecord | None = None
    best_score = 0.0
    for record in records:
        score = max(
            name_similarity(request, record.name.lower()),
            name_similarity(request, record.suggested_type.lower()),
        )
        if score > best_score and score > FUZZY_FLOOR:
            best, best_score = record, score
    return best


DEFAULT_STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("exact", match_exact),
    ("semantic", match_semantic),
    ("fuzzy", match_fuzzy),
)


# =============================================================================
# Resolver
# =============================================================================


@dataclass(frozen=True)
class Resolution:
    """A successful resolution and the strategy that produced it."""

    record: ComponentRecord
    strategy: str


class SemanticResolver:
    """Resolves abstract component types against a catalog.

    Args:
        strategies: Ordered (name, strategy) pairs. Defaults to exact,
            semantic, fuzzy.

    Example:
        >>> resolver = SemanticResolver()
        >>> resolver.resolve("textfield", catalog).name
        'TextField/Email'
    """

    def __init__(self, strategies: Sequence[tuple[str, Strategy]] = DEFAULT_STRATEGIES):
        self.strategies = tuple(strategies)

    def match(self, requested_type: str, catalog: Catalog) -> Resolution | None:
        """Run strategies in order and report which one matched."""
        request = requested_type.lower().strip()
        records = list(catalog)
        if not request or not records:
            return None

        for name, strategy in self.strategies:
            record = strategy(request, records)
            if record is not None:
                logger.info(
                    f"Resolved '{requested_type}' -> {record.name} ({record.id}) via {name}"
                )
                return Resolution(record=record, strategy=name)

        logger.info(f"No component found for '{requested_type}'")
        return None

    def resolve(self, requested_type: str, catalog: Catalog) -> ComponentRecord | None:
        """Best catalog record for a requested type, or None."""
        resolution = self.match(requested_type, catalog)
        return resolution.record if resolution else None

    def resolve_or_raise(self, requested_type: str, catalog: Catalog) -> ComponentRecord:
        """Like :meth:`resolve`, but raise ResolutionError with suggestions.

        Raises:
            ResolutionError: If no strategy produces a candidate.
        """
        record = self.resolve(requested_type, catalog)
        if record is None:
            raise ResolutionError(requested_type, self.suggest(requested_type, catalog))
        return record

    def suggest(
        self, requested_type: str, catalog: Catalog, limit: int = MAX_SUGGESTIONS
    ) -> list[str]:
        """Human hints for a type that did not resolve."""
        request = requested_type.lower()
        suggestions = []
        for record in catalog:
            similarity = name_similarity(request, record.suggested_type.lower())
            if similarity > SUGGESTION_FLOOR:
                suggestions.append(f'Did you mean "{record.suggested_type}"? ({record.name})')
        return suggestions[:limit]


__all__ = [
    "DEFAULT_STRATEGIES",
    "SEMANTIC_PATTERNS",
    "Resolution",
    "ResolutionError",
    "SemanticResolver",
    "Strategy",
    "levenshtein_distance",
    "match_exact",
    "match_fuzzy",
    "match_semantic",
    "name_similarity",
    "request_buckets",
    "semantic_score",
]
