"""Abstract component type resolution against a scanned catalog."""

from .lib import (
    DEFAULT_STRATEGIES,
    SEMANTIC_PATTERNS,
    Resolution,
    ResolutionError,
    SemanticResolver,
    Strategy,
    levenshtein_distance,
    match_exact,
    match_fuzzy,
    match_semantic,
    name_similarity,
    request_buckets,
    semantic_score,
)
from .tree import HOST_ID_PATTERN, IdRewrite, is_placeholder_id, resolve_component_ids

__all__ = [
    # Resolver
    "SemanticResolver",
    "Resolution",
    "ResolutionError",
    "Strategy",
    "DEFAULT_STRATEGIES",
    "SEMANTIC_PATTERNS",
    "match_exact",
    "match_semantic",
    "match_fuzzy",
    # Scoring
    "levenshtein_distance",
    "name_similarity",
    "request_buckets",
    "semantic_score",
    # Resolution pass
    "HOST_ID_PATTERN",
    "IdRewrite",
    "is_placeholder_id",
    "resolve_component_ids",
]
