"""Tests for semantic resolution and the component id resolution pass."""

import pytest

from aidesigner.catalog import Catalog, ComponentRecord
from aidesigner.schema import parse_layout

from .lib import (
    ResolutionError,
    SemanticResolver,
    levenshtein_distance,
    match_exact,
    name_similarity,
    request_buckets,
    semantic_score,
)
from .tree import is_placeholder_id, resolve_component_ids


def record(
    component_id: str, name: str, suggested_type: str, confidence: float = 0.9
) -> ComponentRecord:
    return ComponentRecord(
        id=component_id,
        name=name,
        suggested_type=suggested_type,
        confidence=confidence,
    )


@pytest.fixture
def resolver() -> SemanticResolver:
    return SemanticResolver()


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(
        [
            record("10:1", "Header", "appbar", 0.7),
            record("10:2", "Button", "button", 0.95),
            record("10:3", "TextField/Email", "input", 0.9),
        ]
    )


class TestScoring:
    """Tests for the scoring helpers."""

    @pytest.mark.unit
    def test_levenshtein(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    @pytest.mark.unit
    def test_name_similarity(self):
        assert name_similarity("", "") == 1.0
        assert name_similarity("buton", "button") == pytest.approx(5 / 6)
        assert name_similarity("zzzz", "button") == 0.0

    @pytest.mark.unit
    def test_request_buckets(self):
        buckets = [name for name, _ in request_buckets("textfield")]
        assert buckets[0] == "text-input"
        assert "text" in buckets
        assert request_buckets("zzzz") == []

    @pytest.mark.unit
    def test_semantic_score_is_weighted_mean(self):
        field = record("1:1", "TextField/Email", "input", 0.9)
        synonyms = dict(request_buckets("textfield"))["text-input"]
        # input (1.0), textfield (0.7), field (0.7) -> 0.8 x 0.9
        assert semantic_score(field, synonyms) == pytest.approx(0.72)

    @pytest.mark.unit
    def test_semantic_score_without_matches(self):
        assert semantic_score(record("1:1", "Avatar", "avatar"), ("button",)) == 0.0


class TestSemanticResolver:
    """Tests for SemanticResolver."""

    @pytest.mark.unit
    def test_exact_type(self, resolver, catalog):
        resolution = resolver.match("BUTTON", catalog)
        assert resolution.record.id == "10:2"
        assert resolution.strategy == "exact"

    @pytest.mark.unit
    def test_exact_name(self, resolver, catalog):
        assert resolver.resolve("header", catalog).id == "10:1"

    @pytest.mark.unit
    def test_textfield_uses_semantic_tier(self, resolver):
        catalog = Catalog([record("10:3", "TextField/Email", "input", 0.9)])
        resolution = resolver.match("textfield", catalog)
        assert resolution.record.id == "10:3"
        assert resolution.strategy == "semantic"

    @pytest.mark.unit
    def test_low_confidence_falls_through_to_fuzzy(self, resolver):
        catalog = Catalog([record("10:3", "TextField", "input", 0.2)])
        resolution = resolver.match("textfield", catalog)
        # exact name match wins before any scoring
        assert resolution.strategy == "exact"

        catalog = Catalog([record("10:3", "TextField/Email", "input", 0.2)])
        resolution = resolver.match("textfield", catalog)
        assert resolution.strategy == "fuzzy"

    @pytest.mark.unit
    def test_fuzzy_typo(self, resolver, catalog):
        resolution = resolver.match("buton", catalog)
        assert resolution.record.id == "10:2"
        assert resolution.strategy == "fuzzy"

    @pytest.mark.unit
    def test_not_found(self, resolver, catalog):
        assert resolver.resolve("zzzz", catalog) is None

    @pytest.mark.unit
    def test_empty_catalog(self, resolver):
        assert resolver.resolve("button", Catalog()) is None

    @pytest.mark.unit
    def test_custom_strategies(self, catalog):
        exact_only = SemanticResolver(strategies=[("exact", match_exact)])
        assert exact_only.resolve("buton", catalog) is None

    @pytest.mark.unit
    def test_suggestions(self, resolver, catalog):
        assert resolver.suggest("buttn", catalog) == ['Did you mean "button"? (Button)']

    @pytest.mark.unit
    def test_suggestions_limit(self, resolver):
        catalog = Catalog(record(f"1:{i}", f"Chip {i}", "chip") for i in range(5))
        assert len(resolver.suggest("chips", catalog)) == 3

    @pytest.mark.unit
    def test_resolve_or_raise(self, resolver, catalog):
        with pytest.raises(ResolutionError) as exc_info:
            resolver.resolve_or_raise("zzzz", catalog)
        assert exc_info.value.component_type == "zzzz"
        assert "not found in design system" in str(exc_info.value)


class TestPlaceholderIds:
    """Tests for placeholder id detection."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "component_id",
        [None, "", "button_id", "placeholder", "10:2_placeholder", "10-2", "abc"],
    )
    def test_placeholders(self, component_id):
        assert is_placeholder_id(component_id)

    @pytest.mark.unit
    @pytest.mark.parametrize("component_id", ["10:2", "1234:5678"])
    def test_real_ids(self, component_id):
        assert not is_placeholder_id(component_id)


class TestResolutionPass:
    """Tests for resolve_component_ids."""

    @pytest.mark.unit
    def test_rewrites_placeholders_in_place(self, catalog):
        document = parse_layout(
            {
                "layoutContainer": {"name": "Form", "layoutMode": "VERTICAL"},
                "items": [
                    {"type": "native-text", "properties": {"content": "Title"}},
                    {
                        "type": "layoutContainer",
                        "layoutMode": "HORIZONTAL",
                        "items": [
                            {"type": "button", "componentNodeId": "button_placeholder_id"}
                        ],
                    },
                    {"type": "header", "componentNodeId": "10:1"},
                    {"type": "input"},
                ],
            }
        )

        rewrites = resolve_component_ids(document, catalog)

        assert [(r.component_type, r.new_id) for r in rewrites] == [
            ("button", "10:2"),
            ("input", "10:3"),
        ]
        assert rewrites[0].old_id == "button_placeholder_id"
        assert [c.component_node_id for c in document.iter_components()] == [
            "10:2",
            "10:1",
            "10:3",
        ]

    @pytest.mark.unit
    def test_real_ids_are_not_checked(self, catalog):
        document = parse_layout({"items": [{"type": "button", "componentNodeId": "99:9"}]})
        assert resolve_component_ids(document, catalog) == []
        assert document.items[0].component_node_id == "99:9"

    @pytest.mark.unit
    def test_unresolvable_type_raises(self):
        document = parse_layout({"items": [{"type": "button", "componentNodeId": "button_id"}]})
        with pytest.raises(ResolutionError) as exc_info:
            resolve_component_ids(document, Catalog())
        assert exc_info.value.component_type == "button"
        assert document.items[0].component_node_id == "button_id"
