"""Tests for component type classification."""

import pytest

from .lib import (
    PRIORITY_TYPES,
    TYPE_PATTERNS,
    Classification,
    calculate_confidence,
    classify,
    guess_component_type,
    known_types,
)

# Golden cases: (name, expected type, expected confidence)
GOLDEN = [
    ("button", "button", 0.95),
    ("BUTTON", "button", 0.95),
    ("Primary Button/Large", "button", 0.9),
    ("Icon Button", "icon-button", 0.7),
    ("Text Field", "input", 0.7),
    ("List Item", "list-item", 0.7),
    ("list-item", "list-item", 0.95),
    ("Header", "appbar", 0.7),
    ("Card", "card", 0.95),
    ("Modal", "dialog", 0.7),
    ("Modal Header", "modal-header", 0.7),
    ("Search Input", "searchbar", 0.7),
    ("Avatar", "avatar", 0.95),
    ("Chip_Filter", "chip", 0.9),
    ("Toggle", "switch", 0.7),
    ("Snackbar", "snackbar", 0.95),
    ("Blob", "unknown", 0.1),
]


class TestClassify:
    """Golden-fixture tests for classify."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name,expected_type,expected_confidence", GOLDEN)
    def test_golden(self, name, expected_type, expected_confidence):
        """Known names map to the documented type and confidence."""
        result = classify(name)
        assert result == Classification(expected_type, expected_confidence)

    @pytest.mark.unit
    def test_deterministic(self):
        """Classifying the same name twice yields the same result."""
        names = [name for name, _, _ in GOLDEN]
        assert [classify(n) for n in names] == [classify(n) for n in names]

    @pytest.mark.unit
    def test_unknown_has_low_confidence(self):
        assert classify("zzz").confidence <= 0.1


class TestGuessComponentType:
    """Tests for pattern ordering."""

    @pytest.mark.unit
    def test_priority_beats_declaration_order(self):
        """'header' is an appbar because appbar is a priority type."""
        assert guess_component_type("page header") == "appbar"

    @pytest.mark.unit
    def test_compound_type_before_generic(self):
        """icon-button wins over both icon and button."""
        assert guess_component_type("button with icon") == "icon-button"

    @pytest.mark.unit
    def test_lookahead_excludes_suffix(self):
        """The dialog pattern ignores modal-header."""
        assert guess_component_type("modal-header") == "modal-header"

    @pytest.mark.unit
    def test_empty_name(self):
        assert guess_component_type("") == "unknown"


class TestCalculateConfidence:
    """Tests for confidence boundaries."""

    @pytest.mark.unit
    def test_unknown(self):
        assert calculate_confidence("anything", "unknown") == 0.1

    @pytest.mark.unit
    def test_exact_match_case_insensitive(self):
        assert calculate_confidence("Card", "card") == 0.95

    @pytest.mark.unit
    def test_substring(self):
        assert calculate_confidence("big card", "card") == 0.9

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["card-large", "Card_Small", "icon-button-primary"])
    def test_delimited_names_score_as_substring(self, name):
        suggested_type = "icon-button" if name.startswith("icon") else "card"
        assert calculate_confidence(name, suggested_type) == 0.9

    @pytest.mark.unit
    def test_pattern_only(self):
        assert calculate_confidence("tile", "card") == 0.7


class TestTables:
    """Sanity checks on the pattern tables."""

    @pytest.mark.unit
    def test_types_unique(self):
        types = [t for t, _ in TYPE_PATTERNS]
        assert len(types) == len(set(types))

    @pytest.mark.unit
    def test_priority_types_have_patterns_except_stepper(self):
        missing = [t for t in PRIORITY_TYPES if t not in dict(TYPE_PATTERNS)]
        assert missing == ["stepper"]

    @pytest.mark.unit
    def test_known_types_order(self):
        assert known_types()[0] == "icon-button"
        assert known_types()[-1] == "terminal"
