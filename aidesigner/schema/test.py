"""Tests for the layout JSON contract."""

import json

import pytest

from .lib import (
    ComponentItem,
    ContainerItem,
    LayoutMode,
    LayoutParseError,
    NativeItem,
    export_json_schema,
    parse_layout,
)


@pytest.fixture
def login_layout() -> dict:
    return {
        "layoutContainer": {
            "name": "Login",
            "layoutMode": "VERTICAL",
            "width": 360,
            "paddingTop": 24,
            "itemSpacing": 12,
        },
        "items": [
            {"type": "native-text", "properties": {"content": "Welcome"}},
            {
                "type": "layoutContainer",
                "layoutMode": "HORIZONTAL",
                "horizontalSizing": "FILL",
                "items": [
                    {
                        "type": "button",
                        "componentNodeId": "10:2",
                        "properties": {"text": "Sign in", "variants": {"Size": "Large"}},
                    }
                ],
            },
            {"type": "input", "properties": {"label": "Email"}},
        ],
    }


class TestParseLayout:
    """Tests for parse_layout."""

    @pytest.mark.unit
    def test_parses_tagged_items(self, login_layout):
        """Each item becomes the model for its kind."""
        doc = parse_layout(login_layout)
        assert doc.layout_container.name == "Login"
        assert doc.layout_container.layout_mode is LayoutMode.VERTICAL
        assert isinstance(doc.items[0], NativeItem)
        assert isinstance(doc.items[1], ContainerItem)
        assert isinstance(doc.items[1].items[0], ComponentItem)
        assert doc.items[1].fills_width
        assert doc.items[2].component_node_id is None

    @pytest.mark.unit
    def test_accepts_json_text(self, login_layout):
        """JSON strings are decoded before validation."""
        doc = parse_layout(json.dumps(login_layout))
        assert len(doc.items) == 3

    @pytest.mark.unit
    def test_unknown_layout_mode_is_none(self):
        """Anything other than HORIZONTAL/VERTICAL collapses to NONE."""
        doc = parse_layout({"layoutContainer": {"layoutMode": "GRID"}, "items": []})
        assert doc.layout_container.layout_mode is LayoutMode.NONE

    @pytest.mark.unit
    def test_non_numeric_padding_is_zero(self):
        """Padding only accepts numbers."""
        doc = parse_layout(
            {"layoutContainer": {"paddingTop": "12px", "width": 0}, "items": []}
        )
        assert doc.layout_container.padding_top == 0
        assert doc.layout_container.width is None

    @pytest.mark.unit
    def test_items_nested_under_container(self):
        """Items inside layoutContainer are lifted when top-level has none."""
        doc = parse_layout(
            {"layoutContainer": {"items": [{"type": "native-circle"}]}}
        )
        assert len(doc.items) == 1

    @pytest.mark.unit
    def test_missing_items_rejected(self):
        """A document without items is structurally incomplete."""
        with pytest.raises(LayoutParseError):
            parse_layout({"layoutContainer": {}})

    @pytest.mark.unit
    def test_invalid_json_rejected(self):
        """Malformed JSON raises LayoutParseError."""
        with pytest.raises(LayoutParseError, match="not valid JSON"):
            parse_layout("{not json")

    @pytest.mark.unit
    def test_non_object_rejected(self):
        with pytest.raises(LayoutParseError):
            parse_layout("[1, 2]")

    @pytest.mark.unit
    def test_numeric_component_id_is_stringified(self):
        doc = parse_layout({"items": [{"type": "card", "componentNodeId": 7}]})
        assert doc.items[0].component_node_id == "7"


class TestNativeItem:
    """Tests for native primitive attributes."""

    @pytest.mark.unit
    def test_attributes_merge_top_level_and_properties(self):
        """Top-level attributes are visible; properties win on conflict."""
        doc = parse_layout(
            {
                "items": [
                    {
                        "type": "native-rectangle",
                        "width": 10,
                        "height": 20,
                        "properties": {"height": 30},
                    }
                ]
            }
        )
        attrs = doc.items[0].attributes()
        assert attrs["width"] == 10
        assert attrs["height"] == 30

    @pytest.mark.unit
    def test_plain_text_is_native(self):
        """The bare "text" type is treated as native text."""
        doc = parse_layout({"items": [{"type": "text", "text": "Hi"}]})
        assert isinstance(doc.items[0], NativeItem)
        assert doc.items[0].is_text


class TestLayoutDocument:
    """Tests for document helpers."""

    @pytest.mark.unit
    def test_iter_components_depth_first(self, login_layout):
        """Component references come back in document order."""
        doc = parse_layout(login_layout)
        assert [c.type for c in doc.iter_components()] == ["button", "input"]

    @pytest.mark.unit
    def test_to_json_dict_uses_wire_names(self, login_layout):
        """Dumping restores camelCase keys."""
        dumped = parse_layout(login_layout).to_json_dict()
        assert dumped["layoutContainer"]["layoutMode"] == "VERTICAL"
        assert dumped["items"][1]["items"][0]["componentNodeId"] == "10:2"

    @pytest.mark.unit
    def test_export_json_schema(self):
        schema = export_json_schema()
        assert "layoutContainer" in schema["properties"]
