"""Tests for the render module."""

from unittest.mock import MagicMock

import pytest

from aidesigner.catalog import Catalog
from aidesigner.host import (
    FontName,
    FrameNode,
    HostError,
    InMemoryDocumentHost,
    InstanceNode,
    NodeType,
    TextNode,
)
from aidesigner.resolver import ResolutionError
from aidesigner.schema import parse_layout

from .lib import LayoutTreeRenderer, RenderWarningKind
from .media import check_media_properties, media_properties
from .properties import sanitize_properties, separate_properties
from .text import TextBindingEngine
from .variants import VariantIssue, validate_variants


def text_of(node) -> list[str]:
    return [leaf.characters for leaf in node.find_text_nodes()]


# =============================================================================
# Property separation
# =============================================================================


class TestSeparateProperties:
    """Tests for separate_properties."""

    @pytest.mark.unit
    def test_recases_variant_axes(self):
        result = separate_properties(
            {"text": "Hi", "Condition": "1-line", "leading": "Icon"}, "10:1"
        )
        assert result.display == {"text": "Hi"}
        assert result.variants == {"Condition": "1-line", "Leading": "Icon"}

    @pytest.mark.unit
    def test_nested_variants_merge_verbatim(self):
        result = separate_properties({"variants": {"state": "on"}, "size": "Large"})
        assert result.variants == {"state": "on", "Size": "Large"}
        assert result.display == {}

    @pytest.mark.unit
    def test_text_and_layout_names_win(self):
        result = separate_properties(
            {"trailing-text": "12:00", "horizontalSizing": "FILL", "trailing": "Icon"}
        )
        assert result.display == {"trailing-text": "12:00", "horizontalSizing": "FILL"}
        assert result.variants == {"Trailing": "Icon"}

    @pytest.mark.unit
    def test_unknown_keys_are_display(self):
        result = separate_properties({"badge": "3", "TYPE": "filled"})
        assert result.display == {"badge": "3"}
        assert result.variants == {"TYPE": "filled"}

    @pytest.mark.unit
    def test_non_object_variants_ignored(self):
        assert separate_properties({"variants": "big"}).variants == {}

    @pytest.mark.unit
    def test_empty(self):
        result = separate_properties(None)
        assert result.display == {} and result.variants == {}

    @pytest.mark.unit
    def test_sanitize(self):
        assert sanitize_properties({"supporting text": 3, "count": 3, "text": None}) == {
            "supporting-text": "3",
            "count": 3,
            "text": None,
        }


# =============================================================================
# Variant validation
# =============================================================================


class TestValidateVariants:
    """Tests for validate_variants."""

    @pytest.mark.unit
    def test_rejects_invalid_value_and_unknown_axis(self):
        result = validate_variants(
            {"Condition": "3-line", "Size": "Large"},
            {"Condition": ["1-line", "2-line"]},
        )
        assert result.valid == {}
        assert [w.issue for w in result.warnings] == [
            VariantIssue.INVALID_VALUE,
            VariantIssue.UNKNOWN_PROPERTY,
        ]
        assert "1-line, 2-line" in result.warnings[0].message
        assert result.warnings[1].allowed == ("Condition",)

    @pytest.mark.unit
    def test_values_are_stringified(self):
        result = validate_variants({"Lines": 2}, {"Lines": ["1", "2"]})
        assert result.valid == {"Lines": "2"}
        assert result.warnings == []

    @pytest.mark.unit
    def test_booleans_and_whole_floats_match_declared_spelling(self):
        result = validate_variants(
            {"Disabled": True, "Lines": 2.0, "Scale": 1.5},
            {"Disabled": ["false", "true"], "Lines": ["1", "2"], "Scale": ["1.5"]},
        )
        assert result.valid == {"Disabled": "true", "Lines": "2", "Scale": "1.5"}
        assert result.warnings == []

    @pytest.mark.unit
    def test_false_is_lowercase(self):
        result = validate_variants({"Disabled": False}, {"Disabled": ["True", "False"]})
        assert result.valid == {}
        assert result.warnings[0].value == "false"


# =============================================================================
# Text binding
# =============================================================================


class TestTextBindingEngine:
    """Tests for TextBindingEngine."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_strategies_and_hidden_slots(self, kit_host, kit_catalog):
        instance = kit_host.instantiate_component(kit_host.get_node_by_id("10:3"))
        engine = TextBindingEngine(kit_host, kit_catalog)

        result = await engine.apply(
            instance,
            {"headline": "Inbox", "supporting-text": "3 new", "trailing-text": "12:00"},
        )

        assert [b.strategy for b in result.bound] == [
            "exact-name",
            "exact-name",
            "semantic-classification",
        ]
        assert text_of(instance) == ["Inbox", "3 new", "12:00"]
        assert all(leaf.visible for leaf in instance.find_text_nodes())

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_without_catalog_uses_names_and_position(self, kit_host):
        instance = kit_host.instantiate_component(kit_host.get_node_by_id("10:3"))
        engine = TextBindingEngine(kit_host)

        result = await engine.apply(
            instance,
            {"title": "A", "secondary-note": "B", "tertiary-note": "C", "foo": "D"},
        )

        assert [(b.key, b.strategy) for b in result.bound] == [
            ("title", "legacy-mapping"),
            ("secondary-note", "position"),
            ("tertiary-note", "position"),
        ]
        assert result.unmatched == ["foo"]
        assert text_of(instance) == ["A", "B", "C"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_skips_non_text_values(self, kit_host, kit_catalog):
        instance = kit_host.instantiate_component(kit_host.get_node_by_id("10:3"))
        engine = TextBindingEngine(kit_host, kit_catalog)

        result = await engine.apply(
            instance,
            {"headline": 3, "title": "  ", "horizontalSizing": "FILL", "variants": "x"},
        )
        assert result.bound == [] and result.unmatched == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_idempotent(self, kit_host, kit_catalog):
        instance = kit_host.instantiate_component(kit_host.get_node_by_id("10:3"))
        engine = TextBindingEngine(kit_host, kit_catalog)
        properties = {"headline": "Inbox", "trailing-text": "12:00"}

        await engine.apply(instance, properties)
        first = text_of(instance)
        await engine.apply(instance, properties)
        assert text_of(instance) == first

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_font_failure_skips_only_that_property(self):
        host = InMemoryDocumentHost(available_fonts=[FontName("Inter", "Regular")])
        page = host.add_page("Kit")
        card = host.add_component(page, "Card")
        host.add_text(card, "Title", "", font=FontName("Brand", "Bold"))
        host.add_text(card, "Subtitle", "")
        instance = host.instantiate_component(card)

        result = await TextBindingEngine(host).apply(
            instance, {"title": "Hello", "subtitle": "World"}
        )

        assert [key for key, _ in result.font_failures] == ["title"]
        assert [b.key for b in result.bound] == ["subtitle"]
        assert text_of(instance) == ["", "World"]


# =============================================================================
# Media checks
# =============================================================================


class TestMediaChecks:
    """Tests for media property checks."""

    @pytest.mark.unit
    def test_media_properties(self):
        assert media_properties({"leading-icon": "star", "text": "x", "avatar": ""}) == {
            "leading-icon": "star"
        }

    @pytest.mark.unit
    def test_check_against_nested_layers(self):
        host = InMemoryDocumentHost()
        page = host.add_page("Kit")
        icon = host.add_component(page, "Leading Icon")
        chip = host.add_component(page, "Chip")
        host.add_instance(chip, icon)
        instance = host.instantiate_component(chip)

        checks = check_media_properties(instance, {"leading-icon": "star", "avatar": "me"})

        assert checks[0].slot_name == "Leading Icon"
        assert not checks[1].is_valid
        assert checks[1].suggestions == ("Leading Icon",)


# =============================================================================
# Renderer
# =============================================================================


class TestLayoutTreeRenderer:
    """Tests for LayoutTreeRenderer."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_login_scenario(self, kit_host, kit_catalog, login_layout):
        renderer = LayoutTreeRenderer(kit_host, kit_catalog)
        report = await renderer.render(parse_layout(login_layout))

        frame = report.frame
        assert frame.parent is kit_host.current_page
        assert frame.name == "Login"
        assert frame.layout_mode == "VERTICAL"
        assert frame.width == 360
        assert frame.item_spacing == 20
        assert frame.counter_axis_sizing_mode == "FIXED"
        assert frame.primary_axis_sizing_mode == "AUTO"

        header, button = frame.children
        assert isinstance(header, InstanceNode)
        assert header.main_component.id == "10:1"
        assert text_of(header) == ["Sign In"]

        assert button.variant_properties == {"State": "enabled"}
        assert button.main_component.id == "12:3"
        assert [leaf.name for leaf in button.find_text_nodes()] == ["Label"]
        assert text_of(button) == ["Sign In"]

        assert report.instances == [header, button]
        assert report.warnings == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_completion_selects_and_notifies(self, kit_host, kit_catalog, login_layout):
        report = await LayoutTreeRenderer(kit_host, kit_catalog).render(
            parse_layout(login_layout)
        )
        assert kit_host.selection == [report.frame]
        assert kit_host.focused is report.frame
        assert kit_host.notifications[-1].message == 'UI "Login" generated!'

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_placeholder_scenario(self, kit_host, kit_catalog, login_layout):
        login_layout["items"][1]["componentNodeId"] = "button_placeholder_id"
        document = parse_layout(login_layout)

        report = await LayoutTreeRenderer(kit_host, kit_catalog).render_resolved(document)

        assert [(r.component_type, r.new_id) for r in report.rewrites] == [("button", "10:2")]
        assert document.items[1].component_node_id == "10:2"
        header, button = report.frame.children
        assert text_of(header) == ["Sign In"]
        assert button.variant_properties == {"State": "enabled"}
        assert text_of(button) == ["Sign In"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unresolvable_type_creates_nothing(self, kit_host, monkeypatch):
        create_frame = MagicMock(wraps=kit_host.create_frame)
        instantiate = MagicMock(wraps=kit_host.instantiate_component)
        monkeypatch.setattr(kit_host, "create_frame", create_frame)
        monkeypatch.setattr(kit_host, "instantiate_component", instantiate)

        document = parse_layout({"items": [{"type": "button", "componentNodeId": "button_id"}]})
        with pytest.raises(ResolutionError) as exc_info:
            await LayoutTreeRenderer(kit_host, Catalog()).render_resolved(document)

        assert exc_info.value.component_type == "button"
        create_frame.assert_not_called()
        instantiate.assert_not_called()
        assert kit_host.current_page.children == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_bad_references_are_skipped(self, kit_host, kit_catalog):
        document = parse_layout(
            {
                "layoutContainer": {"layoutMode": "VERTICAL"},
                "items": [
                    {"type": "button", "componentNodeId": "99:9"},
                    {"type": "card", "componentNodeId": "10:9"},
                    {"type": "button"},
                    {"type": "header", "componentNodeId": "10:1"},
                ],
            }
        )
        report = await LayoutTreeRenderer(kit_host, kit_catalog).render(document)

        assert [w.kind for w in report.warnings] == [
            RenderWarningKind.MISSING_REFERENCE,
            RenderWarningKind.NOT_INSTANTIABLE,
            RenderWarningKind.MISSING_REFERENCE,
        ]
        assert len(report.frame.children) == 1
        assert report.frame.name == "Generated Frame"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_variants_keep_default(self, kit_host, kit_catalog):
        document = parse_layout(
            {
                "items": [
                    {
                        "type": "button",
                        "componentNodeId": "10:2",
                        "properties": {"variants": {"State": "pressed", "Size": "Large"}},
                    }
                ]
            }
        )
        report = await LayoutTreeRenderer(kit_host, kit_catalog).render(document)

        (button,) = report.frame.children
        assert button.variant_properties == {"State": "disabled"}
        assert len(report.warnings_of(RenderWarningKind.VARIANT)) == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fill_sizing_follows_parent_axis(self, kit_host, kit_catalog):
        document = parse_layout(
            {
                "layoutContainer": {"layoutMode": "VERTICAL"},
                "items": [
                    {
                        "type": "header",
                        "componentNodeId": "10:1",
                        "properties": {"horizontalSizing": "FILL"},
                    },
                    {
                        "type": "layoutContainer",
                        "layoutMode": "HORIZONTAL",
                        "horizontalSizing": "FILL",
                        "items": [
                            {
                                "type": "list-item",
                                "componentNodeId": "10:3",
                                "properties": {"horizontalSizing": "FILL"},
                            }
                        ],
                    },
                ],
            }
        )
        report = await LayoutTreeRenderer(kit_host, kit_catalog).render(document)

        header, row = report.frame.children
        assert header.layout_align == "STRETCH"
        assert isinstance(row, FrameNode) and row.type == NodeType.FRAME
        assert row.layout_align == "STRETCH"
        assert row.layout_mode == "HORIZONTAL"
        (item,) = row.children
        assert item.layout_grow == 1
        assert item.layout_align == "INHERIT"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_native_primitives(self, kit_host):
        document = parse_layout(
            {
                "layoutContainer": {"layoutMode": "VERTICAL"},
                "items": [
                    {
                        "type": "native-text",
                        "properties": {
                            "content": "Hello",
                            "fontSize": 24,
                            "fontWeight": "bold",
                            "alignment": "center",
                            "horizontalSizing": "FILL",
                        },
                    },
                    {"type": "text", "text": "Plain"},
                    {
                        "type": "native-rectangle",
                        "properties": {
                            "width": 200,
                            "height": 10,
                            "fill": {"r": 1, "g": 0, "b": 0},
                            "cornerRadius": 8,
                        },
                    },
                    {"type": "native-circle"},
                ],
            }
        )
        report = await LayoutTreeRenderer(kit_host).render(document)

        title, plain, rect, circle = report.frame.children
        assert isinstance(title, TextNode)
        assert title.characters == "Hello"
        assert title.font_size == 24
        assert title.font_name == FontName("Inter", "Bold")
        assert title.text_align_horizontal == "CENTER"
        assert title.layout_align == "STRETCH"
        assert title.text_auto_resize == "HEIGHT"

        assert plain.characters == "Plain"
        assert plain.font_size == 16
        assert plain.text_auto_resize == "WIDTH_AND_HEIGHT"

        assert rect.type == NodeType.RECTANGLE
        assert (rect.width, rect.height) == (200, 10)
        assert rect.fills == [{"type": "SOLID", "color": {"r": 1, "g": 0, "b": 0}}]
        assert rect.corner_radius == 8

        assert circle.type == NodeType.ELLIPSE
        assert (circle.width, circle.height) == (50, 50)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_font_skips_native_text(self):
        host = InMemoryDocumentHost(available_fonts=[FontName("Inter", "Regular")])
        document = parse_layout(
            {
                "items": [
                    {"type": "native-text", "properties": {"content": "A", "weight": "bold"}},
                    {"type": "native-text", "properties": {"content": "B"}},
                ]
            }
        )
        report = await LayoutTreeRenderer(host).render(document)

        assert [n.characters for n in report.frame.children] == ["B"]
        assert report.warnings_of(RenderWarningKind.FONT_LOAD)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_padding_without_layout_mode(self, kit_host):
        document = parse_layout(
            {"layoutContainer": {"name": "Free", "paddingTop": 10}, "items": []}
        )
        report = await LayoutTreeRenderer(kit_host).render(document)
        assert report.frame.layout_mode == "NONE"
        assert report.frame.padding_top == 0
        assert report.frame.counter_axis_sizing_mode == "AUTO"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_render_into_frame_does_not_announce(self, kit_host):
        target = kit_host.add_frame(kit_host.current_page, "Target")
        document = parse_layout({"items": [{"type": "native-circle"}]})

        report = await LayoutTreeRenderer(kit_host).render(document, target)

        assert report.frame is target
        assert len(target.children) == 1
        assert kit_host.notifications == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_render_into_component_rejected(self, kit_host):
        with pytest.raises(HostError):
            await LayoutTreeRenderer(kit_host).render(
                parse_layout({"items": []}), kit_host.get_node_by_id("10:1")
            )


class TestModifyExisting:
    """Tests for modification mode."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_replaces_children(self, kit_host, kit_catalog, login_layout):
        renderer = LayoutTreeRenderer(kit_host, kit_catalog)
        first = await renderer.render(parse_layout(login_layout))
        old_ids = [child.id for child in first.frame.children]

        report = await renderer.modify_existing(
            first.frame.id,
            parse_layout(
                {
                    "layoutContainer": {"name": "Login v2", "layoutMode": "VERTICAL"},
                    "items": [{"type": "native-text", "properties": {"content": "Welcome"}}],
                }
            ),
        )

        assert report.frame is first.frame
        assert report.frame.name == "Login v2"
        assert [child.characters for child in report.frame.children] == ["Welcome"]
        assert all(kit_host.get_node_by_id(node_id) is None for node_id in old_ids)
        assert kit_host.notifications[-1].message == "UI updated successfully!"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_restores_original_content(
        self, kit_host, kit_catalog, login_layout, monkeypatch
    ):
        renderer = LayoutTreeRenderer(kit_host, kit_catalog)
        first = await renderer.render(parse_layout(login_layout))
        frame = first.frame
        originals = list(frame.children)

        async def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(renderer, "_render_native", explode)
        with pytest.raises(RuntimeError):
            await renderer.modify_existing(
                frame.id,
                parse_layout(
                    {
                        "layoutContainer": {"name": "Broken", "layoutMode": "HORIZONTAL"},
                        "items": [
                            {"type": "header", "componentNodeId": "10:1"},
                            {"type": "native-text", "properties": {"content": "x"}},
                        ],
                    }
                ),
            )

        assert frame.children == originals
        assert all(child.parent is frame for child in originals)
        assert frame.name == "Login"
        assert frame.layout_mode == "VERTICAL"
        assert frame.width == 360

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rejects_non_frame(self, kit_host):
        with pytest.raises(HostError, match="Target frame for modification not found"):
            await LayoutTreeRenderer(kit_host).modify_existing(
                "10:1", parse_layout({"items": []})
            )
