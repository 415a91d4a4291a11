"""Tests for the in-memory document host."""

import pytest

from .memory import InMemoryDocumentHost
from .nodes import (
    ComponentSetNode,
    FontName,
    InstanceNode,
    NodeType,
    TextNode,
    parse_variant_name,
)
from .protocol import FontLoadError, HostError


@pytest.fixture
def host() -> InMemoryDocumentHost:
    host = InMemoryDocumentHost(fingerprint="file-1")
    page = host.add_page("Kit", node_id="0:1")
    button_set = host.add_component_set(page, "Button", node_id="10:1")
    small = host.add_variant(button_set, {"Size": "Small", "State": "Default"}, "10:2")
    host.add_text(small, "Label", "Button", font_size=14, node_id="10:3")
    large = host.add_variant(button_set, {"Size": "Large", "State": "Default"}, "10:4")
    host.add_text(large, "Label", "Button", font_size=18, node_id="10:5")
    host.add_text(large, "Hint", "", visible=False, node_id="10:6")
    return host


class TestVariantNames:
    """Tests for variant name parsing."""

    @pytest.mark.unit
    def test_parse(self):
        assert parse_variant_name("Size=Large, State=Hover") == {
            "Size": "Large",
            "State": "Hover",
        }

    @pytest.mark.unit
    def test_parse_ignores_plain_names(self):
        assert parse_variant_name("Button") == {}


class TestComponentSets:
    """Tests for component set structure."""

    @pytest.mark.unit
    def test_default_variant_is_first(self, host):
        button_set = host.get_node_by_id("10:1")
        assert isinstance(button_set, ComponentSetNode)
        assert button_set.default_variant.id == "10:2"

    @pytest.mark.unit
    def test_variant_group_properties(self, host):
        groups = host.get_node_by_id("10:1").variant_group_properties
        assert groups == {"Size": ["Small", "Large"], "State": ["Default"]}


class TestInstances:
    """Tests for instantiation and variant swapping."""

    @pytest.mark.unit
    def test_instance_clones_subtree(self, host):
        master = host.get_node_by_id("10:2")
        instance = host.instantiate_component(master)
        texts = instance.find_text_nodes()
        assert [t.name for t in texts] == ["Label"]
        assert texts[0].source_id == "10:3"
        assert texts[0].id.startswith(f"I{instance.id};")
        assert host.get_main_component(instance) is master

    @pytest.mark.unit
    def test_set_instance_variants_swaps(self, host):
        instance = host.instantiate_component(host.get_node_by_id("10:2"))
        host.set_instance_variants(instance, {"Size": "Large"})
        assert instance.main_component.id == "10:4"
        assert [t.name for t in instance.find_text_nodes()] == ["Label", "Hint"]

    @pytest.mark.unit
    def test_set_instance_variants_no_match(self, host):
        instance = host.instantiate_component(host.get_node_by_id("10:2"))
        with pytest.raises(HostError):
            host.set_instance_variants(instance, {"Size": "Huge"})

    @pytest.mark.unit
    def test_plain_component_has_no_variants(self, host):
        page = host.current_page
        card = host.add_component(page, "Card", node_id="20:1")
        instance = host.instantiate_component(card)
        with pytest.raises(HostError):
            host.set_instance_variants(instance, {"Size": "Large"})

    @pytest.mark.unit
    def test_instantiate_rejects_non_component(self, host):
        with pytest.raises(HostError):
            host.instantiate_component(host.get_node_by_id("10:1"))


class TestTree:
    """Tests for tree edits."""

    @pytest.mark.unit
    def test_generated_ids_have_host_shape(self, host):
        frame = host.create_frame()
        assert frame.id.count(":") == 1
        assert host.get_node_by_id(frame.id) is frame

    @pytest.mark.unit
    def test_append_moves_node(self, host):
        a, b, child = host.create_frame(), host.create_frame(), host.create_frame()
        host.append_child(a, child)
        host.append_child(b, child)
        assert child.parent is b
        assert a.children == []

    @pytest.mark.unit
    def test_append_into_own_subtree_rejected(self, host):
        a, b = host.create_frame(), host.create_frame()
        host.append_child(a, b)
        with pytest.raises(HostError):
            host.append_child(b, a)

    @pytest.mark.unit
    def test_remove_node_unregisters_subtree(self, host):
        frame = host.create_frame()
        text = host.create_text()
        host.append_child(frame, text)
        host.remove_node(frame)
        assert host.get_node_by_id(text.id) is None

    @pytest.mark.unit
    def test_create_shape(self, host):
        assert host.create_shape("ellipse").type is NodeType.ELLIPSE
        with pytest.raises(HostError):
            host.create_shape("triangle")


class TestFonts:
    """Tests for font loading and text access."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_set_characters_requires_loaded_font(self, host):
        text = host.create_text()
        with pytest.raises(FontLoadError):
            host.set_characters(text, "Hi")
        await host.load_font(text.font_name)
        host.set_characters(text, "Hi")
        assert text.characters == "Hi"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unavailable_font(self, host):
        with pytest.raises(FontLoadError) as excinfo:
            await host.load_font(FontName("Comic Sans", "Regular"))
        assert excinfo.value.font.family == "Comic Sans"

    @pytest.mark.unit
    def test_unreadable_text(self, host):
        text = host.get_node_by_id("10:3")
        assert isinstance(text, TextNode)
        host.make_unreadable(text)
        with pytest.raises(FontLoadError):
            host.read_characters(text)


class TestFeedback:
    """Tests for selection and notifications."""

    @pytest.mark.unit
    def test_focus_switches_page(self, host):
        other = host.add_page("Other", node_id="0:2")
        frame = host.add_frame(other, "Screen")
        host.set_selection_and_focus(frame)
        assert host.current_page is other
        assert host.selection == [frame]

    @pytest.mark.unit
    def test_notify_records(self, host):
        host.notify("Done")
        host.notify("Oops", is_error=True)
        assert [(n.message, n.is_error) for n in host.notifications] == [
            ("Done", False),
            ("Oops", True),
        ]


class TestSnapshots:
    """Tests for dict snapshots."""

    @pytest.mark.unit
    def test_round_trip(self, host):
        page = host.current_page
        host.add_instance(page, host.get_node_by_id("10:4"), node_id="30:1")
        restored = InMemoryDocumentHost.from_dict(host.to_dict())
        assert restored.document_fingerprint == "file-1"
        assert restored.get_node_by_id("10:1").variant_group_properties == {
            "Size": ["Small", "Large"],
            "State": ["Default"],
        }
        instance = restored.get_node_by_id("30:1")
        assert isinstance(instance, InstanceNode)
        assert instance.main_component.id == "10:4"
        assert restored.get_node_by_id("10:6").visible is False

    @pytest.mark.unit
    def test_unknown_master_rejected(self):
        data = {
            "pages": [
                {
                    "id": "0:1",
                    "name": "P",
                    "children": [{"type": "INSTANCE", "id": "1:1", "mainComponentId": "9:9"}],
                }
            ]
        }
        with pytest.raises(HostError):
            InMemoryDocumentHost.from_dict(data)
