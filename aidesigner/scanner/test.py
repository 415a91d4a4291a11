"""Tests for the design-system scanner."""

import pytest

from aidesigner.catalog import TextClassification
from aidesigner.host import InMemoryDocumentHost

from .lib import DesignSystemScanner, ScanProgress, is_catalog_root
from .text_slots import classify_by_size, find_text_slots
from .variants import extract_variant_schema


@pytest.fixture
def host() -> InMemoryDocumentHost:
    host = InMemoryDocumentHost(fingerprint="kit")
    components = host.add_page("Components", node_id="0:1")
    button_set = host.add_component_set(components, "Button", node_id="10:1")
    enabled = host.add_variant(button_set, {"State": "enabled"}, "10:2")
    host.add_text(enabled, "Label", "Button", font_size=14, node_id="10:3")
    host.add_variant(button_set, {"State": "disabled"}, "10:4")

    field = host.add_component(components, "Text Field", node_id="11:1")
    host.add_text(field, "Label", "Email", font_size=12, node_id="11:2")
    host.add_text(field, "Value", "", font_size=16, node_id="11:3")
    host.add_text(field, "Helper", "", font_size=12, visible=False, node_id="11:4")

    other = host.add_page("Patterns", node_id="0:2")
    frame = host.add_frame(other, "Section", node_id="20:1")
    host.add_component(frame, "Blob", node_id="20:2")
    return host


class TestVariantSchema:
    """Tests for variant schema extraction."""

    @pytest.mark.unit
    def test_sorts_and_dedupes(self):
        schema = extract_variant_schema({"Size": ["Small", "Large", "Small"]})
        assert schema == {"Size": ["Large", "Small"]}

    @pytest.mark.unit
    def test_drops_empty_axes(self):
        assert extract_variant_schema({"Size": [], "": ["x"]}) == {}

    @pytest.mark.unit
    def test_none(self):
        assert extract_variant_schema(None) == {}


class TestTextSlots:
    """Tests for text slot discovery."""

    @pytest.mark.unit
    def test_classify_by_size(self):
        result = classify_by_size([12, 16, 12, 10])
        assert result == [
            TextClassification.SECONDARY,
            TextClassification.PRIMARY,
            TextClassification.SECONDARY,
            TextClassification.TERTIARY,
        ]

    @pytest.mark.unit
    def test_classify_unknown_size_by_position(self):
        result = classify_by_size([None, None, None])
        assert result == [
            TextClassification.PRIMARY,
            TextClassification.SECONDARY,
            TextClassification.TERTIARY,
        ]

    @pytest.mark.unit
    def test_set_uses_default_variant(self, host):
        slots = find_text_slots(host, host.get_node_by_id("10:1"))
        assert [s.node_id for s in slots] == ["10:3"]
        assert slots[0].classification == TextClassification.PRIMARY

    @pytest.mark.unit
    def test_hidden_leaf_is_kept(self, host):
        slots = find_text_slots(host, host.get_node_by_id("11:1"))
        assert [s.node_name for s in slots] == ["Label", "Value", "Helper"]
        assert slots[2].visible is False

    @pytest.mark.unit
    def test_unreadable_leaf_keeps_name(self, host):
        host.make_unreadable(host.get_node_by_id("11:2"))
        slots = find_text_slots(host, host.get_node_by_id("11:1"))
        assert slots[0].node_name == "Label"
        assert slots[0].characters is None
        assert slots[1].characters == ""


class TestScanner:
    """Tests for DesignSystemScanner."""

    @pytest.mark.unit
    def test_catalog_roots(self, host):
        assert is_catalog_root(host.get_node_by_id("10:1"))
        assert not is_catalog_root(host.get_node_by_id("10:2"))
        assert is_catalog_root(host.get_node_by_id("11:1"))
        assert not is_catalog_root(host.get_node_by_id("20:1"))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_scan_finds_sets_and_standalone_components(self, host):
        catalog = await DesignSystemScanner(host).scan()
        assert catalog.ids() == ["10:1", "11:1", "20:2"]
        assert host.pages_loaded

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_scan_records(self, host):
        catalog = await DesignSystemScanner(host).scan()

        button = catalog.get("10:1")
        assert button.suggested_type == "button"
        assert button.confidence == 0.95
        assert button.variant_groups == {"State": ["disabled", "enabled"]}
        assert button.page_context.page_name == "Components"
        assert button.page_context.is_current_page is True

        field = catalog.get("11:1")
        assert field.suggested_type == "input"
        assert field.variant_groups is None
        assert [s.classification for s in field.text_slots] == [
            TextClassification.SECONDARY,
            TextClassification.PRIMARY,
            TextClassification.SECONDARY,
        ]

        blob = catalog.get("20:2")
        assert blob.suggested_type == "unknown"
        assert blob.confidence <= 0.1
        assert blob.text_slots is None
        assert blob.page_context.is_current_page is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_progress_messages(self, host):
        reports: list[ScanProgress] = []
        await DesignSystemScanner(host, on_progress=reports.append).scan()

        assert reports[0] == ScanProgress(0, 2, "Initializing scan...")
        assert reports[1].status == 'Scanning page: "Components" (1/2)'
        assert reports[2].status == 'Scanning page: "Patterns" (2/2)'
        assert reports[-1] == ScanProgress(2, 2, "Scan complete! Found 3 components")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_component_failure_does_not_stop_scan(self, host, monkeypatch):
        scanner = DesignSystemScanner(host)
        original = scanner.analyze_component

        def flaky(node, page=None):
            if node.id == "11:1":
                raise RuntimeError("boom")
            return original(node, page)

        monkeypatch.setattr(scanner, "analyze_component", flaky)
        catalog = await scanner.scan()
        assert catalog.ids() == ["10:1", "20:2"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_document(self):
        catalog = await DesignSystemScanner(InMemoryDocumentHost()).scan()
        assert len(catalog) == 0
