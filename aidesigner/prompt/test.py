"""Tests for PromptBuilder module."""

import json

import pytest

from aidesigner.catalog import Catalog, ComponentRecord, PageContext, TextSlot
from aidesigner.prompt import (
    JSON_ONLY_INSTRUCTION,
    Platform,
    PromptBuilder,
    PromptConfig,
)
from aidesigner.schema import parse_layout


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(
        [
            ComponentRecord(
                id="10:1",
                name="Button",
                suggested_type="button",
                confidence=0.95,
                variant_groups={"State": ["enabled", "disabled"]},
                text_slots=[TextSlot(node_name="Label", node_id="12:2")],
                page_context=PageContext(page_name="Kit", page_id="0:1"),
            ),
            ComponentRecord(
                id="10:2", name="Btn old", suggested_type="button", confidence=0.8
            ),
            ComponentRecord(
                id="10:3", name="Text Field", suggested_type="input", confidence=0.7
            ),
            ComponentRecord(
                id="10:4", name="Maybe card", suggested_type="card", confidence=0.5
            ),
            ComponentRecord(id="10:5", name="Blob"),
        ]
    )


class TestPromptConfig:
    """Tests for PromptConfig dataclass."""

    @pytest.mark.unit
    def test_default_config(self):
        config = PromptConfig()
        assert config.platform == Platform.MOBILE
        assert config.min_confidence == 0.7
        assert config.include_structure_guide is True
        assert config.include_guidance is True


class TestPromptBuilder:
    """Tests for PromptBuilder class."""

    @pytest.mark.unit
    def test_best_component_per_type(self, catalog):
        selected = PromptBuilder().select_components(catalog)
        assert {t: r.id for t, r in selected.items()} == {"button": "10:1", "input": "10:3"}

    @pytest.mark.unit
    def test_build_lists_catalog_details(self, catalog):
        prompt, context = PromptBuilder().build_with_context("login form", catalog)

        assert '"10:1"' in prompt
        assert '"10:3"' in prompt
        assert '"10:4"' not in prompt  # below threshold
        assert '"10:2"' not in prompt  # not the best button
        assert '- State: ["disabled", "enabled"]' in prompt
        assert 'Text layers: "Label"' in prompt
        assert "Page: Kit" in prompt
        assert '"login form"' in prompt
        assert prompt.endswith(JSON_ONLY_INSTRUCTION)
        assert context.component_ids == ["10:1", "10:3"]
        assert context.total_tokens_estimate == len(prompt) // 4

    @pytest.mark.unit
    def test_groups_by_purpose(self, catalog):
        prompt = PromptBuilder().build("screen", catalog)
        assert prompt.index("### User Actions") < prompt.index("### Data Input")

    @pytest.mark.unit
    def test_verified_component_is_offered(self, catalog):
        catalog.update_type("10:4", "card")
        prompt = PromptBuilder().build("screen", catalog)
        assert '"10:4"' in prompt

    @pytest.mark.unit
    def test_empty_catalog(self):
        prompt = PromptBuilder().build("login", Catalog())
        assert "Design system not loaded" in prompt

    @pytest.mark.unit
    def test_guidance(self, catalog):
        _, context = PromptBuilder().build_with_context("a settings page", catalog)
        assert any("trailing-text" in tip for tip in context.guidance)

        config = PromptConfig(include_guidance=False)
        _, context = PromptBuilder(config).build_with_context("a settings page", catalog)
        assert context.guidance == []

    @pytest.mark.unit
    def test_structure_guide_toggle(self, catalog):
        assert "layoutContainer" in PromptBuilder().build("x", catalog)
        config = PromptConfig(include_structure_guide=False)
        assert "JSON Structure & Rules" not in PromptBuilder(config).build("x", catalog)

    @pytest.mark.unit
    def test_desktop_platform(self, catalog):
        prompt = PromptBuilder(PromptConfig(platform=Platform.DESKTOP)).build("x", catalog)
        assert "Desktop" in prompt

    @pytest.mark.unit
    def test_modification_embeds_current_layout(self, catalog):
        layout = parse_layout(
            {
                "layoutContainer": {"name": "Login", "layoutMode": "VERTICAL"},
                "items": [{"type": "button", "componentNodeId": "10:1"}],
            }
        )
        prompt = PromptBuilder().build_modification(layout, "add a title", catalog)

        assert json.dumps(layout.to_json_dict(), indent=2) in prompt
        assert '"add a title"' in prompt
        assert "Maintain component ids" in prompt
        assert prompt.endswith(JSON_ONLY_INSTRUCTION)

    @pytest.mark.unit
    def test_catalog_prompt_sorted_by_type(self, catalog):
        prompt = PromptBuilder().build_catalog_prompt(catalog)

        assert prompt.index("### BUTTON") < prompt.index("### INPUT")
        assert '"10:1"' in prompt
        assert '"10:2"' not in prompt
        assert "JSON Structure & Rules" in prompt
