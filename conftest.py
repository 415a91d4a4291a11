"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Auto-skip for tests that call a real completion provider
- The shared component kit used by render and plugin tests
"""

from __future__ import annotations

from typing import Any

import pytest
from dotenv import load_dotenv

from aidesigner.catalog import Catalog, ComponentRecord, TextClassification, TextSlot
from aidesigner.config import EnvVar, get_environment
from aidesigner.host import InMemoryDocumentHost

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Configuration Constants
# =============================================================================

PROVIDER_KEYS = {
    "gemini": EnvVar.GEMINI_API_KEY,
    "openai": EnvVar.OPENAI_API_KEY,
    "anthropic": EnvVar.ANTHROPIC_API_KEY,
}


def _has_provider_key() -> bool:
    """Check if the configured completion provider has an API key."""
    provider = (get_environment(EnvVar.LLM_PROVIDER) or "").lower()
    env_var = PROVIDER_KEYS.get(provider)
    return env_var is not None and bool(get_environment(env_var))


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """Auto-skip tests marked live when no provider API key is configured."""
    if _has_provider_key():
        return

    skip_live = pytest.mark.skip(reason="No API key for the configured provider")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


# =============================================================================
# Component Kit Fixtures
# =============================================================================


@pytest.fixture
def kit_host() -> InMemoryDocumentHost:
    """Document with a small component kit and an empty "Screens" page.

    Layout:
        10:1 Header (component) with text "Title"
        10:2 Button (set): State=disabled (default, 12:1), State=enabled (12:3),
             each with a "Label" text leaf
        10:3 List Item (component) with "Headline", hidden "Supporting text"
             and "Trailing" leaves
        10:9 Plain Frame (not a component)
    """
    host = InMemoryDocumentHost(fingerprint="kit")
    page = host.add_page("Components", node_id="0:1")

    header = host.add_component(page, "Header", node_id="10:1")
    host.add_text(header, "Title", "Page title", font_size=20, node_id="11:1")

    button = host.add_component_set(page, "Button", node_id="10:2")
    disabled = host.add_variant(button, {"State": "disabled"}, "12:1")
    host.add_text(disabled, "Label", "Button", node_id="12:2")
    enabled = host.add_variant(button, {"State": "enabled"}, "12:3")
    host.add_text(enabled, "Label", "Button", node_id="12:4")

    item = host.add_component(page, "List Item", node_id="10:3")
    host.add_text(item, "Headline", "Headline", font_size=16, node_id="13:1")
    host.add_text(
        item, "Supporting text", "", font_size=14, visible=False, node_id="13:2"
    )
    host.add_text(item, "Trailing", "", font_size=12, node_id="13:3")

    host.add_frame(page, "Plain Frame", node_id="10:9")

    screens = host.add_page("Screens", node_id="0:2")
    host.set_current_page(screens)
    return host


@pytest.fixture
def kit_catalog() -> Catalog:
    """Catalog matching kit_host, as a scan would produce it."""
    primary = TextClassification.PRIMARY
    return Catalog(
        [
            ComponentRecord(
                id="10:1",
                name="Header",
                suggested_type="appbar",
                confidence=0.7,
                text_slots=[TextSlot(node_name="Title", node_id="11:1", classification=primary)],
            ),
            ComponentRecord(
                id="10:2",
                name="Button",
                suggested_type="button",
                confidence=0.95,
                variant_groups={"State": ["disabled", "enabled"]},
                text_slots=[TextSlot(node_name="Label", node_id="12:2", classification=primary)],
            ),
            ComponentRecord(
                id="10:3",
                name="List Item",
                suggested_type="list-item",
                confidence=0.7,
                text_slots=[
                    TextSlot(node_name="Headline", node_id="13:1", classification=primary),
                    TextSlot(
                        node_name="Supporting text",
                        node_id="13:2",
                        classification=TextClassification.SECONDARY,
                        visible=False,
                    ),
                    TextSlot(
                        node_name="Trailing",
                        node_id="13:3",
                        classification=TextClassification.TERTIARY,
                    ),
                ],
            ),
        ]
    )


@pytest.fixture
def login_layout() -> dict[str, Any]:
    """Vertical login screen with a header and a button."""
    return {
        "layoutContainer": {
            "name": "Login",
            "layoutMode": "VERTICAL",
            "width": 360,
            "itemSpacing": 20,
        },
        "items": [
            {"type": "header", "componentNodeId": "10:1", "properties": {"text": "Sign In"}},
            {
                "type": "button",
                "componentNodeId": "10:2",
                "properties": {"text": "Sign In", "variants": {"State": "enabled"}},
            },
        ],
    }
