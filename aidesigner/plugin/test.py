"""Tests for the plugin message surface.

Covers:
- Request parsing and response envelopes
- PluginController: every request type over the in-memory host
"""

import pytest
from pydantic import ValidationError

from aidesigner.host import FrameNode
from aidesigner.llm import AuthenticationError
from aidesigner.llm.backend.base import CONNECTION_TEST_REPLY, RateLimitError
from aidesigner.session import API_KEY_KEY

from .lib import NO_API_KEY_MESSAGE, PluginController
from .messages import (
    CheckAPIConnection,
    GenerateFromJSON,
    GenerateLLMPrompt,
    ModifyFromPrompt,
    NavigateToComponent,
    ResponseType,
    parse_request,
    response,
)

MODIFIED_REPLY = """{
    "layoutContainer": {"name": "Login", "layoutMode": "VERTICAL"},
    "items": [{"type": "button", "componentNodeId": "10:2", "properties": {"text": "Continue"}}]
}"""


def no_key_factory(api_key):
    raise AuthenticationError("API key not found")


# =============================================================================
# Messages
# =============================================================================


class TestMessages:
    """Tests for request contracts."""

    @pytest.mark.unit
    def test_parse_json_request(self, login_layout):
        request = parse_request({"type": "generate-ui-from-json", "payload": login_layout})
        assert isinstance(request, GenerateFromJSON)
        assert request.payload["layoutContainer"]["name"] == "Login"

    @pytest.mark.unit
    def test_parse_camel_case_fields(self):
        request = parse_request(
            {
                "type": "modify-ui-from-prompt",
                "payload": {
                    "originalJSON": "{}",
                    "modificationRequest": "make it blue",
                    "frameId": "900:1",
                },
            }
        )
        assert isinstance(request, ModifyFromPrompt)
        assert request.payload.frame_id == "900:1"
        assert request.payload.modification_request == "make it blue"

    @pytest.mark.unit
    def test_navigation_fields_are_top_level(self):
        request = parse_request(
            {"type": "navigate-to-component", "componentId": "10:2", "pageName": "Kit"}
        )
        assert isinstance(request, NavigateToComponent)
        assert request.component_id == "10:2"
        assert request.page_name == "Kit"

    @pytest.mark.unit
    def test_defaults(self):
        assert isinstance(parse_request({"type": "generate-llm-prompt"}), GenerateLLMPrompt)
        request = parse_request({"type": "test-api-connection"})
        assert isinstance(request, CheckAPIConnection)
        assert request.payload is None

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "message",
        [
            {"type": "generate-ui-from-prompt", "payload": {"prompt": ""}},
            {"type": "update-component-type", "payload": {"componentId": "10:1"}},
            {"type": "no-such-request"},
        ],
    )
    def test_invalid_requests(self, message):
        with pytest.raises(ValidationError):
            parse_request(message)

    @pytest.mark.unit
    def test_response_envelope(self):
        assert response(ResponseType.API_KEY_SAVED) == {"type": "api-key-saved"}
        assert response(ResponseType.API_KEY_FOUND, payload="k") == {
            "type": "api-key-found",
            "payload": "k",
        }


# =============================================================================
# Controller: dispatch
# =============================================================================


class TestDispatch:
    """Tests for message routing."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_type_is_ignored(self, controller, outbox, kit_host):
        await controller.handle({"type": "resize-window", "width": 400})
        await controller.handle({})
        assert outbox == []
        assert kit_host.notifications == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_malformed_generation_request(self, controller, outbox, kit_host):
        await controller.handle({"type": "generate-ui-from-prompt", "payload": {"prompt": ""}})

        assert outbox.types == ["ui-generation-error"]
        assert kit_host.notifications[-1].is_error

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_malformed_other_request_only_notifies(self, controller, outbox, kit_host):
        await controller.handle({"type": "update-component-type", "payload": {}})

        assert outbox == []
        assert kit_host.notifications[-1].is_error


# =============================================================================
# Controller: scanning and catalog
# =============================================================================


class TestScanning:
    """Tests for scan, saved scan and type overrides."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_scan_reports_progress_and_saves(self, controller, outbox):
        await controller.handle({"type": "scan-design-system"})

        progress = outbox.of_type("scan-progress")
        assert progress[0]["current"] == 0
        assert progress[-1]["current"] == progress[-1]["total"] == 2
        assert outbox.types[-1] == "scan-results"
        ids = [c["id"] for c in outbox[-1]["components"]]
        assert {"10:1", "10:2", "10:3"} <= set(ids)
        assert "10:9" not in ids

        await controller.handle({"type": "get-saved-scan"})
        saved = outbox[-1]
        assert saved["type"] == "saved-scan-loaded"
        assert [c["id"] for c in saved["components"]] == ids
        assert isinstance(saved["scanTime"], str)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_saved_scan(self, controller, outbox):
        await controller.handle({"type": "get-saved-scan"})
        assert outbox.types == ["no-saved-scan"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_update_component_type(self, controller, outbox, kit_catalog):
        await controller.session.save_catalog(kit_catalog)

        await controller.handle(
            {
                "type": "update-component-type",
                "payload": {"componentId": "10:3", "newType": "card"},
            }
        )

        assert outbox[-1] == {
            "type": "component-type-updated",
            "componentId": "10:3",
            "newType": "card",
            "componentName": "List Item",
        }
        record = (await controller.session.current_catalog()).get("10:3")
        assert record.is_verified

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_update_unknown_component(self, controller, outbox, kit_host, kit_catalog):
        await controller.session.save_catalog(kit_catalog)

        await controller.handle(
            {
                "type": "update-component-type",
                "payload": {"componentId": "99:9", "newType": "card"},
            }
        )

        assert outbox == []
        assert kit_host.notifications[-1].message == "Error updating type"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_navigate_switches_page(self, controller, kit_host):
        await controller.handle(
            {"type": "navigate-to-component", "componentId": "10:2", "pageName": "Components"}
        )

        node = kit_host.get_node_by_id("10:2")
        assert kit_host.current_page.name == "Components"
        assert kit_host.selection == [node]
        assert kit_host.notifications[-1].message == "Navigated to: Button"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_navigate_to_missing_component(self, controller, kit_host):
        await controller.handle({"type": "navigate-to-component", "componentId": "77:7"})

        assert kit_host.notifications[-1].message == "Component not found"
        assert kit_host.notifications[-1].is_error


# =============================================================================
# Controller: rendering
# =============================================================================


class TestRendering:
    """Tests for JSON and prompt driven rendering."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_generate_from_json(self, controller, outbox, kit_host, kit_catalog, login_layout):
        await controller.session.save_catalog(kit_catalog)

        await controller.handle({"type": "generate-ui-from-json", "payload": login_layout})

        message = outbox[-1]
        assert message["type"] == "ui-generated-success"
        frame = kit_host.get_node_by_id(message["frameId"])
        assert isinstance(frame, FrameNode)
        assert frame.name == "Login"
        assert frame.parent is kit_host.current_page
        assert len(frame.children) == 2
        assert message["generatedJSON"]["layoutContainer"]["name"] == "Login"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generate_from_bad_json(self, controller, outbox, kit_host):
        await controller.handle({"type": "generate-ui-from-json", "payload": "{not json"})

        assert outbox.types == ["ui-generation-error"]
        assert kit_host.notifications[-1].message.startswith("JSON parsing error")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unresolvable_type_creates_nothing(self, controller, outbox, kit_host, kit_catalog):
        await controller.session.save_catalog(kit_catalog)
        layout = {
            "layoutContainer": {"name": "Broken"},
            "items": [{"type": "carousel", "componentNodeId": "carousel_id"}],
        }

        await controller.handle({"type": "generate-ui-from-json", "payload": layout})

        assert outbox.types == ["ui-generation-error"]
        assert "carousel" in outbox[-1]["error"]
        assert kit_host.current_page.children == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_generate_from_prompt(
        self, controller, outbox, kit_host, kit_catalog, scripted_provider
    ):
        await controller.session.save_catalog(kit_catalog)
        await controller.session.save_api_key("key")

        await controller.handle(
            {"type": "generate-ui-from-prompt", "payload": {"prompt": "login screen"}}
        )

        message = outbox[-1]
        assert message["type"] == "ui-generated-success"
        assert message["retryCount"] == 0
        assert kit_host.get_node_by_id(message["frameId"]).name == "Login"
        assert '"login screen"' in scripted_provider.calls[0]["prompt"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generate_from_prompt_without_key(self, kit_host, store, outbox):
        controller = PluginController(
            kit_host, store, outbox.append, provider_factory=no_key_factory
        )

        await controller.handle(
            {"type": "generate-ui-from-prompt", "payload": {"prompt": "login screen"}}
        )

        assert outbox.types == ["ui-generation-error"]
        assert kit_host.notifications[-1].is_error

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_modify_existing(self, controller, outbox, kit_host, kit_catalog, login_layout):
        await controller.session.save_catalog(kit_catalog)
        await controller.handle({"type": "generate-ui-from-json", "payload": login_layout})
        frame_id = outbox[-1]["frameId"]

        login_layout["items"] = login_layout["items"][1:]
        await controller.handle(
            {
                "type": "modify-existing-ui",
                "payload": {"modifiedJSON": login_layout, "frameId": frame_id},
            }
        )

        message = outbox[-1]
        assert message["type"] == "ui-modified-success"
        assert message["frameId"] == frame_id
        assert len(kit_host.get_node_by_id(frame_id).children) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_modify_missing_frame(self, controller, outbox, login_layout):
        await controller.handle(
            {
                "type": "modify-existing-ui",
                "payload": {"modifiedJSON": login_layout, "frameId": "404:1"},
            }
        )

        assert outbox.types == ["ui-generation-error"]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_modify_from_prompt(
        self, controller, outbox, kit_host, kit_catalog, login_layout, scripted_provider
    ):
        await controller.session.save_catalog(kit_catalog)
        await controller.handle({"type": "generate-ui-from-json", "payload": login_layout})
        frame_id = outbox[-1]["frameId"]
        scripted_provider.replies.append(MODIFIED_REPLY)

        await controller.handle(
            {
                "type": "modify-ui-from-prompt",
                "payload": {
                    "originalJSON": login_layout,
                    "modificationRequest": "only keep the button",
                    "frameId": frame_id,
                },
            }
        )

        message = outbox[-1]
        assert message["type"] == "ui-modified-success"
        assert message["modifiedJSON"]["items"][0]["properties"]["text"] == "Continue"
        assert len(kit_host.get_node_by_id(frame_id).children) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_provider_failure_is_reported(
        self, controller, outbox, kit_catalog, scripted_provider
    ):
        await controller.session.save_catalog(kit_catalog)
        scripted_provider.replies.extend([AuthenticationError("bad key")])

        await controller.handle(
            {"type": "generate-ui-from-prompt", "payload": {"prompt": "login"}}
        )

        assert outbox.types == ["ui-generation-error"]
        assert outbox[-1]["error"] == "bad key"


# =============================================================================
# Controller: prompts and API connection
# =============================================================================


class TestPromptsAndConnection:
    """Tests for prompt export and connection checks."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_llm_prompt_needs_scan(self, controller, outbox, kit_host):
        await controller.handle({"type": "generate-llm-prompt"})

        assert outbox == []
        assert kit_host.notifications[-1].message == "Scan components first"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_llm_prompt(self, controller, outbox, kit_catalog):
        await controller.session.save_catalog(kit_catalog)

        await controller.handle({"type": "generate-llm-prompt"})

        message = outbox[-1]
        assert message["type"] == "llm-prompt-generated"
        assert "### BUTTON" in message["prompt"]
        assert 'componentNodeId: "10:2"' in message["prompt"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_llm_prompt_with_request(self, controller, outbox, kit_catalog):
        await controller.session.save_catalog(kit_catalog)

        await controller.handle(
            {"type": "generate-llm-prompt", "payload": {"request": "settings page"}}
        )

        assert '"settings page"' in outbox[-1]["prompt"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connection_success(self, controller, outbox, kit_host, scripted_provider):
        scripted_provider.replies.append(CONNECTION_TEST_REPLY)

        await controller.handle({"type": "test-api-connection", "payload": "key"})

        assert outbox[-1] == {"type": "api-test-result", "success": True, "error": None}
        assert not kit_host.notifications[-1].is_error

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connection_failure(self, controller, outbox, kit_host, scripted_provider):
        scripted_provider.replies.append(RateLimitError("slow down"))

        await controller.handle({"type": "test-api-connection", "payload": "key"})

        assert outbox[-1]["success"] is False
        assert outbox[-1]["error"] == "Connection test failed"
        assert kit_host.notifications[-1].is_error

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connection_without_key(self, kit_host, store, outbox):
        controller = PluginController(
            kit_host, store, outbox.append, provider_factory=no_key_factory
        )

        await controller.handle({"type": "test-api-connection"})

        assert outbox[-1] == {
            "type": "api-test-result",
            "success": False,
            "error": NO_API_KEY_MESSAGE,
        }


# =============================================================================
# Controller: API key and storage
# =============================================================================


class TestStorage:
    """Tests for API key handling and storage reset."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_api_key_lifecycle(self, controller, outbox):
        await controller.handle({"type": "get-api-key"})
        await controller.handle({"type": "save-api-key", "payload": "  secret  "})
        await controller.handle({"type": "get-api-key"})
        await controller.handle({"type": "clear-api-key"})
        await controller.handle({"type": "get-api-key"})

        assert outbox.types == [
            "api-key-not-found",
            "api-key-saved",
            "api-key-found",
            "api-key-cleared",
            "api-key-not-found",
        ]
        assert outbox[2]["payload"] == "secret"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_initialize_announces_saved_state(self, controller, outbox, kit_catalog):
        await controller.session.save_api_key("secret")
        await controller.session.save_catalog(kit_catalog)

        await controller.initialize()

        assert outbox.types == ["api-key-loaded", "saved-scan-loaded"]
        assert len(outbox[1]["components"]) == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_initialize_with_empty_storage(self, controller, outbox):
        await controller.initialize()
        assert outbox == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clear_storage(self, controller, store, kit_host, kit_catalog):
        await controller.session.save_api_key("secret")
        await controller.session.save_catalog(kit_catalog)

        await controller.handle({"type": "clear-storage"})

        assert API_KEY_KEY not in store.values
        assert await controller.session.load_catalog() is None
        assert kit_host.notifications[-1].message == "Storage cleared"
