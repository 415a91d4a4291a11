"""Plugin message contracts.

Requests arrive from the plugin UI as JSON objects tagged by ``type``. Each
request kind has a pydantic model; responses are plain dicts built with
:func:`response` so their keys match what the UI reads.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class RequestType(str, Enum):
    """Messages the UI sends to the plugin."""

    SCAN_DESIGN_SYSTEM = "scan-design-system"
    GENERATE_UI_FROM_JSON = "generate-ui-from-json"
    GENERATE_UI_FROM_PROMPT = "generate-ui-from-prompt"
    MODIFY_EXISTING_UI = "modify-existing-ui"
    MODIFY_UI_FROM_PROMPT = "modify-ui-from-prompt"
    UPDATE_COMPONENT_TYPE = "update-component-type"
    NAVIGATE_TO_COMPONENT = "navigate-to-component"
    GET_API_KEY = "get-api-key"
    SAVE_API_KEY = "save-api-key"
    CLEAR_API_KEY = "clear-api-key"
    GET_SAVED_SCAN = "get-saved-scan"
    GENERATE_LLM_PROMPT = "generate-llm-prompt"
    TEST_API_CONNECTION = "test-api-connection"
    CLEAR_STORAGE = "clear-storage"


class ResponseType(str, Enum):
    """Messages the plugin posts back to the UI."""

    SCAN_PROGRESS = "scan-progress"
    SCAN_RESULTS = "scan-results"
    UI_GENERATED_SUCCESS = "ui-generated-success"
    UI_MODIFIED_SUCCESS = "ui-modified-success"
    UI_GENERATION_ERROR = "ui-generation-error"
    COMPONENT_TYPE_UPDATED = "component-type-updated"
    API_KEY_FOUND = "api-key-found"
    API_KEY_NOT_FOUND = "api-key-not-found"
    API_KEY_ERROR = "api-key-error"
    API_KEY_SAVED = "api-key-saved"
    API_KEY_CLEARED = "api-key-cleared"
    API_KEY_LOADED = "api-key-loaded"
    SAVED_SCAN_LOADED = "saved-scan-loaded"
    NO_SAVED_SCAN = "no-saved-scan"
    LLM_PROMPT_GENERATED = "llm-prompt-generated"
    API_TEST_RESULT = "api-test-result"


class _Message(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Payloads
# =============================================================================


class PromptPayload(_Message):
    """Natural language generation request."""

    prompt: str = Field(min_length=1)
    platform: Literal["mobile", "desktop"] = "mobile"


class ModifyPayload(_Message):
    """Replace a frame's content with an edited layout."""

    modified_json: str | dict[str, Any] = Field(alias="modifiedJSON")
    frame_id: str


class ModifyPromptPayload(_Message):
    """Edit a rendered layout through the completion provider."""

    original_json: str | dict[str, Any] = Field(alias="originalJSON")
    modification_request: str = Field(min_length=1)
    frame_id: str


class ComponentTypePayload(_Message):
    component_id: str
    new_type: str = Field(min_length=1)


class LLMPromptPayload(_Message):
    request: str | None = None
    platform: Literal["mobile", "desktop"] = "mobile"


# =============================================================================
# Requests
# =============================================================================


class ScanDesignSystem(_Message):
    type: Literal["scan-design-system"]


class GenerateFromJSON(_Message):
    """Render a layout the user pasted or edited by hand."""

    type: Literal["generate-ui-from-json"]
    payload: str | dict[str, Any]


class GenerateFromPrompt(_Message):
    type: Literal["generate-ui-from-prompt"]
    payload: PromptPayload


class ModifyExistingUI(_Message):
    type: Literal["modify-existing-ui"]
    payload: ModifyPayload


class ModifyFromPrompt(_Message):
    type: Literal["modify-ui-from-prompt"]
    payload: ModifyPromptPayload


class UpdateComponentType(_Message):
    type: Literal["update-component-type"]
    payload: ComponentTypePayload


class NavigateToComponent(_Message):
    """Select a component, switching to its page when the name is given."""

    type: Literal["navigate-to-component"]
    component_id: str
    page_name: str | None = None


class GetAPIKey(_Message):
    type: Literal["get-api-key"]


class SaveAPIKey(_Message):
    type: Literal["save-api-key"]
    payload: str


class ClearAPIKey(_Message):
    type: Literal["clear-api-key"]


class GetSavedScan(_Message):
    type: Literal["get-saved-scan"]


class GenerateLLMPrompt(_Message):
    type: Literal["generate-llm-prompt"]
    payload: LLMPromptPayload = Field(default_factory=LLMPromptPayload)


class CheckAPIConnection(_Message):
    """Check a key (the given one, else the stored one) against the provider."""

    type: Literal["test-api-connection"]
    payload: str | None = None


class ClearStorage(_Message):
    type: Literal["clear-storage"]


PluginRequest = Annotated[
    Union[
        ScanDesignSystem,
        GenerateFromJSON,
        GenerateFromPrompt,
        ModifyExistingUI,
        ModifyFromPrompt,
        UpdateComponentType,
        NavigateToComponent,
        GetAPIKey,
        SaveAPIKey,
        ClearAPIKey,
        GetSavedScan,
        GenerateLLMPrompt,
        CheckAPIConnection,
        ClearStorage,
    ],
    Field(discriminator="type"),
]

_REQUEST_ADAPTER: TypeAdapter[Any] = TypeAdapter(PluginRequest)
KNOWN_REQUESTS = frozenset(t.value for t in RequestType)


def parse_request(data: dict[str, Any]) -> Any:
    """Validate a raw UI message into its request model.

    Raises:
        pydantic.ValidationError: If the message is malformed.
    """
    return _REQUEST_ADAPTER.validate_python(data)


def response(kind: ResponseType, **fields: Any) -> dict[str, Any]:
    """Build a UI message of the given kind."""
    return {"type": kind.value, **fields}


__all__ = [
    "KNOWN_REQUESTS",
    "CheckAPIConnection",
    "ClearAPIKey",
    "ClearStorage",
    "ComponentTypePayload",
    "GenerateFromJSON",
    "GenerateFromPrompt",
    "GenerateLLMPrompt",
    "GetAPIKey",
    "GetSavedScan",
    "LLMPromptPayload",
    "ModifyExistingUI",
    "ModifyFromPrompt",
    "ModifyPayload",
    "ModifyPromptPayload",
    "NavigateToComponent",
    "PluginRequest",
    "PromptPayload",
    "RequestType",
    "ResponseType",
    "SaveAPIKey",
    "ScanDesignSystem",
    "UpdateComponentType",
    "parse_request",
    "response",
]
