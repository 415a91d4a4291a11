"""Layout JSON contract.

The layout document is the exchange format between the completion provider,
the plugin UI and the renderer. It is parsed exactly once, at the boundary,
into the typed tree defined here; everything downstream works on these models.

Shape::

    {
      "layoutContainer": {"name": ..., "layoutMode": "VERTICAL", ...},
      "items": [
        {"type": "layoutContainer", "layoutMode": "HORIZONTAL", "items": [...]},
        {"type": "native-text", "properties": {"content": "Hello"}},
        {"type": "button", "componentNodeId": "10:2", "properties": {...}}
      ]
    }
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

CONTAINER_TYPE = "layoutContainer"
NATIVE_TEXT_TYPES = ("native-text", "text")
NATIVE_SHAPE_TYPES = ("native-rectangle", "native-circle")
NATIVE_TYPES = NATIVE_TEXT_TYPES + NATIVE_SHAPE_TYPES

DEFAULT_FRAME_NAME = "Generated Frame"


class LayoutMode(str, Enum):
    """Auto-layout direction of a container."""

    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"
    NONE = "NONE"


class Sizing(str, Enum):
    """Sizing hint a child gives its parent container."""

    FILL = "FILL"
    HUG = "HUG"
    FIXED = "FIXED"


class LayoutParseError(ValueError):
    """Raised when a layout document does not match the contract.

    Attributes:
        errors: Flattened pydantic error list (may be empty for JSON errors).
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class _LayoutModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ContainerSettings(_LayoutModel):
    """Frame settings shared by the root container and nested containers.

    Attributes:
        name: Frame name shown in the layers panel.
        layout_mode: Auto-layout direction; unknown values collapse to NONE.
        width: Fixed width in pixels. None means the counter axis hugs content.
        padding_top: Top padding (applied only with auto-layout).
        padding_bottom: Bottom padding (applied only with auto-layout).
        padding_left: Left padding (applied only with auto-layout).
        padding_right: Right padding (applied only with auto-layout).
        item_spacing: Gap between children (applied only with auto-layout).
        horizontal_sizing: FILL asks the parent to stretch this frame.
    """

    name: str | None = None
    layout_mode: LayoutMode = LayoutMode.NONE
    width: float | None = None
    padding_top: float = 0
    padding_bottom: float = 0
    padding_left: float = 0
    padding_right: float = 0
    item_spacing: float = 0
    horizontal_sizing: str | None = None

    @field_validator("layout_mode", mode="before")
    @classmethod
    def _coerce_layout_mode(cls, value: Any) -> LayoutMode:
        if isinstance(value, LayoutMode):
            return value
        if isinstance(value, str) and value.upper() in ("HORIZONTAL", "VERTICAL"):
            return LayoutMode(value.upper())
        return LayoutMode.NONE

    @field_validator(
        "padding_top",
        "padding_bottom",
        "padding_left",
        "padding_right",
        "item_spacing",
        mode="before",
    )
    @classmethod
    def _number_or_zero(cls, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        return value

    @field_validator("width", mode="before")
    @classmethod
    def _positive_width(cls, value: Any) -> float | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value or None

    @property
    def fills_width(self) -> bool:
        return (self.horizontal_sizing or "").upper() == Sizing.FILL.value


class ContainerItem(ContainerSettings):
    """Nested auto-layout frame."""

    type: Literal["layoutContainer"] = CONTAINER_TYPE
    items: list[LayoutItem] = Field(default_factory=list)


class NativeItem(_LayoutModel):
    """Primitive drawn directly by the host (text, rectangle, circle).

    Attributes may live inside ``properties`` or on the item itself; both are
    merged by :meth:`attributes`, with ``properties`` taking precedence.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    type: Literal["native-text", "text", "native-rectangle", "native-circle"]
    properties: dict[str, Any] = Field(default_factory=dict)

    def attributes(self) -> dict[str, Any]:
        merged = dict(self.model_extra or {})
        merged.update(self.properties)
        return merged

    @property
    def is_text(self) -> bool:
        return self.type in NATIVE_TEXT_TYPES


class ComponentItem(_LayoutModel):
    """Reference to a design-system component by abstract type.

    Attributes:
        type: Abstract semantic tag ("button", "list-item", ...).
        component_node_id: Concrete host id, or a placeholder to be resolved.
        properties: Flat property bag; may embed a ``variants`` object.
    """

    type: str
    component_node_id: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @field_validator("component_node_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return str(value)


def _item_kind(value: Any) -> str:
    item_type = (
        value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    )
    if item_type == CONTAINER_TYPE:
        return "container"
    if item_type in NATIVE_TYPES:
        return "native"
    return "component"


LayoutItem = Annotated[
    Union[
        Annotated[ContainerItem, Tag("container")],
        Annotated[NativeItem, Tag("native")],
        Annotated[ComponentItem, Tag("component")],
    ],
    Discriminator(_item_kind),
]

ContainerItem.model_rebuild()


class LayoutDocument(_LayoutModel):
    """Top-level layout document.

    Attributes:
        layout_container: Settings of the generated root frame.
        items: Ordered children of the root frame.
    """

    layout_container: ContainerSettings = Field(default_factory=ContainerSettings)
    items: list[LayoutItem] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        """Dump back to the camelCase wire format."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def iter_components(self) -> list[ComponentItem]:
        """All component references in depth-first document order."""
        found: list[ComponentItem] = []
        _collect_components(self.items, found)
        return found


def _collect_components(items: list[Any], found: list[ComponentItem]) -> None:
    for item in items:
        if isinstance(item, ContainerItem):
            _collect_components(item.items, found)
        elif isinstance(item, ComponentItem):
            found.append(item)


def parse_layout(data: str | bytes | dict[str, Any]) -> LayoutDocument:
    """Parse raw layout JSON into a LayoutDocument.

    Items nested under ``layoutContainer`` are accepted when the top level
    carries none.

    Raises:
        LayoutParseError: If the payload is not JSON or violates the contract.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise LayoutParseError(f"Layout is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise LayoutParseError("Layout must be a JSON object")
    container = data.get("layoutContainer")
    if "items" not in data and isinstance(container, dict) and "items" in container:
        data = {**data, "items": container["items"]}
    if not isinstance(data.get("items"), list):
        raise LayoutParseError("Layout must contain an 'items' array")

    try:
        return LayoutDocument.model_validate(data)
    except ValidationError as e:
        raise LayoutParseError(
            f"Layout does not match the expected structure: {e.error_count()} error(s)",
            errors=e.errors(include_url=False),
        ) from e


def export_json_schema() -> dict[str, Any]:
    """Export the LayoutDocument JSON Schema (wire aliases)."""
    return LayoutDocument.model_json_schema(by_alias=True)


__all__ = [
    "CONTAINER_TYPE",
    "DEFAULT_FRAME_NAME",
    "NATIVE_TYPES",
    "ComponentItem",
    "ContainerItem",
    "ContainerSettings",
    "LayoutDocument",
    "LayoutItem",
    "LayoutMode",
    "LayoutParseError",
    "NativeItem",
    "Sizing",
    "export_json_schema",
    "parse_layout",
]
