"""Layout JSON contract shared by the generator, the UI and the renderer."""

from .lib import (
    CONTAINER_TYPE,
    DEFAULT_FRAME_NAME,
    NATIVE_TYPES,
    ComponentItem,
    ContainerItem,
    ContainerSettings,
    LayoutDocument,
    LayoutItem,
    LayoutMode,
    LayoutParseError,
    NativeItem,
    Sizing,
    export_json_schema,
    parse_layout,
)

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
