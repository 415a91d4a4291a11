"""Document host abstraction and an in-memory implementation."""

from .memory import DEFAULT_FONTS, InMemoryDocumentHost, Notification
from .nodes import (
    ComponentNode,
    ComponentSetNode,
    FontName,
    FrameNode,
    InstanceNode,
    Node,
    NodeType,
    PageNode,
    ShapeNode,
    TextNode,
    format_variant_name,
    parse_variant_name,
)
from .protocol import DocumentHost, FontLoadError, HostError

__all__ = [
    # Protocol
    "DocumentHost",
    "HostError",
    "FontLoadError",
    # In-memory implementation
    "InMemoryDocumentHost",
    "Notification",
    "DEFAULT_FONTS",
    # Nodes
    "Node",
    "NodeType",
    "PageNode",
    "FrameNode",
    "TextNode",
    "ShapeNode",
    "ComponentNode",
    "ComponentSetNode",
    "InstanceNode",
    "FontName",
    "format_variant_name",
    "parse_variant_name",
]
