"""Scene-graph node types.

Plain dataclasses mirroring the parts of a design tool's document model the
plugin touches: pages, frames, text, shapes, components, component sets and
instances. Hosts own node creation and id assignment; these classes only hold
state and offer tree queries.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeType(str, Enum):
    """Host node kinds."""

    PAGE = "PAGE"
    FRAME = "FRAME"
    TEXT = "TEXT"
    RECTANGLE = "RECTANGLE"
    ELLIPSE = "ELLIPSE"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    INSTANCE = "INSTANCE"


@dataclass(frozen=True)
class FontName:
    """Font family and style pair."""

    family: str
    style: str = "Regular"

    def to_dict(self) -> dict[str, str]:
        return {"family": self.family, "style": self.style}


@dataclass(eq=False)
class Node:
    """Base scene-graph node.

    Identity is by object; two nodes are never equal unless they are the same
    node.
    """

    id: str = ""
    name: str = ""
    visible: bool = True
    width: float = 100.0
    height: float = 100.0
    layout_align: str = "INHERIT"
    layout_grow: float = 0.0
    children: list[Node] = field(default_factory=list, repr=False)
    parent: Node | None = field(default=None, repr=False)

    type = NodeType.FRAME

    def iter_descendants(self) -> Iterator[Node]:
        """Depth-first pre-order walk, excluding self."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def find_all(self, predicate: Callable[[Node], bool]) -> list[Node]:
        return [node for node in self.iter_descendants() if predicate(node)]

    def find_text_nodes(self) -> list[TextNode]:
        return [node for node in self.iter_descendants() if isinstance(node, TextNode)]

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def page(self) -> PageNode | None:
        node: Node | None = self
        while node is not None and not isinstance(node, PageNode):
            node = node.parent
        return node

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, "id": self.id, "name": self.name}
        if not self.visible:
            data["visible"] = False
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass(eq=False)
class PageNode(Node):
    type = NodeType.PAGE


@dataclass(eq=False)
class FrameNode(Node):
    """Auto-layout capable frame."""

    layout_mode: str = "NONE"
    padding_top: float = 0.0
    padding_bottom: float = 0.0
    padding_left: float = 0.0
    padding_right: float = 0.0
    item_spacing: float = 0.0
    primary_axis_sizing_mode: str = "FIXED"
    counter_axis_sizing_mode: str = "FIXED"

    type = NodeType.FRAME

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["layoutMode"] = self.layout_mode
        if self.layout_mode != "NONE":
            data.update(
                paddingTop=self.padding_top,
                paddingBottom=self.padding_bottom,
                paddingLeft=self.padding_left,
                paddingRight=self.padding_right,
                itemSpacing=self.item_spacing,
            )
        return data


@dataclass(eq=False)
class TextNode(Node):
    """Text leaf.

    ``source_id`` is the id of the master leaf this node was cloned from when
    it lives inside an instance.
    """

    characters: str = ""
    font_name: FontName = field(default_factory=lambda: FontName("Inter"))
    font_size: float = 16.0
    text_align_horizontal: str = "LEFT"
    text_auto_resize: str = "WIDTH_AND_HEIGHT"
    source_id: str | None = None

    type = NodeType.TEXT

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            characters=self.characters,
            fontSize=self.font_size,
            fontName=self.font_name.to_dict(),
        )
        return data


@dataclass(eq=False)
class ShapeNode(Node):
    """Rectangle or ellipse."""

    kind: NodeType = NodeType.RECTANGLE
    fills: list[dict[str, Any]] = field(default_factory=list)
    corner_radius: float = 0.0

    @property
    def type(self) -> NodeType:  # type: ignore[override]
        return self.kind

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(width=self.width, height=self.height)
        if self.fills:
            data["fills"] = self.fills
        if self.corner_radius:
            data["cornerRadius"] = self.corner_radius
        return data


@dataclass(eq=False)
class ComponentNode(FrameNode):
    """Reusable master. Inside a set, ``name`` encodes variant values."""

    type = NodeType.COMPONENT

    @property
    def variant_properties(self) -> dict[str, str] | None:
        """Parse "Size=Large, State=Hover" names of set members."""
        if not isinstance(self.parent, ComponentSetNode):
            return None
        return parse_variant_name(self.name)


@dataclass(eq=False)
class ComponentSetNode(Node):
    """Group of variant components; the first child is the default variant."""

    type = NodeType.COMPONENT_SET

    @property
    def default_variant(self) -> ComponentNode | None:
        for child in self.children:
            if isinstance(child, ComponentNode):
                return child
        return None

    @property
    def variants(self) -> list[ComponentNode]:
        return [c for c in self.children if isinstance(c, ComponentNode)]

    @property
    def variant_group_properties(self) -> dict[str, list[str]]:
        """Axis name to values in first-seen order."""
        groups: dict[str, list[str]] = {}
        for variant in self.variants:
            for axis, value in (variant.variant_properties or {}).items():
                values = groups.setdefault(axis, [])
                if value not in values:
                    values.append(value)
        return groups


@dataclass(eq=False)
class InstanceNode(FrameNode):
    """Placed copy of a component."""

    main_component: ComponentNode | None = field(default=None, repr=False)

    type = NodeType.INSTANCE

    @property
    def variant_properties(self) -> dict[str, str] | None:
        if self.main_component is None:
            return None
        return self.main_component.variant_properties

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.main_component is not None:
            data["mainComponentId"] = self.main_component.id
        data["layoutAlign"] = self.layout_align
        data["layoutGrow"] = self.layout_grow
        return data


def parse_variant_name(name: str) -> dict[str, str]:
    """Parse a variant component name such as "Size=Large, State=Default"."""
    properties: dict[str, str] = {}
    for part in name.split(","):
        if "=" not in part:
            continue
        axis, value = part.split("=", 1)
        if axis.strip():
            properties[axis.strip()] = value.strip()
    return properties


def format_variant_name(properties: dict[str, str]) -> str:
    return ", ".join(f"{axis}={value}" for axis, value in properties.items())


__all__ = [
    "ComponentNode",
    "ComponentSetNode",
    "FontName",
    "FrameNode",
    "InstanceNode",
    "Node",
    "NodeType",
    "PageNode",
    "ShapeNode",
    "TextNode",
    "format_variant_name",
    "parse_variant_name",
]
