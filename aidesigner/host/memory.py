"""In-memory document host.

A complete DocumentHost over plain node objects. Used by the test-suite and
the CLI, which load documents from JSON snapshots. Builder helpers take
explicit ids so fixtures can mirror real documents ("10:2"); nodes created
by the renderer get generated ids of the same shape.
"""

import asyncio
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

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
)
from .protocol import FontLoadError, HostError

logger = logging.getLogger(__name__)

DEFAULT_FONTS: tuple[FontName, ...] = (
    FontName("Inter", "Regular"),
    FontName("Inter", "Medium"),
    FontName("Inter", "Semi Bold"),
    FontName("Inter", "Bold"),
)


@dataclass
class Notification:
    """A message shown to the user."""

    message: str
    is_error: bool = False


class InMemoryDocumentHost:
    """DocumentHost backed by Python objects.

    Args:
        fingerprint: Document identifier reported to the session layer.
        available_fonts: Fonts that load successfully. Defaults to Inter.
        id_base: Page component of generated ids.

    Example:
        >>> host = InMemoryDocumentHost()
        >>> page = host.add_page("Components", node_id="0:1")
        >>> button = host.add_component(page, "Button", node_id="10:1")
        >>> host.add_text(button, "Label", "Click me", node_id="10:2")
    """

    def __init__(
        self,
        fingerprint: str | None = "local-document",
        available_fonts: tuple[FontName, ...] | list[FontName] = DEFAULT_FONTS,
        id_base: int = 900,
    ):
        self._fingerprint = fingerprint
        self._pages: list[PageNode] = []
        self._current_page: PageNode | None = None
        self._nodes: dict[str, Node] = {}
        self._counter = itertools.count(1)
        self._id_base = id_base
        self._available_fonts: set[FontName] = set(available_fonts)
        self._loaded_fonts: set[FontName] = set()
        self._unreadable_ids: set[str] = set()

        self.pages_loaded = False
        self.selection: list[Node] = []
        self.focused: Node | None = None
        self.notifications: list[Notification] = []

    # =========================================================================
    # Document
    # =========================================================================

    @property
    def pages(self) -> list[PageNode]:
        return list(self._pages)

    @property
    def current_page(self) -> PageNode:
        if self._current_page is None:
            self._current_page = self.add_page("Page 1")
        return self._current_page

    @property
    def document_fingerprint(self) -> str | None:
        return self._fingerprint

    async def load_all_pages(self) -> None:
        await asyncio.sleep(0)
        self.pages_loaded = True

    def set_current_page(self, page: PageNode) -> None:
        if page not in self._pages:
            raise HostError(f"Page {page.id} is not part of this document")
        self._current_page = page

    def get_node_by_id(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def find_all(self, root: Node, predicate: Callable[[Node], bool]) -> list[Node]:
        return root.find_all(predicate)

    # =========================================================================
    # Node creation and tree edits
    # =========================================================================

    def create_frame(self) -> FrameNode:
        return self._register(FrameNode(name="Frame"))

    def create_text(self) -> TextNode:
        return self._register(TextNode(name="Text", font_name=FontName("Inter")))

    def create_shape(self, kind: str) -> ShapeNode:
        try:
            node_type = NodeType(kind.upper())
        except ValueError:
            raise HostError(f"Unsupported shape kind: {kind}") from None
        if node_type not in (NodeType.RECTANGLE, NodeType.ELLIPSE):
            raise HostError(f"Unsupported shape kind: {kind}")
        return self._register(ShapeNode(name=node_type.value.title(), kind=node_type))

    def instantiate_component(self, master: ComponentNode) -> InstanceNode:
        if not isinstance(master, ComponentNode):
            raise HostError(f"Node {master.id} is not a component")
        instance = self._register(
            InstanceNode(
                name=master.name,
                main_component=master,
                width=master.width,
                height=master.height,
                layout_mode=master.layout_mode,
            )
        )
        self._populate_instance(instance, master)
        return instance

    def append_child(self, parent: Node, child: Node) -> None:
        if isinstance(child, PageNode):
            raise HostError("Pages cannot be nested")
        if child is parent or child in _ancestors(parent):
            raise HostError("Cannot append a node into its own subtree")
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = parent
        parent.children.append(child)

    def remove_node(self, node: Node) -> None:
        if node.parent is not None:
            node.parent.children.remove(node)
            node.parent = None
        self._unregister(node)

    def detach(self, node: Node) -> None:
        """Remove a node from its parent but keep it addressable."""
        if node.parent is not None:
            node.parent.children.remove(node)
            node.parent = None

    # =========================================================================
    # Components
    # =========================================================================

    def get_main_component(self, instance: InstanceNode) -> ComponentNode | None:
        return instance.main_component

    def set_instance_variants(
        self, instance: InstanceNode, values: dict[str, str]
    ) -> None:
        main = instance.main_component
        component_set = main.parent if main is not None else None
        if not isinstance(component_set, ComponentSetNode):
            raise HostError(f"Instance {instance.id} is not a variant instance")

        target = dict(main.variant_properties or {})
        target.update(values)
        for variant in component_set.variants:
            if variant.variant_properties == target:
                if variant is not main:
                    self._swap(instance, variant)
                return
        raise HostError(
            f"No variant of '{component_set.name}' matches {format_variant_name(target)}"
        )

    # =========================================================================
    # Text
    # =========================================================================

    async def load_font(self, font: FontName) -> None:
        await asyncio.sleep(0)
        if font not in self._available_fonts:
            raise FontLoadError(
                f"Font '{font.family} {font.style}' is not available", font=font
            )
        self._loaded_fonts.add(font)

    def read_characters(self, node: TextNode) -> str:
        if node.id in self._unreadable_ids:
            raise FontLoadError(f"Cannot read text of {node.id}", font=node.font_name)
        return node.characters

    def set_characters(self, node: TextNode, characters: str) -> None:
        if node.font_name not in self._loaded_fonts:
            raise FontLoadError(
                f"Font '{node.font_name.family} {node.font_name.style}' not loaded",
                font=node.font_name,
            )
        node.characters = characters

    def is_font_loaded(self, font: FontName) -> bool:
        return font in self._loaded_fonts

    # =========================================================================
    # User feedback
    # =========================================================================

    def set_selection_and_focus(self, node: Node) -> None:
        page = node.page()
        if page is not None and page is not self._current_page:
            self.set_current_page(page)
        self.selection = [node]
        self.focused = node

    def notify(self, message: str, is_error: bool = False) -> None:
        self.notifications.append(Notification(message, is_error))
        if is_error:
            logger.warning(f"Notify (error): {message}")
        else:
            logger.info(f"Notify: {message}")

    # =========================================================================
    # Builders
    # =========================================================================

    def add_page(self, name: str, node_id: str | None = None) -> PageNode:
        page = self._register(PageNode(name=name), node_id)
        self._pages.append(page)
        if self._current_page is None:
            self._current_page = page
        return page

    def add_frame(self, parent: Node, name: str, node_id: str | None = None) -> FrameNode:
        return self._add(parent, FrameNode(name=name), node_id)

    def add_component(
        self, parent: Node, name: str, node_id: str | None = None
    ) -> ComponentNode:
        return self._add(parent, ComponentNode(name=name), node_id)

    def add_component_set(
        self, parent: Node, name: str, node_id: str | None = None
    ) -> ComponentSetNode:
        return self._add(parent, ComponentSetNode(name=name), node_id)

    def add_variant(
        self,
        component_set: ComponentSetNode,
        properties: dict[str, str],
        node_id: str | None = None,
    ) -> ComponentNode:
        """Add a member to a set; the first member is the default variant."""
        return self.add_component(
            component_set, format_variant_name(properties), node_id
        )

    def add_text(
        self,
        parent: Node,
        name: str,
        characters: str = "",
        *,
        font_size: float = 16.0,
        font: FontName | None = None,
        visible: bool = True,
        node_id: str | None = None,
    ) -> TextNode:
        node = TextNode(
            name=name,
            characters=characters,
            font_size=font_size,
            font_name=font or FontName("Inter"),
            visible=visible,
        )
        return self._add(parent, node, node_id)

    def add_instance(
        self, parent: Node, master: ComponentNode, node_id: str | None = None
    ) -> InstanceNode:
        instance = self._register(
            InstanceNode(name=master.name, main_component=master), node_id
        )
        self._populate_instance(instance, master)
        self.append_child(parent, instance)
        return instance

    def make_unreadable(self, node: TextNode) -> None:
        """Simulate a text leaf whose content cannot be read."""
        self._unreadable_ids.add(node.id)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        return {
            "fingerprint": self._fingerprint,
            "currentPageId": self._current_page.id if self._current_page else None,
            "pages": [page.to_dict() for page in self._pages],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InMemoryDocumentHost":
        """Build a host from a snapshot produced by :meth:`to_dict`.

        Instances are created after every component exists, so they may
        reference masters anywhere in the document.
        """
        fonts = [
            FontName(f["family"], f.get("style", "Regular"))
            for f in data.get("fonts", [])
        ]
        host = cls(
            fingerprint=data.get("fingerprint", "local-document"),
            available_fonts=fonts or DEFAULT_FONTS,
        )
        deferred: list[tuple[Node, dict[str, Any]]] = []
        for page_data in data.get("pages", []):
            page = host.add_page(page_data.get("name", "Page"), page_data.get("id"))
            for child in page_data.get("children", []):
                host._load_node(page, child, deferred)

        for parent, node_data in deferred:
            master = host.get_node_by_id(node_data.get("mainComponentId", ""))
            if not isinstance(master, ComponentNode):
                raise HostError(
                    f"Instance {node_data.get('id')} references unknown component "
                    f"{node_data.get('mainComponentId')}"
                )
            host.add_instance(parent, master, node_data.get("id"))

        current = host.get_node_by_id(data.get("currentPageId") or "")
        if isinstance(current, PageNode):
            host.set_current_page(current)
        return host

    def _load_node(
        self,
        parent: Node,
        data: dict[str, Any],
        deferred: list[tuple[Node, dict[str, Any]]],
    ) -> None:
        node_type = data.get("type", "FRAME")
        node_id = data.get("id")
        name = data.get("name", "")

        if node_type == NodeType.INSTANCE.value:
            deferred.append((parent, data))
            return

        node: Node
        if node_type == NodeType.TEXT.value:
            font = data.get("fontName") or {}
            node = self.add_text(
                parent,
                name,
                data.get("characters", ""),
                font_size=data.get("fontSize", 16.0),
                font=FontName(font.get("family", "Inter"), font.get("style", "Regular")),
                visible=data.get("visible", True),
                node_id=node_id,
            )
            return
        if node_type in (NodeType.RECTANGLE.value, NodeType.ELLIPSE.value):
            node = self._add(
                parent,
                ShapeNode(
                    name=name,
                    kind=NodeType(node_type),
                    width=data.get("width", 100.0),
                    height=data.get("height", 100.0),
                    fills=data.get("fills", []),
                    corner_radius=data.get("cornerRadius", 0.0),
                ),
                node_id,
            )
        elif node_type == NodeType.COMPONENT_SET.value:
            node = self.add_component_set(parent, name, node_id)
        elif node_type == NodeType.COMPONENT.value:
            node = self.add_component(parent, name, node_id)
        elif node_type == NodeType.FRAME.value:
            node = self.add_frame(parent, name, node_id)
        else:
            raise HostError(f"Unsupported node type in snapshot: {node_type}")

        node.visible = data.get("visible", True)
        if isinstance(node, FrameNode):
            node.layout_mode = data.get("layoutMode", "NONE")
        for child in data.get("children", []):
            self._load_node(node, child, deferred)

    # =========================================================================
    # Internals
    # =========================================================================

    def _next_id(self) -> str:
        while True:
            candidate = f"{self._id_base}:{next(self._counter)}"
            if candidate not in self._nodes:
                return candidate

    def _register(self, node, node_id: str | None = None):
        node_id = node_id or self._next_id()
        if node_id in self._nodes:
            raise HostError(f"Duplicate node id: {node_id}")
        node.id = node_id
        self._nodes[node_id] = node
        return node

    def _unregister(self, node: Node) -> None:
        self._nodes.pop(node.id, None)
        for child in node.children:
            self._unregister(child)

    def _add(self, parent: Node, node, node_id: str | None):
        self._register(node, node_id)
        self.append_child(parent, node)
        return node

    def _populate_instance(self, instance: InstanceNode, master: ComponentNode) -> None:
        for child in master.children:
            self.append_child(instance, self._clone(child, instance.id))

    def _clone(self, source: Node, instance_id: str) -> Node:
        copy = replace(source, children=[], parent=None)
        if isinstance(copy, TextNode):
            copy.source_id = source.source_id or source.id
        self._register(copy, f"I{instance_id};{source.id}")
        for child in source.children:
            self.append_child(copy, self._clone(child, instance_id))
        return copy

    def _swap(self, instance: InstanceNode, variant: ComponentNode) -> None:
        for child in list(instance.children):
            self.remove_node(child)
        instance.main_component = variant
        instance.name = variant.name
        self._populate_instance(instance, variant)
        logger.debug(f"Swapped instance {instance.id} to variant '{variant.name}'")


def _ancestors(node: Node) -> list[Node]:
    found = []
    current = node.parent
    while current is not None:
        found.append(current)
        current = current.parent
    return found


__all__ = ["DEFAULT_FONTS", "InMemoryDocumentHost", "Notification"]
