"""Document host protocol.

Defines the interface the scanner and renderer use to talk to the design
tool's scene graph. Awaitable methods are the suspension points of a render:
loading all pages and loading fonts.
"""

from collections.abc import Callable
from typing import Protocol

from .nodes import (
    ComponentNode,
    FontName,
    FrameNode,
    InstanceNode,
    Node,
    PageNode,
    ShapeNode,
    TextNode,
)


class HostError(Exception):
    """Raised when the host rejects an operation."""


class FontLoadError(HostError):
    """Raised when a font cannot be loaded or text cannot be read or written.

    Attributes:
        font: The font that failed, when known.
    """

    def __init__(self, message: str, font: FontName | None = None):
        super().__init__(message)
        self.font = font


class DocumentHost(Protocol):
    """Protocol for the design tool's document.

    Implementations: InMemoryDocumentHost (tests, CLI). A live plugin bridge
    implements the same surface against the real editor.
    """

    # =========================================================================
    # Document
    # =========================================================================

    @property
    def pages(self) -> list[PageNode]:
        """All pages, in document order."""
        ...

    @property
    def current_page(self) -> PageNode:
        """Page the user is looking at."""
        ...

    @property
    def document_fingerprint(self) -> str | None:
        """Stable identifier of the open document, if the host has one."""
        ...

    async def load_all_pages(self) -> None:
        """Make every page's content available for traversal."""
        ...

    def set_current_page(self, page: PageNode) -> None:
        """Switch the visible page."""
        ...

    def get_node_by_id(self, node_id: str) -> Node | None:
        """Dereference an id; None when it does not exist."""
        ...

    def find_all(self, root: Node, predicate: Callable[[Node], bool]) -> list[Node]:
        """Depth-first search of root's descendants."""
        ...

    # =========================================================================
    # Node creation and tree edits
    # =========================================================================

    def create_frame(self) -> FrameNode:
        """Create a detached frame."""
        ...

    def create_text(self) -> TextNode:
        """Create a detached text node using the default font."""
        ...

    def create_shape(self, kind: str) -> ShapeNode:
        """Create a detached "RECTANGLE" or "ELLIPSE"."""
        ...

    def instantiate_component(self, master: ComponentNode) -> InstanceNode:
        """Create a detached instance of a component."""
        ...

    def append_child(self, parent: Node, child: Node) -> None:
        """Move child to the end of parent's children."""
        ...

    def remove_node(self, node: Node) -> None:
        """Detach and delete a node and its subtree."""
        ...

    # =========================================================================
    # Components
    # =========================================================================

    def get_main_component(self, instance: InstanceNode) -> ComponentNode | None:
        """Master component an instance points at."""
        ...

    def set_instance_variants(
        self, instance: InstanceNode, values: dict[str, str]
    ) -> None:
        """Swap an instance to the variant matching the given axis values.

        Raises:
            HostError: If no variant of the set matches.
        """
        ...

    # =========================================================================
    # Text
    # =========================================================================

    async def load_font(self, font: FontName) -> None:
        """Load a font so text using it can be edited.

        Raises:
            FontLoadError: If the font is unavailable.
        """
        ...

    def read_characters(self, node: TextNode) -> str:
        """Read a text node's content.

        Raises:
            FontLoadError: If the content cannot be read.
        """
        ...

    def set_characters(self, node: TextNode, characters: str) -> None:
        """Replace a text node's content; its font must be loaded.

        Raises:
            FontLoadError: If the node's font is not loaded.
        """
        ...

    # =========================================================================
    # User feedback
    # =========================================================================

    def set_selection_and_focus(self, node: Node) -> None:
        """Select a node and scroll it into view."""
        ...

    def notify(self, message: str, is_error: bool = False) -> None:
        """Show a transient message to the user."""
        ...


__all__ = ["DocumentHost", "FontLoadError", "HostError"]
