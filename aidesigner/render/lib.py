"""Layout tree renderer.

Materializes a parsed LayoutDocument into host nodes. The walk is depth-first
and strictly sequential, so sibling order in the document is the final layer
order. Failures local to one item (a dangling component id, an invalid
variant, a missing text slot, a font that will not load) are recorded as
warnings and never stop the siblings.

Example:
    >>> renderer = LayoutTreeRenderer(host, catalog)
    >>> report = await renderer.render_resolved(parse_layout(raw_json))
    >>> report.frame.name, len(report.warnings)
    ('Login', 0)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from aidesigner.catalog import Catalog
from aidesigner.host import (
    ComponentNode,
    ComponentSetNode,
    DocumentHost,
    FontLoadError,
    FontName,
    FrameNode,
    HostError,
    InstanceNode,
    Node,
    NodeType,
    PageNode,
)
from aidesigner.resolver import IdRewrite, SemanticResolver, resolve_component_ids
from aidesigner.schema import (
    DEFAULT_FRAME_NAME,
    ComponentItem,
    ContainerItem,
    ContainerSettings,
    LayoutDocument,
    LayoutMode,
    NativeItem,
    Sizing,
)

from .media import check_media_properties
from .properties import sanitize_properties, separate_properties
from .text import TextBindingEngine
from .variants import validate_variants

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "Inter"
DEFAULT_FONT_SIZE = 16
DEFAULT_RECTANGLE_SIZE = (100, 100)
DEFAULT_ELLIPSE_SIZE = (50, 50)

# Frame attributes touched by container configuration; restored on failed edits.
_FRAME_FIELDS = (
    "name",
    "layout_mode",
    "padding_top",
    "padding_bottom",
    "padding_left",
    "padding_right",
    "item_spacing",
    "primary_axis_sizing_mode",
    "counter_axis_sizing_mode",
    "width",
    "height",
)


class RenderWarningKind(str, Enum):
    """Non-fatal render events."""

    MISSING_REFERENCE = "missing-reference"
    NOT_INSTANTIABLE = "not-instantiable"
    VARIANT = "variant"
    TEXT_BINDING_MISS = "text-binding-miss"
    FONT_LOAD = "font-load"
    MEDIA = "media"


@dataclass(frozen=True)
class RenderWarning:
    """A non-fatal problem with one item.

    Attributes:
        kind: Category of the problem.
        message: Human-readable description.
        item_type: Layout item type the problem belongs to.
        component_id: Component id involved, when there is one.
    """

    kind: RenderWarningKind
    message: str
    item_type: str | None = None
    component_id: str | None = None


@dataclass
class RenderReport:
    """Result of one render.

    Attributes:
        frame: The frame that received the layout.
        instances: Component instances created, in document order.
        warnings: Non-fatal problems, in document order.
        rewrites: Placeholder ids resolved before rendering.
    """

    frame: FrameNode
    instances: list[InstanceNode] = field(default_factory=list)
    warnings: list[RenderWarning] = field(default_factory=list)
    rewrites: list[IdRewrite] = field(default_factory=list)

    def warn(
        self,
        kind: RenderWarningKind,
        message: str,
        item_type: str | None = None,
        component_id: str | None = None,
    ) -> None:
        logger.warning(message)
        self.warnings.append(RenderWarning(kind, message, item_type, component_id))

    def warnings_of(self, kind: RenderWarningKind) -> list[RenderWarning]:
        return [w for w in self.warnings if w.kind == kind]


class LayoutTreeRenderer:
    """Renders layout documents into a document host.

    Args:
        host: Target document.
        catalog: Scanned catalog, used for placeholder resolution and text
            slot hints. Optional when every id is concrete.
        font_family: Family used for native text.
    """

    def __init__(
        self,
        host: DocumentHost,
        catalog: Catalog | None = None,
        font_family: str = DEFAULT_FONT_FAMILY,
    ):
        self.host = host
        self.catalog = catalog if catalog is not None else Catalog()
        self.font_family = font_family
        self.text_engine = TextBindingEngine(host, self.catalog)

    # =========================================================================
    # Entry points
    # =========================================================================

    async def render(
        self, document: LayoutDocument, target: PageNode | FrameNode | None = None
    ) -> RenderReport:
        """Render a document into a page or an existing frame.

        Rendering into a page creates a new top-level frame, then selects,
        focuses and announces it. Rendering into a frame reuses that frame.

        Args:
            document: Parsed layout.
            target: Page or frame. Defaults to the current page.

        Returns:
            RenderReport for the render.

        Raises:
            HostError: If the target cannot hold children.
        """
        target = target if target is not None else self.host.current_page

        if isinstance(target, PageNode):
            frame = self.host.create_frame()
            self.host.append_child(target, frame)
        elif target.type == NodeType.FRAME:
            frame = target
        else:
            raise HostError("Cannot add items without a parent frame.")

        report = RenderReport(frame=frame)
        await self._render_container(frame, document.layout_container, document.items, report)

        if isinstance(target, PageNode):
            self.host.set_selection_and_focus(frame)
            self.host.notify(f'UI "{frame.name}" generated!')

        logger.info(
            f"Rendered '{frame.name}': {len(report.instances)} instances, "
            f"{len(report.warnings)} warnings"
        )
        return report

    async def render_resolved(
        self,
        document: LayoutDocument,
        target: PageNode | FrameNode | None = None,
        resolver: SemanticResolver | None = None,
    ) -> RenderReport:
        """Resolve placeholder ids against the catalog, then render.

        Raises:
            ResolutionError: Before any node is created, if a type has no match.
        """
        rewrites = resolve_component_ids(document, self.catalog, resolver)
        report = await self.render(document, target)
        report.rewrites = rewrites
        return report

    async def modify_existing(self, frame_id: str, document: LayoutDocument) -> RenderReport:
        """Replace the content of a previously rendered frame.

        The frame's children and settings are kept aside while the new content
        renders. If rendering raises, the new children are removed and the old
        ones put back in their original order before the error propagates.

        Raises:
            HostError: If the id does not name a frame.
        """
        frame = self.host.get_node_by_id(frame_id)
        if not isinstance(frame, FrameNode) or frame.type != NodeType.FRAME:
            raise HostError("Target frame for modification not found.")

        settings = {name: getattr(frame, name) for name in _FRAME_FIELDS}
        originals = list(frame.children)
        holding = self.host.create_frame()
        for child in originals:
            self.host.append_child(holding, child)

        try:
            report = await self.render(document, frame)
        except Exception:
            logger.error(f"Modification of '{frame.name}' failed, restoring content")
            for child in list(frame.children):
                self.host.remove_node(child)
            for child in originals:
                self.host.append_child(frame, child)
            for name, value in settings.items():
                setattr(frame, name, value)
            self.host.remove_node(holding)
            raise

        self.host.remove_node(holding)
        self.host.notify("UI updated successfully!")
        return report

    # =========================================================================
    # Containers
    # =========================================================================

    async def _render_container(
        self,
        frame: FrameNode,
        settings: ContainerSettings,
        items: list[Any],
        report: RenderReport,
    ) -> None:
        self._configure_frame(frame, settings)
        for item in items:
            if isinstance(item, ContainerItem):
                child = self.host.create_frame()
                self.host.append_child(frame, child)
                if item.fills_width:
                    child.layout_align = "STRETCH"
                await self._render_container(child, item, item.items, report)
            elif isinstance(item, NativeItem):
                await self._render_native(frame, item, report)
            elif isinstance(item, ComponentItem):
                await self._render_component(frame, item, report)

    def _configure_frame(self, frame: FrameNode, settings: ContainerSettings) -> None:
        frame.name = settings.name or DEFAULT_FRAME_NAME
        frame.layout_mode = settings.layout_mode.value

        if settings.layout_mode != LayoutMode.NONE:
            frame.padding_top = settings.padding_top
            frame.padding_bottom = settings.padding_bottom
            frame.padding_left = settings.padding_left
            frame.padding_right = settings.padding_right
            frame.item_spacing = settings.item_spacing
            frame.primary_axis_sizing_mode = "AUTO"

        if settings.width:
            frame.resize(settings.width, frame.height)
            frame.counter_axis_sizing_mode = "FIXED"
        else:
            frame.counter_axis_sizing_mode = "AUTO"

    # =========================================================================
    # Native primitives
    # =========================================================================

    async def _render_native(
        self, frame: FrameNode, item: NativeItem, report: RenderReport
    ) -> None:
        attributes = item.attributes()
        try:
            if item.is_text:
                node = await self._create_text(attributes)
            elif item.type == "native-rectangle":
                node = self._create_rectangle(attributes)
            else:
                node = self._create_ellipse(attributes)
        except FontLoadError as e:
            report.warn(
                RenderWarningKind.FONT_LOAD,
                f"Skipped {item.type}: {e}",
                item_type=item.type,
            )
            return
        self.host.append_child(frame, node)

    async def _create_text(self, attributes: dict[str, Any]) -> Node:
        text = self.host.create_text()
        try:
            regular = FontName(self.font_family, "Regular")
            await self.host.load_font(regular)
            text.font_name = regular

            if "bold" in (
                attributes.get("fontWeight"),
                attributes.get("weight"),
                attributes.get("style"),
            ):
                bold = FontName(self.font_family, "Bold")
                await self.host.load_font(bold)
                text.font_name = bold
        except FontLoadError:
            self.host.remove_node(text)
            raise

        content = (
            attributes.get("text")
            or attributes.get("content")
            or attributes.get("characters")
            or "Text"
        )
        self.host.set_characters(text, str(content))
        text.font_size = _number(
            attributes.get("fontSize") or attributes.get("size") or attributes.get("textSize"),
            DEFAULT_FONT_SIZE,
        )

        alignment = attributes.get("alignment") or attributes.get("textAlign")
        if alignment == "center":
            text.text_align_horizontal = "CENTER"
        elif alignment == "right":
            text.text_align_horizontal = "RIGHT"
        else:
            text.text_align_horizontal = "LEFT"

        if _fills(attributes):
            text.layout_align = "STRETCH"
            text.text_auto_resize = "HEIGHT"
        else:
            text.text_auto_resize = "WIDTH_AND_HEIGHT"
        return text

    def _create_rectangle(self, attributes: dict[str, Any]) -> Node:
        rect = self.host.create_shape("RECTANGLE")
        rect.resize(*_size(attributes, DEFAULT_RECTANGLE_SIZE))
        if attributes.get("fill"):
            rect.fills = [{"type": "SOLID", "color": attributes["fill"]}]
        if attributes.get("cornerRadius"):
            rect.corner_radius = _number(attributes["cornerRadius"], 0)
        if _fills(attributes):
            rect.layout_align = "STRETCH"
        return rect

    def _create_ellipse(self, attributes: dict[str, Any]) -> Node:
        ellipse = self.host.create_shape("ELLIPSE")
        ellipse.resize(*_size(attributes, DEFAULT_ELLIPSE_SIZE))
        if attributes.get("fill"):
            ellipse.fills = [{"type": "SOLID", "color": attributes["fill"]}]
        return ellipse

    # =========================================================================
    # Components
    # =========================================================================

    async def _render_component(
        self, frame: FrameNode, item: ComponentItem, report: RenderReport
    ) -> None:
        component_id = item.component_node_id
        node = self.host.get_node_by_id(component_id) if component_id else None
        if node is None:
            report.warn(
                RenderWarningKind.MISSING_REFERENCE,
                f"Component with ID {component_id} not found. Skipping.",
                item_type=item.type,
                component_id=component_id,
            )
            return

        master = node.default_variant if isinstance(node, ComponentSetNode) else node
        if not isinstance(master, ComponentNode):
            report.warn(
                RenderWarningKind.NOT_INSTANTIABLE,
                f"Could not find a valid master component for ID {component_id}. Skipping.",
                item_type=item.type,
                component_id=component_id,
            )
            return

        instance = self.host.instantiate_component(master)
        self.host.append_child(frame, instance)
        report.instances.append(instance)
        logger.debug(f"Created instance of '{master.name}' for {item.type}")

        separated = separate_properties(item.properties, component_id)
        display = sanitize_properties(separated.display)

        if separated.variants:
            self._apply_variants(instance, node, separated.variants, item, report)

        if _fills(display):
            if frame.layout_mode == LayoutMode.VERTICAL.value:
                instance.layout_align = "STRETCH"
            elif frame.layout_mode == LayoutMode.HORIZONTAL.value:
                instance.layout_grow = 1

        binding = await self.text_engine.apply(instance, display)
        for key in binding.unmatched:
            report.warnings.append(
                RenderWarning(
                    RenderWarningKind.TEXT_BINDING_MISS,
                    f'No text node found for property "{key}"',
                    item.type,
                    component_id,
                )
            )
        for key, error in binding.font_failures:
            report.warnings.append(
                RenderWarning(
                    RenderWarningKind.FONT_LOAD,
                    f'Could not set "{key}": {error}',
                    item.type,
                    component_id,
                )
            )

        for check in check_media_properties(instance, display):
            if not check.is_valid:
                report.warnings.append(
                    RenderWarning(
                        RenderWarningKind.MEDIA,
                        f'No media slot found for "{check.key}"',
                        item.type,
                        component_id,
                    )
                )

    def _apply_variants(
        self,
        instance: InstanceNode,
        node: Node,
        requested: dict[str, Any],
        item: ComponentItem,
        report: RenderReport,
    ) -> None:
        if not isinstance(node, ComponentSetNode):
            logger.info(f"{node.name} is not a variant set, skipping variant application")
            return

        schema = node.variant_group_properties
        if not schema:
            report.warn(
                RenderWarningKind.VARIANT,
                f"No variant properties found on {node.name}, skipping variant application",
                item.type,
                node.id,
            )
            return

        validation = validate_variants(requested, schema)
        for warning in validation.warnings:
            report.warnings.append(
                RenderWarning(RenderWarningKind.VARIANT, warning.message, item.type, node.id)
            )

        if not validation.valid:
            report.warn(
                RenderWarningKind.VARIANT,
                f"No valid variants to apply to {node.name}, using default variant",
                item.type,
                node.id,
            )
            return

        try:
            self.host.set_instance_variants(instance, validation.valid)
        except HostError as e:
            report.warn(
                RenderWarningKind.VARIANT,
                f"Error applying variants to {node.name}, continuing with default: {e}",
                item.type,
                node.id,
            )


def _fills(attributes: dict[str, Any]) -> bool:
    return attributes.get("horizontalSizing") == Sizing.FILL.value


def _number(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _size(attributes: dict[str, Any], default: tuple[float, float]) -> tuple[float, float]:
    width = _number(attributes.get("width"), 0)
    height = _number(attributes.get("height"), 0)
    if width and height:
        return width, height
    return default


__all__ = [
    "DEFAULT_FONT_FAMILY",
    "LayoutTreeRenderer",
    "RenderReport",
    "RenderWarning",
    "RenderWarningKind",
]
