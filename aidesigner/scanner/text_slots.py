"""Text slot discovery.

Finds the text leaves of a component's default rendering and ranks them.
Ranking uses font size: the largest distinct size is primary, the next is
secondary, everything smaller is tertiary. Leaves whose size is unknown are
ranked by position instead.
"""

import logging

from aidesigner.catalog import TextClassification, TextSlot
from aidesigner.host import (
    ComponentNode,
    ComponentSetNode,
    DocumentHost,
    HostError,
    Node,
    TextNode,
)

logger = logging.getLogger(__name__)

_RANKS = (
    TextClassification.PRIMARY,
    TextClassification.SECONDARY,
    TextClassification.TERTIARY,
)


def slot_source(node: Node) -> Node | None:
    """Node whose text leaves represent the component: a set's default variant."""
    if isinstance(node, ComponentSetNode):
        return node.default_variant
    if isinstance(node, ComponentNode):
        return node
    return None


def find_text_slots(host: DocumentHost, node: Node) -> list[TextSlot]:
    """Collect the text leaves of a component or component set.

    Unreadable leaves are kept with their name only; one bad leaf never fails
    the scan.

    Args:
        host: Document host used to read text content.
        node: Component or component set.

    Returns:
        Slots in depth-first document order.
    """
    source = slot_source(node)
    if source is None:
        return []

    leaves = [n for n in host.find_all(source, _is_text) if isinstance(n, TextNode)]
    characters: list[str | None] = []
    for leaf in leaves:
        try:
            characters.append(host.read_characters(leaf))
        except HostError as e:
            logger.warning(
                f"Could not read text of '{leaf.name}' in '{node.name}', "
                f"keeping name only: {e}"
            )
            characters.append(None)

    sizes = [leaf.font_size if leaf.font_size else None for leaf in leaves]
    classifications = classify_by_size(sizes)

    return [
        TextSlot(
            node_name=leaf.name,
            node_id=leaf.id,
            classification=classification,
            characters=chars,
            font_size=size,
            visible=leaf.visible,
        )
        for leaf, chars, size, classification in zip(
            leaves, characters, sizes, classifications
        )
    ]


def classify_by_size(sizes: list[float | None]) -> list[TextClassification]:
    """Rank leaves by font size, falling back to position when size is unknown."""
    distinct = sorted({size for size in sizes if size is not None}, reverse=True)
    rank_of = {size: index for index, size in enumerate(distinct)}
    result = []
    for position, size in enumerate(sizes):
        index = rank_of[size] if size is not None else position
        result.append(_RANKS[min(index, len(_RANKS) - 1)])
    return result


def _is_text(node: Node) -> bool:
    return isinstance(node, TextNode)


__all__ = ["classify_by_size", "find_text_slots", "slot_source"]
