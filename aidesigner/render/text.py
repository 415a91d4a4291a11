"""Text binding for component instances.

Assigns display properties to the text leaves of an instance. Each property
key is matched to a leaf by the first strategy that finds one:

1. exact slot name from the scanned catalog;
2. semantic classification of the slot (primary / secondary / tertiary);
3. partial slot name, either direction;
4. legacy keyword table over live leaf names;
5. position in the instance, by what the key suggests.

A hidden leaf is shown before assignment. A leaf whose font cannot be loaded
is skipped without affecting the remaining properties.
"""

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from aidesigner.catalog import Catalog, TextClassification, TextSlot
from aidesigner.host import (
    ComponentSetNode,
    DocumentHost,
    HostError,
    InstanceNode,
    Node,
    TextNode,
)

from .properties import LAYOUT_PROPERTY_KEYS, VARIANTS_KEY

logger = logging.getLogger(__name__)

SKIPPED_KEYS = frozenset((VARIANTS_KEY, *LAYOUT_PROPERTY_KEYS))

_PRIMARY = TextClassification.PRIMARY
_SECONDARY = TextClassification.SECONDARY
_TERTIARY = TextClassification.TERTIARY

SEMANTIC_TEXT_MAPPINGS: dict[str, tuple[TextClassification, ...]] = {
    "primary-text": (_PRIMARY,),
    "secondary-text": (_SECONDARY,),
    "tertiary-text": (_TERTIARY,),
    "headline": (_PRIMARY, _SECONDARY),
    "title": (_PRIMARY, _SECONDARY),
    "content": (_PRIMARY, _SECONDARY),
    "text": (_PRIMARY, _SECONDARY),
    "supporting-text": (_SECONDARY, _TERTIARY),
    "supporting": (_SECONDARY, _TERTIARY),
    "subtitle": (_SECONDARY, _TERTIARY),
    "trailing-text": (_TERTIARY, _SECONDARY),
    "trailing": (_TERTIARY, _SECONDARY),
    "caption": (_TERTIARY,),
    "overline": (_TERTIARY,),
}

LEGACY_TEXT_MAPPINGS: dict[str, tuple[str, ...]] = {
    "content": ("headline", "title", "text", "label"),
    "headline": ("headline", "title", "text", "label"),
    "text": ("headline", "title", "text", "label"),
    "supporting-text": ("supporting", "subtitle", "description", "body"),
    "supporting": ("supporting", "subtitle", "description", "body"),
    "trailing-text": ("trailing", "value", "action", "status", "end"),
    "trailing": ("trailing", "value", "action", "status", "end"),
    "title": ("title", "headline", "text"),
    "subtitle": ("subtitle", "supporting", "description"),
}

_WHITESPACE = re.compile(r"\s+")


@dataclass
class TextContext:
    """What a strategy can see for one instance.

    Attributes:
        leaves: Text leaves of the instance in depth-first order.
        slots: Scanned slots of the instance's component (may be empty).
    """

    leaves: list[TextNode]
    slots: list[TextSlot]

    def leaf_for_slot(self, slot: TextSlot) -> TextNode | None:
        """Live leaf cloned from a scanned slot, else the first with its name."""
        for leaf in self.leaves:
            if leaf.source_id == slot.node_id or leaf.id == slot.node_id:
                return leaf
        for leaf in self.leaves:
            if leaf.name == slot.node_name:
                return leaf
        return None


TextStrategy = Callable[[str, TextContext], TextNode | None]


# =============================================================================
# Strategies
# =============================================================================


def match_slot_name(key: str, context: TextContext) -> TextNode | None:
    for slot in context.slots:
        name = slot.node_name.lower()
        if name == key or _WHITESPACE.sub("-", name) == key:
            leaf = context.leaf_for_slot(slot)
            if leaf is not None:
                return leaf
    return None


def match_classification(key: str, context: TextContext) -> TextNode | None:
    for classification in SEMANTIC_TEXT_MAPPINGS.get(key, ()):
        for slot in context.slots:
            if slot.classification != classification:
                continue
            leaf = context.leaf_for_slot(slot)
            if leaf is not None:
                return leaf
    return None


def match_partial_name(key: str, context: TextContext) -> TextNode | None:
    for slot in context.slots:
        name = slot.node_name.lower()
        if name and (key in name or name in key):
            leaf = context.leaf_for_slot(slot)
            if leaf is not None:
                return leaf
    return None


def match_legacy_keywords(key: str, context: TextContext) -> TextNode | None:
    for target in LEGACY_TEXT_MAPPINGS.get(key, (key,)):
        for leaf in context.leaves:
            if target in leaf.name.lower():
                return leaf
    return None


def match_position(key: str, context: TextContext) -> TextNode | None:
    leaves = context.leaves
    if not leaves:
        return None
    if any(word in key for word in ("headline", "title", "primary")):
        return leaves[0]
    if any(word in key for word in ("trailing", "tertiary")):
        return leaves[-1]
    if any(word in key for word in ("supporting", "secondary")):
        return leaves[1] if len(leaves) > 1 else leaves[0]
    return None


DEFAULT_TEXT_STRATEGIES: tuple[tuple[str, TextStrategy], ...] = (
    ("exact-name", match_slot_name),
    ("semantic-classification", match_classification),
    ("partial-name", match_partial_name),
    ("legacy-mapping", match_legacy_keywords),
    ("position", match_position),
)


# =============================================================================
# Engine
# =============================================================================


@dataclass(frozen=True)
class TextBinding:
    """One property written to one leaf."""

    key: str
    value: str
    leaf_id: str
    leaf_name: str
    strategy: str


@dataclass
class TextBindingResult:
    """Outcome of binding a property bag to an instance.

    Attributes:
        bound: Properties written.
        unmatched: Keys for which no leaf was found.
        font_failures: Keys whose leaf could not be written, with the error.
    """

    bound: list[TextBinding] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)
    font_failures: list[tuple[str, str]] = field(default_factory=list)


class TextBindingEngine:
    """Binds display properties to instance text leaves.

    Args:
        host: Document host used for traversal, fonts and text writes.
        catalog: Scanned catalog providing slot names and classifications.
        strategies: Ordered (name, strategy) pairs.

    Example:
        >>> engine = TextBindingEngine(host, catalog)
        >>> result = await engine.apply(instance, {"text": "Sign In"})
        >>> result.bound[0].leaf_name
        'Label'
    """

    def __init__(
        self,
        host: DocumentHost,
        catalog: Catalog | None = None,
        strategies: Sequence[tuple[str, TextStrategy]] = DEFAULT_TEXT_STRATEGIES,
    ):
        self.host = host
        self.catalog = catalog
        self.strategies = tuple(strategies)

    def slots_for(self, instance: InstanceNode) -> list[TextSlot]:
        """Scanned slots of the instance's component or its variant set."""
        if self.catalog is None:
            return []
        main = self.host.get_main_component(instance)
        if main is None:
            return []
        record = self.catalog.get(main.id)
        if record is None and isinstance(main.parent, ComponentSetNode):
            record = self.catalog.get(main.parent.id)
        if record is None:
            return []
        return list(record.text_slots or [])

    def find_leaf(self, key: str, context: TextContext) -> tuple[TextNode, str] | None:
        """First leaf any strategy finds for a key, with the strategy name."""
        lowered = key.lower()
        for name, strategy in self.strategies:
            leaf = strategy(lowered, context)
            if leaf is not None:
                return leaf, name
        return None

    async def apply(
        self, instance: InstanceNode, properties: dict[str, Any]
    ) -> TextBindingResult:
        """Write string properties into the instance's text leaves.

        Non-string and blank values, layout keys and ``variants`` are skipped.
        Assignment replaces content, so applying the same properties twice
        gives the same text.
        """
        result = TextBindingResult()
        if not properties:
            return result

        leaves = [
            node for node in self.host.find_all(instance, _is_text)
            if isinstance(node, TextNode)
        ]
        context = TextContext(leaves=leaves, slots=self.slots_for(instance))

        for key, value in properties.items():
            if key in SKIPPED_KEYS:
                continue
            if not isinstance(value, str) or not value.strip():
                continue

            found = self.find_leaf(key, context)
            if found is None:
                logger.warning(f'No text node found for property "{key}" with value "{value}"')
                result.unmatched.append(key)
                continue

            leaf, strategy = found
            try:
                await self._write(leaf, value)
            except HostError as e:
                logger.error(f"Font loading failed for '{leaf.name}': {e}")
                result.font_failures.append((key, str(e)))
                continue

            logger.debug(f"Set '{leaf.name}' to '{value}' via {strategy}")
            result.bound.append(
                TextBinding(
                    key=key,
                    value=value,
                    leaf_id=leaf.id,
                    leaf_name=leaf.name,
                    strategy=strategy,
                )
            )

        return result

    async def _write(self, leaf: TextNode, value: str) -> None:
        if not leaf.visible:
            leaf.visible = True
            logger.debug(f"Activated hidden text node '{leaf.name}'")
        await self.host.load_font(leaf.font_name)
        self.host.set_characters(leaf, value)


def _is_text(node: Node) -> bool:
    return isinstance(node, TextNode)


__all__ = [
    "DEFAULT_TEXT_STRATEGIES",
    "LEGACY_TEXT_MAPPINGS",
    "SEMANTIC_TEXT_MAPPINGS",
    "TextBinding",
    "TextBindingEngine",
    "TextBindingResult",
    "TextContext",
    "TextStrategy",
    "match_classification",
    "match_legacy_keywords",
    "match_partial_name",
    "match_position",
    "match_slot_name",
]
