"""Component id resolution pass.

Runs over a parsed layout before anything is rendered. Every component
reference whose id is missing or placeholder-shaped is resolved through the
SemanticResolver and rewritten in place. One unresolvable type aborts the
whole pass, so no host node is ever created for a layout that would come out
incomplete.
"""

import logging
import re
from dataclasses import dataclass

from aidesigner.catalog import Catalog
from aidesigner.schema import ComponentItem, ContainerItem, LayoutDocument

from .lib import ResolutionError, SemanticResolver

logger = logging.getLogger(__name__)

HOST_ID_PATTERN = re.compile(r"^[0-9]+:[0-9]+$")


@dataclass(frozen=True)
class IdRewrite:
    """One placeholder replaced by a concrete id."""

    component_type: str
    old_id: str | None
    new_id: str
    strategy: str


def is_placeholder_id(component_id: str | None) -> bool:
    """True when an id is absent, a sentinel, or not shaped like a host id."""
    if not component_id:
        return True
    return (
        "_id" in component_id
        or "placeholder" in component_id
        or not HOST_ID_PATTERN.match(component_id)
    )


def resolve_component_ids(
    document: LayoutDocument,
    catalog: Catalog,
    resolver: SemanticResolver | None = None,
) -> list[IdRewrite]:
    """Resolve placeholder component ids in place.

    Args:
        document: Parsed layout; component items are mutated.
        catalog: Scanned components to resolve against.
        resolver: Resolver to use. Defaults to SemanticResolver().

    Returns:
        Rewrites performed, in depth-first document order.

    Raises:
        ResolutionError: On the first type that cannot be resolved.
    """
    resolver = resolver or SemanticResolver()
    rewrites: list[IdRewrite] = []
    _resolve_items(document.items, catalog, resolver, rewrites)
    return rewrites


def _resolve_items(
    items: list,
    catalog: Catalog,
    resolver: SemanticResolver,
    rewrites: list[IdRewrite],
) -> None:
    for item in items:
        if isinstance(item, ContainerItem):
            _resolve_items(item.items, catalog, resolver, rewrites)
            continue
        if not isinstance(item, ComponentItem):
            continue

        if not is_placeholder_id(item.component_node_id):
            logger.debug(f"Using existing id for {item.type}: {item.component_node_id}")
            continue

        logger.debug(f"Resolving component id for type: {item.type}")
        resolution = resolver.match(item.type, catalog)
        if resolution is None:
            raise ResolutionError(item.type, resolver.suggest(item.type, catalog))

        rewrites.append(
            IdRewrite(
                component_type=item.type,
                old_id=item.component_node_id,
                new_id=resolution.record.id,
                strategy=resolution.strategy,
            )
        )
        item.component_node_id = resolution.record.id
        logger.info(f"Resolved {item.type} -> {resolution.record.id}")


__all__ = ["HOST_ID_PATTERN", "IdRewrite", "is_placeholder_id", "resolve_component_ids"]
