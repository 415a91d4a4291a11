"""Media property checks.

Media properties ("icon", "avatar", ...) are not assigned; they are checked
against the media-like layers of the instance so the author learns when a
layout asks for a slot the component does not have.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any

from aidesigner.host import InstanceNode, Node, ShapeNode

logger = logging.getLogger(__name__)

MEDIA_PROPERTY_PATTERNS = (
    "icon",
    "image",
    "avatar",
    "photo",
    "logo",
    "media",
    "leading-icon",
    "trailing-icon",
    "start-icon",
    "end-icon",
    "profile-image",
    "user-avatar",
    "cover-image",
    "thumbnail",
)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class MediaCheck:
    """Result of checking one media property.

    Attributes:
        key: Property key.
        slot_name: Matching layer name, when one was found.
        suggestions: Media layer names of the instance, when none matched.
    """

    key: str
    slot_name: str | None = None
    suggestions: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.slot_name is not None


def media_properties(properties: dict[str, Any]) -> dict[str, str]:
    """String, non-blank properties whose key names a media kind."""
    found = {}
    for key, value in properties.items():
        if not isinstance(value, str) or not value.strip():
            continue
        lowered = key.lower()
        if any(pattern in lowered for pattern in MEDIA_PROPERTY_PATTERNS):
            found[key] = value
    return found


def media_slots(instance: InstanceNode) -> list[str]:
    """Names of nested instances and shapes, in depth-first order."""
    return [
        node.name
        for node in instance.iter_descendants()
        if _is_media(node) and node.name
    ]


def check_media_properties(
    instance: InstanceNode, properties: dict[str, Any]
) -> list[MediaCheck]:
    """Check every media property of an instance by exact then partial name."""
    requested = media_properties(properties)
    if not requested:
        return []

    slots = media_slots(instance)
    checks = []
    for key in requested:
        slot = _match(key.lower(), slots)
        if slot is None:
            logger.warning(
                f'No media slot for "{key}" in {instance.name}; '
                f"available: [{', '.join(slots)}]"
            )
            checks.append(MediaCheck(key=key, suggestions=tuple(slots)))
        else:
            checks.append(MediaCheck(key=key, slot_name=slot))
    return checks


def _match(key: str, slots: list[str]) -> str | None:
    for slot in slots:
        name = slot.lower()
        if name == key or _WHITESPACE.sub("-", name) == key:
            return slot
    for slot in slots:
        name = slot.lower()
        if key in name or name in key:
            return slot
    return None


def _is_media(node: Node) -> bool:
    return isinstance(node, (InstanceNode, ShapeNode))


__all__ = [
    "MEDIA_PROPERTY_PATTERNS",
    "MediaCheck",
    "check_media_properties",
    "media_properties",
    "media_slots",
]
