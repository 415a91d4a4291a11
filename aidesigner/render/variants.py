"""Variant validation against a component set's live schema."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class VariantIssue(str, Enum):
    """Why a requested selector was rejected."""

    UNKNOWN_PROPERTY = "unknown-property"
    INVALID_VALUE = "invalid-value"


@dataclass(frozen=True)
class VariantWarning:
    """A rejected variant selector.

    Attributes:
        axis: Requested axis name.
        value: Requested value, stringified.
        issue: Unknown axis or undeclared value.
        allowed: Declared values for the axis, or the known axes when the
            axis itself is unknown.
    """

    axis: str
    value: str
    issue: VariantIssue
    allowed: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        options = ", ".join(self.allowed)
        if self.issue == VariantIssue.UNKNOWN_PROPERTY:
            return f'Unknown variant property: "{self.axis}". Available: [{options}]'
        return f'Invalid value for "{self.axis}": "{self.value}". Available: [{options}]'


@dataclass
class VariantValidation:
    """Valid subset of the requested selectors plus rejected entries."""

    valid: dict[str, str] = field(default_factory=dict)
    warnings: list[VariantWarning] = field(default_factory=list)


def _stringify(value: Any) -> str:
    """Render a selector value the way the document host spells it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def validate_variants(
    requested: Mapping[str, Any],
    schema: Mapping[str, Sequence[str]],
) -> VariantValidation:
    """Keep the selectors the schema declares.

    An empty result is not an error; the instance keeps its default variant.

    Args:
        requested: Axis name to requested value.
        schema: Axis name to declared values, read from the live document.

    Returns:
        VariantValidation with the maximal valid subset.
    """
    result = VariantValidation()
    for axis, value in requested.items():
        text = _stringify(value)
        allowed = schema.get(axis)
        if not allowed:
            warning = VariantWarning(axis, text, VariantIssue.UNKNOWN_PROPERTY, tuple(schema))
        elif text not in allowed:
            warning = VariantWarning(axis, text, VariantIssue.INVALID_VALUE, tuple(allowed))
        else:
            result.valid[axis] = text
            continue
        logger.warning(warning.message)
        result.warnings.append(warning)
    return result


__all__ = ["VariantIssue", "VariantValidation", "VariantWarning", "validate_variants"]
