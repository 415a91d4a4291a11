"""Variant schema extraction for component sets."""

from collections.abc import Mapping, Sequence


def extract_variant_schema(
    variant_group_properties: Mapping[str, Sequence[str]] | None,
) -> dict[str, list[str]]:
    """Normalize a set's declared variant axes.

    Each axis keeps its name; values are de-duplicated and sorted
    lexicographically. Axes with an empty name or no values are dropped.

    Args:
        variant_group_properties: Axis name to declared values, as reported
            by the host.

    Returns:
        Axis name to sorted values. Empty when nothing survives.
    """
    if not variant_group_properties:
        return {}
    schema: dict[str, list[str]] = {}
    for axis, values in variant_group_properties.items():
        if not axis or not values:
            continue
        schema[axis] = sorted({str(value) for value in values})
    return schema


__all__ = ["extract_variant_schema"]
