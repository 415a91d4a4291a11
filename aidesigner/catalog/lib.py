"""Design-system catalog.

A catalog is the result of one scan: an ordered collection of component
records keyed by host id. It is replaced wholesale on rescan and patched only
by manual type correction. Records serialize with the camelCase field names
the plugin UI and session storage use.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

UNKNOWN_TYPE = "unknown"
VERIFIED_CONFIDENCE = 1.0
CATALOG_VERSION = "1.0"


class TextClassification(str, Enum):
    """Rank of a text slot within its component."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"


class _CatalogModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageContext(_CatalogModel):
    """Page a component was found on."""

    page_name: str
    page_id: str
    is_current_page: bool = False


class TextSlot(_CatalogModel):
    """A labeled text leaf found in a component's default rendering.

    Attributes:
        node_name: Layer name of the text leaf.
        node_id: Host id of the leaf in the scanned master.
        classification: Primary / secondary / tertiary rank.
        characters: Text content at scan time, when readable.
        font_size: Font size at scan time, when readable.
        visible: Whether the leaf was visible in the master.
    """

    node_name: str
    node_id: str
    classification: TextClassification = TextClassification.TERTIARY
    characters: str | None = None
    font_size: float | None = None
    visible: bool = True


class ComponentRecord(_CatalogModel):
    """One scanned component or component set.

    Attributes:
        id: Host identifier, unique within the document.
        name: Author-given layer name.
        suggested_type: Inferred semantic tag, or "unknown".
        confidence: Classification confidence in [0, 1].
        variant_groups: Axis name to sorted allowed values (sets only).
        text_slots: Text leaves of the default rendering (hints only).
        page_context: Page the component lives on.
        is_verified: Set when a person corrected the type.
    """

    id: str
    name: str
    suggested_type: str = UNKNOWN_TYPE
    confidence: float = Field(default=0.1, ge=0.0, le=1.0)
    variant_groups: dict[str, list[str]] | None = Field(
        default=None, alias="variantDetails"
    )
    text_slots: list[TextSlot] | None = Field(default=None, alias="textHierarchy")
    page_context: PageContext | None = Field(default=None, alias="pageInfo")
    is_verified: bool = False

    @field_validator("variant_groups")
    @classmethod
    def _drop_empty_axes(
        cls, value: dict[str, list[str]] | None
    ) -> dict[str, list[str]] | None:
        if value is None:
            return None
        cleaned = {
            axis: sorted(set(values)) for axis, values in value.items() if axis and values
        }
        return cleaned or None

    @model_validator(mode="after")
    def _cap_unknown_confidence(self) -> ComponentRecord:
        if self.suggested_type == UNKNOWN_TYPE and not self.is_verified:
            self.confidence = min(self.confidence, 0.1)
        return self

    @property
    def is_variant_set(self) -> bool:
        return bool(self.variant_groups)

    @property
    def variant_axes(self) -> list[str]:
        return list(self.variant_groups or {})

    def to_json_dict(self) -> dict[str, Any]:
        """Dump with wire names; the bare axis list is added for the UI."""
        data = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        if self.variant_groups:
            data["variants"] = self.variant_axes
        return data


class Catalog:
    """Ordered collection of ComponentRecord keyed by id.

    Example:
        >>> catalog = Catalog([record_a, record_b])
        >>> catalog.get("10:1").suggested_type
        'button'
        >>> catalog.update_type("10:1", "icon-button").is_verified
        True
    """

    def __init__(self, records: Iterable[ComponentRecord] = ()):
        self._records: dict[str, ComponentRecord] = {}
        for record in records:
            self._records[record.id] = record

    def __iter__(self) -> Iterator[ComponentRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._records

    def __bool__(self) -> bool:
        return bool(self._records)

    def __repr__(self) -> str:
        return f"Catalog({len(self)} components)"

    def get(self, component_id: str) -> ComponentRecord | None:
        return self._records.get(component_id)

    def ids(self) -> list[str]:
        return list(self._records)

    def update_type(self, component_id: str, new_type: str) -> ComponentRecord:
        """Apply a manual type correction.

        Pins confidence to 1.0 and marks the record verified.

        Raises:
            KeyError: If the id is not in the catalog.
        """
        record = self._records.get(component_id)
        if record is None:
            raise KeyError(component_id)
        updated = record.model_copy(
            update={
                "suggested_type": new_type.strip().lower(),
                "confidence": VERIFIED_CONFIDENCE,
                "is_verified": True,
            }
        )
        self._records[component_id] = updated
        return updated

    def by_type(self, min_confidence: float = 0.0) -> dict[str, list[ComponentRecord]]:
        """Group records by suggested type, each group sorted by confidence."""
        groups: dict[str, list[ComponentRecord]] = {}
        for record in self:
            if record.suggested_type == UNKNOWN_TYPE:
                continue
            if record.confidence < min_confidence:
                continue
            groups.setdefault(record.suggested_type, []).append(record)
        for records in groups.values():
            records.sort(key=lambda r: r.confidence, reverse=True)
        return groups

    def to_json_list(self) -> list[dict[str, Any]]:
        return [record.to_json_dict() for record in self]

    @classmethod
    def from_json_list(cls, data: Iterable[dict[str, Any]]) -> Catalog:
        return cls(ComponentRecord.model_validate(item) for item in data)


class StoredCatalog(_CatalogModel):
    """Catalog as persisted in the session store.

    Attributes:
        components: Serialized component records.
        scan_time: When the scan finished (UTC).
        version: Storage format version.
        document_fingerprint: Identifies the document the scan came from.
    """

    components: list[ComponentRecord] = Field(default_factory=list)
    scan_time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: str = CATALOG_VERSION
    document_fingerprint: str | None = Field(default=None, alias="fileKey")

    @classmethod
    def from_catalog(
        cls, catalog: Catalog, document_fingerprint: str | None
    ) -> StoredCatalog:
        return cls(
            components=list(catalog),
            document_fingerprint=document_fingerprint,
        )

    def to_catalog(self) -> Catalog:
        return Catalog(self.components)


class SavedComponents(_CatalogModel):
    """Component list saved when the full scan cannot be written.

    Carries no scan metadata, only the components and the document they came
    from.
    """

    components: list[ComponentRecord] = Field(default_factory=list)
    document_fingerprint: str | None = Field(default=None, alias="fileKey")

    def to_catalog(self) -> Catalog:
        return Catalog(self.components)


__all__ = [
    "CATALOG_VERSION",
    "UNKNOWN_TYPE",
    "VERIFIED_CONFIDENCE",
    "Catalog",
    "ComponentRecord",
    "PageContext",
    "SavedComponents",
    "StoredCatalog",
    "TextClassification",
    "TextSlot",
]
