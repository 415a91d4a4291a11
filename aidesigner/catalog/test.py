"""Tests for catalog records."""

import pytest

from .lib import (
    Catalog,
    ComponentRecord,
    PageContext,
    StoredCatalog,
    TextClassification,
    TextSlot,
)


@pytest.fixture
def records() -> list[ComponentRecord]:
    return [
        ComponentRecord(id="10:1", name="Button", suggested_type="button", confidence=0.95),
        ComponentRecord(
            id="10:5",
            name="Primary CTA",
            suggested_type="button",
            confidence=0.7,
            variant_groups={"Size": ["Small", "Large", "Small"], "Empty": []},
        ),
        ComponentRecord(id="10:9", name="Blob", suggested_type="unknown", confidence=0.1),
    ]


class TestComponentRecord:
    """Tests for ComponentRecord validation and serialization."""

    @pytest.mark.unit
    def test_variant_groups_sorted_and_deduplicated(self, records):
        """Axis values are sorted, unique, and empty axes are dropped."""
        assert records[1].variant_groups == {"Size": ["Large", "Small"]}
        assert records[1].is_variant_set

    @pytest.mark.unit
    def test_unknown_confidence_capped(self):
        """Unverified unknown records never claim more than 0.1."""
        record = ComponentRecord(id="1:1", name="x", confidence=0.8)
        assert record.confidence == 0.1

    @pytest.mark.unit
    def test_confidence_bounds(self):
        with pytest.raises(ValueError):
            ComponentRecord(id="1:1", name="x", suggested_type="card", confidence=1.5)

    @pytest.mark.unit
    def test_wire_names(self, records):
        """Serialized records use the plugin's field names."""
        record = records[1].model_copy(
            update={
                "page_context": PageContext(page_name="Kit", page_id="0:1"),
                "text_slots": [
                    TextSlot(
                        node_name="Label",
                        node_id="10:6",
                        classification=TextClassification.PRIMARY,
                    )
                ],
            }
        )
        data = record.to_json_dict()
        assert data["suggestedType"] == "button"
        assert data["variantDetails"] == {"Size": ["Large", "Small"]}
        assert data["variants"] == ["Size"]
        assert data["pageInfo"]["pageName"] == "Kit"
        assert data["textHierarchy"][0]["classification"] == "primary"

    @pytest.mark.unit
    def test_parses_wire_names(self):
        record = ComponentRecord.model_validate(
            {"id": "2:2", "name": "Chip", "suggestedType": "chip", "confidence": 0.9}
        )
        assert record.suggested_type == "chip"


class TestCatalog:
    """Tests for the Catalog collection."""

    @pytest.mark.unit
    def test_preserves_order_and_lookup(self, records):
        catalog = Catalog(records)
        assert catalog.ids() == ["10:1", "10:5", "10:9"]
        assert "10:5" in catalog
        assert catalog.get("missing") is None
        assert len(catalog) == 3

    @pytest.mark.unit
    def test_empty_catalog_is_falsy(self):
        assert not Catalog()

    @pytest.mark.unit
    def test_update_type_pins_confidence(self, records):
        """Manual correction sets confidence 1.0 and verified."""
        catalog = Catalog(records)
        updated = catalog.update_type("10:9", "Card")
        assert updated.suggested_type == "card"
        assert updated.confidence == 1.0
        assert updated.is_verified
        assert catalog.get("10:9") is updated

    @pytest.mark.unit
    def test_update_type_unknown_id(self, records):
        with pytest.raises(KeyError):
            Catalog(records).update_type("nope", "card")

    @pytest.mark.unit
    def test_by_type_groups_and_sorts(self, records):
        """Unknown records are excluded; best confidence first."""
        groups = Catalog(records).by_type()
        assert list(groups) == ["button"]
        assert [r.id for r in groups["button"]] == ["10:1", "10:5"]
        assert [r.id for r in Catalog(records).by_type(0.9)["button"]] == ["10:1"]

    @pytest.mark.unit
    def test_json_list_round_trip(self, records):
        catalog = Catalog.from_json_list(Catalog(records).to_json_list())
        assert catalog.ids() == ["10:1", "10:5", "10:9"]
        assert catalog.get("10:5").variant_groups == {"Size": ["Large", "Small"]}


class TestStoredCatalog:
    """Tests for the persisted catalog envelope."""

    @pytest.mark.unit
    def test_from_catalog(self, records):
        stored = StoredCatalog.from_catalog(Catalog(records), "file-abc")
        data = stored.model_dump(by_alias=True, mode="json")
        assert data["fileKey"] == "file-abc"
        assert data["version"] == "1.0"
        assert "scanTime" in data
        assert stored.to_catalog().ids() == ["10:1", "10:5", "10:9"]
