"""
Unit tests for document source validation and the entity model.
"""
import pytest

from pwl_dc_adjuster.adjustment.input_validator import EntitySourceError, validate_entity_source
from pwl_dc_adjuster.models.entity import (
    HAZARD_LAYOUT,
    ITEM_LAYOUT,
    AdjustableEntity,
    apply_updates,
    get_path,
    layout_for,
)


class TestValidateHappyPath:

    def test_item_source(self, make_item):
        entity = validate_entity_source(make_item("Fireball", 3, "@Check[dc:24]"))
        assert isinstance(entity, AdjustableEntity)
        assert entity.name == "Fireball"
        assert entity.kind == "spell"
        assert entity.level == 3
        assert entity.text_fields == {"system.description.value": "@Check[dc:24]"}
        assert entity.numeric_fields == {}
        assert entity.sub_entities is None

    def test_hazard_source(self, hazard_source):
        entity = validate_entity_source(hazard_source)
        assert entity.kind == "hazard"
        assert entity.level == 4
        assert entity.numeric_fields["system.saves.reflex.value"] == 0
        assert entity.embedded_type == "melee"
        assert len(entity.sub_entities) == 3

    def test_missing_level_is_none(self, make_item):
        entity = validate_entity_source(make_item("Rope"))
        assert entity.level is None
        assert not entity.is_eligible

    def test_missing_numeric_field_is_none(self, hazard_source):
        del hazard_source["system"]["attributes"]["stealth"]
        entity = validate_entity_source(hazard_source)
        assert entity.numeric_fields["system.attributes.stealth.value"] is None

    def test_sub_entities_are_not_copied(self, hazard_source):
        entity = validate_entity_source(hazard_source)
        assert entity.sub_entities[0] is hazard_source["items"][0]

    def test_entity_is_frozen(self, make_item):
        entity = validate_entity_source(make_item("Fireball", 3))
        with pytest.raises(Exception):
            entity.level = 9  # type: ignore[misc]


class TestValidateFailures:

    def test_not_a_dict_raises(self):
        with pytest.raises(EntitySourceError):
            validate_entity_source(["not", "a", "document"])

    def test_non_integer_level_raises(self, make_item):
        with pytest.raises(EntitySourceError) as info:
            validate_entity_source(make_item("Fireball", "high", "@Check[dc:24]"))
        assert info.value.entity_name == "Fireball"
        assert any(e["field"] == "level" for e in info.value.validation_errors)

    def test_non_string_description_raises(self, make_item):
        with pytest.raises(EntitySourceError):
            validate_entity_source(make_item("Fireball", 3, {"html": "x"}))

    def test_non_object_embedded_document_raises(self, hazard_source):
        hazard_source["items"].append("dart")
        with pytest.raises(EntitySourceError):
            validate_entity_source(hazard_source)

    def test_error_is_value_error(self):
        assert issubclass(EntitySourceError, ValueError)


class TestPathHelpers:

    def test_get_path(self):
        assert get_path({"a": {"b": {"c": 3}}}, "a.b.c") == 3

    def test_get_path_missing(self):
        assert get_path({"a": {"b": 1}}, "a.b.c") is None
        assert get_path({}, "a") is None

    def test_apply_updates_creates_intermediates(self):
        source = {"system": {"level": {"value": 2}}}
        apply_updates(source, {"system.description.value": "text", "items": []})
        assert source == {
            "system": {"level": {"value": 2}, "description": {"value": "text"}},
            "items": [],
        }

    def test_layout_for(self):
        assert layout_for("hazard") is HAZARD_LAYOUT
        assert layout_for("weapon") is ITEM_LAYOUT
        assert layout_for(None) is ITEM_LAYOUT
