"""Unit tests for the field schema model."""

import pytest

from querysmith.schema import Field, Schema, SchemaError, to_fields_array


class TestField:
    """Tests for the Field descriptor."""

    def test_unset_flags_default_to_none(self):
        """Test that flags not given stay unset."""
        field = Field(type="string")
        assert field.index is None
        assert field.optional is None
        assert field.facet is None
        assert field.sort is None

    def test_to_dict_only_includes_set_keys(self):
        """Test that to_dict drops unset flags."""
        field = Field(type="float", facet=True, sort=True)
        assert field.to_dict() == {"type": "float", "facet": True, "sort": True}

    def test_from_dict(self):
        """Test building a Field from a descriptor mapping."""
        field = Field.from_dict({"type": "string[]", "facet": True, "locale": "ja"})
        assert field.type == "string[]"
        assert field.facet is True
        assert field.locale == "ja"

    def test_from_dict_rejects_unknown_keys(self):
        """Test that unknown descriptor keys raise SchemaError."""
        with pytest.raises(SchemaError, match="Unknown field descriptor keys"):
            Field.from_dict({"type": "string", "searchable": True})

    def test_from_dict_requires_type(self):
        """Test that a descriptor without type raises SchemaError."""
        with pytest.raises(SchemaError, match="missing 'type'"):
            Field.from_dict({"facet": True})

    def test_unknown_type_rejected(self):
        """Test that unknown primitive types raise SchemaError."""
        with pytest.raises(SchemaError, match="Unknown field type"):
            Field(type="varchar")

    @pytest.mark.parametrize("field_type", [
        "string", "int32", "int64", "float", "bool", "geopoint", "object", "auto",
        "string[]", "int64[]", "float[]", "object[]", "string*",
    ])
    def test_engine_types_accepted(self, field_type):
        """Test that the engine's primitive types and array variants are accepted."""
        assert Field(type=field_type).type == field_type

    def test_schema_error_is_value_error(self):
        """Test that SchemaError can be handled as ValueError."""
        assert issubclass(SchemaError, ValueError)


class TestSchema:
    """Tests for Schema invariants and derived capability sets."""

    def test_preserves_declaration_order(self, catalog_fields):
        """Test that iteration follows declaration order."""
        schema = Schema(catalog_fields)
        assert list(schema) == list(catalog_fields)

    def test_mapping_access(self, product_fields):
        """Test Mapping behaviour."""
        schema = Schema(product_fields)
        assert len(schema) == 4
        assert "price" in schema
        assert schema["price"].type == "float"

    def test_accepts_field_instances(self):
        """Test that Field instances can be mixed with descriptor mappings."""
        schema = Schema({"id": Field(type="string"), "name": {"type": "string"}})
        assert schema["id"] == Field(type="string")

    def test_missing_id_rejected(self):
        """Test that a schema without id raises SchemaError."""
        with pytest.raises(SchemaError, match="'id'"):
            Schema({"name": {"type": "string"}})

    def test_non_string_id_rejected(self):
        """Test that id must be a string field."""
        with pytest.raises(SchemaError, match="type string"):
            Schema({"id": {"type": "int64"}})

    def test_optional_id_rejected(self):
        """Test that id can never be optional."""
        with pytest.raises(SchemaError, match="optional"):
            Schema({"id": {"type": "string", "optional": True}})

    def test_unindexed_id_rejected(self):
        """Test that id cannot be unindexed, since that declares it optional."""
        with pytest.raises(SchemaError, match="unindexed"):
            Schema({"id": {"type": "string", "index": False}, "name": {"type": "string"}})

        with pytest.raises(SchemaError, match="unindexed"):
            to_fields_array({"id": {"type": "string", "index": False}})

    def test_invalid_descriptor_rejected(self):
        """Test that a descriptor that is neither Field nor mapping is rejected."""
        with pytest.raises(SchemaError, match="must be a Field"):
            Schema({"id": {"type": "string"}, "name": "string"})

    def test_searchable_fields(self, catalog_fields):
        """Test searchable = indexed, string-like, not id."""
        schema = Schema(catalog_fields)
        assert schema.searchable_fields == ("title", "tags", "category")

    def test_searchable_excludes_wildcard(self):
        """Test that the wildcard entry is never searchable."""
        schema = Schema({
            "id": {"type": "string"},
            ".*": {"type": "string"},
            "name": {"type": "string"},
        })
        assert schema.searchable_fields == ("name",)

    def test_facetable_fields(self, catalog_fields):
        """Test facetable = facet is True."""
        schema = Schema(catalog_fields)
        assert schema.facetable_fields == ("tags", "category", "rating", "in_stock")

    def test_sortable_fields(self, catalog_fields):
        """Test sortable = sort is True."""
        schema = Schema(catalog_fields)
        assert schema.sortable_fields == ("title", "rating")

    def test_vector_fields(self, catalog_fields):
        """Test vector fields are the float[] fields."""
        schema = Schema(catalog_fields)
        assert schema.vector_fields == ("embedding",)

    def test_coerce_returns_same_schema(self, product_fields):
        """Test that coerce does not rebuild an existing Schema."""
        schema = Schema(product_fields)
        assert Schema.coerce(schema) is schema

    def test_to_dict(self, product_fields):
        """Test round trip back to descriptor mappings."""
        assert Schema(product_fields).to_dict() == product_fields


class TestToFieldsArray:
    """Tests for to_fields_array conversion."""

    def test_wildcard_declaration_first(self, product_fields):
        """Test that the wildcard auto field is always first."""
        result = to_fields_array(product_fields)

        assert len(result) == 5
        assert result[0] == {
            "name": ".*",
            "type": "auto",
            "sort": False,
            "facet": False,
            "index": True,
        }

    def test_field_declarations(self, product_fields):
        """Test that each field carries its set keys and normalized optional."""
        result = to_fields_array(product_fields)

        assert result[1] == {"name": "id", "type": "string", "optional": False}
        assert result[2] == {
            "name": "name",
            "type": "string",
            "optional": False,
            "facet": True,
            "sort": True,
        }

    def test_unindexed_fields_are_optional(self, catalog_fields):
        """Test that index: false forces optional: true."""
        result = {d["name"]: d for d in to_fields_array(catalog_fields)}

        assert result["internal_notes"]["optional"] is True
        assert result["internal_notes"]["index"] is False
        assert result["category"]["optional"] is True
        assert result["rating"]["optional"] is False

    def test_accepts_schema_instance(self, product_fields):
        """Test that a Schema and a plain mapping give the same declarations."""
        assert to_fields_array(Schema(product_fields)) == to_fields_array(product_fields)
