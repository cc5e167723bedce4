"""
Tests for the transaction schema registry.
"""

import pytest

from cryptoowls.core.registry import (
    REGISTRY,
    FieldType,
    KindId,
    UnknownKind,
    list_schemas,
    schema_by_name,
    schema_for,
)


class TestSchemaLookup:
    """Kind ids resolve to exactly one schema."""

    def test_kind_ids_match_ledger_numbering(self):
        """Message ids follow the service's transaction order."""
        assert schema_for(0).name == "create_user"
        assert schema_for(1).name == "make_owl"
        assert schema_for(2).name == "issue"
        assert schema_for(3).name == "create_order"
        assert schema_for(4).name == "accept_order"
        with pytest.raises(UnknownKind):
            schema_for(5)

    def test_lookup_by_enum(self):
        assert schema_for(KindId.MAKE_OWL).kind_id == 1

    def test_unknown_kind_raises(self):
        with pytest.raises(UnknownKind) as exc:
            schema_for(99)
        assert exc.value.kind_id == 99
        assert "99" in str(exc.value)

    def test_non_integer_kind_raises(self):
        with pytest.raises(UnknownKind):
            schema_for("create_user")
        with pytest.raises(UnknownKind):
            schema_for(True)

    def test_lookup_by_name(self):
        assert schema_by_name("issue").kind_id == KindId.ISSUE
        with pytest.raises(UnknownKind):
            schema_by_name("burn_owl")

    def test_list_schemas_ordered(self):
        assert [s.kind_id for s in list_schemas()] == list(range(5))


class TestSchemaLayouts:
    """Field layouts are the ones the ledger decodes."""

    def test_create_user_layout(self):
        schema = schema_for(KindId.CREATE_USER)
        assert schema.field_names == ["public_key", "name"]
        assert [f.type for f in schema.fields] == [FieldType.PUBLIC_KEY, FieldType.STRING]

    def test_make_owl_layout(self):
        schema = schema_for(KindId.MAKE_OWL)
        assert schema.field_names == ["public_key", "name", "father_id", "mother_id"]
        assert schema.fields[2].type is FieldType.HASH

    def test_time_fields(self):
        """Kinds that repeat the same logical action carry a time field."""
        for kind in (KindId.ISSUE, KindId.CREATE_ORDER):
            assert [f.name for f in schema_for(kind).fields_of_type(FieldType.SYSTEM_TIME)] == ["current_time"]
        assert schema_for(KindId.CREATE_USER).fields_of_type(FieldType.SYSTEM_TIME) == []

    def test_every_schema_starts_with_author_key(self):
        for schema in list_schemas():
            assert schema.fields[0].name == "public_key"
            assert schema.fields[0].type is FieldType.PUBLIC_KEY


class TestRegistryImmutable:

    def test_registry_cannot_be_mutated(self):
        with pytest.raises(TypeError):
            REGISTRY[42] = schema_for(0)

    def test_schema_is_frozen(self):
        schema = schema_for(0)
        with pytest.raises(AttributeError):
            schema.name = "other"
