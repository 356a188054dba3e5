from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from nomad.domain.types import Column, LogicalType
from nomad.errors import CodecError, SchemaError, SchemaFrozenError
from nomad.schema import SchemaRegistry


def test_columns_keep_declaration_order():
    registry = SchemaRegistry(owner="Person")
    registry.declare_column("last_name", "string")
    registry.declare_column("first_name", "string")
    registry.declare_column("age", LogicalType.INTEGER)

    assert registry.column_names() == ["last_name", "first_name", "age"]
    assert registry.sorted_names() == ["age", "first_name", "last_name"]
    assert len(registry) == 3


def test_redeclaring_replaces_in_place():
    registry = SchemaRegistry()
    registry.declare_column("a", "string")
    registry.declare_column("b", "string")
    registry.declare_column("a", "integer", default="5")

    assert registry.column_names() == ["a", "b"]
    column = registry.column("a")
    assert column.logical_type is LogicalType.INTEGER
    assert column.default == 5


def test_declared_defaults_are_coerced():
    registry = SchemaRegistry()
    column = registry.declare_column("price", "decimal", default=1.5, precision=5, scale=2)
    assert column.default == Decimal("1.5")
    assert column.sql_type == "decimal(5,2)"


def test_invalid_default_raises_codec_error():
    with pytest.raises(CodecError):
        SchemaRegistry().declare_column("age", "integer", default="old")


def test_unknown_type_and_empty_name_are_rejected():
    registry = SchemaRegistry()
    with pytest.raises(SchemaError):
        registry.declare_column("a", "varchar")
    with pytest.raises(SchemaError):
        registry.declare_column("", "string")
    assert len(registry) == 0


def test_missing_column_is_none():
    registry = SchemaRegistry()
    registry.declare_column("a", "string")
    assert registry.column("zzz") is None
    assert "a" in registry
    assert "zzz" not in registry
    assert 1 not in registry


def test_copy_is_independent_and_unfrozen():
    parent = SchemaRegistry(owner="Parent")
    parent.declare_column("a", "string")
    parent.freeze()

    child = parent.copy(owner="Child")
    child.declare_column("b", "string")

    assert not child.frozen
    assert child.column_names() == ["a", "b"]
    assert parent.column_names() == ["a"]


def test_frozen_registry_rejects_declarations():
    registry = SchemaRegistry(owner="Person")
    registry.freeze()
    with pytest.raises(SchemaFrozenError, match="Person"):
        registry.declare_column("a", "string")


def test_reset_column_information_keeps_columns():
    registry = SchemaRegistry()
    registry.declare_column("b", "string")
    registry.declare_column("a", "string")
    assert registry.sorted_names() == ["a", "b"]

    registry.reset_column_information()

    assert registry.column_names() == ["b", "a"]
    assert registry.sorted_names() == ["a", "b"]
    assert set(registry.columns_hash()) == {"a", "b"}


def test_columns_hash_is_a_copy():
    registry = SchemaRegistry()
    registry.declare_column("a", "string")
    registry.columns_hash().pop("a")
    assert registry.column("a") is not None


@pytest.mark.parametrize(
    "kwargs,expected",
    [
        ({"logical_type": "string", "limit": 100}, "string(100)"),
        ({"logical_type": "integer"}, "integer"),
        ({"logical_type": "decimal", "precision": 5}, "decimal(5)"),
        ({"logical_type": "decimal"}, "decimal"),
    ],
)
def test_sql_type(kwargs, expected):
    assert Column(name="x", **kwargs).sql_type == expected


def test_columns_are_immutable():
    column = Column(name="x", logical_type="string")
    with pytest.raises(ValidationError):
        column.name = "y"


def test_negative_limit_is_rejected():
    with pytest.raises(ValidationError):
        Column(name="x", logical_type="string", limit=-1)


def test_lookups_follow_redeclarations():
    registry = SchemaRegistry()
    registry.declare_column("a", "string")
    assert registry.column("a").logical_type is LogicalType.SHORT_TEXT
    assert "a" in registry

    registry.declare_column("a", "boolean")
    registry.declare_column("b", "date")

    assert registry.column("a").logical_type is LogicalType.BOOLEAN
    assert "b" in registry
    snapshot = registry.columns_hash()
    snapshot["c"] = snapshot.pop("a")
    assert "c" not in registry
    assert registry.column("a") is not None
