import pytest

from structschema.core.errors import ArgumentError, ValidationError
from structschema.core.grammar import parse_type
from structschema.core.schema import (
    StructType,
    ensure_unique_field_names,
    struct_field,
    struct_type,
)


def test_struct_type_from_single_field() -> None:
    schema = struct_type(struct_field("a", "integer"))
    assert isinstance(schema, StructType)
    assert len(schema) == 1
    assert schema.field_names() == ("a",)


def test_struct_type_preserves_order() -> None:
    fields = [struct_field(n, "string") for n in ("z", "a", "m")]
    schema = struct_type(*fields)
    assert schema.field_names() == ("z", "a", "m")
    assert list(schema) == fields
    assert schema.fields == tuple(fields)


def test_struct_type_requires_a_field() -> None:
    with pytest.raises(ArgumentError):
        struct_type()


@pytest.mark.parametrize("bad", [5, "a", None, parse_type("integer")])
def test_struct_type_rejects_non_fields(bad) -> None:
    with pytest.raises(ArgumentError, match="all arguments must be schema fields"):
        struct_type(struct_field("a", "integer"), bad)


def test_struct_type_rejects_handle_shaped_objects() -> None:
    class LooksLikeAField:
        name = "a"
        data_type = "integer"
        nullable = True

    with pytest.raises(ArgumentError):
        struct_type(LooksLikeAField())  # type: ignore[arg-type]


def test_direct_construction_validates_and_freezes() -> None:
    schema = StructType(fields=[struct_field("a", "integer")])  # type: ignore[arg-type]
    assert isinstance(schema.fields, tuple)
    with pytest.raises(ArgumentError):
        StructType(fields=())
    with pytest.raises(ArgumentError):
        StructType(fields=5)  # type: ignore[arg-type]


def test_struct_type_allows_duplicate_names_by_default() -> None:
    schema = struct_type(struct_field("a", "integer"), struct_field("a", "string"))
    assert schema.field_names() == ("a", "a")


def test_ensure_unique_field_names_top_level() -> None:
    schema = struct_type(struct_field("a", "integer"), struct_field("a", "string"))
    with pytest.raises(ValidationError, match="duplicate field names: a"):
        ensure_unique_field_names(schema)


def test_ensure_unique_field_names_nested() -> None:
    schema = struct_type(
        struct_field("ok", "integer"),
        struct_field("rows", "array<struct<x:integer,x:string>>"),
    )
    with pytest.raises(ValidationError, match=r"rows\[\]\.x"):
        ensure_unique_field_names(schema)


def test_ensure_unique_field_names_on_nodes() -> None:
    ensure_unique_field_names(parse_type("struct<a:integer,b:struct<a:integer>>"))
    ensure_unique_field_names(parse_type("integer"))
    with pytest.raises(ValidationError):
        ensure_unique_field_names(parse_type("struct<a:integer,a:integer>"))
    with pytest.raises(ValidationError):
        ensure_unique_field_names(parse_type("map<string,struct<k:date,k:date>>"))


def test_ensure_unique_field_names_passes_for_distinct_names() -> None:
    schema = struct_type(struct_field("a", "integer"), struct_field("b", "struct<a:integer>"))
    ensure_unique_field_names(schema)
