import polars as pl
import pytest

from structschema.backend.config import BackendSettings
from structschema.backend.convert import to_backend
from structschema.backend.polars_backend import PolarsBackend, canonicalize
from structschema.core.adapter import BackendAdapter
from structschema.core.errors import ArgumentError, BackendError, ValidationError
from structschema.core.grammar import parse_type
from structschema.core.printer import render_type
from structschema.core.schema import struct_field, struct_type


@pytest.fixture()
def backend() -> PolarsBackend:
    return PolarsBackend()


def test_polars_backend_satisfies_protocol(backend: PolarsBackend) -> None:
    assert isinstance(backend, BackendAdapter)


@pytest.mark.parametrize(
    "descriptor,expected",
    [
        ("byte", pl.Int8()),
        ("integer", pl.Int32()),
        ("float", pl.Float32()),
        ("double", pl.Float64()),
        ("numeric", pl.Float64()),
        ("string", pl.Utf8()),
        ("character", pl.Utf8()),
        ("binary", pl.Binary()),
        ("raw", pl.Binary()),
        ("boolean", pl.Boolean()),
        ("logical", pl.Boolean()),
        ("date", pl.Date()),
        ("timestamp", pl.Datetime("us")),
        ("array<integer>", pl.List(pl.Int32())),
        (
            "map<string,double>",
            pl.List(pl.Struct([pl.Field("key", pl.Utf8()), pl.Field("value", pl.Float64())])),
        ),
        (
            "struct<a:integer,b:array<raw>>",
            pl.Struct([pl.Field("a", pl.Int32()), pl.Field("b", pl.List(pl.Binary()))]),
        ),
    ],
)
def test_descriptor_to_polars_dtype(backend: PolarsBackend, descriptor: str, expected) -> None:
    fh = backend.create_struct_field("c", descriptor, True)
    th = backend.field_type(fh)
    assert backend.polars_dtype(th) == expected
    assert backend.type_to_string(th) == str(expected)


def test_timestamp_follows_settings() -> None:
    backend = PolarsBackend(BackendSettings(timestamp_unit="ms", timestamp_time_zone="UTC"))
    th = backend.field_type(backend.create_struct_field("ts", "timestamp", True))
    assert backend.polars_dtype(th) == pl.Datetime("ms", "UTC")


def test_simple_string_is_canonical_descriptor(backend: PolarsBackend) -> None:
    fh = backend.create_struct_field("m", "map<character,array<numeric>>", True)
    simple = backend.type_to_simple_string(backend.field_type(fh))
    assert simple == "map<string,array<double>>"
    assert render_type(parse_type(simple)) == simple


def test_canonicalize_keeps_structure() -> None:
    node = canonicalize(parse_type("struct<a:logical,b:map<string,raw>>"))
    assert render_type(node) == "struct<a:boolean,b:map<string,binary>>"


def test_field_accessors(backend: PolarsBackend) -> None:
    fh = backend.create_struct_field("a", "integer", False)
    assert backend.field_name(fh) == "a"
    assert backend.field_nullable(fh) is False


def test_struct_type_fields_keep_order(backend: PolarsBackend) -> None:
    handles = [backend.create_struct_field(n, "string", True) for n in ("z", "a", "m")]
    th = backend.create_struct_type(handles)
    assert backend.type_fields(th) == tuple(handles)
    assert backend.type_to_simple_string(th) == "struct<z:string,a:string,m:string>"


def test_nested_struct_type_fields_are_registered_once(backend: PolarsBackend) -> None:
    fh = backend.create_struct_field("s", "struct<x:integer,y:string>", True)
    th = backend.field_type(fh)
    members = backend.type_fields(th)
    assert [backend.field_name(h) for h in members] == ["x", "y"]
    assert backend.type_fields(th) == members


def test_type_fields_of_non_struct_raises(backend: PolarsBackend) -> None:
    th = backend.field_type(backend.create_struct_field("a", "array<integer>", True))
    with pytest.raises(BackendError, match="not a struct type"):
        backend.type_fields(th)


def test_released_handles_raise_backend_error(backend: PolarsBackend) -> None:
    fh = backend.create_struct_field("a", "integer", True)
    backend.release(fh)
    with pytest.raises(BackendError):
        backend.field_name(fh)
    with pytest.raises(BackendError):
        backend.release(fh)


def test_unknown_handles_raise_backend_error(backend: PolarsBackend) -> None:
    with pytest.raises(BackendError):
        backend.type_to_string(999)  # type: ignore[arg-type]
    with pytest.raises(BackendError):
        backend.create_struct_type([999])  # type: ignore[list-item]


def test_create_struct_field_validates(backend: PolarsBackend) -> None:
    with pytest.raises(ValidationError):
        backend.create_struct_field("a", "map<integer,string>", True)
    with pytest.raises(ArgumentError):
        backend.create_struct_field("a", "integer", "yes")  # type: ignore[arg-type]
    with pytest.raises(ArgumentError):
        backend.create_struct_type([])


def test_polars_schema_and_empty_frame(backend: PolarsBackend) -> None:
    th = backend.create_struct_type(
        [
            backend.create_struct_field("id", "integer", False),
            backend.create_struct_field("tags", "array<string>", True),
        ]
    )
    schema = backend.polars_schema(th)
    assert list(schema.names()) == ["id", "tags"]
    assert schema["id"] == pl.Int32
    assert schema["tags"] == pl.List(pl.Utf8())

    df = backend.empty_frame(th)
    assert df.height == 0
    assert df.columns == ["id", "tags"]
    assert df.schema["tags"] == pl.List(pl.Utf8())


def test_duplicate_column_names_raise_backend_error(backend: PolarsBackend) -> None:
    hydrated = to_backend(
        struct_type(struct_field("a", "integer"), struct_field("a", "string")), backend
    )
    assert hydrated.field_names() == ("a", "a")
    with pytest.raises(BackendError, match="duplicate column names"):
        backend.polars_schema(hydrated.handle)
    with pytest.raises(BackendError, match="duplicate column names"):
        backend.empty_frame(hydrated.handle)
