"""
Column type descriptor grammar, parser, and validator.

Turns descriptor text such as ``"struct<a:array<integer>,b:map<string,double>>"`` into a
TypeNode tree (structschema.core.datatypes), validating eagerly and failing fast.

Responsibilities
- Expose the canonical EBNF (``types.ebnf`` next to this module) verbatim and parsed.
- Define the primitive alias table and the canonical PrimitiveKind enum.
- Provide the depth-aware splitter used for struct field lists, struct fields, and map bodies.
- Parse and validate descriptors (``parse_type``, ``check_type``, ``is_valid_type``).

Design principles
-----------------
1) Depth-aware splitting:
   Field lists and map bodies contain commas of their own as soon as a member type is
   an ``array<...>``, ``map<...,...>`` or ``struct<...>``; nested struct fields contain
   further colons. Separators are only honoured at bracket depth 0.

2) Strict text:
   Literals are case-sensitive and no whitespace is tolerated. A trailing comma in a
   field list is an error, never silently stripped.

3) Aliases are kept, not canonicalized:
   ``Primitive("numeric")`` stays ``numeric``. Mapping to engine type names belongs to
   the backend adapter (see structschema.backend.polars_backend).

Alias table
-----------

| Canonical (PrimitiveKind) | Accepted aliases
|---------------------------|----------------------
| byte                      | byte
| integer                   | integer
| float                     | float
| double                    | double, numeric
| string                    | character, string
| binary                    | binary, raw
| boolean                   | logical, boolean
| timestamp                 | timestamp
| date                      | date

Examples
--------
>>> from structschema.core.grammar import parse_type, split_top_level
>>> parse_type("array<integer>")
Array(kind='array', element=Primitive(kind='primitive', name='integer'))
>>> split_top_level("a:array<struct<x:integer,y:string>>,b:string", ",")
('a:array<struct<x:integer,y:string>>', 'b:string')
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from .datatypes import Array, Map, Primitive, Struct, StructEntry, TypeNode
from .errors import ValidationError

__all__ = [
    "EBNF_GRAMMAR",
    "GrammarProduction",
    "ParsedGrammar",
    "PARSED_GRAMMAR",
    "PrimitiveKind",
    "PRIMITIVE_ALIASES",
    "STRING_KEY_ALIASES",
    # helpers/validators
    "canonical_primitive",
    "split_top_level",
    "split_field",
    "parse_type",
    "check_type",
    "is_valid_type",
]

# Canonical grammar file next to this module
_EBNF_PATH = Path(__file__).with_name("types.ebnf")


def _load_ebnf_text() -> str:
    # Return the canonical EBNF text (no normalization).
    return _EBNF_PATH.read_text(encoding="utf-8")


EBNF_GRAMMAR: Final[str] = _load_ebnf_text()


@dataclass(slots=True, frozen=True)
class GrammarProduction:
    """Parsed production with convenient accessors."""

    name: str
    expression: str
    alternatives: tuple[str, ...]
    leading_terminals: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class ParsedGrammar:
    """Container for parsed grammar productions."""

    productions: dict[str, GrammarProduction]

    def production(self, name: str) -> GrammarProduction:
        try:
            return self.productions[name]
        except KeyError as exc:
            raise KeyError(f"Unknown grammar production: {name}") from exc

    def terminals(self, name: str) -> tuple[str, ...]:
        return self.production(name).leading_terminals

    @classmethod
    def from_text(cls, text: str) -> ParsedGrammar:
        stripped = _strip_ebnf_comments(text)
        productions: dict[str, GrammarProduction] = {}
        for match in _RULE_RE.finditer(stripped):
            rule_name = match.group(1)
            expression = match.group(2).strip()
            alternatives = _split_alternatives(expression)
            leading = tuple(
                literal
                for literal in (_first_literal(part) for part in alternatives)
                if literal is not None
            )
            productions[rule_name] = GrammarProduction(
                name=rule_name,
                expression=expression,
                alternatives=alternatives,
                leading_terminals=_dedupe_preserving_order(leading),
            )
        return cls(productions=productions)


_COMMENT_RE = re.compile(r"\(\*.*?\*\)", re.DOTALL)
_RULE_RE = re.compile(r"(?ms)^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*;")
_LITERAL_RE = re.compile(r"\"([^\"]+)\"")


def _strip_ebnf_comments(text: str) -> str:
    return _COMMENT_RE.sub(" ", text)


def _split_alternatives(expression: str) -> tuple[str, ...]:
    parts: list[str] = []
    buffer: list[str] = []
    depth = 0
    quote: str | None = None
    for ch in expression:
        if quote is not None:
            buffer.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in ('"', "?"):
            quote = ch
            buffer.append(ch)
        elif ch in "([{":
            depth += 1
            buffer.append(ch)
        elif ch in ")]}":
            depth = max(0, depth - 1)
            buffer.append(ch)
        elif ch == "|" and depth == 0:
            part = "".join(buffer).strip()
            if part:
                parts.append(part)
            buffer = []
        else:
            buffer.append(ch)
    tail = "".join(buffer).strip()
    if tail:
        parts.append(tail)
    return tuple(parts)


def _first_literal(alt: str) -> str | None:
    match = _LITERAL_RE.search(alt)
    return match.group(1) if match else None


def _dedupe_preserving_order(items: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return tuple(ordered)


# ============================================================================
# PRIMITIVES
# ============================================================================


class PrimitiveKind(Enum):
    """
    Canonical primitive column types.

    Serialized values are the names adapters canonicalize aliases to, e.g. both
    "numeric" and "double" resolve to PrimitiveKind.DOUBLE.
    """

    BYTE = "byte"
    INTEGER = "integer"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BINARY = "binary"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    DATE = "date"


# Ordered as the alternatives of the `primitive` production in types.ebnf.
PRIMITIVE_ALIASES: Final[dict[str, PrimitiveKind]] = {
    "byte": PrimitiveKind.BYTE,
    "integer": PrimitiveKind.INTEGER,
    "float": PrimitiveKind.FLOAT,
    "double": PrimitiveKind.DOUBLE,
    "numeric": PrimitiveKind.DOUBLE,
    "character": PrimitiveKind.STRING,
    "string": PrimitiveKind.STRING,
    "binary": PrimitiveKind.BINARY,
    "raw": PrimitiveKind.BINARY,
    "logical": PrimitiveKind.BOOLEAN,
    "boolean": PrimitiveKind.BOOLEAN,
    "timestamp": PrimitiveKind.TIMESTAMP,
    "date": PrimitiveKind.DATE,
}

STRING_KEY_ALIASES: Final[tuple[str, ...]] = tuple(
    alias for alias, kind in PRIMITIVE_ALIASES.items() if kind is PrimitiveKind.STRING
)


def canonical_primitive(alias: str) -> PrimitiveKind:
    """
    Resolve a primitive alias to its canonical kind.

    Args:
      alias (str): Alias as written in a descriptor (e.g., "numeric").

    Returns:
      PrimitiveKind: Canonical kind (e.g., PrimitiveKind.DOUBLE).

    Raises:
      ValidationError: If alias is not in the alias table.

    Examples:
      >>> canonical_primitive("logical")
      <PrimitiveKind.BOOLEAN: 'boolean'>
    """
    try:
        return PRIMITIVE_ALIASES[alias]
    except KeyError as exc:
        raise ValidationError(f"unsupported type for schema: {alias}") from exc


# ============================================================================
# Depth-aware splitting
# ============================================================================

_OPEN = "<"
_CLOSE = ">"
_ARRAY_PREFIX: Final[str] = "array<"
_MAP_PREFIX: Final[str] = "map<"
_STRUCT_PREFIX: Final[str] = "struct<"
_IDENTIFIER_RE: Final[re.Pattern[str]] = re.compile(r"^[^<>,:\s]+$")


def split_top_level(text: str, sep: str, maxsplit: int = -1) -> tuple[str, ...]:
    """
    Split text on a single-character separator, honouring only bracket depth 0.

    Args:
      text (str): Text to split (e.g., the body of a struct or map descriptor).
      sep (str): Separator character ("," or ":").
      maxsplit (int): Maximum number of splits; -1 for no limit.

    Returns:
      tuple[str, ...]: Parts in order. Empty parts are preserved, so a trailing
      separator yields a trailing "".

    Raises:
      ValidationError: If "<" and ">" are unbalanced in text.

    Examples:
      >>> split_top_level("string,map<string,integer>", ",")
      ('string', 'map<string,integer>')
      >>> split_top_level("a:struct<x:integer>", ":", maxsplit=1)
      ('a', 'struct<x:integer>')
    """
    parts: list[str] = []
    buffer: list[str] = []
    depth = 0
    for ch in text:
        if ch == _OPEN:
            depth += 1
        elif ch == _CLOSE:
            depth -= 1
            if depth < 0:
                raise ValidationError(
                    f"unsupported type for schema: unbalanced brackets in {text!r}"
                )
        elif ch == sep and depth == 0 and (maxsplit < 0 or len(parts) < maxsplit):
            parts.append("".join(buffer))
            buffer = []
            continue
        buffer.append(ch)
    if depth != 0:
        raise ValidationError(f"unsupported type for schema: unbalanced brackets in {text!r}")
    parts.append("".join(buffer))
    return tuple(parts)


def split_field(field: str) -> tuple[str, str]:
    """
    Split one struct member ``name:type`` at its first depth-0 colon.

    Raises:
      ValidationError: If there is no separating colon, either side is empty, or the
      name is not a valid identifier.
    """
    parts = split_top_level(field, ":", maxsplit=1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValidationError(f"unsupported type for schema: struct field {field!r} is not name:type")
    name, type_text = parts
    if not _IDENTIFIER_RE.match(name):
        raise ValidationError(f"unsupported type for schema: invalid struct field name {name!r}")
    return name, type_text


# ============================================================================
# Parser & validator
# ============================================================================


def _unsupported(descriptor: str) -> ValidationError:
    return ValidationError(f"unsupported type for schema: {descriptor}")


def _body(descriptor: str, prefix: str) -> str | None:
    # Inner text of `prefix ... ">"`, or None when the descriptor is not of that shape.
    if descriptor.startswith(prefix) and descriptor.endswith(_CLOSE):
        inner = descriptor[len(prefix) : -1]
        if inner:
            return inner
    return None


def _parse_array(descriptor: str) -> TypeNode:
    inner = _body(descriptor, _ARRAY_PREFIX)
    if inner is None:
        raise _unsupported(descriptor)
    return Array(element=_parse(inner))


def _parse_map(descriptor: str) -> TypeNode:
    inner = _body(descriptor, _MAP_PREFIX)
    if inner is None:
        raise _unsupported(descriptor)
    parts = split_top_level(inner, ",")
    if len(parts) != 2 or not all(parts):
        raise _unsupported(descriptor)
    key, value = parts
    if key not in STRING_KEY_ALIASES:
        raise ValidationError(
            f"key type in a map must be string-like ({' or '.join(STRING_KEY_ALIASES)}), "
            f"got {key!r} in {descriptor}"
        )
    return Map(key=Primitive(name=key), value=_parse(value))


def _parse_struct(descriptor: str) -> TypeNode:
    inner = _body(descriptor, _STRUCT_PREFIX)
    if inner is None:
        raise _unsupported(descriptor)
    if inner.endswith(","):
        raise ValidationError(
            f"unsupported type for schema: {descriptor} (trailing comma in field list)"
        )
    entries: list[StructEntry] = []
    for part in split_top_level(inner, ","):
        if not part:
            raise ValidationError(f"unsupported type for schema: {descriptor} (empty field)")
        name, type_text = split_field(part)
        entries.append(StructEntry(name=name, data_type=_parse(type_text)))
    return Struct(fields=tuple(entries))


def _parse(descriptor: str) -> TypeNode:
    if descriptor in PRIMITIVE_ALIASES:
        return Primitive(name=descriptor)
    head = descriptor[:1]
    if head == "a":
        return _parse_array(descriptor)
    if head == "m":
        return _parse_map(descriptor)
    if head == "s":
        return _parse_struct(descriptor)
    raise _unsupported(descriptor)


def parse_type(descriptor: str) -> TypeNode:
    """
    Parse a type descriptor into a TypeNode tree.

    Primitive aliases are looked up first; otherwise the descriptor is dispatched on its
    first character ('a' array, 'm' map, 's' struct) and parsed recursively.

    Args:
      descriptor (str): Descriptor text, e.g. "map<string,array<double>>".

    Returns:
      TypeNode: Parsed node. Aliases are kept as written.

    Raises:
      ValidationError: If the descriptor does not match the grammar, names an unknown
      primitive, has unbalanced brackets or a trailing comma in a field list, or uses a
      map key that is not string-like. Also raised when nesting exceeds the
      interpreter recursion limit.

    Examples:
      >>> parse_type("map<string,double>")
      Map(kind='map', key=Primitive(kind='primitive', name='string'), value=Primitive(kind='primitive', name='double'))
    """
    try:
        return _parse(descriptor)
    except RecursionError as exc:
        raise ValidationError("unsupported type for schema: nesting too deep") from exc


def check_type(descriptor: str) -> None:
    """
    Validate a descriptor without keeping the parsed tree.

    Raises:
      ValidationError: Same conditions as parse_type.
    """
    parse_type(descriptor)


def is_valid_type(descriptor: str) -> bool:
    """Return True if descriptor parses, False on ValidationError."""
    try:
        parse_type(descriptor)
    except ValidationError:
        return False
    return True


def _assert_production_matches(
    grammar: ParsedGrammar, rule_name: str, expected: Iterable[str]
) -> None:
    actual = list(grammar.terminals(rule_name))
    wanted = list(expected)
    if actual != wanted:
        actual_set = set(actual)
        wanted_set = set(wanted)
        issues: list[str] = []
        missing = wanted_set - actual_set
        extra = actual_set - wanted_set
        if missing:
            issues.append(f"missing {sorted(missing)}")
        if extra:
            issues.append(f"unexpected {sorted(extra)}")
        if not issues:
            issues.append("ordering differs")
        raise ValueError(
            f"Grammar production {rule_name!r} out of sync with alias table: "
            + "; ".join(issues)
        )


PARSED_GRAMMAR: Final[ParsedGrammar] = ParsedGrammar.from_text(EBNF_GRAMMAR)
_assert_production_matches(PARSED_GRAMMAR, "primitive", PRIMITIVE_ALIASES)
_assert_production_matches(PARSED_GRAMMAR, "string_key", STRING_KEY_ALIASES)
