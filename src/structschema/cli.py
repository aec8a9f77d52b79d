from __future__ import annotations

import argparse
import logging
import sys

from structschema.backend import BackendSettings, PolarsBackend, canonicalize, to_backend
from structschema.core.errors import ArgumentError, BackendError, ValidationError
from structschema.core.grammar import parse_type
from structschema.core.printer import print_schema, render_type
from structschema.core.schema import ensure_unique_field_names, struct_field, struct_type

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_SCHEMA_ERRORS = (ValidationError, ArgumentError, BackendError)


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(level=getattr(logging, level_name.upper(), logging.WARNING), format=_LOG_FORMAT)


def _split_assignment(raw: str) -> tuple[str, str]:
    """Split a NAME=DESCRIPTOR argument at its first '='."""
    name, sep, descriptor = raw.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=DESCRIPTOR, got {raw!r}")
    return name, descriptor


def _cmd_check(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="check", description="Validate type descriptors.")
    p.add_argument("descriptors", nargs="+", metavar="DESCRIPTOR", help="Type descriptor text.")
    p.add_argument(
        "--canonical",
        action="store_true",
        help="Print descriptors with primitive aliases canonicalized (numeric -> double, ...).",
    )
    p.add_argument("--log-level", type=str, default=None, help="Logging level name.")
    args = p.parse_args(argv)
    _configure_logging(args.log_level or BackendSettings.from_env().log_level)

    failures = 0
    for descriptor in args.descriptors:
        try:
            node = parse_type(descriptor)
        except ValidationError as exc:
            failures += 1
            print(f"[ERROR] {exc}", file=sys.stderr)
            continue
        print(f"ok: {render_type(canonicalize(node) if args.canonical else node)}")
    logger.info("checked %d descriptors, %d failed", len(args.descriptors), failures)
    return 1 if failures else 0


def _cmd_show(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="show", description="Build a schema and print it.")
    p.add_argument(
        "fields",
        nargs="+",
        type=_split_assignment,
        metavar="NAME=DESCRIPTOR",
        help="Field name and type descriptor, in column order.",
    )
    p.add_argument(
        "--not-null",
        action="append",
        default=[],
        metavar="NAME",
        help="Mark a field as non-nullable (repeatable).",
    )
    p.add_argument(
        "--backend",
        action="store_true",
        help="Create the schema in the Polars backend and print the hydrated schema.",
    )
    p.add_argument("--unique-names", action="store_true", help="Require unique field names.")
    p.add_argument("--config", type=str, default=None, help="Path to a TOML settings file.")
    p.add_argument("--log-level", type=str, default=None, help="Logging level name.")
    args = p.parse_args(argv)

    settings = BackendSettings.load(args.config)
    _configure_logging(args.log_level or settings.log_level)

    names = [name for name, _ in args.fields]
    unknown = sorted(set(args.not_null) - set(names))
    if unknown:
        print(f"[ERROR] --not-null names unknown fields: {unknown}", file=sys.stderr)
        return 2

    unique = args.unique_names or settings.unique_field_names
    try:
        schema = struct_type(
            *(struct_field(name, descriptor, name not in args.not_null) for name, descriptor in args.fields)
        )
        if args.backend:
            print_schema(to_backend(schema, PolarsBackend(settings), unique_field_names=unique))
        else:
            if unique:
                ensure_unique_field_names(schema)
            print_schema(schema)
    except _SCHEMA_ERRORS as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="structschema", description="Schema descriptor utilities CLI.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("check")
    sub.add_parser("show")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    if cmd == "check":
        code = _cmd_check(rest)
    elif cmd == "show":
        code = _cmd_show(rest)
    else:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":
    main()
