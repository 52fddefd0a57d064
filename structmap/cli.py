"""Command-line interface for dumping objects and reading snapshots."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from .config import load_config
from .dump import dump, pretty
from .errors import StructMapError
from .snapshot import read_snapshots
from .table import TableOptions


def resolve_target(spec: str) -> Any:
    """Import ``package.module:attr.attr`` and return the attribute.

    Raises
    ------
    ValueError
        If *spec* has no ``:`` or an attribute is missing.
    ImportError
        If the module cannot be imported.
    """
    module_name, sep, attr_path = spec.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"target must look like 'module:attribute', got {spec!r}")

    obj: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise ValueError(f"{module_name} has no attribute {attr_path!r}") from None
    return obj


def _cmd_dump(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    target = resolve_target(args.target)
    if args.table:
        TableOptions(headers=args.headers).print_dump_table(target, config)
    elif args.pretty:
        print(pretty(target))
    else:
        print(dump(target, config))
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    snapshots = read_snapshots(args.path)
    if args.table is None:
        for snapshot in snapshots:
            print(dump(snapshot))
        return 0

    rows = []
    for snapshot in snapshots:
        value = snapshot.get(args.table)
        if isinstance(value, list):
            rows.extend(value)
        elif value is not None:
            rows.append(value)
    TableOptions(headers=args.headers).print_dump_table(rows)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="structmap", description="Dump Python objects for debugging.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    dump_parser = subparsers.add_parser("dump", help="Dump an importable object")
    dump_parser.add_argument("target", help="Object to dump, as module:attribute")
    dump_parser.add_argument("--config", type=Path, default=None, help="Path to YAML config")
    mode = dump_parser.add_mutually_exclusive_group()
    mode.add_argument("--table", action="store_true", help="Render a list of records as a table")
    mode.add_argument("--pretty", action="store_true", help="Print a deep repr of the raw object")
    dump_parser.add_argument("--headers", nargs="+", default=None, help="Table columns")
    dump_parser.set_defaults(func=_cmd_dump)

    show_parser = subparsers.add_parser("show", help="Print snapshots written via INSPECT_VARS")
    show_parser.add_argument("path", type=Path, help="Snapshot file")
    show_parser.add_argument("--table", metavar="NAME", default=None, help="Tabulate variable NAME")
    show_parser.add_argument("--headers", nargs="+", default=None, help="Table columns")
    show_parser.set_defaults(func=_cmd_show)

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return args.func(args)
    except (StructMapError, ValueError, ImportError, OSError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
