"""
dump
====

Human-readable dumps for debugging.

Two flavours are provided:

- :func:`dump`: the flattened representation as indented JSON with the
  quotes stripped. Compact and easy to scan in a terminal.
- :func:`pretty`: a deep repr of the raw object (types, nesting and all),
  rendered by :func:`rich.pretty.pretty_repr`.

:func:`to_jsonable` is the shared conversion used by :func:`dump` and the
snapshot writer.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Set

from rich.pretty import pretty_repr

from .config import FlattenConfig
from .errors import CycleError
from .flattener import Flattener
from .shapes import Shape, classify, is_record


def to_jsonable(value: Any, config: Optional[FlattenConfig] = None) -> Any:
    """Convert *value* into dicts, lists and scalars.

    Records are flattened, mappings get string keys and sequences become
    lists, all the way down, so raw values left by ``omitnested`` or by
    ``Any``-typed fields are converted as well. Records without exported
    fields and other opaque objects are returned as they are.

    Parameters
    ----------
    value : Any
        Value to convert.
    config : FlattenConfig | None, optional
        Flattening settings for the records met on the way.

    Raises
    ------
    CycleError
        If a container holds itself.
    """
    flattener = Flattener(config)
    active: Set[int] = set()

    def _convert(obj: Any) -> Any:
        if is_record(obj):
            flat = flattener.flatten(obj)
            if not flat:
                return obj
            obj = flat

        shape = classify(obj)
        if shape is Shape.PRIMITIVE:
            return obj
        if id(obj) in active:
            raise CycleError(f"{type(obj).__name__} contains itself")

        active.add(id(obj))
        try:
            if shape is Shape.MAP:
                return {str(k): _convert(v) for k, v in obj.items()}
            return [_convert(v) for v in obj]
        finally:
            active.discard(id(obj))

    return _convert(value)


def dump(value: Any, config: Optional[FlattenConfig] = None) -> str:
    """Return the flattened *value* as indented JSON without quotes.

    On an encoding error, or input nested too deep to walk, the error
    message is returned instead of raised.

    Examples
    --------
    >>> print(dump({"name": "Alice", "tags": ["a"]}))
    {
        name: Alice,
        tags: [
            a
        ]
    }
    """
    try:
        text = json.dumps(to_jsonable(value, config), indent=4, default=str)
    except (TypeError, ValueError, RecursionError) as exc:
        return str(exc)
    return text.replace('"', "")


def print_dump(value: Any, config: Optional[FlattenConfig] = None) -> None:
    print(dump(value, config))


def pretty(value: Any, max_width: int = 80) -> str:
    """Return a deep, multi-line repr of the raw *value*."""
    return pretty_repr(value, max_width=max_width)


def print_pretty(value: Any, max_width: int = 80) -> None:
    print(pretty(value, max_width=max_width))
