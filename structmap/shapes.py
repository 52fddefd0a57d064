"""Shape classification of runtime values and type annotations.

The flattening engine decides how to recurse from two sources:

- the runtime value: is it a record (dataclass instance), a mapping, a
  sequence, or something opaque;
- the declared annotation of the field holding it: does a mapping or a
  sequence declare record elements.

``Optional[X]`` annotations play the role of nullable wrappers and are
unwrapped transparently; ``None`` is the absent value.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import numbers
import types
import typing
import weakref
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from .errors import NotARecordError
from .tags import OMIT_FIELD

_STRINGS = (str, bytes, bytearray)
_NONE_TYPE = type(None)
_UNION_TYPES = (typing.Union, types.UnionType)


class Shape(Enum):
    """Structural classification that selects a recursion rule."""

    PRIMITIVE = "primitive"
    RECORD = "record"
    MAP = "map"
    SLICE = "slice"


@dataclass(frozen=True)
class FieldDescriptor:
    """One exported field of a record, as seen by a single flatten call.

    Attributes
    ----------
    name : str
        Declared field name.
    tag : str
        Raw tag string (empty when the field has none).
    value : Any
        Current field value.
    hint : Any
        Resolved type annotation, or the raw ``field.type`` when it cannot
        be resolved.
    """

    name: str
    tag: str
    value: Any
    hint: Any = None


def is_record(value: Any) -> bool:
    """Return True for dataclass instances (not dataclass types)."""
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def require_record(value: Any) -> None:
    """Raise :class:`NotARecordError` unless *value* is a record."""
    if not is_record(value):
        raise NotARecordError(f"not a record: {type(value).__name__}")


def classify(value: Any) -> Shape:
    """Classify a runtime value.

    Parameters
    ----------
    value : Any
        Any value. ``None`` is the absent value and classifies as primitive.

    Returns
    -------
    Shape
        ``RECORD`` for dataclass instances, ``MAP`` for mappings, ``SLICE``
        for sequences other than str/bytes, ``PRIMITIVE`` for everything else
        (numbers, strings, datetimes, sets, arbitrary objects).
    """
    if value is None:
        return Shape.PRIMITIVE
    if is_record(value):
        return Shape.RECORD
    if isinstance(value, cabc.Mapping):
        return Shape.MAP
    if isinstance(value, cabc.Sequence) and not isinstance(value, _STRINGS):
        return Shape.SLICE
    return Shape.PRIMITIVE


def unwrap_optional(hint: Any) -> Any:
    """Strip ``Optional[...]`` layers from an annotation.

    ``Optional[Optional[X]]``, ``X | None`` and ``Union[X, None]`` all give ``X``.
    Unions of several non-None members are returned unchanged.
    """
    while typing.get_origin(hint) in _UNION_TYPES:
        args = typing.get_args(hint)
        rest = [a for a in args if a is not _NONE_TYPE]
        if len(rest) != 1 or len(rest) == len(args):
            return hint
        hint = rest[0]
    return hint


def _origin(hint: Any) -> Any:
    return typing.get_origin(hint) or hint


def is_record_type(hint: Any) -> bool:
    """Return True if *hint* names a dataclass (possibly parameterized)."""
    origin = _origin(hint)
    return isinstance(origin, type) and dataclasses.is_dataclass(origin)


def classify_hint(hint: Any) -> Shape:
    """Classify a type annotation after unwrapping ``Optional``.

    ``None``, ``Any``, type variables and unresolved string annotations are
    opaque and classify as ``PRIMITIVE``.
    """
    hint = unwrap_optional(hint)
    origin = _origin(hint)
    if origin is Any or not isinstance(origin, type):
        return Shape.PRIMITIVE
    if dataclasses.is_dataclass(origin):
        return Shape.RECORD
    if issubclass(origin, cabc.Mapping):
        return Shape.MAP
    if issubclass(origin, cabc.Sequence) and not issubclass(origin, _STRINGS):
        return Shape.SLICE
    return Shape.PRIMITIVE


def element_hint(hint: Any) -> Any:
    """Return the element annotation of a container annotation.

    For mappings this is the value type, for sequences the item type. Returns
    ``None`` when the container is unparameterized or heterogeneous
    (``tuple[int, str]``).
    """
    hint = unwrap_optional(hint)
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if not isinstance(origin, type) or not args:
        return None
    if issubclass(origin, cabc.Mapping):
        return args[1] if len(args) == 2 else None
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return args[0] if all(a == args[0] for a in args) else None
    return args[0] if len(args) == 1 else None


_HINTS: "weakref.WeakKeyDictionary[type, Dict[str, Any]]" = weakref.WeakKeyDictionary()
_HINT_ERRORS = (NameError, TypeError, AttributeError, SyntaxError)


def _annotation_owner(cls: type, name: str) -> type:
    for base in cls.__mro__:
        if name in vars(base).get("__annotations__", {}):
            return base
    return cls


def _field_hint(cls: type, f: dataclasses.Field) -> Any:
    """Resolve one field annotation on its own, or return the raw ``f.type``."""
    owner = _annotation_owner(cls, f.name)
    holder = type(owner.__name__, (), {"__module__": owner.__module__, "__annotations__": {f.name: f.type}})
    try:
        return typing.get_type_hints(holder, localns=dict(vars(owner)))[f.name]
    except _HINT_ERRORS:
        return f.type


def _type_hints(cls: type) -> Dict[str, Any]:
    hints = _HINTS.get(cls)
    if hints is None:
        try:
            hints = typing.get_type_hints(cls)
        except _HINT_ERRORS:
            # resolve field by field so one unresolvable name (a TYPE_CHECKING
            # import, a function local) leaves the other fields typed
            hints = {f.name: _field_hint(cls, f) for f in dataclasses.fields(cls)}
        _HINTS[cls] = hints
    return hints


def record_fields(record: Any, tag_name: str) -> List[FieldDescriptor]:
    """Enumerate the exported fields of a record in declaration order.

    Fields whose name starts with ``_`` are private and skipped, as are fields
    whose tag is exactly ``"-"``.

    Raises
    ------
    NotARecordError
        If *record* is not a dataclass instance.
    """
    require_record(record)
    hints = _type_hints(type(record))
    out: List[FieldDescriptor] = []
    for f in dataclasses.fields(record):
        if f.name.startswith("_"):
            continue
        tag = f.metadata.get(tag_name, "")
        if tag == OMIT_FIELD:
            continue
        out.append(FieldDescriptor(f.name, tag, getattr(record, f.name), hints.get(f.name, f.type)))
    return out


def is_zero(value: Any, _seen: Optional[Set[int]] = None) -> bool:
    """Deep zero-value test used by ``omitempty``.

    ``None``, ``False``, numeric zero and empty strings/containers are zero.
    A record is zero when all of its fields, private ones included, are zero.
    Any other object is not zero.
    """
    if value is None:
        return True
    if is_record(value):
        seen = set() if _seen is None else _seen
        if id(value) in seen:
            return False
        seen.add(id(value))
        return all(is_zero(getattr(value, f.name), seen) for f in dataclasses.fields(value))
    if isinstance(value, numbers.Number):
        return value == 0
    if isinstance(value, (cabc.Mapping, cabc.Sequence, cabc.Set)):
        return len(value) == 0
    return False


def has_str(value: Any) -> bool:
    """Return True if the value's type defines its own ``__str__``."""
    return type(value).__str__ is not object.__str__
