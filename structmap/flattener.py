"""Core record flattening.

This module converts records (dataclass instances) into plain dictionaries
suitable for JSON encoding or table display. Each field's tag, stored in the
field metadata under the configured tag name, selects a policy:

- ``"-"``: drop the field
- ``"name"``: use ``name`` as the output key
- ``omitempty``: drop the field when its value is a zero value
- ``omitnested``: keep the raw value, do not recurse
- ``string``: output ``str(value)`` if the type defines ``__str__``, else drop
- ``flatten``: merge a nested record's (or mapping's) keys into the parent

Nested records are flattened recursively, as are mappings and sequences whose
annotation declares record elements. Everything else is passed through
untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Set

from .config import FlattenConfig
from .errors import CycleError, DepthLimitError
from .shapes import (
    Shape,
    classify,
    classify_hint,
    element_hint,
    has_str,
    is_record_type,
    is_zero,
    record_fields,
    require_record,
    unwrap_optional,
)
from .tags import FLATTEN, OMITEMPTY, OMITNESTED, STRING, parse_tag

logger = logging.getLogger(__name__)


class Flattener:
    """Flattens records according to one :class:`FlattenConfig`.

    The config is captured at construction. A flattener keeps no state
    between calls and can be shared.

    Parameters
    ----------
    config : FlattenConfig | None, optional
        Tag name and depth limit (default: ``FlattenConfig()``).

    Examples
    --------
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Person:
    ...     name: str
    ...     age: int = field(default=0, metadata={"structs": ",omitempty"})
    >>> Flattener().flatten(Person("Alice"))
    {'name': 'Alice'}
    """

    def __init__(self, config: Optional[FlattenConfig] = None) -> None:
        self.config = config or FlattenConfig()

    def flatten(self, value: Any) -> Dict[str, Any]:
        """Flatten a record into a dictionary keyed by output field name.

        Raises
        ------
        NotARecordError
            If *value* is not a dataclass instance.
        CycleError
            If a record contains itself, directly or through a container.
        DepthLimitError
            If nesting exceeds ``config.max_depth``.
        """
        return self._flatten_record(value, set(), 0)

    def flatten_nested(self, value: Any, hint: Any = None) -> Any:
        """Convert a field value the way it would be converted inside a record.

        Parameters
        ----------
        value : Any
            The value to convert.
        hint : Any, optional
            Declared annotation of the value. Mappings and sequences are only
            descended into when the annotation declares record elements.
        """
        return self._nested(value, hint, set(), 0)

    def _flatten_record(self, value: Any, active: Set[int], depth: int) -> Dict[str, Any]:
        require_record(value)
        if self.config.max_depth is not None and depth > self.config.max_depth:
            raise DepthLimitError(
                f"nesting deeper than max_depth={self.config.max_depth} at {type(value).__name__}"
            )
        if id(value) in active:
            raise CycleError(f"{type(value).__name__} refers back to itself")

        active.add(id(value))
        try:
            out: Dict[str, Any] = {}
            self._fill(value, out, active, depth)
        finally:
            active.discard(id(value))
        return out

    def _fill(self, value: Any, out: Dict[str, Any], active: Set[int], depth: int) -> None:
        for fd in record_fields(value, self.config.tag_name):
            tag_name, opts = parse_tag(fd.tag)
            key = tag_name or fd.name

            if opts.has(OMITEMPTY) and is_zero(fd.value):
                continue

            if opts.has(STRING):
                if has_str(fd.value):
                    out[key] = str(fd.value)
                continue

            is_sub_struct = False
            if opts.has(OMITNESTED):
                final = fd.value
            else:
                final = self._nested(fd.value, fd.hint, active, depth + 1)
                is_sub_struct = classify(fd.value) in (Shape.RECORD, Shape.MAP)

            if is_sub_struct and opts.has(FLATTEN) and isinstance(final, Mapping):
                for k, v in final.items():
                    out[str(k)] = v
            else:
                out[key] = final

    def _nested(self, value: Any, hint: Any, active: Set[int], depth: int) -> Any:
        shape = classify(value)

        if shape is Shape.RECORD:
            m = self._flatten_record(value, active, depth)
            # records without exported fields (no public state) stay as they are
            if not m:
                logger.debug("%s has no exported fields, keeping raw value", type(value).__name__)
                return value
            return m

        if shape is Shape.MAP:
            elem = element_hint(hint)
            if not _map_of_records(elem):
                return value
            return {str(k): self._nested(v, elem, active, depth + 1) for k, v in value.items()}

        if shape is Shape.SLICE:
            elem = element_hint(hint)
            # Sequence[Record] and Sequence[Optional[Record]] only; list[int], list[Any] pass through
            if classify_hint(elem) is not Shape.RECORD:
                return value
            return [self._nested(v, elem, active, depth + 1) for v in value]

        return value


def _map_of_records(elem: Any) -> bool:
    """Mapping values are descended into for ``Record`` and ``Sequence[Record]`` only."""
    elem = unwrap_optional(elem)
    if is_record_type(elem):
        return True
    return classify_hint(elem) is Shape.SLICE and is_record_type(element_hint(elem))


def flatten(value: Any, config: Optional[FlattenConfig] = None) -> Dict[str, Any]:
    """Flatten a record with a one-off :class:`Flattener`.

    Parameters
    ----------
    value : Any
        A dataclass instance.
    config : FlattenConfig | None, optional
        Flattening settings (default: ``FlattenConfig()``).

    Returns
    -------
    Dict[str, Any]
        Output key to value, nested records flattened recursively.

    Examples
    --------
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Inner:
    ...     x: int
    ...     y: int
    >>> @dataclass
    ... class Outer:
    ...     inner: Inner = field(metadata={"structs": ",flatten"})
    >>> flatten(Outer(Inner(1, 2)))
    {'x': 1, 'y': 2}
    """
    return Flattener(config).flatten(value)


def flatten_nested(value: Any, hint: Any = None, config: Optional[FlattenConfig] = None) -> Any:
    """Convert any value with a one-off :class:`Flattener`; see :meth:`Flattener.flatten_nested`."""
    return Flattener(config).flatten_nested(value, hint)
