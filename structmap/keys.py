"""Column key aggregation across flattened records."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping


def aggregate_keys(mappings: Iterable[Mapping[str, Any]]) -> List[str]:
    """Return every key seen across *mappings*, first-seen order, no duplicates.

    Parameters
    ----------
    mappings : Iterable[Mapping[str, Any]]
        Flattened records, possibly with different key sets.

    Returns
    -------
    List[str]
        Keys in the order they are first encountered, scanning mappings in
        order and each mapping's keys in its own iteration order.

    Examples
    --------
    >>> aggregate_keys([{"a": 1, "b": 2}, {"b": 3, "c": 4}])
    ['a', 'b', 'c']
    >>> aggregate_keys([])
    []
    """
    seen = set()
    keys: List[str] = []
    for mapping in mappings:
        for key in mapping:
            if key not in seen:
                seen.add(key)
                keys.append(key)
    return keys
