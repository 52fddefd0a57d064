"""
errors
======

Exceptions raised by :mod:`structmap`.

Precondition violations (flattening something that is not a record, tabulating
something that is not a sequence) derive from :class:`TypeError`; traversal
guards derive from :class:`ValueError`. Catch :class:`StructMapError` to handle
all of them at once.
"""

from __future__ import annotations


class StructMapError(Exception):
    """Base class for all structmap errors."""


class NotARecordError(StructMapError, TypeError):
    """A record (dataclass instance) was required but something else was given."""


class NotASequenceError(StructMapError, TypeError):
    """A list/tuple of items was required but something else was given."""


class CycleError(StructMapError, ValueError):
    """A value refers back to itself on the path being walked."""


class DepthLimitError(StructMapError, ValueError):
    """Nesting went deeper than the configured ``max_depth``."""
