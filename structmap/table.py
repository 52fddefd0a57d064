"""Text table rendering for lists of records.

Each item is flattened into a row; the header is the union of all row keys in
first-seen order unless explicit headers are given. Rendering is done with
:class:`rich.table.Table` using an ASCII box and no wrapping.
"""

from __future__ import annotations

import collections.abc as cabc
import sys
from dataclasses import dataclass
from io import StringIO
from typing import Any, Callable, Dict, List, Optional, TextIO

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import FlattenConfig
from .errors import NotARecordError, NotASequenceError
from .flattener import Flattener
from .keys import aggregate_keys
from .shapes import Shape, classify, is_record

TableFilter = Callable[[Table], None]

# rows are never wrapped; the console only needs to be wider than any table
_NO_WRAP_WIDTH = 10_000


def as_list(items: Any) -> List[Any]:
    """Return the items of a list or tuple as a new list.

    Raises
    ------
    NotASequenceError
        If *items* is not a sequence (strings and bytes do not count).
    """
    if classify(items) is not Shape.SLICE:
        raise NotASequenceError(f"as_list() given a non-sequence type: {type(items).__name__}")
    return list(items)


def as_rows(items: Any, config: Optional[FlattenConfig] = None) -> List[Dict[str, Any]]:
    """Flatten every item of *items* into a table row.

    Records are flattened with *config*; mappings are used directly with
    their keys turned into strings.

    Raises
    ------
    NotASequenceError
        If *items* is not a sequence.
    NotARecordError
        If an item is neither a record nor a mapping.
    """
    flattener = Flattener(config)
    rows: List[Dict[str, Any]] = []
    for item in as_list(items):
        if is_record(item):
            rows.append(flattener.flatten(item))
        elif isinstance(item, cabc.Mapping):
            rows.append({str(k): v for k, v in item.items()})
        else:
            raise NotARecordError(f"not a record: {type(item).__name__}")
    return rows


@dataclass
class TableOptions:
    """How to render a table.

    Attributes
    ----------
    headers : List[str] | None
        Column names, in order. Overrides the aggregated row keys.
    writer : TextIO | None
        Output stream (default: ``sys.stdout`` at render time).
    filter : TableFilter | None
        Called with the constructed :class:`rich.table.Table` before it is
        printed, e.g. to set a title or tweak column styles.
    width : int | None
        Console width. By default wide enough that nothing wraps.
    """

    headers: Optional[List[str]] = None
    writer: Optional[TextIO] = None
    filter: Optional[TableFilter] = None
    width: Optional[int] = None

    def build_table(self, rows: List[Dict[str, Any]]) -> Table:
        headers = self.headers if self.headers is not None else aggregate_keys(rows)
        table = Table(box=box.ASCII, show_lines=False)
        for header in headers:
            table.add_column(Text(header), no_wrap=True)
        for row in rows:
            table.add_row(*(Text("" if key not in row else str(row[key])) for key in headers))
        return table

    def print_dump_table(self, items: Any, config: Optional[FlattenConfig] = None) -> None:
        """Render *items* as a table to ``writer``."""
        table = self.build_table(as_rows(items, config))
        if self.filter is not None:
            self.filter(table)

        console = Console(
            file=self.writer if self.writer is not None else sys.stdout,
            width=self.width or _NO_WRAP_WIDTH,
            color_system=None,
            highlight=False,
        )
        console.print(table)

    def dump_table(self, items: Any, config: Optional[FlattenConfig] = None) -> str:
        """Render *items* as a table and return it as a string."""
        buffer = StringIO()
        TableOptions(self.headers, buffer, self.filter, self.width).print_dump_table(items, config)
        return buffer.getvalue()


def dump_table(
    items: Any,
    options: Optional[TableOptions] = None,
    config: Optional[FlattenConfig] = None,
) -> str:
    """Render a list of records as a text table and return it.

    Parameters
    ----------
    items : Any
        List or tuple of records (or mappings).
    options : TableOptions | None, optional
        Headers, filter and width. ``options.writer`` is ignored.
    config : FlattenConfig | None, optional
        Flattening settings for the rows.

    Returns
    -------
    str
        The rendered table: a header row, then one row per item.
    """
    return (options or TableOptions()).dump_table(items, config)


def print_dump_table(
    items: Any,
    options: Optional[TableOptions] = None,
    config: Optional[FlattenConfig] = None,
) -> None:
    """Render a list of records as a text table to ``options.writer`` or stdout."""
    (options or TableOptions()).print_dump_table(items, config)
