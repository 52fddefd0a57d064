"""Record flattening and debug dumps.

This package turns dataclass records into plain dictionaries, driven by
per-field tags, and builds debugging output on top of that: JSON-ish dumps,
deep pretty reprs, text tables and environment-gated snapshot files.
"""

from .config import DEFAULT_TAG_NAME, FlattenConfig, load_config
from .dump import dump, pretty, print_dump, print_pretty, to_jsonable
from .errors import CycleError, DepthLimitError, NotARecordError, NotASequenceError, StructMapError
from .flattener import Flattener, flatten, flatten_nested
from .keys import aggregate_keys
from .snapshot import INSPECT_VARS_ENV, read_snapshots, snapshot_vars
from .table import TableOptions, as_list, as_rows, dump_table, print_dump_table
from .tags import parse_tag

__all__ = [
    "DEFAULT_TAG_NAME",
    "FlattenConfig",
    "load_config",
    "Flattener",
    "flatten",
    "flatten_nested",
    "parse_tag",
    "aggregate_keys",
    "to_jsonable",
    "dump",
    "print_dump",
    "pretty",
    "print_pretty",
    "TableOptions",
    "as_list",
    "as_rows",
    "dump_table",
    "print_dump_table",
    "INSPECT_VARS_ENV",
    "snapshot_vars",
    "read_snapshots",
    "StructMapError",
    "NotARecordError",
    "NotASequenceError",
    "CycleError",
    "DepthLimitError",
]
