"""Environment-gated variable snapshots.

When ``INSPECT_VARS`` names a file, :func:`snapshot_vars` appends one line
holding the given name-to-value mapping. It never raises: a snapshot is a
debugging aid and losing one is preferable to disturbing the host program.

Each line is JSON encoded twice: the variables are encoded as a JSON
document, and that document is written as a JSON string literal. Readers
decode twice (see :func:`read_snapshots`).
"""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import FlattenConfig
from .dump import to_jsonable

logger = logging.getLogger(__name__)

INSPECT_VARS_ENV = "INSPECT_VARS"


class SnapshotStatus(Enum):
    """Outcome of a snapshot write. The public entry point discards it."""

    WRITTEN = "written"
    DISABLED = "disabled"
    ENCODE_FAILED = "encode_failed"
    IO_FAILED = "io_failed"


def write_snapshot(
    objs: Mapping[str, Any],
    path: Path | str,
    config: Optional[FlattenConfig] = None,
) -> SnapshotStatus:
    """Append a snapshot of *objs* to *path*.

    Parameters
    ----------
    objs : Mapping[str, Any]
        Variable name to value. Records are flattened.
    path : Path | str
        Snapshot file. Its parent directory is created when missing.
    config : FlattenConfig | None, optional
        Flattening settings.

    Returns
    -------
    SnapshotStatus
        ``WRITTEN`` on success, ``ENCODE_FAILED`` or ``IO_FAILED`` otherwise.
        Nothing is raised.
    """
    try:
        document = json.dumps(to_jsonable(objs, config), default=str)
    except Exception as exc:
        logger.debug("Skipping snapshot, cannot encode variables: %s", exc)
        return SnapshotStatus.ENCODE_FAILED

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(document) + "\n")
    except OSError as exc:
        logger.debug("Skipping snapshot, cannot write %s: %s", path, exc)
        return SnapshotStatus.IO_FAILED

    return SnapshotStatus.WRITTEN


def _snapshot(objs: Mapping[str, Any], config: Optional[FlattenConfig] = None) -> SnapshotStatus:
    target = os.environ.get(INSPECT_VARS_ENV)
    if not target:
        return SnapshotStatus.DISABLED
    return write_snapshot(objs, target, config)


def snapshot_vars(objs: Mapping[str, Any], config: Optional[FlattenConfig] = None) -> None:
    """Append *objs* to the file named by ``INSPECT_VARS``, if it is set.

    Example
    -------
    ::

        snapshot_vars({"user": user, "orders": orders})
    """
    _snapshot(objs, config)


def read_snapshots(path: Path | str) -> List[Dict[str, Any]]:
    """Read every snapshot in a file written by :func:`snapshot_vars`.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist.
    json.JSONDecodeError
        If a line is not a double-encoded snapshot.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"snapshot file not found: {path}")

    snapshots: List[Dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            if line.strip():
                snapshots.append(json.loads(json.loads(line)))
    return snapshots
