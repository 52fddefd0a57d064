"""
config
======

Flattening configuration.

A :class:`FlattenConfig` is an immutable bundle captured by a
:class:`~structmap.flattener.Flattener` when it is built, so "set once, apply
everywhere" is done by building one flattener and reusing it.

Configuration can also be loaded from a YAML file, with environment overrides::

    tag_name: structs
    max_depth: 64

Environment variables (take precedence over the file):

- ``STRUCTMAP_TAG_NAME``
- ``STRUCTMAP_MAX_DEPTH``
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DEFAULT_TAG_NAME = "structs"

ENV_PREFIX = "STRUCTMAP_"


@dataclass(frozen=True)
class FlattenConfig:
    """Settings that apply to every flatten call of one flattener.

    Attributes
    ----------
    tag_name : str
        Key looked up in ``dataclasses.field(metadata=...)`` to find a field's tag.
    max_depth : int | None
        Maximum nesting depth to descend into. ``None`` means unlimited
        (cycles are still detected).
    """

    tag_name: str = DEFAULT_TAG_NAME
    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.tag_name, str) or not self.tag_name:
            raise ValueError(f"tag_name must be a non-empty string, got {self.tag_name!r}")
        if self.max_depth is not None and (
            isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 0
        ):
            raise ValueError(f"max_depth must be a non-negative integer or None, got {self.max_depth!r}")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"config file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file must contain a mapping, got {type(data).__name__}")
    return data


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    tag_name = environ.get(f"{ENV_PREFIX}TAG_NAME")
    if tag_name:
        out["tag_name"] = tag_name
    max_depth = environ.get(f"{ENV_PREFIX}MAX_DEPTH")
    if max_depth:
        try:
            out["max_depth"] = int(max_depth)
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}MAX_DEPTH must be an integer, got {max_depth!r}") from None
    return out


def load_config(
    path: Optional[Path | str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> FlattenConfig:
    """Build a :class:`FlattenConfig` from an optional YAML file and the environment.

    Parameters
    ----------
    path : Path | str | None, optional
        YAML config file. When ``None`` only defaults and environment are used.
    environ : Mapping[str, str] | None, optional
        Environment to read overrides from (default: ``os.environ``).

    Returns
    -------
    FlattenConfig
        The merged configuration.

    Raises
    ------
    FileNotFoundError
        If ``path`` is given but does not exist.
    ValueError
        If the file holds unknown keys or values of the wrong type.
    """
    values: Dict[str, Any] = {}
    if path is not None:
        values.update(_load_yaml(Path(path)))

    unknown = sorted(set(values) - {"tag_name", "max_depth"})
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")

    values.update(_env_overrides(os.environ if environ is None else environ))
    return replace(FlattenConfig(), **values)
