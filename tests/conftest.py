"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from structmap.snapshot import INSPECT_VARS_ENV


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep snapshot and config environment variables out of every test."""
    monkeypatch.delenv(INSPECT_VARS_ENV, raising=False)
    monkeypatch.delenv("STRUCTMAP_TAG_NAME", raising=False)
    monkeypatch.delenv("STRUCTMAP_MAX_DEPTH", raising=False)


@pytest.fixture
def inspect_vars_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point INSPECT_VARS at a file inside a not-yet-existing directory."""
    path = tmp_path / "snapshots" / "vars.json"
    monkeypatch.setenv(INSPECT_VARS_ENV, str(path))
    return path
