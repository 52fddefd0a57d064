"""Tests for dumps and JSON conversion."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

import pytest

from structmap.config import FlattenConfig
from structmap.dump import dump, pretty, print_dump, print_pretty, to_jsonable


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Opaque:
    _handle: int = 0


@dataclass
class Report:
    title: str
    created: datetime
    points: List[Point] = field(default_factory=list)
    raw: Point = field(default_factory=lambda: Point(0, 0), metadata={"structs": ",omitnested"})
    extra: Dict[int, Any] = field(default_factory=dict)


def test_to_jsonable_converts_raw_values_too() -> None:
    report = Report("r", datetime(2024, 1, 15), [Point(1, 2)], Point(3, 4), {1: (Point(5, 6), "x")})
    assert to_jsonable(report) == {
        "title": "r",
        "created": datetime(2024, 1, 15),
        "points": [{"x": 1, "y": 2}],
        "raw": {"x": 3, "y": 4},
        "extra": {"1": [{"x": 5, "y": 6}, "x"]},
    }


def test_to_jsonable_plain_containers() -> None:
    assert to_jsonable({"a": [Point(1, 2)], 2: "b"}) == {"a": [{"x": 1, "y": 2}], "2": "b"}
    assert to_jsonable(7) == 7


def test_to_jsonable_keeps_opaque_records() -> None:
    opaque = Opaque(3)
    assert to_jsonable([opaque])[0] is opaque


def test_to_jsonable_uses_config() -> None:
    @dataclass
    class Labeled:
        name: str = field(metadata={"json": "label"})

    assert to_jsonable(Labeled("n"), FlattenConfig(tag_name="json")) == {"label": "n"}


def test_to_jsonable_detects_self_containing_lists() -> None:
    items: List[Any] = []
    items.append(items)
    with pytest.raises(ValueError, match="contains itself"):
        to_jsonable(items)


def test_dump_strips_quotes() -> None:
    assert dump(Point(1, 2)) == "{\n    x: 1,\n    y: 2\n}"
    assert dump({"name": "Alice"}) == "{\n    name: Alice\n}"


def test_dump_stringifies_unknown_types() -> None:
    text = dump(Report("r", datetime(2024, 1, 15, 10, 30)))
    assert "created: 2024-01-15 10:30:00" in text
    assert '"' not in text


def test_dump_matches_json_layout() -> None:
    value = {"a": [1, 2], "b": None}
    assert dump(value) == json.dumps(value, indent=4).replace('"', "")


def test_dump_returns_error_message() -> None:
    items: List[Any] = []
    items.append(items)
    assert "contains itself" in dump(items)


def test_print_dump(capsys: pytest.CaptureFixture[str]) -> None:
    print_dump(Point(1, 2))
    assert capsys.readouterr().out == "{\n    x: 1,\n    y: 2\n}\n"


def test_pretty_shows_raw_objects() -> None:
    text = pretty(Report("r", datetime(2024, 1, 15), [Point(1, 2)]))
    assert text.startswith("Report(")
    assert "Point(x=1, y=2)" in text


def test_print_pretty(capsys: pytest.CaptureFixture[str]) -> None:
    print_pretty([Point(1, 2)])
    out = capsys.readouterr().out
    assert "Point(x=1, y=2)" in out


def test_dump_returns_recursion_error_message() -> None:
    deep: List[Any] = []
    for _ in range(5000):
        deep = [deep]
    assert "recursion" in dump(deep)
