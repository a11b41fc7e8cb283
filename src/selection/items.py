"""
Study items consumed by the selection algorithms.

The schedulers only read three things from an item:
- ``index``: stable identifier, unique within a session
- ``position``: 2-D coordinate used as clustering input
- ``answers``: append-only log, its length is "times seen so far"

StudyItem is the concrete item used by the session driver and the CLI;
any object satisfying SupportsSelection works with the schedulers.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from loguru import logger


@dataclass(frozen=True)
class Point:
    """A 2-D position."""

    x: float
    y: float

    def as_list(self) -> list[float]:
        return [float(self.x), float(self.y)]


@dataclass
class AnswerRecord:
    """One answer event for an item."""

    correct: bool
    given_answer: str | None = None
    answered_at: datetime = field(default_factory=datetime.now)


class SupportsSelection(Protocol):
    """What a scheduler needs from an item."""

    index: int
    position: Point
    answers: list[Any]


@dataclass(eq=False)
class StudyItem:
    """
    A unit of study content.

    Compared by identity: two items with the same label and position are
    still different items.
    """

    index: int
    position: Point
    label: str = ""
    answers: list[AnswerRecord] = field(default_factory=list)

    @property
    def times_seen(self) -> int:
        return len(self.answers)

    def record_answer(self, correct: bool = True, given_answer: str | None = None) -> AnswerRecord:
        record = AnswerRecord(correct=correct, given_answer=given_answer)
        self.answers.append(record)
        return record

    def __repr__(self) -> str:
        return f"StudyItem(index={self.index}, label={self.label!r}, seen={self.times_seen})"


def load_items(path: Path) -> list[StudyItem]:
    """
    Load study items from a JSON file.

    Accepts either a list of ``{"label", "x", "y"}`` objects or an object
    with an ``"items"`` key holding that list. Indices follow list order.

    Args:
        path: Path to the JSON file

    Returns:
        List of StudyItem
    """
    if not path.exists():
        raise FileNotFoundError(f"Items file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of items in {path}")

    items = []
    for i, entry in enumerate(data):
        try:
            position = Point(float(entry["x"]), float(entry["y"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Item {i} in {path} has no usable x/y position") from e
        items.append(StudyItem(index=i, position=position, label=str(entry.get("label", f"item-{i}"))))

    logger.info(f"Loaded {len(items)} items from {path}")
    return items


def grid_items(count: int, columns: int = 4) -> list[StudyItem]:
    """Lay out ``count`` synthetic items row by row on a grid."""
    return [
        StudyItem(
            index=i,
            position=Point(float(i % columns), float(i // columns)),
            label=f"item-{i}",
        )
        for i in range(count)
    ]
