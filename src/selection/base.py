"""
Shared contract for item selection algorithms.

After every answered item the session calls ``advance`` with its pending
queue and the item that was just answered. The algorithm returns the queue in
its new presentation order; an empty queue means the session is complete.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from config import get_settings

from .exceptions import InvalidConfiguration
from .items import SupportsSelection

T = TypeVar("T")


@dataclass
class SelectionConfig:
    """Configuration for the selection algorithms."""

    rounds: list[int] = field(default_factory=lambda: [4, 2, 1])
    cluster_count: int = 4
    max_passes: int = 7  # Non-clustered algorithm only
    kmeans_max_iter: int = 300

    @property
    def total_passes(self) -> int:
        """Lockstep passes every item needs by the end of the last round."""
        return sum(self.rounds)

    def validate(self) -> None:
        if not self.rounds:
            raise InvalidConfiguration("Round schedule is empty")
        if any(r <= 0 for r in self.rounds):
            raise InvalidConfiguration(f"Round schedule must be positive: {self.rounds}")
        if self.cluster_count <= 0:
            raise InvalidConfiguration(f"Cluster count must be positive, got {self.cluster_count}")
        if self.max_passes <= 0:
            raise InvalidConfiguration(f"Max passes must be positive, got {self.max_passes}")
        if self.kmeans_max_iter <= 0:
            raise InvalidConfiguration(f"K-means iterations must be positive, got {self.kmeans_max_iter}")

    @classmethod
    def from_settings(cls) -> SelectionConfig:
        """Build a config from the application settings."""
        settings = get_settings()
        return cls(
            rounds=settings.get_round_schedule(),
            cluster_count=settings.selection_cluster_count,
            max_passes=settings.selection_max_passes,
            kmeans_max_iter=settings.kmeans_max_iter,
        )


def shuffle_queue(queue: Sequence[T]) -> list[T]:
    """Return a uniformly shuffled copy of the queue."""
    shuffled = list(queue)
    random.shuffle(shuffled)
    return shuffled


class SelectionAlgorithm(ABC):
    """Base class for the item selection algorithms."""

    shuffle_queue = staticmethod(shuffle_queue)

    @abstractmethod
    def advance(
        self,
        queue: Sequence[SupportsSelection],
        just_answered: SupportsSelection | None = None,
    ) -> list[SupportsSelection]:
        """
        Reorder the pending queue after an answer.

        Args:
            queue: Pending items in presentation order
            just_answered: The item answered last, None before the first answer

        Returns:
            New queue; empty when the session is finished
        """
