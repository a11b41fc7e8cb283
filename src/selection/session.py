"""
Study session driver.

Owns the pending queue and calls the selection algorithm once per answer:

    session = StudySession(items, SelectionMethod.KMEANS)
    while (item := session.next_item()) is not None:
        session.submit_answer(correct=True)

The presented item is taken off the front of the queue and, after it is
answered, re-queued at the tail, so the tail of the queue is always the item
shown last.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from loguru import logger

from .base import SelectionAlgorithm, SelectionConfig
from .clustering import KMeansClusteringAlgorithm, RandomClusteringAlgorithm
from .exceptions import SelectionError
from .items import StudyItem
from .plain import RandomAlgorithm


class SelectionMethod(str, Enum):
    """Selection algorithm a session runs with."""

    KMEANS = "kmeans"  # Clusters by position
    RANDOM_CLUSTERS = "random_clusters"  # Random clusters, k-means sizes
    RANDOM = "random"  # No clusters


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


def create_algorithm(
    method: SelectionMethod,
    items: Sequence[StudyItem],
    config: SelectionConfig | None = None,
) -> SelectionAlgorithm:
    """Build the selection algorithm for a method."""
    if method == SelectionMethod.KMEANS:
        return KMeansClusteringAlgorithm(items, config)
    if method == SelectionMethod.RANDOM_CLUSTERS:
        return RandomClusteringAlgorithm(items, config)
    if method == SelectionMethod.RANDOM:
        return RandomAlgorithm(items, config)
    raise ValueError(f"Unknown selection method: {method}")


def always_item_repeat(
    session: StudySession,
    current: StudyItem,
    is_correct: bool,
    given_answer: str | None = None,
) -> bool:
    """Repeat every item until the session is finished, right or wrong."""
    return session.status != SessionStatus.FINISHED


class StudySession:
    """One run of a selection algorithm from the first item to an empty queue."""

    def __init__(
        self,
        items: Sequence[StudyItem],
        method: SelectionMethod = SelectionMethod.KMEANS,
        config: SelectionConfig | None = None,
        algorithm: SelectionAlgorithm | None = None,
    ):
        """
        Args:
            items: Items to study, in their initial order
            method: Algorithm to build on the first call to next_item
            config: Algorithm configuration (defaults if None)
            algorithm: Prebuilt algorithm, overrides method and config
        """
        self.items = list(items)
        self.method = SelectionMethod(method)
        self.config = config
        self.algorithm = algorithm
        self.todo: list[StudyItem] = list(self.items)
        self.current: StudyItem | None = None
        self.status = SessionStatus.NOT_STARTED
        self.presentations = 0

    @property
    def is_finished(self) -> bool:
        return self.status == SessionStatus.FINISHED

    def next_item(self) -> StudyItem | None:
        """
        Select the next item to present.

        Returns:
            The next item, or None once the session is finished
        """
        if self.is_finished:
            return None

        if self.algorithm is None:
            self.algorithm = create_algorithm(self.method, self.items, self.config)

        self.todo = self.algorithm.advance(self.todo, self.current)

        if not self.todo:
            self.status = SessionStatus.FINISHED
            self.current = None
            logger.info(f"Session finished after {self.presentations} presentations")
            return None

        self.status = SessionStatus.IN_PROGRESS
        self.current = self.todo.pop(0)
        self.presentations += 1
        return self.current

    def submit_answer(self, correct: bool = True, given_answer: str | None = None) -> None:
        """Log an answer for the current item and re-queue it if it repeats."""
        if self.current is None:
            raise SelectionError("No item is being presented")

        self.current.record_answer(correct=correct, given_answer=given_answer)
        if always_item_repeat(self, self.current, correct, given_answer):
            self.todo.append(self.current)
