"""
Round-based cluster selection.

Items are grouped into clusters and the pending queue is always ordered by
cluster priority, so related items are rehearsed together. Progress is
measured in rounds: with rounds [4, 2, 1] every cluster is looped over four
times in round 0, two more times in round 1 and once more in round 2.

Within a round:
1. The cluster with sorting_id 0 is shown until it has had its passes
2. All sorting_ids rotate, so the next cluster moves to the front
3. A lockstep pass over a cluster reshuffles the order within each cluster
4. The same item is never shown twice back-to-back when avoidable

The session ends once every item has been seen sum(rounds) times in the
last round.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial

from loguru import logger

from .assignment import (
    ClusterPrimitive,
    compute_kmeans_clusters,
    compute_random_clusters,
    kmeans_labels,
)
from .base import SelectionAlgorithm, SelectionConfig
from .cluster import Cluster, build_cluster_index
from .exceptions import InvalidConfiguration, RoundOverrun, StateInconsistency
from .items import SupportsSelection

ClusterStrategy = Callable[[Sequence[SupportsSelection], int], list[Cluster]]


def default_primitive(config: SelectionConfig) -> ClusterPrimitive:
    """scikit-learn k-means limited to the configured iterations."""
    return partial(kmeans_labels, max_iter=config.kmeans_max_iter)


@dataclass
class RoundProgress:
    """Where a clustering session is in its round schedule."""

    round_id: int = 0
    needed_previous_rounds: int = 0  # Passes every cluster needed in earlier rounds
    need_this_round: int = 0  # Passes every cluster needs in the current round
    need_to_go_to_next_round: int = 0  # Answers on an item that move the session on

    @classmethod
    def start(cls, rounds: Sequence[int]) -> RoundProgress:
        return cls(need_this_round=rounds[0], need_to_go_to_next_round=rounds[0])

    def next_round(self, rounds: Sequence[int]) -> None:
        self.needed_previous_rounds += rounds[self.round_id]
        self.round_id += 1
        self.need_this_round = rounds[self.round_id]
        self.need_to_go_to_next_round += self.need_this_round


class ClusteringAlgorithm(SelectionAlgorithm):
    """
    Selects items based on their clusters and the round schedule.

    Subclasses only decide how items are clustered.
    """

    def __init__(
        self,
        items: Sequence[SupportsSelection],
        compute_clusters: ClusterStrategy,
        config: SelectionConfig | None = None,
    ):
        """
        Cluster the items and set up round progress.

        Args:
            items: Every item in the session
            compute_clusters: Strategy splitting items into clusters
            config: Round schedule and cluster count (defaults if None)
        """
        self.config = config or SelectionConfig()
        self.config.validate()

        if not items:
            raise InvalidConfiguration("Cannot select from an empty item set")
        indices = [item.index for item in items]
        if len(set(indices)) != len(indices):
            raise InvalidConfiguration("Item indices must be unique within a session")

        self.items = list(items)
        self.rounds = list(self.config.rounds)
        self.clusters = compute_clusters(self.items, self.config.cluster_count)
        self._cluster_of = build_cluster_index(self.clusters, self.items)
        self.progress = RoundProgress.start(self.rounds)

        logger.info(
            f"{type(self).__name__}: {len(self.items)} items in {len(self.clusters)} clusters "
            f"(sizes {[c.size for c in self.clusters]}), rounds {self.rounds}"
        )

    @property
    def total_passes(self) -> int:
        return self.config.total_passes

    def advance(
        self,
        queue: Sequence[SupportsSelection],
        just_answered: SupportsSelection | None = None,
    ) -> list[SupportsSelection]:
        """
        Reorder the queue after an answer.

        The queue is sorted by cluster priority; within a cluster the order is
        random after every lockstep pass. Returns an empty queue once every
        item has been seen as often as the round schedule requires.

        Args:
            queue: Pending items; the last one is the item shown previously
            just_answered: Item answered last, None at the start of a session

        Returns:
            New queue (the input list is not modified)
        """
        # Sort into clusters at the start of a session
        if not self.clusters or just_answered is None:
            return self.sort_queue(queue)

        self._advance_round_if_needed(just_answered)

        current_cluster = self.get_cluster_of_item(just_answered)
        all_seen_once = current_cluster.all_members_seen_once_more()
        passes_this_round = (
            current_cluster.register_pass_if_complete() - self.progress.needed_previous_rounds
        )

        if passes_this_round == self.progress.need_this_round:
            for cluster in self.clusters:
                cluster.increase_sorting_id(len(self.clusters))
            logger.debug(
                f"Cluster {current_cluster.id} done for round {self.progress.round_id}, "
                f"rotated priorities"
            )

        previous_item = queue[-1] if queue else None

        todo = list(queue)
        if all_seen_once:
            todo = self.shuffle_queue(todo)
        todo = self.sort_queue(todo)

        # Never show the same item twice in a row
        if len(todo) > 1 and todo[0] is previous_item:
            todo[0], todo[1] = todo[1], todo[0]

        if self.end_of_session(todo):
            logger.info(f"Session complete after round {self.progress.round_id}")
            return []

        return todo

    def _advance_round_if_needed(self, item: SupportsSelection) -> None:
        """Move to the next round once an item passes the current round's threshold."""
        answers = len(item.answers)
        threshold = self.progress.need_to_go_to_next_round
        if answers <= threshold:
            return

        next_round_id = self.progress.round_id + 1
        if next_round_id >= len(self.rounds):
            raise RoundOverrun(item.index, answers, threshold)
        if answers > threshold + self.rounds[next_round_id]:
            raise RoundOverrun(item.index, answers, threshold + self.rounds[next_round_id])

        self.progress.next_round(self.rounds)
        logger.info(
            f"Round {self.progress.round_id} started: {self.progress.need_this_round} passes, "
            f"{self.progress.needed_previous_rounds} done"
        )

    def end_of_session(self, todo: Sequence[SupportsSelection]) -> bool:
        """Whether every queued item is fully seen and the last round is active."""
        return (
            all(len(item.answers) == self.total_passes for item in todo)
            and self.progress.round_id == len(self.rounds) - 1
        )

    def sort_queue(self, queue: Sequence[SupportsSelection]) -> list[SupportsSelection]:
        """Stable sort of the queue by cluster sorting_id (ascending)."""
        return sorted(queue, key=lambda item: self.get_cluster_of_item(item).sorting_id)

    def get_cluster_of_item(self, item: SupportsSelection) -> Cluster:
        """
        Find the cluster an item belongs to.

        Raises:
            StateInconsistency: the item is not part of any cluster
        """
        cluster = self._cluster_of.get(item.index)
        if cluster is None:
            raise StateInconsistency(f"Item {item.index} is not in any cluster")
        return cluster


class KMeansClusteringAlgorithm(ClusteringAlgorithm):
    """Cluster selection over k-means clusters of item positions."""

    def __init__(
        self,
        items: Sequence[SupportsSelection],
        config: SelectionConfig | None = None,
        primitive: ClusterPrimitive | None = None,
    ):
        config = config or SelectionConfig()
        primitive = primitive or default_primitive(config)
        super().__init__(items, partial(compute_kmeans_clusters, primitive=primitive), config)


class RandomClusteringAlgorithm(ClusteringAlgorithm):
    """Cluster selection over random clusters sized like the k-means clusters."""

    def __init__(
        self,
        items: Sequence[SupportsSelection],
        config: SelectionConfig | None = None,
        primitive: ClusterPrimitive | None = None,
    ):
        config = config or SelectionConfig()
        primitive = primitive or default_primitive(config)
        super().__init__(items, partial(compute_random_clusters, primitive=primitive), config)
