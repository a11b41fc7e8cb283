"""
Clusters of study items.

A cluster is a fixed group of items that share one presentation priority
(sorting_id) and one lockstep pass counter (times_seen).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .exceptions import InvalidConfiguration, StateInconsistency
from .items import SupportsSelection


@dataclass
class Cluster:
    """
    A named, fixed-membership group of items.

    sorting_id starts equal to id; lower sorting_id is shown sooner.
    times_seen counts completed lockstep passes over the members.
    """

    id: int
    members: tuple[SupportsSelection, ...]
    sorting_id: int = field(init=False)
    times_seen: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.members = tuple(self.members)
        if not self.members:
            raise InvalidConfiguration(f"Cluster {self.id} has no members")
        self.sorting_id = self.id

    @property
    def size(self) -> int:
        return len(self.members)

    def increase_sorting_id(self, number_of_clusters: int) -> None:
        """Rotate priority: the cluster shown first moves to the back."""
        self.sorting_id = (self.sorting_id + 1) % number_of_clusters

    def all_members_seen_once_more(self) -> bool:
        """Whether every member has exactly one answer more than times_seen."""
        return all(len(item.answers) - self.times_seen == 1 for item in self.members)

    def register_pass_if_complete(self) -> int:
        """
        Count a lockstep pass if every member has just been seen once more.

        Returns:
            Total passes over this cluster, including one registered now
        """
        if self.all_members_seen_once_more():
            self.times_seen += 1
        return self.times_seen


def build_cluster_index(
    clusters: Sequence[Cluster],
    items: Iterable[SupportsSelection],
) -> dict[int, Cluster]:
    """
    Map each item index to its cluster, checking the clusters partition items.

    Args:
        clusters: Clusters produced by an assignment strategy
        items: The full item set of the session

    Returns:
        Dict of item index -> Cluster

    Raises:
        StateInconsistency: an item sits in two clusters, a member is not part
            of the item set, or an item has no cluster
    """
    index: dict[int, Cluster] = {}
    for cluster in clusters:
        for item in cluster.members:
            owner = index.get(item.index)
            if owner is not None:
                raise StateInconsistency(
                    f"Item {item.index} is in cluster {owner.id} and cluster {cluster.id}"
                )
            index[item.index] = cluster

    expected = {item.index for item in items}
    unknown = index.keys() - expected
    if unknown:
        raise StateInconsistency(f"Clusters contain unknown items: {sorted(unknown)}")
    missing = expected - index.keys()
    if missing:
        raise StateInconsistency(f"Items without a cluster: {sorted(missing)}")

    return index
