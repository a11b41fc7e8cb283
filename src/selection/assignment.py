"""
Cluster assignment strategies.

Both strategies split the full item list into a strict partition of at most
``cluster_count`` clusters with ids 0..m-1:

- K-means: clusters item positions with k-means, seeded deterministically so
  the same item set always yields the same clusters.
- Random: keeps the k-means cluster sizes but fills the clusters with a
  random shuffle of the items (control condition for experiments).

The k-means step itself is delegated to a clustering primitive
``(points, k, initial_centroids) -> labels``; the default one wraps
scikit-learn's KMeans.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import numpy as np
from loguru import logger
from sklearn.cluster import KMeans

from .base import shuffle_queue
from .cluster import Cluster
from .exceptions import InvalidConfiguration, StateInconsistency
from .items import SupportsSelection

ClusterPrimitive = Callable[[list[list[float]], int, list[list[float]]], Sequence[int]]

# Seeds are taken at 0.2, 0.4, ... of the position list
SEED_STEP_DIVISOR = 5


def kmeans_labels(
    points: list[list[float]],
    k: int,
    initial_centroids: list[list[float]],
    max_iter: int = 300,
) -> list[int]:
    """
    Run k-means from fixed initial centroids.

    Args:
        points: N coordinates
        k: Number of clusters
        initial_centroids: k starting centroids
        max_iter: Maximum Lloyd iterations

    Returns:
        N labels in [0, k), aligned with points
    """
    kmeans = KMeans(
        n_clusters=k,
        init=np.asarray(initial_centroids, dtype=float),
        n_init=1,
        max_iter=max_iter,
    )
    labels = kmeans.fit_predict(np.asarray(points, dtype=float))
    return [int(label) for label in labels]


def seed_indices(n_points: int, k: int) -> list[int]:
    """Positions in the point list used as initial centroids."""
    return [min(i * n_points // SEED_STEP_DIVISOR, n_points - 1) for i in range(1, k + 1)]


def initial_centroids(coordinates: Sequence[list[float]], k: int) -> list[list[float]]:
    """Pick k deterministic initial centroids from the coordinates."""
    return [list(coordinates[i]) for i in seed_indices(len(coordinates), k)]


def compute_kmeans_clusters(
    items: Sequence[SupportsSelection],
    cluster_count: int = 4,
    primitive: ClusterPrimitive = kmeans_labels,
) -> list[Cluster]:
    """
    Cluster items by position with deterministically seeded k-means.

    Args:
        items: All items of the session
        cluster_count: Requested number of clusters
        primitive: Clustering primitive returning one label per point

    Returns:
        Clusters ordered by label; the id is the label itself unless k-means
        left a label empty, in which case ids are renumbered in label order
    """
    if not items:
        raise InvalidConfiguration("Cannot cluster an empty item set")
    if cluster_count <= 0:
        raise InvalidConfiguration(f"Cluster count must be positive, got {cluster_count}")

    k = cluster_count
    if len(items) < k:
        logger.warning(f"Only {len(items)} items for {k} clusters, using {len(items)}")
        k = len(items)

    coordinates = [item.position.as_list() for item in items]
    seeds = initial_centroids(coordinates, k)
    logger.debug(f"K-means seeds for {len(items)} items: {seeds}")

    labels = primitive(coordinates, k, seeds)
    if len(labels) != len(items):
        raise StateInconsistency(f"Clustering returned {len(labels)} labels for {len(items)} items")

    # Group by label
    label_to_items: dict[int, list[SupportsSelection]] = {}
    for item, label in zip(items, labels):
        label_to_items.setdefault(int(label), []).append(item)

    if len(label_to_items) < k:
        logger.warning(f"K-means produced {len(label_to_items)} non-empty clusters out of {k}")

    # Labels 0..m-1 are kept as ids; gaps left by empty centroids are closed
    clusters = [
        Cluster(id=cluster_id, members=label_to_items[label])
        for cluster_id, label in enumerate(sorted(label_to_items))
    ]
    logger.debug(f"K-means cluster sizes: {[c.size for c in clusters]}")
    return clusters


def compute_random_clusters(
    items: Sequence[SupportsSelection],
    cluster_count: int = 4,
    primitive: ClusterPrimitive = kmeans_labels,
) -> list[Cluster]:
    """
    Randomly cluster items, keeping the sizes of the k-means clusters.

    Args:
        items: All items of the session
        cluster_count: Requested number of clusters
        primitive: Clustering primitive used to obtain the sizes

    Returns:
        Clusters with ids 0..m-1 and the same sizes as the k-means clusters
    """
    needed_sizes = [c.size for c in compute_kmeans_clusters(items, cluster_count, primitive)]
    shuffled = shuffle_queue(items)

    clusters = []
    start = 0
    for cluster_id, size in enumerate(needed_sizes):
        clusters.append(Cluster(id=cluster_id, members=shuffled[start:start + size]))
        start += size

    logger.debug(f"Random cluster sizes: {needed_sizes}")
    return clusters
