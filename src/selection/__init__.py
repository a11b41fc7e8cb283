"""
Item selection for study sessions.

Decides, after every answered item, which item comes next:
- KMeansClusteringAlgorithm: rehearse spatially related items together,
  round by round
- RandomClusteringAlgorithm: same rounds over random clusters sized like
  the k-means clusters
- RandomAlgorithm: shuffled full passes, no clusters
"""

from .assignment import compute_kmeans_clusters, compute_random_clusters, kmeans_labels
from .base import SelectionAlgorithm, SelectionConfig, shuffle_queue
from .cluster import Cluster, build_cluster_index
from .clustering import (
    ClusteringAlgorithm,
    KMeansClusteringAlgorithm,
    RandomClusteringAlgorithm,
    RoundProgress,
    default_primitive,
)
from .exceptions import InvalidConfiguration, RoundOverrun, SelectionError, StateInconsistency
from .items import AnswerRecord, Point, StudyItem, grid_items, load_items
from .plain import RandomAlgorithm
from .session import SelectionMethod, SessionStatus, StudySession, create_algorithm

__all__ = [
    # Items
    "Point",
    "AnswerRecord",
    "StudyItem",
    "load_items",
    "grid_items",
    # Clusters
    "Cluster",
    "build_cluster_index",
    "compute_kmeans_clusters",
    "compute_random_clusters",
    "kmeans_labels",
    "default_primitive",
    # Algorithms
    "SelectionAlgorithm",
    "SelectionConfig",
    "shuffle_queue",
    "ClusteringAlgorithm",
    "KMeansClusteringAlgorithm",
    "RandomClusteringAlgorithm",
    "RoundProgress",
    "RandomAlgorithm",
    # Sessions
    "SelectionMethod",
    "SessionStatus",
    "StudySession",
    "create_algorithm",
    # Errors
    "SelectionError",
    "InvalidConfiguration",
    "StateInconsistency",
    "RoundOverrun",
]
