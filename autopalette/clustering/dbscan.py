"""DBSCAN: density-based clustering over a point set.

A point whose epsilon-neighbourhood holds at least ``min_points`` points is a
core point. Clusters grow breadth-first from core points; non-core points
reached from a core point join the cluster as border points but are not
expanded. Points never reached stay outliers.
"""

from __future__ import annotations

import logging
from collections import deque

import numpy as np
from numpy.typing import NDArray

from autopalette.clustering.label import Label, is_assigned, is_outlier, new_labels
from autopalette.engine.segment import Cluster
from autopalette.errors import require_positive_float, require_positive_int
from autopalette.utils.distance import DistanceMetric
from autopalette.utils.kdtree import DEFAULT_LEAF_SIZE, KDTree, as_matrix

logger = logging.getLogger(__name__)


class DBSCAN:
    """Density-based clustering.

    ``epsilon`` is expressed in the units of ``metric``; with the default
    squared Euclidean metric it is a squared radius.
    """

    def __init__(
        self,
        min_points: int,
        epsilon: float,
        metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN,
        leaf_size: int = DEFAULT_LEAF_SIZE,
    ) -> None:
        self.min_points = require_positive_int("min_points", min_points)
        self.epsilon = require_positive_float("epsilon", epsilon)
        self.metric = metric
        self.leaf_size = require_positive_int("leaf_size", leaf_size)

    def __repr__(self) -> str:
        return f"DBSCAN(min_points={self.min_points}, epsilon={self.epsilon}, metric={self.metric.name})"

    def fit_predict(self, points: NDArray[np.float64]) -> NDArray[np.int64]:
        """Cluster id per point, ``Label.OUTLIER`` (-1) for noise."""
        points = as_matrix(points)
        if len(points) == 0:
            return np.empty(0, dtype=np.int64)
        tree = KDTree(points, self.metric, self.leaf_size)
        return label_points(points, tree, self.min_points, self.epsilon)

    def fit(self, points: NDArray[np.float64]) -> list[Cluster]:
        clusters, _ = self.fit_with_outliers(points)
        return clusters

    def fit_with_outliers(self, points: NDArray[np.float64]) -> tuple[list[Cluster], set[int]]:
        """Clusters in id order plus the indices left as outliers."""
        points = as_matrix(points)
        labels = self.fit_predict(points)
        clusters = clusters_from_labels(points, labels)
        outliers = {int(i) for i in np.flatnonzero(labels == Label.OUTLIER)}
        logger.debug(
            "DBSCAN: %d points -> %d clusters, %d outliers",
            len(points),
            len(clusters),
            len(outliers),
        )
        return clusters, outliers


def label_points(
    points: NDArray[np.float64],
    tree: KDTree,
    min_points: int,
    epsilon: float,
) -> NDArray[np.int64]:
    """Run the DBSCAN traversal and return the label array."""
    labels = new_labels(len(points))
    cluster_id = 0
    for index in range(len(points)):
        if labels[index] != Label.UNDEFINED:
            continue

        neighbors = tree.search_radius(points[index], epsilon)
        if len(neighbors) < min_points:
            labels[index] = Label.OUTLIER
            continue

        queue: deque[int] = deque()
        for neighbor in neighbors:
            if labels[neighbor.index] == Label.UNDEFINED:
                labels[neighbor.index] = Label.MARKED
                queue.append(neighbor.index)
            elif labels[neighbor.index] == Label.OUTLIER:
                queue.append(neighbor.index)
        _expand_cluster(cluster_id, points, tree, min_points, epsilon, queue, labels)
        cluster_id += 1
    return labels


def _expand_cluster(
    cluster_id: int,
    points: NDArray[np.float64],
    tree: KDTree,
    min_points: int,
    epsilon: float,
    queue: deque[int],
    labels: NDArray[np.int64],
) -> None:
    while queue:
        index = queue.popleft()
        if is_assigned(labels[index]):
            continue

        # Border point: joins the cluster, never expands it.
        if is_outlier(labels[index]):
            labels[index] = cluster_id
            continue

        labels[index] = cluster_id
        secondary = tree.search_radius(points[index], epsilon)
        if len(secondary) < min_points:
            continue

        for neighbor in secondary:
            state = labels[neighbor.index]
            if state == Label.UNDEFINED:
                labels[neighbor.index] = Label.MARKED
                queue.append(neighbor.index)
            elif state == Label.OUTLIER:
                queue.append(neighbor.index)


def clusters_from_labels(
    points: NDArray[np.float64],
    labels: NDArray[np.int64],
) -> list[Cluster]:
    """Group points by non-negative label into clusters ordered by id."""
    dim = points.shape[1] if points.ndim == 2 else 0
    clusters: dict[int, Cluster] = {}
    for position in np.flatnonzero(labels >= 0):
        label = int(labels[position])
        cluster = clusters.get(label)
        if cluster is None:
            cluster = clusters[label] = Cluster(label, dim)
        cluster.insert(int(position), points[position])
    return [clusters[label] for label in sorted(clusters)]
