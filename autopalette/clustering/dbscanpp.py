"""DBSCAN++: DBSCAN with core points searched for on a random subsample.

Only ``ceil(probability * n)`` candidate points get a full neighbourhood
query. The surviving core points are linked into clusters, then every point
joins the cluster of its nearest core point if that point is within
``epsilon``.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray

from autopalette.clustering.dbscan import clusters_from_labels, label_points
from autopalette.clustering.label import Label
from autopalette.engine.segment import Cluster
from autopalette.errors import (
    ConfigurationError,
    require_positive_float,
    require_positive_int,
)
from autopalette.utils.distance import DistanceMetric
from autopalette.utils.kdtree import DEFAULT_LEAF_SIZE, KDTree, as_matrix

logger = logging.getLogger(__name__)


class DBSCANPlusPlus:
    def __init__(
        self,
        probability: float,
        min_points: int,
        epsilon: float,
        metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN,
        seed: int = 0,
        leaf_size: int = DEFAULT_LEAF_SIZE,
    ) -> None:
        if not (0.0 < probability <= 1.0):
            raise ConfigurationError("probability", probability, "must be in (0, 1]")
        self.probability = probability
        self.min_points = require_positive_int("min_points", min_points)
        self.epsilon = require_positive_float("epsilon", epsilon)
        self.metric = metric
        self.seed = seed
        self.leaf_size = require_positive_int("leaf_size", leaf_size)

    def __repr__(self) -> str:
        return (
            f"DBSCANPlusPlus(probability={self.probability}, min_points={self.min_points}, "
            f"epsilon={self.epsilon}, metric={self.metric.name})"
        )

    def core_points(self, points: NDArray[np.float64], tree: KDTree) -> NDArray[np.intp]:
        """Sampled indices whose full-data neighbourhood is dense enough."""
        n = len(points)
        n_samples = min(n, max(1, math.ceil(self.probability * n)))
        rng = np.random.default_rng(self.seed)
        candidates = np.sort(rng.choice(n, size=n_samples, replace=False))
        core = [
            int(index)
            for index in candidates
            if len(tree.search_radius(points[index], self.epsilon)) >= self.min_points
        ]
        return np.asarray(core, dtype=np.intp)

    def fit_predict(self, points: NDArray[np.float64]) -> NDArray[np.int64]:
        points = as_matrix(points)
        n = len(points)
        labels = np.full(n, Label.OUTLIER, dtype=np.int64)
        if n == 0:
            return labels

        tree = KDTree(points, self.metric, self.leaf_size)
        core = self.core_points(points, tree)
        if len(core) == 0:
            logger.debug("DBSCAN++: no core point among %d samples", n)
            return labels

        # Every core point is dense by construction, so the core points are
        # linked with a neighbourhood threshold of one.
        core_points = points[core]
        core_tree = KDTree(core_points, self.metric, self.leaf_size)
        core_labels = label_points(core_points, core_tree, 1, self.epsilon)

        for index in range(n):
            nearest = core_tree.search_nearest(points[index])
            if nearest is not None and nearest.distance <= self.epsilon:
                labels[index] = core_labels[nearest.index]
        return labels

    def fit(self, points: NDArray[np.float64]) -> list[Cluster]:
        clusters, _ = self.fit_with_outliers(points)
        return clusters

    def fit_with_outliers(self, points: NDArray[np.float64]) -> tuple[list[Cluster], set[int]]:
        points = as_matrix(points)
        labels = self.fit_predict(points)
        clusters = clusters_from_labels(points, labels)
        outliers = {int(i) for i in np.flatnonzero(labels == Label.OUTLIER)}
        logger.debug(
            "DBSCAN++: %d points -> %d clusters, %d outliers",
            len(points),
            len(clusters),
            len(outliers),
        )
        return clusters, outliers
