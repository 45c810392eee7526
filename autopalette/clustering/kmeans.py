"""K-Means: Lloyd iterations with a KD-tree over the current centres."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from autopalette.engine.seed import SeedGenerator
from autopalette.engine.segment import Cluster
from autopalette.errors import require_positive_float, require_positive_int
from autopalette.utils.distance import DistanceMetric
from autopalette.utils.kdtree import DEFAULT_LEAF_SIZE, KDTree, as_matrix

logger = logging.getLogger(__name__)


@dataclass
class KMeansResult:
    clusters: list[Cluster]
    n_iterations: int = 0
    converged: bool = False
    # Within-cluster sum of squares after each iteration
    inertia_history: list[float] = field(default_factory=list)


class KMeans:
    """Centroid clustering of an ``(n, d)`` point set into at most ``k`` clusters."""

    def __init__(
        self,
        k: int,
        max_iterations: int = 100,
        tolerance: float = 1e-4,
        metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN,
        generator: SeedGenerator = SeedGenerator.REGULAR_INTERVAL,
        leaf_size: int = DEFAULT_LEAF_SIZE,
    ) -> None:
        self.k = require_positive_int("k", k)
        self.max_iterations = require_positive_int("max_iterations", max_iterations)
        self.tolerance = require_positive_float("tolerance", tolerance)
        self.metric = metric
        self.generator = generator
        self.leaf_size = require_positive_int("leaf_size", leaf_size)

    def __repr__(self) -> str:
        return (
            f"KMeans(k={self.k}, max_iterations={self.max_iterations}, "
            f"tolerance={self.tolerance}, metric={self.metric.name})"
        )

    def fit(
        self,
        points: NDArray[np.float64],
        shape: tuple[int, int] | None = None,
    ) -> KMeansResult:
        """Cluster ``points``.

        ``shape`` is ``(width, height)`` when the points come from an image;
        without it the points are treated as a single row.
        """
        points = as_matrix(points)
        n = len(points)
        if n == 0:
            return KMeansResult(clusters=[], converged=True)

        if self.k >= n:
            clusters = []
            for index in range(n):
                cluster = Cluster(index, points.shape[1])
                cluster.insert(index, points[index])
                clusters.append(cluster)
            return KMeansResult(clusters=clusters, converged=True)

        width, height = shape if shape is not None else (n, 1)
        seeds = self.generator.generate(width, height, n, None, self.k)
        result = lloyd(
            points,
            np.arange(n, dtype=np.intp),
            points[seeds],
            self.max_iterations,
            self.tolerance,
            self.metric,
            self.leaf_size,
        )
        logger.debug(
            "KMeans: %d points -> %d clusters in %d iterations (converged=%s)",
            n,
            len(result.clusters),
            result.n_iterations,
            result.converged,
        )
        return result


def lloyd(
    points: NDArray[np.float64],
    members: NDArray[np.intp],
    centers: NDArray[np.float64],
    max_iterations: int,
    tolerance: float,
    metric: DistanceMetric,
    leaf_size: int = DEFAULT_LEAF_SIZE,
) -> KMeansResult:
    """Assign/update loop over ``points[members]`` starting from ``centers``.

    Cluster ``i`` starts at ``centers[i]`` and keeps label ``i``. A cluster
    that loses every member keeps its previous centre for the next round and
    is dropped from the result.
    """
    dim = points.shape[1]
    centers = np.array(centers, dtype=np.float64).reshape(-1, dim)
    clusters = [Cluster(label, dim) for label in range(len(centers))]
    result = KMeansResult(clusters=[])

    for iteration in range(1, max_iterations + 1):
        for cluster in clusters:
            cluster.clear()

        tree = KDTree(centers, metric, leaf_size)
        for index in members:
            nearest = tree.search_nearest(points[index])
            clusters[nearest.index].insert(int(index), points[index])

        converged = True
        for label, cluster in enumerate(clusters):
            if cluster.is_empty():
                continue
            center = cluster.center
            if metric.measure(centers[label], center) > tolerance:
                converged = False
            centers[label] = center

        result.n_iterations = iteration
        result.inertia_history.append(inertia(points, clusters))
        logger.debug("Lloyd iteration %d: inertia=%.6f", iteration, result.inertia_history[-1])
        if converged:
            result.converged = True
            break

    result.clusters = [cluster for cluster in clusters if not cluster.is_empty()]
    return result


def inertia(points: NDArray[np.float64], clusters: Sequence[Cluster]) -> float:
    """Sum of squared Euclidean distances from each member to its centroid."""
    total = 0.0
    for cluster in clusters:
        if cluster.is_empty():
            continue
        delta = points[list(cluster.members())] - cluster.center
        total += float(np.einsum("ij,ij->", delta, delta))
    return total
