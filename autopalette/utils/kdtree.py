"""KD-tree for nearest-neighbour and radius queries over a fixed point set.

Built once by repeated median partitioning; the split axis cycles with
depth (axis = depth % dim). Internal nodes hold the median point, leaves
hold up to ``leaf_size`` indices that are scanned with vectorised numpy.

Read-only after construction, so one tree may serve any number of queries.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from autopalette.errors import require_positive_int
from autopalette.utils.distance import DistanceMetric

DEFAULT_LEAF_SIZE = 16


class Neighbor(NamedTuple):
    index: int
    distance: float


@dataclass
class _Node:
    axis: int
    indices: NDArray[np.intp]
    left: _Node | None = None
    right: _Node | None = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def index(self) -> int:
        return int(self.indices[0])


class KDTree:
    """Exact KD-tree over ``points`` (shape ``(n, dim)``)."""

    def __init__(
        self,
        points: NDArray[np.float64],
        metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN,
        leaf_size: int = DEFAULT_LEAF_SIZE,
    ) -> None:
        require_positive_int("leaf_size", leaf_size)
        self.points = as_matrix(points)
        self.metric = metric
        self.leaf_size = leaf_size
        self.dim = self.points.shape[1]
        indices = np.arange(len(self.points), dtype=np.intp)
        self._root = self._split(indices, 0)

    @classmethod
    def build(
        cls,
        points: NDArray[np.float64],
        metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN,
        leaf_size: int = DEFAULT_LEAF_SIZE,
    ) -> KDTree:
        return cls(points, metric, leaf_size)

    def __len__(self) -> int:
        return len(self.points)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _split(self, indices: NDArray[np.intp], depth: int) -> _Node | None:
        if len(indices) == 0:
            return None

        axis = depth % self.dim if self.dim else 0
        if len(indices) <= self.leaf_size:
            return _Node(axis=axis, indices=indices)

        order = np.argsort(self.points[indices, axis], kind="stable")
        ordered = indices[order]
        median = len(ordered) // 2
        return _Node(
            axis=axis,
            indices=ordered[median : median + 1],
            left=self._split(ordered[:median], depth + 1),
            right=self._split(ordered[median + 1 :], depth + 1),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search_nearest(self, query: NDArray[np.float64]) -> Neighbor | None:
        """Closest indexed point, or None when the tree is empty."""
        if self._root is None:
            return None
        best = [-1, float("inf")]
        self._nearest(self._root, np.asarray(query, dtype=np.float64), best)
        return Neighbor(int(best[0]), float(best[1]))

    def search(self, query: NDArray[np.float64], k: int) -> list[Neighbor]:
        """The ``k`` nearest points, closest first."""
        if self._root is None or k <= 0:
            return []
        heap: list[tuple[float, int]] = []
        self._k_nearest(self._root, np.asarray(query, dtype=np.float64), k, heap)
        return sorted(
            (Neighbor(index, -neg) for neg, index in heap),
            key=lambda n: (n.distance, n.index),
        )

    def search_radius(self, query: NDArray[np.float64], radius: float) -> list[Neighbor]:
        """Every point whose distance to ``query`` is <= ``radius``."""
        found: list[Neighbor] = []
        if self._root is not None:
            self._radius(self._root, np.asarray(query, dtype=np.float64), radius, found)
        return found

    neighbors_within = search_radius

    def _leaf_distances(self, node: _Node, query: NDArray[np.float64]) -> NDArray[np.float64]:
        return self.metric.measure_many(self.points[node.indices], query)

    def _nearest(self, node: _Node, query: NDArray[np.float64], best: list) -> None:
        if node.is_leaf:
            distances = self._leaf_distances(node, query)
            pos = int(np.argmin(distances))
            if distances[pos] < best[1]:
                best[0], best[1] = int(node.indices[pos]), float(distances[pos])
            return

        point = self.points[node.index]
        distance = self.metric.measure(point, query)
        if distance < best[1]:
            best[0], best[1] = node.index, distance

        delta = float(query[node.axis] - point[node.axis])
        near, far = (node.left, node.right) if delta < 0 else (node.right, node.left)
        if near is not None:
            self._nearest(near, query, best)
        if far is not None and self.metric.axis_bound(delta) < best[1]:
            self._nearest(far, query, best)

    def _k_nearest(
        self,
        node: _Node,
        query: NDArray[np.float64],
        k: int,
        heap: list[tuple[float, int]],
    ) -> None:
        # Max-heap on distance via negated keys.
        def offer(index: int, distance: float) -> None:
            if len(heap) < k:
                heapq.heappush(heap, (-distance, index))
            elif distance < -heap[0][0]:
                heapq.heapreplace(heap, (-distance, index))

        if node.is_leaf:
            for index, distance in zip(node.indices, self._leaf_distances(node, query)):
                offer(int(index), float(distance))
            return

        point = self.points[node.index]
        offer(node.index, self.metric.measure(point, query))

        delta = float(query[node.axis] - point[node.axis])
        near, far = (node.left, node.right) if delta < 0 else (node.right, node.left)
        if near is not None:
            self._k_nearest(near, query, k, heap)
        if far is not None and (
            len(heap) < k or self.metric.axis_bound(delta) < -heap[0][0]
        ):
            self._k_nearest(far, query, k, heap)

    def _radius(
        self,
        node: _Node,
        query: NDArray[np.float64],
        radius: float,
        found: list[Neighbor],
    ) -> None:
        if node.is_leaf:
            distances = self._leaf_distances(node, query)
            for pos in np.flatnonzero(distances <= radius):
                found.append(Neighbor(int(node.indices[pos]), float(distances[pos])))
            return

        point = self.points[node.index]
        distance = self.metric.measure(point, query)
        if distance <= radius:
            found.append(Neighbor(node.index, distance))

        delta = float(query[node.axis] - point[node.axis])
        near, far = (node.left, node.right) if delta < 0 else (node.right, node.left)
        if near is not None:
            self._radius(near, query, radius, found)
        if far is not None and self.metric.axis_bound(delta) <= radius:
            self._radius(far, query, radius, found)


def as_matrix(points: NDArray[np.float64]) -> NDArray[np.float64]:
    matrix = np.asarray(points, dtype=np.float64)
    if matrix.ndim == 1:
        # A flat sequence is a set of 1-D points, except when empty.
        matrix = matrix.reshape(-1, 1) if matrix.size else matrix.reshape(0, 0)
    return matrix
