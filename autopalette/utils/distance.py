"""Distance metrics over feature vectors. No engine imports."""

from __future__ import annotations

import enum

import numpy as np
from numpy.typing import NDArray


class DistanceMetric(enum.Enum):
    """Distance strategy, compared by value.

    SQUARED_EUCLIDEAN is monotonic with EUCLIDEAN, so it is safe for
    nearest-neighbour comparisons. Thresholds (epsilon, tolerance) must be
    expressed in the same squared units when it is used.
    """

    EUCLIDEAN = "euclidean"
    SQUARED_EUCLIDEAN = "squared_euclidean"

    def measure(self, a: NDArray[np.float64], b: NDArray[np.float64]) -> float:
        delta = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
        squared = float(np.dot(delta, delta))
        if self is DistanceMetric.EUCLIDEAN:
            return float(np.sqrt(squared))
        return squared

    def measure_many(
        self, points: NDArray[np.float64], query: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Distance from ``query`` to every row of ``points``."""
        delta = points - query
        squared = np.einsum("ij,ij->i", delta, delta)
        if self is DistanceMetric.EUCLIDEAN:
            return np.sqrt(squared)
        return squared

    def axis_bound(self, delta: float) -> float:
        """Lower bound on the distance implied by an offset along one axis."""
        if self is DistanceMetric.EUCLIDEAN:
            return abs(delta)
        return delta * delta
