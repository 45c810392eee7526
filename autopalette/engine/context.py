"""PixelGrid: the validated input every segmentation algorithm consumes.

Points are row-major: pixel (col, row) lives at ``col + row * width``.
Shape checks happen here, before any per-point work starts.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from autopalette.errors import LengthMismatchError
from autopalette.utils.distance import DistanceMetric


@dataclass
class PixelGrid:
    """Feature points laid out on a width × height grid, plus an inclusion mask."""

    width: int
    height: int
    points: NDArray[np.float64]
    mask: NDArray[np.bool_] | None = None
    # Derived in __post_init__
    eligible: NDArray[np.intp] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        points = np.asarray(self.points, dtype=np.float64)
        if points.ndim == 1 and points.size == 0:
            points = points.reshape(0, 0)
        expected = self.width * self.height
        if len(points) != expected:
            raise LengthMismatchError("points", expected, len(points))

        if self.mask is None:
            mask = np.ones(len(points), dtype=bool)
        else:
            mask = np.asarray(self.mask, dtype=bool)
            if mask.shape != (len(points),):
                raise LengthMismatchError("mask", len(points), int(mask.size))

        self.points = points
        self.mask = mask
        self.eligible = np.flatnonzero(mask)

    @property
    def size(self) -> int:
        return len(self.points)

    @property
    def dim(self) -> int:
        return self.points.shape[1] if self.points.ndim == 2 else 0

    @property
    def eligible_count(self) -> int:
        return len(self.eligible)

    def eligible_indices(self) -> NDArray[np.intp]:
        return self.eligible

    def is_eligible(self, index: int) -> bool:
        return bool(self.mask[index])

    def coords(self, index: int) -> tuple[int, int]:
        """(col, row) of a pixel index."""
        return index % self.width, index // self.width

    def index(self, col: int, row: int) -> int:
        return col + row * self.width

    def neighbors(self, index: int, radius: int = 1) -> Iterator[int]:
        """Indices in the (2r+1)² window around ``index``, clipped, excluding itself."""
        col, row = self.coords(index)
        for r in range(max(row - radius, 0), min(row + radius, self.height - 1) + 1):
            for c in range(max(col - radius, 0), min(col + radius, self.width - 1) + 1):
                if c == col and r == row:
                    continue
                yield self.index(c, r)

    def window(self, index: int, radius: int) -> NDArray[np.intp]:
        """All indices in the clipped (2r+1)² window around ``index``, itself included."""
        col, row = self.coords(index)
        cols = np.arange(max(col - radius, 0), min(col + radius, self.width - 1) + 1)
        rows = np.arange(max(row - radius, 0), min(row + radius, self.height - 1) + 1)
        return (cols[None, :] + rows[:, None] * self.width).ravel()

    def gradient(self, index: int, metric: DistanceMetric) -> float:
        """Central-difference gradient magnitude; infinite on the image border."""
        col, row = self.coords(index)
        if col == 0 or col >= self.width - 1 or row == 0 or row >= self.height - 1:
            return float("inf")
        dx = metric.measure(self.points[index - 1], self.points[index + 1])
        dy = metric.measure(self.points[index - self.width], self.points[index + self.width])
        return dx + dy

    def lowest_gradient_index(self, index: int, metric: DistanceMetric) -> int:
        """Eligible pixel in the 3×3 neighbourhood with the lowest gradient.

        The seed itself is the first candidate, so ties keep it in place.
        """
        lowest_index = index
        lowest_score = self.gradient(index, metric)
        for neighbor in self.neighbors(index):
            if not self.is_eligible(neighbor):
                continue
            score = self.gradient(neighbor, metric)
            if score < lowest_score:
                lowest_score = score
                lowest_index = neighbor
        return lowest_index
