"""Segment: running centroid plus member set, shared by every algorithm.

The centroid is maintained incrementally as a count-weighted running mean,
so each insert is O(dim) and the members are never re-summed.
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray


class Segment:
    """Mutable accumulator for one cluster / superpixel."""

    __slots__ = ("label", "_center", "_members")

    def __init__(self, label: int, dim: int) -> None:
        self.label = label
        self._center = np.zeros(dim, dtype=np.float64)
        self._members: set[int] = set()

    def __repr__(self) -> str:
        return f"Segment(label={self.label}, len={len(self)}, center={self._center.tolist()})"

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, index: int) -> bool:
        return index in self._members

    @property
    def center(self) -> NDArray[np.float64]:
        return self._center.copy()

    # Clusters expose the same value under its usual name.
    centroid = center

    @property
    def dim(self) -> int:
        return len(self._center)

    def is_empty(self) -> bool:
        return not self._members

    def members(self) -> Iterator[int]:
        """Member indices in ascending order."""
        return iter(sorted(self._members))

    def insert(self, index: int, point: NDArray[np.float64]) -> bool:
        """Add ``index``; returns False (and changes nothing) if already present."""
        if index in self._members:
            return False
        self._members.add(index)
        count = len(self._members)
        self._center = (self._center * (count - 1) + point) / count
        return True

    # The clustering layer calls this "assign".
    assign = insert

    def absorb(self, other: Segment) -> None:
        """Merge ``other`` into this segment, then clear ``other``."""
        if other is self or other.is_empty():
            return
        self_count = len(self._members)
        other_count = len(other._members)
        total = self_count + other_count
        self._center = (self._center * self_count + other._center * other_count) / total
        self._members.update(other._members)
        other.clear()

    def clear(self) -> None:
        self._center = np.zeros_like(self._center)
        self._members.clear()

    reset = clear


# A cluster from the point-level algorithms is the same accumulator.
Cluster = Segment
