"""Seed placement for the centroid-based and superpixel algorithms."""

from __future__ import annotations

import enum
import math

import numpy as np
from numpy.typing import NDArray


class SeedGenerator(enum.Enum):
    """Stateless seed strategy.

    REGULAR_GRID walks a square lattice over the image with
    ``step = round(sqrt(n_points / k))``, starting half a step in.
    REGULAR_INTERVAL ignores the image shape and takes every
    ``n_eligible // k``-th eligible index; it is meant for point sets
    without a meaningful layout.
    """

    REGULAR_GRID = "regular_grid"
    REGULAR_INTERVAL = "regular_interval"

    def generate(
        self,
        width: int,
        height: int,
        n_points: int,
        mask: NDArray[np.bool_] | None,
        k: int,
    ) -> list[int]:
        """Up to ``k`` seed indices, sorted, never outside the mask."""
        if mask is None:
            mask = np.ones(n_points, dtype=bool)
        eligible = np.flatnonzero(mask)

        if k <= 0:
            return []
        if k >= len(eligible):
            return [int(i) for i in eligible]

        if self is SeedGenerator.REGULAR_GRID:
            return _regular_grid(width, height, n_points, mask, k)
        return _regular_interval(eligible, k)


def _regular_grid(
    width: int,
    height: int,
    n_points: int,
    mask: NDArray[np.bool_],
    k: int,
) -> list[int]:
    # round() on a float that is exactly .5 rounds to even; the lattice
    # step follows the usual half-up rule instead.
    step = max(1, int(math.floor(math.sqrt(n_points / k) + 0.5)))
    half = step // 2
    seeds: list[int] = []
    for y in range(half, height, step):
        for x in range(half, width, step):
            index = x + y * width
            if index < n_points and mask[index]:
                seeds.append(index)
                if len(seeds) == k:
                    return sorted(seeds)
    return sorted(seeds)


def _regular_interval(eligible: NDArray[np.intp], k: int) -> list[int]:
    step = max(1, len(eligible) // k)
    half = step // 2
    return [int(i) for i in eligible[half::step][:k]]
