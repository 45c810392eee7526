"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

# Four flat colours, one per image quadrant, in normalised (L, a, b).
QUADRANT_COLORS = [
    (0.1, 0.5, 0.5),  # top-left
    (0.9, 0.5, 0.5),  # top-right
    (0.5, 0.1, 0.9),  # bottom-left
    (0.5, 0.9, 0.1),  # bottom-right
]


def quadrant_points(width: int, height: int) -> np.ndarray:
    """Row-major (L, a, b, x, y) points, one flat colour per quadrant."""
    points = np.empty((width * height, 5), dtype=np.float64)
    for row in range(height):
        for col in range(width):
            quadrant = (col >= width // 2) + 2 * (row >= height // 2)
            points[col + row * width] = (*QUADRANT_COLORS[quadrant], col / width, row / height)
    return points


def quadrant_of(index: int, width: int, height: int) -> int:
    col, row = index % width, index // width
    return int(col >= width // 2) + 2 * int(row >= height // 2)


@pytest.fixture
def quadrant_image() -> tuple[int, int, np.ndarray]:
    return 8, 8, quadrant_points(8, 8)


@pytest.fixture
def quadrant():
    """``quadrant(index, width, height)`` -> 0..3, matching quadrant_points."""
    return quadrant_of


@pytest.fixture
def flat_grid() -> tuple[int, int, np.ndarray]:
    """12×9 image with every feature zero."""
    return 12, 9, np.zeros((12 * 9, 5), dtype=np.float64)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)
