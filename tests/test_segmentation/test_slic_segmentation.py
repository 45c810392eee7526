"""Tests for SLIC superpixels."""

import numpy as np

from autopalette.engine.config import SLICConfig
from autopalette.engine.context import PixelGrid
from autopalette.engine.pipeline import segment, segment_with_mask
from autopalette.engine.segmentation.slic import slic_distance, snap_seeds
from autopalette.utils.distance import DistanceMetric


def test_snap_moves_off_an_edge():
    points = np.zeros((25, 5))
    points[7, :3] = 1.0  # a bright pixel next to the seed
    grid = PixelGrid(5, 5, points)
    # Pixel 12 sits below the bright pixel, on a steep vertical edge.
    snapped = snap_seeds(grid, [12], DistanceMetric.SQUARED_EUCLIDEAN)
    assert snapped != [12]
    assert grid.gradient(snapped[0], DistanceMetric.SQUARED_EUCLIDEAN) < grid.gradient(
        12, DistanceMetric.SQUARED_EUCLIDEAN
    )


def test_snap_collapses_duplicates():
    grid = PixelGrid(5, 5, np.zeros((25, 5)))
    assert snap_seeds(grid, [12, 12], DistanceMetric.SQUARED_EUCLIDEAN) == [12]


def test_distance_weights_position_by_compactness():
    points = np.array([[0.0, 0.0, 0.0, 1.0, 0.0]])
    center = np.zeros(5)
    distance = slic_distance(points, center, 0.5, DistanceMetric.SQUARED_EUCLIDEAN)
    assert distance.tolist() == [0.5]


def test_small_windows_still_cover_every_pixel(rng):
    width, height = 16, 16
    points = rng.random((width * height, 5))
    image = segment(SLICConfig(segments=64, max_iterations=3), width, height, points)
    assert (image.labels() >= 0).all()


def test_masked_pixels_unlabelled(quadrant_image):
    width, height, points = quadrant_image
    mask = np.ones(width * height, dtype=bool)
    mask[[0, 19, 27, 63]] = False

    image = segment_with_mask(SLICConfig(segments=4), width, height, points, mask)

    labels = image.labels()
    assert (labels[~mask] == -1).all()
    assert (labels[mask] >= 0).all()
