"""SLIC superpixels: local K-Means with a colour + position distance.

Each centre only scans a square window around its seed pixel, so one
iteration costs O(segments * window) instead of O(segments * pixels).
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray

from autopalette.engine.config import SLICConfig
from autopalette.engine.context import PixelGrid
from autopalette.engine.label import LabelImage, LabelImageBuilder
from autopalette.engine.registry import segmenter
from autopalette.utils.distance import DistanceMetric
from autopalette.utils.kdtree import KDTree

logger = logging.getLogger(__name__)

# Trailing feature channels holding the pixel position.
POSITION_CHANNELS = 2


def snap_seeds(grid: PixelGrid, seeds: list[int], metric: DistanceMetric) -> list[int]:
    """Move each seed to the lowest-gradient eligible pixel around it.

    Seeds that land on the same pixel collapse into one; order is kept.
    """
    snapped: list[int] = []
    seen: set[int] = set()
    for seed in seeds:
        index = grid.lowest_gradient_index(seed, metric)
        if index not in seen:
            seen.add(index)
            snapped.append(index)
    return snapped


def slic_distance(
    points: NDArray[np.float64],
    center: NDArray[np.float64],
    compactness: float,
    metric: DistanceMetric,
) -> NDArray[np.float64]:
    """``metric(colour) + compactness * metric(position)`` for each row of ``points``.

    Position is the trailing two channels. Any spatial weight already baked
    into the features by ``extract_features`` still applies; ``compactness``
    multiplies the position term a second time on top of it.
    """
    color = metric.measure_many(points[:, :-POSITION_CHANNELS], center[:-POSITION_CHANNELS])
    position = metric.measure_many(points[:, -POSITION_CHANNELS:], center[-POSITION_CHANNELS:])
    return color + compactness * position


@segmenter(SLICConfig, name="slic", description="Simple linear iterative clustering")
def slic(config: SLICConfig, grid: PixelGrid) -> LabelImage:
    builder = LabelImageBuilder(grid.width, grid.height, grid.dim)
    seeds = config.generator.generate(
        grid.width, grid.height, grid.size, grid.mask, config.segments
    )
    if not seeds:
        return builder.build()

    anchors = snap_seeds(grid, seeds, config.metric)
    centers = grid.points[anchors].copy()
    step = math.sqrt(grid.eligible_count / config.segments)
    radius = max(1, math.ceil(2 * step))
    windows = []
    for anchor in anchors:
        window = grid.window(anchor, radius)
        windows.append(window[grid.mask[window]])

    for iteration in range(1, config.max_iterations + 1):
        owners = _assign(grid, centers, windows, config)
        builder.clear_all()
        for pixel in grid.eligible:
            builder.get_or_create(int(owners[pixel])).insert(int(pixel), grid.points[pixel])

        converged = True
        for segment in builder:
            if segment.is_empty():
                continue
            center = segment.center
            if config.metric.measure(centers[segment.label], center) > config.tolerance:
                converged = False
            centers[segment.label] = center

        logger.debug("slic iteration %d: %d segments", iteration, len(builder))
        if converged:
            break

    return builder.build()


def _assign(
    grid: PixelGrid,
    centers: NDArray[np.float64],
    windows: list[NDArray[np.intp]],
    config: SLICConfig,
) -> NDArray[np.int64]:
    """Owning centre per pixel; eligible pixels outside every window go to the nearest centre."""
    owners = np.full(grid.size, -1, dtype=np.int64)
    best = np.full(grid.size, np.inf)
    for label, window in enumerate(windows):
        if len(window) == 0:
            continue
        distances = slic_distance(grid.points[window], centers[label], config.compactness, config.metric)
        closer = distances < best[window]
        best[window[closer]] = distances[closer]
        owners[window[closer]] = label

    unclaimed = grid.eligible[owners[grid.eligible] < 0]
    if len(unclaimed):
        tree = KDTree(centers, config.metric)
        for pixel in unclaimed:
            owners[pixel] = tree.search_nearest(grid.points[pixel]).index
    return owners
