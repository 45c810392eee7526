"""DBSCAN segmentation: density clustering of the eligible pixels."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from autopalette.clustering.dbscan import DBSCAN
from autopalette.engine.config import DBSCANConfig
from autopalette.engine.context import PixelGrid
from autopalette.engine.label import LabelImage, LabelImageBuilder
from autopalette.engine.registry import segmenter
from autopalette.utils.distance import DistanceMetric
from autopalette.utils.kdtree import KDTree

logger = logging.getLogger(__name__)


@segmenter(DBSCANConfig, name="dbscan", description="Density-based clustering of eligible pixels")
def dbscan(config: DBSCANConfig, grid: PixelGrid) -> LabelImage:
    builder = LabelImageBuilder(grid.width, grid.height, grid.dim)
    if grid.eligible_count == 0:
        return builder.build()

    model = DBSCAN(config.min_points, config.epsilon, config.metric)
    labels = model.fit_predict(grid.points[grid.eligible])
    fill_builder(builder, grid, labels)

    if config.min_segment_size is not None:
        merge_small_segments(builder, config.min_segment_size, config.min_points, config.metric)
    return builder.build()


def fill_builder(
    builder: LabelImageBuilder,
    grid: PixelGrid,
    labels: NDArray[np.int64],
) -> None:
    """Insert eligible pixels into the segment named by their cluster label.

    ``labels`` is aligned with ``grid.eligible``; negative labels are skipped.
    """
    for position in np.flatnonzero(labels >= 0):
        pixel = int(grid.eligible[position])
        builder.get_or_create(int(labels[position])).insert(pixel, grid.points[pixel])


def merge_small_segments(
    builder: LabelImageBuilder,
    min_size: int,
    min_points: int,
    metric: DistanceMetric,
) -> None:
    """Fold segments below ``min_size`` into the segment with the nearest centre.

    Relocations are decided from the centres before any merge happens.
    Segments still smaller than ``min_points`` afterwards are removed.
    """
    segments = list(builder)
    if len(segments) > 1:
        labels = [segment.label for segment in segments]
        tree = KDTree(np.array([segment.center for segment in segments]), metric)

        relocations: dict[int, int] = {}
        for segment in segments:
            if len(segment) >= min_size:
                continue
            for neighbor in tree.search(segment.center, 2):
                if labels[neighbor.index] != segment.label:
                    relocations[segment.label] = labels[neighbor.index]
                    break

        for small, large in relocations.items():
            builder.merge(small, large)
        logger.debug("Merged %d small segments", len(relocations))

    for segment in list(builder):
        if len(segment) < min_points:
            builder.remove(segment.label)
