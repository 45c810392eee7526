"""SNIC superpixels: single-pass region growing from snapped seeds.

A priority queue orders candidate pixels by their distance to the centre of
the segment that proposed them. Each pixel is labelled the first time it is
popped; later entries for it are skipped. Eligible pixels the mask cuts off
from every seed join the segment with the nearest centre afterwards.
"""

from __future__ import annotations

import heapq
import itertools
import logging

import numpy as np
from numpy.typing import NDArray

from autopalette.engine.config import SNICConfig
from autopalette.engine.context import PixelGrid
from autopalette.engine.label import UNLABELLED, LabelImage, LabelImageBuilder
from autopalette.engine.registry import segmenter
from autopalette.engine.segmentation.slic import snap_seeds
from autopalette.utils.kdtree import KDTree

logger = logging.getLogger(__name__)


@segmenter(SNICConfig, name="snic", description="Simple non-iterative clustering")
def snic(config: SNICConfig, grid: PixelGrid) -> LabelImage:
    builder = LabelImageBuilder(grid.width, grid.height, grid.dim)
    seeds = config.generator.generate(
        grid.width, grid.height, grid.size, grid.mask, config.segments
    )
    if not seeds:
        return builder.build()

    labels = np.full(grid.size, UNLABELLED, dtype=np.int64)
    # (distance, insertion order, pixel, label); the counter breaks ties FIFO.
    counter = itertools.count()
    queue: list[tuple[float, int, int, int]] = []
    for label, seed in enumerate(snap_seeds(grid, seeds, config.metric)):
        heapq.heappush(queue, (0.0, next(counter), seed, label))

    while queue:
        _, _, pixel, label = heapq.heappop(queue)
        if labels[pixel] != UNLABELLED:
            continue

        labels[pixel] = label
        segment = builder.get_or_create(label)
        segment.insert(pixel, grid.points[pixel])
        center = segment.center

        for neighbor in grid.neighbors(pixel):
            if not grid.is_eligible(neighbor) or labels[neighbor] != UNLABELLED:
                continue
            distance = config.metric.measure(grid.points[neighbor], center)
            heapq.heappush(queue, (distance, next(counter), neighbor, label))

    stranded = grid.eligible[labels[grid.eligible] == UNLABELLED]
    if len(stranded):
        _attach_stranded(grid, builder, stranded, config)
    logger.debug(
        "snic: %d of %d eligible pixels reached by region growing",
        grid.eligible_count - len(stranded),
        grid.eligible_count,
    )
    return builder.build()


def _attach_stranded(
    grid: PixelGrid,
    builder: LabelImageBuilder,
    stranded: NDArray[np.intp],
    config: SNICConfig,
) -> None:
    """Give pixels the mask cut off from every seed to the nearest segment centre."""
    segments = list(builder)
    tree = KDTree(np.array([segment.center for segment in segments]), config.metric)
    for pixel in stranded:
        nearest = tree.search_nearest(grid.points[pixel])
        segments[nearest.index].insert(int(pixel), grid.points[pixel])
