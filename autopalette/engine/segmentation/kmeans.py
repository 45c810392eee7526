"""K-Means segmentation: Lloyd iterations over eligible pixels, grid seeded."""

from __future__ import annotations

import logging

from autopalette.clustering.kmeans import lloyd
from autopalette.engine.config import KMeansConfig
from autopalette.engine.context import PixelGrid
from autopalette.engine.label import LabelImage, LabelImageBuilder
from autopalette.engine.registry import segmenter

logger = logging.getLogger(__name__)


@segmenter(KMeansConfig, name="kmeans", description="Centroid clustering seeded on a regular grid")
def kmeans(config: KMeansConfig, grid: PixelGrid) -> LabelImage:
    builder = LabelImageBuilder(grid.width, grid.height, grid.dim)
    seeds = config.generator.generate(
        grid.width, grid.height, grid.size, grid.mask, config.segments
    )
    if not seeds:
        return builder.build()

    result = lloyd(
        grid.points,
        grid.eligible,
        grid.points[seeds],
        config.max_iterations,
        config.tolerance,
        config.metric,
    )
    logger.debug(
        "kmeans: %d seeds, %d iterations, converged=%s",
        len(seeds),
        result.n_iterations,
        result.converged,
    )

    for cluster in result.clusters:
        builder.get_or_create(cluster.label).absorb(cluster)
    return builder.build()
