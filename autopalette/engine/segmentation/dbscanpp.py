"""DBSCAN++ segmentation: subsampled core detection over eligible pixels."""

from __future__ import annotations

from autopalette.clustering.dbscanpp import DBSCANPlusPlus
from autopalette.engine.config import DBSCANPlusPlusConfig
from autopalette.engine.context import PixelGrid
from autopalette.engine.label import LabelImage, LabelImageBuilder
from autopalette.engine.registry import segmenter
from autopalette.engine.segmentation.dbscan import fill_builder


@segmenter(
    DBSCANPlusPlusConfig,
    name="dbscan++",
    description="DBSCAN with core points searched on a random subsample",
)
def dbscanpp(config: DBSCANPlusPlusConfig, grid: PixelGrid) -> LabelImage:
    builder = LabelImageBuilder(grid.width, grid.height, grid.dim)
    if grid.eligible_count == 0:
        return builder.build()

    model = DBSCANPlusPlus(
        config.probability,
        config.min_points,
        config.epsilon,
        config.metric,
        seed=config.seed,
    )
    fill_builder(builder, grid, model.fit_predict(grid.points[grid.eligible]))
    return builder.build()
