"""Pipeline orchestrator: validates the pixel grid and dispatches to a segmenter."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time

import numpy as np
from numpy.typing import NDArray

from autopalette.engine.config import SegmentationConfig
from autopalette.engine.context import PixelGrid
from autopalette.engine.label import LabelImage
from autopalette.engine.registry import SegmenterRegistry, get_registry

logger = logging.getLogger(__name__)

_registered = False


def register_segmenters() -> None:
    """Import every segmentation module so the @segmenter decorators fire."""
    global _registered
    if _registered:
        return
    package = importlib.import_module("autopalette.engine.segmentation")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"{package.__name__}.{module_name}")
    _registered = True


class Pipeline:
    """Runs one configured segmentation algorithm over pixel grids."""

    def __init__(
        self,
        config: SegmentationConfig,
        registry: SegmenterRegistry | None = None,
    ) -> None:
        register_segmenters()
        self.config = config
        self.registry = registry or get_registry()
        self.spec = self.registry.get(type(config))

    def run(self, grid: PixelGrid) -> LabelImage:
        start = time.perf_counter()
        logger.info(
            "Pipeline: %s on %dx%d (%d eligible pixels)",
            self.spec.name,
            grid.width,
            grid.height,
            grid.eligible_count,
        )

        image = self.spec.fn(self.config, grid)

        total = (time.perf_counter() - start) * 1000
        logger.info("Pipeline complete: %s -> %d segments in %.0fms", self.spec.name, len(image), total)
        return image


def segment_with_mask(
    config: SegmentationConfig,
    width: int,
    height: int,
    points: NDArray[np.float64],
    mask: NDArray[np.bool_] | None = None,
) -> LabelImage:
    """Segment ``points`` laid out on a width × height grid.

    Pixels whose mask entry is False take no part in seeding, assignment or
    any centroid, and are absent from the result.
    """
    grid = PixelGrid(width, height, points, mask)
    return Pipeline(config).run(grid)


def segment(
    config: SegmentationConfig,
    width: int,
    height: int,
    points: NDArray[np.float64],
) -> LabelImage:
    return segment_with_mask(config, width, height, points)
