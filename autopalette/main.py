"""Library entry point: logging setup and image → label image in one call."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from autopalette.config import settings
from autopalette.engine.config import SegmentationConfig, config_from_name
from autopalette.engine.label import LabelImage
from autopalette.engine.pipeline import segment_with_mask
from autopalette.features import extract_features

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def extract_segments(
    rgba: NDArray[np.uint8],
    config: SegmentationConfig | None = None,
) -> LabelImage:
    """Segment an ``(h, w, 4)`` RGBA array.

    Without ``config`` the algorithm named by ``settings.algorithm`` runs
    with its default parameters.
    """
    if config is None:
        config = config_from_name(settings.algorithm)
    points, mask = extract_features(rgba, settings.alpha_threshold)
    height, width = np.asarray(rgba).shape[:2]
    logger.debug("extract_segments: %dx%d, %s", width, height, type(config).__name__)
    return segment_with_mask(config, width, height, points, mask)
