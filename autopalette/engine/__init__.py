"""autopalette segmentation engine."""

from autopalette.engine.config import (
    DBSCANConfig,
    DBSCANPlusPlusConfig,
    KMeansConfig,
    SegmentationConfig,
    SLICConfig,
    SNICConfig,
    config_from_name,
)
from autopalette.engine.context import PixelGrid
from autopalette.engine.label import UNLABELLED, LabelImage, LabelImageBuilder
from autopalette.engine.pipeline import Pipeline, segment, segment_with_mask
from autopalette.engine.registry import get_registry, segmenter
from autopalette.engine.seed import SeedGenerator
from autopalette.engine.segment import Cluster, Segment

__all__ = [
    "Cluster",
    "DBSCANConfig",
    "DBSCANPlusPlusConfig",
    "KMeansConfig",
    "LabelImage",
    "LabelImageBuilder",
    "Pipeline",
    "PixelGrid",
    "SLICConfig",
    "SNICConfig",
    "SeedGenerator",
    "Segment",
    "SegmentationConfig",
    "UNLABELLED",
    "config_from_name",
    "get_registry",
    "segment",
    "segment_with_mask",
    "segmenter",
]
