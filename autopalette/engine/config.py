"""Segmentation configuration: one frozen dataclass per algorithm.

Every config validates itself in ``__post_init__``, so an invalid parameter
fails at construction, before any point is processed. ``SegmentationConfig``
is the closed set of variants that ``segment_with_mask`` dispatches on.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Union

from autopalette.engine.seed import SeedGenerator
from autopalette.errors import (
    ConfigurationError,
    require_positive_float,
    require_positive_int,
)
from autopalette.utils.distance import DistanceMetric


@dataclass(frozen=True)
class DBSCANConfig:
    """Density-based clustering over every eligible pixel."""

    min_points: int = 6
    epsilon: float = 1e-3
    metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN
    # Segments smaller than this are merged into their nearest neighbour.
    # None disables merging.
    min_segment_size: int | None = None

    def __post_init__(self) -> None:
        require_positive_int("min_points", self.min_points)
        require_positive_float("epsilon", self.epsilon)
        if self.min_segment_size is not None:
            require_positive_int("min_segment_size", self.min_segment_size)


@dataclass(frozen=True)
class DBSCANPlusPlusConfig:
    """DBSCAN with core points evaluated on a random subsample only."""

    min_points: int = 10
    epsilon: float = 0.0016  # 0.04²
    probability: float = 0.1
    metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN
    seed: int = 0

    def __post_init__(self) -> None:
        require_positive_int("min_points", self.min_points)
        require_positive_float("epsilon", self.epsilon)
        if not (0.0 < self.probability <= 1.0):
            raise ConfigurationError("probability", self.probability, "must be in (0, 1]")


@dataclass(frozen=True)
class KMeansConfig:
    """Centroid-based clustering seeded on a regular grid."""

    segments: int = 64
    max_iterations: int = 100
    tolerance: float = 1e-4
    generator: SeedGenerator = SeedGenerator.REGULAR_GRID
    metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN

    def __post_init__(self) -> None:
        require_positive_int("segments", self.segments)
        require_positive_int("max_iterations", self.max_iterations)
        require_positive_float("tolerance", self.tolerance)


@dataclass(frozen=True)
class SLICConfig:
    """Simple linear iterative clustering (superpixels)."""

    segments: int = 128
    compactness: float = 0.0225  # 0.15²
    max_iterations: int = 10
    tolerance: float = 1e-3
    generator: SeedGenerator = SeedGenerator.REGULAR_GRID
    metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN

    def __post_init__(self) -> None:
        require_positive_int("segments", self.segments)
        require_positive_float("compactness", self.compactness)
        require_positive_int("max_iterations", self.max_iterations)
        require_positive_float("tolerance", self.tolerance)


@dataclass(frozen=True)
class SNICConfig:
    """Simple non-iterative clustering (superpixels, single pass)."""

    segments: int = 128
    generator: SeedGenerator = SeedGenerator.REGULAR_GRID
    metric: DistanceMetric = DistanceMetric.SQUARED_EUCLIDEAN

    def __post_init__(self) -> None:
        require_positive_int("segments", self.segments)


SegmentationConfig = Union[
    DBSCANConfig,
    DBSCANPlusPlusConfig,
    KMeansConfig,
    SLICConfig,
    SNICConfig,
]

ALGORITHMS: dict[str, type] = {
    "dbscan": DBSCANConfig,
    "dbscan++": DBSCANPlusPlusConfig,
    "kmeans": KMeansConfig,
    "slic": SLICConfig,
    "snic": SNICConfig,
}


def config_from_name(name: str, **overrides) -> SegmentationConfig:
    """Build a config by algorithm name, e.g. ``config_from_name("slic", segments=32)``."""
    try:
        config_cls = ALGORITHMS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            "algorithm", name, f"must be one of {sorted(ALGORITHMS)}"
        ) from None

    known = {f.name for f in fields(config_cls)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigurationError("parameters", sorted(unknown), f"are not accepted by {name}")
    return replace(config_cls(), **overrides)
