"""Segmenter registry: every algorithm is a standalone function registered via decorator.

Usage:
    @segmenter(SLICConfig, description="SLIC superpixels")
    def slic(config: SLICConfig, grid: PixelGrid) -> LabelImage:
        ...

The registry is keyed by config type, so dispatch is a dictionary lookup on
``type(config)`` over the closed set of configuration variants.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from autopalette.engine.context import PixelGrid
    from autopalette.engine.label import LabelImage

logger = logging.getLogger(__name__)


@dataclass
class SegmenterSpec:
    config_type: type
    fn: Callable[[object, "PixelGrid"], "LabelImage"]
    name: str
    description: str = ""


class SegmenterRegistry:
    """Singleton registry of all segmentation algorithms."""

    def __init__(self) -> None:
        self._segmenters: dict[type, SegmenterSpec] = {}

    def register(self, spec: SegmenterSpec) -> None:
        if spec.config_type in self._segmenters:
            raise ValueError(f"Duplicate segmenter for config: {spec.config_type.__name__}")
        self._segmenters[spec.config_type] = spec
        logger.debug("Registered segmenter %s (%s)", spec.name, spec.config_type.__name__)

    def get(self, config_type: type) -> SegmenterSpec:
        try:
            return self._segmenters[config_type]
        except KeyError:
            raise TypeError(f"No segmenter registered for {config_type.__name__}") from None

    def all(self) -> list[SegmenterSpec]:
        return sorted(self._segmenters.values(), key=lambda s: s.name)

    @property
    def count(self) -> int:
        return len(self._segmenters)


# Module-level singleton
_registry = SegmenterRegistry()


def get_registry() -> SegmenterRegistry:
    return _registry


def segmenter(config_type: type, *, name: str | None = None, description: str = ""):
    """Decorator to register a segmentation function for one config type."""

    def decorator(fn: Callable[[object, "PixelGrid"], "LabelImage"]):
        spec = SegmenterSpec(
            config_type=config_type,
            fn=fn,
            name=name or fn.__name__,
            description=description,
        )
        _registry.register(spec)
        return fn

    return decorator
