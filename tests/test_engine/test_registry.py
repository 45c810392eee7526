"""Tests for the segmenter registry."""

from dataclasses import dataclass

import pytest

from autopalette.engine.config import (
    DBSCANConfig,
    DBSCANPlusPlusConfig,
    KMeansConfig,
    SLICConfig,
    SNICConfig,
)
from autopalette.engine.context import PixelGrid
from autopalette.engine.label import LabelImage
from autopalette.engine.pipeline import register_segmenters
from autopalette.engine.registry import SegmenterRegistry, SegmenterSpec, get_registry


@dataclass(frozen=True)
class _DummyConfig:
    pass


def _noop(config, grid: PixelGrid) -> LabelImage:
    return LabelImage(grid.width, grid.height, {})


def test_register_and_get():
    reg = SegmenterRegistry()
    spec = SegmenterSpec(config_type=_DummyConfig, fn=_noop, name="dummy")
    reg.register(spec)
    assert reg.get(_DummyConfig) is spec
    assert reg.count == 1


def test_duplicate_rejected():
    reg = SegmenterRegistry()
    reg.register(SegmenterSpec(config_type=_DummyConfig, fn=_noop, name="a"))
    with pytest.raises(ValueError):
        reg.register(SegmenterSpec(config_type=_DummyConfig, fn=_noop, name="b"))


def test_missing_config_type():
    with pytest.raises(TypeError):
        SegmenterRegistry().get(_DummyConfig)


def test_all_sorted_by_name():
    reg = SegmenterRegistry()
    reg.register(SegmenterSpec(config_type=int, fn=_noop, name="zeta"))
    reg.register(SegmenterSpec(config_type=str, fn=_noop, name="alpha"))
    assert [s.name for s in reg.all()] == ["alpha", "zeta"]


def test_every_algorithm_registered():
    register_segmenters()
    reg = get_registry()
    for config_type in (DBSCANConfig, DBSCANPlusPlusConfig, KMeansConfig, SLICConfig, SNICConfig):
        assert reg.get(config_type).config_type is config_type
    assert {s.name for s in reg.all()} >= {"dbscan", "dbscan++", "kmeans", "slic", "snic"}
