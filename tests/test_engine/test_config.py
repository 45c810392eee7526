"""Tests for algorithm configuration validation."""

import dataclasses
import math

import pytest

from autopalette.engine.config import (
    DBSCANConfig,
    DBSCANPlusPlusConfig,
    KMeansConfig,
    SLICConfig,
    SNICConfig,
    config_from_name,
)
from autopalette.errors import ConfigurationError
from autopalette.utils.distance import DistanceMetric


def test_defaults():
    assert DBSCANConfig() == DBSCANConfig(6, 1e-3, DistanceMetric.SQUARED_EUCLIDEAN)
    assert DBSCANPlusPlusConfig().probability == 0.1
    assert KMeansConfig().segments == 64
    assert SLICConfig().compactness == pytest.approx(0.0225)
    assert SNICConfig().segments == 128


@pytest.mark.parametrize(
    "factory, kwargs",
    [
        (DBSCANConfig, {"min_points": 0}),
        (DBSCANConfig, {"epsilon": 0.0}),
        (DBSCANConfig, {"epsilon": -0.01}),
        (DBSCANConfig, {"epsilon": math.nan}),
        (DBSCANConfig, {"epsilon": math.inf}),
        (DBSCANConfig, {"min_segment_size": 0}),
        (DBSCANPlusPlusConfig, {"probability": 0.0}),
        (DBSCANPlusPlusConfig, {"probability": 1.5}),
        (DBSCANPlusPlusConfig, {"min_points": 0}),
        (KMeansConfig, {"segments": 0}),
        (KMeansConfig, {"max_iterations": 0}),
        (KMeansConfig, {"tolerance": math.nan}),
        (SLICConfig, {"segments": 0}),
        (SLICConfig, {"compactness": 0.0}),
        (SLICConfig, {"compactness": math.nan}),
        (SLICConfig, {"max_iterations": 0}),
        (SLICConfig, {"tolerance": 0.0}),
        (SNICConfig, {"segments": 0}),
    ],
)
def test_invalid_parameters(factory, kwargs):
    with pytest.raises(ConfigurationError) as exc:
        factory(**kwargs)
    (name,) = kwargs
    assert exc.value.name == name


def test_configs_are_frozen():
    config = KMeansConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.segments = 3


def test_config_from_name():
    config = config_from_name("SLIC", segments=32)
    assert isinstance(config, SLICConfig)
    assert config.segments == 32
    assert isinstance(config_from_name("dbscan++"), DBSCANPlusPlusConfig)


def test_config_from_name_validates_overrides():
    with pytest.raises(ConfigurationError):
        config_from_name("kmeans", segments=0)


def test_config_from_name_unknown():
    with pytest.raises(ConfigurationError):
        config_from_name("meanshift")
    with pytest.raises(ConfigurationError):
        config_from_name("snic", compactness=1.0)
