"""Tests for the KD-tree, checked against brute force and scipy's cKDTree."""

import numpy as np
import pytest
from scipy.spatial import cKDTree

from autopalette.errors import ConfigurationError
from autopalette.utils.distance import DistanceMetric
from autopalette.utils.kdtree import KDTree


def _brute_radius(points, query, radius, metric):
    distances = metric.measure_many(points, query)
    return {int(i) for i in np.flatnonzero(distances <= radius)}


def test_empty_tree():
    tree = KDTree.build(np.empty((0, 3)))
    assert len(tree) == 0
    assert tree.search_nearest(np.zeros(3)) is None
    assert tree.search(np.zeros(3), 3) == []
    assert tree.search_radius(np.zeros(3), 1.0) == []


def test_zero_leaf_size_rejected():
    with pytest.raises(ConfigurationError):
        KDTree(np.zeros((4, 2)), leaf_size=0)


def test_single_point():
    tree = KDTree(np.array([[1.0, 2.0]]))
    nearest = tree.search_nearest(np.array([0.0, 0.0]))
    assert nearest.index == 0
    assert nearest.distance == pytest.approx(5.0)


@pytest.mark.parametrize("leaf_size", [1, 2, 16])
@pytest.mark.parametrize("metric", list(DistanceMetric))
def test_nearest_matches_scipy(rng, leaf_size, metric):
    points = rng.random((200, 5))
    tree = KDTree(points, metric, leaf_size)
    oracle = cKDTree(points)
    for query in rng.random((25, 5)):
        found = tree.search_nearest(query)
        distance, index = oracle.query(query)
        assert found.index == index
        expected = distance if metric is DistanceMetric.EUCLIDEAN else distance**2
        assert found.distance == pytest.approx(expected)


@pytest.mark.parametrize("leaf_size", [1, 4, 16])
def test_k_nearest_sorted_and_matches_scipy(rng, leaf_size):
    points = rng.random((150, 3))
    tree = KDTree(points, DistanceMetric.EUCLIDEAN, leaf_size)
    oracle = cKDTree(points)
    query = rng.random(3)
    found = tree.search(query, 5)
    distances, indices = oracle.query(query, k=5)
    assert [n.index for n in found] == list(indices)
    assert [n.distance for n in found] == pytest.approx(list(distances))


def test_k_larger_than_tree():
    points = np.array([[0.0], [1.0], [2.0]])
    found = KDTree(points).search(np.array([0.9]), 10)
    assert [n.index for n in found] == [1, 0, 2]


@pytest.mark.parametrize("leaf_size", [1, 3, 16])
@pytest.mark.parametrize("metric", list(DistanceMetric))
def test_radius_matches_brute_force(rng, leaf_size, metric):
    points = rng.random((300, 4))
    tree = KDTree(points, metric, leaf_size)
    for query in rng.random((10, 4)):
        found = {n.index for n in tree.search_radius(query, 0.05)}
        assert found == _brute_radius(points, query, 0.05, metric)


def test_radius_is_inclusive():
    points = np.array([[0.0, 0.0], [1.0, 0.0], [3.0, 0.0]])
    tree = KDTree(points, DistanceMetric.EUCLIDEAN, leaf_size=1)
    found = {n.index for n in tree.neighbors_within(np.array([0.0, 0.0]), 1.0)}
    assert found == {0, 1}


def test_duplicate_points(rng):
    points = np.repeat(rng.random((1, 2)), 40, axis=0)
    tree = KDTree(points, leaf_size=2)
    assert len(tree.search_radius(points[0], 0.0)) == 40
