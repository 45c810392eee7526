"""Tests for LabelImage and its builder."""

import numpy as np

from autopalette.engine.label import UNLABELLED, LabelImageBuilder


def _builder_with(*groups):
    builder = LabelImageBuilder(4, 2, 1)
    for label, members in enumerate(groups):
        segment = builder.get_or_create(label)
        for index in members:
            segment.insert(index, np.array([float(label)]))
    return builder


def test_build_drops_empty_segments():
    builder = _builder_with([0, 1], [2])
    builder.get_or_create(5)
    image = builder.build()
    assert len(image) == 2
    assert [s.label for s in image.segments()] == [0, 1]
    assert image.get(5) is None


def test_labels_array():
    image = _builder_with([0, 1], [6]).build()
    labels = image.labels()
    assert labels.tolist() == [0, 0, UNLABELLED, UNLABELLED, UNLABELLED, UNLABELLED, 1, UNLABELLED]


def test_merge():
    builder = _builder_with([0, 1, 2], [3])
    assert builder.merge(1, 0)
    assert 1 not in builder
    assert len(builder.get(0)) == 4
    assert builder.get(0).center.tolist() == [0.25]


def test_merge_missing_or_same_label():
    builder = _builder_with([0])
    assert not builder.merge(0, 0)
    assert not builder.merge(0, 9)
    assert not builder.merge(9, 0)


def test_remove_and_clear_all():
    builder = _builder_with([0], [1])
    assert builder.remove(1).label == 1
    assert builder.remove(1) is None
    builder.clear_all()
    assert builder.build().is_empty()


def test_summary():
    image = _builder_with([0, 1]).build()
    assert image.summary() == [{"label": 0, "center": [0.0], "count": 2}]
    assert (image.width, image.height) == (4, 2)
