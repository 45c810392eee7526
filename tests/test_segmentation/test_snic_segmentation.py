"""Tests for SNIC superpixels."""

import numpy as np

from autopalette.engine.config import SNICConfig
from autopalette.engine.pipeline import segment, segment_with_mask


def test_each_pixel_labelled_exactly_once(rng):
    width, height = 12, 9
    points = rng.random((width * height, 5))
    image = segment(SNICConfig(segments=6), width, height, points)

    members = [i for seg in image.segments() for i in seg.members()]
    assert sorted(members) == list(range(width * height))
    assert len(image) <= 6


def test_pixels_cut_off_by_the_mask_still_join_a_segment(rng):
    width, height = 8, 8
    points = rng.random((width * height, 5))
    mask = np.ones(width * height, dtype=bool)
    # Wall off the bottom-right corner pixel from every seed.
    mask[[54, 55, 62]] = False

    image = segment_with_mask(SNICConfig(segments=4), width, height, points, mask)

    labels = image.labels()
    assert labels[63] >= 0
    assert (labels[~mask] == -1).all()
    members = [i for seg in image.segments() for i in seg.members()]
    assert sorted(members) == np.flatnonzero(mask).tolist()


def test_single_seed_floods_connected_region(flat_grid):
    width, height, points = flat_grid
    image = segment(SNICConfig(segments=1), width, height, points)
    assert len(image) == 1
    assert len(next(image.segments())) == width * height
