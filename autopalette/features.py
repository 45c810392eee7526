"""RGBA image → normalised (L, a, b, x, y) feature points plus alpha mask."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from skimage.color import rgb2lab

# Lab a/b channels span roughly [-128, 127].
_AB_OFFSET = 128.0
_AB_RANGE = 255.0


def extract_features(
    rgba: NDArray[np.uint8],
    alpha_threshold: int = 0,
) -> tuple[NDArray[np.float64], NDArray[np.bool_]]:
    """Convert an ``(h, w, 4)`` RGBA array into segmentation input.

    Returns ``points`` of shape ``(h * w, 5)`` in row-major pixel order and a
    mask that is True where alpha exceeds ``alpha_threshold``.
    """
    rgba = np.asarray(rgba)
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError(f"Expected an (h, w, 4) RGBA array, got shape {rgba.shape}")

    height, width = rgba.shape[:2]
    if height == 0 or width == 0:
        return np.empty((0, 5), dtype=np.float64), np.empty(0, dtype=bool)

    lab = rgb2lab(rgba[..., :3])
    rows, cols = np.mgrid[0:height, 0:width]
    features = np.stack(
        [
            lab[..., 0] / 100.0,
            (lab[..., 1] + _AB_OFFSET) / _AB_RANGE,
            (lab[..., 2] + _AB_OFFSET) / _AB_RANGE,
            cols / width,
            rows / height,
        ],
        axis=-1,
    )
    mask = rgba[..., 3] > alpha_threshold
    return features.reshape(-1, 5).astype(np.float64), mask.reshape(-1)
