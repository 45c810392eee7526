"""Per-point label states used by the density-based algorithms.

Labels live in a plain int64 array. Values >= 0 are cluster ids
(the ``Assigned`` state); the negative values below are the other states.
A point only moves forward: UNDEFINED -> MARKED -> assigned, or
UNDEFINED -> OUTLIER -> (border point) assigned.
"""

from __future__ import annotations

import enum

import numpy as np
from numpy.typing import NDArray


class Label(enum.IntEnum):
    OUTLIER = -1
    MARKED = -2
    UNDEFINED = -3


def new_labels(n: int) -> NDArray[np.int64]:
    return np.full(n, Label.UNDEFINED, dtype=np.int64)


def is_assigned(label: int) -> bool:
    return label >= 0


def is_outlier(label: int) -> bool:
    return label == Label.OUTLIER
