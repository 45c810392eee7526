"""LabelImage: final pixel → segment assignment produced by a segmentation run.

Algorithms accumulate segments in a LabelImageBuilder and freeze them with
``build()``. Empty segments never reach the LabelImage.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import numpy as np
from numpy.typing import NDArray

from autopalette.engine.segment import Segment

logger = logging.getLogger(__name__)

# Label for pixels that are masked out or never assigned.
UNLABELLED = -1


class LabelImage:
    """Immutable view of the segments found in a width × height image."""

    def __init__(self, width: int, height: int, segments: dict[int, Segment]) -> None:
        self._width = width
        self._height = height
        self._segments = {
            label: segment for label, segment in sorted(segments.items()) if not segment.is_empty()
        }

    def __repr__(self) -> str:
        return f"LabelImage({self._width}x{self._height}, segments={len(self._segments)})"

    def __len__(self) -> int:
        return len(self._segments)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def is_empty(self) -> bool:
        return not self._segments

    def segments(self) -> Iterator[Segment]:
        """Non-empty segments in ascending label order."""
        return iter(self._segments.values())

    def get(self, label: int) -> Segment | None:
        return self._segments.get(label)

    def labels(self) -> NDArray[np.int64]:
        """Per-pixel label array; UNLABELLED where no segment owns the pixel."""
        labels = np.full(self._width * self._height, UNLABELLED, dtype=np.int64)
        for segment in self._segments.values():
            labels[list(segment.members())] = segment.label
        return labels

    def summary(self) -> list[dict]:
        """``{label, center, count}`` per segment, for downstream swatch ranking."""
        return [
            {"label": s.label, "center": s.center.tolist(), "count": len(s)}
            for s in self._segments.values()
        ]


class LabelImageBuilder:
    """Mutable staging area; segments are created lazily per label."""

    def __init__(self, width: int, height: int, dim: int) -> None:
        self.width = width
        self.height = height
        self.dim = dim
        self._segments: dict[int, Segment] = {}

    def __iter__(self) -> Iterator[Segment]:
        return iter(list(self._segments.values()))

    def __len__(self) -> int:
        return len(self._segments)

    def __contains__(self, label: int) -> bool:
        return label in self._segments

    def get(self, label: int) -> Segment | None:
        return self._segments.get(label)

    def get_or_create(self, label: int) -> Segment:
        segment = self._segments.get(label)
        if segment is None:
            segment = self._segments[label] = Segment(label, self.dim)
        return segment

    def clear_all(self) -> None:
        for segment in self._segments.values():
            segment.clear()

    def merge(self, src_label: int, dst_label: int) -> bool:
        """``dst`` absorbs ``src``; ``src`` is removed. False if either is missing."""
        if src_label == dst_label:
            return False
        src = self._segments.get(src_label)
        dst = self._segments.get(dst_label)
        if src is None or dst is None:
            return False
        dst.absorb(src)
        del self._segments[src_label]
        return True

    def remove(self, label: int) -> Segment | None:
        return self._segments.pop(label, None)

    def build(self) -> LabelImage:
        image = LabelImage(self.width, self.height, self._segments)
        logger.debug("Built label image %s", image)
        return image
