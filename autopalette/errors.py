"""Exceptions raised by the clustering and segmentation engine."""

from __future__ import annotations


class SegmentationError(ValueError):
    """Base class for every error raised by autopalette."""


class ConfigurationError(SegmentationError):
    """An algorithm parameter is out of range. Raised before any point is touched."""

    def __init__(self, name: str, value: object, reason: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} {reason}, got: {value!r}")


class LengthMismatchError(SegmentationError):
    """Points or mask length disagrees with width * height."""

    def __init__(self, what: str, expected: int, actual: int) -> None:
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(f"Unexpected {what} length: expected {expected}, got {actual}")


def require_positive_int(name: str, value: int) -> int:
    if value <= 0:
        raise ConfigurationError(name, value, "must be greater than zero")
    return value


def require_positive_float(name: str, value: float) -> float:
    # NaN fails every comparison, so test for it explicitly.
    if value != value or value <= 0.0 or value == float("inf"):
        raise ConfigurationError(name, value, "must be a finite number greater than zero")
    return value
