"""autopalette: clustering and segmentation engine for palette extraction."""

__version__ = "0.1.0"
