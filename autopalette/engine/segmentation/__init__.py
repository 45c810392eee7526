"""Segmentation algorithms. Each module registers itself via @segmenter on import."""
