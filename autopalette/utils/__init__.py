"""Leaf-node numeric helpers. No engine imports."""
