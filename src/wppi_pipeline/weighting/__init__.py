"""Interaction weighting: shared neighbors plus GO/HPO functional similarity."""

from wppi_pipeline.weighting.builder import build_weighted_adjacency, normalize_columns

__all__ = ["build_weighted_adjacency", "normalize_columns"]
