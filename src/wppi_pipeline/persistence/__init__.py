"""Persistence layer: DuckDB table store and provenance tracking."""

from wppi_pipeline.persistence.duckdb_store import (
    GO_TABLE,
    HPO_TABLE,
    INTERACTIONS_TABLE,
    RANKED_TABLE,
    PipelineStore,
)
from wppi_pipeline.persistence.provenance import ProvenanceTracker

__all__ = [
    "PipelineStore",
    "ProvenanceTracker",
    "INTERACTIONS_TABLE",
    "GO_TABLE",
    "HPO_TABLE",
    "RANKED_TABLE",
]
