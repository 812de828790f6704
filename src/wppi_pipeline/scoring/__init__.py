"""Candidate gene scoring: probability-based ranking and the full workflow."""

from wppi_pipeline.scoring.prioritization import (
    RANKED_SCHEMA,
    prioritize_genes,
    validate_seed_genes,
)
from wppi_pipeline.scoring.workflow import WorkflowResult, score_candidate_genes

__all__ = [
    "RANKED_SCHEMA",
    "prioritize_genes",
    "validate_seed_genes",
    "WorkflowResult",
    "score_candidate_genes",
]
