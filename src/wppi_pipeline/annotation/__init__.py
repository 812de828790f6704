"""Ontology annotation layer (GO and HPO).

Turns (term_id, gene_symbol) tables into lookup indexes and scores the
functional similarity of interacting genes.
"""

from wppi_pipeline.annotation.index import (
    filter_annotations_with_network,
    filter_hpo_terms,
    process_annotations,
    which_ontology,
)
from wppi_pipeline.annotation.models import (
    GENE_COLUMN,
    TERM_COLUMN,
    TERM_NAME_COLUMN,
    AnnotationIndex,
)
from wppi_pipeline.annotation.similarity import functional_similarity

__all__ = [
    "AnnotationIndex",
    "TERM_COLUMN",
    "GENE_COLUMN",
    "TERM_NAME_COLUMN",
    "process_annotations",
    "which_ontology",
    "filter_annotations_with_network",
    "filter_hpo_terms",
    "functional_similarity",
]
