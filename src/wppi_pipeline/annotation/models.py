"""Lookup structures built from an ontology annotation table."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

# Required columns of an annotation table
TERM_COLUMN = "term_id"
GENE_COLUMN = "gene_symbol"

# Optional human-readable term name, used to restrict HPO annotations
TERM_NAME_COLUMN = "term_name"


@dataclass(frozen=True)
class AnnotationIndex:
    """Preprocessed annotations of one ontology (GO or HPO).

    Attributes:
        term_size: term_id -> number of distinct genes annotated with it
        gene_term: gene_symbol -> set of its term_ids
        total_genes: Number of distinct gene symbols in the table
        ontology: "GO", "HPO" or "Unknown"
        annotation_count: Number of distinct (term, gene) pairs

    Invariant: term_size[t] equals the number of genes whose gene_term set
    contains t. Built once by process_annotations; both mappings are
    read-only views.
    """

    term_size: Mapping[str, int]
    gene_term: Mapping[str, frozenset[str]]
    total_genes: int
    ontology: str = "Unknown"
    annotation_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, "term_size", MappingProxyType(dict(self.term_size)))
        object.__setattr__(self, "gene_term", MappingProxyType(dict(self.gene_term)))

    def summary(self) -> str:
        """One-line description: ontology, term, gene and annotation counts."""
        return (
            f"{self.ontology}: {len(self.term_size)} terms, "
            f"{self.total_genes} genes, {self.annotation_count} annotations"
        )
