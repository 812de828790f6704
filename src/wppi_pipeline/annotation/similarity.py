"""Functional similarity between two genes from shared ontology terms."""

import math

from wppi_pipeline.annotation.models import AnnotationIndex


def functional_similarity(index: AnnotationIndex, gene_i: str, gene_j: str) -> float:
    """Fisher-style similarity of two genes' ontology annotations.

    Each shared term contributes ``-2 * ln(term_size / total_genes)``, so
    rare terms weigh more than broad ones. The result is a monotone score,
    not a calibrated p-value.

    Args:
        index: Processed annotations of one ontology
        gene_i: Gene symbol of the row protein
        gene_j: Gene symbol of the column protein

    Returns:
        Non-negative similarity; 0.0 if either gene is unannotated or they
        share no term
    """
    terms_i = index.gene_term.get(gene_i)
    terms_j = index.gene_term.get(gene_j)
    if terms_i is None or terms_j is None:
        return 0.0

    shared_terms = terms_i & terms_j
    if not shared_terms:
        return 0.0

    # Sorted so the float sum is identical for (i, j) and (j, i)
    return sum(
        -2.0 * math.log(index.term_size[term] / index.total_genes)
        for term in sorted(shared_terms)
    )
