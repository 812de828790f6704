"""Rank candidate genes by walk probability of reaching the seed genes."""

import math
from collections.abc import Iterable

import numpy as np
import polars as pl
import structlog

from wppi_pipeline.errors import InputError
from wppi_pipeline.network.models import NodeIndex

logger = structlog.get_logger(__name__)

RANKED_SCHEMA = {"gene_symbol": pl.Utf8, "protein_id": pl.Utf8, "score": pl.Float64}


def validate_seed_genes(seed_genes) -> list[str]:
    """
    Check that seed genes are a collection of gene symbol strings.

    A bare string is rejected: "MYO7A" would otherwise be read as five
    one-letter genes.

    Returns:
        Seed genes as a list, in input order

    Raises:
        InputError: If seed_genes is a string, not iterable, or holds non-strings
    """
    if isinstance(seed_genes, (str, bytes)) or not isinstance(seed_genes, Iterable):
        raise InputError("Seed genes must be a collection of gene symbol strings.")

    genes = list(seed_genes)
    bad = [gene for gene in genes if not isinstance(gene, str)]
    if bad:
        raise InputError(f"Seed genes must be strings, got {bad[:5]}.")

    return genes


def prioritize_genes(
    node_index: NodeIndex,
    probabilities: np.ndarray,
    seed_genes: Iterable[str],
    top_percentage: float = 100.0,
) -> pl.DataFrame:
    """
    Score and rank every non-seed protein of the network.

    A candidate's score is the sum, over seed proteins, of the probability
    that a walk restarting at the candidate visits the seed
    (``probabilities[candidate, seed]``; rows are start nodes). Candidates
    are sorted by score descending with ties kept in node order, then the
    top ``ceil(n_candidates * top_percentage / 100)`` are returned.

    Args:
        node_index: Node order of the probability matrix
        probabilities: n x n walk probability matrix
        seed_genes: Gene symbols known to be relevant
        top_percentage: Share of candidates to return, in (0, 100]

    Returns:
        DataFrame with columns gene_symbol, protein_id, score

    Raises:
        InputError: If seed_genes is malformed, top_percentage is outside
            (0, 100] or the matrix does not match node_index

    Notes:
        - Seed symbols absent from the network add nothing to any score
        - Proteins without a gene symbol are ranked with a null gene_symbol
        - top_percentage=100 returns all candidates
    """
    seeds = set(validate_seed_genes(seed_genes))

    if not 0 < top_percentage <= 100:
        raise InputError(f"top_percentage must be in (0, 100], got {top_percentage}.")

    probabilities = np.asarray(probabilities)
    n = len(node_index)
    if probabilities.shape != (n, n):
        raise InputError(
            f"Probability matrix shape {probabilities.shape} does not match {n} network nodes."
        )

    seed_cols = np.array(node_index.positions_of_genes(seeds), dtype=np.int64)
    is_seed = np.zeros(n, dtype=bool)
    is_seed[seed_cols] = True
    candidate_rows = np.flatnonzero(~is_seed)

    scores = probabilities[np.ix_(candidate_rows, seed_cols)].sum(axis=1)

    candidates = pl.DataFrame(
        {
            "gene_symbol": [node_index.gene_symbols[i] for i in candidate_rows],
            "protein_id": [node_index.protein_ids[i] for i in candidate_rows],
            "score": scores.astype(np.float64),
        },
        schema=RANKED_SCHEMA,
    )

    keep = math.ceil(candidates.height * top_percentage / 100)
    ranked = candidates.sort("score", descending=True, maintain_order=True).head(keep)

    logger.info(
        "prioritize_genes_complete",
        seed_proteins=int(seed_cols.size),
        candidate_proteins=candidates.height,
        top_percentage=top_percentage,
        returned=ranked.height,
    )

    return ranked
