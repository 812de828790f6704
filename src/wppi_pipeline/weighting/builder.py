"""Weighted, column-normalized adjacency (transition) matrix for the walk."""

import networkx as nx
import numpy as np
import structlog

from wppi_pipeline.annotation.models import AnnotationIndex
from wppi_pipeline.annotation.similarity import functional_similarity
from wppi_pipeline.network.graph import binary_adjacency
from wppi_pipeline.network.models import NodeIndex
from wppi_pipeline.network.overlap import shared_neighbor_counts

logger = structlog.get_logger()


def normalize_columns(matrix: np.ndarray) -> np.ndarray:
    """Scale every column to sum to 1.

    Columns summing to 0 (isolated nodes) stay all-zero; they are assigned
    explicitly instead of dividing, so no NaN can appear.

    Returns:
        New column-stochastic matrix (zero columns allowed)
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    col_sums = matrix.sum(axis=0)
    nonzero = col_sums > 0

    normalized = np.zeros_like(matrix)
    normalized[:, nonzero] = matrix[:, nonzero] / col_sums[nonzero]
    return normalized


def _similarity_matrix(
    adjacency: np.ndarray,
    node_index: NodeIndex,
    index: AnnotationIndex | None,
) -> np.ndarray:
    """Functional similarity on adjacent pairs, 0 elsewhere."""
    similarity = np.zeros_like(adjacency)
    if index is None:
        return similarity

    cache: dict[tuple[str, str], float] = {}
    symbols = node_index.gene_symbols
    for i, j in zip(*np.nonzero(adjacency)):
        gene_i, gene_j = symbols[i], symbols[j]
        if gene_i is None or gene_j is None:
            continue
        key = (gene_i, gene_j) if gene_i <= gene_j else (gene_j, gene_i)
        if key not in cache:
            cache[key] = functional_similarity(index, gene_i, gene_j)
        similarity[i, j] = cache[key]

    logger.debug(
        "similarity_matrix_complete",
        ontology=index.ontology,
        gene_pairs=len(cache),
        nonzero_pairs=int(np.count_nonzero(similarity)),
    )

    return similarity


def build_weighted_adjacency(
    graph: nx.MultiDiGraph,
    node_index: NodeIndex,
    go_index: AnnotationIndex | None = None,
    hpo_index: AnnotationIndex | None = None,
) -> np.ndarray:
    """Weight each interaction by shared neighbors and annotation similarity.

    Steps:
    1. Binary adjacency A (edge direction kept, A[i, j] = 1 for i -> j)
    2. N: shared-neighbor count on adjacent pairs
    3. G, H: GO and HPO similarity on adjacent pairs (zero without an index)
    4. Column-normalize N + G + H

    A directed graph gives a non-symmetric matrix, so the walk follows
    interaction direction. Annotated genes that are not graph nodes never
    contribute, since only adjacent node pairs are scored.

    Args:
        graph: Interaction graph
        node_index: Node order of ``graph``
        go_index: Processed GO annotations, or None to skip GO weighting
        hpo_index: Processed HPO annotations, or None to skip HPO weighting

    Returns:
        n x n column-stochastic matrix in node_index order; columns of
        nodes with no weighted edge are all zero
    """
    logger.info(
        "weighted_adjacency_start",
        node_count=len(node_index),
        use_go=go_index is not None,
        use_hpo=hpo_index is not None,
    )

    adjacency = binary_adjacency(graph, node_index)

    neighbors = np.zeros_like(adjacency)
    overlap = shared_neighbor_counts(adjacency)
    if overlap.height > 0:
        neighbors[overlap["source"].to_numpy(), overlap["target"].to_numpy()] = (
            overlap["shared_neighbors"].to_numpy()
        )

    raw = (
        neighbors
        + _similarity_matrix(adjacency, node_index, go_index)
        + _similarity_matrix(adjacency, node_index, hpo_index)
    )
    weighted = normalize_columns(raw)

    zero_columns = int(np.count_nonzero(weighted.sum(axis=0) == 0))
    logger.info(
        "weighted_adjacency_complete",
        node_count=len(node_index),
        edge_count=int(adjacency.sum()),
        overlap_pairs=overlap.height,
        zero_columns=zero_columns,
    )

    return weighted
