"""Shared-neighbor counts between interacting proteins."""

import numpy as np
import polars as pl
import structlog
from scipy import sparse

logger = structlog.get_logger()

OVERLAP_SCHEMA = {"source": pl.Int64, "target": pl.Int64, "shared_neighbors": pl.Int64}


def shared_neighbor_counts(adjacency: np.ndarray) -> pl.DataFrame:
    """Count common neighbors for every adjacent ordered pair.

    Neighbor sets are undirected: a node's neighbors are its in- and
    out-neighbors together. Only pairs with ``adjacency[i, j] == 1`` are
    evaluated, and pairs sharing no neighbor are left out.

    The count for (i, j) is ``(U @ U)[i, j]`` with U the symmetrized binary
    adjacency, masked to the edge set; the sparse product only touches
    paths of length two, so the cost tracks edges times degree.

    Args:
        adjacency: Square 0/1 adjacency matrix

    Returns:
        DataFrame with columns source, target (matrix positions) and
        shared_neighbors (positive int), sorted by source then target
    """
    directed = sparse.csr_matrix((np.asarray(adjacency) > 0).astype(np.int64))
    undirected = ((directed + directed.T) > 0).astype(np.int64)

    shared = undirected.dot(undirected).multiply(directed).tocoo()
    keep = shared.data > 0

    df = pl.DataFrame(
        {
            "source": shared.row[keep].astype(np.int64),
            "target": shared.col[keep].astype(np.int64),
            "shared_neighbors": shared.data[keep].astype(np.int64),
        },
        schema=OVERLAP_SCHEMA,
    ).sort(["source", "target"])

    logger.debug(
        "shared_neighbor_counts_complete",
        edge_count=int(directed.nnz),
        pairs_with_overlap=df.height,
    )

    return df
