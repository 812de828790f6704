"""Protein interaction network: graph construction, node indexing and overlap counts."""

from wppi_pipeline.network.graph import (
    INTERACTION_COLUMNS,
    binary_adjacency,
    genes_in_network,
    graph_from_interactions,
    neighborhood_subgraph,
)
from wppi_pipeline.network.models import GENE_SYMBOL_ATTR, NodeIndex
from wppi_pipeline.network.overlap import shared_neighbor_counts

__all__ = [
    "INTERACTION_COLUMNS",
    "GENE_SYMBOL_ATTR",
    "NodeIndex",
    "graph_from_interactions",
    "genes_in_network",
    "neighborhood_subgraph",
    "binary_adjacency",
    "shared_neighbor_counts",
]
