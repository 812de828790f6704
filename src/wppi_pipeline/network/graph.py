"""Build the protein interaction graph and its seed-gene neighborhood."""

from typing import Iterable

import networkx as nx
import numpy as np
import polars as pl
import structlog

from wppi_pipeline.errors import InputError
from wppi_pipeline.network.models import GENE_SYMBOL_ATTR, NodeIndex

logger = structlog.get_logger()

# Columns an interaction table must carry
INTERACTION_COLUMNS = ("source", "target", "source_genesymbol", "target_genesymbol")


def graph_from_interactions(interactions: pl.DataFrame) -> nx.MultiDiGraph:
    """Build a directed multigraph from an interaction table.

    Nodes are protein accessions with a ``gene_symbol`` attribute, added in
    first-seen order (all sources in row order, then all targets). A protein
    listed with two symbols keeps the first one. Every row becomes an edge;
    columns beyond the four required ones are stored as edge attributes.

    Args:
        interactions: DataFrame with source, target, source_genesymbol and
            target_genesymbol columns

    Returns:
        networkx MultiDiGraph

    Raises:
        InputError: If required columns are missing
    """
    missing = [col for col in INTERACTION_COLUMNS if col not in interactions.columns]
    if missing:
        raise InputError(f"Interactions must have columns {list(INTERACTION_COLUMNS)}; missing {missing}.")

    nodes = pl.concat([
        interactions.select(
            pl.col("source").cast(pl.Utf8).alias("protein_id"),
            pl.col("source_genesymbol").cast(pl.Utf8).alias(GENE_SYMBOL_ATTR),
        ),
        interactions.select(
            pl.col("target").cast(pl.Utf8).alias("protein_id"),
            pl.col("target_genesymbol").cast(pl.Utf8).alias(GENE_SYMBOL_ATTR),
        ),
    ]).unique(subset="protein_id", keep="first", maintain_order=True)

    graph = nx.MultiDiGraph()
    for protein_id, gene_symbol in nodes.iter_rows():
        graph.add_node(protein_id, **{GENE_SYMBOL_ATTR: gene_symbol})

    attr_columns = [col for col in interactions.columns if col not in INTERACTION_COLUMNS]
    for row in interactions.iter_rows(named=True):
        attrs = {col: row[col] for col in attr_columns}
        graph.add_edge(str(row["source"]), str(row["target"]), **attrs)

    logger.info(
        "graph_from_interactions_complete",
        node_count=graph.number_of_nodes(),
        edge_count=graph.number_of_edges(),
    )

    return graph


def genes_in_network(
    graph: nx.MultiDiGraph,
    genes: Iterable[str],
    present: bool = True,
) -> list[str]:
    """Return the genes that do (present=True) or do not map to any graph node."""
    symbols = {data.get(GENE_SYMBOL_ATTR) for _, data in graph.nodes(data=True)}
    return [gene for gene in genes if (gene in symbols) == present]


def neighborhood_subgraph(
    graph: nx.MultiDiGraph,
    genes: Iterable[str],
    order: int,
) -> nx.MultiDiGraph:
    """Induced subgraph of the gene nodes and everything within ``order`` steps.

    Steps ignore edge direction. ``order == 0`` keeps only the nodes whose
    gene symbol is in ``genes``. The node order of ``graph`` is preserved.

    Raises:
        InputError: If order is negative
    """
    if order < 0:
        raise InputError(f"Neighborhood order must be >= 0, got {order}.")

    wanted = set(genes)
    seeds = [node for node, data in graph.nodes(data=True) if data.get(GENE_SYMBOL_ATTR) in wanted]

    keep = set(seeds)
    if order > 0:
        undirected = graph.to_undirected(as_view=True)
        for seed in seeds:
            keep.update(nx.single_source_shortest_path_length(undirected, seed, cutoff=order))

    subgraph = graph.subgraph([node for node in graph.nodes if node in keep]).copy()

    logger.info(
        "neighborhood_subgraph_complete",
        order=order,
        seed_nodes=len(seeds),
        node_count=subgraph.number_of_nodes(),
        edge_count=subgraph.number_of_edges(),
    )

    return subgraph


def binary_adjacency(graph: nx.MultiDiGraph, node_index: NodeIndex) -> np.ndarray:
    """0/1 adjacency matrix in node_index order.

    ``A[i, j] == 1`` when at least one edge i -> j exists; parallel edges
    collapse to a single 1.
    """
    n = len(node_index)
    adjacency = np.zeros((n, n), dtype=np.float64)
    for source, target in graph.edges():
        adjacency[node_index.position[str(source)], node_index.position[str(target)]] = 1.0
    return adjacency
