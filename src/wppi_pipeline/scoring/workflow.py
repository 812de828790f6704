"""End-to-end workflow: neighborhood graph -> weights -> random walk -> ranking."""

from dataclasses import dataclass, field

import networkx as nx
import polars as pl
import structlog

from wppi_pipeline.annotation import (
    AnnotationIndex,
    filter_annotations_with_network,
    filter_hpo_terms,
    process_annotations,
)
from wppi_pipeline.diffusion import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_RESTART_PROB,
    DEFAULT_THRESHOLD,
    RandomWalkResult,
    random_walk,
)
from wppi_pipeline.errors import InputError
from wppi_pipeline.network import NodeIndex, genes_in_network, neighborhood_subgraph
from wppi_pipeline.scoring.prioritization import prioritize_genes, validate_seed_genes
from wppi_pipeline.weighting import build_weighted_adjacency

logger = structlog.get_logger(__name__)


@dataclass
class WorkflowResult:
    """Ranked candidates plus what was needed to produce them.

    Attributes:
        ranked: gene_symbol, protein_id, score table, best first
        node_index: Node order of the neighborhood subgraph
        walk: Random walk result over the subgraph
        missing_seed_genes: Seed symbols with no protein in the network
        annotation_summaries: One summary line per ontology used
    """

    ranked: pl.DataFrame
    node_index: NodeIndex
    walk: RandomWalkResult
    missing_seed_genes: list[str] = field(default_factory=list)
    annotation_summaries: list[str] = field(default_factory=list)


def _index_annotations(
    annotations: pl.DataFrame | None,
    subgraph: nx.MultiDiGraph,
    label: str,
) -> AnnotationIndex | None:
    """Filter an annotation table to the subgraph and index it; None if nothing remains."""
    if annotations is None:
        logger.info("annotation_layer_disabled", ontology=label)
        return None

    filtered = filter_annotations_with_network(annotations, subgraph)
    if filtered.height == 0:
        logger.warning("annotation_layer_empty", ontology=label)
        return None

    return process_annotations(filtered)


def score_candidate_genes(
    graph: nx.MultiDiGraph,
    seed_genes,
    go_annotations: pl.DataFrame | None = None,
    hpo_annotations: pl.DataFrame | None = None,
    hpo_terms: list[str] | None = None,
    top_percentage: float = 100.0,
    graph_order: int = 1,
    use_go: bool = True,
    use_hpo: bool = True,
    restart_prob: float = DEFAULT_RESTART_PROB,
    threshold: float = DEFAULT_THRESHOLD,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    n_workers: int | None = None,
) -> WorkflowResult:
    """
    Rank candidate genes around a seed gene set.

    Pipeline steps:
    1. Validate seed genes and neighborhood order
    2. Extract the graph_order-step neighborhood of the seed proteins
    3. Restrict GO/HPO tables to the neighborhood (HPO optionally to hpo_terms)
    4. Weight interactions by shared neighbors and annotation similarity
    5. Random walk with restart from every protein
    6. Score and rank non-seed proteins

    Args:
        graph: Full interaction graph
        seed_genes: Gene symbols known to be relevant
        go_annotations: GO table (term_id, gene_symbol), or None
        hpo_annotations: HPO table (term_id, gene_symbol[, term_name]), or None
        hpo_terms: HPO term names to keep; None keeps all
        top_percentage: Share of candidates to return, in (0, 100]
        graph_order: Neighborhood range in steps, >= 1
        use_go: Weight with GO similarity
        use_hpo: Weight with HPO similarity
        restart_prob: Walk restart probability in (0, 1)
        threshold: Walk convergence threshold
        max_iterations: Walk iteration cap per start node
        n_workers: Walk worker threads

    Returns:
        WorkflowResult with the ranked table

    Raises:
        InputError: Bad seed genes, graph_order <= 0, empty neighborhood,
            or annotation tables without term_id/gene_symbol
    """
    seeds = validate_seed_genes(seed_genes)

    if graph_order is None:
        graph_order = 1
        logger.info("graph_order_default", graph_order=graph_order)
    elif graph_order <= 0:
        raise InputError("A graph order bigger than zero needs to be provided.")

    logger.info("wppi_workflow_start", seed_genes=len(seeds), graph_order=graph_order)

    missing = genes_in_network(graph, seeds, present=False)
    if missing:
        logger.warning("seed_genes_not_in_network", genes=missing)

    subgraph = neighborhood_subgraph(graph, seeds, graph_order)
    node_index = NodeIndex.from_graph(subgraph)

    go_index = _index_annotations(go_annotations if use_go else None, subgraph, "GO")
    hpo_table = None
    if use_hpo and hpo_annotations is not None:
        hpo_table = filter_hpo_terms(hpo_annotations, hpo_terms)
    hpo_index = _index_annotations(hpo_table, subgraph, "HPO")

    weighted = build_weighted_adjacency(subgraph, node_index, go_index, hpo_index)

    walk = random_walk(
        weighted,
        restart_prob=restart_prob,
        threshold=threshold,
        max_iterations=max_iterations,
        n_workers=n_workers,
    )

    ranked = prioritize_genes(node_index, walk.probabilities, seeds, top_percentage)

    logger.info(
        "wppi_workflow_complete",
        network_proteins=len(node_index),
        ranked_candidates=ranked.height,
        walk_converged=walk.converged,
    )

    return WorkflowResult(
        ranked=ranked,
        node_index=node_index,
        walk=walk,
        missing_seed_genes=missing,
        annotation_summaries=[idx.summary() for idx in (go_index, hpo_index) if idx is not None],
    )
