"""Rank command: score candidate genes around a seed gene set.

Runs the full workflow on the loaded tables:
- Neighborhood subgraph around the seed genes
- Interaction weighting (shared neighbors + GO/HPO similarity)
- Random Walk with Restart from every protein
- Candidate ranking, persisted to DuckDB and written as TSV/Parquet
"""

import logging
import sys
import warnings
from pathlib import Path

import click

from wppi_pipeline.config.loader import load_config_with_overrides
from wppi_pipeline.errors import ConvergenceWarning
from wppi_pipeline.network import graph_from_interactions
from wppi_pipeline.output import write_ranked_output
from wppi_pipeline.persistence import (
    GO_TABLE,
    HPO_TABLE,
    INTERACTIONS_TABLE,
    RANKED_TABLE,
    PipelineStore,
    ProvenanceTracker,
)
from wppi_pipeline.scoring import score_candidate_genes

logger = logging.getLogger(__name__)


@click.command('rank')
@click.argument('genes', nargs=-1, required=True)
@click.option(
    '--top-percentage',
    type=click.FloatRange(0, 100, min_open=True),
    default=None,
    help='Percentage of candidate genes to report (default: from config)'
)
@click.option(
    '--graph-order',
    type=click.IntRange(min=1),
    default=None,
    help='Neighborhood range in steps around the seed genes (default: from config)'
)
@click.option(
    '--no-go',
    is_flag=True,
    help='Do not weight interactions with GO similarity'
)
@click.option(
    '--no-hpo',
    is_flag=True,
    help='Do not weight interactions with HPO similarity'
)
@click.option(
    '--hpo-term',
    'hpo_terms',
    multiple=True,
    help='Restrict HPO annotations to this term name (repeatable)'
)
@click.option(
    '--restart-prob',
    type=float,
    default=None,
    help='Random walk restart probability in (0, 1) (default: from config)'
)
@click.option(
    '--threshold',
    type=float,
    default=None,
    help='Random walk convergence threshold (default: from config)'
)
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Output directory (default: {data_dir}/ranking)'
)
@click.pass_context
def rank(ctx, genes, top_percentage, graph_order, no_go, no_hpo, hpo_terms,
         restart_prob, threshold, output_dir):
    """Rank candidate genes by network proximity to GENES.

    Examples:

        # Rank first-order neighbors of three seed genes
        wppi-pipeline rank MYO7A USH2A CDH23

        # Top 10%, second-order neighborhood, GO only
        wppi-pipeline rank MYO7A USH2A --top-percentage 10 --graph-order 2 --no-hpo
    """
    config_path = ctx.obj['config_path']

    click.echo(click.style("=== WPPI Candidate Ranking ===", bold=True))
    click.echo()

    store = None
    try:
        overrides = {
            "ranking.top_percentage": top_percentage,
            "ranking.graph_order": graph_order,
            "walk.restart_prob": restart_prob,
            "walk.threshold": threshold,
            "annotations.use_go": False if no_go else None,
            "annotations.use_hpo": False if no_hpo else None,
            "annotations.hpo_terms": list(hpo_terms) if hpo_terms else None,
        }
        config = load_config_with_overrides(config_path, overrides)
        store = PipelineStore.from_config(config)
        provenance = ProvenanceTracker.from_config(config)

        interactions = store.load_dataframe(INTERACTIONS_TABLE)
        if interactions is None:
            click.echo(click.style(
                "No interactions loaded. Run 'wppi-pipeline load --interactions ...' first.",
                fg='red'
            ), err=True)
            sys.exit(1)

        go_annotations = store.load_dataframe(GO_TABLE)
        hpo_annotations = store.load_dataframe(HPO_TABLE)

        click.echo(f"Seed genes: {', '.join(genes)}")
        click.echo(f"Interactions: {interactions.height}")
        click.echo()

        graph = graph_from_interactions(interactions)
        provenance.record_step('build_graph', {
            'node_count': graph.number_of_nodes(),
            'edge_count': graph.number_of_edges(),
        })

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", ConvergenceWarning)
            result = score_candidate_genes(
                graph,
                list(genes),
                go_annotations=go_annotations,
                hpo_annotations=hpo_annotations,
                hpo_terms=config.annotations.hpo_terms,
                top_percentage=config.ranking.top_percentage,
                graph_order=config.ranking.graph_order,
                use_go=config.annotations.use_go,
                use_hpo=config.annotations.use_hpo,
                restart_prob=config.walk.restart_prob,
                threshold=config.walk.threshold,
                max_iterations=config.walk.max_iterations,
                n_workers=config.walk.n_workers,
            )
        for warning in caught:
            click.echo(click.style(f"  Warning: {warning.message}", fg='yellow'))

        if result.missing_seed_genes:
            click.echo(click.style(
                f"  Not in network: {', '.join(result.missing_seed_genes)}",
                fg='yellow'
            ))
        for summary in result.annotation_summaries:
            click.echo(f"  {summary}")

        provenance.record_step('score_candidate_genes', {
            'seed_genes': list(genes),
            'missing_seed_genes': result.missing_seed_genes,
            'network_proteins': len(result.node_index),
            'walk_converged': result.walk.converged,
            'unconverged_rows': len(result.walk.unconverged_rows),
            'ranked_candidates': result.ranked.height,
        })

        store.save_dataframe(result.ranked, RANKED_TABLE, description="Ranked candidate genes")
        provenance.save_to_store(store)

        if output_dir is None:
            output_dir = Path(config.data_dir) / "ranking"
        paths = write_ranked_output(
            result.ranked,
            output_dir,
            parameters=provenance.create_metadata()["parameters"],
        )
        sidecar = provenance.save_sidecar(paths["tsv"])

        click.echo()
        click.echo(click.style("=== Top Candidates ===", bold=True))
        for row in result.ranked.head(10).iter_rows(named=True):
            click.echo(f"  {row['gene_symbol'] or '-':<12} {row['protein_id']:<12} {row['score']:.4f}")
        click.echo()
        click.echo(f"Network proteins: {len(result.node_index)}")
        click.echo(f"Ranked candidates: {result.ranked.height}")
        click.echo(f"TSV: {paths['tsv']}")
        click.echo(f"Parquet: {paths['parquet']}")
        click.echo(f"Provenance: {sidecar}")
        click.echo()
        click.echo(click.style("Ranking complete!", fg='green', bold=True))

    except Exception as e:
        click.echo(click.style(f"Rank command failed: {e}", fg='red'), err=True)
        logger.exception("Rank command failed")
        sys.exit(1)
    finally:
        if store is not None:
            store.close()
