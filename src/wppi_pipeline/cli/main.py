"""Main CLI entry point for wppi-pipeline.

Provides command group with global options and subcommands for pipeline operations.
"""

import logging
from pathlib import Path

import click

from wppi_pipeline import __version__
from wppi_pipeline.config.loader import load_config
from wppi_pipeline.cli.load_cmd import load
from wppi_pipeline.cli.rank_cmd import rank


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to pipeline configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """WPPI: prioritize candidate genes on a weighted protein interaction network.

    Weights interactions by shared neighbors and GO/HPO functional
    similarity, then ranks genes by Random Walk with Restart proximity to
    a seed gene set.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display pipeline version and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"WPPI Pipeline v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)

        click.echo(f"Config Hash: {config.config_hash()[:16]}...")
        click.echo()

        click.echo(click.style("Paths:", bold=True))
        click.echo(f"  Data Directory: {config.data_dir}")
        click.echo(f"  DuckDB Path: {config.duckdb_path}")
        click.echo()

        click.echo(click.style("Random Walk:", bold=True))
        click.echo(f"  Restart Probability: {config.walk.restart_prob}")
        click.echo(f"  Threshold: {config.walk.threshold:g}")
        click.echo(f"  Max Iterations: {config.walk.max_iterations}")
        click.echo(f"  Workers: {config.walk.n_workers or 'auto'}")
        click.echo()

        click.echo(click.style("Annotations:", bold=True))
        click.echo(f"  GO: {'on' if config.annotations.use_go else 'off'}")
        click.echo(f"  HPO: {'on' if config.annotations.use_hpo else 'off'}")
        click.echo()

        click.echo(click.style("Ranking:", bold=True))
        click.echo(f"  Graph Order: {config.ranking.graph_order}")
        click.echo(f"  Top Percentage: {config.ranking.top_percentage}")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


cli.add_command(load)
cli.add_command(rank)


if __name__ == '__main__':
    cli()
