"""Load command: import interaction and annotation tables into DuckDB.

Reads local tab-separated files (downloading them is left to the user),
checks their columns and checkpoints them for the rank command.
"""

import logging
import sys
from pathlib import Path

import click
import polars as pl

from wppi_pipeline.annotation import GENE_COLUMN, TERM_COLUMN, which_ontology
from wppi_pipeline.config.loader import load_config
from wppi_pipeline.errors import InputError
from wppi_pipeline.network import INTERACTION_COLUMNS
from wppi_pipeline.persistence import (
    GO_TABLE,
    HPO_TABLE,
    INTERACTIONS_TABLE,
    PipelineStore,
)

logger = logging.getLogger(__name__)


def _read_table(path: Path, required: tuple[str, ...]) -> pl.DataFrame:
    df = pl.read_csv(path, separator="\t", infer_schema_length=0)
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise InputError(f"{path.name} is missing required columns {missing}")
    return df


@click.command('load')
@click.option(
    '--interactions',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help='TSV with source, target, source_genesymbol, target_genesymbol columns'
)
@click.option(
    '--go',
    'go_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='GO annotation TSV with term_id, gene_symbol columns'
)
@click.option(
    '--hpo',
    'hpo_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='HPO annotation TSV with term_id, gene_symbol (and optional term_name) columns'
)
@click.option(
    '--force',
    is_flag=True,
    help='Replace tables that are already loaded'
)
@click.pass_context
def load(ctx, interactions, go_path, hpo_path, force):
    """Import the interaction network and ontology annotations.

    Examples:

        wppi-pipeline load --interactions ppi.tsv --go go.tsv --hpo hpo.tsv
    """
    config_path = ctx.obj['config_path']

    click.echo(click.style("=== WPPI Data Load ===", bold=True))
    click.echo()

    store = None
    try:
        config = load_config(config_path)
        store = PipelineStore.from_config(config)

        sources = [
            (INTERACTIONS_TABLE, interactions, INTERACTION_COLUMNS),
            (GO_TABLE, go_path, (TERM_COLUMN, GENE_COLUMN)),
            (HPO_TABLE, hpo_path, (TERM_COLUMN, GENE_COLUMN)),
        ]

        for table_name, path, required in sources:
            if path is None:
                continue

            if store.has_checkpoint(table_name) and not force:
                click.echo(click.style(
                    f"  {table_name} already loaded, skipping (use --force to replace)",
                    fg='yellow'
                ))
                continue

            df = _read_table(path, required)
            label = which_ontology(df, long=False) if table_name != INTERACTIONS_TABLE else "PPI"
            store.save_dataframe(df, table_name, description=f"{label} table from {path.name}")
            click.echo(click.style(f"  Loaded {df.height} rows into {table_name}", fg='green'))

        click.echo()
        click.echo(f"DuckDB Path: {config.duckdb_path}")
        click.echo(click.style("Load complete!", fg='green', bold=True))

    except Exception as e:
        click.echo(click.style(f"Load command failed: {e}", fg='red'), err=True)
        logger.exception("Load command failed")
        sys.exit(1)
    finally:
        if store is not None:
            store.close()
