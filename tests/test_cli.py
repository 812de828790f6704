"""Integration tests for the CLI commands using CliRunner.

Tests:
- --help for the group and each command
- info with a custom config
- load of interaction and annotation tables, checkpoint skipping and --force
- rank end to end: DuckDB table, TSV/Parquet output, provenance sidecar
- rank option overrides
- rank without loaded interactions
"""

import json

import polars as pl
import pytest
from click.testing import CliRunner

from wppi_pipeline.cli.main import cli
from wppi_pipeline.persistence import RANKED_TABLE, PipelineStore


@pytest.fixture
def test_config(tmp_path):
    """Create minimal config YAML for testing."""
    config_path = tmp_path / "test_config.yaml"
    config_path.write_text(f"""
data_dir: {tmp_path}/data
duckdb_path: {tmp_path}/test.duckdb
walk:
  restart_prob: 0.4
  threshold: 1.0e-10
  n_workers: 1
""")
    return config_path


@pytest.fixture
def input_files(tmp_path):
    """Interaction, GO and HPO TSV files around a small Usher-like module."""
    interactions = tmp_path / "interactions.tsv"
    pl.DataFrame({
        "source": ["Q13402", "O75445", "Q13402", "Q9H251", "Q9H251", "Q495M9"],
        "target": ["O75445", "Q9H251", "Q9H251", "Q495M9", "P35579", "P35579"],
        "source_genesymbol": ["MYO7A", "USH2A", "MYO7A", "CDH23", "CDH23", "USH1G"],
        "target_genesymbol": ["USH2A", "CDH23", "CDH23", "USH1G", "MYH9", "MYH9"],
        "is_directed": ["1", "1", "0", "1", "1", "0"],
    }).write_csv(interactions, separator="\t")

    go = tmp_path / "go.tsv"
    pl.DataFrame({
        "term_id": ["GO:0007605", "GO:0007605", "GO:0007605", "GO:0032420", "GO:0032420"],
        "gene_symbol": ["MYO7A", "USH2A", "CDH23", "CDH23", "USH1G"],
    }).write_csv(go, separator="\t")

    hpo = tmp_path / "hpo.tsv"
    pl.DataFrame({
        "term_id": ["HP:0000365", "HP:0000365", "HP:0000510"],
        "gene_symbol": ["MYO7A", "CDH23", "USH2A"],
        "term_name": ["Hearing impairment", "Hearing impairment", "Rod-cone dystrophy"],
    }).write_csv(hpo, separator="\t")

    return {"interactions": interactions, "go": go, "hpo": hpo}


def _load(runner, test_config, input_files, *extra):
    return runner.invoke(cli, [
        '--config', str(test_config),
        'load',
        '--interactions', str(input_files["interactions"]),
        '--go', str(input_files["go"]),
        '--hpo', str(input_files["hpo"]),
        *extra,
    ])


def test_help():
    runner = CliRunner()

    result = runner.invoke(cli, ['--help'])

    assert result.exit_code == 0
    for command in ('info', 'load', 'rank'):
        assert command in result.output


def test_rank_help():
    runner = CliRunner()

    result = runner.invoke(cli, ['rank', '--help'])

    assert result.exit_code == 0
    assert '--top-percentage' in result.output
    assert '--graph-order' in result.output
    assert '--hpo-term' in result.output


def test_info(test_config):
    runner = CliRunner()

    result = runner.invoke(cli, ['--config', str(test_config), 'info'])

    assert result.exit_code == 0
    assert 'WPPI Pipeline v' in result.output
    assert 'Restart Probability: 0.4' in result.output
    assert 'Threshold: 1e-10' in result.output


def test_load(test_config, input_files, tmp_path):
    runner = CliRunner()

    result = _load(runner, test_config, input_files)

    assert result.exit_code == 0, result.output
    assert 'Loaded 6 rows into interactions' in result.output
    assert 'Loaded 5 rows into go_annotations' in result.output
    assert 'Loaded 3 rows into hpo_annotations' in result.output
    assert 'Load complete!' in result.output

    with PipelineStore(tmp_path / "test.duckdb") as store:
        assert store.has_checkpoint("interactions")
        assert store.load_dataframe("interactions").height == 6


def test_load_skips_existing_without_force(test_config, input_files):
    runner = CliRunner()
    _load(runner, test_config, input_files)

    skipped = _load(runner, test_config, input_files)
    forced = _load(runner, test_config, input_files, '--force')

    assert skipped.exit_code == 0
    assert 'already loaded, skipping' in skipped.output
    assert forced.exit_code == 0
    assert 'Loaded 6 rows into interactions' in forced.output


def test_load_rejects_missing_columns(test_config, tmp_path):
    bad = tmp_path / "bad.tsv"
    pl.DataFrame({"a": ["P1"], "b": ["P2"]}).write_csv(bad, separator="\t")
    runner = CliRunner()

    result = runner.invoke(cli, ['--config', str(test_config), 'load', '--interactions', str(bad)])

    assert result.exit_code == 1
    assert 'missing required columns' in result.output


def test_rank_end_to_end(test_config, input_files, tmp_path):
    runner = CliRunner()
    _load(runner, test_config, input_files)

    result = runner.invoke(cli, ['--config', str(test_config), 'rank', 'MYO7A', 'USH2A'])

    assert result.exit_code == 0, result.output
    assert 'Ranking complete!' in result.output
    assert 'CDH23' in result.output

    ranking_dir = tmp_path / "data" / "ranking"
    assert (ranking_dir / "ranked_genes.tsv").exists()
    assert (ranking_dir / "ranked_genes.parquet").exists()
    assert (ranking_dir / "ranked_genes.provenance.yaml").exists()

    sidecar = json.loads((ranking_dir / "ranked_genes.provenance.json").read_text())
    step_names = [step["step_name"] for step in sidecar["processing_steps"]]
    assert step_names == ["build_graph", "score_candidate_genes"]

    with PipelineStore(tmp_path / "test.duckdb") as store:
        ranked = store.load_dataframe(RANKED_TABLE)
    # First-order neighborhood of MYO7A/USH2A adds CDH23 only
    assert ranked["gene_symbol"].to_list() == ["CDH23"]


def test_rank_options(test_config, input_files, tmp_path):
    runner = CliRunner()
    _load(runner, test_config, input_files)
    output_dir = tmp_path / "custom"

    result = runner.invoke(cli, [
        '--config', str(test_config),
        'rank', 'MYO7A', 'NOT_A_GENE',
        '--graph-order', '2',
        '--top-percentage', '50',
        '--no-hpo',
        '--output-dir', str(output_dir),
    ])

    assert result.exit_code == 0, result.output
    assert 'Not in network: NOT_A_GENE' in result.output
    assert 'HPO:' not in result.output

    written = pl.read_csv(output_dir / "ranked_genes.tsv", separator="\t")
    # MYO7A reaches USH2A, CDH23 (1 step) and USH1G, MYH9 (2 steps); top half kept
    assert written.height == 2
    assert written["rank"].to_list() == [1, 2]


def test_rank_rejects_invalid_top_percentage(test_config):
    runner = CliRunner()

    result = runner.invoke(cli, ['--config', str(test_config), 'rank', 'MYO7A', '--top-percentage', '0'])

    assert result.exit_code != 0
    assert 'top-percentage' in result.output


def test_rank_without_interactions(test_config):
    runner = CliRunner()

    result = runner.invoke(cli, ['--config', str(test_config), 'rank', 'MYO7A'])

    assert result.exit_code == 1
    assert 'No interactions loaded' in result.output


def test_rank_reports_seed_not_in_network(test_config, input_files):
    runner = CliRunner()
    _load(runner, test_config, input_files)

    result = runner.invoke(cli, ['--config', str(test_config), 'rank', 'NOT_A_GENE'])

    assert result.exit_code == 1
    assert 'Rank command failed' in result.output
    assert 'empty' in result.output
