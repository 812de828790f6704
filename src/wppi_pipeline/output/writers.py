"""TSV + Parquet writer for ranked candidate genes with a YAML sidecar."""

from datetime import datetime, timezone
from pathlib import Path

import polars as pl
import yaml


def write_ranked_output(
    df: pl.DataFrame,
    output_dir: Path,
    filename_base: str = "ranked_genes",
    parameters: dict | None = None,
) -> dict:
    """
    Write ranked candidate genes to TSV and Parquet with a provenance sidecar.

    Row order is written as given: the ranking already breaks score ties by
    network node order, and re-sorting here would change it.

    Args:
        df: Ranked table with gene_symbol, protein_id, score columns
        output_dir: Directory to write output files (created if missing)
        filename_base: Base filename without extension
        parameters: Optional run parameters recorded in the sidecar

    Returns:
        Dictionary with "tsv", "parquet" and "provenance" paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    df = df.with_columns(pl.int_range(1, df.height + 1, dtype=pl.Int64).alias("rank"))

    tsv_path = output_dir / f"{filename_base}.tsv"
    parquet_path = output_dir / f"{filename_base}.parquet"
    provenance_path = output_dir / f"{filename_base}.provenance.yaml"

    df.write_csv(tsv_path, separator="\t", include_header=True)
    df.write_parquet(parquet_path, compression="snappy", use_pyarrow=True)

    provenance = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "output_files": [tsv_path.name, parquet_path.name],
        "statistics": {
            "ranked_candidates": df.height,
            "max_score": float(df["score"].max()) if df.height else None,
            "min_score": float(df["score"].min()) if df.height else None,
        },
        "parameters": parameters or {},
        "column_names": df.columns,
    }

    with open(provenance_path, "w") as f:
        yaml.dump(provenance, f, default_flow_style=False, sort_keys=False)

    return {
        "tsv": tsv_path,
        "parquet": parquet_path,
        "provenance": provenance_path,
    }
