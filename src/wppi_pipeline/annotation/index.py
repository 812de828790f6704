"""Preprocess GO/HPO annotation tables into term and gene lookups."""

from typing import Iterable

import networkx as nx
import polars as pl
import structlog

from wppi_pipeline.annotation.models import (
    GENE_COLUMN,
    TERM_COLUMN,
    TERM_NAME_COLUMN,
    AnnotationIndex,
)
from wppi_pipeline.errors import InputError
from wppi_pipeline.network.models import GENE_SYMBOL_ATTR

logger = structlog.get_logger()

_ONTOLOGY_PREFIXES = {
    "GO": ("GO", "Gene Ontology"),
    "HP": ("HPO", "Human Phenotype Ontology"),
}


def _require_columns(annotations: pl.DataFrame) -> None:
    if TERM_COLUMN not in annotations.columns or GENE_COLUMN not in annotations.columns:
        raise InputError(
            f"Annotations must have {TERM_COLUMN} and {GENE_COLUMN} columns, "
            f"got {annotations.columns}."
        )


def which_ontology(annotations: pl.DataFrame, long: bool = True) -> str:
    """Name the ontology of an annotation table from its first term ID.

    Returns "Gene Ontology"/"GO" for GO:... terms, "Human Phenotype
    Ontology"/"HPO" for HP:... terms and "Unknown" otherwise.
    """
    if annotations.height == 0 or TERM_COLUMN not in annotations.columns:
        return "Unknown"

    first_term = str(annotations[TERM_COLUMN][0])
    short_name, long_name = _ONTOLOGY_PREFIXES.get(first_term[:2], ("Unknown", "Unknown"))
    return long_name if long else short_name


def process_annotations(annotations: pl.DataFrame) -> AnnotationIndex:
    """Build an AnnotationIndex from a (term_id, gene_symbol) table.

    Duplicate (term, gene) rows and rows with a null term or gene are
    dropped first, so term sizes count distinct genes. Row order does not
    affect the result.

    Args:
        annotations: DataFrame with term_id and gene_symbol columns

    Returns:
        AnnotationIndex with term_size, gene_term and total_genes

    Raises:
        InputError: If term_id or gene_symbol columns are missing
    """
    _require_columns(annotations)

    ontology = which_ontology(annotations)
    logger.info("process_annotations_start", ontology=ontology, row_count=annotations.height)

    pairs = (
        annotations
        .select(
            pl.col(TERM_COLUMN).cast(pl.Utf8),
            pl.col(GENE_COLUMN).cast(pl.Utf8),
        )
        .drop_nulls()
        .unique()
    )

    term_size = {
        term: int(count)
        for term, count in pairs.group_by(TERM_COLUMN).agg(pl.len().alias("n")).iter_rows()
    }
    gene_term = {
        gene: frozenset(terms)
        for gene, terms in pairs.group_by(GENE_COLUMN).agg(pl.col(TERM_COLUMN)).iter_rows()
    }

    index = AnnotationIndex(
        term_size=term_size,
        gene_term=gene_term,
        total_genes=len(gene_term),
        ontology=which_ontology(annotations, long=False),
        annotation_count=pairs.height,
    )

    logger.info("process_annotations_complete", summary=index.summary())

    return index


def filter_annotations_with_network(
    annotations: pl.DataFrame,
    graph: nx.MultiDiGraph,
) -> pl.DataFrame:
    """Keep the annotation rows of genes present in the graph, de-duplicated."""
    _require_columns(annotations)

    genes = [
        data[GENE_SYMBOL_ATTR] for _, data in graph.nodes(data=True)
        if data.get(GENE_SYMBOL_ATTR) is not None
    ]
    filtered = (
        annotations
        .filter(pl.col(GENE_COLUMN).is_in(genes))
        .unique(maintain_order=True)
    )

    logger.info(
        "filter_annotations_with_network_complete",
        ontology=which_ontology(annotations, long=False),
        input_rows=annotations.height,
        output_rows=filtered.height,
    )

    return filtered


def filter_hpo_terms(
    annotations: pl.DataFrame,
    term_names: Iterable[str] | None,
) -> pl.DataFrame:
    """Restrict HPO annotations to the given term names.

    None keeps every annotation.

    Raises:
        InputError: If a filter is requested but term_name is missing
    """
    if term_names is None:
        logger.info("filter_hpo_terms_skipped", message="Using all HPO annotations available")
        return annotations

    if TERM_NAME_COLUMN not in annotations.columns:
        raise InputError(
            f"Filtering HPO annotations by name needs a {TERM_NAME_COLUMN} column."
        )

    names = list(term_names)
    filtered = annotations.filter(pl.col(TERM_NAME_COLUMN).is_in(names))
    logger.info("filter_hpo_terms_complete", term_names=len(names), output_rows=filtered.height)
    return filtered
