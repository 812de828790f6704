"""Pydantic models for pipeline configuration."""

import hashlib
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from wppi_pipeline.diffusion.random_walk import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_RESTART_PROB,
    DEFAULT_THRESHOLD,
)


class WalkParameters(BaseModel):
    """Random walk with restart parameters."""

    restart_prob: float = Field(
        default=DEFAULT_RESTART_PROB,
        gt=0.0,
        lt=1.0,
        description="Probability of jumping back to the start node at each step",
    )
    threshold: float = Field(
        default=DEFAULT_THRESHOLD,
        gt=0.0,
        description="Convergence threshold on the max squared change between iterates",
    )
    max_iterations: int = Field(
        default=DEFAULT_MAX_ITERATIONS,
        ge=1,
        description="Iteration cap per start node",
    )
    n_workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker threads for per-node walks (None = executor default)",
    )


class AnnotationSettings(BaseModel):
    """Which ontology annotations weight the interaction network."""

    use_go: bool = Field(
        default=True,
        description="Weight interactions with Gene Ontology similarity",
    )
    use_hpo: bool = Field(
        default=True,
        description="Weight interactions with Human Phenotype Ontology similarity",
    )
    hpo_terms: list[str] | None = Field(
        default=None,
        description="Restrict HPO annotations to these term names (None = all)",
    )


class RankingSettings(BaseModel):
    """Candidate ranking and network neighborhood settings."""

    top_percentage: float = Field(
        default=100.0,
        gt=0.0,
        le=100.0,
        description="Percentage of ranked candidate genes to report",
    )
    graph_order: int = Field(
        default=1,
        ge=1,
        description="Neighborhood range (in steps) around the seed genes",
    )


class PipelineConfig(BaseModel):
    """Main pipeline configuration."""

    data_dir: Path = Field(
        ...,
        description="Directory for pipeline outputs",
    )
    duckdb_path: Path = Field(
        ...,
        description="Path to DuckDB database file",
    )
    walk: WalkParameters = Field(
        default_factory=WalkParameters,
        description="Random walk with restart parameters",
    )
    annotations: AnnotationSettings = Field(
        default_factory=AnnotationSettings,
        description="Ontology annotation settings",
    )
    ranking: RankingSettings = Field(
        default_factory=RankingSettings,
        description="Candidate ranking settings",
    )

    @field_validator("data_dir")
    @classmethod
    def create_directory(cls, v: Path) -> Path:
        """Create directory if it doesn't exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Two runs with the same hash used identical walk, annotation and
        ranking parameters.
        """
        config_json = json.dumps(
            self.model_dump(mode="python"),
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
