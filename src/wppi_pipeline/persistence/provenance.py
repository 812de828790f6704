"""Provenance tracking for ranking runs."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class ProvenanceTracker:
    """
    Records what produced a ranking: pipeline version, config hash, the
    walk/annotation/ranking parameters and each processing step.
    """

    def __init__(self, pipeline_version: str, config: "PipelineConfig"):
        self.pipeline_version = pipeline_version
        self.config_hash = config.config_hash()
        self.parameters = {
            "walk": config.walk.model_dump(),
            "annotations": config.annotations.model_dump(),
            "ranking": config.ranking.model_dump(),
        }
        self.processing_steps = []
        self.created_at = datetime.now(timezone.utc)

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """
        Record a processing step.

        Args:
            step_name: Name of the processing step
            details: Optional dictionary of additional details
        """
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.processing_steps.append(step)

    def get_steps(self) -> list[dict]:
        return self.processing_steps

    def create_metadata(self) -> dict:
        """Full provenance metadata dictionary."""
        return {
            "pipeline_version": self.pipeline_version,
            "config_hash": self.config_hash,
            "parameters": self.parameters,
            "created_at": self.created_at.isoformat(),
            "processing_steps": self.processing_steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Save metadata as a JSON sidecar next to an output file.

        Args:
            output_path: Path to the main output file; the sidecar is
                {stem}.provenance.json in the same directory

        Returns:
            Path of the written sidecar
        """
        sidecar_path = Path(output_path).with_suffix(".provenance.json")
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)

        with open(sidecar_path, "w") as f:
            json.dump(self.create_metadata(), f, indent=2, default=str)

        return sidecar_path

    def save_to_store(self, store: "PipelineStore") -> None:
        """Append the metadata to the _provenance table of a PipelineStore."""
        metadata = self.create_metadata()

        store.conn.execute("""
            CREATE TABLE IF NOT EXISTS _provenance (
                version VARCHAR,
                config_hash VARCHAR,
                created_at TIMESTAMP,
                parameters_json VARCHAR,
                steps_json VARCHAR
            )
        """)
        store.conn.execute("""
            INSERT INTO _provenance (version, config_hash, created_at, parameters_json, steps_json)
            VALUES (?, ?, ?, ?, ?)
        """, [
            metadata["pipeline_version"],
            metadata["config_hash"],
            metadata["created_at"],
            json.dumps(metadata["parameters"], default=str),
            json.dumps(metadata["processing_steps"], default=str),
        ])

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        with open(sidecar_path) as f:
            return json.load(f)

    @classmethod
    def from_config(
        cls,
        config: "PipelineConfig",
        version: Optional[str] = None
    ) -> "ProvenanceTracker":
        """
        Create a tracker for a config.

        Args:
            config: PipelineConfig instance
            version: Pipeline version string. If None, uses wppi_pipeline.__version__
        """
        if version is None:
            from wppi_pipeline import __version__
            version = __version__

        return cls(version, config)
