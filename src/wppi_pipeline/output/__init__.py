"""Output generation: ranked candidate files."""

from wppi_pipeline.output.writers import write_ranked_output

__all__ = ["write_ranked_output"]
