"""WPPI pipeline: prioritize candidate genes on a weighted PPI network."""

from wppi_pipeline.errors import ConvergenceWarning, InputError

__version__ = "0.1.0"

__all__ = ["__version__", "ConvergenceWarning", "InputError"]
