"""Exception and warning types raised by the pipeline."""


class InputError(ValueError):
    """Invalid input detected before any computation starts.

    Raised for malformed seed gene collections, annotation tables without
    the required columns, non-positive neighborhood orders and empty graphs.
    """


class ConvergenceWarning(UserWarning):
    """Random walk rows stopped at the iteration cap before converging."""
