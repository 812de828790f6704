"""Network diffusion: Random Walk with Restart from every protein."""

from wppi_pipeline.diffusion.random_walk import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_RESTART_PROB,
    DEFAULT_THRESHOLD,
    RandomWalkResult,
    random_walk,
    walk_from_node,
)

__all__ = [
    "DEFAULT_RESTART_PROB",
    "DEFAULT_THRESHOLD",
    "DEFAULT_MAX_ITERATIONS",
    "RandomWalkResult",
    "random_walk",
    "walk_from_node",
]
