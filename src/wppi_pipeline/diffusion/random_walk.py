"""Random Walk with Restart over a column-stochastic transition matrix.

For each start node i the walk iterates

    q_{t+1} = (1 - r) * W @ q_t + r * e_i

from the uniform vector until max((q_{t+1} - q_t) ** 2) < threshold. The
map contracts with factor (1 - r), so convergence takes about
log(1 / threshold) / log(1 / (1 - r)) steps. Restart probabilities near 0
converge slowly; near 1 the result collapses onto e_i.
"""

import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import numpy as np
import structlog

from wppi_pipeline.errors import ConvergenceWarning, InputError

logger = structlog.get_logger()

DEFAULT_RESTART_PROB = 0.4
DEFAULT_THRESHOLD = 1e-6
DEFAULT_MAX_ITERATIONS = 10_000


@dataclass
class RandomWalkResult:
    """Outcome of a random walk over every start node.

    Attributes:
        probabilities: n x n matrix; row i is the stationary distribution of
            the walk restarting at node i
        iterations: Iterations used per start node
        unconverged_rows: Start nodes that hit the iteration cap; their rows
            hold the last iterate
    """

    probabilities: np.ndarray
    iterations: np.ndarray
    unconverged_rows: list[int] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return not self.unconverged_rows


def _validate_parameters(
    matrix: np.ndarray,
    restart_prob: float,
    threshold: float,
    max_iterations: int,
) -> None:
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise InputError(f"Transition matrix must be square, got shape {matrix.shape}.")
    if matrix.shape[0] == 0:
        raise InputError("Transition matrix is empty: no proteins to walk over.")
    if not np.all(np.isfinite(matrix)):
        raise InputError("Transition matrix contains non-finite values.")
    if not 0.0 < restart_prob < 1.0:
        raise InputError(f"restart_prob must be in (0, 1), got {restart_prob}.")
    if threshold <= 0:
        raise InputError(f"threshold must be > 0, got {threshold}.")
    if max_iterations < 1:
        raise InputError(f"max_iterations must be >= 1, got {max_iterations}.")


def walk_from_node(
    transition: np.ndarray,
    start: int,
    restart_prob: float = DEFAULT_RESTART_PROB,
    threshold: float = DEFAULT_THRESHOLD,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> tuple[np.ndarray, int, bool]:
    """Iterate the walk restarting at one node.

    Returns:
        (distribution, iterations used, converged flag). Without convergence
        the distribution is the last iterate.
    """
    n = transition.shape[0]
    restart = np.zeros(n)
    restart[start] = 1.0
    q = np.full(n, 1.0 / n)

    for iteration in range(1, max_iterations + 1):
        q_next = (1.0 - restart_prob) * (transition @ q) + restart_prob * restart
        if np.max((q_next - q) ** 2) < threshold:
            return q_next, iteration, True
        q = q_next

    return q, max_iterations, False


def random_walk(
    weighted_adjacency: np.ndarray,
    restart_prob: float = DEFAULT_RESTART_PROB,
    threshold: float = DEFAULT_THRESHOLD,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    n_workers: int | None = None,
) -> RandomWalkResult:
    """Run the restarting walk from every node of the network.

    Start nodes are independent: each task reads the shared read-only
    matrix and fills only its own row of a pre-allocated output, so rows run
    on a thread pool without locking.

    Args:
        weighted_adjacency: Column-stochastic n x n transition matrix
        restart_prob: Restart probability r in (0, 1), default 0.4
        threshold: Stop when the max squared change falls below this, default 1e-6
        max_iterations: Iteration cap per start node
        n_workers: Worker threads; 1 runs inline, None uses the executor default

    Returns:
        RandomWalkResult with the probability matrix (row = start node)

    Raises:
        InputError: On a non-square/empty/non-finite matrix or invalid parameters

    Warns:
        ConvergenceWarning: If any start node hit max_iterations
    """
    transition = np.array(weighted_adjacency, dtype=np.float64)
    _validate_parameters(transition, restart_prob, threshold, max_iterations)
    transition.setflags(write=False)

    n = transition.shape[0]
    probabilities = np.zeros((n, n))
    iterations = np.zeros(n, dtype=np.int64)
    converged = np.ones(n, dtype=bool)

    logger.info(
        "random_walk_start",
        node_count=n,
        restart_prob=restart_prob,
        threshold=threshold,
        max_iterations=max_iterations,
        n_workers=n_workers,
    )

    def run_row(start: int) -> None:
        row, used, ok = walk_from_node(transition, start, restart_prob, threshold, max_iterations)
        probabilities[start] = row
        iterations[start] = used
        converged[start] = ok

    if n_workers == 1:
        for start in range(n):
            run_row(start)
    else:
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            # list() re-raises any worker exception here
            list(executor.map(run_row, range(n)))

    unconverged_rows = [int(i) for i in np.flatnonzero(~converged)]
    if unconverged_rows:
        logger.warning(
            "random_walk_not_converged",
            unconverged_count=len(unconverged_rows),
            rows=unconverged_rows[:10],
            max_iterations=max_iterations,
        )
        warnings.warn(
            f"Random walk did not converge for {len(unconverged_rows)} of {n} start nodes "
            f"within {max_iterations} iterations; their rows hold the last iterate.",
            ConvergenceWarning,
            stacklevel=2,
        )

    logger.info(
        "random_walk_complete",
        node_count=n,
        mean_iterations=float(iterations.mean()),
        max_iterations_used=int(iterations.max()),
        converged=not unconverged_rows,
    )

    return RandomWalkResult(
        probabilities=probabilities,
        iterations=iterations,
        unconverged_rows=unconverged_rows,
    )
