"""Unit tests for the Random Walk with Restart engine."""

import numpy as np
import pytest

from wppi_pipeline.diffusion import random_walk, walk_from_node
from wppi_pipeline.errors import ConvergenceWarning, InputError


def _cycle(n: int = 4) -> np.ndarray:
    """Directed cycle 0 -> 1 -> ... -> n-1 -> 0 as a column-stochastic matrix."""
    transition = np.zeros((n, n))
    for i in range(n):
        transition[(i + 1) % n, i] = 1.0
    return transition


def _closed_form(transition: np.ndarray, restart_prob: float) -> np.ndarray:
    """Fixed point r (I - (1 - r) W)^-1, transposed so row i is the walk from i."""
    n = transition.shape[0]
    solved = restart_prob * np.linalg.inv(np.eye(n) - (1 - restart_prob) * transition)
    return solved.T


@pytest.fixture
def weighted() -> np.ndarray:
    """Small irregular column-stochastic matrix."""
    raw = np.array([
        [0.0, 2.0, 1.0, 0.0],
        [1.0, 0.0, 1.0, 1.0],
        [3.0, 1.0, 0.0, 1.0],
        [0.0, 1.0, 2.0, 0.0],
    ])
    return raw / raw.sum(axis=0)


def test_cycle_matches_closed_form():
    """Threshold 1e-14: the squared-change rule at 1e-8 only reaches about 1e-4 accuracy."""
    transition = _cycle()

    result = random_walk(transition, restart_prob=0.5, threshold=1e-14, n_workers=1)

    assert result.converged
    np.testing.assert_allclose(result.probabilities, _closed_form(transition, 0.5), atol=1e-6)


def test_cycle_loose_threshold_is_close():
    """A squared-change threshold of 1e-8 stops once steps fall below 1e-4."""
    transition = _cycle()

    result = random_walk(transition, restart_prob=0.5, threshold=1e-8)

    assert result.converged
    np.testing.assert_allclose(result.probabilities, _closed_form(transition, 0.5), atol=2e-4)


def test_cycle_start_node_gets_most_mass():
    result = random_walk(_cycle(), restart_prob=0.5, threshold=1e-14)

    # Mass halves at each step away from the start along the cycle
    row = result.probabilities[0]
    assert row[0] > row[1] > row[2] > row[3]
    assert row[0] == pytest.approx(0.5 / (1 - 0.5 ** 4), abs=1e-6)


def test_rows_sum_to_one(weighted):
    result = random_walk(weighted)

    np.testing.assert_allclose(result.probabilities.sum(axis=1), np.ones(4), atol=1e-9)
    assert (result.probabilities >= 0).all()
    assert (result.probabilities <= 1).all()


def test_zero_column_leaks_mass():
    """A node with no outgoing weight keeps only the restart share."""
    result = random_walk(np.zeros((3, 3)), restart_prob=0.3)

    np.testing.assert_allclose(result.probabilities, 0.3 * np.eye(3))


def test_high_restart_collapses_to_start():
    result = random_walk(_cycle(), restart_prob=0.999)

    np.testing.assert_allclose(result.probabilities, np.eye(4), atol=1e-2)


def test_threaded_matches_inline(weighted):
    inline = random_walk(weighted, n_workers=1)
    threaded = random_walk(weighted, n_workers=4)

    np.testing.assert_array_equal(inline.probabilities, threaded.probabilities)
    np.testing.assert_array_equal(inline.iterations, threaded.iterations)


def test_random_walk_is_deterministic(weighted):
    first = random_walk(weighted)
    second = random_walk(weighted)

    np.testing.assert_array_equal(first.probabilities, second.probabilities)


def test_input_matrix_is_not_modified(weighted):
    original = weighted.copy()

    random_walk(weighted)

    np.testing.assert_array_equal(weighted, original)
    assert weighted.flags.writeable


def test_iteration_cap_warns():
    with pytest.warns(ConvergenceWarning, match="did not converge"):
        result = random_walk(_cycle(), restart_prob=0.5, threshold=1e-14, max_iterations=1)

    assert not result.converged
    assert result.unconverged_rows == [0, 1, 2, 3]
    assert (result.iterations == 1).all()
    # Rows hold the single iterate taken from the uniform start
    np.testing.assert_allclose(result.probabilities[0], [0.625, 0.125, 0.125, 0.125])


def test_walk_from_node_reports_iterations():
    q, iterations, converged = walk_from_node(_cycle(), 2, restart_prob=0.5, threshold=1e-12)

    assert converged
    assert iterations > 1
    assert q.argmax() == 2


@pytest.mark.parametrize("restart_prob", [0.0, 1.0, -0.1, 1.2])
def test_invalid_restart_prob(weighted, restart_prob):
    with pytest.raises(InputError, match="restart_prob"):
        random_walk(weighted, restart_prob=restart_prob)


def test_invalid_threshold(weighted):
    with pytest.raises(InputError, match="threshold"):
        random_walk(weighted, threshold=0)


def test_invalid_max_iterations(weighted):
    with pytest.raises(InputError, match="max_iterations"):
        random_walk(weighted, max_iterations=0)


def test_non_square_matrix():
    with pytest.raises(InputError, match="square"):
        random_walk(np.ones((2, 3)))


def test_empty_matrix():
    with pytest.raises(InputError, match="empty"):
        random_walk(np.zeros((0, 0)))


def test_non_finite_matrix(weighted):
    weighted[0, 1] = np.nan

    with pytest.raises(InputError, match="non-finite"):
        random_walk(weighted)
