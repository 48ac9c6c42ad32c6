import itertools

import numpy as np
import pytest

from rfsslam.hungarian import solve


def _best_total(matrix, maximize):
    n = len(matrix)
    totals = (
        sum(matrix[i][p[i]] for i in range(n))
        for p in itertools.permutations(range(n))
    )
    return max(totals) if maximize else min(totals)


def _is_permutation(assignment, n):
    return sorted(assignment) == list(range(n))


def test_worked_example_minimize():
    cost = [[4, 1, 3], [2, 0, 5], [3, 2, 2]]
    assignment, total = solve(cost, maximize=False)
    assert assignment == [1, 0, 2]
    assert total == pytest.approx(5.0)


def test_worked_example_maximize_matches_exhaustive_search():
    cost = [[4, 1, 3], [2, 0, 5], [3, 2, 2]]
    assignment, total = solve(cost, maximize=True)
    assert _is_permutation(assignment, 3)
    assert total == pytest.approx(_best_total(cost, True))
    assert total == pytest.approx(sum(cost[i][assignment[i]] for i in range(3)))


def test_identity_maximize():
    assignment, total = solve(np.eye(4), maximize=True)
    assert assignment == [0, 1, 2, 3]
    assert total == pytest.approx(4.0)


@pytest.mark.parametrize("maximize", [True, False])
@pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 6])
def test_random_integer_matrices_are_optimal(n, maximize):
    rng = np.random.default_rng(1000 + n)
    for _ in range(5):
        matrix = rng.integers(0, 20, size=(n, n)).astype(float)
        assignment, total = solve(matrix, maximize=maximize)
        assert _is_permutation(assignment, n)
        assert total == pytest.approx(_best_total(matrix.tolist(), maximize))
        assert total == pytest.approx(sum(matrix[i, assignment[i]] for i in range(n)))


@pytest.mark.parametrize("maximize", [True, False])
def test_negative_entries(maximize):
    matrix = [[-3.0, -1.0, -7.0], [-2.5, -4.0, -0.5], [-1.0, -6.0, -2.0]]
    assignment, total = solve(matrix, maximize=maximize)
    assert _is_permutation(assignment, 3)
    assert total == pytest.approx(_best_total(matrix, maximize))


def test_dyadic_fractions():
    matrix = [[0.5, 0.25, 0.75], [0.125, 0.5, 0.25], [0.75, 0.5, 0.125]]
    assignment, total = solve(matrix)
    assert _is_permutation(assignment, 3)
    assert total == pytest.approx(_best_total(matrix, True))


def test_all_ties():
    assignment, total = solve(np.zeros((4, 4)))
    assert _is_permutation(assignment, 4)
    assert total == 0.0


def test_input_is_not_modified():
    matrix = np.array([[1.0, -2.0], [3.0, 4.0]])
    copy = matrix.copy()
    solve(matrix, maximize=False)
    assert np.array_equal(matrix, copy)


def test_empty_matrix():
    assert solve([]) == ([], 0.0)


def test_non_square_raises():
    with pytest.raises(ValueError):
        solve([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])


def test_non_finite_raises():
    with pytest.raises(ValueError):
        solve([[1.0, float("nan")], [0.0, 1.0]])


def test_debug_prints_working(capsys):
    assignment, _ = solve([[1.0, 2.0], [3.0, 1.0]], debug=True)
    out = capsys.readouterr().out
    assert "Score / Cost Matrix:" in out
    assert "Initial matching:" in out
    assert _is_permutation(assignment, 2)


def test_no_output_without_debug(capsys):
    solve([[1.0, 2.0], [3.0, 1.0]])
    assert capsys.readouterr().out == ""