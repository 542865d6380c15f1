import numpy as np
import pytest

from nurbsfit import SingularSystemError
from nurbsfit.geometry.linalg import banded_matrix, decompose, solve


def test_lu_solve_matches_numpy():
    rng = np.random.default_rng(3)
    A = rng.normal(size=(6, 6)) + 6.0 * np.eye(6)
    b = rng.normal(size=6)
    lu = decompose(A)
    assert np.allclose(solve(lu, b), np.linalg.solve(A, b))


def test_factorization_reused_for_several_rhs():
    A = banded_matrix(5, 4.0, 1.0, 1.0)
    lu = decompose(A)
    for b in np.eye(5):
        assert np.allclose(A @ solve(lu, b), b)


def test_decompose_does_not_modify_input():
    A = np.array([[0.0, 2.0], [3.0, 1.0]])
    before = A.copy()
    decompose(A)
    assert np.array_equal(A, before)


def test_singular_matrix_raises():
    with pytest.raises(SingularSystemError):
        decompose(np.array([[1.0, 2.0], [2.0, 4.0]]))
    with pytest.raises(SingularSystemError):
        decompose(np.zeros((3, 3)))


def test_singular_error_is_linalg_error():
    with pytest.raises(np.linalg.LinAlgError):
        decompose(np.array([[1.0, 1.0], [1.0, 1.0]]))


def test_non_finite_matrix_raises():
    with pytest.raises(SingularSystemError):
        decompose(np.array([[np.nan, 0.0], [0.0, 1.0]]))


def test_non_square_matrix_rejected():
    with pytest.raises(ValueError):
        decompose(np.ones((2, 3)))


def test_rhs_length_mismatch():
    lu = decompose(np.eye(3))
    with pytest.raises(ValueError):
        solve(lu, np.ones(4))


def test_banded_matrix():
    M = banded_matrix(4, 4.0, 1.0, 2.0)
    expected = np.array(
        [
            [4.0, 2.0, 0.0, 0.0],
            [1.0, 4.0, 2.0, 0.0],
            [0.0, 1.0, 4.0, 2.0],
            [0.0, 0.0, 1.0, 4.0],
        ]
    )
    assert np.array_equal(M, expected)
    assert np.array_equal(banded_matrix(1, 7.0, 1.0, 1.0), [[7.0]])
