"""
Dense linear-algebra primitives used by the fitting engine.

LU decomposition with partial pivoting is delegated to SciPy; this module
adds the singularity policy and a small banded-matrix builder.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import LinAlgWarning, lu_factor, lu_solve

from ..config import DEFAULT_TOLERANCES
from ..errors import SingularSystemError

ArrayF = NDArray[np.float64]
ArrayI = NDArray[np.int32]

__all__ = [
    "LUFactorization",
    "decompose",
    "solve",
    "banded_matrix",
]


@dataclass(frozen=True)
class LUFactorization:
    """
    Packed LU factors of a square matrix (SciPy ``lu_factor`` layout).

    lu  : (n, n) float64, L below the diagonal (unit diagonal implied), U above
    piv : (n,) int, row interchanges
    """

    lu: ArrayF
    piv: ArrayI

    @property
    def size(self) -> int:
        return self.lu.shape[0]


def decompose(
    matrix: ArrayF,
    *,
    pivot_tolerance: float = DEFAULT_TOLERANCES.pivot_tolerance,
) -> LUFactorization:
    """
    LU-decompose ``matrix`` with partial pivoting.

    Parameters
    ----------
    matrix : (n, n) float64
        Square coefficient matrix. It is copied, never modified.
    pivot_tolerance : float, optional
        A pivot ``|u_ii| <= pivot_tolerance * max_j |u_jj|`` marks the
        matrix as singular.

    Raises
    ------
    SingularSystemError
        Non-finite entries or a pivot below tolerance.
    """
    A = np.array(matrix, dtype=np.float64, copy=True)
    if A.ndim != 2 or A.shape[0] != A.shape[1] or A.shape[0] == 0:
        raise ValueError("matrix must be square with shape (n, n), n >= 1")
    if not np.isfinite(A).all():
        raise SingularSystemError("matrix has non-finite entries")

    with warnings.catch_warnings():
        # exact zero pivots are reported below as SingularSystemError
        warnings.simplefilter("ignore", LinAlgWarning)
        lu, piv = lu_factor(A, overwrite_a=True, check_finite=False)

    pivots = np.abs(np.diag(lu))
    scale = float(pivots.max())
    if scale == 0.0 or not np.isfinite(scale):
        raise SingularSystemError("matrix is singular (all pivots are zero)")
    k = int(np.argmin(pivots))
    if pivots[k] <= pivot_tolerance * scale:
        raise SingularSystemError(
            f"matrix is singular to working precision (pivot {k}: {pivots[k]:.3e})"
        )

    return LUFactorization(lu=lu, piv=piv)


def solve(factorization: LUFactorization, rhs: ArrayF) -> ArrayF:
    """Solve ``A x = b`` for a single right-hand side using precomputed factors."""
    b = np.asarray(rhs, dtype=np.float64).ravel()
    if b.shape[0] != factorization.size:
        raise ValueError(
            f"rhs length {b.shape[0]} does not match system size {factorization.size}"
        )
    return lu_solve((factorization.lu, factorization.piv), b, check_finite=False)


def banded_matrix(n: int, diagonal: float, lower: float, upper: float) -> ArrayF:
    """
    Dense ``(n, n)`` tridiagonal matrix with constant bands.
    """
    n = int(n)
    if n < 1:
        raise ValueError("n must be >= 1")
    M = np.diag(np.full(n, float(diagonal)))
    if n > 1:
        M += np.diag(np.full(n - 1, float(lower)), k=-1)
        M += np.diag(np.full(n - 1, float(upper)), k=1)
    return M
