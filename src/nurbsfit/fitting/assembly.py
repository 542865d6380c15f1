"""
Coefficient-system assembly for global interpolation and least squares.

Every mode samples the basis at the data parameters through
:func:`collocation_matrix`; the modes differ in which rows and columns
become unknowns and in what lands on the right-hand side.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..config import DEFAULT_TOLERANCES
from ..geometry.basis import basis_functions, find_span

ArrayF = NDArray[np.float64]

__all__ = [
    "LinearSystem",
    "basis_row",
    "collocation_matrix",
    "interpolation_system",
    "tangent_interpolation_system",
    "approximation_system",
]


@dataclass(frozen=True)
class LinearSystem:
    """
    Square system ``matrix @ X = rhs`` with one rhs column per dimension.

    matrix : (k, k) float64
    rhs    : (k, d) float64
    """

    matrix: ArrayF
    rhs: ArrayF

    def __post_init__(self) -> None:
        A = np.asarray(self.matrix, dtype=np.float64)
        B = np.asarray(self.rhs, dtype=np.float64)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise ValueError("matrix must be square")
        if B.ndim != 2 or B.shape[0] != A.shape[0]:
            raise ValueError("rhs must have shape (k, d) matching the matrix")
        object.__setattr__(self, "matrix", A)
        object.__setattr__(self, "rhs", B)

    @property
    def size(self) -> int:
        return self.matrix.shape[0]

    @property
    def dim(self) -> int:
        return self.rhs.shape[1]


# ---------------------------------------------------------------------------
# Basis sampling
# ---------------------------------------------------------------------------


def basis_row(u: float, degree: int, knots: ArrayF, num_ctrl: int) -> ArrayF:
    """
    Full-width row of ``N_{i,p}(u)``, zero outside the span's support.
    """
    p = int(degree)
    span = find_span(num_ctrl - 1, p, u, knots)
    row = np.zeros(num_ctrl, dtype=np.float64)
    row[span - p : span + 1] = basis_functions(span, u, p, knots)
    return row


def collocation_matrix(u: ArrayF, degree: int, knots: ArrayF, num_ctrl: int) -> ArrayF:
    """(len(u), num_ctrl) matrix of basis samples, one row per parameter."""
    uu = np.asarray(u, dtype=np.float64).ravel()
    t = np.asarray(knots, dtype=np.float64).ravel()
    A = np.zeros((uu.shape[0], int(num_ctrl)), dtype=np.float64)
    for k, uk in enumerate(uu):
        A[k, :] = basis_row(float(uk), degree, t, num_ctrl)
    return A


def _endpoint_residual(Q: ArrayF, A: ArrayF) -> ArrayF:
    """Interior points minus the contribution of the fixed end control points."""
    inner = A[1:-1]
    return Q[1:-1] - np.outer(inner[:, 0], Q[0]) - np.outer(inner[:, -1], Q[-1])


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------


def interpolation_system(points: ArrayF, u: ArrayF, degree: int, knots: ArrayF) -> LinearSystem:
    """
    Interior system of global interpolation.

    The first and last control points equal the first and last data points,
    so only the ``N - 2`` interior control points are unknowns.
    """
    Q = np.asarray(points, dtype=np.float64)
    num_ctrl = Q.shape[0]
    A = collocation_matrix(u, degree, knots, num_ctrl)
    return LinearSystem(A[1:-1, 1:-1], _endpoint_residual(Q, A))


def tangent_interpolation_system(
    points: ArrayF,
    u: ArrayF,
    degree: int,
    knots: ArrayF,
    start_tangent: ArrayF,
    end_tangent: ArrayF,
) -> LinearSystem:
    """
    Global interpolation with prescribed end derivatives.

    Two extra control points enter the system. The rows
    ``P_1 - P_0 = knots[p+1]/p * D_0`` and
    ``P_{n} - P_{n-1} = (1 - knots[-p-2])/p * D_1`` are inserted right after
    the first and right before the last data row.
    """
    Q = np.asarray(points, dtype=np.float64)
    t = np.asarray(knots, dtype=np.float64).ravel()
    p = int(degree)
    N, d = Q.shape
    D0 = np.asarray(start_tangent, dtype=np.float64).ravel()
    D1 = np.asarray(end_tangent, dtype=np.float64).ravel()
    if D0.shape[0] != d or D1.shape[0] != d:
        raise ValueError(f"tangents must have the same dimension as the points ({d})")

    num_ctrl = N + 2
    A = collocation_matrix(u, p, t, num_ctrl)

    first = np.zeros(num_ctrl, dtype=np.float64)
    first[:2] = (-1.0, 1.0)
    last = np.zeros(num_ctrl, dtype=np.float64)
    last[-2:] = (-1.0, 1.0)
    matrix = np.vstack([A[:1], first, A[1:-1], last, A[-1:]])

    mult0 = t[p + 1] / p
    mult1 = (1.0 - t[t.shape[0] - p - 2]) / p
    rhs = np.vstack([Q[:1], mult0 * D0, Q[1:-1], mult1 * D1, Q[-1:]])
    return LinearSystem(matrix, rhs)


# ---------------------------------------------------------------------------
# Least-squares approximation
# ---------------------------------------------------------------------------


def approximation_system(
    points: ArrayF,
    u: ArrayF,
    degree: int,
    knots: ArrayF,
    num_ctrl: int,
    *,
    condition_warning: float = DEFAULT_TOLERANCES.condition_warning,
) -> LinearSystem:
    """
    Normal equations of the end-point-constrained least-squares fit.

    Parameters
    ----------
    points : (m, d) float64
        Data points Q_0..Q_{m-1}; Q_0 and Q_{m-1} are interpolated exactly.
    u : (m,) float64
        Data parameters.
    degree : int
        Curve degree p.
    knots : (num_ctrl+p+1,) float64
        Approximation knot vector.
    num_ctrl : int
        Total number of control points, including both fixed ends.
    condition_warning : float, optional
        A ``UserWarning`` is issued when ``cond(N^T N)`` exceeds this value.

    Returns
    -------
    LinearSystem
        ``(N^T N) P = R`` over the ``num_ctrl - 2`` free control points, with
        ``R_i = sum_k R_k N_{i,p}(u_k)`` and
        ``R_k = Q_k - N_{0,p}(u_k) Q_0 - N_{n,p}(u_k) Q_{m-1}``.
    """
    Q = np.asarray(points, dtype=np.float64)
    A = collocation_matrix(u, degree, knots, num_ctrl)
    N = A[1:-1, 1:-1]
    Rk = _endpoint_residual(Q, A)

    NtN = N.T @ N
    R = N.T @ Rk

    if NtN.size:
        cond = float(np.linalg.cond(NtN))
        if not np.isfinite(cond) or cond > condition_warning:
            warnings.warn(
                f"Least-squares normal equations are ill-conditioned (cond={cond:.2e}) "
                f"for {num_ctrl} control points and {Q.shape[0]} points. "
                f"Consider fewer control points or a centripetal parameterization.",
                UserWarning,
                stacklevel=2,
            )
    return LinearSystem(NtN, R)
