from __future__ import annotations

from typing import List, Tuple

import numpy as np
from numpy.typing import NDArray

from ..config import DEFAULT_TOLERANCES
from ..errors import EmptyInputError, InsufficientPointsError
from ..geometry.bezier import BezierCurve, PiecewiseBezier
from ..geometry.linalg import banded_matrix
from .assembly import LinearSystem
from .parameterization import as_points, parameterize
from .solver import solve_control_points

ArrayF = NDArray[np.float64]

__all__ = [
    "bezier_control_points",
    "bezier_interpolation",
    "bezier_interpolation_composite",
]


def _cubic_from_two_points(P0: ArrayF, P3: ArrayF) -> Tuple[ArrayF, ArrayF]:
    """Straight segment as a cubic: P1=P0+1/3*chord, P2=P0+2/3*chord."""
    chord = P3 - P0
    return P0 + chord / 3.0, P0 + 2.0 * chord / 3.0


def bezier_control_points(
    points: ArrayF,
    *,
    pivot_tolerance: float = DEFAULT_TOLERANCES.pivot_tolerance,
) -> Tuple[ArrayF, ArrayF]:
    """
    Inner control points of the C1 cubic Bézier spline through ``points``.

    Segment i is ``[p_i, A_i, B_i, p_{i+1}]``. The ``A_i`` solve the system

        2 A_0 + A_1                  = p_0 + 2 p_1
        A_{i-1} + 4 A_i + A_{i+1}    = 2 (2 p_i + p_{i+1})
        2 A_{n-2} + 7 A_{n-1}        = 8 p_{n-1} + p_n

    and ``B_i = 2 p_{i+1} - A_{i+1}``, ``B_{n-1} = (A_{n-1} + p_n) / 2``.

    Returns
    -------
    (A, B) : ((n, d), (n, d)) float64
    """
    P = np.asarray(points, dtype=np.float64)
    n = P.shape[0] - 1

    if n == 1:
        A, B = _cubic_from_two_points(P[0], P[1])
        return A[None, :], B[None, :]

    M = banded_matrix(n, 4.0, 1.0, 1.0)
    M[0, 0] = 2.0
    M[n - 1, n - 1] = 7.0
    M[n - 1, n - 2] = 2.0

    rhs = np.empty((n, P.shape[1]), dtype=np.float64)
    rhs[0] = P[0] + 2.0 * P[1]
    for i in range(1, n - 1):
        rhs[i] = 2.0 * (2.0 * P[i] + P[i + 1])
    rhs[n - 1] = 8.0 * P[n - 1] + P[n]

    A = solve_control_points(LinearSystem(M, rhs), pivot_tolerance=pivot_tolerance)

    B = np.empty_like(A)
    B[: n - 1] = 2.0 * P[1:n] - A[1:n]
    B[n - 1] = 0.5 * (A[n - 1] + P[n])
    return A, B


def bezier_interpolation(points) -> List[BezierCurve]:
    """
    Piecewise cubic Bézier curves through every point, C1 at the joints.

    Parameters
    ----------
    points : (N, d) float64
        Points to interpolate, N >= 2.

    Returns
    -------
    segments : list[BezierCurve]
        N - 1 cubic segments; segment i runs from point i to point i+1.

    Raises
    ------
    EmptyInputError
        No points.
    InsufficientPointsError
        A single point.
    """
    if len(points) == 0:
        raise EmptyInputError("collection of points is empty")
    P = as_points(points)
    if P.shape[0] < 2:
        raise InsufficientPointsError(
            f"Bézier interpolation needs at least 2 points, got {P.shape[0]}"
        )

    A, B = bezier_control_points(P)
    return [
        BezierCurve(np.vstack([P[i], A[i], B[i], P[i + 1]]))
        for i in range(P.shape[0] - 1)
    ]


def bezier_interpolation_composite(points, centripetal: bool = False) -> PiecewiseBezier:
    """
    :func:`bezier_interpolation` wrapped as a single curve on [0, 1].

    Segment boundaries sit at the chord-length (or centripetal) parameters of
    the input points; consecutive duplicate points are not allowed.
    """
    segments = bezier_interpolation(points)
    knots = parameterize(points, centripetal=centripetal)
    return PiecewiseBezier(segments=segments, knots=knots)
