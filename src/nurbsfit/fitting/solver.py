from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from ..config import DEFAULT_TOLERANCES
from ..geometry.linalg import decompose, solve
from .assembly import LinearSystem

ArrayF = NDArray[np.float64]

__all__ = ["solve_control_points"]


def solve_control_points(
    system: LinearSystem,
    *,
    pivot_tolerance: float = DEFAULT_TOLERANCES.pivot_tolerance,
) -> ArrayF:
    """
    Solve an assembled system for its control points.

    The matrix is factorized once; each coordinate column of the right-hand
    side is solved against the same factors and the scalar solutions are
    stacked back into points.

    Returns
    -------
    ctrl : (k, d) float64
        One control point per unknown; empty when the system has no unknowns.

    Raises
    ------
    SingularSystemError
        The matrix has a pivot below ``pivot_tolerance``.
    """
    if system.size == 0:
        return np.empty((0, system.dim), dtype=np.float64)

    lu = decompose(system.matrix, pivot_tolerance=pivot_tolerance)
    columns = [solve(lu, system.rhs[:, j]) for j in range(system.dim)]
    return np.column_stack(columns)
