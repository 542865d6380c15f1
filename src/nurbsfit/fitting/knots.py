from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from ..errors import InvalidDegreeOfFreedomError

ArrayF = NDArray[np.float64]

__all__ = [
    "interior_knot_range",
    "interpolation_knots",
    "approximation_knots",
]


def _clamp(interior: ArrayF, degree: int) -> ArrayF:
    p = int(degree)
    return np.concatenate([np.zeros(p + 1), np.asarray(interior, dtype=np.float64), np.ones(p + 1)])


def interior_knot_range(num_params: int, degree: int, has_tangents: bool) -> Tuple[int, int]:
    """
    Half-open window ``[start, end)`` of averaging positions over the parameters.

    End tangents add two control points, so the window grows by one position
    on each side.
    """
    p = int(degree)
    if has_tangents:
        return 0, num_params - p + 1
    return 1, num_params - p


def interpolation_knots(u: ArrayF, degree: int, has_tangents: bool = False) -> ArrayF:
    """
    Clamped knot vector for global interpolation by the averaging rule.

    Interior knot i is the mean of ``u[i : i + degree]``.
    """
    uu = np.asarray(u, dtype=np.float64).ravel()
    p = int(degree)
    if p < 1:
        raise ValueError("degree must be >= 1")
    start, end = interior_knot_range(uu.shape[0], p, has_tangents)
    interior = [float(np.mean(uu[i : i + p])) for i in range(start, end)]
    return _clamp(np.asarray(interior, dtype=np.float64), p)


def approximation_knots(u: ArrayF, degree: int, num_ctrl_pts: int, num_pts: int) -> ArrayF:
    """
    Clamped knot vector for least-squares approximation.

    Interior knots are blended from the parameters at a real-valued stride
    ``d = num_pts / (num_ctrl_pts - degree)`` so every knot span holds data.

    Raises
    ------
    InvalidDegreeOfFreedomError
        ``num_ctrl_pts <= degree`` or ``num_ctrl_pts >= num_pts``.
    """
    uu = np.asarray(u, dtype=np.float64).ravel()
    p = int(degree)
    h = int(num_ctrl_pts)
    m = int(num_pts)
    if h <= p:
        raise InvalidDegreeOfFreedomError(
            f"{h} control points cannot define a curve of degree {p}"
        )
    if h >= m:
        raise InvalidDegreeOfFreedomError(
            f"approximation needs fewer control points ({h}) than points ({m})"
        )
    if uu.shape[0] != m:
        raise ValueError("u must have one parameter per point")

    d = m / (h - p)
    interior = np.empty(h - p - 1, dtype=np.float64)
    for j in range(1, h - p):
        i = int(j * d)
        alpha = j * d - i
        interior[j - 1] = (1.0 - alpha) * uu[i - 1] + alpha * uu[i]
    return _clamp(interior, p)
