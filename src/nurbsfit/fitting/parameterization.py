from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from ..errors import DegenerateInputError

ArrayF = NDArray[np.float64]

__all__ = [
    "as_points",
    "parameterize",
]


def as_points(points) -> ArrayF:
    """Copy ``points`` into a fresh ``(N, d)`` float64 array."""
    pts = np.array(points, dtype=np.float64, copy=True)
    if pts.ndim != 2 or pts.shape[1] < 1:
        raise ValueError("points must be an array of shape (N, d)")
    if not np.isfinite(pts).all():
        raise ValueError("points must be finite")
    return pts


def parameterize(points, centripetal: bool = False) -> ArrayF:
    """
    Chord-length (or centripetal) parameters for an ordered point sequence.

    Parameters
    ----------
    points : (N, d) float64
        Ordered samples, N >= 2.
    centripetal : bool, optional
        If True, each chord length d is replaced by sqrt(d).

    Returns
    -------
    u : (N,) float64
        Non-decreasing parameters with u[0] = 0 and u[-1] = 1.

    Raises
    ------
    DegenerateInputError
        Fewer than 2 points, or all points coincide.
    """
    pts = as_points(points)
    if pts.shape[0] < 2:
        raise DegenerateInputError("at least 2 points are required to parameterize")

    seg = np.linalg.norm(np.diff(pts, axis=0), axis=1)
    if centripetal:
        seg = np.sqrt(seg)

    u = np.concatenate(([0.0], np.cumsum(seg)))
    total = u[-1]
    if total <= 0.0:
        raise DegenerateInputError("total chord length is zero (coincident points)")
    u /= total
    u[-1] = 1.0
    return u
