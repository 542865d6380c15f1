from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np
from numpy.typing import NDArray

from ..errors import OutOfDomainError

ArrayF = NDArray[np.float64]

__all__ = [
    "BezierCurve",
    "PiecewiseBezier",
    "de_casteljau",
]


# ---------------------------------------------------------------------------
# De Casteljau evaluation
# ---------------------------------------------------------------------------


def de_casteljau(control_points: ArrayF, t: float) -> ArrayF:
    """
    Evaluate a Bézier curve at parameter t using De Casteljau.

    Parameters
    ----------
    control_points : (n+1, d) float64
        Control polygon P_0, ..., P_n.
    t : float
        Parameter in [0, 1].

    Returns
    -------
    p : (d,) float64
        Curve point B(t).
    """
    cps = np.asarray(control_points, dtype=np.float64)
    if cps.ndim != 2 or cps.shape[0] < 2:
        raise ValueError("control_points must have shape (n+1, d), n >= 1")
    if not (0.0 <= t <= 1.0):
        raise OutOfDomainError(f"t={t} is outside the Bézier domain [0, 1]")

    temp = cps.copy()
    n = temp.shape[0] - 1
    for r in range(1, n + 1):
        temp[:-r] = (1.0 - t) * temp[:-r] + t * temp[1 : (n - r + 2)]
    return temp[0]


# ---------------------------------------------------------------------------
# Bezier curve dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BezierCurve:
    """
    Generic Bézier curve in R^d.

    Attributes
    ----------
    control_points : (n+1, d) float64
        Control polygon.
    """

    control_points: ArrayF

    def __post_init__(self) -> None:
        cps = np.array(self.control_points, dtype=np.float64, copy=True)
        if cps.ndim != 2 or cps.shape[0] < 2:
            raise ValueError("control_points must have shape (n+1, d), n >= 1")
        cps.setflags(write=False)
        object.__setattr__(self, "control_points", cps)

    @property
    def degree(self) -> int:
        return self.control_points.shape[0] - 1

    @property
    def dim(self) -> int:
        return self.control_points.shape[1]

    @property
    def start(self) -> ArrayF:
        return self.control_points[0]

    @property
    def end(self) -> ArrayF:
        return self.control_points[-1]

    def evaluate(self, t: float) -> ArrayF:
        """Evaluate B(t) via De Casteljau."""
        return de_casteljau(self.control_points, t)

    def evaluate_batch(self, t: ArrayF) -> ArrayF:
        ts = np.asarray(t, dtype=np.float64).ravel()
        return np.vstack([self.evaluate(float(τ)) for τ in ts])

    def derivative(self) -> "BezierCurve":
        """
        First derivative curve B'(t) as a Bézier curve of degree n-1.

        Control points are n * (P_{i+1} - P_i).
        """
        cps = self.control_points
        if self.degree == 1:
            # constant derivative, kept as a degenerate degree-1 curve
            d = cps[1] - cps[0]
            return BezierCurve(np.vstack([d, d]))
        return BezierCurve(self.degree * (cps[1:] - cps[:-1]))

    def to_polyline(self, samples: int = 200) -> ArrayF:
        """Uniform sampling of the curve (for preview or length)."""
        ts = np.linspace(0.0, 1.0, int(samples))
        return self.evaluate_batch(ts)

    def length(self, samples: int = 512) -> float:
        """Approximate arc length on a fine polyline."""
        poly = self.to_polyline(samples=samples)
        seg = np.linalg.norm(np.diff(poly, axis=0), axis=1)
        return float(np.sum(seg))


# ---------------------------------------------------------------------------
# Piecewise representation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PiecewiseBezier:
    """
    Piecewise Bézier curve B : [0, 1] -> R^d.

    Attributes
    ----------
    segments : list[BezierCurve]
        Segments in order.
    knots : (K+1,) float64
        Normalized cumulative parameter for each segment boundary,
        with knots[0]=0 and knots[-1]=1.
    """

    segments: List[BezierCurve]
    knots: ArrayF

    def __post_init__(self) -> None:
        knots = np.array(self.knots, dtype=np.float64, copy=True)
        if len(self.segments) == 0:
            raise ValueError("PiecewiseBezier requires at least one segment.")
        if knots.shape[0] != len(self.segments) + 1:
            raise ValueError("knots must have length len(segments)+1.")
        if knots[0] != 0.0 or knots[-1] != 1.0:
            raise ValueError("knots must start at 0.0 and end at 1.0.")
        if not np.all(np.diff(knots) > 0):
            raise ValueError("knots must be strictly increasing.")
        knots.setflags(write=False)
        object.__setattr__(self, "segments", list(self.segments))
        object.__setattr__(self, "knots", knots)

    @property
    def dim(self) -> int:
        return self.segments[0].dim

    def evaluate(self, u: float) -> ArrayF:
        """Evaluate at global parameter u in [0, 1] using piecewise mapping."""
        if u < 0.0 or u > 1.0:
            raise OutOfDomainError(f"u={u} is outside the domain [0, 1]")
        if u == 1.0:
            return self.segments[-1].evaluate(1.0)
        k = int(np.searchsorted(self.knots, u, side="right") - 1)
        u0, u1 = self.knots[k], self.knots[k + 1]
        t = (u - u0) / (u1 - u0)
        return self.segments[k].evaluate(float(t))

    def evaluate_batch(self, u: ArrayF) -> ArrayF:
        uu = np.asarray(u, dtype=np.float64).ravel()
        return np.vstack([self.evaluate(float(val)) for val in uu])

    def to_polyline(self, samples_per_segment: int = 100) -> ArrayF:
        pts = [seg.to_polyline(samples=samples_per_segment) for seg in self.segments]
        return np.vstack(pts)

    def length(self, samples_per_segment: int = 200) -> float:
        return float(
            sum(seg.length(samples=samples_per_segment) for seg in self.segments)
        )
