from __future__ import annotations

from dataclasses import dataclass
from math import comb
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ..config import DEFAULT_TOLERANCES
from ..errors import OutOfDomainError
from .basis import basis_function_derivatives, basis_functions, find_span
from .bezier import BezierCurve

ArrayF = NDArray[np.float64]

__all__ = [
    "NurbsCurve",
    "validate_knot_vector",
]


def validate_knot_vector(knots: ArrayF, degree: int, num_ctrl: int) -> None:
    """
    Check the clamped knot-vector invariants.

    Raises ``ValueError`` when the length is not ``num_ctrl + degree + 1``,
    when the sequence decreases, when either end is not repeated
    ``degree + 1`` times, or when any knot value exceeds multiplicity
    ``degree + 1``.
    """
    t = np.asarray(knots, dtype=np.float64).ravel()
    p = int(degree)
    if t.shape[0] != num_ctrl + p + 1:
        raise ValueError(
            f"knot vector must have {num_ctrl + p + 1} entries "
            f"(num_ctrl + degree + 1), got {t.shape[0]}"
        )
    if not np.isfinite(t).all():
        raise ValueError("knot vector has non-finite entries")
    if np.any(np.diff(t) < 0.0):
        raise ValueError("knot vector must be non-decreasing")
    if not (np.all(t[: p + 1] == t[0]) and np.all(t[-(p + 1) :] == t[-1])):
        raise ValueError("knot vector must be clamped (degree+1 repeated end knots)")
    if t[0] == t[-1]:
        raise ValueError("knot vector spans an empty domain")
    values, counts = np.unique(t, return_counts=True)
    k = int(np.argmax(counts))
    if counts[k] > p + 1:
        raise ValueError(
            f"knot {values[k]} has multiplicity {counts[k]} > degree + 1"
        )


@dataclass(frozen=True)
class NurbsCurve:
    """
    Non-uniform rational B-spline curve in R^d.

    Attributes
    ----------
    degree : int
        Polynomial degree p >= 1.
    knots : (n+p+2,) float64
        Clamped knot vector.
    control_points : (n+1, d) float64
        Control polygon (Euclidean coordinates).
    weights : (n+1,) float64, optional
        Positive weights; None for a non-rational B-spline.
    epsilon : float, optional
        Slack accepted outside the parameter domain before raising
        ``OutOfDomainError``.
    """

    degree: int
    knots: ArrayF
    control_points: ArrayF
    weights: Optional[ArrayF] = None
    epsilon: float = DEFAULT_TOLERANCES.epsilon

    def __post_init__(self) -> None:
        p = int(self.degree)
        if p < 1:
            raise ValueError("degree must be >= 1")
        cps = np.array(self.control_points, dtype=np.float64, copy=True)
        if cps.ndim != 2 or cps.shape[0] < p + 1:
            raise ValueError("control_points must have shape (n+1, d) with n >= degree")
        knots = np.array(self.knots, dtype=np.float64, copy=True).ravel()
        validate_knot_vector(knots, p, cps.shape[0])

        weights = None
        if self.weights is not None:
            weights = np.array(self.weights, dtype=np.float64, copy=True).ravel()
            if weights.shape[0] != cps.shape[0]:
                raise ValueError("weights must have one entry per control point")
            if np.any(weights <= 0.0):
                raise ValueError("weights must be positive")
            weights.setflags(write=False)

        cps.setflags(write=False)
        knots.setflags(write=False)
        object.__setattr__(self, "degree", p)
        object.__setattr__(self, "control_points", cps)
        object.__setattr__(self, "knots", knots)
        object.__setattr__(self, "weights", weights)

    # ---- construction

    @classmethod
    def from_bezier(cls, segment: BezierCurve) -> "NurbsCurve":
        """Single-span clamped B-spline equivalent to a Bézier segment."""
        k = segment.degree
        knots = np.concatenate([np.zeros(k + 1), np.ones(k + 1)])
        return cls(k, knots, segment.control_points)

    # ---- properties

    @property
    def dim(self) -> int:
        return self.control_points.shape[1]

    @property
    def is_rational(self) -> bool:
        return self.weights is not None

    @property
    def domain(self) -> Tuple[float, float]:
        p = self.degree
        return float(self.knots[p]), float(self.knots[-(p + 1)])

    @property
    def homogeneous_points(self) -> ArrayF:
        """Control points as ``(w*x, w*y, ..., w)`` rows."""
        w = self.weights if self.weights is not None else np.ones(len(self.control_points))
        return np.column_stack([self.control_points * w[:, None], w])

    # ---- evaluation

    def _check_parameter(self, u: float) -> float:
        lo, hi = self.domain
        eps = self.epsilon
        if u < lo - eps or u > hi + eps:
            raise OutOfDomainError(f"u={u} is outside the curve domain [{lo}, {hi}]")
        return min(max(float(u), lo), hi)

    def point_at(self, u: float) -> ArrayF:
        """Evaluate C(u)."""
        u = self._check_parameter(u)
        p = self.degree
        n = self.control_points.shape[0] - 1
        span = find_span(n, p, u, self.knots)
        N = basis_functions(span, u, p, self.knots)
        Pw = self.homogeneous_points[span - p : span + 1]
        Cw = N @ Pw
        return Cw[:-1] / Cw[-1]

    def points_at(self, u: ArrayF) -> ArrayF:
        uu = np.asarray(u, dtype=np.float64).ravel()
        return np.vstack([self.point_at(float(val)) for val in uu])

    def derivatives_at(self, u: float, order: int = 1) -> ArrayF:
        """
        Curve point and derivatives up to ``order``.

        Returns
        -------
        ders : (order+1, d) float64
            ``ders[0]`` is C(u), ``ders[k]`` the k-th derivative.
        """
        u = self._check_parameter(u)
        p = self.degree
        n = self.control_points.shape[0] - 1
        span = find_span(n, p, u, self.knots)
        nders = basis_function_derivatives(span, u, p, self.knots, order)
        CKw = nders @ self.homogeneous_points[span - p : span + 1]

        A = CKw[:, :-1]
        w = CKw[:, -1]
        CK = np.zeros_like(A)
        # Quotient rule on the homogeneous derivatives
        for k in range(order + 1):
            v = A[k].copy()
            for i in range(1, k + 1):
                v -= comb(k, i) * w[i] * CK[k - i]
            CK[k] = v / w[0]
        return CK

    def tangent_at(self, u: float) -> ArrayF:
        """Unit tangent at parameter u (zero vector if degenerate)."""
        d = self.derivatives_at(u, order=1)[1]
        nrm = np.linalg.norm(d)
        return d / nrm if nrm > 0 else d
