from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..config import DEFAULT_TOLERANCES
from ..errors import OutOfDomainError
from .nurbs import NurbsCurve

ArrayF = NDArray[np.float64]

__all__ = [
    "Line",
    "Circle",
]


def _as_point(x, name: str) -> ArrayF:
    v = np.array(x, dtype=np.float64, copy=True).ravel()
    if v.shape[0] < 2 or not np.isfinite(v).all():
        raise ValueError(f"{name} must be a finite point with at least 2 coordinates")
    v.setflags(write=False)
    return v


# ---------------------------------------------------------------------------
# Line
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Line:
    """
    Straight segment from ``start`` to ``end``, parameterized on [0, 1].
    """

    start: ArrayF
    end: ArrayF

    def __post_init__(self) -> None:
        start = _as_point(self.start, "start")
        end = _as_point(self.end, "end")
        if start.shape != end.shape:
            raise ValueError("start and end must have the same dimension")
        if np.linalg.norm(end - start) <= DEFAULT_TOLERANCES.epsilon:
            raise ValueError("start and end must not coincide")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def from_direction(cls, start, direction, length: float) -> "Line":
        """Line from ``start`` along ``direction`` (any magnitude) by ``length``."""
        if abs(length) <= DEFAULT_TOLERANCES.epsilon:
            raise ValueError("length must not be 0.0")
        d = np.asarray(direction, dtype=np.float64).ravel()
        nrm = np.linalg.norm(d)
        if nrm <= DEFAULT_TOLERANCES.epsilon:
            raise ValueError("direction must be a non-zero vector")
        s = np.asarray(start, dtype=np.float64).ravel()
        return cls(s, s + d / nrm * float(length))

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    @property
    def direction(self) -> ArrayF:
        """Unit vector from start to end."""
        return (self.end - self.start) / self.length

    @property
    def degree(self) -> int:
        return 1

    @property
    def domain(self):
        return 0.0, 1.0

    def point_at(self, t: float) -> ArrayF:
        if t < 0.0 or t > 1.0:
            raise OutOfDomainError(f"t={t} is outside the domain [0, 1]")
        return self.start + self.direction * (self.length * t)

    def closest_point(self, pt) -> ArrayF:
        """Closest point on the segment (clamped to its endpoints)."""
        v = np.asarray(pt, dtype=np.float64).ravel() - self.start
        d = float(np.clip(np.dot(v, self.direction), 0.0, self.length))
        return self.start + self.direction * d

    def closest_parameter(self, pt) -> float:
        """Parameter of the projection onto the infinite line (may leave [0, 1])."""
        p = np.asarray(pt, dtype=np.float64).ravel()
        d = self.end - self.start
        dd = float(np.dot(d, d))
        to_start = p - self.start
        to_end = p - self.end
        # measure from the nearer endpoint
        if np.dot(to_start, to_start) <= np.dot(to_end, to_end):
            return float(np.dot(to_start, d) / dd)
        return 1.0 + float(np.dot(to_end, d) / dd)

    def flip(self) -> "Line":
        return Line(self.end, self.start)

    def extend(self, start_length: float, end_length: float) -> "Line":
        """
        Move the endpoints outward along the line direction.

        Negative lengths shorten the line. Lengths within epsilon of zero leave
        the corresponding endpoint untouched.
        """
        eps = DEFAULT_TOLERANCES.epsilon
        start, end = self.start, self.end
        if abs(start_length) > eps:
            start = self.start - self.direction * start_length
        if abs(end_length) > eps:
            end = self.end + self.direction * end_length
        return Line(start, end)

    def to_nurbs(self) -> NurbsCurve:
        return NurbsCurve(1, [0.0, 0.0, 1.0, 1.0], np.vstack([self.start, self.end]))


# ---------------------------------------------------------------------------
# Circle
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Circle:
    """
    Full circle ``C(t) = center + r cos(t) x_axis + r sin(t) y_axis``,
    t in [0, 2*pi].

    ``x_axis`` and ``y_axis`` are orthonormalized on construction.
    """

    radius: float
    center: ArrayF = (0.0, 0.0, 0.0)
    x_axis: ArrayF = (1.0, 0.0, 0.0)
    y_axis: ArrayF = (0.0, 1.0, 0.0)

    def __post_init__(self) -> None:
        eps = DEFAULT_TOLERANCES.epsilon
        radius = abs(float(self.radius))
        if radius <= eps:
            raise ValueError("radius must be non-zero")
        center = _as_point(self.center, "center")
        x = np.asarray(self.x_axis, dtype=np.float64).ravel()
        y = np.asarray(self.y_axis, dtype=np.float64).ravel()
        if x.shape != center.shape or y.shape != center.shape:
            raise ValueError("axes must have the same dimension as center")
        nx = np.linalg.norm(x)
        if nx <= eps:
            raise ValueError("x_axis must be a non-zero vector")
        x = x / nx
        y = y - np.dot(y, x) * x
        ny = np.linalg.norm(y)
        if ny <= eps:
            raise ValueError("y_axis must not be parallel to x_axis")
        y = y / ny
        x.setflags(write=False)
        y.setflags(write=False)
        object.__setattr__(self, "radius", radius)
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "x_axis", x)
        object.__setattr__(self, "y_axis", y)

    @classmethod
    def from_three_points(cls, p1, p2, p3) -> "Circle":
        """Circle through three non-colinear points, starting at ``p1``."""
        a1 = np.asarray(p1, dtype=np.float64).ravel()
        a2 = np.asarray(p2, dtype=np.float64).ravel()
        a3 = np.asarray(p3, dtype=np.float64).ravel()
        a = a1 - a3
        b = a2 - a3
        aa, bb, ab = float(a @ a), float(b @ b), float(a @ b)
        denom = 2.0 * (aa * bb - ab * ab)
        if abs(denom) <= DEFAULT_TOLERANCES.epsilon * max(aa * bb, 1.0):
            raise ValueError("points are colinear")
        center = a3 + (bb * (aa - ab) * a + aa * (bb - ab) * b) / denom
        x = a1 - center
        return cls(float(np.linalg.norm(x)), center, x, a2 - center)

    @property
    def degree(self) -> int:
        return 2

    @property
    def domain(self):
        return 0.0, 2.0 * np.pi

    @property
    def circumference(self) -> float:
        return 2.0 * np.pi * self.radius

    def point_at(self, t: float) -> ArrayF:
        r = self.radius
        return self.center + r * np.cos(t) * self.x_axis + r * np.sin(t) * self.y_axis

    def tangent_at(self, t: float) -> ArrayF:
        """Unit tangent at angle t."""
        return -np.sin(t) * self.x_axis + np.cos(t) * self.y_axis

    def closest_point(self, pt) -> ArrayF:
        v = np.asarray(pt, dtype=np.float64).ravel() - self.center
        u, w = float(v @ self.x_axis), float(v @ self.y_axis)
        eps = DEFAULT_TOLERANCES.epsilon
        if abs(u) < eps and abs(w) < eps:
            return self.point_at(0.0)
        t = np.arctan2(w, u)
        if t < 0.0:
            t += 2.0 * np.pi
        return self.point_at(t)

    def to_nurbs(self) -> NurbsCurve:
        """Rational quadratic with 9 control points (four 90-degree arcs)."""
        r = self.radius
        c, x, y = self.center, self.x_axis, self.y_axis
        corners = [
            (r, 0.0), (r, r), (0.0, r), (-r, r), (-r, 0.0),
            (-r, -r), (0.0, -r), (r, -r), (r, 0.0),
        ]
        cps = np.vstack([c + a * x + b * y for a, b in corners])
        weights = np.ones(9)
        weights[1::2] = 1.0 / np.sqrt(2.0)
        h = 0.5 * np.pi
        knots = [0.0, 0.0, 0.0, h, h, 2 * h, 2 * h, 3 * h, 3 * h, 4 * h, 4 * h, 4 * h]
        return NurbsCurve(2, knots, cps, weights)
