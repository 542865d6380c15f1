from __future__ import annotations

from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from ..config import (
    DEFAULT_TOLERANCES,
    ApproximationConfig,
    InterpolationConfig,
    Tolerances,
)
from ..errors import InsufficientPointsError, InvalidDegreeOfFreedomError
from ..geometry.nurbs import NurbsCurve
from .assembly import (
    approximation_system,
    interpolation_system,
    tangent_interpolation_system,
)
from .knots import approximation_knots, interpolation_knots
from .parameterization import as_points, parameterize
from .solver import solve_control_points

ArrayF = NDArray[np.float64]

__all__ = [
    "interpolated_curve",
    "approximate_curve",
    "fit_curve",
]


def _check_degree(degree: int) -> int:
    p = int(degree)
    if p != degree or p < 1:
        raise ValueError("degree must be a positive integer")
    return p


def _check_count(pts: ArrayF, p: int) -> None:
    if pts.shape[0] < p + 1:
        raise InsufficientPointsError(
            f"at least degree + 1 = {p + 1} points are required, got {pts.shape[0]}"
        )


def interpolated_curve(
    points,
    degree: int = 3,
    start_tangent: Optional[ArrayF] = None,
    end_tangent: Optional[ArrayF] = None,
    centripetal: bool = False,
    *,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> NurbsCurve:
    """
    Global B-spline interpolation through ``points`` (NURBS Book, A9.1).

    Parameters
    ----------
    points : (N, d) array-like
        Points to interpolate, N >= degree + 1.
    degree : int, optional
        Curve degree.
    start_tangent, end_tangent : (d,) array-like, optional
        First derivatives at u=0 and u=1. Both or neither must be given.
    centripetal : bool, optional
        Use the centripetal (sqrt chord) parameterization.
    tolerances : Tolerances, optional
        Pivot tolerance of the LU solve; epsilon becomes the domain slack
        of the returned curve.

    Returns
    -------
    curve : NurbsCurve
        Curve with C(u_k) = Q_k at the data parameters. With tangents it has
        N + 2 control points and C'(0), C'(1) equal the given tangents.
    """
    p = _check_degree(degree)
    pts = as_points(points)
    _check_count(pts, p)
    if (start_tangent is None) != (end_tangent is None):
        raise ValueError("start_tangent and end_tangent must be given together")
    has_tangents = start_tangent is not None
    if has_tangents and p < 2:
        raise InvalidDegreeOfFreedomError(
            "end tangents need degree >= 2; a linear curve cannot take prescribed tangents"
        )

    u = parameterize(pts, centripetal=centripetal)
    knots = interpolation_knots(u, p, has_tangents=has_tangents)

    if has_tangents:
        system = tangent_interpolation_system(pts, u, p, knots, start_tangent, end_tangent)
        ctrl = solve_control_points(system, pivot_tolerance=tolerances.pivot_tolerance)
    else:
        system = interpolation_system(pts, u, p, knots)
        inner = solve_control_points(system, pivot_tolerance=tolerances.pivot_tolerance)
        ctrl = np.vstack([pts[:1], inner, pts[-1:]])

    return NurbsCurve(p, knots, ctrl, epsilon=tolerances.epsilon)


def approximate_curve(
    points,
    degree: int = 3,
    centripetal: bool = False,
    num_control_points: Optional[int] = None,
    *,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> NurbsCurve:
    """
    Least-squares B-spline approximation with fixed end points (NURBS Book, 9.4.1).

    Parameters
    ----------
    points : (N, d) array-like
        Data points, N >= degree + 1.
    degree : int, optional
        Curve degree.
    centripetal : bool, optional
        Use the centripetal (sqrt chord) parameterization.
    num_control_points : int, optional
        Number of control points h with degree < h < N. Defaults to N - 1.
    tolerances : Tolerances, optional
        Pivot tolerance, ill-conditioning warning threshold, and the domain
        slack of the returned curve.

    Returns
    -------
    curve : NurbsCurve
        Curve through the first and last point minimizing the squared
        distance to the interior points at their parameters.
    """
    p = _check_degree(degree)
    pts = as_points(points)
    _check_count(pts, p)
    m = pts.shape[0]
    h = m - 1 if num_control_points is None else int(num_control_points)

    u = parameterize(pts, centripetal=centripetal)
    knots = approximation_knots(u, p, h, m)

    system = approximation_system(
        pts, u, p, knots, h, condition_warning=tolerances.condition_warning
    )
    inner = solve_control_points(system, pivot_tolerance=tolerances.pivot_tolerance)
    ctrl = np.vstack([pts[:1], inner, pts[-1:]])
    return NurbsCurve(p, knots, ctrl, epsilon=tolerances.epsilon)


def fit_curve(
    points, config: Union[InterpolationConfig, ApproximationConfig]
) -> NurbsCurve:
    """Run the fit described by ``config``."""
    if isinstance(config, InterpolationConfig):
        return interpolated_curve(
            points,
            config.degree,
            start_tangent=config.start_tangent,
            end_tangent=config.end_tangent,
            centripetal=config.centripetal,
            tolerances=config.tolerances,
        )
    if isinstance(config, ApproximationConfig):
        return approximate_curve(
            points,
            config.degree,
            centripetal=config.centripetal,
            num_control_points=config.num_control_points,
            tolerances=config.tolerances,
        )
    raise TypeError(f"unsupported fit configuration: {type(config).__name__}")
