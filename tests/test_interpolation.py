import warnings

import numpy as np
import pytest

from nurbsfit import (
    InsufficientPointsError,
    InterpolationConfig,
    InvalidDegreeOfFreedomError,
    SingularSystemError,
    Tolerances,
    fit_curve,
    interpolated_curve,
    parameterize,
)


def _helix(n=9):
    t = np.linspace(0.0, 2.0 * np.pi, n)
    return np.column_stack([np.cos(t), np.sin(t), 0.3 * t])


def test_three_point_quadratic_scenario():
    pts = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 0.0]])
    curve = interpolated_curve(pts, 2)
    assert curve.degree == 2
    assert np.array_equal(curve.knots, [0.0, 0.0, 0.0, 1.0, 1.0, 1.0])
    assert np.allclose(curve.control_points, [[0.0, 0.0], [1.0, 2.0], [2.0, 0.0]])
    assert np.allclose(curve.points_at([0.0, 0.5, 1.0]), pts)


@pytest.mark.parametrize("centripetal", [False, True])
@pytest.mark.parametrize("degree", [1, 2, 3, 5])
def test_curve_passes_through_points(degree, centripetal):
    pts = _helix()
    curve = interpolated_curve(pts, degree, centripetal=centripetal)
    u = parameterize(pts, centripetal=centripetal)
    assert curve.control_points.shape == pts.shape
    assert curve.knots.shape[0] == pts.shape[0] + degree + 1
    assert np.allclose(curve.points_at(u), pts, atol=1e-9)
    assert np.allclose(curve.control_points[0], pts[0])
    assert np.allclose(curve.control_points[-1], pts[-1])


def test_minimum_point_count():
    pts = np.array([[0.0, 0.0], [1.0, 2.0], [3.0, 1.0], [4.0, 4.0]])
    curve = interpolated_curve(pts, 3)
    # degree + 1 points give a single Bézier span
    assert np.array_equal(curve.knots, [0.0] * 4 + [1.0] * 4)
    assert np.allclose(curve.points_at(parameterize(pts)), pts)


def test_two_points_degree_one():
    curve = interpolated_curve([(0.0, 0.0), (2.0, 1.0)], 1)
    assert np.array_equal(curve.knots, [0.0, 0.0, 1.0, 1.0])
    assert np.allclose(curve.point_at(0.5), [1.0, 0.5])


def test_end_tangents():
    pts = np.array([[0.0, 0.0], [1.0, 1.5], [2.5, 1.0], [3.0, -0.5], [4.5, 0.0]])
    t0 = np.array([1.0, 3.0])
    t1 = np.array([2.0, 1.0])
    curve = interpolated_curve(pts, 3, start_tangent=t0, end_tangent=t1)

    assert curve.control_points.shape == (pts.shape[0] + 2, 2)
    assert np.allclose(curve.points_at(parameterize(pts)), pts, atol=1e-9)
    assert np.allclose(curve.derivatives_at(0.0)[1], t0)
    assert np.allclose(curve.derivatives_at(1.0)[1], t1)
    assert np.allclose(curve.tangent_at(0.0), t0 / np.linalg.norm(t0))


def test_end_tangents_three_dimensional():
    pts = _helix(7)
    t0 = np.array([0.0, 2.0, 0.5])
    t1 = np.array([0.0, 2.0, 0.5])
    curve = interpolated_curve(pts, 3, start_tangent=t0, end_tangent=t1, centripetal=True)
    assert np.allclose(curve.points_at(parameterize(pts, centripetal=True)), pts, atol=1e-9)
    assert np.allclose(curve.derivatives_at(0.0)[1], t0)
    assert np.allclose(curve.derivatives_at(1.0)[1], t1)


def test_single_tangent_rejected():
    with pytest.raises(ValueError):
        interpolated_curve(_helix(), 3, start_tangent=[1.0, 0.0, 0.0])


def test_insufficient_points():
    with pytest.raises(InsufficientPointsError):
        interpolated_curve([(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)], 3)


def test_invalid_degree():
    with pytest.raises(ValueError):
        interpolated_curve(_helix(), 0)


def test_repeated_point_is_singular():
    pts = [(0.0, 0.0), (1.0, 0.0), (1.0, 0.0), (2.0, 1.0), (3.0, 0.0)]
    with pytest.raises(SingularSystemError):
        interpolated_curve(pts, 3)


def test_input_points_not_aliased():
    pts = _helix()
    curve = interpolated_curve(pts, 3)
    pts[0] = 100.0
    assert not np.allclose(curve.control_points[0], 100.0)
    assert not curve.control_points.flags.writeable


def test_fit_curve_dispatch():
    pts = _helix()
    cfg = InterpolationConfig(degree=2, centripetal=True)
    a = fit_curve(pts, cfg)
    b = interpolated_curve(pts, 2, centripetal=True)
    assert np.allclose(a.control_points, b.control_points)
    assert np.allclose(a.knots, b.knots)


def test_fit_curve_rejects_unknown_config():
    with pytest.raises(TypeError):
        fit_curve(_helix(), object())


def test_linear_curve_rejects_end_tangents():
    pts = [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 1.0)]
    with warnings.catch_warnings():
        warnings.simplefilter("error", RuntimeWarning)
        with pytest.raises(InvalidDegreeOfFreedomError, match="degree >= 2"):
            interpolated_curve(pts, 1, start_tangent=[1.0, 0.0], end_tangent=[1.0, 0.0])


def test_tolerances_epsilon_reaches_fitted_curve():
    pts = _helix()
    curve = interpolated_curve(pts, 3, tolerances=Tolerances(epsilon=1e-3))
    assert curve.epsilon == 1e-3
    assert np.allclose(curve.point_at(1.0 + 1e-4), pts[-1])
