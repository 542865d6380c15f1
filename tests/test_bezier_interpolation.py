import numpy as np
import pytest

from nurbsfit import (
    BezierCurve,
    EmptyInputError,
    InsufficientPointsError,
    NurbsCurve,
    OutOfDomainError,
    bezier_interpolation,
    bezier_interpolation_composite,
    parameterize,
)
from nurbsfit.fitting.bezier_interp import bezier_control_points


def _zigzag():
    return np.array(
        [[0.0, 0.0], [1.0, 2.0], [2.5, 1.5], [3.0, -1.0], [4.5, 0.5], [6.0, 0.0]]
    )


def test_straight_line_single_segment():
    segments = bezier_interpolation([(0.0, 0.0), (5.0, 0.0)])
    assert len(segments) == 1
    cps = segments[0].control_points
    assert cps.shape == (4, 2)
    assert np.allclose(cps[:, 1], 0.0)
    assert np.allclose(cps[:, 0], [0.0, 5.0 / 3.0, 10.0 / 3.0, 5.0])


def test_segments_are_cubic_and_hit_points():
    pts = _zigzag()
    segments = bezier_interpolation(pts)
    assert len(segments) == pts.shape[0] - 1
    for i, seg in enumerate(segments):
        assert seg.degree == 3
        assert np.allclose(seg.start, pts[i])
        assert np.allclose(seg.end, pts[i + 1])


def test_position_and_tangent_continuity_at_joints():
    segments = bezier_interpolation(_zigzag())
    for left, right in zip(segments[:-1], segments[1:]):
        assert np.allclose(left.evaluate(1.0), right.evaluate(0.0))
        assert np.allclose(
            left.derivative().evaluate(1.0), right.derivative().evaluate(0.0)
        )


def test_boundary_equations():
    pts = np.array([[0.0, 0.0], [1.0, 1.0], [3.0, 0.0]])
    A, B = bezier_control_points(pts)
    assert np.allclose(2 * A[0] + A[1], pts[0] + 2 * pts[1])
    assert np.allclose(2 * A[0] + 7 * A[1], 8 * pts[1] + pts[2])
    assert np.allclose(B[0], 2 * pts[1] - A[1])
    assert np.allclose(B[1], 0.5 * (A[1] + pts[2]))


def test_interior_equations():
    pts = _zigzag()
    A, _ = bezier_control_points(pts)
    for i in range(1, A.shape[0] - 1):
        assert np.allclose(A[i - 1] + 4 * A[i] + A[i + 1], 2 * (2 * pts[i] + pts[i + 1]))


def test_three_dimensional_points():
    t = np.linspace(0.0, np.pi, 6)
    pts = np.column_stack([np.cos(t), np.sin(t), t])
    segments = bezier_interpolation(pts)
    assert all(seg.dim == 3 for seg in segments)
    assert np.allclose(segments[-1].evaluate(1.0), pts[-1])


def test_segment_as_nurbs():
    seg = bezier_interpolation(_zigzag())[2]
    curve = NurbsCurve.from_bezier(seg)
    for t in (0.0, 0.25, 0.6, 1.0):
        assert np.allclose(curve.point_at(t), seg.evaluate(t))


def test_composite_curve():
    pts = _zigzag()
    composite = bezier_interpolation_composite(pts)
    u = parameterize(pts)
    assert len(composite.segments) == pts.shape[0] - 1
    assert np.allclose(composite.evaluate_batch(u), pts)
    with pytest.raises(OutOfDomainError):
        composite.evaluate(1.2)


def test_empty_input():
    with pytest.raises(EmptyInputError):
        bezier_interpolation([])
    with pytest.raises(InsufficientPointsError):
        bezier_interpolation(np.empty((0, 2)))


def test_single_point():
    with pytest.raises(InsufficientPointsError):
        bezier_interpolation([(1.0, 1.0)])


def test_bezier_curve_domain():
    seg = BezierCurve([[0.0, 0.0], [1.0, 1.0], [2.0, 0.0], [3.0, 1.0]])
    with pytest.raises(OutOfDomainError):
        seg.evaluate(-0.1)


def test_straight_segment_length_and_polyline():
    seg = bezier_interpolation([(0.0, 0.0), (3.0, 4.0)])[0]
    assert np.isclose(seg.length(samples=256), 5.0)
    poly = seg.to_polyline(samples=17)
    assert poly.shape == (17, 2)
    assert np.all(np.diff(poly[:, 0]) > 0)


def test_composite_polyline_and_length():
    pts = np.array([[0.0, 0.0], [3.0, 0.0], [7.0, 0.0]])
    composite = bezier_interpolation_composite(pts)
    poly = composite.to_polyline(samples_per_segment=20)
    assert poly.shape == (40, 2)
    assert np.allclose(poly[:, 1], 0.0)
    assert np.isclose(composite.length(samples_per_segment=400), 7.0)
