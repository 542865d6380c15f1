from .bezier import BezierCurve, PiecewiseBezier
from .nurbs import NurbsCurve
from .primitives import Circle, Line
