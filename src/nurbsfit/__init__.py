from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version(
        "nurbsfit"
    )  # debe coincidir con [project].name en pyproject.toml
except PackageNotFoundError:
    # fallback para ejecución directa sin instalar
    __version__ = "0.1.0"

from .config import ApproximationConfig, InterpolationConfig, Tolerances
from .errors import (
    DegenerateInputError,
    EmptyInputError,
    FittingError,
    InsufficientPointsError,
    InvalidDegreeOfFreedomError,
    OutOfDomainError,
    SingularSystemError,
)
from .fitting import (
    approximate_curve,
    bezier_interpolation,
    bezier_interpolation_composite,
    fit_curve,
    interpolated_curve,
    parameterize,
)
from .geometry import BezierCurve, Circle, Line, NurbsCurve, PiecewiseBezier

__all__ = [
    "__version__",
    "ApproximationConfig",
    "InterpolationConfig",
    "Tolerances",
    "FittingError",
    "InsufficientPointsError",
    "EmptyInputError",
    "DegenerateInputError",
    "InvalidDegreeOfFreedomError",
    "SingularSystemError",
    "OutOfDomainError",
    "approximate_curve",
    "bezier_interpolation",
    "bezier_interpolation_composite",
    "fit_curve",
    "interpolated_curve",
    "parameterize",
    "BezierCurve",
    "Circle",
    "Line",
    "NurbsCurve",
    "PiecewiseBezier",
]
