from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

__all__ = [
    "Tolerances",
    "DEFAULT_TOLERANCES",
    "InterpolationConfig",
    "ApproximationConfig",
]


# ---------------------------------------------------------------------------
# Numeric tolerances
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Tolerances:
    """
    Numeric tolerances shared by the fitting engine and the curve layer.

    epsilon           : slack on parameter-domain checks of fitted curves;
                        Line and Circle always use DEFAULT_TOLERANCES.epsilon
    pivot_tolerance   : relative pivot magnitude below which LU is singular
    condition_warning : condition number above which a UserWarning is issued
    """

    epsilon: float = 1e-10
    pivot_tolerance: float = 1e-12
    condition_warning: float = 1e12


DEFAULT_TOLERANCES = Tolerances()


# ---------------------------------------------------------------------------
# Fit configurations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InterpolationConfig:
    """
    Configuration for global curve interpolation.
    """

    degree: int = 3
    centripetal: bool = False  # True = sqrt(chord); False = chord-length
    start_tangent: Optional[Tuple[float, ...]] = None
    end_tangent: Optional[Tuple[float, ...]] = None
    tolerances: Tolerances = DEFAULT_TOLERANCES


@dataclass(frozen=True)
class ApproximationConfig:
    """
    Configuration for least-squares curve approximation.
    """

    degree: int = 3
    centripetal: bool = False
    num_control_points: Optional[int] = None  # None -> number of points - 1
    tolerances: Tolerances = DEFAULT_TOLERANCES
