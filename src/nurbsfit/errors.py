"""
Error taxonomy for curve fitting.

All errors derive from :class:`FittingError`, itself a ``ValueError``, so
callers that already guard against bad input with ``except ValueError`` keep
working.
"""

from __future__ import annotations

import numpy as np

__all__ = [
    "FittingError",
    "InsufficientPointsError",
    "EmptyInputError",
    "DegenerateInputError",
    "InvalidDegreeOfFreedomError",
    "SingularSystemError",
    "OutOfDomainError",
]


class FittingError(ValueError):
    """Base class for every error raised by the fitting engine."""


class InsufficientPointsError(FittingError):
    """Fewer points than the requested fit needs (degree + 1, or 2 for Bézier)."""


class EmptyInputError(InsufficientPointsError):
    """No points at all."""


class DegenerateInputError(FittingError):
    """Zero total chord length, i.e. all points coincide."""


class InvalidDegreeOfFreedomError(FittingError):
    """Control-point count incompatible with point count and degree."""


class SingularSystemError(FittingError, np.linalg.LinAlgError):
    """The assembled system has a zero pivot within tolerance."""


class OutOfDomainError(FittingError):
    """Evaluation requested outside the parameter domain of a curve."""
