from .bezier_interp import bezier_interpolation, bezier_interpolation_composite
from .curves import approximate_curve, fit_curve, interpolated_curve
from .parameterization import parameterize
