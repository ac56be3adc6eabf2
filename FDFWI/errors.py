# FDFWI/errors.py
"""
Exception types raised by misfit, gradient and Hessian evaluation.

Every class also derives from the builtin exception that plain NumPy/SciPy
code would raise in the same situation, so ``except ValueError`` keeps
catching malformed input.
"""
import numpy as np


class FWIError(Exception):
    """Base class for all FDFWI errors."""


class DimensionMismatchError(FWIError, ValueError):
    """Array or operator shapes are inconsistent with the grid/geometry."""


class InvalidFrequencyError(FWIError, ValueError):
    """Frequency is not a finite, strictly positive number."""


class InvalidGeometryError(FWIError, ValueError):
    """Grid parameters are non-physical or a coordinate is not a grid node."""


class InvalidModelError(FWIError, ValueError):
    """Model is not real, not finite or not strictly positive."""


class SingularOperatorError(FWIError, np.linalg.LinAlgError):
    """Forward or adjoint system could not be solved to tolerance."""


class SolverNotConvergedError(FWIError, RuntimeError):
    """Iterative solve exceeded its iteration or time budget."""
