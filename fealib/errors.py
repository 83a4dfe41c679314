"""
Exception hierarchy for the fealib element core.

Every error is a local, non-recoverable fault raised immediately to the
caller. Each class also derives from the closest built-in exception so that
callers catching ``ValueError`` / ``IndexError`` keep working.
"""


class FEAError(Exception):
    """Base class for all element-core errors."""


class DimensionMismatchError(FEAError, ValueError):
    """Kernel operation on non-conformant matrices or vectors."""


class SingularMatrixError(FEAError, ArithmeticError):
    """Inversion or condensation of a numerically singular block."""


class DegenerateGeometryError(FEAError, ValueError):
    """Non-positive Jacobian determinant or collapsed element geometry."""


class InvalidIndexError(FEAError, IndexError):
    """Out-of-range matrix index, coordinate-system flag, force tag or node index."""


class UnsupportedConfigurationError(FEAError, NotImplementedError):
    """Quadrature / interpolation requested for an unimplemented combination."""
