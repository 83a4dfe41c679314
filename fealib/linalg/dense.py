"""
Dense matrix kernel for element formulations.

Matrices are plain ``numpy`` float arrays (2-D); vectors are 1-D arrays.
The functions here add the checks the element code relies on: explicit
bounds checking (numpy silently wraps negative indices), conformance
checks with descriptive errors, and singularity detection on inversion.

Index ranges for block extraction follow the inclusive convention
``(first, last)`` used throughout the element code:

    get_submatrix(A, (0, 1), (0, 1))  ->  A[0:2, 0:2]

Symmetric matrices are populated on one triangle (diagonal included) and
completed with :func:`mirror` once population is finished.
"""

import numpy as np
from scipy import linalg as sla

from fealib import config
from fealib.errors import (
    DimensionMismatchError,
    InvalidIndexError,
    SingularMatrixError,
    UnsupportedConfigurationError,
)


def as_matrix(a, name="matrix"):
    """Return ``a`` as a 2-D float array, raising if it is not 2-D."""
    m = np.asarray(a, dtype=np.float64)
    if m.ndim != 2:
        raise DimensionMismatchError(
            f"{name} must be 2-D, got shape {m.shape}"
        )
    return m


def _check_index(m, i, j):
    rows, cols = m.shape
    if not (0 <= i < rows) or not (0 <= j < cols):
        raise InvalidIndexError(
            f"Index ({i}, {j}) out of range for {rows}x{cols} matrix"
        )


# -----------------------------------------------------------------
#  Element access
# -----------------------------------------------------------------

def get_entry(a, i, j):
    """Bounds-checked read of entry (i, j)."""
    m = as_matrix(a)
    _check_index(m, i, j)
    return float(m[i, j])


def set_entry(a, i, j, value):
    """Bounds-checked write of entry (i, j). Mutates ``a`` in place."""
    _check_index(a, i, j)
    a[i, j] = value


def add_entry(a, i, j, delta):
    """In-place accumulate ``a[i, j] += delta`` (quadrature summation)."""
    _check_index(a, i, j)
    a[i, j] += delta


# -----------------------------------------------------------------
#  Arithmetic
# -----------------------------------------------------------------

def scale(a, k):
    return np.asarray(a, dtype=np.float64) * float(k)


def add(a, b):
    """Element-wise sum; shapes must match exactly."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"Cannot add shapes {a.shape} and {b.shape}"
        )
    return a + b


def subtract(a, b):
    """Element-wise difference; shapes must match exactly."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"Cannot subtract shape {b.shape} from {a.shape}"
        )
    return a - b


def multiply(a, b):
    """
    Matrix product ``a @ b``.

    ``b`` may be a 1-D vector, in which case a 1-D vector is returned.

    Raises
    ------
    DimensionMismatchError
        If the inner dimensions do not agree.
    """
    a = as_matrix(a, "left operand")
    b = np.asarray(b, dtype=np.float64)
    if b.ndim not in (1, 2):
        raise DimensionMismatchError(
            f"right operand must be 1-D or 2-D, got shape {b.shape}"
        )
    if a.shape[1] != b.shape[0]:
        raise DimensionMismatchError(
            f"Incompatible inner dimensions: {a.shape} @ {b.shape}"
        )
    return a @ b


def transpose(a):
    return as_matrix(a).T.copy()


# -----------------------------------------------------------------
#  Inversion and determinant
# -----------------------------------------------------------------

def _require_square(m, what):
    if m.shape[0] != m.shape[1]:
        raise DimensionMismatchError(
            f"{what} requires a square matrix, got {m.shape}"
        )


def lu_factor_checked(a, what="matrix"):
    """
    LU-factorise a square matrix and reject numerically singular input.

    The pivot ratio ``min|U_ii| / max|U_ii|`` is compared against
    ``config.SINGULAR_TOLERANCE``.

    Parameters
    ----------
    a : array_like, shape (n, n)
        Matrix to factorise.
    what : str
        Label used in error messages.

    Returns
    -------
    lu_piv : tuple
        Factorisation as returned by ``scipy.linalg.lu_factor``.
    pivot_ratio : float
        Smallest over largest absolute pivot (1.0 for a 0x0 matrix).

    Raises
    ------
    SingularMatrixError
        If the matrix has non-finite entries or a vanishing pivot.
    """
    m = as_matrix(a, what)
    _require_square(m, what)
    if m.shape[0] == 0:
        return None, 1.0
    if not np.all(np.isfinite(m)):
        raise SingularMatrixError(f"{what} contains non-finite entries")

    lu, piv = sla.lu_factor(m, check_finite=False)
    pivots = np.abs(np.diag(lu))
    p_max = pivots.max()
    ratio = pivots.min() / p_max if p_max > 0.0 else 0.0
    if ratio <= config.SINGULAR_TOLERANCE:
        raise SingularMatrixError(
            f"{what} ({m.shape[0]}x{m.shape[1]}) is singular: "
            f"pivot ratio {ratio:.3e}"
        )
    return (lu, piv), ratio


def invert(a):
    """
    Inverse of a square matrix via LU factorisation.

    Raises
    ------
    DimensionMismatchError
        If the matrix is not square.
    SingularMatrixError
        If the matrix is numerically singular.
    """
    m = as_matrix(a)
    lu_piv, _ = lu_factor_checked(m, "matrix to invert")
    n = m.shape[0]
    if n == 0:
        return np.zeros((0, 0))
    return sla.lu_solve(lu_piv, np.eye(n), check_finite=False)


def determinant(a):
    """
    Determinant of a 1x1, 2x2 or 3x3 matrix in closed form.

    Larger determinants are not needed by the element formulations and
    raise ``UnsupportedConfigurationError``.
    """
    m = as_matrix(a)
    _require_square(m, "determinant")
    n = m.shape[0]
    if n == 1:
        return float(m[0, 0])
    if n == 2:
        return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])
    if n == 3:
        return float(
            m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
            - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
            + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
        )
    raise UnsupportedConfigurationError(
        f"determinant only defined up to 3x3, got {n}x{n}"
    )


# -----------------------------------------------------------------
#  Blocks
# -----------------------------------------------------------------

def get_submatrix(a, row_range, col_range):
    """
    Extract the block spanning inclusive ``row_range`` and ``col_range``.

    Parameters
    ----------
    a : array_like
        Source matrix.
    row_range, col_range : tuple of int
        ``(first, last)`` indices, both inclusive.

    Returns
    -------
    block : ndarray
        Copy of the requested block.
    """
    m = as_matrix(a)
    r0, r1 = row_range
    c0, c1 = col_range
    rows, cols = m.shape
    if not (0 <= r0 <= r1 < rows) or not (0 <= c0 <= c1 < cols):
        raise InvalidIndexError(
            f"Block rows {row_range}, cols {col_range} exceed "
            f"{rows}x{cols} matrix"
        )
    return m[r0:r1 + 1, c0:c1 + 1].copy()


def set_submatrix(a, block, row, col):
    """Return a copy of ``a`` with ``block`` inserted at (row, col)."""
    m = as_matrix(a).copy()
    b = as_matrix(block, "block")
    rows, cols = m.shape
    if row < 0 or col < 0 or row + b.shape[0] > rows or col + b.shape[1] > cols:
        raise InvalidIndexError(
            f"Block {b.shape} at ({row}, {col}) exceeds {rows}x{cols} matrix"
        )
    m[row:row + b.shape[0], col:col + b.shape[1]] = b
    return m


# -----------------------------------------------------------------
#  Symmetry
# -----------------------------------------------------------------

def mirror(a, source="upper"):
    """
    Complete a matrix populated on one triangle (diagonal included).

    Only call once population is finished: entries on the target triangle
    are overwritten.

    Parameters
    ----------
    a : array_like, shape (n, n)
    source : {'upper', 'lower'}
        Triangle holding the populated values.

    Returns
    -------
    sym : ndarray, shape (n, n)
        Fully symmetric matrix.
    """
    m = as_matrix(a)
    _require_square(m, "mirror")
    if source == "upper":
        tri = np.triu(m)
    elif source == "lower":
        tri = np.tril(m)
    else:
        raise InvalidIndexError(
            f"Unknown mirror source '{source}'. Use 'upper' or 'lower'."
        )
    return tri + tri.T - np.diag(np.diag(m))


def is_symmetric(a, tol=None):
    m = as_matrix(a)
    if m.shape[0] != m.shape[1]:
        return False
    if tol is None:
        tol = config.SYMMETRY_TOLERANCE
    scale_ = max(np.abs(m).max(initial=0.0), 1.0)
    return bool(np.all(np.abs(m - m.T) <= tol * scale_))
