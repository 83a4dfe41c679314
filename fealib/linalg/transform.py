"""
Congruence transforms between element-local and global frames.

For an element transformation ``T`` mapping global DOFs to local DOFs
(``u_local = T @ u_global``, shape (n_local, n_global)):

    matrix,  TO_GLOBAL:  K_g = T^t K_l T
    matrix,  TO_LOCAL:   K_l = T K_g T^t
    vector,  TO_GLOBAL:  f_g = T^t f_l
    vector,  TO_LOCAL:   u_l = T u_g

The direction is always passed explicitly; it is never inferred from the
operand shapes.
"""

from enum import Enum

import numpy as np

from fealib.errors import DimensionMismatchError, InvalidIndexError
from fealib.linalg.dense import as_matrix


class TransformDirection(Enum):
    TO_LOCAL = "to_local"
    TO_GLOBAL = "to_global"


def _check_direction(direction):
    if not isinstance(direction, TransformDirection):
        raise InvalidIndexError(
            f"Illegal transform direction {direction!r}. "
            "Use TransformDirection.TO_LOCAL or TransformDirection.TO_GLOBAL."
        )


def transform(m, t, direction):
    """
    Congruence transform of a square matrix.

    Parameters
    ----------
    m : array_like
        Matrix in the source frame. Shape (n_local, n_local) for
        ``TO_GLOBAL``; (n_global, n_global) for ``TO_LOCAL``.
    t : array_like, shape (n_local, n_global)
        Transformation from global to local DOFs.
    direction : TransformDirection

    Returns
    -------
    ndarray
        The matrix expressed in the target frame.
    """
    _check_direction(direction)
    m = as_matrix(m)
    t = as_matrix(t, "transformation")
    n_local, n_global = t.shape

    if direction is TransformDirection.TO_GLOBAL:
        if m.shape != (n_local, n_local):
            raise DimensionMismatchError(
                f"Local matrix {m.shape} does not match transformation {t.shape}"
            )
        return t.T @ m @ t

    if m.shape != (n_global, n_global):
        raise DimensionMismatchError(
            f"Global matrix {m.shape} does not match transformation {t.shape}"
        )
    return t @ m @ t.T


def transform_vector(v, t, direction):
    """Rotate a vector between frames (see module docstring)."""
    _check_direction(direction)
    v = np.asarray(v, dtype=np.float64)
    t = as_matrix(t, "transformation")
    if v.ndim != 1:
        raise DimensionMismatchError(f"Expected a 1-D vector, got shape {v.shape}")

    if direction is TransformDirection.TO_GLOBAL:
        if v.shape[0] != t.shape[0]:
            raise DimensionMismatchError(
                f"Local vector of length {v.shape[0]} does not match "
                f"transformation {t.shape}"
            )
        return t.T @ v

    if v.shape[0] != t.shape[1]:
        raise DimensionMismatchError(
            f"Global vector of length {v.shape[0]} does not match "
            f"transformation {t.shape}"
        )
    return t @ v
