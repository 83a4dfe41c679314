"""
Static (Guyan) condensation.

Partitioning a square matrix into retained (r) and eliminated (e) DOFs:

    | K_rr  K_re | | u_r |   | f_r |
    | K_er  K_ee | | u_e | = | f_e |

eliminating u_e gives the Schur complement

    K* = K_rr - K_re K_ee^-1 K_er

The eliminated block is factorised once (LU with pivot check) and reused
for the solve; it is never inverted by cofactors.
"""

import logging

import numpy as np
from scipy import linalg as sla

from fealib import config
from fealib.errors import DimensionMismatchError, InvalidIndexError
from fealib.linalg.dense import as_matrix, is_symmetric, lu_factor_checked

logger = logging.getLogger(__name__)


def partition(n, retained):
    """
    Split ``range(n)`` into retained and eliminated index arrays.

    Parameters
    ----------
    n : int
        Matrix size.
    retained : int or sequence of int
        Either the count of leading DOFs to keep, or explicit indices.

    Returns
    -------
    keep, drop : ndarray of int
        Retained indices (in the given order) and eliminated indices
        (ascending).
    """
    if isinstance(retained, (int, np.integer)):
        if not 0 <= retained <= n:
            raise InvalidIndexError(
                f"Cannot retain {retained} DOFs of a {n}x{n} matrix"
            )
        keep = np.arange(retained)
    else:
        keep = np.asarray(list(retained), dtype=np.int64)
        if keep.size and (keep.min() < 0 or keep.max() >= n):
            raise InvalidIndexError(
                f"Retained indices out of range for {n}x{n} matrix"
            )
        if np.unique(keep).size != keep.size:
            raise InvalidIndexError("Retained indices contain duplicates")

    mask = np.ones(n, dtype=bool)
    mask[keep] = False
    drop = np.nonzero(mask)[0]
    return keep, drop


def _blocks(k, retained):
    k = as_matrix(k)
    if k.shape[0] != k.shape[1]:
        raise DimensionMismatchError(
            f"Condensation requires a square matrix, got {k.shape}"
        )
    keep, drop = partition(k.shape[0], retained)
    k_rr = k[np.ix_(keep, keep)]
    k_re = k[np.ix_(keep, drop)]
    k_er = k[np.ix_(drop, keep)]
    k_ee = k[np.ix_(drop, drop)]
    return k, keep, drop, k_rr, k_re, k_er, k_ee


def _factor_eliminated(k_ee):
    lu_piv, ratio = lu_factor_checked(k_ee, "eliminated block")
    if ratio < config.CONDITION_WARNING_RATIO:
        logger.warning(
            "Ill-conditioned eliminated block (%dx%d): pivot ratio %.3e",
            k_ee.shape[0], k_ee.shape[1], ratio,
        )
    return lu_piv


def condense(k, retained):
    """
    Statically condense a square matrix onto its retained DOFs.

    Parameters
    ----------
    k : array_like, shape (n, n)
        Uncondensed matrix.
    retained : int or sequence of int
        Leading DOF count to keep, or explicit retained indices. The
        condensed matrix follows the order of ``retained``.

    Returns
    -------
    k_star : ndarray, shape (n_r, n_r)
        ``K_rr - K_re K_ee^-1 K_er``.

    Raises
    ------
    SingularMatrixError
        If the eliminated block is not invertible.
    """
    k, keep, drop, k_rr, k_re, k_er, k_ee = _blocks(k, retained)
    logger.debug("Condensing %dx%d matrix onto %d DOFs", k.shape[0], k.shape[1], keep.size)
    if drop.size == 0:
        return k_rr.copy()

    lu_piv = _factor_eliminated(k_ee)
    k_star = k_rr - k_re @ sla.lu_solve(lu_piv, k_er, check_finite=False)

    if is_symmetric(k):
        k_star = 0.5 * (k_star + k_star.T)
    return k_star


def recover_eliminated(k, retained, u_retained, f_eliminated=None):
    """
    Back-substitute the eliminated DOFs.

    ``u_e = K_ee^-1 (f_e - K_er u_r)``

    Parameters
    ----------
    k : array_like, shape (n, n)
        Uncondensed matrix.
    retained : int or sequence of int
        Same partition as passed to :func:`condense`.
    u_retained : array_like, shape (n_r,)
        Solved retained DOFs.
    f_eliminated : array_like, shape (n_e,), optional
        Loads acting on the eliminated DOFs. Default zero.

    Returns
    -------
    u_e : ndarray, shape (n_e,)
    """
    k, keep, drop, _, _, k_er, k_ee = _blocks(k, retained)
    u_r = np.asarray(u_retained, dtype=np.float64)
    if u_r.shape != (keep.size,):
        raise DimensionMismatchError(
            f"Expected {keep.size} retained values, got shape {u_r.shape}"
        )
    f_e = np.zeros(drop.size) if f_eliminated is None else np.asarray(f_eliminated, dtype=np.float64)
    if f_e.shape != (drop.size,):
        raise DimensionMismatchError(
            f"Expected {drop.size} eliminated loads, got shape {f_e.shape}"
        )
    if drop.size == 0:
        return np.zeros(0)

    lu_piv = _factor_eliminated(k_ee)
    return sla.lu_solve(lu_piv, f_e - k_er @ u_r, check_finite=False)


def expand_condensed(k_condensed, k, retained):
    """
    Rebuild ``K_rr`` from a condensed matrix via the Schur identity.

    ``K_rr = K* + K_re K_ee^-1 K_er``; used to verify that condensation is
    consistent with the uncondensed system.
    """
    k, keep, drop, k_rr, k_re, k_er, k_ee = _blocks(k, retained)
    k_star = as_matrix(k_condensed, "condensed matrix")
    if k_star.shape != k_rr.shape:
        raise DimensionMismatchError(
            f"Condensed matrix {k_star.shape} does not match retained block {k_rr.shape}"
        )
    if drop.size == 0:
        return k_star.copy()

    lu_piv = _factor_eliminated(k_ee)
    return k_star + k_re @ sla.lu_solve(lu_piv, k_er, check_finite=False)
