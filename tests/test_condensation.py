"""Static condensation and back-substitution."""

import logging

import numpy as np
import pytest

from fealib.errors import InvalidIndexError, SingularMatrixError
from fealib.linalg.condensation import condense, expand_condensed, recover_eliminated


@pytest.fixture
def spd_matrix():
    rng = np.random.default_rng(7)
    a = rng.normal(size=(6, 6))
    return a @ a.T + 6.0 * np.eye(6)


def test_condense_leading_count(spd_matrix):
    k = spd_matrix
    expected = k[:2, :2] - k[:2, 2:] @ np.linalg.inv(k[2:, 2:]) @ k[2:, :2]
    np.testing.assert_allclose(condense(k, 2), expected, rtol=1e-12)


def test_condense_explicit_indices_follow_given_order(spd_matrix):
    k = spd_matrix
    keep = [4, 1]
    drop = [0, 2, 3, 5]
    expected = (k[np.ix_(keep, keep)]
                - k[np.ix_(keep, drop)] @ np.linalg.inv(k[np.ix_(drop, drop)])
                @ k[np.ix_(drop, keep)])
    result = condense(k, keep)
    np.testing.assert_allclose(result, expected, rtol=1e-12)
    np.testing.assert_array_equal(result, result.T)


def test_expand_restores_retained_block(spd_matrix):
    k = spd_matrix
    k_star = condense(k, 3)
    np.testing.assert_allclose(expand_condensed(k_star, k, 3), k[:3, :3], rtol=1e-12)


def test_recover_eliminated_solves_full_system(spd_matrix):
    k = spd_matrix
    u_r = np.array([0.3, -1.0, 2.0])
    u_e = recover_eliminated(k, 3, u_r)
    u = np.concatenate((u_r, u_e))
    f = k @ u
    # no load on the eliminated DOFs, condensed system carries the rest
    np.testing.assert_allclose(f[3:], 0.0, atol=1e-10)
    np.testing.assert_allclose(condense(k, 3) @ u_r, f[:3], rtol=1e-10)


def test_condense_keep_all_and_bad_partition(spd_matrix):
    np.testing.assert_array_equal(condense(spd_matrix, 6), spd_matrix)
    with pytest.raises(InvalidIndexError):
        condense(spd_matrix, 7)
    with pytest.raises(InvalidIndexError):
        condense(spd_matrix, [0, 0])


def test_singular_eliminated_block():
    k = np.eye(4)
    k[2:, 2:] = 0.0
    with pytest.raises(SingularMatrixError):
        condense(k, 2)


def test_ill_conditioned_block_logs_warning(caplog):
    k = np.diag([1.0, 1.0, 1.0, 1e-11])
    with caplog.at_level(logging.WARNING, logger="fealib.linalg.condensation"):
        condense(k, 2)
    assert "Ill-conditioned" in caplog.text
