"""Congruence transforms between local and global frames."""

import numpy as np
import pytest

from fealib.errors import DimensionMismatchError, InvalidIndexError
from fealib.linalg.transform import TransformDirection, transform, transform_vector


@pytest.fixture
def rotation():
    c, s = np.cos(0.4), np.sin(0.4)
    return np.array([[c, s, 0.0], [-s, c, 0.0], [0.0, 0.0, 1.0]])


def test_matrix_round_trip(rotation):
    k = np.array([[4.0, 1.0, 0.0], [1.0, 3.0, 0.5], [0.0, 0.5, 2.0]])
    k_global = transform(k, rotation, TransformDirection.TO_GLOBAL)
    np.testing.assert_allclose(k_global, rotation.T @ k @ rotation)
    back = transform(k_global, rotation, TransformDirection.TO_LOCAL)
    np.testing.assert_allclose(back, k, atol=1e-14)


def test_vector_round_trip(rotation):
    v = np.array([1.0, -2.0, 0.5])
    local = transform_vector(v, rotation, TransformDirection.TO_LOCAL)
    np.testing.assert_allclose(local, rotation @ v)
    np.testing.assert_allclose(
        transform_vector(local, rotation, TransformDirection.TO_GLOBAL), v, atol=1e-14
    )


def test_rectangular_transformation_shapes():
    t = np.zeros((2, 4))
    t[0, 1] = t[1, 3] = 1.0
    k_global = transform(np.eye(2), t, TransformDirection.TO_GLOBAL)
    assert k_global.shape == (4, 4)
    with pytest.raises(DimensionMismatchError):
        transform(np.eye(4), t, TransformDirection.TO_GLOBAL)
    with pytest.raises(DimensionMismatchError):
        transform_vector(np.ones(2), t, TransformDirection.TO_LOCAL)


def test_direction_must_be_enum(rotation):
    with pytest.raises(InvalidIndexError):
        transform(np.eye(3), rotation, "to_global")
    with pytest.raises(InvalidIndexError):
        transform_vector(np.ones(3), rotation, 0)
