"""Shape-function sets: partition of unity, nodal interpolation, derivatives."""

import numpy as np
import pytest

from fealib.elements.interpolation import Degree, Family, Geometry, Interpolation2D
from fealib.errors import InvalidIndexError, UnsupportedConfigurationError

BASES = [
    (Degree.LINEAR, Geometry.TRIANGULAR, Family.LAGRANGE),
    (Degree.BIQUADRATIC, Geometry.TRIANGULAR, Family.LAGRANGE),
    (Degree.LINEAR, Geometry.QUADRILATERAL, Family.LAGRANGE),
    (Degree.BIQUADRATIC, Geometry.QUADRILATERAL, Family.SERENDIPITY),
    (Degree.BIQUADRATIC, Geometry.QUADRILATERAL, Family.LAGRANGE),
]
SAMPLE_POINTS = [(0.2, 0.3), (1.0 / 3.0, 1.0 / 3.0), (0.05, 0.7)]


@pytest.mark.parametrize("key", BASES)
def test_partition_of_unity(key):
    shape_f = Interpolation2D(*key)
    for eps1, eps2 in SAMPLE_POINTS:
        assert shape_f.functions(eps1, eps2).sum() == pytest.approx(1.0)
        np.testing.assert_allclose(shape_f.gradients(eps1, eps2).sum(axis=1), 0.0, atol=1e-13)


@pytest.mark.parametrize("key", BASES)
def test_kronecker_property_at_nodes(key):
    shape_f = Interpolation2D(*key)
    n = shape_f.node_count
    values = np.array([shape_f.functions(*xy) for xy in shape_f.node_coordinates])
    np.testing.assert_allclose(values, np.eye(n), atol=1e-14)


@pytest.mark.parametrize("key", BASES)
def test_gradients_match_finite_differences(key):
    shape_f = Interpolation2D(*key)
    eps1, eps2, d = 0.21, 0.17, 1e-6
    fd1 = (shape_f.functions(eps1 + d, eps2) - shape_f.functions(eps1 - d, eps2)) / (2 * d)
    fd2 = (shape_f.functions(eps1, eps2 + d) - shape_f.functions(eps1, eps2 - d)) / (2 * d)
    grads = shape_f.gradients(eps1, eps2)
    np.testing.assert_allclose(grads[0], fd1, atol=1e-8)
    np.testing.assert_allclose(grads[1], fd2, atol=1e-8)


def test_tri6_reproduces_quadratic_field():
    shape_f = Interpolation2D(Degree.BIQUADRATIC, Geometry.TRIANGULAR)
    f = lambda x, y: 1.0 + 2.0 * x - y + 3.0 * x * y + 0.5 * y * y
    nodal = np.array([f(*xy) for xy in shape_f.node_coordinates])
    assert shape_f.functions(0.3, 0.2) @ nodal == pytest.approx(f(0.3, 0.2))
    # d/dxi = 2 + 3 y ; d/deta = -1 + 3 x + y
    assert shape_f.gradients(0.3, 0.2)[0] @ nodal == pytest.approx(2.0 + 0.6)
    assert shape_f.gradients(0.3, 0.2)[1] @ nodal == pytest.approx(-1.0 + 0.9 + 0.2)


def test_scalar_accessors_and_bad_index():
    shape_f = Interpolation2D(Degree.BIQUADRATIC, Geometry.TRIANGULAR)
    assert shape_f.function(0.5, 0.0, 3) == pytest.approx(1.0)
    assert shape_f.der1(0.0, 0.0, 0) == pytest.approx(-3.0)
    assert shape_f.der2(0.0, 0.0, 2) == pytest.approx(-1.0)
    with pytest.raises(InvalidIndexError):
        shape_f.function(0.1, 0.1, 6)
    with pytest.raises(InvalidIndexError):
        shape_f.der1(0.1, 0.1, -1)


def test_unsupported_combination():
    with pytest.raises(UnsupportedConfigurationError):
        Interpolation2D(Degree.BIQUADRATIC, Geometry.TRIANGULAR, Family.SERENDIPITY)
    with pytest.raises(UnsupportedConfigurationError):
        Interpolation2D(Degree.LINEAR, Geometry.QUADRILATERAL, Family.SERENDIPITY)
