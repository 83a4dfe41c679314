"""
Isoparametric shape functions for 2D reference elements.

Triangular geometry (parametric coordinates (xi, eta), area coordinates
L1 = 1 - xi - eta, L2 = xi, L3 = eta):

    2
    |\\
    5  4
    |    \\
    0--3--1

    LINEAR (3 nodes):        N0 = L1,  N1 = L2,  N2 = L3
    BIQUADRATIC (6 nodes):   N0 = L1 * (2*L1 - 1)
                             N1 = L2 * (2*L2 - 1)
                             N2 = L3 * (2*L3 - 1)
                             N3 = 4 * L1 * L2
                             N4 = 4 * L2 * L3
                             N5 = 4 * L3 * L1

Quadrilateral geometry (xi, eta in [-1, 1]):

    3--6--2
    |     |
    7  8  5
    |     |
    0--4--1

    LINEAR (4 nodes):                     bilinear Lagrange
    BIQUADRATIC SERENDIPITY (8 nodes):    nodes 0-7
    BIQUADRATIC LAGRANGE (9 nodes):       nodes 0-8, tensor product

Derivatives are returned with respect to the natural coordinates; the
element code maps them to physical coordinates through the Jacobian.
"""

from enum import Enum

import numpy as np

from fealib.errors import InvalidIndexError, UnsupportedConfigurationError


class Degree(Enum):
    LINEAR = 1
    BIQUADRATIC = 2


class Geometry(Enum):
    TRIANGULAR = "triangular"
    QUADRILATERAL = "quadrilateral"


class Family(Enum):
    LAGRANGE = "lagrange"
    SERENDIPITY = "serendipity"


# -----------------------------------------------------------------
#  Triangles
# -----------------------------------------------------------------

def shape_functions_tri3(xi, eta):
    """
    Evaluate Tri3 shape functions at parametric point (xi, eta).

    Returns
    -------
    N : ndarray, shape (3,)
        Shape function values [N0, N1, N2].
    """
    return np.array([1.0 - xi - eta, xi, eta])


def shape_gradients_tri3(xi, eta):
    """Tri3 gradients in parametric space (constant), shape (2, 3)."""
    return np.array([
        [-1.0, 1.0, 0.0],
        [-1.0, 0.0, 1.0],
    ])


def shape_functions_tri6(xi, eta):
    """
    Evaluate Tri6 shape functions at parametric point (xi, eta).

    Parameters
    ----------
    xi : float
        First parametric coordinate.
    eta : float
        Second parametric coordinate.

    Returns
    -------
    N : ndarray, shape (6,)
        Shape function values [N0, N1, N2, N3, N4, N5].
    """
    L1 = 1.0 - xi - eta
    L2 = xi
    L3 = eta

    N = np.array([
        L1 * (2.0 * L1 - 1.0),  # N0 - corner (0,0)
        L2 * (2.0 * L2 - 1.0),  # N1 - corner (1,0)
        L3 * (2.0 * L3 - 1.0),  # N2 - corner (0,1)
        4.0 * L1 * L2,          # N3 - mid-edge 0-1
        4.0 * L2 * L3,          # N4 - mid-edge 1-2
        4.0 * L3 * L1,          # N5 - mid-edge 2-0
    ])
    return N


def shape_gradients_tri6(xi, eta):
    """
    Evaluate Tri6 shape function gradients in parametric space.

    Returns
    -------
    dN_dxi : ndarray, shape (2, 6)
        dN_dxi[0, :] = dN_i/d(xi), dN_dxi[1, :] = dN_i/d(eta).
    """
    L1 = 1.0 - xi - eta
    L2 = xi
    L3 = eta

    # dL1/dxi = -1,  dL1/deta = -1
    # dL2/dxi =  1,  dL2/deta =  0
    # dL3/dxi =  0,  dL3/deta =  1
    dN_dxi = np.zeros((2, 6))

    dN_dxi[0, 0] = -(4.0 * L1 - 1.0)
    dN_dxi[1, 0] = -(4.0 * L1 - 1.0)

    dN_dxi[0, 1] = 4.0 * L2 - 1.0
    dN_dxi[1, 1] = 0.0

    dN_dxi[0, 2] = 0.0
    dN_dxi[1, 2] = 4.0 * L3 - 1.0

    dN_dxi[0, 3] = 4.0 * (L1 - L2)
    dN_dxi[1, 3] = -4.0 * L2

    dN_dxi[0, 4] = 4.0 * L3
    dN_dxi[1, 4] = 4.0 * L2

    dN_dxi[0, 5] = -4.0 * L3
    dN_dxi[1, 5] = 4.0 * (L1 - L3)

    return dN_dxi


# -----------------------------------------------------------------
#  Quadrilaterals
# -----------------------------------------------------------------

_QUAD_CORNERS = np.array([[-1.0, -1.0], [1.0, -1.0], [1.0, 1.0], [-1.0, 1.0]])
_QUAD_MIDSIDES = np.array([[0.0, -1.0], [1.0, 0.0], [0.0, 1.0], [-1.0, 0.0]])


def shape_functions_quad4(xi, eta):
    xa, ea = _QUAD_CORNERS[:, 0], _QUAD_CORNERS[:, 1]
    return 0.25 * (1.0 + xa * xi) * (1.0 + ea * eta)


def shape_gradients_quad4(xi, eta):
    xa, ea = _QUAD_CORNERS[:, 0], _QUAD_CORNERS[:, 1]
    return np.vstack((
        0.25 * xa * (1.0 + ea * eta),
        0.25 * ea * (1.0 + xa * xi),
    ))


def shape_functions_quad8(xi, eta):
    """Serendipity 8-node quadrilateral."""
    N = np.zeros(8)
    for a, (xa, ea) in enumerate(_QUAD_CORNERS):
        N[a] = 0.25 * (1.0 + xa * xi) * (1.0 + ea * eta) * (xa * xi + ea * eta - 1.0)
    for a, (xa, ea) in enumerate(_QUAD_MIDSIDES):
        if xa == 0.0:
            N[4 + a] = 0.5 * (1.0 - xi * xi) * (1.0 + ea * eta)
        else:
            N[4 + a] = 0.5 * (1.0 + xa * xi) * (1.0 - eta * eta)
    return N


def shape_gradients_quad8(xi, eta):
    dN = np.zeros((2, 8))
    for a, (xa, ea) in enumerate(_QUAD_CORNERS):
        dN[0, a] = 0.25 * xa * (1.0 + ea * eta) * (2.0 * xa * xi + ea * eta)
        dN[1, a] = 0.25 * ea * (1.0 + xa * xi) * (xa * xi + 2.0 * ea * eta)
    for a, (xa, ea) in enumerate(_QUAD_MIDSIDES):
        if xa == 0.0:
            dN[0, 4 + a] = -xi * (1.0 + ea * eta)
            dN[1, 4 + a] = 0.5 * ea * (1.0 - xi * xi)
        else:
            dN[0, 4 + a] = 0.5 * xa * (1.0 - eta * eta)
            dN[1, 4 + a] = -eta * (1.0 + xa * xi)
    return dN


def _lagrange_1d(s):
    # nodes at -1, 0, 1
    return np.array([0.5 * s * (s - 1.0), 1.0 - s * s, 0.5 * s * (s + 1.0)])


def _lagrange_1d_der(s):
    return np.array([s - 0.5, -2.0 * s, s + 0.5])


# node a -> (index along xi, index along eta) into [-1, 0, 1]
_QUAD9_INDEX = ((0, 0), (2, 0), (2, 2), (0, 2), (1, 0), (2, 1), (1, 2), (0, 1), (1, 1))


def shape_functions_quad9(xi, eta):
    """Lagrange 9-node quadrilateral (tensor product of 1D quadratics)."""
    lx, ly = _lagrange_1d(xi), _lagrange_1d(eta)
    return np.array([lx[i] * ly[j] for i, j in _QUAD9_INDEX])


def shape_gradients_quad9(xi, eta):
    lx, ly = _lagrange_1d(xi), _lagrange_1d(eta)
    dx, dy = _lagrange_1d_der(xi), _lagrange_1d_der(eta)
    return np.array([
        [dx[i] * ly[j] for i, j in _QUAD9_INDEX],
        [lx[i] * dy[j] for i, j in _QUAD9_INDEX],
    ])


_BASES = {
    (Degree.LINEAR, Geometry.TRIANGULAR, Family.LAGRANGE): (
        3, shape_functions_tri3, shape_gradients_tri3,
        np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]),
    ),
    (Degree.BIQUADRATIC, Geometry.TRIANGULAR, Family.LAGRANGE): (
        6, shape_functions_tri6, shape_gradients_tri6,
        np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0],
                  [0.5, 0.0], [0.5, 0.5], [0.0, 0.5]]),
    ),
    (Degree.LINEAR, Geometry.QUADRILATERAL, Family.LAGRANGE): (
        4, shape_functions_quad4, shape_gradients_quad4, _QUAD_CORNERS,
    ),
    (Degree.BIQUADRATIC, Geometry.QUADRILATERAL, Family.SERENDIPITY): (
        8, shape_functions_quad8, shape_gradients_quad8,
        np.vstack((_QUAD_CORNERS, _QUAD_MIDSIDES)),
    ),
    (Degree.BIQUADRATIC, Geometry.QUADRILATERAL, Family.LAGRANGE): (
        9, shape_functions_quad9, shape_gradients_quad9,
        np.vstack((_QUAD_CORNERS, _QUAD_MIDSIDES, [[0.0, 0.0]])),
    ),
}


class Interpolation2D:
    """
    Shape-function set for a degree / geometry / family combination.

    Stateless apart from the configuration; safe to share or re-create
    per call.

    Parameters
    ----------
    degree : Degree
    geometry : Geometry
    family : Family, optional
        Default ``Family.LAGRANGE``.

    Raises
    ------
    UnsupportedConfigurationError
        If the combination has no defined basis.
    """

    def __init__(self, degree, geometry, family=Family.LAGRANGE):
        key = (degree, geometry, family)
        if key not in _BASES:
            raise UnsupportedConfigurationError(
                f"No {getattr(family, 'value', family)} basis of degree "
                f"{getattr(degree, 'name', degree)} on "
                f"{getattr(geometry, 'value', geometry)} geometry"
            )
        self.degree = degree
        self.geometry = geometry
        self.family = family
        n, self._N, self._dN, coords = _BASES[key]
        self.node_count = n
        self.node_coordinates = coords.copy()

    def __repr__(self):
        return (f"Interpolation2D({self.degree.name}, {self.geometry.name}, "
                f"{self.family.name})")

    def _check_node(self, i):
        if not 0 <= i < self.node_count:
            raise InvalidIndexError(
                f"Node index {i} out of range for {self.node_count}-node "
                f"{self.geometry.value} interpolation"
            )

    def functions(self, eps1, eps2):
        """All shape-function values at (eps1, eps2), shape (n,)."""
        return self._N(eps1, eps2)

    def gradients(self, eps1, eps2):
        """All natural derivatives at (eps1, eps2), shape (2, n)."""
        return self._dN(eps1, eps2)

    def function(self, eps1, eps2, i):
        self._check_node(i)
        return float(self._N(eps1, eps2)[i])

    def der1(self, eps1, eps2, i):
        """dN_i / d eps1."""
        self._check_node(i)
        return float(self._dN(eps1, eps2)[0, i])

    def der2(self, eps1, eps2, i):
        """dN_i / d eps2."""
        self._check_node(i)
        return float(self._dN(eps1, eps2)[1, i])
