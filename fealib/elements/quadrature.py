"""
Gauss quadrature rules for line, quadrilateral, triangular and hexahedral
reference domains.

Reference domains:
    LINE            [-1, 1]
    QUADRILATERAL   [-1, 1] x [-1, 1]
    HEXAHEDRON      [-1, 1] x [-1, 1] x [-1, 1]
    TRIANGLE        vertices (0,0), (1,0), (0,1) with area 1/2

All triangle rules use the parametric coordinates (xi, eta) where the
area coordinates are:
    L1 = 1 - xi - eta
    L2 = xi
    L3 = eta

Triangle weights include the 1/2 factor (area of reference triangle), so
that:

    integral over ref triangle of f dA = sum_i w_i * f(xi_i, eta_i)

Point numbering of the 7-point triangle rule is fixed:

    0       centroid
    1, 2, 3 vertex-near orbit  (a2, b2, b2) and permutations
    4, 5, 6 edge-near orbit    (a1, b1, b1) and permutations

The 4-point rule is points 0-3 of the 7-point rule with weights re-derived
so that quadratic polynomials are integrated exactly. Under-integrated
terms therefore sample a strict subset of the full-integration points.

References:
    - Dunavant, D.A. "High degree efficient symmetrical Gaussian
      quadrature rules for the triangle." IJNME, 21(6), 1985.
    - Hammer, P.C. et al. "Numerical integration over simplexes
      and cones." Math Tables Aids Comput., 10(55), 1956.
"""

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.polynomial.legendre import leggauss

from fealib import config
from fealib.errors import InvalidIndexError, UnsupportedConfigurationError


class Dimension(Enum):
    ONE = 1
    TWO = 2
    THREE = 3


class Shape(Enum):
    LINE = "line"
    QUADRILATERAL = "quadrilateral"
    TRIANGLE = "triangle"
    HEXAHEDRON = "hexahedron"


_SHAPE_DIMENSION = {
    Shape.LINE: Dimension.ONE,
    Shape.QUADRILATERAL: Dimension.TWO,
    Shape.TRIANGLE: Dimension.TWO,
    Shape.HEXAHEDRON: Dimension.THREE,
}

TRIANGLE_POINT_COUNTS = (1, 3, 4, 6, 7, 12)


@dataclass(frozen=True)
class QuadratureRule:
    """
    Ordered, 0-indexed sequence of (weight, natural coordinates) pairs.

    Attributes
    ----------
    points : ndarray, shape (n, dim)
        Natural coordinates of the integration points.
    weights : ndarray, shape (n,)
        Integration weights.
    shape : Shape
        Reference domain the rule belongs to.
    """
    points: np.ndarray
    weights: np.ndarray
    shape: Shape

    def __len__(self):
        return self.weights.shape[0]

    def __iter__(self):
        for w, p in zip(self.weights, self.points):
            yield float(w), tuple(float(c) for c in p)

    def _check(self, i):
        if not 0 <= i < len(self):
            raise InvalidIndexError(
                f"Gauss point {i} out of range for {len(self)}-point rule"
            )

    def weight(self, i):
        self._check(i)
        return float(self.weights[i])

    def support(self, i):
        """Natural coordinates of point ``i`` as a tuple."""
        self._check(i)
        return tuple(float(c) for c in self.points[i])

    def is_subset_of(self, other, tol=1e-12):
        """True if every point of this rule is also a point of ``other``."""
        if self.shape is not other.shape or len(self) > len(other):
            return False
        for p in self.points:
            if not np.any(np.all(np.abs(other.points - p) <= tol, axis=1)):
                return False
        return True


# -----------------------------------------------------------------
#  Triangle rules
# -----------------------------------------------------------------

def gauss_triangle_1pt():
    """
    1-point Gauss quadrature for triangle (exact for degree 1 polynomials).

    The single point is at the centroid (1/3, 1/3).
    Weight = 1/2 (area of reference triangle).

    Returns
    -------
    points : ndarray, shape (1, 2)
        Quadrature points in (xi, eta) coordinates.
    weights : ndarray, shape (1,)
        Quadrature weights (include 1/2 factor).
    """
    points = np.array([[1.0 / 3.0, 1.0 / 3.0]])
    weights = np.array([0.5])
    return points, weights


def gauss_triangle_3pt():
    """
    3-point Gauss quadrature for triangle (exact for degree 2 polynomials).

    Interior points (2/3, 1/6, 1/6) in area coordinates and permutations,
    i.e. (xi, eta) = (1/6, 1/6), (2/3, 1/6), (1/6, 2/3).
    Each weight = 1/6 (= (1/3) * (1/2)).

    Returns
    -------
    points : ndarray, shape (3, 2)
    weights : ndarray, shape (3,)
    """
    points = np.array([
        [1.0 / 6.0, 1.0 / 6.0],
        [2.0 / 3.0, 1.0 / 6.0],
        [1.0 / 6.0, 2.0 / 3.0],
    ])
    weights = np.array([1.0 / 6.0, 1.0 / 6.0, 1.0 / 6.0])
    return points, weights


def _orbit(a, b):
    # (L1, L2, L3) = (a, b, b), (b, a, b), (b, b, a) -> (xi, eta) = (L2, L3)
    return [[b, b], [a, b], [b, a]]


# Hammer-Stroud / Dunavant degree-5 orbits
_A_VERTEX = 0.797426985353087
_B_VERTEX = 0.101286507323456  # (1 - a) / 2
_W_VERTEX = 0.125939180544827
_A_EDGE = 0.059715871789770
_B_EDGE = 0.470142064105115    # (1 - a) / 2
_W_EDGE = 0.132394152788506
_W_CENTROID = 0.225


def gauss_triangle_4pt():
    """
    4-point nested quadrature for triangle (exact for degree 2 polynomials).

    Centroid plus the vertex-near orbit of the 7-point rule. With area
    normalised to one, symmetry leaves two conditions:

        w_c + 3 w_o = 1                                  (degree 0)
        w_c / 9 + w_o (a^2 + 2 b^2) = 1/6                (integral of L1^2)

    giving w_o = (1/6 - 1/9) / (a^2 + 2 b^2 - 1/3). Both weights are
    positive for the vertex-near orbit.

    Returns
    -------
    points : ndarray, shape (4, 2)
        Identical to points 0-3 of :func:`gauss_triangle_7pt`.
    weights : ndarray, shape (4,)
        Quadrature weights (include 1/2 factor).
    """
    a, b = _A_VERTEX, _B_VERTEX
    w_o = (1.0 / 6.0 - 1.0 / 9.0) / (a * a + 2.0 * b * b - 1.0 / 3.0)
    w_c = 1.0 - 3.0 * w_o

    points = np.array([[1.0 / 3.0, 1.0 / 3.0]] + _orbit(a, b))
    weights = np.array([w_c, w_o, w_o, w_o]) * 0.5
    return points, weights


def gauss_triangle_6pt():
    """
    6-point Gauss quadrature for triangle (exact for degree 4 polynomials).

    Two orbits from Dunavant (1985):
        a = 0.108103018168070, w = 0.223381589678011
        a = 0.816847572980459, w = 0.109951743655322

    Returns
    -------
    points : ndarray, shape (6, 2)
    weights : ndarray, shape (6,)
    """
    a1, b1, w1 = 0.108103018168070, 0.445948490915965, 0.223381589678011
    a2, b2, w2 = 0.816847572980459, 0.091576213509771, 0.109951743655322
    points = np.array(_orbit(a1, b1) + _orbit(a2, b2))
    weights = np.array([w1] * 3 + [w2] * 3) * 0.5
    return points, weights


def gauss_triangle_7pt():
    """
    7-point Gauss quadrature for triangle (exact for degree 5 polynomials).

    Uses the Hammer-Stroud rule with 3 symmetry orbits:
        - 1 point at centroid                  (point 0)
        - 3 points on the vertex-near orbit    (points 1-3)
        - 3 points on the edge-near orbit      (points 4-6)

    Area coordinates and weights from Dunavant (1985):
        Centroid weight: 0.225
        Vertex orbit: a = 0.797426985353087, w = 0.125939180544827
        Edge orbit:   a = 0.059715871789770, w = 0.132394152788506

    Weights are multiplied by 1/2 for the reference triangle area.

    Returns
    -------
    points : ndarray, shape (7, 2)
        Quadrature points in (xi, eta) coordinates.
    weights : ndarray, shape (7,)
        Quadrature weights (include 1/2 factor).
    """
    points = np.array(
        [[1.0 / 3.0, 1.0 / 3.0]]
        + _orbit(_A_VERTEX, _B_VERTEX)
        + _orbit(_A_EDGE, _B_EDGE)
    )
    weights = np.array(
        [_W_CENTROID] + [_W_VERTEX] * 3 + [_W_EDGE] * 3
    ) * 0.5
    return points, weights


def gauss_triangle_12pt():
    """
    12-point Gauss quadrature for triangle (exact for degree 6 polynomials).

    Dunavant (1985) rule: two 3-point orbits and one 6-point orbit
    (c1, c2, c3) with all permutations.

    Returns
    -------
    points : ndarray, shape (12, 2)
    weights : ndarray, shape (12,)
    """
    a1, b1, w1 = 0.501426509658179, 0.249286745170910, 0.116786275726379
    a2, b2, w2 = 0.873821971016996, 0.063089014491502, 0.050844906370207
    c1, c2, c3 = 0.053145049844817, 0.310352451033784, 0.636502499121399
    w3 = 0.082851075618374

    # six permutations of (L1, L2, L3) = (c1, c2, c3) -> (xi, eta) = (L2, L3)
    perms = [
        [c2, c3], [c3, c2], [c1, c3],
        [c3, c1], [c1, c2], [c2, c1],
    ]
    points = np.array(_orbit(a1, b1) + _orbit(a2, b2) + perms)
    weights = np.array([w1] * 3 + [w2] * 3 + [w3] * 6) * 0.5
    return points, weights


_TRIANGLE_RULES = {
    1: gauss_triangle_1pt,
    3: gauss_triangle_3pt,
    4: gauss_triangle_4pt,
    6: gauss_triangle_6pt,
    7: gauss_triangle_7pt,
    12: gauss_triangle_12pt,
}


# -----------------------------------------------------------------
#  Tensor-product rules
# -----------------------------------------------------------------

def gauss_line(n):
    """n-point Gauss-Legendre rule on [-1, 1]."""
    if not 1 <= n <= config.MAX_LINE_POINTS:
        raise UnsupportedConfigurationError(
            f"Line quadrature supports 1..{config.MAX_LINE_POINTS} points, got {n}"
        )
    pts, wts = leggauss(n)
    return pts.reshape(-1, 1), wts


def _per_axis(count, dim, shape):
    n = int(round(count ** (1.0 / dim)))
    for cand in (n - 1, n, n + 1):
        if cand >= 1 and cand ** dim == count:
            return cand
    raise UnsupportedConfigurationError(
        f"{shape.value} quadrature requires a perfect {'square' if dim == 2 else 'cube'} "
        f"point count, got {count}"
    )


def gauss_quadrilateral(count):
    """Tensor-product rule with ``count = n^2`` points on [-1, 1]^2."""
    n = _per_axis(count, 2, Shape.QUADRILATERAL)
    pts_1d, wts_1d = gauss_line(n)
    pts_1d = pts_1d[:, 0]
    points = np.array([[x, y] for x in pts_1d for y in pts_1d])
    weights = np.array([wx * wy for wx in wts_1d for wy in wts_1d])
    return points, weights


def gauss_hexahedron(count):
    """Tensor-product rule with ``count = n^3`` points on [-1, 1]^3."""
    n = _per_axis(count, 3, Shape.HEXAHEDRON)
    pts_1d, wts_1d = gauss_line(n)
    pts_1d = pts_1d[:, 0]
    points = np.array([[x, y, z] for x in pts_1d for y in pts_1d for z in pts_1d])
    weights = np.array([wx * wy * wz for wx in wts_1d for wy in wts_1d for wz in wts_1d])
    return points, weights


# -----------------------------------------------------------------
#  Dispatcher
# -----------------------------------------------------------------

def gauss_points(count, dimension, shape):
    """
    Quadrature rule for a reference shape and requested point count.

    Parameters
    ----------
    count : int
        Number of integration points.
    dimension : Dimension
        Spatial dimensionality; must match the shape.
    shape : Shape
        Reference domain.

    Returns
    -------
    rule : QuadratureRule

    Raises
    ------
    UnsupportedConfigurationError
        If the shape/dimension pair is inconsistent or ``count`` has no
        rule for the shape. No approximate rule is substituted.
    """
    if not isinstance(shape, Shape) or not isinstance(dimension, Dimension):
        raise UnsupportedConfigurationError(
            f"Unknown quadrature configuration: shape={shape!r}, dimension={dimension!r}"
        )
    if _SHAPE_DIMENSION[shape] is not dimension:
        raise UnsupportedConfigurationError(
            f"{shape.value} quadrature is {_SHAPE_DIMENSION[shape].value}-dimensional, "
            f"requested {dimension.value}-dimensional"
        )
    if isinstance(count, bool) or not isinstance(count, (int, np.integer)) or count < 1:
        raise UnsupportedConfigurationError(
            f"Point count must be a positive integer, got {count!r}"
        )

    if shape is Shape.TRIANGLE:
        if count not in _TRIANGLE_RULES:
            raise UnsupportedConfigurationError(
                f"Triangle quadrature supports {TRIANGLE_POINT_COUNTS} points, got {count}"
            )
        points, weights = _TRIANGLE_RULES[count]()
    elif shape is Shape.LINE:
        points, weights = gauss_line(count)
    elif shape is Shape.QUADRILATERAL:
        points, weights = gauss_quadrilateral(count)
    else:
        points, weights = gauss_hexahedron(count)

    return QuadratureRule(points=points, weights=weights, shape=shape)


def reference_measure(shape):
    """Length / area / volume of a reference domain (sum of weights)."""
    return {
        Shape.LINE: 2.0,
        Shape.QUADRILATERAL: 4.0,
        Shape.TRIANGLE: 0.5,
        Shape.HEXAHEDRON: 8.0,
    }[shape]


def triangle_monomial_integral(p, q):
    """Exact integral of xi^p * eta^q over the reference triangle."""
    return math.factorial(p) * math.factorial(q) / math.factorial(p + q + 2)
