"""Quadrature, interpolation and element formulations."""

from .quadrature import (
    Dimension,
    Shape,
    QuadratureRule,
    gauss_points,
    gauss_triangle_1pt,
    gauss_triangle_3pt,
    gauss_triangle_4pt,
    gauss_triangle_6pt,
    gauss_triangle_7pt,
    gauss_triangle_12pt,
)
from .interpolation import Degree, Family, Geometry, Interpolation2D
from .base import ElementFormulation, InternalForce
from .plate_tri6 import MindlinPlateTri6
from .membrane_tri6 import MembraneTri6
from .library import ELEMENT_TYPES, create_element
