"""
fealib - Finite element formulation core

Element-level building blocks for shell/plate structural analysis: a dense
linear-algebra kernel, Gauss quadrature and isoparametric interpolation
providers, and element formulations that return global stiffness, mass and
stability matrices and recover displacement, strain, stress and internal
forces at natural coordinates.

Element library:
    - MindlinPlateTri6: 6-node Mindlin/Reissner plate triangle (mixed,
      statically condensed)
    - MembraneTri6: 6-node plane-stress membrane triangle

Global DOFs per node: ux, uy, uz, rx, ry, rz
"""

__version__ = "0.1.0"

from .errors import (
    FEAError,
    DimensionMismatchError,
    SingularMatrixError,
    DegenerateGeometryError,
    InvalidIndexError,
    UnsupportedConfigurationError,
)
from .mesh.nodes import Node, CoordinateSystem, GlobalDof, LocalDof
from .materials.properties import Material, Voigt
from .sections import Section, SectionDimension
from .loads import ElementTemperature
from .elements.base import ElementFormulation, InternalForce
from .elements.plate_tri6 import MindlinPlateTri6
from .elements.membrane_tri6 import MembraneTri6
from .elements.library import ELEMENT_TYPES, create_element
