"""
Capability interface shared by all element formulations.

Every element type implements :class:`ElementFormulation`. The base class
supplies the steps that are identical across element types:

    1. gather the global unknowns of all nodes (node order)
    2. build the element frame and rotate the unknowns into it
    3. evaluate the Jacobian / geometry approximations at a natural point
    4. reorder by-quantity matrices into the node-major DOF layout

Subclasses provide their interpolation, integration scheme and the
assembly of their sub-matrices. No working matrix is stored on the
instance; each call builds what it needs and returns it.
"""

from abc import ABC, abstractmethod
from enum import Enum

import numpy as np

from fealib.elements import geometry as geo
from fealib.errors import InvalidIndexError
from fealib.linalg.transform import TransformDirection, transform_vector
from fealib.loads import total_temperature
from fealib.mesh.nodes import CoordinateSystem, GlobalDof
from fealib.sections import SectionDimension


class InternalForce(Enum):
    """Internal-force tags recoverable by element types."""
    F13 = "F13"   # transverse shear force, 13
    H23 = "H23"   # transverse shear force, 23
    T12 = "T12"   # twisting moment
    K22 = "K22"   # bending moment (first component)
    M11 = "M11"   # bending moment (second component)
    N11 = "N11"   # membrane force, 11
    N22 = "N22"   # membrane force, 22
    N12 = "N12"   # membrane shear force


def node_major_permutation(n_nodes, n_fields):
    """
    Permutation from a by-quantity layout to a by-node layout.

    By quantity:  [f0 of nodes 0..n-1, f1 of nodes 0..n-1, ...]
    By node:      [f0..fm of node 0, f0..fm of node 1, ...]

    Returns
    -------
    perm : ndarray of int
        ``by_node = by_quantity[perm]`` (and ``M[np.ix_(perm, perm)]`` for
        matrices).
    """
    perm = np.empty(n_nodes * n_fields, dtype=np.int64)
    for k in range(n_nodes):
        for j in range(n_fields):
            perm[n_fields * k + j] = n_nodes * j + k
    return perm


class ElementFormulation(ABC):
    """
    Base class for element formulations.

    Parameters
    ----------
    nodes : sequence of Node
        Element nodes in the order documented by the element type.
    material : Material
    section : Section
    temperature_loads : sequence of ElementTemperature, optional

    Raises
    ------
    InvalidIndexError
        If the node count does not match the element type.
    """

    element_type = None
    geometry = None
    n_nodes = None
    local_dofs = ()
    supported_forces = ()

    def __init__(self, nodes, material, section, temperature_loads=()):
        nodes = tuple(nodes)
        if len(nodes) != self.n_nodes:
            raise InvalidIndexError(
                f"{type(self).__name__} requires {self.n_nodes} nodes, got {len(nodes)}"
            )
        self._nodes = nodes
        self.material = material
        self.section = section
        self.temperature_loads = tuple(temperature_loads)

    def __repr__(self):
        ids = ", ".join(str(n.id) for n in self._nodes)
        return f"{type(self).__name__}(nodes=[{ids}])"

    @property
    def nodes(self):
        return self._nodes

    def with_nodes(self, nodes):
        """Same element configuration on a new set of node snapshots."""
        return type(self)(nodes, self.material, self.section, self.temperature_loads)

    def dof_array(self, coordinate_system):
        """Per-node DOF order for the global or the element-local system."""
        if coordinate_system is CoordinateSystem.GLOBAL:
            return tuple(GlobalDof)
        if coordinate_system is CoordinateSystem.LOCAL:
            return tuple(self.local_dofs)
        raise InvalidIndexError(
            f"Illegal coordinate system {coordinate_system!r} for dof array of element"
        )

    # -----------------------------------------------------------------
    #  Shared data
    # -----------------------------------------------------------------

    def thickness(self):
        return self.section.get_dimension(SectionDimension.THICKNESS)

    def temperature(self):
        return total_temperature(self.temperature_loads)

    def positions(self):
        return np.array([n.position for n in self._nodes])

    def transformation(self):
        """Global-to-local transformation T for this element's DOFs."""
        R = geo.local_frame(self.positions())
        return geo.frame_transformation(R, self.n_nodes, self.local_dofs)

    def local_xy(self):
        positions = self.positions()
        return geo.local_coordinates(positions, geo.local_frame(positions))

    def global_unknowns(self):
        """Concatenated global-frame unknowns, node-major (6 per node)."""
        return np.concatenate([n.get_unknown(CoordinateSystem.GLOBAL) for n in self._nodes])

    def local_unknowns(self):
        """
        Element unknowns in the local frame, shape (n_nodes, n_local_dofs).

        Column j holds local DOF ``local_dofs[j]`` of every node.
        """
        u = transform_vector(self.global_unknowns(), self.transformation(),
                             TransformDirection.TO_LOCAL)
        return u.reshape(self.n_nodes, len(self.local_dofs))

    def jacobian(self, eps1, eps2, xy=None):
        """Jacobian and its determinant at (eps1, eps2)."""
        if xy is None:
            xy = self.local_xy()
        dN = self.interpolation().gradients(eps1, eps2)
        return geo.jacobian(dN, xy)

    def geo_approximation(self, eps1, eps2, i, j):
        """
        Derivative of local coordinate ``i`` (0: x1, 1: x2) with respect to
        natural coordinate ``j`` (1: eps1, 2: eps2).
        """
        if i not in (0, 1) or j not in (1, 2):
            raise InvalidIndexError(
                f"Illegal geometry approximation index ({i}, {j})"
            )
        J, _ = self.jacobian(eps1, eps2)
        return float(J[j - 1, i])

    def to_node_major(self, m, n_fields):
        """Reorder a by-quantity square matrix into the node-major layout."""
        perm = node_major_permutation(self.n_nodes, n_fields)
        return m[np.ix_(perm, perm)]

    def _check_force(self, force_type):
        if force_type not in self.supported_forces:
            raise InvalidIndexError(
                f"Illegal internal force {force_type!r} for {type(self).__name__}. "
                f"Supported: {[f.name for f in self.supported_forces]}"
            )

    # -----------------------------------------------------------------
    #  Element contract
    # -----------------------------------------------------------------

    @abstractmethod
    def interpolation(self):
        """Shape-function set of the element."""

    @abstractmethod
    def stiffness_matrix(self):
        """Global stiffness matrix (6 * n_nodes square)."""

    @abstractmethod
    def mass_matrix(self):
        """Global consistent mass matrix."""

    @abstractmethod
    def stability_matrix(self, initial_stress=None):
        """Global stability (geometric stiffness) matrix."""

    @abstractmethod
    def temperature_load_vector(self):
        """Global thermal load vector."""

    @abstractmethod
    def displacement(self, eps1, eps2):
        """Local displacement vector (u1, u2, u3, r1, r2, r3) at a natural point."""

    @abstractmethod
    def strain(self, eps1, eps2):
        """Strain tensor (3x3) at a natural point."""

    @abstractmethod
    def stress(self, eps1, eps2):
        """Cauchy stress tensor (3x3) at a natural point."""

    @abstractmethod
    def internal_force(self, force_type, eps1, eps2):
        """Scalar internal force of the requested type at a natural point."""
