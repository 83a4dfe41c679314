"""
6-node triangular Mindlin/Reissner plate element (mixed formulation).

Mechanics: Mindlin/Reissner plate, geometrically linear, orthotropic or
isotropic material, biquadratic Lagrange interpolation on a triangle.
Transverse shear couplings are under-integrated against shear locking.

Node numbering (counter-clockwise, mid-edge nodes follow corners):

    2
    |\\
    5  4
    |    \\
    0--3--1

DOFs per node:
    global: ux, uy, uz, rx, ry, rz   (36 per element)
    local:  u3, r1, r2               (18 per element)

Kinematics (z through the thickness, local axes 1, 2 in plane):
    u1 = z * r2,   u2 = -z * r1,   u3 = w

    e11 = h/2 * r2,1              e13 = (w,1 + r2) / 2
    e22 = -h/2 * r1,2             e23 = (w,2 - r1) / 2
    e12 = h/4 * (r2,2 - r1,1)

Strains and stresses are recovered on the top surface z = h/2.

Uncondensed matrix (48 x 48), fields interpolated with the same six shape
functions, blocks of six rows each:

    Q1  Q2  M11  M22  M12  |  w  r1  r2
    0   6   12   18   24   |  30 36  42

The stress-resultant blocks are eliminated by static condensation, leaving
the 18 displacement DOFs.
"""

import logging
from enum import Enum, IntEnum

import numpy as np

from fealib import config
from fealib.elements.base import ElementFormulation, InternalForce
from fealib.elements.geometry import jacobian, physical_gradients
from fealib.elements.interpolation import Degree, Geometry, Interpolation2D
from fealib.elements.quadrature import Dimension, Shape, gauss_points
from fealib.linalg.condensation import condense
from fealib.linalg.dense import (
    get_submatrix,
    invert,
    is_symmetric,
    mirror,
    set_submatrix,
)
from fealib.linalg.transform import TransformDirection, transform, transform_vector
from fealib.materials.properties import Voigt
from fealib.mesh.nodes import LocalDof

logger = logging.getLogger(__name__)

NODES = 6


class PlateSubMatrix(Enum):
    """
    Integrated 6x6 kernels.

    K1 / K4:  int N_i N_j dA
    K2 / K5:  int N_i dN_j/dx1 dA
    K3 / K6:  int N_i dN_j/dx2 dA

    K4-K6 use the reduced shear rule.
    """
    K1 = 1
    K2 = 2
    K3 = 3
    K4 = 4
    K5 = 5
    K6 = 6


_UNDER_INTEGRATED = (PlateSubMatrix.K4, PlateSubMatrix.K5, PlateSubMatrix.K6)


class PlateField(IntEnum):
    """Block position of each interpolated field in the uncondensed matrix."""
    Q1 = 0
    Q2 = 1
    M11 = 2
    M22 = 3
    M12 = 4
    W = 5
    R1 = 6
    R2 = 7


RETAINED = tuple(range(NODES * PlateField.W, NODES * len(PlateField)))


def _block(field):
    return slice(NODES * field, NODES * (field + 1))


class MindlinPlateTri6(ElementFormulation):
    """6-node Mindlin/Reissner plate triangle."""

    element_type = "plate_tri6"
    geometry = Geometry.TRIANGULAR
    n_nodes = NODES
    local_dofs = (LocalDof.U3, LocalDof.R1, LocalDof.R2)
    supported_forces = (
        InternalForce.F13,
        InternalForce.H23,
        InternalForce.T12,
        InternalForce.K22,
        InternalForce.M11,
    )

    def interpolation(self):
        return Interpolation2D(Degree.BIQUADRATIC, self.geometry)

    # -----------------------------------------------------------------
    #  Integration
    # -----------------------------------------------------------------

    def sub_matrix(self, which, xy=None):
        """
        Integrate one 6x6 kernel.

        Parameters
        ----------
        which : PlateSubMatrix
        xy : ndarray, shape (6, 2), optional
            Local node coordinates (computed if omitted).

        Returns
        -------
        k : ndarray, shape (6, 6)
        """
        if xy is None:
            xy = self.local_xy()
        count = (config.SHEAR_INTEGRATION_POINTS if which in _UNDER_INTEGRATED
                 else config.FULL_INTEGRATION_POINTS)
        rule = gauss_points(count, Dimension.TWO, Shape.TRIANGLE)
        shape_f = self.interpolation()

        k = np.zeros((NODES, NODES))
        for wt, (eps1, eps2) in rule:
            N = shape_f.functions(eps1, eps2)
            dN = shape_f.gradients(eps1, eps2)
            J, detJ = jacobian(dN, xy)

            if which in (PlateSubMatrix.K1, PlateSubMatrix.K4):
                k += wt * np.outer(N, N) * detJ
            elif which in (PlateSubMatrix.K2, PlateSubMatrix.K5):
                # detJ * dN/dx1 = dN/deps1 * dx2/deps2 - dN/deps2 * dx2/deps1
                k += wt * np.outer(N, dN[0] * J[1, 1] - dN[1] * J[0, 1])
            else:
                # detJ * dN/dx2 = -dN/deps1 * dx1/deps2 + dN/deps2 * dx1/deps1
                k += wt * np.outer(N, -dN[0] * J[1, 0] + dN[1] * J[0, 0])
        return k

    def uncondensed_stiffness(self):
        """
        Mixed stiffness matrix before static condensation (48 x 48).

        Compliance factors (S in Voigt form, h the thickness, kappa_s the
        shear correction):
            lambda   = -S(13,13) / (kappa_s h)
            beta     = -S(23,23) / (kappa_s h)
            curlPhi  = -12 S(11,11) / h^3
            capLamb  = -12 S(11,22) / h^3
            mu       = -12 S(22,22) / h^3
            kappa    = -12 S(12,12) / h^3
        """
        m = self.material
        h = self.thickness()
        h3 = h ** 3
        ks = config.SHEAR_CORRECTION

        lam = -m.compliance(Voigt.S13, Voigt.S13) / (ks * h)
        beta = -m.compliance(Voigt.S23, Voigt.S23) / (ks * h)
        curl_phi = -12.0 * m.compliance(Voigt.S11, Voigt.S11) / h3
        cap_lamb = -12.0 * m.compliance(Voigt.S11, Voigt.S22) / h3
        mu = -12.0 * m.compliance(Voigt.S22, Voigt.S22) / h3
        kappa = -12.0 * m.compliance(Voigt.S12, Voigt.S12) / h3

        xy = self.local_xy()
        k1, k2, k3, k4, k5, k6 = (self.sub_matrix(s, xy) for s in PlateSubMatrix)

        F = PlateField
        k = np.zeros((NODES * len(F), NODES * len(F)))
        # upper triangle only
        for row, col, block in (
            (F.Q1, F.Q1, lam * k1),
            (F.Q1, F.W, k5),
            (F.Q1, F.R2, k4),
            (F.Q2, F.Q2, beta * k1),
            (F.Q2, F.W, k6),
            (F.Q2, F.R1, -k4),
            (F.M11, F.M11, curl_phi * k1),
            (F.M11, F.M22, cap_lamb * k1),
            (F.M11, F.R2, k2),
            (F.M22, F.M22, mu * k1),
            (F.M22, F.R1, -k3),
            (F.M12, F.M12, kappa * k1),
            (F.M12, F.R1, -k2),
            (F.M12, F.R2, k3),
        ):
            k[_block(row), _block(col)] = block
        return mirror(k, source="upper")

    # -----------------------------------------------------------------
    #  Element matrices
    # -----------------------------------------------------------------

    def stiffness_matrix(self):
        k_local = condense(self.uncondensed_stiffness(), RETAINED)
        k_local = self.to_node_major(k_local, len(self.local_dofs))
        logger.debug("%r: condensed stiffness %s", self, k_local.shape)
        return transform(k_local, self.transformation(), TransformDirection.TO_GLOBAL)

    def mass_matrix(self):
        """
        Consistent mass: I0 = rho h on w, I2 = rho h^3 / 12 on r1 and r2.
        """
        rho = self.material.density
        h = self.thickness()
        i0 = rho * h
        i2 = rho * h ** 3 / 12.0

        k1 = self.sub_matrix(PlateSubMatrix.K1)
        m_local = np.zeros((3 * NODES, 3 * NODES))
        for j, factor in enumerate((i0, i2, i2)):
            m_local[_block(j), _block(j)] = factor * k1

        m_local = self.to_node_major(m_local, len(self.local_dofs))
        return transform(m_local, self.transformation(), TransformDirection.TO_GLOBAL)

    def g_operator(self, eps1, eps2, xy=None):
        """
        G operator (2 x 18): rows dw/dx1, dw/dx2 on the u3 column of each node.
        """
        if xy is None:
            xy = self.local_xy()
        dN = self.interpolation().gradients(eps1, eps2)
        J, detJ = jacobian(dN, xy)
        grads = physical_gradients(dN, J, detJ)

        gop = np.zeros((2, 3 * NODES))
        for i in range(NODES):
            gop = set_submatrix(gop, grads[:, i:i + 1], 0, 3 * i)
        return gop, detJ

    def initial_stress(self, eps1, eps2):
        """In-plane 2x2 stress [[s11, s12], [s12, s22]] recovered at a point."""
        return self.stress(eps1, eps2)[:2, :2]

    def stability_matrix(self, initial_stress=None):
        """
        Geometric stiffness int h G^t S0 G dA (7-point rule).

        Parameters
        ----------
        initial_stress : array_like, shape (2, 2), optional
            Prescribed uniform in-plane stress. If omitted, the stress
            recovered from the current unknowns is used at each point.
        """
        s0 = None
        if initial_stress is not None:
            s0 = np.asarray(initial_stress, dtype=np.float64)
            if s0.shape != (2, 2) or not is_symmetric(s0):
                raise ValueError(
                    f"initial_stress must be a symmetric 2x2 array, got {s0.shape}"
                )

        h = self.thickness()
        xy = self.local_xy()
        rule = gauss_points(config.FULL_INTEGRATION_POINTS, Dimension.TWO, Shape.TRIANGLE)

        g_local = np.zeros((3 * NODES, 3 * NODES))
        for wt, (eps1, eps2) in rule:
            gop, detJ = self.g_operator(eps1, eps2, xy)
            sm = s0 if s0 is not None else self.initial_stress(eps1, eps2)
            g_local += wt * h * detJ * (gop.T @ sm @ gop)

        return transform(g_local, self.transformation(), TransformDirection.TO_GLOBAL)

    def temperature_load_vector(self):
        # uniform temperature only: no through-thickness gradient, no load
        t_local = np.zeros(3 * NODES)
        return transform_vector(t_local, self.transformation(), TransformDirection.TO_GLOBAL)

    # -----------------------------------------------------------------
    #  Field recovery
    # -----------------------------------------------------------------

    def _kinematics(self, eps1, eps2):
        u = self.local_unknowns()          # columns: u3, r1, r2
        shape_f = self.interpolation()
        N = shape_f.functions(eps1, eps2)
        dN = shape_f.gradients(eps1, eps2)
        J, detJ = jacobian(dN, self.local_xy())
        grads = physical_gradients(dN, J, detJ)

        w_1, w_2 = grads @ u[:, 0]
        r1_1, r1_2 = grads @ u[:, 1]
        r2_1, r2_2 = grads @ u[:, 2]
        return {
            "w": N @ u[:, 0], "r1": N @ u[:, 1], "r2": N @ u[:, 2],
            "w_1": w_1, "w_2": w_2,
            "r1_1": r1_1, "r1_2": r1_2,
            "r2_1": r2_1, "r2_2": r2_2,
        }

    def displacement(self, eps1, eps2):
        kin = self._kinematics(eps1, eps2)
        disp = np.zeros(6)
        disp[LocalDof.U3] = kin["w"]
        disp[LocalDof.R1] = kin["r1"]
        disp[LocalDof.R2] = kin["r2"]
        return disp

    def strain(self, eps1, eps2):
        kin = self._kinematics(eps1, eps2)
        h = self.thickness()

        strain = np.zeros((3, 3))
        strain[0, 0] = h / 2.0 * kin["r2_1"]
        strain[1, 1] = -h / 2.0 * kin["r1_2"]
        strain[0, 1] = h / 4.0 * (kin["r2_2"] - kin["r1_1"])
        strain[0, 2] = (kin["w_1"] + kin["r2"]) / 2.0
        strain[1, 2] = (kin["w_2"] - kin["r1"]) / 2.0
        return mirror(strain, source="upper")

    def stress(self, eps1, eps2):
        """
        sigma = C (eps - phi * theta), phi the expansion vector with the
        33 component removed, theta the summed element temperature.
        """
        c = self.material.get_c()
        phi = self.material.get_alpha()
        phi[Voigt.S33] = 0.0
        theta = self.temperature()

        e = self.strain(eps1, eps2)
        strain_v = np.zeros(6)
        strain_v[Voigt.S11] = e[0, 0]
        strain_v[Voigt.S22] = e[1, 1]
        strain_v[Voigt.S33] = e[2, 2]
        strain_v[Voigt.S12] = 2.0 * e[0, 1]
        strain_v[Voigt.S13] = 2.0 * e[0, 2]
        strain_v[Voigt.S23] = 2.0 * e[1, 2]

        s = c @ (strain_v - phi * theta)

        stress = np.zeros((3, 3))
        stress[0, 0] = s[Voigt.S11]
        stress[1, 1] = s[Voigt.S22]
        stress[2, 2] = s[Voigt.S33]
        stress[0, 1] = s[Voigt.S12]
        stress[0, 2] = s[Voigt.S13]
        stress[1, 2] = s[Voigt.S23]
        return mirror(stress, source="upper")

    def internal_force(self, force_type, eps1, eps2):
        """
        Stress resultant at (eps1, eps2).

        F13 = kappa_s h (w,1 + r2) / S(13,13)
        H23 = kappa_s h (w,2 - r1) / S(23,23)
        T12 = h^3 (r2,2 - r1,1) / (12 S(12,12))
        K22, M11 = components 0, 1 of inv(S[0:2, 0:2]) h^3/12 [r2,1, -r1,2]
        """
        self._check_force(force_type)
        m = self.material
        h = self.thickness()
        ks = config.SHEAR_CORRECTION
        kin = self._kinematics(eps1, eps2)

        if force_type is InternalForce.F13:
            return ks * h * (kin["w_1"] + kin["r2"]) / m.compliance(Voigt.S13, Voigt.S13)
        if force_type is InternalForce.H23:
            return ks * h * (kin["w_2"] - kin["r1"]) / m.compliance(Voigt.S23, Voigt.S23)
        if force_type is InternalForce.T12:
            return h ** 3 * (kin["r2_2"] - kin["r1_1"]) / (12.0 * m.compliance(Voigt.S12, Voigt.S12))

        k = invert(get_submatrix(m.get_s(), (Voigt.S11, Voigt.S22), (Voigt.S11, Voigt.S22)))
        x = h ** 3 / 12.0 * np.array([kin["r2_1"], -kin["r1_2"]])
        moments = k @ x
        if force_type is InternalForce.K22:
            return float(moments[0])
        return float(moments[1])
