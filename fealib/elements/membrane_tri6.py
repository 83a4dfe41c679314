"""
6-node quadratic triangle membrane element (plane stress).

In-plane counterpart of the plate triangle: same node numbering, frame and
interpolation, two local translations per node.

Node numbering (counter-clockwise, mid-edge nodes follow corners):

    2
    |\\
    5  4
    |    \\
    0--3--1

DOFs per node:
    global: ux, uy, uz, rx, ry, rz   (36 per element)
    local:  u1, u2                   (12 per element)

Local DOF ordering: [u1_0, u2_0, u1_1, u2_1, ..., u1_5, u2_5]
"""

import logging

import numpy as np

from fealib import config
from fealib.elements.base import ElementFormulation, InternalForce
from fealib.elements.geometry import jacobian, physical_gradients
from fealib.elements.interpolation import Degree, Geometry, Interpolation2D
from fealib.elements.quadrature import Dimension, Shape, gauss_points
from fealib.linalg.dense import is_symmetric, mirror
from fealib.linalg.transform import TransformDirection, transform, transform_vector
from fealib.mesh.nodes import LocalDof

logger = logging.getLogger(__name__)

NODES = 6
NDOF = 2 * NODES


class MembraneTri6(ElementFormulation):
    """6-node plane-stress membrane triangle."""

    element_type = "membrane_tri6"
    geometry = Geometry.TRIANGULAR
    n_nodes = NODES
    local_dofs = (LocalDof.U1, LocalDof.U2)
    supported_forces = (InternalForce.N11, InternalForce.N22, InternalForce.N12)

    def interpolation(self):
        return Interpolation2D(Degree.BIQUADRATIC, self.geometry)

    def _rule(self):
        return gauss_points(config.FULL_INTEGRATION_POINTS, Dimension.TWO, Shape.TRIANGLE)

    def _gradients(self, eps1, eps2, xy):
        dN = self.interpolation().gradients(eps1, eps2)
        J, detJ = jacobian(dN, xy)
        return physical_gradients(dN, J, detJ), detJ

    def b_matrix(self, eps1, eps2, xy=None):
        """
        Strain-displacement matrix B.

        {e11, e22, gamma12}^T = B @ {u1_0, u2_0, ..., u1_5, u2_5}^T

        B_i = [[dN_i/dx1,     0    ],
               [    0,     dN_i/dx2],
               [dN_i/dx2,  dN_i/dx1]]

        Returns
        -------
        B : ndarray, shape (3, 12)
        detJ : float
        """
        if xy is None:
            xy = self.local_xy()
        dN_dx, detJ = self._gradients(eps1, eps2, xy)

        B = np.zeros((3, NDOF))
        for i in range(NODES):
            col = 2 * i
            B[0, col]     = dN_dx[0, i]
            B[1, col + 1] = dN_dx[1, i]
            B[2, col]     = dN_dx[1, i]
            B[2, col + 1] = dN_dx[0, i]
        return B, detJ

    def stiffness_matrix(self):
        """
        K_e = integral B^T D B h dA, D the plane-stress reduction of S.
        """
        D = self.material.plane_stress_stiffness()
        h = self.thickness()
        xy = self.local_xy()

        k_local = np.zeros((NDOF, NDOF))
        for wt, (eps1, eps2) in self._rule():
            B, detJ = self.b_matrix(eps1, eps2, xy)
            k_local += wt * h * B.T @ D @ B * detJ

        logger.debug("%r: membrane stiffness %s", self, k_local.shape)
        return transform(k_local, self.transformation(), TransformDirection.TO_GLOBAL)

    def mass_matrix(self):
        """
        Consistent mass M_e = rho h integral N^T N dA with the (2, 12)
        interpolation matrix N = [[N0, 0, N1, 0, ...], [0, N0, 0, N1, ...]].
        """
        rho = self.material.density
        h = self.thickness()
        xy = self.local_xy()
        shape_f = self.interpolation()

        m_local = np.zeros((NDOF, NDOF))
        for wt, (eps1, eps2) in self._rule():
            N_vals = shape_f.functions(eps1, eps2)
            _, detJ = self.jacobian(eps1, eps2, xy)

            N_mat = np.zeros((2, NDOF))
            for i in range(NODES):
                N_mat[0, 2 * i]     = N_vals[i]
                N_mat[1, 2 * i + 1] = N_vals[i]

            m_local += wt * rho * h * N_mat.T @ N_mat * detJ

        return transform(m_local, self.transformation(), TransformDirection.TO_GLOBAL)

    def stability_matrix(self, initial_stress=None):
        """
        Geometric stiffness integral h G^T diag(S0, S0) G dA.

        G rows: du1/dx1, du1/dx2, du2/dx1, du2/dx2.
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

        g_local = np.zeros((NDOF, NDOF))
        for wt, (eps1, eps2) in self._rule():
            dN_dx, detJ = self._gradients(eps1, eps2, xy)
            gop = np.zeros((4, NDOF))
            gop[0:2, 0::2] = dN_dx
            gop[2:4, 1::2] = dN_dx

            sm = s0 if s0 is not None else self.stress(eps1, eps2)[:2, :2]
            s_big = np.zeros((4, 4))
            s_big[0:2, 0:2] = sm
            s_big[2:4, 2:4] = sm
            g_local += wt * h * detJ * (gop.T @ s_big @ gop)

        return transform(g_local, self.transformation(), TransformDirection.TO_GLOBAL)

    def temperature_load_vector(self):
        """
        f_th = integral B^T D eps_th h dA,  eps_th = alpha_p * theta.
        """
        theta = self.temperature()
        t_local = np.zeros(NDOF)
        if theta != 0.0:
            D = self.material.plane_stress_stiffness()
            eps_th = self.material.plane_alpha() * theta
            h = self.thickness()
            xy = self.local_xy()
            for wt, (eps1, eps2) in self._rule():
                B, detJ = self.b_matrix(eps1, eps2, xy)
                t_local += wt * h * B.T @ D @ eps_th * detJ

        return transform_vector(t_local, self.transformation(), TransformDirection.TO_GLOBAL)

    # -----------------------------------------------------------------
    #  Field recovery
    # -----------------------------------------------------------------

    def displacement(self, eps1, eps2):
        N = self.interpolation().functions(eps1, eps2)
        u = self.local_unknowns()          # columns: u1, u2
        disp = np.zeros(6)
        disp[LocalDof.U1] = N @ u[:, 0]
        disp[LocalDof.U2] = N @ u[:, 1]
        return disp

    def _plane_strain_vector(self, eps1, eps2):
        B, _ = self.b_matrix(eps1, eps2)
        return B @ self.local_unknowns().reshape(-1)

    def strain(self, eps1, eps2):
        e11, e22, g12 = self._plane_strain_vector(eps1, eps2)
        strain = np.zeros((3, 3))
        strain[0, 0] = e11
        strain[1, 1] = e22
        strain[0, 1] = g12 / 2.0
        return mirror(strain, source="upper")

    def _plane_stress_vector(self, eps1, eps2):
        D = self.material.plane_stress_stiffness()
        eps_th = self.material.plane_alpha() * self.temperature()
        return D @ (self._plane_strain_vector(eps1, eps2) - eps_th)

    def stress(self, eps1, eps2):
        s11, s22, s12 = self._plane_stress_vector(eps1, eps2)
        stress = np.zeros((3, 3))
        stress[0, 0] = s11
        stress[1, 1] = s22
        stress[0, 1] = s12
        return mirror(stress, source="upper")

    def internal_force(self, force_type, eps1, eps2):
        """Membrane force per unit length: N_ij = h * sigma_ij."""
        self._check_force(force_type)
        s11, s22, s12 = self._plane_stress_vector(eps1, eps2)
        h = self.thickness()
        if force_type is InternalForce.N11:
            return float(h * s11)
        if force_type is InternalForce.N22:
            return float(h * s22)
        return float(h * s12)
