"""
Element geometry: local frame, frame transformation and Jacobian.

Local frame of a 2D element in 3D space (corner nodes 0, 1, 2 in
counter-clockwise order seen from +e3):

    e1 = (x1 - x0) / |x1 - x0|
    e3 = (x1 - x0) x (x2 - x0), normalised
    e2 = e3 x e1

Rows of the rotation R are (e1, e2, e3); a global vector v has local
components R @ v.

Jacobian of the isoparametric map from (eps1, eps2) to local (x1, x2):

    J = dN_deps @ xy = [[dx1/deps1, dx2/deps1],
                        [dx1/deps2, dx2/deps2]]

so J[i, j] = d x_j / d eps_i. The transposed quantity
``geo_approximation(i, j) = d x_i / d eps_j`` is the form the plate
kernels are written in.
"""

import numpy as np

from fealib import config
from fealib.errors import DegenerateGeometryError, DimensionMismatchError
from fealib.linalg.dense import determinant
from fealib.mesh.nodes import GLOBAL_DOFS_PER_NODE, LocalDof


def local_frame(positions):
    """
    Orthonormal element frame from the first three (corner) nodes.

    Parameters
    ----------
    positions : ndarray, shape (n_nodes, 3)
        Global node coordinates.

    Returns
    -------
    R : ndarray, shape (3, 3)
        Rows are e1, e2, e3.

    Raises
    ------
    DegenerateGeometryError
        If the corner nodes coincide or are collinear.
    """
    x = np.asarray(positions, dtype=np.float64)
    if x.ndim != 2 or x.shape[0] < 3 or x.shape[1] != 3:
        raise DimensionMismatchError(
            f"positions must have shape (n>=3, 3), got {x.shape}"
        )
    a = x[1] - x[0]
    b = x[2] - x[0]
    la, lb = np.linalg.norm(a), np.linalg.norm(b)
    n = np.cross(a, b)
    ln = np.linalg.norm(n)
    if la == 0.0 or lb == 0.0 or ln <= config.COLLINEAR_TOLERANCE * la * lb:
        raise DegenerateGeometryError(
            f"Corner nodes are coincident or collinear: {x[0]}, {x[1]}, {x[2]}"
        )
    e1 = a / la
    e3 = n / ln
    e2 = np.cross(e3, e1)
    return np.vstack((e1, e2, e3))


def local_coordinates(positions, R):
    """In-plane local coordinates (x1, x2) of every node, shape (n, 2)."""
    x = np.asarray(positions, dtype=np.float64)
    return ((x - x[0]) @ R.T)[:, :2]


# local DOF kind -> (row of R, translation (0) or rotation (3) offset)
_LOCAL_DOF_MAP = {
    LocalDof.U1: (0, 0),
    LocalDof.U2: (1, 0),
    LocalDof.U3: (2, 0),
    LocalDof.R1: (0, 3),
    LocalDof.R2: (1, 3),
    LocalDof.R3: (2, 3),
}


def frame_transformation(R, n_nodes, local_dofs):
    """
    Element transformation from global to local DOFs.

    Parameters
    ----------
    R : ndarray, shape (3, 3)
        Element frame (rows e1, e2, e3).
    n_nodes : int
        Number of element nodes.
    local_dofs : sequence of LocalDof
        Per-node local DOF order, e.g. (U3, R1, R2) for the plate.

    Returns
    -------
    T : ndarray, shape (n_nodes * len(local_dofs), 6 * n_nodes)
        ``u_local = T @ u_global``; rows are orthonormal.
    """
    nl = len(local_dofs)
    T = np.zeros((n_nodes * nl, n_nodes * GLOBAL_DOFS_PER_NODE))
    for k in range(n_nodes):
        for j, dof in enumerate(local_dofs):
            axis, offset = _LOCAL_DOF_MAP[dof]
            col = k * GLOBAL_DOFS_PER_NODE + offset
            T[k * nl + j, col:col + 3] = R[axis]
    return T


def jacobian(dN_deps, xy):
    """
    Jacobian matrix and determinant at one natural-coordinate point.

    Parameters
    ----------
    dN_deps : ndarray, shape (2, n)
        Shape-function derivatives w.r.t. (eps1, eps2).
    xy : ndarray, shape (n, 2)
        Local in-plane node coordinates.

    Returns
    -------
    J : ndarray, shape (2, 2)
    detJ : float
        Must be positive for a valid element.

    Raises
    ------
    DegenerateGeometryError
        If the Jacobian determinant is non-positive.
    """
    J = dN_deps @ xy
    detJ = determinant(J)

    if detJ <= config.JACOBIAN_TOLERANCE:
        raise DegenerateGeometryError(
            f"Non-positive Jacobian determinant: {detJ:.6e}. "
            "Check element node ordering (must be CCW) and mid-node positions."
        )

    return J, detJ


def physical_gradients(dN_deps, J, detJ):
    """
    Shape-function gradients in local coordinates.

    dN/dx = J^-1 dN/deps with the closed-form 2x2 inverse.

    Returns
    -------
    dN_dx : ndarray, shape (2, n)
        dN_dx[0, :] = dN_i/dx1, dN_dx[1, :] = dN_i/dx2.
    """
    Jinv = (1.0 / detJ) * np.array([
        [ J[1, 1], -J[0, 1]],
        [-J[1, 0],  J[0, 0]],
    ])
    return Jinv @ dN_deps
