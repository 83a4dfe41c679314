"""Shared fixtures: tri6 node sets, materials and sections."""

import numpy as np
import pytest

from fealib.materials.properties import Material
from fealib.mesh.nodes import Node
from fealib.sections import Section


FLAT_CORNERS = np.array([
    [0.0, 0.0, 0.0],
    [2.0, 0.0, 0.0],
    [0.2, 1.5, 0.0],
])


def _rotation(axis, angle):
    axis = np.asarray(axis, dtype=float)
    axis = axis / np.linalg.norm(axis)
    K = np.array([
        [0.0, -axis[2], axis[1]],
        [axis[2], 0.0, -axis[0]],
        [-axis[1], axis[0], 0.0],
    ])
    return np.eye(3) + np.sin(angle) * K + (1.0 - np.cos(angle)) * K @ K


def tri6_positions(corners):
    c = np.asarray(corners, dtype=float)
    mids = [0.5 * (c[0] + c[1]), 0.5 * (c[1] + c[2]), 0.5 * (c[2] + c[0])]
    return np.vstack((c, mids))


@pytest.fixture
def make_nodes():
    """
    Factory: ``make_nodes(corners, unknown=None)``.

    ``unknown`` is either None or a callable mapping a global position to
    the 6 global unknowns of the node there.
    """
    def _make(corners, unknown=None):
        nodes = []
        for i, x in enumerate(tri6_positions(corners)):
            u = np.zeros(6) if unknown is None else unknown(x)
            nodes.append(Node(id=i + 1, position=x, unknown=u))
        return nodes
    return _make


@pytest.fixture
def flat_corners():
    return FLAT_CORNERS.copy()


@pytest.fixture
def tilted_corners():
    R = _rotation([1.0, -0.4, 0.7], 0.9)
    return FLAT_CORNERS @ R.T + np.array([3.0, -1.0, 2.5])


@pytest.fixture
def steel():
    return Material.isotropic(E=210e9, nu=0.3, alpha=12e-6, density=7850.0, name="steel")


@pytest.fixture
def identity_material():
    return Material(c=np.eye(6), name="identity")


@pytest.fixture
def plate_section():
    return Section.plate(0.05)
