"""
Mindlin plate triangle: matrix properties, rigid-body behaviour, constant
curvature / shear patches and field recovery.
"""

import numpy as np
import pytest

from fealib.elements.base import InternalForce
from fealib.elements.plate_tri6 import MindlinPlateTri6, PlateSubMatrix, RETAINED
from fealib.errors import DegenerateGeometryError, InvalidIndexError
from fealib.linalg.dense import is_symmetric
from fealib.loads import ElementTemperature
from fealib.materials.properties import Voigt
from fealib.mesh.nodes import CoordinateSystem, GlobalDof, LocalDof

AREA = 1.5          # flat fixture triangle
H = 0.05            # plate_section thickness
POINTS = [(1.0 / 3.0, 1.0 / 3.0), (0.1, 0.2), (0.6, 0.3)]


def rigid_motion(x0, t, omega):
    def unknown(x):
        return np.concatenate((t + np.cross(omega, x - x0), omega))
    return unknown


@pytest.fixture
def flat_plate(make_nodes, flat_corners, steel, plate_section):
    return MindlinPlateTri6(make_nodes(flat_corners), steel, plate_section)


@pytest.fixture
def tilted_plate(make_nodes, tilted_corners, steel, plate_section):
    return MindlinPlateTri6(make_nodes(tilted_corners), steel, plate_section)


def test_sub_matrices(flat_plate):
    k1 = flat_plate.sub_matrix(PlateSubMatrix.K1)
    k4 = flat_plate.sub_matrix(PlateSubMatrix.K4)
    assert k1.sum() == pytest.approx(AREA)
    assert k4.sum() == pytest.approx(AREA)
    assert is_symmetric(k1)
    for which in (PlateSubMatrix.K2, PlateSubMatrix.K3,
                  PlateSubMatrix.K5, PlateSubMatrix.K6):
        assert flat_plate.sub_matrix(which).sum() == pytest.approx(0.0, abs=1e-12)


def test_uncondensed_matrix_layout(flat_plate):
    k = flat_plate.uncondensed_stiffness()
    assert k.shape == (48, 48)
    assert is_symmetric(k)
    # displacement-displacement block is empty before condensation
    np.testing.assert_array_equal(k[np.ix_(RETAINED, RETAINED)], 0.0)


@pytest.mark.parametrize("which", ["flat_plate", "tilted_plate"])
def test_global_matrices_symmetric(which, request):
    plate = request.getfixturevalue(which)
    for m in (plate.stiffness_matrix(), plate.mass_matrix(),
              plate.stability_matrix(initial_stress=[[1e6, 2e5], [2e5, -3e5]])):
        assert m.shape == (36, 36)
        assert is_symmetric(m)


def test_stiffness_positive_semidefinite(tilted_plate):
    k = tilted_plate.stiffness_matrix()
    eig = np.linalg.eigvalsh(k)
    assert eig.min() > -1e-8 * eig.max()


def test_rigid_body_motion_is_strain_free(make_nodes, tilted_corners, steel, plate_section):
    x0 = tilted_corners[0]
    motion = rigid_motion(x0, np.array([0.1, -0.2, 0.3]), np.array([0.02, -0.01, 0.03]))
    plate = MindlinPlateTri6(make_nodes(tilted_corners, motion), steel, plate_section)

    for eps1, eps2 in POINTS:
        np.testing.assert_allclose(plate.strain(eps1, eps2), 0.0, atol=1e-12)
        np.testing.assert_allclose(plate.stress(eps1, eps2), 0.0, atol=1e-12 * 210e9)

    k = plate.stiffness_matrix()
    u = plate.global_unknowns()
    assert np.linalg.norm(k @ u) <= 1e-8 * np.linalg.norm(k) * np.linalg.norm(u)


def test_constant_bending_energy_is_exact(make_nodes, flat_corners, steel, plate_section):
    # r2 = kappa * x, w = -kappa x^2 / 2  ->  e11 = h/2 kappa, no shear
    kappa = 0.01

    def unknown(x):
        u = np.zeros(6)
        u[GlobalDof.UZ] = -0.5 * kappa * x[0] ** 2
        u[GlobalDof.RY] = kappa * x[0]
        return u

    plate = MindlinPlateTri6(make_nodes(flat_corners, unknown), steel, plate_section)
    E, nu = 210e9, 0.3
    d11 = E / (1.0 - nu ** 2) * H ** 3 / 12.0

    u = plate.global_unknowns()
    energy = u @ plate.stiffness_matrix() @ u
    assert energy == pytest.approx(AREA * d11 * kappa ** 2, rel=1e-9)

    strain = plate.strain(0.2, 0.3)
    assert strain[0, 0] == pytest.approx(H / 2.0 * kappa)
    assert strain[0, 2] == pytest.approx(0.0, abs=1e-14)
    assert strain[1, 2] == pytest.approx(0.0, abs=1e-14)

    assert plate.internal_force(InternalForce.K22, 0.2, 0.3) == pytest.approx(d11 * kappa)
    assert plate.internal_force(InternalForce.M11, 0.2, 0.3) == pytest.approx(nu * d11 * kappa)
    assert plate.internal_force(InternalForce.F13, 0.2, 0.3) == pytest.approx(0.0, abs=1e-6)


def test_shear_and_twist_resultants(make_nodes, flat_corners, steel, plate_section):
    a, c = 1e-3, 2e-3

    def unknown(x):
        u = np.zeros(6)
        u[GlobalDof.UZ] = a * x[0]
        u[GlobalDof.RY] = c * x[1]
        return u

    plate = MindlinPlateTri6(make_nodes(flat_corners, unknown), steel, plate_section)
    G = 210e9 / (2.0 * 1.3)
    eps1, eps2 = 0.25, 0.25
    x = plate.local_xy()[:3].T @ np.array([1 - eps1 - eps2, eps1, eps2])

    f13 = plate.internal_force(InternalForce.F13, eps1, eps2)
    assert f13 == pytest.approx(5.0 / 6.0 * H * G * (a + c * x[1]))
    assert plate.internal_force(InternalForce.H23, eps1, eps2) == pytest.approx(0.0, abs=1e-3)
    assert plate.internal_force(InternalForce.T12, eps1, eps2) == pytest.approx(H ** 3 * G * c / 12.0)

    disp = plate.displacement(eps1, eps2)
    assert disp[LocalDof.U3] == pytest.approx(a * x[0])
    assert disp[LocalDof.R2] == pytest.approx(c * x[1])
    assert disp[LocalDof.U1] == 0.0


def test_mass_matrix_totals(flat_plate, steel):
    m = flat_plate.mass_matrix()
    rho = steel.density
    uz = np.zeros(36)
    uz[GlobalDof.UZ::6] = 1.0
    rx = np.zeros(36)
    rx[GlobalDof.RX::6] = 1.0
    assert uz @ m @ uz == pytest.approx(rho * H * AREA)
    assert rx @ m @ rx == pytest.approx(rho * H ** 3 / 12.0 * AREA)
    ux = np.zeros(36)
    ux[GlobalDof.UX::6] = 1.0
    assert ux @ m @ ux == 0.0


def test_stability_matrix_uniform_tension(make_nodes, flat_corners, steel, plate_section):
    a, sigma = 0.01, 5e6

    def unknown(x):
        u = np.zeros(6)
        u[GlobalDof.UZ] = a * x[0]
        return u

    plate = MindlinPlateTri6(make_nodes(flat_corners, unknown), steel, plate_section)
    u = plate.global_unknowns()
    g = plate.stability_matrix(initial_stress=[[sigma, 0.0], [0.0, 0.0]])
    assert u @ g @ u == pytest.approx(H * sigma * a ** 2 * AREA)

    with pytest.raises(ValueError):
        plate.stability_matrix(initial_stress=[[1.0, 2.0], [0.0, 1.0]])


def test_stability_from_recovered_stress_is_symmetric(make_nodes, tilted_corners, steel, plate_section):
    plate = MindlinPlateTri6(
        make_nodes(tilted_corners, lambda x: np.array([0, 0, 0, 1e-3 * x[1], 2e-3 * x[0], 0])),
        steel, plate_section,
    )
    assert is_symmetric(plate.stability_matrix())


def test_zero_unknowns_and_temperature(make_nodes, flat_corners, steel, identity_material, plate_section):
    plate = MindlinPlateTri6(make_nodes(flat_corners), identity_material, plate_section)
    np.testing.assert_array_equal(plate.strain(1 / 3, 1 / 3), 0.0)
    np.testing.assert_array_equal(plate.stress(1 / 3, 1 / 3), 0.0)

    hot = MindlinPlateTri6(make_nodes(flat_corners), steel, plate_section,
                           [ElementTemperature(40.0), ElementTemperature(10.0)])
    alpha = steel.get_alpha()
    alpha[Voigt.S33] = 0.0
    expected = -steel.get_c() @ alpha * 50.0
    s = hot.stress(0.3, 0.3)
    assert s[0, 0] == pytest.approx(expected[Voigt.S11])
    assert s[2, 2] == pytest.approx(expected[Voigt.S33])
    np.testing.assert_array_equal(hot.temperature_load_vector(), np.zeros(36))


def test_invalid_force_tag(flat_plate):
    with pytest.raises(InvalidIndexError):
        flat_plate.internal_force(InternalForce.N11, 0.3, 0.3)
    with pytest.raises(InvalidIndexError):
        flat_plate.internal_force("M11", 0.3, 0.3)


def test_degenerate_geometry(make_nodes, steel, plate_section):
    collinear = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [2.0, 0.0, 0.0]])
    plate = MindlinPlateTri6(make_nodes(collinear), steel, plate_section)
    with pytest.raises(DegenerateGeometryError):
        plate.stiffness_matrix()


def test_inverted_mid_node_gives_negative_jacobian(make_nodes, flat_corners, steel, plate_section):
    nodes = make_nodes(flat_corners)
    # drag mid-node 3 far beyond corner 1
    nodes[3] = type(nodes[3])(id=nodes[3].id, position=[3.5, -0.2, 0.0])
    plate = MindlinPlateTri6(nodes, steel, plate_section)
    with pytest.raises(DegenerateGeometryError):
        plate.stiffness_matrix()


def test_node_count_and_dof_arrays(make_nodes, flat_corners, steel, plate_section, flat_plate):
    with pytest.raises(InvalidIndexError):
        MindlinPlateTri6(make_nodes(flat_corners)[:5], steel, plate_section)

    assert flat_plate.dof_array(CoordinateSystem.GLOBAL) == tuple(GlobalDof)
    assert flat_plate.dof_array(CoordinateSystem.LOCAL) == (LocalDof.U3, LocalDof.R1, LocalDof.R2)
    with pytest.raises(InvalidIndexError):
        flat_plate.dof_array("local")


def test_geometry_approximation(flat_plate):
    # x1 = 2 eps1 + 0.2 eps2, x2 = 1.5 eps2
    assert flat_plate.geo_approximation(0.2, 0.2, 0, 1) == pytest.approx(2.0)
    assert flat_plate.geo_approximation(0.2, 0.2, 0, 2) == pytest.approx(0.2)
    assert flat_plate.geo_approximation(0.2, 0.2, 1, 1) == pytest.approx(0.0, abs=1e-14)
    assert flat_plate.geo_approximation(0.2, 0.2, 1, 2) == pytest.approx(1.5)
    with pytest.raises(InvalidIndexError):
        flat_plate.geo_approximation(0.2, 0.2, 2, 1)


def test_new_snapshot_changes_results(flat_plate):
    moved = [n.updated(n.unknown + np.array([0, 0, 0, 0, 1e-3 * n.position[0], 0]))
             for n in flat_plate.nodes]
    plate2 = flat_plate.with_nodes(moved)
    assert all(n.version == 1 for n in plate2.nodes)
    assert plate2.strain(0.3, 0.3)[0, 0] == pytest.approx(H / 2.0 * 1e-3)
    np.testing.assert_array_equal(flat_plate.strain(0.3, 0.3), 0.0)
