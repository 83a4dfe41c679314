"""
Constitutive data for element formulations.

A :class:`Material` carries the 3D stiffness tensor C and compliance tensor
S in 6x6 Voigt form, the thermal-expansion vector and the volumetric mass
density. It is immutable once built and may be shared by any number of
elements.

Voigt ordering (named by :class:`Voigt`):

    index   0    1    2    3    4    5
    comp.   11   22   33   12   13   23

Strains use engineering shear (gamma_ij = 2 * e_ij), so S and C are
symmetric and sigma = C @ eps.

Usage:
    from fealib.materials.properties import Material
    steel = Material.isotropic(E=210e9, nu=0.3, alpha=12e-6, density=7850.0)
    s = steel.get_s()
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

import numpy as np

from fealib.errors import DimensionMismatchError
from fealib.linalg.dense import invert, is_symmetric


class Voigt(IntEnum):
    S11 = 0
    S22 = 1
    S33 = 2
    S12 = 3
    S13 = 4
    S23 = 5


# in-plane components used by plane-stress reduction
PLANE_COMPONENTS = (Voigt.S11, Voigt.S22, Voigt.S12)
_PLANE_INDEX = [int(v) for v in PLANE_COMPONENTS]


@dataclass(frozen=True, eq=False)
class Material:
    """
    Orthotropic / isotropic linear-elastic material.

    Either tensor may be omitted; it is then computed as the inverse of the
    other.

    Parameters
    ----------
    c : ndarray, shape (6, 6), optional
        Stiffness tensor.
    s : ndarray, shape (6, 6), optional
        Compliance tensor.
    alpha : ndarray, shape (6,)
        Thermal-expansion vector (Voigt order). Default zero.
    density : float
        Volumetric mass density [kg/m^3]. Default 0.
    name : str
        Label for messages.
    """
    c: Optional[np.ndarray] = None
    s: Optional[np.ndarray] = None
    alpha: np.ndarray = field(default_factory=lambda: np.zeros(6))
    density: float = 0.0
    name: str = ""

    def __post_init__(self):
        if self.c is None and self.s is None:
            raise ValueError("Material requires a stiffness tensor C or a compliance tensor S")

        c = None if self.c is None else self._tensor(self.c, "C")
        s = None if self.s is None else self._tensor(self.s, "S")
        if c is None:
            c = invert(s)
        if s is None:
            s = invert(c)
        alpha = np.array(self.alpha, dtype=np.float64)
        if alpha.shape != (6,):
            raise DimensionMismatchError(
                f"Material '{self.name}': alpha must have 6 components, got {alpha.shape}"
            )
        if self.density < 0.0:
            raise ValueError(f"Material '{self.name}': density must be >= 0, got {self.density}")

        for arr in (c, s, alpha):
            arr.flags.writeable = False
        object.__setattr__(self, "c", c)
        object.__setattr__(self, "s", s)
        object.__setattr__(self, "alpha", alpha)
        object.__setattr__(self, "density", float(self.density))

    def _tensor(self, a, label):
        t = np.array(a, dtype=np.float64)
        if t.shape != (6, 6):
            raise DimensionMismatchError(
                f"Material '{self.name}': {label} must be 6x6, got {t.shape}"
            )
        if not is_symmetric(t):
            raise ValueError(f"Material '{self.name}': {label} is not symmetric")
        return t

    # -----------------------------------------------------------------
    #  Builders
    # -----------------------------------------------------------------

    @classmethod
    def isotropic(cls, E, nu, alpha=0.0, density=0.0, name="isotropic"):
        """
        Isotropic material from Young's modulus and Poisson's ratio.

        S = 1/E * [[1, -nu, -nu, 0, 0, 0], ..., shear terms 2*(1+nu)]
        """
        if E <= 0.0:
            raise ValueError(f"Young's modulus must be positive, got {E}")
        if not -1.0 < nu < 0.5:
            raise ValueError(f"Poisson's ratio must lie in (-1, 0.5), got {nu}")
        G = E / (2.0 * (1.0 + nu))
        return cls.orthotropic(E, E, E, nu, nu, nu, G, G, G,
                               alpha=(alpha, alpha, alpha),
                               density=density, name=name)

    @classmethod
    def orthotropic(cls, E1, E2, E3, nu12, nu13, nu23, G12, G13, G23,
                    alpha=(0.0, 0.0, 0.0), density=0.0, name="orthotropic"):
        """
        Orthotropic material in its principal axes.

        Parameters
        ----------
        E1, E2, E3 : float
            Young's moduli.
        nu12, nu13, nu23 : float
            Major Poisson's ratios (nu_ij = -e_j / e_i under uniaxial s_i).
        G12, G13, G23 : float
            Shear moduli.
        alpha : tuple of 3 floats
            Principal thermal-expansion coefficients.
        density : float
            Volumetric mass density.
        """
        for label, v in (("E1", E1), ("E2", E2), ("E3", E3),
                         ("G12", G12), ("G13", G13), ("G23", G23)):
            if v <= 0.0:
                raise ValueError(f"{label} must be positive, got {v}")

        s = np.zeros((6, 6))
        s[Voigt.S11, Voigt.S11] = 1.0 / E1
        s[Voigt.S22, Voigt.S22] = 1.0 / E2
        s[Voigt.S33, Voigt.S33] = 1.0 / E3
        s[Voigt.S11, Voigt.S22] = s[Voigt.S22, Voigt.S11] = -nu12 / E1
        s[Voigt.S11, Voigt.S33] = s[Voigt.S33, Voigt.S11] = -nu13 / E1
        s[Voigt.S22, Voigt.S33] = s[Voigt.S33, Voigt.S22] = -nu23 / E2
        s[Voigt.S12, Voigt.S12] = 1.0 / G12
        s[Voigt.S13, Voigt.S13] = 1.0 / G13
        s[Voigt.S23, Voigt.S23] = 1.0 / G23

        a = np.zeros(6)
        a[:3] = alpha
        return cls(s=s, alpha=a, density=density, name=name)

    # -----------------------------------------------------------------
    #  Accessors
    # -----------------------------------------------------------------

    def get_c(self):
        """Stiffness tensor C (6x6 copy)."""
        return self.c.copy()

    def get_s(self):
        """Compliance tensor S (6x6 copy)."""
        return self.s.copy()

    def get_alpha(self):
        """Thermal-expansion vector (copy)."""
        return self.alpha.copy()

    def compliance(self, i, j):
        """Single compliance entry by Voigt component, e.g. (Voigt.S13, Voigt.S13)."""
        return float(self.s[Voigt(i), Voigt(j)])

    def plane_stress_stiffness(self):
        """
        Reduced stiffness for plane stress (s33 = s13 = s23 = 0).

        Returns
        -------
        D : ndarray, shape (3, 3)
            Ordering (11, 22, 12) with engineering shear strain.
        """
        return invert(self.s[np.ix_(_PLANE_INDEX, _PLANE_INDEX)])

    def plane_alpha(self):
        """In-plane thermal-expansion vector (11, 22, 12)."""
        return self.alpha[_PLANE_INDEX].copy()
