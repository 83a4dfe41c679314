"""Constitutive data."""

from .properties import Material, Voigt
