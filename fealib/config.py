"""
Central numeric configuration for the fealib element core.

Constants are grouped in tiers:
  Tier 1: Numerical tolerances (kernel and geometry checks)
  Tier 2: Integration orders (quadrature point counts per element term)
  Tier 3: Plate theory constants

All values are dimensionless unless noted. Modules import this file as
``from fealib import config`` and read the constants at call time, so a
caller may adjust a tolerance before running an analysis.
"""

# =============================================================================
# TIER 1: NUMERICAL TOLERANCES
# =============================================================================

SINGULAR_TOLERANCE = 1.0e-13      # min |pivot| / max |pivot| before a block is singular
CONDITION_WARNING_RATIO = 1.0e-9  # pivot ratio below which condensation logs a warning
JACOBIAN_TOLERANCE = 0.0          # detJ must be strictly greater than this
SYMMETRY_TOLERANCE = 1.0e-9       # relative tolerance for symmetry checks
COLLINEAR_TOLERANCE = 1.0e-12     # relative |e3| below which corner nodes are collinear

# =============================================================================
# TIER 2: INTEGRATION ORDERS
# =============================================================================

MAX_LINE_POINTS = 10              # largest Gauss-Legendre rule served on a line
FULL_INTEGRATION_POINTS = 7       # triangle, degree-5 exact (Dunavant / Hammer-Stroud)
SHEAR_INTEGRATION_POINTS = 4      # triangle, under-integrated transverse shear terms

# =============================================================================
# TIER 3: PLATE THEORY
# =============================================================================

SHEAR_CORRECTION = 5.0 / 6.0      # Reissner shear correction factor
