"""
Numerical constants and defaults for circular estimation.

Tolerances follow one rule: exact analytic paths are checked tightly,
sampling based paths get explicitly looser bounds.
"""

# ============================================================================
# Tolerances
# ============================================================================

# Accepted deviation of a_0 from 1/pi before a density is renormalized
SQRT_NORMALIZATION_TOLERANCE = 1e-4
IDENTITY_NORMALIZATION_TOLERANCE = 1e-6

# a_0 below this value cannot belong to a density (usually a user error)
ZERO_NORMALIZER_TOLERANCE = 1e-6

# Weights are only renormalized if their sum is off by more than this
WEIGHT_SUM_TOLERANCE = 1e-10

# Total likelihood mass below this is treated as numerically zero
DEGENERATE_WEIGHT_TOLERANCE = 1e-300

# Mean resultant lengths above 1 - tol are treated as Dirac distributions
DIRAC_MOMENT_TOLERANCE = 1e-12

# ============================================================================
# Series and grids
# ============================================================================

# Summands used for series based coefficient formulas (WN log, WC sqrt)
SERIES_SUMMANDS = 1000

# Wraps used to evaluate the wrapped normal pdf (k = -N..N)
WRAPPED_NORMAL_WRAPS = 10

# Grid size for grid based inverse-CDF sampling of arbitrary densities
SAMPLING_GRID_SIZE = 1000

# ============================================================================
# Filter defaults
# ============================================================================

DEFAULT_PARTICLES = 100
DEFAULT_RESAMPLING_SCHEME = 'systematic'
DEFAULT_NOISE_COMPONENTS = 5  # Dirac mixture size used for continuous noise
DEFAULT_FOURIER_COEFFICIENTS = 21
DEFAULT_TRANSFORMATION = 'sqrt'

TRANSFORMATIONS = ('sqrt', 'identity', 'log')
