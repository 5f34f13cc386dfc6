"""
Circular Estimation Library

Densities on the circle and recursive Bayesian filters for angular
states. Implements a Fourier series density with an algebra of
operations, Dirac mixtures, and discrete (particle) and Fourier filters
with a FilterPy-inspired API.

License: MIT
"""

__version__ = "1.0.0"

from .distributions import (
    DiscreteDistribution,
    FourierDensity,
    VonMisesDistribution,
    WrappedNormalDistribution,
    WrappedCauchyDistribution,
    WrappedExponentialDistribution,
    WrappedLaplaceDistribution,
    CircularUniformDistribution,
    CircularMixture,
)
from .filters import DiscreteFilter, FourierFilter
from .exceptions import (
    CircularEstimationError,
    ValidationError,
    MismatchError,
    NormalizationError,
    UnsupportedOperationError,
    DegenerateWeightsError,
    NumericApproximationWarning,
)

__all__ = [
    'DiscreteDistribution',
    'FourierDensity',
    'VonMisesDistribution',
    'WrappedNormalDistribution',
    'WrappedCauchyDistribution',
    'WrappedExponentialDistribution',
    'WrappedLaplaceDistribution',
    'CircularUniformDistribution',
    'CircularMixture',
    'DiscreteFilter',
    'FourierFilter',
    'CircularEstimationError',
    'ValidationError',
    'MismatchError',
    'NormalizationError',
    'UnsupportedOperationError',
    'DegenerateWeightsError',
    'NumericApproximationWarning',
]
