"""
Circular distributions.

Includes the Fourier series density, discrete (Dirac mixture)
distributions and closed-form families.
"""

from .base import AbstractCircularDistribution
from .discrete import DiscreteDistribution, ToroidalDiscreteDistribution
from .closed_form import (
    VonMisesDistribution,
    WrappedNormalDistribution,
    WrappedCauchyDistribution,
    WrappedExponentialDistribution,
    WrappedLaplaceDistribution,
    CircularUniformDistribution,
    PiecewiseConstantDistribution,
    CircularMixture,
)
from .fourier import FourierDensity
from .conversion import (
    register_fourier_conversion,
    from_closed_form,
    list_fourier_conversions,
)

__all__ = [
    'AbstractCircularDistribution',
    'DiscreteDistribution',
    'ToroidalDiscreteDistribution',
    'VonMisesDistribution',
    'WrappedNormalDistribution',
    'WrappedCauchyDistribution',
    'WrappedExponentialDistribution',
    'WrappedLaplaceDistribution',
    'CircularUniformDistribution',
    'PiecewiseConstantDistribution',
    'CircularMixture',
    'FourierDensity',
    'register_fourier_conversion',
    'from_closed_form',
    'list_fourier_conversions',
]
