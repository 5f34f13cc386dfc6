"""
Recursive filters for circular states.

This module provides:
- Discrete (particle) filter for arbitrary nonlinear models
- Fourier filter for identity models with analytic predict/update

Both filters follow a consistent set_state/predict/update API.
"""

from .discrete import DiscreteFilter
from .fourier import FourierFilter

__all__ = [
    'DiscreteFilter',
    'FourierFilter',
]
