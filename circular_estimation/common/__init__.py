"""
Common utilities for circular estimation.

Includes angle handling and resampling schemes.
"""

from .angles import wrap_to_2pi, wrap_to_pi, angle_diff, circular_mean
from .resampling import (
    simple_resampling,
    systematic_resampling,
    simple_resampling_indices,
    systematic_resampling_indices,
    get_resampling_scheme,
    RESAMPLING_SCHEMES,
)

__all__ = [
    'wrap_to_2pi',
    'wrap_to_pi',
    'angle_diff',
    'circular_mean',
    'simple_resampling',
    'systematic_resampling',
    'simple_resampling_indices',
    'systematic_resampling_indices',
    'get_resampling_scheme',
    'RESAMPLING_SCHEMES',
]
