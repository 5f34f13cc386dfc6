"""
Measurement models for circular filters.
"""

from .likelihoods import additive_noise_likelihood

__all__ = [
    'additive_noise_likelihood',
]
