"""
Test Configuration
==================

Pytest fixtures and test configuration for circular_estimation.
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from circular_estimation.distributions import (
    DiscreteDistribution,
    VonMisesDistribution,
    WrappedNormalDistribution,
)


@pytest.fixture
def rng():
    """Random generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def von_mises():
    """Von Mises distribution away from zero."""
    return VonMisesDistribution(1.0, 2.0)


@pytest.fixture
def wrapped_normal():
    """Wrapped normal distribution away from zero."""
    return WrappedNormalDistribution(2.0, 0.7)


@pytest.fixture
def weighted_dirac():
    """Dirac mixture with unequal weights."""
    return DiscreteDistribution([0.3, 1.2, 2.5, 4.0, 5.9], [0.1, 0.3, 0.2, 0.25, 0.15])
