"""
Trajectory Generators for Circular Estimation Testing

This module contains functions to generate angular trajectories for testing
circular filters (discrete and Fourier).

All generators produce consistent output format:
    - time: array of time steps
    - measurements: array of noisy angle measurements
    - ground_truth: array of true angles in [0, 2pi)
"""

import os
import sys

import numpy as np

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from circular_estimation.common import wrap_to_2pi


def generate_random_walk(N=200, drift=0.1, system_noise=None, measurement_noise=None,
                         x0=0.0, seed=0):
    """
    Generate a circular random walk x_{k+1} = x_k + drift + w_k, z_k = x_k + v_k.

    Parameters
    ----------
    N : int, optional
        Number of time steps (default: 200)
    drift : float, optional
        Deterministic rotation per step
    system_noise : AbstractCircularDistribution
        Distribution of w_k
    measurement_noise : AbstractCircularDistribution
        Distribution of v_k
    x0 : float, optional
        Initial angle
    seed : int, optional
        Seed of the random source

    Returns
    -------
    dict
        Dictionary containing:
        - time: array (N,) - time steps
        - measurements: array (N,) - noisy angles
        - ground_truth: array (N,) - true angles
        - drift: float - rotation per step
    """
    rng = np.random.default_rng(seed)

    ground_truth = np.zeros(N)
    ground_truth[0] = wrap_to_2pi(x0)
    w = system_noise.sample(N - 1, rng)
    for k in range(N - 1):
        ground_truth[k + 1] = wrap_to_2pi(ground_truth[k] + drift + w[k])

    measurements = wrap_to_2pi(ground_truth + measurement_noise.sample(N, rng))

    return {
        'time': np.arange(N),
        'measurements': measurements,
        'ground_truth': ground_truth,
        'drift': drift,
    }
