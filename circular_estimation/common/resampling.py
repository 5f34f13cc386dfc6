"""
Resampling schemes for weighted sample sets.

Stateless algorithms that turn a weighted support set, given through its
cumulative weights, into an equally weighted set of a target size. Both
schemes tolerate cumulative weights that do not reach exactly 1 due to
floating point summation.
"""

import numpy as np

from ..exceptions import ValidationError


def _check_cum_weights(cum_weights, n_samples):
    cum_weights = np.asarray(cum_weights, dtype=float)
    if cum_weights.ndim != 1 or len(cum_weights) == 0:
        raise ValidationError("Cumulative weights must be a non-empty 1-D array")
    if n_samples < 0:
        raise ValidationError(f"Number of samples must be non-negative, got {n_samples}")
    if cum_weights[-1] <= 0:
        raise ValidationError("Cumulative weights must have a positive total")
    return cum_weights


def simple_resampling_indices(cum_weights, n_samples, rng=None):
    """
    Simple (multinomial) resampling via sorted uniforms.

    Draws n_samples independent uniforms, sorts them and walks once
    through the cumulative weights, assigning each uniform to the first
    bin whose cumulative weight exceeds it.

    Parameters
    ----------
    cum_weights : np.ndarray
        Cumulative sample weights (n,)
    n_samples : int
        Number of samples to draw
    rng : np.random.Generator or int, optional
        Random source

    Returns
    -------
    np.ndarray
        Indices of resampled bins (n_samples,), ascending
    """
    cum_weights = _check_cum_weights(cum_weights, n_samples)
    rng = np.random.default_rng(rng)

    u = np.sort(rng.random(n_samples)) * cum_weights[-1]
    last = len(cum_weights) - 1

    indices = np.zeros(n_samples, dtype=int)
    i = 0
    for j in range(n_samples):
        while i < last and u[j] >= cum_weights[i]:
            i += 1
        indices[j] = i

    return indices


def systematic_resampling_indices(cum_weights, n_samples, rng=None):
    """
    Systematic resampling.

    One uniform offset u1 is drawn; the probes (u1 + j) / n_samples,
    scaled by the total weight, walk monotonically through the
    cumulative weights with a shared index. Lower variance than simple
    resampling.

    See Ristic, Arulampalam and Gordon, Beyond the Kalman Filter:
    Particle Filters for Tracking Applications, 2004, Section 3.3.

    Parameters
    ----------
    cum_weights : np.ndarray
        Cumulative sample weights (n,)
    n_samples : int
        Number of samples to draw
    rng : np.random.Generator or int, optional
        Random source

    Returns
    -------
    np.ndarray
        Indices of resampled bins (n_samples,), ascending
    """
    cum_weights = _check_cum_weights(cum_weights, n_samples)
    rng = np.random.default_rng(rng)

    positions = (np.arange(n_samples) + rng.random()) / n_samples * cum_weights[-1]
    last = len(cum_weights) - 1

    indices = np.zeros(n_samples, dtype=int)
    i = 0
    for j in range(n_samples):
        while i < last and positions[j] >= cum_weights[i]:
            i += 1
        indices[j] = i

    return indices


def simple_resampling(samples, cum_weights, n_samples, rng=None):
    """
    Resample positions with simple resampling.

    Parameters
    ----------
    samples : np.ndarray
        Sample positions (n,) or (dim, n), column-wise for dim > 1
    cum_weights : np.ndarray
        Cumulative sample weights (n,)
    n_samples : int
        Number of samples to draw
    rng : np.random.Generator or int, optional
        Random source

    Returns
    -------
    np.ndarray
        Resampled positions, implicitly weighted 1 / n_samples
    """
    indices = simple_resampling_indices(cum_weights, n_samples, rng)
    return np.asarray(samples)[..., indices]


def systematic_resampling(samples, cum_weights, n_samples, rng=None):
    """
    Resample positions with systematic resampling.

    Parameters
    ----------
    samples : np.ndarray
        Sample positions (n,) or (dim, n), column-wise for dim > 1
    cum_weights : np.ndarray
        Cumulative sample weights (n,)
    n_samples : int
        Number of samples to draw
    rng : np.random.Generator or int, optional
        Random source

    Returns
    -------
    np.ndarray
        Resampled positions, implicitly weighted 1 / n_samples
    """
    indices = systematic_resampling_indices(cum_weights, n_samples, rng)
    return np.asarray(samples)[..., indices]


RESAMPLING_SCHEMES = {
    'simple': simple_resampling_indices,
    'multinomial': simple_resampling_indices,
    'systematic': systematic_resampling_indices,
}


def get_resampling_scheme(scheme):
    """
    Look up the index function of a resampling scheme.

    Parameters
    ----------
    scheme : str
        'systematic', 'simple' or its alias 'multinomial'

    Returns
    -------
    callable
        Function (cum_weights, n_samples, rng) -> indices
    """
    if scheme not in RESAMPLING_SCHEMES:
        raise ValidationError(
            f"Unknown resampling scheme: {scheme}. "
            f"Available: {sorted(RESAMPLING_SCHEMES)}"
        )
    return RESAMPLING_SCHEMES[scheme]
