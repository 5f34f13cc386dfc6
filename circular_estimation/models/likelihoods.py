"""
Likelihood functions built from measurement models.
"""

import numpy as np

from ..distributions.base import AbstractCircularDistribution
from ..exceptions import ValidationError


def additive_noise_likelihood(h, noise):
    """
    Likelihood of the measurement model z = h(x) + v.

    Parameters
    ----------
    h : callable
        Measurement function h(x) -> angle
    noise : AbstractCircularDistribution
        Distribution of the measurement noise v, must provide a pdf

    Returns
    -------
    callable
        likelihood(z, x) = noise.pdf(z - h(x)), scalar for scalar x

    Examples
    --------
    >>> likelihood = additive_noise_likelihood(lambda x: x, VonMisesDistribution(0.0, 5.0))
    >>> df.update_nonlinear(likelihood, z=1.2)
    """
    if not isinstance(noise, AbstractCircularDistribution):
        raise ValidationError("Noise must be a circular distribution")

    def likelihood(z, x):
        residual = np.asarray(z - h(x), dtype=float)
        values = np.asarray(noise.pdf(np.atleast_1d(residual)), dtype=float)
        if residual.ndim == 0:
            return float(values[0])
        return values.reshape(residual.shape)

    return likelihood
