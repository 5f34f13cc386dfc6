"""
Fourier filter on the circle.

Keeps the belief as a FourierDensity. Prediction with additive noise is
a convolution, a Bayesian update a multiplication. Both keep the number
of coefficients fixed.

See Pfaff, Kurz, Hanebeck, Multimodal Circular Filtering Using Fourier
Series, Fusion 2015.
"""

import numpy as np

from ..constants import DEFAULT_FOURIER_COEFFICIENTS, DEFAULT_TRANSFORMATION
from ..distributions.base import AbstractCircularDistribution
from ..distributions.closed_form import CircularUniformDistribution
from ..distributions.conversion import from_closed_form
from ..distributions.fourier import FourierDensity, _silent_renormalization
from ..exceptions import ValidationError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FourierFilter:
    """
    Filter with a Fourier series belief.

    Parameters
    ----------
    n_coefficients : int, optional
        Odd number of coefficients kept after every step (default: 21)
    transformation : str, optional
        Encoding of the belief: 'sqrt' (default), 'identity' or 'log'

    Attributes
    ----------
    fd : FourierDensity
        Current belief, uniform after construction
    """

    def __init__(self, n_coefficients=DEFAULT_FOURIER_COEFFICIENTS,
                 transformation=DEFAULT_TRANSFORMATION):
        self.fd = from_closed_form(CircularUniformDistribution(), n_coefficients, transformation)
        self.n_coefficients = self.fd.n_coefficients
        self.transformation = transformation

    def _to_fourier(self, dist):
        """Representation of dist matching the belief's encoding."""
        if isinstance(dist, FourierDensity):
            if dist.transformation != self.transformation:
                return dist.transform(self.transformation, dist.n_coefficients)
            return dist
        if isinstance(dist, AbstractCircularDistribution):
            return from_closed_form(dist, self.n_coefficients, self.transformation)
        raise ValidationError("Expected a circular distribution")

    def set_state(self, dist):
        """
        Replace the belief.

        Other distributions are converted with from_closed_form.

        Parameters
        ----------
        dist : AbstractCircularDistribution
            New belief
        """
        fd = self._to_fourier(dist)
        if fd.n_coefficients != self.n_coefficients:
            logger.debug("New belief has %d instead of %d coefficients",
                         fd.n_coefficients, self.n_coefficients)
        self.fd = fd

    def get_estimate(self):
        """Return the current belief."""
        return self.fd

    def get_point_estimate(self):
        """
        Circular mean of the belief.

        Returns
        -------
        float
            Mean direction in [0, 2pi)
        """
        if self.transformation == 'log':
            return self.fd.transform('identity').mean_direction()
        return self.fd.mean_direction()

    def predict_identity(self, noise):
        """
        Predict with the identity transition, x_next = x + noise.

        Parameters
        ----------
        noise : AbstractCircularDistribution
            System noise
        """
        self.fd = self.fd.convolve(self._to_fourier(noise), self.n_coefficients)

    def update_identity(self, meas_noise, z):
        """
        Update with the measurement model z = x + v.

        The likelihood v -> pdf(z - x) is the noise density mirrored and
        shifted by z.

        Parameters
        ----------
        meas_noise : AbstractCircularDistribution
            Measurement noise
        z : float
            Measurement
        """
        noise_fd = self._to_fourier(meas_noise)
        mirrored = FourierDensity(noise_fd.a, -noise_fd.b, noise_fd.transformation)
        self._multiply_truncated(mirrored.shift(z))

    def update_nonlinear(self, likelihood, z):
        """
        Update with an arbitrary likelihood.

        The likelihood is fitted with a Fourier series first.

        Parameters
        ----------
        likelihood : callable
            Likelihood function likelihood(z, x) -> non-negative value
        z : any
            Measurement
        """
        def fun(xs):
            return np.array([likelihood(z, x) for x in xs], dtype=float)

        with _silent_renormalization():
            likelihood_fd = FourierDensity.from_function(fun, self.n_coefficients,
                                                         self.transformation)
        self._multiply_truncated(likelihood_fd)

    def _multiply_truncated(self, other):
        with _silent_renormalization():
            self.fd = self.fd.multiply(other).truncate(self.n_coefficients)
