"""
Discrete (particle) filter on the circle.

A Sequential Importance Resampling filter whose belief is a
DiscreteDistribution. Works with any user-defined transition f(x) or
f(x, w) and any measurement likelihood likelihood(z, x).
"""

import warnings

import numpy as np

from ..common.resampling import get_resampling_scheme
from ..constants import (
    DEFAULT_NOISE_COMPONENTS,
    DEFAULT_PARTICLES,
    DEFAULT_RESAMPLING_SCHEME,
)
from ..distributions.base import AbstractCircularDistribution
from ..distributions.discrete import DiscreteDistribution
from ..distributions.fourier import FourierDensity
from ..exceptions import NumericApproximationWarning, ValidationError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class DiscreteFilter:
    """
    Particle filter for circular states.

    The user must provide:
    - Transition function: f(x) -> x_next (additive noise) or
      f(x, w) -> x_next (non-additive noise)
    - Measurement likelihood: likelihood(z, x) -> non-negative value

    Continuous noise is replaced by a small deterministic Dirac mixture
    (to_dirac5 or to_dirac3). Prediction forms all particle/noise-atom
    pairs and resamples them back to the number of particles.

    Parameters
    ----------
    n_particles : int, optional
        Number of particles (default: 100)
    resampling : str, optional
        Resampling scheme: 'systematic' (default), 'simple' or
        'multinomial'
    noise_components : int, optional
        Size of the Dirac mixture for continuous noise: 5 (default) or 3
    rng : np.random.Generator or int, optional
        Random source used for every random draw of the filter
    resample_threshold : float, optional
        Effective sample size below which resample() acts
        (default: n_particles / 2)

    Attributes
    ----------
    dist : DiscreteDistribution
        Current belief
    rng : np.random.Generator
        Random source

    Examples
    --------
    >>> df = DiscreteFilter(n_particles=200, rng=42)
    >>> df.set_state(VonMisesDistribution(0.0, 2.0))
    >>> df.predict_nonlinear(lambda x: x + 0.1, WrappedNormalDistribution(0.0, 0.2))
    >>> df.update_nonlinear(likelihood, z=0.15)
    >>> estimate = df.get_point_estimate()
    """

    def __init__(self, n_particles=DEFAULT_PARTICLES, resampling=DEFAULT_RESAMPLING_SCHEME,
                 noise_components=DEFAULT_NOISE_COMPONENTS, rng=None, resample_threshold=None):
        if int(n_particles) != n_particles or n_particles < 1:
            raise ValidationError(f"Number of particles must be a positive integer, got {n_particles}")
        if noise_components not in (3, 5):
            raise ValidationError(f"Noise components must be 3 or 5, got {noise_components}")

        self.n_particles = int(n_particles)
        self.resampling = resampling
        self._resampling_indices = get_resampling_scheme(resampling)
        self.noise_components = noise_components
        self.rng = np.random.default_rng(rng)

        # Effective sample size threshold for resampling
        if resample_threshold is None:
            resample_threshold = self.n_particles / 2.0
        self.resample_threshold = resample_threshold

        self.dist = DiscreteDistribution(
            np.linspace(0, 2 * np.pi, self.n_particles, endpoint=False))

    def set_state(self, dist):
        """
        Replace the belief.

        A DiscreteDistribution is stored as it is. Any other circular
        distribution is approximated by n_particles samples drawn with
        the filter's random source.

        Parameters
        ----------
        dist : AbstractCircularDistribution
            New belief
        """
        if isinstance(dist, DiscreteDistribution):
            if len(dist) != self.n_particles:
                logger.debug("New belief has %d instead of %d particles",
                             len(dist), self.n_particles)
            self.dist = dist
        elif isinstance(dist, AbstractCircularDistribution):
            warnings.warn(f"Approximating {type(dist).__name__} by {self.n_particles} samples",
                          NumericApproximationWarning, stacklevel=2)
            self.dist = DiscreteDistribution(dist.sample(self.n_particles, self.rng))
        else:
            raise ValidationError("State must be a circular distribution")

    def get_estimate(self):
        """Return the current belief."""
        return self.dist

    def get_point_estimate(self):
        """
        Circular mean of the belief.

        Returns
        -------
        float
            Mean direction in [0, 2pi)
        """
        return self.dist.mean_direction()

    def effective_sample_size(self):
        """
        Compute effective sample size (ESS): Neff.

        ESS indicates the quality of the particle approximation.
        Lower values indicate particle degeneracy.

        Returns
        -------
        float
            Effective sample size (1 to number of particles)
        """
        return 1.0 / np.sum(self.dist.w ** 2)

    def _noise_to_dirac(self, noise):
        """Deterministic Dirac mixture approximating the noise."""
        if isinstance(noise, DiscreteDistribution):
            return noise
        if isinstance(noise, FourierDensity) and noise.transformation == 'log':
            noise = noise.transform('identity')
        if not isinstance(noise, AbstractCircularDistribution):
            raise ValidationError("Noise must be a circular distribution")

        if self.noise_components == 5:
            return noise.to_dirac5()
        return noise.to_dirac3()

    def _resample_candidates(self, candidates, weights, n_samples):
        """Draw n_samples equally weighted particles from the candidate buffer."""
        indices = self._resampling_indices(np.cumsum(weights), n_samples, self.rng)
        return DiscreteDistribution(candidates[indices])

    def predict_identity(self, noise):
        """
        Predict with the identity transition, x_next = x + noise.

        Parameters
        ----------
        noise : AbstractCircularDistribution
            System noise
        """
        self.predict_nonlinear(lambda x: x, noise)

    def predict_nonlinear(self, f, noise):
        """
        Predict step with additive noise: x_next = f(x) + w.

        Every particle is combined with every atom of the noise Dirac
        mixture. The n * k weighted candidates are resampled to n
        particles. A single noise atom only shifts the particles.

        Parameters
        ----------
        f : callable
            Transition function angle -> angle, called once per particle
        noise : AbstractCircularDistribution
            System noise (closed form, FourierDensity or
            DiscreteDistribution)
        """
        predicted = self.dist.apply_function(f)
        noise_wd = self._noise_to_dirac(noise)

        if len(noise_wd) == 1:
            self.dist = predicted.shift(noise_wd.d[0])
            return

        candidates = np.add.outer(predicted.d, noise_wd.d).ravel()
        weights = np.outer(predicted.w, noise_wd.w).ravel()
        self.dist = self._resample_candidates(candidates, weights, len(predicted))

    def predict_nonlinear_non_additive(self, f, noise_samples, noise_weights):
        """
        Predict step with non-additive noise: x_next = f(x, w).

        Parameters
        ----------
        f : callable
            Transition function f(x, w) -> angle
        noise_samples : array_like
            Noise samples (k,)
        noise_weights : array_like
            Non-negative noise weights (k,), normalized internally
        """
        noise_samples = np.asarray(noise_samples, dtype=float)
        noise_weights = np.asarray(noise_weights, dtype=float)
        if noise_samples.ndim != 1 or noise_weights.shape != noise_samples.shape:
            raise ValidationError("Need one weight per noise sample")
        if np.any(noise_weights < 0) or np.sum(noise_weights) <= 0:
            raise ValidationError("Noise weights must be non-negative with a positive sum")
        noise_weights = noise_weights / np.sum(noise_weights)

        n = len(self.dist)
        k = len(noise_samples)
        candidates = np.empty(n * k)
        for i, x in enumerate(self.dist.d):
            for j, w in enumerate(noise_samples):
                candidates[i * k + j] = f(x, w)

        if k == 1:
            self.dist = DiscreteDistribution(candidates, self.dist.w)
            return

        weights = np.outer(self.dist.w, noise_weights).ravel()
        self.dist = self._resample_candidates(candidates, weights, n)

    def update_nonlinear(self, likelihood, z):
        """
        Update step: reweight particles based on measurement.

        Particles keep their positions; no resampling takes place.

        Parameters
        ----------
        likelihood : callable
            Likelihood function likelihood(z, x) -> non-negative value
        z : any
            Measurement, passed to likelihood unchanged

        Raises
        ------
        DegenerateWeightsError
            If the likelihood is zero at every particle
        """
        self.dist = self.dist.reweigh(lambda x: likelihood(z, x))

    def resample(self, scheme=None, force=False):
        """
        Resample particles if effective sample size is too low.

        Parameters
        ----------
        scheme : str, optional
            Resampling scheme, defaults to the filter's scheme
        force : bool, optional
            Resample regardless of the effective sample size

        Returns
        -------
        bool
            Whether the particles were resampled
        """
        n_eff = self.effective_sample_size()
        if not force and n_eff >= self.resample_threshold:
            return False

        indices_fn = self._resampling_indices if scheme is None else get_resampling_scheme(scheme)
        logger.debug("Resampling %d particles (ESS %.1f)", len(self.dist), n_eff)
        indices = indices_fn(np.cumsum(self.dist.w), len(self.dist), self.rng)
        self.dist = DiscreteDistribution(self.dist.d[indices])
        return True
