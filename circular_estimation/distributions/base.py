"""
Capability interface shared by all circular distributions.

Any density consumed by the Fourier conversion or by the filters only
needs pdf and trigonometric_moment. Everything else has a generic
default that concrete families may override with an exact version.
"""

import warnings
from abc import ABC, abstractmethod

import numpy as np
from scipy.integrate import quad

from ..common.angles import wrap_to_2pi
from ..constants import DIRAC_MOMENT_TOLERANCE, SAMPLING_GRID_SIZE
from ..exceptions import NumericApproximationWarning, ValidationError


class AbstractCircularDistribution(ABC):
    """
    Base class for densities on the circle [0, 2pi).

    Subclasses must implement
    - pdf(xs) -> densities, for inputs of any range
    - trigonometric_moment(n) -> complex E[exp(i n theta)]
    """

    @abstractmethod
    def pdf(self, xs):
        """Evaluate the density at each angle in xs."""

    @abstractmethod
    def trigonometric_moment(self, n):
        """Return the n-th trigonometric moment (complex)."""

    def mean_direction(self):
        """
        Circular mean, i.e. the argument of the first moment.

        Returns
        -------
        float
            Mean direction in [0, 2pi)
        """
        m = self.trigonometric_moment(1)
        return wrap_to_2pi(np.angle(m))

    def integral(self, l=0.0, r=2 * np.pi):
        """
        Integral of the pdf from l to r.

        Defaults to numerical integration; families with a closed form
        override this.
        """
        return self.integral_numerical(l, r)

    def integral_numerical(self, l=0.0, r=2 * np.pi):
        """
        Integral of the pdf from l to r via adaptive quadrature.

        Parameters
        ----------
        l : float, optional
            Left bound (default: 0)
        r : float, optional
            Right bound (default: 2pi). r < l yields the negated integral.

        Returns
        -------
        float
            Value of the integral
        """
        result, _ = quad(lambda x: float(np.asarray(self.pdf(np.array([x])))[0]), l, r,
                         limit=200)
        return result

    def sample(self, n, rng=None):
        """
        Draw n samples by inverting a tabulated cdf.

        Generic fallback for families without an exact sampler.

        Parameters
        ----------
        n : int
            Number of samples
        rng : np.random.Generator or int, optional
            Random source

        Returns
        -------
        np.ndarray
            Samples in [0, 2pi) (n,)
        """
        warnings.warn(
            f"{type(self).__name__} has no exact sampler, inverting a tabulated cdf",
            NumericApproximationWarning, stacklevel=2)
        rng = np.random.default_rng(rng)

        grid = np.linspace(0, 2 * np.pi, SAMPLING_GRID_SIZE + 1)
        p = np.asarray(self.pdf(grid), dtype=float)
        cdf = np.concatenate([[0.0], np.cumsum((p[1:] + p[:-1]) / 2 * np.diff(grid))])
        cdf /= cdf[-1]

        return wrap_to_2pi(np.interp(rng.random(n), cdf, grid))

    def to_dirac3(self):
        """
        Deterministic approximation by three equally weighted Diracs.

        The atoms sit at mu - alpha, mu, mu + alpha and match the first
        trigonometric moment exactly.

        Returns
        -------
        DiscreteDistribution
            Dirac mixture with three components (one if degenerate)
        """
        from .discrete import DiscreteDistribution

        m = self.trigonometric_moment(1)
        mu = np.angle(m)
        m_abs = abs(m)
        if m_abs >= 1 - DIRAC_MOMENT_TOLERANCE:
            return DiscreteDistribution([mu])

        alpha = np.arccos((3 * m_abs - 1) / 2)
        return DiscreteDistribution([mu - alpha, mu, mu + alpha])

    def to_dirac5(self, lambda_=0.5):
        """
        Deterministic approximation by five symmetric Diracs.

        Matches the first two trigonometric moments. The central weight
        w5 is chosen between its feasible bounds via lambda_.

        See Kurz, Gilitschenski, Hanebeck, Deterministic Approximation of
        Circular Densities with Symmetric Dirac Mixtures Based on Two
        Circular Moments, Fusion 2014.

        Parameters
        ----------
        lambda_ : float, optional
            Position of w5 between its lower (0) and upper (1) bound

        Returns
        -------
        DiscreteDistribution
            Dirac mixture with five components (one if degenerate)
        """
        from .discrete import DiscreteDistribution

        if not 0 <= lambda_ <= 1:
            raise ValidationError(f"lambda_ must be in [0, 1], got {lambda_}")

        m1 = self.trigonometric_moment(1)
        mu = np.angle(m1)
        m1_abs = abs(m1)
        if m1_abs >= 1 - DIRAC_MOMENT_TOLERANCE:
            return DiscreteDistribution([mu])
        m2_abs = abs(self.trigonometric_moment(2))

        denominator = 4 * m1_abs - m2_abs - 3
        w5_min = max((4 * m1_abs ** 2 - 4 * m1_abs - m2_abs + 1) / denominator, 0.0)
        w5_max = (2 * m1_abs ** 2 - m2_abs - 1) / denominator
        w5 = w5_min + lambda_ * (w5_max - w5_min)
        w1 = (1 - w5) / 4

        c1 = 2 / (1 - w5) * (m1_abs - w5)
        c2 = (m2_abs - w5) / (1 - w5) + 1
        x2 = (2 * c1 + np.sqrt(max(4 * c1 ** 2 - 8 * (c1 ** 2 - c2), 0.0))) / 4
        x1 = c1 - x2
        phi1 = np.arccos(np.clip(x1, -1, 1))
        phi2 = np.arccos(np.clip(x2, -1, 1))

        return DiscreteDistribution(
            mu + np.array([-phi1, phi1, -phi2, phi2, 0.0]),
            np.array([w1, w1, w1, w1, w5]),
        )
