"""
Closed-form circular distribution families.

Von Mises, wrapped normal, wrapped Cauchy, wrapped exponential, wrapped
Laplace, circular uniform, piecewise constant and mixtures. Each family provides pdf,
trigonometric_moment and an exact sampler; conversion into Fourier
densities is registered separately in conversion.py.

See Jammalamadaka and SenGupta, Topics in Circular Statistics, 2001.
"""

import numpy as np
from scipy.integrate import quad
from scipy.optimize import brentq
from scipy.special import i0e, ive
from scipy.stats import norm

from ..common.angles import wrap_to_2pi
from ..constants import WRAPPED_NORMAL_WRAPS
from ..exceptions import ValidationError
from .base import AbstractCircularDistribution


def _check_positive(value, name):
    if not np.isscalar(value) or not np.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be a positive scalar, got {value}")
    return float(value)


def _check_moment_abs(m):
    m_abs = abs(m)
    if not 0 < m_abs < 1:
        raise ValidationError(
            f"First moment must have magnitude in (0, 1) for moment matching, got {m_abs}")
    return m_abs


def bessel_ratio(kappa):
    """A1(kappa) = I_1(kappa) / I_0(kappa), the mean resultant length of a von Mises."""
    return ive(1, kappa) / ive(0, kappa)


def inverse_bessel_ratio(r):
    """
    Solve A1(kappa) = r for kappa.

    Parameters
    ----------
    r : float
        Mean resultant length in (0, 1)

    Returns
    -------
    float
        Concentration kappa
    """
    if not 0 < r < 1:
        raise ValidationError(f"Mean resultant length must be in (0, 1), got {r}")
    # A1(k) ~ 1 - 1/(2k) for large k, so this bracket always contains the root
    upper = max(1.0, 2.0 / (1 - r))
    return brentq(lambda kappa: bessel_ratio(kappa) - r, 1e-12, upper, xtol=1e-14)


class VonMisesDistribution(AbstractCircularDistribution):
    """
    Von Mises distribution.

    f(x) = exp(kappa cos(x - mu)) / (2 pi I_0(kappa))

    Parameters
    ----------
    mu : float
        Location, wrapped to [0, 2pi)
    kappa : float
        Concentration, positive
    """

    def __init__(self, mu, kappa):
        self.mu = wrap_to_2pi(mu)
        self.kappa = _check_positive(kappa, 'kappa')

    def __repr__(self):
        return f"VonMisesDistribution(mu={self.mu:.4f}, kappa={self.kappa:.4f})"

    def pdf(self, xs):
        xs = np.asarray(xs, dtype=float)
        return np.exp(self.kappa * (np.cos(xs - self.mu) - 1)) / (2 * np.pi * i0e(self.kappa))

    def trigonometric_moment(self, n):
        return complex(ive(abs(n), self.kappa) / ive(0, self.kappa) * np.exp(1j * n * self.mu))

    def sample(self, n, rng=None):
        rng = np.random.default_rng(rng)
        return wrap_to_2pi(rng.vonmises(self.mu, self.kappa, n))

    @staticmethod
    def from_moment(m):
        """
        Von Mises distribution with the given first trigonometric moment.

        Parameters
        ----------
        m : complex
            First trigonometric moment

        Returns
        -------
        VonMisesDistribution
            Moment-matched distribution
        """
        m_abs = _check_moment_abs(m)
        return VonMisesDistribution(np.angle(m), inverse_bessel_ratio(m_abs))


class WrappedNormalDistribution(AbstractCircularDistribution):
    """
    Wrapped normal distribution.

    Parameters
    ----------
    mu : float
        Location, wrapped to [0, 2pi)
    sigma : float
        Standard deviation of the unwrapped normal, positive
    """

    def __init__(self, mu, sigma):
        self.mu = wrap_to_2pi(mu)
        self.sigma = _check_positive(sigma, 'sigma')

    def __repr__(self):
        return f"WrappedNormalDistribution(mu={self.mu:.4f}, sigma={self.sigma:.4f})"

    def pdf(self, xs):
        xs = wrap_to_2pi(np.asarray(xs, dtype=float))
        n_wraps = max(WRAPPED_NORMAL_WRAPS, int(np.ceil(6 * self.sigma / (2 * np.pi))) + 1)
        offsets = 2 * np.pi * np.arange(-n_wraps, n_wraps + 1)
        return np.sum(norm.pdf(np.add.outer(xs, offsets), loc=self.mu, scale=self.sigma), axis=-1)

    def trigonometric_moment(self, n):
        return complex(np.exp(1j * n * self.mu - n ** 2 * self.sigma ** 2 / 2))

    def sample(self, n, rng=None):
        rng = np.random.default_rng(rng)
        return wrap_to_2pi(rng.normal(self.mu, self.sigma, n))

    @staticmethod
    def from_moment(m):
        """Wrapped normal distribution with the given first trigonometric moment."""
        m_abs = _check_moment_abs(m)
        return WrappedNormalDistribution(np.angle(m), np.sqrt(-2 * np.log(m_abs)))


class WrappedCauchyDistribution(AbstractCircularDistribution):
    """
    Wrapped Cauchy distribution.

    Parameters
    ----------
    mu : float
        Location, wrapped to [0, 2pi)
    gamma : float
        Scale, positive
    """

    def __init__(self, mu, gamma):
        self.mu = wrap_to_2pi(mu)
        self.gamma = _check_positive(gamma, 'gamma')

    def __repr__(self):
        return f"WrappedCauchyDistribution(mu={self.mu:.4f}, gamma={self.gamma:.4f})"

    def pdf(self, xs):
        xs = np.asarray(xs, dtype=float)
        return np.sinh(self.gamma) / (2 * np.pi * (np.cosh(self.gamma) - np.cos(xs - self.mu)))

    def trigonometric_moment(self, n):
        return complex(np.exp(1j * n * self.mu - abs(n) * self.gamma))

    def entropy(self):
        """Differential entropy, log(2 pi (1 - exp(-2 gamma)))."""
        return float(np.log(-2 * np.pi * np.expm1(-2 * self.gamma)))

    def sample(self, n, rng=None):
        # Inverts the cdf of the unwrapped Cauchy distribution
        rng = np.random.default_rng(rng)
        u = rng.random(n)
        return wrap_to_2pi(self.mu + self.gamma * np.tan(np.pi * (u - 0.5)))

    def convolve(self, other):
        """Exact convolution with another wrapped Cauchy distribution."""
        if not isinstance(other, WrappedCauchyDistribution):
            raise ValidationError("Can only convolve with a WrappedCauchyDistribution")
        return WrappedCauchyDistribution(self.mu + other.mu, self.gamma + other.gamma)

    @staticmethod
    def from_moment(m):
        """Wrapped Cauchy distribution with the given first trigonometric moment."""
        m_abs = _check_moment_abs(m)
        return WrappedCauchyDistribution(np.angle(m), -np.log(m_abs))


class WrappedExponentialDistribution(AbstractCircularDistribution):
    """
    Wrapped exponential distribution, starting at 0.

    f(x) = lambda exp(-lambda x) / (1 - exp(-2 pi lambda)),  x in [0, 2pi)

    Parameters
    ----------
    lambda_ : float
        Rate, positive
    """

    def __init__(self, lambda_):
        self.lambda_ = _check_positive(lambda_, 'lambda_')

    def __repr__(self):
        return f"WrappedExponentialDistribution(lambda_={self.lambda_:.4f})"

    def pdf(self, xs):
        xs = wrap_to_2pi(np.asarray(xs, dtype=float))
        return self.lambda_ * np.exp(-self.lambda_ * xs) / -np.expm1(-2 * np.pi * self.lambda_)

    def trigonometric_moment(self, n):
        return complex(1 / (1 - 1j * n / self.lambda_))

    def sample(self, n, rng=None):
        rng = np.random.default_rng(rng)
        u = rng.random(n)
        mass = -np.expm1(-2 * np.pi * self.lambda_)
        return wrap_to_2pi(-np.log1p(-u * mass) / self.lambda_)


class WrappedLaplaceDistribution(AbstractCircularDistribution):
    """
    Wrapped asymmetric Laplace distribution, centered at 0.

    The unwrapped density is lambda / (kappa + 1/kappa) times exp(-lambda kappa x)
    for x >= 0 and exp(lambda x / kappa) for x < 0. kappa = 1 gives the
    symmetric case.

    Parameters
    ----------
    lambda_ : float
        Rate, positive
    kappa : float
        Asymmetry, positive

    References
    ----------
    Jammalamadaka and Kozubowski, New families of wrapped distributions for
    modeling skew circular data, 2004.
    """

    def __init__(self, lambda_, kappa):
        self.lambda_ = _check_positive(lambda_, 'lambda_')
        self.kappa = _check_positive(kappa, 'kappa')

    def __repr__(self):
        return f"WrappedLaplaceDistribution(lambda_={self.lambda_:.4f}, kappa={self.kappa:.4f})"

    def pdf(self, xs):
        xs = wrap_to_2pi(np.asarray(xs, dtype=float))
        right = self.lambda_ * self.kappa
        left = self.lambda_ / self.kappa
        # Left tail is shifted by 2pi so the exponent stays non-positive
        return (self.lambda_ / (self.kappa + 1 / self.kappa)
                * (np.exp(-right * xs) / -np.expm1(-2 * np.pi * right)
                   + np.exp(left * (xs - 2 * np.pi)) / -np.expm1(-2 * np.pi * left)))

    def trigonometric_moment(self, n):
        return complex(1 / ((1 - 1j * n / (self.lambda_ * self.kappa))
                            * (1 + 1j * n * self.kappa / self.lambda_)))

    def sample(self, n, rng=None):
        # Difference of two exponentials, wrapped
        rng = np.random.default_rng(rng)
        right = rng.exponential(1 / (self.lambda_ * self.kappa), n)
        left = rng.exponential(self.kappa / self.lambda_, n)
        return wrap_to_2pi(right - left)


class CircularUniformDistribution(AbstractCircularDistribution):
    """Uniform distribution on the circle."""

    def __repr__(self):
        return "CircularUniformDistribution()"

    def pdf(self, xs):
        return np.full(np.shape(xs), 1 / (2 * np.pi))

    def trigonometric_moment(self, n):
        return 1.0 + 0j if n == 0 else 0j

    def integral(self, l=0.0, r=2 * np.pi):
        return (r - l) / (2 * np.pi)

    def sample(self, n, rng=None):
        rng = np.random.default_rng(rng)
        return rng.uniform(0, 2 * np.pi, n)


class PiecewiseConstantDistribution(AbstractCircularDistribution):
    """
    Piecewise constant density on n equally sized intervals.

    Parameters
    ----------
    w : array_like
        Non-negative interval weights (n,). Normalized so that the
        density integrates to one.
    """

    def __init__(self, w):
        w = np.asarray(w, dtype=float)
        if w.ndim != 1 or len(w) == 0:
            raise ValidationError(f"Weights must be a non-empty 1-D array, got shape {w.shape}")
        if np.any(w < 0) or np.sum(w) <= 0:
            raise ValidationError("Weights must be non-negative with a positive sum")
        self.w = w / (np.mean(w) * 2 * np.pi)

    def __repr__(self):
        return f"PiecewiseConstantDistribution(n={len(self.w)})"

    @staticmethod
    def left_border(m, n):
        """Left border of the m-th of n intervals (0-based)."""
        return 2 * np.pi / n * m

    @staticmethod
    def right_border(m, n):
        """Right border of the m-th of n intervals (0-based)."""
        return 2 * np.pi / n * (m + 1)

    def pdf(self, xs):
        xs = wrap_to_2pi(np.asarray(xs, dtype=float))
        idx = np.minimum(np.floor(xs / (2 * np.pi) * len(self.w)).astype(int), len(self.w) - 1)
        return self.w[idx]

    def trigonometric_moment(self, n):
        if n == 0:
            return 1.0 + 0j
        n_intervals = len(self.w)
        borders = 2 * np.pi / n_intervals * np.arange(n_intervals + 1)
        interval_integrals = self.w * (np.exp(1j * n * borders[1:]) - np.exp(1j * n * borders[:-1]))
        return complex(-1j / n * np.sum(interval_integrals))

    def sample(self, n, rng=None):
        rng = np.random.default_rng(rng)
        n_intervals = len(self.w)
        idx = rng.choice(n_intervals, size=n, p=self.w / np.sum(self.w))
        return (idx + rng.random(n)) * 2 * np.pi / n_intervals

    @staticmethod
    def calculate_parameters_numerically(pdf, n):
        """
        Interval weights approximating an arbitrary pdf.

        Parameters
        ----------
        pdf : callable
            Density accepting an array of angles
        n : int
            Number of intervals

        Returns
        -------
        np.ndarray
            Probability mass of each interval (n,)
        """
        return np.array([
            quad(lambda x: float(np.asarray(pdf(np.array([x])))[0]),
                 PiecewiseConstantDistribution.left_border(m, n),
                 PiecewiseConstantDistribution.right_border(m, n))[0]
            for m in range(n)
        ])


class CircularMixture(AbstractCircularDistribution):
    """
    Mixture of circular distributions.

    Parameters
    ----------
    distributions : sequence of AbstractCircularDistribution
        Components
    w : array_like
        Non-negative component weights, normalized to sum one
    """

    def __init__(self, distributions, w):
        distributions = list(distributions)
        w = np.asarray(w, dtype=float)
        if len(distributions) == 0 or w.shape != (len(distributions),):
            raise ValidationError("Need one weight per mixture component")
        if not all(isinstance(dist, AbstractCircularDistribution) for dist in distributions):
            raise ValidationError("All components must be circular distributions")
        if np.any(w < 0) or np.sum(w) <= 0:
            raise ValidationError("Weights must be non-negative with a positive sum")
        self.distributions = distributions
        self.w = w / np.sum(w)

    def __repr__(self):
        return f"CircularMixture(n={len(self.distributions)})"

    def pdf(self, xs):
        xs = np.asarray(xs, dtype=float)
        return sum(w * dist.pdf(xs) for dist, w in zip(self.distributions, self.w))

    def trigonometric_moment(self, n):
        return complex(sum(w * dist.trigonometric_moment(n)
                           for dist, w in zip(self.distributions, self.w)))

    def sample(self, n, rng=None):
        rng = np.random.default_rng(rng)
        counts = rng.multinomial(n, self.w)
        samples = np.concatenate([
            dist.sample(count, rng) for dist, count in zip(self.distributions, counts)
        ]) if n > 0 else np.zeros(0)
        return rng.permutation(samples)
