"""
Conversion of circular distributions into Fourier densities.

Each distribution family registers a converter with
register_fourier_conversion. A converter receives the distribution, the
number of coefficients and the desired transformation, and returns a
FourierDensity, or None if it has no formula for that transformation.
Families without a converter (or without a formula) fall back to
sampling their pdf and refitting via FFT.

Example
-------
>>> @register_fourier_conversion(MyDistribution)
... def _my_distribution(dist, n_coefficients, transformation):
...     if transformation != 'identity':
...         return None
...     ...
"""

import warnings
from typing import Callable, Dict, Optional, Type

import numpy as np
from scipy.special import gammaln, ive

from ..constants import DEFAULT_TRANSFORMATION, SERIES_SUMMANDS
from ..exceptions import NumericApproximationWarning, ValidationError
from ..utils.logger import get_logger
from .base import AbstractCircularDistribution
from .closed_form import (
    CircularMixture,
    CircularUniformDistribution,
    VonMisesDistribution,
    WrappedCauchyDistribution,
    WrappedExponentialDistribution,
    WrappedLaplaceDistribution,
    WrappedNormalDistribution,
)
from .discrete import DiscreteDistribution
from .fourier import (
    FourierDensity,
    _check_n_coefficients,
    _check_transformation,
    _silent_renormalization,
)

logger = get_logger(__name__)

FourierConverter = Callable[[AbstractCircularDistribution, int, str], Optional[FourierDensity]]


# ============================================================================
# Registry
# ============================================================================

FOURIER_CONVERSION_REGISTRY: Dict[Type, FourierConverter] = {}


def register_fourier_conversion(cls: Type, override: bool = False) -> Callable:
    """Decorator to register the Fourier converter of a distribution family"""
    def decorator(converter: FourierConverter) -> FourierConverter:
        if cls in FOURIER_CONVERSION_REGISTRY and not override:
            raise ValidationError(f"Fourier conversion for '{cls.__name__}' already registered")
        FOURIER_CONVERSION_REGISTRY[cls] = converter
        return converter
    return decorator


def get_fourier_converter(cls: Type) -> Optional[FourierConverter]:
    """Converter of the closest registered base class, None if there is none."""
    for base in cls.__mro__:
        if base in FOURIER_CONVERSION_REGISTRY:
            return FOURIER_CONVERSION_REGISTRY[base]
    return None


def list_fourier_conversions() -> Dict[Type, FourierConverter]:
    """List all registered Fourier converters"""
    return FOURIER_CONVERSION_REGISTRY.copy()


def from_closed_form(distribution, n_coefficients, transformation=DEFAULT_TRANSFORMATION):
    """
    Convert a circular distribution into a FourierDensity.

    Parameters
    ----------
    distribution : AbstractCircularDistribution
        Distribution to convert
    n_coefficients : int
        Odd total number of coefficients
    transformation : str, optional
        Encoding tag of the result (default: 'sqrt')

    Returns
    -------
    FourierDensity
        Converted density

    Warns
    -----
    NumericApproximationWarning
        If no analytic formula exists and the pdf is sampled instead
    """
    if not isinstance(distribution, AbstractCircularDistribution):
        raise ValidationError("First argument has to be a circular distribution")
    n_coefficients = _check_n_coefficients(n_coefficients)
    _check_transformation(transformation)

    converter = get_fourier_converter(type(distribution))
    if converter is not None:
        result = converter(distribution, n_coefficients, transformation)
        if result is not None:
            logger.debug("Converted %s to '%s' Fourier density analytically",
                         type(distribution).__name__, transformation)
            return result

    warnings.warn(
        f"No explicit formula available for {type(distribution).__name__} "
        f"with '{transformation}' transformation, sampling the pdf",
        NumericApproximationWarning, stacklevel=2)
    return FourierDensity.from_function(distribution.pdf, n_coefficients, transformation)


# ============================================================================
# Converters
# ============================================================================

def _shifted(fd, mu):
    return fd.shift(mu) if mu != 0 else fd


@register_fourier_conversion(FourierDensity)
def _fourier_density(fd, n_coefficients, transformation):
    return fd.transform(transformation, n_coefficients)


@register_fourier_conversion(VonMisesDistribution)
def _von_mises(dist, n_coefficients, transformation):
    last_k = (n_coefficients - 1) // 2
    k = np.arange(last_k + 1)
    kappa = dist.kappa

    # Exponentially scaled Bessel functions, the scaling cancels in each ratio
    if transformation == 'sqrt':
        a = 2 * ive(k, kappa / 2) / np.sqrt(2 * np.pi * ive(0, kappa))
    elif transformation == 'identity':
        a = ive(k, kappa) / (np.pi * ive(0, kappa))
        a[0] = 1 / np.pi
    else:
        a = np.zeros(last_k + 1)
        a[0] = -2 * (np.log(2 * np.pi) + np.log(ive(0, kappa)) + kappa)
        if last_k >= 1:
            a[1] = kappa

    return _shifted(FourierDensity(a, np.zeros(last_k), transformation), dist.mu)


@register_fourier_conversion(WrappedNormalDistribution)
def _wrapped_normal(dist, n_coefficients, transformation):
    if transformation == 'sqrt':
        return None

    last_k = (n_coefficients - 1) // 2
    k = np.arange(1, last_k + 1)
    sigma_sq = dist.sigma ** 2

    if transformation == 'identity':
        a = np.concatenate([[1 / np.pi], np.exp(-sigma_sq * k ** 2 / 2) / np.pi])
    else:
        # Jacobi triple product, the Euler function is truncated once
        # its factors differ from one by less than exp(-50)
        m = np.arange(1, max(SERIES_SUMMANDS, int(np.ceil(50 / sigma_sq))) + 1)
        log_euler = np.sum(np.log1p(-np.exp(-sigma_sq * m)))
        a = np.concatenate([[2 * (-np.log(2 * np.pi) + log_euler)],
                            (-1.0) ** (k + 1) / (k * np.sinh(k * sigma_sq / 2))])

    return _shifted(FourierDensity(a, np.zeros(last_k), transformation), dist.mu)


@register_fourier_conversion(WrappedCauchyDistribution)
def _wrapped_cauchy(dist, n_coefficients, transformation):
    last_k = (n_coefficients - 1) // 2
    k = np.arange(last_k + 1)
    gamma = dist.gamma

    if transformation == 'sqrt':
        warnings.warn("Coefficients of the sqrt of a wrapped Cauchy use a truncated "
                      "hypergeometric series", NumericApproximationWarning, stacklevel=3)
        log_sech = -np.log(np.cosh(gamma / 2))
        a = np.zeros(last_k + 1)
        for i in k:
            # Summands with n < k vanish as 1/Gamma(1 - k + n) = 0
            n = np.arange(i, SERIES_SUMMANDS + 1)
            log_terms = (2 * gammaln(n + 0.5) + 2 * n * log_sech
                         - gammaln(1 - i + n) - gammaln(1 + i + n))
            a[i] = np.sum(np.exp(log_terms))
        a *= np.sqrt(2 / np.pi ** 3 * np.tanh(gamma / 2))
    elif transformation == 'identity':
        a = np.exp(-k * gamma) / np.pi
    else:
        a = np.zeros(last_k + 1)
        a[0] = 2 * np.log(-np.expm1(-2 * gamma) / (2 * np.pi))
        a[1:] = 2 * np.exp(-k[1:] * gamma) / k[1:]

    with _silent_renormalization():
        fd = FourierDensity(a, np.zeros(last_k), transformation)
    return _shifted(fd, dist.mu)


@register_fourier_conversion(WrappedExponentialDistribution)
def _wrapped_exponential(dist, n_coefficients, transformation):
    last_k = (n_coefficients - 1) // 2
    lam = dist.lambda_
    k = np.arange(last_k + 1)

    if transformation == 'sqrt':
        # (e^(pi lam) - 1) / sqrt(e^(2 pi lam) - 1) = sqrt(tanh(pi lam / 2))
        scale = np.sqrt(np.tanh(np.pi * lam / 2)) / (np.pi * (4 * k ** 2 + lam ** 2))
        a = 2 * lam ** 1.5 * scale
        b = 4 * k[1:] * np.sqrt(lam) * scale[1:]
    elif transformation == 'identity':
        a = lam ** 2 / (np.pi * (lam ** 2 + k ** 2))
        b = lam * k[1:] / (np.pi * (lam ** 2 + k[1:] ** 2))
    else:
        a = np.zeros(last_k + 1)
        a[0] = -2 * np.pi * lam - 2 * np.log(-np.expm1(-2 * np.pi * lam)) + 2 * np.log(lam)
        b = 2 * lam / k[1:]

    return FourierDensity(a, b, transformation)


@register_fourier_conversion(WrappedLaplaceDistribution)
def _wrapped_laplace(dist, n_coefficients, transformation):
    if transformation != 'identity':
        return None

    last_k = (n_coefficients - 1) // 2
    lam, kappa = dist.lambda_, dist.kappa
    k = np.arange(last_k + 1)
    denominator = np.pi * (lam ** 2 * kappa ** 2 + k ** 2) * (kappa ** 2 * k ** 2 + lam ** 2)
    a = kappa ** 2 * lam ** 2 * (k ** 2 + lam ** 2) / denominator
    b = kappa * lam ** 3 * k[1:] * (1 - kappa ** 2) / denominator[1:]
    return FourierDensity(a, b, transformation)


@register_fourier_conversion(CircularUniformDistribution)
def _circular_uniform(dist, n_coefficients, transformation):
    last_k = (n_coefficients - 1) // 2
    a0 = {'sqrt': np.sqrt(2 / np.pi),
          'identity': 1 / np.pi,
          'log': -2 * np.log(2 * np.pi)}[transformation]
    return FourierDensity(np.concatenate([[a0], np.zeros(last_k)]), np.zeros(last_k),
                          transformation)


@register_fourier_conversion(DiscreteDistribution)
def _discrete(dist, n_coefficients, transformation):
    last_k = (n_coefficients - 1) // 2
    moments = np.array([dist.trigonometric_moment(k) for k in range(1, last_k + 1)])
    identity = FourierDensity(np.concatenate([[1 / np.pi], np.real(moments) / np.pi]),
                              np.imag(moments) / np.pi, 'identity')
    if transformation == 'identity':
        return identity

    warnings.warn(f"No explicit formula available for Dirac mixtures with "
                  f"'{transformation}' transformation, using FFT",
                  NumericApproximationWarning, stacklevel=3)
    with _silent_renormalization():
        return identity._transform_via_fft(transformation, n_coefficients)


@register_fourier_conversion(CircularMixture)
def _mixture(dist, n_coefficients, transformation):
    if transformation != 'identity':
        return None

    last_k = (n_coefficients - 1) // 2
    a = np.zeros(last_k + 1)
    b = np.zeros(last_k)
    for component, w in zip(dist.distributions, dist.w):
        fd = from_closed_form(component, n_coefficients, 'identity')
        a += w * fd.a
        b += w * fd.b
    return FourierDensity(a, b, 'identity')
