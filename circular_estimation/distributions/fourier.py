"""
Fourier series representation of circular densities.

The coefficients a_0..a_n (cosine) and b_1..b_n (sine) describe a
transformation of the density selected by an encoding tag:

- 'sqrt': the series approximates sqrt(f); the density is its square,
  which keeps it non-negative and allows exact products
- 'identity': the series approximates f itself
- 'log': the series approximates log(f)

Whenever a grid based refit is required the series is sampled on
2^ceil(log2(n)) equally spaced points and refitted with the FFT.

See Pfaff, Kurz, Hanebeck, Multimodal Circular Filtering Using Fourier
Series, Fusion 2015.
"""

import warnings
from contextlib import contextmanager

import numpy as np

from ..constants import (
    DEFAULT_TRANSFORMATION,
    IDENTITY_NORMALIZATION_TOLERANCE,
    SQRT_NORMALIZATION_TOLERANCE,
    TRANSFORMATIONS,
    ZERO_NORMALIZER_TOLERANCE,
)
from ..exceptions import (
    MismatchError,
    NormalizationError,
    NumericApproximationWarning,
    UnsupportedOperationError,
    ValidationError,
)
from ..utils.logger import get_logger
from .base import AbstractCircularDistribution

logger = get_logger(__name__)

_RENORMALIZATION_MESSAGE = "Coefficients apparently do not belong to a normalized density"

# Method used by transform() for each (source, target) pair
_TRANSFORM_METHODS = {
    ('sqrt', 'sqrt'): 'truncate',
    ('identity', 'identity'): 'truncate',
    ('log', 'log'): 'truncate',
    ('sqrt', 'identity'): 'coefficients',
    ('identity', 'sqrt'): 'fft',
    ('identity', 'log'): 'fft',
    ('sqrt', 'log'): 'fft',
    ('log', 'identity'): 'fft',
    ('log', 'sqrt'): 'fft',
}


@contextmanager
def _silent_renormalization():
    """Suppress the construction-time renormalization notice."""
    with warnings.catch_warnings():
        warnings.filterwarnings('ignore', message=_RENORMALIZATION_MESSAGE,
                                category=NumericApproximationWarning)
        yield


def _check_n_coefficients(n_coefficients):
    if int(n_coefficients) != n_coefficients or n_coefficients < 1 or n_coefficients % 2 == 0:
        raise ValidationError(
            f"Invalid number of coefficients {n_coefficients}, number has to be odd and positive")
    return int(n_coefficients)


def _check_transformation(transformation):
    if transformation not in TRANSFORMATIONS:
        raise ValidationError(
            f"Transformation '{transformation}' not recognized. Use one of {TRANSFORMATIONS}")
    return transformation


def _grid_size(n_values):
    """Power of two FFT size for at least n_values coefficients."""
    return int(2 ** np.ceil(np.log2(max(n_values, 2))))


def _normalize(a, b, transformation):
    """Scale coefficients so the decoded density integrates to one."""
    if transformation == 'log':
        logger.debug("Unable to test normalization of log transformed density")
        return a, b

    if transformation == 'sqrt':
        # a_0 of the squared series
        a0 = a[0] ** 2 / 2 + np.sum(a[1:] ** 2) + np.sum(b ** 2)
        tolerance = SQRT_NORMALIZATION_TOLERANCE
    else:
        a0 = a[0]
        tolerance = IDENTITY_NORMALIZATION_TOLERANCE

    if abs(a0 - 1 / np.pi) >= tolerance:
        if a0 < ZERO_NORMALIZER_TOLERANCE:
            raise NormalizationError(
                "a0 is too close to zero, this usually points to a user error")
        warnings.warn(f"{_RENORMALIZATION_MESSAGE}. Normalizing...",
                      NumericApproximationWarning, stacklevel=4)

    scale = 1 / np.sqrt(a0 * np.pi) if transformation == 'sqrt' else 1 / (a0 * np.pi)
    if scale == 1:
        return a, b
    return a * scale, b * scale


class FourierDensity(AbstractCircularDistribution):
    """
    Circular density represented by a truncated Fourier series.

    Parameters
    ----------
    a : array_like
        Cosine coefficients a_0..a_n (n+1,); a_0 is twice the constant term
    b : array_like
        Sine coefficients b_1..b_n (n,)
    transformation : str, optional
        Encoding tag: 'sqrt' (default), 'identity' or 'log'

    Attributes
    ----------
    a : np.ndarray
        Read-only cosine coefficients
    b : np.ndarray
        Read-only sine coefficients
    transformation : str
        Encoding tag

    Raises
    ------
    ValidationError
        If the coefficient arrays are not 1-D, not finite, or len(b) != len(a) - 1
    NormalizationError
        If the normalizing constant is numerically zero

    Notes
    -----
    Coefficients of 'sqrt' and 'identity' densities are rescaled at
    construction so the density integrates to one. A deviation beyond
    the tolerance in constants.py is reported with a
    NumericApproximationWarning.
    """

    def __init__(self, a, b, transformation=DEFAULT_TRANSFORMATION):
        if isinstance(a, AbstractCircularDistribution):
            raise ValidationError(
                "You gave a distribution as the first argument. To convert distributions "
                "to a Fourier representation, use FourierDensity.from_closed_form")
        a = np.array(a, dtype=float)
        b = np.array(b, dtype=float)
        if a.ndim != 1 or b.ndim != 1:
            raise ValidationError(
                f"Coefficients must be 1-D arrays, got shapes {a.shape} and {b.shape}")
        if len(a) == 0 or len(b) != len(a) - 1:
            raise ValidationError(
                f"Coefficients have incompatible lengths {len(a)} and {len(b)}")
        if not np.all(np.isfinite(a)) or not np.all(np.isfinite(b)):
            raise ValidationError("Coefficients must be finite")
        _check_transformation(transformation)

        a, b = _normalize(a, b, transformation)
        a.setflags(write=False)
        b.setflags(write=False)
        self._a = a
        self._b = b
        self._transformation = transformation

    @property
    def a(self):
        return self._a

    @property
    def b(self):
        return self._b

    @property
    def transformation(self):
        return self._transformation

    @property
    def n_coefficients(self):
        """Total number of real coefficients, len(a) + len(b)."""
        return len(self._a) + len(self._b)

    def __repr__(self):
        return (f"FourierDensity(n_coefficients={self.n_coefficients}, "
                f"transformation='{self._transformation}')")

    @property
    def c(self):
        """
        Complex coefficients c_{-n}..c_n (2n+1,).

        c_0 = a_0 / 2 and c_k = (a_k - i b_k) / 2; c_{-k} = conj(c_k)
        since the series is real.
        """
        positive = (self._a[1:] - 1j * self._b) / 2
        return np.concatenate([np.conj(positive[::-1]), [self._a[0] / 2], positive])

    @classmethod
    def from_complex(cls, c, transformation):
        """
        Create a density from complex coefficients c_{-n}..c_n.

        Both halves are averaged so that neither negative nor positive
        indices are favored, and the result is forced to be real.

        Parameters
        ----------
        c : array_like
            Complex coefficients of odd length
        transformation : str
            Encoding tag

        Returns
        -------
        FourierDensity
        """
        c = np.asarray(c, dtype=complex)
        if c.ndim != 1 or len(c) % 2 == 0:
            raise ValidationError(f"Need an odd number of complex coefficients, got {c.shape}")
        center = len(c) // 2
        if abs(c[center]) == 0:
            raise NormalizationError("c0 is zero, cannot normalize to valid density")

        a = np.real(c + c[::-1])[center:]
        b = -np.imag(c - c[::-1])[center + 1:]
        return cls(a, b, transformation)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def value(self, xs):
        """
        Evaluate the series without undoing the transformation.

        a_0/2 + sum_k a_k cos(k x) + b_k sin(k x)
        """
        xs = np.asarray(xs, dtype=float)
        flat = xs.reshape(-1)
        k = np.arange(1, len(self._a))
        angles = np.outer(flat, k)
        values = self._a[0] / 2 + np.cos(angles) @ self._a[1:] + np.sin(angles) @ self._b
        return values.reshape(xs.shape)

    def pdf(self, xs):
        """
        Evaluate the density at each angle in xs.

        Parameters
        ----------
        xs : array_like
            Angles, any range

        Returns
        -------
        np.ndarray
            Density values, same shape as xs
        """
        values = self.value(xs)
        if self._transformation == 'sqrt':
            return values ** 2
        if self._transformation == 'identity':
            return values
        warnings.warn("Density may not be normalized", NumericApproximationWarning, stacklevel=2)
        return np.exp(values)

    def _density_values(self, grid):
        """Density values on a grid, without the log normalization warning."""
        values = self.value(grid)
        if self._transformation == 'sqrt':
            return values ** 2
        if self._transformation == 'log':
            return np.exp(values)
        return values

    def integral(self, l=0.0, r=2 * np.pi):
        """
        Integral of the pdf from l to r, computed analytically.

        Parameters
        ----------
        l : float, optional
            Left bound (default: 0)
        r : float, optional
            Right bound (default: 2pi); r < l negates the result

        Returns
        -------
        float
            Value of the integral

        Raises
        ------
        UnsupportedOperationError
            For log transformed densities ('PDF:UNDEFINED'); use
            integral_numerical instead
        """
        if self._transformation == 'log':
            raise UnsupportedOperationError(
                "Analytic integral not supported for log transformation",
                identifier='PDF:UNDEFINED')
        fd = self._to_identity() if self._transformation == 'sqrt' else self

        a, b = fd.a, fd.b
        k = np.arange(1, len(a))
        result = (a[0] / 2 * (r - l)
                  + np.sum((a[1:] * (np.sin(k * r) - np.sin(k * l))
                            - b * (np.cos(k * r) - np.cos(k * l))) / k))
        return float(result)

    def trigonometric_moment(self, n):
        """
        Calculate the n-th trigonometric moment analytically.

        Parameters
        ----------
        n : int
            Moment index; negative indices give conjugated moments

        Returns
        -------
        complex
            n-th trigonometric moment
        """
        if n == 0:
            return 1.0 + 0j
        if n < 0:
            return np.conj(self.trigonometric_moment(-n))
        if self._transformation == 'log':
            raise UnsupportedOperationError(
                "Trigonometric moments not supported for log transformation, "
                "transform to 'identity' first")

        fd = self._to_identity() if self._transformation == 'sqrt' else self
        if n > len(fd.b):
            return 0j
        return complex(np.pi * np.conj(fd.a[n] - 1j * fd.b[n - 1]))

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------

    def _check_compatible(self, other, operation):
        if not isinstance(other, FourierDensity):
            raise ValidationError(f"Can only {operation} with another FourierDensity")
        if other.transformation != self._transformation:
            raise MismatchError(
                f"Transformations do not match ('{self._transformation}' vs. "
                f"'{other.transformation}'), transform before using {operation}")

    def _padded_c(self, length):
        """Complex coefficients zero-padded symmetrically to length."""
        c = self.c
        pad = (length - len(c)) // 2
        return np.pad(c, pad) if pad > 0 else c

    def multiply(self, other):
        """
        Pointwise product of two densities with equal transformation.

        The result is transformed with the same tag and renormalized;
        its number of coefficients grows to the sum of both.

        Parameters
        ----------
        other : FourierDensity
            Second factor

        Returns
        -------
        FourierDensity
            Product density
        """
        self._check_compatible(other, 'multiply')

        if self._transformation == 'log':
            warnings.warn("Not performing normalization when using log transformation",
                          NumericApproximationWarning, stacklevel=2)
            length = max(self.n_coefficients, other.n_coefficients)
            n = length // 2
            a = np.pad(self._a, (0, n + 1 - len(self._a))) + np.pad(other.a, (0, n + 1 - len(other.a)))
            b = np.pad(self._b, (0, n - len(self._b))) + np.pad(other.b, (0, n - len(other.b)))
            return FourierDensity(a, b, 'log')

        c = np.convolve(self.c, other.c)
        with _silent_renormalization():
            return FourierDensity.from_complex(c, self._transformation)

    def convolve(self, other, n_coefficients=None):
        """
        Circular convolution of two densities (not of their coefficients).

        Corresponds to the density of the sum of two independent angles.

        - identity: exact, 2pi times the product of complex coefficients
        - sqrt: exact on the squared series, then re-encoded as sqrt with
          an FFT round trip
        - log: approximate, via function values on a grid

        Parameters
        ----------
        other : FourierDensity
            Density to convolve with
        n_coefficients : int, optional
            Number of coefficients of the result (default: own number)

        Returns
        -------
        FourierDensity
            Convolved density
        """
        self._check_compatible(other, 'convolve')
        if n_coefficients is None:
            n_coefficients = self.n_coefficients
        n_coefficients = _check_n_coefficients(n_coefficients)

        length = max(self.n_coefficients, other.n_coefficients)
        c1 = self._padded_c(length)
        c2 = other._padded_c(length)

        if self._transformation == 'identity':
            with _silent_renormalization():
                result = FourierDensity.from_complex(2 * np.pi * c1 * c2, 'identity')
            return result.truncate(n_coefficients)

        if self._transformation == 'sqrt':
            c_conv = 2 * np.pi * np.convolve(c1, c1) * np.convolve(c2, c2)
            with _silent_renormalization():
                identity = FourierDensity.from_complex(c_conv, 'identity')
                return identity._transform_via_fft('sqrt', n_coefficients)

        warnings.warn("Convolution of log transformed densities is approximate",
                      NumericApproximationWarning, stacklevel=2)
        f_vals1 = np.exp(np.real(np.fft.ifft(np.fft.ifftshift(c1)) * length))
        f_vals2 = np.exp(np.real(np.fft.ifft(np.fft.ifftshift(c2)) * length))
        c_tmp = np.fft.fftshift(np.fft.fft(f_vals1) * np.fft.fft(f_vals2)) / length
        with _silent_renormalization():
            identity = FourierDensity.from_complex(c_tmp, 'identity')
            return identity._transform_via_fft('log', n_coefficients)

    def truncate(self, n_coefficients):
        """
        Keep the lowest n_coefficients coefficients.

        Fills up with zeros if fewer coefficients are available.

        Parameters
        ----------
        n_coefficients : int
            Odd total number of coefficients (one a_0 plus pairs)

        Returns
        -------
        FourierDensity
            Truncated or padded density
        """
        n_coefficients = _check_n_coefficients(n_coefficients)
        n_a = (n_coefficients + 1) // 2

        if n_a <= len(self._a):
            return FourierDensity(self._a[:n_a], self._b[:n_a - 1], self._transformation)

        logger.debug("Less coefficients than desired, filling up with zeros")
        missing = n_a - len(self._a)
        return FourierDensity(np.pad(self._a, (0, missing)), np.pad(self._b, (0, missing)),
                              self._transformation)

    def shift(self, angle):
        """
        Rotate the density by angle (towards positivity).

        Exact for every transformation.

        Parameters
        ----------
        angle : float
            Rotation in radians

        Returns
        -------
        FourierDensity
            Density of x + angle
        """
        k = np.arange(1, len(self._a))
        cos_k = np.cos(k * angle)
        sin_k = np.sin(k * angle)
        a_new = np.concatenate([[self._a[0]], self._a[1:] * cos_k - self._b * sin_k])
        b_new = self._b * cos_k + self._a[1:] * sin_k
        return FourierDensity(a_new, b_new, self._transformation)

    # ------------------------------------------------------------------
    # Transformations between encodings
    # ------------------------------------------------------------------

    def _to_identity(self):
        """Exact identity representation of a sqrt density (all coefficients)."""
        with _silent_renormalization():
            return FourierDensity.from_complex(np.convolve(self.c, self.c), 'identity')

    def transform(self, desired_transformation, n_coefficients=None, method=None):
        """
        Change the encoding of the density.

        Without an explicit method, the method is taken from a fixed
        table: 'coefficients' (exact) for sqrt -> identity, 'fft' for the
        other pairs and 'truncate' if the encoding does not change. The
        von Mises approximation ('vm') is only used when requested.

        Parameters
        ----------
        desired_transformation : str
            Target encoding tag
        n_coefficients : int, optional
            Number of coefficients of the result (default: own number)
        method : str, optional
            'coefficients', 'fft', 'vm' or 'truncate'

        Returns
        -------
        FourierDensity
            Density with the desired encoding
        """
        _check_transformation(desired_transformation)
        if n_coefficients is None:
            n_coefficients = self.n_coefficients
        if method is None:
            method = _TRANSFORM_METHODS[(self._transformation, desired_transformation)]
        logger.debug("Transforming %s -> %s via %s", self._transformation,
                     desired_transformation, method)

        if method == 'truncate':
            if desired_transformation != self._transformation:
                raise UnsupportedOperationError(
                    "Truncation cannot change the transformation")
            return self.truncate(n_coefficients)
        if method == 'coefficients':
            return self.transform_via_coefficients(desired_transformation, n_coefficients)
        if method == 'fft':
            return self.transform_via_fft(desired_transformation, n_coefficients)
        if method == 'vm':
            return self.transform_via_vm(desired_transformation, n_coefficients)
        raise ValidationError(f"Unknown transformation method: {method}")

    def transform_via_coefficients(self, desired_transformation, n_coefficients=None):
        """
        Exact transformation using coefficient algebra.

        Only sqrt -> identity (squaring by self-convolution) changes the
        encoding; the same encoding is merely truncated.

        Parameters
        ----------
        desired_transformation : str
            Target encoding tag
        n_coefficients : int, optional
            Number of coefficients of the result. Default keeps all
            coefficients of the squared series.

        Returns
        -------
        FourierDensity
        """
        _check_transformation(desired_transformation)
        if desired_transformation == self._transformation:
            return self.truncate(n_coefficients or self.n_coefficients)
        if (self._transformation, desired_transformation) != ('sqrt', 'identity'):
            raise UnsupportedOperationError(
                f"Transformation {self._transformation} -> {desired_transformation} "
                "not supported via coefficients")

        identity = self._to_identity()
        if n_coefficients is None:
            return identity
        return identity.truncate(n_coefficients)

    def transform_via_fft(self, desired_transformation, n_coefficients=None):
        """
        Transformation by sampling the density and refitting with the FFT.

        Approximate, reported with a NumericApproximationWarning.

        Parameters
        ----------
        desired_transformation : str
            Target encoding tag
        n_coefficients : int, optional
            Number of coefficients of the result (default: own number)

        Returns
        -------
        FourierDensity
        """
        _check_transformation(desired_transformation)
        if n_coefficients is None:
            n_coefficients = self.n_coefficients
        warnings.warn(
            f"Transforming {self._transformation} -> {desired_transformation} via FFT "
            "is approximate", NumericApproximationWarning, stacklevel=2)
        with _silent_renormalization():
            return self._transform_via_fft(desired_transformation, n_coefficients)

    def _transform_via_fft(self, desired_transformation, n_coefficients):
        n_coefficients = _check_n_coefficients(n_coefficients)
        # Squaring or exponentiating widens the spectrum of the density
        density_coefficients = (self.n_coefficients if self._transformation == 'identity'
                                else 2 * self.n_coefficients - 1)
        n_grid = _grid_size(max(n_coefficients, density_coefficients))
        grid = np.arange(n_grid) * 2 * np.pi / n_grid
        return FourierDensity.from_function_values(
            self._density_values(grid), n_coefficients, desired_transformation)

    def transform_via_vm(self, desired_transformation, n_coefficients=None):
        """
        Approximate transformation via a moment-matched von Mises.

        Only the first trigonometric moment of the identity density is
        used; a fast fallback when higher coefficients are irrelevant.

        Parameters
        ----------
        desired_transformation : str
            Target encoding tag
        n_coefficients : int, optional
            Number of coefficients of the result (default: own number)

        Returns
        -------
        FourierDensity
        """
        from .closed_form import CircularUniformDistribution, VonMisesDistribution
        from .conversion import from_closed_form

        if self._transformation != 'identity':
            raise UnsupportedOperationError(
                "Transformations of already transformed densities via von Mises not supported")
        _check_transformation(desired_transformation)
        if n_coefficients is None:
            n_coefficients = self.n_coefficients

        warnings.warn("Transformation via von Mises approximation only matches the first moment",
                      NumericApproximationWarning, stacklevel=2)
        m = self.trigonometric_moment(1)
        if abs(m) == 0:
            vm_equivalent = CircularUniformDistribution()
        else:
            vm_equivalent = VonMisesDistribution.from_moment(m)
        return from_closed_form(vm_equivalent, n_coefficients, desired_transformation)

    # ------------------------------------------------------------------
    # Construction from functions and other distributions
    # ------------------------------------------------------------------

    @classmethod
    def from_function_values(cls, f_vals, n_coefficients, desired_transformation=DEFAULT_TRANSFORMATION):
        """
        Fit a density to (untransformed) function values.

        Parameters
        ----------
        f_vals : array_like
            Density values on the grid 2pi j / N, j = 0..N-1
        n_coefficients : int
            Number of coefficients of the result
        desired_transformation : str, optional
            Encoding tag of the result (default: 'sqrt')

        Returns
        -------
        FourierDensity
        """
        n_coefficients = _check_n_coefficients(n_coefficients)
        _check_transformation(desired_transformation)
        f_vals = np.asarray(f_vals, dtype=float)
        if f_vals.ndim != 1 or len(f_vals) == 0:
            raise ValidationError("Function values must be a non-empty 1-D array")

        if desired_transformation == 'sqrt':
            f_vals = np.sqrt(np.maximum(f_vals, 0))
        elif desired_transformation == 'log':
            f_vals = np.log(np.maximum(f_vals, np.finfo(float).tiny))

        transformed = np.fft.fftshift(np.fft.fft(f_vals)) / len(f_vals)
        if len(f_vals) % 2 == 0:
            # The coefficient at the Nyquist frequency has no partner
            transformed = transformed[1:]

        return cls.from_complex(transformed, desired_transformation).truncate(n_coefficients)

    @classmethod
    def from_function(cls, fun, n_coefficients, desired_transformation=DEFAULT_TRANSFORMATION):
        """
        Fit a density to a function sampled on 2^ceil(log2(n)) points.

        Parameters
        ----------
        fun : callable
            Density, must accept an array of angles
        n_coefficients : int
            Number of coefficients of the result
        desired_transformation : str, optional
            Encoding tag of the result (default: 'sqrt')

        Returns
        -------
        FourierDensity
        """
        n_coefficients = _check_n_coefficients(n_coefficients)
        n_grid = _grid_size(n_coefficients)
        grid = np.arange(n_grid) * 2 * np.pi / n_grid
        return cls.from_function_values(np.asarray(fun(grid), dtype=float), n_coefficients,
                                        desired_transformation)

    @classmethod
    def from_closed_form(cls, distribution, n_coefficients, desired_transformation=DEFAULT_TRANSFORMATION):
        """
        Convert another circular distribution.

        Uses the analytic formula registered for the distribution's
        family and falls back to sampling its pdf otherwise; see
        conversion.py.
        """
        from .conversion import from_closed_form

        return from_closed_form(distribution, n_coefficients, desired_transformation)
