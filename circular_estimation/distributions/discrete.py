"""
Discrete (Dirac mixture) distributions on the circle and on the torus.

A discrete distribution is an ordered set of support positions with
non-negative weights summing to one. Positions are canonicalized into
[0, 2pi). Instances are immutable; every operation returns a new one.
"""

import numpy as np

from ..common.angles import wrap_to_2pi
from ..constants import DEGENERATE_WEIGHT_TOLERANCE, WEIGHT_SUM_TOLERANCE
from ..exceptions import DegenerateWeightsError, UnsupportedOperationError, ValidationError
from .base import AbstractCircularDistribution


def _check_weights(w, n):
    """Validate weights and renormalize them if their sum is off."""
    if w is None:
        return np.full(n, 1.0 / n)

    w = np.asarray(w, dtype=float)
    if w.ndim != 1 or len(w) != n:
        raise ValidationError(f"Expected {n} weights as a 1-D array, got shape {w.shape}")
    if not np.all(np.isfinite(w)) or np.any(w < 0):
        raise ValidationError("Weights must be finite and non-negative")

    total = np.sum(w)
    if total <= DEGENERATE_WEIGHT_TOLERANCE:
        raise DegenerateWeightsError("Weights sum to zero, cannot normalize")
    if abs(total - 1) > WEIGHT_SUM_TOLERANCE:
        w = w / total
    return w


def _interval_multiplicity(values, l, r):
    """
    Signed number of times each value lies in [l, r) on the circle.

    Intervals longer than 2pi cover the circle several times; a reversed
    interval (r < l) flips the sign.
    """
    if r < l:
        return -_interval_multiplicity(values, r, l)
    full_periods, rest = divmod(r - l, 2 * np.pi)
    relative = wrap_to_2pi(np.asarray(values) - l)
    return full_periods + (relative < rest)


def _readonly(array):
    array.setflags(write=False)
    return array


class DiscreteDistribution(AbstractCircularDistribution):
    """
    Wrapped Dirac mixture on the circle.

    Duplicate positions are allowed and are not merged.

    Parameters
    ----------
    d : array_like
        Support positions (n,), any range
    w : array_like, optional
        Non-negative weights (n,). Uniform if None. Renormalized when
        their sum differs from one by more than a tolerance.

    Attributes
    ----------
    d : np.ndarray
        Read-only support positions in [0, 2pi) (n,)
    w : np.ndarray
        Read-only weights (n,)

    Examples
    --------
    >>> wd = DiscreteDistribution([0.0, np.pi], [0.25, 0.75])
    >>> round(abs(wd.trigonometric_moment(1)), 6)
    0.5
    """

    def __init__(self, d, w=None):
        d = np.array(d, dtype=float)
        if d.ndim != 1:
            raise ValidationError(f"Support must be a 1-D array, got shape {d.shape}")
        if len(d) == 0:
            raise ValidationError("Support must contain at least one position")
        if not np.all(np.isfinite(d)):
            raise ValidationError("Support positions must be finite")

        self._d = _readonly(wrap_to_2pi(d))
        self._w = _readonly(np.array(_check_weights(w, len(d)), dtype=float))

    @property
    def d(self):
        return self._d

    @property
    def w(self):
        return self._w

    def __len__(self):
        return len(self._d)

    def __repr__(self):
        return f"DiscreteDistribution(n={len(self)})"

    def pdf(self, xs):
        raise UnsupportedOperationError(
            "A Dirac mixture has no density", identifier='PDF:UNDEFINED')

    def trigonometric_moment(self, n):
        """
        Calculate the n-th trigonometric moment.

        Exact by definition: sum_k w_k exp(i n d_k).

        Parameters
        ----------
        n : int
            Moment index

        Returns
        -------
        complex
            n-th trigonometric moment
        """
        return complex(np.sum(self._w * np.exp(1j * n * self._d)))

    def integral(self, l=0.0, r=2 * np.pi):
        """
        Weight mass inside [l, r).

        Reversing the interval negates the result; intervals longer
        than 2pi count each full period once.
        """
        return float(np.sum(self._w * _interval_multiplicity(self._d, l, r)))

    def sample(self, n, rng=None):
        """
        Draw n i.i.d. samples from the support.

        Inverse-CDF search over the cumulative weights; every returned
        value is one of the support positions.

        Parameters
        ----------
        n : int
            Number of samples, may be zero
        rng : np.random.Generator or int, optional
            Random source

        Returns
        -------
        np.ndarray
            Sampled positions (n,)
        """
        if n < 0:
            raise ValidationError(f"Number of samples must be non-negative, got {n}")
        rng = np.random.default_rng(rng)

        cum_weights = np.cumsum(self._w)
        indices = np.searchsorted(cum_weights, rng.random(n) * cum_weights[-1], side='right')
        indices = np.minimum(indices, len(self._d) - 1)

        return self._d[indices].copy()

    def apply_function(self, f):
        """
        Map every support position through f, keeping the weights.

        Parameters
        ----------
        f : callable
            Function angle -> angle, called once per position

        Returns
        -------
        DiscreteDistribution
            Transformed distribution
        """
        d_new = np.array([f(x) for x in self._d], dtype=float)
        return DiscreteDistribution(d_new, self._w)

    def reweigh(self, f):
        """
        Multiply every weight by f(position) and renormalize.

        Parameters
        ----------
        f : callable
            Non-negative function angle -> factor, called once per position

        Returns
        -------
        DiscreteDistribution
            Distribution on the same support with new weights

        Raises
        ------
        DegenerateWeightsError
            If the new weights sum to (numerically) zero
        """
        factors = np.array([f(x) for x in self._d], dtype=float)
        if np.any(factors < 0):
            raise ValidationError("Reweighing function must be non-negative")

        w_new = self._w * factors
        total = np.sum(w_new)
        if total <= DEGENERATE_WEIGHT_TOLERANCE:
            raise DegenerateWeightsError(
                "All weight mass was assigned to zero-likelihood positions")

        return DiscreteDistribution(self._d, w_new / total)

    def shift(self, angle):
        """Rotate all positions by angle."""
        return DiscreteDistribution(self._d + angle, self._w)

    def to_wrapped_normal(self):
        """
        Wrapped normal distribution with the same first moment.

        Returns
        -------
        WrappedNormalDistribution
            Moment-matched wrapped normal
        """
        from .closed_form import WrappedNormalDistribution

        return WrappedNormalDistribution.from_moment(self.trigonometric_moment(1))


class ToroidalDiscreteDistribution:
    """
    Dirac mixture on the torus [0, 2pi)^2.

    Parameters
    ----------
    d : array_like
        Support positions, column-wise (2, n)
    w : array_like, optional
        Non-negative weights (n,). Uniform if None.
    """

    def __init__(self, d, w=None):
        d = np.array(d, dtype=float)
        if d.ndim != 2 or d.shape[0] != 2:
            raise ValidationError(
                f"Support must be arranged column-wise as (2, n), got shape {d.shape}")
        if d.shape[1] == 0:
            raise ValidationError("Support must contain at least one position")

        self._d = _readonly(wrap_to_2pi(d))
        self._w = _readonly(np.array(_check_weights(w, d.shape[1]), dtype=float))

    @property
    def d(self):
        return self._d

    @property
    def w(self):
        return self._w

    def __len__(self):
        return self._d.shape[1]

    def marginal(self, dimension):
        """
        Marginal distribution of one coordinate.

        Keeps the weights and projects the support.

        Parameters
        ----------
        dimension : int
            0 or 1

        Returns
        -------
        DiscreteDistribution
            Marginal on the circle
        """
        if dimension not in (0, 1):
            raise ValidationError(f"Dimension must be 0 or 1, got {dimension}")
        return DiscreteDistribution(self._d[dimension], self._w)

    def trigonometric_moment(self, n):
        """n-th trigonometric moment of both coordinates (2,), complex."""
        return np.sum(self._w * np.exp(1j * n * self._d), axis=1)

    def integral(self, l1=0.0, r1=2 * np.pi, l2=0.0, r2=2 * np.pi):
        """Weight mass inside [l1, r1) x [l2, r2), orientation aware."""
        multiplicity = (_interval_multiplicity(self._d[0], l1, r1)
                        * _interval_multiplicity(self._d[1], l2, r2))
        return float(np.sum(self._w * multiplicity))

    def sample(self, n, rng=None):
        """Draw n samples from the support, column-wise (2, n)."""
        if n < 0:
            raise ValidationError(f"Number of samples must be non-negative, got {n}")
        rng = np.random.default_rng(rng)

        cum_weights = np.cumsum(self._w)
        indices = np.searchsorted(cum_weights, rng.random(n) * cum_weights[-1], side='right')
        indices = np.minimum(indices, len(self) - 1)

        return self._d[:, indices].copy()

    def apply_function(self, f):
        """Map every column through f: (2,) -> (2,), keeping the weights."""
        d_new = np.column_stack([np.asarray(f(x), dtype=float) for x in self._d.T])
        return ToroidalDiscreteDistribution(d_new, self._w)

    def reweigh(self, f):
        """Multiply every weight by f(column) and renormalize."""
        factors = np.array([f(x) for x in self._d.T], dtype=float)
        if np.any(factors < 0):
            raise ValidationError("Reweighing function must be non-negative")

        w_new = self._w * factors
        total = np.sum(w_new)
        if total <= DEGENERATE_WEIGHT_TOLERANCE:
            raise DegenerateWeightsError(
                "All weight mass was assigned to zero-likelihood positions")

        return ToroidalDiscreteDistribution(self._d, w_new / total)
