"""
Error kinds raised by circular estimation.

Fatal conditions are exceptions. Results that were obtained through an
approximate path are reported with NumericApproximationWarning instead.
"""


class CircularEstimationError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(CircularEstimationError, ValueError):
    """Malformed input: shapes, dispersion parameters, weights or tags."""


class MismatchError(ValidationError):
    """Two operands use different encodings."""


class NormalizationError(CircularEstimationError, ArithmeticError):
    """Normalizing constant is numerically zero."""


class UnsupportedOperationError(CircularEstimationError, NotImplementedError):
    """
    Operation is not available for the given encoding or transform pair.

    Parameters
    ----------
    message : str
        Human readable description
    identifier : str, optional
        Short machine readable tag, e.g. 'PDF:UNDEFINED'
    """

    def __init__(self, message, identifier=None):
        super().__init__(message)
        self.identifier = identifier


class DegenerateWeightsError(CircularEstimationError, ArithmeticError):
    """Importance weights sum to (numerically) zero."""


class NumericApproximationWarning(UserWarning):
    """A result was obtained via an approximate or fallback path."""
