"""
Angle utilities for circular estimation.

Functions for wrapping angles to [0, 2pi) or [-pi, pi) and computing
angle differences correctly across the discontinuity.
"""

import numpy as np


def wrap_to_2pi(angle):
    """
    Wrap angle(s) to [0, 2pi).

    This is the canonical range for all stored support values.

    Parameters
    ----------
    angle : float or np.ndarray
        Angle(s) in radians, any range

    Returns
    -------
    float or np.ndarray
        Wrapped angle(s) in [0, 2pi)
    """
    angle = np.asarray(angle, dtype=float)
    wrapped = np.mod(angle, 2 * np.pi)
    # mod rounds tiny negative inputs up to exactly 2pi
    wrapped = np.where(wrapped >= 2 * np.pi, 0.0, wrapped)
    return wrapped if wrapped.ndim else float(wrapped)


def wrap_to_pi(angle):
    """
    Wrap angle(s) to [-pi, pi).

    Parameters
    ----------
    angle : float or np.ndarray
        Angle(s) in radians

    Returns
    -------
    float or np.ndarray
        Wrapped angle(s) in [-pi, pi)
    """
    angle = np.asarray(angle)
    wrapped = (angle + np.pi) % (2 * np.pi) - np.pi
    return wrapped


def angle_diff(angle1, angle2):
    """
    Compute the smallest signed difference between two angles.

    Handles the discontinuity at 0/2pi correctly.

    Parameters
    ----------
    angle1 : float or np.ndarray
        First angle(s) in radians
    angle2 : float or np.ndarray
        Second angle(s) in radians

    Returns
    -------
    float or np.ndarray
        Smallest angular difference in [-pi, pi]

    Examples
    --------
    >>> angle_diff(0.1, 2 * np.pi - 0.1)
    0.2
    """
    diff = np.asarray(angle1) - np.asarray(angle2)
    return np.arctan2(np.sin(diff), np.cos(diff))


def circular_mean(angles, weights=None):
    """
    Compute the circular mean of angles.

    Uses the atan2(sum(sin), sum(cos)) method for correct
    averaging across the 0/2pi discontinuity.

    Parameters
    ----------
    angles : np.ndarray
        Array of angles in radians
    weights : np.ndarray, optional
        Weights for each angle. If None, uniform weights are used.

    Returns
    -------
    float
        Circular mean angle in [0, 2pi)
    """
    angles = np.asarray(angles)
    if weights is None:
        weights = np.ones(len(angles))
    else:
        weights = np.asarray(weights)

    sin_sum = np.dot(np.sin(angles), weights)
    cos_sum = np.dot(np.cos(angles), weights)

    return wrap_to_2pi(np.arctan2(sin_sum, cos_sum))
