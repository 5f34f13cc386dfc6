"""
Performance metrics for evaluating circular state estimation quality.

Errors are the smallest signed angular differences, so an estimate of
0.1 for a true angle of 2pi - 0.1 has an error of 0.2.
"""

import numpy as np

from ..common.angles import angle_diff


def circular_errors(estimates, ground_truth):
    """
    Signed angular estimation errors.

    Parameters
    ----------
    estimates : np.ndarray
        Estimated angles (N,)
    ground_truth : np.ndarray
        True angles (N,)

    Returns
    -------
    np.ndarray
        Errors in [-pi, pi] (N,)
    """
    return angle_diff(np.asarray(estimates, dtype=float), np.asarray(ground_truth, dtype=float))


def circular_rmse(estimates, ground_truth):
    """
    Root Mean Square Error of the angular differences.

    Parameters
    ----------
    estimates : np.ndarray
        Estimated angles (N,)
    ground_truth : np.ndarray
        True angles (N,)

    Returns
    -------
    float
        RMSE in radians
    """
    errors = circular_errors(estimates, ground_truth)
    return float(np.sqrt(np.mean(errors ** 2)))


def circular_mae(estimates, ground_truth):
    """Mean absolute angular error in radians."""
    return float(np.mean(np.abs(circular_errors(estimates, ground_truth))))


def compute_all_metrics(estimates, ground_truth):
    """
    Compute all available metrics.

    Parameters
    ----------
    estimates : np.ndarray
        Estimated angles (N,)
    ground_truth : np.ndarray
        True angles (N,)

    Returns
    -------
    dict
        Dictionary with computed metrics
    """
    errors = circular_errors(estimates, ground_truth)

    metrics = {}
    metrics['errors'] = errors
    metrics['rmse'] = float(np.sqrt(np.mean(errors ** 2)))
    metrics['mae'] = float(np.mean(np.abs(errors)))
    metrics['max_error'] = float(np.max(np.abs(errors)))

    return metrics


def print_metrics(metrics, filter_name="Filter"):
    """
    Print metrics in a formatted way.

    Parameters
    ----------
    metrics : dict
        Dictionary of metrics from compute_all_metrics
    filter_name : str, optional
        Name of the filter for display
    """
    print(f"\n{filter_name} Performance Metrics")
    print("=" * 50)

    if 'rmse' in metrics:
        print(f"RMSE: {metrics['rmse']:.6f} rad")
    if 'mae' in metrics:
        print(f"MAE: {metrics['mae']:.6f} rad")
    if 'max_error' in metrics:
        print(f"Max error: {metrics['max_error']:.6f} rad")

    print("=" * 50)
