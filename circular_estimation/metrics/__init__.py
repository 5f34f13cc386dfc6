"""
Performance metrics for circular state estimation evaluation.
"""

from .performance import (
    circular_errors,
    circular_rmse,
    circular_mae,
    compute_all_metrics,
    print_metrics,
)

__all__ = [
    'circular_errors',
    'circular_rmse',
    'circular_mae',
    'compute_all_metrics',
    'print_metrics',
]
