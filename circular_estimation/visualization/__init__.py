"""
Visualization utilities for circular estimation.
"""

from .densities import plot_density, plot_particles, plot_angle_estimates

__all__ = [
    'plot_density',
    'plot_particles',
    'plot_angle_estimates',
]
