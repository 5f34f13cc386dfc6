"""
Density and estimate visualization functions.

Provides functions for plotting circular densities, particle sets and
comparing angle estimates of multiple filters.
"""

import numpy as np
import matplotlib.pyplot as plt

from ..common.angles import wrap_to_2pi


def plot_density(distributions, n_points=500, title="Circular Density",
                 figsize=(10, 6), save_path=None, show=True):
    """
    Plot pdfs over [0, 2pi).

    Parameters
    ----------
    distributions : AbstractCircularDistribution or dict
        Single distribution or dictionary mapping labels to distributions
    n_points : int, optional
        Number of evaluation points
    title : str, optional
        Plot title
    figsize : tuple, optional
        Figure size (width, height)
    save_path : str, optional
        Path to save figure. If None, figure is not saved.
    show : bool, optional
        Whether to display the plot

    Returns
    -------
    fig, ax
        Matplotlib figure and axes
    """
    if not isinstance(distributions, dict):
        distributions = {type(distributions).__name__: distributions}

    fig, ax = plt.subplots(figsize=figsize)
    xs = np.linspace(0, 2 * np.pi, n_points)

    for label, dist in distributions.items():
        ax.plot(xs, dist.pdf(xs), linewidth=2, label=label, alpha=0.8)

    ax.set_xlim(0, 2 * np.pi)
    ax.set_xlabel('Angle (rad)', fontsize=12)
    ax.set_ylabel('Density', fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    if show:
        plt.show()

    return fig, ax


def plot_particles(dist, title="Particles", figsize=(10, 6), save_path=None, show=True):
    """
    Stem plot of a Dirac mixture.

    Parameters
    ----------
    dist : DiscreteDistribution
        Particles to plot
    title : str, optional
        Plot title
    figsize : tuple, optional
        Figure size
    save_path : str, optional
        Path to save figure
    show : bool, optional
        Whether to display the plot

    Returns
    -------
    fig, ax
        Matplotlib figure and axes
    """
    fig, ax = plt.subplots(figsize=figsize)

    ax.stem(dist.d, dist.w, basefmt='k-')
    ax.axvline(dist.mean_direction(), color='tab:red', linestyle='--',
               linewidth=1.5, label='Mean direction')

    ax.set_xlim(0, 2 * np.pi)
    ax.set_xlabel('Angle (rad)', fontsize=12)
    ax.set_ylabel('Weight', fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    if show:
        plt.show()

    return fig, ax


def plot_angle_estimates(time, estimates_dict, ground_truth=None,
                         title="Filter Comparison", figsize=(14, 8),
                         save_path=None, show=True):
    """
    Compare angle estimates of multiple filters with 2 subplots:
    1. Angle over time
    2. Angular error over time

    Parameters
    ----------
    time : np.ndarray
        Time vector (N,)
    estimates_dict : dict
        Dictionary mapping filter names to angle estimates (N,)
        e.g., {'Discrete': df_estimates, 'Fourier': ff_estimates}
    ground_truth : np.ndarray, optional
        True angles (N,)
    title : str, optional
        Main figure title
    figsize : tuple, optional
        Figure size (width, height)
    save_path : str, optional
        Path to save figure
    show : bool, optional
        Whether to display the plot

    Returns
    -------
    fig, axes
        Matplotlib figure and axes array
    """
    fig, axes = plt.subplots(2, 1, figsize=figsize, sharex=True)
    fig.suptitle(title, fontsize=16, fontweight='bold')

    # Color cycle for different filters
    colors = ['tab:blue', 'tab:orange', 'tab:green', 'tab:red', 'tab:purple']

    # ========== Subplot 1: Angle over Time ==========
    ax1 = axes[0]

    if ground_truth is not None:
        ax1.plot(time, wrap_to_2pi(ground_truth), 'k.', markersize=4,
                 label='Ground Truth', alpha=0.7)

    for idx, (filter_name, estimates) in enumerate(estimates_dict.items()):
        ax1.plot(time, wrap_to_2pi(estimates), '.', markersize=4, label=filter_name,
                 color=colors[idx % len(colors)], alpha=0.8)

    ax1.set_ylim(0, 2 * np.pi)
    ax1.set_ylabel('Angle (rad)', fontsize=11)
    ax1.legend(fontsize=9, loc='best')
    ax1.grid(True, alpha=0.3)

    # ========== Subplot 2: Angular Error over Time ==========
    ax2 = axes[1]

    if ground_truth is not None:
        for idx, (filter_name, estimates) in enumerate(estimates_dict.items()):
            error = np.arctan2(np.sin(np.asarray(estimates) - ground_truth),
                               np.cos(np.asarray(estimates) - ground_truth))
            ax2.plot(time, np.abs(error), linewidth=2, label=filter_name,
                     color=colors[idx % len(colors)], alpha=0.8)
        ax2.legend(fontsize=9, loc='best')

    ax2.set_xlabel('Time step', fontsize=11)
    ax2.set_ylabel('Absolute error (rad)', fontsize=11)
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    if show:
        plt.show()

    return fig, axes
