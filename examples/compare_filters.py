"""
Filter Comparison on a Circular Random Walk

Runs the discrete (particle) filter and the Fourier filter on the same
synthetic data and prints their performance metrics.
"""

import sys
import os
import warnings
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

import numpy as np

from circular_estimation import (
    DiscreteFilter,
    FourierFilter,
    VonMisesDistribution,
    WrappedNormalDistribution,
    NumericApproximationWarning,
)
from circular_estimation.models import additive_noise_likelihood
from circular_estimation.metrics import compute_all_metrics, print_metrics
from circular_estimation.visualization import plot_angle_estimates

from trajectory_generators import generate_random_walk

# ============================================================================
# CONFIGURATION
# ============================================================================
N_STEPS = 200
DRIFT = 0.1
N_PARTICLES = 500
N_COEFFICIENTS = 31
SEED = 42
SHOW_PLOTS = True
# ============================================================================


def run_comparison():
    """Run both filters on the same random walk."""

    print("\n" + "=" * 60)
    print("Filter Comparison - Circular Random Walk")
    print("=" * 60 + "\n")

    system_noise = WrappedNormalDistribution(0.0, 0.2)
    measurement_noise = VonMisesDistribution(0.0, 5.0)

    data = generate_random_walk(N=N_STEPS, drift=DRIFT, system_noise=system_noise,
                                measurement_noise=measurement_noise, seed=SEED)
    measurements = data['measurements']
    ground_truth = data['ground_truth']

    likelihood = additive_noise_likelihood(lambda x: x, measurement_noise)

    print("Initializing Discrete Filter with {} particles...".format(N_PARTICLES))
    df = DiscreteFilter(n_particles=N_PARTICLES, rng=SEED)
    print("Initializing Fourier Filter with {} coefficients...".format(N_COEFFICIENTS))
    ff = FourierFilter(n_coefficients=N_COEFFICIENTS, transformation='sqrt')

    df_estimates = np.zeros(N_STEPS)
    ff_estimates = np.zeros(N_STEPS)

    print("Running filters...")
    with warnings.catch_warnings():
        # Sampling based conversions are expected in this comparison
        warnings.simplefilter('ignore', NumericApproximationWarning)
        for k in range(N_STEPS):
            if k > 0:
                df.predict_nonlinear(lambda x: x + DRIFT, system_noise)
                ff.predict_identity(system_noise)
                ff.set_state(ff.get_estimate().shift(DRIFT))

            df.update_nonlinear(likelihood, measurements[k])
            ff.update_identity(measurement_noise, measurements[k])

            df_estimates[k] = df.get_point_estimate()
            ff_estimates[k] = ff.get_point_estimate()

            if (k + 1) % 50 == 0:
                print(f"  Step {k+1}/{N_STEPS}, ESS: {df.effective_sample_size():.1f}")

    print("Filters complete!\n")

    print_metrics(compute_all_metrics(df_estimates, ground_truth), filter_name="Discrete Filter")
    print_metrics(compute_all_metrics(ff_estimates, ground_truth), filter_name="Fourier Filter")

    if SHOW_PLOTS:
        print("\nGenerating plots...")
        plot_angle_estimates(data['time'],
                             {'Discrete': df_estimates, 'Fourier': ff_estimates},
                             ground_truth=ground_truth)


if __name__ == "__main__":
    run_comparison()
