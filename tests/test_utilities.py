"""
Utilities Test Suite

Tests for angle helpers, metrics, likelihood models, plotting and
logging.
"""

import logging

import matplotlib.pyplot as plt
import numpy as np
import pytest

from circular_estimation.common import angle_diff, circular_mean, wrap_to_2pi, wrap_to_pi
from circular_estimation.distributions import VonMisesDistribution, from_closed_form
from circular_estimation.exceptions import ValidationError
from circular_estimation.metrics import (
    circular_errors,
    circular_mae,
    circular_rmse,
    compute_all_metrics,
    print_metrics,
)
from circular_estimation.models import additive_noise_likelihood
from circular_estimation.utils import get_logger, setup_logger
from circular_estimation.visualization import plot_angle_estimates, plot_density, plot_particles


class TestAngles:
    """Test angle wrapping and differences."""

    @pytest.mark.parametrize("angle,expected", [
        (0.0, 0.0),
        (2 * np.pi, 0.0),
        (-0.5, 2 * np.pi - 0.5),
        (7.0, 7.0 - 2 * np.pi),
    ])
    def test_wrap_to_2pi(self, angle, expected):
        assert wrap_to_2pi(angle) == pytest.approx(expected)

    def test_wrap_to_2pi_tiny_negative(self):
        assert wrap_to_2pi(-1e-20) == 0.0

    def test_wrap_to_2pi_array(self):
        wrapped = wrap_to_2pi(np.array([-1.0, 1.0, 10.0]))
        assert np.all((wrapped >= 0) & (wrapped < 2 * np.pi))

    def test_wrap_to_pi(self):
        assert wrap_to_pi(np.pi) == pytest.approx(-np.pi)
        assert wrap_to_pi(3 * np.pi / 2) == pytest.approx(-np.pi / 2)

    def test_angle_diff_across_zero(self):
        assert angle_diff(0.1, 2 * np.pi - 0.1) == pytest.approx(0.2)
        assert angle_diff(2 * np.pi - 0.1, 0.1) == pytest.approx(-0.2)

    def test_circular_mean_across_zero(self):
        mean = circular_mean(np.array([0.1, 2 * np.pi - 0.1]))
        assert abs(angle_diff(mean, 0.0)) < 1e-12

    def test_weighted_circular_mean(self):
        mean = circular_mean(np.array([0.0, np.pi / 2]), weights=np.array([1.0, 0.0]))
        assert mean == pytest.approx(0.0)


class TestMetrics:
    """Test performance metrics."""

    def test_errors_wrap(self):
        errors = circular_errors([0.1, 3.0], [2 * np.pi - 0.1, 3.0])
        np.testing.assert_allclose(errors, [0.2, 0.0], atol=1e-12)

    def test_rmse_and_mae(self):
        estimates = [0.1, 0.0, 6.0]
        truth = [0.0, 0.2, 6.0]
        assert circular_rmse(estimates, truth) == pytest.approx(np.sqrt((0.01 + 0.04) / 3))
        assert circular_mae(estimates, truth) == pytest.approx(0.1)

    def test_compute_all_metrics(self):
        metrics = compute_all_metrics([0.1, 0.3], [0.0, 0.0])
        assert set(metrics) == {'errors', 'rmse', 'mae', 'max_error'}
        assert metrics['max_error'] == pytest.approx(0.3)

    def test_print_metrics(self, capsys):
        print_metrics(compute_all_metrics([0.1], [0.0]), filter_name="Discrete")
        captured = capsys.readouterr().out
        assert "Discrete Performance Metrics" in captured
        assert "RMSE: 0.100000 rad" in captured


class TestLikelihood:
    """Test likelihoods built from measurement models."""

    def test_scalar(self):
        noise = VonMisesDistribution(0.0, 2.0)
        likelihood = additive_noise_likelihood(lambda x: 2 * x, noise)
        value = likelihood(1.0, 0.3)
        assert isinstance(value, float)
        assert value == pytest.approx(noise.pdf(np.array([0.4]))[0])

    def test_array(self):
        likelihood = additive_noise_likelihood(lambda x: x, VonMisesDistribution(0.0, 2.0))
        assert likelihood(1.0, np.zeros((2, 3))).shape == (2, 3)

    def test_noise_validation(self):
        with pytest.raises(ValidationError):
            additive_noise_likelihood(lambda x: x, 0.5)


class TestVisualization:
    """Plots are created without being shown."""

    def test_plot_density(self, von_mises):
        fig, ax = plot_density({'von Mises': von_mises,
                                'Fourier': from_closed_form(von_mises, 21, 'sqrt')},
                               show=False)
        assert len(ax.get_lines()) == 2
        plt.close(fig)

    def test_plot_particles(self, weighted_dirac, tmp_path):
        path = tmp_path / "particles.png"
        fig, ax = plot_particles(weighted_dirac, save_path=str(path), show=False)
        assert path.exists()
        plt.close(fig)

    def test_plot_angle_estimates(self):
        time = np.arange(5)
        fig, axes = plot_angle_estimates(time, {'Discrete': np.full(5, 0.1)},
                                         ground_truth=np.zeros(5), show=False)
        assert len(axes) == 2
        plt.close(fig)


class TestLogger:
    """Test the package logger."""

    def test_module_loggers_share_package_handler(self):
        logger = get_logger("circular_estimation.filters.discrete")
        assert logger.name == "circular_estimation.filters.discrete"
        assert logging.getLogger("circular_estimation").handlers

    def test_setup_logger_sets_level(self):
        logger = setup_logger(level="DEBUG")
        assert logger.level == logging.DEBUG
        setup_logger(level="WARNING")
        assert logger.level == logging.WARNING

    def test_setup_twice_keeps_one_handler(self):
        logger = setup_logger(name="circular_estimation_repeat", use_rich=False)
        setup_logger(name="circular_estimation_repeat", level="INFO", use_rich=False)
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO

    def test_default_is_package_logger(self):
        assert get_logger() is logging.getLogger("circular_estimation")

    def test_plain_handler(self):
        logger = setup_logger(name="circular_estimation_plain", use_rich=False)
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        assert not logger.propagate

    def test_truncation_logs_debug(self, caplog, von_mises):
        logger = logging.getLogger("circular_estimation")
        fd = from_closed_form(von_mises, 11, 'identity')
        logger.propagate = True
        setup_logger(level="DEBUG")
        try:
            with caplog.at_level(logging.DEBUG, logger="circular_estimation"):
                fd.truncate(21)
        finally:
            logger.propagate = False
            setup_logger(level="WARNING")
        assert "filling up with zeros" in caplog.text
