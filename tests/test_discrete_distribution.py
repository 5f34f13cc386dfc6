"""
Dirac Mixture Test Suite

Tests for discrete distributions on the circle and on the torus.
"""

import numpy as np
import pytest

from circular_estimation.distributions import (
    DiscreteDistribution,
    ToroidalDiscreteDistribution,
    WrappedNormalDistribution,
)
from circular_estimation.exceptions import (
    DegenerateWeightsError,
    UnsupportedOperationError,
    ValidationError,
)


class TestConstruction:
    """Test validation and canonicalization."""

    def test_uniform_weights_by_default(self):
        wd = DiscreteDistribution([0.0, 1.0, 2.0, 3.0])
        np.testing.assert_array_equal(wd.w, np.full(4, 0.25))

    def test_positions_are_wrapped(self):
        wd = DiscreteDistribution([-0.5, 7.0, 2 * np.pi])
        assert np.all((wd.d >= 0) & (wd.d < 2 * np.pi))
        np.testing.assert_allclose(wd.d, [2 * np.pi - 0.5, 7.0 - 2 * np.pi, 0.0], atol=1e-12)

    def test_positions_in_range_are_kept(self):
        d = np.arange(21) * 2 * np.pi / 21
        np.testing.assert_array_equal(DiscreteDistribution(d).d, d)

    def test_weights_are_renormalized(self):
        wd = DiscreteDistribution([0.0, 1.0, 2.0], [1.0, 1.0, 2.0])
        np.testing.assert_allclose(wd.w, [0.25, 0.25, 0.5])

    def test_duplicates_are_not_merged(self):
        wd = DiscreteDistribution([1.0, 1.0, 2.0])
        assert len(wd) == 3

    def test_invalid_input(self):
        with pytest.raises(ValidationError):
            DiscreteDistribution(np.zeros((2, 3)))
        with pytest.raises(ValidationError):
            DiscreteDistribution([])
        with pytest.raises(ValidationError):
            DiscreteDistribution([0.0, 1.0], [0.5, -0.5])
        with pytest.raises(ValidationError):
            DiscreteDistribution([0.0, 1.0], [1.0])

    def test_zero_weights(self):
        with pytest.raises(DegenerateWeightsError):
            DiscreteDistribution([0.0, 1.0], [0.0, 0.0])

    def test_immutable(self, weighted_dirac):
        with pytest.raises(ValueError):
            weighted_dirac.d[0] = 1.0
        with pytest.raises(ValueError):
            weighted_dirac.w[0] = 1.0

    def test_pdf_is_undefined(self, weighted_dirac):
        with pytest.raises(UnsupportedOperationError) as excinfo:
            weighted_dirac.pdf(np.array([0.0]))
        assert excinfo.value.identifier == 'PDF:UNDEFINED'


class TestMoments:
    """Test trigonometric moments."""

    def test_uniform_grid_has_zero_first_moment(self):
        wd = DiscreteDistribution(np.arange(30) * 2 * np.pi / 30)
        assert abs(wd.trigonometric_moment(1)) < 1e-10

    @pytest.mark.parametrize("n", [-2, 0, 1, 3])
    def test_moment_definition(self, weighted_dirac, n):
        expected = complex(np.sum(weighted_dirac.w * np.exp(1j * n * weighted_dirac.d)))
        assert weighted_dirac.trigonometric_moment(n) == expected

    def test_zeroth_moment(self, weighted_dirac):
        assert weighted_dirac.trigonometric_moment(0) == pytest.approx(1.0, abs=1e-15)

    def test_mean_direction(self):
        wd = DiscreteDistribution([0.2, 0.4], [0.5, 0.5])
        assert wd.mean_direction() == pytest.approx(0.3, abs=1e-12)

    def test_to_wrapped_normal(self, weighted_dirac):
        wn = weighted_dirac.to_wrapped_normal()
        assert isinstance(wn, WrappedNormalDistribution)
        assert abs(wn.trigonometric_moment(1) - weighted_dirac.trigonometric_moment(1)) < 1e-12


class TestSampling:
    """Test sampling from the support."""

    def test_samples_are_support_values(self, rng):
        wd = DiscreteDistribution(np.linspace(0, 1, 11))
        samples = wd.sample(20, rng)
        assert samples.shape == (20,)
        assert np.all(np.isin(samples, wd.d))

    @pytest.mark.parametrize("n", [0, 1, 7, 500])
    def test_sample_counts(self, weighted_dirac, rng, n):
        samples = weighted_dirac.sample(n, rng)
        assert len(samples) == n
        assert np.all(np.isin(samples, weighted_dirac.d))

    def test_sample_frequencies(self, weighted_dirac, rng):
        samples = weighted_dirac.sample(50000, rng)
        frequencies = np.array([np.mean(samples == d) for d in weighted_dirac.d])
        np.testing.assert_allclose(frequencies, weighted_dirac.w, atol=0.01)

    def test_reproducible_with_seed(self, weighted_dirac):
        np.testing.assert_array_equal(weighted_dirac.sample(10, 5), weighted_dirac.sample(10, 5))

    def test_negative_count(self, weighted_dirac):
        with pytest.raises(ValidationError):
            weighted_dirac.sample(-1)


class TestTransformations:
    """Test apply_function, reweigh and shift."""

    def test_apply_function_keeps_weights(self, weighted_dirac):
        moved = weighted_dirac.apply_function(lambda x: x + 1.0)
        np.testing.assert_array_equal(moved.w, weighted_dirac.w)
        np.testing.assert_allclose(moved.d, np.mod(weighted_dirac.d + 1.0, 2 * np.pi), atol=1e-12)

    def test_apply_function_returns_new_instance(self, weighted_dirac):
        d_before = weighted_dirac.d.copy()
        weighted_dirac.apply_function(lambda x: 0.0)
        np.testing.assert_array_equal(weighted_dirac.d, d_before)

    def test_reweigh_constant_is_noop(self, weighted_dirac):
        reweighed = weighted_dirac.reweigh(lambda x: 3.0)
        np.testing.assert_allclose(reweighed.w, weighted_dirac.w, rtol=1e-12)
        np.testing.assert_array_equal(reweighed.d, weighted_dirac.d)

    def test_reweigh_indicator_selects_subset(self):
        wd = DiscreteDistribution([0.5, 1.5, 2.5, 3.5], [0.1, 0.2, 0.3, 0.4])
        reweighed = wd.reweigh(lambda x: 1.0 if x in (1.5, 3.5) else 0.0)
        assert reweighed.w[0] == 0.0
        assert reweighed.w[2] == 0.0
        np.testing.assert_allclose(reweighed.w[[1, 3]], [0.2 / 0.6, 0.4 / 0.6], rtol=1e-12)
        assert np.sum(reweighed.w) == pytest.approx(1.0, abs=1e-12)

    def test_reweigh_all_zero(self, weighted_dirac):
        with pytest.raises(DegenerateWeightsError):
            weighted_dirac.reweigh(lambda x: 0.0)

    def test_reweigh_negative(self, weighted_dirac):
        with pytest.raises(ValidationError):
            weighted_dirac.reweigh(lambda x: -1.0)

    def test_shift(self, weighted_dirac):
        shifted = weighted_dirac.shift(2 * np.pi + 0.1)
        np.testing.assert_allclose(np.exp(1j * shifted.d), np.exp(1j * (weighted_dirac.d + 0.1)),
                                   atol=1e-12)


class TestIntegral:
    """Test weight mass inside intervals."""

    def test_full_circle(self, weighted_dirac):
        assert weighted_dirac.integral() == pytest.approx(1.0, abs=1e-12)

    def test_partial_interval(self):
        wd = DiscreteDistribution([0.5, 4.0], [0.3, 0.7])
        assert wd.integral(0.0, np.pi) == pytest.approx(0.3)

    def test_interval_across_zero(self):
        wd = DiscreteDistribution([0.1, 3.0, 6.2], [0.2, 0.5, 0.3])
        assert wd.integral(6.0, 2 * np.pi + 0.5) == pytest.approx(0.5)

    def test_orientation(self, weighted_dirac):
        assert weighted_dirac.integral(1.0, 3.0) + weighted_dirac.integral(3.0, 1.0) == 0.0

    def test_two_periods(self, weighted_dirac):
        assert weighted_dirac.integral(0.0, 4 * np.pi) == pytest.approx(2.0)


class TestToroidalDiscreteDistribution:
    """Test Dirac mixtures on the torus."""

    @pytest.fixture
    def twd(self):
        d = np.array([[0.1, 1.0, 2.0], [3.0, 4.0, 5.0]])
        return ToroidalDiscreteDistribution(d, [0.2, 0.3, 0.5])

    def test_orientation_is_checked(self):
        with pytest.raises(ValidationError):
            ToroidalDiscreteDistribution(np.zeros((3, 2)))

    def test_marginals(self, twd):
        for dimension in (0, 1):
            marginal = twd.marginal(dimension)
            assert isinstance(marginal, DiscreteDistribution)
            np.testing.assert_array_equal(marginal.d, twd.d[dimension])
            np.testing.assert_array_equal(marginal.w, twd.w)

    def test_invalid_marginal(self, twd):
        with pytest.raises(ValidationError):
            twd.marginal(2)

    def test_moment_matches_marginals(self, twd):
        m = twd.trigonometric_moment(1)
        assert m.shape == (2,)
        assert m[0] == pytest.approx(twd.marginal(0).trigonometric_moment(1))
        assert m[1] == pytest.approx(twd.marginal(1).trigonometric_moment(1))

    def test_integral(self, twd):
        assert twd.integral() == pytest.approx(1.0)
        assert twd.integral(0.0, 1.5, 0.0, 2 * np.pi) == pytest.approx(0.5)

    def test_sample(self, twd, rng):
        samples = twd.sample(10, rng)
        assert samples.shape == (2, 10)

    def test_reweigh_and_apply_function(self, twd):
        reweighed = twd.reweigh(lambda x: 1.0 if x[0] < 1.5 else 0.0)
        np.testing.assert_allclose(reweighed.w, [0.4, 0.6, 0.0])
        moved = twd.apply_function(lambda x: x + 0.1)
        np.testing.assert_allclose(moved.d, twd.d + 0.1)
