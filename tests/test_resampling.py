"""
Resampling Schemes Test Suite

Tests for simple and systematic resampling.
"""

import numpy as np
import pytest

from circular_estimation.common import (
    RESAMPLING_SCHEMES,
    get_resampling_scheme,
    simple_resampling,
    simple_resampling_indices,
    systematic_resampling,
    systematic_resampling_indices,
)
from circular_estimation.exceptions import ValidationError


@pytest.fixture(params=["simple", "systematic"])
def scheme(request):
    """Parameterized resampling scheme."""
    return get_resampling_scheme(request.param)


class TestResamplingIndices:
    """Test index generation of both schemes."""

    def test_shape_and_range(self, scheme, rng):
        cum_weights = np.cumsum([0.2, 0.5, 0.3])
        indices = scheme(cum_weights, 50, rng)
        assert indices.shape == (50,)
        assert np.all((indices >= 0) & (indices < 3))

    def test_indices_are_sorted(self, scheme, rng):
        cum_weights = np.cumsum(np.full(10, 0.1))
        indices = scheme(cum_weights, 100, rng)
        assert np.all(np.diff(indices) >= 0)

    def test_zero_samples(self, scheme, rng):
        assert len(scheme(np.cumsum([0.5, 0.5]), 0, rng)) == 0

    def test_cumulative_weight_below_one(self, scheme, rng):
        """Last bin is used instead of indexing out of range."""
        cum_weights = np.array([0.3, 0.6, 0.999999])
        indices = scheme(cum_weights, 1000, rng)
        assert indices.max() <= 2

    def test_zero_weight_bins_are_never_selected(self, scheme, rng):
        cum_weights = np.cumsum([0.5, 0.0, 0.5, 0.0])
        indices = scheme(cum_weights, 1000, rng)
        assert set(np.unique(indices)) <= {0, 2}

    def test_empirical_frequencies(self, scheme, rng):
        weights = np.array([0.1, 0.2, 0.3, 0.4])
        n_samples = 100000
        indices = scheme(np.cumsum(weights), n_samples, rng)
        frequencies = np.bincount(indices, minlength=4) / n_samples
        np.testing.assert_allclose(frequencies, weights, atol=0.01)

    def test_unnormalized_weights(self, scheme, rng):
        weights = np.array([1.0, 3.0])
        indices = scheme(np.cumsum(weights), 20000, rng)
        assert np.mean(indices == 1) == pytest.approx(0.75, abs=0.02)

    def test_reproducible_with_seed(self, scheme):
        cum_weights = np.cumsum([0.25, 0.25, 0.5])
        np.testing.assert_array_equal(scheme(cum_weights, 30, 3), scheme(cum_weights, 30, 3))

    def test_negative_sample_count(self, scheme):
        with pytest.raises(ValidationError):
            scheme(np.cumsum([0.5, 0.5]), -1)

    def test_invalid_cumulative_weights(self, scheme):
        with pytest.raises(ValidationError):
            scheme(np.zeros((2, 2)), 3)
        with pytest.raises(ValidationError):
            scheme(np.array([0.0, 0.0]), 3)


class TestSystematicResampling:
    """Test properties specific to systematic resampling."""

    def test_equal_weights_select_every_bin_once(self, rng):
        indices = systematic_resampling_indices(np.cumsum(np.full(4, 0.25)), 4, rng)
        np.testing.assert_array_equal(indices, [0, 1, 2, 3])

    def test_counts_deviate_at_most_one(self, rng):
        """Every bin receives floor or ceil of its expected count."""
        weights = np.array([0.13, 0.27, 0.6])
        n_samples = 100
        counts = np.bincount(systematic_resampling_indices(np.cumsum(weights), n_samples, rng),
                             minlength=3)
        assert np.all(np.abs(counts - weights * n_samples) <= 1)

    def test_candidate_order_does_not_change_distribution(self):
        """Resampled values only depend on the multiset of candidates."""
        values = np.array([0.5, 1.5, 2.5, 3.5])
        weights = np.array([0.1, 0.2, 0.3, 0.4])
        permutation = np.array([2, 0, 3, 1])

        n_samples = 40000
        first = systematic_resampling(values, np.cumsum(weights), n_samples, 1)
        second = systematic_resampling(values[permutation], np.cumsum(weights[permutation]),
                                       n_samples, 1)
        for value, weight in zip(values, weights):
            assert np.mean(first == value) == pytest.approx(weight, abs=1e-3)
            assert np.mean(second == value) == pytest.approx(weight, abs=1e-3)


class TestResamplingSamples:
    """Test resampling of positions."""

    def test_simple_returns_support_values(self, rng):
        samples = np.array([0.1, 0.7, 3.0])
        resampled = simple_resampling(samples, np.cumsum([0.2, 0.3, 0.5]), 25, rng)
        assert resampled.shape == (25,)
        assert np.all(np.isin(resampled, samples))

    def test_column_wise_samples(self, rng):
        samples = np.array([[0.1, 0.7, 3.0], [1.0, 2.0, 4.0]])
        resampled = systematic_resampling(samples, np.cumsum([0.2, 0.3, 0.5]), 10, rng)
        assert resampled.shape == (2, 10)
        for column in resampled.T:
            assert any(np.array_equal(column, original) for original in samples.T)

    def test_simple_indices_match_simple_resampling(self):
        samples = np.arange(5.0)
        cum_weights = np.cumsum(np.full(5, 0.2))
        indices = simple_resampling_indices(cum_weights, 12, 9)
        np.testing.assert_array_equal(simple_resampling(samples, cum_weights, 12, 9),
                                      samples[indices])


class TestSchemeRegistry:
    """Test lookup of resampling schemes."""

    def test_known_schemes(self):
        assert get_resampling_scheme("systematic") is systematic_resampling_indices
        assert get_resampling_scheme("simple") is simple_resampling_indices
        assert get_resampling_scheme("multinomial") is simple_resampling_indices
        assert set(RESAMPLING_SCHEMES) == {"simple", "multinomial", "systematic"}

    def test_unknown_scheme(self):
        with pytest.raises(ValidationError, match="Unknown resampling scheme"):
            get_resampling_scheme("residual")
