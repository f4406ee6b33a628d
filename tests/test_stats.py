"""Unit tests for sampling and percentile helpers."""

import math

import numpy as np
import pytest

from retiresim.analysis.stats import percentile, percentile_by_column, sample_standard_normal


class ScriptedUniform:
    """Stand-in uniform source replaying fixed draws."""

    def __init__(self, draws):
        self.draws = list(draws)

    def random(self, size=None):
        value = self.draws.pop(0)
        if size is None:
            return value
        return np.array(value, dtype=float)


def _box_muller(u1, u2):
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


# ---------------------------------------------------------------------------
# percentile
# ---------------------------------------------------------------------------


class TestPercentile:
    def test_median_even_length(self):
        assert percentile([1, 2, 3, 4], 50) == 2.5

    def test_median_odd_length(self):
        assert percentile([1, 2, 3], 50) == 2

    def test_unsorted_input(self):
        assert percentile([4, 1, 3, 2], 50) == 2.5

    def test_interpolates_between_ranks(self):
        # index = 0.9 * 4 = 3.6 -> 4 * 0.4 + 5 * 0.6
        assert percentile([1, 2, 3, 4, 5], 90) == pytest.approx(4.6)

    def test_exact_rank(self):
        assert percentile([10, 20, 30, 40, 50], 25) == 20

    def test_extremes_are_min_and_max(self, rng):
        for n in (1, 2, 7, 100):
            samples = rng.normal(0, 10, n).tolist()
            assert percentile(samples, 0) == min(samples)
            assert percentile(samples, 100) == max(samples)

    def test_single_sample(self):
        assert percentile([42.0], 5) == 42.0
        assert percentile([42.0], 95) == 42.0

    def test_does_not_mutate_input(self):
        samples = [3.0, 1.0, 2.0]
        percentile(samples, 50)
        assert samples == [3.0, 1.0, 2.0]

    def test_does_not_mutate_array_input(self):
        samples = np.array([3.0, 1.0, 2.0])
        percentile(samples, 50)
        np.testing.assert_array_equal(samples, [3.0, 1.0, 2.0])

    def test_matches_numpy_linear(self, rng):
        samples = rng.lognormal(0, 1, 501)
        for p in (5, 50, 95):
            assert percentile(samples, p) == pytest.approx(np.percentile(samples, p))


class TestPercentileByColumn:
    def test_matches_scalar_percentile(self, rng):
        matrix = rng.normal(100, 20, (250, 6))
        for p in (5, 50, 95):
            expected = [percentile(matrix[:, j], p) for j in range(matrix.shape[1])]
            np.testing.assert_allclose(percentile_by_column(matrix, p), expected)

    def test_constant_column(self):
        matrix = np.column_stack([np.full(10, 7.0), np.arange(10.0)])
        result = percentile_by_column(matrix, 50)
        assert result[0] == 7.0
        assert result[1] == 4.5


# ---------------------------------------------------------------------------
# sample_standard_normal
# ---------------------------------------------------------------------------


class TestSampleStandardNormal:
    def test_scalar_returns_float(self, rng):
        assert isinstance(sample_standard_normal(rng), float)

    def test_array_shape(self, rng):
        assert sample_standard_normal(rng, size=17).shape == (17,)
        assert sample_standard_normal(rng, size=(4, 5)).shape == (4, 5)

    def test_moments(self, rng):
        draws = sample_standard_normal(rng, size=200_000)
        assert abs(draws.mean()) < 0.01
        assert draws.std() == pytest.approx(1.0, abs=0.01)

    def test_mean_and_scale(self, rng):
        draws = sample_standard_normal(rng, mean=3.0, std_dev=0.8, size=200_000)
        assert draws.mean() == pytest.approx(3.0, abs=0.01)
        assert draws.std() == pytest.approx(0.8, abs=0.01)

    def test_reproducible(self):
        a = sample_standard_normal(np.random.default_rng(7), size=50)
        b = sample_standard_normal(np.random.default_rng(7), size=50)
        np.testing.assert_array_equal(a, b)

    def test_scalar_zero_uniform_is_redrawn(self):
        source = ScriptedUniform([0.0, 0.25, 0.5])
        z = sample_standard_normal(source)
        assert math.isfinite(z)
        assert z == pytest.approx(_box_muller(0.25, 0.5))
        assert source.draws == []

    def test_array_zero_uniform_is_redrawn(self):
        source = ScriptedUniform([
            [0.0, 0.5, 0.25],   # u1, first slot hits zero
            [0.75],             # redraw for the zero slot
            [0.5, 0.5, 0.5],    # u2
        ])
        z = sample_standard_normal(source, size=3)
        assert np.all(np.isfinite(z))
        np.testing.assert_allclose(z, _box_muller(np.array([0.75, 0.5, 0.25]), 0.5))
