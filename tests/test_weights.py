"""Tests for power-law weight sampling and explicit weight validation."""

import numpy as np
import pytest

from girgs.errors import InvalidParameterError
from girgs.sampling.weights import sample_weights, validate_weights

SEED = 1337


class TestWeightDistribution:
    """Bounds and tail behavior of sampled weights."""

    def test_weights_in_range_with_heavy_tail(self) -> None:
        n = 10_000
        for i in range(10):
            weights = sample_weights(n, -2.1, SEED + i)
            assert weights.shape == (n,)
            assert weights.min() >= 1.0
            assert weights.max() < n
            assert weights.max() ** 2 > n, "max weight should be large"

    def test_lighter_tail_for_more_negative_exponent(self) -> None:
        heavy = sample_weights(10_000, -2.1, SEED)
        light = sample_weights(10_000, -3.5, SEED)
        assert heavy.max() > light.max()
        assert heavy.mean() > light.mean()

    def test_median_matches_power_law(self) -> None:
        """The median of density ~ w**-2.5 on [1, inf) is 2**(2/3)."""
        weights = sample_weights(200_000, -2.5, SEED)
        median = np.median(weights)
        assert abs(median - 2.0 ** (2.0 / 3.0)) < 0.02, f"median {median:.4f}"

    def test_single_node_has_unit_weight(self) -> None:
        np.testing.assert_array_equal(sample_weights(1, -2.5, SEED), [1.0])

    def test_zero_nodes(self) -> None:
        assert sample_weights(0, -2.5, SEED).shape == (0,)


class TestWeightReproducibility:
    """Same (n, ple, seed) gives the same sequence."""

    def test_same_seed_same_weights(self) -> None:
        np.testing.assert_array_equal(
            sample_weights(500, -2.5, SEED), sample_weights(500, -2.5, SEED)
        )

    def test_different_seed_different_weights(self) -> None:
        assert not np.array_equal(
            sample_weights(500, -2.5, SEED), sample_weights(500, -2.5, SEED + 1)
        )

    def test_weights_are_read_only(self) -> None:
        weights = sample_weights(10, -2.5, SEED)
        with pytest.raises(ValueError):
            weights[0] = 5.0


class TestWeightValidation:
    """Parameter and explicit sequence validation."""

    def test_negative_n_rejected(self) -> None:
        with pytest.raises(InvalidParameterError, match="n must be"):
            sample_weights(-1, -2.5, SEED)

    def test_non_normalizable_exponent_rejected(self) -> None:
        with pytest.raises(InvalidParameterError, match="ple"):
            sample_weights(10, -0.5, SEED)

    def test_negative_seed_rejected(self) -> None:
        with pytest.raises(InvalidParameterError, match="seed"):
            sample_weights(10, -2.5, -3)

    def test_explicit_weights_copied_verbatim(self) -> None:
        raw = [1.0, 2.5, 7.0]
        weights = validate_weights(raw)
        np.testing.assert_array_equal(weights, raw)
        assert not weights.flags.writeable

    @pytest.mark.parametrize(
        "bad",
        [[[1.0, 2.0]], [1.0, 0.0], [1.0, -2.0], [1.0, float("nan")], ["a", "b"]],
    )
    def test_malformed_explicit_weights_rejected(self, bad) -> None:
        with pytest.raises(InvalidParameterError):
            validate_weights(bad)
