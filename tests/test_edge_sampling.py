"""Tests for threshold, general and complete-graph edge sampling."""

import math

import numpy as np
import pytest

from girgs.edges.layers import build_layers, layer_pair_count, unrank_pairs
from girgs.edges.sampler import complete_edges, sample_edges
from girgs.errors import InvalidParameterError
from girgs.graph.generator import Generator
from girgs.sampling.positions import pairwise_torus_distances, sample_positions
from girgs.sampling.weights import sample_weights

SEED = 1337


def _edge_set(edges: np.ndarray) -> set[tuple[int, int]]:
    return {(int(i), int(j)) for i, j in edges}


def _brute_force_threshold(weights, positions, c, metric) -> set[tuple[int, int]]:
    d = positions.shape[1]
    dist = pairwise_torus_distances(positions, metric)
    radius = c * (np.outer(weights, weights) / weights.sum()) ** (1.0 / d)
    i, j = np.nonzero(np.triu(dist < radius, k=1))
    return set(zip(i.tolist(), j.tolist()))


def _expected_edges(weights, positions, alpha) -> float:
    """Brute-force sum of min(1, ((w_i w_j / W) / dist**d)**alpha) over pairs."""
    d = positions.shape[1]
    dist = pairwise_torus_distances(positions)
    ratio = np.outer(weights, weights) / weights.sum()
    with np.errstate(divide="ignore"):
        probs = np.minimum((ratio / dist**d) ** alpha, 1.0)
    return float(np.triu(probs, k=1).sum())


class TestWeightLayers:
    """Layer construction and pair ranking."""

    def test_layers_partition_nodes(self) -> None:
        weights = sample_weights(500, -2.5, SEED)
        positions = sample_positions(500, 2, SEED)
        layers = build_layers(weights, positions)
        members = np.sort(np.concatenate([layer.members for layer in layers]))
        np.testing.assert_array_equal(members, np.arange(500))
        for layer in layers:
            levels = np.floor(np.log2(weights[layer.members]))
            assert (levels == layer.level).all()
            assert layer.max_weight == weights[layer.members].max()

    def test_unrank_within_layer_covers_all_pairs(self) -> None:
        weights = np.full(7, 1.5)
        layers = build_layers(weights, sample_positions(7, 1, 0))
        layer = layers[0]
        count = layer_pair_count(layer, layer)
        lo, hi = unrank_pairs(layer, layer, np.arange(count))
        assert _edge_set(np.column_stack([lo, hi])) == {
            (i, j) for i in range(7) for j in range(i + 1, 7)
        }

    def test_unrank_between_layers_covers_all_pairs(self) -> None:
        weights = np.array([1.0, 1.5, 4.0, 5.0, 6.0])
        layers = build_layers(weights, sample_positions(5, 2, 0))
        a, b = layers
        count = layer_pair_count(a, b)
        assert count == 6
        first, second = unrank_pairs(a, b, np.arange(count))
        assert set(zip(first.tolist(), second.tolist())) == {
            (i, j) for i in (0, 1) for j in (2, 3, 4)
        }

    def test_unrank_large_ranks(self) -> None:
        """Triangular unranking stays exact where sqrt rounding matters."""
        weights = np.full(200_000, 1.0)
        layer = build_layers(weights, sample_positions(200_000, 1, 0))[0]
        ranks = np.array([layer_pair_count(layer, layer) - 1, 10**10 + 12345])
        lo, hi = unrank_pairs(layer, layer, ranks)
        expected_hi = np.array([199_999, 141_421])
        np.testing.assert_array_equal(hi, expected_hi)
        np.testing.assert_array_equal(lo, ranks - expected_hi * (expected_hi - 1) // 2)
        assert (lo < hi).all()


class TestThresholdModel:
    """Exact agreement with all-pairs evaluation."""

    @pytest.mark.parametrize("metric", ["euclidean", "max"])
    def test_edges_iff_threshold_inequality(self, metric: str) -> None:
        n = 100
        weights = sample_weights(n, -2.8, SEED)
        for d in range(1, 5):
            positions = sample_positions(n, d, SEED + d)
            edges = sample_edges(weights, positions, 1.0, math.inf, metric=metric)
            expected = _brute_force_threshold(weights, positions, 1.0, metric)
            found = _edge_set(edges)
            assert found - expected == set(), f"d={d}: edges that should be absent"
            assert expected - found == set(), f"d={d}: edges that should be present"

    @pytest.mark.parametrize("c", [0.3, 2.0, 25.0])
    def test_exact_for_other_scaling_constants(self, c: float) -> None:
        n = 300
        weights = sample_weights(n, -2.2, 5)
        positions = sample_positions(n, 2, 6)
        edges = sample_edges(weights, positions, c, math.inf)
        assert _edge_set(edges) == _brute_force_threshold(weights, positions, c, "euclidean")

    def test_seed_is_ignored(self) -> None:
        weights = sample_weights(200, -2.5, SEED)
        positions = sample_positions(200, 2, SEED)
        np.testing.assert_array_equal(
            sample_edges(weights, positions, 1.0, math.inf, seed=1),
            sample_edges(weights, positions, 1.0, math.inf, seed=2),
        )

    def test_edges_sorted_without_self_loops(self) -> None:
        weights = sample_weights(300, -2.5, SEED)
        positions = sample_positions(300, 2, SEED)
        edges = sample_edges(weights, positions, 1.5, math.inf)
        assert (edges[:, 0] < edges[:, 1]).all()
        order = np.lexsort((edges[:, 1], edges[:, 0]))
        np.testing.assert_array_equal(order, np.arange(edges.shape[0]))

    def test_zero_scaling_gives_no_edges(self) -> None:
        weights = sample_weights(50, -2.5, SEED)
        positions = sample_positions(50, 2, SEED)
        assert sample_edges(weights, positions, 0.0, math.inf).shape == (0, 2)


class TestGeneralModel:
    """Bernoulli sampling is unbiased against the pairwise expectation."""

    def test_edge_count_matches_expectation(self) -> None:
        n, alpha, runs = 500, 2.5, 40
        weights = sample_weights(n, -2.5, SEED)
        for d in range(1, 5):
            positions = sample_positions(n, d, SEED + d)
            expected = _expected_edges(weights, positions, alpha)
            actual = sum(
                sample_edges(weights, positions, 1.0, alpha, seed=SEED + d + 100 * r).shape[0]
                for r in range(runs)
            )
            assert 0.98 * expected * runs < actual, f"d={d}: too few edges"
            assert 0.98 * actual < expected * runs, f"d={d}: too many edges"

    def test_per_pair_probability(self) -> None:
        """Frequency of each pair over many seeds follows its probability."""
        n, alpha, runs = 40, 1.5, 2000
        weights = sample_weights(n, -2.5, 3)
        positions = sample_positions(n, 2, 4)
        counts = np.zeros((n, n))
        for r in range(runs):
            edges = sample_edges(weights, positions, 0.8, alpha, seed=r)
            counts[edges[:, 0], edges[:, 1]] += 1

        dist = pairwise_torus_distances(positions)
        radius = 0.8 * (np.outer(weights, weights) / weights.sum()) ** 0.5
        with np.errstate(divide="ignore"):
            probs = np.triu(np.minimum(1.0, (radius / dist) ** (2 * alpha)), k=1)
        freq = np.triu(counts, k=1) / runs
        sigma = np.sqrt(probs * (1.0 - probs) / runs)
        assert np.all(np.abs(freq - probs) <= 5.0 * sigma + 3.0 / runs)

    def test_same_seed_same_edges(self) -> None:
        weights = sample_weights(400, -2.5, SEED)
        positions = sample_positions(400, 2, SEED)
        np.testing.assert_array_equal(
            sample_edges(weights, positions, 1.0, 1.5, seed=9),
            sample_edges(weights, positions, 1.0, 1.5, seed=9),
        )

    def test_different_seed_different_edges(self) -> None:
        weights = sample_weights(400, -2.5, SEED)
        positions = sample_positions(400, 2, SEED)
        a = sample_edges(weights, positions, 1.0, 1.5, seed=9)
        b = sample_edges(weights, positions, 1.0, 1.5, seed=10)
        assert _edge_set(a) != _edge_set(b)

    def test_large_alpha_approaches_threshold(self) -> None:
        weights = sample_weights(300, -2.5, SEED)
        positions = sample_positions(300, 2, SEED)
        soft = _edge_set(sample_edges(weights, positions, 1.0, 1e4, seed=1))
        hard = _edge_set(sample_edges(weights, positions, 1.0, math.inf))
        assert len(soft ^ hard) <= 0.01 * len(hard) + 1


class TestCompleteGraph:
    """alpha = 0 connects every pair."""

    def test_complete_graph(self) -> None:
        n = 100
        generator = Generator()
        generator.sample_weights(n, -2.5, SEED)
        for d in range(1, 5):
            generator.sample_positions(n, d, SEED + d)
            graph = generator.generate(0.0, SEED + d)

            assert graph.edge_count == n * (n - 1) // 2, "expect a complete graph"
            assert graph.adjacency.diagonal().sum() == 0, "no self loops"
            dense = graph.adjacency.toarray()
            np.testing.assert_array_equal(dense, 1 - np.eye(n, dtype=dense.dtype))

    def test_complete_edges_ignores_scaling(self) -> None:
        weights = sample_weights(20, -2.5, SEED)
        positions = sample_positions(20, 3, SEED)
        np.testing.assert_array_equal(
            sample_edges(weights, positions, 0.0, 0.0), complete_edges(20)
        )

    def test_duplicate_positions(self) -> None:
        """Zero distances never evaluate 0 ** 0."""
        weights = np.ones(5)
        positions = np.full((5, 2), 0.25)
        assert sample_edges(weights, positions, 1.0, 0.0).shape == (10, 2)
        assert sample_edges(weights, positions, 1.0, 2.0).shape == (10, 2)


class TestSamplerValidation:
    """Invalid inputs are rejected before any work."""

    def test_shape_mismatch(self) -> None:
        with pytest.raises(InvalidParameterError, match="do not match"):
            sample_edges(np.ones(5), sample_positions(4, 2, 0), 1.0, math.inf)

    def test_negative_scaling(self) -> None:
        with pytest.raises(InvalidParameterError, match="c must be"):
            sample_edges(np.ones(5), sample_positions(5, 2, 0), -1.0, math.inf)

    def test_negative_alpha(self) -> None:
        with pytest.raises(InvalidParameterError, match="alpha"):
            sample_edges(np.ones(5), sample_positions(5, 2, 0), 1.0, -1.0)

    def test_empty_graph(self) -> None:
        edges = sample_edges(np.empty(0), np.empty((0, 2)), 1.0, math.inf)
        assert edges.shape == (0, 2)
