"""Edge sampling for the threshold and general GIRG models.

Threshold model (alpha = inf): edge(i, j) iff dist(i, j) < r_ij with
r_ij = c * (w_i * w_j / W) ** (1/d). Per weight-layer pair the kd-trees
return every pair within the largest radius of that layer pair; the exact
inequality is then evaluated on those candidates only. The result equals
an all-pairs evaluation.

General model (finite alpha > 0): edge(i, j) with probability
p_ij = min(1, (r_ij / dist) ** (d * alpha)). Per layer pair a near radius
rho is chosen to balance enumeration against rejection sampling:

1. Pairs with dist <= rho are enumerated and kept with probability p_ij.
2. Pairs with dist > rho all satisfy p_ij <= pbar = (R / rho) ** (d * alpha),
   R the largest radius of the layer pair. A Binomial(N, pbar) number of
   distinct pairs is drawn uniformly from the N pairs of the layer pair;
   pairs that turn out to be near are dropped, the others are kept with
   probability p_ij / pbar.

Each pair is therefore included independently with probability exactly
p_ij. alpha = 0 is the complete graph and never evaluates 0 ** 0.
"""

import logging
import math

import numpy as np

from girgs.calibration.volume import distance_profile
from girgs.edges.layers import (
    WeightLayer,
    build_layers,
    candidate_pairs,
    layer_pair_count,
    unrank_pairs,
)
from girgs.errors import InvalidParameterError
from girgs.reproducibility.seed import EDGE_STREAM, check_seed, derive_rng
from girgs.sampling.positions import (
    check_metric,
    max_torus_distance,
    torus_distance,
)

log = logging.getLogger(__name__)

# Radii handed to the kd-tree are inflated slightly so rounding never drops
# a candidate; the exact check happens afterwards.
_RADIUS_SLACK = 1e-9


def _empty_edges() -> np.ndarray:
    return np.empty((0, 2), dtype=np.int64)


def _pair_radius(
    wi: np.ndarray, wj: np.ndarray, c: float, total: float, d: int
) -> np.ndarray:
    return c * (wi * wj / total) ** (1.0 / d)


def _connection_probability(radius: np.ndarray, dist: np.ndarray, q: float) -> np.ndarray:
    with np.errstate(divide="ignore", over="ignore"):
        return np.minimum(1.0, (radius / dist) ** q)


def _layer_radius(a: WeightLayer, b: WeightLayer, c: float, total: float, d: int) -> float:
    return c * (a.max_weight * b.max_weight / total) ** (1.0 / d) * (1.0 + _RADIUS_SLACK)


def complete_edges(n: int) -> np.ndarray:
    """All n * (n - 1) / 2 pairs i < j, in lexicographic order."""
    i, j = np.triu_indices(n, k=1)
    return np.column_stack([i, j]).astype(np.int64)


def _threshold_layer_pair(
    a: WeightLayer,
    b: WeightLayer,
    weights: np.ndarray,
    positions: np.ndarray,
    c: float,
    total: float,
    metric: str,
) -> tuple[np.ndarray, np.ndarray, int]:
    d = positions.shape[1]
    rho_max = max_torus_distance(d, metric)
    radius = min(_layer_radius(a, b, c, total, d), rho_max * (1.0 + _RADIUS_SLACK))

    gi, gj = candidate_pairs(a, b, radius, metric)
    dist = torus_distance(positions[gi], positions[gj], metric)
    keep = dist < _pair_radius(weights[gi], weights[gj], c, total, d)
    return gi[keep], gj[keep], int(gi.shape[0])


def _general_layer_pair(
    a: WeightLayer,
    b: WeightLayer,
    weights: np.ndarray,
    positions: np.ndarray,
    c: float,
    total: float,
    alpha: float,
    metric: str,
    rng: np.random.Generator,
) -> tuple[np.ndarray, np.ndarray, int]:
    n_pairs = layer_pair_count(a, b)
    if n_pairs == 0:
        return np.empty(0, dtype=np.int64), np.empty(0, dtype=np.int64), 0

    d = positions.shape[1]
    q = d * alpha
    profile = distance_profile(d, metric)
    radius = _layer_radius(a, b, c, total, d)

    # Near work ~ N * ball * rho**d, far work ~ N * (R / rho)**q; balance them.
    stretch = (alpha / (profile.ball * radius**d)) ** (1.0 / (d * (1.0 + alpha)))
    rho = min(max(stretch, 1.0) * radius, profile.rho_max)

    # 1. near pairs, enumerated
    gi, gj = candidate_pairs(a, b, rho * (1.0 + _RADIUS_SLACK), metric)
    dist = torus_distance(positions[gi], positions[gj], metric)
    near = dist <= rho
    gi, gj, dist = gi[near], gj[near], dist[near]
    p = _connection_probability(_pair_radius(weights[gi], weights[gj], c, total, d), dist, q)
    accept = rng.random(p.shape[0]) < p
    first, second = [gi[accept]], [gj[accept]]
    work = int(near.shape[0])

    # 2. far pairs, geometric rejection sampling
    if rho < profile.rho_max:
        pbar = min(1.0, (radius / rho) ** q)
        k = int(rng.binomial(n_pairs, pbar))
        if k > 0:
            ranks = rng.choice(n_pairs, size=k, replace=False, shuffle=False)
            fi, fj = unrank_pairs(a, b, ranks)
            dist = torus_distance(positions[fi], positions[fj], metric)
            p = _connection_probability(
                _pair_radius(weights[fi], weights[fj], c, total, d), dist, q
            )
            accept = (dist > rho) & (rng.random(k) * pbar < p)
            first.append(fi[accept])
            second.append(fj[accept])
            work += k

    return np.concatenate(first), np.concatenate(second), work


def sample_edges(
    weights: np.ndarray,
    positions: np.ndarray,
    c: float,
    alpha: float,
    seed: int = 0,
    metric: str = "euclidean",
) -> np.ndarray:
    """Sample the edge set of a GIRG.

    Args:
        weights: Positive node weights of shape (n,).
        positions: Torus positions of shape (n, d), entries in [0, 1).
        c: Scaling constant (>= 0), usually from calibrate().
        alpha: inf for the threshold model, 0 for the complete graph,
            positive finite for the general model.
        seed: Sampling seed; only the general model consumes randomness.
        metric: Torus metric, "euclidean" or "max".

    Returns:
        int64 array of shape (m, 2) with i < j in every row, rows sorted
        lexicographically.

    Raises:
        InvalidParameterError: On shape mismatch, negative or non-finite c,
            or negative/NaN alpha.
    """
    weights = np.asarray(weights, dtype=np.float64)
    positions = np.asarray(positions, dtype=np.float64)
    metric = check_metric(metric)
    seed = check_seed(seed, "sampling seed")

    if positions.ndim != 2 or positions.shape[0] != weights.shape[0]:
        raise InvalidParameterError(
            f"positions of shape {positions.shape} do not match "
            f"{weights.shape[0]} weights"
        )
    if not (math.isfinite(c) and c >= 0):
        raise InvalidParameterError(f"c must be finite and >= 0, got {c}")
    alpha = float(alpha)
    if math.isnan(alpha) or alpha < 0:
        raise InvalidParameterError(f"alpha must be >= 0, got {alpha}")

    n, d = positions.shape
    if alpha == 0:
        edges = complete_edges(n)
        log.info("Complete graph: %d edges (n=%d)", edges.shape[0], n)
        return edges
    if n < 2 or c == 0:
        return _empty_edges()

    total = float(weights.sum())
    layers = build_layers(weights, positions)
    threshold = math.isinf(alpha)

    first: list[np.ndarray] = []
    second: list[np.ndarray] = []
    work = 0
    for ia, a in enumerate(layers):
        for b in layers[ia:]:
            if threshold:
                gi, gj, cost = _threshold_layer_pair(
                    a, b, weights, positions, c, total, metric
                )
            else:
                rng = derive_rng(seed, EDGE_STREAM, a.index, b.index)
                gi, gj, cost = _general_layer_pair(
                    a, b, weights, positions, c, total, alpha, metric, rng
                )
            log.debug(
                "Layer pair (%d, %d): %d candidates, %d edges",
                a.level,
                b.level,
                cost,
                gi.shape[0],
            )
            first.append(gi)
            second.append(gj)
            work += cost

    if not first:
        return _empty_edges()
    gi = np.concatenate(first).astype(np.int64)
    gj = np.concatenate(second).astype(np.int64)
    lo, hi = np.minimum(gi, gj), np.maximum(gi, gj)
    order = np.lexsort((hi, lo))
    edges = np.column_stack([lo[order], hi[order]])

    log.info(
        "Sampled %d edges (n=%d, d=%d, alpha=%s, %d layers, %d candidates)",
        edges.shape[0],
        n,
        d,
        alpha,
        len(layers),
        work,
    )
    return edges
