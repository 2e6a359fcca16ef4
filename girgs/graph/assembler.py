"""One-shot GIRG assembly: weights, positions, calibration, edges.

Each stage is a pure function of its explicit inputs, so a full run is
reproducible from (n, d, ple, alpha, desired_avg_degree, seeds) alone.
"""

import logging
import math

import numpy as np

from girgs.calibration.degree import calibrate
from girgs.config.generation import GirgConfig
from girgs.edges.sampler import sample_edges
from girgs.graph.types import GirgGraph, adjacency_from_edges
from girgs.sampling.positions import sample_positions
from girgs.sampling.weights import sample_weights

log = logging.getLogger(__name__)


def assemble_graph(
    weights: np.ndarray,
    positions: np.ndarray,
    c: float,
    alpha: float,
    sampling_seed: int = 0,
    metric: str = "euclidean",
    weight_seed: int | None = None,
    position_seed: int | None = None,
) -> GirgGraph:
    """Sample edges for fixed weights and positions and wrap them in a graph.

    Args:
        weights: Node weights of shape (n,).
        positions: Torus positions of shape (n, d).
        c: Scaling constant.
        alpha: Connection strength (inf = threshold model).
        sampling_seed: Seed for the general model's Bernoulli draws.
        metric: Torus metric.
        weight_seed: Provenance only.
        position_seed: Provenance only.

    Returns:
        The finished GirgGraph.
    """
    edges = sample_edges(weights, positions, c, alpha, sampling_seed, metric)
    n, d = positions.shape
    return GirgGraph(
        weights=weights,
        positions=positions,
        adjacency=adjacency_from_edges(edges, n),
        d=d,
        alpha=float(alpha),
        scaling=float(c),
        metric=metric,
        weight_seed=weight_seed,
        position_seed=position_seed,
        sampling_seed=None if math.isinf(alpha) else sampling_seed,
    )


def generate_girg(
    n: int,
    d: int,
    ple: float,
    alpha: float,
    desired_avg_degree: float,
    weight_seed: int,
    position_seed: int,
    sampling_seed: int,
    metric: str = "euclidean",
) -> GirgGraph:
    """Generate a GIRG whose expected average degree matches the target.

    The sampling seed is only consumed by the general model; the threshold
    model is deterministic given weights, positions and c.

    Raises:
        InvalidParameterError: On out-of-range parameters.
        CalibrationError: If the target degree is unreachable.
    """
    weights = sample_weights(n, ple, weight_seed)
    positions = sample_positions(n, d, position_seed)
    c = calibrate(weights, d, alpha, desired_avg_degree, metric)
    graph = assemble_graph(
        weights,
        positions,
        c,
        alpha,
        sampling_seed,
        metric,
        weight_seed=weight_seed,
        position_seed=position_seed,
    )
    log.info(
        "Generated GIRG n=%d d=%d alpha=%s: %d edges, average degree %.3f",
        n,
        d,
        alpha,
        graph.edge_count,
        graph.average_degree(),
    )
    return graph


def generate_from_config(config: GirgConfig) -> GirgGraph:
    """generate_girg() driven by a GirgConfig."""
    return generate_girg(
        n=config.n,
        d=config.d,
        ple=config.ple,
        alpha=config.alpha,
        desired_avg_degree=config.avg_degree,
        weight_seed=config.weight_seed,
        position_seed=config.position_seed,
        sampling_seed=config.sampling_seed,
        metric=config.metric,
    )
