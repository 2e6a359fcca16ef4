"""Weight and position sampling for GIRG nodes."""

from girgs.sampling.positions import (
    METRICS,
    check_metric,
    max_torus_distance,
    pairwise_torus_distances,
    sample_positions,
    torus_distance,
    validate_positions,
)
from girgs.sampling.weights import sample_weights, validate_weights

__all__ = [
    "METRICS",
    "check_metric",
    "max_torus_distance",
    "pairwise_torus_distances",
    "sample_positions",
    "sample_weights",
    "torus_distance",
    "validate_positions",
    "validate_weights",
]
