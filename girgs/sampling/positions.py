"""Uniform positions on the d-dimensional unit torus and torus distances.

Coordinate differences are folded to their shortest representation on the
circle of circumference 1, min(|dx|, 1 - |dx|), before being combined.
"euclidean" combines them with the 2-norm, "max" with the max norm used by
most of the GIRG literature.
"""

import logging
import math

import numpy as np

from girgs.errors import InvalidParameterError
from girgs.reproducibility.seed import POSITION_STREAM, derive_rng

log = logging.getLogger(__name__)

METRICS = ("euclidean", "max")


def check_metric(metric: str) -> str:
    """Validate a metric name and return it."""
    if metric not in METRICS:
        raise InvalidParameterError(
            f"metric must be one of {METRICS}, got {metric!r}"
        )
    return metric


def minkowski_p(metric: str) -> float:
    """Minkowski exponent for scipy.spatial queries under a metric."""
    return 2.0 if check_metric(metric) == "euclidean" else math.inf


def max_torus_distance(d: int, metric: str) -> float:
    """Largest distance two points on the unit d-torus can have."""
    if check_metric(metric) == "euclidean":
        return 0.5 * math.sqrt(d)
    return 0.5


def sample_positions(n: int, d: int, seed: int) -> np.ndarray:
    """Sample n points uniformly on the unit d-torus.

    Args:
        n: Number of nodes (>= 0).
        d: Dimension (>= 1).
        seed: Non-negative position seed.

    Returns:
        Read-only float64 array of shape (n, d) with entries in [0, 1).

    Raises:
        InvalidParameterError: If n < 0 or d < 1.
    """
    if n < 0:
        raise InvalidParameterError(f"n must be >= 0, got {n}")
    if d < 1:
        raise InvalidParameterError(f"d must be >= 1, got {d}")

    rng = derive_rng(seed, POSITION_STREAM)
    positions = rng.random((n, d))
    positions.flags.writeable = False
    log.debug("Sampled %d positions (d=%d, seed=%d)", n, d, seed)
    return positions


def validate_positions(positions) -> np.ndarray:
    """Check an explicit (n, d) position array and return a read-only copy.

    Raises:
        InvalidParameterError: If the array is not 2-D with d >= 1 or has
            coordinates outside [0, 1).
    """
    arr = np.array(positions, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] < 1:
        raise InvalidParameterError(
            f"positions must have shape (n, d) with d >= 1, got {arr.shape}"
        )
    if np.any(~np.isfinite(arr)) or np.any(arr < 0.0) or np.any(arr >= 1.0):
        raise InvalidParameterError("positions must lie in [0, 1)")
    arr.flags.writeable = False
    return arr


def torus_distance(a: np.ndarray, b: np.ndarray, metric: str = "euclidean") -> np.ndarray:
    """Torus distance between points, vectorized over leading axes.

    Args:
        a: Array of shape (..., d).
        b: Array broadcastable against a.
        metric: "euclidean" or "max".

    Returns:
        Array of distances with the broadcast leading shape.
    """
    delta = np.abs(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64))
    delta = np.minimum(delta, 1.0 - delta)
    if check_metric(metric) == "euclidean":
        return np.sqrt(np.sum(delta * delta, axis=-1))
    return np.max(delta, axis=-1)


def pairwise_torus_distances(positions: np.ndarray, metric: str = "euclidean") -> np.ndarray:
    """Dense (n, n) matrix of torus distances.

    Quadratic in memory: meant for small n and for brute-force checks.
    """
    positions = np.asarray(positions, dtype=np.float64)
    return torus_distance(positions[:, None, :], positions[None, :, :], metric)
