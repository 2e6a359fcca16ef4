"""Power-law weight sampling (Chung-Lu style node weights).

Weights follow a Pareto distribution with density proportional to
w**ple, truncated to [1, n). They are drawn by inverse transform sampling
from a single seeded stream, so identical (n, ple, seed) always yield the
identical sequence.
"""

import logging

import numpy as np

from girgs.errors import InvalidParameterError
from girgs.reproducibility.seed import WEIGHT_STREAM, derive_rng

log = logging.getLogger(__name__)


def sample_weights(n: int, ple: float, seed: int) -> np.ndarray:
    """Sample n i.i.d. power-law weights in [1, n).

    With u uniform in [0, 1) and e = ple + 1 < 0, the inverse CDF of the
    truncated power law is w = ((n**e - 1) * u + 1) ** (1 / e).

    Args:
        n: Number of nodes (>= 0).
        ple: Power-law exponent (< -1). Values close to -2 give heavy tails.
        seed: Non-negative weight seed.

    Returns:
        Read-only float64 array of shape (n,).

    Raises:
        InvalidParameterError: If n < 0 or ple >= -1.
    """
    if n < 0:
        raise InvalidParameterError(f"n must be >= 0, got {n}")
    if not ple < -1.0:
        raise InvalidParameterError(
            f"ple must be < -1 for a normalizable power law, got {ple}"
        )

    rng = derive_rng(seed, WEIGHT_STREAM)
    if n == 0:
        empty = np.empty(0, dtype=np.float64)
        empty.flags.writeable = False
        return empty
    u = rng.random(n)

    exponent = ple + 1.0
    weights = ((float(n) ** exponent - 1.0) * u + 1.0) ** (1.0 / exponent)

    # Rounding at u -> 1 can land exactly on n
    if n > 1:
        np.clip(weights, 1.0, np.nextafter(float(n), 0.0), out=weights)

    weights.flags.writeable = False
    log.debug(
        "Sampled %d weights (ple=%.3f, seed=%d, max=%.3f)",
        n,
        ple,
        seed,
        weights.max(),
    )
    return weights


def validate_weights(weights) -> np.ndarray:
    """Check an explicit weight sequence and return a read-only copy.

    Args:
        weights: Any one-dimensional sequence of positive finite numbers.

    Returns:
        Read-only float64 array.

    Raises:
        InvalidParameterError: If the sequence is not 1-D, not finite, or
            contains non-positive entries.
    """
    try:
        arr = np.array(weights, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"weights are not numeric: {e}") from e

    if arr.ndim != 1:
        raise InvalidParameterError(
            f"weights must be one-dimensional, got shape {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidParameterError("weights must be finite")
    if np.any(arr <= 0):
        raise InvalidParameterError("weights must be strictly positive")

    arr.flags.writeable = False
    return arr
