"""Degree calibration: find the scaling constant c for a target average degree.

Every pair (i, j) gets the radius r_ij = c * (w_i * w_j / W) ** (1/d). The
expected average degree is

    E[deg](c) = (1/n) * sum_{i != j} G(r_ij),

with G from DistanceProfile.connection_probability. E[deg] is continuous
and non-decreasing in c, so c is the root of E[deg](c) - target on the
bracket [0, c_full], where c_full makes every pair certain.
"""

import logging
import math

import numpy as np
from scipy.optimize import brentq

from girgs.calibration.volume import distance_profile
from girgs.errors import CalibrationError, InvalidParameterError
from girgs.sampling.positions import check_metric

log = logging.getLogger(__name__)

# All pairs are summed exactly up to this many nodes, log-weight bins above.
PAIR_EXACT_LIMIT = 2048
LOG_WEIGHT_BINS = 1024

THRESHOLD_TOLERANCE = 1e-6
GENERAL_TOLERANCE = 1e-3


def _check_alpha(alpha: float) -> float:
    alpha = float(alpha)
    if math.isnan(alpha) or alpha < 0:
        raise InvalidParameterError(f"alpha must be >= 0, got {alpha}")
    return alpha


def pair_ratios(weights: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Unordered pair terms w_i * w_j / W with their multiplicities.

    Exact for small inputs. Larger inputs are grouped into log-spaced weight
    bins represented by their mean weight, which keeps the cost independent
    of n.

    Args:
        weights: Positive weights of shape (n,).

    Returns:
        (ratios, multiplicity) arrays of equal length.
    """
    weights = np.asarray(weights, dtype=np.float64)
    n = weights.shape[0]
    total = weights.sum()

    if n <= PAIR_EXACT_LIMIT:
        i, j = np.triu_indices(n, k=1)
        return weights[i] * weights[j] / total, np.ones(i.shape[0])

    log_w = np.log(weights)
    edges = np.linspace(log_w.min(), log_w.max(), LOG_WEIGHT_BINS + 1)
    bins = np.clip(np.searchsorted(edges, log_w, side="right") - 1, 0, LOG_WEIGHT_BINS - 1)
    counts = np.bincount(bins, minlength=LOG_WEIGHT_BINS).astype(np.float64)
    sums = np.bincount(bins, weights=weights, minlength=LOG_WEIGHT_BINS)
    occupied = counts > 0
    counts = counts[occupied]
    means = sums[occupied] / counts

    a, b = np.triu_indices(counts.shape[0], k=0)
    multiplicity = np.where(a == b, counts[a] * (counts[a] - 1) / 2, counts[a] * counts[b])
    keep = multiplicity > 0
    return (means[a] * means[b] / total)[keep], multiplicity[keep]


def expected_average_degree(
    weights: np.ndarray,
    d: int,
    alpha: float,
    c: float,
    metric: str = "euclidean",
) -> float:
    """Expected average degree of the model for a given scaling constant.

    Args:
        weights: Node weights of shape (n,).
        d: Dimension.
        alpha: Connection strength (inf = threshold model).
        c: Scaling constant (>= 0).
        metric: Torus metric.

    Returns:
        Expected average degree over positions drawn uniformly at random.
    """
    weights = np.asarray(weights, dtype=np.float64)
    n = weights.shape[0]
    if n < 2:
        return 0.0
    alpha = _check_alpha(alpha)
    ratios, multiplicity = pair_ratios(weights)
    profile = distance_profile(d, check_metric(metric))
    radii = c * ratios ** (1.0 / d)
    probs = profile.connection_probability(radii, alpha)
    return float(2.0 * np.dot(multiplicity, probs) / n)


def calibrate(
    weights: np.ndarray,
    d: int,
    alpha: float,
    desired_avg_degree: float,
    metric: str = "euclidean",
) -> float:
    """Find c such that the expected average degree equals the target.

    Args:
        weights: Node weights of shape (n,).
        d: Dimension (>= 1).
        alpha: Connection strength (inf = threshold model, 0 = complete graph).
        desired_avg_degree: Target average degree (> 0).
        metric: Torus metric.

    Returns:
        The scaling constant c.

    Raises:
        InvalidParameterError: If desired_avg_degree <= 0, d < 1 or alpha < 0.
        CalibrationError: If the target is unreachable for these weights.
    """
    if not desired_avg_degree > 0:
        raise InvalidParameterError(
            f"desired_avg_degree must be > 0, got {desired_avg_degree}"
        )
    if d < 1:
        raise InvalidParameterError(f"d must be >= 1, got {d}")
    alpha = _check_alpha(alpha)
    metric = check_metric(metric)

    weights = np.asarray(weights, dtype=np.float64)
    n = weights.shape[0]
    max_degree = n - 1.0
    tolerance = THRESHOLD_TOLERANCE if math.isinf(alpha) else GENERAL_TOLERANCE

    if n < 2:
        raise CalibrationError(f"cannot reach average degree with only {n} node(s)")
    if desired_avg_degree > max_degree:
        raise CalibrationError(
            f"desired average degree {desired_avg_degree} exceeds n - 1 = {max_degree:g}"
        )
    if alpha == 0:
        # complete graph for every c
        if abs(desired_avg_degree - max_degree) > tolerance:
            raise CalibrationError(
                f"alpha=0 always yields average degree {max_degree:g}, "
                f"cannot reach {desired_avg_degree}"
            )
        return 1.0

    ratios, multiplicity = pair_ratios(weights)
    profile = distance_profile(d, metric)
    base = ratios ** (1.0 / d)
    c_full = profile.rho_max / base.min() * (1.0 + 1e-9)

    def residual(c: float) -> float:
        probs = profile.connection_probability(c * base, alpha)
        return float(2.0 * np.dot(multiplicity, probs) / n) - desired_avg_degree

    if residual(c_full) <= 0:
        log.warning(
            "Target degree %.3f only reached by the complete graph (d=%d, alpha=%s)",
            desired_avg_degree,
            d,
            alpha,
        )
        return c_full

    try:
        c = brentq(residual, 0.0, c_full, xtol=1e-14, maxiter=500)
    except (RuntimeError, ValueError) as e:
        raise CalibrationError(f"root finding for c failed: {e}") from e

    error = abs(residual(c))
    if error > tolerance:
        raise CalibrationError(
            f"calibrated c={c:.6g} misses target {desired_avg_degree} by {error:.3g}"
        )

    log.info(
        "Calibrated c=%.6g for n=%d, d=%d, alpha=%s (target %.3f, residual %.2e)",
        c,
        n,
        d,
        alpha,
        desired_avg_degree,
        error,
    )
    return c


def weight_scaling(c: float, d: int) -> float:
    """Factor by which weights must be multiplied to absorb c (c**d)."""
    return c**d
