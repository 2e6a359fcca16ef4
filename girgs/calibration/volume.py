"""Distance distribution of two independent uniform points on the unit torus.

F(r) = P(dist < r) is the volume of the torus ball of radius r. For
r <= 1/2 the ball does not wrap around and F is the ordinary ball volume.
Beyond 1/2 the Euclidean ball is clipped by the unit cube; that part of F
is tabulated once per dimension from the recursion

    F_k(s) = 2 * integral_0^{1/2} F_{k-1}(s - u**2) du,    s = r**2,

starting at F_1(s) = min(1, 2 * sqrt(s)). The max norm needs no table:
its ball is a cube and F(r) = min(1, (2r)**d).

G(r) = E[min(1, (r / dist)**(d * alpha))] is the probability that a pair
with radius r is connected in the general model:

    G(r) = F(r) + r**q * integral_r^rho_max rho**(-q) dF(rho),    q = d * alpha.

The integral has a closed form below 1/2; the clipped remainder is
accumulated on the table in log space so large q neither overflows nor
underflows.
"""

import logging
import math
from functools import lru_cache

import numpy as np
from scipy.special import gamma

from girgs.sampling.positions import check_metric, max_torus_distance

log = logging.getLogger(__name__)

_TABLE_POINTS = 4097
_QUADRATURE_NODES = 2048
_CHUNK = 256
_LOG_FLOOR = -1e250


def unit_ball_volume(d: int, metric: str) -> float:
    """Volume of the radius-1 ball in R^d under the given metric."""
    if check_metric(metric) == "euclidean":
        return math.pi ** (d / 2.0) / float(gamma(d / 2.0 + 1.0))
    return 2.0**d


def _piecewise_cdf(k: int, s_grid: np.ndarray, table: np.ndarray):
    """F_k as a function of s = r**2: analytic below 1/4, tabulated above."""
    ball = unit_ball_volume(k, "euclidean")

    def cdf(s: np.ndarray) -> np.ndarray:
        s = np.maximum(s, 0.0)
        out = np.interp(s, s_grid, table, right=1.0)
        inner = s <= 0.25
        out[inner] = ball * s[inner] ** (k / 2.0)
        return out

    return cdf


@lru_cache(maxsize=None)
def _clipped_cdf_table(d: int) -> tuple[np.ndarray, np.ndarray]:
    """Tabulate the Euclidean torus distance CDF for s = r**2 in [1/4, d/4].

    Midpoint quadrature over u; F_{k-1} comes from the analytic ball volume
    where it applies and from the previous table elsewhere.
    """
    u = (np.arange(_QUADRATURE_NODES) + 0.5) / (2.0 * _QUADRATURE_NODES)
    u2 = u * u

    def prev(s: np.ndarray) -> np.ndarray:
        return np.minimum(1.0, 2.0 * np.sqrt(np.maximum(s, 0.0)))

    s_grid = np.empty(0)
    table = np.empty(0)
    for k in range(2, d + 1):
        s_grid = np.linspace(0.25, k / 4.0, _TABLE_POINTS)
        table = np.empty(_TABLE_POINTS)
        for start in range(0, _TABLE_POINTS, _CHUNK):
            s = s_grid[start : start + _CHUNK, None]
            table[start : start + _CHUNK] = prev(s - u2[None, :]).mean(axis=1)
        table = np.minimum(np.maximum.accumulate(table), 1.0)
        table[-1] = 1.0
        prev = _piecewise_cdf(k, s_grid, table)

    log.debug("Tabulated clipped torus ball volume for d=%d", d)
    return s_grid, table


class DistanceProfile:
    """Torus distance CDF and general-model pair probability for one (d, metric)."""

    def __init__(self, d: int, metric: str = "euclidean") -> None:
        self.d = d
        self.metric = check_metric(metric)
        self.rho_max = max_torus_distance(d, metric)
        self.ball = unit_ball_volume(d, metric)
        if metric == "euclidean" and d >= 2:
            self._s_grid, self._cdf_grid = _clipped_cdf_table(d)
        else:
            self._s_grid = None
            self._cdf_grid = None

    def cdf(self, r) -> np.ndarray:
        """P(dist < r) for a uniform random pair, elementwise over r."""
        r = np.asarray(r, dtype=np.float64)
        out = np.ones(r.shape)
        inner = r <= 0.5
        out[inner] = self.ball * np.maximum(r[inner], 0.0) ** self.d
        if self._s_grid is not None:
            outer = ~inner
            out[outer] = np.interp(
                r[outer] ** 2, self._s_grid, self._cdf_grid, right=1.0
            )
        return out

    def _log_tail(self, q: float) -> np.ndarray:
        """log of integral_rho^rho_max sigma**(-q) dF(sigma) at each table point."""
        s_mid = 0.5 * (self._s_grid[1:] + self._s_grid[:-1])
        mass = np.diff(self._cdf_grid)
        with np.errstate(divide="ignore"):
            terms = -0.5 * q * np.log(s_mid) + np.log(mass)
        tail = np.logaddexp.accumulate(terms[::-1])[::-1]
        # finite floor keeps np.interp free of inf - inf
        return np.maximum(np.append(tail, -np.inf), _LOG_FLOOR)

    def connection_probability(self, r, alpha: float) -> np.ndarray:
        """G(r): chance that a pair with radius r is connected.

        alpha=inf gives the threshold model (G = F), alpha=0 the complete
        graph (G = 1).
        """
        r = np.asarray(r, dtype=np.float64)
        if alpha == 0:
            return np.ones(r.shape)
        if math.isinf(alpha):
            return self.cdf(r)

        d = self.d
        q = d * alpha
        out = self.cdf(r)

        inner = (r > 0) & (r <= 0.5)
        ri = r[inner]
        if abs(q - d) < 1e-9:
            near = self.ball * d * ri**d * np.log(0.5 / ri)
        else:
            near = self.ball * d * ((2.0 * ri) ** q * 0.5**d - ri**d) / (d - q)

        if self._s_grid is None:
            out[inner] += near
            return np.minimum(out, 1.0)

        log_tail = self._log_tail(q)
        # integral beyond 1/2, weighted by (r / rho)**q
        with np.errstate(divide="ignore"):
            out[inner] += near + np.exp(q * np.log(ri) + log_tail[0])
            outer = (r > 0.5) & (r < self.rho_max)
            ro = r[outer]
            out[outer] += np.exp(
                q * np.log(ro)
                + np.interp(ro**2, self._s_grid, log_tail)
            )
        return np.minimum(out, 1.0)


@lru_cache(maxsize=None)
def distance_profile(d: int, metric: str = "euclidean") -> DistanceProfile:
    """Cached DistanceProfile for a dimension and metric."""
    return DistanceProfile(d, metric)
