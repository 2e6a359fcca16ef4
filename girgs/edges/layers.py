"""Weight layers: the spatial decomposition behind sub-quadratic edge sampling.

Nodes are bucketed by floor(log2(weight)). Within a layer weights differ by
less than a factor of two, so the largest connection radius between two
layers is a tight bound for every pair they contain. Each layer carries a
periodic kd-tree over its members' positions, which answers radius queries
on the torus without touching far-away nodes.
"""

import logging
from dataclasses import dataclass

import numpy as np
from scipy.spatial import cKDTree

from girgs.sampling.positions import minkowski_p

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeightLayer:
    """One weight bucket and its spatial index.

    Not slotted: cKDTree objects are kept as plain attributes.
    """

    index: int  # position in ascending layer order, used for seeding
    level: int  # floor(log2(w)) shared by all members
    members: np.ndarray  # global node indices, ascending
    max_weight: float
    tree: cKDTree

    @property
    def size(self) -> int:
        return int(self.members.shape[0])


def build_layers(weights: np.ndarray, positions: np.ndarray) -> list[WeightLayer]:
    """Split nodes into weight layers and index each one spatially.

    Args:
        weights: Positive weights of shape (n,).
        positions: Torus positions of shape (n, d), entries in [0, 1).

    Returns:
        Layers in ascending weight order; empty list for n == 0.
    """
    if weights.shape[0] == 0:
        return []

    level = np.floor(np.log2(weights)).astype(np.int64)
    order = np.argsort(level, kind="stable")
    levels, starts = np.unique(level[order], return_index=True)
    bounds = np.append(starts, order.shape[0])

    layers = []
    for idx, lvl in enumerate(levels):
        members = order[bounds[idx] : bounds[idx + 1]]
        layers.append(
            WeightLayer(
                index=idx,
                level=int(lvl),
                members=members,
                max_weight=float(weights[members].max()),
                tree=cKDTree(positions[members], boxsize=1.0),
            )
        )

    log.debug(
        "Built %d weight layers (sizes %s)",
        len(layers),
        [layer.size for layer in layers],
    )
    return layers


def layer_pair_count(a: WeightLayer, b: WeightLayer) -> int:
    """Number of unordered node pairs between two layers (or within one)."""
    if a.index == b.index:
        return a.size * (a.size - 1) // 2
    return a.size * b.size


def candidate_pairs(
    a: WeightLayer, b: WeightLayer, radius: float, metric: str
) -> tuple[np.ndarray, np.ndarray]:
    """Global index pairs of nodes at torus distance <= radius.

    Within a single layer each unordered pair appears once.

    Returns:
        (first, second) global node index arrays of equal length.
    """
    p = minkowski_p(metric)
    if a.index == b.index:
        pairs = a.tree.query_pairs(radius, p=p, output_type="ndarray")
        pairs = np.asarray(pairs, dtype=np.int64).reshape(-1, 2)
        return a.members[pairs[:, 0]], a.members[pairs[:, 1]]

    found = a.tree.sparse_distance_matrix(b.tree, radius, p=p, output_type="ndarray")
    return a.members[found["i"]], b.members[found["j"]]


def unrank_pairs(
    a: WeightLayer, b: WeightLayer, ranks: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """Map pair ranks in [0, layer_pair_count) to global node index pairs.

    Between layers the rank is row-major over (a member, b member). Within a
    layer rank = hi * (hi - 1) / 2 + lo for local indices lo < hi.
    """
    ranks = np.asarray(ranks, dtype=np.int64)
    if a.index != b.index:
        return a.members[ranks // b.size], b.members[ranks % b.size]

    hi = np.floor((1.0 + np.sqrt(1.0 + 8.0 * ranks)) / 2.0).astype(np.int64)
    # sqrt rounding can be off by one for large ranks
    hi -= (hi * (hi - 1) // 2 > ranks).astype(np.int64)
    hi += ((hi + 1) * hi // 2 <= ranks).astype(np.int64)
    lo = ranks - hi * (hi - 1) // 2
    return a.members[lo], a.members[hi]
