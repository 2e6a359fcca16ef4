"""Graph data structures for generated GIRGs."""

from dataclasses import dataclass

import numpy as np
import scipy.sparse


@dataclass(frozen=True, slots=True)
class Node:
    """Read-only view of one node of a GirgGraph."""

    index: int
    weight: float
    coordinate: tuple[float, ...]
    neighbors: frozenset[int]


@dataclass(frozen=True)
class GirgGraph:
    """Immutable container for a generated graph and its provenance.

    The graph owns all node data as one arena: weights, positions and a
    symmetric sparse adjacency matrix without diagonal. Neighbors are node
    indices into that arena. Uses frozen=True for immutability but omits
    slots=True since numpy/scipy objects don't interact well with __slots__.
    """

    weights: np.ndarray  # float array of shape (n,)
    positions: np.ndarray  # float array of shape (n, d), torus coordinates
    adjacency: scipy.sparse.csr_matrix  # symmetric (n x n), int8 entries
    d: int  # dimension
    alpha: float  # connection strength used for edge sampling
    scaling: float  # scaling constant c
    metric: str = "euclidean"
    weight_seed: int | None = None  # None when weights were installed explicitly
    position_seed: int | None = None
    sampling_seed: int | None = None

    @property
    def n(self) -> int:
        return int(self.weights.shape[0])

    @property
    def edge_count(self) -> int:
        return int(self.adjacency.nnz // 2)

    def __len__(self) -> int:
        return self.n

    def neighbors(self, index: int) -> np.ndarray:
        """Sorted neighbor indices of one node."""
        if not 0 <= index < self.n:
            raise IndexError(f"node index {index} out of range for n={self.n}")
        start, end = self.adjacency.indptr[index], self.adjacency.indptr[index + 1]
        return self.adjacency.indices[start:end]

    def node(self, index: int) -> Node:
        neighbors = self.neighbors(index)
        return Node(
            index=index,
            weight=float(self.weights[index]),
            coordinate=tuple(float(x) for x in self.positions[index]),
            neighbors=frozenset(int(j) for j in neighbors),
        )

    def nodes(self) -> list[Node]:
        return [self.node(i) for i in range(self.n)]

    def degrees(self) -> np.ndarray:
        return np.diff(self.adjacency.indptr)

    def edge_list(self) -> np.ndarray:
        """Edges as an (m, 2) int64 array with i < j, sorted lexicographically."""
        upper = scipy.sparse.triu(self.adjacency, k=1, format="coo")
        order = np.lexsort((upper.col, upper.row))
        return np.column_stack([upper.row[order], upper.col[order]]).astype(np.int64)

    def average_degree(self) -> float:
        if self.n == 0:
            return 0.0
        return 2.0 * self.edge_count / self.n


def adjacency_from_edges(edges: np.ndarray, n: int) -> scipy.sparse.csr_matrix:
    """Build the symmetric CSR adjacency from an (m, 2) edge array.

    Args:
        edges: Pairs of distinct node indices, each unordered pair once.
        n: Number of nodes.

    Returns:
        Symmetric sparse matrix with sorted indices and an empty diagonal.
    """
    edges = np.asarray(edges, dtype=np.int64).reshape(-1, 2)
    rows = np.concatenate([edges[:, 0], edges[:, 1]])
    cols = np.concatenate([edges[:, 1], edges[:, 0]])
    data = np.ones(rows.shape[0], dtype=np.int8)
    adjacency = scipy.sparse.csr_matrix((data, (rows, cols)), shape=(n, n))
    adjacency.sort_indices()
    return adjacency
