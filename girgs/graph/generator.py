"""Stateful generator facade for host bindings.

Wraps the pure pipeline stages behind the classic sample/set/calibrate/
generate call sequence. Sampled inputs are immutable arrays; the instance
only remembers which ones are current:

    UNINITIALIZED -> WEIGHTS_SET -> POSITIONS_SET -> CALIBRATED -> GENERATED

Installing new weights or positions discards the generated graph; both must
describe the same node count (generate_graph() replaces both at once). The
calibration survives new positions (it depends on weights only) but not new
weights.
"""

import logging
import math
from enum import Enum

import numpy as np

from girgs.calibration.degree import calibrate as calibrate_scaling
from girgs.calibration.degree import weight_scaling
from girgs.errors import InvalidParameterError, NotReadyError
from girgs.graph.assembler import assemble_graph
from girgs.graph.types import GirgGraph
from girgs.sampling.positions import (
    check_metric,
    sample_positions,
    validate_positions,
)
from girgs.sampling.weights import sample_weights, validate_weights

log = logging.getLogger(__name__)


class GeneratorState(Enum):
    UNINITIALIZED = "uninitialized"
    WEIGHTS_SET = "weights_set"
    POSITIONS_SET = "positions_set"
    CALIBRATED = "calibrated"
    GENERATED = "generated"


class Generator:
    """GIRG generator with explicit weight reuse across runs.

    Example::

        g = Generator()
        g.sample_weights(1000, -2.5, seed=12)
        g.calibrate(10.0, d=2, alpha=math.inf)
        for seed in range(5):
            g.sample_positions(1000, 2, seed)
            graph = g.generate_threshold()
    """

    def __init__(self, metric: str = "euclidean") -> None:
        self._metric = check_metric(metric)
        self._weights: np.ndarray | None = None
        self._positions: np.ndarray | None = None
        self._weight_seed: int | None = None
        self._position_seed: int | None = None
        self._scaling: float | None = None
        self._scaling_d: int | None = None
        self._graph: GirgGraph | None = None

    # -- state -------------------------------------------------------------

    @property
    def metric(self) -> str:
        return self._metric

    @property
    def state(self) -> GeneratorState:
        if self._graph is not None:
            return GeneratorState.GENERATED
        if self._weights is None:
            return GeneratorState.UNINITIALIZED
        if self._positions is None:
            return GeneratorState.WEIGHTS_SET
        if self._scaling is not None:
            return GeneratorState.CALIBRATED
        return GeneratorState.POSITIONS_SET


    # -- inputs ------------------------------------------------------------

    def _check_node_count(
        self, n_weights: int | None = None, n_positions: int | None = None
    ) -> None:
        """Reject inputs whose length differs from the installed counterpart."""
        if n_weights is None and self._weights is not None:
            n_weights = self._weights.shape[0]
        if n_positions is None and self._positions is not None:
            n_positions = self._positions.shape[0]
        if n_weights is not None and n_positions is not None and n_weights != n_positions:
            raise InvalidParameterError(
                f"{n_weights} weights do not match {n_positions} positions"
            )

    def sample_weights(self, n: int, ple: float, seed: int) -> np.ndarray:
        """Draw fresh power-law weights and make them current.

        Raises:
            InvalidParameterError: If n differs from the current positions.
        """
        self._check_node_count(n_weights=n)
        weights = sample_weights(n, ple, seed)
        self._install_weights(weights, seed)
        return weights

    def set_weights(self, weights) -> None:
        """Install an explicit weight sequence verbatim (no sampling).

        Raises:
            InvalidParameterError: If the sequence is malformed or its length
                differs from the current positions.
        """
        weights = validate_weights(weights)
        self._check_node_count(n_weights=weights.shape[0])
        self._install_weights(weights, None)

    def _install_weights(self, weights: np.ndarray, seed: int | None) -> None:
        self._weights = weights
        self._weight_seed = seed
        self._scaling = None
        self._scaling_d = None
        self._graph = None

    def sample_positions(self, n: int, d: int, seed: int) -> np.ndarray:
        """Draw fresh torus positions and make them current.

        Raises:
            InvalidParameterError: If n differs from the current weights.
        """
        self._check_node_count(n_positions=n)
        positions = sample_positions(n, d, seed)
        self._install_positions(positions, seed)
        return positions

    def set_positions(self, positions) -> None:
        """Install an explicit (n, d) position array verbatim (no sampling).

        Raises:
            InvalidParameterError: If the array is malformed or its length
                differs from the current weights.
        """
        positions = validate_positions(positions)
        self._check_node_count(n_positions=positions.shape[0])
        self._install_positions(positions, None)

    def _install_positions(self, positions: np.ndarray, seed: int | None) -> None:
        self._positions = positions
        self._position_seed = seed
        self._graph = None

    # -- calibration -------------------------------------------------------

    def calibrate(self, desired_avg_degree: float, d: int, alpha: float) -> float:
        """Compute and store the scaling constant c for the current weights.

        Raises:
            NotReadyError: If no weights are set.
            InvalidParameterError: If desired_avg_degree <= 0.
            CalibrationError: If the target is unreachable.
        """
        if self._weights is None:
            raise NotReadyError("calibrate() requires weights; sample or set them first")
        c = calibrate_scaling(self._weights, d, alpha, desired_avg_degree, self._metric)
        self._scaling = c
        self._scaling_d = d
        return c

    @property
    def scaling(self) -> float | None:
        """Calibrated c, or None before calibration."""
        return self._scaling

    @property
    def weight_scaling(self) -> float | None:
        """c**d: the weight multiplier equivalent to the calibrated c."""
        if self._scaling is None:
            return None
        return weight_scaling(self._scaling, self._scaling_d)

    # -- generation --------------------------------------------------------

    def generate_threshold(self) -> GirgGraph:
        """Generate the deterministic threshold-model graph (alpha = inf)."""
        return self.generate(math.inf, 0)

    def generate(self, alpha: float, seed: int) -> GirgGraph:
        """Sample edges for the current weights and positions.

        Uses the calibrated c when available, c = 1 otherwise. On failure
        the previous graph (if any) is left untouched.

        Raises:
            NotReadyError: If weights or positions are missing, or the
                calibration was done for another dimension.
        """
        if self._weights is None or self._positions is None:
            raise NotReadyError(
                f"generate() requires weights and positions (state: {self.state.value})"
            )
        d = self._positions.shape[1]
        if self._scaling is not None and self._scaling_d != d:
            raise NotReadyError(
                f"scaling was calibrated for d={self._scaling_d}, positions have d={d}"
            )

        c = 1.0 if self._scaling is None else self._scaling
        graph = assemble_graph(
            self._weights,
            self._positions,
            c,
            alpha,
            seed,
            self._metric,
            weight_seed=self._weight_seed,
            position_seed=self._position_seed,
        )
        self._graph = graph
        return graph

    def generate_graph(
        self,
        n: int,
        d: int,
        ple: float,
        alpha: float,
        desired_avg_degree: float,
        weight_seed: int,
        position_seed: int,
        sampling_seed: int,
    ) -> GirgGraph:
        """Sample weights and positions, calibrate, and generate in one call.

        Every stage runs before anything is installed, so a failure leaves
        the previous weights, positions, calibration and graph in place.
        The node count may differ from the previous run.
        """
        weights = sample_weights(n, ple, weight_seed)
        positions = sample_positions(n, d, position_seed)
        c = calibrate_scaling(weights, d, alpha, desired_avg_degree, self._metric)
        graph = assemble_graph(
            weights,
            positions,
            c,
            alpha,
            sampling_seed,
            self._metric,
            weight_seed=weight_seed,
            position_seed=position_seed,
        )

        self._weights, self._weight_seed = weights, weight_seed
        self._positions, self._position_seed = positions, position_seed
        self._scaling, self._scaling_d = c, d
        self._graph = graph
        log.info(
            "Generated n=%d d=%d alpha=%s with c=%.6g: %d edges",
            n,
            d,
            alpha,
            c,
            graph.edge_count,
        )
        return graph

    # -- accessors ---------------------------------------------------------

    @property
    def weights(self) -> np.ndarray:
        if self._weights is None:
            raise NotReadyError("no weights set")
        return self._weights

    @property
    def positions(self) -> np.ndarray:
        if self._positions is None:
            raise NotReadyError("no positions set")
        return self._positions

    @property
    def graph(self) -> GirgGraph:
        if self._graph is None:
            raise NotReadyError("no graph generated yet")
        return self._graph

    @property
    def edge_count(self) -> int:
        return self.graph.edge_count

    def edge_list(self) -> np.ndarray:
        return self.graph.edge_list()

    def average_degree(self) -> float:
        return self.graph.average_degree()
