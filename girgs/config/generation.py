"""Generation configuration dataclasses, frozen and slotted for immutability."""

import math
from dataclasses import dataclass

from girgs.errors import InvalidParameterError
from girgs.sampling.positions import METRICS


@dataclass(frozen=True, slots=True)
class SweepConfig:
    """Parameter grid evaluated against a single weight draw."""

    d_values: tuple[int, ...] = (1, 2, 3)
    alpha_values: tuple[float, ...] = (math.inf,)
    position_seeds: tuple[int, ...] = (130, 131, 132)

    def __post_init__(self) -> None:
        if not self.d_values or any(d < 1 for d in self.d_values):
            raise InvalidParameterError(
                f"d_values must be non-empty and >= 1, got {self.d_values}"
            )
        if not self.alpha_values or any(
            math.isnan(a) or a < 0 for a in self.alpha_values
        ):
            raise InvalidParameterError(
                f"alpha_values must be non-empty and >= 0, got {self.alpha_values}"
            )
        if not self.position_seeds or any(s < 0 for s in self.position_seeds):
            raise InvalidParameterError(
                f"position_seeds must be non-empty and >= 0, "
                f"got {self.position_seeds}"
            )


@dataclass(frozen=True, slots=True)
class GirgConfig:
    """One-shot generation parameters.

    alpha=inf selects the threshold model, alpha=0 the complete graph, any
    other positive value the general (probabilistic) model. Parameter ranges
    are validated in __post_init__ so invalid configs are rejected early.
    """

    n: int = 1000  # number of nodes
    d: int = 2  # torus dimension
    ple: float = -2.5  # power-law exponent of the weight distribution
    alpha: float = math.inf  # connection strength
    avg_degree: float = 10.0  # target average degree for calibration
    weight_seed: int = 12
    position_seed: int = 130
    sampling_seed: int = 1400
    metric: str = "euclidean"
    sweep: SweepConfig | None = None
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.n < 0:
            raise InvalidParameterError(f"n must be >= 0, got {self.n}")
        if self.d < 1:
            raise InvalidParameterError(f"d must be >= 1, got {self.d}")
        if not self.ple < -1.0:
            raise InvalidParameterError(f"ple must be < -1, got {self.ple}")
        if math.isnan(self.alpha) or self.alpha < 0:
            raise InvalidParameterError(f"alpha must be >= 0, got {self.alpha}")
        if not self.avg_degree > 0:
            raise InvalidParameterError(
                f"avg_degree must be > 0, got {self.avg_degree}"
            )
        for name in ("weight_seed", "position_seed", "sampling_seed"):
            if getattr(self, name) < 0:
                raise InvalidParameterError(
                    f"{name} must be >= 0, got {getattr(self, name)}"
                )
        if self.metric not in METRICS:
            raise InvalidParameterError(
                f"metric must be one of {METRICS}, got {self.metric!r}"
            )
