"""Geometric inhomogeneous random graph (GIRG) generation.

Pipeline: sample_weights -> sample_positions -> calibrate -> sample_edges,
assembled into a GirgGraph by generate_girg() or the stateful Generator.
"""

from girgs.calibration import calibrate, expected_average_degree
from girgs.config import DEFAULT_CONFIG, GirgConfig, SweepConfig
from girgs.edges import sample_edges
from girgs.errors import (
    CalibrationError,
    GirgError,
    InvalidParameterError,
    NotReadyError,
)
from girgs.graph import (
    Generator,
    GeneratorState,
    GirgGraph,
    Node,
    generate_from_config,
    generate_girg,
)
from girgs.sampling import sample_positions, sample_weights, torus_distance
from girgs.sweep import SweepRow, run_sweep

__version__ = "0.1.0"

__all__ = [
    "CalibrationError",
    "DEFAULT_CONFIG",
    "Generator",
    "GeneratorState",
    "GirgConfig",
    "GirgError",
    "GirgGraph",
    "InvalidParameterError",
    "Node",
    "NotReadyError",
    "SweepConfig",
    "SweepRow",
    "calibrate",
    "expected_average_degree",
    "generate_from_config",
    "generate_girg",
    "run_sweep",
    "sample_edges",
    "sample_positions",
    "sample_weights",
    "torus_distance",
]
