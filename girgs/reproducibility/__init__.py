"""Reproducibility infrastructure: per-stage and per-unit random generators."""

from girgs.reproducibility.seed import (
    EDGE_STREAM,
    POSITION_STREAM,
    WEIGHT_STREAM,
    check_seed,
    derive_rng,
    verify_seed_determinism,
)

__all__ = [
    "EDGE_STREAM",
    "POSITION_STREAM",
    "WEIGHT_STREAM",
    "check_seed",
    "derive_rng",
    "verify_seed_determinism",
]
