"""Degree calibration for the threshold and general GIRG models."""

from girgs.calibration.degree import (
    calibrate,
    expected_average_degree,
    pair_ratios,
    weight_scaling,
)
from girgs.calibration.volume import (
    DistanceProfile,
    distance_profile,
    unit_ball_volume,
)

__all__ = [
    "DistanceProfile",
    "calibrate",
    "distance_profile",
    "expected_average_degree",
    "pair_ratios",
    "unit_ball_volume",
    "weight_scaling",
]
