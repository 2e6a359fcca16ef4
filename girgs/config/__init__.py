"""Generation configuration with frozen, hashable, serializable dataclasses."""

from girgs.config.generation import GirgConfig, SweepConfig
from girgs.config.defaults import DEFAULT_CONFIG
from girgs.config.hashing import config_hash, model_config_hash
from girgs.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "GirgConfig",
    "SweepConfig",
    "DEFAULT_CONFIG",
    "config_hash",
    "model_config_hash",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
]
