"""JSON serialization and deserialization for generation configs."""

import json
from dataclasses import asdict
from typing import Any

from dacite import Config as DaciteConfig
from dacite import from_dict

from girgs.config.generation import GirgConfig

# JSON has no separate float type: accept integers wherever a float is declared.
_DACITE_CONFIG = DaciteConfig(
    cast=[tuple],
    type_hooks={float: float},
    check_types=True,
    strict=True,
)


def config_to_json(config: GirgConfig) -> str:
    """Serialize a GirgConfig to a JSON string.

    Uses sorted keys and 2-space indent for human readability and diffability.
    An infinite alpha is written as ``Infinity``.
    """
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> GirgConfig:
    """Deserialize a JSON string to a GirgConfig.

    Uses dacite with strict=True to reject unknown keys and cast=[tuple] to
    convert JSON arrays back to tuples for tags and sweep fields.
    """
    return config_from_dict(json.loads(json_str))


def config_to_dict(config: GirgConfig) -> dict[str, Any]:
    """Convert a GirgConfig to a plain dictionary."""
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> GirgConfig:
    """Reconstruct a GirgConfig from a plain dictionary."""
    return from_dict(data_class=GirgConfig, data=d, config=_DACITE_CONFIG)
