"""Deterministic config hashing using SHA-256 over sorted JSON."""

import hashlib
import json
from dataclasses import asdict
from typing import Any

from girgs.config.generation import GirgConfig

# Fields that do not change the random graph model, only a particular draw of it.
_DRAW_FIELDS = (
    "weight_seed",
    "position_seed",
    "sampling_seed",
    "sweep",
    "description",
    "tags",
)


def config_hash(config: Any, exclude_fields: list[str] | None = None) -> str:
    """Deterministic SHA-256 hash of a config object.

    Infinite alpha serializes as the JSON extension token ``Infinity``,
    which is stable across runs.

    Args:
        config: Any dataclass instance.
        exclude_fields: Optional list of top-level field names to exclude.

    Returns:
        First 16 hex characters of the SHA-256 hash.
    """
    d = asdict(config)
    if exclude_fields:
        for field in exclude_fields:
            d.pop(field, None)
    serialized = json.dumps(
        d,
        sort_keys=True,
        ensure_ascii=True,
        separators=(",", ":"),
        indent=None,
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:16]


def model_config_hash(config: GirgConfig) -> str:
    """Hash of the random graph model only (excludes seeds and labels).

    Two configs that differ only in their seeds describe the same model
    and share this hash.
    """
    return config_hash(config, exclude_fields=list(_DRAW_FIELDS))
