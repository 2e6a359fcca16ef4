"""Seed management for reproducible generation.

No stage touches global random state. Every stage builds its own
numpy Generator from the caller's seed, a stream tag naming the stage, and
optionally the identity of the unit of work (for example a weight layer
pair during edge sampling). The resulting draws depend only on those
integers, never on call history, evaluation order, or thread count.
"""

import numbers

import numpy as np

from girgs.errors import InvalidParameterError

# Stream tags keep weights and positions drawn with the same seed uncorrelated.
WEIGHT_STREAM = 0
POSITION_STREAM = 1
EDGE_STREAM = 2


def check_seed(seed: int, name: str = "seed") -> int:
    """Validate a user supplied seed and return it as a plain int.

    Args:
        seed: Candidate seed value.
        name: Parameter name used in the error message.

    Returns:
        The seed as a Python int.

    Raises:
        InvalidParameterError: If the seed is not a non-negative integer.
    """
    if isinstance(seed, bool) or not isinstance(seed, numbers.Integral):
        raise InvalidParameterError(
            f"{name} must be an integer, got {type(seed).__name__}"
        )
    if seed < 0:
        raise InvalidParameterError(f"{name} must be >= 0, got {seed}")
    return int(seed)


def derive_rng(seed: int, stream: int, *unit: int) -> np.random.Generator:
    """Build the random Generator for one stage (and one unit of work).

    The entropy pool is the tuple (seed, stream, *unit), so two units of the
    same stage get independent streams and the same unit always gets the
    same stream.

    Args:
        seed: Caller supplied seed (non-negative).
        stream: Stage tag, one of WEIGHT_STREAM, POSITION_STREAM, EDGE_STREAM.
        *unit: Non-negative integers identifying the unit of work.

    Returns:
        A fresh PCG64-backed numpy Generator.
    """
    seed = check_seed(seed)
    entropy = [seed, int(stream), *(int(u) for u in unit)]
    return np.random.default_rng(np.random.SeedSequence(entropy))


def verify_seed_determinism(seed: int) -> bool:
    """Check that re-deriving a stream reproduces the same draws.

    Draws 10 values from each stage stream twice and also checks that the
    weight and position streams differ from each other.

    Args:
        seed: Seed value to test.

    Returns:
        True if re-derived streams are identical and stage streams differ.
    """
    first = [derive_rng(seed, s).random(10) for s in (WEIGHT_STREAM, POSITION_STREAM)]
    second = [derive_rng(seed, s).random(10) for s in (WEIGHT_STREAM, POSITION_STREAM)]
    same = all(np.array_equal(a, b) for a, b in zip(first, second))
    return same and not np.array_equal(first[0], first[1])
