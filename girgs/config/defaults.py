"""Default configuration: single source of truth for default model parameters."""

from girgs.config.generation import GirgConfig

# n=1000, d=2, ple=-2.5, threshold model, average degree 10, torus Euclidean.
DEFAULT_CONFIG = GirgConfig()
