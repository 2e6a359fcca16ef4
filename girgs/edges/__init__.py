"""Sub-quadratic edge sampling over weight layers and periodic kd-trees."""

from girgs.edges.layers import WeightLayer, build_layers
from girgs.edges.sampler import complete_edges, sample_edges

__all__ = [
    "WeightLayer",
    "build_layers",
    "complete_edges",
    "sample_edges",
]
