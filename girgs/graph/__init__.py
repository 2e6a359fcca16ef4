"""Graph assembly: the stateful Generator and the one-shot pipeline."""

from girgs.graph.assembler import assemble_graph, generate_from_config, generate_girg
from girgs.graph.generator import Generator, GeneratorState
from girgs.graph.types import GirgGraph, Node, adjacency_from_edges

__all__ = [
    "Generator",
    "GeneratorState",
    "GirgGraph",
    "Node",
    "adjacency_from_edges",
    "assemble_graph",
    "generate_from_config",
    "generate_girg",
]
