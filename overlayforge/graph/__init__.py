"""Overlay topology graph: half-edges, labels and the labeler."""

from .label import LEFT, RIGHT, InputLabel, OverlayLabel
from .topology import HalfEdge, Node, TopologyGraph, build_topology_graph
from .labeler import OverlayLabeler, label_graph

__all__ = [
    # Labels
    'LEFT',
    'RIGHT',
    'InputLabel',
    'OverlayLabel',

    # Graph
    'HalfEdge',
    'Node',
    'TopologyGraph',
    'build_topology_graph',

    # Labeling
    'OverlayLabeler',
    'label_graph',
]
