"""Noding of input edges into a fully noded edge arrangement."""

from .edges import (
    SourceEdge,
    extract_edges,
    remove_repeated_points,
    check_finite,
    check_ring_structure,
)
from .index import SegmentIndex
from .noder import (
    InputMembership,
    NodedEdge,
    NodingResult,
    Noder,
    node_geometries,
    node_source_edges,
    split_edge,
    merge_pieces,
    find_residual_intersection,
)

__all__ = [
    # Edge extraction
    'SourceEdge',
    'extract_edges',
    'remove_repeated_points',
    'check_finite',
    'check_ring_structure',

    # Index
    'SegmentIndex',

    # Noding
    'InputMembership',
    'NodedEdge',
    'NodingResult',
    'Noder',
    'node_geometries',
    'node_source_edges',
    'split_edge',
    'merge_pieces',
    'find_residual_intersection',
]
