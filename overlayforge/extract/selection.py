"""Decide which graph elements belong to an overlay result."""

from __future__ import annotations

from typing import Optional

from ..core.types import EdgeRole, Location, OverlayOp
from ..graph.label import LEFT, RIGHT, InputLabel
from ..graph.topology import TopologyGraph


def is_in_result(op: OverlayOp, loc_a: Optional[Location], loc_b: Optional[Location]) -> bool:
    """Apply an overlay operation to a pair of locations.

    Only INTERIOR counts as inside; BOUNDARY and EXTERIOR do not.

    Examples:
        >>> is_in_result(OverlayOp.DIFFERENCE, Location.INTERIOR, Location.EXTERIOR)
        True
        >>> is_in_result(OverlayOp.INTERSECTION, Location.INTERIOR, Location.BOUNDARY)
        False
    """
    a = loc_a == Location.INTERIOR
    b = loc_b == Location.INTERIOR
    if op == OverlayOp.INTERSECTION:
        return a and b
    if op == OverlayOp.UNION:
        return a or b
    if op == OverlayOp.DIFFERENCE:
        return a and not b
    if op == OverlayOp.SYMMETRIC_DIFFERENCE:
        return a != b
    raise ValueError(f"Unknown overlay operation: {op}")


def is_result_area_edge(graph: TopologyGraph, he: int, op: OverlayOp) -> bool:
    """True if the result area lies right of half-edge ``he`` and not left of it."""
    lab = graph.label(he)
    if not lab.is_boundary_either():
        return False
    forward = he % 2 == 0
    right = is_in_result(op, lab.location(0, RIGHT, forward), lab.location(1, RIGHT, forward))
    if not right:
        return False
    left = is_in_result(op, lab.location(0, LEFT, forward), lab.location(1, LEFT, forward))
    return not left


def line_location(item: InputLabel, op: OverlayOp) -> Optional[Location]:
    """Location of the edge itself (not its sides) for one input.

    Lines and area boundaries contain the edge. Collapsed boundaries count
    only for intersections; otherwise the area location applies.
    """
    if item.role in (EdgeRole.LINE, EdgeRole.BOUNDARY):
        return Location.INTERIOR
    if item.role == EdgeRole.COLLAPSE and op == OverlayOp.INTERSECTION:
        return Location.INTERIOR
    return item.left


def is_result_line_edge(graph: TopologyGraph, edge_index: int, op: OverlayOp) -> bool:
    """True if a noded edge becomes a result line.

    Edges inside or on the boundary of the result area are excluded.
    """
    lab = graph.labels[edge_index]
    if is_in_result(op, lab[0].left, lab[1].left) or is_in_result(op, lab[0].right, lab[1].right):
        return False
    return is_in_result(op, line_location(lab[0], op), line_location(lab[1], op))


def result_dimension(op: OverlayOp, dim_a: int, dim_b: int) -> int:
    """Dimension of the result of an overlay operation.

    Examples:
        >>> result_dimension(OverlayOp.INTERSECTION, 2, 1)
        1
        >>> result_dimension(OverlayOp.DIFFERENCE, 0, 2)
        0
    """
    dim_a = max(dim_a, 0)
    dim_b = max(dim_b, 0)
    if op == OverlayOp.INTERSECTION:
        return min(dim_a, dim_b)
    if op == OverlayOp.DIFFERENCE:
        return dim_a
    return max(dim_a, dim_b)


__all__ = [
    'is_in_result',
    'is_result_area_edge',
    'line_location',
    'is_result_line_edge',
    'result_dimension',
]
