"""Point components of overlay results.

Covers the isolated intersection nodes of a labeled graph and the overlays
that involve point inputs, which never need a graph.
"""

from __future__ import annotations

from typing import Iterable, List, Set, Tuple

from ..core.types import EdgeRole, Location, OverlayOp
from ..geometry.algorithms import locate_point
from ..geometry.model import Geometry, Point, iter_points
from ..graph.topology import TopologyGraph

XY = Tuple[float, float]


def intersection_points(
    graph: TopologyGraph,
    area_half_edges: Iterable[int],
    line_edges: Iterable[int],
) -> List[Point]:
    """Nodes where both inputs meet and no result edge ends.

    Args:
        graph: Labeled topology graph
        area_half_edges: Result-area half-edges
        line_edges: Result line edge indices

    Returns:
        Points in node order
    """
    used_edges = {he // 2 for he in area_half_edges}
    used_edges.update(line_edges)

    points: List[Point] = []
    for node in graph.nodes.values():
        in_a = in_b = False
        for he in node.edges:
            if he // 2 in used_edges:
                break
            lab = graph.label(he)
            in_a = in_a or lab.role(0) != EdgeRole.NOT_PART
            in_b = in_b or lab.role(1) != EdgeRole.NOT_PART
        else:
            if in_a and in_b:
                points.append(Point(node.xy))
    return points


def point_coordinates(geometry: Geometry) -> List[XY]:
    """Distinct point coordinates of a geometry, in first-seen order."""
    seen: Set[XY] = set()
    coords: List[XY] = []
    for point in iter_points(geometry):
        xy = point.coord.xy
        if xy not in seen:
            seen.add(xy)
            coords.append(xy)
    return coords


def overlay_point_sets(coords_a: Iterable[XY], coords_b: Iterable[XY], op: OverlayOp) -> List[Point]:
    """Exact set operation on two point sets.

    Examples:
        >>> overlay_point_sets([(0, 0), (1, 1)], [(1, 1)], OverlayOp.DIFFERENCE)
        [Point(coord=Coordinate(0.0, 0.0))]
    """
    set_a = set(coords_a)
    set_b = set(coords_b)
    if op == OverlayOp.INTERSECTION:
        result = set_a & set_b
    elif op == OverlayOp.UNION:
        result = set_a | set_b
    elif op == OverlayOp.DIFFERENCE:
        result = set_a - set_b
    elif op == OverlayOp.SYMMETRIC_DIFFERENCE:
        result = set_a ^ set_b
    else:
        raise ValueError(f"Unknown overlay operation: {op}")
    return [Point(xy) for xy in sorted(result)]


def partition_points(coords: Iterable[XY], geometry: Geometry) -> Tuple[List[Point], List[Point]]:
    """Split points into those on or in ``geometry`` and those outside it.

    Returns:
        Tuple of (covered points, exterior points), each sorted
    """
    covered: List[Point] = []
    exterior: List[Point] = []
    for xy in sorted(set(coords)):
        if locate_point(xy, geometry) == Location.EXTERIOR:
            exterior.append(Point(xy))
        else:
            covered.append(Point(xy))
    return covered, exterior


__all__ = [
    'intersection_points',
    'point_coordinates',
    'overlay_point_sets',
    'partition_points',
]
