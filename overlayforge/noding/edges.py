"""Decompose input geometries into source edges for noding.

Every ring and line of an input becomes one :class:`SourceEdge` carrying the
owning input index and its role. Coordinates are snapped to the precision
model and repeated points removed. Area rings keep their stored direction and
record which side the polygon interior lies on as a depth delta: ``+1`` when
the interior is on the right of the edge direction, ``-1`` when on the left.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..core.errors import InvalidInputGeometry
from ..core.precision import PrecisionModel
from ..core.predicates import is_ccw
from ..core.types import EdgeRole
from ..geometry.model import Geometry, LineString, iter_lines, iter_polygons

XY = Tuple[float, float]


@dataclass
class SourceEdge:
    """A precise, deduplicated coordinate run from one input geometry.

    Attributes:
        coords: Coordinates with no two consecutive points equal
        index: Owning input (0 for A, 1 for B)
        role: LINE or BOUNDARY
        depth_delta: +1 if the area interior is right of the edge, -1 if left,
            0 for lines
        is_hole: True if the edge comes from a hole ring
    """
    coords: Tuple[XY, ...]
    index: int
    role: EdgeRole
    depth_delta: int = 0
    is_hole: bool = False

    @property
    def is_closed(self) -> bool:
        return len(self.coords) > 2 and self.coords[0] == self.coords[-1]


def remove_repeated_points(coords: Sequence[XY]) -> Tuple[XY, ...]:
    """Drop consecutive duplicate coordinates.

    Examples:
        >>> remove_repeated_points([(0, 0), (0, 0), (1, 0), (1, 0)])
        ((0, 0), (1, 0))
    """
    result: List[XY] = []
    for xy in coords:
        if not result or xy != result[-1]:
            result.append(xy)
    return tuple(result)


def _precise_coords(line: LineString, precision: PrecisionModel) -> Tuple[XY, ...]:
    return remove_repeated_points([precision.make_precise_xy(c.xy) for c in line.coords])


def _ring_edge(
    ring: LineString,
    index: int,
    precision: PrecisionModel,
    is_hole: bool,
) -> List[SourceEdge]:
    coords = _precise_coords(ring, precision)
    if len(set(coords)) < 2:
        # Collapsed to a point under the precision model
        return []
    if coords[0] != coords[-1]:
        coords = coords + (coords[0],)

    # Shell interior is right of a clockwise ring; hole exterior is the
    # polygon interior, so it is right of a counter-clockwise hole
    interior_right = is_ccw(coords) == is_hole
    return [SourceEdge(
        coords,
        index,
        EdgeRole.BOUNDARY,
        depth_delta=1 if interior_right else -1,
        is_hole=is_hole,
    )]


def extract_edges(
    geometry: Geometry,
    index: int,
    precision: PrecisionModel,
) -> List[SourceEdge]:
    """Decompose one input geometry into source edges.

    Point components contribute no edges. Lines that collapse to a single
    point under the precision model are dropped, as are rings that collapse
    to fewer than two distinct points.

    Args:
        geometry: Input geometry (A or B)
        index: Owning input index, 0 or 1
        precision: Precision model applied to every coordinate

    Returns:
        List of SourceEdge in input order

    Examples:
        >>> from overlayforge.geometry import Polygon
        >>> from overlayforge.core.precision import FLOATING
        >>> edges = extract_edges(Polygon([(0, 0), (0, 1), (1, 1), (1, 0)]), 0, FLOATING)
        >>> edges[0].role, edges[0].depth_delta
        (<EdgeRole.BOUNDARY: 'boundary'>, 1)
    """
    edges: List[SourceEdge] = []
    for polygon in iter_polygons(geometry):
        edges.extend(_ring_edge(polygon.shell, index, precision, is_hole=False))
        for hole in polygon.holes:
            edges.extend(_ring_edge(hole, index, precision, is_hole=True))

    for line in iter_lines(geometry):
        coords = _precise_coords(line, precision)
        if len(coords) < 2:
            continue
        edges.append(SourceEdge(coords, index, EdgeRole.LINE))
    return edges


def check_finite(geometry: Geometry) -> None:
    """Raise InvalidInputGeometry for NaN or infinite coordinates."""
    for coord in geometry.coordinates():
        if not coord.is_finite():
            raise InvalidInputGeometry("Non-finite coordinate", coord.xy)


def check_ring_structure(geometry: Geometry) -> None:
    """Raise InvalidInputGeometry for malformed rings and lines.

    Rings need at least four coordinates and must be closed; lines need at
    least two coordinates.
    """
    for polygon in iter_polygons(geometry):
        for ring in polygon.rings:
            coords = ring.coords
            if len(coords) < 4:
                raise InvalidInputGeometry(
                    "Ring has fewer than 4 points",
                    coords[0].xy if coords else None,
                )
            if coords[0].xy != coords[-1].xy:
                raise InvalidInputGeometry("Ring is not closed", coords[0].xy)
    for line in iter_lines(geometry):
        if len(line.coords) < 2:
            raise InvalidInputGeometry("LineString has fewer than 2 points", line.coords[0].xy)


__all__ = [
    'SourceEdge',
    'remove_repeated_points',
    'extract_edges',
    'check_finite',
    'check_ring_structure',
]
