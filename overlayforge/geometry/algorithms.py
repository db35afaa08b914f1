"""Point location and precision helpers over the geometry model."""

from __future__ import annotations

from typing import Tuple

from ..core.precision import PrecisionModel
from ..core.predicates import locate_point_in_ring, point_on_segment
from ..core.types import Location
from .coordinate import Coordinate, Envelope
from .model import (
    Geometry,
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    iter_lines,
    iter_points,
    iter_polygons,
)

XY = Tuple[float, float]


def locate_point_in_polygon(point: XY, polygon: Polygon) -> Location:
    """Locate a point relative to a single polygon.

    Args:
        point: ``(x, y)`` of the point
        polygon: Polygon to test against

    Returns:
        INTERIOR, BOUNDARY or EXTERIOR

    Examples:
        >>> square = Polygon([(0, 0), (0, 2), (2, 2), (2, 0)])
        >>> locate_point_in_polygon((1, 1), square)
        <Location.INTERIOR: 'interior'>
        >>> locate_point_in_polygon((2, 1), square)
        <Location.BOUNDARY: 'boundary'>
    """
    if polygon.is_empty or not polygon.envelope.covers_point(point):
        return Location.EXTERIOR

    shell_loc = locate_point_in_ring(point, polygon.shell.xy_coords())
    if shell_loc != Location.INTERIOR:
        return shell_loc

    for hole in polygon.holes:
        hole_loc = locate_point_in_ring(point, hole.xy_coords())
        if hole_loc == Location.BOUNDARY:
            return Location.BOUNDARY
        if hole_loc == Location.INTERIOR:
            return Location.EXTERIOR
    return Location.INTERIOR


def point_on_line(point: XY, line: LineString) -> bool:
    coords = line.xy_coords()
    if len(coords) == 1:
        return coords[0] == point
    return any(point_on_segment(point, coords[i - 1], coords[i]) for i in range(1, len(coords)))


def locate_point(point: XY, geometry: Geometry) -> Location:
    """Locate a point relative to any geometry.

    Area components report INTERIOR/BOUNDARY/EXTERIOR; a point on a line
    component or equal to a point component is INTERIOR. When components
    disagree the strongest location wins (INTERIOR, then BOUNDARY).
    """
    result = Location.EXTERIOR
    for polygon in iter_polygons(geometry):
        loc = locate_point_in_polygon(point, polygon)
        if loc == Location.INTERIOR:
            return Location.INTERIOR
        if loc == Location.BOUNDARY:
            result = Location.BOUNDARY

    for line in iter_lines(geometry):
        if point_on_line(point, line):
            return Location.INTERIOR

    for member in iter_points(geometry):
        if member.coord.xy == point:
            return Location.INTERIOR
    return result


def apply_precision(geometry: Geometry, precision: PrecisionModel) -> Geometry:
    """Snap every coordinate of a geometry to a precision model.

    Measures are kept. Structure is preserved even when snapping makes
    components degenerate; edge extraction deals with collapses.
    """
    if precision.is_floating:
        return geometry

    def snap(c: Coordinate) -> Coordinate:
        return Coordinate(precision.make_precise(c.x), precision.make_precise(c.y), c.m)

    if isinstance(geometry, Point):
        return geometry if geometry.is_empty else Point(snap(geometry.coord))
    if isinstance(geometry, LinearRing):
        return LinearRing(tuple(snap(c) for c in geometry.coords))
    if isinstance(geometry, LineString):
        return LineString(tuple(snap(c) for c in geometry.coords))
    if isinstance(geometry, Polygon):
        if geometry.is_empty:
            return geometry
        return Polygon(
            apply_precision(geometry.shell, precision),
            tuple(apply_precision(h, precision) for h in geometry.holes),
        )
    if isinstance(geometry, (MultiPoint, MultiLineString, MultiPolygon, GeometryCollection)):
        return type(geometry)(tuple(apply_precision(g, precision) for g in geometry.geoms))
    raise TypeError(f"Unknown geometry type: {type(geometry).__name__}")


def geometry_envelope(*geometries: Geometry) -> Envelope:
    """Envelope covering all given geometries."""
    env = Envelope()
    for geom in geometries:
        env = env.expand_to_include(geom.envelope)
    return env


__all__ = [
    'locate_point_in_polygon',
    'point_on_line',
    'locate_point',
    'apply_precision',
    'geometry_envelope',
]
