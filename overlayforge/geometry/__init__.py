"""Geometry model for overlayforge.

Immutable coordinates, envelopes and the closed set of geometry types the
overlay engine consumes and produces.
"""

from .coordinate import Coordinate, Envelope, as_coordinate, as_coordinates
from .model import (
    Geometry,
    Point,
    LineString,
    LinearRing,
    Polygon,
    GeometryCollection,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    empty_geometry,
    iter_points,
    iter_lines,
    iter_polygons,
    component_dimensions,
    build_geometry,
)
from .algorithms import (
    locate_point,
    locate_point_in_polygon,
    point_on_line,
    apply_precision,
    geometry_envelope,
)

__all__ = [
    # Coordinates
    'Coordinate',
    'Envelope',
    'as_coordinate',
    'as_coordinates',

    # Geometry types
    'Geometry',
    'Point',
    'LineString',
    'LinearRing',
    'Polygon',
    'GeometryCollection',
    'MultiPoint',
    'MultiLineString',
    'MultiPolygon',

    # Helpers
    'empty_geometry',
    'iter_points',
    'iter_lines',
    'iter_polygons',
    'component_dimensions',
    'build_geometry',
    'locate_point',
    'locate_point_in_polygon',
    'point_on_line',
    'apply_precision',
    'geometry_envelope',
]
