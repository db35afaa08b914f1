"""Conversion between overlayforge geometries and shapely geometries.

shapely is how callers usually build inputs and inspect results; WKT text
is read and written through shapely as well.
"""

from typing import List, Tuple

import shapely
import shapely.geometry as sgeom
import shapely.wkt
from shapely.geometry.base import BaseGeometry

from .geometry.model import (
    Geometry,
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

XY = Tuple[float, float]


def _xy(coords) -> List[XY]:
    return [(float(c[0]), float(c[1])) for c in coords]


def from_shapely(geometry: BaseGeometry) -> Geometry:
    """Convert a shapely geometry.

    Z and M ordinates are dropped.

    Args:
        geometry: shapely geometry

    Returns:
        Equivalent overlayforge geometry

    Raises:
        TypeError: If the geometry type is not supported

    Examples:
        >>> from shapely.geometry import box
        >>> from_shapely(box(0, 0, 1, 1)).area
        1.0
    """
    if isinstance(geometry, sgeom.Point):
        if geometry.is_empty:
            return Point()
        return Point((float(geometry.x), float(geometry.y)))
    if isinstance(geometry, sgeom.LinearRing):
        return LinearRing(_xy(geometry.coords))
    if isinstance(geometry, sgeom.LineString):
        return LineString(_xy(geometry.coords))
    if isinstance(geometry, sgeom.Polygon):
        if geometry.is_empty:
            return Polygon()
        return Polygon(
            LinearRing(_xy(geometry.exterior.coords)),
            tuple(LinearRing(_xy(ring.coords)) for ring in geometry.interiors),
        )
    if isinstance(geometry, sgeom.MultiPoint):
        return MultiPoint(tuple(from_shapely(g) for g in geometry.geoms))
    if isinstance(geometry, sgeom.MultiLineString):
        return MultiLineString(tuple(from_shapely(g) for g in geometry.geoms))
    if isinstance(geometry, sgeom.MultiPolygon):
        return MultiPolygon(tuple(from_shapely(g) for g in geometry.geoms))
    if isinstance(geometry, sgeom.GeometryCollection):
        return GeometryCollection(tuple(from_shapely(g) for g in geometry.geoms))
    raise TypeError(f"Unsupported shapely geometry type: {geometry.geom_type}")


def to_shapely(geometry: Geometry) -> BaseGeometry:
    """Convert an overlayforge geometry to shapely.

    Measures are dropped.
    """
    if isinstance(geometry, Point):
        if geometry.is_empty:
            return sgeom.Point()
        return sgeom.Point(geometry.coord.x, geometry.coord.y)
    if isinstance(geometry, LinearRing):
        if geometry.is_empty:
            return sgeom.LinearRing()
        return sgeom.LinearRing(geometry.xy_coords())
    if isinstance(geometry, LineString):
        if geometry.is_empty:
            return sgeom.LineString()
        return sgeom.LineString(geometry.xy_coords())
    if isinstance(geometry, Polygon):
        if geometry.is_empty:
            return sgeom.Polygon()
        return sgeom.Polygon(
            geometry.shell.xy_coords(),
            [hole.xy_coords() for hole in geometry.holes],
        )
    if isinstance(geometry, MultiPoint):
        return sgeom.MultiPoint([to_shapely(g) for g in geometry.geoms])
    if isinstance(geometry, MultiLineString):
        return sgeom.MultiLineString([to_shapely(g) for g in geometry.geoms])
    if isinstance(geometry, MultiPolygon):
        return sgeom.MultiPolygon([to_shapely(g) for g in geometry.geoms])
    if isinstance(geometry, GeometryCollection):
        return sgeom.GeometryCollection([to_shapely(g) for g in geometry.geoms])
    raise TypeError(f"Unknown geometry type: {type(geometry).__name__}")


def from_wkt(text: str) -> Geometry:
    """Parse WKT into an overlayforge geometry.

    Examples:
        >>> from_wkt('POLYGON ((0 0, 0 2, 2 2, 2 0, 0 0))').area
        4.0
    """
    return from_shapely(shapely.wkt.loads(text))


def to_wkt(geometry: Geometry, trim: bool = True) -> str:
    """Write an overlayforge geometry as WKT.

    Coordinates are written with a rounding precision of 17 digits, so
    reading the text back gives the same doubles.

    Examples:
        >>> to_wkt(Point((0.1 + 0.2, 1.0)))
        'POINT (0.30000000000000004 1)'
    """
    return shapely.to_wkt(to_shapely(geometry), trim=trim, rounding_precision=17)


__all__ = [
    'from_shapely',
    'to_shapely',
    'from_wkt',
    'to_wkt',
]
