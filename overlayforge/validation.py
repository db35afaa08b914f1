"""Input validation for overlay operations.

Overlay inputs must have finite coordinates, well-formed and correctly
nested rings, and no ring segments that cross each other. Self-touching
rings (a vertex on another part of the boundary) are accepted.
"""

from typing import List, Optional, Sequence, Tuple

from .core.errors import InvalidInputGeometry
from .core.predicates import locate_point_in_ring, segment_intersection
from .core.types import Location
from .geometry.algorithms import locate_point_in_polygon
from .geometry.model import Geometry, iter_polygons
from .noding.edges import check_finite, check_ring_structure
from .noding.index import SegmentIndex

XY = Tuple[float, float]


def find_ring_crossing(geometry: Geometry) -> Optional[XY]:
    """Return a point where two ring segments of a geometry cross, if any.

    All rings of all polygon components are checked together, so crossings
    between a shell and a hole, or between two components, are found too.
    """
    segments: List[Tuple[XY, XY]] = []
    for polygon in iter_polygons(geometry):
        for ring in polygon.rings:
            coords = ring.xy_coords()
            segments.extend(
                (coords[i], coords[i + 1]) for i in range(len(coords) - 1)
                if coords[i] != coords[i + 1]
            )

    for i, j in SegmentIndex(segments).query_overlapping_envelopes():
        (p1, p2), (q1, q2) = segments[i], segments[j]
        result = segment_intersection(p1, p2, q1, q2)
        if result.is_proper:
            return result.points[0]
    return None


def _off_boundary_location(ring: Sequence[XY], locate) -> Tuple[Optional[Location], Optional[XY]]:
    """Locate the first vertex or edge midpoint of ``ring`` that is off the boundary."""
    candidates: List[XY] = list(ring[:-1])
    candidates.extend(((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0) for a, b in zip(ring[:-1], ring[1:]))
    for pt in candidates:
        location = locate(pt)
        if location != Location.BOUNDARY:
            return location, pt
    return None, None


def find_nesting_error(geometry: Geometry) -> Optional[Tuple[str, XY]]:
    """Return the reason and location of a misplaced ring, if any.

    Holes must lie inside their own shell and outside each other, and no
    polygon component may lie inside another one.
    """
    polygons = [p for p in iter_polygons(geometry) if not p.is_empty]

    for polygon in polygons:
        shell = polygon.shell.xy_coords()
        holes = [hole.xy_coords() for hole in polygon.holes]
        for i, hole in enumerate(holes):
            location, where = _off_boundary_location(hole, lambda pt: locate_point_in_ring(pt, shell))
            if location == Location.EXTERIOR:
                return "Hole lies outside shell", where
            for j, other in enumerate(holes):
                if i == j:
                    continue
                location, where = _off_boundary_location(hole, lambda pt: locate_point_in_ring(pt, other))
                if location == Location.INTERIOR:
                    return "Nested holes", where

    for i, inner in enumerate(polygons):
        for j, outer in enumerate(polygons):
            if i == j or not outer.envelope.contains(inner.envelope):
                continue
            location, where = _off_boundary_location(
                inner.shell.xy_coords(), lambda pt: locate_point_in_polygon(pt, outer)
            )
            if location == Location.INTERIOR:
                return "Nested shells", where
    return None


def check_geometry(geometry: Geometry) -> None:
    """Raise InvalidInputGeometry if a geometry cannot be overlaid.

    Args:
        geometry: Geometry to check

    Raises:
        InvalidInputGeometry: For non-finite coordinates, rings with fewer
            than four points, unclosed rings, rings with fewer than three
            distinct points, crossing ring segments, holes outside their
            shell, nested holes or nested shells

    Examples:
        >>> bowtie = Polygon([(0, 0), (2, 2), (2, 0), (0, 2)])
        >>> check_geometry(bowtie)
        Traceback (most recent call last):
        ...
        overlayforge.core.errors.InvalidInputGeometry: Ring self-intersection at (1.0, 1.0)
    """
    check_finite(geometry)
    check_ring_structure(geometry)

    for polygon in iter_polygons(geometry):
        for ring in polygon.rings:
            if len(set(ring.xy_coords())) < 3:
                raise InvalidInputGeometry("Ring has fewer than 3 distinct points", ring.coords[0].xy)

    crossing = find_ring_crossing(geometry)
    if crossing is not None:
        raise InvalidInputGeometry("Ring self-intersection", crossing)

    nesting = find_nesting_error(geometry)
    if nesting is not None:
        raise InvalidInputGeometry(*nesting)


def explain_validity(geometry: Geometry) -> str:
    """Describe why a geometry is invalid, or return ``"Valid Geometry"``."""
    try:
        check_geometry(geometry)
    except InvalidInputGeometry as exc:
        return str(exc)
    return "Valid Geometry"


def is_valid(geometry: Geometry) -> bool:
    """True if the geometry passes :func:`check_geometry`."""
    try:
        check_geometry(geometry)
    except InvalidInputGeometry:
        return False
    return True


def diagnose_geometry(geometry: Geometry) -> dict:
    """Diagnose the validity of an overlay input.

    Returns:
        Dictionary with keys:
            - 'is_valid': bool
            - 'validity_message': str
            - 'location': (x, y) of the defect, or None
            - 'geometry_type': str
            - 'is_empty': bool
            - 'area': float
    """
    location = None
    message = "Valid Geometry"
    try:
        check_geometry(geometry)
    except InvalidInputGeometry as exc:
        message = str(exc)
        location = exc.location

    return {
        'is_valid': location is None and message == "Valid Geometry",
        'validity_message': message,
        'location': location,
        'geometry_type': geometry.geom_type,
        'is_empty': geometry.is_empty,
        'area': geometry.area,
    }


__all__ = [
    'find_ring_crossing',
    'find_nesting_error',
    'check_geometry',
    'explain_validity',
    'is_valid',
    'diagnose_geometry',
]
