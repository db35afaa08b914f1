"""Geometry model: a closed set of immutable geometry types.

Consumers dispatch over the concrete classes with ``isinstance`` and treat
anything else as an error; no other geometry kinds exist.

Conventions:
    - Rings are closed (first coordinate equals last). :class:`LinearRing`
      closes an open coordinate list automatically.
    - :meth:`Geometry.normalize` orients shells clockwise and holes
      counter-clockwise, starts every ring at its smallest coordinate and sorts
      components, so two normalized geometries covering the same point set
      with the same vertices compare equal.
    - ``dimension`` is the dimension of the geometry type (an empty Polygon
      still has dimension 2); an empty collection has dimension -1.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterator, List, Optional, Sequence, Tuple

from ..core.predicates import is_ccw, signed_area
from .coordinate import Coordinate, CoordinateLike, Envelope, as_coordinate, as_coordinates


class Geometry:
    """Base class of all geometry types."""

    geom_type: ClassVar[str] = 'Geometry'
    # Sort order between types in normalized collections
    type_order: ClassVar[int] = 0

    @property
    def is_empty(self) -> bool:
        raise NotImplementedError

    @property
    def dimension(self) -> int:
        raise NotImplementedError

    def coordinates(self) -> List[Coordinate]:
        raise NotImplementedError

    def normalize(self) -> "Geometry":
        raise NotImplementedError

    @property
    def envelope(self) -> Envelope:
        return Envelope.of(self.coordinates())

    @property
    def area(self) -> float:
        return 0.0

    @property
    def length(self) -> float:
        return 0.0

    @property
    def num_geometries(self) -> int:
        return 0 if self.is_empty else 1

    def _sort_key(self) -> Tuple:
        return (self.type_order, tuple(c._key() for c in self.coordinates()))


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Point(Geometry):
    """A single coordinate, or the empty point when ``coord`` is None."""
    coord: Optional[Coordinate] = None

    geom_type: ClassVar[str] = 'Point'
    type_order: ClassVar[int] = 0

    def __post_init__(self):
        if self.coord is not None:
            object.__setattr__(self, 'coord', as_coordinate(self.coord))

    @property
    def is_empty(self) -> bool:
        return self.coord is None

    @property
    def dimension(self) -> int:
        return 0

    def coordinates(self) -> List[Coordinate]:
        return [] if self.coord is None else [self.coord]

    def normalize(self) -> "Point":
        return self


@dataclass(frozen=True)
class LineString(Geometry):
    """A sequence of two or more coordinates, or the empty line."""
    coords: Tuple[Coordinate, ...] = ()

    geom_type: ClassVar[str] = 'LineString'
    type_order: ClassVar[int] = 2

    def __post_init__(self):
        object.__setattr__(self, 'coords', as_coordinates(self.coords))

    @property
    def is_empty(self) -> bool:
        return not self.coords

    @property
    def dimension(self) -> int:
        return 1

    @property
    def is_closed(self) -> bool:
        return bool(self.coords) and self.coords[0].xy == self.coords[-1].xy

    def coordinates(self) -> List[Coordinate]:
        return list(self.coords)

    def xy_coords(self) -> List[Tuple[float, float]]:
        return [c.xy for c in self.coords]

    @property
    def length(self) -> float:
        return sum(self.coords[i - 1].distance(self.coords[i]) for i in range(1, len(self.coords)))

    def reversed(self) -> "LineString":
        return type(self)(tuple(reversed(self.coords)))

    def normalize(self) -> "LineString":
        n = len(self.coords)
        for i in range(n // 2):
            j = n - 1 - i
            if self.coords[i] != self.coords[j]:
                if self.coords[j] < self.coords[i]:
                    return self.reversed()
                break
        return self


@dataclass(frozen=True)
class LinearRing(LineString):
    """A closed line. Open input is closed by repeating the first coordinate."""

    geom_type: ClassVar[str] = 'LinearRing'
    type_order: ClassVar[int] = 3

    def __post_init__(self):
        coords = as_coordinates(self.coords)
        if coords and coords[0].xy != coords[-1].xy:
            coords = coords + (coords[0],)
        object.__setattr__(self, 'coords', coords)

    @property
    def is_ccw(self) -> bool:
        return is_ccw(self.xy_coords())

    @property
    def signed_area(self) -> float:
        return signed_area(self.xy_coords())

    def oriented(self, ccw: bool) -> "LinearRing":
        """Return this ring with the requested orientation."""
        if self.is_empty or self.is_ccw == ccw:
            return self
        return LinearRing(tuple(reversed(self.coords)))

    def normalize(self) -> "LinearRing":
        return self.canonical(ccw=False)

    def canonical(self, ccw: bool) -> "LinearRing":
        """Oriented copy starting at the smallest coordinate."""
        if self.is_empty:
            return self
        ring = self.oriented(ccw)
        body = ring.coords[:-1]
        start = min(range(len(body)), key=lambda i: body[i])
        rotated = body[start:] + body[:start]
        return LinearRing(rotated + (rotated[0],))


def _as_ring(value) -> LinearRing:
    if isinstance(value, LinearRing):
        return value
    if isinstance(value, LineString):
        return LinearRing(value.coords)
    return LinearRing(tuple(value))


@dataclass(frozen=True)
class Polygon(Geometry):
    """One shell ring and zero or more hole rings.

    Examples:
        >>> square = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
        >>> square.area
        1.0
        >>> donut = Polygon([(0, 0), (4, 0), (4, 4), (0, 4)],
        ...                 holes=[[(1, 1), (1, 2), (2, 2), (2, 1)]])
        >>> donut.area
        15.0
    """
    shell: LinearRing = field(default_factory=LinearRing)
    holes: Tuple[LinearRing, ...] = ()

    geom_type: ClassVar[str] = 'Polygon'
    type_order: ClassVar[int] = 5

    def __post_init__(self):
        object.__setattr__(self, 'shell', _as_ring(self.shell))
        object.__setattr__(self, 'holes', tuple(_as_ring(h) for h in self.holes))

    @property
    def is_empty(self) -> bool:
        return self.shell.is_empty

    @property
    def dimension(self) -> int:
        return 2

    @property
    def rings(self) -> Tuple[LinearRing, ...]:
        if self.is_empty:
            return ()
        return (self.shell,) + self.holes

    def coordinates(self) -> List[Coordinate]:
        coords = list(self.shell.coords)
        for hole in self.holes:
            coords.extend(hole.coords)
        return coords

    @property
    def area(self) -> float:
        if self.is_empty:
            return 0.0
        total = abs(self.shell.signed_area)
        for hole in self.holes:
            total -= abs(hole.signed_area)
        return total

    @property
    def length(self) -> float:
        return sum(ring.length for ring in self.rings)

    def normalize(self) -> "Polygon":
        if self.is_empty:
            return self
        shell = self.shell.canonical(ccw=False)
        holes = sorted((h.canonical(ccw=True) for h in self.holes), key=lambda h: h._sort_key())
        return Polygon(shell, tuple(holes))


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GeometryCollection(Geometry):
    """Heterogeneous collection of geometries."""
    geoms: Tuple[Geometry, ...] = ()

    geom_type: ClassVar[str] = 'GeometryCollection'
    type_order: ClassVar[int] = 7
    member_type: ClassVar[type] = Geometry

    def __post_init__(self):
        geoms = tuple(self.geoms)
        for geom in geoms:
            if not isinstance(geom, self.member_type):
                raise TypeError(
                    f"{self.geom_type} cannot contain {type(geom).__name__}"
                )
        object.__setattr__(self, 'geoms', geoms)

    @property
    def is_empty(self) -> bool:
        return all(g.is_empty for g in self.geoms)

    @property
    def dimension(self) -> int:
        return max((g.dimension for g in self.geoms), default=-1)

    @property
    def num_geometries(self) -> int:
        return len(self.geoms)

    def coordinates(self) -> List[Coordinate]:
        coords: List[Coordinate] = []
        for geom in self.geoms:
            coords.extend(geom.coordinates())
        return coords

    @property
    def area(self) -> float:
        return sum(g.area for g in self.geoms)

    @property
    def length(self) -> float:
        return sum(g.length for g in self.geoms)

    def normalize(self) -> "GeometryCollection":
        members = [g.normalize() for g in self.geoms]
        members.sort(key=lambda g: g._sort_key())
        return type(self)(tuple(members))

    def __iter__(self) -> Iterator[Geometry]:
        return iter(self.geoms)

    def __len__(self) -> int:
        return len(self.geoms)


@dataclass(frozen=True)
class MultiPoint(GeometryCollection):
    geom_type: ClassVar[str] = 'MultiPoint'
    type_order: ClassVar[int] = 1
    member_type: ClassVar[type] = Point

    @property
    def dimension(self) -> int:
        return 0

    @classmethod
    def from_coords(cls, coords: Sequence[CoordinateLike]) -> "MultiPoint":
        return cls(tuple(Point(as_coordinate(c)) for c in coords))


@dataclass(frozen=True)
class MultiLineString(GeometryCollection):
    geom_type: ClassVar[str] = 'MultiLineString'
    type_order: ClassVar[int] = 4
    member_type: ClassVar[type] = LineString

    @property
    def dimension(self) -> int:
        return 1


@dataclass(frozen=True)
class MultiPolygon(GeometryCollection):
    geom_type: ClassVar[str] = 'MultiPolygon'
    type_order: ClassVar[int] = 6
    member_type: ClassVar[type] = Polygon

    @property
    def dimension(self) -> int:
        return 2


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def empty_geometry(dimension: int) -> Geometry:
    """Canonical empty geometry of a dimension."""
    if dimension >= 2:
        return Polygon()
    if dimension == 1:
        return LineString()
    return Point()


def iter_points(geometry: Geometry) -> Iterator[Point]:
    """Yield the non-empty Point components of a geometry."""
    if isinstance(geometry, Point):
        if not geometry.is_empty:
            yield geometry
    elif isinstance(geometry, GeometryCollection):
        for member in geometry.geoms:
            yield from iter_points(member)
    elif not isinstance(geometry, (LineString, Polygon)):
        raise TypeError(f"Unknown geometry type: {type(geometry).__name__}")


def iter_lines(geometry: Geometry) -> Iterator[LineString]:
    """Yield the non-empty LineString and LinearRing components of a geometry."""
    if isinstance(geometry, LineString):
        if not geometry.is_empty:
            yield geometry
    elif isinstance(geometry, GeometryCollection):
        for member in geometry.geoms:
            yield from iter_lines(member)
    elif not isinstance(geometry, (Point, Polygon)):
        raise TypeError(f"Unknown geometry type: {type(geometry).__name__}")


def iter_polygons(geometry: Geometry) -> Iterator[Polygon]:
    """Yield the non-empty Polygon components of a geometry."""
    if isinstance(geometry, Polygon):
        if not geometry.is_empty:
            yield geometry
    elif isinstance(geometry, GeometryCollection):
        for member in geometry.geoms:
            yield from iter_polygons(member)
    elif not isinstance(geometry, (Point, LineString)):
        raise TypeError(f"Unknown geometry type: {type(geometry).__name__}")


def component_dimensions(geometry: Geometry) -> set:
    """Dimensions of the non-empty atomic components of a geometry."""
    dims = set()
    if next(iter_points(geometry), None) is not None:
        dims.add(0)
    if next(iter_lines(geometry), None) is not None:
        dims.add(1)
    if next(iter_polygons(geometry), None) is not None:
        dims.add(2)
    return dims


def build_geometry(
    polygons: Sequence[Polygon],
    lines: Sequence[LineString],
    points: Sequence[Point],
    empty_dimension: int,
) -> Geometry:
    """Assemble result components into the simplest geometry that holds them.

    A single kind of component yields a single geometry or its Multi variant;
    several kinds yield a GeometryCollection ordered polygons, lines, points.
    No components yields the canonical empty geometry of ``empty_dimension``.
    """
    parts: List[Geometry] = []
    if polygons:
        parts.append(polygons[0] if len(polygons) == 1 else MultiPolygon(tuple(polygons)))
    if lines:
        parts.append(lines[0] if len(lines) == 1 else MultiLineString(tuple(lines)))
    if points:
        parts.append(points[0] if len(points) == 1 else MultiPoint(tuple(points)))

    if not parts:
        return empty_geometry(empty_dimension)
    if len(parts) == 1:
        return parts[0]
    flat: List[Geometry] = list(polygons) + list(lines) + list(points)
    return GeometryCollection(tuple(flat))


__all__ = [
    'Geometry',
    'Point',
    'LineString',
    'LinearRing',
    'Polygon',
    'GeometryCollection',
    'MultiPoint',
    'MultiLineString',
    'MultiPolygon',
    'empty_geometry',
    'iter_points',
    'iter_lines',
    'iter_polygons',
    'component_dimensions',
    'build_geometry',
]
