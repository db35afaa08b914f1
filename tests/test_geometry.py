"""Tests for the geometry model and point location."""

import math

import pytest

from overlayforge.core.precision import PrecisionModel
from overlayforge.core.types import Location
from overlayforge.geometry import (
    Coordinate,
    Envelope,
    GeometryCollection,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    empty_geometry,
    locate_point,
)
from overlayforge.geometry.algorithms import apply_precision, locate_point_in_polygon
from overlayforge.geometry.model import build_geometry, component_dimensions


def _donut():
    """4x4 square with a 2x2 hole in the middle."""
    return Polygon(
        [(0, 0), (0, 4), (4, 4), (4, 0)],
        holes=[[(1, 1), (3, 1), (3, 3), (1, 3)]],
    )


class TestCoordinate:
    """Tests for Coordinate ordering and equality."""

    def test_ordering(self):
        assert Coordinate(0, 5) < Coordinate(1, 0)
        assert Coordinate(1, 0) < Coordinate(1, 2)

    def test_measure_sorts_after_plain(self):
        assert Coordinate(1, 1) < Coordinate(1, 1, 0.0)

    def test_equality_is_exact(self):
        assert Coordinate(1, 2) == Coordinate(1.0, 2.0)
        assert Coordinate(0.1 + 0.2, 0) != Coordinate(0.3, 0)

    def test_is_finite(self):
        assert Coordinate(1, 2).is_finite()
        assert not Coordinate(math.nan, 2).is_finite()
        assert not Coordinate(1, 2, math.inf).is_finite()


class TestEnvelope:
    """Tests for Envelope."""

    def test_null_envelope(self):
        env = Envelope()
        assert env.is_null
        assert env.width == 0.0
        assert not env.intersects(Envelope.of([(0, 0), (1, 1)]))

    def test_of_points(self):
        env = Envelope.of([(3, -1), (0, 2), (1, 1)])
        assert (env.minx, env.miny, env.maxx, env.maxy) == (0, -1, 3, 2)

    def test_touching_envelopes_intersect(self):
        a = Envelope.of([(0, 0), (1, 1)])
        b = Envelope.of([(1, 1), (2, 2)])
        assert a.intersects(b)
        assert a.intersection(b) == Envelope(1, 1, 1, 1)

    def test_contains(self):
        outer = Envelope.of([(0, 0), (4, 4)])
        assert outer.contains(Envelope.of([(1, 1), (4, 2)]))
        assert not outer.contains(Envelope.of([(1, 1), (5, 2)]))

    def test_expand(self):
        env = Envelope().expand_to_include((1, 2))
        env = env.expand_to_include(Envelope.of([(-1, 0), (0, 0)]))
        assert (env.minx, env.miny, env.maxx, env.maxy) == (-1, 0, 1, 2)


class TestGeometryModel:
    """Tests for geometry construction, measures and normalization."""

    def test_ring_is_closed_automatically(self):
        ring = LinearRing([(0, 0), (0, 1), (1, 1)])
        assert ring.coords[0] == ring.coords[-1]
        assert len(ring.coords) == 4

    def test_polygon_area_with_hole(self):
        assert _donut().area == pytest.approx(12.0)
        assert _donut().length == pytest.approx(24.0)

    def test_empty_geometries(self):
        assert Polygon().is_empty
        assert LineString().is_empty
        assert Point().is_empty
        assert GeometryCollection().is_empty
        assert GeometryCollection().dimension == -1

    def test_empty_geometry_by_dimension(self):
        assert empty_geometry(2) == Polygon()
        assert empty_geometry(1) == LineString()
        assert empty_geometry(0) == Point()
        assert empty_geometry(-1) == Point()

    def test_multi_member_type_checked(self):
        with pytest.raises(TypeError):
            MultiPoint((LineString([(0, 0), (1, 1)]),))

    def test_line_normalize(self):
        line = LineString([(2, 2), (1, 1), (0, 0)])
        assert line.normalize() == LineString([(0, 0), (1, 1), (2, 2)])

    def test_polygon_normalize(self):
        """Shell clockwise, holes counter-clockwise, both from the smallest vertex."""
        poly = Polygon(
            [(4, 0), (4, 4), (0, 4), (0, 0)],
            holes=[[(1, 1), (1, 3), (3, 3), (3, 1)]],
        ).normalize()
        assert poly.shell.xy_coords() == [(0, 0), (0, 4), (4, 4), (4, 0), (0, 0)]
        assert poly.holes[0].xy_coords() == [(1, 1), (3, 1), (3, 3), (1, 3), (1, 1)]
        assert not poly.shell.is_ccw
        assert poly.holes[0].is_ccw

    def test_normalize_is_idempotent(self):
        once = _donut().normalize()
        assert once.normalize() == once

    def test_collection_normalize_sorts_members(self):
        a = Point((2, 0))
        b = Point((1, 0))
        assert MultiPoint((a, b)).normalize() == MultiPoint((b, a))

    def test_component_dimensions(self):
        mixed = GeometryCollection((Point((0, 0)), LineString([(0, 0), (1, 1)])))
        assert component_dimensions(mixed) == {0, 1}
        assert component_dimensions(GeometryCollection()) == set()


class TestBuildGeometry:
    """Tests for build_geometry()."""

    def test_single_polygon(self):
        square = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
        assert build_geometry([square], [], [], 2) == square

    def test_multi_line(self):
        a = LineString([(0, 0), (1, 0)])
        b = LineString([(2, 0), (3, 0)])
        assert build_geometry([], [a, b], [], 1) == MultiLineString((a, b))

    def test_mixed_is_collection(self):
        square = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
        point = Point((5, 5))
        result = build_geometry([square], [], [point], 2)
        assert result == GeometryCollection((square, point))

    def test_empty(self):
        assert build_geometry([], [], [], 1) == LineString()

    def test_multipolygon(self):
        a = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
        b = Polygon([(2, 0), (2, 1), (3, 1), (3, 0)])
        assert build_geometry([a, b], [], [], 2) == MultiPolygon((a, b))


class TestLocatePoint:
    """Tests for point location against geometries."""

    def test_polygon_with_hole(self):
        donut = _donut()
        assert locate_point_in_polygon((0.5, 0.5), donut) == Location.INTERIOR
        assert locate_point_in_polygon((2, 2), donut) == Location.EXTERIOR
        assert locate_point_in_polygon((1, 2), donut) == Location.BOUNDARY
        assert locate_point_in_polygon((5, 5), donut) == Location.EXTERIOR

    def test_line(self):
        line = LineString([(0, 0), (2, 0), (2, 2)])
        assert locate_point((1, 0), line) == Location.INTERIOR
        assert locate_point((1, 1), line) == Location.EXTERIOR

    def test_point(self):
        assert locate_point((1, 1), MultiPoint.from_coords([(1, 1)])) == Location.INTERIOR
        assert locate_point((1, 2), Point((1, 1))) == Location.EXTERIOR

    def test_interior_wins_across_components(self):
        """A point on one polygon's boundary and inside another is interior."""
        multi = MultiPolygon((
            Polygon([(0, 0), (0, 2), (2, 2), (2, 0)]),
            Polygon([(1, 0), (1, 2), (3, 2), (3, 0)]),
        ))
        assert locate_point((2, 1), multi) == Location.INTERIOR


class TestApplyPrecision:
    """Tests for apply_precision()."""

    def test_snaps_coordinates(self):
        line = LineString([(0.4, 0.6), (2.2, 1.7)])
        snapped = apply_precision(line, PrecisionModel.fixed(1))
        assert snapped.xy_coords() == [(0, 1), (2, 2)]

    def test_keeps_measure(self):
        point = Point(Coordinate(0.4, 0.6, 7.5))
        snapped = apply_precision(point, PrecisionModel.fixed(1))
        assert snapped.coord == Coordinate(0, 1, 7.5)

    def test_floating_is_identity(self):
        donut = _donut()
        assert apply_precision(donut, PrecisionModel.floating()) is donut
