"""Tests for the robust geometric predicates."""

import pytest

from overlayforge.core.precision import PrecisionModel
from overlayforge.core.predicates import (
    IntersectionKind,
    compare_direction,
    is_ccw,
    locate_point_in_ring,
    locate_point_in_segments,
    orientation,
    orientation_index,
    point_on_segment,
    quadrant,
    segment_intersection,
    signed_area,
)
from overlayforge.core.types import Location, Orientation


def _square_ring():
    """Clockwise 2x2 square ring."""
    return [(0, 0), (0, 2), (2, 2), (2, 0), (0, 0)]


class TestOrientation:
    """Tests for orientation_index()."""

    def test_left_turn(self):
        assert orientation_index((0, 0), (1, 0), (0.5, 1)) == 1

    def test_right_turn(self):
        assert orientation_index((0, 0), (1, 0), (0.5, -1)) == -1

    def test_collinear(self):
        assert orientation_index((0, 0), (1, 1), (3, 3)) == 0

    def test_collinear_with_rounded_values(self):
        """Points that are exactly collinear in binary stay collinear."""
        assert orientation_index((0, 0), (1, 1), (0.1 + 0.2, 0.30000000000000004)) == 0

    def test_tiny_offset_is_detected(self):
        """An offset of one unit in the last place is decided exactly."""
        q = (1.0 + 2.0 ** -52, 1.0)
        assert orientation_index((0.0, 0.0), (1.0, 1.0), q) == -1

    def test_filter_fallback_agrees_with_exact(self):
        """Near-degenerate input that the float filter cannot certify."""
        p1 = (0.1, 0.1)
        p2 = (0.3, 0.3)
        q = (0.7, 0.7000000000000001)
        assert orientation_index(p1, p2, q) == 1

    def test_enum_form(self):
        assert orientation((0, 0), (1, 0), (0, 1)) == Orientation.COUNTERCLOCKWISE
        assert orientation((0, 0), (1, 0), (0, -1)) == Orientation.CLOCKWISE


class TestPointOnSegment:
    """Tests for point_on_segment()."""

    def test_interior_point(self):
        assert point_on_segment((1, 1), (0, 0), (2, 2))

    def test_endpoint(self):
        assert point_on_segment((2, 2), (0, 0), (2, 2))

    def test_collinear_outside(self):
        assert not point_on_segment((3, 3), (0, 0), (2, 2))

    def test_zero_length_segment(self):
        assert point_on_segment((1, 1), (1, 1), (1, 1))
        assert not point_on_segment((1, 2), (1, 1), (1, 1))


class TestSegmentIntersection:
    """Tests for segment_intersection()."""

    def test_proper_crossing(self):
        result = segment_intersection((0, 0), (2, 2), (0, 2), (2, 0))
        assert result.kind == IntersectionKind.POINT
        assert result.points == ((1.0, 1.0),)
        assert result.is_proper

    def test_disjoint(self):
        result = segment_intersection((0, 0), (1, 0), (0, 1), (1, 1))
        assert result.kind == IntersectionKind.NONE
        assert not result.has_intersection

    def test_parallel_with_overlapping_envelopes(self):
        result = segment_intersection((0, 0), (2, 2), (1, 0), (3, 2))
        assert not result.has_intersection

    def test_endpoint_touch_is_exact(self):
        """A shared endpoint is returned as the input coordinate."""
        result = segment_intersection((0, 0), (1, 1), (1, 1), (2, 0))
        assert result.points == ((1, 1),)
        assert not result.is_proper

    def test_t_intersection(self):
        result = segment_intersection((0, 0), (2, 0), (1, 0), (1, 1))
        assert result.kind == IntersectionKind.POINT
        assert result.points == ((1, 0),)
        assert not result.is_proper

    def test_collinear_overlap(self):
        result = segment_intersection((0, 0), (4, 0), (2, 0), (6, 0))
        assert result.kind == IntersectionKind.COLLINEAR
        assert set(result.points) == {(2, 0), (4, 0)}

    def test_collinear_touch_at_endpoint(self):
        result = segment_intersection((0, 0), (2, 0), (2, 0), (4, 0))
        assert result.kind == IntersectionKind.POINT
        assert result.points == ((2, 0),)

    def test_identical_segments(self):
        result = segment_intersection((0, 0), (2, 0), (2, 0), (0, 0))
        assert result.kind == IntersectionKind.COLLINEAR
        assert set(result.points) == {(0, 0), (2, 0)}

    def test_zero_length_segment_on_other(self):
        """Zero-length segments behave like points."""
        result = segment_intersection((1, 0), (1, 0), (0, 0), (2, 0))
        assert result.points == ((1, 0),)

    def test_zero_length_segment_off_other(self):
        result = segment_intersection((1, 1), (1, 1), (0, 0), (2, 0))
        assert not result.has_intersection

    def test_crossing_snapped_to_precision(self):
        result = segment_intersection(
            (0, 0), (3, 1), (0, 1), (3, 0), PrecisionModel.fixed(10)
        )
        assert result.is_proper
        assert result.points == ((1.5, 0.5),)

    def test_crossing_point_inside_both_envelopes(self):
        """Nearly parallel segments still yield a point within both envelopes."""
        p1, p2 = (0.0, 0.0), (10.0, 1e-10)
        q1, q2 = (0.0, 1e-10), (10.0, 0.0)
        result = segment_intersection(p1, p2, q1, q2)
        (x, y), = result.points
        assert 0.0 <= x <= 10.0
        assert 0.0 <= y <= 1e-10


class TestPointInRing:
    """Tests for locate_point_in_ring() and the ray-crossing counter."""

    def test_interior(self):
        assert locate_point_in_ring((1, 1), _square_ring()) == Location.INTERIOR

    def test_exterior(self):
        assert locate_point_in_ring((3, 1), _square_ring()) == Location.EXTERIOR

    def test_on_edge(self):
        assert locate_point_in_ring((2, 1), _square_ring()) == Location.BOUNDARY

    def test_on_vertex(self):
        assert locate_point_in_ring((0, 0), _square_ring()) == Location.BOUNDARY

    def test_ray_through_vertex(self):
        """A ray passing through a vertex is counted once."""
        diamond = [(0, 1), (1, 2), (2, 1), (1, 0), (0, 1)]
        assert locate_point_in_ring((0.5, 1), diamond) == Location.INTERIOR
        assert locate_point_in_ring((-0.5, 1), diamond) == Location.EXTERIOR

    def test_segments_from_several_rings(self):
        """Parity over shell and hole segments together."""
        shell = [(0, 0), (0, 4), (4, 4), (4, 0), (0, 0)]
        hole = [(1, 1), (3, 1), (3, 3), (1, 3), (1, 1)]
        segments = list(zip(shell[:-1], shell[1:])) + list(zip(hole[:-1], hole[1:]))
        assert locate_point_in_segments((2, 2), segments) == Location.EXTERIOR
        assert locate_point_in_segments((0.5, 2), segments) == Location.INTERIOR
        assert locate_point_in_segments((1, 2), segments) == Location.BOUNDARY


class TestRingOrientation:
    """Tests for is_ccw() and signed_area()."""

    def test_clockwise_square(self):
        assert not is_ccw(_square_ring())
        assert signed_area(_square_ring()) == pytest.approx(-4.0)

    def test_counter_clockwise_square(self):
        ring = list(reversed(_square_ring()))
        assert is_ccw(ring)
        assert signed_area(ring) == pytest.approx(4.0)

    def test_flat_top(self):
        ring = [(0, 0), (4, 0), (4, 2), (2, 2), (0, 2), (0, 0)]
        assert is_ccw(ring)

    def test_degenerate_ring(self):
        assert not is_ccw([(0, 0), (1, 0), (0, 0)])
        assert signed_area([(0, 0), (1, 0), (0, 0)]) == 0.0


class TestAngularOrder:
    """Tests for quadrant() and compare_direction()."""

    def test_quadrants(self):
        assert quadrant(1, 1) == 0
        assert quadrant(-1, 1) == 1
        assert quadrant(-1, -1) == 2
        assert quadrant(1, -1) == 3

    def test_axis_directions(self):
        assert quadrant(1, 0) == 0
        assert quadrant(0, 1) == 0
        assert quadrant(-1, 0) == 1
        assert quadrant(0, -1) == 3

    def test_counter_clockwise_order(self):
        origin = (0, 0)
        assert compare_direction(origin, (1, 0), (0, 1)) == -1
        assert compare_direction(origin, (0, 1), (1, 0)) == 1
        assert compare_direction(origin, (1, 1), (2, 2)) == 0

    def test_same_quadrant(self):
        assert compare_direction((0, 0), (2, 1), (1, 2)) == -1
