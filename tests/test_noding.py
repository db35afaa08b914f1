"""Tests for edge extraction, noding and the noding retry loop."""

import itertools
import warnings
from unittest.mock import patch

import pytest

from overlayforge.core.config import OverlayConfig
from overlayforge.core.errors import NodingFailure, PrecisionCoarsenedWarning
from overlayforge.core.precision import FLOATING, PrecisionModel
from overlayforge.core.predicates import IntersectionKind, segment_intersection
from overlayforge.core.types import EdgeRole
from overlayforge.geometry import LineString, MultiLineString, MultiPolygon, Polygon
from overlayforge.noding import (
    InputMembership,
    Noder,
    SegmentIndex,
    extract_edges,
    find_residual_intersection,
    node_geometries,
    split_edge,
)


def _square(x0=0.0, y0=0.0, size=2.0):
    """Clockwise axis-aligned square."""
    return Polygon([
        (x0, y0), (x0, y0 + size), (x0 + size, y0 + size), (x0 + size, y0),
    ])


def _star():
    """Concave eight-vertex star whose edges have slopes of +-4 and +-1/4."""
    return Polygon([
        (0, 0), (4, 1), (8, 0), (7, 4), (8, 8), (4, 7), (0, 8), (1, 4),
    ])


def _grid_lines():
    """Horizontal and vertical lines on half-integer offsets across the star."""
    lines = []
    for k in range(8):
        lines.append(LineString([(-1, k + 0.5), (9, k + 0.5)]))
        lines.append(LineString([(k + 0.5, -1), (k + 0.5, 9)]))
    return MultiLineString(tuple(lines))


def _endpoints(result):
    points = set()
    for edge in result.edges:
        points.add(edge.start)
        points.add(edge.end)
    return points


def _assert_fully_noded(edges):
    """Brute-force check that edges meet only at shared endpoints."""
    segments = []
    for e, edge in enumerate(edges):
        for k in range(len(edge.coords) - 1):
            segments.append((e, k, edge.coords[k], edge.coords[k + 1]))
    ends = [{edge.start, edge.end} for edge in edges]

    for (e1, k1, p1, p2), (e2, k2, q1, q2) in itertools.combinations(segments, 2):
        result = segment_intersection(p1, p2, q1, q2)
        if not result.has_intersection:
            continue
        if (
            e1 == e2
            and abs(k1 - k2) == 1
            and result.kind == IntersectionKind.POINT
            and result.points[0] == edges[e1].coords[max(k1, k2)]
        ):
            continue
        for point in result.points:
            assert point in ends[e1], f"{point} is inside edge {e1}"
            assert point in ends[e2], f"{point} is inside edge {e2}"


class TestExtractEdges:
    """Tests for extract_edges()."""

    def test_clockwise_shell_has_interior_right(self):
        edges = extract_edges(_square(), 0, FLOATING)
        assert len(edges) == 1
        assert edges[0].role == EdgeRole.BOUNDARY
        assert edges[0].depth_delta == 1
        assert edges[0].is_closed

    def test_counter_clockwise_shell_has_interior_left(self):
        poly = Polygon([(0, 0), (2, 0), (2, 2), (0, 2)])
        assert extract_edges(poly, 0, FLOATING)[0].depth_delta == -1

    def test_hole_depth(self):
        cw_hole = Polygon(
            [(0, 0), (0, 4), (4, 4), (4, 0)], holes=[[(1, 1), (1, 3), (3, 3), (3, 1)]]
        )
        ccw_hole = Polygon(
            [(0, 0), (0, 4), (4, 4), (4, 0)], holes=[[(1, 1), (3, 1), (3, 3), (1, 3)]]
        )
        hole_edge = extract_edges(cw_hole, 0, FLOATING)[1]
        assert hole_edge.is_hole
        assert hole_edge.depth_delta == -1
        assert extract_edges(ccw_hole, 0, FLOATING)[1].depth_delta == 1

    def test_repeated_points_removed(self):
        line = LineString([(0, 0), (0, 0), (1, 0), (1, 0)])
        edges = extract_edges(line, 1, FLOATING)
        assert edges[0].coords == ((0, 0), (1, 0))
        assert edges[0].index == 1
        assert edges[0].role == EdgeRole.LINE

    def test_collapsed_ring_dropped(self):
        tiny = _square(0.1, 0.1, 0.1)
        assert extract_edges(tiny, 0, PrecisionModel.fixed(1)) == []

    def test_collapsed_line_dropped(self):
        line = LineString([(0.1, 0.1), (0.2, 0.2)])
        assert extract_edges(line, 0, PrecisionModel.fixed(1)) == []


class TestSegmentIndex:
    """Tests for SegmentIndex."""

    def test_overlapping_pairs(self):
        index = SegmentIndex([((0, 0), (2, 2)), ((0, 2), (2, 0)), ((5, 5), (6, 6))])
        assert index.query_overlapping_envelopes().tolist() == [[0, 1]]

    def test_touching_envelopes_are_candidates(self):
        index = SegmentIndex([((0, 0), (1, 0)), ((1, 0), (2, 0))])
        assert index.query_overlapping_envelopes().tolist() == [[0, 1]]

    def test_empty(self):
        index = SegmentIndex([])
        assert index.query_overlapping_envelopes().shape == (0, 2)


class TestSplitEdge:
    """Tests for split_edge()."""

    def test_interior_points_ordered_along_segment(self):
        pieces = split_edge([(0, 0), (4, 0)], {0: {(3, 0), (1, 0)}})
        assert pieces == [((0, 0), (1, 0)), ((1, 0), (3, 0)), ((3, 0), (4, 0))]

    def test_no_nodes_keeps_run(self):
        assert split_edge([(0, 0), (1, 0), (1, 1)], {}) == [((0, 0), (1, 0), (1, 1))]

    def test_split_at_vertex(self):
        pieces = split_edge([(0, 0), (1, 0), (1, 1)], {0: {(1, 0)}})
        assert pieces == [((0, 0), (1, 0)), ((1, 0), (1, 1))]

    def test_node_at_endpoint_adds_nothing(self):
        assert split_edge([(0, 0), (2, 0)], {0: {(0, 0), (2, 0)}}) == [((0, 0), (2, 0))]


class TestInputMembership:
    """Tests for the role derived from merged contributions."""

    def test_roles(self):
        assert InputMembership().role == EdgeRole.NOT_PART
        assert InputMembership(line_count=2).role == EdgeRole.LINE
        assert InputMembership(area_count=1, depth_delta=1).role == EdgeRole.BOUNDARY
        assert InputMembership(area_count=2, depth_delta=0).role == EdgeRole.COLLAPSE

    def test_area_dominates_line(self):
        member = InputMembership(area_count=1, line_count=1, depth_delta=-1)
        assert member.role == EdgeRole.BOUNDARY


class TestNoder:
    """Tests for Noder.node()."""

    def test_crossing_lines(self):
        a = LineString([(0, 0), (2, 2)])
        b = LineString([(0, 2), (2, 0)])
        result = Noder().node(a, b)
        assert len(result.edges) == 4
        assert result.attempts == 1
        assert result.precision.is_floating
        assert all((1.0, 1.0) in (edge.start, edge.end) for edge in result.edges)

    def test_t_junction(self):
        a = LineString([(0, 0), (2, 0)])
        b = LineString([(1, 0), (1, 1)])
        result = Noder().node(a, b)
        assert sorted(edge.coords for edge in result.edges) == [
            ((0, 0), (1, 0)),
            ((1, 0), (1, 1)),
            ((1, 0), (2, 0)),
        ]

    def test_identical_lines_merge(self):
        """Two identical segments yield one edge carrying both inputs."""
        line = LineString([(0, 0), (2, 0)])
        result = Noder().node(line, LineString([(0, 0), (2, 0)]))
        assert len(result.edges) == 1
        edge = result.edges[0]
        assert edge.coords == ((0, 0), (2, 0))
        assert edge.role(0) == EdgeRole.LINE
        assert edge.role(1) == EdgeRole.LINE

    def test_reversed_lines_merge(self):
        result = Noder().node(LineString([(0, 0), (2, 0)]), LineString([(2, 0), (0, 0)]))
        assert len(result.edges) == 1

    def test_partial_collinear_overlap(self):
        result = Noder().node(LineString([(0, 0), (3, 0)]), LineString([(1, 0), (2, 0)]))
        assert len(result.edges) == 3
        shared = [e for e in result.edges if e.role(0) == EdgeRole.LINE and e.role(1) == EdgeRole.LINE]
        assert [e.coords for e in shared] == [((1, 0), (2, 0))]

    def test_opposite_rings_merge_with_matching_depth(self):
        """Depth of a contributor running the other way is negated on merge."""
        a = _square()
        b = Polygon([(0, 0), (2, 0), (2, 2), (0, 2)])
        result = Noder().node(a, b)
        assert len(result.edges) == 4
        for edge in result.edges:
            assert edge.members[0].depth_delta == 1
            assert edge.members[1].depth_delta == 1

    def test_shared_edge_within_input_collapses(self):
        left = _square(0, 0, 1)
        right = _square(1, 0, 1)
        result = Noder().node(MultiPolygon((left, right)))
        shared = [e for e in result.edges if set(e.coords) == {(1.0, 0.0), (1.0, 1.0)}]
        assert len(shared) == 1
        assert shared[0].role(0) == EdgeRole.COLLAPSE
        assert shared[0].members[0].area_count == 2
        assert shared[0].role(1) == EdgeRole.NOT_PART

    def test_line_through_ring_start_vertex(self):
        """A line crossing a ring at its start vertex leaves the ring whole."""
        square = _square()
        line = LineString([(-1, -1), (1, 1)])
        result = Noder().node(square, line)
        rings = [e for e in result.edges if e.role(0) == EdgeRole.BOUNDARY]
        assert len(rings) == 1
        assert rings[0].coords == ((0, 0), (0, 2), (2, 2), (2, 0), (0, 0))
        lines = sorted(e.coords for e in result.edges if e.role(1) == EdgeRole.LINE)
        assert lines == [((-1, -1), (0, 0)), ((0, 0), (1, 1))]

    def test_line_through_ring_vertex(self):
        """A line crossing the boundary at a vertex adds exactly one node there."""
        square = _square()
        line = LineString([(1, 1), (3, 3)])
        result = Noder().node(square, line)
        assert len(result.edges) == 4
        assert _endpoints(result) == {(0, 0), (2, 2), (1, 1), (3, 3)}
        _assert_fully_noded(result.edges)

    def test_noding_closure(self):
        """No two noded edges cross or touch except at shared endpoints."""
        with warnings.catch_warnings():
            warnings.simplefilter("error", PrecisionCoarsenedWarning)
            result = Noder().node(_star(), _grid_lines())
        assert result.attempts == 1
        _assert_fully_noded(result.edges)
        assert find_residual_intersection([e.coords for e in result.edges]) is None

    def test_noding_closure_with_fixed_precision(self):
        result = node_geometries(_star(), _grid_lines(), PrecisionModel.fixed(8))
        assert result.attempts == 1
        _assert_fully_noded(result.edges)

    def test_single_geometry(self):
        result = Noder().node(_grid_lines())
        _assert_fully_noded(result.edges)
        assert all(edge.role(1) == EdgeRole.NOT_PART for edge in result.edges)


class TestResidualIntersection:
    """Tests for find_residual_intersection()."""

    def test_crossing_is_reported(self):
        runs = [((0, 0), (2, 2)), ((0, 2), (2, 0))]
        assert find_residual_intersection(runs) == (1.0, 1.0)

    def test_noded_runs_pass(self):
        runs = [((0, 0), (1, 1)), ((1, 1), (2, 2)), ((0, 2), (1, 1)), ((1, 1), (2, 0))]
        assert find_residual_intersection(runs) is None

    def test_closed_run_wrap_is_not_residual(self):
        runs = [((0, 0), (0, 1), (1, 1), (1, 0), (0, 0))]
        assert find_residual_intersection(runs) is None


class TestNodingRetry:
    """Tests for the precision coarsening retry loop."""

    def test_retry_with_coarser_precision(self):
        a = LineString([(0, 0), (2, 2)])
        b = LineString([(0, 2), (2, 0)])
        with patch(
            'overlayforge.noding.noder.find_residual_intersection',
            side_effect=[(1.0, 1.0), None],
        ):
            with pytest.warns(PrecisionCoarsenedWarning, match="retrying with Fixed"):
                result = Noder().node(a, b)
        assert result.attempts == 2
        assert not result.precision.is_floating
        assert len(result.edges) == 4

    def test_failure_after_retries(self):
        a = LineString([(0, 0), (2, 2)])
        b = LineString([(0, 2), (2, 0)])
        config = OverlayConfig(max_noding_retries=2)
        with patch(
            'overlayforge.noding.noder.find_residual_intersection',
            return_value=(1.0, 1.0),
        ):
            with pytest.warns(PrecisionCoarsenedWarning) as record:
                with pytest.raises(NodingFailure) as exc_info:
                    Noder(config=config).node(a, b)
        assert exc_info.value.attempts == 3
        assert not exc_info.value.precision.is_floating
        assert len(record) == 2

    def test_no_retries(self):
        a = LineString([(0, 0), (2, 2)])
        config = OverlayConfig(max_noding_retries=0)
        with patch(
            'overlayforge.noding.noder.find_residual_intersection',
            return_value=(1.0, 1.0),
        ):
            with pytest.raises(NodingFailure, match="after 1 noding passes"):
                Noder(config=config).node(a)
