"""Noding: split input edges so they meet only at shared endpoints.

The noder runs one pass over the source edges of both inputs:

1. Candidate segment pairs come from :class:`SegmentIndex` (envelope overlap).
2. Each pair is intersected exactly; every intersection point is recorded on
   both segments, except the shared vertex of adjacent segments of one edge.
3. Every edge is split at its recorded points.
4. Pieces with the same coordinates (in either direction) are merged into a
   single :class:`NodedEdge` holding the membership of every contributor.

A validator then checks the merged edges for residual intersections, which
can appear when snapped crossing points move segments. A residual triggers a
new pass with a coarser precision model, up to
``OverlayConfig.max_noding_retries`` times.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..core.config import DEFAULT_CONFIG, OverlayConfig
from ..core.errors import NodingFailure, PrecisionCoarsenedWarning
from ..core.precision import FLOATING, PrecisionModel
from ..core.predicates import IntersectionKind, segment_intersection
from ..core.types import EdgeRole
from ..geometry.algorithms import geometry_envelope
from ..geometry.model import Geometry
from .edges import SourceEdge, extract_edges
from .index import SegmentIndex

XY = Tuple[float, float]


# ---------------------------------------------------------------------------
# Noded edges
# ---------------------------------------------------------------------------

@dataclass
class InputMembership:
    """How one input geometry contributes to a noded edge.

    Attributes:
        area_count: Number of area boundary pieces merged into the edge
        line_count: Number of line pieces merged into the edge
        depth_delta: Sum of the depth deltas of the boundary pieces, relative
            to the noded edge's direction
        is_hole: True if any boundary piece came from a hole
    """
    area_count: int = 0
    line_count: int = 0
    depth_delta: int = 0
    is_hole: bool = False

    @property
    def role(self) -> EdgeRole:
        if self.area_count > 0:
            return EdgeRole.BOUNDARY if self.depth_delta != 0 else EdgeRole.COLLAPSE
        if self.line_count > 0:
            return EdgeRole.LINE
        return EdgeRole.NOT_PART

    def add(self, source: SourceEdge, forward: bool) -> None:
        if source.role == EdgeRole.LINE:
            self.line_count += 1
            return
        self.area_count += 1
        self.depth_delta += source.depth_delta if forward else -source.depth_delta
        self.is_hole = self.is_hole or source.is_hole


@dataclass
class NodedEdge:
    """An edge of the noded arrangement.

    Attributes:
        coords: Coordinates from start node to end node
        members: Membership of input A (index 0) and input B (index 1)
    """
    coords: Tuple[XY, ...]
    members: Tuple[InputMembership, InputMembership] = field(
        default_factory=lambda: (InputMembership(), InputMembership())
    )

    @property
    def start(self) -> XY:
        return self.coords[0]

    @property
    def end(self) -> XY:
        return self.coords[-1]

    def role(self, index: int) -> EdgeRole:
        return self.members[index].role

    def length(self) -> float:
        total = 0.0
        for (x1, y1), (x2, y2) in zip(self.coords[:-1], self.coords[1:]):
            total += ((x2 - x1) ** 2 + (y2 - y1) ** 2) ** 0.5
        return total


@dataclass
class NodingResult:
    """Output of :meth:`Noder.node`.

    Attributes:
        edges: Merged noded edges
        precision: Precision model the successful pass used
        attempts: Number of noding passes run
    """
    edges: List[NodedEdge]
    precision: PrecisionModel
    attempts: int = 1


# ---------------------------------------------------------------------------
# Single noding pass
# ---------------------------------------------------------------------------

def _segment_table(coord_runs: Sequence[Sequence[XY]]) -> Tuple[List[Tuple[XY, XY]], List[Tuple[int, int]]]:
    """Flatten coordinate runs into segments and their (run, position) owners."""
    segments: List[Tuple[XY, XY]] = []
    owners: List[Tuple[int, int]] = []
    for run_id, coords in enumerate(coord_runs):
        for k in range(len(coords) - 1):
            segments.append((coords[k], coords[k + 1]))
            owners.append((run_id, k))
    return segments, owners


def _is_adjacent(coords: Sequence[XY], k1: int, k2: int) -> bool:
    """True if segments ``k1 < k2`` of one run share a vertex in sequence."""
    if k2 - k1 == 1:
        return True
    last = len(coords) - 2
    return k1 == 0 and k2 == last and coords[0] == coords[-1]


def _shared_vertex(coords: Sequence[XY], k1: int, k2: int) -> XY:
    if k2 - k1 == 1:
        return coords[k2]
    return coords[0]


def add_intersection_nodes(
    edges: Sequence[SourceEdge],
    precision: PrecisionModel = FLOATING,
) -> List[Dict[int, Set[XY]]]:
    """Record every intersection point on the segments it lies on.

    Args:
        edges: Source edges of both inputs
        precision: Precision model applied to proper crossing points

    Returns:
        Per edge, a mapping from segment position to the set of node points
        recorded on that segment
    """
    coord_runs = [edge.coords for edge in edges]
    segments, owners = _segment_table(coord_runs)
    nodes: List[Dict[int, Set[XY]]] = [{} for _ in edges]

    for i, j in SegmentIndex(segments).query_overlapping_envelopes():
        e1, k1 = owners[i]
        e2, k2 = owners[j]
        (p1, p2), (q1, q2) = segments[i], segments[j]
        result = segment_intersection(p1, p2, q1, q2, precision)
        if not result.has_intersection:
            continue
        if e1 == e2:
            lo, hi = min(k1, k2), max(k1, k2)
            if (
                result.kind == IntersectionKind.POINT
                and _is_adjacent(coord_runs[e1], lo, hi)
                and result.points[0] == _shared_vertex(coord_runs[e1], lo, hi)
            ):
                continue
        for point in result.points:
            nodes[e1].setdefault(k1, set()).add(point)
            nodes[e2].setdefault(k2, set()).add(point)
    return nodes


def split_edge(coords: Sequence[XY], segment_nodes: Dict[int, Set[XY]]) -> List[Tuple[XY, ...]]:
    """Split a coordinate run at its node points.

    Node points inside a segment are ordered by distance from the segment
    start. Vertices of the run become piece boundaries only when a node was
    recorded there; the run's own endpoints always are. Zero-length pieces
    are dropped.

    Examples:
        >>> split_edge([(0, 0), (4, 0)], {0: {(1, 0), (3, 0)}})
        [((0, 0), (1, 0)), ((1, 0), (3, 0)), ((3, 0), (4, 0))]
    """
    pieces: List[Tuple[XY, ...]] = []
    current: List[XY] = [coords[0]]
    n_segments = len(coords) - 1

    for k in range(n_segments):
        a, b = coords[k], coords[k + 1]
        points = segment_nodes.get(k, ())
        interior = sorted(
            (p for p in points if p != a and p != b),
            key=lambda p: ((p[0] - a[0]) ** 2 + (p[1] - a[1]) ** 2, p),
        )
        for p in interior:
            if p != current[-1]:
                current.append(p)
            if len(current) >= 2:
                pieces.append(tuple(current))
            current = [p]

        if b != current[-1]:
            current.append(b)
        at_node = k == n_segments - 1 or b in points or b in segment_nodes.get(k + 1, ())
        if at_node:
            if len(current) >= 2:
                pieces.append(tuple(current))
            current = [b]
    return pieces


def _canonical_key(coords: Tuple[XY, ...]) -> Tuple[Tuple[XY, ...], bool]:
    reverse = tuple(reversed(coords))
    if coords <= reverse:
        return coords, True
    return reverse, False


def merge_pieces(pieces: Sequence[Tuple[Tuple[XY, ...], SourceEdge]]) -> List[NodedEdge]:
    """Merge coincident pieces into noded edges.

    The first contributor fixes the stored direction of a merged edge; depth
    deltas of contributors running the other way are negated before summing.
    """
    merged: Dict[Tuple[XY, ...], NodedEdge] = {}
    for coords, source in pieces:
        key, key_forward = _canonical_key(coords)
        edge = merged.get(key)
        if edge is None:
            edge = NodedEdge(coords)
            merged[key] = edge
            forward = True
        else:
            _, stored_forward = _canonical_key(edge.coords)
            forward = key_forward == stored_forward
        edge.members[source.index].add(source, forward)
    return list(merged.values())


def node_source_edges(
    edges: Sequence[SourceEdge],
    precision: PrecisionModel = FLOATING,
) -> List[NodedEdge]:
    """Run one noding pass: intersect, split and merge."""
    nodes = add_intersection_nodes(edges, precision)
    pieces: List[Tuple[Tuple[XY, ...], SourceEdge]] = []
    for edge, segment_nodes in zip(edges, nodes):
        for piece in split_edge(edge.coords, segment_nodes):
            pieces.append((piece, edge))
    return merge_pieces(pieces)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def find_residual_intersection(coord_runs: Sequence[Sequence[XY]]) -> Optional[XY]:
    """Find an intersection between noded edges that is not a shared endpoint.

    Args:
        coord_runs: Coordinates of every noded edge

    Returns:
        A residual intersection point, or None if the edges are fully noded
    """
    segments, owners = _segment_table(coord_runs)
    endpoints = [{coords[0], coords[-1]} for coords in coord_runs]

    for i, j in SegmentIndex(segments).query_overlapping_envelopes():
        e1, k1 = owners[i]
        e2, k2 = owners[j]
        (p1, p2), (q1, q2) = segments[i], segments[j]
        result = segment_intersection(p1, p2, q1, q2)
        if not result.has_intersection:
            continue
        if e1 == e2:
            lo, hi = min(k1, k2), max(k1, k2)
            if (
                result.kind == IntersectionKind.POINT
                and _is_adjacent(coord_runs[e1], lo, hi)
                and result.points[0] == _shared_vertex(coord_runs[e1], lo, hi)
            ):
                continue
        for point in result.points:
            if point not in endpoints[e1] or point not in endpoints[e2]:
                return point
    return None


# ---------------------------------------------------------------------------
# Noder with retry
# ---------------------------------------------------------------------------

class Noder:
    """Nodes the edges of two input geometries.

    Args:
        precision: Precision model of the first pass
        config: Retry settings

    Examples:
        >>> from overlayforge.geometry import LineString
        >>> a = LineString([(0, 0), (2, 2)])
        >>> b = LineString([(0, 2), (2, 0)])
        >>> result = Noder().node(a, b)
        >>> len(result.edges)
        4
    """

    def __init__(
        self,
        precision: PrecisionModel = FLOATING,
        config: OverlayConfig = DEFAULT_CONFIG,
    ):
        self.precision = precision
        self.config = config

    def node(self, geom_a: Geometry, geom_b: Optional[Geometry] = None) -> NodingResult:
        """Node the edges of one or two geometries.

        Raises:
            NodingFailure: If a residual intersection remains after the last
                permitted retry
        """
        geometries = [geom_a] if geom_b is None else [geom_a, geom_b]
        magnitude = geometry_envelope(*geometries).max_abs_ordinate
        max_attempts = self.config.max_noding_retries + 1

        precision = self.precision
        attempt = 1
        while True:
            source: List[SourceEdge] = []
            for index, geometry in enumerate(geometries):
                source.extend(extract_edges(geometry, index, precision))

            edges = node_source_edges(source, precision)
            residual = find_residual_intersection([edge.coords for edge in edges])
            if residual is None:
                return NodingResult(edges, precision, attempt)

            if attempt >= max_attempts:
                raise NodingFailure(
                    f"Residual intersection at {residual} after {attempt} noding passes "
                    f"(last precision: {precision})",
                    attempts=attempt,
                    precision=precision,
                )

            coarser = precision.coarsened(
                self.config.coarsening_factor,
                magnitude,
                self.config.initial_significant_digits,
            )
            warnings.warn(
                f"Noding left an intersection at {residual} with precision {precision}; "
                f"retrying with {coarser}",
                PrecisionCoarsenedWarning,
                stacklevel=2,
            )
            precision = coarser
            attempt += 1


def node_geometries(
    geom_a: Geometry,
    geom_b: Optional[Geometry] = None,
    precision: PrecisionModel = FLOATING,
    config: OverlayConfig = DEFAULT_CONFIG,
) -> NodingResult:
    """Functional form of :meth:`Noder.node`."""
    return Noder(precision, config).node(geom_a, geom_b)


__all__ = [
    'InputMembership',
    'NodedEdge',
    'NodingResult',
    'add_intersection_nodes',
    'split_edge',
    'merge_pieces',
    'node_source_edges',
    'find_residual_intersection',
    'Noder',
    'node_geometries',
]
