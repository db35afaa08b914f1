"""Robust geometric predicates.

Every decision the overlay graph depends on (orientation, point-on-segment,
segment intersection, angular order) goes through this module. Orientation is
exact: a fast floating-point filter decides the easy cases and anything the
filter cannot certify is re-evaluated with :class:`fractions.Fraction`
arithmetic, which is exact for finite doubles.

Coordinates are plain ``(x, y)`` tuples.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .precision import FLOATING, PrecisionModel
from .types import Location, Orientation

XY = Tuple[float, float]

# Safely greater than the relative round-off error of a double product
_DP_SAFE_EPSILON = 1e-15


# ---------------------------------------------------------------------------
# Orientation
# ---------------------------------------------------------------------------

def _signum(value) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _orientation_filter(pax, pay, pbx, pby, pcx, pcy) -> int:
    """Orientation index if double arithmetic can certify it, else 2."""
    detleft = (pax - pcx) * (pby - pcy)
    detright = (pay - pcy) * (pbx - pcx)
    det = detleft - detright

    if detleft > 0.0:
        if detright <= 0.0:
            return _signum(det)
        detsum = detleft + detright
    elif detleft < 0.0:
        if detright >= 0.0:
            return _signum(det)
        detsum = -detleft - detright
    else:
        return _signum(det)

    errbound = _DP_SAFE_EPSILON * detsum
    if det >= errbound or -det >= errbound:
        return _signum(det)
    return 2


def orientation_index(p1: XY, p2: XY, q: XY) -> int:
    """Return the side of ``q`` relative to the directed line ``p1 -> p2``.

    Args:
        p1: Origin of the directed line
        p2: Second point of the directed line
        q: Point to classify

    Returns:
        1 if ``q`` is left of the line (counter-clockwise), -1 if it is right
        (clockwise), 0 if the three points are collinear

    Examples:
        >>> orientation_index((0, 0), (1, 0), (0.5, 1))
        1
        >>> orientation_index((0, 0), (1, 1), (0.1 + 0.2, 0.30000000000000004))
        0
    """
    index = _orientation_filter(p1[0], p1[1], p2[0], p2[1], q[0], q[1])
    if index <= 1:
        return index

    dx1 = Fraction(p2[0]) - Fraction(p1[0])
    dy1 = Fraction(p2[1]) - Fraction(p1[1])
    dx2 = Fraction(q[0]) - Fraction(p2[0])
    dy2 = Fraction(q[1]) - Fraction(p2[1])
    return _signum(dx1 * dy2 - dy1 * dx2)


def orientation(p1: XY, p2: XY, q: XY) -> Orientation:
    """Enum form of :func:`orientation_index`."""
    return Orientation(orientation_index(p1, p2, q))


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------

def _in_envelope(p1: XY, p2: XY, q: XY) -> bool:
    """True if ``q`` lies in the envelope of segment ``p1-p2``."""
    return (
        min(p1[0], p2[0]) <= q[0] <= max(p1[0], p2[0])
        and min(p1[1], p2[1]) <= q[1] <= max(p1[1], p2[1])
    )


def _envelopes_intersect(p1: XY, p2: XY, q1: XY, q2: XY) -> bool:
    if max(q1[0], q2[0]) < min(p1[0], p2[0]):
        return False
    if min(q1[0], q2[0]) > max(p1[0], p2[0]):
        return False
    if max(q1[1], q2[1]) < min(p1[1], p2[1]):
        return False
    if min(q1[1], q2[1]) > max(p1[1], p2[1]):
        return False
    return True


# ---------------------------------------------------------------------------
# Point / segment relations
# ---------------------------------------------------------------------------

def point_on_segment(p: XY, a: XY, b: XY) -> bool:
    """Exact test whether ``p`` lies on the closed segment ``a-b``."""
    if a == b:
        return p == a
    if not _in_envelope(a, b, p):
        return False
    return orientation_index(a, b, p) == 0


def point_segment_distance(p: XY, a: XY, b: XY) -> float:
    """Euclidean distance from ``p`` to the closed segment ``a-b``."""
    if a == b:
        return math.hypot(p[0] - a[0], p[1] - a[1])
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))
    return math.hypot(p[0] - (a[0] + t * dx), p[1] - (a[1] + t * dy))


# ---------------------------------------------------------------------------
# Segment intersection
# ---------------------------------------------------------------------------

class IntersectionKind(Enum):
    """Outcome of a segment intersection test."""
    NONE = 0
    POINT = 1
    COLLINEAR = 2


@dataclass(frozen=True)
class SegmentIntersection:
    """Result of :func:`segment_intersection`.

    Attributes:
        kind: NONE, POINT or COLLINEAR
        points: The intersection point, or the two ends of a collinear overlap
        is_proper: True if the segments cross at a point interior to both
    """
    kind: IntersectionKind
    points: Tuple[XY, ...] = ()
    is_proper: bool = False

    @property
    def has_intersection(self) -> bool:
        return self.kind != IntersectionKind.NONE


_NO_INTERSECTION = SegmentIntersection(IntersectionKind.NONE)


def _exact_line_intersection(p1: XY, p2: XY, q1: XY, q2: XY) -> Optional[XY]:
    """Intersection of the infinite lines through the segments, rounded once."""
    p1x, p1y = Fraction(p1[0]), Fraction(p1[1])
    dpx = Fraction(p2[0]) - p1x
    dpy = Fraction(p2[1]) - p1y
    dqx = Fraction(q2[0]) - Fraction(q1[0])
    dqy = Fraction(q2[1]) - Fraction(q1[1])
    denom = dpx * dqy - dpy * dqx
    if denom == 0:
        return None
    t = ((Fraction(q1[0]) - p1x) * dqy - (Fraction(q1[1]) - p1y) * dqx) / denom
    return (float(p1x + t * dpx), float(p1y + t * dpy))


def _nearest_endpoint(p1: XY, p2: XY, q1: XY, q2: XY) -> XY:
    """Endpoint of either segment closest to the other segment."""
    candidates = (
        (point_segment_distance(p1, q1, q2), p1),
        (point_segment_distance(p2, q1, q2), p2),
        (point_segment_distance(q1, p1, p2), q1),
        (point_segment_distance(q2, p1, p2), q2),
    )
    nearest = candidates[0]
    for candidate in candidates[1:]:
        if candidate[0] < nearest[0]:
            nearest = candidate
    return nearest[1]


def _proper_intersection(
    p1: XY, p2: XY, q1: XY, q2: XY, precision: PrecisionModel
) -> XY:
    point = _exact_line_intersection(p1, p2, q1, q2)
    if point is None or not (_in_envelope(p1, p2, point) and _in_envelope(q1, q2, point)):
        point = _nearest_endpoint(p1, p2, q1, q2)
    return precision.make_precise_xy(point)


def _collinear_intersection(p1: XY, p2: XY, q1: XY, q2: XY) -> SegmentIntersection:
    q1_in_p = _in_envelope(p1, p2, q1)
    q2_in_p = _in_envelope(p1, p2, q2)
    p1_in_q = _in_envelope(q1, q2, p1)
    p2_in_q = _in_envelope(q1, q2, p2)

    if q1_in_p and q2_in_p:
        return _overlap(q1, q2)
    if p1_in_q and p2_in_q:
        return _overlap(p1, p2)
    if q1_in_p and p1_in_q:
        return _overlap(q1, p1)
    if q1_in_p and p2_in_q:
        return _overlap(q1, p2)
    if q2_in_p and p1_in_q:
        return _overlap(q2, p1)
    if q2_in_p and p2_in_q:
        return _overlap(q2, p2)
    return _NO_INTERSECTION


def _overlap(a: XY, b: XY) -> SegmentIntersection:
    if a == b:
        return SegmentIntersection(IntersectionKind.POINT, (a,))
    return SegmentIntersection(IntersectionKind.COLLINEAR, (a, b))


def segment_intersection(
    p1: XY,
    p2: XY,
    q1: XY,
    q2: XY,
    precision: PrecisionModel = FLOATING,
) -> SegmentIntersection:
    """Compute the intersection of segments ``p1-p2`` and ``q1-q2``.

    Endpoint touches and collinear overlaps return input coordinates exactly.
    A proper crossing is computed exactly, rounded to the nearest double and
    snapped to ``precision``. If rounding pushes the point outside either
    segment's envelope (nearly parallel segments) the endpoint nearest to the
    other segment is used instead. Zero-length segments are handled as points.

    Args:
        p1: First endpoint of segment P
        p2: Second endpoint of segment P
        q1: First endpoint of segment Q
        q2: Second endpoint of segment Q
        precision: Precision model applied to computed crossing points

    Returns:
        SegmentIntersection describing the result

    Examples:
        >>> r = segment_intersection((0, 0), (2, 2), (0, 2), (2, 0))
        >>> r.kind, r.points, r.is_proper
        (<IntersectionKind.POINT: 1>, ((1.0, 1.0),), True)
    """
    if p1 == p2 or q1 == q2:
        return _degenerate_intersection(p1, p2, q1, q2)

    if not _envelopes_intersect(p1, p2, q1, q2):
        return _NO_INTERSECTION

    pq1 = orientation_index(p1, p2, q1)
    pq2 = orientation_index(p1, p2, q2)
    if (pq1 > 0 and pq2 > 0) or (pq1 < 0 and pq2 < 0):
        return _NO_INTERSECTION

    qp1 = orientation_index(q1, q2, p1)
    qp2 = orientation_index(q1, q2, p2)
    if (qp1 > 0 and qp2 > 0) or (qp1 < 0 and qp2 < 0):
        return _NO_INTERSECTION

    if pq1 == 0 and pq2 == 0 and qp1 == 0 and qp2 == 0:
        return _collinear_intersection(p1, p2, q1, q2)

    if pq1 == 0 or pq2 == 0 or qp1 == 0 or qp2 == 0:
        # An endpoint lies on the other segment; report it exactly
        if p1 == q1 or p1 == q2:
            point = p1
        elif p2 == q1 or p2 == q2:
            point = p2
        elif pq1 == 0:
            point = q1
        elif pq2 == 0:
            point = q2
        elif qp1 == 0:
            point = p1
        else:
            point = p2
        return SegmentIntersection(IntersectionKind.POINT, (point,))

    point = _proper_intersection(p1, p2, q1, q2, precision)
    return SegmentIntersection(IntersectionKind.POINT, (point,), True)


def _degenerate_intersection(p1: XY, p2: XY, q1: XY, q2: XY) -> SegmentIntersection:
    if p1 == p2 and q1 == q2:
        if p1 == q1:
            return SegmentIntersection(IntersectionKind.POINT, (p1,))
        return _NO_INTERSECTION
    if p1 == p2:
        if point_on_segment(p1, q1, q2):
            return SegmentIntersection(IntersectionKind.POINT, (p1,))
        return _NO_INTERSECTION
    if point_on_segment(q1, p1, p2):
        return SegmentIntersection(IntersectionKind.POINT, (q1,))
    return _NO_INTERSECTION


# ---------------------------------------------------------------------------
# Point in ring
# ---------------------------------------------------------------------------

class RayCrossingCounter:
    """Counts crossings of a rightward ray from a point by a set of segments.

    Segments may come from any number of rings; the parity of the crossing
    count gives the location once every segment has been counted.

    Examples:
        >>> ring = [(0, 0), (0, 1), (1, 1), (1, 0), (0, 0)]
        >>> counter = RayCrossingCounter((0.5, 0.5))
        >>> for a, b in zip(ring[:-1], ring[1:]):
        ...     counter.count_segment(a, b)
        >>> counter.location
        <Location.INTERIOR: 'interior'>
    """

    def __init__(self, point: XY):
        self.point = point
        self.crossing_count = 0
        self.is_on_segment = False

    def count_segment(self, p1: XY, p2: XY) -> None:
        px, py = self.point
        if p1[0] < px and p2[0] < px:
            return

        if px == p2[0] and py == p2[1]:
            self.is_on_segment = True
            return

        if p1[1] == py and p2[1] == py:
            if min(p1[0], p2[0]) <= px <= max(p1[0], p2[0]):
                self.is_on_segment = True
            return

        # Upward edges include their start and exclude their end; downward
        # edges the reverse, so shared vertices are counted once
        if (p1[1] > py >= p2[1]) or (p2[1] > py >= p1[1]):
            orient = orientation_index(p1, p2, self.point)
            if orient == 0:
                self.is_on_segment = True
                return
            if p2[1] < p1[1]:
                orient = -orient
            if orient == 1:
                self.crossing_count += 1

    @property
    def location(self) -> Location:
        if self.is_on_segment:
            return Location.BOUNDARY
        if self.crossing_count % 2 == 1:
            return Location.INTERIOR
        return Location.EXTERIOR


def locate_point_in_ring(point: XY, ring: Sequence[XY]) -> Location:
    """Locate ``point`` relative to a closed ring.

    Args:
        point: Point to locate
        ring: Closed coordinate sequence (first equals last)

    Returns:
        INTERIOR, BOUNDARY or EXTERIOR
    """
    counter = RayCrossingCounter(point)
    for i in range(1, len(ring)):
        counter.count_segment(ring[i - 1], ring[i])
        if counter.is_on_segment:
            break
    return counter.location


def locate_point_in_segments(point: XY, segments: Iterable[Tuple[XY, XY]]) -> Location:
    """Locate ``point`` relative to the area bounded by a set of ring segments."""
    counter = RayCrossingCounter(point)
    for a, b in segments:
        counter.count_segment(a, b)
        if counter.is_on_segment:
            break
    return counter.location


# ---------------------------------------------------------------------------
# Ring orientation and area
# ---------------------------------------------------------------------------

def signed_area(ring: Sequence[XY]) -> float:
    """Shoelace area of a closed ring, positive when counter-clockwise."""
    if len(ring) < 4:
        return 0.0
    coords = np.asarray(ring, dtype=float)
    x = coords[:, 0] - coords[0, 0]
    y = coords[:, 1]
    return float(np.sum(x[:-1] * y[1:] - x[1:] * y[:-1]) / 2.0)


def is_ccw(ring: Sequence[XY]) -> bool:
    """Exact orientation test for a closed ring.

    Uses the highest vertex of the ring: the orientation of the cap formed by
    its neighbours (or the direction of a flat top) decides the orientation.
    Flat or degenerate rings return False.
    """
    n_pts = len(ring) - 1
    if n_pts < 3:
        return False

    up_hi = ring[0]
    up_low = ring[0]
    prev_y = up_hi[1]
    i_up_hi = 0
    for i in range(1, n_pts + 1):
        py = ring[i][1]
        if py > prev_y and py >= up_hi[1]:
            up_hi = ring[i]
            i_up_hi = i
            up_low = ring[i - 1]
        prev_y = py

    if i_up_hi == 0:
        return False

    i_down_low = i_up_hi
    while True:
        i_down_low = (i_down_low + 1) % n_pts
        if i_down_low == i_up_hi or ring[i_down_low][1] != up_hi[1]:
            break

    down_low = ring[i_down_low]
    i_down_hi = i_down_low - 1 if i_down_low > 0 else n_pts - 1
    down_hi = ring[i_down_hi]

    if up_hi == down_hi:
        if up_low == up_hi or down_low == up_hi or up_low == down_low:
            return False
        return orientation_index(up_low, up_hi, down_low) == 1

    return down_hi[0] - up_hi[0] < 0


# ---------------------------------------------------------------------------
# Angular order
# ---------------------------------------------------------------------------

def quadrant(dx: float, dy: float) -> int:
    """Quadrant of a direction vector, numbered counter-clockwise from +x."""
    if dx >= 0:
        return 0 if dy >= 0 else 3
    return 1 if dy >= 0 else 2


def compare_direction(origin: XY, p: XY, q: XY) -> int:
    """Compare the angles of ``origin->p`` and ``origin->q``.

    Angles increase counter-clockwise from the positive x axis.

    Returns:
        -1 if ``p`` comes first, 1 if ``q`` comes first, 0 if they point the
        same way
    """
    quad_p = quadrant(p[0] - origin[0], p[1] - origin[1])
    quad_q = quadrant(q[0] - origin[0], q[1] - origin[1])
    if quad_p != quad_q:
        return -1 if quad_p < quad_q else 1
    return -orientation_index(origin, p, q)


__all__ = [
    'XY',
    'orientation_index',
    'orientation',
    'point_on_segment',
    'point_segment_distance',
    'IntersectionKind',
    'SegmentIntersection',
    'segment_intersection',
    'RayCrossingCounter',
    'locate_point_in_ring',
    'locate_point_in_segments',
    'signed_area',
    'is_ccw',
    'quadrant',
    'compare_direction',
]
