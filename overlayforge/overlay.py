"""Overlay driver: boolean set operations between two geometries.

One call threads a single precision model and config through the phases:

    validate -> node -> build graph -> label -> extract

Inputs with point components skip the graph and are handled by exact point
location. Operations whose result is known to be empty from the inputs'
envelopes return early.
"""

from typing import List, Optional, Tuple, Union

from .core.config import DEFAULT_CONFIG, OverlayConfig
from .core.errors import UnsupportedOperation
from .core.precision import FLOATING, PrecisionModel
from .core.types import OverlayOp
from .extract.assembly import OverlayExtractor, assemble_result
from .extract.points import overlay_point_sets, partition_points, point_coordinates
from .extract.selection import result_dimension
from .geometry.algorithms import apply_precision
from .geometry.coordinate import Envelope
from .geometry.model import (
    Geometry,
    GeometryCollection,
    LineString,
    Point,
    Polygon,
    component_dimensions,
    empty_geometry,
    iter_lines,
    iter_polygons,
)
from .graph.labeler import OverlayLabeler
from .graph.topology import build_topology_graph
from .noding.edges import check_finite
from .noding.noder import Noder
from .validation import check_geometry

XY = Tuple[float, float]
OpLike = Union[OverlayOp, str]


# ---------------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------------

def _as_op(op: OpLike) -> OverlayOp:
    if isinstance(op, OverlayOp):
        return op
    try:
        return OverlayOp(str(op).lower())
    except ValueError:
        raise UnsupportedOperation(f"Unknown overlay operation: {op!r}") from None


def _input_dimension(geometry: Geometry, name: str) -> int:
    """Dimension of an input, rejecting non-geometries and mixed collections."""
    if not isinstance(geometry, Geometry):
        raise UnsupportedOperation(
            f"Input {name} is not a geometry: {type(geometry).__name__}"
        )
    dims = component_dimensions(geometry)
    if len(dims) > 1:
        raise UnsupportedOperation(
            f"Input {name} mixes components of dimensions {sorted(dims)}"
        )
    if dims:
        return dims.pop()
    return geometry.dimension


def _check_input(geometry: Geometry, config: OverlayConfig) -> None:
    if config.validate_inputs:
        check_geometry(geometry)
    else:
        check_finite(geometry)


def _safe_envelope(geometry: Geometry, precision: PrecisionModel) -> Envelope:
    """Envelope grown by one grid cell, covering any snapped coordinate."""
    env = geometry.envelope
    if precision.is_floating or env.is_null:
        return env
    d = precision.grid_size
    return Envelope(env.minx - d, env.miny - d, env.maxx + d, env.maxy + d)


def _is_empty_result(op: OverlayOp, geom_a: Geometry, geom_b: Geometry, precision: PrecisionModel) -> bool:
    if op == OverlayOp.INTERSECTION:
        if geom_a.is_empty or geom_b.is_empty:
            return True
        return not _safe_envelope(geom_a, precision).intersects(_safe_envelope(geom_b, precision))
    if op == OverlayOp.DIFFERENCE:
        return geom_a.is_empty
    return geom_a.is_empty and geom_b.is_empty


# ---------------------------------------------------------------------------
# Graph overlay
# ---------------------------------------------------------------------------

def _overlay_graph(
    geom_a: Geometry,
    geom_b: Geometry,
    op: OverlayOp,
    dim_a: int,
    dim_b: int,
    precision: PrecisionModel,
    config: OverlayConfig,
) -> Geometry:
    noding = Noder(precision, config).node(geom_a, geom_b)
    graph = build_topology_graph(noding.edges)
    graph.check_invariants()
    OverlayLabeler(graph, geom_a, geom_b).label()
    return OverlayExtractor(graph, op, dim_a, dim_b, config).extract()


def _unary_components(
    geometry: Geometry,
    dimension: int,
    precision: PrecisionModel,
    config: OverlayConfig,
) -> Tuple[List[Polygon], List[LineString]]:
    """Polygons and lines of the unary union of a line or area geometry."""
    if geometry.is_empty:
        return [], []
    result = _overlay_graph(
        geometry, GeometryCollection(), OverlayOp.UNION, dimension, -1, precision, config
    )
    return list(iter_polygons(result)), list(iter_lines(result))


# ---------------------------------------------------------------------------
# Point overlays
# ---------------------------------------------------------------------------

def _overlay_with_points(
    geom_a: Geometry,
    geom_b: Geometry,
    op: OverlayOp,
    dim_a: int,
    dim_b: int,
    precision: PrecisionModel,
    config: OverlayConfig,
) -> Geometry:
    """Overlay where at least one input consists of points."""
    def snapped_points(geometry: Geometry) -> List[XY]:
        return [precision.make_precise_xy(xy) for xy in point_coordinates(geometry)]

    if dim_a <= 0 and dim_b <= 0:
        points = overlay_point_sets(snapped_points(geom_a), snapped_points(geom_b), op)
        return assemble_result([], [], points, op, dim_a, dim_b, config.strict)

    points_are_a = dim_a <= 0
    point_input, other, other_dim = (
        (geom_a, geom_b, dim_b) if points_are_a else (geom_b, geom_a, dim_a)
    )
    covered, exterior = partition_points(snapped_points(point_input), apply_precision(other, precision))

    polygons: List[Polygon] = []
    lines: List[LineString] = []
    points: List[Point] = []
    if op == OverlayOp.INTERSECTION:
        points = covered
    elif op == OverlayOp.DIFFERENCE and points_are_a:
        points = exterior
    elif op == OverlayOp.DIFFERENCE:
        polygons, lines = _unary_components(other, other_dim, precision, config)
    else:
        polygons, lines = _unary_components(other, other_dim, precision, config)
        points = exterior
    return assemble_result(polygons, lines, points, op, dim_a, dim_b, config.strict)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def overlay(
    geom_a: Geometry,
    geom_b: Geometry,
    op: OpLike,
    precision: Optional[PrecisionModel] = None,
    config: Optional[OverlayConfig] = None,
) -> Geometry:
    """Compute a boolean set operation between two geometries.

    Args:
        geom_a: Input A
        geom_b: Input B
        op: OverlayOp member or its string value ('intersection', 'union',
            'difference', 'symmetric_difference')
        precision: Precision model for noding (default: floating)
        config: Overlay settings (default: OverlayConfig())

    Returns:
        Normalized result geometry; an empty geometry of the result
        dimension when the result is empty

    Raises:
        InvalidInputGeometry: If an input is malformed
        NodingFailure: If noding fails after every permitted retry
        TopologyInconsistency: If the overlay graph cannot be labeled or
            traversed
        UnsupportedOperation: For unknown operations, non-geometry inputs
            and collections mixing dimensions

    Examples:
        >>> a = Polygon([(0, 0), (0, 2), (2, 2), (2, 0)])
        >>> b = Polygon([(1, 1), (1, 3), (3, 3), (3, 1)])
        >>> overlay(a, b, OverlayOp.INTERSECTION).area
        1.0
        >>> overlay(a, b, 'union').area
        7.0
    """
    op = _as_op(op)
    precision = FLOATING if precision is None else precision
    config = DEFAULT_CONFIG if config is None else config

    dim_a = _input_dimension(geom_a, 'A')
    dim_b = _input_dimension(geom_b, 'B')
    _check_input(geom_a, config)
    _check_input(geom_b, config)

    if _is_empty_result(op, geom_a, geom_b, precision):
        return empty_geometry(result_dimension(op, dim_a, dim_b))

    if dim_a <= 0 or dim_b <= 0:
        if not (dim_a > 0 and geom_b.is_empty) and not (dim_b > 0 and geom_a.is_empty):
            return _overlay_with_points(geom_a, geom_b, op, dim_a, dim_b, precision, config)

    return _overlay_graph(geom_a, geom_b, op, dim_a, dim_b, precision, config)


def intersection(geom_a, geom_b, precision=None, config=None) -> Geometry:
    """Points in both A and B."""
    return overlay(geom_a, geom_b, OverlayOp.INTERSECTION, precision, config)


def union(geom_a, geom_b, precision=None, config=None) -> Geometry:
    """Points in A or B."""
    return overlay(geom_a, geom_b, OverlayOp.UNION, precision, config)


def difference(geom_a, geom_b, precision=None, config=None) -> Geometry:
    """Points in A and not in B."""
    return overlay(geom_a, geom_b, OverlayOp.DIFFERENCE, precision, config)


def symmetric_difference(geom_a, geom_b, precision=None, config=None) -> Geometry:
    """Points in exactly one of A and B."""
    return overlay(geom_a, geom_b, OverlayOp.SYMMETRIC_DIFFERENCE, precision, config)


def unary_union(
    geometry: Geometry,
    precision: Optional[PrecisionModel] = None,
    config: Optional[OverlayConfig] = None,
) -> Geometry:
    """Union of the components of a single geometry.

    Adjacent polygons are dissolved, lines are noded and merged, and
    duplicate points are removed.

    Examples:
        >>> left = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
        >>> right = Polygon([(1, 0), (1, 1), (2, 1), (2, 0)])
        >>> unary_union(MultiPolygon((left, right))).geom_type
        'Polygon'
    """
    precision = FLOATING if precision is None else precision
    config = DEFAULT_CONFIG if config is None else config

    dim = _input_dimension(geometry, 'A')
    _check_input(geometry, config)
    if geometry.is_empty:
        return empty_geometry(dim)
    if dim == 0:
        points = overlay_point_sets(
            [precision.make_precise_xy(xy) for xy in point_coordinates(geometry)], [], OverlayOp.UNION
        )
        return assemble_result([], [], points, OverlayOp.UNION, dim, -1, config.strict)
    return _overlay_graph(geometry, GeometryCollection(), OverlayOp.UNION, dim, -1, precision, config)


__all__ = [
    'overlay',
    'intersection',
    'union',
    'difference',
    'symmetric_difference',
    'unary_union',
]
