"""Assemble the result geometry of an overlay from a labeled graph."""

from __future__ import annotations

from typing import List, Sequence

from ..core.config import DEFAULT_CONFIG, OverlayConfig
from ..core.types import OverlayOp
from ..geometry.model import Geometry, LineString, Point, Polygon, build_geometry
from ..graph.topology import TopologyGraph
from .lines import LineBuilder
from .points import intersection_points
from .polygons import PolygonBuilder
from .selection import result_dimension


def assemble_result(
    polygons: Sequence[Polygon],
    lines: Sequence[LineString],
    points: Sequence[Point],
    op: OverlayOp,
    dim_a: int,
    dim_b: int,
    strict: bool = False,
) -> Geometry:
    """Normalize result components and combine them into one geometry.

    Args:
        polygons: Result polygons
        lines: Result lines
        points: Result points
        op: Overlay operation, decides the dimension of an empty result
        dim_a: Dimension of input A
        dim_b: Dimension of input B
        strict: Keep only components of the operation's result dimension

    Returns:
        Single, multi or collection geometry; the canonical empty geometry of
        the result dimension when there are no components
    """
    dimension = result_dimension(op, dim_a, dim_b)
    if strict:
        polygons = polygons if dimension == 2 else []
        lines = lines if dimension == 1 else []
        points = points if dimension == 0 else []

    polygons = sorted((p.normalize() for p in polygons), key=lambda g: g._sort_key())
    lines = sorted((l.normalize() for l in lines), key=lambda g: g._sort_key())
    points = sorted((p.normalize() for p in points), key=lambda g: g._sort_key())
    return build_geometry(polygons, lines, points, dimension)


class OverlayExtractor:
    """Extracts polygons, lines and points of an overlay result.

    Args:
        graph: Fully labeled topology graph
        op: Overlay operation
        dim_a: Dimension of input A
        dim_b: Dimension of input B
        config: Overlay settings (strict mode, line merging)
    """

    def __init__(
        self,
        graph: TopologyGraph,
        op: OverlayOp,
        dim_a: int,
        dim_b: int,
        config: OverlayConfig = DEFAULT_CONFIG,
    ):
        self.graph = graph
        self.op = op
        self.dim_a = dim_a
        self.dim_b = dim_b
        self.config = config

    def extract(self) -> Geometry:
        polygon_builder = PolygonBuilder(self.graph, self.op)
        polygons = polygon_builder.build()

        line_builder = LineBuilder(self.graph, self.op, self.config.merge_result_lines)
        lines = line_builder.build()

        points: List[Point] = []
        if self.op == OverlayOp.INTERSECTION:
            points = intersection_points(
                self.graph, polygon_builder.result_edges, line_builder.result_edges
            )

        return assemble_result(
            polygons, lines, points, self.op, self.dim_a, self.dim_b, self.config.strict
        )


def extract_result(
    graph: TopologyGraph,
    op: OverlayOp,
    dim_a: int,
    dim_b: int,
    config: OverlayConfig = DEFAULT_CONFIG,
) -> Geometry:
    return OverlayExtractor(graph, op, dim_a, dim_b, config).extract()


__all__ = [
    'assemble_result',
    'OverlayExtractor',
    'extract_result',
]
