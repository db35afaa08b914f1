"""Result extraction: polygons, lines and points of an overlay."""

from .selection import (
    is_in_result,
    is_result_area_edge,
    is_result_line_edge,
    line_location,
    result_dimension,
)
from .polygons import PolygonBuilder, build_polygons, split_at_repeated_nodes
from .lines import LineBuilder, build_lines, merge_line_edges
from .points import (
    intersection_points,
    point_coordinates,
    overlay_point_sets,
    partition_points,
)
from .assembly import OverlayExtractor, assemble_result, extract_result

__all__ = [
    # Selection
    'is_in_result',
    'is_result_area_edge',
    'is_result_line_edge',
    'line_location',
    'result_dimension',

    # Builders
    'PolygonBuilder',
    'build_polygons',
    'split_at_repeated_nodes',
    'LineBuilder',
    'build_lines',
    'merge_line_edges',

    # Points
    'intersection_points',
    'point_coordinates',
    'overlay_point_sets',
    'partition_points',

    # Assembly
    'OverlayExtractor',
    'assemble_result',
    'extract_result',
]
