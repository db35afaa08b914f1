"""Compute the area location of every edge with respect to both inputs.

Boundary edges of an area input know their side locations from ring
orientation. Every other edge gets a single location per input, found in
this order:

1. At nodes with boundary edges, by walking the star counter-clockwise and
   flipping the location across each boundary edge.
2. Collapsed boundary edges still unknown: inside for holes, outside for
   shells.
3. By depth-first propagation through nodes with no boundary edges.
4. For components still unknown, by an exact point-in-polygon probe against
   the input's noded boundary.

Line and point inputs have no area, so every edge is outside them.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.errors import TopologyInconsistency
from ..core.predicates import locate_point_in_segments
from ..core.types import EdgeRole, Location
from ..geometry.coordinate import Envelope
from ..geometry.model import Geometry, component_dimensions
from .label import LEFT, RIGHT
from .topology import TopologyGraph

XY = Tuple[float, float]

_INPUT_NAMES = 'AB'


class OverlayLabeler:
    """Labels a topology graph in place.

    Args:
        graph: Graph built from the noded edges of both inputs
        geom_a: Input A
        geom_b: Input B

    Examples:
        >>> graph = build_topology_graph(node_geometries(a, b).edges)
        >>> OverlayLabeler(graph, a, b).label()
    """

    def __init__(self, graph: TopologyGraph, geom_a: Geometry, geom_b: Geometry):
        self.graph = graph
        self.has_area = (2 in component_dimensions(geom_a), 2 in component_dimensions(geom_b))
        self.envelopes: Tuple[Envelope, Envelope] = (geom_a.envelope, geom_b.envelope)

    def label(self) -> TopologyGraph:
        """Resolve all locations for both inputs.

        Raises:
            TopologyInconsistency: If side locations disagree at a node or a
                disconnected edge cannot be located
        """
        disjoint = not self.envelopes[0].intersects(self.envelopes[1])
        for index in (0, 1):
            if not self.has_area[index]:
                self._label_all(index, Location.EXTERIOR)
                continue
            if disjoint:
                self._label_not_part(index, Location.EXTERIOR)
            self._propagate_area_locations(index)
            self._label_collapsed_edges(index)
            self._propagate_linear_locations(
                [k for k, lab in enumerate(self.graph.labels) if lab.is_known(index)
                 and not lab.is_boundary(index)],
                index,
            )
            self._label_disconnected_edges(index)
        return self.graph

    # ------------------------------------------------------------------------

    def _label_all(self, index: int, location: Location) -> None:
        for lab in self.graph.labels:
            lab.set_location(index, location)

    def _label_not_part(self, index: int, location: Location) -> None:
        for lab in self.graph.labels:
            if lab.role(index) == EdgeRole.NOT_PART:
                lab.set_location(index, location)

    def _propagate_area_locations(self, index: int) -> None:
        graph = self.graph
        for node in graph.nodes.values():
            star = node.edges
            start = next(
                (k for k, he in enumerate(star) if graph.label(he).is_boundary(index)),
                None,
            )
            if start is None:
                continue

            first = star[start]
            current = graph.label(first).location(index, LEFT, first % 2 == 0)
            count = len(star)
            for step in range(1, count + 1):
                he = star[(start + step) % count]
                lab = graph.label(he)
                forward = he % 2 == 0
                if lab.is_boundary(index):
                    if lab.location(index, RIGHT, forward) != current:
                        raise TopologyInconsistency(
                            f"Side location conflict for input {_INPUT_NAMES[index]}",
                            node.xy,
                        )
                    current = lab.location(index, LEFT, forward)
                elif not lab.is_known(index) or lab[index].left != current:
                    try:
                        lab.set_location(index, current)
                    except TopologyInconsistency as exc:
                        raise TopologyInconsistency(str(exc), node.xy) from exc

    def _label_collapsed_edges(self, index: int) -> None:
        for lab in self.graph.labels:
            item = lab[index]
            if item.role == EdgeRole.COLLAPSE and not item.is_known:
                lab.set_location(index, Location.INTERIOR if item.is_hole else Location.EXTERIOR)

    def _propagate_linear_locations(self, edge_indices: Iterable[int], index: int) -> None:
        """Spread known locations across nodes that carry no boundary edges."""
        graph = self.graph
        stack: List[Tuple[XY, Location]] = []
        for k in edge_indices:
            location = graph.labels[k][index].left
            edge = graph.edges[k]
            stack.append((edge.start, location))
            stack.append((edge.end, location))

        visited = set()
        while stack:
            xy, location = stack.pop()
            if xy in visited:
                continue
            star = graph.node_edges(xy)
            if any(graph.label(he).is_boundary(index) for he in star):
                continue
            visited.add(xy)
            for he in star:
                lab = graph.label(he)
                if not lab.is_known(index):
                    lab.set_location(index, location)
                    stack.append((graph.dest(he), location))

    def _label_disconnected_edges(self, index: int) -> None:
        graph = self.graph
        boundary: Optional[List[Tuple[XY, XY]]] = None
        for k, lab in enumerate(graph.labels):
            if lab.is_known(index):
                continue
            if boundary is None:
                boundary = _boundary_segments(graph, index)
            lab.set_location(index, _locate_edge(graph.edges[k].coords, boundary))
            self._propagate_linear_locations([k], index)


def _boundary_segments(graph: TopologyGraph, index: int) -> List[Tuple[XY, XY]]:
    segments: List[Tuple[XY, XY]] = []
    for edge, lab in zip(graph.edges, graph.labels):
        if lab.is_boundary(index):
            coords = edge.coords
            segments.extend((coords[i], coords[i + 1]) for i in range(len(coords) - 1))
    return segments


def _probe_points(coords: Sequence[XY]) -> List[XY]:
    """Interior vertices first, then segment midpoints."""
    probes = list(coords[1:-1])
    for a, b in zip(coords[:-1], coords[1:]):
        probes.append(((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0))
    return probes


def _locate_edge(coords: Sequence[XY], boundary: Sequence[Tuple[XY, XY]]) -> Location:
    if not boundary:
        return Location.EXTERIOR
    for probe in _probe_points(coords):
        location = locate_point_in_segments(probe, boundary)
        if location != Location.BOUNDARY:
            return location
    raise TopologyInconsistency("Every probe of a disconnected edge lies on a boundary", coords[0])


def label_graph(graph: TopologyGraph, geom_a: Geometry, geom_b: Geometry) -> TopologyGraph:
    """Functional form of :meth:`OverlayLabeler.label`."""
    return OverlayLabeler(graph, geom_a, geom_b).label()


__all__ = [
    'OverlayLabeler',
    'label_graph',
]
