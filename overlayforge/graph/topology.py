"""Planar topology graph built from noded edges.

Each noded edge ``k`` yields two half-edges stored in one arena list:
``2k`` runs in the stored edge direction and ``2k + 1`` runs backwards, so the
symmetric half-edge of ``i`` is ``i ^ 1``. Half-edges leaving a node are
sorted counter-clockwise by the angle of their first segment, and ``onext``
links each one to the next half-edge counter-clockwise around its origin.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence, Tuple

from ..core.errors import TopologyInconsistency
from ..core.predicates import compare_direction
from ..core.types import EdgeRole
from ..noding.noder import NodedEdge
from .label import OverlayLabel

XY = Tuple[float, float]


@dataclass
class HalfEdge:
    """One direction of a noded edge.

    Attributes:
        index: Position in the graph's half-edge arena
        origin: Coordinate of the node the half-edge leaves
        onext: Arena index of the next half-edge counter-clockwise around
            ``origin``; -1 until the graph is built
    """
    index: int
    origin: XY
    onext: int = -1

    @property
    def sym(self) -> int:
        return self.index ^ 1

    @property
    def edge_index(self) -> int:
        return self.index // 2

    @property
    def is_forward(self) -> bool:
        return self.index % 2 == 0


@dataclass
class Node:
    """A graph vertex and its outgoing half-edges in counter-clockwise order."""
    xy: XY
    edges: List[int] = field(default_factory=list)

    @property
    def degree(self) -> int:
        return len(self.edges)


class TopologyGraph:
    """Half-edge graph over a noded edge arrangement.

    Use :func:`build_topology_graph` to construct one.

    Attributes:
        edges: The noded edges, indexed by edge number
        labels: One OverlayLabel per noded edge
        half_edges: Arena of half-edges
        nodes: Nodes keyed by exact coordinate, in order of first appearance
    """

    def __init__(self, edges: Sequence[NodedEdge]):
        self.edges: List[NodedEdge] = list(edges)
        self.labels: List[OverlayLabel] = [OverlayLabel.from_members(e.members) for e in self.edges]
        self.half_edges: List[HalfEdge] = []
        self.nodes: Dict[XY, Node] = {}

    # -- half-edge navigation ------------------------------------------------

    def sym(self, he: int) -> int:
        return he ^ 1

    def onext(self, he: int) -> int:
        return self.half_edges[he].onext

    def origin(self, he: int) -> XY:
        return self.half_edges[he].origin

    def dest(self, he: int) -> XY:
        return self.half_edges[he ^ 1].origin

    def edge(self, he: int) -> NodedEdge:
        return self.edges[he // 2]

    def label(self, he: int) -> OverlayLabel:
        return self.labels[he // 2]

    def coords(self, he: int) -> Tuple[XY, ...]:
        """Coordinates of a half-edge in its own direction."""
        coords = self.edges[he // 2].coords
        if he % 2 == 0:
            return coords
        return tuple(reversed(coords))

    def direction_point(self, he: int) -> XY:
        """Second coordinate of the half-edge; fixes its angle at the origin."""
        coords = self.edges[he // 2].coords
        return coords[1] if he % 2 == 0 else coords[-2]

    def node_edges(self, xy: XY) -> List[int]:
        return self.nodes[xy].edges

    def around(self, he: int) -> Iterator[int]:
        """Yield the half-edges at the origin of ``he``, counter-clockwise from it."""
        current = he
        while True:
            yield current
            current = self.half_edges[current].onext
            if current == he:
                return

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    # -- construction --------------------------------------------------------

    def _compare_half_edges(self, he1: int, he2: int) -> int:
        """Counter-clockwise order of two half-edges leaving the same node.

        Exact angle ties fall back to later vertices, then to the edge that
        belongs to input A, then to the shorter edge, then to arena order.
        """
        origin = self.half_edges[he1].origin
        coords1 = self.coords(he1)
        coords2 = self.coords(he2)

        for k in range(1, min(len(coords1), len(coords2))):
            cmp = compare_direction(origin, coords1[k], coords2[k])
            if cmp != 0:
                return cmp

        in_a1 = self.labels[he1 // 2].role(0) != EdgeRole.NOT_PART
        in_a2 = self.labels[he2 // 2].role(0) != EdgeRole.NOT_PART
        if in_a1 != in_a2:
            return -1 if in_a1 else 1

        len1 = self.edges[he1 // 2].length()
        len2 = self.edges[he2 // 2].length()
        if len1 != len2:
            return -1 if len1 < len2 else 1
        return -1 if he1 < he2 else (1 if he1 > he2 else 0)

    def _add_edge(self, edge_index: int, edge: NodedEdge) -> None:
        forward = HalfEdge(2 * edge_index, edge.start)
        backward = HalfEdge(2 * edge_index + 1, edge.end)
        self.half_edges.append(forward)
        self.half_edges.append(backward)
        self.nodes.setdefault(edge.start, Node(edge.start)).edges.append(forward.index)
        self.nodes.setdefault(edge.end, Node(edge.end)).edges.append(backward.index)

    def _link_node(self, node: Node) -> None:
        node.edges.sort(key=functools.cmp_to_key(self._compare_half_edges))
        count = len(node.edges)
        for k, he in enumerate(node.edges):
            self.half_edges[he].onext = node.edges[(k + 1) % count]

    # -- checks --------------------------------------------------------------

    def check_invariants(self) -> None:
        """Verify sym, onext and origin consistency.

        Raises:
            TopologyInconsistency: On the first violated invariant
        """
        seen = set()
        for node in self.nodes.values():
            for he in node.edges:
                if he in seen:
                    raise TopologyInconsistency(f"Half-edge {he} appears at two nodes", node.xy)
                seen.add(he)
                if self.half_edges[he].origin != node.xy:
                    raise TopologyInconsistency(f"Half-edge {he} has a wrong origin", node.xy)
            ring = []
            current = node.edges[0] if node.edges else -1
            while current >= 0 and len(ring) <= node.degree:
                ring.append(current)
                current = self.half_edges[current].onext
                if current == node.edges[0]:
                    break
            if sorted(ring) != sorted(node.edges):
                raise TopologyInconsistency("onext links do not form a single ring", node.xy)

        if len(seen) != len(self.half_edges):
            raise TopologyInconsistency("Some half-edges are not attached to a node")
        for he in self.half_edges:
            sym = self.half_edges[he.sym]
            if sym.sym != he.index:
                raise TopologyInconsistency(f"Half-edge {he.index} is not its sym's sym", he.origin)
            if self.dest(he.index) != self.coords(he.index)[-1]:
                raise TopologyInconsistency(f"Half-edge {he.index} ends off its destination", he.origin)


def build_topology_graph(edges: Sequence[NodedEdge]) -> TopologyGraph:
    """Build the half-edge graph of a noded edge set.

    Args:
        edges: Fully noded edges

    Returns:
        TopologyGraph with sorted stars and onext links

    Examples:
        >>> from overlayforge.noding import node_geometries
        >>> from overlayforge.geometry import LineString
        >>> noded = node_geometries(LineString([(0, 0), (2, 2)]), LineString([(0, 2), (2, 0)]))
        >>> graph = build_topology_graph(noded.edges)
        >>> graph.nodes[(1.0, 1.0)].degree
        4
    """
    graph = TopologyGraph(edges)
    for edge_index, edge in enumerate(graph.edges):
        graph._add_edge(edge_index, edge)
    for node in graph.nodes.values():
        graph._link_node(node)
    return graph


__all__ = [
    'HalfEdge',
    'Node',
    'TopologyGraph',
    'build_topology_graph',
]
