"""Build result polygons from the result-area half-edges of a labeled graph.

Result-area half-edges have the result area on their right. Linking each
one to the first result-area half-edge counter-clockwise from its sym at the
destination node traces the boundary of one result face. Boundaries that
pass through a node twice are split there into simple rings: clockwise rings
are shells and counter-clockwise rings are holes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Set, Tuple

from ..core.errors import TopologyInconsistency
from ..core.predicates import is_ccw, locate_point_in_ring, signed_area
from ..core.types import Location, OverlayOp
from ..geometry.coordinate import Envelope
from ..geometry.model import LinearRing, Polygon
from ..graph.topology import TopologyGraph
from .selection import is_result_area_edge

XY = Tuple[float, float]


@dataclass
class _Shell:
    ring: Tuple[XY, ...]
    envelope: Envelope
    area: float
    holes: List[Tuple[XY, ...]] = field(default_factory=list)


class PolygonBuilder:
    """Links result-area half-edges into polygons.

    Args:
        graph: Labeled topology graph
        op: Overlay operation
    """

    def __init__(self, graph: TopologyGraph, op: OverlayOp):
        self.graph = graph
        self.op = op
        self.result_edges: List[int] = [
            he for he in range(len(graph.half_edges)) if is_result_area_edge(graph, he, op)
        ]

    def build(self) -> List[Polygon]:
        """Return the result polygons.

        Raises:
            TopologyInconsistency: If a ring cannot be closed or a hole has no
                containing shell
        """
        rings = self.link_rings()
        shells = []
        holes = []
        for ring in rings:
            if is_ccw(ring):
                holes.append(ring)
            else:
                shells.append(_Shell(ring, Envelope.of(ring), abs(signed_area(ring))))

        for hole in holes:
            _find_shell(shells, hole).holes.append(hole)

        return [
            Polygon(LinearRing(shell.ring), tuple(LinearRing(h) for h in shell.holes))
            for shell in shells
        ]

    def link_rings(self) -> List[Tuple[XY, ...]]:
        """Trace every result-area half-edge into closed, simple rings.

        A face boundary that touches itself at a node is split there, so a
        hole touching the shell or another hole becomes a ring of its own.
        """
        in_result: Set[int] = set(self.result_edges)
        visited: Set[int] = set()
        rings: List[Tuple[XY, ...]] = []

        for start in self.result_edges:
            if start in visited:
                continue
            coords: List[XY] = []
            current = start
            while True:
                if current in visited:
                    raise TopologyInconsistency(
                        "Result ring revisits a half-edge", self.graph.origin(current)
                    )
                visited.add(current)
                coords.extend(self.graph.coords(current)[:-1])
                current = self._next_result_edge(current, in_result)
                if current == start:
                    break
            coords.append(coords[0])
            rings.extend(split_at_repeated_nodes(coords))
        return rings

    def _next_result_edge(self, he: int, in_result: Set[int]) -> int:
        graph = self.graph
        sym = graph.sym(he)
        candidate = graph.onext(sym)
        while candidate != sym:
            if candidate in in_result:
                return candidate
            candidate = graph.onext(candidate)
        raise TopologyInconsistency("Result ring cannot be closed", graph.dest(he))


def split_at_repeated_nodes(ring: Sequence[XY]) -> List[Tuple[XY, ...]]:
    """Split a closed ring that passes through a node more than once.

    Each repeated coordinate closes off the loop traced since its previous
    visit, so every returned ring is simple. Orientation is kept.

    Examples:
        >>> ring = [(1, 1), (2, 1), (2, 2), (3, 2), (3, 3), (2, 3), (2, 2), (1, 2), (1, 1)]
        >>> split_at_repeated_nodes(ring)
        [((2, 2), (3, 2), (3, 3), (2, 3), (2, 2)), ((1, 1), (2, 1), (2, 2), (1, 2), (1, 1))]
    """
    loops: List[Tuple[XY, ...]] = []
    path: List[XY] = []
    seen = {}
    for pt in ring:
        if pt in seen:
            start = seen[pt]
            loops.append(tuple(path[start:]) + (pt,))
            for dropped in path[start + 1:]:
                del seen[dropped]
            del path[start + 1:]
        else:
            seen[pt] = len(path)
            path.append(pt)
    return loops


def _find_shell(shells: Sequence[_Shell], hole: Tuple[XY, ...]) -> _Shell:
    env = Envelope.of(hole)
    candidates = [shell for shell in shells if shell.envelope.contains(env)]
    if len(candidates) == 1:
        return candidates[0]

    for shell in sorted(candidates, key=lambda s: s.area):
        if _ring_contains(shell.ring, hole):
            return shell
    raise TopologyInconsistency("Hole has no containing shell", hole[0])


def _ring_contains(shell: Sequence[XY], hole: Sequence[XY]) -> bool:
    """True if ``hole`` lies inside ``shell``, judged at a vertex off the shell."""
    probes: List[XY] = list(hole[:-1])
    probes.extend(((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0) for a, b in zip(hole[:-1], hole[1:]))
    for probe in probes:
        location = locate_point_in_ring(probe, shell)
        if location != Location.BOUNDARY:
            return location == Location.INTERIOR
    return False


def build_polygons(graph: TopologyGraph, op: OverlayOp) -> List[Polygon]:
    return PolygonBuilder(graph, op).build()


__all__ = [
    'PolygonBuilder',
    'build_polygons',
    'split_at_repeated_nodes',
]
