"""Build result lines from the result line edges of a labeled graph."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..core.types import OverlayOp
from ..geometry.model import LineString
from ..graph.topology import TopologyGraph
from .selection import is_result_line_edge

XY = Tuple[float, float]


def merge_line_edges(runs: Sequence[Sequence[XY]]) -> List[Tuple[XY, ...]]:
    """Join coordinate runs into maximal lines through degree-2 nodes.

    Chains start at nodes where one or three or more runs end; runs left over
    form closed loops and start at their own first coordinate.

    Examples:
        >>> merge_line_edges([((0, 0), (1, 0)), ((1, 0), (2, 0)), ((1, 0), (1, 1))])
        [((0, 0), (1, 0)), ((1, 0), (2, 0)), ((1, 0), (1, 1))]
        >>> merge_line_edges([((0, 0), (1, 0)), ((2, 0), (1, 0))])
        [((0, 0), (1, 0), (2, 0))]
    """
    ends: Dict[XY, List[Tuple[int, bool]]] = {}
    for i, run in enumerate(runs):
        ends.setdefault(run[0], []).append((i, True))
        ends.setdefault(run[-1], []).append((i, False))

    used = [False] * len(runs)

    def chain(i: int, from_start: bool) -> Tuple[XY, ...]:
        used[i] = True
        coords = list(runs[i] if from_start else reversed(runs[i]))
        while True:
            incident = ends[coords[-1]]
            if len(incident) != 2:
                break
            following = [(j, at_start) for j, at_start in incident if not used[j]]
            if not following:
                break
            j, at_start = following[0]
            used[j] = True
            run = runs[j] if at_start else tuple(reversed(runs[j]))
            coords.extend(run[1:])
        return tuple(coords)

    lines: List[Tuple[XY, ...]] = []
    for incident in ends.values():
        if len(incident) == 2:
            continue
        for i, at_start in incident:
            if not used[i]:
                lines.append(chain(i, at_start))
    for i in range(len(runs)):
        if not used[i]:
            lines.append(chain(i, True))
    return lines


class LineBuilder:
    """Collects result line edges.

    Args:
        graph: Labeled topology graph
        op: Overlay operation
        merge: Merge edges into maximal lines at degree-2 nodes
    """

    def __init__(self, graph: TopologyGraph, op: OverlayOp, merge: bool = True):
        self.graph = graph
        self.op = op
        self.merge = merge
        self.result_edges: List[int] = [
            k for k in range(graph.num_edges) if is_result_line_edge(graph, k, op)
        ]

    def build(self) -> List[LineString]:
        runs = [self.graph.edges[k].coords for k in self.result_edges]
        if self.merge:
            runs = merge_line_edges(runs)
        return [LineString(run) for run in runs]


def build_lines(graph: TopologyGraph, op: OverlayOp, merge: bool = True) -> List[LineString]:
    return LineBuilder(graph, op, merge).build()


__all__ = [
    'merge_line_edges',
    'LineBuilder',
    'build_lines',
]
