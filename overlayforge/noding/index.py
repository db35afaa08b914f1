"""Segment spatial index for noding candidate pruning.

Uses a shapely STRtree over one two-point LineString per segment. The tree
only answers envelope-overlap queries; every candidate pair is then tested
exactly by :func:`overlayforge.core.predicates.segment_intersection`.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
import shapely
from shapely.strtree import STRtree

XY = Tuple[float, float]


class SegmentIndex:
    """Envelope index over a fixed set of segments.

    Args:
        segments: Sequence of ``((x1, y1), (x2, y2))`` pairs

    Examples:
        >>> index = SegmentIndex([((0, 0), (2, 2)), ((0, 2), (2, 0)), ((5, 5), (6, 6))])
        >>> index.query_overlapping_envelopes().tolist()
        [[0, 1]]
    """

    def __init__(self, segments: Sequence[Tuple[XY, XY]]):
        self.size = len(segments)
        if self.size == 0:
            self._tree = None
            self._lines = None
            return
        coords = np.asarray(segments, dtype=float).reshape(self.size, 2, 2)
        self._lines = shapely.linestrings(coords)
        self._tree = STRtree(self._lines)

    def query_overlapping_envelopes(self) -> np.ndarray:
        """Return ``(k, 2)`` index pairs ``i < j`` whose envelopes overlap."""
        if self._tree is None:
            return np.empty((0, 2), dtype=np.intp)
        pairs = self._tree.query(self._lines)
        mask = pairs[0] < pairs[1]
        selected = pairs[:, mask].T
        # Deterministic processing order independent of tree layout
        order = np.lexsort((selected[:, 1], selected[:, 0]))
        return selected[order]


__all__ = [
    'SegmentIndex',
]
