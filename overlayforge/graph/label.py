"""Per-edge topological labels for the overlay graph.

A label holds, for each of the two inputs, the role the edge plays and the
location of the input's area on the left and right of the edge. Sides are
relative to the stored direction of the noded edge; half-edges running the
other way read them swapped (see :meth:`OverlayLabel.location`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..core.errors import TopologyInconsistency
from ..core.types import EdgeRole, Location
from ..noding.noder import InputMembership

LEFT = 'left'
RIGHT = 'right'


@dataclass
class InputLabel:
    """Label of one edge with respect to one input geometry.

    Attributes:
        role: NOT_PART, LINE, BOUNDARY or COLLAPSE
        is_hole: True if a contributing boundary piece came from a hole
        left: Area location left of the stored edge direction, None if unknown
        right: Area location right of the stored edge direction, None if unknown
    """
    role: EdgeRole = EdgeRole.NOT_PART
    is_hole: bool = False
    left: Optional[Location] = None
    right: Optional[Location] = None

    @classmethod
    def from_membership(cls, member: InputMembership) -> "InputLabel":
        label = cls(member.role, member.is_hole)
        if label.role == EdgeRole.BOUNDARY:
            inside, outside = Location.INTERIOR, Location.EXTERIOR
            if member.depth_delta > 0:
                label.left, label.right = outside, inside
            else:
                label.left, label.right = inside, outside
        return label

    @property
    def is_boundary(self) -> bool:
        return self.role == EdgeRole.BOUNDARY

    @property
    def is_collapse(self) -> bool:
        return self.role == EdgeRole.COLLAPSE

    @property
    def is_line(self) -> bool:
        return self.role == EdgeRole.LINE

    @property
    def is_known(self) -> bool:
        return self.left is not None and self.right is not None


@dataclass
class OverlayLabel:
    """Label of a noded edge with respect to both inputs."""
    inputs: Tuple[InputLabel, InputLabel] = field(
        default_factory=lambda: (InputLabel(), InputLabel())
    )

    @classmethod
    def from_members(cls, members: Tuple[InputMembership, InputMembership]) -> "OverlayLabel":
        return cls((InputLabel.from_membership(members[0]), InputLabel.from_membership(members[1])))

    def __getitem__(self, index: int) -> InputLabel:
        return self.inputs[index]

    def role(self, index: int) -> EdgeRole:
        return self.inputs[index].role

    def is_boundary(self, index: int) -> bool:
        return self.inputs[index].is_boundary

    def is_boundary_either(self) -> bool:
        return self.inputs[0].is_boundary or self.inputs[1].is_boundary

    def is_known(self, index: int) -> bool:
        return self.inputs[index].is_known

    def location(self, index: int, side: str, forward: bool = True) -> Optional[Location]:
        """Area location of input ``index`` on ``side`` of a half-edge.

        Args:
            index: Input index, 0 or 1
            side: LEFT or RIGHT
            forward: True if the half-edge runs in the stored edge direction
        """
        item = self.inputs[index]
        if (side == LEFT) == forward:
            return item.left
        return item.right

    def set_location(self, index: int, location: Location) -> None:
        """Assign the same location to both sides of a non-boundary edge.

        Raises:
            TopologyInconsistency: If the edge already has a different location
        """
        item = self.inputs[index]
        if item.is_boundary:
            raise TopologyInconsistency("Cannot overwrite the side locations of a boundary edge")
        if item.is_known and item.left != location:
            raise TopologyInconsistency(
                f"Conflicting locations {item.left.value} and {location.value} for input {index}"
            )
        item.left = location
        item.right = location

    def __str__(self) -> str:
        parts = []
        for index, item in enumerate(self.inputs):
            parts.append(f"{'AB'[index]}:{item.role.value}[{_abbrev(item.left)}/{_abbrev(item.right)}]")
        return ' '.join(parts)


def _abbrev(location: Optional[Location]) -> str:
    return '-' if location is None else location.value[0].upper()


__all__ = [
    'LEFT',
    'RIGHT',
    'InputLabel',
    'OverlayLabel',
]
