"""Type definitions for overlayforge operations.

This module defines the enums shared by every phase of the overlay engine.
"""

from enum import Enum


class OverlayOp(Enum):
    """Boolean set operation computed by :func:`overlayforge.overlay`.

    Attributes:
        INTERSECTION: Points in both A and B
        UNION: Points in A or B
        DIFFERENCE: Points in A and not in B
        SYMMETRIC_DIFFERENCE: Points in exactly one of A and B

    Examples:
        >>> from overlayforge import overlay, OverlayOp
        >>> result = overlay(square_a, square_b, OverlayOp.INTERSECTION)
    """
    INTERSECTION = 'intersection'
    UNION = 'union'
    DIFFERENCE = 'difference'
    SYMMETRIC_DIFFERENCE = 'symmetric_difference'


class Location(Enum):
    """Topological location of a point relative to a geometry.

    Attributes:
        INTERIOR: Inside the geometry (or on the curve, for lines)
        BOUNDARY: On the boundary of an area
        EXTERIOR: Outside the geometry
    """
    INTERIOR = 'interior'
    BOUNDARY = 'boundary'
    EXTERIOR = 'exterior'


class Orientation(Enum):
    """Orientation of an ordered point triple.

    The values match the integer index returned by
    :func:`overlayforge.core.predicates.orientation_index`.

    Attributes:
        CLOCKWISE: The third point is right of the directed line
        COLLINEAR: The three points lie on one line
        COUNTERCLOCKWISE: The third point is left of the directed line
    """
    CLOCKWISE = -1
    COLLINEAR = 0
    COUNTERCLOCKWISE = 1


class PrecisionType(Enum):
    """Kind of precision model.

    Attributes:
        FLOATING: Full double precision, coordinates are never rounded
        FIXED: Coordinates are snapped to a regular grid of ``1 / scale``
    """
    FLOATING = 'floating'
    FIXED = 'fixed'


class EdgeRole(Enum):
    """Role a noded edge plays for one input geometry.

    Attributes:
        NOT_PART: The edge does not come from this input
        LINE: The edge is part of a linear input
        BOUNDARY: The edge is part of an area boundary
        COLLAPSE: Area boundary edges that coincide with opposite orientation
    """
    NOT_PART = 'not_part'
    LINE = 'line'
    BOUNDARY = 'boundary'
    COLLAPSE = 'collapse'


__all__ = [
    'OverlayOp',
    'Location',
    'Orientation',
    'PrecisionType',
    'EdgeRole',
]
