"""Overlayforge - Robust planar overlay engine.

This library computes boolean set operations (intersection, union,
difference, symmetric difference) between planar geometries by noding their
edges, building a half-edge topology graph, labeling it and extracting the
result.
"""


# Overlay operations
from .overlay import (
    overlay,
    intersection,
    union,
    difference,
    symmetric_difference,
    unary_union,
)

# Geometry model
from .geometry import (
    Coordinate,
    Envelope,
    Geometry,
    Point,
    LineString,
    LinearRing,
    Polygon,
    GeometryCollection,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    empty_geometry,
    locate_point,
)

# Validation
from .validation import (
    check_geometry,
    is_valid,
    explain_validity,
    diagnose_geometry,
)

# Shapely interoperability
from .interop import from_shapely, to_shapely, from_wkt, to_wkt

# Core types (enums)
from .core import (
    OverlayOp,
    Location,
    Orientation,
    PrecisionType,
    EdgeRole,
)

# Configuration and precision
from .core import OverlayConfig, PrecisionModel

# Core exceptions
from .core import (
    OverlayforgeError,
    InvalidInputGeometry,
    NodingFailure,
    TopologyInconsistency,
    UnsupportedOperation,
    PrecisionCoarsenedWarning,
)

__all__ = [

    # Overlay operations
    'overlay',
    'intersection',
    'union',
    'difference',
    'symmetric_difference',
    'unary_union',

    # Geometry model
    'Coordinate',
    'Envelope',
    'Geometry',
    'Point',
    'LineString',
    'LinearRing',
    'Polygon',
    'GeometryCollection',
    'MultiPoint',
    'MultiLineString',
    'MultiPolygon',
    'empty_geometry',
    'locate_point',

    # Validation
    'check_geometry',
    'is_valid',
    'explain_validity',
    'diagnose_geometry',

    # Shapely interoperability
    'from_shapely',
    'to_shapely',
    'from_wkt',
    'to_wkt',

    # Core types (enums)
    'OverlayOp',
    'Location',
    'Orientation',
    'PrecisionType',
    'EdgeRole',

    # Configuration and precision
    'OverlayConfig',
    'PrecisionModel',

    # Core exceptions
    'OverlayforgeError',
    'InvalidInputGeometry',
    'NodingFailure',
    'TopologyInconsistency',
    'UnsupportedOperation',
    'PrecisionCoarsenedWarning',
]
