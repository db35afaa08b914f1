"""Core types and utilities for overlayforge.

This module provides type definitions, enums, exceptions, configuration, the
precision model and the robust predicates used throughout the library.
"""

from .types import (
    OverlayOp,
    Location,
    Orientation,
    PrecisionType,
    EdgeRole,
)

from .errors import (
    OverlayforgeError,
    InvalidInputGeometry,
    NodingFailure,
    TopologyInconsistency,
    UnsupportedOperation,
    PrecisionCoarsenedWarning,
)

from .config import OverlayConfig, DEFAULT_CONFIG
from .precision import PrecisionModel, FLOATING

__all__ = [
    # Enums
    'OverlayOp',
    'Location',
    'Orientation',
    'PrecisionType',
    'EdgeRole',

    # Exceptions and warnings
    'OverlayforgeError',
    'InvalidInputGeometry',
    'NodingFailure',
    'TopologyInconsistency',
    'UnsupportedOperation',
    'PrecisionCoarsenedWarning',

    # Configuration
    'OverlayConfig',
    'DEFAULT_CONFIG',
    'PrecisionModel',
    'FLOATING',
]
