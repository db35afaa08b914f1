"""Exception hierarchy for overlayforge.

Every overlay call either returns a geometry or raises exactly one
:class:`OverlayforgeError` subclass. No partially built geometry is ever
attached to an error.
"""

from typing import Optional, Tuple


class OverlayforgeError(Exception):
    """Base class for all overlayforge errors."""
    pass


class InvalidInputGeometry(OverlayforgeError, ValueError):
    """Raised when an input geometry cannot be overlaid.

    Attributes:
        reason: Short description of the defect
        location: Coordinate where the defect was found, if known
    """

    def __init__(self, reason: str, location: Optional[Tuple[float, float]] = None):
        self.reason = reason
        self.location = location
        message = reason if location is None else f"{reason} at {location}"
        super().__init__(message)


class NodingFailure(OverlayforgeError):
    """Raised when noding still leaves a crossing after every retry.

    Attributes:
        attempts: Number of noding passes that were run
        precision: Precision model of the last attempt
    """

    def __init__(self, message: str, attempts: int = 0, precision=None):
        self.attempts = attempts
        self.precision = precision
        super().__init__(message)


class TopologyInconsistency(OverlayforgeError):
    """Raised when the overlay graph cannot be labeled or traversed consistently."""

    def __init__(self, message: str, location: Optional[Tuple[float, float]] = None):
        self.location = location
        if location is not None:
            message = f"{message} at {location}"
        super().__init__(message)


class UnsupportedOperation(OverlayforgeError):
    """Raised for operation and input combinations the engine does not define."""
    pass


class PrecisionCoarsenedWarning(UserWarning):
    """Emitted when noding is retried with a coarser precision model."""
    pass


__all__ = [
    'OverlayforgeError',
    'InvalidInputGeometry',
    'NodingFailure',
    'TopologyInconsistency',
    'UnsupportedOperation',
    'PrecisionCoarsenedWarning',
]
