"""Coordinates and envelopes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np

XY = Tuple[float, float]


@total_ordering
@dataclass(frozen=True)
class Coordinate:
    """A planar coordinate with an optional measure.

    Equality and ordering are exact on the stored values: ``x`` first, then
    ``y``, then the measure (coordinates without a measure sort first).

    Examples:
        >>> Coordinate(1, 2) < Coordinate(1, 3)
        True
        >>> Coordinate(1, 2) == Coordinate(1.0, 2.0)
        True
    """
    x: float
    y: float
    m: Optional[float] = None

    @property
    def xy(self) -> XY:
        return (self.x, self.y)

    def is_finite(self) -> bool:
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            return False
        return self.m is None or math.isfinite(self.m)

    def distance(self, other: "Coordinate") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def _key(self) -> Tuple[float, float, bool, float]:
        return (self.x, self.y, self.m is not None, 0.0 if self.m is None else self.m)

    def __lt__(self, other: "Coordinate") -> bool:
        if not isinstance(other, Coordinate):
            return NotImplemented
        return self._key() < other._key()

    def __repr__(self) -> str:
        if self.m is None:
            return f"Coordinate({self.x!r}, {self.y!r})"
        return f"Coordinate({self.x!r}, {self.y!r}, m={self.m!r})"


CoordinateLike = Union[Coordinate, Sequence[float]]


def as_coordinate(value: CoordinateLike) -> Coordinate:
    """Coerce a Coordinate or an ``(x, y[, m])`` sequence into a Coordinate."""
    if isinstance(value, Coordinate):
        return value
    if len(value) == 2:
        return Coordinate(float(value[0]), float(value[1]))
    if len(value) == 3:
        return Coordinate(float(value[0]), float(value[1]), float(value[2]))
    raise ValueError(f"Coordinate needs 2 or 3 values, got {len(value)}")


def as_coordinates(values: Iterable[CoordinateLike]) -> Tuple[Coordinate, ...]:
    return tuple(as_coordinate(v) for v in values)


@dataclass(frozen=True)
class Envelope:
    """Axis-aligned bounding box.

    The default envelope is null (it contains nothing). Envelopes are built
    once with :meth:`of` and never change; :meth:`expand_to_include` returns a
    new envelope.

    Examples:
        >>> env = Envelope.of([(0, 0), (2, 1)])
        >>> env.width, env.height
        (2.0, 1.0)
        >>> env.intersects(Envelope.of([(1, 1), (3, 3)]))
        True
    """
    minx: float = math.inf
    miny: float = math.inf
    maxx: float = -math.inf
    maxy: float = -math.inf

    @classmethod
    def of(cls, coords: Iterable) -> "Envelope":
        """Envelope of a set of Coordinates or ``(x, y)`` tuples."""
        points = [c.xy if isinstance(c, Coordinate) else (c[0], c[1]) for c in coords]
        if not points:
            return cls()
        arr = np.asarray(points, dtype=float)
        lo = arr.min(axis=0)
        hi = arr.max(axis=0)
        return cls(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))

    @property
    def is_null(self) -> bool:
        return self.minx > self.maxx

    @property
    def width(self) -> float:
        return 0.0 if self.is_null else self.maxx - self.minx

    @property
    def height(self) -> float:
        return 0.0 if self.is_null else self.maxy - self.miny

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def max_abs_ordinate(self) -> float:
        if self.is_null:
            return 0.0
        return max(abs(self.minx), abs(self.miny), abs(self.maxx), abs(self.maxy))

    def intersects(self, other: "Envelope") -> bool:
        if self.is_null or other.is_null:
            return False
        return not (
            other.minx > self.maxx
            or other.maxx < self.minx
            or other.miny > self.maxy
            or other.maxy < self.miny
        )

    def contains(self, other: "Envelope") -> bool:
        """True if ``other`` lies inside this envelope (boundary included)."""
        if self.is_null or other.is_null:
            return False
        return (
            other.minx >= self.minx
            and other.maxx <= self.maxx
            and other.miny >= self.miny
            and other.maxy <= self.maxy
        )

    def covers_point(self, xy: XY) -> bool:
        if self.is_null:
            return False
        return self.minx <= xy[0] <= self.maxx and self.miny <= xy[1] <= self.maxy

    def expand_to_include(self, other: Union["Envelope", XY]) -> "Envelope":
        if isinstance(other, Envelope):
            if other.is_null:
                return self
            if self.is_null:
                return other
            return Envelope(
                min(self.minx, other.minx),
                min(self.miny, other.miny),
                max(self.maxx, other.maxx),
                max(self.maxy, other.maxy),
            )
        x, y = other[0], other[1]
        if self.is_null:
            return Envelope(x, y, x, y)
        return Envelope(min(self.minx, x), min(self.miny, y), max(self.maxx, x), max(self.maxy, y))

    def intersection(self, other: "Envelope") -> "Envelope":
        if not self.intersects(other):
            return Envelope()
        return Envelope(
            max(self.minx, other.minx),
            max(self.miny, other.miny),
            min(self.maxx, other.maxx),
            min(self.maxy, other.maxy),
        )


__all__ = [
    'XY',
    'Coordinate',
    'CoordinateLike',
    'as_coordinate',
    'as_coordinates',
    'Envelope',
]
