"""Precision models used to snap coordinates before noding.

A precision model decides when two coordinates are the same point. The
floating model keeps full double precision; a fixed model snaps every
ordinate to a grid of cell size ``1 / scale``. The model is passed explicitly
to every phase of an overlay call and is never stored globally.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .types import PrecisionType


@dataclass(frozen=True)
class PrecisionModel:
    """Floating or fixed-grid precision model.

    Use the :meth:`floating` and :meth:`fixed` factories rather than the
    constructor.

    Attributes:
        kind: Floating or fixed
        scale: Number of grid cells per unit (fixed models only)
        grid: Explicit grid cell size; 0 when the grid is derived from ``scale``

    Examples:
        >>> pm = PrecisionModel.fixed(100)
        >>> pm.make_precise(1.23456)
        1.23
        >>> PrecisionModel.fixed(-5).make_precise(12.0)
        10.0
    """
    kind: PrecisionType = PrecisionType.FLOATING
    scale: float = 0.0
    grid: float = 0.0

    @classmethod
    def floating(cls) -> "PrecisionModel":
        return cls(PrecisionType.FLOATING)

    @classmethod
    def fixed(cls, scale: float = 1.0) -> "PrecisionModel":
        """Create a fixed model.

        Args:
            scale: Grid cells per unit. A negative value is read as the grid
                cell size itself, which keeps grids such as 10 or 100 exact.

        Returns:
            Fixed precision model
        """
        if scale == 0 or not math.isfinite(scale):
            raise ValueError(f"Invalid precision scale: {scale}")
        if scale < 0:
            grid = abs(scale)
            return cls(PrecisionType.FIXED, 1.0 / grid, grid)
        return cls(PrecisionType.FIXED, float(scale), 0.0)

    @classmethod
    def for_magnitude(cls, max_abs: float, significant_digits: int) -> "PrecisionModel":
        """Create a fixed model keeping ``significant_digits`` for values up to ``max_abs``."""
        if max_abs <= 0 or not math.isfinite(max_abs):
            integer_digits = 1
        else:
            integer_digits = int(math.floor(math.log10(max_abs))) + 1
        exponent = significant_digits - integer_digits
        if exponent >= 0:
            return cls.fixed(10.0 ** exponent)
        return cls.fixed(-(10.0 ** -exponent))

    @property
    def is_floating(self) -> bool:
        return self.kind == PrecisionType.FLOATING

    @property
    def grid_size(self) -> float:
        """Size of one grid cell, NaN for floating models."""
        if self.is_floating:
            return math.nan
        if self.grid > 0:
            return self.grid
        return 1.0 / self.scale

    @property
    def maximum_significant_digits(self) -> int:
        if self.is_floating:
            return 16
        return 1 + int(math.ceil(math.log10(self.scale)))

    def make_precise(self, value: float) -> float:
        """Round a single ordinate to this model (half-up)."""
        if self.is_floating or math.isnan(value):
            return value
        if self.grid > 0:
            return math.floor(value / self.grid + 0.5) * self.grid
        return math.floor(value * self.scale + 0.5) / self.scale

    def make_precise_xy(self, xy: Tuple[float, float]) -> Tuple[float, float]:
        if self.is_floating:
            return xy
        return (self.make_precise(xy[0]), self.make_precise(xy[1]))

    def coarsened(
        self,
        factor: float,
        magnitude: float,
        initial_significant_digits: int = 12,
    ) -> "PrecisionModel":
        """Return the next coarser model in a noding retry sequence.

        A floating model becomes a fixed grid keeping
        ``initial_significant_digits`` digits of ``magnitude``; a fixed model
        grows its grid cell by ``factor``.
        """
        if self.is_floating:
            return PrecisionModel.for_magnitude(magnitude, initial_significant_digits)
        if self.grid > 0:
            return PrecisionModel.fixed(-(self.grid * factor))
        new_scale = self.scale / factor
        if new_scale >= 1.0:
            return PrecisionModel.fixed(new_scale)
        return PrecisionModel.fixed(-(factor / self.scale))

    def compare(self, other: "PrecisionModel") -> int:
        """Compare by significant digits: -1 if coarser than ``other``, 1 if finer."""
        mine = self.maximum_significant_digits
        theirs = other.maximum_significant_digits
        if mine == theirs:
            return 0
        return -1 if mine < theirs else 1

    def __str__(self) -> str:
        if self.is_floating:
            return "Floating"
        if self.grid > 0:
            return f"Fixed (Grid={self.grid})"
        return f"Fixed (Scale={self.scale})"


FLOATING = PrecisionModel.floating()


__all__ = [
    'PrecisionModel',
    'FLOATING',
]
