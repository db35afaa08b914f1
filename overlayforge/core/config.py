"""Configuration for overlay calls."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OverlayConfig:
    """Settings threaded through one overlay call.

    Attributes:
        max_noding_retries: How many times noding is re-run with a coarser
            precision model after a residual crossing is found
        coarsening_factor: Factor by which the grid cell grows per retry
        initial_significant_digits: Significant digits of the first fixed grid
            used when a floating model has to be coarsened
        validate_inputs: Reject self-crossing rings before noding
        strict: Only return components of the natural result dimension
        merge_result_lines: Merge result line edges at degree-2 nodes

    Examples:
        >>> config = OverlayConfig(max_noding_retries=2, strict=True)
        >>> result = overlay(a, b, OverlayOp.INTERSECTION, config=config)
    """
    max_noding_retries: int = 4
    coarsening_factor: float = 10.0
    initial_significant_digits: int = 12
    validate_inputs: bool = True
    strict: bool = False
    merge_result_lines: bool = True

    def __post_init__(self):
        if self.max_noding_retries < 0:
            raise ValueError("max_noding_retries must be non-negative")
        if self.coarsening_factor <= 1.0:
            raise ValueError("coarsening_factor must be greater than 1")
        if not 1 <= self.initial_significant_digits <= 17:
            raise ValueError("initial_significant_digits must be between 1 and 17")


DEFAULT_CONFIG = OverlayConfig()


__all__ = [
    'OverlayConfig',
    'DEFAULT_CONFIG',
]
