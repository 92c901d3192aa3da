"""
Module: slicer.boundaries

Purpose:
    Default grid boundaries for a fresh image or grid shape. Outer
    margins are fixed; inner gutters are 2 units wide and centered on
    evenly spaced grid lines.

Key Functions:
    - generate_boundaries(): Boundaries for one axis
    - create_grid_lines(): Boundaries for both axes of a GridConfig

Used By:
    - slicer.session: Reset on image or grid change
    - gui.main_window
"""

from __future__ import annotations

from typing import Tuple

from gridslice.core.models import Boundary, GridConfig, GridLines

OUTER_MARGIN = 1.5
GUTTER_HALF_WIDTH = 1.0


def generate_boundaries(count: int) -> Tuple[Boundary, ...]:
    """
    Generate default boundaries for ``count`` cells along one axis.

    Args:
        count: Number of cells (>= 1)

    Returns:
        ``count + 1`` boundaries ordered top/left to bottom/right

    Raises:
        ValueError: If count < 1

    Example:
        >>> generate_boundaries(2)
        (Boundary(start=0.0, end=1.5), Boundary(start=49.0, end=51.0), Boundary(start=98.5, end=100.0))
    """
    if count < 1:
        raise ValueError(f"count must be >= 1: {count}")

    step = 100 / count
    boundaries = []
    for i in range(count + 1):
        if i == 0:
            boundaries.append(Boundary(0.0, OUTER_MARGIN))
        elif i == count:
            boundaries.append(Boundary(100.0 - OUTER_MARGIN, 100.0))
        else:
            center = i * step
            boundaries.append(Boundary(center - GUTTER_HALF_WIDTH, center + GUTTER_HALF_WIDTH))
    return tuple(boundaries)


def create_grid_lines(config: GridConfig) -> GridLines:
    """Build default grid lines: rows drive horizontal, cols drive vertical."""
    return GridLines(
        horizontal=generate_boundaries(config.rows),
        vertical=generate_boundaries(config.cols),
    )
