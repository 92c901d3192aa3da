"""
Module: slicer.geometry

Purpose:
    Convert normalized grid lines into pixel crop rectangles. A cell's
    band runs from the end of one boundary to the start of the next, so
    gutters are excluded from every tile.

Key Functions:
    - band_ranges(): Percentage bands for one axis
    - iter_cells(): Every cell in row-major order, with skipped cells
    - compute_crop_rects(): Rectangles for the non-empty cells only

Used By:
    - slicer.controller: Slicing pass
    - gridslice.cli
"""

from __future__ import annotations

from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from gridslice.core.models import Boundary, CropRect, GridLines


class Cell(NamedTuple):
    """One attempted cell; ``rect`` is None when its area is empty."""

    index: int
    row: int
    col: int
    rect: Optional[CropRect]


def band_ranges(boundaries: Sequence[Boundary]) -> List[Tuple[float, float]]:
    """
    Percentage bands between adjacent boundaries.

    Band ``i`` spans ``boundaries[i].end`` to ``boundaries[i + 1].start``.
    An inverted or overlapping pair gives a band whose end precedes its
    start.
    """
    return [
        (boundaries[i].end, boundaries[i + 1].start)
        for i in range(len(boundaries) - 1)
    ]


def iter_cells(
    grid_lines: GridLines,
    image_width: int,
    image_height: int,
) -> Iterator[Cell]:
    """
    Yield every cell of the grid in row-major order.

    Each cell consumes one index whether or not it has area, so indices
    of the non-empty cells may have gaps.

    Args:
        grid_lines: Boundary set to slice with
        image_width: Source width in pixels
        image_height: Source height in pixels

    Raises:
        ValueError: If either dimension is not positive
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"image dimensions must be positive: {image_width}x{image_height}")

    row_bands = band_ranges(grid_lines.horizontal)
    col_bands = band_ranges(grid_lines.vertical)

    index = 0
    for row, (top_pct, bottom_pct) in enumerate(row_bands):
        for col, (left_pct, right_pct) in enumerate(col_bands):
            x_start = (left_pct / 100) * image_width
            x_end = (right_pct / 100) * image_width
            y_start = (top_pct / 100) * image_height
            y_end = (bottom_pct / 100) * image_height

            width = max(0.0, x_end - x_start)
            height = max(0.0, y_end - y_start)

            rect = None
            if width > 0 and height > 0:
                rect = CropRect(x_start, y_start, width, height, row, col)
            yield Cell(index, row, col, rect)
            index += 1


def compute_crop_rects(
    grid_lines: GridLines,
    image_width: int,
    image_height: int,
) -> List[CropRect]:
    """
    Crop rectangles for all non-empty cells, in row-major order.

    Example:
        >>> rects = compute_crop_rects(create_grid_lines(GridConfig(3, 3)), 300, 300)
        >>> len(rects)
        9
    """
    return [
        cell.rect
        for cell in iter_cells(grid_lines, image_width, image_height)
        if cell.rect is not None
    ]
