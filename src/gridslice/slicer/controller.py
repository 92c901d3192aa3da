"""
Module: slicer.controller

Purpose:
    Run one slicing pass: walk the grid cells in row-major order, encode
    each non-empty cell and collect the tiles.

Key Functions:
    - slice_image(): Main entry point

Key Classes:
    - SliceError: Exception for unusable inputs

Dependencies:
    - slicer.geometry: Cell enumeration
    - slicer.encoder: Resample and encode
    - slicer.results: ResultCollection

Used By:
    - slicer.session: EditorSession.run_slicing()
    - gridslice.cli
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from PIL import Image

from gridslice.core.models import GridLines, SliceConfig, SliceResult

from .encoder import TileEncoder
from .geometry import iter_cells
from .results import ResultCollection, format_size

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class SliceError(Exception):
    """Slicing could not start."""
    pass


def slice_image(
    image: Image.Image,
    grid_lines: GridLines,
    config: SliceConfig,
    *,
    progress: Optional[ProgressCallback] = None,
) -> ResultCollection:
    """
    Slice an image into encoded tiles.

    Cells are processed strictly one after another, so each tile's index
    is its row-major position among all cells. Empty cells and tiles the
    encoder cannot produce are skipped without raising; the returned
    collection may be shorter than ``rows * cols``.

    Args:
        image: Decoded source image
        grid_lines: Boundaries to slice with (read only)
        config: Encoding settings
        progress: Optional callback, called as progress(done, total) per cell

    Returns:
        ResultCollection of the tiles produced

    Raises:
        SliceError: If there is no image or it has no pixels

    Example:
        >>> results = slice_image(img, create_grid_lines(GridConfig(3, 3)), SliceConfig())
        >>> len(results)
        9
    """
    if image is None:
        raise SliceError("No image loaded")
    width, height = image.size
    if width <= 0 or height <= 0:
        raise SliceError(f"Image has no pixels: {width}x{height}")

    total = grid_lines.cell_count
    start_time = time.perf_counter()
    logger.info(
        f"Slicing {width}x{height} image into {grid_lines.rows}x{grid_lines.cols} grid "
        f"({config.output_format.value}, quality {config.quality:.2f}, max {config.max_dimension}px)"
    )

    encoder = TileEncoder(image, config)
    slices: List[SliceResult] = []

    for cell in iter_cells(grid_lines, width, height):
        if cell.rect is None:
            logger.debug(f"Skipping empty cell r{cell.row} c{cell.col} (index {cell.index})")
        else:
            payload = encoder.encode(cell.rect)
            if payload is not None:
                slices.append(
                    SliceResult.from_payload(
                        payload,
                        config.output_format,
                        index=cell.index,
                        row=cell.row,
                        col=cell.col,
                    )
                )
        if progress is not None:
            progress(cell.index + 1, total)

    results = ResultCollection(
        slices=tuple(slices),
        expected_count=total,
        rows=grid_lines.rows,
        cols=grid_lines.cols,
    )

    duration = time.perf_counter() - start_time
    logger.info(
        f"Produced {len(results)}/{total} tiles, {format_size(results.total_size)} in {duration:.2f}s"
    )
    return results
