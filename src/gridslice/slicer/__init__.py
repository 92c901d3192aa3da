"""
Module: slicer

Purpose:
    The slicing engine: default boundaries, crop geometry, tile
    encoding, result aggregation and the editing session around them.

Key Functions:
    - generate_boundaries() / create_grid_lines(): Default grids
    - compute_crop_rects(): Pixel rectangles for each cell
    - encode_tile(): Resample and encode one rectangle
    - slice_image(): Full slicing pass

Key Classes:
    - ResultCollection: Tiles of one pass
    - EditorSession: NO_IMAGE / EDITING / SLICING state machine

Dependencies:
    - PIL: Image resampling and encoding
"""

from .boundaries import create_grid_lines, generate_boundaries
from .controller import SliceError, slice_image
from .encoder import TileEncoder, compute_target_size, encode_tile
from .geometry import compute_crop_rects, iter_cells
from .results import ResultCollection, format_size
from .session import EditorSession, SessionState, SessionStateError, needs_regeneration

__all__ = [
    "EditorSession",
    "ResultCollection",
    "SessionState",
    "SessionStateError",
    "SliceError",
    "TileEncoder",
    "compute_crop_rects",
    "compute_target_size",
    "create_grid_lines",
    "encode_tile",
    "format_size",
    "generate_boundaries",
    "iter_cells",
    "needs_regeneration",
    "slice_image",
]
