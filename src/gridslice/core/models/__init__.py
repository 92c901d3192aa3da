"""
Core Models Package

Immutable, validated data models shared by the editor, the slicer and the
GUI. All models are frozen dataclasses: edits produce new values, so a
slicing pass can read a GridLines snapshot while the editor keeps working.
"""

from .boundaries import GRID_PRESETS, Axis, Boundary, GridConfig, GridLines, Side
from .slicing import (
    FULL_MAX_DIMENSION,
    MAX_QUALITY,
    MIN_QUALITY,
    OPTIMIZED_MAX_DIMENSION,
    CropRect,
    OutputFormat,
    SliceConfig,
    SliceResult,
)

__all__ = [
    "Axis",
    "Boundary",
    "CropRect",
    "FULL_MAX_DIMENSION",
    "GRID_PRESETS",
    "GridConfig",
    "GridLines",
    "MAX_QUALITY",
    "MIN_QUALITY",
    "OPTIMIZED_MAX_DIMENSION",
    "OutputFormat",
    "Side",
    "SliceConfig",
    "SliceResult",
]
