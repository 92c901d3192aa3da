"""
Module: boundaries

Purpose:
    Provides the Boundary and GridLines dataclasses - the normalized grid
    description that the editor mutates and the slicer consumes. All
    positions are percentages of the image's corresponding axis.

Key Classes:
    - Boundary: One gutter, as a (start, end) pair of percentages
    - GridLines: Ordered horizontal and vertical boundaries
    - GridConfig: Row/column counts and the built-in presets
    - Axis / Side: Addressing a single editable edge

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - slicer.boundaries: Default boundary generation
    - slicer.geometry: Crop rectangle computation
    - editor.drag: Pointer-driven edge edits
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple


class Axis(Enum):
    """Which set of boundaries an edge belongs to."""

    HORIZONTAL = "horizontal"  # Row gutters, positioned along y
    VERTICAL = "vertical"      # Column gutters, positioned along x


class Side(Enum):
    """Which scalar of a Boundary an edge handle controls."""

    START = "start"
    END = "end"


@dataclass(frozen=True, slots=True)
class Boundary:
    """
    A gutter along one axis, in percent of that axis.

    Edges are normally within [0, 100]; the editor clamps to that range.
    Generated inner gutters for very fine grids (more than 100 cells on
    an axis) can fall just outside it, so the range is not enforced here.

    The visible band of a cell runs from one boundary's ``end`` to the
    next boundary's ``start``. No ordering is enforced between ``start``
    and ``end``: an interactive edit may leave ``start > end``, which the
    geometry later treats as an empty band.

    Attributes:
        start: Near edge of the gutter (0-100)
        end: Far edge of the gutter (0-100)

    Example:
        >>> Boundary(32.3, 34.3).width
        2.0
    """

    start: float
    end: float

    def __post_init__(self) -> None:
        """Reject non-numeric edges."""
        for name in ("start", "end"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be a finite percentage: {value}")

    @property
    def width(self) -> float:
        """Signed gutter width (negative when inverted)."""
        return self.end - self.start

    @property
    def is_inverted(self) -> bool:
        """True when ``start`` lies past ``end``."""
        return self.start > self.end

    def get(self, side: Side) -> float:
        """Return the scalar for one side."""
        return self.start if side is Side.START else self.end

    def with_side(self, side: Side, value: float) -> Boundary:
        """Return a copy with exactly one side replaced."""
        return replace(self, **{side.value: value})


@dataclass(frozen=True, slots=True)
class GridLines:
    """
    Full boundary set for one image.

    Sequence order is positional: index 0 is the top (horizontal) or
    left (vertical) outer margin, the last index is the bottom/right one.

    Attributes:
        horizontal: rows + 1 boundaries, top to bottom
        vertical: cols + 1 boundaries, left to right

    Invariants:
        - len(horizontal) >= 2
        - len(vertical) >= 2
    """

    horizontal: Tuple[Boundary, ...]
    vertical: Tuple[Boundary, ...]

    def __post_init__(self) -> None:
        """Coerce sequences to tuples and validate counts."""
        object.__setattr__(self, "horizontal", tuple(self.horizontal))
        object.__setattr__(self, "vertical", tuple(self.vertical))
        if len(self.horizontal) < 2:
            raise ValueError(f"need at least 2 horizontal boundaries: {len(self.horizontal)}")
        if len(self.vertical) < 2:
            raise ValueError(f"need at least 2 vertical boundaries: {len(self.vertical)}")

    @property
    def rows(self) -> int:
        return len(self.horizontal) - 1

    @property
    def cols(self) -> int:
        return len(self.vertical) - 1

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    def boundaries(self, axis: Axis) -> Tuple[Boundary, ...]:
        """Return the boundaries for one axis."""
        return self.horizontal if axis is Axis.HORIZONTAL else self.vertical

    def with_edge(self, axis: Axis, index: int, side: Side, value: float) -> GridLines:
        """
        Return new grid lines with a single edge moved.

        Only ``side`` of boundary ``index`` on ``axis`` changes; every other
        boundary, and the other side of the same boundary, is kept.

        Raises:
            IndexError: If index is outside the axis
        """
        current = self.boundaries(axis)
        if not 0 <= index < len(current):
            raise IndexError(f"{axis.value} boundary index out of range: {index}")
        updated = current[:index] + (current[index].with_side(side, value),) + current[index + 1:]
        if axis is Axis.HORIZONTAL:
            return replace(self, horizontal=updated)
        return replace(self, vertical=updated)

    def same_shape(self, other: GridLines) -> bool:
        """True when both describe the same number of rows and columns."""
        return self.rows == other.rows and self.cols == other.cols


@dataclass(frozen=True, slots=True)
class GridConfig:
    """
    Requested grid shape.

    Attributes:
        rows: Number of cell rows (>= 1)
        cols: Number of cell columns (>= 1)
    """

    rows: int = 3
    cols: int = 3

    def __post_init__(self) -> None:
        if self.rows < 1:
            raise ValueError(f"rows must be >= 1: {self.rows}")
        if self.cols < 1:
            raise ValueError(f"cols must be >= 1: {self.cols}")

    @property
    def label(self) -> str:
        """Short display label, e.g. '3 x 3'."""
        return f"{self.rows} x {self.cols}"

    @classmethod
    def from_preset(cls, name: str) -> GridConfig:
        """
        Look up a built-in preset.

        Raises:
            KeyError: If the preset name is unknown
        """
        return GRID_PRESETS[name]


GRID_PRESETS = {
    "3x3": GridConfig(3, 3),
    "6x6": GridConfig(6, 6),
    "5v": GridConfig(1, 5),  # Five vertical strips
}
