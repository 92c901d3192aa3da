"""
Module: slicer.results

Purpose:
    The ordered tile list produced by one slicing pass, with the size
    figures and naming used by preview and export.

Key Classes:
    - ResultCollection: Encoded tiles in row-major order

Key Functions:
    - format_size(): Human readable byte counts
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from gridslice.core.models import SliceResult

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_size(num_bytes: int) -> str:
    """
    Format a byte count with one decimal, e.g. '12.3 KB'.

    Example:
        >>> format_size(1536)
        '1.5 KB'
    """
    if num_bytes <= 0:
        return "0 B"
    exponent = 0
    while num_bytes >= 1024 ** (exponent + 1) and exponent < len(_SIZE_UNITS) - 1:
        exponent += 1
    value = round(num_bytes / 1024 ** exponent, 1)
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[exponent]}"


@dataclass(frozen=True)
class ResultCollection:
    """
    Tiles from one slicing pass (immutable).

    Tiles keep the index of their cell among all attempted cells, so
    skipped or dropped cells leave gaps. A new pass replaces the whole
    collection.

    Attributes:
        slices: Successfully encoded tiles in row-major order
        expected_count: Number of cells attempted (rows * cols)
        rows: Grid rows of the pass
        cols: Grid columns of the pass
    """

    slices: Tuple[SliceResult, ...] = ()
    expected_count: int = 0
    rows: int = 0
    cols: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "slices", tuple(self.slices))
        if len(self.slices) > self.expected_count:
            raise ValueError(
                f"more slices than attempted cells: {len(self.slices)} > {self.expected_count}"
            )

    def __len__(self) -> int:
        return len(self.slices)

    def __iter__(self) -> Iterator[SliceResult]:
        return iter(self.slices)

    def __getitem__(self, position: int) -> SliceResult:
        return self.slices[position]

    def __bool__(self) -> bool:
        return bool(self.slices)

    @property
    def indices(self) -> List[int]:
        return [s.index for s in self.slices]

    @property
    def dropped_count(self) -> int:
        """Cells that produced no tile (empty area or encode failure)."""
        return self.expected_count - len(self.slices)

    @property
    def sizes(self) -> List[int]:
        """Per-tile payload size in bytes."""
        return [s.size_bytes for s in self.slices]

    @property
    def total_size(self) -> int:
        return sum(self.sizes)

    @property
    def archive_name(self) -> str:
        return f"grid_slices_{len(self.slices)}_tiles.zip"

    def archive_entries(self) -> Iterator[Tuple[str, SliceResult]]:
        """Yield (entry name, tile), named by 1-based position in the collection."""
        for position, result in enumerate(self.slices, start=1):
            yield f"slice_{position}.{result.extension}", result

    def summary(self) -> str:
        return (
            f"{len(self.slices)} tiles ({format_size(self.total_size)}), "
            f"{self.dropped_count} of {self.expected_count} cells skipped"
        )
