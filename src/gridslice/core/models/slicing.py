"""
Module: slicing

Purpose:
    Settings and result types for a slicing pass: the output format and
    quality, pixel crop rectangles, and the encoded tile records handed
    to preview and export.

Key Classes:
    - OutputFormat: WebP / JPEG / PNG with their encoder metadata
    - SliceConfig: Quality, resolution policy and format
    - CropRect: Real-valued pixel rectangle for one cell
    - SliceResult: One encoded tile with its grid position

Dependencies:
    - base64 (std)
    - dataclasses (std)

Used By:
    - slicer.geometry
    - slicer.encoder
    - slicer.results
    - slicer.output.zip_writer
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum

# Quality bounds exposed by the compression slider
MIN_QUALITY = 0.05
MAX_QUALITY = 0.9
DEFAULT_QUALITY = 0.6

# Longest tile edge for each resolution policy
OPTIMIZED_MAX_DIMENSION = 1080
FULL_MAX_DIMENSION = 4096


class OutputFormat(Enum):
    """Raster formats a tile can be encoded to."""

    WEBP = "webp"  # lossy-A
    JPEG = "jpeg"  # lossy-B
    PNG = "png"    # lossless

    @property
    def pil_format(self) -> str:
        """Format name passed to ``Image.save``."""
        return self.value.upper()

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @property
    def extension(self) -> str:
        return "jpg" if self is OutputFormat.JPEG else self.value

    @property
    def is_lossy(self) -> bool:
        return self is not OutputFormat.PNG

    @classmethod
    def from_mime_type(cls, mime_type: str) -> OutputFormat:
        """
        Resolve a MIME type such as 'image/webp'.

        Raises:
            ValueError: If the MIME type is not an output format
        """
        for fmt in cls:
            if fmt.mime_type == mime_type:
                return fmt
        raise ValueError(f"Unsupported MIME type: {mime_type!r}")


@dataclass(frozen=True)
class SliceConfig:
    """
    Encoding settings for a slicing pass (immutable).

    Attributes:
        quality: Lossy quality factor in [0.05, 0.9]; ignored for PNG
        optimize_resolution: Cap tiles at 1080 px instead of 4096 px
        output_format: Encoded raster format

    Example:
        >>> SliceConfig(quality=0.8).max_dimension
        1080
    """

    quality: float = DEFAULT_QUALITY
    optimize_resolution: bool = True
    output_format: OutputFormat = OutputFormat.WEBP

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not MIN_QUALITY <= self.quality <= MAX_QUALITY:
            raise ValueError(
                f"quality must be within [{MIN_QUALITY}, {MAX_QUALITY}]: {self.quality}"
            )

    @property
    def max_dimension(self) -> int:
        """Longest allowed output edge in pixels."""
        return OPTIMIZED_MAX_DIMENSION if self.optimize_resolution else FULL_MAX_DIMENSION

    @property
    def encoder_quality(self) -> int:
        """Quality on Pillow's 0-100 scale."""
        return int(round(self.quality * 100))

    @property
    def compression_level(self) -> int:
        """Compression level shown to users, as a percentage."""
        return int(round((1 - self.quality) * 100))


@dataclass(frozen=True, slots=True)
class CropRect:
    """
    Source region for one grid cell, in real-valued pixels.

    Coordinates are not rounded: the resampler reads fractional
    source boxes directly.

    Attributes:
        x: Left edge in source pixels
        y: Top edge in source pixels
        width: Region width (> 0)
        height: Region height (> 0)
        row: Grid row of the cell
        col: Grid column of the cell
    """

    x: float
    y: float
    width: float
    height: float
    row: int
    col: int

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def as_box(self) -> tuple[float, float, float, float]:
        """Get as (left, top, right, bottom) tuple for PIL."""
        return (self.x, self.y, self.right, self.bottom)


@dataclass(frozen=True, slots=True)
class SliceResult:
    """
    One encoded tile.

    Attributes:
        data_url: Encoded payload as a base64 data URL
        index: Row-major position among all attempted cells (may have gaps)
        row: Grid row
        col: Grid column
    """

    data_url: str
    index: int
    row: int
    col: int

    @classmethod
    def from_payload(
        cls,
        payload: bytes,
        output_format: OutputFormat,
        *,
        index: int,
        row: int,
        col: int,
    ) -> SliceResult:
        """Wrap encoded bytes as a data URL record."""
        encoded = base64.b64encode(payload).decode("ascii")
        return cls(
            data_url=f"data:{output_format.mime_type};base64,{encoded}",
            index=index,
            row=row,
            col=col,
        )

    @property
    def mime_type(self) -> str:
        header = self.data_url.split(",", 1)[0]
        return header[len("data:"):].split(";", 1)[0]

    @property
    def output_format(self) -> OutputFormat:
        return OutputFormat.from_mime_type(self.mime_type)

    @property
    def extension(self) -> str:
        return self.output_format.extension

    @property
    def encoded_data(self) -> str:
        """Base64 text after the data URL header."""
        return self.data_url.split(",", 1)[1]

    @property
    def payload(self) -> bytes:
        """Decoded tile bytes."""
        return base64.b64decode(self.encoded_data)

    @property
    def size_bytes(self) -> int:
        """Decoded payload size, derived from the base64 length."""
        data = self.encoded_data
        padding = len(data) - len(data.rstrip("="))
        return len(data) * 3 // 4 - padding

    @property
    def filename(self) -> str:
        """Download name for this tile on its own (1-based index)."""
        return f"slice_{self.index + 1}.{self.extension}"
