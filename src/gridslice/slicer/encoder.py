"""
Module: slicer.encoder

Purpose:
    Resample one crop rectangle to a resolution-capped size and encode it
    to the configured raster format. Encoding failures are absorbed: the
    caller receives None and the tile is dropped.

Key Classes:
    - TileEncoder: Encoder bound to one source image and SliceConfig

Key Functions:
    - compute_target_size(): Capped, aspect-preserving output size
    - encode_tile(): One-shot encode of a single crop rectangle

Dependencies:
    - PIL: Resampling and encoding

Used By:
    - slicer.controller: Slicing pass

Rounding:
    Target sizes are computed in real arithmetic and rounded half-up to
    whole pixels, never below 1 px. The source box stays fractional.
"""

from __future__ import annotations

import logging
import math
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, features

from gridslice.core.models import CropRect, OutputFormat, SliceConfig

logger = logging.getLogger(__name__)

RESAMPLE = Image.Resampling.LANCZOS


def scale_to_fit(width: float, height: float, max_dimension: int) -> Tuple[float, float]:
    """
    Scale (width, height) down so neither edge exceeds max_dimension.

    Sizes already within the cap are returned unchanged. Both edges are
    multiplied by the same ratio, so aspect ratio is kept exactly.
    """
    if width > max_dimension or height > max_dimension:
        ratio = min(max_dimension / width, max_dimension / height)
        return width * ratio, height * ratio
    return width, height


def _round_half_up(value: float) -> int:
    return max(1, math.floor(value + 0.5))


def compute_target_size(width: float, height: float, max_dimension: int) -> Tuple[int, int]:
    """
    Output pixel size for a crop of (width, height).

    Example:
        >>> compute_target_size(5000, 2500, 4096)
        (4096, 2048)
    """
    target_w, target_h = scale_to_fit(width, height, max_dimension)
    return _round_half_up(target_w), _round_half_up(target_h)


def prepare_source(image: Image.Image) -> Image.Image:
    """
    Normalize a decoded image to RGB or RGBA.

    Palette and low bit-depth images would otherwise be resampled with
    nearest neighbour.
    """
    if image.mode in ("RGB", "RGBA"):
        return image
    if "A" in image.getbands() or "transparency" in image.info:
        return image.convert("RGBA")
    return image.convert("RGB")


def format_available(output_format: OutputFormat) -> bool:
    """Check the Pillow build can write this format."""
    if output_format is OutputFormat.WEBP:
        return bool(features.check("webp"))
    return True


def render_tile(source: Image.Image, rect: CropRect, size: Tuple[int, int]) -> Image.Image:
    """Resample the fractional source box of ``rect`` to ``size``."""
    left, top, right, bottom = rect.as_box()
    # Float error can push the far edge a hair past the image
    box = (left, top, min(right, source.width), min(bottom, source.height))
    return source.resize(size, RESAMPLE, box=box)


def encode_image(tile: Image.Image, config: SliceConfig) -> bytes:
    """
    Encode a rendered tile.

    Raises:
        OSError: If the encoder fails
        KeyError: If the format is not registered
    """
    fmt = config.output_format
    if fmt is OutputFormat.JPEG and tile.mode != "RGB":
        if tile.mode == "RGBA":
            # JPEG has no alpha; flatten onto white
            background = Image.new("RGBA", tile.size, (255, 255, 255, 255))
            tile = Image.alpha_composite(background, tile)
        tile = tile.convert("RGB")

    params = {}
    if fmt.is_lossy:
        params["quality"] = config.encoder_quality

    buffer = BytesIO()
    tile.save(buffer, format=fmt.pil_format, **params)
    return buffer.getvalue()


class TileEncoder:
    """
    Encoder for all tiles of one slicing pass.

    The source is normalized once. Each call renders into a new image, so
    nothing is shared between tiles.
    """

    def __init__(self, image: Image.Image, config: SliceConfig):
        self.source = prepare_source(image)
        self.config = config
        self._available = format_available(config.output_format)
        if not self._available:
            logger.warning(
                f"{config.output_format.pil_format} encoding unavailable in this Pillow build"
            )

    def target_size(self, rect: CropRect) -> Tuple[int, int]:
        return compute_target_size(rect.width, rect.height, self.config.max_dimension)

    def encode(self, rect: CropRect) -> Optional[bytes]:
        """
        Encode one crop rectangle.

        Returns:
            Encoded bytes, or None if the tile could not be produced
        """
        if not self._available:
            return None
        try:
            tile = render_tile(self.source, rect, self.target_size(rect))
            payload = encode_image(tile, self.config)
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Failed to encode tile r{rect.row} c{rect.col}: {e}")
            return None
        if not payload:
            logger.warning(f"Encoder produced no data for tile r{rect.row} c{rect.col}")
            return None
        return payload


def encode_tile(image: Image.Image, rect: CropRect, config: SliceConfig) -> Optional[bytes]:
    """
    Encode a single crop rectangle of ``image``.

    Returns:
        Encoded bytes, or None on encoder failure
    """
    return TileEncoder(image, config).encode(rect)
