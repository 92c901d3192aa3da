"""
Command-line slicing with the default grid for a preset.

Usage:
    gridslice slice photo.jpg --preset 3x3 --quality 0.6 -o tiles.zip
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PIL import Image

from gridslice import __version__
from gridslice.core.models import (
    GRID_PRESETS,
    MAX_QUALITY,
    MIN_QUALITY,
    GridConfig,
    OutputFormat,
    SliceConfig,
)
from gridslice.slicer import SliceError, create_grid_lines, slice_image
from gridslice.slicer.output import ExportError, write_slices_zip

logger = logging.getLogger("gridslice.cli")

FORMAT_CHOICES = {
    "webp": OutputFormat.WEBP,
    "jpeg": OutputFormat.JPEG,
    "png": OutputFormat.PNG,
}


def _quality(value: str) -> float:
    try:
        quality = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid quality: {value!r}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise argparse.ArgumentTypeError(
            f"quality must be between {MIN_QUALITY} and {MAX_QUALITY}"
        )
    return quality


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError("count must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridslice",
        description="Split an image into grid tiles and export them as a ZIP archive.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    slice_parser = subparsers.add_parser("slice", help="Slice an image with the default grid")
    slice_parser.add_argument("image", type=Path, help="Image file to slice")
    slice_parser.add_argument("--preset", choices=sorted(GRID_PRESETS), help="Grid preset")
    slice_parser.add_argument("--rows", type=_positive_int, help="Number of rows (default 3)")
    slice_parser.add_argument("--cols", type=_positive_int, help="Number of columns (default 3)")
    slice_parser.add_argument(
        "--quality", "-q", type=_quality, default=SliceConfig().quality,
        help="Encoder quality between 0.05 and 0.9 (default: %(default)s)",
    )
    slice_parser.add_argument(
        "--no-optimize", action="store_true",
        help="Allow tiles up to 4096px instead of 1080px",
    )
    slice_parser.add_argument(
        "--format", "-f", dest="output_format", choices=sorted(FORMAT_CHOICES), default="webp",
        help="Tile format (default: %(default)s)",
    )
    slice_parser.add_argument("--output", "-o", type=Path, help="ZIP path or directory")
    slice_parser.add_argument("--verbose", "-v", action="store_true", help="Log every tile")
    return parser


def _grid_config(args: argparse.Namespace) -> GridConfig:
    if args.preset:
        config = GridConfig.from_preset(args.preset)
        return GridConfig(rows=args.rows or config.rows, cols=args.cols or config.cols)
    defaults = GridConfig()
    return GridConfig(rows=args.rows or defaults.rows, cols=args.cols or defaults.cols)


def run_slice(args: argparse.Namespace) -> int:
    grid_config = _grid_config(args)
    slice_config = SliceConfig(
        quality=args.quality,
        optimize_resolution=not args.no_optimize,
        output_format=FORMAT_CHOICES[args.output_format],
    )

    try:
        with Image.open(args.image) as opened:
            opened.load()
            image = opened.copy()
    except (OSError, Image.DecompressionBombError) as e:
        logger.error(f"Could not open {args.image}: {e}")
        return 1

    logger.info(f"Slicing {args.image.name} as {grid_config.label} grid")
    try:
        results = slice_image(image, create_grid_lines(grid_config), slice_config)
    except SliceError as e:
        logger.error(str(e))
        return 1

    if args.output is None:
        output_path, directory = None, args.image.parent
    elif args.output.is_dir():
        output_path, directory = None, args.output
    else:
        output_path, directory = args.output, None

    try:
        path = write_slices_zip(results, output_path, directory=directory)
    except ExportError as e:
        logger.error(str(e))
        return 1

    logger.info(results.summary())
    print(path)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )

    if args.command == "slice":
        return run_slice(args)
    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
