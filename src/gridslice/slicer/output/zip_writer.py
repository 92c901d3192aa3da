"""
Module: slicer.output.zip_writer

Purpose:
    Export encoded tiles, either all of them in one ZIP archive or a
    single tile as a file.

Key Functions:
    - write_slices_zip(): Main entry point
    - build_slices_zip(): Archive bytes in memory
    - write_slice_file(): One tile

Dependencies:
    - zipfile (std)
    - slicer.results: ResultCollection

Used By:
    - gui.widgets.slice_preview: User-initiated export
    - gridslice.cli
"""

from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union

from gridslice.core.models import SliceResult
from gridslice.slicer.results import ResultCollection, format_size

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Tiles could not be written."""
    pass


def _write_archive(results: ResultCollection, target: Union[Path, BinaryIO]) -> None:
    """Write every tile to ``target`` as slice_<position>.<ext>."""
    with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as zf:
        for arcname, result in results.archive_entries():
            zf.writestr(arcname, result.payload)


def build_slices_zip(results: ResultCollection) -> bytes:
    """
    Build the archive in memory.

    Raises:
        ExportError: If there is nothing to export or a payload is corrupt
    """
    if not results:
        raise ExportError("No slices to export")
    buffer = BytesIO()
    try:
        _write_archive(results, buffer)
    except (ValueError, zipfile.BadZipFile) as e:
        raise ExportError(f"Failed to build ZIP: {e}") from e
    return buffer.getvalue()


def write_slices_zip(
    results: ResultCollection,
    output_path: Optional[Path] = None,
    *,
    directory: Optional[Path] = None,
) -> Path:
    """
    Export all tiles as a ZIP archive.

    Creates a ZIP file with structure:
        grid_slices_9_tiles.zip
        ├── slice_1.webp
        ├── slice_2.webp
        └── ...

    Entries are numbered by position in the collection, so the archive is
    always slice_1..slice_N even when tile indices have gaps.

    Args:
        results: Tiles to export
        output_path: Path for .zip file (will append .zip if missing)
        directory: Folder for the default archive name, used when
            output_path is None (default: current directory)

    Returns:
        Path to created ZIP file

    Raises:
        ExportError: If there are no tiles or the file cannot be written
    """
    if not results:
        raise ExportError("No slices to export")

    if output_path is None:
        output_path = (directory or Path.cwd()) / results.archive_name
    elif output_path.suffix != ".zip":
        output_path = output_path.with_suffix(".zip")

    logger.info(f"Creating ZIP export at {output_path}")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        _write_archive(results, output_path)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise ExportError(f"Failed to write {output_path}: {e}") from e

    logger.info(f"Exported {len(results)} slices ({format_size(results.total_size)})")
    return output_path


def write_slice_file(result: SliceResult, directory: Path) -> Path:
    """
    Write one tile as slice_<index + 1>.<ext>.

    Raises:
        ExportError: If the file cannot be written
    """
    path = directory / result.filename
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(result.payload)
    except (OSError, ValueError) as e:
        raise ExportError(f"Failed to write {path}: {e}") from e
    return path
