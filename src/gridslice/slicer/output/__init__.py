"""
Module: slicer.output

Purpose:
    Export of encoded tiles as ZIP archives or individual files.

Key Functions:
    - write_slices_zip(): Archive all tiles
    - write_slice_file(): Save one tile

Dependencies:
    - zipfile (std)
"""

from .zip_writer import ExportError, build_slices_zip, write_slice_file, write_slices_zip

__all__ = [
    "ExportError",
    "build_slices_zip",
    "write_slice_file",
    "write_slices_zip",
]
