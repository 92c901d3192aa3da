"""Top-level package for GridSlice.

Provides subpackages:
- gridslice.core – immutable models (boundaries, grid lines, slice settings)
- gridslice.slicer – boundary generation, geometry, tile encoding, export
- gridslice.editor – pointer-drag protocol for editing boundaries
- gridslice.gui – PySide6 app
"""

def _project_version(pyproject) -> str | None:
    """Read ``version`` from the [project] table of a pyproject.toml."""
    in_project = False
    for raw in pyproject.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if line.startswith("["):
            in_project = line == "[project]"
        elif in_project and line.startswith("version") and "=" in line:
            return line.split("=", 1)[1].strip().strip('"').strip("'")
    return None


def _get_version() -> str:
    """Version from a source checkout's pyproject.toml, else the installed metadata."""
    import sys
    from importlib.metadata import PackageNotFoundError, version
    from pathlib import Path

    if getattr(sys, "frozen", False):
        root = Path(getattr(sys, "_MEIPASS", "."))
    else:
        root = Path(__file__).resolve().parents[2]

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        try:
            found = _project_version(pyproject)
        except OSError:
            found = None
        if found:
            return found

    try:
        return version("gridslice")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
__copyright__ = "Copyright 2026 GridSlice contributors. Licensed under the MIT License."
__all__: list[str] = ["__version__", "__copyright__"]
