"""
Module: slicer.session

Purpose:
    Editing session state as one explicit state machine, replacing
    independently toggled "has image", "is slicing" and "dirty" flags.

    NO_IMAGE --load_image--> EDITING --begin_slicing--> SLICING
    SLICING --finish_slicing / abort_slicing--> EDITING
    any state except SLICING --clear_image--> NO_IMAGE

Key Classes:
    - SessionState: The three states
    - EditorSession: Image, grid, settings and last results
    - SessionStateError: Operation not allowed in the current state

Key Functions:
    - needs_regeneration(): Pure staleness check for shown results
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from PIL import Image

from gridslice.core.models import GridConfig, GridLines, SliceConfig

from .boundaries import create_grid_lines
from .controller import ProgressCallback, slice_image
from .results import ResultCollection

logger = logging.getLogger(__name__)


class SessionState(Enum):
    NO_IMAGE = "no_image"
    EDITING = "editing"
    SLICING = "slicing"


class SessionStateError(Exception):
    """Operation is not valid in the session's current state."""
    pass


def needs_regeneration(
    current: SliceConfig,
    last_applied: Optional[SliceConfig],
) -> bool:
    """
    Whether results made with ``last_applied`` are stale for ``current``.

    Returns False when nothing has been applied yet: there are no results
    to refresh, only results to generate.
    """
    if last_applied is None:
        return False
    return current != last_applied


class EditorSession:
    """
    State of one editing session.

    Grid lines are reset whenever the image or grid shape changes; edits
    made before the reset are discarded. Results are replaced wholesale by
    each completed slicing pass.
    """

    def __init__(
        self,
        grid_config: Optional[GridConfig] = None,
        slice_config: Optional[SliceConfig] = None,
    ):
        self.grid_config = grid_config or GridConfig()
        self.slice_config = slice_config or SliceConfig()
        self._state = SessionState.NO_IMAGE
        self._image: Optional[Image.Image] = None
        self._grid_lines: Optional[GridLines] = None
        self._results = ResultCollection()
        self._last_applied: Optional[SliceConfig] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def image(self) -> Optional[Image.Image]:
        return self._image

    @property
    def grid_lines(self) -> Optional[GridLines]:
        return self._grid_lines

    @property
    def results(self) -> ResultCollection:
        return self._results

    @property
    def last_applied(self) -> Optional[SliceConfig]:
        return self._last_applied

    @property
    def is_dirty(self) -> bool:
        """True when shown results no longer match the slice settings."""
        return needs_regeneration(self.slice_config, self._last_applied)

    # ─────────────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────────────

    def _require(self, *allowed: SessionState) -> None:
        if self._state not in allowed:
            names = ", ".join(s.name for s in allowed)
            raise SessionStateError(f"Session is {self._state.name}; expected {names}")

    def _reset_grid(self) -> None:
        self._grid_lines = create_grid_lines(self.grid_config)
        self._results = ResultCollection()
        self._last_applied = None

    def load_image(self, image: Image.Image) -> None:
        """Start editing a new image with default grid lines."""
        self._require(SessionState.NO_IMAGE, SessionState.EDITING)
        self._image = image
        self._reset_grid()
        self._state = SessionState.EDITING
        logger.info(f"Loaded {image.width}x{image.height} image ({self.grid_config.label} grid)")

    def clear_image(self) -> None:
        """Drop the image, grid and results."""
        self._require(SessionState.NO_IMAGE, SessionState.EDITING)
        self._image = None
        self._grid_lines = None
        self._results = ResultCollection()
        self._last_applied = None
        self._state = SessionState.NO_IMAGE

    def set_grid_config(self, grid_config: GridConfig) -> None:
        """Change the grid shape; resets grid lines and results when editing."""
        self._require(SessionState.NO_IMAGE, SessionState.EDITING)
        self.grid_config = grid_config
        if self._state is SessionState.EDITING:
            self._reset_grid()

    def set_slice_config(self, slice_config: SliceConfig) -> None:
        self.slice_config = slice_config

    def update_grid_lines(self, grid_lines: GridLines) -> None:
        """
        Replace the grid lines after an interactive edit.

        Raises:
            SessionStateError: If not editing
            ValueError: If the grid shape changed
        """
        self._require(SessionState.EDITING)
        if not grid_lines.same_shape(self._grid_lines):
            raise ValueError(
                f"grid shape changed from {self._grid_lines.rows}x{self._grid_lines.cols} "
                f"to {grid_lines.rows}x{grid_lines.cols}"
            )
        self._grid_lines = grid_lines

    def begin_slicing(self) -> SliceConfig:
        """
        Enter SLICING and return the settings the pass should use.

        A second pass cannot start until the first finishes or aborts.
        """
        self._require(SessionState.EDITING)
        self._state = SessionState.SLICING
        return self.slice_config

    def finish_slicing(self, results: ResultCollection, applied: SliceConfig) -> None:
        self._require(SessionState.SLICING)
        self._results = results
        self._last_applied = applied
        self._state = SessionState.EDITING

    def abort_slicing(self) -> None:
        self._require(SessionState.SLICING)
        self._state = SessionState.EDITING

    def run_slicing(self, progress: Optional[ProgressCallback] = None) -> ResultCollection:
        """Run a complete slicing pass on the current image and grid."""
        applied = self.begin_slicing()
        try:
            results = slice_image(self._image, self._grid_lines, applied, progress=progress)
        except Exception:
            self.abort_slicing()
            raise
        self.finish_slicing(results, applied)
        return results
