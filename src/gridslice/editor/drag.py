"""
Module: editor.drag

Purpose:
    Pointer-drag protocol for editing grid boundaries. A press on an edge
    handle captures one scalar (the start or end of one boundary); every
    pointer move overwrites only that scalar with the clamped pointer
    position; release ends the drag.

    The controller is toolkit independent. A PointerSource supplies the
    move/release listeners, which are attached only while dragging and
    detached on every exit path.

Key Classes:
    - DragTarget: Which edge is being dragged
    - SurfaceRect: Bounding box of the editing surface
    - PointerSource: Protocol for subscribing to pointer events
    - DragController: Idle/dragging state machine

Key Functions:
    - pointer_to_percent(): Pointer coordinate to clamped percentage
    - hit_test(): Nearest edge handle under a press

Used By:
    - gui.widgets.grid_editor: GridEditorWidget
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Protocol

from gridslice.core.models import Axis, GridLines, Side

logger = logging.getLogger(__name__)

MoveHandler = Callable[[float, float, "SurfaceRect"], None]
ReleaseHandler = Callable[[], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True, slots=True)
class DragTarget:
    """One edge handle: side ``side`` of boundary ``index`` on ``axis``."""

    axis: Axis
    index: int
    side: Side


@dataclass(frozen=True, slots=True)
class SurfaceRect:
    """Editing surface bounding box, in the pointer's coordinate space."""

    left: float
    top: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"surface must have positive size: {self.width}x{self.height}")


class PointerSource(Protocol):
    """Something that can deliver pointer moves and releases while dragging."""

    def subscribe(self, on_move: MoveHandler, on_release: ReleaseHandler) -> Unsubscribe:
        """Attach listeners and return a callable that detaches them."""
        ...


def pointer_to_percent(position: float, origin: float, extent: float) -> float:
    """
    Convert a pointer coordinate to a percentage of the surface, clamped to [0, 100].

    Example:
        >>> pointer_to_percent(150, 100, 200)
        25.0
        >>> pointer_to_percent(-20, 0, 200)
        0.0
    """
    percent = (position - origin) / extent * 100
    return max(0.0, min(100.0, percent))


def hit_test(
    grid_lines: GridLines,
    x_pct: float,
    y_pct: float,
    *,
    x_tolerance: float,
    y_tolerance: float,
) -> Optional[DragTarget]:
    """
    Find the edge handle closest to a press, if any is within tolerance.

    Horizontal edges are matched on ``y_pct`` and vertical edges on
    ``x_pct``. On equal distance the handle drawn last wins (vertical over
    horizontal, end over start), matching what the user sees on top.
    """
    best: Optional[DragTarget] = None
    best_distance = float("inf")

    for axis, position, tolerance in (
        (Axis.HORIZONTAL, y_pct, y_tolerance),
        (Axis.VERTICAL, x_pct, x_tolerance),
    ):
        if tolerance <= 0:
            continue
        for index, boundary in enumerate(grid_lines.boundaries(axis)):
            for side in (Side.START, Side.END):
                distance = abs(boundary.get(side) - position) / tolerance
                if distance <= 1.0 and distance <= best_distance:
                    best = DragTarget(axis, index, side)
                    best_distance = distance
    return best


class DragController:
    """
    Idle/dragging state machine over a GridLines value.

    Args:
        grid_lines: Initial boundaries
        on_change: Called with the new GridLines after every edit
        pointer_source: Optional source of move/release events; when given,
            listeners are subscribed on press and detached on release

    Example:
        >>> controller = DragController(lines)
        >>> controller.press(DragTarget(Axis.VERTICAL, 1, Side.START))
        >>> controller.move(40, 0, SurfaceRect(0, 0, 200, 100))
        >>> controller.grid_lines.vertical[1].start
        20.0
        >>> controller.release()
    """

    def __init__(
        self,
        grid_lines: GridLines,
        *,
        on_change: Optional[Callable[[GridLines], None]] = None,
        pointer_source: Optional[PointerSource] = None,
    ):
        self._grid_lines = grid_lines
        self._on_change = on_change
        self._pointer_source = pointer_source
        self._target: Optional[DragTarget] = None
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def grid_lines(self) -> GridLines:
        return self._grid_lines

    @property
    def target(self) -> Optional[DragTarget]:
        """Edge being dragged, or None when idle."""
        return self._target

    @property
    def is_dragging(self) -> bool:
        return self._target is not None

    def reset(self, grid_lines: GridLines) -> None:
        """Replace the grid lines wholesale (image or grid change); ends any drag."""
        self._end_drag()
        self._grid_lines = grid_lines

    def press(self, target: DragTarget) -> None:
        """
        Start dragging an edge.

        Raises:
            IndexError: If the boundary index is out of range
        """
        if not 0 <= target.index < len(self._grid_lines.boundaries(target.axis)):
            raise IndexError(f"{target.axis.value} boundary index out of range: {target.index}")
        if self.is_dragging:
            self._end_drag()

        self._target = target
        if self._pointer_source is not None:
            self._unsubscribe = self._pointer_source.subscribe(self.move, self.release)
        logger.debug(f"Drag start {target.axis.value}[{target.index}].{target.side.value}")

    def move(self, x: float, y: float, surface: SurfaceRect) -> None:
        """Move the captured edge to the pointer; ignored while idle."""
        target = self._target
        if target is None:
            return

        if target.axis is Axis.HORIZONTAL:
            value = pointer_to_percent(y, surface.top, surface.height)
        else:
            value = pointer_to_percent(x, surface.left, surface.width)

        self._grid_lines = self._grid_lines.with_edge(target.axis, target.index, target.side, value)
        if self._on_change is not None:
            self._on_change(self._grid_lines)

    def release(self) -> None:
        """End the drag, wherever the pointer is."""
        self._end_drag()

    def cancel(self) -> None:
        """End the drag after an abnormal interruption; edits so far are kept."""
        self._end_drag()

    @contextmanager
    def drag(self, target: DragTarget) -> Iterator[DragController]:
        """Drag ``target`` for the duration of the block; always released on exit."""
        self.press(target)
        try:
            yield self
        finally:
            self._end_drag()

    def _end_drag(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if self._target is not None:
            logger.debug(f"Drag end {self._target.axis.value}[{self._target.index}]")
        self._target = None
        if unsubscribe is not None:
            unsubscribe()
