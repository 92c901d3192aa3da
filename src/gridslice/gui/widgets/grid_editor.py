"""
Grid editor surface: the image with its gutters and draggable edge handles.

Mouse events are translated into DragController calls. While a drag is
active the widget grabs the mouse so moves and the release are delivered
even outside its bounds; the grab is released on mouse release, focus
loss and hide.
"""
from typing import Optional

from PIL import Image
from PySide6.QtCore import QEvent, QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QImage, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QSizePolicy, QWidget

from gridslice.core.models import Axis, GridLines, Side
from gridslice.editor.drag import (
    DragController,
    DragTarget,
    MoveHandler,
    ReleaseHandler,
    SurfaceRect,
    Unsubscribe,
    hit_test,
)

# Handle hit radius in screen pixels
HANDLE_TOLERANCE_PX = 6

GUTTER_COLOR = QColor(239, 68, 68, 77)
HANDLE_COLOR = QColor(99, 102, 241, 204)
ACTIVE_HANDLE_COLOR = QColor(165, 180, 252)
BADGE_BG = QColor(0, 0, 0, 204)
BADGE_TEXT = QColor(165, 180, 252)
SURFACE_BG = QColor(2, 6, 23)


def pil_to_qimage(image: Image.Image) -> QImage:
    """Convert a PIL image to a QImage that owns its pixel data."""
    rgba = image.convert("RGBA")
    data = rgba.tobytes("raw", "RGBA")
    qimage = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format.Format_RGBA8888)
    return qimage.copy()


class GridEditorWidget(QWidget):
    """
    Editing surface for one image's grid lines.

    The image is fitted inside the widget with its aspect ratio kept; that
    fitted rectangle is the surface pointer positions are measured
    against.
    """

    gridLinesChanged = Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._pixmap: Optional[QPixmap] = None
        self._controller: Optional[DragController] = None
        self._move_handler: Optional[MoveHandler] = None
        self._release_handler: Optional[ReleaseHandler] = None

        self.setMinimumSize(320, 240)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setFocusPolicy(Qt.FocusPolicy.ClickFocus)
        self.setCursor(Qt.CursorShape.CrossCursor)

    # ─────────────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def controller(self) -> Optional[DragController]:
        return self._controller

    @property
    def grid_lines(self) -> Optional[GridLines]:
        return self._controller.grid_lines if self._controller else None

    @property
    def is_dragging(self) -> bool:
        return bool(self._controller and self._controller.is_dragging)

    def set_image(self, image: Optional[Image.Image], grid_lines: Optional[GridLines] = None) -> None:
        """Show a new image (or none); any drag in progress is cancelled."""
        if self._controller is not None:
            self._controller.cancel()
        if image is None:
            self._pixmap = None
            self._controller = None
        else:
            self._pixmap = QPixmap.fromImage(pil_to_qimage(image))
            if grid_lines is not None:
                self.set_grid_lines(grid_lines)
        self.update()

    def set_grid_lines(self, grid_lines: GridLines) -> None:
        """Replace the grid lines wholesale (grid reset)."""
        if self._controller is None:
            self._controller = DragController(
                grid_lines,
                on_change=self._on_controller_change,
                pointer_source=self,
            )
        else:
            self._controller.reset(grid_lines)
        self.update()

    def surface_rect(self) -> Optional[SurfaceRect]:
        """Fitted image rectangle in widget coordinates."""
        if self._pixmap is None or self._pixmap.isNull():
            return None
        img_w, img_h = self._pixmap.width(), self._pixmap.height()
        scale = min(self.width() / img_w, self.height() / img_h)
        width, height = img_w * scale, img_h * scale
        if width <= 0 or height <= 0:
            return None
        left = (self.width() - width) / 2
        top = (self.height() - height) / 2
        return SurfaceRect(left, top, width, height)

    # ─────────────────────────────────────────────────────────────────────────
    # PointerSource
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe(self, on_move: MoveHandler, on_release: ReleaseHandler) -> Unsubscribe:
        """Route mouse moves/releases to the handlers until unsubscribed."""
        self._move_handler = on_move
        self._release_handler = on_release
        if self.isVisible():
            self.grabMouse()

        def unsubscribe() -> None:
            self._move_handler = None
            self._release_handler = None
            if QWidget.mouseGrabber() is self:
                self.releaseMouse()
            self.update()

        return unsubscribe

    # ─────────────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────────────

    def _on_controller_change(self, grid_lines: GridLines) -> None:
        self.gridLinesChanged.emit(grid_lines)
        self.update()

    def _hit(self, pos: QPointF) -> Optional[DragTarget]:
        surface = self.surface_rect()
        if surface is None or self._controller is None:
            return None
        x_pct = (pos.x() - surface.left) / surface.width * 100
        y_pct = (pos.y() - surface.top) / surface.height * 100
        return hit_test(
            self._controller.grid_lines,
            x_pct,
            y_pct,
            x_tolerance=HANDLE_TOLERANCE_PX / surface.width * 100,
            y_tolerance=HANDLE_TOLERANCE_PX / surface.height * 100,
        )

    def mousePressEvent(self, event):
        if not self.isEnabled() or event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        target = self._hit(event.position())
        if target is None:
            super().mousePressEvent(event)
            return
        self._controller.press(target)
        self.update()
        event.accept()

    def mouseMoveEvent(self, event):
        surface = self.surface_rect()
        if self._move_handler is not None and surface is not None:
            pos = event.position()
            self._move_handler(pos.x(), pos.y(), surface)
            event.accept()
            return
        target = self._hit(event.position())
        if target is None:
            self.setCursor(Qt.CursorShape.CrossCursor)
        elif target.axis is Axis.HORIZONTAL:
            self.setCursor(Qt.CursorShape.SizeVerCursor)
        else:
            self.setCursor(Qt.CursorShape.SizeHorCursor)
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self._release_handler is not None:
            self._release_handler()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def focusOutEvent(self, event):
        if self._controller is not None:
            self._controller.cancel()
        super().focusOutEvent(event)

    def hideEvent(self, event):
        if self._controller is not None:
            self._controller.cancel()
        super().hideEvent(event)

    def changeEvent(self, event):
        # Disabling mid-drag (e.g. slicing starts) ends the drag
        if (
            event.type() == QEvent.Type.EnabledChange
            and not self.isEnabled()
            and self._controller is not None
        ):
            self._controller.cancel()
        super().changeEvent(event)

    # ─────────────────────────────────────────────────────────────────────────
    # Painting
    # ─────────────────────────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), SURFACE_BG)

        surface = self.surface_rect()
        if surface is None:
            painter.end()
            return

        target_rect = QRectF(surface.left, surface.top, surface.width, surface.height)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.drawPixmap(target_rect, self._pixmap, QRectF(self._pixmap.rect()))

        if self._controller is not None:
            self._paint_boundaries(painter, surface)
        painter.end()

    def _paint_boundaries(self, painter: QPainter, surface: SurfaceRect) -> None:
        grid_lines = self._controller.grid_lines
        active = self._controller.target

        for axis in (Axis.HORIZONTAL, Axis.VERTICAL):
            for index, boundary in enumerate(grid_lines.boundaries(axis)):
                low = min(boundary.start, boundary.end)
                extent = abs(boundary.end - boundary.start)
                if axis is Axis.HORIZONTAL:
                    gutter = QRectF(
                        surface.left,
                        surface.top + low / 100 * surface.height,
                        surface.width,
                        extent / 100 * surface.height,
                    )
                else:
                    gutter = QRectF(
                        surface.left + low / 100 * surface.width,
                        surface.top,
                        extent / 100 * surface.width,
                        surface.height,
                    )
                painter.fillRect(gutter, GUTTER_COLOR)

                for side in (Side.START, Side.END):
                    is_active = active == DragTarget(axis, index, side)
                    painter.setPen(QPen(ACTIVE_HANDLE_COLOR if is_active else HANDLE_COLOR, 2))
                    value = boundary.get(side) / 100
                    if axis is Axis.HORIZONTAL:
                        y = surface.top + value * surface.height
                        painter.drawLine(QPointF(surface.left, y), QPointF(surface.left + surface.width, y))
                    else:
                        x = surface.left + value * surface.width
                        painter.drawLine(QPointF(x, surface.top), QPointF(x, surface.top + surface.height))

        badge = f"{grid_lines.rows}x{grid_lines.cols}"
        metrics = painter.fontMetrics()
        badge_rect = QRectF(0, 0, metrics.horizontalAdvance(badge) + 16, metrics.height() + 6)
        badge_rect.moveBottomRight(QPointF(surface.left + surface.width - 8, surface.top + surface.height - 8))
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(BADGE_BG)
        painter.drawRoundedRect(badge_rect, badge_rect.height() / 2, badge_rect.height() / 2)
        painter.setPen(BADGE_TEXT)
        painter.drawText(badge_rect, Qt.AlignmentFlag.AlignCenter, badge)
