"""
Preview of the generated tiles with size badges and export actions.
"""
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QIcon, QPixmap
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from gridslice.core.models import SliceResult
from gridslice.slicer.output import ExportError, write_slice_file, write_slices_zip
from gridslice.slicer.results import ResultCollection, format_size

THUMBNAIL_SIZE = 128


class SlicePreviewPanel(QWidget):
    """
    Tile grid for the latest slicing pass.

    Double-clicking a tile saves it on its own. "Download All" writes the
    whole collection as one ZIP archive; a failure shows one message and
    leaves the panel ready to retry.
    """

    exported = Signal(object)  # Path of the written file

    def __init__(self, parent=None):
        super().__init__(parent)
        self._results = ResultCollection()
        self._is_zipping = False
        self._export_dir: Optional[Path] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        header = QHBoxLayout()
        labels = QVBoxLayout()
        self.count_label = QLabel()
        self.count_label.setStyleSheet("font-weight: bold;")
        self.size_label = QLabel()
        labels.addWidget(self.count_label)
        labels.addWidget(self.size_label)
        header.addLayout(labels)
        header.addStretch()

        self.download_button = QPushButton("Download All (.ZIP)")
        self.download_button.clicked.connect(self._on_download_all)
        header.addWidget(self.download_button)
        layout.addLayout(header)

        self.list_widget = QListWidget()
        self.list_widget.setViewMode(QListView.ViewMode.IconMode)
        self.list_widget.setIconSize(QSize(THUMBNAIL_SIZE, THUMBNAIL_SIZE))
        self.list_widget.setResizeMode(QListView.ResizeMode.Adjust)
        self.list_widget.setMovement(QListView.Movement.Static)
        self.list_widget.setSpacing(8)
        self.list_widget.itemDoubleClicked.connect(self._on_item_double_clicked)
        layout.addWidget(self.list_widget)

        self.set_results(self._results)

    @property
    def results(self) -> ResultCollection:
        return self._results

    @property
    def is_zipping(self) -> bool:
        return self._is_zipping

    def set_export_dir(self, directory: Optional[Path]) -> None:
        self._export_dir = directory

    def set_results(self, results: ResultCollection) -> None:
        """Replace the shown tiles wholesale."""
        self._results = results
        self.list_widget.clear()
        for result, size in zip(results, results.sizes):
            item = QListWidgetItem(self._thumbnail(result), self._item_text(result, size))
            item.setData(Qt.ItemDataRole.UserRole, result)
            item.setToolTip(f"Tile {result.index + 1} - double-click to save")
            self.list_widget.addItem(item)

        self.count_label.setText(f"{len(results)} Optimized Assets")
        self.size_label.setText(f"Total Archive Size: {format_size(results.total_size)}")
        self.download_button.setEnabled(bool(results) and not self._is_zipping)
        self.setVisible(bool(results))

    def _item_text(self, result: SliceResult, size: int) -> str:
        return f"Tile {result.index + 1} · {format_size(size)}\nRow {result.row + 1}  Col {result.col + 1}"

    def _thumbnail(self, result: SliceResult) -> QIcon:
        pixmap = QPixmap()
        if not pixmap.loadFromData(result.payload):
            return QIcon()
        return QIcon(pixmap.scaled(
            THUMBNAIL_SIZE,
            THUMBNAIL_SIZE,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        ))

    # ─────────────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────────────

    def export_all(self, output_path: Path) -> Optional[Path]:
        """
        Write all tiles to ``output_path`` as a ZIP.

        Returns:
            Path written, or None if export failed or is already running
        """
        if self._is_zipping:
            return None
        self._is_zipping = True
        self.download_button.setEnabled(False)
        self.download_button.setText("Compressing ZIP...")
        try:
            path = write_slices_zip(self._results, output_path)
        except ExportError as e:
            QMessageBox.critical(self, "Export Failed", f"Failed to generate ZIP file.\n\n{e}")
            return None
        finally:
            self._is_zipping = False
            self.download_button.setText("Download All (.ZIP)")
            self.download_button.setEnabled(bool(self._results))
        self.exported.emit(path)
        return path

    def export_one(self, result: SliceResult, directory: Path) -> Optional[Path]:
        try:
            path = write_slice_file(result, directory)
        except ExportError as e:
            QMessageBox.critical(self, "Export Failed", f"Failed to save tile.\n\n{e}")
            return None
        self.exported.emit(path)
        return path

    def _on_download_all(self) -> None:
        start = (self._export_dir or Path.cwd()) / self._results.archive_name
        filename, _ = QFileDialog.getSaveFileName(
            self, "Save Tiles", str(start), "ZIP archive (*.zip)"
        )
        if filename:
            self.export_all(Path(filename))

    def _on_item_double_clicked(self, item: QListWidgetItem) -> None:
        result = item.data(Qt.ItemDataRole.UserRole)
        directory = QFileDialog.getExistingDirectory(
            self, "Save Tile To", str(self._export_dir or Path.cwd())
        )
        if directory:
            self.export_one(result, Path(directory))
