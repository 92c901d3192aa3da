"""
Main Window for the GridSlice GUI.
"""
import logging
import queue
import threading
from pathlib import Path
from typing import Optional

from PIL import Image
from PySide6.QtCore import QByteArray, Qt, QTimer, Signal
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QButtonGroup,
    QCheckBox,
    QComboBox,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSlider,
    QSplitter,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from gridslice import __copyright__, __version__
from gridslice.core.models import GridConfig, OutputFormat, SliceConfig
from gridslice.gui.models.settings import SettingsStore
from gridslice.gui.utils.logging_utils import attach_queue_handler, detach_queue_handler
from gridslice.gui.utils.paths import get_default_export_dir
from gridslice.gui.widgets.console_widget import ConsoleWidget
from gridslice.gui.widgets.grid_editor import GridEditorWidget
from gridslice.gui.widgets.slice_preview import SlicePreviewPanel
from gridslice.slicer import EditorSession, SessionState, SliceError, slice_image

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.webp *.bmp *.gif *.tif *.tiff)"

PRESET_LABELS = {
    "3x3": "3 x 3",
    "6x6": "6 x 6",
    "5v": "5 Verticals",
}

# Quality slider works in hundredths, step 0.05
QUALITY_SLIDER_MIN = 5
QUALITY_SLIDER_MAX = 90
QUALITY_SLIDER_STEP = 5


class MainWindow(QMainWindow):
    """Image, grid editor, compression settings and generated tiles."""

    # (results or None, applied SliceConfig, error message or None)
    slicing_finished = Signal(object, object, object)

    def __init__(self, settings: SettingsStore):
        super().__init__()
        self.settings = settings
        self.session = EditorSession(settings.get_grid_config(), settings.get_slice_config())
        self.log_queue: "queue.Queue[tuple[str, str]]" = queue.Queue()
        self._log_handler = attach_queue_handler(self.log_queue, "gridslice")

        self.setWindowTitle("GridSlice")
        self.resize(1280, 860)
        self.setMinimumSize(960, 640)

        # --- Menu Bar ---
        file_menu = self.menuBar().addMenu("File")
        open_action = QAction("Open Image...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.open_image_dialog)
        file_menu.addAction(open_action)
        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        help_menu = self.menuBar().addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

        # --- Central layout ---
        central = QWidget()
        root = QVBoxLayout(central)
        self.setCentralWidget(central)

        toolbar = QHBoxLayout()
        self.open_button = QPushButton("Browse Image")
        self.open_button.clicked.connect(self.open_image_dialog)
        toolbar.addWidget(self.open_button)

        self.preset_group = QButtonGroup(self)
        self.preset_group.setExclusive(True)
        self.preset_buttons = {}
        for name, label in PRESET_LABELS.items():
            button = QPushButton(label)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked, preset=name: self.set_preset(preset))
            self.preset_group.addButton(button)
            self.preset_buttons[name] = button
            toolbar.addWidget(button)
        self.preset_buttons[settings.get_grid_preset()].setChecked(True)

        toolbar.addStretch()
        self.reset_button = QPushButton("Reset")
        self.reset_button.clicked.connect(self.reset)
        toolbar.addWidget(self.reset_button)
        root.addLayout(toolbar)

        splitter = QSplitter(Qt.Orientation.Vertical)
        root.addWidget(splitter, stretch=1)

        workspace = QWidget()
        workspace_layout = QHBoxLayout(workspace)
        workspace_layout.setContentsMargins(0, 0, 0, 0)

        # Editor column
        editor_column = QVBoxLayout()
        self.editor_stack = QStackedWidget()
        self.placeholder = QLabel(
            "Upload Mosaic Image\n\nAdjust lines to remove borders and gutters."
        )
        self.placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.grid_editor = GridEditorWidget()
        self.grid_editor.gridLinesChanged.connect(self._on_grid_lines_changed)
        self.editor_stack.addWidget(self.placeholder)
        self.editor_stack.addWidget(self.grid_editor)
        editor_column.addWidget(self.editor_stack, stretch=1)

        status_row = QHBoxLayout()
        self.status_label = QLabel()
        status_row.addWidget(self.status_label)
        status_row.addStretch()
        self.generate_button = QPushButton("Generate Slices")
        self.generate_button.clicked.connect(self.start_slicing)
        status_row.addWidget(self.generate_button)
        editor_column.addLayout(status_row)
        workspace_layout.addLayout(editor_column, stretch=2)

        workspace_layout.addWidget(self._build_settings_panel(), stretch=1)
        splitter.addWidget(workspace)

        self.preview = SlicePreviewPanel()
        self.preview.set_export_dir(get_default_export_dir())
        self.preview.exported.connect(self._on_exported)
        splitter.addWidget(self.preview)

        self.console = ConsoleWidget()
        splitter.addWidget(self.console)

        self.slicing_finished.connect(self._on_slicing_finished)
        settings.sliceConfigChanged.connect(self._on_slice_config_changed)
        self._close_pending = False

        self._log_timer = QTimer(self)
        self._log_timer.timeout.connect(self._drain_logs)
        self._log_timer.start(100)

        geometry = settings.get_window_geometry()
        if geometry:
            self.restoreGeometry(QByteArray.fromHex(geometry.encode("ascii")))

        self._refresh_state()

    def _build_settings_panel(self) -> QWidget:
        config = self.session.slice_config
        panel = QGroupBox("Compression Engine")
        layout = QVBoxLayout(panel)

        ends = QHBoxLayout()
        ends.addWidget(QLabel("Minimum Size"))
        ends.addStretch()
        ends.addWidget(QLabel("Max Quality"))
        layout.addLayout(ends)

        self.quality_slider = QSlider(Qt.Orientation.Horizontal)
        self.quality_slider.setRange(QUALITY_SLIDER_MIN, QUALITY_SLIDER_MAX)
        self.quality_slider.setSingleStep(QUALITY_SLIDER_STEP)
        self.quality_slider.setPageStep(QUALITY_SLIDER_STEP)
        self.quality_slider.setValue(config.encoder_quality)
        self.quality_slider.valueChanged.connect(self._on_quality_changed)
        layout.addWidget(self.quality_slider)

        readout = QHBoxLayout()
        self.level_label = QLabel()
        self.quality_label = QLabel()
        readout.addWidget(self.level_label)
        readout.addStretch()
        readout.addWidget(self.quality_label)
        layout.addLayout(readout)

        self.optimize_checkbox = QCheckBox("Web Optimization (limit dimensions to 1080p)")
        self.optimize_checkbox.setChecked(config.optimize_resolution)
        self.optimize_checkbox.toggled.connect(self._on_settings_changed)
        layout.addWidget(self.optimize_checkbox)

        format_row = QHBoxLayout()
        format_row.addWidget(QLabel("Output format"))
        self.format_combo = QComboBox()
        for fmt in OutputFormat:
            self.format_combo.addItem(fmt.pil_format, fmt)
        self.format_combo.setCurrentIndex(list(OutputFormat).index(config.output_format))
        self.format_combo.currentIndexChanged.connect(self._on_settings_changed)
        format_row.addWidget(self.format_combo)
        layout.addLayout(format_row)

        self.dirty_label = QLabel(
            "Settings changed. Click Apply & Update to refresh slices with new compression."
        )
        self.dirty_label.setWordWrap(True)
        layout.addWidget(self.dirty_label)
        layout.addStretch()
        return panel

    # ─────────────────────────────────────────────────────────────────────────
    # Image and grid
    # ─────────────────────────────────────────────────────────────────────────

    def open_image_dialog(self) -> None:
        start = self.settings.get_last_directory() or str(Path.home())
        filename, _ = QFileDialog.getOpenFileName(self, "Open Image", start, IMAGE_FILTER)
        if filename:
            self.load_image(Path(filename))

    def load_image(self, path: Path) -> bool:
        """Decode an image file and start editing it; reports decode failures."""
        if self.session.state is SessionState.SLICING:
            return False
        try:
            with Image.open(path) as opened:
                opened.load()
                image = opened.copy()
        except (OSError, Image.DecompressionBombError) as e:
            logger.error(f"Could not open {path.name}: {e}")
            QMessageBox.warning(self, "Open Image", f"Could not open {path.name}.\n\n{e}")
            return False

        self.settings.set_last_directory(str(path.parent))
        self.session.load_image(image)
        self.grid_editor.set_image(image, self.session.grid_lines)
        self.preview.set_results(self.session.results)
        self._refresh_state()
        return True

    def reset(self) -> None:
        if self.session.state is SessionState.SLICING:
            return
        self.session.clear_image()
        self.grid_editor.set_image(None)
        self.preview.set_results(self.session.results)
        self._refresh_state()

    def set_preset(self, preset: str) -> None:
        """Switch grid shape; discards boundary edits and results."""
        if self.session.state is SessionState.SLICING:
            return
        self.settings.set_grid_preset(preset)
        self.preset_buttons[preset].setChecked(True)
        self.session.set_grid_config(GridConfig.from_preset(preset))
        if self.session.grid_lines is not None:
            self.grid_editor.set_grid_lines(self.session.grid_lines)
        self.preview.set_results(self.session.results)
        self._refresh_state()

    def _on_grid_lines_changed(self, grid_lines) -> None:
        if self.session.state is SessionState.EDITING:
            self.session.update_grid_lines(grid_lines)

    # ─────────────────────────────────────────────────────────────────────────
    # Settings
    # ─────────────────────────────────────────────────────────────────────────

    def current_slice_config(self) -> SliceConfig:
        return SliceConfig(
            quality=self.quality_slider.value() / 100,
            optimize_resolution=self.optimize_checkbox.isChecked(),
            output_format=self.format_combo.currentData(),
        )

    def _on_quality_changed(self, value: int) -> None:
        snapped = round(value / QUALITY_SLIDER_STEP) * QUALITY_SLIDER_STEP
        if snapped != value:
            self.quality_slider.setValue(snapped)
            return
        self._on_settings_changed()

    def _on_settings_changed(self, *_args) -> None:
        self.settings.set_slice_config(self.current_slice_config())

    def _on_slice_config_changed(self, config: SliceConfig) -> None:
        self.session.set_slice_config(config)
        controls = (self.quality_slider, self.optimize_checkbox, self.format_combo)
        for control in controls:
            control.blockSignals(True)
        try:
            self.quality_slider.setValue(config.encoder_quality)
            self.optimize_checkbox.setChecked(config.optimize_resolution)
            self.format_combo.setCurrentIndex(list(OutputFormat).index(config.output_format))
        finally:
            for control in controls:
                control.blockSignals(False)
        self._refresh_state()

    # ─────────────────────────────────────────────────────────────────────────
    # Slicing
    # ─────────────────────────────────────────────────────────────────────────

    def start_slicing(self) -> bool:
        """
        Start a slicing pass on a background thread.

        Returns False if there is no image or a pass is already running.
        """
        if self.session.state is not SessionState.EDITING:
            return False

        applied = self.session.begin_slicing()
        image = self.session.image
        grid_lines = self.session.grid_lines
        self._refresh_state()

        def run_slicing() -> None:
            results = None
            error: Optional[str] = None
            try:
                results = slice_image(image, grid_lines, applied)
            except SliceError as e:
                error = str(e)
            except Exception as e:
                logger.exception("Slicing failed")
                error = f"Unexpected error: {e}"
            finally:
                # Always hand back to the main thread
                self.slicing_finished.emit(results, applied, error)

        thread = threading.Thread(target=run_slicing, daemon=True)
        thread.start()
        return True

    def _on_slicing_finished(self, results, applied: SliceConfig, error: Optional[str]) -> None:
        if results is None:
            self.session.abort_slicing()
            if not self._close_pending:
                QMessageBox.warning(self, "Slicing Failed", error or "Slicing failed.")
        else:
            self.session.finish_slicing(results, applied)
            self.preview.set_results(results)
            if results.dropped_count:
                logger.warning(results.summary())
        self._refresh_state()
        if self._close_pending:
            self.close()

    def _on_exported(self, path: Path) -> None:
        logger.info(f"Saved {path}")

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    def _refresh_state(self) -> None:
        state = self.session.state
        has_image = state is not SessionState.NO_IMAGE
        slicing = state is SessionState.SLICING
        dirty = self.session.is_dirty

        self.editor_stack.setCurrentWidget(self.grid_editor if has_image else self.placeholder)
        self.grid_editor.setEnabled(state is SessionState.EDITING)
        self.reset_button.setVisible(has_image)
        self.reset_button.setEnabled(not slicing)
        for button in self.preset_buttons.values():
            button.setEnabled(not slicing)
        self.open_button.setEnabled(not slicing)

        self.generate_button.setEnabled(state is SessionState.EDITING)
        if slicing:
            self.generate_button.setText("Compressing...")
        elif dirty:
            self.generate_button.setText("Apply & Update")
        else:
            self.generate_button.setText("Generate Slices")

        if not has_image:
            self.status_label.setText("No image loaded")
        elif slicing:
            self.status_label.setText("Slicing...")
        elif dirty:
            self.status_label.setText("Settings pending refresh")
        else:
            self.status_label.setText("Ready to download")
        self.dirty_label.setVisible(dirty)

        config = self.session.slice_config
        self.level_label.setText(f"Level: {config.compression_level}%")
        self.quality_label.setText(f"Quality: {config.quality:.2f}")

    def _drain_logs(self) -> None:
        self.console.drain(self.log_queue)

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About GridSlice",
            f"GridSlice {__version__}\n\nSplit mosaic images into optimized tiles.\n\n"
            f"{__copyright__}",
        )

    def closeEvent(self, event):
        if self.session.state is SessionState.SLICING:
            # The worker still emits into this window; close once it reports back
            self._close_pending = True
            self.status_label.setText("Closing after slicing finishes...")
            event.ignore()
            return
        self._close_pending = False
        self._log_timer.stop()
        detach_queue_handler(self._log_handler, "gridslice")
        self.settings.set_window_geometry(self.saveGeometry().toHex().data().decode("ascii"))
        super().closeEvent(event)
