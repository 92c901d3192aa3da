"""Integration tests for MainWindow wiring."""

from pathlib import Path

import pytest
from PySide6.QtWidgets import QMessageBox

from gridslice.core.models import OutputFormat, SliceConfig
from gridslice.gui.main_window import MainWindow
from gridslice.gui.models.settings import SettingsStore
from gridslice.slicer import SessionState


@pytest.fixture
def window(qtbot, tmp_path: Path):
    settings = SettingsStore(tmp_path / "gui_settings.json")
    settings.set_slice_config(SliceConfig(output_format=OutputFormat.PNG))
    win = MainWindow(settings)
    qtbot.addWidget(win)
    return win


@pytest.fixture
def warnings(monkeypatch):
    calls = []
    monkeypatch.setattr(QMessageBox, "warning", lambda *args, **kwargs: calls.append(args))
    return calls


class TestMainWindow:

    def test_init_when_no_image_then_generate_disabled(self, window):
        assert window.session.state is SessionState.NO_IMAGE
        assert not window.generate_button.isEnabled()
        assert window.generate_button.text() == "Generate Slices"
        assert window.editor_stack.currentWidget() is window.placeholder

    def test_load_image_when_valid_then_editing(self, window, sample_image_path):
        assert window.load_image(sample_image_path)

        assert window.session.state is SessionState.EDITING
        assert window.editor_stack.currentWidget() is window.grid_editor
        assert window.grid_editor.grid_lines == window.session.grid_lines
        assert window.generate_button.isEnabled()

    def test_load_image_when_not_an_image_then_warning(self, window, tmp_path: Path, warnings):
        bogus = tmp_path / "notes.png"
        bogus.write_text("definitely not pixels")

        assert not window.load_image(bogus)
        assert len(warnings) == 1
        assert window.session.state is SessionState.NO_IMAGE

    def test_start_slicing_when_loaded_then_results_shown(self, qtbot, window, sample_image_path):
        window.load_image(sample_image_path)

        assert window.start_slicing()
        assert not window.grid_editor.isEnabled()

        qtbot.waitUntil(lambda: window.session.state is SessionState.EDITING, timeout=10000)
        assert len(window.session.results) == 9
        assert window.preview.list_widget.count() == 9
        assert window.grid_editor.isEnabled()

    def test_start_slicing_when_already_running_then_refused(self, qtbot, window, sample_image_path):
        window.load_image(sample_image_path)
        assert window.start_slicing()
        assert not window.start_slicing()
        qtbot.waitUntil(lambda: window.session.state is SessionState.EDITING, timeout=10000)

    def test_quality_change_when_results_exist_then_apply_update(self, qtbot, window, sample_image_path):
        window.load_image(sample_image_path)
        window.start_slicing()
        qtbot.waitUntil(lambda: window.session.state is SessionState.EDITING, timeout=10000)

        window.quality_slider.setValue(80)

        assert window.session.is_dirty
        assert window.generate_button.text() == "Apply & Update"
        assert window.quality_label.text() == "Quality: 0.80"
        assert window.level_label.text() == "Level: 20%"

    def test_set_preset_when_changed_then_grid_and_results_reset(self, qtbot, window, sample_image_path):
        window.load_image(sample_image_path)
        window.start_slicing()
        qtbot.waitUntil(lambda: window.session.state is SessionState.EDITING, timeout=10000)

        window.set_preset("5v")

        assert window.session.grid_lines.cols == 5
        assert not window.session.results
        assert window.settings.get_grid_preset() == "5v"

    def test_reset_when_loaded_then_no_image(self, window, sample_image_path):
        window.load_image(sample_image_path)
        window.reset()
        assert window.session.state is SessionState.NO_IMAGE
        assert window.grid_editor.controller is None

    def test_slice_config_saved_when_stored_elsewhere_then_window_follows(self, window):
        config = SliceConfig(quality=0.3, optimize_resolution=False, output_format=OutputFormat.JPEG)

        window.settings.set_slice_config(config)

        assert window.session.slice_config == config
        assert window.quality_slider.value() == 30
        assert not window.optimize_checkbox.isChecked()
        assert window.format_combo.currentData() is OutputFormat.JPEG
        assert window.level_label.text() == "Level: 70%"

    def test_close_when_slicing_then_deferred_until_finished(self, qtbot, window, sample_image_path):
        window.show()
        window.load_image(sample_image_path)
        assert window.start_slicing()

        assert not window.close()
        assert window.isVisible()
        assert window.session.state is SessionState.SLICING

        qtbot.waitUntil(lambda: not window.isVisible(), timeout=10000)
        assert window.session.state is SessionState.EDITING
        assert len(window.session.results) == 9
