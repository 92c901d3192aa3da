"""Widget tests for SlicePreviewPanel."""

import zipfile
from pathlib import Path

import pytest
from PySide6.QtWidgets import QMessageBox

from gridslice.core.models import GridConfig, OutputFormat, SliceConfig
from gridslice.gui.widgets.slice_preview import SlicePreviewPanel
from gridslice.slicer import slice_image
from gridslice.slicer.boundaries import create_grid_lines
from gridslice.slicer.results import ResultCollection


@pytest.fixture
def results(square_image):
    config = SliceConfig(output_format=OutputFormat.PNG)
    return slice_image(square_image, create_grid_lines(GridConfig(2, 2)), config)


@pytest.fixture
def panel(qtbot):
    widget = SlicePreviewPanel()
    qtbot.addWidget(widget)
    return widget


@pytest.fixture
def critical_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(QMessageBox, "critical", lambda *args, **kwargs: calls.append(args))
    return calls


class TestSlicePreviewPanel:

    def test_set_results_when_tiles_then_items_and_labels(self, panel, results):
        panel.set_results(results)

        assert panel.list_widget.count() == 4
        assert panel.count_label.text() == "4 Optimized Assets"
        assert panel.size_label.text().startswith("Total Archive Size: ")
        assert panel.download_button.isEnabled()

    def test_set_results_when_empty_then_hidden(self, panel):
        panel.set_results(ResultCollection())
        assert panel.list_widget.count() == 0
        assert not panel.isVisible()
        assert not panel.download_button.isEnabled()

    def test_set_results_when_replaced_then_old_items_removed(self, panel, results):
        panel.set_results(results)
        panel.set_results(ResultCollection(slices=results.slices[:1], expected_count=4))
        assert panel.list_widget.count() == 1

    def test_export_all_when_valid_then_writes_zip_and_emits(self, qtbot, panel, results, tmp_path: Path):
        panel.set_results(results)

        with qtbot.waitSignal(panel.exported, timeout=1000) as blocker:
            path = panel.export_all(tmp_path / "tiles.zip")

        assert blocker.args == [path]
        with zipfile.ZipFile(path) as zf:
            assert len(zf.namelist()) == 4
        assert not panel.is_zipping
        assert panel.download_button.text() == "Download All (.ZIP)"

    def test_export_all_when_write_fails_then_message_and_ready_again(
        self, panel, results, tmp_path: Path, critical_calls
    ):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        panel.set_results(results)

        assert panel.export_all(blocker / "tiles.zip") is None

        assert len(critical_calls) == 1
        assert not panel.is_zipping
        assert panel.download_button.isEnabled()

    def test_export_one_when_valid_then_named_by_index(self, panel, results, tmp_path: Path):
        path = panel.export_one(results[3], tmp_path)
        assert path.name == "slice_4.png"
