"""
Unit tests for the slicing pass.
"""

import logging
from io import BytesIO

import pytest
from PIL import Image

from gridslice.core.models import Axis, GridConfig, OutputFormat, Side, SliceConfig
from gridslice.slicer import encoder as encoder_module
from gridslice.slicer.boundaries import create_grid_lines
from gridslice.slicer.controller import SliceError, slice_image
from gridslice.slicer.encoder import format_available

PNG = SliceConfig(output_format=OutputFormat.PNG)


def tile_size(result) -> tuple:
    return Image.open(BytesIO(result.payload)).size


class TestSliceImage:

    # ─────────────────────────────────────────────────────────────────────────
    # Grid Scenarios
    # ─────────────────────────────────────────────────────────────────────────

    def test_slice_when_3x3_default_then_nine_tiles_in_order(self, square_image):
        results = slice_image(square_image, create_grid_lines(GridConfig(3, 3)), PNG)

        assert len(results) == 9
        assert results.indices == list(range(9))
        assert [(r.row, r.col) for r in results] == [(i // 3, i % 3) for i in range(9)]
        assert tile_size(results[0]) == (93, 93)
        assert tile_size(results[4]) == (94, 94)

    def test_slice_when_five_verticals_optimized_then_no_downscaling(self, wide_image):
        config = SliceConfig(optimize_resolution=True, output_format=OutputFormat.PNG)
        results = slice_image(wide_image, create_grid_lines(GridConfig(1, 5)), config)

        assert len(results) == 5
        assert [tile_size(r) for r in results] == [
            (175, 194), (180, 194), (180, 194), (180, 194), (175, 194),
        ]

    def test_slice_when_single_cell_unoptimized_then_scaled_to_4096(self):
        image = Image.new("RGB", (5000, 5000), color=(10, 20, 30))
        config = SliceConfig(optimize_resolution=False, output_format=OutputFormat.PNG)

        results = slice_image(image, create_grid_lines(GridConfig(1, 1)), config)

        assert len(results) == 1
        # 4850 x 4850 crop scaled by 4096 / 4850
        assert tile_size(results[0]) == (4096, 4096)

    def test_slice_when_optimized_then_longest_edge_capped(self):
        image = Image.new("RGB", (3000, 1500))
        config = SliceConfig(optimize_resolution=True, output_format=OutputFormat.PNG)
        results = slice_image(image, create_grid_lines(GridConfig(1, 1)), config)
        width, height = tile_size(results[0])
        assert max(width, height) == 1080

    # ─────────────────────────────────────────────────────────────────────────
    # Skipped Cells
    # ─────────────────────────────────────────────────────────────────────────

    def test_slice_when_column_collapsed_then_indices_have_gaps(self, square_image):
        lines = create_grid_lines(GridConfig(3, 3)).with_edge(Axis.VERTICAL, 1, Side.END, 70.0)

        results = slice_image(square_image, lines, PNG)

        assert results.indices == [0, 2, 3, 5, 6, 8]
        assert results.expected_count == 9
        assert results.dropped_count == 3

    def test_slice_when_encoder_fails_once_then_tile_dropped(self, square_image, monkeypatch):
        original = encoder_module.encode_image
        calls = []

        def flaky(tile, config):
            calls.append(1)
            if len(calls) == 2:
                raise OSError("boom")
            return original(tile, config)

        monkeypatch.setattr(encoder_module, "encode_image", flaky)
        results = slice_image(square_image, create_grid_lines(GridConfig(3, 3)), PNG)

        assert len(results) == 8
        assert 1 not in results.indices
        assert results.indices[1] == 2

    # ─────────────────────────────────────────────────────────────────────────
    # Behaviour
    # ─────────────────────────────────────────────────────────────────────────

    def test_slice_when_repeated_then_identical_results(self, square_image):
        lines = create_grid_lines(GridConfig(2, 2))
        first = slice_image(square_image, lines, PNG)
        second = slice_image(square_image, lines, PNG)
        assert [r.data_url for r in first] == [r.data_url for r in second]

    @pytest.mark.skipif(not format_available(OutputFormat.WEBP), reason="WEBP unsupported")
    def test_slice_when_repeated_with_default_webp_then_identical_results(self, square_image):
        lines = create_grid_lines(GridConfig(3, 3))
        first = slice_image(square_image, lines, SliceConfig())
        second = slice_image(square_image, lines, SliceConfig())
        assert first[0].filename.endswith(".webp")
        assert [r.payload for r in first] == [r.payload for r in second]

    def test_slice_when_repeated_with_jpeg_then_identical_results(self, square_image):
        lines = create_grid_lines(GridConfig(3, 3))
        config = SliceConfig(quality=0.4, output_format=OutputFormat.JPEG)
        first = slice_image(square_image, lines, config)
        second = slice_image(square_image, lines, config)
        assert [r.payload for r in first] == [r.payload for r in second]

    def test_slice_when_progress_then_called_per_cell(self, square_image):
        seen = []
        slice_image(
            square_image,
            create_grid_lines(GridConfig(2, 2)),
            PNG,
            progress=lambda done, total: seen.append((done, total)),
        )
        assert seen == [(1, 4), (2, 4), (3, 4), (4, 4)]

    def test_slice_when_done_then_source_and_grid_untouched(self, square_image):
        lines = create_grid_lines(GridConfig(3, 3))
        before = square_image.tobytes()
        slice_image(square_image, lines, PNG)
        assert square_image.tobytes() == before
        assert lines == create_grid_lines(GridConfig(3, 3))

    def test_slice_when_run_then_logs_summary(self, square_image, caplog):
        with caplog.at_level(logging.INFO, logger="gridslice"):
            slice_image(square_image, create_grid_lines(GridConfig(1, 2)), PNG)
        assert "Produced 2/2 tiles" in caplog.text

    # ─────────────────────────────────────────────────────────────────────────
    # Errors
    # ─────────────────────────────────────────────────────────────────────────

    def test_slice_when_no_image_then_raises(self):
        with pytest.raises(SliceError, match="No image loaded"):
            slice_image(None, create_grid_lines(GridConfig()), PNG)

    def test_slice_when_zero_size_image_then_raises(self):
        with pytest.raises(SliceError, match="no pixels"):
            slice_image(Image.new("RGB", (0, 0)), create_grid_lines(GridConfig()), PNG)
