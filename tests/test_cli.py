"""Tests for the gridslice command line."""

import zipfile
from pathlib import Path

import pytest

from gridslice.cli import build_parser, main


class TestCli:

    def test_slice_when_preset_then_zip_written(self, sample_image_path, tmp_path: Path, capsys):
        output = tmp_path / "out.zip"

        code = main(["slice", str(sample_image_path), "--preset", "5v", "--format", "png", "-o", str(output)])

        assert code == 0
        with zipfile.ZipFile(output) as zf:
            assert zf.namelist() == [f"slice_{i}.png" for i in range(1, 6)]
        assert str(output) in capsys.readouterr().out

    def test_slice_when_no_output_then_default_name_beside_image(self, sample_image_path):
        code = main(["slice", str(sample_image_path), "--rows", "2", "--cols", "2", "-f", "jpeg"])

        assert code == 0
        archive = sample_image_path.parent / "grid_slices_4_tiles.zip"
        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist()[0] == "slice_1.jpg"

    def test_slice_when_output_is_directory_then_default_name_inside(self, sample_image_path, tmp_path: Path):
        out_dir = tmp_path / "exports"
        out_dir.mkdir()
        assert main(["slice", str(sample_image_path), "-f", "png", "-o", str(out_dir)]) == 0
        assert (out_dir / "grid_slices_9_tiles.zip").exists()

    def test_slice_when_image_missing_then_exit_one(self, tmp_path: Path):
        assert main(["slice", str(tmp_path / "missing.png")]) == 1

    def test_slice_when_quality_out_of_range_then_usage_error(self, sample_image_path):
        with pytest.raises(SystemExit) as exc:
            main(["slice", str(sample_image_path), "--quality", "0.95"])
        assert exc.value.code == 2

    def test_parser_when_preset_and_cols_then_cols_override(self):
        args = build_parser().parse_args(["slice", "x.png", "--preset", "3x3", "--cols", "4"])
        assert args.preset == "3x3"
        assert args.cols == 4
