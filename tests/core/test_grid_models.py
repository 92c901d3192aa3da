"""
Unit Tests for Boundary, GridLines and GridConfig Models

Tests for the normalized grid description shared by editor and slicer.
"""

import math

import pytest

from gridslice.core.models import GRID_PRESETS, Axis, Boundary, GridConfig, GridLines, Side


def make_lines() -> GridLines:
    return GridLines(
        horizontal=(Boundary(0, 1.5), Boundary(49, 51), Boundary(98.5, 100)),
        vertical=(Boundary(0, 1.5), Boundary(98.5, 100)),
    )


class TestBoundary:
    """Tests for Boundary dataclass."""

    # ─────────────────────────────────────────────────────────────────────────
    # Constructor Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_init_when_valid_then_creates_boundary(self):
        """Valid edges should be stored as given."""
        b = Boundary(32.3, 34.3)
        assert b.start == 32.3
        assert b.end == 34.3

    def test_init_when_nan_then_raises_error(self):
        """NaN edges should be rejected."""
        with pytest.raises(ValueError, match="start must be a finite percentage"):
            Boundary(math.nan, 10)

    def test_init_when_infinite_end_then_raises_error(self):
        with pytest.raises(ValueError, match="end must be a finite percentage"):
            Boundary(10, math.inf)

    def test_init_when_inverted_then_allowed(self):
        """start > end is a legal intermediate editing state."""
        b = Boundary(60, 40)
        assert b.is_inverted
        assert b.width == -20

    # ─────────────────────────────────────────────────────────────────────────
    # Edge Access Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_get_when_side_then_returns_matching_scalar(self):
        b = Boundary(10, 20)
        assert b.get(Side.START) == 10
        assert b.get(Side.END) == 20

    def test_with_side_when_end_replaced_then_start_kept(self):
        b = Boundary(10, 20).with_side(Side.END, 25)
        assert b == Boundary(10, 25)


class TestGridLines:
    """Tests for GridLines dataclass."""

    def test_init_when_lists_given_then_coerced_to_tuples(self):
        lines = GridLines(
            horizontal=[Boundary(0, 1), Boundary(99, 100)],
            vertical=[Boundary(0, 1), Boundary(99, 100)],
        )
        assert isinstance(lines.horizontal, tuple)
        assert isinstance(lines.vertical, tuple)

    def test_init_when_single_boundary_then_raises_error(self):
        with pytest.raises(ValueError, match="at least 2 horizontal"):
            GridLines(horizontal=(Boundary(0, 1),), vertical=(Boundary(0, 1), Boundary(99, 100)))

    def test_shape_when_two_rows_one_col_then_counts_match(self):
        lines = make_lines()
        assert lines.rows == 2
        assert lines.cols == 1
        assert lines.cell_count == 2

    def test_with_edge_when_moved_then_only_that_scalar_changes(self):
        """Moving one edge leaves every other value untouched."""
        lines = make_lines()
        moved = lines.with_edge(Axis.HORIZONTAL, 1, Side.START, 40.0)

        assert moved.horizontal[1] == Boundary(40.0, 51)
        assert moved.horizontal[0] == lines.horizontal[0]
        assert moved.horizontal[2] == lines.horizontal[2]
        assert moved.vertical == lines.vertical
        # Original value is unchanged
        assert lines.horizontal[1] == Boundary(49, 51)

    def test_with_edge_when_vertical_then_horizontal_unchanged(self):
        lines = make_lines()
        moved = lines.with_edge(Axis.VERTICAL, 0, Side.END, 5.0)
        assert moved.vertical[0] == Boundary(0, 5.0)
        assert moved.horizontal == lines.horizontal

    def test_with_edge_when_index_out_of_range_then_raises(self):
        with pytest.raises(IndexError):
            make_lines().with_edge(Axis.VERTICAL, 2, Side.START, 50)

    def test_same_shape_when_edges_differ_then_true(self):
        lines = make_lines()
        assert lines.same_shape(lines.with_edge(Axis.HORIZONTAL, 1, Side.END, 60))


class TestGridConfig:
    """Tests for GridConfig and presets."""

    def test_init_when_defaults_then_three_by_three(self):
        config = GridConfig()
        assert (config.rows, config.cols) == (3, 3)
        assert config.label == "3 x 3"

    @pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (-1, 1)])
    def test_init_when_count_below_one_then_raises_error(self, rows, cols):
        with pytest.raises(ValueError):
            GridConfig(rows, cols)

    def test_from_preset_when_five_verticals_then_one_row_five_cols(self):
        config = GridConfig.from_preset("5v")
        assert (config.rows, config.cols) == (1, 5)

    def test_from_preset_when_unknown_then_raises_key_error(self):
        with pytest.raises(KeyError):
            GridConfig.from_preset("4x4")

    def test_presets_when_listed_then_three_builtins(self):
        assert set(GRID_PRESETS) == {"3x3", "6x6", "5v"}
