"""
Unit tests for default boundary generation.
"""

import pytest

from gridslice.core.models import Boundary, GridConfig
from gridslice.slicer.boundaries import (
    GUTTER_HALF_WIDTH,
    OUTER_MARGIN,
    create_grid_lines,
    generate_boundaries,
)


class TestGenerateBoundaries:

    def test_generate_when_count_then_count_plus_one(self):
        for count in (1, 2, 3, 6, 10):
            assert len(generate_boundaries(count)) == count + 1

    def test_generate_when_any_count_then_outer_margins_fixed(self):
        boundaries = generate_boundaries(4)
        assert boundaries[0] == Boundary(0.0, OUTER_MARGIN)
        assert boundaries[-1] == Boundary(100.0 - OUTER_MARGIN, 100.0)

    def test_generate_when_three_then_inner_gutters_centered(self):
        boundaries = generate_boundaries(3)
        assert boundaries[1].start == pytest.approx(100 / 3 - 1)
        assert boundaries[1].end == pytest.approx(100 / 3 + 1)
        assert boundaries[2].start == pytest.approx(200 / 3 - 1)
        assert boundaries[2].end == pytest.approx(200 / 3 + 1)

    def test_generate_when_inner_then_width_is_two(self):
        for boundary in generate_boundaries(6)[1:-1]:
            assert boundary.width == pytest.approx(2 * GUTTER_HALF_WIDTH)

    def test_generate_when_one_then_only_outer_margins(self):
        assert generate_boundaries(1) == (Boundary(0.0, 1.5), Boundary(98.5, 100.0))

    @pytest.mark.parametrize("count", [0, -3])
    def test_generate_when_count_below_one_then_raises(self, count):
        with pytest.raises(ValueError, match="count must be >= 1"):
            generate_boundaries(count)

    def test_generate_when_repeated_then_identical(self):
        assert generate_boundaries(5) == generate_boundaries(5)


class TestCreateGridLines:

    def test_create_when_five_verticals_then_rows_drive_horizontal(self):
        lines = create_grid_lines(GridConfig(1, 5))
        assert len(lines.horizontal) == 2
        assert len(lines.vertical) == 6
        assert (lines.rows, lines.cols) == (1, 5)
