"""Tests for autoleveller/corrector.py module."""
import numpy as np
import pytest

from autoleveller.corrector import (
    Cursor,
    PointCorrector,
    bilinear_interpolate,
    evaluate_correction,
    locate_cell,
)
from autoleveller.models import Point
from autoleveller.probe_grid import ProbeGrid


@pytest.fixture
def corrector(linuxcnc, small_grid, slots, subroutines):
    return PointCorrector(linuxcnc, small_grid, slots, subroutines.g01_interpolated)


@pytest.fixture
def inline_corrector(custom, small_grid, slots, subroutines):
    return PointCorrector(custom, small_grid, slots, subroutines.g01_interpolated)


class TestBilinearInterpolate:
    """Tests for the interpolation formula."""

    def test_corners(self):
        corners = (1.0, 2.0, 3.0, 4.0)
        assert bilinear_interpolate(*corners, 0.0, 0.0) == 1.0
        assert bilinear_interpolate(*corners, 0.0, 1.0) == 2.0
        assert bilinear_interpolate(*corners, 1.0, 0.0) == 3.0
        assert bilinear_interpolate(*corners, 1.0, 1.0) == 4.0

    def test_center(self):
        assert bilinear_interpolate(0.0, 1.0, 1.0, 2.0, 0.5, 0.5) == pytest.approx(1.0)

    def test_flat_cell(self):
        assert bilinear_interpolate(0.3, 0.3, 0.3, 0.3, 0.2, 0.7) == pytest.approx(0.3)


class TestLocateCell:
    """Tests for finding the cell of a point."""

    def test_inside_first_cell(self, small_grid):
        cell = locate_cell(small_grid, Point(5.0, 2.5))
        assert (cell.i, cell.j) == (0, 0)
        assert cell.x_fraction == pytest.approx(0.5)
        assert cell.y_fraction == pytest.approx(0.25)

    def test_on_vertex_gives_zero_fraction(self, small_grid):
        cell = locate_cell(small_grid, Point(10.0, 0.0))
        assert (cell.i, cell.j) == (1, 0)
        assert cell.x_fraction == 0.0
        assert cell.y_fraction == 0.0

    def test_far_edge_uses_last_cell(self, small_grid):
        cell = locate_cell(small_grid, Point(20.0, 10.0))
        assert (cell.i, cell.j) == (1, 0)
        assert cell.x_fraction == pytest.approx(1.0)
        assert cell.y_fraction == pytest.approx(1.0)

    def test_zero_spacing(self):
        grid = ProbeGrid(2, 2, 0.0, 0.0, Point(1.0, 1.0))
        cell = locate_cell(grid, Point(1.0, 1.0))
        assert (cell.i, cell.j, cell.x_fraction, cell.y_fraction) == (0, 0, 0.0, 0.0)


class TestEvaluateCorrection:
    """Tests for host-side evaluation of the correction."""

    def test_plane_is_reproduced(self, small_grid):
        # z = 0.01 * x + 0.02 * y sampled at every probe point
        heights = np.array([
            [0.01 * small_grid.probe_point(i, j).x + 0.02 * small_grid.probe_point(i, j).y
             for j in range(small_grid.num_y_points)]
            for i in range(small_grid.num_x_points)
        ])
        for point in (Point(3.0, 7.0), Point(12.5, 1.0), Point(20.0, 10.0)):
            expected = 0.01 * point.x + 0.02 * point.y
            assert evaluate_correction(small_grid, heights, point) == pytest.approx(expected)

    def test_probe_points_return_probed_value(self, small_grid):
        heights = np.arange(6, dtype=float).reshape(3, 2)
        for i in range(3):
            for j in range(2):
                point = small_grid.probe_point(i, j)
                assert evaluate_correction(small_grid, heights, point) == pytest.approx(heights[i][j])


class TestSubsegments:
    """Tests for move splitting."""

    def test_vertical_move_uses_y_spacing(self, corrector):
        assert corrector.num_of_subsegments(Cursor(Point(0.0, 0.0)), Point(0.0, 25.0)) == 3

    def test_horizontal_move_uses_x_spacing(self, corrector):
        assert corrector.num_of_subsegments(Cursor(Point(0.0, 5.0)), Point(20.0, 5.0)) == 2

    def test_diagonal_move_uses_average_spacing(self, corrector):
        # length 25, average spacing 10
        assert corrector.num_of_subsegments(Cursor(Point(0.0, 0.0)), Point(15.0, 20.0)) == 3

    def test_zero_length_move(self, corrector):
        assert corrector.num_of_subsegments(Cursor(Point(4.0, 4.0)), Point(4.0, 4.0)) == 1

    def test_tolerance_treats_near_vertical_as_vertical(self, linuxcnc, slots):
        grid = ProbeGrid(3, 6, 10.0, 2.0, Point(0.0, 0.0))
        corrector = PointCorrector(linuxcnc, grid, slots, 1, tolerance=0.01)
        assert corrector.num_of_subsegments(Cursor(Point(0.0, 0.0)), Point(0.005, 9.0)) == 5

    def test_zero_spacing_gives_single_segment(self, linuxcnc, slots):
        grid = ProbeGrid(2, 2, 0.0, 0.0, Point(0.0, 0.0))
        corrector = PointCorrector(linuxcnc, grid, slots, 1)
        assert corrector.num_of_subsegments(Cursor(Point(0.0, 0.0)), Point(0.0, 5.0)) == 1

    def test_split_single_segment_is_endpoint(self, corrector):
        assert corrector.split_segment(Cursor(Point(0.0, 0.0)), Point(3.0, 4.0), 1) == [Point(3.0, 4.0)]

    def test_split_is_equidistant(self, corrector):
        points = corrector.split_segment(Cursor(Point(0.0, 0.0)), Point(0.0, 25.0), 3)
        assert len(points) == 3
        assert [p.y for p in points] == pytest.approx([25.0 / 3, 50.0 / 3, 25.0])
        assert all(p.x == 0.0 for p in points)
        assert points[-1] == Point(0.0, 25.0)


class TestInlineInterpolation:
    """Tests for the inline correction of controllers without subroutines."""

    def test_interpolate_point_text(self, inline_corrector):
        assert inline_corrector.interpolate_point(Point(5.0, 5.0)) == (
            "#1=[#500+[#501-#500]*0.50000]\n"
            "#2=[#502+[#503-#502]*0.50000]\n"
            "#3=[#1+[#2-#1]*0.50000]\n"
        )

    def test_far_corner_uses_last_cell(self, inline_corrector):
        assert inline_corrector.interpolate_point(Point(20.0, 10.0)) == (
            "#1=[#502+[#503-#502]*1.00000]\n"
            "#2=[#504+[#505-#504]*1.00000]\n"
            "#3=[#1+[#2-#1]*1.00000]\n"
        )

    def test_add_chain_point_inline(self, inline_corrector):
        cursor = Cursor(Point(0.0, 0.0))
        output = inline_corrector.add_chain_point(cursor, Point(5.0, 0.0))
        assert output == (
            "#1=[#500+[#501-#500]*0.00000]\n"
            "#2=[#502+[#503-#502]*0.00000]\n"
            "#3=[#1+[#2-#1]*0.50000]\n"
            "X5.00000 Y0.00000 Z[#3+#4]\n"
        )

    def test_g01_corrected_inline(self, inline_corrector):
        output = inline_corrector.g01_corrected(Cursor(), Point(0.0, 0.0))
        assert output.endswith("G01 Z[#3+#4]\n")
        assert output.startswith("#1=[#500+")

    def test_call_is_rejected(self, inline_corrector):
        with pytest.raises(ValueError):
            inline_corrector.call(Point(0.0, 0.0))


class TestSubroutineCalls:
    """Tests for calls of the correction subroutine."""

    def test_linuxcnc_call(self, corrector):
        assert corrector.call(Point(1.0, 2.0)) == "o1 call [1.00000] [2.00000]\n"

    def test_mach4_call(self, mach4, small_grid, slots):
        corrector = PointCorrector(mach4, small_grid, slots, 1)
        assert corrector.call(Point(1.0, 2.0)) == "G65 P1 A1.00000 B2.00000\n"

    def test_mach3_call_uses_argument_slots(self, mach3, small_grid, slots):
        corrector = PointCorrector(mach3, small_grid, slots, 1)
        assert corrector.call(Point(1.0, 2.0)) == "#105=1.00000\n#106=2.00000\nM98 P1\n"

    def test_add_chain_point_splits(self, corrector):
        cursor = Cursor(Point(0.0, 0.0))
        output = corrector.add_chain_point(cursor, Point(0.0, 25.0))
        assert output.splitlines() == [
            "o1 call [0.00000] [8.33333]",
            "o1 call [0.00000] [16.66667]",
            "o1 call [0.00000] [25.00000]",
        ]

    def test_g01_corrected_does_not_split(self, corrector):
        cursor = Cursor(Point(0.0, 0.0))
        assert corrector.g01_corrected(cursor, Point(0.0, 25.0)) == "o1 call [0.00000] [25.00000]\n"


class TestCursor:
    """Tests for cursor handling."""

    def test_default_is_origin(self):
        assert Cursor().point == Point(0.0, 0.0)

    def test_add_chain_point_advances(self, corrector):
        cursor = Cursor()
        corrector.add_chain_point(cursor, Point(3.0, 4.0))
        assert cursor.point == Point(3.0, 4.0)

    def test_g01_corrected_advances(self, corrector):
        cursor = Cursor()
        corrector.g01_corrected(cursor, Point(7.0, 1.0))
        assert cursor.point == Point(7.0, 1.0)

    def test_second_move_starts_at_previous_end(self, corrector):
        cursor = Cursor()
        corrector.add_chain_point(cursor, Point(0.0, 10.0))
        output = corrector.add_chain_point(cursor, Point(0.0, 20.0))
        assert output == "o1 call [0.00000] [20.00000]\n"

    def test_correct_path(self, corrector):
        cursor = Cursor(Point(0.0, 0.0))
        output = corrector.correct_path(cursor, [Point(0.0, 0.0), Point(10.0, 0.0), Point(10.0, 10.0)])
        assert output.splitlines() == [
            "o1 call [0.00000] [0.00000]",
            "o1 call [10.00000] [0.00000]",
            "o1 call [10.00000] [10.00000]",
        ]
        assert cursor.point == Point(10.0, 10.0)

    def test_correct_path_without_plunge(self, corrector):
        cursor = Cursor(Point(0.0, 0.0))
        output = corrector.correct_path(cursor, [Point(0.0, 0.0), Point(10.0, 0.0)], plunge=False)
        assert output == "o1 call [10.00000] [0.00000]\n"
