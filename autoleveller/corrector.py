"""Per-point Z correction of toolpath moves.

Long moves are split so that no sub-segment crosses more than about one probe
cell, then every sub-segment end is sent through the Z-correction subroutine
(or, for controllers without subroutines, through an inline copy of its
formula).
"""
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .dialects import Dialect
from .models import GlobalVariableSlots, Point
from .probe_grid import ProbeGrid
from .utils.gcode_format import format_coordinate


@dataclass
class Cursor:
    """Last toolpath point processed; advanced after every emitted move."""
    point: Point = Point(0.0, 0.0)

    def advance(self, point: Point) -> None:
        self.point = point


@dataclass(frozen=True)
class Cell:
    """Probe cell containing a point, with the point's position inside it."""
    i: int
    j: int
    x_fraction: float
    y_fraction: float


def bilinear_interpolate(
    lower_left: float,
    upper_left: float,
    lower_right: float,
    upper_right: float,
    x_fraction: float,
    y_fraction: float
) -> float:
    """
    Interpolate the four corners of a cell.

    Interpolates along Y on both vertical edges, then along X between the
    two results; the same order the generated program uses.

    Args:
        lower_left: Value at (i, j)
        upper_left: Value at (i, j + 1)
        lower_right: Value at (i + 1, j)
        upper_right: Value at (i + 1, j + 1)
        x_fraction: Position inside the cell along X, 0..1
        y_fraction: Position inside the cell along Y, 0..1

    Returns:
        Interpolated value
    """
    left = lower_left + (upper_left - lower_left) * y_fraction
    right = lower_right + (upper_right - lower_right) * y_fraction
    return left + (right - left) * x_fraction


def _locate_axis(offset: float, spacing: float, num_points: int) -> Tuple[int, float]:
    if spacing == 0:
        return 0, 0.0
    index = math.floor(offset / spacing)
    index = min(max(index, 0), num_points - 2)
    return index, (offset - index * spacing) / spacing


def locate_cell(grid: ProbeGrid, point: Point) -> Cell:
    """
    Find the probe cell to interpolate a point from.

    Points on or beyond the last grid line use the last cell, so a point on
    the far edge gets a fraction of exactly 1.
    """
    i, x_fraction = _locate_axis(point.x - grid.start_point.x, grid.x_spacing, grid.num_x_points)
    j, y_fraction = _locate_axis(point.y - grid.start_point.y, grid.y_spacing, grid.num_y_points)
    return Cell(i, j, x_fraction, y_fraction)


def evaluate_correction(grid: ProbeGrid, heights, point: Point) -> float:
    """
    Z correction the generated program applies at a point.

    Args:
        grid: Probe grid
        heights: Probed heights indexed as heights[i][j] (e.g. a numpy array)
        point: Point to evaluate

    Returns:
        Interpolated height
    """
    cell = locate_cell(grid, point)
    i, j = cell.i, cell.j
    return bilinear_interpolate(
        heights[i][j], heights[i][j + 1],
        heights[i + 1][j], heights[i + 1][j + 1],
        cell.x_fraction, cell.y_fraction,
    )


class PointCorrector:
    """
    Emit Z-corrected moves for toolpath points.

    Callers must feed points in path order through one Cursor; every call
    reads the cursor before emitting and advances it afterwards.

    Args:
        dialect: Target controller dialect
        grid: Planned probe grid
        slots: Reserved global variable slots (argument slots for shared globals)
        subroutine_number: Number of the Z-correction subroutine
        tolerance: Alignment tolerance, in output units
    """

    def __init__(
        self,
        dialect: Dialect,
        grid: ProbeGrid,
        slots: GlobalVariableSlots,
        subroutine_number: int,
        tolerance: float = 0.0
    ):
        self.dialect = dialect
        self.grid = grid
        self.slots = slots
        self.subroutine_number = subroutine_number
        self.tolerance = tolerance

    def num_of_subsegments(self, cursor: Cursor, point: Point) -> int:
        """Number of sub-segments the move from the cursor to point is split into."""
        last = cursor.point
        if abs(last.x - point.x) <= self.tolerance:
            step = self.grid.y_spacing
        elif abs(last.y - point.y) <= self.tolerance:
            step = self.grid.x_spacing
        else:
            step = self.grid.average_spacing

        if step <= 0:
            return 1
        distance = math.hypot(point.x - last.x, point.y - last.y)
        return max(1, math.ceil(distance / step))

    def split_segment(self, cursor: Cursor, point: Point, n: int) -> List[Point]:
        """
        Evenly spaced points from the cursor (excluded) to point (included).

        Args:
            cursor: Start of the move
            point: End of the move
            n: Number of sub-segments

        Returns:
            n points, the last one being point
        """
        last = cursor.point
        return [
            Point(
                last.x + (point.x - last.x) * i / n,
                last.y + (point.y - last.y) * i / n,
            )
            for i in range(1, n + 1)
        ]

    def interpolate_point(self, point: Point) -> str:
        """Inline assignments leaving the Z correction of point in #3."""
        grid = self.grid
        cell = locate_cell(grid, point)
        i, j = cell.i, cell.j
        lower_left = grid.variable_name(i, j)
        upper_left = grid.variable_name(i, j + 1)
        lower_right = grid.variable_name(i + 1, j)
        upper_right = grid.variable_name(i + 1, j + 1)
        fy = format_coordinate(cell.y_fraction)
        fx = format_coordinate(cell.x_fraction)
        return (
            f"#1=[{lower_left}+[{upper_left}-{lower_left}]*{fy}]\n"
            f"#2=[{lower_right}+[{upper_right}-{lower_right}]*{fy}]\n"
            f"#3=[#1+[#2-#1]*{fx}]\n"
        )

    def call(self, point: Point) -> str:
        """Call of the Z-correction subroutine with point as target."""
        return self.dialect.call(
            self.subroutine_number,
            format_coordinate(point.x),
            format_coordinate(point.y),
            (self.slots.x_argument, self.slots.y_argument),
        )

    def add_chain_point(self, cursor: Cursor, point: Point) -> str:
        """
        Corrected linear move from the cursor to point.

        Args:
            cursor: Running cursor, advanced to point afterwards
            point: Target point, in output units

        Returns:
            G-code text, newline terminated
        """
        subsegments = self.split_segment(cursor, point, self.num_of_subsegments(cursor, point))

        if self.dialect.supports_subroutines:
            output = ''.join(self.call(sub) for sub in subsegments)
        else:
            output = ''.join(
                self.interpolate_point(sub)
                + f"X{format_coordinate(sub.x)} Y{format_coordinate(sub.y)} Z[#3+#4]\n"
                for sub in subsegments
            )

        cursor.advance(point)
        return output

    def g01_corrected(self, cursor: Cursor, point: Point) -> str:
        """Single corrected move to point, without splitting (e.g. a plunge)."""
        if self.dialect.supports_subroutines:
            output = self.call(point)
        else:
            output = self.interpolate_point(point) + "G01 Z[#3+#4]\n"

        cursor.advance(point)
        return output

    def correct_path(self, cursor: Cursor, points: Sequence[Point], plunge: bool = True) -> str:
        """
        Corrected moves along a whole path, starting at the cursor.

        Args:
            cursor: Running cursor, positioned at points[0]
            points: Path points in output units
            plunge: Emit a corrected plunge at the first point

        Returns:
            G-code text for the path
        """
        output = self.g01_corrected(cursor, points[0]) if plunge else ''
        for point in points[1:]:
            output += self.add_chain_point(cursor, point)
        return output
