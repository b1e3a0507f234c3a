"""Probe grid planning.

The probed heights live in numbered variables of the controller, starting
at #500, so the grid size is bounded by what each controller can address.
"""
import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .dialects import Dialect
from .models import Point, Workarea

logger = logging.getLogger(__name__)

# First numbered variable of the probe value table
PROBE_TABLE_BASE = 500

# A surface needs at least two samples per axis to be interpolated
MIN_POINTS_PER_AXIS = 2


class GridCapacityError(ValueError):
    """Requested probe resolution needs more points than the controller holds."""

    def __init__(self, grid: 'ProbeGrid', dialect: Dialect, spacing_x: float, spacing_y: float):
        self.grid = grid
        self.dialect = dialect
        super().__init__(
            f"Requested probe resolution too fine for board size: spacing "
            f"{spacing_x:g} x {spacing_y:g} needs a {grid.num_x_points} x "
            f"{grid.num_y_points} grid ({grid.point_count} points), but "
            f"{dialect.name} supports at most {dialect.max_probe_points}"
        )


@dataclass(frozen=True)
class ProbeGrid:
    """Planned grid of probe points."""
    num_x_points: int
    num_y_points: int
    x_spacing: float
    y_spacing: float
    start_point: Point

    @property
    def average_spacing(self) -> float:
        """Mean spacing, used as step size for diagonal moves."""
        return (self.x_spacing + self.y_spacing) / 2

    @property
    def point_count(self) -> int:
        return self.num_x_points * self.num_y_points

    def fits(self, dialect: Dialect) -> bool:
        return check_grid_capacity(self, dialect)

    def variable_index(self, i: int, j: int) -> int:
        """Number of the variable holding the probe at column i, row j."""
        return i * self.num_y_points + j + PROBE_TABLE_BASE

    def variable_name(self, i: int, j: int) -> str:
        return f"#{self.variable_index(i, j)}"

    def probe_point(self, i: int, j: int) -> Point:
        return Point(
            self.start_point.x + i * self.x_spacing,
            self.start_point.y + j * self.y_spacing,
        )

    def probe_points(self) -> List[Point]:
        """Every probe point, column by column."""
        return [
            self.probe_point(i, j)
            for i in range(self.num_x_points)
            for j in range(self.num_y_points)
        ]

    def serpentine_order(self) -> Iterator[Tuple[int, int]]:
        """
        Probing order after the reference point (0, 0).

        Columns are walked alternately up and down so the probe never
        travels back across the board between columns.
        """
        j = 1
        step = 1
        for i in range(self.num_x_points):
            while 0 <= j <= self.num_y_points - 1:
                yield i, j
                j += step
            step = -step
            j += step


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def points_for_span(span: float, requested_spacing: float) -> int:
    """
    Number of probe points needed along one axis.

    Args:
        span: Length of the axis to cover
        requested_spacing: Desired distance between probes

    Returns:
        Point count, at least 2
    """
    steps = round_half_away(span / requested_spacing)
    if steps > 1:
        return steps + 1
    return MIN_POINTS_PER_AXIS


def plan_probe_grid(workarea: Workarea, spacing_x: float, spacing_y: float) -> ProbeGrid:
    """
    Plan the probe grid covering a workarea.

    The actual spacing is adjusted so the grid spans the workarea exactly.

    Args:
        workarea: Area to probe, tiles included, in output units
        spacing_x: Requested X spacing, in output units
        spacing_y: Requested Y spacing, in output units

    Returns:
        ProbeGrid (capacity is not checked here, see check_grid_capacity)
    """
    num_x_points = points_for_span(workarea.span_x, spacing_x)
    num_y_points = points_for_span(workarea.span_y, spacing_y)

    grid = ProbeGrid(
        num_x_points=num_x_points,
        num_y_points=num_y_points,
        x_spacing=workarea.span_x / (num_x_points - 1),
        y_spacing=workarea.span_y / (num_y_points - 1),
        start_point=workarea.near,
    )
    logger.debug(
        "Planned %dx%d probe grid, spacing %.5f x %.5f",
        num_x_points, num_y_points, grid.x_spacing, grid.y_spacing
    )
    return grid


def check_grid_capacity(grid: ProbeGrid, dialect: Dialect) -> bool:
    """
    Check the grid against the dialect's probe point ceiling.

    Returns:
        True if the grid fits (a grid exactly at the ceiling fits)
    """
    return grid.point_count <= dialect.max_probe_points
