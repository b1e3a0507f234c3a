"""Workarea calculation from toolpath point sequences."""
import math
from typing import Iterable, Sequence

from .models import Point, TileInfo, Workarea


def compute_workarea(
    toolpaths: Iterable[Sequence[Point]],
    x_offset: float = 0.0,
    y_offset: float = 0.0,
    tolerance: float = 0.0
) -> Workarea:
    """
    Bounding rectangle of every toolpath point.

    The rectangle is moved by the board offsets and grown by the
    quantization tolerance on all sides, so discretization error in the
    path data stays inside the probed area.

    Args:
        toolpaths: Point sequences (each non-empty), in board units
        x_offset: Board X offset subtracted from every coordinate
        y_offset: Board Y offset subtracted from every coordinate
        tolerance: Quantization tolerance, in board units

    Returns:
        Workarea in board units. An empty collection yields an infinite
        rectangle; callers must not plan a grid from it.
    """
    min_x = min_y = math.inf
    max_x = max_y = -math.inf

    for path in toolpaths:
        for x, y in path:
            min_x = min(min_x, x)
            min_y = min(min_y, y)
            max_x = max(max_x, x)
            max_y = max(max_y, y)

    return Workarea(
        near=Point(min_x - (x_offset + tolerance), min_y - (y_offset + tolerance)),
        far=Point(max_x - (x_offset - tolerance), max_y - (y_offset - tolerance)),
    )


def expand_for_tiles(workarea: Workarea, tile_info: TileInfo) -> Workarea:
    """
    Push the far corner out to cover every repeated tile.

    Args:
        workarea: Workarea of a single tile
        tile_info: Tiling layout (board dimensions in the workarea's units)

    Returns:
        Workarea covering all tiles
    """
    return Workarea(
        near=workarea.near,
        far=Point(
            workarea.far.x + (tile_info.tile_x - 1) * tile_info.board_width,
            workarea.far.y + (tile_info.tile_y - 1) * tile_info.board_height,
        ),
    )


def scale_workarea(workarea: Workarea, factor: float) -> Workarea:
    """Convert a workarea to another unit system."""
    return Workarea(
        near=Point(workarea.near.x * factor, workarea.near.y * factor),
        far=Point(workarea.far.x * factor, workarea.far.y * factor),
    )


def is_finite(workarea: Workarea) -> bool:
    """False for the sentinel rectangle of an empty toolpath collection."""
    return all(math.isfinite(value) for value in (*workarea.near, *workarea.far))
