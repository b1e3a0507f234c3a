"""Toolpath export with autoleveling.

Drives an AutoLeveller over a complete milling program: preamble, probing
program, corrected toolpaths, epilogue and (for controllers that define
subroutines last) the subroutine block.
"""
import io
import logging
from typing import List, Optional, Sequence, TextIO

from .autoleveller import AutoLeveller
from .corrector import Cursor
from .models import AutolevelSettings, Point, TileInfo
from .probe_grid import ProbeGrid
from .utils.gcode_format import format_number, generate_rapid_move
from .utils.unique_codes import GLOBAL_VARIABLES_START, GLOBAL_VARIABLES_STOP, SUBROUTINE_CODES_START, UniqueCodes

logger = logging.getLogger(__name__)


def to_points(path: Sequence) -> List[Point]:
    """Accept (x, y) pairs or Points."""
    return [point if isinstance(point, Point) else Point(float(point[0]), float(point[1]))
            for point in path]


def export_autolevel_gcode(
    toolpaths: Sequence[Sequence],
    settings: AutolevelSettings,
    of: TextIO,
    tile_info: Optional[TileInfo] = None,
    quantization_error: float = 0.0,
    x_offset: float = 0.0,
    y_offset: float = 0.0,
    feed_rate: Optional[float] = None,
    ocodes: Optional[UniqueCodes] = None,
    global_vars: Optional[UniqueCodes] = None
) -> ProbeGrid:
    """
    Write a complete autoleveled milling program.

    Args:
        toolpaths: Point sequences in board units (inches)
        settings: Autoleveller options
        of: Output text stream, written forward only
        tile_info: Optional tiling layout
        quantization_error: Alignment tolerance, in board units
        x_offset: Board X offset, in board units
        y_offset: Board Y offset, in board units
        feed_rate: Optional milling feed, in option units
        ocodes: Subroutine number allocator (a fresh one if omitted)
        global_vars: Global variable allocator (a fresh one if omitted)

    Returns:
        The planned probe grid

    Raises:
        ValueError: If there are no toolpath points
        GridCapacityError: If the probe resolution is too fine for the board
    """
    paths = [to_points(path) for path in toolpaths if len(path) > 0]
    if not paths:
        raise ValueError("No toolpath points to autolevel")

    leveller = AutoLeveller(
        settings,
        ocodes or UniqueCodes(SUBROUTINE_CODES_START),
        global_vars or UniqueCodes(GLOBAL_VARIABLES_START, GLOBAL_VARIABLES_STOP),
        quantization_error=quantization_error,
        x_offset=x_offset,
        y_offset=y_offset,
        tile_info=tile_info,
    )
    if not leveller.prepare_workarea(paths):
        raise leveller.capacity_error()

    grid = leveller.grid
    factor = settings.length_factor
    safe_height = settings.safe_height_out

    of.write("G90\n")
    of.write("G21\n" if settings.metric_output else "G20\n")
    leveller.header(of)

    if feed_rate is not None:
        of.write(f"G01 F{format_number(feed_rate * settings.unit_factor)}\n")

    cursor = Cursor()
    for path in paths:
        points = [Point((p.x - x_offset) * factor, (p.y - y_offset) * factor) for p in path]
        of.write(generate_rapid_move(z=safe_height) + '\n')
        of.write(generate_rapid_move(x=points[0].x, y=points[0].y) + '\n')
        of.write(leveller.corrector.correct_path(cursor, points))

    of.write(generate_rapid_move(z=safe_height) + '\n')
    of.write("M5\n")
    of.write("M30\n\n")
    leveller.footer(of)

    logger.info(
        "Exported %d toolpaths with a %dx%d probe grid for %s",
        len(paths), grid.num_x_points, grid.num_y_points, leveller.dialect.name
    )
    return grid


def generate_autolevel_gcode(toolpaths: Sequence[Sequence], settings: AutolevelSettings, **kwargs) -> str:
    """Same as export_autolevel_gcode, returning the program as a string."""
    buffer = io.StringIO()
    export_autolevel_gcode(toolpaths, settings, buffer, **kwargs)
    return buffer.getvalue()
