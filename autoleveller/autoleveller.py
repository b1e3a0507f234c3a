"""Autoleveller facade tying the planner, the emitter and the corrector together.

Typical use::

    leveller = AutoLeveller(settings, ocodes, global_vars, tile_info=tiles)
    if not leveller.prepare_workarea(toolpaths):
        raise leveller.capacity_error()
    leveller.header(stream)
    cursor = Cursor(start)
    stream.write(leveller.g01_corrected(cursor, start))
    for point in path[1:]:
        stream.write(leveller.add_chain_point(cursor, point))
    leveller.footer(stream)
"""
import logging
from typing import Optional, Sequence, TextIO

from .corrector import Cursor, PointCorrector
from .dialects import Dialect, get_dialect
from .header import ProbingProgramEmitter
from .models import (
    AutolevelSettings,
    GlobalVariableSlots,
    Point,
    SubroutineNumbers,
    TileInfo,
)
from .probe_grid import GridCapacityError, ProbeGrid, plan_probe_grid
from .utils.unique_codes import UniqueCodes
from .workarea import compute_workarea, expand_for_tiles, is_finite, scale_workarea

logger = logging.getLogger(__name__)


class AutoLeveller:
    """
    Bed-leveling G-code generator for one generation session.

    Subroutine numbers and global variable slots are reserved here, once;
    the grid is planned by prepare_workarea().

    Args:
        settings: Autoleveller options
        ocodes: Allocator for subroutine and loop numbers
        global_vars: Allocator for global variable numbers
        quantization_error: Alignment tolerance, in board units (inches)
        x_offset: Board X offset, in board units
        y_offset: Board Y offset, in board units
        tile_info: Tiling layout, board dimensions in board units
    """

    def __init__(
        self,
        settings: AutolevelSettings,
        ocodes: UniqueCodes,
        global_vars: UniqueCodes,
        quantization_error: float = 0.0,
        x_offset: float = 0.0,
        y_offset: float = 0.0,
        tile_info: Optional[TileInfo] = None
    ):
        self.settings = settings
        self.ocodes = ocodes
        self.quantization_error = quantization_error
        self.x_offset = x_offset
        self.y_offset = y_offset
        self.tile_info = tile_info or TileInfo()
        self.dialect: Dialect = get_dialect(
            settings.software,
            settings.custom_probe_code,
            settings.custom_probe_var,
            settings.custom_set_zzero,
        )

        self.subroutines = SubroutineNumbers.reserve(ocodes)
        self.slots = GlobalVariableSlots.reserve(global_vars)
        logger.debug(
            "Reserved subroutines %s and global slots %s for %s",
            self.subroutines, self.slots, self.dialect.name
        )

        self.grid: Optional[ProbeGrid] = None
        self._emitter: Optional[ProbingProgramEmitter] = None
        self._corrector: Optional[PointCorrector] = None

    def prepare_workarea(self, toolpaths: Sequence[Sequence[Point]]) -> bool:
        """
        Plan the probe grid covering the toolpaths.

        Args:
            toolpaths: Non-empty collection of point sequences, in board units

        Returns:
            False if the grid needs more probe points than the controller holds

        Raises:
            ValueError: If the toolpaths hold no points
        """
        length_factor = self.settings.length_factor
        workarea = compute_workarea(
            toolpaths, self.x_offset, self.y_offset, self.quantization_error
        )
        if not is_finite(workarea):
            raise ValueError("No toolpath points to autolevel")
        workarea = scale_workarea(expand_for_tiles(workarea, self.tile_info), length_factor)

        grid = plan_probe_grid(workarea, self.settings.spacing_x_out, self.settings.spacing_y_out)
        self.grid = grid
        self._emitter = ProbingProgramEmitter(
            self.dialect, grid, self.slots, self.subroutines,
            self.settings, self.tile_info, self.ocodes
        )
        self._corrector = PointCorrector(
            self.dialect, grid, self.slots, self.subroutines.g01_interpolated,
            self.quantization_error * length_factor
        )

        if not grid.fits(self.dialect):
            logger.warning(
                "Probe grid %dx%d exceeds the %d point limit of %s",
                grid.num_x_points, grid.num_y_points,
                self.dialect.max_probe_points, self.dialect.name
            )
            return False
        return True

    def capacity_error(self) -> GridCapacityError:
        """Configuration error describing a rejected grid."""
        return GridCapacityError(
            self._require_grid(), self.dialect,
            self.settings.probe_spacing_x, self.settings.probe_spacing_y
        )

    def header(self, of: TextIO) -> None:
        self._require_grid()
        self._emitter.header(of)

    def footer(self, of: TextIO) -> None:
        self._require_grid()
        self._emitter.footer(of)

    def add_chain_point(self, cursor: Cursor, point: Point) -> str:
        self._require_grid()
        return self._corrector.add_chain_point(cursor, point)

    def g01_corrected(self, cursor: Cursor, point: Point) -> str:
        self._require_grid()
        return self._corrector.g01_corrected(cursor, point)

    @property
    def corrector(self) -> PointCorrector:
        self._require_grid()
        return self._corrector

    def _require_grid(self) -> ProbeGrid:
        if self.grid is None:
            raise RuntimeError("prepare_workarea() must be called first")
        return self.grid
