"""Autolevel generation service."""
import io
from dataclasses import fields, replace
from typing import Dict, List, Optional

from flask import current_app

from autoleveller.autoleveller import AutoLeveller
from autoleveller.dialects import DIALECTS
from autoleveller.exporter import export_autolevel_gcode, to_points
from autoleveller.models import AutolevelSettings, Point, TileInfo
from autoleveller.probe_grid import ProbeGrid
from autoleveller.utils.unique_codes import (
    GLOBAL_VARIABLES_START,
    GLOBAL_VARIABLES_STOP,
    SUBROUTINE_CODES_START,
    UniqueCodes,
)
from autoleveller.utils.units import mm_to_inches

SETTINGS_FIELDS = {field.name for field in fields(AutolevelSettings)}


def _to_board_units(value: float, settings: AutolevelSettings) -> float:
    """Request lengths follow the input unit system; boards are planned in inches."""
    return mm_to_inches(value) if settings.metric else value


class AutolevelService:
    """Service for autolevel planning and generation."""

    @staticmethod
    def list_dialects() -> List[Dict]:
        """Summary of every supported controller dialect."""
        return [
            {
                'name': dialect.name,
                'call_protocol': dialect.call_protocol.value,
                'max_probe_points': dialect.max_probe_points,
                'probe_code': dialect.probe_code,
            }
            for dialect in DIALECTS.values()
        ]

    @staticmethod
    def build_settings(data: Optional[Dict]) -> AutolevelSettings:
        """
        Merge request settings over the configured defaults.

        Raises:
            ValueError: If the request names an unknown setting
        """
        data = data or {}
        unknown = set(data) - SETTINGS_FIELDS
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return AutolevelSettings.from_config(current_app.config, **data)

    @staticmethod
    def parse_toolpaths(data: Dict, settings: AutolevelSettings) -> List[List[Point]]:
        """
        Toolpaths of the request, in board units (inches).

        Raises:
            KeyError: If the request has no toolpaths
            ValueError: If every toolpath is empty
        """
        toolpaths = [
            [Point(_to_board_units(p.x, settings), _to_board_units(p.y, settings)) for p in to_points(path)]
            for path in data['toolpaths'] if path
        ]
        if not toolpaths:
            raise ValueError("No toolpath points provided")
        return toolpaths

    @staticmethod
    def grid_to_dict(grid: ProbeGrid) -> Dict:
        return {
            'num_x_points': grid.num_x_points,
            'num_y_points': grid.num_y_points,
            'x_spacing': grid.x_spacing,
            'y_spacing': grid.y_spacing,
            'average_spacing': grid.average_spacing,
            'start_point': [grid.start_point.x, grid.start_point.y],
            'point_count': grid.point_count,
        }

    @staticmethod
    def _options(data: Dict, settings: AutolevelSettings) -> Dict:
        tile_info = None
        if data.get('tiling'):
            tile_info = TileInfo(**data['tiling'])
            tile_info = replace(
                tile_info,
                board_width=_to_board_units(tile_info.board_width, settings),
                board_height=_to_board_units(tile_info.board_height, settings),
            )
        quantization_error = data.get('quantization_error', current_app.config.get('AL_QUANTIZATION_ERROR', 0.0))
        return {
            'tile_info': tile_info,
            'quantization_error': _to_board_units(float(quantization_error), settings),
            'x_offset': _to_board_units(float(data.get('x_offset', 0.0)), settings),
            'y_offset': _to_board_units(float(data.get('y_offset', 0.0)), settings),
        }

    @staticmethod
    def plan(data: Dict) -> Dict:
        """
        Plan the probe grid without generating G-code.

        Returns dict with the grid (output units), its probe points and
        whether it fits the selected controller.
        """
        settings = AutolevelService.build_settings(data.get('settings'))
        toolpaths = AutolevelService.parse_toolpaths(data, settings)

        leveller = AutoLeveller(
            settings,
            UniqueCodes(SUBROUTINE_CODES_START),
            UniqueCodes(GLOBAL_VARIABLES_START, GLOBAL_VARIABLES_STOP),
            **AutolevelService._options(data, settings)
        )
        fits = leveller.prepare_workarea(toolpaths)
        grid = leveller.grid

        return {
            'dialect': leveller.dialect.name,
            'fits': fits,
            'grid': AutolevelService.grid_to_dict(grid),
            'probe_points': [[p.x, p.y] for p in grid.probe_points()],
        }

    @staticmethod
    def generate(data: Dict) -> Dict:
        """
        Generate the autoleveled program.

        Raises:
            GridCapacityError: If the probe resolution is too fine
            ValueError: On malformed input
        """
        settings = AutolevelService.build_settings(data.get('settings'))
        toolpaths = AutolevelService.parse_toolpaths(data, settings)
        feed_rate = data.get('feed_rate')

        buffer = io.StringIO()
        grid = export_autolevel_gcode(
            toolpaths, settings, buffer,
            feed_rate=float(feed_rate) if feed_rate is not None else None,
            **AutolevelService._options(data, settings)
        )
        return {'gcode': buffer.getvalue(), 'grid': AutolevelService.grid_to_dict(grid)}
