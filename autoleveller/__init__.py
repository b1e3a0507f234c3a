"""Bed-leveling (autolevel) G-code generation for CNC milling."""

from .models import (
    Point,
    Workarea,
    TileInfo,
    GlobalVariableSlots,
    SubroutineNumbers,
    AutolevelSettings,
)
from .dialects import (
    CallProtocol,
    Dialect,
    DIALECTS,
    get_dialect,
)
from .workarea import (
    compute_workarea,
    expand_for_tiles,
    scale_workarea,
)
from .probe_grid import (
    ProbeGrid,
    GridCapacityError,
    plan_probe_grid,
    check_grid_capacity,
)
from .header import ProbingProgramEmitter
from .corrector import (
    Cursor,
    PointCorrector,
    bilinear_interpolate,
    locate_cell,
    evaluate_correction,
)
from .autoleveller import AutoLeveller
from .exporter import (
    export_autolevel_gcode,
    generate_autolevel_gcode,
)

__all__ = [
    # Data model
    'Point',
    'Workarea',
    'TileInfo',
    'GlobalVariableSlots',
    'SubroutineNumbers',
    'AutolevelSettings',
    # Dialects
    'CallProtocol',
    'Dialect',
    'DIALECTS',
    'get_dialect',
    # Workarea / grid
    'compute_workarea',
    'expand_for_tiles',
    'scale_workarea',
    'ProbeGrid',
    'GridCapacityError',
    'plan_probe_grid',
    'check_grid_capacity',
    # Emission
    'ProbingProgramEmitter',
    'Cursor',
    'PointCorrector',
    'bilinear_interpolate',
    'locate_cell',
    'evaluate_correction',
    'AutoLeveller',
    'export_autolevel_gcode',
    'generate_autolevel_gcode',
]
