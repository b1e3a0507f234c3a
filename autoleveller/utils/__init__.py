"""Shared utility modules for autolevel G-code generation."""

from .units import (
    inches_to_mm,
    mm_to_inches,
    option_unit_factor,
    output_length_factor,
)
from .gcode_format import (
    format_coordinate,
    format_height,
    format_number,
    unescape_snippet,
    generate_rapid_move,
    generate_comment,
)
from .unique_codes import (
    UniqueCodes,
    SUBROUTINE_CODES_START,
    GLOBAL_VARIABLES_START,
    GLOBAL_VARIABLES_STOP,
)

__all__ = [
    # units
    'inches_to_mm',
    'mm_to_inches',
    'option_unit_factor',
    'output_length_factor',
    # gcode_format
    'format_coordinate',
    'format_height',
    'format_number',
    'unescape_snippet',
    'generate_rapid_move',
    'generate_comment',
    # unique_codes
    'UniqueCodes',
    'SUBROUTINE_CODES_START',
    'GLOBAL_VARIABLES_START',
    'GLOBAL_VARIABLES_STOP',
]
