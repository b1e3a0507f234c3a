"""Probing program emission: probing header, subroutine block, epilogue.

The Z-correction subroutine reads its target from the call arguments, finds
the probe cell containing it and interpolates the four corner probes:

    #13 = lower left  + (upper left  - lower left)  * fy
    #14 = lower right + (upper right - lower right) * fy
    #15 = #13 + (#14 - #13) * fx

The probes themselves are taken column by column, alternating direction on
each column, by the X-probe subroutine calling the Y-probe subroutine.
"""
from typing import TextIO

from .dialects import Dialect
from .models import AutolevelSettings, GlobalVariableSlots, SubroutineNumbers, TileInfo
from .probe_grid import PROBE_TABLE_BASE, ProbeGrid
from .utils.gcode_format import (
    format_coordinate,
    format_height,
    format_number,
    generate_comment,
    generate_rapid_move,
    unescape_snippet,
)
from .utils.unique_codes import UniqueCodes

INDENT = '    '

# Live G92 offset registers, snapshotted before probing for tiled boards
X_OFFSET_REGISTER = '#5211'
Y_OFFSET_REGISTER = '#5212'

# Extra clearance for the second pass, in inches
SECOND_PASS_CLEARANCE_IN = 0.2

ENDING_COMMENT = "Probing has ended, each Z-coordinate will be corrected with a bilinear interpolation"


class ProbingProgramEmitter:
    """
    Write the one-time probing program to an output stream.

    Args:
        dialect: Target controller dialect
        grid: Planned probe grid
        slots: Reserved global variable slots
        subroutines: Reserved subroutine numbers
        settings: Autoleveller settings
        tile_info: Tiling layout
        ocodes: Subroutine/loop number allocator (loop labels are drawn at emission)
    """

    def __init__(
        self,
        dialect: Dialect,
        grid: ProbeGrid,
        slots: GlobalVariableSlots,
        subroutines: SubroutineNumbers,
        settings: AutolevelSettings,
        tile_info: TileInfo,
        ocodes: UniqueCodes
    ):
        self.dialect = dialect
        self.grid = grid
        self.slots = slots
        self.subroutines = subroutines
        self.settings = settings
        self.tile_info = tile_info
        self.ocodes = ocodes

        self.zwork = format_coordinate(settings.working_depth_out)
        self.zsafe = format_height(settings.safe_height_out)
        self.zprobe = format_height(settings.probe_height_out)
        self.zfail = format_height(settings.probe_fail_depth_out)
        feed = settings.probe_feed_out
        self.feed = format_number(feed) if feed is not None else ''
        feed_2nd = settings.second_probe_feed_out
        self.feed_2nd = format_number(feed_2nd) if feed_2nd is not None else ''
        self.clearance = format_number(SECOND_PASS_CLEARANCE_IN * settings.length_factor)

        self.start_x = format_coordinate(grid.start_point.x)
        self.start_y = format_coordinate(grid.start_point.y)
        self.x_spacing = format_coordinate(grid.x_spacing)
        self.y_spacing = format_coordinate(grid.y_spacing)

    def header(self, of: TextIO) -> None:
        """Write the probing program (and subroutines, if declared first)."""
        if self.dialect.declare_before_use:
            self.write_subroutines(of)

        if self.feed:
            self._write_offset_snapshot(of)
            of.write(unescape_snippet(self.settings.probe_on) + '\n')
            self._write_reference_probe(of)
            self._write_probing_comment(of)
            if self.dialect.supports_subroutines:
                self._write_probing_loop(of)
            else:
                self._write_unrolled_probing(of)

        if self.feed_2nd:
            self._write_second_pass(of)

        of.write('\n')
        of.write(generate_rapid_move(z=self.settings.safe_height_out, comment='Move Z to safe height') + '\n')
        if self.dialect.log_close:
            of.write(f"{self.dialect.log_close} {generate_comment('Close the probe log file')}\n")
        of.write(generate_comment(ENDING_COMMENT) + '\n')
        of.write(unescape_snippet(self.settings.probe_off) + '\n')
        if not self.dialect.supports_subroutines:
            of.write(f"\n#4 = {self.zwork}\n")
        of.write('\n')

    def footer(self, of: TextIO) -> None:
        """Write the subroutine block for dialects that define subroutines last."""
        if not self.dialect.declare_before_use:
            self.write_subroutines(of)

    def write_subroutines(self, of: TextIO) -> None:
        """Write the Z-correction, Y-probe and X-probe subroutines."""
        if not self.dialect.supports_subroutines:
            return
        self._write_correction_subroutine(of)
        self._write_y_probe_subroutine(of)
        self._write_x_probe_subroutine(of)

    def _write_offset_snapshot(self, of: TextIO) -> None:
        if self.tile_info.enabled:
            of.write(f"#{self.slots.initial_x_offset} = {X_OFFSET_REGISTER}\n")
            of.write(f"#{self.slots.initial_y_offset} = {Y_OFFSET_REGISTER}\n\n")
        else:
            of.write(f"#{self.slots.initial_x_offset} = 0\n")
            of.write(f"#{self.slots.initial_y_offset} = 0\n\n")

    def _write_reference_probe(self, of: TextIO) -> None:
        dialect = self.dialect
        of.write(generate_rapid_move(z=self.settings.safe_height_out, comment='Move Z to safe height') + '\n')
        of.write(f"G0 X{self.start_x} Y{self.start_y} ( Move XY to start point )\n")
        of.write(generate_rapid_move(z=self.settings.probe_height_out, comment='Move Z to probe height') + '\n')
        if dialect.log_open:
            of.write(dialect.log_open + '\n')
        of.write(f"{dialect.probe_code} Z{self.zfail} F{self.feed} ( Z-probe )\n")
        of.write(f"#{PROBE_TABLE_BASE} = 0 ( Probe point [0, 0] is our reference )\n")
        of.write(f"{dialect.set_z_zero} ( Set the current Z as zero-value )\n")
        of.write('\n')

    def _write_probing_comment(self, of: TextIO) -> None:
        grid = self.grid
        of.write("( We now start the real probing: move the Z axis to the probing height, move to )\n")
        of.write(
            "( the probing XY position, probe it and save the result, parameter "
            f"{self.dialect.probe_result_var}, )\n"
        )
        of.write(f"( in a numbered parameter; we will make {grid.num_x_points} probes on the X-axis and )\n")
        of.write(
            f"( {grid.num_y_points} probes on the Y-axis, for a grand total of "
            f"{grid.point_count} probes )\n"
        )
        of.write('\n')

    def _write_probing_loop(self, of: TextIO) -> None:
        slots = self.slots
        of.write(f"#{slots.x_iterator} = 0 ( X iterator )\n")
        of.write(f"#{slots.y_iterator} = 1 ( Y iterator )\n")
        of.write(f"#{slots.increment} = 1 ( UP or DOWN increment )\n")
        of.write(
            f"#{slots.y_row_count} = {self.grid.num_y_points - 1} "
            "( number of Y points; the 1st Y row can be done one time less )\n"
        )
        of.write(self.dialect.call_repeat(
            self.subroutines.x_probe, self.grid.num_x_points, next(self.ocodes)
        ))

    def _write_unrolled_probing(self, of: TextIO) -> None:
        grid = self.grid
        for i, j in grid.serpentine_order():
            point = grid.probe_point(i, j)
            of.write(f"G0 Z{self.zprobe}\n")
            of.write(f"X{format_coordinate(point.x)} Y{format_coordinate(point.y)}\n")
            of.write(f"{self.dialect.probe_code} Z{self.zfail} F{self.feed}\n")
            of.write(f"{grid.variable_name(i, j)}={self.dialect.probe_result_var}\n")

    def _write_second_pass(self, of: TextIO) -> None:
        dialect = self.dialect
        clearance = self.clearance
        of.write('\n')
        of.write("T2\n")
        of.write("(MSG, Insert the mill tool)\n")
        of.write("M0 (Temporary machine stop.)\n")
        of.write(f"G0 Z[{self.zsafe} + {clearance}] ( Move Z to safe height )\n")
        of.write(f"G0 X{self.start_x} Y{self.start_y} ( Move XY to start point )\n")
        of.write(f"G0 Z[{self.zprobe} + {clearance}] ( Move Z to probe height )\n")
        of.write(f"{dialect.probe_code} Z[{self.zfail} - {clearance}] F{self.feed_2nd} ( Probe )\n")
        of.write(f"{dialect.set_z_zero} ( Set the current Z as zero-value )\n")

    def _write_correction_subroutine(self, of: TextIO) -> None:
        dialect = self.dialect
        slots = self.slots
        number = self.subroutines.g01_interpolated
        ny = self.grid.num_y_points
        sx, sy = self.start_x, self.start_y
        dx, dy = self.x_spacing, self.y_spacing
        arg_x, arg_y = dialect.argument_variables((slots.x_argument, slots.y_argument))

        lines = [f"{dialect.start_subroutine(number)} ( G01 with Z-correction subroutine )"]
        if self.tile_info.enabled:
            lines.append(
                f"#3 = [ {X_OFFSET_REGISTER} - #{slots.initial_x_offset} ] "
                "( x-tile offset [minus the initial offset] )"
            )
            lines.append(
                f"#4 = [ {Y_OFFSET_REGISTER} - #{slots.initial_y_offset} ] "
                "( y-tile offset [minus the initial offset] )"
            )
        else:
            lines.append("#3 = 0 ( x-tile offset [minus the initial offset] )")
            lines.append("#4 = 0 ( y-tile offset [minus the initial offset] )")
        # A collinear board plans a zero spacing; that axis has a single cell at fraction 0
        flat_x = float(dx) == 0
        flat_y = float(dy) == 0
        lines += [
            "#5 = 0 ( Lower left point X index )" if flat_x else
            f"#5 = [ FIX[ [ {arg_x} - {sx} + #3 ] / {dx} ] ] ( Lower left point X index )",
            "#6 = 0 ( Lower left point Y index )" if flat_y else
            f"#6 = [ FIX[ [ {arg_y} - {sy} + #4 ] / {dy} ] ] ( Lower left point Y index )",
            f"#7 = [ #5 * {ny} + [ #6 + 1 ] + {PROBE_TABLE_BASE} ] ( Upper left point parameter number )",
            f"#8 = [ [ #5 + 1 ] * {ny} + [ #6 + 1 ] + {PROBE_TABLE_BASE} ] ( Upper right point parameter number )",
            f"#9 = [ #5 * {ny} + #6 + {PROBE_TABLE_BASE} ] ( Lower left point parameter number )",
            f"#10 = [ [ #5 + 1 ] * {ny} + #6 + {PROBE_TABLE_BASE} ] ( Lower right point parameter number )",
            ("#11 = 0" if flat_y else f"#11 = [ [ {arg_y} + #4 - {sy} - #6 * {dy} ] / {dy} ]")
            + " ( Distance between the point and the bottom border of the rectangle, normalized to 1 )",
            ("#12 = 0" if flat_x else f"#12 = [ [ {arg_x} + #3 - {sx} - #5 * {dx} ] / {dx} ]")
            + " ( Distance between the point and the left border of the rectangle, normalized to 1 )",
            "#13 = [ ##9 + [ ##7 - ##9 ] * #11 ] ( Linear interpolation of the x-min elements )",
            "#14 = [ ##10 + [ ##8 - ##10 ] * #11 ] ( Linear interpolation of the x-max elements )",
            "#15 = [ #13 + [ #14 - #13 ] * #12 ] ( Linear interpolation of previously interpolated points )",
            f"G01 X{arg_x} Y{arg_y} Z[{self.zwork}+#15]",
        ]
        self._write_subroutine(of, number, lines)

    def _write_y_probe_subroutine(self, of: TextIO) -> None:
        dialect = self.dialect
        slots = self.slots
        number = self.subroutines.y_probe
        xi, yi = slots.x_iterator, slots.y_iterator

        lines = [
            f"{dialect.start_subroutine(number)} ( Y probe subroutine )",
            f"G0 Z{self.zprobe} ( Move to probe height )",
            f"X[#{xi} * {self.x_spacing} + {self.start_x}] Y[#{yi} * {self.y_spacing} + {self.start_y}] "
            "( Move to the current probe point )",
            f"{dialect.probe_code} Z{self.zfail} F{self.feed} ( Probe it )",
            f"#[#{xi} * {self.grid.num_y_points} + #{yi} + {PROBE_TABLE_BASE}] = "
            f"{dialect.probe_result_var} ( Save the probe in the correct parameter )",
            f"#{yi} = [#{yi} + #{slots.increment}] ( Increment/decrement by 1 the Y counter )",
        ]
        self._write_subroutine(of, number, lines)

    def _write_x_probe_subroutine(self, of: TextIO) -> None:
        dialect = self.dialect
        slots = self.slots
        number = self.subroutines.x_probe
        inner_call = dialect.call_repeat(
            self.subroutines.y_probe, f"#{slots.y_row_count}", next(self.ocodes)
        )

        lines = [f"{dialect.start_subroutine(number)} ( X probe subroutine )"]
        lines += inner_call.rstrip('\n').split('\n')
        lines += [
            f"#{slots.y_row_count} = {self.grid.num_y_points}",
            f"#{slots.increment} = [0 - #{slots.increment}]",
            f"#{slots.y_iterator} = [#{slots.y_iterator} + #{slots.increment}]",
            f"#{slots.x_iterator} = [#{slots.x_iterator} + 1] ( Increment by 1 the X counter )",
        ]
        self._write_subroutine(of, number, lines)

    def _write_subroutine(self, of: TextIO, number: int, lines) -> None:
        """Write a subroutine: first line is the start, body lines are indented."""
        of.write(lines[0] + '\n')
        for line in lines[1:]:
            of.write(INDENT + line + '\n')
        of.write(self.dialect.end_subroutine(number) + '\n')
        of.write('\n')
