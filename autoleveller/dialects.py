"""Controller dialect descriptors.

Each supported controller is described by a single ``Dialect`` value that
carries every template the probing program needs. Code elsewhere queries the
descriptor instead of switching on the controller name.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Sequence


class CallProtocol(Enum):
    """How a subroutine call hands its arguments to the subroutine."""
    DIRECT = 'direct'                  # positional parameters, read as #1, #2...
    SHARED_GLOBAL = 'shared_global'    # write reserved slots, then call
    NONE = 'none'                      # no subroutines, everything inline


# Probe point ceilings, bounded by the numbered variables of each controller
LINUXCNC_MAX_PROBE_POINTS = 4501
DEFAULT_MAX_PROBE_POINTS = 500


@dataclass(frozen=True)
class Dialect:
    """
    Descriptor of a controller's macro language.

    Templates use ``str.format`` fields:
        subroutine_start / subroutine_end: ``{number}``
        repeat_template: ``{number}``, ``{count}``, ``{loop}``
        call_template: ``{number}`` plus ``{x}``/``{y}`` for direct calls
    """
    name: str
    probe_code: str
    probe_result_var: str
    set_z_zero: str
    call_protocol: CallProtocol
    max_probe_points: int
    subroutine_start: str = ''
    subroutine_end: str = ''
    repeat_template: str = ''
    call_template: str = ''
    log_open: str = ''
    log_close: str = ''
    declare_before_use: bool = False

    @property
    def supports_subroutines(self) -> bool:
        return self.call_protocol is not CallProtocol.NONE

    def start_subroutine(self, number: int) -> str:
        return self.subroutine_start.format(number=number)

    def end_subroutine(self, number: int) -> str:
        return self.subroutine_end.format(number=number)

    def call_repeat(self, number: int, count, loop: int) -> str:
        """Call subroutine ``number`` ``count`` times (count may be a variable)."""
        return self.repeat_template.format(number=number, count=count, loop=loop)

    def argument_variables(self, slots: Sequence[int]) -> List[str]:
        """
        Variable names the subroutine reads its arguments from.

        Args:
            slots: Reserved global slots used by the shared-global protocol

        Returns:
            e.g. ['#1', '#2'] for direct calls, ['#105', '#106'] for shared globals
        """
        if self.call_protocol is CallProtocol.SHARED_GLOBAL:
            return [f"#{slot}" for slot in slots]
        return [f"#{index}" for index in range(1, len(slots) + 1)]

    def call(self, number: int, x: str, y: str, slots: Sequence[int]) -> str:
        """
        Emit a two-argument subroutine call.

        Args:
            number: Subroutine number
            x: Already formatted first argument
            y: Already formatted second argument
            slots: Argument slots for the shared-global protocol

        Returns:
            Call text, newline terminated
        """
        if self.call_protocol is CallProtocol.DIRECT:
            return self.call_template.format(number=number, x=x, y=y)
        if self.call_protocol is CallProtocol.SHARED_GLOBAL:
            assignments = ''.join(
                f"#{slot}={value}\n" for slot, value in zip(slots, (x, y))
            )
            return assignments + self.call_template.format(number=number)
        raise ValueError(f"Dialect '{self.name}' has no subroutine calls")


LINUXCNC = Dialect(
    name='linuxcnc',
    probe_code='G38.2',
    probe_result_var='#5063',
    set_z_zero='G10 L20 P0 Z0',
    call_protocol=CallProtocol.DIRECT,
    max_probe_points=LINUXCNC_MAX_PROBE_POINTS,
    subroutine_start='o{number} sub',
    subroutine_end='o{number} endsub',
    repeat_template=(
        "o{loop} repeat [{count}]\n"
        "    o{number} call\n"
        "o{loop} endrepeat\n"
    ),
    call_template="o{number} call [{x}] [{y}]\n",
    log_open="(PROBEOPEN RawProbeLog.txt) ( Record all probes in RawProbeLog.txt )",
    log_close="(PROBECLOSE)",
    declare_before_use=True,
)

_MACH_LOG_OPEN = (
    'M40 (Begins a probe log file, when the window appears, '
    'enter a name for the log file such as "RawProbeLog.txt")'
)

MACH4 = Dialect(
    name='mach4',
    probe_code='G31',
    probe_result_var='#5063',
    set_z_zero='G92 Z0',
    call_protocol=CallProtocol.DIRECT,
    max_probe_points=DEFAULT_MAX_PROBE_POINTS,
    subroutine_start='O{number}',
    subroutine_end='M99',
    repeat_template="M98 P{number} L{count}\n",
    call_template="G65 P{number} A{x} B{y}\n",
    log_open=_MACH_LOG_OPEN,
    log_close='M41',
)

MACH3 = Dialect(
    name='mach3',
    probe_code='G31',
    probe_result_var='#2002',
    set_z_zero='G92 Z0',
    call_protocol=CallProtocol.SHARED_GLOBAL,
    max_probe_points=DEFAULT_MAX_PROBE_POINTS,
    subroutine_start='O{number}',
    subroutine_end='M99',
    repeat_template="M98 P{number} L{count}\n",
    call_template="M98 P{number}\n",
    log_open=_MACH_LOG_OPEN,
    log_close='M41',
)

CUSTOM = Dialect(
    name='custom',
    probe_code='G31',
    probe_result_var='#2002',
    set_z_zero='G92 Z0',
    call_protocol=CallProtocol.NONE,
    max_probe_points=DEFAULT_MAX_PROBE_POINTS,
)

DIALECTS: Dict[str, Dialect] = {
    dialect.name: dialect for dialect in (LINUXCNC, MACH4, MACH3, CUSTOM)
}


def get_dialect(
    name: str,
    custom_probe_code: str = CUSTOM.probe_code,
    custom_probe_var: int = 2002,
    custom_set_zzero: str = CUSTOM.set_z_zero
) -> Dialect:
    """
    Look up a dialect by controller name (case-insensitive).

    Unknown names select the custom dialect, which takes its probe command,
    result variable and zero-setting command from the given overrides.

    Args:
        name: Controller name, e.g. 'LinuxCNC', 'mach3'
        custom_probe_code: Probe command for the custom dialect
        custom_probe_var: Number of the variable holding the probe result
        custom_set_zzero: Zero-setting command for the custom dialect

    Returns:
        Matching Dialect
    """
    dialect = DIALECTS.get((name or '').strip().lower())
    if dialect is not None and dialect is not CUSTOM:
        return dialect

    return replace(
        CUSTOM,
        probe_code=custom_probe_code,
        probe_result_var=f"#{custom_probe_var}",
        set_z_zero=custom_set_zzero,
    )
