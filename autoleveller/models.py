"""Shared dataclasses for autolevel generation."""
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Iterator, Optional

from .utils.units import option_unit_factor, output_length_factor

# Probe fail depth when none is configured, already in output units
FIXED_FAIL_DEPTH_IN = -0.1
FIXED_FAIL_DEPTH_MM = -3.0


@dataclass(frozen=True)
class Point:
    """A 2D coordinate point."""
    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y


@dataclass(frozen=True)
class Workarea:
    """Axis-aligned rectangle covered by the toolpaths."""
    near: Point
    far: Point

    @property
    def span_x(self) -> float:
        return self.far.x - self.near.x

    @property
    def span_y(self) -> float:
        return self.far.y - self.near.y


@dataclass(frozen=True)
class TileInfo:
    """Tiling layout of the board; a single tile when disabled."""
    board_width: float = 0.0
    board_height: float = 0.0
    tile_x: int = 1
    tile_y: int = 1
    enabled: bool = False


@dataclass(frozen=True)
class GlobalVariableSlots:
    """Numbered machine variables reserved for the probing program."""
    return_var: int
    x_iterator: int
    y_iterator: int
    increment: int
    y_row_count: int
    x_argument: int
    y_argument: int
    initial_x_offset: int
    initial_y_offset: int

    @classmethod
    def reserve(cls, codes) -> 'GlobalVariableSlots':
        """Draw every slot from the global variable allocator, in field order."""
        return cls(
            return_var=next(codes),
            x_iterator=next(codes),
            y_iterator=next(codes),
            increment=next(codes),
            y_row_count=next(codes),
            x_argument=next(codes),
            y_argument=next(codes),
            initial_x_offset=next(codes),
            initial_y_offset=next(codes),
        )


@dataclass(frozen=True)
class SubroutineNumbers:
    """Subroutine numbers reserved for the probing program."""
    g01_interpolated: int
    y_probe: int
    x_probe: int

    @classmethod
    def reserve(cls, codes) -> 'SubroutineNumbers':
        return cls(
            g01_interpolated=next(codes),
            y_probe=next(codes),
            x_probe=next(codes),
        )


@dataclass
class AutolevelSettings:
    """
    Autoleveller options, in the units they were entered.

    Spacings, depths and feeds are in the input unit system (``metric``);
    the derived ``*_out`` values are converted to the output unit system.
    """
    probe_spacing_x: float
    probe_spacing_y: float
    working_depth: float
    safe_height: float
    probe_feed: float
    metric: bool = False
    metric_output: bool = False
    probe_height: Optional[float] = None
    probe_fail_depth: Optional[float] = None
    second_probe_feed: Optional[float] = None
    probe_on: str = ''
    probe_off: str = ''
    software: str = 'linuxcnc'
    custom_probe_code: str = 'G31'
    custom_probe_var: int = 2002
    custom_set_zzero: str = 'G92 Z0'

    @property
    def unit_factor(self) -> float:
        """Option units to output units."""
        return option_unit_factor(self.metric, self.metric_output)

    @property
    def length_factor(self) -> float:
        """Toolpath units (inches) to output units."""
        return output_length_factor(self.metric_output)

    @property
    def spacing_x_out(self) -> float:
        return self.probe_spacing_x * self.unit_factor

    @property
    def spacing_y_out(self) -> float:
        return self.probe_spacing_y * self.unit_factor

    @property
    def working_depth_out(self) -> float:
        return self.working_depth * self.unit_factor

    @property
    def safe_height_out(self) -> float:
        return self.safe_height * self.unit_factor

    @property
    def probe_height_out(self) -> float:
        height = self.safe_height if self.probe_height is None else self.probe_height
        return height * self.unit_factor

    @property
    def probe_fail_depth_out(self) -> float:
        if self.probe_fail_depth is not None:
            return self.probe_fail_depth * self.unit_factor
        return FIXED_FAIL_DEPTH_MM if self.metric_output else FIXED_FAIL_DEPTH_IN

    @property
    def probe_feed_out(self) -> Optional[float]:
        """First pass feed, or None when the first pass is disabled."""
        if self.probe_feed > 0:
            return self.probe_feed * self.unit_factor
        return None

    @property
    def second_probe_feed_out(self) -> Optional[float]:
        if self.second_probe_feed is None:
            return None
        return self.second_probe_feed * self.unit_factor

    @classmethod
    def from_config(cls, config, **overrides) -> 'AutolevelSettings':
        """
        Build settings from AL_* configuration values.

        Args:
            config: Config class/object or a mapping such as Flask's app.config
            **overrides: Field values taking precedence over the configuration

        Returns:
            AutolevelSettings
        """
        def value(key):
            if isinstance(config, Mapping):
                return config.get(key)
            return getattr(config, key, None)

        fields = {
            field_name: value(key)
            for field_name, key in CONFIG_KEYS.items()
            if value(key) is not None
        }
        fields.update({key: val for key, val in overrides.items() if val is not None})
        return cls(**fields)


# AutolevelSettings field -> configuration key
CONFIG_KEYS = {
    'metric': 'AL_METRIC',
    'metric_output': 'AL_METRIC_OUTPUT',
    'software': 'AL_SOFTWARE',
    'probe_spacing_x': 'AL_X',
    'probe_spacing_y': 'AL_Y',
    'working_depth': 'AL_ZWORK',
    'safe_height': 'AL_ZSAFE',
    'probe_height': 'AL_ZPROBE',
    'probe_fail_depth': 'AL_ZFAIL',
    'probe_feed': 'AL_PROBEFEED',
    'second_probe_feed': 'AL_2NDPROBEFEED',
    'probe_on': 'AL_PROBE_ON',
    'probe_off': 'AL_PROBE_OFF',
    'custom_probe_code': 'AL_PROBECODE',
    'custom_probe_var': 'AL_PROBEVAR',
    'custom_set_zzero': 'AL_SETZZERO',
}
