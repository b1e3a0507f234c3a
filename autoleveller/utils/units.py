"""Unit conversion utilities."""

MM_PER_INCH = 25.4


def inches_to_mm(value: float) -> float:
    """Convert inches to millimeters."""
    return value * MM_PER_INCH


def mm_to_inches(value: float) -> float:
    """Convert millimeters to inches."""
    return value / MM_PER_INCH


def option_unit_factor(metric: bool, metric_output: bool) -> float:
    """
    Factor applied to option values (spacings, depths, feeds).

    Options are given in the input unit system and must be written
    in the output unit system.

    Args:
        metric: True if option values are in millimeters
        metric_output: True if the generated program uses millimeters

    Returns:
        Multiplier converting option units to output units
    """
    if metric:
        return 1.0 if metric_output else 1 / MM_PER_INCH
    return MM_PER_INCH if metric_output else 1.0


def output_length_factor(metric_output: bool) -> float:
    """Factor converting toolpath coordinates (inches) to output units."""
    return MM_PER_INCH if metric_output else 1.0
