"""G-code formatting utilities.

Every number that ends up inside the probing program goes through one of
these helpers so the precision is the same everywhere: 5 decimals for
positions and depths used in the correction math, 3 decimals for the
safe/probe/fail heights.
"""

POSITION_PRECISION = 5
HEIGHT_PRECISION = 3

# Escape character the user can type in probe-on/off snippets
SNIPPET_NEWLINE = '@'


def format_coordinate(value: float, precision: int = POSITION_PRECISION) -> str:
    """
    Format a coordinate value with a fixed number of decimal places.

    Args:
        value: The coordinate value
        precision: Number of decimal places (default 5)

    Returns:
        Formatted string representation
    """
    return f"{value:.{precision}f}"


def format_height(value: float) -> str:
    """Format a safe/probe/fail height (3 decimals)."""
    return format_coordinate(value, HEIGHT_PRECISION)


def format_number(value: float) -> str:
    """
    Format a free-form number (feed rates, small offsets).

    Uses the shortest general representation, so 10.0 becomes "10"
    and 3.5 stays "3.5".
    """
    return f"{value:g}"


def unescape_snippet(text: str) -> str:
    """Expand the '@' escape of user supplied snippets into newlines."""
    return text.replace(SNIPPET_NEWLINE, '\n')


def generate_rapid_move(x=None, y=None, z=None, comment=None) -> str:
    """
    Generate a G0 rapid move command.

    Args:
        x: X coordinate (optional)
        y: Y coordinate (optional)
        z: Z coordinate (optional, written with height precision)
        comment: Optional parenthetical comment

    Returns:
        G0 command string
    """
    parts = ["G0"]
    if x is not None:
        parts.append(f"X{format_coordinate(x)}")
    if y is not None:
        parts.append(f"Y{format_coordinate(y)}")
    if z is not None:
        parts.append(f"Z{format_height(z)}")
    if comment:
        parts.append(f"( {comment} )")
    return " ".join(parts)


def generate_comment(text: str) -> str:
    """Wrap text in a G-code parenthetical comment."""
    return f"( {text} )"
