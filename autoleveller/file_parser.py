"""Toolpath coordinate file parsing.

A toolpath file is a list of sections, each one path::

    Path 1
    X,Y
    0,0
    1.25,0
    1.25,0.5

    Path 2
    X,Y
    ...
"""
from typing import List

from .models import Point


class ParseError(Exception):
    """Custom exception for parsing errors."""
    pass


SECTION_HEADER = 'path'


def parse_toolpath_file(file_path: str) -> List[List[Point]]:
    """Parse a toolpath file into point sequences."""
    try:
        with open(file_path, 'r') as f:
            content = f.read()
    except FileNotFoundError:
        raise ParseError(f"Input file not found: {file_path}")
    except OSError as e:
        raise ParseError(f"Error reading file {file_path}: {str(e)}")

    return parse_toolpaths(content)


def parse_toolpaths(content: str) -> List[List[Point]]:
    """
    Parse toolpath text into point sequences.

    Args:
        content: File content

    Returns:
        One list of Points per path section, in file order
    """
    if not content.strip():
        raise ParseError("Input file is empty")

    sections = []
    current_section = []

    for line in content.strip().split('\n'):
        line = line.strip()
        if not line:
            continue

        if line.lower().startswith(SECTION_HEADER):
            if current_section:
                sections.append(current_section)
            current_section = [line]
        elif current_section:
            current_section.append(line)
        else:
            raise ParseError(f"Coordinate data before the first 'Path' header: '{line}'")

    if current_section:
        sections.append(current_section)

    toolpaths = []
    errors = []
    for section in sections:
        try:
            toolpaths.append(_parse_coordinate_section(section[1:], f"Section '{section[0]}'"))
        except ParseError as e:
            errors.append(str(e))

    if errors:
        error_msg = "Errors found in input file:\n" + "\n".join(f"- {error}" for error in errors)
        raise ParseError(error_msg)

    if not toolpaths:
        raise ParseError("No toolpaths found in input file")

    return toolpaths


def _parse_coordinate_section(lines: List[str], section_name: str) -> List[Point]:
    """Parse coordinate lines into points."""
    points = []
    errors = []

    for line_num, line in enumerate(lines, 1):
        if line.upper().startswith('X,Y'):
            continue  # Skip header line

        parts = line.split(',')
        if len(parts) != 2:
            errors.append(f"Line {line_num} in {section_name}: Expected 2 coordinates (X,Y), got {len(parts)} in '{line}'")
            continue

        try:
            points.append(Point(float(parts[0].strip()), float(parts[1].strip())))
        except ValueError:
            errors.append(f"Line {line_num} in {section_name}: Invalid coordinate '{line}' - coordinates must be numbers")

    if errors:
        raise ParseError("\n".join(errors))

    if not points:
        raise ParseError(f"{section_name}: No coordinate lines found. Expected format: 'X,Y' header followed by coordinate pairs like '1.25,0.5'")

    return points
