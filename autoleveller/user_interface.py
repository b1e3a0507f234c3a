import os
from dataclasses import replace
from typing import List

from .dialects import DIALECTS
from .models import AutolevelSettings
from .utils.units import inches_to_mm

INPUT_DIR = "input"
TOOLPATH_EXTENSIONS = ('.txt', '.csv')


def get_input_files(input_dir: str = INPUT_DIR) -> List[str]:
    """Toolpath files available in the input directory, sorted by name."""
    if not os.path.isdir(input_dir):
        return []
    return sorted(f for f in os.listdir(input_dir) if f.lower().endswith(TOOLPATH_EXTENSIONS))


def select_input_file(input_dir: str = INPUT_DIR) -> str:
    """Prompt user to pick one toolpath file; exits if there is none."""
    files = get_input_files(input_dir)

    if not files:
        print(f"No toolpath files found in the '{input_dir}' directory.")
        print("Add a file with 'Path' sections of X,Y coordinates (.txt or .csv).")
        raise SystemExit(1)

    print("Toolpath files:")
    for number, name in enumerate(files, 1):
        print(f"{number}. {name}")

    while True:
        choice = input(f"\nSelect toolpath file (1-{len(files)}): ").strip()
        if choice.isdigit() and 1 <= int(choice) <= len(files):
            return os.path.join(input_dir, files[int(choice) - 1])
        print(f"Please enter a number between 1 and {len(files)}")


def get_autolevel_settings(defaults: AutolevelSettings) -> AutolevelSettings:
    """Prompt user for probing parameters, starting from configured defaults."""
    def get_length_input(prompt: str, default, optional: bool = False):
        # Empty input keeps the default; '-' clears an optional value
        hint = "default: none" if default is None else f"default: {default}"
        if optional:
            hint += ", '-' for none"
        while True:
            user_input = input(f"{prompt} ({hint}): ").strip()
            if not user_input:
                return default
            if optional and user_input == '-':
                return None
            try:
                return float(user_input)
            except ValueError:
                print("Please enter a valid number")

    units = "mm" if defaults.metric else "inches"

    print("\n=== AUTOLEVEL Parameters ===")
    print(f"Controllers: {', '.join(DIALECTS)} (anything else uses the custom probe settings)")
    software = input(f"Controller (default: {defaults.software}): ").strip() or defaults.software

    return replace(
        defaults,
        software=software,
        probe_spacing_x=get_length_input(f"Probe spacing X ({units})", defaults.probe_spacing_x),
        probe_spacing_y=get_length_input(f"Probe spacing Y ({units})", defaults.probe_spacing_y),
        working_depth=get_length_input(f"Milling depth ({units})", defaults.working_depth),
        safe_height=get_length_input(f"Safe height ({units})", defaults.safe_height),
        probe_feed=get_length_input(f"Probe feed rate ({units}/min, 0 disables probing)", defaults.probe_feed),
        second_probe_feed=get_length_input(
            f"Second pass probe feed rate ({units}/min)", defaults.second_probe_feed, optional=True
        ),
    )


def display_summary(input_file: str, settings: AutolevelSettings, output_file: str) -> bool:
    """Display a summary of the operation."""
    units = "mm" if settings.metric else "inches"

    print(f"\n=== Operation Summary ===")
    print(f"Input file: {input_file}")
    print(f"Autolevel G-code file: {output_file}")

    print(f"\nProbing Parameters:")
    print(f"  Controller: {settings.software}")
    print(f"  Probe spacing: {settings.probe_spacing_x} x {settings.probe_spacing_y} {units}")
    if not settings.metric:
        print(f"                 ({inches_to_mm(settings.probe_spacing_x):.2f} x "
              f"{inches_to_mm(settings.probe_spacing_y):.2f} mm)")
    print(f"  Milling depth: {settings.working_depth} {units}")
    print(f"  Safe height: {settings.safe_height} {units}")
    print(f"  Probe feed rate: {settings.probe_feed} {units}/min")
    if settings.second_probe_feed is not None:
        print(f"  Second pass feed rate: {settings.second_probe_feed} {units}/min")

    confirm = input("\nProceed with G-code generation? (y/n): ").lower().strip()
    return confirm in ['y', 'yes']
