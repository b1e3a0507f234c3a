#!/usr/bin/env python3

import logging
import os
import sys

from config import Config
from autoleveller.exporter import export_autolevel_gcode
from autoleveller.file_parser import parse_toolpath_file, ParseError
from autoleveller.models import AutolevelSettings, Point
from autoleveller.probe_grid import GridCapacityError
from autoleveller.user_interface import select_input_file, get_autolevel_settings, display_summary
from autoleveller.utils.units import mm_to_inches


def main():
    """Main application entry point."""
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print("=== Autolevel G-code Generator ===")
    print("Probe the bed and correct toolpath depths with bilinear interpolation\n")

    # Ensure output directory exists
    os.makedirs("output", exist_ok=True)

    while True:  # Loop to allow retry on parse errors
        try:
            input_file = select_input_file()
            print(f"\nSelected input file: {input_file}")

            print("Parsing input file...")
            toolpaths = parse_toolpath_file(input_file)
            print(f"\nFound {len(toolpaths)} toolpaths, {sum(len(path) for path in toolpaths)} points")
            break

        except ParseError as e:
            print(f"\n❌ ERROR: Problem with input file format:")
            print(f"{str(e)}")
            print(f"\nPlease fix the input file and try again.")

            retry = input("\nWould you like to select a different file or retry? (y/n): ").lower().strip()
            if retry not in ['y', 'yes']:
                print("Exiting...")
                sys.exit(1)
            continue

    settings = get_autolevel_settings(AutolevelSettings.from_config(Config))

    # Toolpaths and the quantization error are handled in inches internally
    quantization_error = Config.AL_QUANTIZATION_ERROR
    if settings.metric:
        toolpaths = [[Point(mm_to_inches(p.x), mm_to_inches(p.y)) for p in path] for path in toolpaths]
        quantization_error = mm_to_inches(quantization_error)

    base_name = os.path.splitext(os.path.basename(input_file))[0]
    output_file = os.path.join("output", f"{base_name}_autolevel.ngc")

    if not display_summary(input_file, settings, output_file):
        print("Operation cancelled.")
        return

    print("\nGenerating G-code...")
    try:
        with open(output_file, 'w') as f:
            grid = export_autolevel_gcode(
                toolpaths, settings, f,
                quantization_error=quantization_error
            )
    except GridCapacityError as e:
        os.remove(output_file)
        print(f"\n❌ Configuration error: {str(e)}")
        sys.exit(1)

    print(f"✅ Autolevel G-code generated: {output_file}")
    print(f"   Probe grid: {grid.num_x_points} x {grid.num_y_points} ({grid.point_count} probes)")

    show_plot = input("\nWould you like to see a preview of the probe grid? (y/n): ").lower().strip()
    if show_plot in ['y', 'yes']:
        from autoleveller.visualizer import plot_probe_grid_preview, save_plot_preview

        print("Generating visual preview...")
        plot_filename = save_plot_preview(toolpaths, grid, base_name, settings.length_factor)
        print(f"Plot saved to: {plot_filename}")
        plot_probe_grid_preview(toolpaths, grid, settings.length_factor)

    print(f"\nYou can now load the G-code file into your controller ({settings.software}).")


if __name__ == "__main__":
    main()
