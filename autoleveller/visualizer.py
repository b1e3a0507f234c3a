import os
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

from .models import Point
from .probe_grid import ProbeGrid


def plot_probe_grid_preview(toolpaths: List[List[Point]], grid: ProbeGrid, length_factor: float = 1.0,
                            output_file: Optional[str] = None, show: bool = True,
                            dpi: int = 150, font_size: int = 8):
    """
    Plot the toolpaths together with the planned probe grid.

    Args:
        toolpaths: Point sequences in board units
        grid: Planned probe grid (output units)
        length_factor: Board units to output units
        output_file: Optional path to save the plot
        show: Show the interactive window
        dpi: Plot resolution
        font_size: Font size for annotations

    Returns:
        The matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(10, 8), dpi=dpi)

    for i, path in enumerate(toolpaths):
        coords = np.array([(p.x, p.y) for p in path]) * length_factor
        ax.plot(coords[:, 0], coords[:, 1], linestyle='-', color='blue', linewidth=1.5,
                label="Toolpaths" if i == 0 else "")

    xs = grid.start_point.x + np.arange(grid.num_x_points) * grid.x_spacing
    ys = grid.start_point.y + np.arange(grid.num_y_points) * grid.y_spacing
    grid_x, grid_y = np.meshgrid(xs, ys)
    ax.scatter(grid_x.ravel(), grid_y.ravel(), s=12, color='red', marker='+',
               label=f"Probe points ({grid.num_x_points} x {grid.num_y_points})")

    # Reference probe, every other height is relative to it
    ax.plot(grid.start_point.x, grid.start_point.y, 'ko', markersize=6, label="Reference probe [0, 0]")

    ax.set_xlabel("X-axis", fontsize=font_size + 2)
    ax.set_ylabel("Y-axis", fontsize=font_size + 2)
    ax.set_title(f"Autolevel Probe Grid\nSpacing: {grid.x_spacing:.3f} x {grid.y_spacing:.3f}",
                 fontsize=font_size + 4)
    ax.legend(fontsize=font_size)
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal', adjustable='datalim')
    ax.margins(0.1)

    stats_text = (f"{len(toolpaths)} toolpaths\n"
                  f"{grid.point_count} probes")
    ax.text(0.02, 0.02, stats_text, transform=ax.transAxes,
            fontsize=font_size, verticalalignment='bottom', horizontalalignment='left',
            bbox=dict(boxstyle="round,pad=0.5", facecolor="lightblue", alpha=0.8))

    plt.tight_layout()

    if output_file:
        plt.savefig(output_file, dpi=dpi, bbox_inches='tight')

    if show:
        plt.show()

    return fig


def save_plot_preview(toolpaths: List[List[Point]], grid: ProbeGrid, base_filename: str,
                      length_factor: float = 1.0, output_dir: str = "output") -> str:
    """
    Save a probe grid preview to the output directory.

    Args:
        toolpaths: Point sequences in board units
        grid: Planned probe grid
        base_filename: Base name for the output file (without extension)
        length_factor: Board units to output units
        output_dir: Directory to write into

    Returns:
        Path of the saved image
    """
    plot_filename = os.path.join(output_dir, f"{base_filename}_probe_grid.png")

    fig = plot_probe_grid_preview(toolpaths, grid, length_factor, plot_filename, show=False)
    plt.close(fig)

    return plot_filename
