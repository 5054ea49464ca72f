"""Toolpath preview plots.

Motion segments are traced into polylines: rapids dashed, cuts solid.
Arcs are sampled with numpy. Lathe programs are drawn in the XZ plane
(Z horizontal, X diameter vertical), everything else in XY.
"""
import io
import math
from dataclasses import dataclass, field
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .models import ArcCut, LinearCut, Program, RapidMove, RawLine
from .utils.optimize.dedup import invalidates_position

ARC_SAMPLES = 64


@dataclass
class PathRun:
    """Consecutive moves of one kind ('rapid' or 'cut')."""
    kind: str
    xs: List[float] = field(default_factory=list)
    ys: List[float] = field(default_factory=list)


def sample_arc(start, end, center, command: str, samples: int = ARC_SAMPLES) -> np.ndarray:
    """
    Points along an arc, start and end included.

    Args:
        start: (x, y) start point
        end: (x, y) end point
        center: (x, y) arc centre
        command: 'G2' (clockwise) or 'G3' (counter-clockwise)
        samples: Number of points

    Returns:
        Array of shape (samples, 2)
    """
    radius = math.hypot(start[0] - center[0], start[1] - center[1])
    a0 = math.atan2(start[1] - center[1], start[0] - center[0])
    a1 = math.atan2(end[1] - center[1], end[0] - center[0])
    if command == 'G3' and a1 <= a0:
        a1 += 2 * math.pi
    elif command == 'G2' and a1 >= a0:
        a1 -= 2 * math.pi
    angles = np.linspace(a0, a1, samples)
    return np.column_stack((center[0] + radius * np.cos(angles), center[1] + radius * np.sin(angles)))


def trace_program(program: Program, plane: str = 'xy') -> List[PathRun]:
    """
    Convert a program's motion segments into plottable runs.

    Args:
        program: Program to trace
        plane: 'xy' or 'zx' (horizontal axis first)

    Returns:
        List of PathRun in execution order
    """
    x = y = z = None
    runs: List[PathRun] = []

    def project():
        return (x, y) if plane == 'xy' else (z, x)

    def add_point(kind):
        h, v = project()
        if h is None or v is None:
            return
        if not runs or runs[-1].kind != kind:
            previous = runs[-1] if runs else None
            runs.append(PathRun(kind))
            # Continue from where the last run ended
            if previous and previous.xs:
                runs[-1].xs.append(previous.xs[-1])
                runs[-1].ys.append(previous.ys[-1])
        runs[-1].xs.append(h)
        runs[-1].ys.append(v)

    for segment in program.segments:
        if isinstance(segment, (RapidMove, LinearCut)):
            x = x if segment.x is None else segment.x
            y = y if segment.y is None else segment.y
            z = z if segment.z is None else segment.z
            add_point('rapid' if isinstance(segment, RapidMove) else 'cut')
        elif isinstance(segment, ArcCut):
            if plane == 'xy' and x is not None and y is not None:
                points = sample_arc((x, y), (segment.x, segment.y),
                                    (x + segment.i, y + segment.j), segment.command)
                for px, py in points[1:-1]:
                    x, y = float(px), float(py)
                    add_point('cut')
            x, y = segment.x, segment.y
            z = z if segment.z is None else segment.z
            add_point('cut')
        elif isinstance(segment, RawLine) and invalidates_position(segment):
            x = y = z = None
    return runs


def _draw(ax, program: Program, plane: str, title: str, font_size: int = 8):
    runs = trace_program(program, plane)
    rapid_labelled = cut_labelled = False
    for run in runs:
        if run.kind == 'rapid':
            ax.plot(run.xs, run.ys, linestyle='--', color='gray', linewidth=0.8,
                    label="Rapid" if not rapid_labelled else None)
            rapid_labelled = True
        else:
            ax.plot(run.xs, run.ys, linestyle='-', color='blue', linewidth=1.2,
                    label="Cut" if not cut_labelled else None)
            cut_labelled = True

    horizontal, vertical = ("X", "Y") if plane == 'xy' else ("Z", "X")
    ax.set_xlabel(f"{horizontal}-axis (mm)", fontsize=font_size + 2)
    ax.set_ylabel(f"{vertical}-axis (mm)", fontsize=font_size + 2)
    ax.set_title(title, fontsize=font_size + 4)
    if runs:
        ax.legend(fontsize=font_size)
    ax.grid(True, alpha=0.3)
    ax.set_aspect('equal', adjustable='datalim')
    ax.margins(0.1)


def preview_plane(machine_type: str) -> str:
    return 'zx' if machine_type == 'lathe' else 'xy'


def render_preview_png(program: Program, machine_type: str = 'mill', dpi: int = 100) -> bytes:
    """
    Render a program preview to PNG bytes.

    Uses a bare Figure so it works without a display (web requests).
    """
    fig = Figure(figsize=(8, 6), dpi=dpi)
    ax = fig.subplots()
    _draw(ax, program, preview_plane(machine_type), f"Toolpath Preview ({machine_type})")
    fig.tight_layout()
    buffer = io.BytesIO()
    fig.savefig(buffer, format='png')
    return buffer.getvalue()


def plot_program_preview(program: Program, machine_type: str = 'mill',
                         output_file: Optional[str] = None, dpi: int = 150):
    """
    Show a preview window, optionally saving it first.

    Args:
        program: Program to plot
        machine_type: Selects the plotted plane
        output_file: Optional path to save the plot
        dpi: Plot resolution
    """
    fig, ax = plt.subplots(figsize=(10, 8), dpi=dpi)
    _draw(ax, program, preview_plane(machine_type), f"Toolpath Preview ({machine_type})")
    plt.tight_layout()

    if output_file:
        plt.savefig(output_file, dpi=dpi, bbox_inches='tight')

    plt.show()


def save_plot_preview(program: Program, machine_type: str, base_filename: str,
                      directory: str = "output") -> str:
    """Save the preview as ``<directory>/<base_filename>_preview.png`` and return the path."""
    output_file = f"{directory}/{base_filename}_preview.png"
    with open(output_file, 'wb') as f:
        f.write(render_preview_png(program, machine_type, dpi=150))
    return output_file
