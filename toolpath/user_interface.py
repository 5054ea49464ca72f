import os
import sys
from typing import List

from .models import GenerationRequest

INPUT_DIR = "input"


def get_input_files() -> List[str]:
    """Get list of available job files."""
    if not os.path.exists(INPUT_DIR):
        return []

    return sorted(f for f in os.listdir(INPUT_DIR) if f.endswith('.json'))


def select_input_file() -> str:
    """Prompt user to select a job file."""
    files = get_input_files()

    if not files:
        print(f"No job files found in the '{INPUT_DIR}' directory.")
        print("Please add a .json file with settings and geometry.")
        sys.exit(1)

    print("Available job files:")
    for i, file in enumerate(files, 1):
        print(f"{i}. {file}")

    while True:
        try:
            choice = int(input(f"\nSelect file (1-{len(files)}): ")) - 1
            if 0 <= choice < len(files):
                return os.path.join(INPUT_DIR, files[choice])
            else:
                print(f"Please enter a number between 1 and {len(files)}")
        except ValueError:
            print("Please enter a valid number")


def ask_yes_no(prompt: str) -> bool:
    return input(f"{prompt} (y/n): ").lower().strip() in ['y', 'yes']


def describe_geometry(request: GenerationRequest) -> str:
    geometry = request.geometry
    if geometry.kind == 'rectangle':
        return f"rectangle {geometry.width:g} x {geometry.height:g}mm"
    if geometry.kind == 'circle':
        return f"circle r{geometry.radius:g}mm"
    if geometry.kind == 'polygon':
        return f"{geometry.sides}-sided polygon r{geometry.radius:g}mm"
    if geometry.kind == 'selected':
        return f"selected {geometry.element.type}" if geometry.element else "selected (none)"
    return "custom G-code"


def display_summary(input_file: str, request: GenerationRequest, output_file: str) -> bool:
    """Display a summary of the job and ask for confirmation."""
    s = request.settings
    print("\n=== Job Summary ===")
    print(f"Input file: {input_file}")
    print(f"Output file: {output_file}")

    print(f"\nMachine: {s.machine_type}")
    print(f"  Operation: {s.operation_type}")
    print(f"  Material: {s.material}")
    if s.machine_type == 'printer':
        print(f"  Nozzle: {s.printer.nozzle_diameter}mm")
        print(f"  Layer height: {s.printer.layer_height}mm")
        print(f"  Print height: {s.depth}mm")
    else:
        print(f"  Tool: {s.tool_type} {s.tool_diameter}mm")
        print(f"  Depth: {s.depth}mm in {s.stepdown}mm steps")
        print(f"  Feed rate: {s.feedrate} mm/min (plunge {s.plungerate} mm/min)")
        print(f"  Spindle speed: {s.rpm} RPM")
    if s.machine_type == 'lathe':
        print(f"  Stock: {s.lathe.stock_diameter}mm x {s.lathe.stock_length}mm")
    else:
        print(f"  Geometry: {describe_geometry(request)}")
        print(f"  Origin: {s.origin_type}")

    return ask_yes_no("\nProceed with G-code generation?")
