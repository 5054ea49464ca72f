#!/usr/bin/env python3

import logging
import os
import sys

from config import Config
from toolpath.gcode_generator import ToolpathGenerator
from toolpath.settings_parser import parse_job_file, ParseError
from toolpath.user_interface import select_input_file, display_summary, ask_yes_no
from toolpath.utils.file_manager import build_program_path, write_program_file
from toolpath.visualizer import plot_program_preview, save_plot_preview


def main():
    """Main application entry point."""
    logging.basicConfig(level=Config.LOG_LEVEL, format='%(levelname)s %(name)s: %(message)s')

    print("=== Toolpath Generator ===")
    print("Generate G-code for mills, lathes and 3D printers from JSON job files\n")

    output_dir = Config.GCODE_OUTPUT_DIR
    os.makedirs(output_dir, exist_ok=True)

    while True:  # Loop to allow retry on parse errors
        try:
            input_file = select_input_file()
            print(f"\nSelected job file: {input_file}")

            print("Parsing job file...")
            request = parse_job_file(input_file)
            print(f"\nFound {request.settings.machine_type} job: {request.settings.operation_type}")

            break  # Successfully parsed, exit retry loop

        except ParseError as e:
            print("\n❌ ERROR: Problem with job file format:")
            print(f"{str(e)}")
            print("\nPlease fix the job file and try again.")

            if not ask_yes_no("\nWould you like to select a different file or retry?"):
                print("Exiting...")
                sys.exit(1)
            continue

    base_name = os.path.splitext(os.path.basename(input_file))[0]
    output_file = build_program_path(output_dir, base_name)

    if not display_summary(input_file, request, output_file):
        print("Operation cancelled.")
        return

    print("\nGenerating G-code...")
    result = ToolpathGenerator(request).generate()
    if not result.success:
        print(f"\n❌ {result.error}")
        sys.exit(1)

    write_program_file(output_dir, base_name, result.gcode)
    print(f"✅ G-code generated: {output_file}")
    for warning in result.warnings:
        print(f"⚠️  {warning}")

    if ask_yes_no("\nWould you like to see a visual preview of the toolpath?"):
        print("Generating visual preview...")
        plot_filename = save_plot_preview(result.program, request.settings.machine_type,
                                          base_name, output_dir)
        print(f"Plot saved to: {plot_filename}")
        plot_program_preview(result.program, request.settings.machine_type)

    if ask_yes_no("\nWould you like to see a preview of the generated G-code text?"):
        lines = result.gcode.split('\n')
        print("\n--- G-code Preview (first 10 lines) ---")
        for i, line in enumerate(lines[:10]):
            print(f"{i+1:2d}: {line}")
        if len(lines) > 10:
            print(f"... ({len(lines) - 10} more lines)")
        print()


if __name__ == "__main__":
    main()
