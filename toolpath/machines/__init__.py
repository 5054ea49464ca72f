"""Per-machine program assemblers.

Usage:
    from toolpath.machines import ASSEMBLERS

    program = ASSEMBLERS['mill'](request).assemble()
"""
from .base import MachineAssembler
from .lathe import LatheAssembler
from .mill import MillAssembler
from .printer import ExtrusionTracker, PrinterAssembler, extrusion_multiplier


ASSEMBLERS = {
    'mill': MillAssembler,
    'lathe': LatheAssembler,
    'printer': PrinterAssembler,
}


__all__ = [
    'ASSEMBLERS',
    'ExtrusionTracker',
    'LatheAssembler',
    'MachineAssembler',
    'MillAssembler',
    'PrinterAssembler',
    'extrusion_multiplier',
]
