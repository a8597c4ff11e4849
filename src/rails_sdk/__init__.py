"""
Rails SDK - Assembler and Emulator for the Rails Toy Computer
=============================================================

Rails is an 8-bit teaching computer: 16 general registers, 16 I/O
registers, 256 bytes of RAM, an 8-bit program counter and a carry flag,
driven by a 16-instruction set.

Main Components
---------------
- **cpu**: Instruction-set definition (opcodes, encodings, record decoding)
- **assembler**: Two-pass assembler turning source text into a machine program
- **emulator**: ALU, CPU and the Emulator that runs a program on a console
- **disassembler**: Machine program back to source, for listings
- **cli**: The ``rails`` command-line tool

Quick Start
-----------
    >>> from rails_sdk import assemble, Emulator
    >>> program = assemble('''
    ... IMM r0 5
    ... IMM r1 3
    ... ADD r2 r0 r1
    ... EXIT''')
    >>> state = Emulator().run(program)
    >>> state.registers[2]
    8

Or from the terminal:
    $ rails program.rails
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from rails_sdk.assembler import Assembler, assemble, assemble_file
from rails_sdk.config import AssemblerConfig, EmulatorConfig, TagMode
from rails_sdk.disassembler import DisassembledInstruction, RailsDisassembler
from rails_sdk.emulator import (
    ArithmeticLogicUnit,
    Emulator,
    MachineState,
    RailsCPU,
    TerminalConsole,
)
from rails_sdk.errors import (
    RailsError,
    SourceLocation,
    AssemblerError,
    OperandError,
    RegisterRangeError,
    ImmediateRangeError,
    UnknownInstructionError,
    UndefinedTagError,
    DuplicateTagError,
    ProgramTooLongError,
    EmulatorError,
    DecodeError,
    ProgramCounterError,
    InputParseError,
    InputUnavailableError,
    StepLimitError,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    # Configuration
    "AssemblerConfig",
    "EmulatorConfig",
    "TagMode",
    # Emulator
    "ArithmeticLogicUnit",
    "Emulator",
    "MachineState",
    "RailsCPU",
    "TerminalConsole",
    # Disassembler
    "DisassembledInstruction",
    "RailsDisassembler",
    # Errors
    "RailsError",
    "SourceLocation",
    "AssemblerError",
    "OperandError",
    "RegisterRangeError",
    "ImmediateRangeError",
    "UnknownInstructionError",
    "UndefinedTagError",
    "DuplicateTagError",
    "ProgramTooLongError",
    "EmulatorError",
    "DecodeError",
    "ProgramCounterError",
    "InputParseError",
    "InputUnavailableError",
    "StepLimitError",
]
