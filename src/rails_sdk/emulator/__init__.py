"""
Rails Emulator
==============

Executes machine programs produced by the assembler.

Components
----------
- **ArithmeticLogicUnit**: 8-bit add/sub with carry, NAND
- **RailsCPU**: fetch-decode-execute over a MachineState, run_until() for I/O stops
- **Emulator**: orchestrates a run, console dumps and IN prompts
- **TerminalConsole**: Click-backed console

Example
-------
>>> from rails_sdk.assembler import assemble
>>> from rails_sdk.emulator import Emulator
>>> state = Emulator().run(assemble("IMM r0 5\\nIMM r1 3\\nADD r2 r0 r1\\nEXIT"))
>>> state.registers[2]
8
"""

from rails_sdk.emulator.alu import ArithmeticLogicUnit
from rails_sdk.emulator.console import (
    BANNER,
    Console,
    TerminalConsole,
    format_state,
)
from rails_sdk.emulator.cpu import (
    InputHandler,
    MachineState,
    RailsCPU,
    StopCondition,
)
from rails_sdk.emulator.emulator import (
    FINISHED_MESSAGE,
    INPUT_PROMPT,
    Emulator,
    parse_input_value,
)

__all__ = [
    "ArithmeticLogicUnit",
    "BANNER",
    "Console",
    "TerminalConsole",
    "format_state",
    "InputHandler",
    "MachineState",
    "RailsCPU",
    "StopCondition",
    "FINISHED_MESSAGE",
    "INPUT_PROMPT",
    "Emulator",
    "parse_input_value",
]
