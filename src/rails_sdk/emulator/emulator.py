"""
Rails Emulator - Main Orchestrator
==================================

This module provides the `Emulator` class, which runs a machine program on a
fresh RailsCPU and connects it to a console:

- IN clears the console, shows the banner and the current machine state,
  then prompts for a byte value.
- When the program halts the final state is shown, followed by
  "Program finished!".

Example usage:
    >>> from rails_sdk.assembler import assemble
    >>> from rails_sdk.emulator import Emulator
    >>> state = Emulator().run(assemble("IMM r1 42\\nEXIT"))
    >>> state.registers[1]
    42
"""

from typing import Optional
import logging

from rails_sdk.config import EmulatorConfig
from rails_sdk.cpu import MachineProgram, MAX_IMMEDIATE
from rails_sdk.emulator.console import BANNER, Console, TerminalConsole, format_state
from rails_sdk.emulator.cpu import MachineState, RailsCPU
from rails_sdk.errors import InputParseError, StepLimitError

logger = logging.getLogger(__name__)

FINISHED_MESSAGE = "Program finished!"
INPUT_PROMPT = "Program reading io register: {device}, enter value 0-255: "


class Emulator:
    """
    Runs Rails machine programs against a console.

    Every call to run() builds a new RailsCPU, so registers, RAM and the
    carry flag never carry over between programs.

    Attributes:
        console: Where dumps go and where IN reads from
        config: EmulatorConfig (step budget, screen clearing)
        cpu: The CPU of the most recent run (None before the first run)
    """

    def __init__(self, console: Optional[Console] = None,
                 config: Optional[EmulatorConfig] = None):
        self.console = console or TerminalConsole()
        self.config = config or EmulatorConfig()
        self.cpu: Optional[RailsCPU] = None

    def run(self, program: MachineProgram) -> MachineState:
        """
        Execute a program until it halts.

        Args:
            program: Machine program from the assembler

        Returns:
            The final machine state

        Raises:
            EmulatorError: If execution fails (bad PC, bad record, bad
                input, step budget exhausted)
        """
        self.cpu = RailsCPU(program, input_handler=self._read_input)
        state = self.cpu.state
        max_steps = self.config.max_steps
        logger.debug("Running %d instructions (max_steps=%s)", len(program), max_steps)

        while self.cpu.running:
            if max_steps is not None and state.steps >= max_steps:
                raise StepLimitError(max_steps, pc=state.pc)
            self.cpu.step()

        logger.debug("Program halted after %d steps", state.steps)
        self._show_state(show_pc=False)
        self.console.log(FINISHED_MESSAGE + "\n")
        return state

    def _show_state(self, show_pc: bool) -> None:
        if self.config.clear_screen:
            self.console.clear()
        self.console.log(BANNER.lstrip("\n"))
        self.console.log(format_state(self.cpu.state, show_pc=show_pc))

    def _read_input(self, device: int) -> int:
        self._show_state(show_pc=True)
        text = self.console.get_input(INPUT_PROMPT.format(device=device))
        return parse_input_value(text, pc=self.cpu.state.pc)


def parse_input_value(text: str, pc: Optional[int] = None) -> int:
    """
    Parse a line typed in response to IN.

    Surrounding whitespace is ignored; anything other than an unsigned
    decimal integer in 0-255 raises InputParseError.
    """
    stripped = text.strip()
    if not stripped.isascii() or not stripped.isdigit():
        raise InputParseError(text, pc=pc)
    significant = stripped.lstrip("0") or "0"
    if len(significant) > len(str(MAX_IMMEDIATE)):
        raise InputParseError(text, pc=pc)
    value = int(significant)
    if value > MAX_IMMEDIATE:
        raise InputParseError(text, pc=pc)
    return value
