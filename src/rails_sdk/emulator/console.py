"""
Rails Emulator Console
======================

The emulator talks to the user through a console collaborator with three
operations: clear the screen, write text, and read one line of input.
TerminalConsole implements them with Click so that output behaves the same
on every platform and under click.testing.CliRunner.

format_state() renders the register dump shown before every IN and after
the program halts:

    Program Counter: 3
    Registers
    r0:5 r1:3 r2:8 r3:0
    ...
    IO Registers
    r0:0 r1:0 r2:0 r3:0
    ...
    Carry: 0
"""

from typing import Protocol

import click

from rails_sdk.emulator.cpu import MachineState

BANNER = r"""
  ____       _ _
 |  _ \ __ _(_) |___
 | |_) / _` | | / __|
 |  _ < (_| | | \__ \
 |_| \_\__,_|_|_|___/
"""

REGISTERS_PER_ROW = 4


class Console(Protocol):
    """Anything the emulator can clear, write to and read from."""

    def clear(self) -> None: ...

    def log(self, text: str) -> None: ...

    def get_input(self, prompt: str) -> str: ...


class TerminalConsole:
    """Console backed by the controlling terminal."""

    def clear(self) -> None:
        click.clear()

    def log(self, text: str) -> None:
        click.echo(text, nl=False)

    def get_input(self, prompt: str) -> str:
        return click.prompt(prompt, prompt_suffix="", default="", show_default=False)


def _format_bank(title: str, values: bytearray) -> list[str]:
    lines = [title]
    for start in range(0, len(values), REGISTERS_PER_ROW):
        row = values[start:start + REGISTERS_PER_ROW]
        lines.append(" ".join(f"r{start + i}:{value}" for i, value in enumerate(row)))
    return lines


def format_state(state: MachineState, show_pc: bool = True) -> str:
    """
    Render registers, I/O registers and the carry flag as text.

    Args:
        state: Machine state to render
        show_pc: Include the program counter line (shown while waiting for
            input, omitted in the final dump)

    Returns:
        Newline-terminated multi-line dump
    """
    lines = []
    if show_pc:
        lines.append(f"Program Counter: {state.pc}")
    lines.extend(_format_bank("Registers", state.registers))
    lines.extend(_format_bank("IO Registers", state.io_registers))
    lines.append(f"Carry: {int(state.carry)}")
    return "\n".join(lines) + "\n"
