#!/usr/bin/env python3
"""
Rails Emulator Demo
===================

This script demonstrates how to use the Rails SDK to:
1. Assemble a program from a string
2. Print its disassembly listing
3. Step through it one instruction at a time
4. Run a program file on the terminal console

Usage:
    python examples/emulator_demo.py
"""

from pathlib import Path

from rails_sdk import Emulator, RailsCPU, RailsDisassembler, assemble, assemble_file
from rails_sdk.config import EmulatorConfig

SOURCE = """\
IMM r1 3              # counter
IMM r2 1
IMM r15 0
loop: SUB r1 r1 r2
BEQ done: r1
JMP loop:
done: EXIT
"""


def main():
    # ==========================================================================
    # 1. Assemble
    # ==========================================================================
    program = assemble(SOURCE, filename="countdown")
    print(f"Assembled {len(program)} instructions\n")

    # ==========================================================================
    # 2. Listing
    # ==========================================================================
    print(RailsDisassembler().disassemble_to_text(program))

    # ==========================================================================
    # 3. Single-step on a bare CPU
    # ==========================================================================
    print("\nStepping:")
    cpu = RailsCPU(program)
    while cpu.running:
        pc = cpu.state.pc
        cpu.step()
        print(f"  pc={pc:3d} r1={cpu.state.registers[1]:3d} carry={int(cpu.state.carry)}")
    print(f"Halted after {cpu.state.steps} steps\n")

    # ==========================================================================
    # 4. Run a file with console dumps (prompts for two numbers)
    # ==========================================================================
    multiply = Path(__file__).with_name("multiply.rails")
    state = Emulator(config=EmulatorConfig(clear_screen=False)).run(
        assemble_file(multiply)
    )
    print(f"\nProduct: {state.io_registers[0]}")


if __name__ == "__main__":
    main()
