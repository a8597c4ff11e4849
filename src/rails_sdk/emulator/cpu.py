"""
Rails CPU
=========

Machine state and the fetch-decode-execute step for the Rails computer.

The CPU executes a machine program (a list of instruction records produced
by the assembler) directly: there is no separate memory image for code, the
program counter is an index into the program.

Execution of one step:
    1. Fetch program[pc]; a PC outside the program is fatal.
    2. Decode slot 0 into an Opcode and split the operands by encoding.
    3. Execute. Branches that are taken and JMPL set the PC themselves;
       every other instruction, untaken branches included, advances it by 1.

JMPL with all-zero operands is the halt sentinel: the CPU stops without
touching any register.

Example:
    >>> cpu = RailsCPU([(6, 5, 0), (6, 3, 1), (0, 0, 1, 2), (13, 0, 0, 0)])
    >>> state = cpu.run()
    >>> cpu.state.registers[2]
    8
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional
import logging

from rails_sdk.cpu import (
    COMPARE_REGISTER,
    NUM_IO_REGISTERS,
    NUM_REGISTERS,
    RAM_SIZE,
    DecodedInstruction,
    MachineProgram,
    Opcode,
    decode,
    is_halt,
)
from rails_sdk.emulator.alu import BYTE_MASK, ArithmeticLogicUnit
from rails_sdk.errors import DecodeError, InputUnavailableError, ProgramCounterError

logger = logging.getLogger(__name__)

# Called by IN with the device number; returns the byte to load
InputHandler = Callable[[int], int]


@dataclass
class MachineState:
    """
    Complete machine state for one run.

    All values are Python ints but represent:
    - registers, io_registers, ram: 8-bit unsigned cells
    - pc: 8-bit program index
    - carry: held by the ALU

    Attributes:
        registers: General registers r0-r15
        io_registers: Output registers written by OUT
        ram: 256 bytes of data memory
        pc: Program counter
        alu: Arithmetic logic unit (owns the carry flag)
        running: False once the halt sentinel executes
        steps: Instructions executed so far
    """
    registers: bytearray = field(default_factory=lambda: bytearray(NUM_REGISTERS))
    io_registers: bytearray = field(default_factory=lambda: bytearray(NUM_IO_REGISTERS))
    ram: bytearray = field(default_factory=lambda: bytearray(RAM_SIZE))
    pc: int = 0
    alu: ArithmeticLogicUnit = field(default_factory=ArithmeticLogicUnit)
    running: bool = True
    steps: int = 0

    @property
    def carry(self) -> bool:
        """Carry flag from the most recent arithmetic operation."""
        return self.alu.carry


class StopCondition(Enum):
    """Instructions that run_until() stops in front of."""
    IO = "io"        # IN or OUT
    EXIT = "exit"    # the halt sentinel


class RailsCPU:
    """
    Rails CPU executing a machine program.

    A fresh MachineState is allocated per CPU; nothing outlives the run.

    Attributes:
        program: The machine program being executed (not modified)
        state: Registers, RAM, PC and ALU
        input_handler: Supplies values for the IN instruction; without one,
            IN raises InputUnavailableError
    """

    def __init__(self, program: MachineProgram,
                 input_handler: Optional[InputHandler] = None):
        self.program = program
        self.state = MachineState()
        self.input_handler = input_handler

    @property
    def running(self) -> bool:
        return self.state.running

    # ========================================
    # Execution
    # ========================================

    def fetch(self) -> tuple[int, ...]:
        """Return the record at the PC."""
        pc = self.state.pc
        if not 0 <= pc < len(self.program):
            raise ProgramCounterError(
                f"program counter outside program of {len(self.program)} instructions",
                pc=pc,
            )
        return self.program[pc]

    def step(self) -> bool:
        """
        Execute exactly one instruction.

        Returns:
            True if the machine is still running afterwards

        Raises:
            ProgramCounterError: If the PC is outside the program
            DecodeError: If the record does not decode
        """
        record = self.fetch()
        pc = self.state.pc

        try:
            instr = decode(record)
        except ValueError as e:
            raise DecodeError(f"invalid instruction {tuple(record)}: {e}", pc=pc) from e

        logger.debug("pc=%d %s %s", pc, instr.opcode.name, tuple(record[1:]))
        self.state.steps += 1

        if instr.opcode is Opcode.JMPL and is_halt(record):
            self.state.running = False
            logger.debug("halt at pc=%d after %d steps", pc, self.state.steps)
            return False

        if not self._execute(instr):
            self.state.pc = (self.state.pc + 1) & BYTE_MASK
        return True

    def run(self) -> MachineState:
        """Step until the halt sentinel executes."""
        while self.step():
            pass
        return self.state

    def run_until(self, stop: StopCondition) -> MachineState:
        """
        Step until the next instruction matches stop, without executing it.

        Returns at once if the instruction at the PC already matches. A
        program that halts before reaching a match ends the run as usual,
        so callers check running afterwards.

        Example:
            >>> cpu = RailsCPU([(6, 4, 1), (15, 0, 1), (13, 0, 0, 0)])
            >>> cpu.run_until(StopCondition.IO).pc
            1
        """
        while self.state.running and not self._stops_at(self.fetch(), stop):
            self.step()
        return self.state

    @staticmethod
    def _stops_at(record: tuple[int, ...], stop: StopCondition) -> bool:
        if stop is StopCondition.EXIT:
            return is_halt(record)
        return record[0] in (Opcode.IN, Opcode.OUT)

    def _execute(self, instr: DecodedInstruction) -> bool:
        """
        Execute a decoded instruction.

        Returns:
            True if the instruction set the PC itself
        """
        regs = self.state.registers
        ram = self.state.ram
        alu = self.state.alu
        a, b, c, imm = instr.a, instr.b, instr.c, instr.imm

        match instr.opcode:
            case Opcode.ADD:
                regs[c] = alu.add(regs[a], regs[b])
            case Opcode.ADDC:
                regs[c] = alu.addc(regs[a], regs[b])
            case Opcode.SUB:
                regs[c] = alu.sub(regs[a], regs[b])
            case Opcode.SWB:
                regs[c] = alu.swb(regs[a], regs[b])
            case Opcode.NAND:
                regs[c] = alu.nand(regs[a], regs[b])
            case Opcode.RSFT:
                regs[c] = regs[a] >> 1
            case Opcode.IMM:
                regs[c] = imm
            case Opcode.LD:
                regs[c] = ram[regs[a]]
            case Opcode.LDIM:
                regs[c] = ram[imm]
            case Opcode.ST:
                ram[regs[a]] = regs[b]
            case Opcode.STIM:
                ram[imm] = regs[c]
            case Opcode.BEQ:
                if regs[COMPARE_REGISTER] == regs[c]:
                    self.state.pc = imm
                    return True
            case Opcode.BGT:
                if regs[COMPARE_REGISTER] > regs[c]:
                    self.state.pc = imm
                    return True
            case Opcode.JMPL:
                regs[c] = (self.state.pc + 1) & BYTE_MASK
                self.state.pc = a
                return True
            case Opcode.IN:
                if self.input_handler is None:
                    raise InputUnavailableError(a, pc=self.state.pc)
                regs[c] = self.input_handler(a) & BYTE_MASK
            case Opcode.OUT:
                self.state.io_registers[a] = regs[b]

        return False
