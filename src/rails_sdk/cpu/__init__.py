"""
Rails SDK CPU Package
=====================

Instruction-set definitions shared by the assembler (which encodes
instructions), the disassembler (which decodes them) and the emulator
(which executes them).

Usage:
    from rails_sdk.cpu import Encoding, Opcode, INSTRUCTION_TABLE, decode
"""

from rails_sdk.cpu.isa import (
    # Machine constants
    NUM_REGISTERS,
    NUM_IO_REGISTERS,
    RAM_SIZE,
    MAX_REGISTER,
    MAX_IMMEDIATE,
    MAX_PROGRAM_LENGTH,
    COMPARE_REGISTER,
    REGISTER_PREFIX,
    TAG_MARKER,
    COMMENT_MARKERS,
    # Types
    MachineInstruction,
    MachineProgram,
    Encoding,
    Opcode,
    InstructionInfo,
    DecodedInstruction,
    # Tables
    INSTRUCTION_TABLE,
    OPCODE_INFO,
    MNEMONICS,
    PSEUDO_INSTRUCTIONS,
    NOP_RECORD,
    HALT_RECORD,
    # Functions
    get_instruction_info,
    is_valid_instruction,
    is_halt,
    decode,
)

__all__ = [
    "NUM_REGISTERS",
    "NUM_IO_REGISTERS",
    "RAM_SIZE",
    "MAX_REGISTER",
    "MAX_IMMEDIATE",
    "MAX_PROGRAM_LENGTH",
    "COMPARE_REGISTER",
    "REGISTER_PREFIX",
    "TAG_MARKER",
    "COMMENT_MARKERS",
    "MachineInstruction",
    "MachineProgram",
    "Encoding",
    "Opcode",
    "InstructionInfo",
    "DecodedInstruction",
    "INSTRUCTION_TABLE",
    "OPCODE_INFO",
    "MNEMONICS",
    "PSEUDO_INSTRUCTIONS",
    "NOP_RECORD",
    "HALT_RECORD",
    "get_instruction_info",
    "is_valid_instruction",
    "is_halt",
    "decode",
]
