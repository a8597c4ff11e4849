"""
Rails Instruction Set Definition
================================

This module defines the Rails instruction set: sixteen opcodes, the five
operand encodings ("shapes") they use, and the machine constants shared by
the assembler, the disassembler and the emulator.

Machine Model
-------------
- 16 general registers r0-r15, 8-bit each
- 16 I/O registers, 8-bit each (written by OUT)
- 256 bytes of RAM
- 8-bit program counter indexing the program, one record per instruction
- 1-bit carry flag, set by the arithmetic operations only

Instruction Records
-------------------
An instruction is stored as a short tuple of unsigned bytes. Slot 0 is
always the opcode; the remaining slots depend on the encoding:

    Encoding   Source order   Record
    --------   ------------   -----------------------
    CAB        C, A, B        (opcode, A, B, C)
    CA         C, A           (opcode, A, C)
    AB         A, B           (opcode, A, B)
    C_IMM      C, imm         (opcode, imm, C)
    IMM_C      imm, C         (opcode, imm, C)

C is the destination register, A and B are source registers and imm is an
8-bit immediate (or a resolved tag).

Pseudo-Instructions
-------------------
The assembler expands four mnemonics that have no opcode of their own:

    NOP          -> (0, 0, 0, 0)      ADD r0 r0 r0
    MOV rD rS    -> (0, S, 0, D)      ADD rD rS r0
    JMP target   -> (11, target, 15)  BEQ target r15
    EXIT         -> (13, 0, 0, 0)     JMPL halt sentinel

Register 0 is not hardwired to zero, so MOV only copies when r0 holds 0.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Optional


# =============================================================================
# Machine Constants
# =============================================================================

NUM_REGISTERS = 16
NUM_IO_REGISTERS = 16
RAM_SIZE = 256
MAX_REGISTER = NUM_REGISTERS - 1
MAX_IMMEDIATE = 0xFF
MAX_PROGRAM_LENGTH = 256

# Register compared against by BEQ/BGT, and the one JMP compares to itself
COMPARE_REGISTER = 15

REGISTER_PREFIX = "r"
TAG_MARKER = ":"
COMMENT_MARKERS = ("#", "//")

MachineInstruction = tuple[int, ...]
MachineProgram = list[MachineInstruction]


# =============================================================================
# Encodings and Opcodes
# =============================================================================

class Encoding(Enum):
    """
    Operand layout of an instruction, in source order and in the record.
    """
    CAB = auto()    # three registers
    CA = auto()     # destination + one source register
    AB = auto()     # two source registers
    C_IMM = auto()  # destination register, then immediate
    IMM_C = auto()  # immediate, then register

    def __str__(self) -> str:
        return {
            Encoding.CAB: "C A B",
            Encoding.CA: "C A",
            Encoding.AB: "A B",
            Encoding.C_IMM: "C imm",
            Encoding.IMM_C: "imm C",
        }[self]

    @property
    def operand_count(self) -> int:
        """Number of source operands this encoding takes."""
        return 3 if self is Encoding.CAB else 2

    @property
    def record_size(self) -> int:
        """Number of slots, opcode included, in an encoded record."""
        return self.operand_count + 1


class Opcode(IntEnum):
    """The sixteen Rails opcodes."""
    ADD = 0
    ADDC = 1
    SUB = 2
    SWB = 3
    NAND = 4
    RSFT = 5
    IMM = 6
    LD = 7
    LDIM = 8
    ST = 9
    STIM = 10
    BEQ = 11
    BGT = 12
    JMPL = 13
    IN = 14
    OUT = 15


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Static description of one instruction.

    Attributes:
        mnemonic: Source name (e.g. "ADD")
        opcode: Numeric opcode (slot 0 of the record)
        encoding: Operand shape
        description: One-line summary for listings and help text
    """
    mnemonic: str
    opcode: Opcode
    encoding: Encoding
    description: str = ""

    def __repr__(self) -> str:
        return (
            f"InstructionInfo({self.mnemonic}, opcode={int(self.opcode)}, "
            f"encoding={self.encoding.name})"
        )


_INSTRUCTIONS = (
    InstructionInfo("ADD", Opcode.ADD, Encoding.CAB, "C = A + B"),
    InstructionInfo("ADDC", Opcode.ADDC, Encoding.CAB, "C = A + B + carry"),
    InstructionInfo("SUB", Opcode.SUB, Encoding.CAB, "C = A - B"),
    InstructionInfo("SWB", Opcode.SWB, Encoding.CAB, "C = A - B - carry"),
    InstructionInfo("NAND", Opcode.NAND, Encoding.CAB, "C = ~(A & B)"),
    InstructionInfo("RSFT", Opcode.RSFT, Encoding.CA, "C = A >> 1"),
    InstructionInfo("IMM", Opcode.IMM, Encoding.C_IMM, "C = imm"),
    InstructionInfo("LD", Opcode.LD, Encoding.CA, "C = ram[A]"),
    InstructionInfo("LDIM", Opcode.LDIM, Encoding.C_IMM, "C = ram[imm]"),
    InstructionInfo("ST", Opcode.ST, Encoding.AB, "ram[A] = B"),
    InstructionInfo("STIM", Opcode.STIM, Encoding.IMM_C, "ram[imm] = C"),
    InstructionInfo("BEQ", Opcode.BEQ, Encoding.IMM_C, "if r15 == C: pc = imm"),
    InstructionInfo("BGT", Opcode.BGT, Encoding.IMM_C, "if r15 > C: pc = imm"),
    InstructionInfo("JMPL", Opcode.JMPL, Encoding.CA, "C = pc + 1; pc = A"),
    InstructionInfo("IN", Opcode.IN, Encoding.CA, "C = input from device A"),
    InstructionInfo("OUT", Opcode.OUT, Encoding.AB, "io[A] = B"),
)

# Mnemonic -> instruction, used by the assembler
INSTRUCTION_TABLE: dict[str, InstructionInfo] = {
    info.mnemonic: info for info in _INSTRUCTIONS
}

# Opcode -> instruction, used by the disassembler and the emulator
OPCODE_INFO: dict[Opcode, InstructionInfo] = {
    info.opcode: info for info in _INSTRUCTIONS
}

MNEMONICS: frozenset[str] = frozenset(INSTRUCTION_TABLE)

PSEUDO_INSTRUCTIONS: frozenset[str] = frozenset({"NOP", "MOV", "JMP", "EXIT"})

NOP_RECORD: MachineInstruction = (int(Opcode.ADD), 0, 0, 0)
HALT_RECORD: MachineInstruction = (int(Opcode.JMPL), 0, 0, 0)


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """
    Look up an instruction by mnemonic.

    Mnemonics are case-sensitive: "ADD" is an instruction, "add" is not.

    Returns:
        InstructionInfo if found, None otherwise
    """
    return INSTRUCTION_TABLE.get(mnemonic)


def is_valid_instruction(mnemonic: str) -> bool:
    """True if the mnemonic is a real or pseudo instruction."""
    return mnemonic in INSTRUCTION_TABLE or mnemonic in PSEUDO_INSTRUCTIONS


def is_halt(record: MachineInstruction) -> bool:
    """
    True if the record is a JMPL whose operand slots are all zero.

    Both the four-slot EXIT sentinel and a plain "JMPL r0 r0" (three slots)
    qualify; absent slots count as zero.
    """
    return (
        len(record) > 0
        and record[0] == Opcode.JMPL
        and all(value == 0 for value in record[1:])
    )


# =============================================================================
# Record Decoding
# =============================================================================

@dataclass(frozen=True)
class DecodedInstruction:
    """
    Named view of a record's slots according to its encoding.

    Fields not used by the encoding are 0.
    """
    opcode: Opcode
    a: int = 0
    b: int = 0
    c: int = 0
    imm: int = 0


def decode(record: MachineInstruction) -> DecodedInstruction:
    """
    Split a record into named fields.

    CAB records are (op, A, B, C). CA records carry A in slot 1 and C in
    their last slot, so the four-slot EXIT sentinel decodes like a plain
    three-slot JMPL. AB records are (op, A, B); C_IMM and IMM_C records are
    (op, imm, C).

    Raises:
        ValueError: If slot 0 is not an opcode, the record is too short,
            or a register slot is above r15
    """
    if not record:
        raise ValueError("empty instruction record")

    opcode = Opcode(record[0])
    encoding = OPCODE_INFO[opcode].encoding
    if len(record) < encoding.record_size:
        raise ValueError(
            f"{opcode.name} record needs {encoding.record_size} slots, "
            f"got {len(record)}"
        )

    match encoding:
        case Encoding.CAB:
            decoded = DecodedInstruction(opcode, a=record[1], b=record[2], c=record[3])
        case Encoding.CA:
            decoded = DecodedInstruction(opcode, a=record[1], c=record[-1])
        case Encoding.AB:
            decoded = DecodedInstruction(opcode, a=record[1], b=record[2])
        case Encoding.C_IMM | Encoding.IMM_C:
            decoded = DecodedInstruction(opcode, imm=record[1], c=record[2])

    if not all(0 <= value <= MAX_REGISTER for value in (decoded.a, decoded.b, decoded.c)):
        raise ValueError(f"{opcode.name} register slot above r{MAX_REGISTER}")
    if not 0 <= decoded.imm <= MAX_IMMEDIATE:
        raise ValueError(f"{opcode.name} immediate {decoded.imm} is not a byte")
    return decoded
