"""
Rails Disassembler
==================

Turns instruction records back into Rails assembly source. This is the
inverse of the assembler's encoding step.

Registers are written with their "r" prefix and immediates in decimal, in
the same operand order the assembler reads them:

    CAB    ADD r2 r0 r1      (op, A, B, C) -> C A B
    CA     RSFT r2 r1        (op, A, C)    -> C A
    AB     ST r1 r2          (op, A, B)    -> A B
    C_IMM  IMM r1 42         (op, imm, C)  -> C imm
    IMM_C  BEQ 7 r3          (op, imm, C)  -> imm C

Records that match a pseudo-instruction (NOP, MOV, JMP, EXIT) are shown as
the real instruction with the pseudo form as a comment. Output for valid
records always assembles; only the four-slot EXIT sentinel comes back as a
three-slot JMPL, which executes identically.

Usage:
    disasm = RailsDisassembler()
    for instr in disasm.disassemble(program):
        print(instr)
"""

from dataclasses import dataclass

from rails_sdk.cpu import (
    COMPARE_REGISTER,
    REGISTER_PREFIX,
    DecodedInstruction,
    Encoding,
    MachineInstruction,
    MachineProgram,
    OPCODE_INFO,
    Opcode,
    decode,
    is_halt,
)

INVALID_MNEMONIC = ".DATA"


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    A single disassembled Rails instruction.

    Attributes:
        index: Position of the record in the program (its PC value)
        record: The raw record
        mnemonic: Instruction mnemonic, or ".DATA" for undecodable records
        operands: Operand tokens in source order
        comment: Optional annotation (pseudo-instruction form, errors)
    """
    index: int
    record: MachineInstruction
    mnemonic: str
    operands: tuple[str, ...] = ()
    comment: str = ""

    @property
    def operand_str(self) -> str:
        return " ".join(self.operands)

    @property
    def is_valid(self) -> bool:
        return self.mnemonic != INVALID_MNEMONIC

    def to_source(self) -> str:
        """Return the instruction as a line the assembler accepts."""
        if self.operands:
            return f"{self.mnemonic} {self.operand_str}"
        return self.mnemonic

    def __str__(self) -> str:
        """Format as listing line: INDEX: SLOTS  MNEMONIC OPERANDS # COMMENT"""
        slots = " ".join(f"{value:3d}" for value in self.record).ljust(15)
        asm = self.to_source()

        if self.comment:
            return f"{self.index:3d}: {slots}  {asm:<16} # {self.comment}"
        return f"{self.index:3d}: {slots}  {asm}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "index": self.index,
            "record": list(self.record),
            "mnemonic": self.mnemonic,
            "operands": list(self.operands),
            "comment": self.comment,
        }


# =============================================================================
# Rails Disassembler
# =============================================================================

class RailsDisassembler:
    """
    Disassembler for Rails machine programs.

    Stateless: the opcode table comes from rails_sdk.cpu, and every record
    is decoded on its own.
    """

    def disassemble_one(self, record: MachineInstruction,
                        index: int = 0) -> DisassembledInstruction:
        """
        Disassemble a single record.

        Records that do not decode are returned as ".DATA" with the raw
        slots as operands and the reason as comment; nothing is raised.
        """
        try:
            instr = decode(record)
        except ValueError as e:
            return DisassembledInstruction(
                index=index,
                record=tuple(record),
                mnemonic=INVALID_MNEMONIC,
                operands=tuple(str(value) for value in record),
                comment=str(e),
            )

        info = OPCODE_INFO[instr.opcode]
        return DisassembledInstruction(
            index=index,
            record=tuple(record),
            mnemonic=info.mnemonic,
            operands=self._format_operands(info.encoding, instr),
            comment=self._pseudo_comment(record, instr),
        )

    def disassemble(self, program: MachineProgram) -> list[DisassembledInstruction]:
        """Disassemble every record of a program, in order."""
        return [
            self.disassemble_one(record, index)
            for index, record in enumerate(program)
        ]

    def disassemble_to_text(self, program: MachineProgram) -> str:
        """Return a multi-line listing of the program."""
        return "\n".join(str(instr) for instr in self.disassemble(program))

    def disassemble_to_source(self, program: MachineProgram) -> str:
        """Return source text that assembles back to the same program."""
        return "\n".join(instr.to_source() for instr in self.disassemble(program)) + "\n"

    # -------------------------------------------------------------------------

    @staticmethod
    def _format_operands(encoding: Encoding,
                         instr: DecodedInstruction) -> tuple[str, ...]:
        def reg(value: int) -> str:
            return f"{REGISTER_PREFIX}{value}"

        match encoding:
            case Encoding.CAB:
                return (reg(instr.c), reg(instr.a), reg(instr.b))
            case Encoding.CA:
                return (reg(instr.c), reg(instr.a))
            case Encoding.AB:
                return (reg(instr.a), reg(instr.b))
            case Encoding.C_IMM:
                return (reg(instr.c), str(instr.imm))
            case Encoding.IMM_C:
                return (str(instr.imm), reg(instr.c))

        raise AssertionError(f"unhandled encoding {encoding}")

    @staticmethod
    def _pseudo_comment(record: MachineInstruction,
                        instr: DecodedInstruction) -> str:
        if is_halt(record):
            return "EXIT"
        if instr.opcode is Opcode.ADD and instr.b == 0:
            if instr.a == 0 and instr.c == 0:
                return "NOP"
            return f"MOV {REGISTER_PREFIX}{instr.c} {REGISTER_PREFIX}{instr.a}"
        if instr.opcode is Opcode.BEQ and instr.c == COMPARE_REGISTER:
            return f"JMP {instr.imm}"
        return ""
