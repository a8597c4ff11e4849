"""
Rails Assembler - Main Interface
================================

This module provides the Assembler class, which turns Rails assembly source
into a machine program: a list of instruction records ready for the
emulator.

Assembly Process
----------------
1. **Lexing**: split the source into lines and tokens, detect tags.
2. **Pass 1 (tag discovery)**: every tag definition is entered into the tag
   table. In the default raw mode a tag maps to the 0-based index of the
   line it sits on, counting blank and comment lines too.
3. **Pass 2 (emission)**: blank and comment lines are skipped; every other
   line becomes exactly one record. Pseudo-instructions (NOP, MOV, JMP,
   EXIT) are expanded first, then the mnemonic is looked up in the
   instruction table and its operands encoded according to its shape.

Assembly stops at the first error. Nothing is returned for a program that
fails to assemble.

Example Usage
-------------
>>> from rails_sdk.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble('''IMM r0 5
... IMM r1 3
... ADD r2 r0 r1
... EXIT''')
[(6, 5, 0), (6, 3, 1), (0, 0, 1, 2), (13, 0, 0, 0)]
"""

from difflib import get_close_matches
from pathlib import Path
from typing import Optional
import logging
import re

from rails_sdk.assembler.lexer import Lexer, SourceLine, Token
from rails_sdk.config import AssemblerConfig, TagMode
from rails_sdk.cpu import (
    COMPARE_REGISTER,
    HALT_RECORD,
    INSTRUCTION_TABLE,
    MAX_IMMEDIATE,
    MAX_REGISTER,
    MNEMONICS,
    NOP_RECORD,
    PSEUDO_INSTRUCTIONS,
    REGISTER_PREFIX,
    Encoding,
    InstructionInfo,
    MachineInstruction,
    MachineProgram,
    Opcode,
    get_instruction_info,
)
from rails_sdk.errors import (
    DuplicateTagError,
    ImmediateRangeError,
    OperandError,
    ProgramTooLongError,
    RegisterRangeError,
    UndefinedTagError,
    UnknownInstructionError,
)

logger = logging.getLogger(__name__)

# Operand count of each pseudo-instruction
_PSEUDO_OPERANDS = {"NOP": 0, "MOV": 2, "JMP": 1, "EXIT": 0}

_DECIMAL = re.compile(r"[0-9]+")


def _decimal_value(digits: str, limit: int) -> Optional[int]:
    """Value of a digit string, or None when it has more digits than limit."""
    significant = digits.lstrip("0") or "0"
    if len(significant) > len(str(limit)):
        return None
    return int(significant)


class Assembler:
    """
    Two-pass Rails assembler.

    An Assembler holds only its configuration between calls; the tag table
    and the lines being assembled live for the duration of one assemble()
    call, so a single instance can assemble any number of programs.

    Attributes:
        config: AssemblerConfig controlling tag resolution and limits
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble(self, source: str, filename: str = "<input>") -> MachineProgram:
        """
        Assemble source code from a string.

        Args:
            source: Rails assembly source
            filename: Virtual filename for error messages

        Returns:
            The machine program, one record per instruction line

        Raises:
            AssemblerError: On the first malformed line
        """
        lines = Lexer(source, filename).lines()
        logger.debug("Lexed %d lines from %s", len(lines), filename)

        tags = self._collect_tags(lines)
        logger.debug("Collected %d tags", len(tags))

        program = _Emitter(lines, tags, self.config).emit()
        logger.debug("Assembled %d instructions", len(program))
        return program

    def assemble_file(self, filepath: str | Path) -> MachineProgram:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If the source file does not exist
        """
        filepath = Path(filepath)
        source = filepath.read_text(encoding="utf-8")
        return self.assemble(source, filename=str(filepath))

    # =========================================================================
    # Pass 1: Tag Discovery
    # =========================================================================

    def _collect_tags(self, lines: list[SourceLine]) -> dict[str, int]:
        tags: dict[str, int] = {}
        defined_on: dict[str, int] = {}
        emitted = 0

        for line in lines:
            if line.label is not None:
                name = line.label.text
                if name in tags:
                    raise DuplicateTagError(
                        name,
                        location=line.label.location,
                        original_line=defined_on[name],
                        source_line=line.text,
                    )
                if self.config.tag_mode is TagMode.EMITTED:
                    tags[name] = emitted
                else:
                    tags[name] = line.index
                defined_on[name] = line.number

            if line.emits_instruction:
                emitted += 1

        return tags


class _Emitter:
    """Pass 2: turns label-stripped lines into instruction records."""

    def __init__(self, lines: list[SourceLine], tags: dict[str, int],
                 config: AssemblerConfig):
        self.lines = lines
        self.tags = tags
        self.config = config
        self._line: Optional[SourceLine] = None

    def emit(self) -> MachineProgram:
        program: MachineProgram = []

        for line in self.lines:
            if not line.emits_instruction:
                continue
            self._line = line

            if len(program) >= self.config.max_program_length:
                raise ProgramTooLongError(
                    self.config.max_program_length,
                    location=line.location,
                    source_line=line.text,
                )

            program.append(self._encode_line(line))

        return program

    # -------------------------------------------------------------------------
    # Line encoding
    # -------------------------------------------------------------------------

    def _encode_line(self, line: SourceLine) -> MachineInstruction:
        mnemonic = line.mnemonic.text

        if mnemonic in PSEUDO_INSTRUCTIONS:
            return self._encode_pseudo(mnemonic, line.operands)

        info = get_instruction_info(mnemonic)
        if info is None:
            raise UnknownInstructionError(
                mnemonic,
                location=line.mnemonic.location,
                source_line=line.text,
                similar=get_close_matches(
                    mnemonic.upper(), sorted(MNEMONICS | PSEUDO_INSTRUCTIONS)
                ),
            )

        return self._encode_instruction(info, line.operands)

    def _encode_pseudo(self, mnemonic: str, operands: list[Token]) -> MachineInstruction:
        self._check_operand_count(mnemonic, operands, _PSEUDO_OPERANDS[mnemonic])

        match mnemonic:
            case "NOP":
                return NOP_RECORD
            case "MOV":
                dest = self._parse_register(operands[0])
                source = self._parse_register(operands[1])
                return (int(Opcode.ADD), source, 0, dest)
            case "JMP":
                target = self._parse_immediate(operands[0])
                return (int(Opcode.BEQ), target, COMPARE_REGISTER)
            case "EXIT":
                return HALT_RECORD

        raise AssertionError(f"unhandled pseudo-instruction {mnemonic}")

    def _encode_instruction(self, info: InstructionInfo,
                            operands: list[Token]) -> MachineInstruction:
        encoding = info.encoding
        self._check_operand_count(info.mnemonic, operands, encoding.operand_count)
        opcode = int(info.opcode)

        match encoding:
            case Encoding.CAB:
                c = self._parse_register(operands[0])
                a = self._parse_register(operands[1])
                b = self._parse_register(operands[2])
                return (opcode, a, b, c)
            case Encoding.CA:
                c = self._parse_register(operands[0])
                a = self._parse_register(operands[1])
                return (opcode, a, c)
            case Encoding.AB:
                a = self._parse_register(operands[0])
                b = self._parse_register(operands[1])
                return (opcode, a, b)
            case Encoding.C_IMM:
                c = self._parse_register(operands[0])
                imm = self._parse_immediate(operands[1])
                return (opcode, imm, c)
            case Encoding.IMM_C:
                imm = self._parse_immediate(operands[0])
                c = self._parse_register(operands[1])
                return (opcode, imm, c)

        raise AssertionError(f"unhandled encoding {encoding}")

    def _check_operand_count(self, mnemonic: str, operands: list[Token],
                             expected: int) -> None:
        if len(operands) >= expected:
            if len(operands) > expected:
                logger.debug(
                    "%s: ignoring extra operand(s) for '%s'",
                    operands[expected].location, mnemonic,
                )
            return

        info = INSTRUCTION_TABLE.get(mnemonic)
        hint = f"usage: {mnemonic} {info.encoding}" if info else None
        raise OperandError(
            f"'{mnemonic}' expects {expected} operand(s), got {len(operands)}",
            location=self._line.location,
            hint=hint,
            source_line=self._line.text,
        )

    # -------------------------------------------------------------------------
    # Operand parsing
    # -------------------------------------------------------------------------

    def _parse_register(self, token: Token) -> int:
        text = token.text
        digits = text[len(REGISTER_PREFIX):] if text.startswith(REGISTER_PREFIX) else text

        if not _DECIMAL.fullmatch(digits):
            raise OperandError(
                f"invalid register '{text}'",
                location=token.location,
                hint="registers are written r0 to r15",
                source_line=self._line.text,
            )

        value = _decimal_value(digits, MAX_REGISTER)
        if value is None or value > MAX_REGISTER:
            raise RegisterRangeError(text, location=token.location,
                                     source_line=self._line.text)
        return value

    def _parse_immediate(self, token: Token) -> int:
        text = token.text

        if token.is_tag:
            value = self._resolve_tag(token)
        elif _DECIMAL.fullmatch(text):
            value = _decimal_value(text, MAX_IMMEDIATE)
            if value is None:
                raise ImmediateRangeError(text, None, location=token.location,
                                          source_line=self._line.text)
        else:
            raise OperandError(
                f"invalid immediate '{text}'",
                location=token.location,
                hint="immediates are decimal numbers 0-255 or tags ending in ':'",
                source_line=self._line.text,
            )

        if value > MAX_IMMEDIATE:
            raise ImmediateRangeError(text, value, location=token.location,
                                      source_line=self._line.text)
        return value

    def _resolve_tag(self, token: Token) -> int:
        if token.text in self.tags:
            return self.tags[token.text]

        if self.config.strict_tags:
            raise UndefinedTagError(token.text, location=token.location,
                                    source_line=self._line.text)

        logger.warning(
            "%s: undefined tag '%s' resolves to 0", token.location, token.text
        )
        return 0


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             config: Optional[AssemblerConfig] = None) -> MachineProgram:
    """Assemble a source string with a fresh Assembler."""
    return Assembler(config).assemble(source, filename)


def assemble_file(filepath: str | Path,
                  config: Optional[AssemblerConfig] = None) -> MachineProgram:
    """Assemble a source file with a fresh Assembler."""
    return Assembler(config).assemble_file(filepath)
