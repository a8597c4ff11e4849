"""
Rails SDK Error Hierarchy
=========================

This module defines the exception hierarchy for the entire Rails SDK.
All exceptions inherit from RailsError, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
RailsError (base)
├── AssemblerError (assembler-related)
│   ├── OperandError - missing or malformed operand
│   ├── RegisterRangeError - register index above r15
│   ├── ImmediateRangeError - immediate value above 255
│   ├── UnknownInstructionError - mnemonic not in the instruction set
│   ├── UndefinedTagError - reference to a tag that is never defined
│   ├── DuplicateTagError - tag defined more than once
│   └── ProgramTooLongError - more instructions than the PC can address
└── EmulatorError (execution-related)
    ├── DecodeError - opcode outside 0-15 or truncated record
    ├── ProgramCounterError - PC left the program
    ├── InputParseError - IN received something that is not a byte
    ├── InputUnavailableError - IN executed with no input source
    └── StepLimitError - configured step budget exhausted

Assembler errors capture the source location so that messages read like:
    program.rails:7:5: error: register index out of range: 'r16'
        ADD r16 r1 r2
        ^
    hint: registers are r0 to r15

Emulator errors carry the program counter at which execution stopped.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class RailsError(Exception):
    """
    Base exception for all Rails SDK errors.

        try:
            program = assemble(source)
            Emulator().run(program)
        except RailsError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed, counting every raw line)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        if self.column:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(RailsError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line_number(self) -> Optional[int]:
        """1-based line number of the offending line, if known."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class OperandError(AssemblerError):
    """
    Operand missing, surplus, or not in a parseable form.

    Examples:
        - ADD r1 r2        (CAB needs three registers)
        - IMM r1 five      (immediate is not a number)
        - ST rX r1         (register index is not a number)
    """
    pass


class RegisterRangeError(AssemblerError):
    """Register index above 15."""

    def __init__(
        self,
        token: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.token = token
        super().__init__(
            f"register index out of range: '{token}'",
            location=location,
            hint="registers are r0 to r15",
            source_line=source_line,
        )


class ImmediateRangeError(AssemblerError):
    """
    Immediate value above 255.

    Also raised when a tag resolves to a line index that does not fit
    in the 8-bit immediate slot. value is None when the literal has too
    many digits to convert.
    """

    def __init__(
        self,
        token: str,
        value: Optional[int],
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.token = token
        self.value = value
        message = f"immediate out of range: '{token}'"
        if value is not None:
            message = f"{message} ({value})"
        super().__init__(
            message,
            location=location,
            hint="immediates must be between 0 and 255",
            source_line=source_line,
        )


class UnknownInstructionError(AssemblerError):
    """
    The first token of a line is neither a pseudo-instruction nor an entry
    of the instruction table, so the line could not be encoded at all.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar = similar or []

        hint = None
        if self.similar:
            suggestions = ", ".join(f"'{s}'" for s in self.similar[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown instruction '{mnemonic}', could not encode line",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndefinedTagError(AssemblerError):
    """Reference to a tag that no line defines (strict tag mode only)."""

    def __init__(
        self,
        tag: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.tag = tag
        super().__init__(
            f"undefined tag '{tag}'",
            location=location,
            source_line=source_line,
        )


class DuplicateTagError(AssemblerError):
    """Tag defined on more than one line."""

    def __init__(
        self,
        tag: str,
        location: Optional[SourceLocation] = None,
        original_line: Optional[int] = None,
        source_line: Optional[str] = None,
    ):
        self.tag = tag
        self.original_line = original_line

        hint = None
        if original_line is not None:
            hint = f"'{tag}' was first defined on line {original_line}"

        super().__init__(
            f"duplicate tag '{tag}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ProgramTooLongError(AssemblerError):
    """The program has more instructions than the 8-bit PC can reach."""

    def __init__(
        self,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.limit = limit
        super().__init__(
            f"program is too long, maximum is {limit} instructions",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Emulator Exceptions
# =============================================================================

class EmulatorError(RailsError):
    """
    Base exception for errors raised while executing a program.

    Attributes:
        pc: Program counter at the time of the error (optional)
    """

    def __init__(self, message: str, pc: Optional[int] = None):
        self.message = message
        self.pc = pc
        if pc is not None:
            message = f"{message} (pc={pc})"
        super().__init__(message)


class DecodeError(EmulatorError):
    """Opcode outside 0-15, or a record too short for its shape."""
    pass


class ProgramCounterError(EmulatorError):
    """The program counter points outside the loaded program."""
    pass


class InputParseError(EmulatorError):
    """
    Interactive input for IN is not an unsigned integer in 0-255.

    There is no retry prompt; the run ends.
    """

    def __init__(self, text: str, pc: Optional[int] = None):
        self.text = text
        super().__init__(f"invalid input value '{text}', expected 0-255", pc=pc)


class InputUnavailableError(EmulatorError):
    """IN executed on a CPU that has no input handler."""

    def __init__(self, device: int, pc: Optional[int] = None):
        self.device = device
        super().__init__(f"no input handler for io register {device}", pc=pc)


class StepLimitError(EmulatorError):
    """Execution exceeded EmulatorConfig.max_steps."""

    def __init__(self, limit: int, pc: Optional[int] = None):
        self.limit = limit
        super().__init__(f"step limit of {limit} instructions exceeded", pc=pc)
