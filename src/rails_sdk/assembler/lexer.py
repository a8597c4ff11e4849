"""
Rails Assembly Language Lexer
=============================

This module splits Rails assembly source into lines and whitespace-separated
tokens. The language has no expressions, so there is no operator grammar:
each line is a flat sequence of tokens.

Line Structure
--------------
    [tag:] [MNEMONIC [operand ...]] [# comment]

- Tokens are separated by spaces or tabs; a carriage return before the
  newline is treated as whitespace.
- If the FIRST token of a line contains ':' it is a tag definition. It is
  removed from the line and whatever follows is the instruction body
  (possibly empty, a bare tag).
- A line whose body starts with '#' or '//' is a comment line.
- A token starting with '#' after the mnemonic starts an inline comment.

Every raw line gets a SourceLine, blank and comment lines included, so that
line indices match the file the user is editing.

Example
-------
>>> from rails_sdk.assembler.lexer import Lexer
>>> lines = Lexer("loop: ADD r1 r1 r2   # step\\n", "example.rails").lines()
>>> lines[0].label.text
'loop:'
>>> [t.text for t in lines[0].tokens]
['ADD', 'r1', 'r1', 'r2']
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from rails_sdk.cpu import COMMENT_MARKERS, TAG_MARKER
from rails_sdk.errors import SourceLocation


# =============================================================================
# Token and Line Data Classes
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single whitespace-delimited token.

    Attributes:
        text: The token text, verbatim
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    text: str
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        return f"Token({self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_tag(self) -> bool:
        """True if the token defines or references a tag."""
        return TAG_MARKER in self.text


@dataclass
class SourceLine:
    """
    One raw line of source.

    Attributes:
        index: 0-based position among all raw lines
        text: Line text without the trailing newline
        label: Tag definition token, if the line starts with one
        tokens: Instruction body with tag and inline comment removed
    """
    index: int
    text: str
    filename: str = "<input>"
    label: Optional[Token] = None
    tokens: list[Token] = field(default_factory=list)

    @property
    def number(self) -> int:
        """1-based line number, as shown to users."""
        return self.index + 1

    @property
    def is_empty(self) -> bool:
        """True for blank lines and bare tags."""
        return not self.tokens

    @property
    def is_comment(self) -> bool:
        """True if the body starts with a comment marker."""
        return bool(self.tokens) and self.tokens[0].text.startswith(COMMENT_MARKERS)

    @property
    def emits_instruction(self) -> bool:
        """True if this line produces an instruction record."""
        return not self.is_empty and not self.is_comment

    @property
    def mnemonic(self) -> Optional[Token]:
        return self.tokens[0] if self.tokens else None

    @property
    def operands(self) -> list[Token]:
        return self.tokens[1:]

    @property
    def location(self) -> SourceLocation:
        """Location of the instruction body, or of the line start."""
        if self.tokens:
            return self.tokens[0].location
        return SourceLocation(self.filename, self.number, 0)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Splits Rails assembly source into SourceLine objects.

    Usage:
        lexer = Lexer(source_text, filename)
        for line in lexer.lines():
            ...

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    WHITESPACE = frozenset(" \t\r")

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

    def lines(self) -> list[SourceLine]:
        """
        Split the source into lines, detect tags and strip inline comments.

        A final newline does not create an extra empty line.
        """
        raw_lines = self.source.split("\n")
        if raw_lines and raw_lines[-1] == "" and len(raw_lines) > 1:
            raw_lines.pop()
        return [self._scan_line(index, text) for index, text in enumerate(raw_lines)]

    def _scan_line(self, index: int, text: str) -> SourceLine:
        tokens = list(self._split(text, index + 1))
        line = SourceLine(index=index, text=text.rstrip("\r"), filename=self.filename)

        if tokens and tokens[0].is_tag:
            line.label = tokens.pop(0)

        # Inline comment: only after the mnemonic, a leading '#' is a
        # comment line and is kept so is_comment can see it
        for position, token in enumerate(tokens[1:], start=1):
            if token.text.startswith(COMMENT_MARKERS):
                tokens = tokens[:position]
                break

        line.tokens = tokens
        return line

    def _split(self, text: str, line_number: int) -> Iterator[Token]:
        """Yield the tokens of one line with their 1-based columns."""
        start = None
        for position, char in enumerate(text):
            if char in self.WHITESPACE:
                if start is not None:
                    yield Token(text[start:position], line_number, start + 1, self.filename)
                    start = None
            elif start is None:
                start = position
        if start is not None:
            yield Token(text[start:], line_number, start + 1, self.filename)


def split_lines(source: str, filename: str = "<input>") -> list[SourceLine]:
    """Convenience wrapper around Lexer(source, filename).lines()."""
    return Lexer(source, filename).lines()
