"""
Rails Assembler
===============

Two-pass assembler for the Rails instruction set.

Main Components
---------------
- **Assembler**: Main assembler class (tag discovery + emission)
- **Lexer**: Splits source into lines and tokens, detects tags

Example Usage
-------------
>>> from rails_sdk.assembler import assemble
>>> assemble("IMM r1 42\\nEXIT")
[(6, 42, 1), (13, 0, 0, 0)]

Source Syntax
-------------
- One instruction per line: MNEMONIC operand operand ...
- Registers: r0 .. r15
- Immediates: decimal 0..255, or a tag reference such as loop:
- Tags: a first token containing ':' (e.g. "loop:") names the line
- Comments: lines starting with '#' or '//'; '#' after the mnemonic
- Pseudo-instructions: NOP, MOV rD rS, JMP target, EXIT
"""

from rails_sdk.assembler.assembler import Assembler, assemble, assemble_file
from rails_sdk.assembler.lexer import Lexer, SourceLine, Token, split_lines

__all__ = [
    "Assembler",
    "assemble",
    "assemble_file",
    "Lexer",
    "SourceLine",
    "Token",
    "split_lines",
]
