"""
Rails SDK Disassembler Module
=============================

Turns machine programs back into Rails assembly, for listings and for
checking that a program survives an encode/decode round trip.

Usage:
    from rails_sdk.disassembler import RailsDisassembler

    disasm = RailsDisassembler()
    print(disasm.disassemble_to_text(program))
"""

from rails_sdk.disassembler.rails import DisassembledInstruction, RailsDisassembler

__all__ = [
    "RailsDisassembler",
    "DisassembledInstruction",
]
