"""
Unit Tests for the Rails Disassembler
=====================================

Covers operand formatting per shape, pseudo-instruction annotations,
undecodable records, listing output and assembler round trips.
"""

import pytest

from rails_sdk.assembler import assemble
from rails_sdk.disassembler import DisassembledInstruction, RailsDisassembler


class TestDisassembleOne:
    """Tests for single-record disassembly."""

    def setup_method(self):
        """Create disassembler instance for each test."""
        self.disasm = RailsDisassembler()

    def test_cab(self):
        instr = self.disasm.disassemble_one((0, 1, 2, 3))
        assert instr.mnemonic == "ADD"
        assert instr.operands == ("r3", "r1", "r2")
        assert instr.to_source() == "ADD r3 r1 r2"

    def test_ca(self):
        instr = self.disasm.disassemble_one((5, 7, 2))
        assert instr.to_source() == "RSFT r2 r7"

    def test_ab(self):
        instr = self.disasm.disassemble_one((15, 4, 5))
        assert instr.to_source() == "OUT r4 r5"

    def test_c_imm(self):
        instr = self.disasm.disassemble_one((6, 42, 1))
        assert instr.operand_str == "r1 42"

    def test_imm_c(self):
        instr = self.disasm.disassemble_one((10, 200, 3))
        assert instr.to_source() == "STIM 200 r3"

    def test_index_is_kept(self):
        assert self.disasm.disassemble_one((6, 1, 1), index=12).index == 12


class TestPseudoAnnotations:
    """Tests for comments on records that came from pseudo-instructions."""

    def setup_method(self):
        self.disasm = RailsDisassembler()

    def test_exit(self):
        instr = self.disasm.disassemble_one((13, 0, 0, 0))
        assert instr.mnemonic == "JMPL"
        assert instr.comment == "EXIT"

    def test_nop(self):
        assert self.disasm.disassemble_one((0, 0, 0, 0)).comment == "NOP"

    def test_mov(self):
        assert self.disasm.disassemble_one((0, 4, 0, 9)).comment == "MOV r9 r4"

    def test_mov_comment_matches_source(self):
        record = assemble("MOV r2 r1")[0]
        assert self.disasm.disassemble_one(record).comment == "MOV r2 r1"

    def test_jmp(self):
        assert self.disasm.disassemble_one((11, 6, 15)).comment == "JMP 6"

    def test_plain_instruction_has_no_comment(self):
        assert self.disasm.disassemble_one((0, 1, 2, 3)).comment == ""


class TestInvalidRecords:
    """Tests for records that do not decode."""

    def setup_method(self):
        self.disasm = RailsDisassembler()

    def test_unknown_opcode(self):
        instr = self.disasm.disassemble_one((16, 1, 2))
        assert instr.mnemonic == ".DATA"
        assert not instr.is_valid
        assert instr.operands == ("16", "1", "2")

    def test_short_record(self):
        instr = self.disasm.disassemble_one((0, 1))
        assert not instr.is_valid
        assert "needs 4 slots" in instr.comment


class TestListing:
    """Tests for multi-record output."""

    def test_listing_lines(self):
        program = [(6, 5, 0), (13, 0, 0, 0)]
        lines = RailsDisassembler().disassemble_to_text(program).splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("  0:")
        assert "IMM r0 5" in lines[0]
        assert lines[1].endswith("# EXIT")

    def test_str_without_comment(self):
        instr = DisassembledInstruction(index=3, record=(6, 1, 2), mnemonic="IMM",
                                        operands=("r2", "1"))
        assert str(instr) == "  3:   6   1   2      IMM r2 1"

    def test_to_dict(self):
        instr = RailsDisassembler().disassemble_one((9, 1, 2), index=4)
        assert instr.to_dict() == {
            "index": 4,
            "record": [9, 1, 2],
            "mnemonic": "ST",
            "operands": ["r1", "r2"],
            "comment": "",
        }


class TestRoundTrip:
    """Disassembled source assembles back to the same program."""

    SOURCES = [
        "IMM r0 5\nIMM r1 3\nADD r2 r0 r1\nJMPL r0 r0\n",
        "ADDC r1 r2 r3\nSUB r4 r5 r6\nSWB r7 r8 r9\nNAND r10 r11 r12\n",
        "RSFT r1 r2\nLD r3 r4\nLDIM r5 6\nST r7 r8\nSTIM 9 r10\n",
        "BEQ 3 r1\nBGT 0 r2\nJMPL r14 r2\nIN r1 r13\nOUT r15 r0\n",
    ]

    @pytest.mark.parametrize("source", SOURCES)
    def test_round_trip(self, source):
        program = assemble(source)
        regenerated = RailsDisassembler().disassemble_to_source(program)
        assert assemble(regenerated) == program

    def test_pseudo_ops_round_trip_as_records(self):
        """NOP, MOV and JMP expand to real instructions with the same records."""
        program = assemble("NOP\nMOV r1 r2\nJMP 0\n")
        regenerated = RailsDisassembler().disassemble_to_source(program)
        assert assemble(regenerated) == program
