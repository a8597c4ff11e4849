"""
Unit Tests for the Rails ALU
============================

Carry semantics of the four arithmetic operations and NAND.
"""

import pytest

from rails_sdk.emulator import ArithmeticLogicUnit


@pytest.fixture
def alu():
    return ArithmeticLogicUnit()


class TestAdd:
    """Tests for ADD and ADDC."""

    def test_add_no_carry(self, alu):
        assert alu.add(1, 1) == 2
        assert alu.carry is False

    def test_add_overflow_sets_carry(self, alu):
        assert alu.add(250, 10) == 4
        assert alu.carry is True

    def test_add_exactly_255(self, alu):
        assert alu.add(200, 55) == 255
        assert alu.carry is False

    def test_add_clears_previous_carry(self, alu):
        alu.carry = True
        alu.add(1, 2)
        assert alu.carry is False

    def test_addc_uses_carry(self, alu):
        alu.carry = True
        assert alu.addc(1, 1) == 3
        assert alu.carry is False

    def test_addc_carry_into_overflow(self, alu):
        alu.carry = True
        assert alu.addc(255, 0) == 0
        assert alu.carry is True

    def test_multi_byte_addition(self, alu):
        """0x01FF + 0x0001 via add then addc."""
        low = alu.add(0xFF, 0x01)
        high = alu.addc(0x01, 0x00)
        assert (high, low) == (0x02, 0x00)


class TestSubtract:
    """Tests for SUB and SWB."""

    def test_sub_no_borrow(self, alu):
        assert alu.sub(10, 5) == 5
        assert alu.carry is False

    def test_sub_borrow_sets_carry(self, alu):
        assert alu.sub(5, 10) == 251
        assert alu.carry is True

    def test_sub_equal_operands(self, alu):
        assert alu.sub(7, 7) == 0
        assert alu.carry is False

    def test_swb_subtracts_carry(self, alu):
        alu.carry = True
        assert alu.swb(10, 5) == 4
        assert alu.carry is False

    def test_swb_borrow_from_carry_alone(self, alu):
        alu.carry = True
        assert alu.swb(5, 5) == 255
        assert alu.carry is True


class TestNand:
    """Tests for NAND."""

    def test_nand(self, alu):
        assert alu.nand(0b1100, 0b1010) == 0b11110111

    def test_nand_all_ones(self, alu):
        assert alu.nand(0xFF, 0xFF) == 0

    @pytest.mark.parametrize("carry", [False, True])
    def test_nand_leaves_carry(self, alu, carry):
        alu.carry = carry
        alu.nand(0, 0)
        assert alu.carry is carry
