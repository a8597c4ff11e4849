"""
Rails Arithmetic Logic Unit
===========================

Four arithmetic operations and one logical operation on unsigned 8-bit
operands. The only state is the carry flag.

Arithmetic is done in a widened 16-bit unsigned domain: the carry flag is
set when the widened result exceeds 255 and the low 8 bits are returned.
For subtraction the widened result wraps modulo 65536, so any borrow leaves
a value above 255 and sets the carry flag. This is not the inverted borrow
polarity some CPUs use: carry set means "borrow occurred".

    >>> alu = ArithmeticLogicUnit()
    >>> alu.add(250, 10), alu.carry
    (4, True)
    >>> alu.sub(10, 5), alu.carry
    (5, False)
    >>> alu.sub(5, 10), alu.carry
    (251, True)
"""

WORD_MASK = 0xFFFF
BYTE_MASK = 0xFF


class ArithmeticLogicUnit:
    """
    Rails ALU.

    Attributes:
        carry: Carry flag, written by add/addc/sub/swb, read by addc/swb
    """

    def __init__(self, carry: bool = False):
        self.carry = carry

    def __repr__(self) -> str:
        return f"ArithmeticLogicUnit(carry={self.carry})"

    def _settle(self, result: int) -> int:
        """Wrap to 16 bits, update carry, return the low byte."""
        result &= WORD_MASK
        self.carry = result > BYTE_MASK
        return result & BYTE_MASK

    def add(self, a: int, b: int) -> int:
        """a + b."""
        return self._settle(a + b)

    def addc(self, a: int, b: int) -> int:
        """a + b + carry."""
        return self._settle(a + b + int(self.carry))

    def sub(self, a: int, b: int) -> int:
        """a - b, carry set on borrow."""
        return self._settle(a - b)

    def swb(self, a: int, b: int) -> int:
        """a - b - carry ("subtract with borrow")."""
        return self._settle(a - b - int(self.carry))

    def nand(self, a: int, b: int) -> int:
        """~(a & b), 8-bit. Carry is left untouched."""
        return ~(a & b) & BYTE_MASK
