"""
Nibble: a 4-bit element of GF(2^4).

A nibble is an immutable value in [0, 15]. Bits are numbered from the left
(bit 0 is worth 8), which is also the order used by from_bits() and bits.
Any integer input is masked to its low 4 bits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .gf16 import (
    gf16_add,
    gf16_div,
    gf16_inverse,
    gf16_mult,
    inv_sbox_derived,
    sbox_derived,
)


@dataclass(frozen=True)
class Nibble:
    """A four-bit unsigned number in GF(2^4) over x^4 + x + 1."""

    value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", int(self.value) & 0xF)

    # ------------------------------------------------------------------
    # Construction and access
    # ------------------------------------------------------------------

    @classmethod
    def from_bits(cls, bits: Iterable[int]) -> Nibble:
        """
        Build a nibble from up to 4 bits, most significant first.

        Missing bits are zero, extra bits are ignored, and any truthy entry
        counts as a one.
        """
        padded = (list(bits) + [0, 0, 0, 0])[:4]
        value = 0
        for bit in padded:
            value = (value << 1) | (1 if bit else 0)
        return cls(value)

    @property
    def bits(self) -> tuple[int, int, int, int]:
        """Bits from left to right (bits[0] is worth 8)."""
        return tuple((self.value >> (3 - i)) & 1 for i in range(4))

    @property
    def binary(self) -> str:
        """Binary representation, e.g. '0100'."""
        return f"{self.value:04b}"

    def __getitem__(self, index: int) -> int:
        return self.bits[index]

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return self.binary

    # ------------------------------------------------------------------
    # Field arithmetic
    # ------------------------------------------------------------------

    def add(self, other: Nibble) -> Nibble:
        """Field addition is XOR."""
        return Nibble(gf16_add(self.value, _value(other)))

    def sub(self, other: Nibble) -> Nibble:
        """Field subtraction is XOR."""
        return Nibble(gf16_add(self.value, _value(other)))

    def xor(self, other: Nibble) -> Nibble:
        return Nibble(self.value ^ _value(other))

    def multiply(self, other: Nibble) -> Nibble:
        """Multiply in polynomial form, reduced modulo x^4 + x + 1."""
        return Nibble(gf16_mult(self.value, _value(other)))

    def divide(self, other: Nibble) -> Nibble:
        """Multiply by the inverse of other (dividing by zero gives zero)."""
        return Nibble(gf16_div(self.value, _value(other)))

    def invert(self) -> Nibble:
        """Multiplicative inverse by Fermat's little theorem; zero maps to zero."""
        return Nibble(gf16_inverse(self.value))

    def substitute(self) -> Nibble:
        """S-box substitution: inverse, matrix multiply, XOR 1001."""
        return Nibble(sbox_derived(self.value))

    def unsubstitute(self) -> Nibble:
        """Inverse S-box substitution. Undoes substitute()."""
        return Nibble(inv_sbox_derived(self.value))

    # ------------------------------------------------------------------
    # Bitwise helpers
    # ------------------------------------------------------------------

    def and_(self, other: Nibble) -> Nibble:
        return Nibble(self.value & _value(other))

    def or_(self, other: Nibble) -> Nibble:
        return Nibble(self.value | _value(other))

    def not_(self) -> Nibble:
        return Nibble(~self.value)

    def shift_left(self, count: int) -> Nibble:
        """Shift left; bits shifted past bit 0 are lost. Negative counts shift by 0."""
        return Nibble(self.value << max(count, 0))

    def shift_right(self, count: int) -> Nibble:
        return Nibble(self.value >> max(count, 0))

    __add__ = add
    __sub__ = sub
    __xor__ = xor
    __mul__ = multiply
    __truediv__ = divide
    __and__ = and_
    __or__ = or_
    __invert__ = not_
    __lshift__ = shift_left
    __rshift__ = shift_right


FieldElement = Nibble

ZERO = Nibble(0)
ONE = Nibble(1)


def _value(other: Nibble | int) -> int:
    """Accept a Nibble or a plain int on the right-hand side."""
    if isinstance(other, Nibble):
        return other.value
    return int(other) & 0xF


def nibbles(values: Iterable[int]) -> list[Nibble]:
    """Convert a sequence of ints to nibbles."""
    return [v if isinstance(v, Nibble) else Nibble(v) for v in values]
