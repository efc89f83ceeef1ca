"""x87 FPU register stack, status and tag words, and 80-bit conversions."""

from __future__ import annotations

import enum
import math
import struct
import sys
from dataclasses import dataclass, field

__all__ = [
    "ControlWord",
    "Float80",
    "StatusFlag",
    "TagState",
    "X87State",
    "float64_to_float80",
    "float80_to_float32",
    "float80_to_float64",
]

_MASK16 = 0xFFFF
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_INTEGER_BIT = 1 << 63
_FRACTION52 = (1 << 52) - 1
_REGISTER_COUNT = 8

_DOUBLE = struct.Struct("<d")
_UINT64 = struct.Struct("<Q")
_SINGLE = struct.Struct("<f")
_UINT32 = struct.Struct("<I")


class StatusFlag(enum.IntFlag):
    """Bits of the x87 status word."""

    INVALID_OPERATION = 0x0001
    DENORMALIZED_OPERAND = 0x0002
    ZERO_DIVIDE = 0x0004
    OVERFLOW = 0x0008
    UNDERFLOW = 0x0010
    PRECISION = 0x0020
    STACK_FAULT = 0x0040
    ERROR_SUMMARY = 0x0080
    CONDITION_CODE0 = 0x0100
    CONDITION_CODE1 = 0x0200
    CONDITION_CODE2 = 0x0400
    CONDITION_CODE3 = 0x4000
    TOP_OF_STACK = 0x3800
    BUSY = 0x8000


class TagState(enum.IntEnum):
    """Two-bit tag of one physical register."""

    VALID = 0
    ZERO = 1
    SPECIAL = 2
    EMPTY = 3


class ControlWord(enum.IntFlag):
    """Fields of the x87 control word."""

    INVALID_OP_MASK = 0x0001
    DENORMAL_MASK = 0x0002
    ZERO_DIVIDE_MASK = 0x0004
    OVERFLOW_MASK = 0x0008
    UNDERFLOW_MASK = 0x0010
    PRECISION_MASK = 0x0020
    PRECISION_CONTROL = 0x0300
    PRECISION_24BIT = 0x0000
    PRECISION_53BIT = 0x0200
    PRECISION_64BIT = 0x0300
    ROUNDING_CONTROL_MASK = 0x0C00
    ROUND_TO_NEAREST = 0x0000
    ROUND_DOWN = 0x0400
    ROUND_UP = 0x0800
    ROUND_TO_ZERO = 0x0C00
    INFINITY_CONTROL = 0x1000


@dataclass(frozen=True)
class Float80:
    """An 80-bit extended value: 64-bit mantissa with explicit integer bit,
    and a 16-bit word holding the sign and the 15-bit biased exponent."""

    mantissa: int
    exponent: int

    def __post_init__(self) -> None:
        if not 0 <= self.mantissa <= _MASK64:
            raise ValueError(f"mantissa out of range: {self.mantissa!r}")
        if not 0 <= self.exponent <= _MASK16:
            raise ValueError(f"exponent out of range: {self.exponent!r}")


def _double(bits: int) -> float:
    return _DOUBLE.unpack(_UINT64.pack(bits & _MASK64))[0]


def _double_bits(value: float) -> int:
    return _UINT64.unpack(_DOUBLE.pack(value))[0]


def _single(bits: int) -> float:
    return _SINGLE.unpack(_UINT32.pack(bits & _MASK32))[0]


def _to_float32(value: float) -> float:
    """Round a double to single precision, overflowing to infinity."""
    try:
        return _SINGLE.unpack(_SINGLE.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def float80_to_float64(value: Float80) -> tuple[float, StatusFlag]:
    """Round an 80-bit value to a double, nearest-even.

    Returns the double and the exception flags raised.
    """
    flags = StatusFlag(0)
    mantissa = value.mantissa
    biased = value.exponent & 0x7FFF
    sign = _INTEGER_BIT if value.exponent & 0x8000 else 0

    if mantissa == 0:
        return (-0.0 if sign else 0.0), flags

    if biased == 0x7FFF:
        if mantissa != _INTEGER_BIT:
            return _double(sign | 0x7FF8000000000000), flags | StatusFlag.INVALID_OPERATION
        return _double(sign | 0x7FF0000000000000), flags

    exp = biased - 16383 + 1023
    if exp <= 0:
        flags |= StatusFlag.UNDERFLOW
        if exp < -52:
            return (-0.0 if sign else 0.0), flags
        mantissa >>= 1 - exp
        exp = 0

    if exp >= 2047:
        return _double(sign | 0x7FF0000000000000), flags | StatusFlag.OVERFLOW

    significant = (mantissa >> 11) & _FRACTION52
    round_bit = (mantissa >> 10) & 1
    sticky = (mantissa & 0x3FF) != 0
    if round_bit or sticky:
        flags |= StatusFlag.PRECISION

    if round_bit and (sticky or significant & 1):
        significant += 1
        if significant == 1 << 52:
            significant = 0
            exp += 1
            if exp >= 2047:
                return _double(sign | 0x7FF0000000000000), flags | StatusFlag.OVERFLOW

    return _double(sign | (exp << 52) | significant), flags


def float80_to_float32(value: Float80) -> tuple[float, StatusFlag]:
    """Round an 80-bit value to single precision, nearest-even.

    Returns the single-precision value (as a float) and the flags raised.
    """
    flags = StatusFlag(0)
    mantissa = value.mantissa
    biased = value.exponent & 0x7FFF
    sign = 0x80000000 if value.exponent & 0x8000 else 0

    if biased == 0 and mantissa == 0:
        return _single(sign), flags

    if biased == 0x7FFF:
        if mantissa & 0x7FFFFFFFFFFFFFFF:
            return _single(sign | 0x7FC00000), flags | StatusFlag.INVALID_OPERATION
        return _single(sign | 0x7F800000), flags

    exp = biased - 16383 + 127
    frac = mantissa & 0x7FFFFFFFFFFFFFFF
    significant = (frac >> 40) & _MASK32
    round_bit = (frac >> 39) & 1
    sticky = frac & 0x7FFFFFFFFF

    if exp <= 0:
        flags |= StatusFlag.UNDERFLOW | StatusFlag.PRECISION
        if exp >= -23:
            shift = 1 - exp
            significant = ((frac | _INTEGER_BIT) >> (40 + shift)) & _MASK32
            round_bit = (frac >> (39 + shift)) & 1
            sticky = frac & ((1 << (39 + shift)) - 1)
            exp = 0

    if round_bit or sticky:
        flags |= StatusFlag.PRECISION

    if round_bit and (sticky or significant & 1):
        significant = (significant + 1) & _MASK32
        if significant == 0x800000:
            significant = 0
            exp += 1
            if exp >= 255:
                return _single(sign | 0x7F800000), flags | StatusFlag.OVERFLOW

    if exp >= 255:
        return _single(sign | 0x7F800000), flags | StatusFlag.OVERFLOW
    bits = sign | (((exp & _MASK32) << 23) & _MASK32) | (significant & 0x7FFFFF)
    return _single(bits), flags


def float64_to_float80(value: float) -> tuple[Float80, StatusFlag]:
    """Widen a double to the 80-bit format.

    Returns the extended value and the flags raised.
    """
    flags = StatusFlag(0)
    bits = _double_bits(float(value))
    sign = (bits >> 63) & 1
    exp = (bits >> 52) & 0x7FF
    mantissa = bits & _FRACTION52

    if exp == 0 and mantissa == 0:
        return Float80(mantissa=0, exponent=sign << 15), flags

    if exp == 0x7FF:
        exponent = (sign << 15) | 0x7FFF
        if mantissa == 0:
            return Float80(mantissa=_INTEGER_BIT, exponent=exponent), flags
        extended = (0xC000000000000000 | (mantissa << 11)) & _MASK64
        return Float80(mantissa=extended, exponent=exponent), flags | StatusFlag.INVALID_OPERATION

    if exp == 0:
        flags |= StatusFlag.DENORMALIZED_OPERAND
        leading_zeros = 64 - mantissa.bit_length()
        shift = leading_zeros - 11
        mantissa = (mantissa << (shift + 1)) & _MASK64
        exp = 1 - shift

    x87_exp = (exp - 1023 + 16383) & _MASK16
    exponent = ((sign << 15) | x87_exp) & _MASK16
    extended = ((mantissa << 11) | _INTEGER_BIT) & _MASK64
    return Float80(mantissa=extended, exponent=exponent), flags


def _classify(value: float) -> TagState:
    if value == 0.0:
        return TagState.ZERO
    if math.isnan(value) or math.isinf(value) or abs(value) < sys.float_info.min:
        return TagState.SPECIAL
    return TagState.VALID


@dataclass
class X87State:
    """The x87 register stack with its control, status and tag words.

    Registers hold doubles; ``tag_word`` holds 16 unsigned bits, two per
    physical register.
    """

    control_word: int = 0x037F
    status_word: int = 0x0000
    tag_word: int = 0xFFFF
    registers: list[float] = field(default_factory=lambda: [0.0] * _REGISTER_COUNT)

    def __post_init__(self) -> None:
        if len(self.registers) != _REGISTER_COUNT:
            raise ValueError(f"expected {_REGISTER_COUNT} registers, got {len(self.registers)}")

    def top_index(self) -> int:
        """Physical index of the top of the stack."""
        return (self.status_word >> 11) & 7

    def st_index(self, offset: int) -> int:
        """Physical index of ST(offset)."""
        return (offset + self.top_index()) & 7

    def _tag_at(self, index: int) -> TagState:
        return TagState((self.tag_word >> (index * 2)) & 3)

    def _set_tag(self, index: int, tag: TagState) -> None:
        cleared = self.tag_word & ~(3 << (index * 2))
        self.tag_word = (cleared | (int(tag) << (index * 2))) & _MASK16

    def get_st(self, offset: int) -> float:
        """Read ST(offset); an empty register flags a stack fault and gives NaN."""
        index = self.st_index(offset)
        if self._tag_at(index) is TagState.EMPTY:
            self.status_word |= StatusFlag.STACK_FAULT | StatusFlag.INVALID_OPERATION
            return math.nan
        return self.registers[index]

    def _const_status(self) -> int:
        return self.status_word & ~StatusFlag.CONDITION_CODE1 & _MASK16

    def get_st_const(self, offset: int) -> tuple[float, int]:
        """Read ST(offset) without side effects.

        Returns the value and the status word that reading it produces
        (condition code 1 cleared, stack fault flagged when empty).
        """
        index = self.st_index(offset)
        status = self._const_status()
        if self._tag_at(index) is TagState.EMPTY:
            return math.nan, status | StatusFlag.STACK_FAULT | StatusFlag.INVALID_OPERATION
        return self.registers[index], status

    def get_st_const32(self, offset: int) -> tuple[float, int]:
        """As :meth:`get_st_const`, rounding the value to single precision."""
        index = self.st_index(offset)
        status = self._const_status()
        if self._tag_at(index) is TagState.EMPTY:
            return math.nan, status | StatusFlag.STACK_FAULT | StatusFlag.INVALID_OPERATION
        return _to_float32(self.registers[index]), status

    def get_st_tag(self, offset: int) -> TagState:
        """Tag of ST(offset)."""
        return self._tag_at(self.st_index(offset))

    def push(self) -> None:
        """Move the top down one slot and mark the new top valid."""
        new_top = (self.top_index() - 1) & 7
        self.status_word = (self.status_word & ~StatusFlag.TOP_OF_STACK & _MASK16) | (new_top << 11)
        self._set_tag(new_top, TagState.VALID)

    def pop(self) -> None:
        """Empty and clear the top register and move the top up one slot."""
        top = self.top_index()
        self._set_tag(top, TagState.EMPTY)
        self.registers[top] = 0.0
        self.status_word = (self.status_word & ~StatusFlag.TOP_OF_STACK & _MASK16) | (((top + 1) & 7) << 11)

    def set_st(self, offset: int, value: float) -> None:
        """Store into ST(offset) and tag it by its class."""
        value = float(value)
        index = self.st_index(offset)
        self.registers[index] = value
        self._set_tag(index, _classify(value))

    def set_st_fast(self, offset: int, value: float) -> None:
        """Store into ST(offset) and tag it valid without classifying."""
        index = self.st_index(offset)
        self.registers[index] = float(value)
        self._set_tag(index, TagState.VALID)

    def get_st_fast(self, offset: int) -> float:
        """Read ST(offset) without checking its tag."""
        return self.registers[self.st_index(offset)]

    def swap_registers(self, offset1: int, offset2: int) -> None:
        """Exchange ST(offset1) and ST(offset2) together with their tags."""
        i = self.st_index(offset1)
        j = self.st_index(offset2)
        self.registers[i], self.registers[j] = self.registers[j], self.registers[i]
        tag_i = self._tag_at(i)
        tag_j = self._tag_at(j)
        self._set_tag(i, tag_j)
        self._set_tag(j, tag_i)

    def describe(self) -> str:
        """Text summary of the control, status and tag words and the top."""
        tag = self.tag_word - 0x10000 if self.tag_word & 0x8000 else self.tag_word
        lines = [
            "FPU state:",
            f"Control word: {self.control_word}",
            f"Status word: {self.status_word}",
            f"Tag word: {tag}",
            f"Top index: {self.top_index()}",
            "",
            "",
        ]
        return "\n".join(lines)