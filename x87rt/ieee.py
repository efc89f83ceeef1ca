"""Bit-level access to IEEE 754 doubles and exponent helpers."""

from __future__ import annotations

import struct

__all__ = [
    "FP_ILOGB0",
    "FP_ILOGBNAN",
    "INT_MAX",
    "copysign",
    "extract_words",
    "get_high_word",
    "get_low_word",
    "ilogb",
    "insert_words",
    "scalbn",
    "set_high_word",
    "set_low_word",
]

INT_MAX = 0x7FFFFFFF
FP_ILOGB0 = -INT_MAX
FP_ILOGBNAN = INT_MAX

_DOUBLE = struct.Struct("<d")
_UINT64 = struct.Struct("<Q")
_MASK32 = 0xFFFFFFFF

_TWO54 = 1.80143985094819840000e16  # 0x43500000, 0x00000000
_TWOM54 = 5.55111512312578270212e-17  # 0x3C900000, 0x00000000
_HUGE = 1.0e300
_TINY = 1.0e-300


def _to_bits(x: float) -> int:
    return _UINT64.unpack(_DOUBLE.pack(x))[0]


def _from_bits(bits: int) -> float:
    return _DOUBLE.unpack(_UINT64.pack(bits & 0xFFFFFFFFFFFFFFFF))[0]


def _signed32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def extract_words(x: float) -> tuple[int, int]:
    """Return the (signed high, unsigned low) 32-bit words of a double."""
    bits = _to_bits(x)
    return _signed32(bits >> 32), bits & _MASK32


def get_high_word(x: float) -> int:
    """Return the more significant 32 bits of ``x`` as a signed integer."""
    return _signed32(_to_bits(x) >> 32)


def get_low_word(x: float) -> int:
    """Return the less significant 32 bits of ``x`` as an unsigned integer."""
    return _to_bits(x) & _MASK32


def insert_words(high: int, low: int) -> float:
    """Build a double from its high and low 32-bit words."""
    return _from_bits(((high & _MASK32) << 32) | (low & _MASK32))


def set_high_word(x: float, high: int) -> float:
    """Return ``x`` with its more significant 32 bits replaced."""
    return _from_bits(((high & _MASK32) << 32) | (_to_bits(x) & _MASK32))


def set_low_word(x: float, low: int) -> float:
    """Return ``x`` with its less significant 32 bits replaced."""
    return _from_bits((_to_bits(x) & ~_MASK32) | (low & _MASK32))


def copysign(x: float, y: float) -> float:
    """Return the magnitude of ``x`` with the sign bit of ``y``."""
    hx = get_high_word(x)
    hy = get_high_word(y)
    return set_high_word(x, (hx & 0x7FFFFFFF) | (hy & 0x80000000))


def scalbn(x: float, n: int) -> float:
    """Return ``x * 2**n`` computed by exponent manipulation."""
    hx, lx = extract_words(x)
    k = (hx & 0x7FF00000) >> 20
    if k == 0:
        if (lx | (hx & 0x7FFFFFFF)) == 0:
            return x
        x *= _TWO54
        hx = get_high_word(x)
        k = ((hx & 0x7FF00000) >> 20) - 54
        if n < -50000:
            return _TINY * x
    if k == 0x7FF:
        return x + x
    k += n
    if k > 0x7FE:
        return _HUGE * copysign(_HUGE, x)
    if k > 0:
        return set_high_word(x, (hx & 0x800FFFFF) | (k << 20))
    if k <= -54:
        if n > 50000:
            return _HUGE * copysign(_HUGE, x)
        return _TINY * copysign(_TINY, x)
    k += 54
    x = set_high_word(x, (hx & 0x800FFFFF) | (k << 20))
    return x * _TWOM54


def ilogb(x: float) -> int:
    """Return the unbiased binary exponent of ``x``.

    Zero gives ``FP_ILOGB0``, NaN gives ``FP_ILOGBNAN`` and infinity
    gives ``INT_MAX``.
    """
    hx, lx = extract_words(x)
    hx &= 0x7FFFFFFF
    if hx < 0x00100000:
        if (hx | lx) == 0:
            return FP_ILOGB0
        mantissa = (hx << 32) | lx
        return -1075 + mantissa.bit_length()
    if hx < 0x7FF00000:
        return (hx >> 20) - 1023
    if hx > 0x7FF00000 or lx != 0:
        return FP_ILOGBNAN
    return INT_MAX