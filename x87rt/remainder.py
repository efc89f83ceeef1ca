"""Exact floating-point remainders: ``fmod`` and ``remquo``."""

from __future__ import annotations

import math

__all__ = ["fmod", "remquo"]

_QUOTIENT_MASK = 0x7FFFFFFF


def _decompose(x: float) -> tuple[int, int]:
    """Return ``(m, e)`` with ``|x| == m * 2**e`` exactly, ``m < 2**53``."""
    fraction, exponent = math.frexp(abs(x))
    return int(fraction * (1 << 53)), exponent - 53


def _aligned(x: float, y: float) -> tuple[int, int, int]:
    """Return integers ``a``, ``b`` and ``e`` with ``|x| = a*2**e``, ``|y| = b*2**e``."""
    mx, ex = _decompose(x)
    my, ey = _decompose(y)
    e = min(ex, ey)
    return mx << (ex - e), my << (ey - e), e


def _invalid(x: float, y: float) -> bool:
    return y == 0.0 or not math.isfinite(x) or math.isnan(y)


def fmod(x: float, y: float) -> float:
    """Return ``x - n*y`` for the integer ``n`` that truncates ``x/y``.

    The result is exact and carries the sign of ``x``.  A zero divisor,
    an infinite dividend or a NaN operand gives NaN.
    """
    x = float(x)
    y = float(y)
    if _invalid(x, y):
        return math.nan
    if math.isinf(y):
        return x
    a, b, e = _aligned(x, y)
    return math.copysign(math.ldexp(a % b, e), x)


def remquo(x: float, y: float) -> tuple[float, int]:
    """Return the IEEE remainder of ``x/y`` and the low bits of the quotient.

    The quotient is rounded to nearest, ties to even; its low 31 bits
    are returned with the sign of ``x/y``.  Invalid operands (as for
    :func:`fmod`) give ``(nan, 0)``.
    """
    x = float(x)
    y = float(y)
    if _invalid(x, y):
        return math.nan, 0
    x_negative = math.copysign(1.0, x) < 0
    quotient_negative = x_negative != (math.copysign(1.0, y) < 0)
    if math.isinf(y):
        return x, 0

    a, b, e = _aligned(x, y)
    q, r = divmod(a, b)
    if 2 * r > b or (2 * r == b and q & 1):
        q += 1
        r -= b
    result = math.ldexp(r, e)
    if x_negative:
        result = -result
    q &= _QUOTIENT_MASK
    return result, -q if quotient_negative else q