"""Sine, cosine, tangent and arctangents of doubles."""

from __future__ import annotations

from .ieee import extract_words, get_high_word, get_low_word
from .kernels import kernel_cos, kernel_sin, kernel_tan
from .rem_pio2 import rem_pio2

__all__ = ["atan", "atan2", "cos", "sin", "tan"]

_ATANHI = (
    4.63647609000806093515e-01,  # atan(0.5) hi
    7.85398163397448278999e-01,  # atan(1.0) hi
    9.82793723247329054082e-01,  # atan(1.5) hi
    1.57079632679489655800e00,  # atan(inf) hi
)

_ATANLO = (
    2.26987774529616870924e-17,  # atan(0.5) lo
    3.06161699786838301793e-17,  # atan(1.0) lo
    1.39033110312309984516e-17,  # atan(1.5) lo
    6.12323399573676603587e-17,  # atan(inf) lo
)

_AT = (
    3.33333333333329318027e-01,
    -1.99999999998764832476e-01,
    1.42857142725034663711e-01,
    -1.11111104054623557880e-01,
    9.09088713343650656196e-02,
    -7.69187620504482999495e-02,
    6.66107313738753120669e-02,
    -5.83357013379057348645e-02,
    4.97687799461593236017e-02,
    -3.65315727442169155270e-02,
    1.62858201153657823623e-02,
)

_ONE = 1.0
_HUGE = 1.0e300

_TINY = 1.0e-300
_PI_O_4 = 7.8539816339744827900e-01
_PI_O_2 = 1.5707963267948965580e00
_PI = 3.1415926535897931160e00
_PI_LO = 1.2246467991473531772e-16


def sin(x: float) -> float:
    """Return the sine of ``x``."""
    x = float(x)
    ix = get_high_word(x) & 0x7FFFFFFF
    if ix <= 0x3FE921FB:  # |x| ~<= pi/4
        if ix < 0x3E500000 and int(x) == 0:  # |x| < 2**-26
            return x
        return kernel_sin(x, 0.0, 0)
    if ix >= 0x7FF00000:
        return x - x
    n, y0, y1 = rem_pio2(x)
    quadrant = n & 3
    if quadrant == 0:
        return kernel_sin(y0, y1, 1)
    if quadrant == 1:
        return kernel_cos(y0, y1)
    if quadrant == 2:
        return -kernel_sin(y0, y1, 1)
    return -kernel_cos(y0, y1)


def cos(x: float) -> float:
    """Return the cosine of ``x``."""
    x = float(x)
    ix = get_high_word(x) & 0x7FFFFFFF
    if ix <= 0x3FE921FB:
        if ix < 0x3E46A09E and int(x) == 0:  # |x| < 2**-27 * sqrt(2)
            return 1.0
        return kernel_cos(x, 0.0)
    if ix >= 0x7FF00000:
        return x - x
    n, y0, y1 = rem_pio2(x)
    quadrant = n & 3
    if quadrant == 0:
        return kernel_cos(y0, y1)
    if quadrant == 1:
        return -kernel_sin(y0, y1, 1)
    if quadrant == 2:
        return -kernel_cos(y0, y1)
    return kernel_sin(y0, y1, 1)


def tan(x: float) -> float:
    """Return the tangent of ``x``."""
    x = float(x)
    ix = get_high_word(x) & 0x7FFFFFFF
    if ix <= 0x3FE921FB:
        if ix < 0x3E400000 and int(x) == 0:  # |x| < 2**-27
            return x
        return kernel_tan(x, 0.0, 1)
    if ix >= 0x7FF00000:
        return x - x
    n, y0, y1 = rem_pio2(x)
    return kernel_tan(y0, y1, 1 - ((n & 1) << 1))


def atan(x: float) -> float:
    """Return the arctangent of ``x`` in [-pi/2, pi/2]."""
    x = float(x)
    hx = get_high_word(x)
    ix = hx & 0x7FFFFFFF
    if ix >= 0x44100000:  # |x| >= 2**66
        low = get_low_word(x)
        if ix > 0x7FF00000 or (ix == 0x7FF00000 and low != 0):
            return x + x
        if hx > 0:
            return _ATANHI[3] + _ATANLO[3]
        return -_ATANHI[3] - _ATANLO[3]
    if ix < 0x3FDC0000:  # |x| < 0.4375
        if ix < 0x3E400000 and _HUGE + x > _ONE:  # |x| < 2**-27
            return x
        index = -1
    else:
        x = abs(x)
        if ix < 0x3FF30000:  # |x| < 1.1875
            if ix < 0x3FE60000:  # 7/16 <= |x| < 11/16
                index = 0
                x = (2.0 * x - _ONE) / (2.0 + x)
            else:  # 11/16 <= |x| < 19/16
                index = 1
                x = (x - _ONE) / (x + _ONE)
        elif ix < 0x40038000:  # |x| < 2.4375
            index = 2
            x = (x - 1.5) / (_ONE + 1.5 * x)
        else:  # 2.4375 <= |x| < 2**66
            index = 3
            x = -1.0 / x
    z = x * x
    w = z * z
    at = _AT
    s1 = z * (at[0] + w * (at[2] + w * (at[4] + w * (at[6] + w * (at[8] + w * at[10])))))
    s2 = w * (at[1] + w * (at[3] + w * (at[5] + w * (at[7] + w * at[9]))))
    if index < 0:
        return x - x * (s1 + s2)
    z = _ATANHI[index] - ((x * (s1 + s2) - _ATANLO[index]) - x)
    return -z if hx < 0 else z


def _is_nan_words(high: int, low: int) -> bool:
    magnitude = high & 0x7FFFFFFF
    low_flag = (low | (-low & 0xFFFFFFFF)) >> 31
    return (magnitude | low_flag) > 0x7FF00000


def atan2(y: float, x: float) -> float:
    """Return the angle of the point ``(x, y)`` in [-pi, pi]."""
    y = float(y)
    x = float(x)
    hx, lx = extract_words(x)
    ix = hx & 0x7FFFFFFF
    hy, ly = extract_words(y)
    iy = hy & 0x7FFFFFFF
    if _is_nan_words(hx, lx) or _is_nan_words(hy, ly):
        return x + y
    if hx == 0x3FF00000 and lx == 0:  # x == 1.0
        return atan(y)
    m = ((hy >> 31) & 1) | ((hx >> 30) & 2)  # 2*sign(x) + sign(y)

    if (iy | ly) == 0:
        if m in (0, 1):
            return y
        if m == 2:
            return _PI + _TINY
        return -_PI - _TINY

    if (ix | lx) == 0:
        return -_PI_O_2 - _TINY if hy < 0 else _PI_O_2 + _TINY

    if ix == 0x7FF00000:
        if iy == 0x7FF00000:
            if m == 0:
                return _PI_O_4 + _TINY
            if m == 1:
                return -_PI_O_4 - _TINY
            if m == 2:
                return 3.0 * _PI_O_4 + _TINY
            return -3.0 * _PI_O_4 - _TINY
        if m == 0:
            return 0.0
        if m == 1:
            return -0.0
        if m == 2:
            return _PI + _TINY
        return -_PI - _TINY

    if iy == 0x7FF00000:
        return -_PI_O_2 - _TINY if hy < 0 else _PI_O_2 + _TINY

    k = (iy - ix) >> 20
    if k > 60:  # |y/x| > 2**60
        z = _PI_O_2 + 0.5 * _PI_LO
        m &= 1
    elif hx < 0 and k < -60:
        z = 0.0
    else:
        z = atan(abs(y / x))
    if m == 0:
        return z
    if m == 1:
        return -z
    if m == 2:
        return _PI - (z - _PI_LO)
    return (z - _PI_LO) - _PI