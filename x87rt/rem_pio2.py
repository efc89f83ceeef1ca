"""Argument reduction of a double modulo pi/2."""

from __future__ import annotations

import math

from .ieee import get_high_word, get_low_word, insert_words, scalbn

__all__ = ["kernel_rem_pio2", "rem_pio2"]

_INIT_JK = (3, 4, 4, 6)

# Bits of 2/pi in 24-bit chunks: ipio2[i] * 2**(-24*(i+1)).
_IPIO2 = (
    0xA2F983, 0x6E4E44, 0x1529FC, 0x2757D1, 0xF534DD, 0xC0DB62,
    0x95993C, 0x439041, 0xFE5163, 0xABDEBB, 0xC561B7, 0x246E3A,
    0x424DD2, 0xE00649, 0x2EEA09, 0xD1921C, 0xFE1DEB, 0x1CB129,
    0xA73EE8, 0x8235F5, 0x2EBB44, 0x84E99C, 0x7026B4, 0x5F7E41,
    0x3991D6, 0x398353, 0x39F49C, 0x845F8B, 0xBDF928, 0x3B1FF8,
    0x97FFDE, 0x05980F, 0xEF2F11, 0x8B5A0A, 0x6D1F6D, 0x367ECF,
    0x27CB09, 0xB74F46, 0x3F669E, 0x5FEA2D, 0x7527BA, 0xC7EBE5,
    0xF17B3D, 0x0739F7, 0x8A5292, 0xEA6BFB, 0x5FB11F, 0x8D5D08,
    0x560330, 0x46FC7B, 0x6BABF0, 0xCFBC20, 0x9AF436, 0x1DA9E3,
    0x91615E, 0xE61B08, 0x659985, 0x5F14A0, 0x68408D, 0xFFD880,
    0x4D7327, 0x310606, 0x1556CA, 0x73A8C9, 0x60E27B, 0xC08C6B,
)

# pi/2 cut into 24-bit chunks.
_PIO2 = (
    1.57079625129699707031e00,
    7.54978941586159635335e-08,
    5.39030252995776476554e-15,
    3.28200341580791294123e-22,
    1.27065575308067607349e-29,
    1.22933308981111328932e-36,
    2.73370053816464559624e-44,
    2.16741683877804819444e-51,
)

_TWO24 = 1.67772160000000000000e07
_TWON24 = 5.96046447753906250000e-08

_INVPIO2 = 6.36619772367581382433e-01
_PIO2_1 = 1.57079632673412561417e00
_PIO2_1T = 6.07710050650619224932e-11
_PIO2_2 = 6.07710050630396597660e-11
_PIO2_2T = 2.02226624879595063154e-21
_PIO2_3 = 2.02226624871116645580e-21
_PIO2_3T = 8.47842766036889956997e-32
_ROUNDER = float.fromhex("0x1.8p52")

_WORK = 20


def _dot(x: list[float], f: list[float], jx: int, i: int) -> float:
    fw = 0.0
    for j, xj in enumerate(x):
        fw += xj * f[jx + i - j]
    return fw


def kernel_rem_pio2(x, e0, prec):
    """Reduce a positive value given as 24-bit pieces modulo pi/2.

    ``x`` holds the pieces, ``x[0] * 2**e0`` matching the value to 24
    bits.  ``prec`` selects 24, 53, 64 or 113 bits (0 to 3).  Returns
    ``(n, y)`` where ``n`` is the quadrant count modulo 8 and ``y`` is a
    tuple of one, two or three doubles whose sum is the remainder.
    """
    if prec not in (0, 1, 2, 3):
        raise ValueError(f"prec must be 0, 1, 2 or 3, not {prec!r}")
    x = [float(v) for v in x]
    if not x:
        raise ValueError("x must hold at least one piece")

    jk = _INIT_JK[prec]
    jp = jk
    jx = len(x) - 1
    jv = max(0, (e0 - 3) // 24)
    q0 = e0 - 24 * (jv + 1)

    f = [0.0] * _WORK
    q = [0.0] * _WORK
    fq = [0.0] * _WORK
    iq = [0] * _WORK

    j = jv - jx
    for i in range(jx + jk + 1):
        f[i] = 0.0 if j < 0 else float(_IPIO2[j])
        j += 1

    for i in range(jk + 1):
        q[i] = _dot(x, f, jx, i)

    jz = jk
    while True:
        # distill q[] into iq[] in reverse
        i = 0
        z = q[jz]
        for j in range(jz, 0, -1):
            fw = float(int(_TWON24 * z))
            iq[i] = int(z - _TWO24 * fw)
            z = q[j - 1] + fw
            i += 1

        z = scalbn(z, q0)
        z -= 8.0 * math.floor(z * 0.125)
        n = int(z)
        z -= float(n)
        ih = 0
        if q0 > 0:
            i = iq[jz - 1] >> (24 - q0)
            n += i
            iq[jz - 1] -= i << (24 - q0)
            ih = iq[jz - 1] >> (23 - q0)
        elif q0 == 0:
            ih = iq[jz - 1] >> 23
        elif z >= 0.5:
            ih = 2

        if ih > 0:
            n += 1
            carry = 0
            for i in range(jz):
                j = iq[i]
                if carry == 0:
                    if j != 0:
                        carry = 1
                        iq[i] = 0x1000000 - j
                else:
                    iq[i] = 0xFFFFFF - j
            if q0 == 1:
                iq[jz - 1] &= 0x7FFFFF
            elif q0 == 2:
                iq[jz - 1] &= 0x3FFFFF
            if ih == 2:
                z = 1.0 - z
                if carry:
                    z -= scalbn(1.0, q0)

        if z == 0.0:
            acc = 0
            for i in range(jz - 1, jk - 1, -1):
                acc |= iq[i]
            if acc == 0:
                k = 1
                while iq[jk - k] == 0:
                    k += 1
                for i in range(jz + 1, jz + k + 1):
                    f[jx + i] = float(_IPIO2[jv + i])
                    q[i] = _dot(x, f, jx, i)
                jz += k
                continue
        break

    # chop off zero terms
    if z == 0.0:
        jz -= 1
        q0 -= 24
        while iq[jz] == 0:
            jz -= 1
            q0 -= 24
    else:
        z = scalbn(z, -q0)
        if z >= _TWO24:
            fw = float(int(_TWON24 * z))
            iq[jz] = int(z - _TWO24 * fw)
            jz += 1
            q0 += 24
            iq[jz] = int(fw)
        else:
            iq[jz] = int(z)

    fw = scalbn(1.0, q0)
    for i in range(jz, -1, -1):
        q[i] = fw * float(iq[i])
        fw *= _TWON24

    for i in range(jz, -1, -1):
        fw = 0.0
        for k in range(min(jp, jz - i) + 1):
            fw += _PIO2[k] * q[i + k]
        fq[jz - i] = fw

    def signed(v: float) -> float:
        return v if ih == 0 else -v

    if prec == 0:
        fw = 0.0
        for i in range(jz, -1, -1):
            fw += fq[i]
        y = (signed(fw),)
    elif prec in (1, 2):
        fw = 0.0
        for i in range(jz, -1, -1):
            fw += fq[i]
        y0 = signed(fw)
        fw = fq[0] - fw
        for i in range(1, jz + 1):
            fw += fq[i]
        y = (y0, signed(fw))
    else:
        for i in range(jz, 0, -1):
            fw = fq[i - 1] + fq[i]
            fq[i] += fq[i - 1] - fw
            fq[i - 1] = fw
        for i in range(jz, 1, -1):
            fw = fq[i - 1] + fq[i]
            fq[i] += fq[i - 1] - fw
            fq[i - 1] = fw
        fw = 0.0
        for i in range(jz, 1, -1):
            fw += fq[i]
        y = (signed(fq[0]), signed(fq[1]), signed(fw))
    return n & 7, y


def _near_multiple(x: float, hx: int, k: int) -> tuple[int, float, float]:
    if hx > 0:
        z = x - k * _PIO2_1
        y0 = z - k * _PIO2_1T
        return k, y0, (z - y0) - k * _PIO2_1T
    z = x + k * _PIO2_1
    y0 = z + k * _PIO2_1T
    return -k, y0, (z - y0) + k * _PIO2_1T


def _medium(x: float, ix: int) -> tuple[int, float, float]:
    fn = x * _INVPIO2 + _ROUNDER
    fn = fn - _ROUNDER
    n = int(fn)
    r = x - fn * _PIO2_1
    w = fn * _PIO2_1T
    j = ix >> 20
    y0 = r - w
    i = j - ((get_high_word(y0) >> 20) & 0x7FF)
    if i > 16:
        t = r
        w = fn * _PIO2_2
        r = t - w
        w = fn * _PIO2_2T - ((t - r) - w)
        y0 = r - w
        i = j - ((get_high_word(y0) >> 20) & 0x7FF)
        if i > 49:
            t = r
            w = fn * _PIO2_3
            r = t - w
            w = fn * _PIO2_3T - ((t - r) - w)
            y0 = r - w
    return n, y0, (r - y0) - w


def rem_pio2(x):
    """Return ``(n, y0, y1)`` with ``x = n*pi/2 + y0 + y1`` and small ``|y0|``.

    ``y1`` is the tail of the remainder.  For huge arguments ``n`` is
    only known modulo 8.  Infinity and NaN give ``(0, nan, nan)``.
    """
    x = float(x)
    hx = get_high_word(x)
    ix = hx & 0x7FFFFFFF

    if ix <= 0x400F6A7A:  # |x| ~<= 5pi/4
        if (ix & 0xFFFFF) != 0x921FB:
            return _near_multiple(x, hx, 1 if ix <= 0x4002D97C else 2)
        return _medium(x, ix)
    if ix <= 0x401C463B:  # |x| ~<= 9pi/4
        if ix <= 0x4015FDBC:
            if ix != 0x4012D97C:
                return _near_multiple(x, hx, 3)
        elif ix != 0x401921FB:
            return _near_multiple(x, hx, 4)
        return _medium(x, ix)
    if ix < 0x413921FB:  # |x| ~< 2**20 * pi/2
        return _medium(x, ix)

    if ix >= 0x7FF00000:
        y = x - x
        return 0, y, y

    low = get_low_word(x)
    e0 = (ix >> 20) - 1046
    z = insert_words(ix - (e0 << 20), low)
    tx = []
    for _ in range(2):
        piece = float(int(z))
        tx.append(piece)
        z = (z - piece) * _TWO24
    tx.append(z)
    while tx[-1] == 0.0:
        tx.pop()
    n, (t0, t1) = kernel_rem_pio2(tx, e0, 1)
    if hx < 0:
        return -n, -t0, -t1
    return n, t0, t1