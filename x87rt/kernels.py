"""Polynomial kernels for sin, cos and tan on [-pi/4, pi/4] and for log1p."""

from __future__ import annotations

from .ieee import get_high_word, set_low_word

__all__ = ["k_log1p", "kernel_cos", "kernel_sin", "kernel_tan"]

_HALF = 5.00000000000000000000e-01
_S1 = -1.66666666666666324348e-01
_S2 = 8.33333333332248946124e-03
_S3 = -1.98412698298579493134e-04
_S4 = 2.75573137070700676789e-06
_S5 = -2.50507602534068634195e-08
_S6 = 1.58969099521155010221e-10

_ONE = 1.00000000000000000000e00
_C1 = 4.16666666666666019037e-02
_C2 = -1.38888888888741095749e-03
_C3 = 2.48015872894767294178e-05
_C4 = -2.75573143513906633035e-07
_C5 = 2.08757232129817482790e-09
_C6 = -1.13596475577881948265e-11

_T = (
    3.33333333333334091986e-01,
    1.33333333333201242699e-01,
    5.39682539762260521377e-02,
    2.18694882948595424599e-02,
    8.86323982359930005737e-03,
    3.59207910759131235356e-03,
    1.45620945432529025516e-03,
    5.88041240820264096874e-04,
    2.46463134818469906812e-04,
    7.81794442939557092300e-05,
    7.14072491382608190305e-05,
    -1.85586374855275456654e-05,
    2.59073051863633712884e-05,
)
_PIO4 = 7.85398163397448278999e-01
_PIO4LO = 3.06161699786838301793e-17

_LG1 = 6.666666666666735130e-01
_LG2 = 3.999999999940941908e-01
_LG3 = 2.857142874366239149e-01
_LG4 = 2.222219843214978396e-01
_LG5 = 1.818357216161805012e-01
_LG6 = 1.531383769920937332e-01
_LG7 = 1.479819860511658591e-01


def kernel_sin(x: float, y: float, iy: int) -> float:
    """Sine of ``x + y`` for ``|x| <= pi/4``; ``iy == 0`` means ``y`` is zero."""
    z = x * x
    w = z * z
    r = _S2 + z * (_S3 + z * _S4) + z * w * (_S5 + z * _S6)
    v = z * x
    if iy == 0:
        return x + v * (_S1 + z * r)
    return x - ((z * (_HALF * y - v * r) - y) - v * _S1)


def kernel_cos(x: float, y: float) -> float:
    """Cosine of ``x + y`` for ``|x| <= pi/4``, ``y`` being the tail of ``x``."""
    z = x * x
    w = z * z
    r = z * (_C1 + z * (_C2 + z * _C3)) + w * w * (_C4 + z * (_C5 + z * _C6))
    hz = 0.5 * z
    w = _ONE - hz
    return w + (((_ONE - w) - hz) + (z * r - x * y))


def kernel_tan(x: float, y: float, iy: int) -> float:
    """Return ``tan(x + y)`` when ``iy == 1``, else ``-1/tan(x + y)``.

    ``|x|`` must be at most about pi/4 and ``x`` must not be -0.
    """
    hx = get_high_word(x)
    ix = hx & 0x7FFFFFFF
    large = ix >= 0x3FE59428
    if large:
        if hx < 0:
            x = -x
            y = -y
        z = _PIO4 - x
        w = _PIO4LO - y
        x = z + w
        y = 0.0
    z = x * x
    w = z * z
    t = _T
    r = t[1] + w * (t[3] + w * (t[5] + w * (t[7] + w * (t[9] + w * t[11]))))
    v = z * (t[2] + w * (t[4] + w * (t[6] + w * (t[8] + w * (t[10] + w * t[12])))))
    s = z * x
    r = y + z * (s * (r + v) + y)
    r += t[0] * s
    w = x + r
    if large:
        v = float(iy)
        sign = float(1 - ((hx >> 30) & 2))
        return sign * (v - 2.0 * (x - (w * w / (w + v) - r)))
    if iy == 1:
        return w
    # -1/(x + r) computed accurately
    z = set_low_word(w, 0)
    v = r - (z - x)
    a = -1.0 / w
    tt = set_low_word(a, 0)
    s = 1.0 + tt * z
    return tt + a * (s + tt * v)


def k_log1p(f: float) -> float:
    """Return ``log(1+f) - f + f*f/2`` for ``1+f`` in [sqrt(2)/2, sqrt(2)]."""
    s = f / (2.0 + f)
    z = s * s
    w = z * z
    t1 = w * (_LG2 + w * (_LG4 + w * _LG6))
    t2 = z * (_LG1 + w * (_LG3 + w * (_LG5 + w * _LG7)))
    r = t2 + t1
    hfsq = 0.5 * f * f
    return s * (hfsq + r)