import math

import pytest
from hypothesis import given, strategies as st

from x87rt.rem_pio2 import kernel_rem_pio2, rem_pio2


def _sin_from_quadrant(n, y):
    return (math.sin(y), math.cos(y), -math.sin(y), -math.cos(y))[n & 3]


finite = st.floats(allow_nan=False, allow_infinity=False)


@pytest.mark.parametrize("x", [0.5, 1.0, 2.0, 3.0, 4.0, 5.0, 7.0, 10.0, 100.0, -3.0, -100.0])
def test_reconstructs_moderate_arguments(x):
    n, y0, y1 = rem_pio2(x)
    assert math.isclose(n * (math.pi / 2) + y0 + y1, x, rel_tol=1e-14, abs_tol=1e-14)


@pytest.mark.parametrize("x", [1.0, 2.0, 5.0, 1000.0, 123456.789, 1e7, 1e22, 1e300])
def test_remainder_within_quarter_pi(x):
    _, y0, _ = rem_pio2(x)
    assert abs(y0) <= math.pi / 4 + 1e-12


@pytest.mark.parametrize("x", [1e22, 1e100, 1e300, 2.0**1000, 6.0e8])
def test_large_arguments_quadrant_matches_sin(x):
    n, y0, y1 = rem_pio2(x)
    assert math.isclose(_sin_from_quadrant(n, y0 + y1), math.sin(x), abs_tol=1e-12)


@given(finite)
def test_quadrant_consistent_with_sin(x):
    n, y0, y1 = rem_pio2(x)
    assert math.isclose(_sin_from_quadrant(n, y0 + y1), math.sin(x), abs_tol=1e-9)


@given(st.floats(min_value=1e-300, max_value=1e308))
def test_odd_symmetry(x):
    n, y0, y1 = rem_pio2(x)
    m, z0, z1 = rem_pio2(-x)
    assert (m, z0, z1) == (-n, -y0, -y1)


@given(st.floats(min_value=1.0, max_value=1e300))
def test_tail_is_small(x):
    _, y0, y1 = rem_pio2(x)
    assert abs(y1) <= abs(y0) * 2.0**-45 + 1e-300


@pytest.mark.parametrize("x", [math.inf, -math.inf, math.nan])
def test_non_finite_gives_nan(x):
    n, y0, y1 = rem_pio2(x)
    assert n == 0
    assert math.isnan(y0) and math.isnan(y1)


def test_zero_reduces_against_negative_quadrant():
    n, y0, y1 = rem_pio2(0.0)
    assert n == -1
    assert math.isclose(y0 + y1, math.pi / 2, rel_tol=1e-15)


@pytest.mark.parametrize("value", [1.0, 3.0, 100.0, 12345.0])
def test_kernel_reduces_small_integers(value):
    n, (y0, y1) = kernel_rem_pio2([value], 0, 1)
    expected = math.remainder(value, math.pi / 2)
    assert math.isclose(y0 + y1, expected, abs_tol=1e-12)
    assert math.isclose(_sin_from_quadrant(n, y0 + y1), math.sin(value), abs_tol=1e-12)


@pytest.mark.parametrize("prec, count", [(0, 1), (1, 2), (2, 2), (3, 3)])
def test_kernel_result_length_follows_precision(prec, count):
    _, y = kernel_rem_pio2([5.0, 1234.0], 30, prec)
    assert len(y) == count


def test_kernel_precisions_agree():
    pieces = [9876543.0, 1234567.0, 42.0]
    n0, y_single = kernel_rem_pio2(pieces, 200, 0)
    n1, y_double = kernel_rem_pio2(pieces, 200, 1)
    n3, y_quad = kernel_rem_pio2(pieces, 200, 3)
    assert n0 == n1 == n3
    assert 0 <= n1 < 8
    assert math.isclose(y_single[0], y_double[0] + y_double[1], rel_tol=1e-6, abs_tol=1e-7)
    assert math.isclose(sum(y_quad), y_double[0] + y_double[1], rel_tol=1e-15, abs_tol=1e-16)


@pytest.mark.parametrize("prec", [-1, 4, 7])
def test_kernel_rejects_bad_precision(prec):
    with pytest.raises(ValueError):
        kernel_rem_pio2([1.0], 0, prec)


def test_kernel_rejects_empty_input():
    with pytest.raises(ValueError):
        kernel_rem_pio2([], 0, 1)