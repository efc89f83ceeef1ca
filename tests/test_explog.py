import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from x87rt.explog import exp2, log2


def test_exp2_zero_is_one():
    assert exp2(0.0) == 1.0
    assert exp2(-0.0) == 1.0


@given(st.integers(min_value=-1074, max_value=1023))
def test_exp2_of_integers_is_exact(n):
    assert exp2(float(n)) == math.ldexp(1.0, n)


@given(st.floats(min_value=-1000.0, max_value=1000.0))
def test_exp2_close_to_power(x):
    assert math.isclose(exp2(x), 2.0 ** x, rel_tol=1e-15)


def test_exp2_special_values():
    assert exp2(math.inf) == math.inf
    assert exp2(-math.inf) == 0.0
    assert math.isnan(exp2(math.nan))


def test_exp2_overflow_and_underflow():
    assert exp2(1024.0) == math.inf
    assert exp2(5000.0) == math.inf
    assert exp2(-1100.0) == 0.0
    assert exp2(-5000.0) == 0.0


def test_exp2_tiny_argument_returns_one_plus_x():
    tiny = math.ldexp(1.0, -60)
    assert exp2(tiny) == 1.0 + tiny


def test_exp2_half_is_sqrt_two():
    assert math.isclose(exp2(0.5), math.sqrt(2.0), rel_tol=1e-16)


@given(
    st.floats(min_value=-1000.0, max_value=1000.0),
    st.floats(min_value=-1000.0, max_value=1000.0),
)
def test_exp2_is_monotonic(a, b):
    lo, hi = sorted((a, b))
    assert exp2(lo) <= exp2(hi)


def test_log2_one_is_zero():
    result = log2(1.0)
    assert result == 0.0
    assert math.copysign(1.0, result) == 1.0


@given(st.integers(min_value=-1074, max_value=1023))
def test_log2_of_powers_is_exact(n):
    assert log2(math.ldexp(1.0, n)) == float(n)


def test_log2_zero_is_negative_infinity():
    assert log2(0.0) == -math.inf
    assert log2(-0.0) == -math.inf


@pytest.mark.parametrize("value", [-1.0, -1e-310, -math.inf])
def test_log2_negative_is_nan(value):
    result = log2(value)
    assert repr(result) == "nan"


def test_log2_special_values():
    assert log2(math.inf) == math.inf
    assert math.isnan(log2(math.nan))


@given(st.floats(min_value=1e-300, max_value=1e300))
def test_log2_close_to_math(x):
    assert math.isclose(log2(x), math.log2(x), rel_tol=1e-15, abs_tol=1e-15)


@given(st.floats(min_value=5e-324, max_value=1e-308))
def test_log2_subnormal_close_to_math(x):
    assert math.isclose(log2(x), math.log2(x), rel_tol=1e-15)


@given(st.floats(min_value=-1000.0, max_value=1000.0))
def test_log2_inverts_exp2(x):
    assert math.isclose(log2(exp2(x)), x, rel_tol=1e-13, abs_tol=1e-13)