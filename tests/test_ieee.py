import math

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from x87rt.ieee import (
    FP_ILOGB0,
    FP_ILOGBNAN,
    INT_MAX,
    copysign,
    extract_words,
    get_high_word,
    get_low_word,
    ilogb,
    insert_words,
    scalbn,
    set_high_word,
    set_low_word,
)

finite = st.floats(allow_nan=False, allow_infinity=False)


def test_words_of_one():
    assert extract_words(1.0) == (0x3FF00000, 0)
    assert get_high_word(1.0) == 0x3FF00000
    assert get_low_word(1.0) == 0


def test_high_word_is_signed_for_negative():
    hx = get_high_word(-1.0)
    assert hx < 0
    assert hx & 0x7FFFFFFF == 0x3FF00000


def test_infinity_high_word():
    assert get_high_word(math.inf) == 0x7FF00000
    assert get_low_word(math.inf) == 0


@given(st.floats(allow_nan=False))
def test_extract_insert_round_trip(x):
    result = insert_words(*extract_words(x))
    assert result == x
    assert math.copysign(1.0, result) == math.copysign(1.0, x)


@given(st.integers(0, 0xFFFFFFFF), st.integers(0, 0xFFFFFFFF))
def test_insert_extract_round_trip(high, low):
    assume((high & 0x7FF00000) != 0x7FF00000)
    hx, lx = extract_words(insert_words(high, low))
    assert (hx & 0xFFFFFFFF, lx) == (high, low)


@given(st.floats(allow_nan=False))
def test_set_words_identity(x):
    from_high = set_high_word(x, get_high_word(x))
    assert from_high == x
    assert math.copysign(1.0, from_high) == math.copysign(1.0, x)
    from_low = set_low_word(x, get_low_word(x))
    assert from_low == x
    assert math.copysign(1.0, from_low) == math.copysign(1.0, x)


def test_set_low_word_steps_one_ulp():
    assert set_low_word(1.0, 1) == math.nextafter(1.0, 2.0)


def test_set_high_word_changes_sign():
    assert set_high_word(2.0, get_high_word(2.0) | 0x80000000) == -2.0


@given(finite, finite)
def test_copysign_matches_math(x, y):
    result = copysign(x, y)
    expected = math.copysign(x, y)
    assert result == expected
    assert math.copysign(1.0, result) == math.copysign(1.0, expected)


def test_copysign_nan_sign():
    r = copysign(math.nan, -1.0)
    assert math.isnan(r)
    assert math.copysign(1.0, r) == -1.0


@given(finite, st.integers(-2200, 2200))
def test_scalbn_matches_ldexp(x, n):
    try:
        expected = math.ldexp(x, n)
    except OverflowError:
        expected = math.copysign(math.inf, x)
    result = scalbn(x, n)
    assert result == expected
    assert math.copysign(1.0, result) == math.copysign(1.0, expected)


def test_scalbn_special_values():
    assert scalbn(1.0, 5000) == math.inf
    assert scalbn(-1.0, 5000) == -math.inf
    negative_tiny = scalbn(-1.0, -5000)
    assert negative_tiny == 0.0
    assert math.copysign(1.0, negative_tiny) == -1.0
    negative_zero = scalbn(-0.0, 10)
    assert negative_zero == 0.0
    assert math.copysign(1.0, negative_zero) == -1.0
    assert math.isnan(scalbn(math.nan, 3))
    assert scalbn(math.inf, -3) == math.inf


def test_scalbn_huge_negative_on_subnormal():
    result = scalbn(5e-324, -60000)
    assert result == 0.0
    assert math.copysign(1.0, result) == 1.0


@given(finite)
def test_ilogb_matches_frexp(x):
    assume(x != 0.0)
    assert ilogb(x) == math.frexp(x)[1] - 1


@pytest.mark.parametrize("x", [0.0, -0.0])
def test_ilogb_zero(x):
    assert ilogb(x) == FP_ILOGB0
    assert FP_ILOGB0 == -INT_MAX


def test_ilogb_inf_and_nan():
    assert ilogb(math.inf) == INT_MAX
    assert ilogb(-math.inf) == INT_MAX
    assert ilogb(math.nan) == FP_ILOGBNAN


def test_ilogb_smallest_subnormal():
    assert ilogb(5e-324) == math.frexp(5e-324)[1] - 1