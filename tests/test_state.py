import math
import struct
import sys

import pytest
from hypothesis import given
from hypothesis import strategies as st

from x87rt.state import (
    Float80,
    StatusFlag,
    TagState,
    X87State,
    float64_to_float80,
    float80_to_float32,
    float80_to_float64,
)

ONE_MANTISSA = 1 << 63


def test_initial_state():
    state = X87State()
    assert state.control_word == 0x037F
    assert state.status_word == 0
    assert state.tag_word == 0xFFFF
    assert all(state.get_st_tag(i) == TagState.EMPTY for i in range(8))


def test_register_count_is_checked():
    with pytest.raises(ValueError):
        X87State(registers=[0.0] * 3)


def test_push_set_get():
    state = X87State()
    state.push()
    state.set_st(0, 1.5)
    assert state.get_st(0) == 1.5
    assert state.get_st_tag(0) == TagState.VALID
    assert state.st_index(0) == state.top_index()
    assert state.status_word & StatusFlag.STACK_FAULT == 0


def test_push_wraps_top_downward():
    state = X87State()
    state.push()
    assert state.top_index() == 7
    assert state.st_index(1) == 0


def test_pop_restores_top_and_empties():
    state = X87State()
    start = state.top_index()
    state.push()
    state.set_st(0, 2.0)
    slot = state.top_index()
    state.pop()
    assert state.top_index() == start
    assert state.registers[slot] == 0.0
    assert state.tag_word == 0xFFFF


def test_get_empty_register_flags_fault():
    state = X87State()
    value = state.get_st(0)
    assert repr(value) == "nan"
    assert state.status_word == StatusFlag.STACK_FAULT | StatusFlag.INVALID_OPERATION


def test_get_st_const_has_no_side_effects():
    state = X87State()
    state.status_word = StatusFlag.CONDITION_CODE1 | StatusFlag.CONDITION_CODE0
    state.push()
    state.set_st(0, 2.0)
    before = state.status_word
    value, status = state.get_st_const(0)
    assert value == 2.0
    assert status & StatusFlag.CONDITION_CODE1 == 0
    assert status & StatusFlag.CONDITION_CODE0
    assert state.status_word == before


def test_get_st_const_empty():
    state = X87State()
    value, status = state.get_st_const(3)
    assert math.isnan(value)
    assert status & (StatusFlag.STACK_FAULT | StatusFlag.INVALID_OPERATION) == (
        StatusFlag.STACK_FAULT | StatusFlag.INVALID_OPERATION
    )
    assert state.status_word == 0


@pytest.mark.parametrize("value", [0.1, 1e-40, -3.75, 1e300])
def test_get_st_const32_rounds_to_single(value):
    state = X87State()
    state.push()
    state.set_st(0, value)
    single, _ = state.get_st_const32(0)
    if math.isinf(single):
        assert abs(value) > 3.5e38
    else:
        assert struct.unpack("<f", struct.pack("<f", single))[0] == single
        assert abs(single - value) <= abs(value) * 2.0**-23 + 2.0**-149


@pytest.mark.parametrize(
    "value,tag",
    [
        (0.0, TagState.ZERO),
        (-0.0, TagState.ZERO),
        (5e-324, TagState.SPECIAL),
        (math.inf, TagState.SPECIAL),
        (math.nan, TagState.SPECIAL),
        (3.0, TagState.VALID),
        (sys.float_info.min, TagState.VALID),
    ],
)
def test_set_st_tags_by_class(value, tag):
    state = X87State()
    state.push()
    state.set_st(0, value)
    assert state.get_st_tag(0) == tag


def test_fast_accessors_skip_tags():
    state = X87State()
    assert state.get_st_fast(0) == 0.0
    assert state.status_word == 0
    state.set_st_fast(2, math.nan)
    assert state.get_st_tag(2) == TagState.VALID
    assert math.isnan(state.get_st_fast(2))


def test_swap_registers_swaps_values_and_tags():
    state = X87State()
    state.push()
    state.set_st(0, 0.0)
    state.push()
    state.set_st(0, 4.0)
    state.swap_registers(0, 1)
    assert state.get_st(0) == 0.0
    assert state.get_st(1) == 4.0
    assert state.get_st_tag(0) == TagState.ZERO
    assert state.get_st_tag(1) == TagState.VALID


def test_describe():
    text = X87State().describe()
    assert text.startswith("FPU state:\n")
    assert f"Control word: {0x037F}\n" in text
    assert "Tag word: -1\n" in text
    assert text.endswith("Top index: 0\n\n")


def test_float64_one_to_float80():
    value, flags = float64_to_float80(1.0)
    assert value == Float80(mantissa=ONE_MANTISSA, exponent=0x3FFF)
    assert flags == StatusFlag(0)


normal_doubles = st.floats(allow_nan=False, allow_infinity=False).filter(
    lambda v: v == 0.0 or abs(v) >= sys.float_info.min
)


@given(normal_doubles)
def test_float64_round_trip(x):
    extended, flags = float64_to_float80(x)
    assert flags == StatusFlag(0)
    back, back_flags = float80_to_float64(extended)
    assert back == x
    assert math.copysign(1.0, back) == math.copysign(1.0, x)
    assert back_flags == StatusFlag(0)


normal_singles = st.floats(width=32, allow_nan=False, allow_infinity=False).filter(
    lambda v: v == 0.0 or abs(v) >= 2.0**-126
)


@given(normal_singles)
def test_float32_exact_values_survive(x):
    extended, _ = float64_to_float80(x)
    single, flags = float80_to_float32(extended)
    assert single == x
    assert flags & StatusFlag.PRECISION == 0


def test_float80_to_float64_sets_precision():
    value, flags = float80_to_float64(Float80(mantissa=ONE_MANTISSA | 1, exponent=0x3FFF))
    assert value == 1.0
    assert flags & StatusFlag.PRECISION


def test_float80_to_float64_overflow_and_underflow():
    big, big_flags = float80_to_float64(Float80(mantissa=ONE_MANTISSA, exponent=16383 + 1024))
    assert big == math.inf
    assert big_flags & StatusFlag.OVERFLOW
    tiny, tiny_flags = float80_to_float64(Float80(mantissa=ONE_MANTISSA, exponent=0x8000 | (16383 - 2000)))
    assert tiny == 0.0 and math.copysign(1.0, tiny) < 0
    assert tiny_flags & StatusFlag.UNDERFLOW


def test_special_values():
    nan80, nan_flags = float64_to_float80(math.nan)
    assert nan80.exponent & 0x7FFF == 0x7FFF
    assert nan_flags & StatusFlag.INVALID_OPERATION
    back, back_flags = float80_to_float64(nan80)
    assert math.isnan(back)
    assert back_flags & StatusFlag.INVALID_OPERATION

    inf80, inf_flags = float64_to_float80(-math.inf)
    assert inf80 == Float80(mantissa=ONE_MANTISSA, exponent=0xFFFF)
    assert inf_flags == StatusFlag(0)
    value, flags = float80_to_float64(inf80)
    assert value == -math.inf
    assert flags == StatusFlag(0)


def test_float32_overflow():
    extended, _ = float64_to_float80(1e300)
    single, flags = float80_to_float32(extended)
    assert single == math.inf
    assert flags & StatusFlag.OVERFLOW


def test_denormal_double_flags_operand():
    _, flags = float64_to_float80(5e-324)
    assert flags == StatusFlag.DENORMALIZED_OPERAND


@pytest.mark.parametrize("mantissa,exponent", [(-1, 0), (1 << 64, 0), (0, 0x10000)])
def test_float80_range_checked(mantissa, exponent):
    with pytest.raises(ValueError):
        Float80(mantissa=mantissa, exponent=exponent)