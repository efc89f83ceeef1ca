# x87rt

A model of the x87 floating-point unit's register state, together with a set of
double-precision math routines in the classic fdlibm style that work directly
on the IEEE 754 bit patterns of Python floats.

The package has no dependencies outside the standard library and no command
line interface; it is used as a library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The register stack

`x87rt.state.X87State` holds the control word, status word, tag word and the
eight stack registers (as Python floats in `registers`). The top-of-stack
pointer lives in bits 11–13 of the status word, and each physical register has
a two-bit tag (`TagState`: `VALID`, `ZERO`, `SPECIAL`, `EMPTY`). A new state
starts with control word `0x037F`, status word `0` and every register empty.

```python
from x87rt.state import X87State, TagState, StatusFlag

fpu = X87State()
fpu.push()
fpu.set_st(0, 1.5)
assert fpu.get_st(0) == 1.5
assert fpu.get_st_tag(0) is TagState.VALID

fpu.pop()
value = fpu.get_st(0)           # empty register: NaN and a stack fault
assert fpu.status_word & StatusFlag.STACK_FAULT
```

Methods of `X87State`:

- `top_index()` and `st_index(offset)` give physical register indices.
- `push()` moves the top down one slot and tags the new top valid; `pop()`
  empties and clears the top register and moves the top up.
- `get_st(offset)` reads ST(offset); reading an empty register sets the stack
  fault and invalid-operation flags and returns NaN.
- `get_st_const(offset)` and `get_st_const32(offset)` read without changing
  the state and return the value together with the status word the read would
  produce (condition code 1 cleared). The `32` variant rounds the value to
  single precision.
- `set_st(offset, value)` stores a value and tags it zero, special (NaN,
  infinity, subnormal) or valid; `set_st_fast` stores and tags it valid
  without classifying; `get_st_fast` reads without checking the tag.
- `get_st_tag(offset)` returns the tag of ST(offset).
- `swap_registers(offset1, offset2)` exchanges two registers and their tags.
- `describe()` returns a short text summary of the words and the top index.

`StatusFlag` and `ControlWord` name the bits and fields of the status and
control words.

### 80-bit values

`Float80(mantissa, exponent)` models an extended-precision value: a 64-bit
mantissa with an explicit integer bit and a 16-bit sign-and-exponent word.
Conversions report the exception flags they raise:

```python
from x87rt.state import float64_to_float80, float80_to_float64, float80_to_float32

ext, flags = float64_to_float80(1.0)
back, flags = float80_to_float64(ext)     # (1.0, StatusFlag(0))
single, flags = float80_to_float32(ext)
```

Rounding to double or single precision is round-to-nearest, ties to even.

## Math routines

| Module | Functions |
| --- | --- |
| `x87rt.ieee` | `extract_words`, `get_high_word`, `get_low_word`, `insert_words`, `set_high_word`, `set_low_word`, `copysign`, `scalbn`, `ilogb` |
| `x87rt.kernels` | `kernel_sin`, `kernel_cos`, `kernel_tan`, `k_log1p` |
| `x87rt.rem_pio2` | `rem_pio2`, `kernel_rem_pio2` |
| `x87rt.trig` | `sin`, `cos`, `tan`, `atan`, `atan2` |
| `x87rt.explog` | `exp2`, `log2` |
| `x87rt.remainder` | `fmod`, `remquo` |

```python
from x87rt.trig import sin, atan2
from x87rt.explog import exp2, log2
from x87rt.remainder import fmod, remquo

sin(0.5)
atan2(1.0, -1.0)
exp2(10.0)           # 1024.0
log2(8.0)            # 3.0
fmod(7.0, 3.0)       # 1.0
remquo(7.0, 2.0)     # (-1.0, 4): remainder and low quotient bits
```

`rem_pio2(x)` returns `(n, y0, y1)` with `x ≈ n*pi/2 + y0 + y1`, where `y1` is
the tail of the small remainder; for very large arguments `n` is only known
modulo 8, and infinity or NaN gives `(0, nan, nan)`.

`ilogb` returns `FP_ILOGB0` for zero, `FP_ILOGBNAN` for NaN and `INT_MAX` for
infinity. `log2` of zero is `-inf` and of a negative number NaN. `fmod` and
`remquo` return NaN (and quotient `0` for `remquo`) for a zero divisor, an
infinite dividend or a NaN operand.

## What the package does not do

It models the register stack and its status bookkeeping, and provides the math
routines; it does not decode or execute x87 instructions, and it does not run
or translate programs.