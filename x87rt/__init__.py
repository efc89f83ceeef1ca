"""x87 FPU register state and fdlibm-style double-precision math routines."""

__version__ = "0.1.0"
__all__ = ["ieee", "kernels", "rem_pio2", "trig", "explog", "remainder", "state"]