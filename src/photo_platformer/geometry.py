"""Small numeric helpers shared by the level builder and physics calculator.

Everything here is pure. The int32 helpers reproduce 32-bit wraparound so
seeds and PRNG state stay identical to the values a 32-bit client computes.
"""

import math

_MASK_32 = 0xFFFFFFFF


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value into [lo, hi]. lo wins if the range is inverted."""
    return max(lo, min(hi, value))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return a + (b - a) * t


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def to_uint32(value: int) -> int:
    return value & _MASK_32


def to_int32(value: int) -> int:
    """Wrap an arbitrary int into the signed 32-bit range."""
    value &= _MASK_32
    if value & 0x80000000:
        return value - 0x100000000
    return value


def imul(a: int, b: int) -> int:
    """32-bit multiply, unsigned result."""
    return (to_uint32(a) * to_uint32(b)) & _MASK_32
