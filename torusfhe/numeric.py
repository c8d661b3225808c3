"""Fixed-point torus arithmetic on 32-bit integers and the shared random source.

A torus element is an integer in the signed 32-bit range standing for the
real number ``x / 2**32`` modulo 1.
"""

from __future__ import annotations

import math
import random
import struct
from collections.abc import Iterable

_TWO31 = 1 << 31
_TWO32 = 1 << 32
_MASK32 = _TWO32 - 1
_MASK64 = (1 << 64) - 1

INT32_MIN = -_TWO31
INT32_MAX = _TWO31 - 1

generator = random.Random()
"""Random source shared by every sampling routine of the package."""


def to_int32(x: int) -> int:
    """Wrap an integer into the signed 32-bit range (two's complement)."""
    return ((int(x) + _TWO31) % _TWO32) - _TWO31


def set_seed(values: Iterable[int]) -> None:
    """Seed the shared random source from a sequence of 32-bit words."""
    data = b"".join(struct.pack("<I", int(v) & _MASK32) for v in values)
    generator.seed(data)


def uniform_torus32() -> int:
    """Draw a torus element uniformly at random."""
    return generator.randint(INT32_MIN, INT32_MAX)


def gaussian32(message: int, sigma: float) -> int:
    """Return ``message`` plus a Gaussian error of standard deviation ``sigma``."""
    err = generator.gauss(0.0, sigma)
    return to_int32(message + dtot32(err))


def dtot32(d: float) -> int:
    """Convert a real number to a torus element (only its fractional part counts)."""
    frac = d - math.trunc(d)
    return to_int32(math.trunc(frac * _TWO32))


def t32tod(x: int) -> float:
    """Convert a torus element to the real number it stands for."""
    return float(x) / float(_TWO32)


def _interval(msize: int) -> int:
    if msize <= 0:
        raise ValueError(f"message space size must be positive, got {msize}")
    return ((1 << 63) // msize) * 2


def _phase64(phase: int, half_interval: int) -> int:
    return (((int(phase) & _MASK32) << 32) + half_interval) & _MASK64


def approx_phase(phase: int, msize: int) -> int:
    """Round a phase to the nearest of ``msize`` evenly spaced torus messages."""
    interv = _interval(msize)
    phase64 = _phase64(phase, interv // 2)
    phase64 -= phase64 % interv
    return to_int32(phase64 >> 32)


def mod_switch_from_torus32(phase: int, msize: int) -> int:
    """Return the index of the message of a space of size ``msize`` nearest to ``phase``."""
    interv = _interval(msize)
    phase64 = _phase64(phase, interv // 2)
    return to_int32(phase64 // interv)


def mod_switch_to_torus32(mu: int, msize: int) -> int:
    """Return the torus element standing for ``mu / msize``."""
    interv = _interval(msize)
    phase64 = (int(mu) * interv) & _MASK64
    return to_int32(phase64 >> 32)