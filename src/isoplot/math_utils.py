from __future__ import annotations

import math
from typing import Any

import numpy as np


def within_tolerance(diff: Any, tol: Any) -> bool:
    """Return True if every component of diff is strictly below tol (per axis)."""
    return bool(np.all(np.abs(diff) < tol))


def is_outside(value: float) -> bool:
    """Sign classification used throughout: value > 0 is outside, <= 0 inside.

    NaN is neither and compares False here.
    """
    return value > 0.0


def sign(value: float) -> float:
    """Three-way sign (-1, 0, 1); NaN stays NaN."""
    if math.isnan(value):
        return math.nan
    if value > 0.0:
        return 1.0
    if value < 0.0:
        return -1.0
    return 0.0


def clamp_int(x: int, lo: int, hi: int) -> int:
    """Clamp an int to [lo, hi]."""
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def quantize(coords: Any, origin: Any, extent: Any, bits: int) -> tuple[int, ...]:
    """Map coordinates onto an integer lattice of 2**bits steps per box extent."""
    scaled = (np.asarray(coords, dtype=np.float64) - origin) / extent * float(1 << bits)
    return tuple(int(v) for v in np.rint(scaled))
