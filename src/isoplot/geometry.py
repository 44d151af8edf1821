from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

if TYPE_CHECKING:
    from isoplot.protocols import ScalarField

Point = np.ndarray


def as_point(coords: Sequence[float] | np.ndarray) -> Point:
    """Return coords as a read-only float64 vector."""
    p = np.array(coords, dtype=np.float64)
    p.flags.writeable = False
    return p


def evaluate(fn: ScalarField, pos: Point) -> float:
    """Evaluate the field at pos as a Python float."""
    return float(fn(pos))


@dataclass(frozen=True, slots=True)
class FieldSample:
    """A point paired with the field value there (NaN when undefined)."""

    pos: Point
    val: float = math.nan

    @classmethod
    def at(cls, pos: Any, fn: ScalarField) -> FieldSample:
        p = as_point(pos)
        return cls(p, evaluate(fn, p))

    @property
    def dim(self) -> int:
        return int(self.pos.shape[0])

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.val)

    def __repr__(self) -> str:
        coords = ", ".join(f"{c:g}" for c in self.pos)
        return f"FieldSample(({coords}); {self.val:g})"


def midpoint(p1: FieldSample, p2: FieldSample, fn: ScalarField) -> FieldSample:
    """Evaluate the field halfway between two samples."""
    return FieldSample.at((p1.pos + p2.pos) / 2.0, fn)


def intersect_zero(p1: FieldSample, p2: FieldSample, fn: ScalarField) -> FieldSample:
    """Linearly interpolate the zero crossing between two samples.

    Weights are -v2 / (v1 - v2) for p1 and v1 / (v1 - v2) for p2. The caller
    guarantees v1 != v2.
    """
    denom = p1.val - p2.val
    k1 = -p2.val / denom
    k2 = p1.val / denom
    return FieldSample.at(p1.pos * k1 + p2.pos * k2, fn)


def vertices_from_extremes(dim: int, p_min: Any, p_max: Any, fn: ScalarField) -> list[FieldSample]:
    """Sample the 2**dim corners of a box.

    Corner i takes coordinate d from p_max iff bit d of i is set.
    """
    lo = np.asarray(p_min, dtype=np.float64)
    hi = np.asarray(p_max, dtype=np.float64)
    vertices: list[FieldSample] = []
    for i in range(1 << dim):
        coords = [hi[d] if (i >> d) & 1 else lo[d] for d in range(dim)]
        vertices.append(FieldSample.at(coords, fn))
    return vertices
