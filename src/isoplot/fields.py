from __future__ import annotations

import functools
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Sequence

import numpy as np

from isoplot.protocols import Drawable2D, ScalarField

if TYPE_CHECKING:
    from isoplot.geometry import Point

FIELD_ERRORS = (ArithmeticError, ValueError, TypeError, OverflowError)


def nan_safe(fn: Callable[[Any], float]) -> Callable[[Any], float]:
    """Wrap a raw evaluator so failures and non-finite results become NaN."""

    @functools.wraps(fn)
    def wrapper(p: Any) -> float:
        try:
            value = float(fn(p))
        except FIELD_ERRORS:
            return math.nan
        if not math.isfinite(value):
            return math.nan
        return value

    return wrapper


@dataclass(frozen=True, slots=True)
class CircleField(ScalarField, Drawable2D):
    """|p - center|^2 - radius^2, negative inside the circle."""

    center: Sequence[float]
    radius: float

    def __call__(self, p: Any) -> float:
        dx = p[0] - self.center[0]
        dy = p[1] - self.center[1]
        return float(dx * dx + dy * dy - self.radius * self.radius)

    def polyline(self, num: int = 600) -> Any:
        theta = np.linspace(0.0, 2.0 * np.pi, num, dtype=np.float64)
        center = np.asarray(self.center, dtype=np.float64)
        return center[None, :] + np.stack([np.cos(theta), np.sin(theta)], axis=-1) * self.radius


@dataclass(frozen=True, slots=True)
class HalfPlaneField(ScalarField):
    """Signed distance to the line normal . p = offset (normal need not be unit)."""

    normal: Sequence[float]
    offset: float = 0.0

    def __call__(self, p: Any) -> float:
        n = np.asarray(self.normal, dtype=np.float64)
        return float((np.dot(n, np.asarray(p, dtype=np.float64)) - self.offset) / np.linalg.norm(n))


@dataclass(frozen=True, slots=True)
class UnionField(ScalarField):
    """Pointwise minimum of several fields (union of their inside regions)."""

    fields: tuple[ScalarField, ...]

    def __call__(self, p: Point) -> float:
        values = [float(f(p)) for f in self.fields]
        if any(math.isnan(v) for v in values):
            return math.nan
        return min(values)
