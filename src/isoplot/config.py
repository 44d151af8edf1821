from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

from isoplot.errors import ConfigurationError
from isoplot.math_utils import clamp_int

if TYPE_CHECKING:
    from isoplot.geometry import Point
    from isoplot.quadtree.cell import CellTree
    from isoplot.triangulation import TriangleMesh


@dataclass(frozen=True, slots=True)
class IsolineConfig:
    """Refinement knobs for isoline extraction.

    min_depth:
        Levels of refinement applied everywhere regardless of sign changes.
    max_cells:
        Soft cap on leaf cells; raised to 4**min_depth when smaller.
    tol:
        Per-axis absolute tolerance. None means (p_max - p_min) / 1000.
    """

    min_depth: int = 5
    max_cells: int = 10_000
    tol: Sequence[float] | None = None

    def __post_init__(self) -> None:
        # stored as a tuple of floats so configs can key caches
        if self.tol is not None:
            try:
                tol = tuple(float(t) for t in np.atleast_1d(np.asarray(self.tol, dtype=np.float64)))
            except (TypeError, ValueError) as exc:
                msg = f"tol must be a sequence of numbers, got {self.tol!r}"
                raise ConfigurationError(msg) from exc
            object.__setattr__(self, "tol", tol)

    def validate(self, dim: int) -> None:
        if self.min_depth < 0:
            msg = f"min_depth must be >= 0, got {self.min_depth}"
            raise ConfigurationError(msg)
        if self.max_cells < 1:
            msg = f"max_cells must be >= 1, got {self.max_cells}"
            raise ConfigurationError(msg)
        if self.tol is not None:
            check_tolerance(self.tol, dim)

    @classmethod
    def for_point_count(cls, point_count: int, performance_mode: bool = False) -> IsolineConfig:
        """Pick depth and cell budget from a requested curve resolution.

        Performance mode trades quality for a fast redraw.
        """
        if performance_mode:
            return cls(
                min_depth=clamp_int(point_count // 500, 1, 3),
                max_cells=clamp_int(point_count, 100, 2000),
            )
        return cls(
            min_depth=clamp_int(point_count // 200, 3, 6),
            max_cells=clamp_int(point_count * 5, 1000, 20_000),
        )


def check_bounds(p_min: Any, p_max: Any) -> tuple[np.ndarray, np.ndarray]:
    """Validate the search box and return it as float64 arrays."""
    lo = np.asarray(p_min, dtype=np.float64)
    hi = np.asarray(p_max, dtype=np.float64)
    if lo.ndim != 1 or lo.shape[0] == 0 or lo.shape != hi.shape:
        msg = f"p_min and p_max must be non-empty and of equal length, got {lo.shape} and {hi.shape}"
        raise ConfigurationError(msg)
    if not (np.all(np.isfinite(lo)) and np.all(np.isfinite(hi))):
        msg = "Bounds must be finite"
        raise ConfigurationError(msg)
    if np.any(hi <= lo):
        msg = f"Degenerate box: p_max {hi.tolist()} must exceed p_min {lo.tolist()} on every axis"
        raise ConfigurationError(msg)
    return lo, hi


def check_tolerance(tol: Any, dim: int) -> np.ndarray:
    t = np.asarray(tol, dtype=np.float64)
    if t.shape != (dim,):
        msg = f"tol must have one entry per axis ({dim}), got shape {t.shape}"
        raise ConfigurationError(msg)
    if not np.all(np.isfinite(t)) or np.any(t <= 0.0):
        msg = f"tol entries must be positive and finite, got {t.tolist()}"
        raise ConfigurationError(msg)
    return t


@dataclass(frozen=True, slots=True)
class IsolineResult:
    """Curves plus the intermediate structures they were traced from."""

    curves: list[list[Point]]
    tree: CellTree
    mesh: TriangleMesh
    tol: np.ndarray

    @staticmethod
    def is_closed(curve: list[Point]) -> bool:
        return len(curve) > 1 and curve[0] is curve[-1]

    @property
    def closed_curves(self) -> list[list[Point]]:
        return [c for c in self.curves if self.is_closed(c)]

    @property
    def open_curves(self) -> list[list[Point]]:
        return [c for c in self.curves if not self.is_closed(c)]

    @property
    def point_count(self) -> int:
        return sum(len(c) for c in self.curves)

    def curve_arrays(self) -> list[np.ndarray]:
        """Each polyline as an (N, dim) float64 array."""
        dim = self.tree.dim
        return [
            np.stack(c) if c else np.zeros((0, dim), dtype=np.float64)
            for c in self.curves
        ]


def default_tolerance(p_min: np.ndarray, p_max: np.ndarray) -> np.ndarray:
    return (p_max - p_min) / 1000.0
