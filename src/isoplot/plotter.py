from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Hashable, Sequence

import numpy as np

from isoplot.config import (
    IsolineConfig,
    IsolineResult,
    check_bounds,
    check_tolerance,
    default_tolerance,
)
from isoplot.errors import ConfigurationError
from isoplot.quadtree.builder import build_tree
from isoplot.tracer import CurveTracer
from isoplot.triangulation import Triangulator

if TYPE_CHECKING:
    from isoplot.geometry import Point
    from isoplot.protocols import ScalarField

logger = logging.getLogger(__name__)


def resolve_tolerance(p_min: Any, p_max: Any, tol: Sequence[float] | None = None) -> np.ndarray:
    """Per-axis tolerance; defaults to a thousandth of the box extent."""
    lo, hi = check_bounds(p_min, p_max)
    if tol is None:
        return default_tolerance(lo, hi)
    return check_tolerance(tol, lo.shape[0])


def plot_isoline_detailed(
        fn: ScalarField,
        p_min: Any,
        p_max: Any,
        min_depth: int = 5,
        max_cells: int = 10_000,
        tol: Sequence[float] | None = None,
        config: IsolineConfig | None = None,
) -> IsolineResult:
    """Extract the zero level of fn inside [p_min, p_max].

    Builds the adaptive quadtree, triangulates its dual and traces the linked
    triangles. When config is given it overrides min_depth, max_cells and tol.
    """
    if config is None:
        config = IsolineConfig(min_depth=min_depth, max_cells=max_cells, tol=tol)

    lo, hi = check_bounds(p_min, p_max)
    dim = int(lo.shape[0])
    config.validate(dim)
    if dim != 2:
        msg = f"Isoline extraction is implemented for 2D boxes only, got dim={dim}"
        raise ConfigurationError(msg)

    tol_arr = resolve_tolerance(lo, hi, config.tol)

    tree = build_tree(dim, fn, lo, hi, config.min_depth, config.max_cells, tol_arr)
    mesh = Triangulator(tree, fn, tol_arr).triangulate()
    curves = CurveTracer(mesh).trace()

    logger.debug(
        "Isoline over %s..%s: %d curves, %d points",
        lo.tolist(), hi.tolist(), len(curves), sum(len(c) for c in curves),
    )
    return IsolineResult(curves=curves, tree=tree, mesh=mesh, tol=tol_arr)


def plot_isoline(
        fn: ScalarField,
        p_min: Any,
        p_max: Any,
        min_depth: int = 5,
        max_cells: int = 10_000,
        tol: Sequence[float] | None = None,
) -> list[list[Point]]:
    """Polylines approximating {p : fn(p) = 0}; closed ones repeat their first point."""
    return plot_isoline_detailed(fn, p_min, p_max, min_depth, max_cells, tol).curves


class IsolineCache:
    """Memoise traced curves by caller key, bounds and config.

    Keeps at most max_entries results and evicts the oldest insertion first.
    Every call returns fresh polyline lists; the points themselves are
    read-only arrays shared with the cache.
    """

    def __init__(self, max_entries: int = 50) -> None:
        if max_entries < 1:
            msg = f"max_entries must be >= 1, got {max_entries}"
            raise ConfigurationError(msg)
        self.max_entries = max_entries
        self._entries: dict[Hashable, list[list[Point]]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, full_key: Hashable) -> bool:
        return full_key in self._entries

    @staticmethod
    def make_key(key: Hashable, p_min: Any, p_max: Any, config: IsolineConfig) -> Hashable:
        lo, hi = check_bounds(p_min, p_max)
        return key, tuple(lo.tolist()), tuple(hi.tolist()), config

    def get_or_compute(
            self,
            key: Hashable,
            fn: ScalarField,
            p_min: Any,
            p_max: Any,
            config: IsolineConfig | None = None,
    ) -> list[list[Point]]:
        config = config or IsolineConfig()
        full_key = self.make_key(key, p_min, p_max, config)

        cached = self._entries.get(full_key)
        if cached is not None:
            logger.debug("Isoline cache hit for %r", key)
            return _copy_curves(cached)

        logger.debug("Isoline cache miss for %r", key)
        curves = plot_isoline_detailed(fn, p_min, p_max, config=config).curves
        self._entries[full_key] = curves

        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug("Evicted isoline cache entry %r", oldest[0])

        return _copy_curves(curves)

    def clear(self) -> None:
        self._entries.clear()


def _copy_curves(curves: list[list[Point]]) -> list[list[Point]]:
    return [list(c) for c in curves]
