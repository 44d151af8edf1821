from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Sequence

import matplotlib as mpl

# IMPORTANT: set backend before importing pyplot
# - If running inside PyCharm scientific mode, their custom backend can break.
# - Prefer a stable GUI backend if available; fallback to Agg.
_BACKEND = os.environ.get("ISOPLOT_MPL_BACKEND", "").strip()
if _BACKEND:
    mpl.use(_BACKEND, force=True)
else:
    for candidate in ("TkAgg", "QtAgg", "Agg"):
        # noinspection PyBroadException
        try:
            mpl.use(candidate, force=True)
            break
        except Exception:  # pragma: no cover  # noqa: BLE001, S112
            continue

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.collections import LineCollection, PolyCollection  # noqa: E402
from matplotlib.patches import Rectangle  # noqa: E402

if TYPE_CHECKING:
    from isoplot.geometry import Point
    from isoplot.protocols import Drawable2D
    from isoplot.quadtree.cell import Cell, CellTree
    from isoplot.triangulation import TriangleMesh


class IsolinePlotter2D:
    """Matplotlib preview of traced isolines and the structures behind them."""

    def __init__(self, title: str = "Isoplot - implicit curves") -> None:
        """Initialize the plotter."""
        fig, ax = plt.subplots(figsize=(8, 8))
        self.fig = fig
        self.ax = ax
        ax.set_aspect("equal", "box")
        ax.set_xlabel("x")
        ax.set_ylabel("y")
        ax.set_title(title)

    def draw_curves(
            self,
            curves: Sequence[Sequence[Point]],
            color: Any = None,
            linewidth: float = 1.5,
    ) -> int:
        """Draw polylines; those with fewer than two points are skipped.

        Returns the number of curves drawn.
        """
        drawn = 0
        for curve in curves:
            if len(curve) < 2:
                continue
            pts = np.stack(curve)
            self.ax.plot(pts[:, 0], pts[:, 1], color=color, linewidth=linewidth)
            drawn += 1
        return drawn

    def draw_cells(self, tree: CellTree, linewidth: float = 0.3) -> None:
        """Outline every quadtree leaf."""
        segments = []
        for cell in tree.leaves():
            x0, y0 = cell.p_min
            x1, y1 = cell.p_max
            segments.append([(x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0)])
        self.ax.add_collection(LineCollection(segments, colors="0.6", linewidths=linewidth))

    def draw_leaf_at(self, tree: CellTree, p: np.ndarray, color: Any = "tab:red") -> Cell | None:
        """Highlight the leaf containing p; returns it, or None outside the tree."""
        leaf = tree.find_leaf(np.asarray(p, dtype=np.float64))
        if leaf is None:
            return None
        (x0, y0), (x1, y1) = leaf.p_min, leaf.p_max
        self.ax.add_patch(Rectangle((x0, y0), x1 - x0, y1 - y0, fill=False, edgecolor=color, linewidth=1.5))
        return leaf

    def draw_triangles(self, mesh: TriangleMesh, linked_only: bool = False, alpha: float = 0.15) -> None:
        """Fill the dual triangles, optionally only those on a curve chain."""
        polys = [
            [tuple(v.pos) for v in tri.vertices]
            for tri in mesh
            if not linked_only or tri.next is not None or tri.prev is not None
        ]
        self.ax.add_collection(
            PolyCollection(polys, facecolors="tab:orange", edgecolors="tab:orange", alpha=alpha),
        )

    def draw_drawable(self, drawable: Drawable2D, linewidth: float = 1.0) -> None:
        pts = np.asarray(drawable.polyline())
        self.ax.plot(pts[:, 0], pts[:, 1], linewidth=linewidth, linestyle="--")

    def draw_point(self, p: np.ndarray, label: str | None = None) -> None:
        self.ax.scatter([p[0]], [p[1]], s=40)
        if label:
            self.ax.text(float(p[0] + 0.05), float(p[1] + 0.05), label)

    def show(self, xlim: tuple[float, float], ylim: tuple[float, float]) -> None:
        self.ax.set_xlim(*xlim)
        self.ax.set_ylim(*ylim)
        plt.tight_layout()
        plt.show()

    def save(self, path: str, xlim: tuple[float, float], ylim: tuple[float, float], dpi: int = 150) -> None:
        """Save figure to disk (useful if running headless with Agg)."""
        self.ax.set_xlim(*xlim)
        self.ax.set_ylim(*ylim)
        self.fig.tight_layout()
        self.fig.savefig(path, dpi=dpi)

    def close(self) -> None:
        plt.close(self.fig)
