from __future__ import annotations

import logging

from isoplot.fields import CircleField
from isoplot.logging_config import setup_logging
from isoplot.plotter import plot_isoline_detailed
from isoplot.viz.plot2d import IsolinePlotter2D

# ============================================================
# TOP-LEVEL PARAMETERS
# ============================================================

CENTER = (0.3, -0.2)
RADIUS = 1.3

P_MIN = (-2.0, -2.0)
P_MAX = (2.0, 2.0)

MIN_DEPTH = 2
MAX_CELLS = 600
TOL = (0.01, 0.01)

LINKED_ONLY = True
# leaf under this point is outlined
INSPECT_POINT = (1.2, 0.6)
XLIM = (-2, 2)
YLIM = (-2, 2)


def main() -> None:
    setup_logging(logging.DEBUG)

    field = CircleField(center=CENTER, radius=RADIUS)
    result = plot_isoline_detailed(field, P_MIN, P_MAX, min_depth=MIN_DEPTH, max_cells=MAX_CELLS, tol=TOL)

    plotter = IsolinePlotter2D(title="Quadtree, dual triangles and traced curve")
    plotter.draw_cells(result.tree)
    plotter.draw_triangles(result.mesh, linked_only=LINKED_ONLY)
    plotter.draw_curves(result.curves, color="tab:blue", linewidth=2.0)
    leaf = plotter.draw_leaf_at(result.tree, INSPECT_POINT)
    if leaf is not None:
        plotter.draw_point(leaf.p_min + leaf.span / 2.0, label=f"depth {leaf.depth}")
    plotter.show(xlim=XLIM, ylim=YLIM)


if __name__ == "__main__":
    main()
