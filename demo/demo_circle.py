from __future__ import annotations

import logging

from isoplot.fields import CircleField
from isoplot.logging_config import setup_logging
from isoplot.plotter import plot_isoline
from isoplot.viz.plot2d import IsolinePlotter2D

# ============================================================
# TOP-LEVEL PARAMETERS (extract everything tweakable here)
# ============================================================

# Field
CENTER = (0.0, 0.0)
RADIUS = 1.0

# Search box
P_MIN = (-3.0, -3.0)
P_MAX = (3.0, 3.0)

# Refinement
MIN_DEPTH = 3
MAX_CELLS = 1000

# Plot
XLIM = (-3, 3)
YLIM = (-3, 3)
SHOW_EXACT = True


def main() -> None:
    setup_logging(logging.DEBUG)
    log = logging.getLogger("isoplot.demo")

    field = CircleField(center=CENTER, radius=RADIUS)
    curves = plot_isoline(field, P_MIN, P_MAX, min_depth=MIN_DEPTH, max_cells=MAX_CELLS)

    log.info("Found %d curves", len(curves))
    for curve in curves:
        log.info("Curve with %d points", len(curve))
        for p in curve[:5]:
            log.info("  (%.3f, %.3f)", p[0], p[1])
        if len(curve) > 5:
            log.info("  ...")

    plotter = IsolinePlotter2D(title="x^2 + y^2 - 1 = 0")
    if SHOW_EXACT:
        plotter.draw_drawable(field)
    plotter.draw_curves(curves)
    plotter.show(xlim=XLIM, ylim=YLIM)


if __name__ == "__main__":
    main()
