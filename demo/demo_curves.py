from __future__ import annotations

import logging
import math

from isoplot.config import IsolineConfig
from isoplot.fields import CircleField, UnionField, nan_safe
from isoplot.logging_config import setup_logging
from isoplot.plotter import IsolineCache
from isoplot.viz.plot2d import IsolinePlotter2D

# ============================================================
# TOP-LEVEL PARAMETERS
# ============================================================

P_MIN = (-4.0, -4.0)
P_MAX = (4.0, 4.0)

# Resolution preset, as a plotting host would request it
POINT_COUNT = 1000
PERFORMANCE_MODE = False

# Plot
XLIM = (-4, 4)
YLIM = (-4, 4)
OUTPUT = ""  # e.g. "curves.png" to save instead of showing


def _folium(p) -> float:
    x, y = p[0], p[1]
    return x ** 3 + y ** 3 - 3.0 * x * y


def _log_ring(p) -> float:
    # undefined outside the disc of radius 3
    return math.log(1.0 - (p[0] * p[0] + p[1] * p[1]) / 9.0) + 0.5


FIELDS = {
    "circles": UnionField((
        CircleField(center=(-1.5, 0.0), radius=1.0),
        CircleField(center=(1.5, 0.5), radius=1.2),
    )),
    "folium": _folium,
    "log_ring": nan_safe(_log_ring),
}


def main() -> None:
    setup_logging(logging.DEBUG)

    config = IsolineConfig.for_point_count(POINT_COUNT, performance_mode=PERFORMANCE_MODE)
    cache = IsolineCache()

    plotter = IsolinePlotter2D(title="Implicit curves")
    for name, field in FIELDS.items():
        curves = cache.get_or_compute(name, field, P_MIN, P_MAX, config)
        plotter.draw_curves(curves)

    if OUTPUT:
        plotter.save(OUTPUT, xlim=XLIM, ylim=YLIM)
    else:
        plotter.show(xlim=XLIM, ylim=YLIM)


if __name__ == "__main__":
    main()
