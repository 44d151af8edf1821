from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from isoplot.geometry import FieldSample, Point
    from isoplot.triangulation import Triangle, TriangleMesh

logger = logging.getLogger(__name__)


class CurveTracer:
    """Turn the next / prev triangle chains into polylines.

    Each chain is walked once: back to its start (or around to the starting
    triangle for a loop), then forward collecting crossings until an already
    visited triangle or the end. Loops repeat their first point at the end.
    Emission order follows the triangle order of the mesh.
    """

    def __init__(self, mesh: TriangleMesh) -> None:
        self.mesh = mesh

    def trace(self) -> list[list[Point]]:
        curves: list[list[FieldSample]] = []
        closed = 0

        for tri in self.mesh:
            if tri.visited or tri.next is None:
                continue
            curve, is_loop = self._march_triangle(tri)
            curves.append(curve)
            closed += is_loop

        logger.debug("Traced %d curves (%d closed)", len(curves), closed)
        return [[sample.pos for sample in curve] for curve in curves]

    def _chain_start(self, tri: Triangle) -> tuple[Triangle, bool]:
        start = tri
        seen = {tri.index}
        while True:
            prev = self.mesh.prev_of(tri)
            if prev is None:
                return tri, False
            if prev is start:
                return start, True
            if prev.index in seen:
                # prev pointers entered a cycle that excludes start
                return start, False
            seen.add(prev.index)
            tri = prev

    def _march_triangle(self, tri: Triangle) -> tuple[list[FieldSample], bool]:
        current, is_loop = self._chain_start(tri)
        if current.visited:
            current, is_loop = tri, False

        curve: list[FieldSample] = []
        while current is not None and not current.visited:
            if current.next_bisect_point is not None:
                curve.append(current.next_bisect_point)
            current.visited = True
            current = self.mesh.next_of(current)

        if is_loop and curve:
            curve.append(curve[0])
        return curve, is_loop and bool(curve)
