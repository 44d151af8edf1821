from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator

import numpy as np

from isoplot.errors import ConfigurationError
from isoplot.geometry import FieldSample, midpoint
from isoplot.math_utils import quantize
from isoplot.roots import bisect_zero, edge_dual

if TYPE_CHECKING:
    from isoplot.protocols import ScalarField
    from isoplot.quadtree.cell import Cell, CellTree

logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class Triangle:
    """Triangle of the dual mesh, stored in a TriangleMesh arena.

    next / prev are arena indices forming disjoint paths and cycles along the
    zero level; next_bisect_point is the crossing on the edge leading to next.
    """

    index: int
    vertices: tuple[FieldSample, FieldSample, FieldSample]
    next: int | None = None
    prev: int | None = None
    next_bisect_point: FieldSample | None = None
    visited: bool = False


class TriangleMesh:
    """Arena owning all triangles produced by one triangulation."""

    def __init__(self) -> None:
        self.triangles: list[Triangle] = []

    def __len__(self) -> int:
        return len(self.triangles)

    def __iter__(self) -> Iterator[Triangle]:
        return iter(self.triangles)

    def __getitem__(self, index: int) -> Triangle:
        return self.triangles[index]

    def add(self, a: FieldSample, b: FieldSample, c: FieldSample) -> Triangle:
        tri = Triangle(index=len(self.triangles), vertices=(a, b, c))
        self.triangles.append(tri)
        return tri

    def link(self, src: Triangle, dst: Triangle, crossing: FieldSample) -> None:
        src.next_bisect_point = crossing
        src.next = dst.index
        dst.prev = src.index

    def next_of(self, tri: Triangle) -> Triangle | None:
        return None if tri.next is None else self.triangles[tri.next]

    def prev_of(self, tri: Triangle) -> Triangle | None:
        return None if tri.prev is None else self.triangles[tri.prev]

    @property
    def linked_count(self) -> int:
        return sum(1 for t in self.triangles if t.next is not None)


class Triangulator:
    """Crack-free dual triangulation of a 2D quadtree.

    Every pair of adjacent leaves is bridged by a quad made of the two face
    duals, the shared edge endpoints (taken from the finer leaf) and the edge
    dual, split into four triangles around the edge dual. Triangles whose
    common edge crosses the zero level are chained via next / prev.

    Outer edges of a fan are shared with a fan built from a different bridge.
    The first triangle to reach such an edge parks itself in hanging_next
    under an integer key of the edge midpoint; the second one links and
    clears the entry. The key is the midpoint quantized to EDGE_KEY_BITS
    binary steps of the root box extent per axis.
    """

    EDGE_KEY_BITS: int = 40

    def __init__(self, tree: CellTree, fn: ScalarField, tol: Any) -> None:
        if tree.dim != 2:
            msg = f"Triangulation requires a 2D tree, got dim={tree.dim}"
            raise ConfigurationError(msg)
        self.tree = tree
        self.fn = fn
        self.tol = np.asarray(tol, dtype=np.float64)
        self.mesh = TriangleMesh()
        self.hanging_next: dict[tuple[int, ...], int] = {}
        self._face_duals: dict[int, FieldSample] = {}
        self._origin = tree.root.p_min
        self._extent = tree.root.span

    def triangulate(self) -> TriangleMesh:
        self._triangulate_inside(self.tree.root)

        if self.hanging_next:
            logger.debug("Discarding %d unmatched hanging edges", len(self.hanging_next))
            self.hanging_next.clear()

        logger.debug(
            "Triangulated %d triangles, %d linked",
            len(self.mesh), self.mesh.linked_count,
        )
        return self.mesh

    def _triangulate_inside(self, cell: Cell) -> None:
        if cell.is_leaf:
            return

        children = self.tree.children(cell)
        for child in children:
            self._triangulate_inside(child)

        self._bridge(children[0], children[1], axis=0)
        self._bridge(children[2], children[3], axis=0)
        self._bridge(children[0], children[2], axis=1)
        self._bridge(children[1], children[3], axis=1)

    def _bridge(self, a: Cell, b: Cell, axis: int) -> None:
        """Bridge a (min side) and b (max side) across their shared face."""
        tree = self.tree
        m = 1 << axis
        near = [i for i in range(tree.branching_factor) if not i & m]

        if a.children and b.children:
            for i in near:
                self._bridge(tree.child(a, i | m), tree.child(b, i), axis)
        elif a.children:
            for i in near:
                self._bridge(tree.child(a, i | m), b, axis)
        elif b.children:
            for i in near:
                self._bridge(a, tree.child(b, i), axis)
        else:
            self._bridge_leaves(a, b, axis)

    def _bridge_leaves(self, a: Cell, b: Cell, axis: int) -> None:
        face_a = self._face_dual(a)
        face_b = self._face_dual(b)

        # the finer leaf owns the shared edge
        if a.depth < b.depth:
            lo, hi = b.face_vertices(axis, 0)
        else:
            lo, hi = a.face_vertices(axis, 1)

        # same winding for both axes
        first, second = (hi, lo) if axis == 0 else (lo, hi)

        center = edge_dual(first, second, self.fn)
        self._add_four_triangles(first, face_b, second, face_a, center)

    def _face_dual(self, cell: Cell) -> FieldSample:
        dual = self._face_duals.get(cell.index)
        if dual is None:
            dual = midpoint(cell.vertices[0], cell.vertices[-1], self.fn)
            self._face_duals[cell.index] = dual
        return dual

    def _add_four_triangles(
            self,
            a: FieldSample,
            b: FieldSample,
            c: FieldSample,
            d: FieldSample,
            center: FieldSample,
    ) -> None:
        mesh = self.mesh
        fan = (
            mesh.add(a, b, center),
            mesh.add(b, c, center),
            mesh.add(c, d, center),
            mesh.add(d, a, center),
        )
        for i in range(4):
            self._next_sandwich_triangles(fan[i], fan[(i + 1) % 4], fan[(i + 2) % 4])

    def _set_next(self, tri1: Triangle, tri2: Triangle, vpos: FieldSample, vneg: FieldSample) -> None:
        if not (vpos.val > 0.0 and vneg.val <= 0.0):
            return

        crossing, is_zero = bisect_zero(vpos, vneg, self.fn, self.tol)
        if not is_zero:
            return

        self.mesh.link(tri1, tri2, crossing)

    def _next_sandwich_triangles(self, a: Triangle, b: Triangle, c: Triangle) -> None:
        """Link b to its fan neighbours a / c, or park it on its outer edge."""
        x, y, center = b.vertices

        if center.val > 0.0 and y.val <= 0.0:
            self._set_next(b, c, center, y)

        if x.val > 0.0 and center.val <= 0.0:
            self._set_next(b, a, x, center)

        if y.val > 0.0 and x.val <= 0.0:
            other = self._pop_hanging(x, y, b)
            if other is not None:
                self._set_next(b, other, y, x)
        elif y.val <= 0.0 and x.val > 0.0:
            other = self._pop_hanging(x, y, b)
            if other is not None:
                self._set_next(other, b, x, y)

    def _pop_hanging(self, x: FieldSample, y: FieldSample, tri: Triangle) -> Triangle | None:
        key = self.edge_key(x, y)
        index = self.hanging_next.pop(key, None)
        if index is None:
            self.hanging_next[key] = tri.index
            return None
        return self.mesh[index]

    def edge_key(self, x: FieldSample, y: FieldSample) -> tuple[int, ...]:
        mid = (x.pos + y.pos) / 2.0
        return quantize(mid, self._origin, self._extent, self.EDGE_KEY_BITS)


def triangulate(tree: CellTree, fn: ScalarField, tol: Any) -> TriangleMesh:
    return Triangulator(tree, fn, tol).triangulate()
